from __future__ import annotations

from dataclasses import dataclass, field
import math

from facetplot.interval import Interval


@dataclass
class Partitioner:
    """Turns a continuous value into one of `partitions` equal-width bin labels.

    Values below the learned range fall into "(-inf, min)", values at or above
    its max into "[max, inf)".
    """

    partitions: int
    range: Interval = field(default_factory=Interval.unset)

    def __post_init__(self) -> None:
        if self.partitions <= 0:
            raise ValueError("partitions must be > 0")

    def learn(self, *values: float) -> None:
        self.range.update(*values)

    def partition(self, x: float) -> str:
        lo, hi = self.range.min, self.range.max
        if math.isnan(x) or self.range.is_unset():
            return "NaN"
        if x < lo:
            return f"(-∞, {lo:g})"
        if x >= hi:
            return f"[{hi:g}, ∞)"
        w = (hi - lo) / self.partitions
        k = math.floor((x - lo) / w)
        return f"[{lo + k * w:g}, {lo + (k + 1) * w:g})"

    def labels(self) -> list[str]:
        """Bin labels in ascending order, without the two open-ended bins."""
        if self.range.is_unset() or self.range.is_degenerate():
            return []
        lo = self.range.min
        w = (self.range.max - lo) / self.partitions
        return [f"[{lo + k * w:g}, {lo + (k + 1) * w:g})" for k in range(self.partitions)]
