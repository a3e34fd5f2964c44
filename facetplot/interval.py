from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass
class Interval:
    """A closed real interval [min, max].

    Both edges may be NaN which means "not determined yet". A zero width
    interval [a, a] is a valid, pinned value and differs from the unset one.
    """

    min: float = math.nan
    max: float = math.nan

    @classmethod
    def unset(cls) -> "Interval":
        return cls(math.nan, math.nan)

    @classmethod
    def infinite(cls) -> "Interval":
        return cls(-math.inf, math.inf)

    def copy(self) -> "Interval":
        return Interval(self.min, self.max)

    def update(self, *values: float) -> None:
        """Expand the interval to include each non-NaN value."""
        for v in values:
            v = float(v)
            if math.isnan(v):
                continue
            # NaN edges compare false, so the first value always replaces them.
            if not self.min < v:
                self.min = v
            if not self.max > v:
                self.max = v

    def update_interval(self, other: "Interval") -> None:
        self.update(other.min, other.max)

    def equal(self, other: "Interval") -> bool:
        return _same(self.min, other.min) and _same(self.max, other.max)

    def is_unset(self) -> bool:
        return math.isnan(self.min) or math.isnan(self.max)

    def is_degenerate(self) -> bool:
        return self.is_unset() or self.min == self.max

    @property
    def span(self) -> float:
        return self.max - self.min

    def contains(self, x: float) -> bool:
        lo, hi = (self.min, self.max) if self.min <= self.max else (self.max, self.min)
        return lo <= x <= hi

    def degenerate(self) -> bool:
        """Repair the interval so it is finite and non-empty.

        NaN and Inf edges become -1 (min) and +1 (max), collapsed intervals
        [a, a] are widened around a and reversed edges are swapped. Returns
        whether anything was changed.
        """
        modified = False
        if math.isnan(self.min) or math.isinf(self.min):
            self.min = -1.0
            modified = True
        if math.isnan(self.max) or math.isinf(self.max):
            self.max = 1.0
            modified = True

        if self.min == self.max:
            if self.min == 0:
                self.min, self.max = -1.0, 1.0
            else:
                d = abs(self.min) / 10
                self.min -= d
                self.max += d
            modified = True

        if self.min > self.max:
            self.min, self.max = self.max, self.min
            modified = True

        return modified

    def __str__(self) -> str:
        return f"[{self.min:.4g}:{self.max:.4g}]"


def _same(a: float, b: float) -> bool:
    if math.isnan(a):
        return math.isnan(b)
    return a == b
