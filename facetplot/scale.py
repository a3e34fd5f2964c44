"""Scales: the generalised axes of a faceted plot.

A scale tracks several intervals which must not be confused:

  data   the range covered by the values routed to this scale, learned
         anew on every render.
  limit  the processing interval: data expanded by autoscaling or pinned
         by the user. Ticks are generated for the limit.
  range  the interval actually drawn. It equals the limit unless an edge
         was fixed with set_range, which allows zooming into a plot or
         letting a size scale start at zero.

Example for a position scale with 5% relative expansion:

    data  == [10, 30]  --autoscale-->  limit == [9, 31]  ticks 10, 20, 30
    set_range(15, 45)  -->  range == [15, 45], only ticks 20 and 30 drawn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
import math
from typing import Callable

from facetplot.errors import ScaleConfigError
from facetplot.interval import Interval
from facetplot.palette import GRAY50, RGBA, ColorMap
from facetplot.ticks import DiscreteTicker, Tick, Ticker, TimeTicker
from facetplot.trans import IDENTITY_TRANS, LOG10_TRANS, Transformation

UNIT = Interval(0.0, 1.0)


class Aes(IntEnum):
    X = 0
    Y = 1
    ALPHA = 2
    COLOR = 3
    FILL = 4
    SHAPE = 5
    SIZE = 6
    STROKE = 7

    @property
    def label(self) -> str:
        return f"{self.name.capitalize()}-Scale"


POSITIONAL = (Aes.X, Aes.Y)
GUIDE_AES = (Aes.ALPHA, Aes.COLOR, Aes.FILL, Aes.SHAPE, Aes.SIZE, Aes.STROKE)
COLOR_AES = (Aes.COLOR, Aes.FILL)
DISCRETE_ONLY_AES = (Aes.SHAPE, Aes.STROKE)


class ScaleType(Enum):
    LINEAR = "linear"
    DISCRETE = "discrete"
    TIME = "time"
    LOGARITHMIC = "log"


@dataclass
class Expand:
    absolute: float = 0.0
    relative: float = 0.0


@dataclass
class Autoscaling:
    """Controls how the edges of a scale follow the data.

    A degenerate min_range [f, f] switches autoscaling off and pins the min
    edge to f, a non-degenerate one [u, v] lets the edge float between u and
    v. A NaN bound works like -Inf for u and +Inf for v. Same for max_range.
    """

    expand: Expand = field(default_factory=Expand)
    min_range: Interval = field(default_factory=Interval.unset)
    max_range: Interval = field(default_factory=Interval.unset)


@dataclass
class Scale:
    aes: Aes
    title: str = ""
    data: Interval = field(default_factory=Interval.unset)
    limit: Interval = field(default_factory=Interval.unset)
    range: Interval = field(default_factory=Interval.unset)
    fixed_range: Interval = field(default_factory=Interval.unset)
    trans: Transformation = IDENTITY_TRANS
    scale_type: ScaleType = ScaleType.LINEAR
    autoscaling: Autoscaling = field(default_factory=Autoscaling)
    ticker: Ticker | None = None
    values: tuple[str, ...] | None = None
    time_fmt: str = "%Y-%m-%d %H:%M"
    t0: datetime | None = None
    color_map: ColorMap | None = None
    size_map: Callable[[float], float] | None = None

    def __post_init__(self) -> None:
        if self.aes in DISCRETE_ONLY_AES:
            self.scale_type = ScaleType.DISCRETE

    def set_scale_type(self, scale_type: ScaleType) -> None:
        if self.aes in DISCRETE_ONLY_AES and scale_type is not ScaleType.DISCRETE:
            raise ScaleConfigError(f"{self.aes.label} must be discrete, got {scale_type.value}")
        self.scale_type = scale_type
        if scale_type is ScaleType.LOGARITHMIC:
            self.trans = LOG10_TRANS
        elif scale_type is ScaleType.DISCRETE and self.ticker is None:
            self.ticker = DiscreteTicker(self.values)
        elif scale_type is ScaleType.TIME and self.ticker is None and self.t0 is not None:
            self.ticker = TimeTicker(self.t0, self.time_fmt)

    def reset(self) -> None:
        """Forget everything learned in a previous render."""
        self.data = Interval.unset()
        self.limit = Interval.unset()
        self.range = Interval.unset()

    def update_data(self, interval: Interval) -> None:
        self.data.update(interval.min, interval.max)

    def has_data(self) -> bool:
        return not self.data.is_unset()

    def fix_min(self, x: float) -> None:
        """Pin the min edge to x; NaN restores autoscaling."""
        self.autoscaling.min_range = Interval(x, x)

    def fix_max(self, x: float) -> None:
        self.autoscaling.max_range = Interval(x, x)

    def set_range(self, vmin: float = math.nan, vmax: float = math.nan) -> None:
        self.fixed_range = Interval(vmin, vmax)

    def autoscale(self) -> None:
        """Compute limit from data. Must run once per render pass."""
        if not self.has_data():
            self.limit = Interval.unset()
            return

        auto = self.autoscaling
        if auto.min_range.min == auto.min_range.max:
            self.limit.min = auto.min_range.min
        else:
            self.limit.min = self._expanded_edge(lower=True)
            if auto.min_range.min > self.limit.min:
                self.limit.min = auto.min_range.min
            if auto.min_range.max < self.limit.min:
                self.limit.min = auto.min_range.max

        if auto.max_range.min == auto.max_range.max:
            self.limit.max = auto.max_range.min
        else:
            self.limit.max = self._expanded_edge(lower=False)
            if auto.max_range.min > self.limit.max:
                self.limit.max = auto.max_range.min
            if auto.max_range.max < self.limit.max:
                self.limit.max = auto.max_range.max

    def _expanded_edge(self, *, lower: bool) -> float:
        expand = self.autoscaling.expand
        relative = expand.relative
        if self.scale_type is ScaleType.DISCRETE:
            relative = 0.0
        if lower:
            if relative == 0:
                return self.data.min - expand.absolute
            return float(self.trans.inverse(self.data, UNIT, -relative)) - expand.absolute
        if relative == 0:
            return self.data.max + expand.absolute
        return float(self.trans.inverse(self.data, UNIT, 1 + relative)) + expand.absolute

    def fill_range(self) -> None:
        self.range = Interval(self.fixed_range.min, self.fixed_range.max)
        if math.isnan(self.range.min):
            self.range.min = self.limit.min
        if math.isnan(self.range.max):
            self.range.max = self.limit.max

    def map(self, x: float) -> float:
        """Map limit onto [0, 1]; NaN if the limit is unset or zero width."""
        if self.limit.is_degenerate():
            return math.nan
        return float(self.trans.trans(self.limit, UNIT, x))

    def in_range(self, x: float) -> bool:
        if math.isnan(x) or self.limit.is_unset():
            return False
        return self.limit.contains(x)

    def map_color(self, x: float) -> RGBA:
        """Color for x; values outside the limit are drawn GRAY50 like ggplot2."""
        if self.aes not in COLOR_AES:
            raise ScaleConfigError(f"{self.aes.label} has no color map")
        if self.color_map is None:
            raise ScaleConfigError(f"{self.aes.label} has no color map configured")
        if not self.in_range(x):
            return GRAY50
        t = self._position(x)
        if math.isnan(t):
            return GRAY50
        cm = self.color_map
        return cm.at(cm.min + min(1.0, max(0.0, t)) * (cm.max - cm.min))

    def map_size(self, x: float) -> float:
        """Display length for x; 0 means "do not draw"."""
        if self.aes is not Aes.SIZE:
            raise ScaleConfigError(f"{self.aes.label} is not a size scale")
        if self.size_map is None:
            raise ScaleConfigError("size scale has no size map, prepare the plot first")
        if not self.in_range(x):
            return 0.0
        size = float(self.size_map(x))
        if math.isnan(size) or size < 0:
            return 0.0
        return size

    def map_alpha(self, x: float) -> float:
        """Opacity in [0, 1] for x or NaN if x cannot be mapped."""
        alpha = self._position(x)
        if alpha < 0 or alpha > 1:
            return math.nan
        return alpha

    def _position(self, x: float) -> float:
        # A constant aesthetic sits in the middle of its map.
        if self.limit.min == self.limit.max and x == self.limit.min:
            return 0.5
        return self.map(x)

    def ticks(self) -> list[Tick]:
        ticker = self.ticker if self.ticker is not None else self.trans.ticker
        return ticker.ticks(self.limit.min, self.limit.max)

    def __str__(self) -> str:
        return (
            f"Data={self.data} Limit={self.limit} Range={self.range} "
            f"{self.scale_type.value} {self.trans.name} {self.title!r}"
        )
