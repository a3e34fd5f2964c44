"""Geoms: the geometrical representation of data inside a panel.

Each geom has required position data (x/y or x/y/u/v columns) and optional
aesthetics, per-element callables returning the value to map onto alpha,
color, fill, size, shape or stroke. A geom reports the data ranges it needs
mapped and draws itself through the panel's scale mapping functions.

Elements that cannot be drawn (NaN coordinates, values outside an aesthetic
scale) are skipped silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import math
from typing import TYPE_CHECKING, Any, Callable, Protocol, Sequence

import numpy as np

from facetplot.adapters import as_float_array, check_lengths
from facetplot.errors import PlotConfigError, PlotDataError
from facetplot.interval import Interval
from facetplot.palette import RGBA, dashes, shape, with_alpha
from facetplot.scale import Aes
from facetplot.style import GlyphStyle, LineStyle, TextStyle

if TYPE_CHECKING:
    from facetplot.canvas import Point as CanvasPoint
    from facetplot.canvas import Rect
    from facetplot.panel import Panel

DataRanges = list[Interval]

Aesthetic = Callable[[int], float]
# None marks a missing value; the element is not drawn.
DiscreteAesthetic = Callable[[int], int | None]

BAR_POSITIONS = ("stack", "dodge", "fill")

_RECT_BORDER: RGBA = (0, 0, 16, 255)


def new_data_ranges() -> DataRanges:
    return [Interval.unset() for _ in Aes]


class Geom(Protocol):
    def data_ranges(self) -> DataRanges:
        ...

    def draw(self, panel: Panel) -> None:
        ...


@dataclass(frozen=True)
class Aesthetics:
    """Optional per-element mapping functions for the non-positional aesthetics."""

    alpha: Aesthetic | None = None
    color: Aesthetic | None = None
    fill: Aesthetic | None = None
    size: Aesthetic | None = None
    shape: DiscreteAesthetic | None = None
    stroke: DiscreteAesthetic | None = None

    @classmethod
    def from_values(cls, **channels: Sequence[float] | np.ndarray) -> Aesthetics:
        """Build aesthetics that look up element i in the given sequences."""
        known = {f.name for f in fields(cls)}
        funcs: dict[str, Callable[[int], Any]] = {}
        for name, values in channels.items():
            if name not in known:
                raise PlotConfigError(f"unknown aesthetic: {name}")
            arr = as_float_array(values, label=name)
            if name in ("shape", "stroke"):
                funcs[name] = _int_lookup(arr)
            else:
                funcs[name] = _float_lookup(arr)
        return cls(**funcs)

    def reindexed(self, index: Callable[[int], int]) -> Aesthetics:
        """Aesthetics whose functions evaluate the originals at index(i)."""
        changes = {}
        for f in fields(self):
            func = getattr(self, f.name)
            if func is not None:
                changes[f.name] = _compose(func, index)
        return replace(self, **changes)

    def restricted(self, *names: str) -> Aesthetics:
        """Keep only the named channels, e.g. a line has no fill."""
        return Aesthetics(**{name: getattr(self, name) for name in names})

    def update_ranges(self, dr: DataRanges, n: int) -> None:
        for aes, func in (
            (Aes.ALPHA, self.alpha),
            (Aes.COLOR, self.color),
            (Aes.FILL, self.fill),
            (Aes.SHAPE, self.shape),
            (Aes.SIZE, self.size),
            (Aes.STROKE, self.stroke),
        ):
            if func is None:
                continue
            for i in range(n):
                value = func(i)
                if value is not None:
                    dr[aes].update(float(value))


def _compose(func: Callable[[int], Any], index: Callable[[int], int]) -> Callable[[int], Any]:
    return lambda i: func(index(i))


def _float_lookup(arr: np.ndarray) -> Aesthetic:
    return lambda i: float(arr[i])


def _int_lookup(arr: np.ndarray) -> DiscreteAesthetic:
    def lookup(i: int) -> int | None:
        v = arr[i]
        return int(v) if math.isfinite(v) else None

    return lookup


def determine_color(
    base: RGBA | None,
    panel: Panel,
    i: int,
    color: Aesthetic | None,
    alpha: Aesthetic | None,
    *,
    fill: bool = False,
) -> RGBA | None:
    """Color of element i or None if it must not be drawn."""
    col = base
    if color is not None:
        col = panel.map_fill(color(i)) if fill else panel.map_color(color(i))
    if col is None:
        return None
    if alpha is not None:
        a = panel.map_alpha(alpha(i))
        if math.isnan(a):
            return None
        col = with_alpha(col, a)
    return col


def _coords(label: str, values: Any) -> np.ndarray:
    return as_float_array(values, label=label)


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def clip_segment(p: CanvasPoint, q: CanvasPoint, rect: Rect) -> tuple[CanvasPoint, CanvasPoint] | None:
    """Liang-Barsky clipping of the segment p-q to rect."""
    (x0, y0), (x1, y1) = p, q
    if not _finite(x0, y0, x1, y1):
        return None
    dx, dy = x1 - x0, y1 - y0
    t0, t1 = 0.0, 1.0
    for edge_p, edge_q in (
        (-dx, x0 - rect.x0),
        (dx, rect.x1 - x0),
        (-dy, y0 - rect.y0),
        (dy, rect.y1 - y0),
    ):
        if edge_p == 0:
            if edge_q < 0:
                return None
            continue
        t = edge_q / edge_p
        if edge_p < 0:
            t0 = max(t0, t)
        else:
            t1 = min(t1, t)
        if t0 > t1:
            return None
    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


def _clip_rect(a: CanvasPoint, b: CanvasPoint, rect: Rect) -> list[CanvasPoint] | None:
    xa, xb = sorted((a[0], b[0]))
    ya, yb = sorted((a[1], b[1]))
    xa, xb = max(xa, rect.x0), min(xb, rect.x1)
    ya, yb = max(ya, rect.y0), min(yb, rect.y1)
    if xa >= xb or ya >= yb:
        return None
    return [(xa, ya), (xb, ya), (xb, yb), (xa, yb)]


# ----------------------------------------------------------------------------
# Point


@dataclass
class Point:
    """Glyphs at (x, y)."""

    x: Any
    y: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    style: GlyphStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        check_lengths(x=self.x, y=self.y)

    def __len__(self) -> int:
        return int(self.x.shape[0])

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.X].update(*self.x.tolist())
        dr[Aes.Y].update(*self.y.tolist())
        self.aes.restricted("alpha", "color", "shape", "size").update_ranges(dr, len(self))
        return dr

    def draw(self, panel: Panel) -> None:
        defaults = panel.plot.style.geom_default
        base = self.style.color if self.style is not None else defaults.color
        radius = self.style.radius if self.style is not None else defaults.size
        glyph = self.style.shape if self.style is not None else "circle"

        for i in range(len(self)):
            center, ok = panel.map_xy(self.x[i], self.y[i])
            if not ok:
                continue
            col = determine_color(base, panel, i, self.aes.color, self.aes.alpha)
            if col is None:
                continue
            if self.aes.shape is not None:
                k = self.aes.shape(i)
                if k is None:
                    continue
                glyph = shape(k)
            if self.aes.size is not None:
                radius = panel.map_size(self.aes.size(i))
                if radius == 0:
                    continue
            panel.canvas.draw_glyph(center, GlyphStyle(color=col, radius=radius, shape=glyph))


# ----------------------------------------------------------------------------
# Rectangle


@dataclass
class Rectangle:
    """Rectangles spanned by the corners (x, y) and (u, v).

    The border is drawn inside the rectangle.
    """

    x: Any
    y: Any
    u: Any
    v: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    fill: RGBA | None = None
    border: LineStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        self.u = _coords("u", self.u)
        self.v = _coords("v", self.v)
        check_lengths(x=self.x, y=self.y, u=self.u, v=self.v)

    def __len__(self) -> int:
        return int(self.x.shape[0])

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.X].update(*self.x.tolist(), *self.u.tolist())
        dr[Aes.Y].update(*self.y.tolist(), *self.v.tolist())
        self.aes.restricted("alpha", "color", "fill", "size", "stroke").update_ranges(dr, len(self))
        return dr

    def draw(self, panel: Panel) -> None:
        border = self.border
        if self.fill is None and self.aes.fill is None and border is None:
            border = LineStyle(color=_RECT_BORDER, width=2)
        width = border.width if border is not None else 0.0
        line_dashes = border.dashes if border is not None else ()
        border_color = border.color if border is not None else None

        for i in range(len(self)):
            a, ok_a = panel.map_xy(self.x[i], self.y[i])
            b, ok_b = panel.map_xy(self.u[i], self.v[i])
            if not (ok_a and ok_b):
                continue
            corners = _clip_rect(a, b, panel.rect)
            if corners is None:
                continue
            if self.aes.stroke is not None:
                k = self.aes.stroke(i)
                if k is None:
                    continue
                line_dashes = dashes(k)

            fill_col = determine_color(self.fill, panel, i, self.aes.fill, self.aes.alpha, fill=True)
            if fill_col is not None:
                panel.canvas.fill_polygon(corners, fill_col)

            if self.aes.size is not None:
                width = panel.map_size(self.aes.size(i))
            if width <= 0:
                continue
            line_col = determine_color(border_color, panel, i, self.aes.color, self.aes.alpha)
            if line_col is None:
                continue
            w = 0.499 * width
            (xa, ya), _, (xb, yb), _ = corners
            inner = [(xa + w, ya + w), (xb - w, ya + w), (xb - w, yb - w), (xa + w, yb - w), (xa + w, ya + w)]
            panel.canvas.stroke_path(inner, LineStyle(color=line_col, width=width, dashes=line_dashes))


# ----------------------------------------------------------------------------
# Bar


@dataclass
class BarGroups:
    """Positions of bars (or boxes) sharing x values.

    Bars at the same x are drawn side by side when dodged, otherwise they
    overlap and use the full width.
    """

    position: str = "stack"
    group_gap: float = 0.2
    bar_gap: float = 0.0
    same_width: bool = True
    groups: dict[float, list[int]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.group_gap == 0:
            self.group_gap = 0.2

    def record(self, x: float, i: int) -> None:
        self.groups.setdefault(float(x), []).append(i)

    def xs(self) -> list[float]:
        return sorted(self.groups)

    def min_delta(self) -> float:
        """Smallest distance between recorded x values, 1 for a single x."""
        xs = self.xs()
        if not xs:
            return 0.0
        if len(xs) == 1:
            return 1.0
        return min(b - a for a, b in zip(xs, xs[1:], strict=False))

    def max_group_size(self) -> int:
        return max((len(g) for g in self.groups.values()), default=0)

    def width(self, x: float, i: int) -> tuple[float, float]:
        """Centre and half width of bar i recorded at x."""
        min_delta = self.min_delta()
        non_gap = min_delta * (1 - self.group_gap)
        if self.position != "dodge":
            return x, non_gap / 2

        members = self.groups.get(float(x))
        if not members or i not in members:
            raise KeyError(f"no bar {i} recorded at x={x:g}")
        n = self.max_group_size() if self.same_width else len(members)
        halfwidth = non_gap / (2 * n)
        g = members.index(i)
        center = x + (2 * g - len(members) + 1) * halfwidth
        return center, halfwidth - min_delta * self.bar_gap

    def x_range(self) -> tuple[float, float]:
        xs = self.xs()
        if not xs:
            return math.nan, math.nan
        left, right = xs[0], xs[-1]
        c, hw = self.width(left, self.groups[left][0])
        xmin = c - hw
        c, hw = self.width(right, self.groups[right][-1])
        return xmin, c + hw


@dataclass
class Bar:
    """Bars standing on (or hanging from) y=0.

    position is "stack" (default), "dodge" or "fill"; group_gap and bar_gap
    are fractions of the smallest distance between x values.
    """

    x: Any
    y: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    position: str = "stack"
    group_gap: float = 0.0
    bar_gap: float = 0.0
    fill: RGBA | None = None
    border: LineStyle | None = None

    def __post_init__(self) -> None:
        if self.position not in BAR_POSITIONS:
            raise PlotConfigError(f"unknown bar position: {self.position!r}")
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        check_lengths(x=self.x, y=self.y)

    def data_ranges(self) -> DataRanges:
        return self.rects().data_ranges()

    def draw(self, panel: Panel) -> None:
        self.rects().draw(panel)

    def groups(self) -> BarGroups:
        g = BarGroups(self.position, self.group_gap, self.bar_gap, same_width=True)
        for i, x in enumerate(self.x.tolist()):
            if math.isfinite(x):
                g.record(x, i)
        return g

    def rects(self) -> Rectangle:
        if self.position not in BAR_POSITIONS:
            raise PlotConfigError(f"unknown bar position: {self.position!r}")
        n = self.x.shape[0]
        x0, y0 = np.full(n, np.nan), np.full(n, np.nan)
        x1, y1 = np.full(n, np.nan), np.full(n, np.nan)

        g = self.groups()
        for x in g.xs():
            members = g.groups[x]
            if self.position == "dodge":
                for i in members:
                    center, halfwidth = g.width(x, i)
                    x0[i], y0[i], x1[i], y1[i] = center - halfwidth, 0.0, center + halfwidth, self.y[i]
                continue

            neg, pos = 0.0, 0.0
            for i in members:
                center, halfwidth = g.width(x, i)
                y = float(self.y[i])
                if not math.isfinite(y):
                    continue
                if y < 0:
                    lo, hi = neg, neg + y
                    neg += y
                else:
                    lo, hi = pos, pos + y
                    pos += y
                x0[i], y0[i], x1[i], y1[i] = center - halfwidth, lo, center + halfwidth, hi
            if self.position == "fill":
                for i in members:
                    total = -neg if y1[i] < 0 else pos
                    if total != 0:
                        y0[i] /= total
                        y1[i] /= total

        return Rectangle(x0, y0, x1, y1, aes=self.aes, fill=self.fill, border=self.border)


# ----------------------------------------------------------------------------
# Path, Line, Step, Segment


def _line_style(style: LineStyle | None, panel: Panel) -> LineStyle:
    defaults = panel.plot.style.geom_default
    if style is None:
        return LineStyle(color=defaults.color, width=defaults.line_width)
    if style.width == 0:
        return replace(style, width=defaults.line_width)
    return style


def _stroke_segments(
    panel: Panel,
    ends: Callable[[int], tuple[float, float, float, float]],
    n: int,
    aes: Aesthetics,
    style: LineStyle | None,
) -> None:
    base = _line_style(style, panel)
    width, line_dashes = base.width, base.dashes
    for i in range(n):
        x, y, u, v = ends(i)
        p, _ = panel.map_xy(x, y)
        q, _ = panel.map_xy(u, v)
        col = determine_color(base.color, panel, i, aes.color, aes.alpha)
        if col is None:
            continue
        if aes.stroke is not None:
            k = aes.stroke(i)
            if k is None:
                continue
            line_dashes = dashes(k)
        if aes.size is not None:
            width = panel.map_size(aes.size(i))
        if width <= 0:
            continue
        clipped = clip_segment(p, q, panel.rect)
        if clipped is None:
            continue
        panel.canvas.stroke_path(list(clipped), LineStyle(color=col, width=width, dashes=line_dashes))


@dataclass
class Path:
    """Points connected in data order; segment i is styled by its first point."""

    x: Any
    y: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    style: LineStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        check_lengths(x=self.x, y=self.y)

    def __len__(self) -> int:
        return int(self.x.shape[0])

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.X].update(*self.x.tolist())
        dr[Aes.Y].update(*self.y.tolist())
        self.aes.restricted("alpha", "color", "size", "stroke").update_ranges(dr, len(self))
        return dr

    def draw(self, panel: Panel) -> None:
        xs, ys = self.x, self.y

        def ends(i: int) -> tuple[float, float, float, float]:
            return xs[i], ys[i], xs[i + 1], ys[i + 1]

        _stroke_segments(panel, ends, len(self) - 1, self.aes, self.style)


@dataclass
class Line:
    """Points connected in order of their x values."""

    x: Any
    y: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    style: LineStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        check_lengths(x=self.x, y=self.y)

    def data_ranges(self) -> DataRanges:
        return Path(self.x, self.y, aes=self.aes, style=self.style).data_ranges()

    def to_path(self) -> Path:
        order = np.argsort(self.x, kind="stable")
        return Path(self.x[order], self.y[order], aes=self.aes.reindexed(lambda i: int(order[i])), style=self.style)

    def draw(self, panel: Panel) -> None:
        self.to_path().draw(panel)


@dataclass
class Step:
    """Stairstep through the points sorted by x.

    The default steps horizontally then vertically, vertical=True reverses
    that.
    """

    x: Any
    y: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    vertical: bool = False
    style: LineStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        check_lengths(x=self.x, y=self.y)

    def data_ranges(self) -> DataRanges:
        # The corner points lie inside the range of the original points.
        return Path(self.x, self.y, aes=self.aes, style=self.style).data_ranges()

    def to_path(self) -> Path:
        n = self.x.shape[0]
        if n == 0:
            return Path(self.x, self.y, aes=self.aes, style=self.style)
        order = np.argsort(self.x, kind="stable")
        xs, ys = self.x[order], self.y[order]
        px = np.empty(2 * n - 1)
        py = np.empty(2 * n - 1)
        px[0::2], py[0::2] = xs, ys
        if self.vertical:
            px[1::2], py[1::2] = xs[:-1], ys[1:]
        else:
            px[1::2], py[1::2] = xs[1:], ys[:-1]
        return Path(px, py, aes=self.aes.reindexed(lambda i: int(order[i // 2])), style=self.style)

    def draw(self, panel: Panel) -> None:
        self.to_path().draw(panel)


@dataclass
class Segment:
    """Line segments from (x, y) to (u, v)."""

    x: Any
    y: Any
    u: Any
    v: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    style: LineStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        self.u = _coords("u", self.u)
        self.v = _coords("v", self.v)
        check_lengths(x=self.x, y=self.y, u=self.u, v=self.v)

    def __len__(self) -> int:
        return int(self.x.shape[0])

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.X].update(*self.x.tolist(), *self.u.tolist())
        dr[Aes.Y].update(*self.y.tolist(), *self.v.tolist())
        self.aes.restricted("alpha", "color", "size", "stroke").update_ranges(dr, len(self))
        return dr

    def draw(self, panel: Panel) -> None:
        def ends(i: int) -> tuple[float, float, float, float]:
            return self.x[i], self.y[i], self.u[i], self.v[i]

        _stroke_segments(panel, ends, len(self), self.aes, self.style)


@dataclass
class HLine:
    """Horizontal rules across the whole panel at the given y values."""

    y: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    style: LineStyle | None = None

    def __post_init__(self) -> None:
        self.y = _coords("y", self.y)

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.Y].update(*self.y.tolist())
        self.aes.restricted("alpha", "color", "size", "stroke").update_ranges(dr, self.y.shape[0])
        return dr

    def draw(self, panel: Panel) -> None:
        r = panel.x_scale.range
        n = self.y.shape[0]
        Segment(np.full(n, r.min), self.y, np.full(n, r.max), self.y, aes=self.aes, style=self.style).draw(panel)


@dataclass
class VLine:
    """Vertical rules across the whole panel at the given x values."""

    x: Any
    aes: Aesthetics = field(default_factory=Aesthetics)
    style: LineStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.X].update(*self.x.tolist())
        self.aes.restricted("alpha", "color", "size", "stroke").update_ranges(dr, self.x.shape[0])
        return dr

    def draw(self, panel: Panel) -> None:
        r = panel.y_scale.range
        n = self.x.shape[0]
        Segment(self.x, np.full(n, r.min), self.x, np.full(n, r.max), aes=self.aes, style=self.style).draw(panel)


# ----------------------------------------------------------------------------
# Boxplot


@dataclass
class Boxplot:
    """Box and whisker plots from precomputed five-number summaries.

    Drawn as a Rectangle per box (q1 to q3), three Segments per box (median,
    lower and upper whisker) and a Point per outlier.
    """

    x: Any
    min: Any
    q1: Any
    median: Any
    q3: Any
    max: Any
    outliers: Sequence[Sequence[float]] | None = None
    aes: Aesthetics = field(default_factory=Aesthetics)
    position: str = "stack"
    group_gap: float = 0.0
    bar_gap: float = 0.0
    fill: RGBA | None = None
    border: LineStyle | None = None
    point: GlyphStyle | None = None

    def __post_init__(self) -> None:
        for name in ("x", "min", "q1", "median", "q3", "max"):
            setattr(self, name, _coords(name, getattr(self, name)))
        n = check_lengths(x=self.x, min=self.min, q1=self.q1, median=self.median, q3=self.q3, max=self.max)
        if self.outliers is None:
            self.outliers = [[] for _ in range(n)]
        if len(self.outliers) != n:
            raise PlotDataError(f"x and outliers length mismatch: {n} != {len(self.outliers)}")
        self.outliers = [list(_coords("outliers", o)) for o in self.outliers]

    def __len__(self) -> int:
        return int(self.x.shape[0])

    def groups(self) -> BarGroups:
        g = BarGroups(self.position, self.group_gap, self.bar_gap, same_width=True)
        for i, x in enumerate(self.x.tolist()):
            if math.isfinite(x):
                g.record(x, i)
        return g

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.X].update(*self.x.tolist())
        dr[Aes.X].update(*self.groups().x_range())
        dr[Aes.Y].update(*self.min.tolist(), *self.max.tolist())
        for out in self.outliers:
            dr[Aes.Y].update(*out)
        self.aes.restricted("alpha", "color", "fill", "size", "stroke").update_ranges(dr, len(self))
        return dr

    def parts(self) -> tuple[Rectangle, Segment, Point]:
        n = len(self)
        g = self.groups()
        box_x0, box_x1 = np.full(n, np.nan), np.full(n, np.nan)
        seg = np.full((3 * n, 4), np.nan)
        out_x: list[float] = []
        out_y: list[float] = []
        owner: list[int] = []

        for i in range(n):
            if not math.isfinite(self.x[i]):
                continue
            center, halfwidth = g.width(self.x[i], i)
            box_x0[i], box_x1[i] = center - halfwidth, center + halfwidth
            seg[3 * i] = (box_x0[i], self.median[i], box_x1[i], self.median[i])
            seg[3 * i + 1] = (center, self.min[i], center, self.q1[i])
            seg[3 * i + 2] = (center, self.q3[i], center, self.max[i])
            for o in self.outliers[i]:
                out_x.append(center)
                out_y.append(o)
                owner.append(i)

        rect = Rectangle(
            box_x0,
            self.q1,
            box_x1,
            self.q3,
            aes=self.aes.restricted("alpha", "color", "fill", "size", "stroke"),
            fill=self.fill,
            border=self.border,
        )
        segment = Segment(
            seg[:, 0],
            seg[:, 1],
            seg[:, 2],
            seg[:, 3],
            aes=self.aes.restricted("alpha", "color", "size", "stroke").reindexed(lambda k: k // 3),
            style=self.border,
        )
        point = Point(
            out_x,
            out_y,
            aes=self.aes.restricted("alpha", "color").reindexed(lambda k: owner[k]),
            style=self.point,
        )
        return rect, segment, point

    def draw(self, panel: Panel) -> None:
        for part in self.parts():
            part.draw(panel)


# ----------------------------------------------------------------------------
# Text


@dataclass
class Text:
    """Text labels centred on (x, y)."""

    x: Any
    y: Any
    text: Sequence[str]
    aes: Aesthetics = field(default_factory=Aesthetics)
    style: TextStyle | None = None

    def __post_init__(self) -> None:
        self.x = _coords("x", self.x)
        self.y = _coords("y", self.y)
        self.text = [str(t) for t in self.text]
        n = check_lengths(x=self.x, y=self.y)
        if len(self.text) != n:
            raise PlotDataError(f"x and text length mismatch: {n} != {len(self.text)}")

    def __len__(self) -> int:
        return int(self.x.shape[0])

    def data_ranges(self) -> DataRanges:
        dr = new_data_ranges()
        dr[Aes.X].update(*self.x.tolist())
        dr[Aes.Y].update(*self.y.tolist())
        self.aes.restricted("alpha", "color", "size").update_ranges(dr, len(self))
        return dr

    def draw(self, panel: Panel) -> None:
        style = self.style
        if style is None:
            font = panel.plot.style.x_axis.title
            style = TextStyle(color=panel.plot.style.geom_default.color, size_px=font.size_px, x_align=0.5, y_align=0.5)

        for i in range(len(self)):
            center, ok = panel.map_xy(self.x[i], self.y[i])
            if not ok:
                continue
            col = determine_color(style.color, panel, i, self.aes.color, self.aes.alpha)
            if col is None:
                continue
            size_px = style.size_px
            if self.aes.size is not None:
                size = panel.map_size(self.aes.size(i))
                if size == 0:
                    continue
                size_px = 2 * size
            panel.canvas.fill_text(center, self.text[i], replace(style, color=col, size_px=size_px))
