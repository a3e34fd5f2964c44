from __future__ import annotations

import math
from typing import TYPE_CHECKING

from facetplot.errors import PlotConfigError
from facetplot.interval import Interval
from facetplot.palette import RGBA
from facetplot.scale import Aes, Scale

if TYPE_CHECKING:
    from facetplot.canvas import Canvas, Point, Rect
    from facetplot.facet import Plot
    from facetplot.geom import Geom


class Panel:
    """One cell of the facet grid.

    The panel does not own its scales: it looks up the X scale of its column,
    the Y scale of its row and the shared aesthetic scales in the plot's
    scale list. rect and canvas are assigned when the plot is laid out.
    """

    def __init__(self, plot: Plot, row: int, col: int) -> None:
        self.plot = plot
        self.row = row
        self.col = col
        self.title = ""
        self.geoms: list[Geom] = []
        self.rect: Rect | None = None
        self.canvas: Canvas | None = None

    def add(self, *geoms: Geom) -> Panel:
        self.geoms.extend(geoms)
        return self

    @property
    def x_scale_id(self) -> int:
        return self.plot.x_scale_ids[self.col]

    @property
    def y_scale_id(self) -> int:
        return self.plot.y_scale_ids[self.row]

    @property
    def x_scale(self) -> Scale:
        return self.plot.scales[self.x_scale_id]

    @property
    def y_scale(self) -> Scale:
        return self.plot.scales[self.y_scale_id]

    def map_xy(self, x: float, y: float) -> tuple[Point, bool]:
        """Canvas point for the data coordinate (x, y).

        ok is False if either coordinate cannot be mapped; the point must then
        not be drawn.
        """
        if self.rect is None:
            raise PlotConfigError(f"panel ({self.row}, {self.col}) has not been laid out")
        xs, ys = self.x_scale, self.y_scale
        px = float(xs.trans.trans(xs.range, Interval(self.rect.x0, self.rect.x1), x))
        # Pixel rows grow downwards, so larger y values map towards rect.y0.
        py = float(ys.trans.trans(ys.range, Interval(self.rect.y1, self.rect.y0), y))
        return (px, py), math.isfinite(px) and math.isfinite(py)

    def in_range_xy(self, x: float, y: float) -> bool:
        return self.x_scale.range.contains(x) and self.y_scale.range.contains(y)

    def map_color(self, v: float) -> RGBA:
        return self.plot.map_color(v)

    def map_fill(self, v: float) -> RGBA:
        return self.plot.map_color(v, fill=True)

    def map_size(self, v: float) -> float:
        return self.plot.map_size(v)

    def map_alpha(self, v: float) -> float:
        return self.plot.scale(Aes.ALPHA).map_alpha(v)

    def __repr__(self) -> str:
        return f"Panel(row={self.row}, col={self.col}, title={self.title!r}, geoms={len(self.geoms)})"
