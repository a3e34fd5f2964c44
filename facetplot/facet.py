"""Faceted plots.

A Plot is a grid of rows x cols panels. All panels of a column share one X
scale and all panels of a row share one Y scale; unless the axis is free,
all columns (rows) share the very same scale. The non-positional scales
(alpha, color, fill, shape, size, stroke) are shared by the whole plot.

The scales live in plot.scales and are referenced by index. A shared axis
is a single entry referenced from several columns or rows, so every pass
over plot.scales visits it exactly once.

Rendering runs prepare() first:

    learn data ranges -> autoscale -> repair X/Y limits -> fill ranges
    -> set up color and size maps
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np

from facetplot.canvas import Canvas, RasterCanvas, Rect
from facetplot.diagnostics import Diagnostics
from facetplot.errors import PlotConfigError, ScaleConfigError
from facetplot.geom import Geom
from facetplot.guides import GuideRenderer, combine_guides
from facetplot.interval import Interval
from facetplot.palette import GRAY50, RGBA, Rainbow, extended_black_body
from facetplot.panel import Panel
from facetplot.scale import DISCRETE_ONLY_AES, GUIDE_AES, Aes, Expand, Scale, ScaleType
from facetplot.style import Style, TextStyle, default_style
from facetplot.ticks import Tick
from facetplot.trans import LINEAR_TRANS, LOG10_TRANS, SQRT_TRANS

LOGGER = logging.getLogger(__name__)

# Smallest glyph radius a size scale maps onto.
MIN_SIZE = 2.0


class Plot:
    def __init__(
        self,
        rows: int = 1,
        cols: int = 1,
        *,
        free_x: bool = False,
        free_y: bool = False,
        title: str = "",
        style: Style | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        if rows <= 0 or cols <= 0:
            raise PlotConfigError(f"plot grid must be at least 1x1, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.title = title
        self.style = style if style is not None else default_style()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(logger=LOGGER)
        self.row_labels = [""] * rows
        self.col_labels = [""] * cols

        self.scales: list[Scale] = []
        if free_x:
            self.x_scale_ids = [self._new_scale(Aes.X) for _ in range(cols)]
        else:
            self.x_scale_ids = [self._new_scale(Aes.X)] * cols
        if free_y:
            self.y_scale_ids = [self._new_scale(Aes.Y) for _ in range(rows)]
        else:
            self.y_scale_ids = [self._new_scale(Aes.Y)] * rows
        self.aes_scale_ids = {aes: self._new_scale(aes) for aes in GUIDE_AES}

        self.panels = [[Panel(self, r, c) for c in range(cols)] for r in range(rows)]
        self._set_scale_defaults()

    def _new_scale(self, aes: Aes) -> int:
        self.scales.append(Scale(aes))
        return len(self.scales) - 1

    def _set_scale_defaults(self) -> None:
        # Position scales look best 5% longer than the data on each side.
        for ids, axis in ((self.x_scale_ids, self.style.x_axis), (self.y_scale_ids, self.style.y_axis)):
            for sid in set(ids):
                scale = self.scales[sid]
                scale.trans = LINEAR_TRANS
                scale.autoscaling.expand = Expand(absolute=axis.expand_absolute, relative=axis.expand_relative)
        # Alpha and colors map their limit onto [0, 1], sizes are mapped to areas.
        for aes in GUIDE_AES:
            self.scale(aes).trans = LINEAR_TRANS
        self.scale(Aes.SIZE).trans = SQRT_TRANS

    # ------------------------------------------------------------------
    # Access

    @property
    def free_x(self) -> bool:
        return len(set(self.x_scale_ids)) > 1

    @property
    def free_y(self) -> bool:
        return len(set(self.y_scale_ids)) > 1

    def scale(self, aes: Aes) -> Scale:
        """The scale of a non-positional aesthetic, or the first X / Y scale."""
        if aes is Aes.X:
            return self.scales[self.x_scale_ids[0]]
        if aes is Aes.Y:
            return self.scales[self.y_scale_ids[0]]
        return self.scales[self.aes_scale_ids[aes]]

    def x_scale(self, col: int = 0) -> Scale:
        return self.scales[self.x_scale_ids[col]]

    def y_scale(self, row: int = 0) -> Scale:
        return self.scales[self.y_scale_ids[row]]

    def panel(self, row: int = 0, col: int = 0) -> Panel:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise PlotConfigError(f"panel ({row}, {col}) outside of {self.rows}x{self.cols} grid")
        return self.panels[row][col]

    def add(self, *geoms: Geom, row: int = 0, col: int = 0) -> Panel:
        return self.panel(row, col).add(*geoms)

    def scale_for(self, aes: Aes, row: int, col: int) -> Scale:
        if aes is Aes.X:
            return self.scales[self.x_scale_ids[col]]
        if aes is Aes.Y:
            return self.scales[self.y_scale_ids[row]]
        return self.scales[self.aes_scale_ids[aes]]

    # ------------------------------------------------------------------
    # Preparation

    def validate_scales(self) -> None:
        for aes in DISCRETE_ONLY_AES:
            scale = self.scale(aes)
            if scale.scale_type is not ScaleType.DISCRETE:
                raise ScaleConfigError(f"{aes.label} must be discrete, got {scale.scale_type.value}")

    def learn_data_range(self) -> None:
        """Reset all scales and fold in the data ranges of every geom."""
        for scale in self.scales:
            scale.reset()
        for row in self.panels:
            for panel in row:
                for geom in panel.geoms:
                    for aes, interval in zip(Aes, geom.data_ranges(), strict=True):
                        self.scale_for(aes, panel.row, panel.col).update_data(interval)
        self._debug_scales("After learning data ranges")

    def autoscale(self) -> None:
        for scale in self.scales:
            scale.autoscale()
        self._debug_scales("After autoscaling")

    def de_degenerate_x_and_y(self) -> None:
        """Make sure every X and Y limit is finite and non-empty."""
        for name, ids in (("X", self.x_scale_ids), ("Y", self.y_scale_ids)):
            for i, sid in enumerate(dict.fromkeys(ids)):
                if self.scales[sid].limit.degenerate():
                    self.diagnostics.warn("Corrected degeneration of %s scale %d", name, i)
        self._debug_scales("After de-degenerating X and Y")

    def fill_range(self) -> None:
        for scale in self.scales:
            scale.fill_range()
        self._debug_scales("After filling range")

    def setup_color_and_size_maps(self) -> None:
        color = self.scale(Aes.COLOR)
        if color.has_data() and color.color_map is None:
            color.color_map = Rainbow()
        fill = self.scale(Aes.FILL)
        if fill.has_data() and fill.color_map is None:
            fill.color_map = extended_black_body()

        size = self.scale(Aes.SIZE)
        if size.has_data() and size.size_map is None:
            target = Interval(MIN_SIZE, 0.5 * self.style.legend.discrete_size)

            def size_map(v: float) -> float:
                # Constant sizes are drawn halfway between the smallest and largest glyph.
                if size.range.min == size.range.max:
                    return 0.5 * (target.min + target.max)
                return float(size.trans.trans(size.range, target, v))

            size.size_map = size_map

    def _check_log_domains(self) -> None:
        for scale in self.scales:
            if scale.trans is not LOG10_TRANS or not scale.has_data():
                continue
            if not (scale.limit.min > 0 and scale.limit.max > 0):
                self.diagnostics.warn(
                    "%s is logarithmic but its limit %s is not positive; affected values are not drawn",
                    scale.aes.label,
                    scale.limit,
                )

    def prepare(self) -> None:
        self.validate_scales()
        self.learn_data_range()
        self.autoscale()
        self.de_degenerate_x_and_y()
        self.fill_range()
        self.setup_color_and_size_maps()
        self._check_log_domains()

    def _debug_scales(self, info: str) -> None:
        diag = self.diagnostics
        diag.v("%s", info)
        for i, sid in enumerate(dict.fromkeys(self.x_scale_ids)):
            diag.vv("X-Axis %d %s", i, self.scales[sid])
        for i, sid in enumerate(dict.fromkeys(self.y_scale_ids)):
            diag.vv("Y-Axis %d %s", i, self.scales[sid])
        for aes, sid in self.aes_scale_ids.items():
            diag.vv("%s %s", aes.label, self.scales[sid])

    # ------------------------------------------------------------------
    # Mapping

    def map_color(self, v: float, fill: bool = False) -> RGBA:
        scale = self.scale(Aes.FILL if fill else Aes.COLOR)
        if not scale.has_data() and scale.color_map is None:
            return GRAY50
        return scale.map_color(v)

    def map_size(self, v: float) -> float:
        scale = self.scale(Aes.SIZE)
        if not scale.has_data() and scale.size_map is None:
            return 0.0
        return scale.map_size(v)

    def combine_guides(self) -> list[list[Aes]]:
        return combine_guides(self)

    # ------------------------------------------------------------------
    # Drawing

    def render(self, width: int, height: int) -> np.ndarray:
        """Draw onto a fresh raster and return its RGBA pixels."""
        canvas = RasterCanvas(width, height, background=self.style.background)
        self.draw(canvas)
        return canvas.to_rgba()

    def save_png(self, path: str | Path, width: int, height: int) -> None:
        canvas = RasterCanvas(width, height, background=self.style.background)
        self.draw(canvas)
        canvas.save_png(path)

    def draw(self, canvas: Canvas) -> None:
        self.prepare()
        style = self.style
        area = Rect(0, 0, canvas.width, canvas.height)
        self.diagnostics.v("Drawing to canvas of %dx%d", canvas.width, canvas.height)

        if self.title:
            canvas.fill_text((area.center[0], area.y0), self.title, style.title)
            area = Rect(area.x0, area.y0 + style.title_height, area.x1, area.y1)

        groups = combine_guides(self)
        if groups:
            renderer = GuideRenderer(self)
            guide_w = max(renderer.width(canvas, g) for g in groups)
            guide_x0 = area.x1 - guide_w - style.legend.discrete_pad
            y = area.y0
            for group in groups:
                y = renderer.draw(canvas, Rect(guide_x0, y, area.x1, area.y1), group)
            area = Rect(area.x0, area.y0, guide_x0 - 2 * style.legend.discrete_pad, area.y1)

        x_ticks = [self._visible_ticks(self.x_scale(c)) for c in range(self.cols)]
        y_ticks = [self._visible_ticks(self.y_scale(r)) for r in range(self.rows)]

        # Widths left to right: y title, y tick labels, panels, row strips.
        x_title, y_title = self.x_scale().title, self.y_scale().title
        w1 = style.y_axis.title_size if y_title else 0.0
        label_w = max(
            (canvas.text_size(t.label, style.y_axis.label)[0] for ticks in y_ticks for t in ticks if not t.is_minor()),
            default=0.0,
        )
        w2 = label_w + style.y_axis.major_tick.length + 3
        w4 = style.v_strip.size if any(self.row_labels) else 0.0
        # Heights top to bottom: column strips, panels, x tick labels, x title.
        h4 = style.h_strip.size if any(self.col_labels) else 0.0
        h2 = canvas.text_size("0", style.x_axis.label)[1] + style.x_axis.major_tick.length + 3
        h1 = style.x_axis.title_size if x_title else 0.0

        grid = Rect(area.x0 + w1 + w2, area.y0 + h4, area.x1 - w4, area.y1 - h1 - h2)
        pad_x, pad_y = style.panel.pad_x, style.panel.pad_y
        cell_w = (grid.width - pad_x * (self.cols - 1)) / self.cols
        cell_h = (grid.height - pad_y * (self.rows - 1)) / self.rows
        if cell_w <= 0 or cell_h <= 0:
            raise PlotConfigError(f"canvas {canvas.width}x{canvas.height} too small for a {self.rows}x{self.cols} grid")

        if x_title:
            canvas.fill_text((grid.center[0], area.y1), x_title, style.x_axis.title)
        if y_title:
            canvas.fill_text((area.x0, grid.center[1]), y_title, style.y_axis.title)

        have_panel_title = any(p.title for row in self.panels for p in row)
        for row in self.panels:
            for panel in row:
                x0 = grid.x0 + panel.col * (cell_w + pad_x)
                y0 = grid.y0 + panel.row * (cell_h + pad_y)
                cell = Rect(x0, y0, x0 + cell_w, y0 + cell_h)
                self._setup_panel(canvas, panel, cell, have_panel_title, x_ticks[panel.col], y_ticks[panel.row])

                if panel.row == 0 and h4 > 0:
                    strip = Rect(cell.x0, area.y0, cell.x1, area.y0 + h4)
                    self._draw_strip(canvas, strip, self.col_labels[panel.col], style.h_strip.background, style.h_strip.text)
                if panel.col == self.cols - 1 and w4 > 0:
                    strip = Rect(cell.x1, panel.rect.y0, cell.x1 + w4, panel.rect.y1)
                    self._draw_strip(canvas, strip, self.row_labels[panel.row], style.v_strip.background, style.v_strip.text)

        for row in self.panels:
            for panel in row:
                for geom in panel.geoms:
                    geom.draw(panel)

        for col in range(self.cols):
            self._draw_x_ticks(canvas, self.panels[self.rows - 1][col], x_ticks[col])
        for row in range(self.rows):
            self._draw_y_ticks(canvas, self.panels[row][0], y_ticks[row])

    def _visible_ticks(self, scale: Scale) -> list[Tick]:
        return [t for t in scale.ticks() if scale.range.contains(t.value)]

    def _setup_panel(
        self,
        canvas: Canvas,
        panel: Panel,
        cell: Rect,
        have_panel_title: bool,
        x_ticks: list[Tick],
        y_ticks: list[Tick],
    ) -> None:
        style = self.style
        rect = cell
        if have_panel_title:
            strip = Rect(cell.x0, cell.y0, cell.x1, cell.y0 + style.h_strip.size)
            self._draw_strip(canvas, strip, panel.title, style.h_strip.background, style.h_strip.text)
            rect = Rect(cell.x0, strip.y1, cell.x1, cell.y1)
        self.diagnostics.v("Panel %d,%d at %.1f,%.1f size %.1fx%.1f", panel.row, panel.col, rect.x0, rect.y0, rect.width, rect.height)

        panel.rect = rect
        panel.canvas = canvas
        canvas.fill_polygon(rect.path(), style.panel.background)

        for t in x_ticks:
            line = style.grid.minor if t.is_minor() else style.grid.major
            (px, _), _ = panel.map_xy(t.value, math.nan)
            if line is not None and math.isfinite(px):
                canvas.stroke_path([(px, rect.y0), (px, rect.y1)], line)
        for t in y_ticks:
            line = style.grid.minor if t.is_minor() else style.grid.major
            (_, py), _ = panel.map_xy(math.nan, t.value)
            if line is not None and math.isfinite(py):
                canvas.stroke_path([(rect.x0, py), (rect.x1, py)], line)

    def _draw_strip(self, canvas: Canvas, rect: Rect, text: str, background: RGBA, text_style: TextStyle) -> None:
        canvas.fill_polygon(rect.path(), background)
        if text:
            canvas.fill_text(rect.center, text, text_style)

    def _draw_x_ticks(self, canvas: Canvas, panel: Panel, ticks: list[Tick]) -> None:
        axis = self.style.x_axis
        y0 = panel.rect.y1
        for t in ticks:
            (px, _), _ = panel.map_xy(t.value, math.nan)
            if not math.isfinite(px):
                continue
            tick = axis.major_tick
            if t.is_minor():
                if axis.minor_tick is None:
                    continue
                tick = axis.minor_tick
            canvas.stroke_path([(px, y0), (px, y0 + tick.length)], tick.line)
            if not t.is_minor():
                canvas.fill_text((px, y0 + tick.length + 1), t.label, axis.label)

    def _draw_y_ticks(self, canvas: Canvas, panel: Panel, ticks: list[Tick]) -> None:
        axis = self.style.y_axis
        x0 = panel.rect.x0
        for t in ticks:
            (_, py), _ = panel.map_xy(math.nan, t.value)
            if not math.isfinite(py):
                continue
            tick = axis.major_tick
            if t.is_minor():
                if axis.minor_tick is None:
                    continue
                tick = axis.minor_tick
            canvas.stroke_path([(x0 - tick.length, py), (x0, py)], tick.line)
            if not t.is_minor():
                canvas.fill_text((x0 - tick.length - 2, py), t.label, axis.label)

