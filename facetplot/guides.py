"""Legends for the non-positional scales.

Scales whose legends would show the same values are merged into one guide.
There are two kinds of guides: a continuous color bar for groups made only
of continuous color and fill scales, and a stack of labelled swatches for
everything else where each swatch overlays all aesthetics of the group.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

from facetplot.palette import BLACK, dashes, shape, with_alpha
from facetplot.scale import COLOR_AES, DISCRETE_ONLY_AES, GUIDE_AES, Aes, ScaleType
from facetplot.style import GlyphStyle, LegendStyle, LineStyle, TextStyle
from facetplot.ticks import DiscreteTicker, Tick, ticks_equal

if TYPE_CHECKING:
    from facetplot.canvas import Canvas, Rect
    from facetplot.facet import Plot

Group = list[Aes]

_BORDER = LineStyle(color=BLACK, width=1)


def can_combine(plot: Plot, j: Aes, k: Aes) -> bool:
    """Whether the guides of scales j and k can be drawn as one."""
    s1, s2 = plot.scale(j), plot.scale(k)
    diag = plot.diagnostics

    if s1.scale_type is not s2.scale_type:
        diag.vvv("different type for %s and %s", j.label, k.label)
        return False

    if s1.limit.min != s2.limit.min or s1.limit.max != s2.limit.max:
        diag.vvv("different limits for %s %s and %s %s", j.label, s1.limit, k.label, s2.limit)
        return False

    if s1.title != s2.title and s1.title and s2.title:
        diag.vvv("different titles for %s and %s", j.label, k.label)
        return False

    if s1.ticker is not None and s2.ticker is not None and s1.ticker is not s2.ticker:
        if not ticks_equal(s1.ticks(), s2.ticks()):
            diag.vvv("different ticks for %s and %s", j.label, k.label)
            return False

    if {j, k} == set(COLOR_AES):
        if s1.color_map is not None and s2.color_map is not None and s1.color_map is not s2.color_map:
            diag.vvv("different color maps for %s and %s", j.label, k.label)
            return False

    return True


def combine_guides(plot: Plot) -> list[Group]:
    """Greedy partition of the scales with data into combinable groups."""
    plot.diagnostics.v("Combining scales")
    groups: list[Group] = []
    for aes in GUIDE_AES:
        if not plot.scale(aes).has_data():
            plot.diagnostics.vv("%s has no data", aes.label)
            continue
        for group in groups:
            if all(can_combine(plot, aes, other) for other in group):
                group.append(aes)
                plot.diagnostics.vv("%s combined into %s", aes.label, [a.label for a in group])
                break
        else:
            groups.append([aes])
            plot.diagnostics.vv("%s uncombinable", aes.label)
    return groups


def is_continuous_color_guide(plot: Plot, group: Sequence[Aes]) -> bool:
    if plot.scale(group[0]).scale_type is ScaleType.DISCRETE:
        return False
    return all(aes in COLOR_AES for aes in group)


def title_for(plot: Plot, group: Sequence[Aes]) -> str:
    for aes in group:
        if plot.scale(aes).title:
            return plot.scale(aes).title
    return ""


def ticks_for(plot: Plot, group: Sequence[Aes]) -> list[Tick]:
    """Ticks shown in the guide; shape and stroke only know integer values."""
    first = plot.scale(group[0])
    for aes in group:
        scale = plot.scale(aes)
        if scale.ticker is not None:
            return scale.ticker.ticks(first.limit.min, first.limit.max)
    if any(aes in DISCRETE_ONLY_AES for aes in group):
        return DiscreteTicker().ticks(first.limit.min, first.limit.max)
    return first.ticks()


class GuideRenderer:
    def __init__(self, plot: Plot) -> None:
        self.plot = plot

    @property
    def style(self) -> LegendStyle:
        return self.plot.style.legend

    def width(self, canvas: Canvas, group: Sequence[Aes]) -> float:
        """Horizontal space the guide for group needs."""
        labels = [t.label for t in ticks_for(self.plot, group) if not t.is_minor()]
        label_w = max((canvas.text_size(label, self.style.label)[0] for label in labels), default=0.0)
        title_w = canvas.text_size(title_for(self.plot, group), self.style.title)[0]
        if is_continuous_color_guide(self.plot, group):
            body = self.style.continuous_size + self.style.tick.length + self.style.discrete_pad + label_w
        else:
            body = self.style.discrete_size + self.style.discrete_pad + label_w
        return max(title_w, body)

    def draw(self, canvas: Canvas, rect: Rect, group: Sequence[Aes]) -> float:
        """Draw the guide at the top of rect and return where the next one may start."""
        y = rect.y0
        title = title_for(self.plot, group)
        if title:
            canvas.fill_text((rect.x0, y), title, _top_left(self.style.title))
            y += 1.5 * canvas.text_size(title, self.style.title)[1]

        if is_continuous_color_guide(self.plot, group):
            return self._draw_continuous(canvas, rect.x0, y, group[0])
        return self._draw_discrete(canvas, rect.x0, y, group)

    def _draw_continuous(self, canvas: Canvas, x0: float, y0: float, aes: Aes) -> float:
        scale = self.plot.scale(aes)
        cm = scale.color_map
        width, length = self.style.continuous_size, self.style.continuous_length
        bottom = y0 + length
        x1 = x0 + width

        step = length / 101
        for i in range(101):
            t = i / 100
            col = cm.at(cm.min + t * (cm.max - cm.min))
            lo = bottom - i * step
            canvas.fill_polygon([(x0, lo - step), (x1, lo - step), (x1, lo), (x0, lo)], col)
        canvas.stroke_path([(x0, y0), (x1, y0), (x1, bottom), (x0, bottom), (x0, y0)], _BORDER)

        tick = self.style.tick
        label = _left_middle(self.style.label)
        for t in scale.ticks():
            if t.is_minor() or not scale.limit.contains(t.value):
                continue
            pos = scale.map(t.value)
            if math.isnan(pos):
                continue
            y = bottom - length * pos
            canvas.stroke_path([(x1 - tick.length, y), (x1, y)], tick.line)
            if self.style.tick_mirror:
                canvas.stroke_path([(x0, y), (x0 + tick.length, y)], tick.line)
            canvas.fill_text((x1 + tick.length, y), t.label, label)

        return bottom + 2 * self.style.discrete_pad

    def _draw_discrete(self, canvas: Canvas, x0: float, y0: float, group: Sequence[Aes]) -> float:
        plot = self.plot
        show = set(group)
        size, pad = self.style.discrete_size, self.style.discrete_pad
        label = _left_middle(self.style.label)
        base = plot.style.geom_default.color
        radius = size / 5
        glyph = "circle"

        y = y0
        for t in ticks_for(plot, group):
            if t.is_minor():
                continue
            x1, y1 = x0 + size, y + size
            box = [(x0, y), (x1, y), (x1, y1), (x0, y1)]
            center = (x0 + size / 2, y + size / 2)
            canvas.fill_polygon(box, self.style.swatch_background)

            col = base
            if Aes.COLOR in show:
                col = plot.map_color(t.value)
            elif Aes.FILL in show:
                col = plot.map_color(t.value, fill=True)
            if Aes.ALPHA in show:
                alpha = plot.scale(Aes.ALPHA).map(t.value)
                if not math.isnan(alpha):
                    col = with_alpha(col, alpha)
            if Aes.SIZE in show:
                radius = plot.map_size(t.value)
            if Aes.SHAPE in show:
                glyph = shape(int(t.value))

            if Aes.STROKE in show:
                canvas.stroke_path(
                    [(x0, center[1]), (x1, center[1])],
                    LineStyle(color=col, width=1.5, dashes=dashes(int(t.value))),
                )
            if show & {Aes.SHAPE, Aes.FILL, Aes.SIZE, Aes.COLOR} or (Aes.ALPHA in show and Aes.STROKE not in show):
                if radius > 0:
                    canvas.draw_glyph(center, GlyphStyle(color=col, radius=radius, shape=glyph))

            canvas.fill_text((x1 + pad, center[1]), t.label, label)
            canvas.stroke_path(box + [box[0]], _BORDER)
            y = y1 + pad

        return y + pad


def _top_left(style: TextStyle) -> TextStyle:
    return TextStyle(color=style.color, size_px=style.size_px, x_align=0.0, y_align=0.0)


def _left_middle(style: TextStyle) -> TextStyle:
    return TextStyle(color=style.color, size_px=style.size_px, x_align=0.0, y_align=0.5)
