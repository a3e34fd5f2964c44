"""Drawing surfaces.

Everything that draws a chart talks to a Canvas: filled polygons, stroked
paths, glyphs and text in pixel coordinates with the origin in the top-left
corner and y growing downwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Sequence

import numpy as np
from PIL import Image

from facetplot.palette import RGBA, WHITE
from facetplot.raster import draw_marker, draw_polyline, draw_text, fill_polygon, new_canvas, text_size
from facetplot.style import GlyphStyle, LineStyle, TextStyle

Point = tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center(self) -> Point:
        return ((self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2)

    def path(self) -> list[Point]:
        return [(self.x0, self.y0), (self.x1, self.y0), (self.x1, self.y1), (self.x0, self.y1)]

    def inset(self, dx: float, dy: float | None = None) -> Rect:
        dy = dx if dy is None else dy
        return Rect(self.x0 + dx, self.y0 + dy, self.x1 - dx, self.y1 - dy)


class Canvas(Protocol):
    width: int
    height: int

    def fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        ...

    def stroke_path(self, points: Sequence[Point], style: LineStyle) -> None:
        ...

    def draw_glyph(self, center: Point, style: GlyphStyle) -> None:
        ...

    def fill_text(self, point: Point, text: str, style: TextStyle) -> None:
        ...

    def text_size(self, text: str, style: TextStyle) -> tuple[float, float]:
        ...


class RasterCanvas:
    """Canvas over an RGBA uint8 numpy array of shape (height, width, 4)."""

    def __init__(self, width: int, height: int, background: RGBA = WHITE) -> None:
        self.width = int(width)
        self.height = int(height)
        self.pixels = new_canvas(self.width, self.height, background)

    def fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        if color[3] == 0:
            return
        fill_polygon(self.pixels, points, color)

    def stroke_path(self, points: Sequence[Point], style: LineStyle) -> None:
        if len(points) < 2 or style.width <= 0 or style.color[3] == 0:
            return
        pts = np.asarray(points, dtype=np.float64)
        draw_polyline(self.pixels, pts[:, 0], pts[:, 1], style.color, width=style.width, dashes=style.dashes)

    def draw_glyph(self, center: Point, style: GlyphStyle) -> None:
        if style.color[3] == 0:
            return
        draw_marker(self.pixels, center[0], center[1], style.color, radius=style.radius, shape=style.shape)

    def fill_text(self, point: Point, text: str, style: TextStyle) -> None:
        if not text:
            return
        w, h = self.text_size(text, style)
        x = int(round(point[0] - style.x_align * w))
        y = int(round(point[1] - style.y_align * h))
        draw_text(self.pixels, x, y, text, style.color, font_size_px=style.size_px, rotate_deg=style.rotate_deg)

    def text_size(self, text: str, style: TextStyle) -> tuple[float, float]:
        w, h = text_size(text, font_size_px=style.size_px, rotate_deg=style.rotate_deg)
        return (float(w), float(h))

    def to_rgba(self) -> np.ndarray:
        return self.pixels.copy()

    def save_png(self, path: str | Path) -> None:
        Image.fromarray(self.pixels).save(Path(path), format="PNG")


@dataclass(frozen=True)
class DrawCall:
    op: str
    args: tuple[Any, ...]


@dataclass
class RecordingCanvas:
    """Canvas that only remembers what was drawn on it."""

    width: int = 640
    height: int = 480
    calls: list[DrawCall] = field(default_factory=list)

    def fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        self.calls.append(DrawCall("fill_polygon", (list(points), color)))

    def stroke_path(self, points: Sequence[Point], style: LineStyle) -> None:
        self.calls.append(DrawCall("stroke_path", (list(points), style)))

    def draw_glyph(self, center: Point, style: GlyphStyle) -> None:
        self.calls.append(DrawCall("draw_glyph", (center, style)))

    def fill_text(self, point: Point, text: str, style: TextStyle) -> None:
        self.calls.append(DrawCall("fill_text", (point, text, style)))

    def text_size(self, text: str, style: TextStyle) -> tuple[float, float]:
        w, h = 0.6 * style.size_px * len(text), float(style.size_px)
        if (style.rotate_deg // 90) % 2 == 1:
            return (h, w)
        return (w, h)

    def ops(self, op: str) -> list[DrawCall]:
        return [c for c in self.calls if c.op == op]

    def texts(self) -> list[str]:
        return [c.args[1] for c in self.calls if c.op == "fill_text"]
