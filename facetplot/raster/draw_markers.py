from __future__ import annotations

import math

import numpy as np

from facetplot.palette import RGBA
from facetplot.raster.canvas import blend, fill_polygon


def draw_marker(dst: np.ndarray, x: float, y: float, color: RGBA, radius: float = 3, shape: str = "circle") -> None:
    """Glyph centred on (x, y); radius is half the glyph's extent in pixels."""
    if not (math.isfinite(x) and math.isfinite(y)) or radius <= 0:
        return
    r = float(radius)
    if shape == "circle":
        _disc(dst, x, y, r, color)
    elif shape == "ring":
        _disc(dst, x, y, r, color, inner=max(0.0, r - max(1.0, r / 3)))
    elif shape == "square":
        fill_polygon(dst, [(x - r, y - r), (x + r, y - r), (x + r, y + r), (x - r, y + r)], color)
    elif shape == "box":
        t = max(1.0, r / 3)
        _frame(dst, x - r, y - r, x + r, y + r, t, color)
    elif shape == "triangle":
        fill_polygon(dst, _triangle(x, y, r), color)
    elif shape == "pyramid":
        fill_polygon(dst, _triangle(x, y, r, up=False), color)
    elif shape == "plus":
        t = max(1.0, r / 3) / 2
        fill_polygon(dst, [(x - r, y - t), (x + r, y - t), (x + r, y + t), (x - r, y + t)], color)
        fill_polygon(dst, [(x - t, y - r), (x + t, y - r), (x + t, y - t), (x - t, y - t)], color)
        fill_polygon(dst, [(x - t, y + t), (x + t, y + t), (x + t, y + r), (x - t, y + r)], color)
    elif shape == "cross":
        t = max(1.0, r / 3) / 2
        d = r * math.sqrt(0.5)
        fill_polygon(dst, _bar(x - d, y - d, x + d, y + d, t), color)
        fill_polygon(dst, _bar(x - d, y + d, x + d, y - d, t), color)
    else:
        raise ValueError(f"unknown glyph shape: {shape}")


def _disc(dst: np.ndarray, x: float, y: float, r: float, color: RGBA, inner: float = 0.0) -> None:
    xa, xb = max(0, int(math.floor(x - r))), min(dst.shape[1], int(math.ceil(x + r)) + 1)
    ya, yb = max(0, int(math.floor(y - r))), min(dst.shape[0], int(math.ceil(y + r)) + 1)
    if xa >= xb or ya >= yb:
        return
    yy, xx = np.mgrid[ya:yb, xa:xb]
    d2 = (xx + 0.5 - x) ** 2 + (yy + 0.5 - y) ** 2
    mask = d2 <= r * r
    if inner > 0:
        mask &= d2 >= inner * inner
    if not np.any(mask):
        return
    patch = dst[ya:yb, xa:xb]
    view = patch[mask]
    blend(view, color)
    patch[mask] = view


def _frame(dst: np.ndarray, x0: float, y0: float, x1: float, y1: float, t: float, color: RGBA) -> None:
    fill_polygon(dst, [(x0, y0), (x1, y0), (x1, y0 + t), (x0, y0 + t)], color)
    fill_polygon(dst, [(x0, y1 - t), (x1, y1 - t), (x1, y1), (x0, y1)], color)
    fill_polygon(dst, [(x0, y0 + t), (x0 + t, y0 + t), (x0 + t, y1 - t), (x0, y1 - t)], color)
    fill_polygon(dst, [(x1 - t, y0 + t), (x1, y0 + t), (x1, y1 - t), (x1 - t, y1 - t)], color)


def _triangle(x: float, y: float, r: float, up: bool = True) -> list[tuple[float, float]]:
    h = r * math.sqrt(3) / 2
    tip = y - r if up else y + r
    base = y + h / 2 if up else y - h / 2
    return [(x, tip), (x + h, base), (x - h, base)]


def _bar(x0: float, y0: float, x1: float, y1: float, t: float) -> list[tuple[float, float]]:
    length = math.hypot(x1 - x0, y1 - y0)
    nx, ny = -(y1 - y0) / length * t, (x1 - x0) / length * t
    return [(x0 + nx, y0 + ny), (x1 + nx, y1 + ny), (x1 - nx, y1 - ny), (x0 - nx, y0 - ny)]
