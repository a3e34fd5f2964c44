from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from facetplot.palette import RGBA
from facetplot.raster.canvas import blend


def draw_polyline(
    dst: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    color: RGBA,
    width: float = 1,
    dashes: Sequence[int] = (),
) -> None:
    """Bresenham polyline with a square brush; dashes are (on, off, ...) lengths in pixels."""
    if xs.size < 2:
        return
    pattern = [max(1, int(d)) for d in dashes]
    if len(pattern) % 2 == 1:
        pattern = pattern * 2
    travelled = 0.0
    for i in range(xs.size - 1):
        if not (math.isfinite(xs[i]) and math.isfinite(ys[i]) and math.isfinite(xs[i + 1]) and math.isfinite(ys[i + 1])):
            continue
        travelled = _draw_line_segment(
            dst,
            int(round(xs[i])),
            int(round(ys[i])),
            int(round(xs[i + 1])),
            int(round(ys[i + 1])),
            color=color,
            width=max(1, int(round(width))),
            pattern=pattern,
            travelled=travelled,
        )


def _draw_line_segment(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    *,
    color: RGBA,
    width: int,
    pattern: list[int],
    travelled: float,
) -> float:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        if _pen_down(pattern, travelled):
            _draw_square_brush(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        step = 0
        if e2 >= dy:
            err += dy
            x0 += sx
            step += 1
        if e2 <= dx:
            err += dx
            y0 += sy
            step += 1
        travelled += math.sqrt(step)
    return travelled


def _pen_down(pattern: list[int], travelled: float) -> bool:
    if not pattern:
        return True
    pos = travelled % sum(pattern)
    for i, length in enumerate(pattern):
        if pos < length:
            return i % 2 == 0
        pos -= length
    return True


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    lo = (width - 1) // 2
    hi = width // 2
    xa, xb = max(0, x - lo), min(dst.shape[1], x + hi + 1)
    ya, yb = max(0, y - lo), min(dst.shape[0], y + hi + 1)
    if xa >= xb or ya >= yb:
        return
    blend(dst[ya:yb, xa:xb], color)
