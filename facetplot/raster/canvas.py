from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from facetplot.palette import RGBA


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend(patch: np.ndarray, color: RGBA) -> None:
    """Source-over blend of a flat color into an RGBA view, in place."""
    a = color[3] / 255.0
    if a <= 0:
        return
    inv = 1.0 - a
    src = np.asarray(color[0:3], dtype=np.float32) * a
    patch[..., :3] = (src + patch[..., :3].astype(np.float32) * inv).astype(np.uint8)
    patch[..., 3] = 255


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    blend(dst[y, x], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    blend(dst[y, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    blend(dst[ya : yb + 1, x], color)


def fill_rect(dst: np.ndarray, x0: float, y0: float, x1: float, y1: float, color: RGBA) -> None:
    xa = max(0, int(round(min(x0, x1))))
    xb = min(dst.shape[1], int(round(max(x0, x1))))
    ya = max(0, int(round(min(y0, y1))))
    yb = min(dst.shape[0], int(round(max(y0, y1))))
    if xa >= xb or ya >= yb:
        return
    blend(dst[ya:yb, xa:xb], color)


def fill_polygon(dst: np.ndarray, points: Sequence[tuple[float, float]], color: RGBA) -> None:
    """Even-odd scanline fill sampling pixel centres."""
    if len(points) < 3:
        return
    pts = np.asarray(points, dtype=np.float64)
    if not np.all(np.isfinite(pts)):
        return
    if _is_axis_aligned_rect(pts):
        fill_rect(dst, pts[:, 0].min(), pts[:, 1].min(), pts[:, 0].max(), pts[:, 1].max(), color)
        return

    xs, ys = pts[:, 0], pts[:, 1]
    xn, yn = np.roll(xs, -1), np.roll(ys, -1)
    row0 = max(0, int(math.floor(ys.min())))
    row1 = min(dst.shape[0] - 1, int(math.ceil(ys.max())))
    for row in range(row0, row1 + 1):
        cy = row + 0.5
        crossing = (ys <= cy) != (yn <= cy)
        if not np.any(crossing):
            continue
        t = (cy - ys[crossing]) / (yn[crossing] - ys[crossing])
        hits = np.sort(xs[crossing] + t * (xn[crossing] - xs[crossing]))
        for left, right in zip(hits[0::2], hits[1::2], strict=False):
            xa = max(0, int(math.ceil(left - 0.5)))
            xb = min(dst.shape[1] - 1, int(math.floor(right - 0.5)))
            if xa <= xb:
                blend(dst[row, xa : xb + 1], color)


def _is_axis_aligned_rect(pts: np.ndarray) -> bool:
    if len(pts) == 5 and np.array_equal(pts[0], pts[4]):
        pts = pts[:4]
    if len(pts) != 4:
        return False
    return (
        pts[0, 1] == pts[1, 1]
        and pts[1, 0] == pts[2, 0]
        and pts[2, 1] == pts[3, 1]
        and pts[3, 0] == pts[0, 0]
    ) or (
        pts[0, 0] == pts[1, 0]
        and pts[1, 1] == pts[2, 1]
        and pts[2, 0] == pts[3, 0]
        and pts[3, 1] == pts[0, 1]
    )
