from __future__ import annotations

import colorsys
from dataclasses import dataclass, field
import math
from typing import Protocol, Sequence

import numpy as np

RGBA = tuple[int, int, int, int]

GRAY50: RGBA = (127, 127, 127, 255)
BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)

SHAPES = ("circle", "square", "triangle", "ring", "cross", "plus", "box", "pyramid")

# Dash patterns as (on, off, ...) pixel lengths; () is a solid line.
DASHES: tuple[tuple[int, ...], ...] = (
    (),
    (6, 2),
    (2, 2),
    (6, 2, 2, 2),
    (10, 4),
    (4, 2, 4, 6),
)


class ColorMap(Protocol):
    min: float
    max: float

    def at(self, x: float) -> RGBA:
        ...

    def palette(self, n: int) -> list[RGBA]:
        ...


def shape(i: int) -> str:
    return SHAPES[i % len(SHAPES)]


def dashes(i: int) -> tuple[int, ...]:
    return DASHES[i % len(DASHES)]


def with_alpha(color: RGBA, alpha: float) -> RGBA:
    r, g, b, a = color
    return (r, g, b, int(round(a * max(0.0, min(1.0, alpha)))))


def _check_domain(x: float, vmin: float, vmax: float) -> float:
    if math.isnan(x) or x < min(vmin, vmax) or x > max(vmin, vmax):
        raise ValueError(f"color map value {x} outside [{vmin}, {vmax}]")
    if vmax == vmin:
        return 0.0
    return (x - vmin) / (vmax - vmin)


@dataclass
class Rainbow:
    """Equally spaced hues; hue_gap is the fraction of the hue circle left out."""

    saturation: float = 0.9
    value: float = 0.9
    start_hue: float = 0.0
    hue_gap: float = 1.0 / 6.0
    alpha: float = 1.0
    min: float = 0.0
    max: float = 1.0

    def __post_init__(self) -> None:
        if self.alpha < 0 or self.alpha > 1:
            raise ValueError("alpha must be in [0, 1]")

    def at(self, x: float) -> RGBA:
        t = _check_domain(x, self.min, self.max)
        return self._hsv(self.start_hue + (1 - self.hue_gap) * t)

    def palette(self, n: int) -> list[RGBA]:
        if n <= 0:
            return []
        return [self._hsv(self.start_hue + i / (n + 1)) for i in range(n)]

    def _hsv(self, h: float) -> RGBA:
        r, g, b = colorsys.hsv_to_rgb(h % 1.0, self.saturation, self.value)
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), int(round(self.alpha * 255)))


@dataclass
class GradientColorMap:
    """Piecewise linear interpolation between evenly spaced color stops."""

    stops: Sequence[RGBA]
    min: float = 0.0
    max: float = 1.0
    _table: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.stops) < 2:
            raise ValueError("a gradient needs at least 2 color stops")
        self._table = np.asarray(self.stops, dtype=np.float64)

    def at(self, x: float) -> RGBA:
        t = _check_domain(x, self.min, self.max)
        return self._sample(np.asarray([t]))[0]

    def palette(self, n: int) -> list[RGBA]:
        if n <= 0:
            return []
        if n == 1:
            return self._sample(np.asarray([0.5]))
        return self._sample(np.linspace(0.0, 1.0, n))

    def _sample(self, t: np.ndarray) -> list[RGBA]:
        pos = np.linspace(0.0, 1.0, len(self._table))
        channels = [np.interp(t, pos, self._table[:, c]) for c in range(4)]
        out = np.rint(np.stack(channels, axis=1)).astype(np.int64)
        return [tuple(int(v) for v in row) for row in out]  # type: ignore[misc]


def extended_black_body() -> GradientColorMap:
    return GradientColorMap(
        stops=[
            (0, 0, 0, 255),
            (40, 18, 90, 255),
            (150, 23, 100, 255),
            (222, 60, 45, 255),
            (240, 150, 20, 255),
            (250, 225, 120, 255),
            (255, 255, 255, 255),
        ]
    )


def kindlmann() -> GradientColorMap:
    return GradientColorMap(
        stops=[
            (0, 0, 0, 255),
            (46, 4, 76, 255),
            (8, 40, 178, 255),
            (4, 110, 106, 255),
            (9, 162, 20, 255),
            (161, 187, 13, 255),
            (249, 203, 199, 255),
            (255, 255, 255, 255),
        ]
    )
