"""Scale transformations in the spirit of ggplot2.

A Transformation maps values from one Interval onto another and knows how
to undo that mapping. Both directions accept scalars or numpy arrays. They
never raise on awkward input: a zero width interval, a logarithm of a
non-positive number or the square root of a negative number yields Inf or
NaN, which callers treat as "cannot be drawn".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

import numpy as np

from facetplot.errors import ScaleConfigError
from facetplot.interval import Interval
from facetplot.ticks import LogTicker, NiceTicker, Ticker

Value = Union[float, np.ndarray]
TransFunc = Callable[[Interval, Interval, Value], Value]


@dataclass(frozen=True)
class Transformation:
    name: str
    trans: TransFunc
    inverse: TransFunc
    ticker: Ticker


def _values(x: Value) -> np.ndarray:
    return np.asarray(x, dtype=np.float64)


def _result(y: np.ndarray) -> Value:
    if np.ndim(y) == 0:
        return float(y)
    return y


def _rescale(src: Interval, dst: Interval, x: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        t = (x - np.float64(src.min)) / np.float64(src.max - src.min)
        return np.float64(dst.min) + np.float64(dst.max - dst.min) * t


def _identity(src: Interval, dst: Interval, x: Value) -> Value:
    return _result(_values(x))


def _linear(src: Interval, dst: Interval, x: Value) -> Value:
    return _result(_rescale(src, dst, _values(x)))


def _linear_inverse(src: Interval, dst: Interval, y: Value) -> Value:
    return _result(_rescale(dst, src, _values(y)))


def _squared(i: Interval) -> Interval:
    return Interval(i.min * i.min, i.max * i.max)


def _sqrt(src: Interval, dst: Interval, x: Value) -> Value:
    area = _rescale(src, _squared(dst), _values(x))
    with np.errstate(invalid="ignore"):
        return _result(np.sqrt(area))


def _sqrt_inverse(src: Interval, dst: Interval, y: Value) -> Value:
    y = _values(y)
    return _result(_rescale(_squared(dst), src, y * y))


def _pin_zero(i: Interval) -> Interval:
    return Interval(0.0, i.max)


def _sqrt_fix0(src: Interval, dst: Interval, x: Value) -> Value:
    return _sqrt(_pin_zero(src), _pin_zero(dst), x)


def _sqrt_fix0_inverse(src: Interval, dst: Interval, y: Value) -> Value:
    return _sqrt_inverse(_pin_zero(src), _pin_zero(dst), y)


def _log10(src: Interval, dst: Interval, x: Value) -> Value:
    x = _values(x)
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.log10(x / np.float64(src.min)) / np.log10(np.float64(src.max) / np.float64(src.min))
        return _result(np.float64(dst.min) + t * np.float64(dst.max - dst.min))


def _log10_inverse(src: Interval, dst: Interval, y: Value) -> Value:
    y = _values(y)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        t = (y - np.float64(dst.min)) / np.float64(dst.max - dst.min)
        decades = np.log10(np.float64(src.max) / np.float64(src.min))
        return _result(np.float64(src.min) * np.power(10.0, decades * t))


IDENTITY_TRANS = Transformation(name="Identity", trans=_identity, inverse=_identity, ticker=NiceTicker(4))

LINEAR_TRANS = Transformation(name="Linear", trans=_linear, inverse=_linear_inverse, ticker=NiceTicker(4))

# Maps a magnitude onto an area: the square of the output is linear in x.
SQRT_TRANS = Transformation(name="SquareRoot", trans=_sqrt, inverse=_sqrt_inverse, ticker=NiceTicker(5))

# Like SQRT_TRANS but 0 always maps to 0.
SQRT_TRANS_FIX0 = Transformation(
    name="SquareRootFix0",
    trans=_sqrt_fix0,
    inverse=_sqrt_fix0_inverse,
    ticker=NiceTicker(5),
)

LOG10_TRANS = Transformation(name="Log10", trans=_log10, inverse=_log10_inverse, ticker=LogTicker())

TRANSFORMATIONS: dict[str, Transformation] = {
    t.name.lower(): t for t in (IDENTITY_TRANS, LINEAR_TRANS, SQRT_TRANS, SQRT_TRANS_FIX0, LOG10_TRANS)
}


def get_transformation(name: str) -> Transformation:
    try:
        return TRANSFORMATIONS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(TRANSFORMATIONS))
        raise ScaleConfigError(f"unknown transformation: {name!r} (known: {known})") from None
