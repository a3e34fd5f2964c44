from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
import math
from typing import Protocol, Sequence

import numpy as np


@dataclass(frozen=True)
class Tick:
    value: float
    label: str = ""

    def is_minor(self) -> bool:
        return self.label == ""


class Ticker(Protocol):
    def ticks(self, vmin: float, vmax: float) -> list[Tick]:
        ...


@dataclass(frozen=True)
class NiceTicker:
    """Ticks at 1, 2 or 5 times a power of ten, about `target` of them."""

    target: int = 4

    def ticks(self, vmin: float, vmax: float) -> list[Tick]:
        if not (math.isfinite(vmin) and math.isfinite(vmax)):
            return []
        lo, hi = min(vmin, vmax), max(vmin, vmax)
        values = ticks_within_range(generate_nice_ticks(lo, hi, self.target), vmin=lo, vmax=hi)
        labels = format_ticks_for_axis(values)
        return [Tick(value=float(v), label=label) for v, label in zip(values.tolist(), labels, strict=False)]


@dataclass(frozen=True)
class LogTicker:
    """Labelled ticks at powers of ten with unlabelled minor ticks between."""

    def ticks(self, vmin: float, vmax: float) -> list[Tick]:
        lo, hi = min(vmin, vmax), max(vmin, vmax)
        if not (math.isfinite(lo) and math.isfinite(hi)) or lo <= 0:
            return NiceTicker(4).ticks(vmin, vmax)
        e0 = math.floor(math.log10(lo))
        e1 = math.ceil(math.log10(hi))
        majors = [10.0**e for e in range(e0, e1 + 1) if lo <= 10.0**e <= hi]
        if len(majors) < 2:
            return NiceTicker(4).ticks(vmin, vmax)

        out: list[Tick] = []
        for e in range(e0, e1 + 1):
            base = 10.0**e
            if lo <= base <= hi:
                out.append(Tick(value=base, label=format_tick(base)))
            for k in range(2, 10):
                v = k * base
                if lo <= v <= hi:
                    out.append(Tick(value=v))
        return out


@dataclass(frozen=True)
class DiscreteTicker:
    """One tick per integer in the interval, optionally with nominal labels."""

    labels: tuple[str, ...] | None = None

    def ticks(self, vmin: float, vmax: float) -> list[Tick]:
        if not (math.isfinite(vmin) and math.isfinite(vmax)):
            return []
        lo, hi = math.ceil(min(vmin, vmax)), math.floor(max(vmin, vmax))
        out: list[Tick] = []
        for i in range(lo, hi + 1):
            if self.labels is not None and 0 <= i < len(self.labels):
                label = self.labels[i]
            else:
                label = str(i)
            out.append(Tick(value=float(i), label=label))
        return out


@dataclass(frozen=True)
class TimeTicker:
    """Nice ticks on seconds relative to t0, labelled as wall-clock times."""

    t0: datetime
    fmt: str = "%Y-%m-%d %H:%M"
    target: int = 4

    def ticks(self, vmin: float, vmax: float) -> list[Tick]:
        out: list[Tick] = []
        for tick in NiceTicker(self.target).ticks(vmin, vmax):
            when = self.t0 + timedelta(seconds=tick.value)
            out.append(Tick(value=tick.value, label=when.strftime(self.fmt)))
        return out


def ticks_equal(a: Sequence[Tick], b: Sequence[Tick]) -> bool:
    if len(a) != len(b):
        return False
    return all(ta.value == tb.value and ta.label == tb.label for ta, tb in zip(a, b, strict=False))


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    """Multiples of a nice step covering [vmin, vmax], about target of them."""
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    step = nice_number(nice_number(vmax - vmin, round_result=False) / max(target - 1, 1), round_result=True)
    first, last = math.floor(vmin / step), math.ceil(vmax / step)
    # Integer multiples of step do not accumulate drift; residues near 0 are snapped.
    ticks = np.arange(first, last + 1, dtype=np.float64) * step
    ticks[np.abs(ticks) < step * 1e-9] = 0.0
    return ticks


def ticks_within_range(ticks: np.ndarray, *, vmin: float, vmax: float) -> np.ndarray:
    if ticks.size == 0:
        return ticks
    step = abs(float(ticks[1] - ticks[0])) if ticks.size > 1 else abs(vmax - vmin)
    eps = max(1e-12, step * 1e-6)
    return ticks[(ticks >= vmin - eps) & (ticks <= vmax + eps)]


def format_tick(value: float, *, step: float | None = None) -> str:
    """Label for value; step fixes the number of decimals shown."""
    if not math.isfinite(value):
        return str(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    magnitude = abs(value)
    if magnitude != 0 and (magnitude >= 1e6 or magnitude < 1e-6 or (step is not None and abs(step) < 1e-4)):
        return f"{value:.4e}"

    decimals = _step_decimals(step) if step is not None else 6
    text = f"{Decimal(str(value)).quantize(Decimal(1).scaleb(-decimals)):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    step = abs(float(ticks[1] - ticks[0])) if ticks.size > 1 else None
    return [format_tick(float(v), step=step) for v in ticks]


def nice_number(value: float, *, round_result: bool) -> float:
    """1, 2, 5 or 10 times the power of ten at or below value.

    With round_result the closest of these is taken, otherwise the smallest
    one not below value.
    """
    scale = 10.0 ** math.floor(math.log10(value))
    frac = value / scale
    if round_result:
        nice = next((n for limit, n in ((1.5, 1.0), (3.0, 2.0), (7.0, 5.0)) if frac < limit), 10.0)
    else:
        nice = next((n for n in (1.0, 2.0, 5.0) if frac <= n), 10.0)
    return nice * scale


def _step_decimals(step: float) -> int:
    if not (math.isfinite(step) and step > 0):
        return 6
    exponent = Decimal(str(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
