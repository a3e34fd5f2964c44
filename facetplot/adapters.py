from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from facetplot.errors import PlotDataError


def as_float_array(value: Any, *, label: str) -> np.ndarray:
    """Coerce a 1-D array-like to float64; None entries become NaN."""
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _to_float64(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _to_float64(np.asarray(value, dtype=object).reshape(-1), label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def check_lengths(**arrays: np.ndarray | None) -> int:
    """Common length of the given arrays; None entries are ignored."""
    n: int | None = None
    first = ""
    for name, arr in arrays.items():
        if arr is None:
            continue
        if n is None:
            n, first = arr.shape[0], name
        elif arr.shape[0] != n:
            raise PlotDataError(f"{first} and {name} length mismatch: {n} != {arr.shape[0]}")
    return 0 if n is None else n


def _to_float64(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in "iufb":
        return arr.astype(np.float64, copy=False)
    # Object columns: None is a missing value, anything float() accepts
    # (Decimal, numeric strings, numpy scalars) is a number.
    values = []
    for i, raw in enumerate(arr.tolist()):
        try:
            values.append(np.nan if raw is None else float(raw))
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return np.asarray(values, dtype=np.float64)
