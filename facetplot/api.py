from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from facetplot.diagnostics import Diagnostics
from facetplot.facet import Plot
from facetplot.style import Style, default_style, load_style, style_from_mapping


def plot(
    rows: int = 1,
    cols: int = 1,
    *,
    free_x: bool = False,
    free_y: bool = False,
    title: str = "",
    style: Style | Mapping[str, Any] | str | Path | None = None,
    base_font_px: float = 12.0,
    verbosity: int = 0,
    logger: logging.Logger | None = None,
) -> Plot:
    """Create a rows x cols faceted plot.

    style may be a Style, a mapping of overrides for the default style or
    the path of a TOML file holding such overrides.
    """
    if base_font_px <= 0:
        raise ValueError("base_font_px must be > 0")
    if style is None:
        resolved = default_style(base_font_px)
    elif isinstance(style, Style):
        resolved = style
    elif isinstance(style, (str, Path)):
        resolved = load_style(style)
    else:
        resolved = style_from_mapping(style, base=default_style(base_font_px))

    diagnostics = Diagnostics(verbosity=verbosity)
    if logger is not None:
        diagnostics.logger = logger
    return Plot(rows, cols, free_x=free_x, free_y=free_y, title=title, style=resolved, diagnostics=diagnostics)
