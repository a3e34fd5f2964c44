from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from facetplot.errors import PlotConfigError
from facetplot.palette import BLACK, RGBA, WHITE

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class TextStyle:
    color: RGBA = BLACK
    size_px: float = 12.0
    # Alignment of the text box relative to the anchor point:
    # x_align 0 left, 0.5 centre, 1 right; y_align 0 top, 0.5 centre, 1 bottom.
    x_align: float = 0.0
    y_align: float = 0.0
    rotate_deg: int = 0


@dataclass(frozen=True)
class LineStyle:
    color: RGBA = BLACK
    width: float = 1.0
    dashes: tuple[int, ...] = ()


@dataclass(frozen=True)
class GlyphStyle:
    color: RGBA = BLACK
    radius: float = 3.0
    shape: str = "circle"


@dataclass(frozen=True)
class PanelStyle:
    background: RGBA = (235, 235, 235, 255)
    pad_x: float = 6.0
    pad_y: float = 6.0


@dataclass(frozen=True)
class StripStyle:
    background: RGBA = (204, 204, 204, 255)
    size: float = 24.0
    text: TextStyle = field(default_factory=lambda: TextStyle(x_align=0.5, y_align=0.5))


@dataclass(frozen=True)
class GridStyle:
    major: LineStyle | None = field(default_factory=lambda: LineStyle(color=WHITE, width=1.0))
    minor: LineStyle | None = field(default_factory=lambda: LineStyle(color=WHITE, width=0.5))


@dataclass(frozen=True)
class TickStyle:
    line: LineStyle = field(default_factory=lambda: LineStyle(color=(17, 17, 17, 255), width=1.0))
    length: float = 5.0


@dataclass(frozen=True)
class AxisStyle:
    title: TextStyle = field(default_factory=TextStyle)
    title_size: float = 24.0
    label: TextStyle = field(default_factory=TextStyle)
    label_size: float = 20.0
    major_tick: TickStyle = field(default_factory=TickStyle)
    minor_tick: TickStyle | None = None
    expand_relative: float = 0.05
    expand_absolute: float = 0.0


@dataclass(frozen=True)
class LegendStyle:
    title: TextStyle = field(default_factory=TextStyle)
    label: TextStyle = field(default_factory=lambda: TextStyle(y_align=0.5))
    discrete_size: float = 20.0
    discrete_pad: float = 4.0
    continuous_size: float = 20.0
    continuous_length: float = 150.0
    tick: TickStyle = field(default_factory=lambda: TickStyle(line=LineStyle(color=BLACK), length=3.0))
    tick_mirror: bool = True
    swatch_background: RGBA = (238, 238, 238, 255)


@dataclass(frozen=True)
class GeomDefaults:
    color: RGBA = (30, 30, 30, 255)
    size: float = 3.0
    line_width: float = 1.5


@dataclass(frozen=True)
class Style:
    background: RGBA = WHITE
    title: TextStyle = field(default_factory=TextStyle)
    title_height: float = 36.0
    panel: PanelStyle = field(default_factory=PanelStyle)
    h_strip: StripStyle = field(default_factory=StripStyle)
    v_strip: StripStyle = field(default_factory=StripStyle)
    grid: GridStyle = field(default_factory=GridStyle)
    x_axis: AxisStyle = field(default_factory=AxisStyle)
    y_axis: AxisStyle = field(default_factory=AxisStyle)
    legend: LegendStyle = field(default_factory=LegendStyle)
    geom_default: GeomDefaults = field(default_factory=GeomDefaults)


def default_style(base_font_px: float = 12.0) -> Style:
    """A light ggplot2-like style.

    base_font_px is used for axis titles and strip labels, the plot title is
    a bit bigger and tick labels a bit smaller.
    """
    if base_font_px <= 0:
        raise ValueError("base_font_px must be > 0")
    title_px = round(base_font_px * 1.2)
    tick_px = round(base_font_px / 1.2)
    base = TextStyle(color=BLACK, size_px=base_font_px)

    return Style(
        background=WHITE,
        title=TextStyle(color=BLACK, size_px=title_px, x_align=0.5, y_align=0.0),
        title_height=round(base_font_px * 3),
        panel=PanelStyle(pad_x=round(base_font_px * 0.5), pad_y=round(base_font_px * 0.5)),
        h_strip=StripStyle(size=round(base_font_px * 2), text=replace(base, x_align=0.5, y_align=0.5)),
        v_strip=StripStyle(
            size=round(base_font_px * 2.5),
            text=replace(base, x_align=0.5, y_align=0.5, rotate_deg=270),
        ),
        x_axis=AxisStyle(
            title=replace(base, x_align=0.5, y_align=1.0),
            title_size=round(base_font_px * 2),
            label=TextStyle(color=BLACK, size_px=tick_px, x_align=0.5, y_align=0.0),
            label_size=round(tick_px * 2),
        ),
        y_axis=AxisStyle(
            title=replace(base, x_align=0.0, y_align=0.5, rotate_deg=90),
            title_size=round(base_font_px * 2),
            label=TextStyle(color=BLACK, size_px=tick_px, x_align=1.0, y_align=0.5),
            label_size=round(tick_px * 3.5),
        ),
        legend=LegendStyle(
            title=replace(base, x_align=0.0, y_align=0.0),
            label=TextStyle(color=BLACK, size_px=tick_px, x_align=0.0, y_align=0.5),
        ),
    )


def style_from_mapping(overrides: Mapping[str, Any] | None = None, *, base: Style | None = None) -> Style:
    """Merge nested overrides (section -> field -> value) into a style.

    Colors may be given as "#RRGGBB" / "#RRGGBBAA" strings or RGBA sequences.
    Unknown keys raise PlotConfigError.
    """
    style = base if base is not None else default_style()
    if not overrides:
        return style
    return _merge(style, overrides, "style")


def load_style(path: str | Path) -> Style:
    """Read style overrides from a TOML file and merge them into the defaults."""
    style_path = Path(path)
    if not style_path.exists():
        raise FileNotFoundError(f"style file not found: {style_path}")
    with style_path.open("rb") as f:
        raw = tomllib.load(f)
    base_font_px = raw.pop("base_font_px", None)
    base = default_style(float(base_font_px)) if base_font_px is not None else default_style()
    return style_from_mapping(raw, base=base)


def _merge(obj: Any, overrides: Mapping[str, Any], path: str) -> Any:
    known = {f.name for f in fields(obj)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            raise PlotConfigError(f"Unknown style key: {path}.{key}")
        current = getattr(obj, key)
        key_path = f"{path}.{key}"
        if is_dataclass(current):
            if not isinstance(value, Mapping):
                raise PlotConfigError(f"Style key `{key_path}` must be a table")
            changes[key] = _merge(current, value, key_path)
        elif key == "color" or key == "background" or key.endswith("_color") or key.endswith("_background"):
            changes[key] = parse_color(value, key_path)
        elif key == "dashes":
            changes[key] = tuple(int(v) for v in value)
        elif isinstance(current, bool):
            if not isinstance(value, bool):
                raise PlotConfigError(f"Style key `{key_path}` must be a boolean")
            changes[key] = value
        elif isinstance(current, (int, float)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise PlotConfigError(f"Style key `{key_path}` must be a number")
            changes[key] = type(current)(value)
        else:
            changes[key] = value
    return replace(obj, **changes)


def parse_color(value: Any, name: str = "color") -> RGBA:
    if isinstance(value, str):
        if not _HEX_COLOR.match(value):
            raise PlotConfigError(f"Style key `{name}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        digits = value[1:]
        if len(digits) == 6:
            digits += "ff"
        r, g, b, a = (int(digits[i : i + 2], 16) for i in range(0, 8, 2))
        return (r, g, b, a)
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        channels = [int(v) for v in value]
        if any(c < 0 or c > 255 for c in channels):
            raise PlotConfigError(f"Style key `{name}` channels must be in [0, 255]")
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise PlotConfigError(f"Style key `{name}` must be a hex color or an RGB(A) sequence")

