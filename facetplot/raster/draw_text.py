"""Text rasterisation.

Strings are rendered by Pillow into an 8 bit coverage mask, turned by a
multiple of 90 degrees and alpha composited onto the RGBA canvas.
"""

from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from facetplot.palette import RGBA

LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 12.0

# Tried in order after the requested family.
FALLBACK_FAMILIES = ("DejaVu Sans", "Liberation Sans", "Helvetica", "Arial", "FreeSans")
FONT_DIRS = (
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path.home() / "Library" / "Fonts",
)
_STYLED = ("bold", "italic", "oblique", "mono", "condensed")
_TURNS = {
    1: Image.Transpose.ROTATE_90,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_270,
}

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Composite text onto dst with the top-left corner of its (turned) box at (x, y)."""
    turns = _quarter_turns(rotate_deg)
    if not text or color[3] == 0:
        return
    mask = _coverage(text, font_family, float(font_size_px), turns)
    _composite(dst, x, y, mask, color)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> tuple[int, int]:
    """Pixel size (width, height) of text; an empty string is 0 wide and one line high."""
    turns = _quarter_turns(rotate_deg)
    font = font_for(font_family, float(font_size_px))
    if text:
        left, top, right, bottom = font.getbbox(text)
        w, h = max(0, int(right - left)), max(1, int(bottom - top))
    else:
        w, h = 0, _line_height(font)
    return (h, w) if turns % 2 else (w, h)


@lru_cache(maxsize=64)
def font_for(font_family: str, font_size_px: float) -> Font:
    size = max(1, round(font_size_px))
    path = find_font(font_family)
    if path is not None:
        try:
            return ImageFont.truetype(str(path), size=size)
        except OSError as exc:
            LOGGER.debug("cannot load %s (%s), using the default font", path, exc)
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def find_font(family: str) -> Path | None:
    """Installed regular-weight font file for family, or for the first fallback found."""
    files = [
        path
        for base in FONT_DIRS
        if base.is_dir()
        for path in base.rglob("*")
        if path.suffix.lower() in (".ttf", ".otf")
    ]
    for name in (family, *FALLBACK_FAMILIES):
        key = _font_key(name)
        if not key:
            continue
        regular = [p for p in files if key in _font_key(p.stem) and not any(s in p.stem.lower() for s in _STYLED)]
        if regular:
            return min(regular, key=lambda p: (len(p.stem), str(p)))
    return None


def _font_key(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())


def _line_height(font: Font) -> int:
    if isinstance(font, ImageFont.FreeTypeFont):
        ascent, descent = font.getmetrics()
        return max(1, ascent + descent)
    _, top, _, bottom = font.getbbox("Ag")
    return max(1, int(bottom - top))


def _quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4


@lru_cache(maxsize=512)
def _coverage(text: str, font_family: str, font_size_px: float, turns: int) -> np.ndarray:
    font = font_for(font_family, font_size_px)
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    if turns:
        image = image.transpose(_TURNS[turns])
    # Read-only, the array is shared through the cache.
    return np.asarray(image, dtype=np.uint8)


def _composite(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    coverage = mask[y0 - y : y1 - y, x0 - x : x1 - x]
    layer = np.empty(coverage.shape + (4,), dtype=np.uint8)
    layer[:, :, :3] = color[:3]
    layer[:, :, 3] = (coverage.astype(np.uint16) * color[3] // 255).astype(np.uint8)

    patch = np.ascontiguousarray(dst[y0:y1, x0:x1])
    blended = Image.alpha_composite(Image.fromarray(patch), Image.fromarray(layer))
    dst[y0:y1, x0:x1] = np.asarray(blended)
