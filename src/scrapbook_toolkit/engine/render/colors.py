"""
Module: engine.render.colors

Purpose:
    Colour parsing and opacity handling shared by every surface. Colours
    arrive as CSS strings (hex, rgb(), rgba() with a 0-1 alpha, hsl(),
    named colours or "transparent") and leave as RGBA tuples.

Key Functions:
    - parse_color(): CSS colour -> (r, g, b, a) with a in 0-255
    - with_opacity(): Scale a colour's alpha
    - is_transparent(): True for None/"transparent"/zero alpha
    - to_hex(): (r, g, b[, a]) -> "#rrggbb"

Dependencies:
    - PIL.ImageColor: Named, hex, rgb() and hsl() parsing

Used By:
    - engine.surfaces.raster, engine.surfaces.pdf
    - engine.render.background, engine.render.elements
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Optional, Tuple

from PIL import ImageColor

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)
FALLBACK_COLOR: RGBA = (0, 0, 0, 255)

_RGBA_RE = re.compile(
    r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([\d.]+)\s*\)$",
    re.IGNORECASE,
)


@lru_cache(maxsize=512)
def parse_color(color: Optional[str]) -> RGBA:
    """
    Parse a CSS colour string.

    Unparseable colours log a warning and render black rather than
    failing the element.

    Example:
        >>> parse_color("#f00"), parse_color("rgba(0, 0, 255, 0.5)")
        ((255, 0, 0, 255), (0, 0, 255, 128))
    """
    if color is None:
        return TRANSPARENT
    value = color.strip()
    if not value or value.lower() == "transparent":
        return TRANSPARENT

    match = _RGBA_RE.match(value)
    if match:
        r, g, b = (min(255, int(match.group(i))) for i in (1, 2, 3))
        alpha = float(match.group(4))
        if alpha <= 1.0:
            alpha *= 255
        return (r, g, b, max(0, min(255, round(alpha))))

    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        logger.warning(f"Unknown colour {color!r}, using black")
        return FALLBACK_COLOR
    if len(rgb) == 4:
        return rgb  # type: ignore[return-value]
    return (rgb[0], rgb[1], rgb[2], 255)


def with_opacity(color: RGBA, opacity: float) -> RGBA:
    """Multiply the alpha channel by `opacity` (clamped to 0-1)."""
    opacity = max(0.0, min(1.0, opacity))
    return (color[0], color[1], color[2], round(color[3] * opacity))


def resolve_rgba(color: Optional[str], opacity: float = 1.0) -> RGBA:
    """parse_color + with_opacity."""
    return with_opacity(parse_color(color), opacity)


def is_transparent(color: Optional[str]) -> bool:
    return parse_color(color)[3] == 0


def to_hex(color: Tuple[int, ...]) -> str:
    return "#{:02x}{:02x}{:02x}".format(color[0], color[1], color[2])
