"""
Render Package

Element and background renderers plus the colour, palette, crop and
ruled-line helpers they share.
"""

from .colors import parse_color, resolve_rgba, with_opacity, is_transparent, to_hex
from .palette import DEFAULT_PALETTE_PARTS, get_palette_part_color, resolve_color
from .crop import CropRect, calculate_crop, parse_clip_position
from .paint import paint_theme_result
from .ruled_lines import ruled_line_ys, render_ruled_lines
from .background import BackgroundRenderer, build_pattern_tile
from .elements import ElementContext, ElementRenderer, check_geometry, qna_background

__all__ = [
    "parse_color",
    "resolve_rgba",
    "with_opacity",
    "is_transparent",
    "to_hex",
    "DEFAULT_PALETTE_PARTS",
    "get_palette_part_color",
    "resolve_color",
    "CropRect",
    "calculate_crop",
    "parse_clip_position",
    "paint_theme_result",
    "ruled_line_ys",
    "render_ruled_lines",
    "BackgroundRenderer",
    "build_pattern_tile",
    "ElementContext",
    "ElementRenderer",
    "check_geometry",
    "qna_background",
]
