"""
Theme/Sketch Engine Package

Smooth shape formulas, the seeded hand-drawn generator and per-theme
path dispatch with graceful fallback.
"""

from .shapes import ShapeSpec, generate_default_path, generate_complex_shape_path, rounded_rect_path
from .rough import RoughGenerator
from .strokes import THEME_STROKE_RANGES, common_to_actual_stroke_width, actual_to_common_stroke_width
from .engine import (
    THEMES,
    StrokeProps,
    seed_from_id,
    normalize_theme,
    get_stroke_props,
    generate_path,
    generate_themed_path,
)

__all__ = [
    "ShapeSpec",
    "generate_default_path",
    "generate_complex_shape_path",
    "rounded_rect_path",
    "RoughGenerator",
    "THEME_STROKE_RANGES",
    "common_to_actual_stroke_width",
    "actual_to_common_stroke_width",
    "THEMES",
    "StrokeProps",
    "seed_from_id",
    "normalize_theme",
    "get_stroke_props",
    "generate_path",
    "generate_themed_path",
]
