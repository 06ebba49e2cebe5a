"""
Text Layout Package

Font descriptors, measurement capabilities and pure text layout.
"""

from .fonts import FontRegistry, FontSpec, build_font, parse_font, resolve_font_family
from .measure import (
    TextMeasurer,
    HeuristicMeasurer,
    PillowMeasurer,
    ReportLabMeasurer,
    DeferredMeasurer,
)
from .layout import (
    get_line_height,
    measure_text,
    calculate_text_x,
    wrap_text,
    get_baseline_offset,
    create_text_layout,
    RULED_LINE_BASELINE_OFFSET,
)

__all__ = [
    "FontRegistry",
    "FontSpec",
    "build_font",
    "parse_font",
    "resolve_font_family",
    "TextMeasurer",
    "HeuristicMeasurer",
    "PillowMeasurer",
    "ReportLabMeasurer",
    "DeferredMeasurer",
    "get_line_height",
    "measure_text",
    "calculate_text_x",
    "wrap_text",
    "get_baseline_offset",
    "create_text_layout",
    "RULED_LINE_BASELINE_OFFSET",
]
