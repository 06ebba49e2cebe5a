"""
Module: page

Purpose:
    Fully-resolved page description handed to the compositor: page size,
    background, element list, theme and palette. Resolution of book-level
    versus page-level overrides happens upstream.

Key Classes:
    - PageDescription: One page to render
    - BackgroundSpec: Page background (color, pattern or image)
    - PatternKind: Procedural pattern catalogue
    - ImageFit: Background image fit modes
    - RejectedElement: Element dropped during parsing, kept for diagnostics

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .elements.PageElement

Used By:
    - core.utils.serialization
    - engine.render.background
    - engine.compositor
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .elements import PageElement


class BackgroundKind(str, Enum):
    """Exactly one background kind is active per page."""
    COLOR = "color"
    PATTERN = "pattern"
    IMAGE = "image"


class PatternKind(str, Enum):
    """Procedural background patterns."""
    DOTS = "dots"
    GRID = "grid"
    DIAGONAL_LINES = "diagonal-lines"
    CROSS_HATCH = "cross-hatch"
    WAVES = "waves"
    HEXAGONS = "hexagons"

    @classmethod
    def parse(cls, value: str) -> "PatternKind":
        """Parse a pattern id, accepting the short catalogue ids."""
        aliases = {
            "diagonal": cls.DIAGONAL_LINES,
            "cross": cls.CROSS_HATCH,
            "hexagon": cls.HEXAGONS,
        }
        if value in aliases:
            return aliases[value]
        return cls(value)


class ImageFit(str, Enum):
    """How a background image fills the page."""
    COVER = "cover"
    CONTAIN = "contain"
    STRETCH = "stretch"
    REPEAT = "repeat"


@dataclass(frozen=True, slots=True)
class BackgroundSpec:
    """
    Page background.

    When `enabled` is False the background paints nothing and no other
    field is consulted.

    Attributes:
        kind: color | pattern | image
        enabled: Master switch
        color: Solid colour (color kind) or base colour under a pattern
            or image (palette pageBackground when None)
        opacity: Opacity of the solid/base colour or of the image
        pattern: Pattern id (pattern kind)
        pattern_color: Pattern stroke/fill colour
        pattern_size: Tile scale (tile edge = 20 * size)
        pattern_stroke_width: Stroke width of line patterns
        pattern_opacity: Opacity of the pattern layer
        background_color_enabled: Paint the base colour under a pattern
        image_src: Image source key (image kind)
        image_fit: Fit mode
        image_position: Anchor for contain mode
    """
    kind: BackgroundKind = BackgroundKind.COLOR
    enabled: bool = True
    color: Optional[str] = None
    opacity: float = 1.0
    pattern: Optional[PatternKind] = None
    pattern_color: Optional[str] = None
    pattern_size: float = 1.0
    pattern_stroke_width: float = 1.0
    pattern_opacity: float = 1.0
    background_color_enabled: bool = True
    image_src: Optional[str] = None
    image_fit: ImageFit = ImageFit.COVER
    image_position: str = "top-left"


DISABLED_BACKGROUND = BackgroundSpec(enabled=False)


@dataclass(frozen=True, slots=True)
class RejectedElement:
    """Element that could not be parsed, with the reason."""
    element_id: str
    reason: str


@dataclass(frozen=True)
class PageDescription:
    """
    One fully-resolved page.

    Attributes:
        width: Page width in pixels
        height: Page height in pixels
        background: Page background
        elements: Elements in list order (painting order comes from z_index)
        theme: Page theme id
        palette_id: Colour palette id
        page_number: Optional page number for diagnostics
        rejected: Elements dropped during parsing
    """
    width: float
    height: float
    background: BackgroundSpec = BackgroundSpec()
    elements: Tuple[PageElement, ...] = ()
    theme: str = "default"
    palette_id: Optional[str] = None
    page_number: Optional[int] = None
    rejected: Tuple[RejectedElement, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Page size must be positive: {self.width}x{self.height}")
