"""
Module: engine.surfaces.base

Purpose:
    Abstract target surface. Renderers emit paint calls in page pixels
    with y pointing down; each surface maps them onto its own backend
    (display list, Pillow bitmap or ReportLab canvas).

Key Classes:
    - Surface: Abstract paint-call interface
    - TileShape: One path inside a pattern tile
    - PatternTile: Repeating pattern cell for fill_pattern()

Key Functions:
    - reconcile_measurer(): Measurer whose metrics match the surface fonts

Dependencies:
    - PIL.Image: Image payloads for draw_image()
    - engine.text: Font registry and measurers

Used By:
    - engine.render.elements, engine.render.background
    - engine.compositor
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from PIL import Image

from scrapbook_toolkit.core.models.styles import RichTextStyle
from scrapbook_toolkit.core.models.theme import ShadowParams
from scrapbook_toolkit.engine.text.fonts import FontRegistry
from scrapbook_toolkit.engine.text.measure import HeuristicMeasurer, TextMeasurer

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class TileShape:
    """Path painted inside a pattern tile."""
    path: str
    stroke: Optional[str] = None
    stroke_width: float = 1.0
    fill: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PatternTile:
    """
    Square repeating cell.

    Attributes:
        pattern: Pattern id the tile was built for
        size: Tile edge in page pixels
        shapes: Paths drawn in tile coordinates (0..size)
    """
    pattern: str
    size: float
    shapes: Tuple[TileShape, ...]


class Surface(ABC):
    """
    Target for paint calls.

    All coordinates are page pixels, relative to the innermost transform
    pushed with push_transform(). Colours are CSS strings; None means
    "do not paint".
    """

    def __init__(self, fonts: Optional[FontRegistry] = None):
        self.fonts = fonts if fonts is not None else FontRegistry()

    @abstractmethod
    def begin_page(self, width: float, height: float) -> None:
        """Start a page of the given size."""

    @abstractmethod
    def end_page(self) -> None:
        """Finish the current page."""

    def begin_element(self, element_id: str) -> None:
        """Mark the start of one element's paint calls."""

    def end_element(self) -> None:
        """Mark the end of the current element's paint calls."""

    @abstractmethod
    def push_transform(self, x: float, y: float, rotation: float = 0.0) -> None:
        """Translate to (x, y), then rotate clockwise by `rotation` degrees."""

    @abstractmethod
    def pop_transform(self) -> None:
        """Restore the transform saved by the matching push_transform()."""

    @abstractmethod
    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: str,
        opacity: float = 1.0,
        corner_radius: float = 0.0,
    ) -> None:
        """Fill an axis-aligned (optionally rounded) rectangle."""

    @abstractmethod
    def draw_path(
        self,
        path: str,
        *,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
        fill: Optional[str] = None,
        opacity: float = 1.0,
        dash: Sequence[float] = (),
        line_cap: str = "butt",
        line_join: str = "miter",
        shadow: Optional[ShadowParams] = None,
    ) -> None:
        """Fill (even-odd) and then stroke SVG path data."""

    @abstractmethod
    def draw_polyline(
        self,
        points: Sequence[Point],
        color: str,
        width: float = 1.0,
        opacity: float = 1.0,
        dash: Sequence[float] = (),
    ) -> None:
        """Stroke an open polyline."""

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float, style: RichTextStyle) -> None:
        """Draw `text` with its left edge at x and its baseline at y."""

    @abstractmethod
    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        height: float,
        opacity: float = 1.0,
        corner_radius: float = 0.0,
    ) -> None:
        """Draw an image scaled into the given box."""

    def fill_pattern(
        self,
        tile: PatternTile,
        x: float,
        y: float,
        width: float,
        height: float,
        opacity: float = 1.0,
    ) -> None:
        """
        Repeat `tile` over a rectangle.

        The generic implementation paints every tile through draw_path();
        backends with native tiling override it. Tiles crossing the right
        or bottom edge are still painted whole.
        """
        if tile.size <= 0:
            return
        columns = int(width // tile.size) + 1
        rows = int(height // tile.size) + 1
        for row in range(rows):
            for column in range(columns):
                self.push_transform(x + column * tile.size, y + row * tile.size)
                for shape in tile.shapes:
                    self.draw_path(
                        shape.path,
                        stroke=shape.stroke,
                        stroke_width=shape.stroke_width,
                        fill=shape.fill,
                        opacity=opacity,
                    )
                self.pop_transform()

    def create_measurer(self) -> TextMeasurer:
        """Measurer matching the fonts this surface draws with."""
        return HeuristicMeasurer()


def reconcile_measurer(surface: Surface, measurer: Optional[TextMeasurer] = None) -> TextMeasurer:
    """
    Pick the measurer for laying out text on `surface`.

    An explicitly supplied measurer wins (the live environment passes the
    one it already uses); otherwise the surface supplies a measurer backed
    by the same font files it draws with.
    """
    if measurer is not None:
        return measurer
    chosen = surface.create_measurer()
    logger.debug(f"Using {type(chosen).__name__} for {type(surface).__name__}")
    return chosen
