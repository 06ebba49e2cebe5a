"""
Module: engine.surfaces.recording

Purpose:
    Surface that records paint calls as a display list instead of
    drawing them. Used by the live scene (one list per element) and by
    tests that assert on paint order.

Key Classes:
    - PaintCall: One recorded call (name + keyword arguments)
    - RecordingSurface: Appends PaintCalls; replays them onto any surface

Used By:
    - engine.compositor.scene
    - tests
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from PIL import Image

from scrapbook_toolkit.core.models.styles import RichTextStyle
from scrapbook_toolkit.core.models.theme import ShadowParams
from scrapbook_toolkit.engine.text.fonts import FontRegistry
from scrapbook_toolkit.engine.text.measure import TextMeasurer

from .base import PatternTile, Point, Surface


@dataclass(frozen=True)
class PaintCall:
    """
    Recorded paint call.

    Attributes:
        name: Surface method name
        args: Keyword arguments as (name, value) pairs in call order
        element_id: Element that was being rendered, if any
    """
    name: str
    args: Tuple[Tuple[str, Any], ...] = ()
    element_id: Optional[str] = None

    def get(self, key: str, default: Any = None) -> Any:
        for name, value in self.args:
            if name == key:
                return value
        return default

    def apply(self, surface: Surface) -> None:
        """Re-issue this call on another surface."""
        getattr(surface, self.name)(**dict(self.args))


class RecordingSurface(Surface):
    """
    Display-list surface.

    Example:
        >>> surface = RecordingSurface()
        >>> surface.begin_page(100, 100)
        >>> surface.fill_rect(0, 0, 10, 10, "#ff0000")
        >>> [call.name for call in surface.calls]
        ['begin_page', 'fill_rect']
    """

    def __init__(self, fonts: Optional[FontRegistry] = None, measurer: Optional[TextMeasurer] = None):
        super().__init__(fonts)
        self.calls: List[PaintCall] = []
        self.current_element: Optional[str] = None
        self._measurer = measurer

    def _record(self, name: str, **kwargs: Any) -> None:
        self.calls.append(PaintCall(name=name, args=tuple(kwargs.items()), element_id=self.current_element))

    def clear(self) -> None:
        self.calls.clear()

    def names(self) -> List[str]:
        return [call.name for call in self.calls]

    def calls_for(self, element_id: str) -> List[PaintCall]:
        return [call for call in self.calls if call.element_id == element_id]

    def element_order(self) -> List[str]:
        """Element ids in the order they were first painted."""
        seen: List[str] = []
        for call in self.calls:
            if call.element_id is not None and call.element_id not in seen:
                seen.append(call.element_id)
        return seen

    def replay(self, surface: Surface) -> None:
        for call in self.calls:
            call.apply(surface)

    def create_measurer(self) -> TextMeasurer:
        if self._measurer is not None:
            return self._measurer
        return super().create_measurer()

    def begin_element(self, element_id: str) -> None:
        self.current_element = element_id

    def end_element(self) -> None:
        self.current_element = None

    # Paint calls

    def begin_page(self, width: float, height: float) -> None:
        self._record("begin_page", width=width, height=height)

    def end_page(self) -> None:
        self._record("end_page")

    def push_transform(self, x: float, y: float, rotation: float = 0.0) -> None:
        self._record("push_transform", x=x, y=y, rotation=rotation)

    def pop_transform(self) -> None:
        self._record("pop_transform")

    def fill_rect(self, x, y, width, height, color, opacity=1.0, corner_radius=0.0) -> None:
        self._record(
            "fill_rect", x=x, y=y, width=width, height=height,
            color=color, opacity=opacity, corner_radius=corner_radius,
        )

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
        self._record(
            "draw_path", path=path, stroke=stroke, stroke_width=stroke_width, fill=fill,
            opacity=opacity, dash=tuple(dash), line_cap=line_cap, line_join=line_join, shadow=shadow,
        )

    def draw_polyline(self, points: Sequence[Point], color: str, width: float = 1.0,
                      opacity: float = 1.0, dash: Sequence[float] = ()) -> None:
        self._record(
            "draw_polyline", points=tuple(points), color=color, width=width,
            opacity=opacity, dash=tuple(dash),
        )

    def draw_text(self, text: str, x: float, y: float, style: RichTextStyle) -> None:
        self._record("draw_text", text=text, x=x, y=y, style=style)

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float,
                   opacity: float = 1.0, corner_radius: float = 0.0) -> None:
        self._record(
            "draw_image", image=image, x=x, y=y, width=width, height=height,
            opacity=opacity, corner_radius=corner_radius,
        )

    def fill_pattern(self, tile: PatternTile, x: float, y: float, width: float, height: float,
                     opacity: float = 1.0) -> None:
        self._record("fill_pattern", tile=tile, x=x, y=y, width=width, height=height, opacity=opacity)
