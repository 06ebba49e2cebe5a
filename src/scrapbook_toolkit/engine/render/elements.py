"""
Module: engine.render.elements

Purpose:
    Maps one page element to surface paint calls. Every element is painted
    in its own local coordinate frame: the renderer pushes a transform to
    the element origin (rotating about it), paints, and pops.

    Paint order inside text-bearing elements:
        background -> ruled lines -> border -> text runs

Key Classes:
    - ElementContext: Page-level inputs shared by all elements of a page
    - ElementRenderer: ElementKind -> handler dispatch

Key Functions:
    - check_geometry(): Reject non-finite or negative element geometry
    - qna_background(): Background colour chain for QnA elements

Dependencies:
    - engine.text / engine.qna: Layout
    - engine.themes: Themed paths
    - engine.images: Photo loading

Used By:
    - engine.compositor
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Callable, Dict, List, Optional, Tuple

from scrapbook_toolkit.core.models.elements import (
    BorderConfig,
    ElementKind,
    FillConfig,
    ImageElement,
    PageElement,
    QnAElement,
    RuledLinesConfig,
    RuledLinesTarget,
    ShapeElement,
    ShapeKind,
    TextElement,
)
from scrapbook_toolkit.core.models.layout import Area, TextRun
from scrapbook_toolkit.engine.errors import ImageLoadError, MalformedElementError
from scrapbook_toolkit.engine.images.provider import ImageProvider
from scrapbook_toolkit.engine.qna.composer import layout_for_element
from scrapbook_toolkit.engine.registry import Palette
from scrapbook_toolkit.engine.surfaces.base import Surface
from scrapbook_toolkit.engine.text.layout import create_text_layout
from scrapbook_toolkit.engine.text.measure import HeuristicMeasurer, TextMeasurer
from scrapbook_toolkit.engine.themes import RoughGenerator, ShapeSpec, generate_themed_path
from scrapbook_toolkit.engine.themes.engine import GeneratorFactory

from .colors import is_transparent
from .crop import calculate_crop
from .paint import paint_theme_result
from .palette import resolve_color
from .ruled_lines import DEFAULT_RULED_LINE_COLOR, render_ruled_lines

logger = logging.getLogger(__name__)

DEFAULT_FRAME_COLOR = "#1f2937"
DEFAULT_BORDER_COLOR = "#1f2937"
DEFAULT_FILL_COLOR = "#ffffff"

# Kind -> ElementRenderer method name
HANDLER_NAMES = MappingProxyType({
    ElementKind.RECT: "_render_shape",
    ElementKind.CIRCLE: "_render_shape",
    ElementKind.LINE: "_render_shape",
    ElementKind.DECORATIVE_SHAPE: "_render_shape",
    ElementKind.IMAGE: "_render_image",
    ElementKind.FREE_TEXT: "_render_text",
    ElementKind.QNA_INLINE: "_render_qna",
    ElementKind.QNA_BLOCK: "_render_qna",
})


@dataclass(frozen=True, slots=True)
class ElementContext:
    """
    Page-level inputs shared by every element of one page.

    Attributes:
        theme: Page theme, used when an element names none
        palette: Resolved page palette (None for palette-less rendering)
        measurer: Text measurement capability reconciled with the surface
    """
    theme: Optional[str] = None
    palette: Optional[Palette] = None
    measurer: TextMeasurer = HeuristicMeasurer()


def check_geometry(element: PageElement) -> None:
    """
    Raises:
        MalformedElementError: If position, size or rotation is not finite,
            or the size is negative
    """
    values = {
        "x": element.x,
        "y": element.y,
        "width": element.width,
        "height": element.height,
        "rotation": element.rotation,
    }
    for name, value in values.items():
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise MalformedElementError(element.id, f"{name} is not a finite number: {value!r}")
    if element.width < 0 or element.height < 0:
        raise MalformedElementError(element.id, f"negative size {element.width}x{element.height}")
    if not 0.0 <= element.opacity <= 1.0:
        raise MalformedElementError(element.id, f"opacity out of range: {element.opacity}")


def qna_background(element: QnAElement, palette: Optional[Palette] = None) -> Optional[Tuple[str, float]]:
    """
    Background colour and opacity for a QnA element.

    Explicit element background -> question style background -> answer
    style background -> none. A disabled element background paints
    nothing, style colours included. An enabled background without a
    colour of its own and no style colour takes the palette qnaBackground
    part.
    """
    fill = element.background
    if fill is not None and not fill.enabled:
        return None
    if fill is not None and fill.color and not is_transparent(fill.color):
        return fill.color, fill.opacity
    opacity = fill.opacity if fill is not None else 1.0
    for style in (element.question_style, element.answer_style):
        if style.background_color and not is_transparent(style.background_color):
            return style.background_color, opacity
    if fill is not None and fill.color is None:
        color = resolve_color(None, palette, "qnaBackground", "surface", None)
        if color:
            return color, fill.opacity
    return None


class ElementRenderer:
    """
    Paints page elements.

    The handler table is checked against ElementKind when the renderer is
    built, so a new element kind without a handler fails at startup rather
    than at render time.

    Args:
        images: Photo source for image elements (None reports every image
            as a load failure)
        generator_factory: Seeded sketch generator constructor
    """

    def __init__(
        self,
        images: Optional[ImageProvider] = None,
        *,
        generator_factory: GeneratorFactory = RoughGenerator,
    ):
        self.images = images
        self.generator_factory = generator_factory
        self._handlers: Dict[ElementKind, Callable[..., List[str]]] = {
            kind: getattr(self, name) for kind, name in HANDLER_NAMES.items()
        }
        missing = [kind.value for kind in ElementKind if kind not in self._handlers]
        if missing:
            raise TypeError(f"No element handler for: {', '.join(missing)}")

    def handles(self, kind: ElementKind) -> bool:
        return kind in self._handlers

    def render(self, element: PageElement, surface: Surface, context: ElementContext = ElementContext()) -> List[str]:
        """
        Paint one element.

        Returns:
            Diagnostics for recovered failures (missing photos, fallback
            paths)

        Raises:
            MalformedElementError: If the element geometry is unusable
        """
        check_geometry(element)
        handler = self._handlers[element.kind]
        surface.push_transform(element.x, element.y, element.rotation)
        try:
            diagnostics = handler(element, surface, context)
        finally:
            surface.pop_transform()
        logger.debug(f"Rendered {element.kind.value} {element.id}")
        return diagnostics

    # ─────────────────────────────────────────────────────────────────────
    # Shapes
    # ─────────────────────────────────────────────────────────────────────

    def _render_shape(self, element: ShapeElement, surface: Surface, context: ElementContext) -> List[str]:
        part = "lineStroke" if element.shape is ShapeKind.LINE else "shapeStroke"
        spec = replace(
            ShapeSpec.from_element(element),
            stroke=resolve_color(element.stroke, context.palette, part, "primary"),
        )
        result = generate_themed_path(spec, element.theme or context.theme, generator_factory=self.generator_factory)
        paint_theme_result(surface, result, element.opacity)
        if result.fallback:
            return [f"{element.id}: themed path failed, drew smooth {element.shape.value}"]
        return []

    def _render_frame(
        self,
        element: PageElement,
        border: BorderConfig,
        surface: Surface,
        context: ElementContext,
        *,
        part: str,
        suffix: str,
        default: str,
        corner_radius: float = 0.0,
    ) -> List[str]:
        if not border.enabled or border.width <= 0:
            return []
        spec = ShapeSpec(
            id=f"{element.id}-{suffix}",
            kind=ShapeKind.RECT,
            width=element.width,
            height=element.height,
            stroke=resolve_color(border.color, context.palette, part, "primary", default),
            stroke_width=border.width,
            corner_radius=corner_radius,
            is_border=True,
        )
        theme = border.theme or element.theme or context.theme
        result = generate_themed_path(spec, theme, generator_factory=self.generator_factory)
        paint_theme_result(surface, result, border.opacity * element.opacity)
        if result.fallback:
            return [f"{element.id}: themed {suffix} failed, drew smooth rectangle"]
        return []

    # ─────────────────────────────────────────────────────────────────────
    # Images
    # ─────────────────────────────────────────────────────────────────────

    def _render_image(self, element: ImageElement, surface: Surface, context: ElementContext) -> List[str]:
        diagnostics: List[str] = []
        if element.src:
            try:
                if self.images is None:
                    raise ImageLoadError(element.src, "no image provider")
                image = self.images.load(element.src)
            except ImageLoadError as e:
                logger.warning(f"Image element {element.id} left empty: {e}")
                diagnostics.append(f"{element.id}: {e}")
            else:
                if element.width > 0 and element.height > 0:
                    crop = calculate_crop(image.size, (element.width, element.height), element.clip_position)
                    surface.draw_image(
                        image.crop(crop.box()),
                        0, 0, element.width, element.height,
                        element.opacity,
                        element.corner_radius,
                    )
        else:
            logger.debug(f"Image element {element.id} has no source")

        diagnostics.extend(self._render_frame(
            element, element.frame, surface, context,
            part="shapeStroke", suffix="frame", default=DEFAULT_FRAME_COLOR,
            corner_radius=element.corner_radius,
        ))
        return diagnostics

    # ─────────────────────────────────────────────────────────────────────
    # Text-bearing elements
    # ─────────────────────────────────────────────────────────────────────

    @staticmethod
    def _padded_area(element, padding: float) -> Area:
        return Area(
            padding,
            padding,
            max(0.0, element.width - 2 * padding),
            max(0.0, element.height - 2 * padding),
        )

    def _render_ruled_lines(self, element, config: RuledLinesConfig, positions, area: Area,
                            surface: Surface, context: ElementContext, part: str) -> None:
        if not config.enabled:
            return
        color = resolve_color(config.color, context.palette, part, None, DEFAULT_RULED_LINE_COLOR)
        render_ruled_lines(
            surface,
            element.id,
            positions,
            replace(config, opacity=config.opacity * element.opacity),
            area,
            color=color,
            generator_factory=self.generator_factory,
        )

    @staticmethod
    def _draw_runs(surface: Surface, runs: List[TextRun], opacity: float) -> None:
        for run in runs:
            if not run.text:
                continue
            style = run.style if opacity >= 1.0 else run.style.with_changes(opacity=run.style.opacity * opacity)
            surface.draw_text(run.text, run.x, run.y, style)

    def _render_text(self, element: TextElement, surface: Surface, context: ElementContext) -> List[str]:
        layout = create_text_layout(
            element.text,
            element.style,
            element.width,
            element.height,
            element.padding,
            context.measurer,
            element.vertical_align,
        )

        background: FillConfig = element.background
        if background.enabled:
            color = resolve_color(background.color, context.palette, "freeTextBackground", "surface", DEFAULT_FILL_COLOR)
            surface.fill_rect(
                0, 0, element.width, element.height,
                color, background.opacity * element.opacity, element.corner_radius,
            )

        self._render_ruled_lines(
            element, element.ruled_lines, layout.line_positions,
            self._padded_area(element, element.padding), surface, context, "freeTextRuledLines",
        )
        diagnostics = self._render_frame(
            element, element.border, surface, context,
            part="freeTextBorder", suffix="border", default=DEFAULT_BORDER_COLOR,
            corner_radius=element.corner_radius,
        )
        self._draw_runs(surface, layout.runs, element.opacity)
        return diagnostics

    def _render_qna(self, element: QnAElement, surface: Surface, context: ElementContext) -> List[str]:
        layout = layout_for_element(element, context.measurer)

        background = qna_background(element, context.palette)
        if background is not None:
            color, opacity = background
            surface.fill_rect(
                0, 0, element.width, element.height,
                color, opacity * element.opacity, element.corner_radius,
            )

        if element.kind is ElementKind.QNA_BLOCK:
            target = layout.question_area if element.ruled_lines_target is RuledLinesTarget.QUESTION else layout.answer_area
            area = target or self._padded_area(element, element.padding)
        else:
            area = self._padded_area(element, element.padding)
        self._render_ruled_lines(
            element, element.ruled_lines, layout.line_positions,
            area, surface, context, "qnaAnswerRuledLines",
        )
        diagnostics = self._render_frame(
            element, element.border, surface, context,
            part="qnaBorder", suffix="border", default=DEFAULT_BORDER_COLOR,
            corner_radius=element.corner_radius,
        )
        self._draw_runs(surface, layout.runs, element.opacity)
        return diagnostics
