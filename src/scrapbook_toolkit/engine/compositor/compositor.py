"""
Module: engine.compositor.compositor

Purpose:
    Paint one page onto a surface.
    Begin page → Background → Elements by z_index → End page

    Every element renders inside its own failure boundary: an element that
    cannot be painted is skipped and reported, and the rest of the page
    still renders.

Key Functions:
    - order_elements(): Stable sort by z_index

Key Classes:
    - RenderReport: Outcome of rendering one page
    - PageCompositor: Page -> surface pipeline

Dependencies:
    - engine.render: Element and background renderers
    - engine.registry: Palettes for colour fallbacks

Used By:
    - engine.compositor.scene: Live scene display lists
    - scripts/render_page.py
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from scrapbook_toolkit.core.models.elements import PageElement
from scrapbook_toolkit.core.models.page import BackgroundSpec, PageDescription
from scrapbook_toolkit.engine.config import RenderConfig
from scrapbook_toolkit.engine.errors import MalformedElementError, RenderError
from scrapbook_toolkit.engine.images.provider import ImageProvider
from scrapbook_toolkit.engine.registry import CatalogRegistry, Palette
from scrapbook_toolkit.engine.render import BackgroundRenderer, ElementContext, ElementRenderer
from scrapbook_toolkit.engine.surfaces.base import Surface, reconcile_measurer
from scrapbook_toolkit.engine.surfaces.recording import RecordingSurface
from scrapbook_toolkit.engine.text.measure import TextMeasurer
from scrapbook_toolkit.engine.themes import RoughGenerator
from scrapbook_toolkit.engine.themes.engine import GeneratorFactory

logger = logging.getLogger(__name__)


def order_elements(elements: Iterable[PageElement]) -> List[PageElement]:
    """
    Elements in painting order: ascending z_index, list order on ties.

    Example:
        >>> [e.id for e in order_elements([a5, b1, c3])]
        ['b', 'c', 'a']
    """
    return sorted(elements, key=lambda element: element.z_index)


@dataclass(frozen=True)
class RenderReport:
    """
    Outcome of rendering one page (immutable).

    Attributes:
        rendered: Ids of painted elements, in painting order
        skipped: Ids of elements that were rejected or failed to paint
        diagnostics: Messages for every recovered failure
        page_number: Page number from the description, if any
        duration: Wall time in seconds
    """
    rendered: Tuple[str, ...] = ()
    skipped: Tuple[str, ...] = ()
    diagnostics: Tuple[str, ...] = ()
    page_number: Optional[int] = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        """True when nothing was skipped or recovered."""
        return not self.skipped and not self.diagnostics


@dataclass
class _ReportBuilder:
    rendered: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    def build(self, page_number: Optional[int], duration: float) -> RenderReport:
        return RenderReport(
            rendered=tuple(self.rendered),
            skipped=tuple(self.skipped),
            diagnostics=tuple(self.diagnostics),
            page_number=page_number,
            duration=duration,
        )


class PageCompositor:
    """
    Renders page descriptions onto surfaces.

    Args:
        registry: Palette/theme catalogue (packaged catalogue when None)
        images: Photo source for image elements and image backgrounds
        config: Render configuration
        measurer: Measurer overriding the surface's own capability
        generator_factory: Seeded sketch generator constructor

    Example:
        >>> compositor = PageCompositor()
        >>> surface = RasterSurface()
        >>> report = compositor.render_page(page, surface)
        >>> surface.save(Path("page.png"))
    """

    def __init__(
        self,
        registry: Optional[CatalogRegistry] = None,
        images: Optional[ImageProvider] = None,
        config: RenderConfig = RenderConfig(),
        measurer: Optional[TextMeasurer] = None,
        *,
        generator_factory: GeneratorFactory = RoughGenerator,
    ):
        self.registry = registry if registry is not None else CatalogRegistry.load_default()
        self.config = config
        self.measurer = measurer
        self.elements = ElementRenderer(images, generator_factory=generator_factory)
        self.backgrounds = BackgroundRenderer(images)

    def resolve_palette(self, page: PageDescription) -> Optional[Palette]:
        """Page palette -> theme palette -> configured default palette."""
        palette = self.registry.palette(page.palette_id)
        if palette is None and page.palette_id:
            logger.warning(f"Unknown palette {page.palette_id!r}, using theme palette")
        if palette is None:
            palette = self.registry.palette_for_theme(page.theme)
        if palette is None:
            palette = self.registry.palette(self.config.default_palette_id)
        return palette

    def context_for(self, page: PageDescription, surface: Surface) -> ElementContext:
        """Page-level element inputs, with the measurer reconciled against `surface`."""
        return ElementContext(
            theme=page.theme or self.config.default_theme,
            palette=self.resolve_palette(page),
            measurer=reconcile_measurer(surface, self.measurer),
        )

    # ─────────────────────────────────────────────────────────────────────
    # Pipeline steps
    # ─────────────────────────────────────────────────────────────────────

    def render_background(
        self,
        background: BackgroundSpec,
        surface: Surface,
        width: float,
        height: float,
        palette: Optional[Palette] = None,
    ) -> List[str]:
        """Paint the page background, returning diagnostics."""
        try:
            return self.backgrounds.render(background, surface, width, height, palette)
        except (RenderError, ValueError) as e:
            logger.warning(f"Background skipped: {e}")
            return [f"background: {e}"]

    def render_element(self, element: PageElement, surface: Surface, context: ElementContext) -> Tuple[bool, List[str]]:
        """
        Paint one element inside its failure boundary.

        The element is recorded first and replayed onto `surface` only once
        its handler has finished, so a failed element leaves no paint behind.

        Returns:
            (painted, diagnostics)
        """
        scratch = RecordingSurface(fonts=surface.fonts)
        surface.begin_element(element.id)
        try:
            diagnostics = self.elements.render(element, scratch, context)
            scratch.replay(surface)
            return True, diagnostics
        except MalformedElementError as e:
            logger.warning(f"Skipping element: {e}")
            return False, [str(e)]
        except Exception as e:
            logger.warning(f"Skipping element {element.id} after render failure: {e!r}")
            return False, [f"{element.id}: {type(e).__name__}: {e}"]
        finally:
            surface.end_element()

    def render_page(self, page: PageDescription, surface: Surface) -> RenderReport:
        """
        Render a page: background first, then elements in stacking order.

        Element failures never escape; they are reported in the result.

        Args:
            page: Page to paint
            surface: Paint target

        Returns:
            RenderReport with painted and skipped ids
        """
        start_time = time.perf_counter()
        report = _ReportBuilder()
        for rejected in page.rejected:
            report.skipped.append(rejected.element_id)
            report.diagnostics.append(f"{rejected.element_id}: {rejected.reason}")

        context = self.context_for(page, surface)
        surface.begin_page(page.width, page.height)
        report.diagnostics.extend(
            self.render_background(page.background, surface, page.width, page.height, context.palette)
        )

        for element in order_elements(page.elements):
            painted, diagnostics = self.render_element(element, surface, context)
            (report.rendered if painted else report.skipped).append(element.id)
            report.diagnostics.extend(diagnostics)

        surface.end_page()

        result = report.build(page.page_number, time.perf_counter() - start_time)
        label = f"page {page.page_number}" if page.page_number is not None else "page"
        logger.info(
            f"Rendered {label}: {len(result.rendered)} elements, "
            f"{len(result.skipped)} skipped in {result.duration:.3f}s"
        )
        return result
