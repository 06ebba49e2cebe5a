"""
Module: engine.compositor.scene

Purpose:
    Interactive rendering for the page editor. The scene keeps one
    recorded display list per element plus one for the background; an
    edit re-records only the element that changed, and replay paints the
    cached lists in stacking order.

    Replaying the scene issues exactly the paint calls a one-shot
    PageCompositor.render_page() would, so live canvas and batch export
    stay in step.

Key Classes:
    - LiveScene: Per-element display lists for one page

Used By:
    - Editor integrations
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from scrapbook_toolkit.core.models.elements import PageElement
from scrapbook_toolkit.core.models.page import BackgroundSpec, PageDescription
from scrapbook_toolkit.engine.render import ElementContext
from scrapbook_toolkit.engine.surfaces.base import Surface
from scrapbook_toolkit.engine.surfaces.recording import PaintCall, RecordingSurface
from scrapbook_toolkit.engine.text.measure import TextMeasurer

from .compositor import PageCompositor, order_elements

logger = logging.getLogger(__name__)


class LiveScene:
    """
    Display-list cache for one page.

    Args:
        compositor: Renderer used to record elements
        page: Initial page
        measurer: Measurer of the live canvas (heuristic when None)

    Raises:
        ValueError: If two elements of `page` share an id

    Example:
        >>> scene = LiveScene(PageCompositor(), page)
        >>> scene.update_element(replace(page.elements[0], x=40))
        >>> scene.replay(canvas_surface)
    """

    def __init__(self, compositor: PageCompositor, page: PageDescription, measurer: Optional[TextMeasurer] = None):
        self.compositor = compositor
        self.measurer = measurer
        self._page = page
        self._elements: Dict[str, PageElement] = {}
        for element in page.elements:
            if element.id in self._elements:
                raise ValueError(f"Duplicate element id in page: {element.id}")
            self._elements[element.id] = element
        self._lists: Dict[str, List[PaintCall]] = {}
        self._background: List[PaintCall] = []
        self.diagnostics: Dict[str, List[str]] = {}
        self.skipped: List[str] = []
        self.rebuild()

    @property
    def page(self) -> PageDescription:
        """Current page, with edits applied."""
        return replace(self._page, elements=tuple(self._elements.values()))

    def _recorder(self) -> RecordingSurface:
        return RecordingSurface(measurer=self.measurer)

    def _context(self, surface: Surface) -> ElementContext:
        return self.compositor.context_for(self._page, surface)

    def _record_background(self) -> None:
        recorder = self._recorder()
        palette = self.compositor.resolve_palette(self._page)
        self.diagnostics["background"] = self.compositor.render_background(
            self._page.background, recorder, self._page.width, self._page.height, palette,
        )
        self._background = list(recorder.calls)

    def _record_element(self, element: PageElement) -> List[str]:
        recorder = self._recorder()
        painted, diagnostics = self.compositor.render_element(element, recorder, self._context(recorder))
        self._lists[element.id] = list(recorder.calls)
        self.diagnostics[element.id] = diagnostics
        if painted and element.id in self.skipped:
            self.skipped.remove(element.id)
        elif not painted and element.id not in self.skipped:
            self.skipped.append(element.id)
        return diagnostics

    def rebuild(self) -> None:
        """Re-record the background and every element."""
        self._lists.clear()
        self.diagnostics.clear()
        self.skipped.clear()
        self._record_background()
        for element in self._elements.values():
            self._record_element(element)
        logger.debug(f"Scene rebuilt with {len(self._lists)} elements")

    # ─────────────────────────────────────────────────────────────────────
    # Edits
    # ─────────────────────────────────────────────────────────────────────

    def update_element(self, element: PageElement) -> List[str]:
        """
        Add or replace an element, re-recording only that element.

        Returns:
            Diagnostics from recording the element
        """
        self._elements[element.id] = element
        logger.debug(f"Scene update: {element.id}")
        return self._record_element(element)

    def remove_element(self, element_id: str) -> None:
        """
        Raises:
            KeyError: If no element has this id
        """
        del self._elements[element_id]
        self._lists.pop(element_id, None)
        self.diagnostics.pop(element_id, None)
        if element_id in self.skipped:
            self.skipped.remove(element_id)

    def set_background(self, background: BackgroundSpec) -> None:
        self._page = replace(self._page, background=background)
        self._record_background()

    def display_list(self, element_id: str) -> List[PaintCall]:
        """Recorded paint calls for one element."""
        return list(self._lists[element_id])

    # ─────────────────────────────────────────────────────────────────────
    # Replay
    # ─────────────────────────────────────────────────────────────────────

    def replay(self, surface: Surface) -> None:
        """Paint the cached scene onto `surface` in stacking order."""
        surface.begin_page(self._page.width, self._page.height)
        for call in self._background:
            call.apply(surface)
        for element in order_elements(self._elements.values()):
            surface.begin_element(element.id)
            try:
                for call in self._lists.get(element.id, ()):
                    call.apply(surface)
            finally:
                surface.end_element()
        surface.end_page()
