"""
Module: engine.text.measure

Purpose:
    Text measurement capabilities injected into layout. Layout functions
    never decide how to measure; the caller picks a measurer that matches
    the surface the text will be drawn on.

Key Classes:
    - TextMeasurer: Abstract measurement capability
    - HeuristicMeasurer: Average-character-width estimate
    - PillowMeasurer: FreeType metrics via Pillow (raster surface)
    - ReportLabMeasurer: PDF font metrics (PDF surface)
    - DeferredMeasurer: Not ready until fonts are marked loaded

Dependencies:
    - PIL.ImageFont (through FontRegistry)
    - reportlab.pdfbase.pdfmetrics

Used By:
    - engine.text.layout
    - engine.qna.composer
    - engine.surfaces
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from reportlab.pdfbase import pdfmetrics

from scrapbook_toolkit.engine.errors import MeasurementUnavailableError
from scrapbook_toolkit.engine.text.fonts import FontRegistry, parse_font


# Heuristic glyph width as a fraction of the font size
AVERAGE_CHAR_WIDTH = 0.6


class TextMeasurer(ABC):
    """
    Abstract text measurement capability.

    Implementations measure a string for a font descriptor as produced by
    build_font().
    """

    @property
    def is_ready(self) -> bool:
        """False while fonts are still loading."""
        return True

    @abstractmethod
    def measure(self, text: str, font: str) -> float:
        """Return the advance width of `text` in page pixels."""
        ...

    def ascent(self, font: str) -> Optional[float]:
        """Return the font ascent, or None when unknown."""
        return None


class HeuristicMeasurer(TextMeasurer):
    """Width = characters x font size x average character width."""

    def __init__(self, average_char_width: float = AVERAGE_CHAR_WIDTH):
        self.average_char_width = average_char_width

    def measure(self, text: str, font: str) -> float:
        return len(text) * parse_font(font).size * self.average_char_width


class PillowMeasurer(TextMeasurer):
    """Measures with the Pillow fonts the raster surface draws with."""

    def __init__(self, registry: FontRegistry):
        self.registry = registry

    def _font(self, font: str):
        spec = parse_font(font)
        return self.registry.pillow_font(spec.family, spec.bold, spec.italic, spec.size)

    def measure(self, text: str, font: str) -> float:
        return float(self._font(font).getlength(text))

    def ascent(self, font: str) -> Optional[float]:
        metrics = self._font(font).getmetrics()
        return float(metrics[0])


class ReportLabMeasurer(TextMeasurer):
    """
    Measures with the ReportLab fonts the PDF surface draws with.

    Widths are returned in page pixels: the PDF surface scales the whole
    page, so a font of N px is set at N units before scaling.
    """

    def __init__(self, registry: FontRegistry):
        self.registry = registry

    def measure(self, text: str, font: str) -> float:
        spec = parse_font(font)
        name = self.registry.reportlab_font(spec.family, spec.bold, spec.italic)
        return float(pdfmetrics.stringWidth(text, name, spec.size))

    def ascent(self, font: str) -> Optional[float]:
        spec = parse_font(font)
        name = self.registry.reportlab_font(spec.family, spec.bold, spec.italic)
        return float(pdfmetrics.getAscent(name, spec.size))


class DeferredMeasurer(TextMeasurer):
    """
    Wraps a measurer that only becomes usable once fonts have loaded.

    Until mark_ready() is called, is_ready is False and layout falls back
    to the heuristic.
    """

    def __init__(self, inner: TextMeasurer):
        self.inner = inner
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        self._ready = True

    def measure(self, text: str, font: str) -> float:
        if not self._ready:
            raise MeasurementUnavailableError("Fonts not loaded yet")
        return self.inner.measure(text, font)

    def ascent(self, font: str) -> Optional[float]:
        return self.inner.ascent(font) if self._ready else None
