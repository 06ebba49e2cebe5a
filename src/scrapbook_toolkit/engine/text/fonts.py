"""
Module: engine.text.fonts

Purpose:
    Font descriptors and the font registry.

    A font descriptor is the string "[bold ][italic ]<size>px <family>",
    a deterministic function of a RichTextStyle. The registry maps a
    descriptor to the concrete font file used by both Pillow and
    ReportLab, so the width a measurer reports is the width the surface
    draws.

Key Functions:
    - resolve_font_family(): Normalise a CSS-like family list
    - build_font(): Style -> descriptor
    - parse_font(): Descriptor -> FontSpec

Key Classes:
    - FontSpec: Parsed descriptor
    - FontRegistry: Immutable (family, bold, italic) -> font file table

Dependencies:
    - PIL.ImageFont: TrueType loading and face names
    - reportlab.pdfbase: TTF registration for PDF output

Used By:
    - engine.text.layout
    - engine.text.measure
    - engine.surfaces.raster, engine.surfaces.pdf
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from PIL import ImageFont
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from scrapbook_toolkit.core.models.styles import DEFAULT_FONT_FAMILY, RichTextStyle

logger = logging.getLogger(__name__)

FontKey = Tuple[str, bool, bool]

_FONT_RE = re.compile(r"^(?:(bold)\s+)?(?:(italic)\s+)?(\d+(?:\.\d+)?)px\s+(.+)$")

# System fonts tried when no registered face matches, (bold, italic) -> names
_FALLBACK_FONT_FILES = {
    (False, False): ("DejaVuSans.ttf", "arial.ttf", "Arial.ttf", "LiberationSans-Regular.ttf"),
    (True, False): ("DejaVuSans-Bold.ttf", "arialbd.ttf", "Arial Bold.ttf", "LiberationSans-Bold.ttf"),
    (False, True): ("DejaVuSans-Oblique.ttf", "ariali.ttf", "Arial Italic.ttf", "LiberationSans-Italic.ttf"),
    (True, True): ("DejaVuSans-BoldOblique.ttf", "arialbi.ttf", "Arial Bold Italic.ttf", "LiberationSans-BoldItalic.ttf"),
}

# Built-in PDF fonts, (bold, italic) -> name
_PDF_STANDARD_FONTS = {
    "sans": {
        (False, False): "Helvetica",
        (True, False): "Helvetica-Bold",
        (False, True): "Helvetica-Oblique",
        (True, True): "Helvetica-BoldOblique",
    },
    "serif": {
        (False, False): "Times-Roman",
        (True, False): "Times-Bold",
        (False, True): "Times-Italic",
        (True, True): "Times-BoldItalic",
    },
    "mono": {
        (False, False): "Courier",
        (True, False): "Courier-Bold",
        (False, True): "Courier-Oblique",
        (True, True): "Courier-BoldOblique",
    },
}


# ─────────────────────────────────────────────────────────────────────────────
# Descriptors
# ─────────────────────────────────────────────────────────────────────────────

def resolve_font_family(font_family: Optional[str]) -> str:
    """
    Normalise a font family list.

    Quotes are removed and comma spacing is normalised; an empty value
    resolves to "Arial, sans-serif".

    Example:
        >>> resolve_font_family("'Comic Neue' ,cursive")
        'Comic Neue, cursive'
    """
    if not font_family:
        return DEFAULT_FONT_FAMILY
    cleaned = font_family.replace('"', "").replace("'", "").strip()
    parts = [part.strip() for part in cleaned.split(",")]
    normalized = ", ".join(part for part in parts if part)
    return normalized or DEFAULT_FONT_FAMILY


def _format_size(size: float) -> str:
    return str(int(size)) if float(size).is_integer() else f"{size:g}"


def build_font(style: RichTextStyle) -> str:
    """
    Build the font descriptor for a style.

    Example:
        >>> build_font(RichTextStyle(font_size=14, bold=True))
        'bold 14px Arial, sans-serif'
    """
    weight = "bold " if style.bold else ""
    italic = "italic " if style.italic else ""
    family = resolve_font_family(style.font_family)
    return f"{weight}{italic}{_format_size(style.font_size)}px {family}"


@dataclass(frozen=True, slots=True)
class FontSpec:
    """Parsed font descriptor."""
    family: str
    size: float
    bold: bool = False
    italic: bool = False

    @property
    def family_names(self) -> Tuple[str, ...]:
        """Individual family names in preference order."""
        return tuple(name.strip() for name in self.family.split(",") if name.strip())


def parse_font(descriptor: str) -> FontSpec:
    """
    Parse a descriptor produced by build_font().

    Raises:
        ValueError: If the descriptor is not well formed
    """
    match = _FONT_RE.match(descriptor.strip())
    if not match:
        raise ValueError(f"Invalid font descriptor: {descriptor!r}")
    bold, italic, size, family = match.groups()
    return FontSpec(
        family=resolve_font_family(family),
        size=float(size),
        bold=bold is not None,
        italic=italic is not None,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────

@lru_cache(maxsize=256)
def _truetype(path: str, size: float) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(path, size)


def _face_flags(style_name: str) -> Tuple[bool, bool]:
    lowered = style_name.lower()
    bold = "bold" in lowered or "black" in lowered or "heavy" in lowered
    italic = "italic" in lowered or "oblique" in lowered
    return bold, italic


def _generic_class(family_names: Iterable[str]) -> str:
    for name in family_names:
        lowered = name.lower()
        if "mono" in lowered or "courier" in lowered:
            return "mono"
        if "sans" in lowered or "arial" in lowered or "helvetica" in lowered:
            return "sans"
        if "serif" in lowered or "times" in lowered or "georgia" in lowered:
            return "serif"
    return "sans"


class FontRegistry:
    """
    Immutable table of font faces.

    Built once per process (usually from a fonts directory) and shared
    read-only between measurers and surfaces.

    Example:
        >>> registry = FontRegistry.from_directory(Path("fonts"))
        >>> registry.resolve("Roboto, sans-serif", bold=True, italic=False)
        '/.../fonts/Roboto-Bold.ttf'
    """

    def __init__(self, faces: Optional[Mapping[FontKey, str]] = None):
        normalized = {
            (family.lower(), bold, italic): str(path)
            for (family, bold, italic), path in (faces or {}).items()
        }
        self._faces = MappingProxyType(normalized)

    @classmethod
    def from_directory(cls, directory: Path) -> "FontRegistry":
        """Scan a directory (recursively) for TTF/OTF files."""
        faces: dict[FontKey, str] = {}
        for path in sorted(Path(directory).rglob("*")):
            if path.suffix.lower() not in (".ttf", ".otf"):
                continue
            try:
                family, style_name = ImageFont.truetype(str(path), 12).getname()
            except OSError as e:
                logger.warning(f"Skipping unreadable font {path.name}: {e}")
                continue
            bold, italic = _face_flags(style_name or "")
            faces.setdefault((family, bold, italic), str(path))
        logger.info(f"Registered {len(faces)} font faces from {directory}")
        return cls(faces)

    @property
    def faces(self) -> Mapping[FontKey, str]:
        return self._faces

    def __len__(self) -> int:
        return len(self._faces)

    def resolve(self, family: str, bold: bool, italic: bool) -> Optional[str]:
        """
        Find the font file for a family list.

        Each family name is tried in order, first with the exact
        weight/style, then relaxing italic, then bold.
        """
        names = FontSpec(family=resolve_font_family(family), size=1).family_names
        for name in names:
            lowered = name.lower()
            for key in (
                (lowered, bold, italic),
                (lowered, bold, False),
                (lowered, False, italic),
                (lowered, False, False),
            ):
                path = self._faces.get(key)
                if path:
                    return path
        return None

    def pillow_font(self, family: str, bold: bool, italic: bool, size: float) -> ImageFont.ImageFont:
        """Load the Pillow font used for both measuring and drawing."""
        path = self.resolve(family, bold, italic)
        if path:
            return _truetype(path, size)
        for font_name in _FALLBACK_FONT_FILES[(bold, italic)]:
            try:
                return _truetype(font_name, size)
            except (IOError, OSError):
                continue
        logger.warning(f"Could not load TrueType font for {family!r}, using default")
        return ImageFont.load_default(size=size)

    def reportlab_font(self, family: str, bold: bool, italic: bool) -> str:
        """Return a ReportLab font name, registering the TTF on first use."""
        path = self.resolve(family, bold, italic)
        if path:
            name = f"sb-{Path(path).stem}"
            if name not in pdfmetrics.getRegisteredFontNames():
                pdfmetrics.registerFont(TTFont(name, path))
            return name
        names = FontSpec(family=resolve_font_family(family), size=1).family_names
        return _PDF_STANDARD_FONTS[_generic_class(names)][(bold, italic)]
