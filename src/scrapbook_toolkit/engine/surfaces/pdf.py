"""
Module: engine.surfaces.pdf

Purpose:
    PDF page surface on a caller-supplied ReportLab canvas. Page pixels
    are converted to points with the configured DPI, and the coordinate
    system is flipped once per page so renderers keep y pointing down.

Key Classes:
    - PdfSurface: ReportLab canvas target

Key Functions:
    - pil_to_reader(): PIL image -> ReportLab ImageReader

Dependencies:
    - reportlab: Canvas drawing and font metrics
    - PIL: Image payloads
    - engine.themes.svgpath: Path parsing

Used By:
    - engine.compositor (headless export)
    - scripts/render_page.py
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from scrapbook_toolkit.core.models.styles import RichTextStyle
from scrapbook_toolkit.core.models.theme import ShadowParams
from scrapbook_toolkit.engine.render.colors import parse_color, with_opacity
from scrapbook_toolkit.engine.text.fonts import FontRegistry
from scrapbook_toolkit.engine.text.measure import ReportLabMeasurer, TextMeasurer
from scrapbook_toolkit.engine.themes.svgpath import arc_points, parse_path

from .base import PatternTile, Point, Surface

logger = logging.getLogger(__name__)

DEFAULT_DPI = 96

_LINE_CAPS = {"butt": 0, "round": 1, "square": 2}
_LINE_JOINS = {"miter": 0, "round": 1, "bevel": 2}


def pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: float, dpi: int = DEFAULT_DPI) -> float:
    """PDF points are 1/72 inch."""
    return px * 72.0 / dpi


class PdfSurface(Surface):
    """
    ReportLab canvas surface.

    One begin_page()/end_page() pair produces one PDF page sized to the
    page description.

    Example:
        >>> surface = PdfSurface.to_file(Path("page.pdf"))
        >>> surface.begin_page(800, 600)
        >>> surface.fill_rect(0, 0, 800, 600, "#fef3c7")
        >>> surface.end_page()
        >>> surface.save()
    """

    def __init__(self, c: pdf_canvas.Canvas, dpi: int = DEFAULT_DPI, fonts: Optional[FontRegistry] = None):
        super().__init__(fonts)
        self.canvas = c
        self.dpi = dpi
        self.page_count = 0
        self._depth = 0
        self._in_page = False

    @classmethod
    def to_file(cls, output_path: Path, dpi: int = DEFAULT_DPI, fonts: Optional[FontRegistry] = None) -> "PdfSurface":
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(pdf_canvas.Canvas(str(output_path)), dpi=dpi, fonts=fonts)

    def save(self) -> None:
        self.canvas.save()
        logger.info(f"Wrote {self.page_count} PDF page(s)")

    def create_measurer(self) -> TextMeasurer:
        return ReportLabMeasurer(self.fonts)

    # Page lifecycle

    def begin_page(self, width: float, height: float) -> None:
        c = self.canvas
        page_height_pt = _px_to_pt(height, self.dpi)
        c.setPageSize((_px_to_pt(width, self.dpi), page_height_pt))
        c.saveState()
        c.translate(0, page_height_pt)
        scale = _px_to_pt(1.0, self.dpi)
        c.scale(scale, -scale)
        self._depth = 0
        self._in_page = True

    def end_page(self) -> None:
        if self._depth:
            logger.warning(f"Unbalanced transforms at end of page ({self._depth} left)")
        while self._depth:
            self.pop_transform()
        self.canvas.restoreState()
        self.canvas.showPage()
        self.page_count += 1
        self._in_page = False

    def push_transform(self, x: float, y: float, rotation: float = 0.0) -> None:
        c = self.canvas
        c.saveState()
        c.translate(x, y)
        if rotation:
            # y is flipped, so a positive ReportLab angle turns clockwise on the page
            c.rotate(rotation)
        self._depth += 1

    def pop_transform(self) -> None:
        if not self._depth:
            raise RuntimeError("pop_transform() without matching push_transform()")
        self.canvas.restoreState()
        self._depth -= 1

    # Paint state

    def _set_fill(self, color: str, opacity: float) -> None:
        r, g, b, a = with_opacity(parse_color(color), opacity)
        self.canvas.setFillColorRGB(r / 255, g / 255, b / 255)
        self.canvas.setFillAlpha(a / 255)

    def _set_stroke(self, color: str, width: float, opacity: float) -> None:
        r, g, b, a = with_opacity(parse_color(color), opacity)
        self.canvas.setStrokeColorRGB(r / 255, g / 255, b / 255)
        self.canvas.setStrokeAlpha(a / 255)
        self.canvas.setLineWidth(width)

    def _build_path(self, d: str):
        path = self.canvas.beginPath()
        cursor = (0.0, 0.0)
        start = (0.0, 0.0)
        for command in parse_path(d):
            a = command.args
            if command.op == "M":
                cursor = start = (a[0], a[1])
                path.moveTo(*cursor)
            elif command.op == "L":
                cursor = (a[0], a[1])
                path.lineTo(*cursor)
            elif command.op == "Q":
                c1 = (cursor[0] + 2 / 3 * (a[0] - cursor[0]), cursor[1] + 2 / 3 * (a[1] - cursor[1]))
                c2 = (a[2] + 2 / 3 * (a[0] - a[2]), a[3] + 2 / 3 * (a[1] - a[3]))
                path.curveTo(c1[0], c1[1], c2[0], c2[1], a[2], a[3])
                cursor = (a[2], a[3])
            elif command.op == "C":
                path.curveTo(*a)
                cursor = (a[4], a[5])
            elif command.op == "A":
                end = (a[5], a[6])
                for point in arc_points(cursor, a[0], a[1], a[2], bool(a[3]), bool(a[4]), end):
                    path.lineTo(*point)
                cursor = end
            elif command.op == "Z":
                path.close()
                cursor = start
        return path

    # Paint calls

    def fill_rect(self, x, y, width, height, color, opacity=1.0, corner_radius=0.0) -> None:
        if width <= 0 or height <= 0:
            return
        c = self.canvas
        c.saveState()
        self._set_fill(color, opacity)
        if corner_radius > 0:
            c.roundRect(x, y, width, height, corner_radius, stroke=0, fill=1)
        else:
            c.rect(x, y, width, height, stroke=0, fill=1)
        c.restoreState()

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
        if not path or (stroke is None and fill is None):
            return
        c = self.canvas

        if shadow is not None and stroke is not None:
            # No blur in PDF: approximate it with a wider, fainter stroke
            c.saveState()
            c.translate(shadow.offset_x, shadow.offset_y)
            self._set_stroke(shadow.color, stroke_width + shadow.blur, shadow.opacity * opacity / 2)
            c.setLineCap(1)
            c.setLineJoin(1)
            c.drawPath(self._build_path(path), stroke=1, fill=0)
            c.restoreState()

        c.saveState()
        if stroke is not None:
            self._set_stroke(stroke, stroke_width, opacity)
            c.setLineCap(_LINE_CAPS.get(line_cap, 0))
            c.setLineJoin(_LINE_JOINS.get(line_join, 0))
            if dash:
                c.setDash(list(dash), 0)
        if fill is not None:
            self._set_fill(fill, opacity)
        c.drawPath(
            self._build_path(path),
            stroke=1 if stroke is not None and stroke_width > 0 else 0,
            fill=1 if fill is not None else 0,
            fillMode=pdf_canvas.FILL_EVEN_ODD,
        )
        c.restoreState()

    def draw_polyline(self, points: Sequence[Point], color: str, width: float = 1.0,
                      opacity: float = 1.0, dash: Sequence[float] = ()) -> None:
        if len(points) < 2:
            return
        c = self.canvas
        c.saveState()
        self._set_stroke(color, width, opacity)
        if dash:
            c.setDash(list(dash), 0)
        path = c.beginPath()
        path.moveTo(*points[0])
        for point in points[1:]:
            path.lineTo(*point)
        c.drawPath(path, stroke=1, fill=0)
        c.restoreState()

    def draw_text(self, text: str, x: float, y: float, style: RichTextStyle) -> None:
        if not text:
            return
        c = self.canvas
        font_name = self.fonts.reportlab_font(style.font_family, style.bold, style.italic)
        c.saveState()
        c.translate(x, y)
        c.scale(1, -1)
        c.setFont(font_name, style.font_size)
        self._set_fill(style.color, style.opacity)
        c.drawString(0, 0, text)
        c.restoreState()

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float,
                   opacity: float = 1.0, corner_radius: float = 0.0) -> None:
        if width <= 0 or height <= 0:
            return
        c = self.canvas
        c.saveState()
        if corner_radius > 0:
            clip = c.beginPath()
            clip.roundRect(x, y, width, height, corner_radius)
            c.clipPath(clip, stroke=0, fill=0)
        c.setFillAlpha(max(0.0, min(1.0, opacity)))
        c.translate(x, y + height)
        c.scale(1, -1)
        c.drawImage(pil_to_reader(image.convert("RGBA")), 0, 0, width=width, height=height, mask="auto")
        c.restoreState()

    def fill_pattern(self, tile: PatternTile, x: float, y: float, width: float, height: float,
                     opacity: float = 1.0) -> None:
        c = self.canvas
        c.saveState()
        clip = c.beginPath()
        clip.rect(x, y, width, height)
        c.clipPath(clip, stroke=0, fill=0)
        super().fill_pattern(tile, x, y, width, height, opacity)
        c.restoreState()
