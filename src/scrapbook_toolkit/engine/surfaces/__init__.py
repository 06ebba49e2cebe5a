"""
Surfaces Package

Paint-call targets: a recording display list, a Pillow bitmap and a
ReportLab PDF page.
"""

from .base import Surface, PatternTile, TileShape, reconcile_measurer
from .recording import RecordingSurface, PaintCall
from .raster import RasterSurface
from .pdf import PdfSurface

__all__ = [
    "Surface",
    "PatternTile",
    "TileShape",
    "reconcile_measurer",
    "RecordingSurface",
    "PaintCall",
    "RasterSurface",
    "PdfSurface",
]
