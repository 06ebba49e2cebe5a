"""
Module: engine

Purpose:
    Page rendering engine shared by the live editor canvas and the batch
    exporter. Lays out text, generates themed vector paths, composes QnA
    blocks and paints backgrounds and elements onto a surface in stacking
    order.

Key Classes:
    - PageCompositor: Page -> surface pipeline
    - LiveScene: Per-element display lists for interactive editing
    - RenderConfig: Immutable render configuration
    - RasterSurface / PdfSurface / RecordingSurface: Paint targets

Dependencies:
    - PIL: Offscreen bitmaps, font metrics, images
    - reportlab: PDF pages

Used By:
    - scripts/render_page.py
"""

from .config import RenderConfig
from .errors import (
    RenderError,
    LayoutContractError,
    PathGenerationError,
    ImageLoadError,
    MalformedElementError,
    MeasurementUnavailableError,
)
from .compositor import PageCompositor, RenderReport, LiveScene, order_elements
from .surfaces import Surface, RecordingSurface, RasterSurface, PdfSurface

__all__ = [
    "RenderConfig",
    "RenderError",
    "LayoutContractError",
    "PathGenerationError",
    "ImageLoadError",
    "MalformedElementError",
    "MeasurementUnavailableError",
    "PageCompositor",
    "RenderReport",
    "LiveScene",
    "order_elements",
    "Surface",
    "RecordingSurface",
    "RasterSurface",
    "PdfSurface",
]
