"""
Module: engine.config

Purpose:
    Configuration for page rendering. Defines output resolution, default
    theme/palette and where fonts and images are found.

Key Classes:
    - RenderConfig: Immutable render configuration

Dependencies:
    - dataclasses (std)

Used By:
    - engine.compositor: Page rendering
    - engine.surfaces: Raster/PDF targets
    - scripts/render_page.py
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# Page pixels are CSS pixels
DEFAULT_DPI = 96
DEFAULT_THEME = "default"
DEFAULT_PALETTE_ID = "classic"


@dataclass(frozen=True)
class RenderConfig:
    """
    Configuration for rendering (immutable).

    Attributes:
        dpi: Page pixels per inch; PDF output converts px -> pt with it
        raster_scale: Bitmap pixels per page pixel for raster output
        raster_background: Base colour of a fresh bitmap
        default_theme: Theme used when neither page nor element names one
        default_palette_id: Palette used when the page names none
        fonts_dir: Extra directory searched for TTF/OTF files
        image_root: Root directory for relative image sources

    Example:
        >>> config = RenderConfig(raster_scale=2.0)
        >>> config.points_per_pixel
        0.75
    """

    dpi: int = DEFAULT_DPI
    raster_scale: float = 1.0
    raster_background: str = "#ffffff"
    default_theme: str = DEFAULT_THEME
    default_palette_id: str = DEFAULT_PALETTE_ID
    fonts_dir: Optional[Path] = None
    image_root: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if self.raster_scale <= 0:
            raise ValueError(f"raster_scale must be positive: {self.raster_scale}")
        if self.fonts_dir is not None and not Path(self.fonts_dir).is_dir():
            raise ValueError(f"fonts_dir does not exist: {self.fonts_dir}")

    @property
    def points_per_pixel(self) -> float:
        """PDF points per page pixel."""
        return 72.0 / self.dpi
