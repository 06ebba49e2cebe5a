"""
Module: engine.images.provider

Purpose:
    Image sources for element photos and background images. Fetching is
    the caller's asynchronous concern; by the time a page renders, every
    image is either available synchronously from a provider or reported
    as an ImageLoadError.

Key Classes:
    - ImageProvider: Abstract base class for image access
    - FileImageProvider: Files under a root directory (and data: URIs)
    - MemoryImageProvider: Pre-fetched images keyed by source

Dependencies:
    - PIL: Image decoding

Used By:
    - engine.render.elements: Image elements
    - engine.render.background: Background images
    - scripts/render_page.py
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional

from PIL import Image, UnidentifiedImageError

from scrapbook_toolkit.engine.errors import ImageLoadError

logger = logging.getLogger(__name__)


class ImageProvider(ABC):
    """
    Abstract interface for loading images by source key.

    Implementations must raise ImageLoadError for any source they cannot
    deliver; renderers turn that into a diagnostic.
    """

    @abstractmethod
    def load(self, src: str) -> Image.Image:
        """
        Get the image for a source key.

        Args:
            src: Source key (relative path, data: URI or caller-defined key)

        Returns:
            Decoded PIL Image

        Raises:
            ImageLoadError: If the source cannot be loaded
        """


def _decode_data_uri(src: str) -> Image.Image:
    header, _, payload = src.partition(",")
    if ";base64" not in header:
        raise ImageLoadError(src[:40], "only base64 data URIs are supported")
    try:
        data = base64.b64decode(payload, validate=True)
        image = Image.open(io.BytesIO(data))
        image.load()
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(src[:40], str(e)) from e
    return image


class FileImageProvider(ImageProvider):
    """
    Loads images from disk, relative to a root directory.

    Decoded images are cached per provider instance; a provider is used
    for one export job, so the cache never outlives the job.

    Example:
        >>> provider = FileImageProvider(Path("assets"))
        >>> provider.load("photos/beach.jpg").size
        (1200, 800)
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else None
        self._cache: Dict[str, Image.Image] = {}

    def _resolve(self, src: str) -> Path:
        path = Path(src)
        if not path.is_absolute() and self.root is not None:
            path = self.root / path
        return path

    def load(self, src: str) -> Image.Image:
        if not src:
            raise ImageLoadError("", "empty source")
        if src in self._cache:
            return self._cache[src]

        if src.startswith("data:"):
            image = _decode_data_uri(src)
        else:
            path = self._resolve(src)
            if not path.exists():
                raise ImageLoadError(src, f"file not found: {path}")
            try:
                with Image.open(path) as opened:
                    opened.load()
                    image = opened.copy()
            except (UnidentifiedImageError, OSError) as e:
                raise ImageLoadError(src, str(e)) from e

        logger.debug(f"Loaded image {src[:60]} ({image.size[0]}x{image.size[1]})")
        self._cache[src] = image
        return image


class MemoryImageProvider(ImageProvider):
    """Serves images fetched ahead of rendering."""

    def __init__(self, images: Optional[Mapping[str, Image.Image]] = None):
        self._images: Dict[str, Image.Image] = dict(images or {})

    def add(self, src: str, image: Image.Image) -> None:
        self._images[src] = image

    def load(self, src: str) -> Image.Image:
        try:
            return self._images[src]
        except KeyError:
            raise ImageLoadError(src, "not prefetched") from None
