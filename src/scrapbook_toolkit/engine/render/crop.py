"""
Module: engine.render.crop

Purpose:
    Cover-style crop of a photo into an element box: the largest source
    rectangle with the box's aspect ratio, anchored by the element's clip
    position.

Key Functions:
    - parse_clip_position(): "left-top" style keyword -> (h, v)
    - calculate_crop(): Source crop rectangle

Used By:
    - engine.render.elements (image elements)
    - engine.render.background (cover fit)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)

DEFAULT_CLIP_POSITION = "center-middle"

_HORIZONTAL = ("left", "center", "right")
_VERTICAL = ("top", "middle", "bottom")


@dataclass(frozen=True, slots=True)
class CropRect:
    """Source rectangle in image pixels."""
    x: float
    y: float
    width: float
    height: float

    def box(self) -> Tuple[int, int, int, int]:
        """Integer (left, upper, right, lower) box for PIL.Image.crop()."""
        return (
            int(round(self.x)),
            int(round(self.y)),
            int(round(self.x + self.width)),
            int(round(self.y + self.height)),
        )


def parse_clip_position(clip_position: str) -> Tuple[str, str]:
    """
    Split a clip position into horizontal and vertical anchors.

    Unknown values fall back to center-middle.
    """
    parts = (clip_position or "").split("-")
    if len(parts) == 2 and parts[0] in _HORIZONTAL and parts[1] in _VERTICAL:
        return parts[0], parts[1]
    if clip_position and clip_position != DEFAULT_CLIP_POSITION:
        logger.debug(f"Unknown clip position {clip_position!r}, using {DEFAULT_CLIP_POSITION}")
    return "center", "middle"


def calculate_crop(
    image_size: Tuple[float, float],
    target_size: Tuple[float, float],
    clip_position: str = DEFAULT_CLIP_POSITION,
) -> CropRect:
    """
    Crop rectangle that fills `target_size` without distortion.

    Example:
        >>> calculate_crop((400, 200), (100, 100), "left-top")
        CropRect(x=0, y=0, width=200.0, height=200)
    """
    image_w, image_h = image_size
    target_w, target_h = target_size
    if image_w <= 0 or image_h <= 0 or target_w <= 0 or target_h <= 0:
        return CropRect(0, 0, max(0, image_w), max(0, image_h))

    target_ratio = target_w / target_h
    if target_ratio >= image_w / image_h:
        crop_w = image_w
        crop_h = image_w / target_ratio
    else:
        crop_w = image_h * target_ratio
        crop_h = image_h

    horizontal, vertical = parse_clip_position(clip_position)
    x = {"left": 0, "center": (image_w - crop_w) / 2, "right": image_w - crop_w}[horizontal]
    y = {"top": 0, "middle": (image_h - crop_h) / 2, "bottom": image_h - crop_h}[vertical]
    return CropRect(x, y, crop_w, crop_h)
