"""
Module: engine.errors

Purpose:
    Exception types raised inside the rendering engine.

    Only LayoutContractError escapes a page render; it signals a caller
    bug (negative sizes and the like). The other errors are recovered at
    the smallest enclosing unit (a path, an image, an element) and turn
    into diagnostics on the RenderReport.

Key Classes:
    - RenderError: Base class
    - LayoutContractError: Invalid arguments to a layout function
    - PathGenerationError: Theme/sketch generator failure
    - ImageLoadError: Image source could not be loaded
    - MalformedElementError: Element geometry unusable
    - MeasurementUnavailableError: Measurer not ready (fonts not loaded)

Used By:
    - engine.text, engine.themes, engine.qna, engine.images
    - engine.render, engine.compositor
"""

from __future__ import annotations


class RenderError(Exception):
    """Base class for engine errors."""


class LayoutContractError(RenderError, ValueError):
    """Raised when a layout function receives arguments that break its contract."""


class PathGenerationError(RenderError):
    """Raised when a themed path cannot be generated."""


class ImageLoadError(RenderError):
    """Raised when an image source cannot be loaded."""

    def __init__(self, src: str, reason: str = ""):
        message = f"Image could not be loaded: {src}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.src = src


class MalformedElementError(RenderError):
    """Raised when an element's data cannot be rendered."""

    def __init__(self, element_id: str, reason: str):
        super().__init__(f"Element {element_id} is malformed: {reason}")
        self.element_id = element_id
        self.reason = reason


class MeasurementUnavailableError(RenderError):
    """Raised by a measurer that cannot measure yet."""
