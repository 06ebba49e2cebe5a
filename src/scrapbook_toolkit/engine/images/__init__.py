"""
Images Package

Synchronous image sources used while a page renders.
"""

from .provider import ImageProvider, FileImageProvider, MemoryImageProvider

__all__ = ["ImageProvider", "FileImageProvider", "MemoryImageProvider"]
