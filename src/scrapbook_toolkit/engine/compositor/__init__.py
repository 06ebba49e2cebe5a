"""
Compositor Package

Page painting pipeline and the live-scene display-list cache.
"""

from .compositor import PageCompositor, RenderReport, order_elements
from .scene import LiveScene

__all__ = ["PageCompositor", "RenderReport", "order_elements", "LiveScene"]
