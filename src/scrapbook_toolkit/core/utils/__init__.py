"""
Utils Package

Page-description parsing.
"""

from .serialization import (
    page_from_dict,
    load_page_json,
    background_from_dict,
    element_from_dict,
    style_from_dict,
)

__all__ = [
    "page_from_dict",
    "load_page_json",
    "background_from_dict",
    "element_from_dict",
    "style_from_dict",
]
