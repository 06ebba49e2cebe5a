"""
Scrapbook Toolkit Core Package

Page description models, the JSON schema for page descriptions and the
parser that turns raw page JSON into models.
"""

from .models import PageDescription, BackgroundSpec, PageElement, RichTextStyle
from .utils.serialization import page_from_dict

__all__ = [
    "PageDescription",
    "BackgroundSpec",
    "PageElement",
    "RichTextStyle",
    "page_from_dict",
]
