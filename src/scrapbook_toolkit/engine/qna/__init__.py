"""
QnA Layout Composer Package

Inline and block composition of question/answer text blocks.
"""

from .composer import (
    QnALayoutVariant,
    create_inline_layout,
    create_block_layout,
    create_layout,
    block_areas,
    layout_for_element,
)

__all__ = [
    "QnALayoutVariant",
    "create_inline_layout",
    "create_block_layout",
    "create_layout",
    "block_areas",
    "layout_for_element",
]
