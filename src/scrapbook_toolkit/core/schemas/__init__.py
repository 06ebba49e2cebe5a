"""
Schemas Package

JSON schema for page descriptions and validation utilities.
"""

from .validator import validate_page, ValidationError

__all__ = [
    "validate_page",
    "ValidationError",
]
