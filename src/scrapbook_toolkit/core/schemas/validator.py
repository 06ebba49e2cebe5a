"""
Schema Validation Utilities

Validates raw page-description JSON before it is parsed into models.

Basic checks (required keys, page size) always run and fail fast with a
precise path. Strict mode additionally validates the whole document
against `page.schema.json` with jsonschema.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_page(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a page description.

    Args:
        data: Page dictionary (camelCase keys)
        strict: If True, also run full jsonschema validation

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Page must be an object, got {type(data).__name__}")

    missing = [f for f in ("width", "height") if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing],
        )

    for key in ("width", "height"):
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValidationError(
                f"Invalid page {key}: {value!r} (must be a positive number)",
                path=key,
            )

    elements = data.get("elements", [])
    if not isinstance(elements, list):
        raise ValidationError("elements must be a list", path="elements")

    if strict:
        schema = _load_schema("page")
        validator = jsonschema.Draft7Validator(schema)
        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
        if errors:
            first = errors[0]
            raise ValidationError(
                f"Schema validation failed: {first.message}",
                path=".".join(str(p) for p in first.absolute_path),
                errors=[e.message for e in errors],
            )
