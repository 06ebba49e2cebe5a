"""
Unit Tests for Page Schema Validation
"""

import pytest

from scrapbook_toolkit.core.schemas.validator import ValidationError, validate_page


class TestValidatePage:
    """Tests for validate_page()."""

    def test_valid_page_when_basic_then_no_error(self):
        validate_page({"width": 800, "height": 600, "elements": []})

    def test_missing_height_then_lists_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_page({"width": 800})

        assert "Missing field: height" in exc_info.value.errors

    def test_boolean_width_then_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_page({"width": True, "height": 600})

        assert exc_info.value.path == "width"

    def test_elements_not_list_then_rejected(self):
        with pytest.raises(ValidationError):
            validate_page({"width": 800, "height": 600, "elements": {"id": "x"}})

    def test_strict_when_element_without_id_then_schema_error(self):
        """Full jsonschema validation catches what the basic checks do not."""
        data = {"width": 800, "height": 600, "elements": [{"type": "rect"}]}

        validate_page(data)  # basic mode accepts it
        with pytest.raises(ValidationError) as exc_info:
            validate_page(data, strict=True)

        assert exc_info.value.path == "elements.0"

    def test_strict_when_bad_background_kind_then_schema_error(self):
        data = {"width": 800, "height": 600, "background": {"type": "gradient"}}

        with pytest.raises(ValidationError) as exc_info:
            validate_page(data, strict=True)

        assert exc_info.value.path == "background.type"

    def test_strict_when_valid_then_no_error(self):
        validate_page(
            {
                "width": 800,
                "height": 600,
                "theme": "rough",
                "background": {"enabled": True, "type": "pattern", "value": "dots"},
                "elements": [{"id": "r1", "type": "rect", "x": 0, "y": 0, "width": 10, "height": 10}],
            },
            strict=True,
        )
