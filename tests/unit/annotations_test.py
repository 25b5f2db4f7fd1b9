"""Unit tests for annotation line rendering."""

import math

import pytest

from class_maker.core.annotations import build_annotation_line, format_annotation_option, quote_annotation_value
from class_maker.exceptions import AnnotationValueError, ClassMakerError


class TestQuoteAnnotationValue:
    """Tests for scalar value quoting."""

    def test_strings_are_double_quoted(self) -> None:
        assert quote_annotation_value("email") == '"email"'

    def test_embedded_double_quotes_are_doubled(self) -> None:
        assert quote_annotation_value('say "hi"') == '"say ""hi"""'

    def test_booleans_and_null_are_bare(self) -> None:
        assert quote_annotation_value(True) == "true"
        assert quote_annotation_value(False) == "false"
        assert quote_annotation_value(None) == "null"

    def test_numbers_are_bare(self) -> None:
        assert quote_annotation_value(255) == "255"
        assert quote_annotation_value(0.5) == "0.5"

    def test_floats_are_written_without_exponent(self) -> None:
        assert quote_annotation_value(1e-05) == "0.00001"
        assert quote_annotation_value(1e16) == "10000000000000000.0"
        assert quote_annotation_value(2.0) == "2.0"

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_floats_are_rejected(self, value: float) -> None:
        with pytest.raises(AnnotationValueError, match="finite"):
            quote_annotation_value(value)

    def test_nested_collections_are_rejected(self) -> None:
        with pytest.raises(AnnotationValueError) as exc_info:
            quote_annotation_value(["a"])
        assert isinstance(exc_info.value, ClassMakerError)


class TestFormatAnnotationOption:
    """Tests for option rendering."""

    def test_list_values_use_braces(self) -> None:
        assert format_annotation_option("groups", ["create", "edit"]) == 'groups={"create", "edit"}'

    def test_mapping_values_use_quoted_keys(self) -> None:
        assert format_annotation_option("payload", {"severity": "error"}) == 'payload={"severity" = "error"}'


class TestBuildAnnotationLine:
    """Tests for full annotation lines."""

    def test_renders_options_in_caller_order(self) -> None:
        """Test that options keep their insertion order."""
        line = build_annotation_line("Assert\\Length", {"min": 2, "max": 255, "allowEmptyString": False})
        assert line == "@Assert\\Length(min=2, max=255, allowEmptyString=false)"

    def test_renders_empty_parentheses_without_options(self) -> None:
        assert build_annotation_line("NotNull", {}) == "@NotNull()"

    def test_does_not_double_the_at_sign(self) -> None:
        assert build_annotation_line("@Range", {"min": 0}) == "@Range(min=0)"

    def test_quotes_string_options(self) -> None:
        line = build_annotation_line("Assert\\Regex", {"pattern": "/^\\d+$/", "message": 'Use "digits"'})
        assert line == '@Assert\\Regex(pattern="/^\\d+$/", message="Use ""digits""")'
