"""
Unit tests for tags.py module.

Parsing must be total: every input yields a list, and only values that are
present but not a JSON array of strings are flagged as malformed.
"""

import pytest

from scripts.processors.tags import EMPTY_TAGS, TagParseResult, parse_tags


class TestParseTags:
    """Test cases for parse_tags."""

    def test_single_tag(self):
        assert parse_tags('["Hiking"]') == TagParseResult(["Hiking"], False)

    def test_multiple_tags_keep_source_order(self):
        result = parse_tags('["Hiking", "Camping"]')

        assert result.tags == ["Hiking", "Camping"]
        assert result.malformed is False

    def test_empty_array_literal(self):
        assert parse_tags(EMPTY_TAGS) == TagParseResult([], False)

    def test_empty_array_with_whitespace(self):
        assert parse_tags("[ ]") == TagParseResult([], False)

    @pytest.mark.parametrize("missing", [None, float("nan")])
    def test_missing_values_are_empty_not_malformed(self, missing):
        assert parse_tags(missing) == TagParseResult([], False)

    @pytest.mark.parametrize(
        "raw",
        [
            "Hiking, Camping",
            '["Hiking"',
            "",
            '{"tag": "Hiking"}',
            '"Hiking"',
            "42",
            '["Hiking", 3]',
            '[["Hiking"]]',
            "null",
        ],
    )
    def test_malformed_values(self, raw):
        """Test values that are not a JSON array of strings."""
        result = parse_tags(raw)

        assert result.tags == []
        assert result.malformed is True

    def test_non_string_input_is_malformed(self):
        assert parse_tags(42) == TagParseResult([], True)

    def test_numbers_other_than_nan_are_malformed(self):
        assert parse_tags(1.5).malformed is True

    def test_deeply_nested_array_is_malformed(self):
        """Test that nesting past the JSON decoder's recursion limit is malformed."""
        assert parse_tags("[" * 100000) == TagParseResult([], True)

    def test_null_element_is_malformed(self):
        assert parse_tags('["Hiking", null]') == TagParseResult([], True)
