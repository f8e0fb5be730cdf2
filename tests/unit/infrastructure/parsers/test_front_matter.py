"""Tests for infrastructure/parsers/front_matter.py."""

import datetime

import pytest

from lpfm.domain.exceptions.validation import MetadataError
from lpfm.domain.model.value import RawExpression
from lpfm.infrastructure.parsers.front_matter import (
    split_front_matter,
    string_list,
    string_pairs,
    to_constant_value,
    value_pairs,
)


class TestSplitFrontMatter:
    """Tests for splitting the leading YAML block."""

    def test_absent(self) -> None:
        result = split_front_matter("# Foo")
        assert result.present is False
        assert dict(result.metadata) == {}
        assert result.body == "# Foo"

    def test_present(self) -> None:
        result = split_front_matter("---\ntype: module\n---\n# Foo")
        assert result.present is True
        assert dict(result.metadata) == {"type": "module"}
        assert result.body == "# Foo"

    def test_empty_block(self) -> None:
        result = split_front_matter("---\n---\n# Foo")
        assert result.present is True
        assert dict(result.metadata) == {}

    def test_unclosed_raises(self) -> None:
        with pytest.raises(MetadataError, match="missing closing"):
            split_front_matter("---\ntype: module\n# Foo")

    def test_non_mapping_raises(self) -> None:
        with pytest.raises(MetadataError, match="expected a mapping, got list"):
            split_front_matter("---\n- a\n- b\n---\n# Foo")

    def test_invalid_yaml_raises(self) -> None:
        with pytest.raises(MetadataError):
            split_front_matter("---\na: b: c\n---\n# Foo")


class TestValueExtraction:
    """Tests for reading typed values from metadata."""

    def test_string_list_accepts_scalar_and_list(self) -> None:
        metadata = {"one": "json", "many": ["json", None, 3], "missing": None}
        assert string_list(metadata, "one") == ("json",)
        assert string_list(metadata, "many") == ("json", "3")
        assert string_list(metadata, "missing") == ()
        assert string_list(metadata, "absent") == ()

    def test_string_pairs_ignores_non_mapping(self) -> None:
        assert string_pairs({"aliases": {"size": "length"}}, "aliases") == (("size", "length"),)
        assert string_pairs({"aliases": ["size"]}, "aliases") == ()

    def test_value_pairs_types_values(self) -> None:
        metadata = {"constants": {"MAX": 3, "TAGS": ["a", "b"]}}
        assert value_pairs(metadata, "constants") == (
            ("MAX", 3),
            ("TAGS", RawExpression('["a", "b"]')),
        )


class TestToConstantValue:
    """Tests for YAML value → constant value conversion."""

    @pytest.mark.parametrize("value", [None, True, 7, 2.5, "text"])
    def test_scalars_kept(self, value: object) -> None:
        assert to_constant_value(value) == value

    def test_list_becomes_ruby_array(self) -> None:
        assert to_constant_value([1, "two", None]) == RawExpression('[1, "two", nil]')

    def test_mapping_becomes_ruby_hash(self) -> None:
        assert to_constant_value({"timeout": 30, "Mode": "fast"}) == RawExpression(
            '{ timeout: 30, "Mode" => "fast" }'
        )

    def test_empty_mapping(self) -> None:
        assert to_constant_value({}) == RawExpression("{}")

    def test_date_becomes_string(self) -> None:
        assert to_constant_value(datetime.date(2024, 1, 2)) == "2024-01-02"
