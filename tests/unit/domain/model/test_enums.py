"""Tests for domain/model/enums.py."""

from lpfm.domain.model.enums import AttrKind, UnitKind, Visibility


class TestVisibility:
    """Tests for Visibility keyword resolution."""

    def test_values_are_keywords(self) -> None:
        assert [v.value for v in Visibility] == ["public", "private", "protected"]

    def test_from_keyword_is_case_insensitive(self) -> None:
        assert Visibility.from_keyword("Private") is Visibility.PRIVATE
        assert Visibility.from_keyword("  PROTECTED ") is Visibility.PROTECTED

    def test_from_keyword_unknown(self) -> None:
        assert Visibility.from_keyword("initialize") is None


class TestAttrKind:
    """Tests for AttrKind."""

    def test_values_are_macro_names(self) -> None:
        assert AttrKind.READER.value == "attr_reader"
        assert AttrKind.WRITER.value == "attr_writer"
        assert AttrKind.ACCESSOR.value == "attr_accessor"

    def test_from_keyword(self) -> None:
        assert AttrKind.from_keyword("attr_accessor") is AttrKind.ACCESSOR
        assert AttrKind.from_keyword("attr") is None


class TestUnitKind:
    """Tests for UnitKind."""

    def test_from_value(self) -> None:
        assert UnitKind("class") is UnitKind.CLASS
        assert UnitKind("module") is UnitKind.MODULE
