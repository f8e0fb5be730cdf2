"""Tests for domain/model/unit.py."""

from types import MappingProxyType

import pytest

from lpfm.domain.model.enums import AttrKind, UnitKind
from lpfm.domain.model.unit import ClassDef, InlineAttr, ModuleDef, Unit
from tests.factories import make_class, make_method, make_module


class TestInlineAttr:
    """Tests for InlineAttr validation."""

    def test_valid(self) -> None:
        attr = InlineAttr(kind=AttrKind.READER, names=("name", "age"))
        assert attr.names == ("name", "age")

    def test_no_names_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one attribute"):
            InlineAttr(kind=AttrKind.WRITER, names=())

    def test_empty_name_raises(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            InlineAttr(kind=AttrKind.ACCESSOR, names=("",))


class TestUnitValidation:
    """Tests for shared unit invariants."""

    def test_empty_name_raises(self) -> None:
        with pytest.raises(ValueError, match="unit name must not be empty"):
            ClassDef(name="")

    def test_scoped_name_allowed(self) -> None:
        unit = ClassDef(name="Billing::Invoice")
        assert unit.path == ("Billing::Invoice",)
        assert unit.qualified_name == "Billing::Invoice"

    def test_empty_scoped_segment_raises(self) -> None:
        with pytest.raises(ValueError, match="empty segment"):
            ModuleDef(name="A::")

    def test_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Unit(name="Foo")  # type: ignore[abstract]

    def test_empty_namespace_segment_raises(self) -> None:
        with pytest.raises(ValueError, match="empty segment"):
            ClassDef(name="Foo", namespace=("App", ""))

    def test_class_variable_without_prefix_raises(self) -> None:
        with pytest.raises(ValueError, match="must start with '@@'"):
            ClassDef(name="Foo", class_variables=MappingProxyType({"count": 0}))

    def test_alias_in_both_buckets_raises(self) -> None:
        with pytest.raises(ValueError, match="both alias and alias_method"):
            make_class("Foo", aliases={"size": "length"}, alias_methods={"size": "count"})

    def test_empty_superclass_raises(self) -> None:
        with pytest.raises(ValueError, match="superclass"):
            ClassDef(name="Foo", superclass="")

    def test_namespace_only_module_with_content_raises(self) -> None:
        with pytest.raises(ValueError, match="must not have own content"):
            make_module("App", make_method("run"), namespace_only=True)


class TestUnitProperties:
    """Tests for names, kinds and predicates."""

    def test_kinds(self) -> None:
        assert make_class("Foo").kind is UnitKind.CLASS
        assert make_module("Bar").kind is UnitKind.MODULE

    def test_qualified_name(self) -> None:
        unit = make_class("Handler", namespace=("Api", "V1"))
        assert unit.path == ("Api", "V1", "Handler")
        assert unit.qualified_name == "Api::V1::Handler"

    def test_top_level_qualified_name(self) -> None:
        assert make_class("Foo").qualified_name == "Foo"

    def test_empty_unit_has_no_own_content(self) -> None:
        unit = make_class("Foo")
        assert unit.has_own_content() is False
        assert unit.has_attrs() is False
        assert unit.has_mixins() is False

    def test_predicates(self) -> None:
        unit = make_class(
            "Foo",
            make_method("run"),
            constants={"MAX": 1},
            includes=("Comparable",),
            aliases={"size": "length"},
        )
        assert unit.has_methods() is True
        assert unit.has_constants() is True
        assert unit.has_includes() is True
        assert unit.has_extends() is False
        assert unit.has_aliases() is True
        assert unit.has_own_content() is True


class TestAttributeNames:
    """Tests for merged reader/writer/accessor names."""

    def test_declared_then_inline_deduplicated(self) -> None:
        unit = make_class(
            "User",
            attr_readers=("name",),
            inline_attrs=(
                InlineAttr(AttrKind.READER, ("name", "age")),
                InlineAttr(AttrKind.ACCESSOR, ("status",)),
            ),
        )
        assert unit.readers == ("name", "age")
        assert unit.writers == ()
        assert unit.accessors == ("status",)

    def test_inline_only(self) -> None:
        unit = make_class("User", inline_attrs=(InlineAttr(AttrKind.WRITER, ("email",)),))
        assert unit.has_declared_attrs() is False
        assert unit.has_inline_attrs() is True
        assert unit.writers == ("email",)
