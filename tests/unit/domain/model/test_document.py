"""Tests for domain/model/document.py."""

import pytest

from lpfm.domain.model.document import Document
from tests.factories import make_class, make_document, make_module


class TestDocumentCreation:
    """Tests for Document creation and validation."""

    def test_empty(self) -> None:
        document = Document.empty()
        assert document.units == ()
        assert document.requires == ()
        assert dict(document.metadata) == {}
        assert document.filename is None
        assert document.has_content() is False

    def test_duplicate_unit_name_raises(self) -> None:
        with pytest.raises(ValueError, match="defined more than once"):
            make_document(make_class("Foo"), make_module("Foo"))

    def test_duplicate_qualified_name_raises(self) -> None:
        with pytest.raises(ValueError, match="'A::Foo' defined more than once"):
            make_document(make_class("Foo", namespace=("A",)), make_class("A::Foo"))

    def test_duplicate_require_raises(self) -> None:
        with pytest.raises(ValueError, match="duplicates"):
            make_document(requires=("json", "json"))

    def test_non_unit_raises(self) -> None:
        with pytest.raises(TypeError, match="ClassDef or ModuleDef"):
            Document(units=("Foo",))  # type: ignore[arg-type]

    def test_requires_only_has_content(self) -> None:
        assert make_document(requires=("json",)).has_content() is True


class TestDocumentLookup:
    """Tests for class/module views and lookup."""

    def test_classes_and_modules_keep_order(self) -> None:
        document = make_document(
            make_module("Helpers"), make_class("B"), make_class("A"), make_module("Util")
        )
        assert list(document.classes) == ["B", "A"]
        assert list(document.modules) == ["Helpers", "Util"]
        assert document.has_classes() is True
        assert document.has_modules() is True

    def test_views_are_read_only(self) -> None:
        document = make_document(make_class("Foo"))
        with pytest.raises(TypeError):
            document.classes["Bar"] = make_class("Bar")  # type: ignore[index]

    def test_unit_lookup(self) -> None:
        foo = make_class("Foo")
        document = make_document(foo)
        assert document.unit("Foo") is foo
        assert document.unit("Missing") is None

    def test_lookup_by_qualified_name(self) -> None:
        v1 = make_class("Client", namespace=("V1",))
        v2 = make_class("Client", namespace=("V2",))
        document = make_document(v1, v2)
        assert list(document.classes) == ["V1::Client", "V2::Client"]
        assert document.unit("V2::Client") is v2
        assert document.unit("Client") is None
