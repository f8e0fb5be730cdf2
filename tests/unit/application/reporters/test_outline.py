"""Tests for OutlineReporter.

Tests:
- OutlineConfig default values and validation
- Header, tree and summary sections
- Namespace wrappers and method labels
"""

import pytest

from lpfm.application.reporters.outline import OutlineConfig, OutlineReporter
from lpfm.domain.model.document import Document
from lpfm.domain.model.enums import MethodKind, Visibility
from tests.factories import make_class, make_document, make_method, make_module


class TestOutlineConfig:
    """Tests for OutlineConfig."""

    def test_default_values(self) -> None:
        """Default values are set correctly."""
        config = OutlineConfig()
        assert config.show_methods is True
        assert config.show_values is True
        assert config.show_summary is True
        assert config.color is False
        assert config.width == 120

    def test_narrow_width_raises(self) -> None:
        """Width below 40 is rejected."""
        with pytest.raises(ValueError, match="width must be >= 40"):
            OutlineConfig(width=20)


class TestOutlineReporter:
    """Tests for OutlineReporter.report()."""

    def test_header_counts_units(self) -> None:
        """Header shows unit totals and requires."""
        document = make_document(make_class("A"), make_module("M"), requires=("json",))
        output = OutlineReporter().report(document)
        assert "DOCUMENT OUTLINE" in output
        assert "Units: 2 (classes: 1, modules: 1)" in output
        assert "Requires: json" in output

    def test_empty_document(self) -> None:
        """Empty document still has a header and no summary."""
        output = OutlineReporter().report(Document.empty())
        assert "Units: 0" in output
        assert "Methods" not in output

    def test_none_raises(self) -> None:
        with pytest.raises(TypeError, match="document must not be None"):
            OutlineReporter().report(None)  # type: ignore[arg-type]

    def test_methods_labelled_with_visibility(self) -> None:
        """Methods show visibility and self. prefix for class methods."""
        document = make_document(
            make_class(
                "Service",
                make_method("call", "input"),
                make_method("helper", visibility=Visibility.PRIVATE),
                make_method("build", kind=MethodKind.CLASS),
                make_method("create", kind=MethodKind.SINGLETON_BLOCK),
                superclass="Base",
            )
        )
        output = OutlineReporter().report(document)
        assert "class Service < Base" in output
        assert "public def call(input)" in output
        assert "private def helper" in output
        assert "public def self.build" in output
        assert "(class << self)" in output

    def test_hide_methods(self) -> None:
        document = make_document(make_class("Service", make_method("call")))
        output = OutlineReporter(OutlineConfig(show_methods=False, show_summary=False)).report(document)
        assert "def call" not in output

    def test_values_and_attrs(self) -> None:
        """Constants, class variables and attributes are listed."""
        document = make_document(
            make_class(
                "Config",
                constants={"MAX": 3},
                class_variables={"@@count": 0},
                attr_readers=("name",),
            )
        )
        output = OutlineReporter().report(document)
        assert "MAX = 3" in output
        assert "@@count = 0" in output
        assert "attr_reader name" in output

    def test_namespace_wrapper(self) -> None:
        """Implicit namespaces appear as wrapper modules."""
        document = make_document(make_class("Client", namespace=("API", "V1")))
        output = OutlineReporter().report(document)
        assert "module API (namespace)" in output
        assert "module V1 (namespace)" in output
        assert "class API::V1::Client" in output

    def test_summary_table(self) -> None:
        """Summary table lists each unit."""
        document = make_document(make_class("Service", make_method("call")))
        output = OutlineReporter().report(document)
        assert "Units" in output
        assert "Methods" in output
        assert "Service" in output
