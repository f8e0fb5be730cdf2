"""Tests for infrastructure/parsers/source.py."""

import pytest

from lpfm.application.builder.document_builder import DocumentBuilder
from lpfm.domain.exceptions.parsing import SourceParseError
from lpfm.domain.exceptions.validation import ValidationError
from lpfm.domain.model.document import Document
from lpfm.domain.model.enums import MethodKind, ParameterKind, Visibility
from lpfm.domain.model.unit import ClassDef, ModuleDef
from lpfm.domain.model.value import RawExpression, Symbol
from lpfm.infrastructure.parsers.source import RubySourceParser


def parse(text: str) -> Document:
    """Parse Ruby source with a fresh builder."""
    return RubySourceParser().parse(text, DocumentBuilder())


class TestUnits:
    """Tests for classes, modules and namespaces."""

    def test_class_with_superclass(self) -> None:
        document = parse("class Admin < User\nend\n")
        admin = document.unit("Admin")
        assert isinstance(admin, ClassDef)
        assert admin.superclass == "User"

    def test_module(self) -> None:
        assert isinstance(parse("module Helpers\nend\n").unit("Helpers"), ModuleDef)

    def test_nested_modules_become_namespace_only(self) -> None:
        source = "module API\n  module V1\n    class Client\n    end\n  end\nend\n"
        document = parse(source)
        assert [u.name for u in document.units] == ["API", "V1", "Client"]
        assert document.unit("API").namespace_only is True
        assert document.unit("API::V1").namespace == ("API",)
        assert document.unit("API::V1::Client").namespace == ("API", "V1")

    def test_scoped_class_name_kept_whole(self) -> None:
        document = parse("class Billing::Invoice < Base\nend\n")
        (invoice,) = document.units
        assert isinstance(invoice, ClassDef)
        assert invoice.name == "Billing::Invoice"
        assert invoice.namespace == ()
        assert invoice.superclass == "Base"

    def test_leading_scope_operator_dropped(self) -> None:
        (unit,) = parse("class ::Invoice\nend\n").units
        assert unit.name == "Invoice"

    def test_unit_nested_in_scoped_class(self) -> None:
        document = parse("class Billing::Invoice\n  class Line\n  end\nend\n")
        assert document.unit("Billing::Invoice::Line").namespace == ("Billing::Invoice",)

    def test_same_name_in_sibling_namespaces(self) -> None:
        source = (
            "module V1\n  class Client\n    def get\n    end\n  end\nend\n\n"
            "module V2\n  class Client\n    def post\n    end\n  end\nend\n"
        )
        document = parse(source)
        assert list(document.classes) == ["V1::Client", "V2::Client"]
        assert [m.name for m in document.unit("V1::Client").methods] == ["get"]
        assert [m.name for m in document.unit("V2::Client").methods] == ["post"]

    def test_reopened_class_merges(self) -> None:
        document = parse("class Foo\n  def a\n  end\nend\n\nclass Foo\n  def b\n  end\nend\n")
        assert len(document.units) == 1
        assert [m.name for m in document.unit("Foo").methods] == ["a", "b"]

    def test_requires(self) -> None:
        document = parse("require 'json'\nrequire \"net/http\"\n\nclass Foo\nend\n")
        assert document.requires == ("json", "net/http")


class TestMethods:
    """Tests for method extraction."""

    def test_body_is_dedented(self) -> None:
        source = (
            "class Foo\n"
            "  def bar\n"
            "    if ready?\n"
            "      go\n"
            "    end\n"
            "  end\n"
            "end\n"
        )
        (method,) = parse(source).unit("Foo").methods
        assert method.body == "if ready?\n  go\nend"

    def test_empty_method(self) -> None:
        (method,) = parse("class Foo\n  def noop\n  end\nend\n").unit("Foo").methods
        assert method.body == ""
        assert method.parameters == ()

    def test_class_method(self) -> None:
        (method,) = parse("class Foo\n  def self.build\n    new\n  end\nend\n").unit("Foo").methods
        assert method.name == "build"
        assert method.kind is MethodKind.CLASS
        assert method.body == "new"

    def test_singleton_block(self) -> None:
        source = "class Foo\n  class << self\n    def create\n    end\n  end\n\n  def run\n  end\nend\n"
        create, run = parse(source).unit("Foo").methods
        assert create.kind is MethodKind.SINGLETON_BLOCK
        assert run.kind is MethodKind.INSTANCE

    def test_parameters(self) -> None:
        source = "class Foo\n  def run(a, b = 1, *rest, k:, o: 2, **opts, &blk)\n  end\nend\n"
        (method,) = parse(source).unit("Foo").methods
        assert [p.kind for p in method.parameters] == [
            ParameterKind.REQUIRED,
            ParameterKind.OPTIONAL,
            ParameterKind.REST,
            ParameterKind.REQUIRED_KEYWORD,
            ParameterKind.OPTIONAL_KEYWORD,
            ParameterKind.KEYWORD_REST,
            ParameterKind.BLOCK,
        ]
        assert method.signature == "run(a, b = 1, *rest, k:, o: 2, **opts, &blk)"

    def test_leading_comments_become_prose(self) -> None:
        source = "class Foo\n  # Greets.\n  # Politely.\n  def hi\n  end\nend\n"
        (method,) = parse(source).unit("Foo").methods
        assert method.prose == "Greets.\nPolitely."


class TestVisibility:
    """Tests for private/protected/public handling."""

    def test_visibility_sections(self) -> None:
        source = (
            "class Foo\n"
            "  def a\n  end\n\n"
            "  private\n\n"
            "  def b\n  end\n\n"
            "  protected\n\n"
            "  def c\n  end\n"
            "end\n"
        )
        methods = parse(source).unit("Foo").methods
        assert [m.visibility for m in methods] == [
            Visibility.PUBLIC,
            Visibility.PRIVATE,
            Visibility.PROTECTED,
        ]

    def test_private_with_symbol(self) -> None:
        source = "class Foo\n  def a\n  end\n\n  def b\n  end\n\n  private :a\nend\n"
        a, b = parse(source).unit("Foo").methods
        assert a.visibility is Visibility.PRIVATE
        assert b.visibility is Visibility.PUBLIC

    def test_private_def(self) -> None:
        source = "class Foo\n  private def helper\n  end\n\n  def visible\n  end\nend\n"
        helper, visible = parse(source).unit("Foo").methods
        assert helper.visibility is Visibility.PRIVATE
        assert visible.visibility is Visibility.PUBLIC

    def test_class_method_takes_active_visibility(self) -> None:
        source = "class Foo\n  private\n\n  def self.helper\n    1\n  end\nend\n"
        (method,) = parse(source).unit("Foo").methods
        assert method.kind is MethodKind.CLASS
        assert method.visibility is Visibility.PRIVATE

    def test_private_def_self(self) -> None:
        source = "class Foo\n  private def self.helper\n  end\n\n  def self.build\n  end\nend\n"
        helper, build = parse(source).unit("Foo").methods
        assert helper.kind is MethodKind.CLASS
        assert helper.visibility is Visibility.PRIVATE
        assert build.visibility is Visibility.PUBLIC

    def test_visibility_inside_singleton_block(self) -> None:
        source = (
            "class Foo\n"
            "  class << self\n"
            "    def create\n    end\n\n"
            "    private\n\n"
            "    def cache\n    end\n"
            "  end\n\n"
            "  def run\n  end\n"
            "end\n"
        )
        create, cache, run = parse(source).unit("Foo").methods
        assert create.visibility is Visibility.PUBLIC
        assert cache.kind is MethodKind.SINGLETON_BLOCK
        assert cache.visibility is Visibility.PRIVATE
        assert run.visibility is Visibility.PUBLIC

    def test_private_symbol_inside_singleton_block(self) -> None:
        source = (
            "class Foo\n"
            "  def load\n  end\n\n"
            "  class << self\n"
            "    def load\n    end\n\n"
            "    private :load\n"
            "  end\n"
            "end\n"
        )
        instance, singleton = parse(source).unit("Foo").methods
        assert instance.visibility is Visibility.PUBLIC
        assert singleton.visibility is Visibility.PRIVATE


class TestDeclarations:
    """Tests for attrs, constants, mixins and aliases."""

    def test_attrs(self) -> None:
        source = (
            "class User\n"
            "  attr_reader :name, :age\n"
            "  attr_writer :email\n"
            "  attr_accessor :status\n"
            "end\n"
        )
        user = parse(source).unit("User")
        assert user.readers == ("name", "age")
        assert user.writers == ("email",)
        assert user.accessors == ("status",)

    def test_constants_decoded(self) -> None:
        source = (
            "class Config\n"
            "  NAME = 'app'\n"
            "  MAX = 3\n"
            "  RATE = 0.5\n"
            "  ENABLED = true\n"
            "  NOTHING = nil\n"
            "  FORMAT = :json\n"
            "  OFFSET = -2\n"
            "  TAGS = %w[a b]\n"
            "  @@count = 0\n"
            "end\n"
        )
        config = parse(source).unit("Config")
        assert dict(config.constants) == {
            "NAME": "app",
            "MAX": 3,
            "RATE": 0.5,
            "ENABLED": True,
            "NOTHING": None,
            "FORMAT": Symbol("json"),
            "OFFSET": -2,
            "TAGS": RawExpression("%w[a b]"),
        }
        assert dict(config.class_variables) == {"@@count": 0}

    def test_interpolated_string_stays_raw(self) -> None:
        config = parse('class C\n  GREETING = "hi #{name}"\nend\n').unit("C")
        assert config.constants["GREETING"] == RawExpression('"hi #{name}"')

    def test_heredoc_constant_keeps_body(self) -> None:
        source = "class Foo\n  TEXT = <<~EOS\n    hello\n  EOS\n\n  def run\n  end\nend\n"
        foo = parse(source).unit("Foo")
        assert foo.constants["TEXT"] == RawExpression("<<~EOS\n    hello\n  EOS")
        assert [m.name for m in foo.methods] == ["run"]

    def test_mixins(self) -> None:
        source = "class Foo\n  include Comparable\n  include Enumerable\n  extend Forwardable\nend\n"
        foo = parse(source).unit("Foo")
        assert foo.includes == ("Comparable", "Enumerable")
        assert foo.extends == ("Forwardable",)

    def test_aliases(self) -> None:
        source = (
            "class Foo\n"
            "  def length\n  end\n\n"
            "  alias size length\n"
            "  alias_method :count, :length\n"
            "end\n"
        )
        foo = parse(source).unit("Foo")
        assert dict(foo.aliases) == {"size": "length"}
        assert dict(foo.alias_methods) == {"count": "length"}


class TestErrors:
    """Tests for FAIL-FIRST error reporting."""

    def test_empty_content(self) -> None:
        with pytest.raises(ValidationError, match="Content cannot be empty"):
            parse("  \n")

    def test_none_raises(self) -> None:
        with pytest.raises(TypeError):
            RubySourceParser().parse(None, DocumentBuilder())  # type: ignore[arg-type]

    def test_syntax_error(self) -> None:
        with pytest.raises(SourceParseError, match="Failed to parse Ruby code") as exc_info:
            parse("class Foo def bar")
        assert exc_info.value.diagnostics

    def test_unbalanced_end(self) -> None:
        with pytest.raises(SourceParseError):
            parse("class Foo\n  def bar\n  end\n")
