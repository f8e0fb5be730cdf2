"""Domain enumerations."""

from __future__ import annotations

from enum import Enum, auto


class Visibility(Enum):
    """Ruby method visibility. Value is the keyword used in source."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"

    @classmethod
    def from_keyword(cls, keyword: str) -> Visibility | None:
        """Resolve a visibility keyword, case-insensitive.

        Args:
            keyword: Heading title or call name

        Returns:
            Matching Visibility, None if the text is not a visibility keyword
        """
        normalized = keyword.strip().lower()
        for visibility in cls:
            if visibility.value == normalized:
                return visibility
        return None


class UnitKind(Enum):
    """Kind of program unit."""

    CLASS = "class"
    MODULE = "module"


class MethodKind(Enum):
    """How a method is bound.

    Exactly one kind per method, so that combinations such as
    a dotted receiver inside a singleton block cannot be expressed.
    """

    INSTANCE = auto()  # def name
    CLASS = auto()  # def self.name
    OBJECT_RECEIVER = auto()  # def obj.name, receiver kept in name
    SINGLETON_BLOCK = auto()  # def name inside class << self


class ParameterKind(Enum):
    """Ruby parameter kinds in declaration grammar order."""

    REQUIRED = auto()  # a
    OPTIONAL = auto()  # a = 1
    REST = auto()  # *args
    REQUIRED_KEYWORD = auto()  # key:
    OPTIONAL_KEYWORD = auto()  # key: 1
    KEYWORD_REST = auto()  # **opts
    BLOCK = auto()  # &block
    FORWARD = auto()  # ...


class AttrKind(Enum):
    """Attribute declaration kind. Value is the Ruby macro name."""

    READER = "attr_reader"
    WRITER = "attr_writer"
    ACCESSOR = "attr_accessor"

    @classmethod
    def from_keyword(cls, keyword: str) -> AttrKind | None:
        """Resolve an attr macro name, None if unknown."""
        for kind in cls:
            if kind.value == keyword:
                return kind
        return None
