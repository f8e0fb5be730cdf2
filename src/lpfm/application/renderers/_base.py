"""Base renderer: Ruby code generation shared by source and notation output.

Units are grouped into a namespace tree built in first-seen order.
Each unit body is a sequence of sections joined by exactly one blank line:
mixins, class variables and constants, attributes, methods, aliases,
then nested units. The order is fixed: a nested unit written between two
methods in the input still renders after the last alias.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lpfm.domain.model.configuration import RenderConfig
from lpfm.domain.model.enums import AttrKind, MethodKind, Visibility
from lpfm.domain.model.unit import ClassDef, ModuleDef
from lpfm.domain.model.value import RawExpression, Symbol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lpfm.domain.model.document import Document
    from lpfm.domain.model.method import MethodDef
    from lpfm.domain.model.unit import Unit
    from lpfm.domain.model.value import ConstantValue

SINGLETON_BLOCK_OPEN = "class << self"


@dataclass(slots=True)
class NamespaceNode:
    """One segment of the namespace tree.

    Attributes:
        name: Segment name
        unit: Unit whose path ends here, None for an implicit namespace
        children: Child segments in first-seen order
    """

    name: str
    unit: Unit | None = None
    children: dict[str, NamespaceNode] = field(default_factory=dict)

    @property
    def is_wrapper(self) -> bool:
        """Node renders only as a `module` around its children."""
        if self.unit is None:
            return True
        return isinstance(self.unit, ModuleDef) and self.unit.namespace_only


def build_namespace_tree(units: Iterable[Unit]) -> list[NamespaceNode]:
    """Group units by namespace path, preserving first-seen order.

    Returns:
        Top-level nodes in order
    """
    root = NamespaceNode(name="")
    for unit in units:
        node = root
        for segment in unit.path:
            node = node.children.setdefault(segment, NamespaceNode(name=segment))
        node.unit = unit
    return list(root.children.values())


def format_value(value: ConstantValue) -> str:
    """Render a typed value as a Ruby literal."""
    match value:
        case None:
            return "nil"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return repr(value)
        case str():
            escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")
            return f'"{escaped}"'
        case Symbol() | RawExpression():
            return str(value)
    raise TypeError(f"unsupported constant value type: {type(value).__name__}")


def format_require(name: str) -> str:
    if "'" in name:
        return f'require "{name}"'
    return f"require '{name}'"


def join_sections(sections: Iterable[list[str]]) -> list[str]:
    """Join non-empty sections with exactly one blank line."""
    lines: list[str] = []
    for section in sections:
        if not section:
            continue
        if lines:
            lines.append("")
        lines.extend(section)
    return lines


class BaseRenderer(ABC):
    """Base class for renderers emitting Ruby code.

    Concrete renderers decide how the generated code is framed.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialize renderer.

        Args:
            config: Rendering options. Uses defaults if None.
        """
        self._config = config or RenderConfig()

    @abstractmethod
    def render(self, document: Document) -> str:
        """Render document as text."""

    def render_code(self, document: Document) -> str:
        """Requires followed by every unit, as Ruby source.

        Returns:
            Code ending with a newline, empty string for an empty document
        """
        chunks: list[list[str]] = []
        if document.requires:
            chunks.append([format_require(name) for name in document.requires])
        for node in build_namespace_tree(document.units):
            chunks.append(self._node_lines(node))

        lines = join_sections(chunks)
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def _node_lines(self, node: NamespaceNode) -> list[str]:
        nested = join_sections(self._node_lines(child) for child in node.children.values())

        if node.is_wrapper:
            return [f"module {node.name}", *self._indent(nested), "end"]

        unit = node.unit
        body = join_sections([*self._unit_sections(unit), nested])
        return [self._header(unit), *self._indent(body), "end"]

    def _header(self, unit: Unit) -> str:
        if isinstance(unit, ClassDef):
            if unit.superclass:
                return f"class {unit.name} < {unit.superclass}"
            return f"class {unit.name}"
        return f"module {unit.name}"

    def _unit_sections(self, unit: Unit) -> list[list[str]]:
        return [
            [f"include {name}" for name in unit.includes]
            + [f"extend {name}" for name in unit.extends],
            [f"{name} = {format_value(value)}" for name, value in unit.class_variables.items()]
            + [f"{name} = {format_value(value)}" for name, value in unit.constants.items()],
            self._attribute_lines(unit),
            self._method_lines(unit.methods),
            [f"alias {new} {old}" for new, old in unit.aliases.items()]
            + [f"alias_method :{new}, :{old}" for new, old in unit.alias_methods.items()],
        ]

    def _attribute_lines(self, unit: Unit) -> list[str]:
        inline = [f"{attr.kind.value} {_symbols(attr.names)}" for attr in unit.inline_attrs]
        if not unit.has_declared_attrs():
            # fixed rule: inline attrs take the leading slot
            return inline

        declared = [
            f"{kind.value} {_symbols(names)}"
            for kind, names in (
                (AttrKind.READER, unit.attr_readers),
                (AttrKind.WRITER, unit.attr_writers),
                (AttrKind.ACCESSOR, unit.attr_accessors),
            )
            if names
        ]
        return declared + inline

    def _method_lines(self, methods: tuple[MethodDef, ...]) -> list[str]:
        chunks: list[list[str]] = []
        active = Visibility.PUBLIC
        block: list[MethodDef] = []

        for method in methods:
            if method.kind == MethodKind.SINGLETON_BLOCK:
                block.append(method)
                continue

            if block:
                chunks.append(self._singleton_block(block))
                block = []
            active = self._append_definition(chunks, method, active)

        if block:
            chunks.append(self._singleton_block(block))
        return join_sections(chunks)

    def _append_definition(
        self, chunks: list[list[str]], method: MethodDef, active: Visibility
    ) -> Visibility:
        """Append a visibility line when it changes, then the definition."""
        if method.visibility != active:
            chunks.append([method.visibility.value])
        chunks.append(self._definition(method))
        return method.visibility

    def _singleton_block(self, methods: list[MethodDef]) -> list[str]:
        # visibility inside the block starts public and does not leak out
        chunks: list[list[str]] = []
        active = Visibility.PUBLIC
        for method in methods:
            active = self._append_definition(chunks, method, active)
        return [SINGLETON_BLOCK_OPEN, *self._indent(join_sections(chunks)), "end"]

    def _definition(self, method: MethodDef) -> list[str]:
        prefix = "self." if method.kind == MethodKind.CLASS else ""
        parameters = ""
        if method.parameters:
            parameters = f"({', '.join(str(p) for p in method.parameters)})"

        lines: list[str] = []
        if self._config.include_prose_as_comments and method.prose:
            lines.extend(f"# {line}".rstrip() for line in method.prose.split("\n"))
        lines.append(f"def {prefix}{method.name}{parameters}")
        if method.body:
            lines.extend(self._indent(method.body.split("\n")))
        lines.append("end")
        return lines

    def _indent(self, lines: list[str]) -> list[str]:
        indent = self._config.indent
        return [f"{indent}{line}" if line else "" for line in lines]


def _symbols(names: tuple[str, ...]) -> str:
    return ", ".join(f":{name}" for name in names)
