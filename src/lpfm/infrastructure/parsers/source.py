"""Ruby source parser: tree-sitter syntax tree → Document.

Walks class/module bodies in source order, threading the enclosing
namespace path through the recursion, and reports every recognized
declaration to the model builder.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from lpfm.domain.exceptions.parsing import SourceParseError
from lpfm.domain.exceptions.validation import ValidationError
from lpfm.domain.model.enums import AttrKind, MethodKind, ParameterKind, UnitKind, Visibility
from lpfm.domain.model.parameter import Parameter
from lpfm.domain.model.unit import NAMESPACE_SEPARATOR
from lpfm.domain.model.value import RawExpression, Symbol
from lpfm.infrastructure.logger import get_logger
from lpfm.infrastructure.parsers.ruby_language import make_parser

if TYPE_CHECKING:
    from tree_sitter import Node

    from lpfm.domain.model.document import Document
    from lpfm.domain.model.value import ConstantValue
    from lpfm.domain.ports.model_builder import ModelBuilderPort

LOGGER = get_logger(__name__)

# Fields that precede a definition body when the grammar exposes no body field
_HEADER_FIELDS = ("name", "superclass", "parameters", "object", "value")

# Grammar order used when serializing parameters; required parameters
# declared after an optional or rest parameter keep their place after the rest
_PARAMETER_RANK = {
    ParameterKind.REQUIRED: 0,
    ParameterKind.OPTIONAL: 1,
    ParameterKind.REST: 2,
    ParameterKind.REQUIRED_KEYWORD: 3,
    ParameterKind.OPTIONAL_KEYWORD: 4,
    ParameterKind.KEYWORD_REST: 5,
    ParameterKind.BLOCK: 6,
    ParameterKind.FORWARD: 6,
}
_POST_REQUIRED_RANK = 2

_INTEGER = re.compile(r"^-?\d+$")
_FLOAT = re.compile(r"^-?\d+\.\d+$")


class RubySourceParser:
    """Parses Ruby source into a Document using tree-sitter.

    Stateless between parse() calls: a new tree-sitter Parser and
    walker are created for every call.

    FAIL-FIRST: syntax errors abort with SourceParseError before any
    declaration is recorded.
    """

    def parse(
        self,
        text: str,
        builder: ModelBuilderPort,
        filename: str | None = None,
    ) -> Document:
        """Parse Ruby source text.

        Args:
            text: Ruby source
            builder: Fresh builder receiving the parse events
            filename: Accepted for symmetry with NotationParser; unused

        Returns:
            Immutable Document

        Raises:
            TypeError: If text or builder is None
            ValidationError: If text is empty
            SourceParseError: If the source has syntax errors or the walk fails
        """
        if text is None:
            raise TypeError("text must not be None")
        if builder is None:
            raise TypeError("builder must not be None")
        if not text.strip():
            raise ValidationError("Content cannot be empty")

        source = text.encode("utf-8")
        tree = make_parser().parse(source)

        diagnostics = collect_diagnostics(tree.root_node, source)
        if diagnostics:
            raise SourceParseError(diagnostics)

        try:
            _SourceWalk(builder, source).visit_program(tree.root_node)
            return builder.build()
        except SourceParseError:
            raise
        except Exception as e:
            raise SourceParseError((str(e) or type(e).__name__,)) from e


def collect_diagnostics(root: Node, source: bytes) -> tuple[str, ...]:
    """Collect ERROR and MISSING nodes as "line:column: message" strings."""
    if not root.has_error:
        return ()

    diagnostics: list[str] = []
    stack = [root]
    while stack:
        node = stack.pop()
        line, column = node.start_point[0] + 1, node.start_point[1] + 1
        if node.is_missing:
            diagnostics.append(f"{line}:{column}: missing '{node.type}'")
        elif node.type == "ERROR":
            snippet = source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
            snippet = snippet.strip().split("\n")[0][:40]
            diagnostics.append(f"{line}:{column}: syntax error near '{snippet}'")
            continue
        stack.extend(reversed([child for child in node.children if child.has_error or child.is_missing]))

    return tuple(diagnostics) or ("syntax error",)


def dedent_body(text: str) -> str:
    """Dedent a body span that starts at its first statement.

    The first line usually sits flush (the span starts mid-line) while
    later lines keep their file indentation; in that case the common
    indent of the later lines is stripped from every line after the first.
    """
    lines = text.split("\n")
    indents = [_indent(line) for line in lines if line.strip()]
    if not indents:
        return ""

    later = [_indent(line) for line in lines[1:] if line.strip()]
    if lines[0].strip() and _indent(lines[0]) == 0 and later and min(later) > 0:
        width = min(later)
        lines = [lines[0], *(line[width:] if line.strip() else "" for line in lines[1:])]
    else:
        width = min(indents)
        lines = [line[width:] if line.strip() else "" for line in lines]

    return "\n".join(line.rstrip() for line in lines).strip()


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def _statements(node: Node) -> list[Node]:
    """Body statements of a definition, including comments."""
    body = node.child_by_field_name("body")
    if body is not None:
        # comments before the first statement can attach to the definition node
        leading = [
            child
            for child in node.named_children
            if child.type == "comment" and child.end_byte <= body.start_byte
        ]
        if body.type == "body_statement":
            return [*leading, *body.named_children]
        return [*leading, body]

    header = [h for h in (node.child_by_field_name(f) for f in _HEADER_FIELDS) if h is not None]
    return [child for child in node.named_children if all(child != h for h in header)]


def _arguments(node: Node) -> list[Node]:
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type != "comment"]


class _SourceWalk:
    """One walk over one syntax tree."""

    def __init__(self, builder: ModelBuilderPort, source: bytes) -> None:
        self._builder = builder
        self._source = source
        # unit key → path its nested units live under
        self._paths: dict[str, tuple[str, ...]] = {}

    def text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def visit_program(self, root: Node) -> None:
        for node in root.named_children:
            match node.type:
                case "class" | "module":
                    self._visit_unit(node, ())
                case "call" if self._call_name(node) == "require":
                    self._visit_require(node)
                case "comment":
                    pass
                case _:
                    LOGGER.debug("skipping top-level %s at line %d", node.type, node.start_point[0] + 1)

    def _visit_unit(self, node: Node, namespace: tuple[str, ...]) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            raise ValueError(f"{node.type} without a name at line {node.start_point[0] + 1}")

        # class A::B keeps its scoped name; a leading :: is dropped
        segments = [s.strip() for s in self.text(name_node).split(NAMESPACE_SEPARATOR)]
        name = NAMESPACE_SEPARATOR.join(s for s in segments if s)

        kind = UnitKind.CLASS if node.type == "class" else UnitKind.MODULE
        unit = self._builder.add_unit(name, kind, namespace)
        path = self._paths.setdefault(unit, (*namespace, name))

        superclass = node.child_by_field_name("superclass")
        if superclass is not None:
            expression = [c for c in superclass.named_children if c.type != "comment"]
            target = expression[0] if expression else superclass
            self._builder.set_superclass(unit, self.text(target).lstrip("<").strip())

        has_nested = self._visit_body(unit, _statements(node), path)
        if kind == UnitKind.MODULE and has_nested:
            self._builder.mark_namespace_only(unit)

    def _visit_body(self, unit: str, statements: list[Node], path: tuple[str, ...]) -> bool:
        """Walk unit body statements. Returns True if nested units were found."""
        has_nested = False
        prose: list[str] = []
        prose_end_row = -1

        for node in statements:
            if node.type == "comment":
                if not self._starts_line(node):
                    continue
                if prose and node.start_point[0] != prose_end_row + 1:
                    prose = []
                prose.append(_comment_text(self.text(node)))
                prose_end_row = node.end_point[0]
                continue

            description = None
            if prose and node.start_point[0] == prose_end_row + 1:
                description = "\n".join(prose).strip() or None
            prose = []

            match node.type:
                case "class" | "module":
                    self._visit_unit(node, path)
                    has_nested = True
                case "method":
                    self._add_method(unit, node, prose=description)
                case "singleton_method":
                    self._add_singleton_method(unit, node, prose=description)
                case "singleton_class":
                    self._visit_singleton_class(unit, node)
                case "identifier":
                    self._visit_identifier(unit, node)
                case "call":
                    self._visit_call(unit, node, description)
                case "alias":
                    self._visit_alias(unit, node)
                case "assignment":
                    self._visit_assignment(unit, node)
                case "heredoc_body":
                    # consumed with the assignment that opened it
                    pass
                case _:
                    LOGGER.debug(
                        "skipping %s in %s at line %d", node.type, unit, node.start_point[0] + 1
                    )

        return has_nested

    def _visit_identifier(self, unit: str, node: Node) -> None:
        visibility = Visibility.from_keyword(self.text(node))
        if visibility is not None and self.text(node) == visibility.value:
            self._builder.set_visibility(unit, visibility)
        else:
            LOGGER.debug("skipping bare identifier %s in %s", self.text(node), unit)

    def _visit_call(self, unit: str, node: Node, prose: str | None) -> None:
        if node.child_by_field_name("receiver") is not None:
            LOGGER.debug("skipping call with receiver in %s: %s", unit, self.text(node))
            return

        name = self._call_name(node)
        arguments = _arguments(node)
        match name:
            case "private" | "protected" | "public":
                self._visit_visibility_call(unit, Visibility(name), arguments, prose)
            case "require":
                self._visit_require(node)
            case "include":
                for module in self._constant_names(arguments):
                    self._builder.add_include(unit, module)
            case "extend":
                for module in self._constant_names(arguments):
                    self._builder.add_extend(unit, module)
            case "attr_reader" | "attr_writer" | "attr_accessor":
                names = tuple(n for n in (self._symbol_name(a) for a in arguments) if n)
                if names:
                    self._builder.add_inline_attr(unit, AttrKind(name), names)
            case "alias_method":
                names = [self._symbol_name(a) for a in arguments]
                if len(names) == 2 and all(names):
                    self._builder.add_alias_method(unit, names[0], names[1])
                else:
                    LOGGER.debug("skipping alias_method with dynamic arguments in %s", unit)
            case _:
                LOGGER.debug("skipping call %s in %s", name, unit)

    def _visit_visibility_call(
        self,
        unit: str,
        visibility: Visibility,
        arguments: list[Node],
        prose: str | None,
    ) -> None:
        if not arguments:
            self._builder.set_visibility(unit, visibility)
            return

        for argument in arguments:
            match argument.type:
                case "method":
                    self._add_method(unit, argument, visibility=visibility, prose=prose)
                case "singleton_method":
                    self._add_singleton_method(unit, argument, prose, visibility=visibility)
                case _:
                    self._visit_visibility_target(unit, visibility, argument, MethodKind.INSTANCE)

    def _visit_visibility_target(
        self, unit: str, visibility: Visibility, argument: Node, kind: MethodKind
    ) -> None:
        method_name = self._symbol_name(argument)
        if method_name is None:
            LOGGER.debug("skipping %s argument %s in %s", visibility.value, argument.type, unit)
        elif not self._builder.set_method_visibility(unit, method_name, visibility, kind=kind):
            LOGGER.debug("%s :%s names no method declared in %s", visibility.value, method_name, unit)

    def _visit_require(self, node: Node) -> None:
        arguments = _arguments(node)
        if len(arguments) == 1:
            name = self._plain_string(arguments[0])
            if name:
                self._builder.add_require(name)
                return
        LOGGER.debug("skipping non-literal require: %s", self.text(node))

    def _visit_alias(self, unit: str, node: Node) -> None:
        new_node = node.child_by_field_name("name")
        old_node = node.child_by_field_name("alias")
        if new_node is None or old_node is None:
            LOGGER.debug("skipping incomplete alias in %s", unit)
            return
        self._builder.add_alias(
            unit, self.text(new_node).lstrip(":"), self.text(old_node).lstrip(":")
        )

    def _visit_assignment(self, unit: str, node: Node) -> None:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            return

        match left.type:
            case "constant":
                self._builder.add_constant(unit, self.text(left), self._decode(right))
            case "class_variable":
                self._builder.add_class_variable(unit, self.text(left), self._decode(right))
            case _:
                LOGGER.debug("skipping assignment to %s in %s", self.text(left), unit)

    def _visit_singleton_class(self, unit: str, node: Node) -> None:
        target = node.child_by_field_name("value")
        if target is None or target.type != "self":
            LOGGER.debug("skipping singleton class of non-self object in %s", unit)
            return

        # visibility inside class << self starts public and does not leak out
        visibility = Visibility.PUBLIC
        for statement in _statements(node):
            keyword = self._visibility_keyword(statement)
            match statement.type:
                case "method":
                    self._add_method(
                        unit, statement, kind=MethodKind.SINGLETON_BLOCK, visibility=visibility
                    )
                case "identifier" | "call" if keyword is not None:
                    arguments = _arguments(statement) if statement.type == "call" else []
                    if not arguments:
                        visibility = keyword
                    for argument in arguments:
                        if argument.type == "method":
                            self._add_method(
                                unit, argument, kind=MethodKind.SINGLETON_BLOCK, visibility=keyword
                            )
                        else:
                            self._visit_visibility_target(
                                unit, keyword, argument, MethodKind.SINGLETON_BLOCK
                            )
                case "comment" | "heredoc_body":
                    pass
                case _:
                    LOGGER.warning(
                        "dropping %s inside class << self of %s at line %d",
                        statement.type,
                        unit,
                        statement.start_point[0] + 1,
                    )

    def _visibility_keyword(self, node: Node) -> Visibility | None:
        """Visibility named by a bare keyword or a receiver-less call."""
        if node.type == "identifier":
            name = self.text(node)
        elif node.type == "call" and node.child_by_field_name("receiver") is None:
            name = self._call_name(node) or ""
        else:
            return None
        visibility = Visibility.from_keyword(name)
        if visibility is None or name != visibility.value:
            return None
        return visibility

    def _add_method(
        self,
        unit: str,
        node: Node,
        *,
        kind: MethodKind = MethodKind.INSTANCE,
        visibility: Visibility | None = None,
        prose: str | None = None,
    ) -> None:
        self._builder.add_method(
            unit,
            self.text(node.child_by_field_name("name")),
            self._parameters(node.child_by_field_name("parameters")),
            kind=kind,
            body=self._body(node),
            visibility=visibility,
            prose=prose,
        )

    def _add_singleton_method(
        self,
        unit: str,
        node: Node,
        prose: str | None,
        visibility: Visibility | None = None,
    ) -> None:
        receiver = node.child_by_field_name("object")
        name = self.text(node.child_by_field_name("name"))
        if receiver is None or receiver.type == "self":
            kind = MethodKind.CLASS
        else:
            kind = MethodKind.OBJECT_RECEIVER
            name = f"{self.text(receiver)}.{name}"

        self._builder.add_method(
            unit,
            name,
            self._parameters(node.child_by_field_name("parameters")),
            kind=kind,
            body=self._body(node),
            visibility=visibility,
            prose=prose,
        )

    def _parameters(self, node: Node | None) -> tuple[Parameter, ...]:
        if node is None:
            return ()

        ranked: list[tuple[int, Parameter]] = []
        after_optional = False
        for child in node.named_children:
            if child.type == "comment":
                continue
            parameter = self._parameter(child)
            rank = _PARAMETER_RANK[parameter.kind]
            if parameter.kind == ParameterKind.REQUIRED and after_optional:
                rank = _POST_REQUIRED_RANK
            if parameter.kind in (ParameterKind.OPTIONAL, ParameterKind.REST):
                after_optional = True
            ranked.append((rank, parameter))

        # sorted() is stable: declaration order is kept within a rank
        return tuple(parameter for _, parameter in sorted(ranked, key=lambda item: item[0]))

    def _parameter(self, node: Node) -> Parameter:
        name_node = node.child_by_field_name("name")
        name = self.text(name_node) if name_node is not None else ""
        value = node.child_by_field_name("value")

        match node.type:
            case "identifier":
                return Parameter(ParameterKind.REQUIRED, self.text(node))
            case "optional_parameter":
                return Parameter(ParameterKind.OPTIONAL, name, self.text(value))
            case "splat_parameter":
                return Parameter(ParameterKind.REST, name)
            case "hash_splat_parameter":
                return Parameter(ParameterKind.KEYWORD_REST, name)
            case "hash_splat_nil":
                return Parameter(ParameterKind.KEYWORD_REST, "nil")
            case "block_parameter":
                return Parameter(ParameterKind.BLOCK, name)
            case "keyword_parameter" if value is not None:
                return Parameter(ParameterKind.OPTIONAL_KEYWORD, name, self.text(value))
            case "keyword_parameter":
                return Parameter(ParameterKind.REQUIRED_KEYWORD, name)
            case "forward_parameter":
                return Parameter(ParameterKind.FORWARD)
            case _:
                # destructured parameters stay verbatim
                return Parameter(ParameterKind.REQUIRED, self.text(node))

    def _body(self, node: Node) -> str:
        statements = [s for s in _statements(node) if s.type != "comment"]
        if not statements:
            return ""
        span = self._source[statements[0].start_byte : statements[-1].end_byte]
        return dedent_body(span.decode("utf-8"))

    def _decode(self, node: Node) -> ConstantValue:
        """Decode a literal right-hand side; anything else stays raw source."""
        heredoc_end = self._heredoc_end(node)
        if heredoc_end is not None:
            span = self._source[node.start_byte : heredoc_end]
            return RawExpression(span.decode("utf-8").rstrip())

        text = self.text(node)
        match node.type:
            case "string":
                value = self._plain_string(node)
                if value is not None:
                    return value
            case "integer" if _INTEGER.match(text) and str(int(text)) == text:
                return int(text)
            case "float" if _FLOAT.match(text) and repr(float(text)) == text:
                return float(text)
            case "true":
                return True
            case "false":
                return False
            case "nil":
                return None
            case "simple_symbol":
                return Symbol(text[1:])
            case "unary":
                operand = node.child_by_field_name("operand")
                if text.startswith("-") and operand is not None:
                    value = self._decode(operand)
                    if isinstance(value, int | float) and not isinstance(value, bool):
                        negated = -value
                        if str(negated) == text.replace(" ", ""):
                            return negated
        return RawExpression(text)

    def _heredoc_end(self, node: Node) -> int | None:
        """End byte of the last heredoc body opened by `node`, None without heredocs.

        Heredoc bodies follow the line that opens them, outside the
        expression node, in the order their openers appear.
        """
        openers = _descendants(node, "heredoc_beginning")
        if not openers:
            return None

        root = node
        while root.parent is not None:
            root = root.parent
        following = [b for b in _descendants(root, "heredoc_body") if b.start_byte >= node.end_byte]
        bodies = sorted(following, key=lambda body: body.start_byte)
        if len(bodies) < len(openers):
            raise ValueError(f"unterminated heredoc at line {node.start_point[0] + 1}")
        return bodies[len(openers) - 1].end_byte

    def _plain_string(self, node: Node) -> str | None:
        """Content of a string literal without interpolation or escapes."""
        if node.type != "string":
            return None
        parts = node.named_children
        if any(part.type != "string_content" for part in parts):
            return None
        content = "".join(self.text(part) for part in parts)
        if "\\" in content:
            return None
        return content

    def _symbol_name(self, node: Node) -> str | None:
        match node.type:
            case "simple_symbol":
                return self.text(node)[1:]
            case "delimited_symbol":
                parts = node.named_children
                if parts and all(part.type == "string_content" for part in parts):
                    return "".join(self.text(part) for part in parts)
            case "string":
                return self._plain_string(node)
        return None

    def _constant_names(self, arguments: list[Node]) -> list[str]:
        names = []
        for argument in arguments:
            if argument.type in ("constant", "scope_resolution"):
                names.append("".join(self.text(argument).split()))
            else:
                LOGGER.debug("skipping non-constant mixin argument %s", self.text(argument))
        return names

    def _call_name(self, node: Node) -> str | None:
        method = node.child_by_field_name("method")
        return self.text(method) if method is not None else None

    def _starts_line(self, node: Node) -> bool:
        line_start = self._source.rfind(b"\n", 0, node.start_byte) + 1
        return not self._source[line_start : node.start_byte].strip()


def _comment_text(comment: str) -> str:
    text = comment.removeprefix("#")
    return text[1:] if text.startswith(" ") else text


def _descendants(node: Node, node_type: str) -> list[Node]:
    found: list[Node] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == node_type:
            found.append(current)
        stack.extend(current.named_children)
    return found
