"""LPFM notation parser: heading-structured Markdown → Document.

Grammar (headings start at column 0, outside fenced blocks):
    # Name              class, module or A::B::Name
    ## method(args)     method at the active visibility
    ## private          visibility switch
    ## class << self    singleton block, closed by the next level-2 heading
    ### method(args)    method in the current section

Lines between headings are buffered and flushed when the next heading
starts: into the open method body, or classified as unit-level
declarations (attr_*, CONSTANT = v, @@var = v).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING

from lpfm.domain.exceptions.validation import ValidationError
from lpfm.domain.model.enums import AttrKind, MethodKind, ParameterKind, UnitKind, Visibility
from lpfm.domain.model.parameter import Parameter
from lpfm.domain.model.unit import NAMESPACE_SEPARATOR
from lpfm.domain.model.value import RawExpression
from lpfm.infrastructure.logger import get_logger
from lpfm.infrastructure.parsers.front_matter import (
    split_front_matter,
    string_list,
    string_pairs,
    value_pairs,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from lpfm.domain.model.document import Document
    from lpfm.domain.model.value import ConstantValue
    from lpfm.domain.ports.model_builder import ModelBuilderPort

LOGGER = get_logger(__name__)

SINGLETON_BLOCK_TITLE = "class << self"

_HEADING = re.compile(r"^(#{1,3})[ \t]+(\S.*?)\s*$")
_FENCE = re.compile(r"^\s*(```|~~~)")
_UNIT_PREFIX = re.compile(r"^(class|module)\s+(\S.*)$")
_ATTR_LINE = re.compile(r"^(attr_reader|attr_writer|attr_accessor)\s+(.+)$")
_CONSTANT_LINE = re.compile(r"^([A-Z][A-Z0-9_]*)\s*=(?![=~>])\s*(.*)$")
_CLASS_VARIABLE_LINE = re.compile(r"^(@@\w+)\s*=(?![=~>])\s*(.*)$")
_INTEGER = re.compile(r"^-?\d+$")
_FLOAT = re.compile(r"^-?\d+\.\d+$")
_OPTIONAL = re.compile(r"^(\w+)\s*=\s*(.+)$", re.S)
_KEYWORD = re.compile(r"^(\w+):(?!:)\s*(.*)$", re.S)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_QUOTES = frozenset({'"', "'"})


@dataclass(frozen=True, slots=True)
class _Heading:
    level: int
    title: str


@dataclass(slots=True)
class _PendingMethod:
    name: str
    parameters: tuple[Parameter, ...]
    kind: MethodKind


@dataclass(slots=True)
class _ParseState:
    """Per-call cursor over the notation."""

    builder: ModelBuilderPort
    metadata: Mapping[str, object]
    unit: str | None = None
    first_unit: str | None = None
    method: _PendingMethod | None = None
    buffer: list[str] = field(default_factory=list)


class NotationParser:
    """Parses LPFM notation into a Document.

    Stateless between parse() calls: all cursor state lives
    in a per-call _ParseState.

    FAIL-FIRST: raises ValidationError / MetadataError on the first problem.
    """

    def parse(
        self,
        text: str,
        builder: ModelBuilderPort,
        filename: str | None = None,
    ) -> Document:
        """Parse notation text.

        Args:
            text: LPFM notation, optionally preceded by YAML front matter
            builder: Fresh builder receiving the parse events
            filename: Optional filename used to infer a unit name

        Returns:
            Immutable Document

        Raises:
            TypeError: If text or builder is None
            ValidationError: If content is empty or has no usable level-1 heading
            MetadataError: If the front matter is malformed
        """
        if text is None:
            raise TypeError("text must not be None")
        if builder is None:
            raise TypeError("builder must not be None")

        normalized = text.replace("\r\n", "\n").replace("\r", "\n").strip()
        if not normalized:
            raise ValidationError("Content cannot be empty")

        front_matter = split_front_matter(normalized)
        metadata = front_matter.metadata
        builder.set_metadata(metadata)
        for name in string_list(metadata, "require"):
            builder.add_require(name)

        lines = front_matter.body.split("\n")
        headings = [h for _, h in _scan(lines) if h is not None]
        state = _ParseState(builder=builder, metadata=metadata)

        if not any(h.level == 1 for h in headings):
            has_structure = any(h.level == 2 for h in headings) or front_matter.present
            if not (filename and has_structure):
                raise ValidationError("LPFM content must contain at least one H1 heading")
            inferred = infer_unit_name(filename)
            if not inferred:
                raise ValidationError("LPFM content must contain at least one H1 heading")
            LOGGER.debug("no H1 heading, unit name %s inferred from %s", inferred, filename)
            self._open_unit(state, inferred)

        for line, heading in _scan(lines):
            if heading is None:
                state.buffer.append(line)
                continue
            self._flush(state)
            self._handle_heading(state, heading)

        self._flush(state)
        return builder.build()

    def _handle_heading(self, state: _ParseState, heading: _Heading) -> None:
        if heading.level == 1:
            self._open_unit(state, heading.title)
            return

        unit = state.unit
        if unit is None:
            raise ValidationError(f"Heading '{heading.title}' appears before any H1 heading")

        if heading.level == 3:
            state.method = _method_header(heading.title)
            return

        visibility = Visibility.from_keyword(heading.title)
        if visibility is not None:
            state.builder.exit_singleton_block(unit)
            state.builder.set_visibility(unit, visibility)
            state.method = None
        elif heading.title == SINGLETON_BLOCK_TITLE:
            state.builder.enter_singleton_block(unit)
            state.method = None
        else:
            state.builder.exit_singleton_block(unit)
            state.method = _method_header(heading.title)

    def _open_unit(self, state: _ParseState, title: str) -> None:
        metadata = state.metadata
        match = _UNIT_PREFIX.match(title)
        if match:
            kind = UnitKind(match.group(1))
            title = match.group(2).strip()
        else:
            kind = _metadata_kind(metadata)

        *namespace, name = [segment.strip() for segment in title.split(NAMESPACE_SEPARATOR)]
        if not name or not all(namespace):
            raise ValidationError(f"Invalid unit heading: {title}")

        for depth, holder in enumerate(namespace):
            state.builder.ensure_namespace_holder(holder, tuple(namespace[:depth]))
        unit = state.builder.add_unit(name, kind, tuple(namespace))
        state.builder.set_visibility(unit, Visibility.PUBLIC)
        state.builder.exit_singleton_block(unit)

        state.unit = unit
        state.method = None
        if state.first_unit is None:
            state.first_unit = unit
            _apply_metadata(state.builder, unit, kind, metadata)

    def _flush(self, state: _ParseState) -> None:
        lines, state.buffer = state.buffer, []
        content = "\n".join(lines).strip()

        if state.method is not None:
            pending, state.method = state.method, None
            if state.unit is None:
                return
            state.builder.add_method(
                state.unit,
                pending.name,
                pending.parameters,
                kind=pending.kind,
                body=_unwrap_fence(content),
            )
            return

        if not content:
            return
        if state.unit is None:
            LOGGER.debug("discarding content before the first H1 heading")
            return

        for raw in content.split("\n"):
            _classify_unit_line(state.builder, state.unit, raw.strip())


def infer_unit_name(filename: str) -> str:
    """Derive a unit name from a filename stem (user_service.md → UserService)."""
    stem = PurePath(filename).stem
    return "".join(part[:1].upper() + part[1:].lower() for part in stem.split("_") if part)


def split_parameters(text: str) -> list[str]:
    """Split a parameter list on top-level commas.

    Commas inside brackets, braces, parentheses and quotes are kept.
    """
    tokens: list[str] = []
    current: list[str] = []
    closers: list[str] = []
    quote: str | None = None

    for ch in text:
        if quote is not None:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in _QUOTES:
            quote = ch
        elif ch in _OPENERS:
            closers.append(_OPENERS[ch])
        elif closers and ch == closers[-1]:
            closers.pop()
        elif ch == "," and not closers:
            tokens.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    tokens.append("".join(current).strip())
    return [token for token in tokens if token]


def parse_parameter(token: str) -> Parameter:
    """Classify one parameter token (`a`, `a = 1`, `*r`, `k:`, `**o`, `&b`, `...`)."""
    if token == "...":
        return Parameter(ParameterKind.FORWARD)
    if token.startswith("&"):
        return Parameter(ParameterKind.BLOCK, token[1:].strip())
    if token.startswith("**"):
        return Parameter(ParameterKind.KEYWORD_REST, token[2:].strip())
    if token.startswith("*"):
        return Parameter(ParameterKind.REST, token[1:].strip())

    match = _OPTIONAL.match(token)
    if match:
        return Parameter(ParameterKind.OPTIONAL, match.group(1), match.group(2).strip())

    match = _KEYWORD.match(token)
    if match:
        default = match.group(2).strip()
        if default:
            return Parameter(ParameterKind.OPTIONAL_KEYWORD, match.group(1), default)
        return Parameter(ParameterKind.REQUIRED_KEYWORD, match.group(1))

    return Parameter(ParameterKind.REQUIRED, token)


def parse_scalar(text: str) -> ConstantValue:
    """Type a notation value: integer, float, true/false, nil, else raw text."""
    value = text.strip()
    if _INTEGER.match(value):
        return int(value)
    if _FLOAT.match(value):
        return float(value)
    match value:
        case "true":
            return True
        case "false":
            return False
        case "nil" | "":
            return None
    return RawExpression(value)


def _scan(lines: list[str]) -> Iterator[tuple[str, _Heading | None]]:
    """Yield (line, heading) pairs; heading is None for content lines."""
    in_fence = False
    for line in lines:
        if _FENCE.match(line):
            in_fence = not in_fence
            yield line, None
            continue
        match = None if in_fence else _HEADING.match(line)
        if match:
            yield line, _Heading(level=len(match.group(1)), title=match.group(2))
        else:
            yield line, None


def _method_header(title: str) -> _PendingMethod:
    open_index = title.find("(")
    close_index = title.rfind(")")
    if open_index != -1 and close_index > open_index:
        name = title[:open_index].strip()
        tokens = split_parameters(title[open_index + 1 : close_index])
        parameters = tuple(parse_parameter(token) for token in tokens)
    else:
        name = title.split("(")[0].strip()
        parameters = ()

    if name.startswith("self."):
        bare = name.removeprefix("self.")
        return _PendingMethod(name=bare, parameters=parameters, kind=MethodKind.CLASS)
    if "." in name:
        return _PendingMethod(name=name, parameters=parameters, kind=MethodKind.OBJECT_RECEIVER)
    return _PendingMethod(name=name, parameters=parameters, kind=MethodKind.INSTANCE)


def _unwrap_fence(body: str) -> str:
    """Strip a fence that wraps the whole body."""
    lines = body.split("\n")
    if len(lines) >= 2 and _FENCE.match(lines[0]) and _FENCE.match(lines[-1]):
        inner = lines[1:-1]
        if not any(_FENCE.match(line) for line in inner):
            return "\n".join(inner).strip()
    return body


def _classify_unit_line(builder: ModelBuilderPort, unit: str, line: str) -> None:
    if not line:
        return

    match = _ATTR_LINE.match(line)
    if match:
        kind = AttrKind(match.group(1))
        names = tuple(
            name.strip().removeprefix(":") for name in match.group(2).split(",") if name.strip()
        )
        if names:
            builder.add_inline_attr(unit, kind, names)
        return

    match = _CONSTANT_LINE.match(line)
    if match:
        builder.add_constant(unit, match.group(1), parse_scalar(match.group(2)))
        return

    match = _CLASS_VARIABLE_LINE.match(line)
    if match:
        builder.add_class_variable(unit, match.group(1), parse_scalar(match.group(2)))
        return

    LOGGER.debug("discarding unit-level line in %s: %s", unit, line)


def _metadata_kind(metadata: Mapping[str, object]) -> UnitKind:
    declared = metadata.get("type")
    if declared is None:
        return UnitKind.CLASS
    try:
        return UnitKind(str(declared).strip().lower())
    except ValueError as e:
        raise ValidationError(f"Unknown unit type: {declared}") from e


def _apply_metadata(
    builder: ModelBuilderPort,
    unit: str,
    kind: UnitKind,
    metadata: Mapping[str, object],
) -> None:
    """Apply front matter to the unit the document defines first."""
    if not metadata:
        return

    superclass = metadata.get("inherits_from")
    if superclass:
        if kind == UnitKind.CLASS:
            builder.set_superclass(unit, str(superclass))
        else:
            LOGGER.warning("inherits_from ignored for module %s", unit)

    nested = metadata.get("attr")
    nested = nested if isinstance(nested, dict) else {}
    for attr_kind, key in (
        (AttrKind.READER, "reader"),
        (AttrKind.WRITER, "writer"),
        (AttrKind.ACCESSOR, "accessor"),
    ):
        names = string_list(nested, key) + string_list(metadata, attr_kind.value)
        builder.add_attrs(unit, attr_kind, tuple(n.removeprefix(":") for n in names))

    for module in string_list(metadata, "include"):
        builder.add_include(unit, module)
    for module in string_list(metadata, "extend"):
        builder.add_extend(unit, module)
    for name, value in value_pairs(metadata, "constants"):
        builder.add_constant(unit, name, value)
    for name, value in value_pairs(metadata, "class_variables"):
        builder.add_class_variable(unit, name, value)
    for new_name, old_name in string_pairs(metadata, "aliases"):
        builder.add_alias(unit, new_name, old_name)
    for new_name, old_name in string_pairs(metadata, "alias_method"):
        builder.add_alias_method(unit, new_name, old_name)
