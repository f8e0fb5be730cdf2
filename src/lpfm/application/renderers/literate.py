"""Literate renderer: Document → LPFM heading notation.

The output parses back with NotationParser. Front matter can describe
only the first unit, so superclass, mixins and aliases of later units
are dropped with a warning.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import yaml

from lpfm.application.renderers._base import BaseRenderer, format_value, join_sections
from lpfm.domain.model.enums import AttrKind, MethodKind, Visibility
from lpfm.domain.model.unit import NAMESPACE_SEPARATOR, ClassDef, ModuleDef
from lpfm.infrastructure.logger import get_logger

if TYPE_CHECKING:
    from lpfm.domain.model.document import Document
    from lpfm.domain.model.method import MethodDef
    from lpfm.domain.model.unit import Unit

LOGGER = get_logger(__name__)

_LOOKS_LIKE_HEADING = re.compile(r"^#{1,3}[ \t]+\S")
_FRONT_MATTER_DELIMITER = "---"
_FENCE = "```"


class LiterateRenderer(BaseRenderer):
    """Renders a Document as LPFM notation.

    Layout per unit:
        # Name / # module Name      (namespaced units use A::B::Name)
        CONSTANT = value            unit-level declarations
        ## method(args)             public methods
        ## private                  visibility sections with ### methods
        ## class << self            singleton block with ### methods
    """

    def render(self, document: Document) -> str:
        """Render document as LPFM notation.

        Args:
            document: Document to render

        Returns:
            Notation text ending with a newline, empty string for an empty document

        Raises:
            TypeError: If document is None
        """
        if document is None:
            raise TypeError("document must not be None")

        units = [u for u in document.units if not (isinstance(u, ModuleDef) and u.namespace_only)]
        if not units and not document.requires:
            return ""

        for unit in units[1:]:
            self._warn_dropped(unit)

        chunks = [self._front_matter(document, units[0] if units else None)]
        chunks.extend(self._unit_lines(unit) for unit in units)
        return "\n".join(join_sections(chunks)) + "\n"

    def _front_matter(self, document: Document, first: Unit | None) -> list[str]:
        metadata: dict[str, object] = {}
        if document.requires:
            metadata["require"] = list(document.requires)

        if first is not None:
            if isinstance(first, ClassDef) and first.superclass:
                metadata["inherits_from"] = first.superclass
            if first.includes:
                metadata["include"] = list(first.includes)
            if first.extends:
                metadata["extend"] = list(first.extends)
            if first.aliases:
                metadata["aliases"] = dict(first.aliases)
            if first.alias_methods:
                metadata["alias_method"] = dict(first.alias_methods)

        if not metadata:
            return []
        dumped = yaml.safe_dump(metadata, sort_keys=False, default_flow_style=False)
        return [_FRONT_MATTER_DELIMITER, *dumped.rstrip("\n").split("\n"), _FRONT_MATTER_DELIMITER]

    def _unit_lines(self, unit: Unit) -> list[str]:
        title = NAMESPACE_SEPARATOR.join(unit.path)
        heading = f"# module {title}" if isinstance(unit, ModuleDef) else f"# {title}"

        declarations = [
            f"{name} = {format_value(value)}" for name, value in unit.class_variables.items()
        ]
        declarations += [f"{name} = {format_value(value)}" for name, value in unit.constants.items()]
        for kind, names in (
            (AttrKind.READER, unit.attr_readers),
            (AttrKind.WRITER, unit.attr_writers),
            (AttrKind.ACCESSOR, unit.attr_accessors),
        ):
            if names:
                declarations.append(f"{kind.value} {', '.join(':' + n for n in names)}")
        declarations += [
            f"{attr.kind.value} {', '.join(':' + n for n in attr.names)}" for attr in unit.inline_attrs
        ]

        return join_sections([[heading], declarations, *self._method_sections(unit.methods)])

    def _method_sections(self, methods: tuple[MethodDef, ...]) -> list[list[str]]:
        sections: list[list[str]] = []
        active = Visibility.PUBLIC
        in_block = False
        in_section = False

        for method in methods:
            if method.kind == MethodKind.SINGLETON_BLOCK:
                if not in_block:
                    sections.append(["## class << self"])
                    in_block = in_section = True
                    active = Visibility.PUBLIC
                if method.visibility != Visibility.PUBLIC:
                    LOGGER.warning(
                        "LPFM has no %s section inside class << self; %s rendered public",
                        method.visibility.value,
                        method.name,
                    )
            elif in_block or method.visibility != active:
                sections.append([f"## {method.visibility.value}"])
                active = method.visibility
                in_block = False
                in_section = True

            level = "###" if in_section else "##"
            sections.append([f"{level} {self._title(method)}", *self._body(method)])
        return sections

    def _title(self, method: MethodDef) -> str:
        name = f"self.{method.name}" if method.kind == MethodKind.CLASS else method.name
        if not method.parameters:
            return name
        return f"{name}({', '.join(str(p) for p in method.parameters)})"

    def _body(self, method: MethodDef) -> list[str]:
        if not method.body:
            return []
        lines = method.body.split("\n")
        if any(_LOOKS_LIKE_HEADING.match(line) for line in lines):
            return [f"{_FENCE}{self._config.fence_language}", *lines, _FENCE]
        return lines

    def _warn_dropped(self, unit: Unit) -> None:
        dropped = []
        if isinstance(unit, ClassDef) and unit.superclass:
            dropped.append("superclass")
        if unit.has_mixins():
            dropped.append("include/extend")
        if unit.has_aliases():
            dropped.append("aliases")
        if dropped:
            LOGGER.warning(
                "LPFM front matter describes only the first unit; %s of %s dropped",
                ", ".join(dropped),
                unit.qualified_name,
            )
