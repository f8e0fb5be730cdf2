"""Outline reporter: Document → rich formatted structure overview."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from lpfm.application.renderers._base import build_namespace_tree, format_value
from lpfm.domain.model.enums import MethodKind, Visibility
from lpfm.domain.model.unit import ClassDef

if TYPE_CHECKING:
    from lpfm.application.renderers._base import NamespaceNode
    from lpfm.domain.model.document import Document
    from lpfm.domain.model.method import MethodDef
    from lpfm.domain.model.unit import Unit

_VISIBILITY_STYLE = {
    Visibility.PUBLIC: "green",
    Visibility.PROTECTED: "yellow",
    Visibility.PRIVATE: "red",
}


@dataclass(frozen=True, slots=True)
class OutlineConfig:
    """Configuration for outline reporter.

    Attributes:
        show_methods: List methods under each unit.
        show_values: List constants and class variables with their values.
        show_summary: Print the per-unit summary table.
        color: Emit ANSI styles. Off by default so output is plain text.
        width: Console width in characters.
    """

    show_methods: bool = True
    show_values: bool = True
    show_summary: bool = True
    color: bool = False
    width: int = 120

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.width < 40:
            raise ValueError(f"width must be >= 40, got {self.width}")


class OutlineReporter:
    """Outline reporter: outputs the unit/method structure as a tree.

    Output is str, not print(). Caller decides destination.
    """

    def __init__(self, config: OutlineConfig | None = None) -> None:
        """Initialize reporter.

        Args:
            config: Reporter configuration. Uses defaults if None.
        """
        self._config = config or OutlineConfig()

    def report(self, document: Document) -> str:
        """Format document structure as rich formatted string.

        Args:
            document: Document to describe.

        Returns:
            Formatted string with a tree of units and methods.
        """
        if document is None:
            raise TypeError("document must not be None")

        output = StringIO()
        console = Console(
            file=output,
            force_terminal=self._config.color,
            no_color=not self._config.color,
            width=self._config.width,
        )

        self._render_header(console, document)
        root = Tree("[bold]Document[/bold]")
        for node in build_namespace_tree(document.units):
            self._add_node(root, node)
        console.print(root)

        if self._config.show_summary and document.units:
            console.print()
            console.print(self._summary_table(document))

        return output.getvalue()

    def _render_header(self, console: Console, document: Document) -> None:
        classes = len(document.classes)
        modules = len(document.modules)
        console.rule("[bold]DOCUMENT OUTLINE[/bold]")
        console.print(f"[bold]Units:[/bold] {len(document.units)} (classes: {classes}, modules: {modules})")
        if document.requires:
            console.print(f"[bold]Requires:[/bold] {escape(', '.join(document.requires))}")
        if document.filename:
            console.print(f"[bold]File:[/bold] {escape(document.filename)}")
        console.print()

    def _add_node(self, parent: Tree, node: NamespaceNode) -> None:
        unit = node.unit
        if node.is_wrapper:
            branch = parent.add(f"[dim]module {escape(node.name)}[/dim] [dim](namespace)[/dim]")
        else:
            branch = parent.add(self._unit_label(unit))
            self._add_unit_details(branch, unit)

        for child in node.children.values():
            self._add_node(branch, child)

    def _unit_label(self, unit: Unit) -> str:
        label = f"[bold cyan]{unit.kind.value}[/bold cyan] {escape(unit.qualified_name)}"
        if isinstance(unit, ClassDef) and unit.superclass:
            label += f" < {escape(unit.superclass)}"
        return label

    def _add_unit_details(self, branch: Tree, unit: Unit) -> None:
        if unit.includes:
            branch.add(f"include {escape(', '.join(unit.includes))}")
        if unit.extends:
            branch.add(f"extend {escape(', '.join(unit.extends))}")

        if self._config.show_values:
            for name, value in (*unit.class_variables.items(), *unit.constants.items()):
                branch.add(f"{escape(name)} = {escape(format_value(value))}")

        for kind, names in (
            ("attr_reader", unit.readers),
            ("attr_writer", unit.writers),
            ("attr_accessor", unit.accessors),
        ):
            if names:
                branch.add(f"{kind} {escape(', '.join(names))}")

        if self._config.show_methods:
            for method in unit.methods:
                branch.add(self._method_label(method))

        for new_name, old_name in (*unit.aliases.items(), *unit.alias_methods.items()):
            branch.add(f"alias {escape(new_name)} → {escape(old_name)}")

    def _method_label(self, method: MethodDef) -> str:
        style = _VISIBILITY_STYLE[method.visibility]
        prefix = "self." if method.kind in (MethodKind.CLASS, MethodKind.SINGLETON_BLOCK) else ""
        label = f"[{style}]{method.visibility.value}[/{style}] def {escape(prefix + method.signature)}"
        if method.kind == MethodKind.SINGLETON_BLOCK:
            label += " [dim](class << self)[/dim]"
        return label

    def _summary_table(self, document: Document) -> Table:
        table = Table(title="Units")
        table.add_column("Unit", style="cyan")
        table.add_column("Kind")
        table.add_column("Methods", justify="right")
        table.add_column("Constants", justify="right")
        table.add_column("Attributes", justify="right")

        for unit in document.units:
            attrs = len(unit.readers) + len(unit.writers) + len(unit.accessors)
            table.add_row(
                escape(unit.qualified_name),
                unit.kind.value,
                str(len(unit.methods)),
                str(len(unit.constants) + len(unit.class_variables)),
                str(attrs),
            )
        return table
