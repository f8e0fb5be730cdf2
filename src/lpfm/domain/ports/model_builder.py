"""Model builder port (interface).

Both parsers drive this contract; neither knows how the
immutable Document is assembled.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING

from lpfm.domain.model.enums import MethodKind

if TYPE_CHECKING:
    from lpfm.domain.model.document import Document
    from lpfm.domain.model.enums import AttrKind, UnitKind, Visibility
    from lpfm.domain.model.parameter import Parameter
    from lpfm.domain.model.value import ConstantValue


class ModelBuilderPort(ABC):
    """Port for assembling a Document during one parse pass.

    Units are addressed by the key add_unit returns, their qualified
    name (A::B::Name). Operations on a unit that was never
    added raise ValidationError. build() may be called once.
    """

    @abstractmethod
    def add_unit(self, name: str, kind: UnitKind, namespace: tuple[str, ...] = ()) -> str:
        """Open a class or module, reopening it if already added.

        Args:
            name: Unit name as written; may itself be scoped (A::B)
            kind: CLASS or MODULE
            namespace: Enclosing unit names, outermost first

        Returns:
            Qualified name addressing the unit in later calls

        Raises:
            ValidationError: If the qualified name is reused with another kind
        """
        ...

    @abstractmethod
    def ensure_namespace_holder(self, name: str, namespace: tuple[str, ...] = ()) -> str:
        """Create a namespace-holder module unless the qualified name exists.

        Returns:
            Qualified name of the holder
        """
        ...

    @abstractmethod
    def set_superclass(self, unit: str, superclass: str) -> None:
        """Record the superclass of a class."""
        ...

    @abstractmethod
    def add_method(
        self,
        unit: str,
        name: str,
        parameters: tuple[Parameter, ...] = (),
        *,
        kind: MethodKind,
        body: str = "",
        visibility: Visibility | None = None,
        prose: str | None = None,
    ) -> None:
        """Append a method.

        Args:
            unit: Owning unit name
            name: Method name (receiver kept for object-receiver kind)
            parameters: Parameters in declaration order
            kind: Binding kind; INSTANCE becomes SINGLETON_BLOCK while
                the unit's singleton block is open
            body: Dedented body text
            visibility: Explicit visibility; None = the unit's active visibility
            prose: Optional description
        """
        ...

    @abstractmethod
    def set_method_visibility(
        self,
        unit: str,
        name: str,
        visibility: Visibility,
        *,
        kind: MethodKind = MethodKind.INSTANCE,
    ) -> bool:
        """Change visibility of already declared methods named `name` of `kind`.

        Returns:
            True if at least one method was updated
        """
        ...

    @abstractmethod
    def set_visibility(self, unit: str, visibility: Visibility) -> None:
        """Switch the active visibility for subsequent methods."""
        ...

    @abstractmethod
    def enter_singleton_block(self, unit: str) -> None:
        """Open a class << self block. Active visibility resets to public."""
        ...

    @abstractmethod
    def exit_singleton_block(self, unit: str) -> None:
        """Close the class << self block, if open."""
        ...

    @abstractmethod
    def add_constant(self, unit: str, name: str, value: ConstantValue) -> None:
        """Record a constant. Redefinition keeps position, replaces value."""
        ...

    @abstractmethod
    def add_class_variable(self, unit: str, name: str, value: ConstantValue) -> None:
        """Record a class variable. The @@ prefix is added when missing."""
        ...

    @abstractmethod
    def add_attrs(self, unit: str, kind: AttrKind, names: tuple[str, ...]) -> None:
        """Record declared attribute names, deduplicated per kind."""
        ...

    @abstractmethod
    def add_inline_attr(self, unit: str, kind: AttrKind, names: tuple[str, ...]) -> None:
        """Record an attribute declaration found as body content."""
        ...

    @abstractmethod
    def add_include(self, unit: str, module: str) -> None:
        """Record an included module, deduplicated."""
        ...

    @abstractmethod
    def add_extend(self, unit: str, module: str) -> None:
        """Record an extended module, deduplicated."""
        ...

    @abstractmethod
    def add_alias(self, unit: str, new_name: str, old_name: str) -> None:
        """Record a bare alias (alias new old)."""
        ...

    @abstractmethod
    def add_alias_method(self, unit: str, new_name: str, old_name: str) -> None:
        """Record an alias_method pair."""
        ...

    @abstractmethod
    def mark_namespace_only(self, unit: str) -> None:
        """Flag a module as existing only to nest other units."""
        ...

    @abstractmethod
    def add_require(self, name: str) -> None:
        """Record a required library, deduplicated."""
        ...

    @abstractmethod
    def set_metadata(self, metadata: Mapping[str, object]) -> None:
        """Attach the decoded front matter."""
        ...

    @abstractmethod
    def build(self) -> Document:
        """Freeze everything recorded into an immutable Document.

        Raises:
            ValidationError: If the recorded content violates a model invariant
        """
        ...
