"""Method definition entity."""

from __future__ import annotations

from dataclasses import dataclass

from lpfm.domain.model.enums import MethodKind, ParameterKind, Visibility
from lpfm.domain.model.parameter import Parameter


@dataclass(frozen=True, slots=True)
class MethodDef:
    """Ruby method definition.

    Attributes:
        name: Method name; receiver kept only for OBJECT_RECEIVER kind (obj.name)
        parameters: Parameters in declaration order
        body: Dedented, trimmed body text, stored verbatim
        visibility: PUBLIC/PRIVATE/PROTECTED
        kind: How the method is bound
        prose: Free text describing the method, None if absent
    """

    name: str
    parameters: tuple[Parameter, ...] = ()
    body: str = ""
    visibility: Visibility = Visibility.PUBLIC
    kind: MethodKind = MethodKind.INSTANCE
    prose: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("method name must not be empty")

        is_dotted = "." in self.name
        if is_dotted and self.kind != MethodKind.OBJECT_RECEIVER:
            raise ValueError(f"dotted method name '{self.name}' requires OBJECT_RECEIVER kind")
        if self.kind == MethodKind.OBJECT_RECEIVER and not is_dotted:
            raise ValueError(f"object receiver method '{self.name}' must keep its receiver")

        for parameter in self.parameters:
            if not isinstance(parameter, Parameter):
                raise TypeError(f"parameters must be Parameter, got {type(parameter).__name__}")

        forwards = sum(1 for p in self.parameters if p.kind == ParameterKind.FORWARD)
        if forwards > 1:
            raise ValueError(f"method '{self.name}' declares '...' more than once")

    @property
    def is_class_method(self) -> bool:
        """Method is bound to the unit itself rather than to instances."""
        return self.kind != MethodKind.INSTANCE

    @property
    def is_singleton_block(self) -> bool:
        """Method is declared inside a class << self block."""
        return self.kind == MethodKind.SINGLETON_BLOCK

    @property
    def has_body(self) -> bool:
        return bool(self.body)

    @property
    def signature(self) -> str:
        """Name followed by the parenthesized parameter list, if any."""
        if not self.parameters:
            return self.name
        return f"{self.name}({', '.join(str(p) for p in self.parameters)})"
