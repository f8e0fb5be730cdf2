"""Method parameter value object."""

from __future__ import annotations

from dataclasses import dataclass

from lpfm.domain.model.enums import ParameterKind

_NAMELESS_ALLOWED = frozenset(
    {ParameterKind.REST, ParameterKind.KEYWORD_REST, ParameterKind.BLOCK, ParameterKind.FORWARD}
)
_DEFAULTED = frozenset({ParameterKind.OPTIONAL, ParameterKind.OPTIONAL_KEYWORD})


@dataclass(frozen=True, slots=True)
class Parameter:
    """Ruby method parameter.

    Attributes:
        kind: Parameter kind
        name: Parameter name, empty for anonymous rest/block and forwarding
        default: Default value source text, only for optional kinds
    """

    kind: ParameterKind
    name: str = ""
    default: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name and self.kind not in _NAMELESS_ALLOWED:
            raise ValueError(f"{self.kind.name.lower()} parameter must have a name")

        if self.kind == ParameterKind.FORWARD and self.name:
            raise ValueError("forwarding parameter cannot have a name")

        if self.kind in _DEFAULTED and not self.default:
            raise ValueError(f"optional parameter '{self.name}' must have a default")

        if self.kind not in _DEFAULTED and self.default is not None:
            raise ValueError(f"parameter '{self.name}' cannot have a default")

    def __str__(self) -> str:
        """Render as it appears in a definition line."""
        match self.kind:
            case ParameterKind.REQUIRED:
                return self.name
            case ParameterKind.OPTIONAL:
                return f"{self.name} = {self.default}"
            case ParameterKind.REST:
                return f"*{self.name}"
            case ParameterKind.REQUIRED_KEYWORD:
                return f"{self.name}:"
            case ParameterKind.OPTIONAL_KEYWORD:
                return f"{self.name}: {self.default}"
            case ParameterKind.KEYWORD_REST:
                return f"**{self.name}"
            case ParameterKind.BLOCK:
                return f"&{self.name}"
            case ParameterKind.FORWARD:
                return "..."
