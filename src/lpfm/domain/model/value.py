"""Typed values of constants and class variables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Symbol:
    """Ruby symbol literal.

    Attributes:
        name: Symbol name without the leading colon
    """

    name: str

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("symbol name must not be empty")

    def __str__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True, slots=True)
class RawExpression:
    """Expression kept verbatim because it is not a recognized literal.

    Attributes:
        source: Expression text exactly as written
    """

    source: str

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.source:
            raise ValueError("expression source must not be empty")

    def __str__(self) -> str:
        return self.source


ConstantValue: TypeAlias = bool | int | float | str | Symbol | RawExpression | None
