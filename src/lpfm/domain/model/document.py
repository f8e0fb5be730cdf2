"""Document aggregate: everything one parse pass produces."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from lpfm.domain.model.unit import ClassDef, ModuleDef, Unit


def _empty_metadata() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class Document:
    """Immutable structural model of one Ruby file.

    Built exactly once by DocumentBuilder and never mutated afterwards.

    Attributes:
        units: Classes and modules in first-seen order
        requires: Required library names, deduplicated
        metadata: Front matter mapping (empty for Ruby input)
        filename: Source filename hint, None if unknown
    """

    units: tuple[Unit, ...] = ()
    requires: tuple[str, ...] = ()
    metadata: Mapping[str, object] = field(default_factory=_empty_metadata)
    filename: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        seen: set[str] = set()
        for unit in self.units:
            if not isinstance(unit, ClassDef | ModuleDef):
                raise TypeError(f"units must be ClassDef or ModuleDef, got {type(unit).__name__}")
            if unit.qualified_name in seen:
                raise ValueError(f"unit '{unit.qualified_name}' defined more than once")
            seen.add(unit.qualified_name)

        if len(set(self.requires)) != len(self.requires):
            raise ValueError("requires must not contain duplicates")

    @classmethod
    def empty(cls) -> Document:
        """Create empty document."""
        return cls()

    @property
    def classes(self) -> Mapping[str, ClassDef]:
        """Qualified class name → ClassDef in insertion order."""
        return MappingProxyType(
            {u.qualified_name: u for u in self.units if isinstance(u, ClassDef)}
        )

    @property
    def modules(self) -> Mapping[str, ModuleDef]:
        """Qualified module name → ModuleDef in insertion order."""
        return MappingProxyType(
            {u.qualified_name: u for u in self.units if isinstance(u, ModuleDef)}
        )

    def unit(self, name: str) -> Unit | None:
        """Find unit by qualified name (A::B::Name), None if absent."""
        for unit in self.units:
            if unit.qualified_name == name:
                return unit
        return None

    def has_classes(self) -> bool:
        return any(isinstance(u, ClassDef) for u in self.units)

    def has_modules(self) -> bool:
        return any(isinstance(u, ModuleDef) for u in self.units)

    def has_content(self) -> bool:
        """Check if rendering would produce any text."""
        return bool(self.units or self.requires)
