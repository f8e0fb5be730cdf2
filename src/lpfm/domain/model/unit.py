"""Class and module entities."""

from __future__ import annotations

from collections.abc import Mapping
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from lpfm.domain.model.enums import AttrKind, UnitKind

if TYPE_CHECKING:
    from lpfm.domain.model.method import MethodDef
    from lpfm.domain.model.value import ConstantValue

NAMESPACE_SEPARATOR = "::"


def _empty_mapping() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class InlineAttr:
    """Attribute declaration found as body content.

    Attributes:
        kind: READER/WRITER/ACCESSOR
        names: Attribute names in declaration order
    """

    kind: AttrKind
    names: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.names:
            raise ValueError(f"{self.kind.value} declaration must name at least one attribute")
        for name in self.names:
            if not name:
                raise ValueError(f"{self.kind.value} attribute name must not be empty")


@dataclass(frozen=True, slots=True)
class Unit(ABC):
    """Common shape of classes and modules.

    Attributes:
        name: Unit name as written; scoped names (A::B) stay whole
        namespace: Enclosing unit names, outermost first. Empty = top level
        methods: Methods in declaration order
        constants: Constant name → value, in declaration order
        class_variables: Class variable name (with @@) → value
        attr_readers: Reader names declared through metadata
        attr_writers: Writer names declared through metadata
        attr_accessors: Accessor names declared through metadata
        inline_attrs: Attr declarations found as body content
        includes: Included module names
        extends: Extended module names
        aliases: New name → old name, rendered as `alias new old`
        alias_methods: New name → old name, rendered as `alias_method :new, :old`
    """

    name: str
    namespace: tuple[str, ...] = ()
    methods: tuple[MethodDef, ...] = ()
    constants: Mapping[str, ConstantValue] = field(default_factory=_empty_mapping)
    class_variables: Mapping[str, ConstantValue] = field(default_factory=_empty_mapping)
    attr_readers: tuple[str, ...] = ()
    attr_writers: tuple[str, ...] = ()
    attr_accessors: tuple[str, ...] = ()
    inline_attrs: tuple[InlineAttr, ...] = ()
    includes: tuple[str, ...] = ()
    extends: tuple[str, ...] = ()
    aliases: Mapping[str, str] = field(default_factory=_empty_mapping)
    alias_methods: Mapping[str, str] = field(default_factory=_empty_mapping)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("unit name must not be empty")

        if not all(self.name.split(NAMESPACE_SEPARATOR)):
            raise ValueError(f"unit name '{self.name}' contains an empty segment")

        for segment in self.namespace:
            if not segment:
                raise ValueError(f"namespace of '{self.name}' contains an empty segment")

        for variable in self.class_variables:
            if not variable.startswith("@@"):
                raise ValueError(f"class variable '{variable}' must start with '@@'")

        overlap = self.aliases.keys() & self.alias_methods.keys()
        if overlap:
            raise ValueError(
                f"'{self.name}' declares {sorted(overlap)} as both alias and alias_method"
            )

    @property
    @abstractmethod
    def kind(self) -> UnitKind:
        """CLASS or MODULE."""

    @property
    def path(self) -> tuple[str, ...]:
        """Namespace plus own name."""
        return (*self.namespace, self.name)

    @property
    def qualified_name(self) -> str:
        """Full name joined with '::' (A::B::Name)."""
        return NAMESPACE_SEPARATOR.join(self.path)

    def has_methods(self) -> bool:
        return bool(self.methods)

    def has_constants(self) -> bool:
        return bool(self.constants)

    def has_class_variables(self) -> bool:
        return bool(self.class_variables)

    def has_declared_attrs(self) -> bool:
        """Check if metadata declared any attribute."""
        return bool(self.attr_readers or self.attr_writers or self.attr_accessors)

    def has_inline_attrs(self) -> bool:
        return bool(self.inline_attrs)

    def has_attrs(self) -> bool:
        return self.has_declared_attrs() or self.has_inline_attrs()

    def has_includes(self) -> bool:
        return bool(self.includes)

    def has_extends(self) -> bool:
        return bool(self.extends)

    def has_mixins(self) -> bool:
        return self.has_includes() or self.has_extends()

    def has_aliases(self) -> bool:
        """Check if either alias bucket is non-empty."""
        return bool(self.aliases or self.alias_methods)

    def has_own_content(self) -> bool:
        """Check if the unit holds anything besides nested units."""
        return (
            self.has_methods()
            or self.has_constants()
            or self.has_class_variables()
            or self.has_attrs()
            or self.has_mixins()
            or self.has_aliases()
        )

    @property
    def readers(self) -> tuple[str, ...]:
        """All reader names: metadata first, then inline declarations."""
        return self._attr_names(AttrKind.READER, self.attr_readers)

    @property
    def writers(self) -> tuple[str, ...]:
        """All writer names: metadata first, then inline declarations."""
        return self._attr_names(AttrKind.WRITER, self.attr_writers)

    @property
    def accessors(self) -> tuple[str, ...]:
        """All accessor names: metadata first, then inline declarations."""
        return self._attr_names(AttrKind.ACCESSOR, self.attr_accessors)

    def _attr_names(self, kind: AttrKind, declared: tuple[str, ...]) -> tuple[str, ...]:
        names = list(declared)
        for attr in self.inline_attrs:
            if attr.kind == kind:
                names.extend(attr.names)
        return tuple(dict.fromkeys(names))


@dataclass(frozen=True, slots=True)
class ClassDef(Unit):
    """Ruby class.

    Attributes:
        superclass: Superclass name as written, None if absent
    """

    superclass: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        Unit.__post_init__(self)
        if self.superclass is not None and not self.superclass:
            raise ValueError(f"superclass of '{self.name}' must not be empty string")

    @property
    def kind(self) -> UnitKind:
        return UnitKind.CLASS


@dataclass(frozen=True, slots=True)
class ModuleDef(Unit):
    """Ruby module.

    Attributes:
        namespace_only: Module exists only to nest other units
    """

    namespace_only: bool = False

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        Unit.__post_init__(self)
        if self.namespace_only and self.has_own_content():
            raise ValueError(f"namespace-only module '{self.name}' must not have own content")

    @property
    def kind(self) -> UnitKind:
        return UnitKind.MODULE
