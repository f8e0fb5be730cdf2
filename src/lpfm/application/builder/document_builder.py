"""Document builder: mutable drafts frozen into an immutable Document."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from lpfm.domain.exceptions.validation import ValidationError
from lpfm.domain.model.document import Document
from lpfm.domain.model.enums import AttrKind, MethodKind, UnitKind, Visibility
from lpfm.domain.model.method import MethodDef
from lpfm.domain.model.unit import NAMESPACE_SEPARATOR, ClassDef, InlineAttr, ModuleDef, Unit
from lpfm.domain.ports.model_builder import ModelBuilderPort
from lpfm.infrastructure.logger import get_logger

if TYPE_CHECKING:
    from lpfm.domain.model.parameter import Parameter
    from lpfm.domain.model.value import ConstantValue

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class _UnitDraft:
    """Mutable unit state while a parse pass is running.

    visibility and in_singleton_block are parse-time context only;
    they never reach the frozen model.
    """

    name: str
    kind: UnitKind
    namespace: tuple[str, ...]
    holder: bool = False
    namespace_only: bool = False
    superclass: str | None = None
    methods: list[MethodDef] = field(default_factory=list)
    constants: dict[str, ConstantValue] = field(default_factory=dict)
    class_variables: dict[str, ConstantValue] = field(default_factory=dict)
    attrs: dict[AttrKind, list[str]] = field(
        default_factory=lambda: {kind: [] for kind in AttrKind}
    )
    inline_attrs: list[InlineAttr] = field(default_factory=list)
    includes: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)
    alias_methods: dict[str, str] = field(default_factory=dict)
    visibility: Visibility = Visibility.PUBLIC
    in_singleton_block: bool = False

    def freeze(self) -> Unit:
        common = {
            "name": self.name,
            "namespace": self.namespace,
            "methods": tuple(self.methods),
            "constants": MappingProxyType(dict(self.constants)),
            "class_variables": MappingProxyType(dict(self.class_variables)),
            "attr_readers": tuple(self.attrs[AttrKind.READER]),
            "attr_writers": tuple(self.attrs[AttrKind.WRITER]),
            "attr_accessors": tuple(self.attrs[AttrKind.ACCESSOR]),
            "inline_attrs": tuple(self.inline_attrs),
            "includes": tuple(self.includes),
            "extends": tuple(self.extends),
            "aliases": MappingProxyType(dict(self.aliases)),
            "alias_methods": MappingProxyType(dict(self.alias_methods)),
        }
        if self.kind == UnitKind.CLASS:
            return ClassDef(**common, superclass=self.superclass)

        module = ModuleDef(**common)
        if (self.holder or self.namespace_only) and not module.has_own_content():
            return ModuleDef(**common, namespace_only=True)
        return module


class DocumentBuilder(ModelBuilderPort):
    """Collects parser events for exactly one Document.

    A fresh builder is created for every conversion.
    FAIL-FIRST: invariant violations raise ValidationError immediately.
    """

    def __init__(self, filename: str | None = None) -> None:
        """Initialize builder.

        Args:
            filename: Source filename hint stored on the Document
        """
        self._filename = filename
        self._units: dict[str, _UnitDraft] = {}
        self._requires: list[str] = []
        self._metadata: Mapping[str, object] = {}
        self._built = False

    def add_unit(self, name: str, kind: UnitKind, namespace: tuple[str, ...] = ()) -> str:
        if not name:
            raise ValidationError("Unit name must not be empty")

        key = NAMESPACE_SEPARATOR.join((*namespace, name))
        draft = self._units.get(key)
        if draft is None:
            self._units[key] = _UnitDraft(name=name, kind=kind, namespace=namespace)
            return key

        if draft.holder:
            # explicit definition of a namespace holder decides its kind
            LOGGER.debug("namespace holder %s defined as %s", name, kind.value)
            draft.kind = kind
            draft.holder = False
            return key

        if draft.kind != kind:
            raise ValidationError(f"'{key}' is already defined as a {draft.kind.value}")
        # class A::B reopening B nested in A keeps the first spelling
        LOGGER.debug("reopening %s %s", kind.value, key)
        return key

    def ensure_namespace_holder(self, name: str, namespace: tuple[str, ...] = ()) -> str:
        key = NAMESPACE_SEPARATOR.join((*namespace, name))
        if key not in self._units:
            LOGGER.debug("creating namespace holder module %s", key)
            self._units[key] = _UnitDraft(
                name=name, kind=UnitKind.MODULE, namespace=namespace, holder=True
            )
        return key

    def set_superclass(self, unit: str, superclass: str) -> None:
        draft = self._draft(unit)
        if draft.kind != UnitKind.CLASS:
            LOGGER.warning("ignoring superclass %s of module %s", superclass, unit)
            return
        draft.superclass = superclass

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
        draft = self._draft(unit)
        if draft.in_singleton_block and kind == MethodKind.INSTANCE:
            kind = MethodKind.SINGLETON_BLOCK

        try:
            method = MethodDef(
                name=name,
                parameters=parameters,
                body=body,
                visibility=visibility or draft.visibility,
                kind=kind,
                prose=prose,
            )
        except ValueError as e:
            raise ValidationError(f"Invalid method in {unit}: {e}") from e
        draft.methods.append(method)

    def set_method_visibility(
        self,
        unit: str,
        name: str,
        visibility: Visibility,
        *,
        kind: MethodKind = MethodKind.INSTANCE,
    ) -> bool:
        draft = self._draft(unit)
        updated = False
        for index, method in enumerate(draft.methods):
            if method.name == name and method.kind == kind:
                draft.methods[index] = replace(method, visibility=visibility)
                updated = True
        return updated

    def set_visibility(self, unit: str, visibility: Visibility) -> None:
        self._draft(unit).visibility = visibility

    def enter_singleton_block(self, unit: str) -> None:
        draft = self._draft(unit)
        draft.in_singleton_block = True
        draft.visibility = Visibility.PUBLIC

    def exit_singleton_block(self, unit: str) -> None:
        self._draft(unit).in_singleton_block = False

    def add_constant(self, unit: str, name: str, value: ConstantValue) -> None:
        if not name:
            raise ValidationError(f"Constant name in {unit} must not be empty")
        self._draft(unit).constants[name] = value

    def add_class_variable(self, unit: str, name: str, value: ConstantValue) -> None:
        bare = name.lstrip("@")
        if not bare:
            raise ValidationError(f"Class variable name in {unit} must not be empty")
        self._draft(unit).class_variables[f"@@{bare}"] = value

    def add_attrs(self, unit: str, kind: AttrKind, names: tuple[str, ...]) -> None:
        declared = self._draft(unit).attrs[kind]
        for name in names:
            if name and name not in declared:
                declared.append(name)

    def add_inline_attr(self, unit: str, kind: AttrKind, names: tuple[str, ...]) -> None:
        try:
            attr = InlineAttr(kind=kind, names=names)
        except ValueError as e:
            raise ValidationError(f"Invalid attribute declaration in {unit}: {e}") from e
        self._draft(unit).inline_attrs.append(attr)

    def add_include(self, unit: str, module: str) -> None:
        includes = self._draft(unit).includes
        if module not in includes:
            includes.append(module)

    def add_extend(self, unit: str, module: str) -> None:
        extends = self._draft(unit).extends
        if module not in extends:
            extends.append(module)

    def add_alias(self, unit: str, new_name: str, old_name: str) -> None:
        draft = self._draft(unit)
        if new_name in draft.alias_methods:
            raise ValidationError(f"'{new_name}' in {unit} is already an alias_method")
        draft.aliases[new_name] = old_name

    def add_alias_method(self, unit: str, new_name: str, old_name: str) -> None:
        draft = self._draft(unit)
        if new_name in draft.aliases:
            raise ValidationError(f"'{new_name}' in {unit} is already an alias")
        draft.alias_methods[new_name] = old_name

    def mark_namespace_only(self, unit: str) -> None:
        draft = self._draft(unit)
        if draft.kind == UnitKind.MODULE:
            draft.namespace_only = True

    def add_require(self, name: str) -> None:
        if name and name not in self._requires:
            self._requires.append(name)

    def set_metadata(self, metadata: Mapping[str, object]) -> None:
        if metadata is None:
            raise TypeError("metadata must not be None")
        self._metadata = metadata

    def build(self) -> Document:
        if self._built:
            raise RuntimeError("DocumentBuilder.build() called twice")
        self._built = True

        try:
            units = tuple(draft.freeze() for draft in self._units.values())
            return Document(
                units=units,
                requires=tuple(self._requires),
                metadata=MappingProxyType(dict(self._metadata)),
                filename=self._filename,
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e

    def _draft(self, unit: str) -> _UnitDraft:
        draft = self._units.get(unit)
        if draft is None:
            raise ValidationError(f"Unknown unit: {unit}")
        return draft
