"""Domain model: immutable entities describing Ruby classes and modules."""

from lpfm.domain.model.configuration import RenderConfig
from lpfm.domain.model.document import Document
from lpfm.domain.model.enums import AttrKind, MethodKind, ParameterKind, UnitKind, Visibility
from lpfm.domain.model.method import MethodDef
from lpfm.domain.model.parameter import Parameter
from lpfm.domain.model.unit import NAMESPACE_SEPARATOR, ClassDef, InlineAttr, ModuleDef, Unit
from lpfm.domain.model.value import ConstantValue, RawExpression, Symbol

__all__ = [
    "NAMESPACE_SEPARATOR",
    "AttrKind",
    "ClassDef",
    "ConstantValue",
    "Document",
    "InlineAttr",
    "MethodDef",
    "MethodKind",
    "ModuleDef",
    "Parameter",
    "ParameterKind",
    "RawExpression",
    "RenderConfig",
    "Symbol",
    "Unit",
    "UnitKind",
    "Visibility",
]
