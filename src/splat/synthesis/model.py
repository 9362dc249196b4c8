from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

import keyword


def strip_escape(name: str) -> str:
    """Return the processing name for a possibly keyword-escaped identifier."""
    if name.endswith("_") and not name.endswith("__") and keyword.iskeyword(name[:-1]):
        return name[:-1]
    return name


def escape_name(name: str) -> str:
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def strip_quotes(text: str) -> str:
    text = text.strip()
    for quote in ('"""', "'''", '"', "'"):
        if len(text) > 2 * len(quote) and text.startswith(quote) and text.endswith(quote):
            return text[len(quote) : -len(quote)].strip()
    return text


@dataclass(frozen=True)
class Parameter:
    name: str
    annotation: str = ""
    positional_only: bool = False


class EffectKind(str, Enum):
    NONE = "none"
    RAISES = "raises"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind = EffectKind.NONE
    error_type: Optional[str] = None

    @classmethod
    def none(cls) -> Effect:
        return cls(EffectKind.NONE)

    @classmethod
    def raises(cls, error_type: Optional[str] = None) -> Effect:
        return cls(EffectKind.RAISES, error_type)

    @property
    def raising(self) -> bool:
        return self.kind is EffectKind.RAISES

    def describe(self) -> str:
        if not self.raising:
            return "none"
        if self.error_type is None:
            return "raises"
        return f"raises({self.error_type})"


@dataclass(frozen=True)
class Field:
    name: str
    annotation: str
    doc: Optional[str] = None
    has_default: bool = False
    is_classvar: bool = False
    line: int = 0

    @property
    def stored(self) -> bool:
        return not self.is_classvar


@dataclass(frozen=True)
class Constructor:
    name: str
    parameters: Tuple[Parameter, ...] = ()
    effect: Effect = field(default_factory=Effect.none)
    docstring: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.name == "__init__" and not self.parameters


@dataclass(frozen=True)
class Method:
    name: str


@dataclass(frozen=True)
class ClassDecl:
    name: str
    members: Tuple["Member", ...] = ()
    docstring: Optional[str] = None
    is_dataclass: bool = False
    instance_attributes: Tuple[str, ...] = ()
    line: int = 0

    def fields(self) -> Iterator[Field]:
        for member in self.members:
            if isinstance(member, Field) and member.stored:
                yield member

    def nested_types(self) -> Iterator[ClassDecl]:
        for member in self.members:
            if isinstance(member, ClassDecl):
                yield member

    def constructors(self) -> Iterator[Constructor]:
        for member in self.members:
            if isinstance(member, Constructor):
                yield member

    def nested_type(self, name: str) -> Optional[ClassDecl]:
        for nested in self.nested_types():
            if strip_quotes(nested.name) == name:
                return nested
        return None

    def member_names(self) -> set[str]:
        return {member.name for member in self.members}


Member = Union[Field, ClassDecl, Constructor, Method]


@dataclass(frozen=True)
class AnnotationArgument:
    label: Optional[str]
    value: Optional[str]


@dataclass(frozen=True)
class SplatConfig:
    struct_name: str = "Arguments"
    property_name: str = "arguments"


@dataclass(frozen=True)
class ExpansionSettings:
    method_name: str = "from_fields"
    strict_references: bool = False
    allow_empty_bundle: bool = True
    decorator_names: Tuple[str, ...] = ("splat",)


@dataclass(frozen=True)
class PathSegment:
    name: str
    bundle_type: str


@dataclass(frozen=True)
class PropertyRecord:
    name: str
    annotation: str
    doc: Optional[str] = None
    path: Tuple[PathSegment, ...] = ()
    source_name: str = ""

    @property
    def parameter_name(self) -> str:
        return self.source_name or escape_name(self.name)

    def path_names(self) -> Tuple[str, ...]:
        return tuple(segment.name for segment in self.path)


@dataclass(frozen=True)
class BundleCall:
    bundle_type: str
    arguments: Tuple[Tuple[str, Union[str, "BundleCall"]], ...] = ()


@dataclass(frozen=True)
class GeneratedConstructor:
    container: str
    method_name: str
    bundle_type: str
    forward_keyword: Optional[str]
    call: BundleCall
    parameters: Tuple[Parameter, ...] = ()
    effect: Effect = field(default_factory=Effect.none)
    docstring: str = ""
    discardable: bool = False
    receiver: str = "cls"


@dataclass(frozen=True)
class ExpansionResult:
    constructor: GeneratedConstructor
    properties: Tuple[PropertyRecord, ...] = ()
    warnings: List[str] = field(default_factory=list)
