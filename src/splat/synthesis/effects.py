from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from splat.synthesis.model import ClassDecl, Constructor, Effect, Parameter, strip_quotes


def _bundle_parameter(
    ctor: Constructor,
    container: ClassDecl,
    struct_name: str,
    property_name: str,
) -> Optional[Parameter]:
    accepted = {struct_name, f"{container.name}.{struct_name}"}
    for parameter in ctor.parameters:
        if strip_quotes(parameter.annotation) in accepted:
            return parameter
    for parameter in ctor.parameters:
        if parameter.name == property_name:
            return parameter
    return None


def _holds_bundle(container: ClassDecl, struct_name: str, property_name: str) -> bool:
    accepted = {struct_name, f"{container.name}.{struct_name}"}
    for stored in container.fields():
        if stored.name == property_name or strip_quotes(stored.annotation) in accepted:
            return True
    return False


def bundle_constructors(
    container: ClassDecl,
    struct_name: str,
    property_name: str,
) -> List[Constructor]:
    """Constructors of ``container`` that receive the bundle value.

    ``__post_init__`` stands in for the generated dataclass ``__init__`` and
    counts whenever the container stores the bundle as a field.
    """
    found: List[Constructor] = []
    for ctor in container.constructors():
        if ctor.name == "__post_init__":
            if _holds_bundle(container, struct_name, property_name):
                found.append(ctor)
        elif _bundle_parameter(ctor, container, struct_name, property_name) is not None:
            found.append(ctor)
    return found


def forward_keyword(
    container: ClassDecl, struct_name: str, property_name: str
) -> Optional[str]:
    """Keyword that passes the bundle to ``__init__``.

    ``None`` means the receiving parameter is positional-only and the bundle
    is passed positionally.
    """
    for ctor in container.constructors():
        if ctor.name != "__init__":
            continue
        parameter = _bundle_parameter(ctor, container, struct_name, property_name)
        if parameter is not None:
            return None if parameter.positional_only else parameter.name
    return property_name


def qualify_error(error_type: str, container: ClassDecl) -> str:
    """Spell ``error_type`` relative to the module rather than the class body.

    A nested error class is only reachable as ``Container.Error`` from
    outside the class, so nested names get the container prefix.
    """
    head = error_type.split(".", 1)[0]
    if head == container.name:
        return error_type
    if container.nested_type(head) is not None:
        return f"{container.name}.{error_type}"
    return error_type


@dataclass(frozen=True)
class EffectResolution:
    effect: Effect
    source: Optional[Constructor] = None


def propagate_effect(
    container: ClassDecl,
    struct_name: str,
    property_name: str,
) -> EffectResolution:
    for ctor in bundle_constructors(container, struct_name, property_name):
        if not ctor.effect.raising:
            continue
        if ctor.effect.error_type is None:
            return EffectResolution(Effect.raises(), ctor)
        qualified = qualify_error(ctor.effect.error_type, container)
        return EffectResolution(Effect.raises(qualified), ctor)
    return EffectResolution(Effect.none())
