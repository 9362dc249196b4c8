from __future__ import annotations

from typing import Iterable, Optional

from splat.exceptions import TargetBundleNotFound
from splat.synthesis.model import AnnotationArgument, ClassDecl, SplatConfig

_STRUCT_LABEL = "struct_name"
_PROPERTY_LABEL = "property_name"


def _literal_for(arguments: Iterable[AnnotationArgument], label: str) -> Optional[str]:
    for argument in arguments:
        if argument.label != label:
            continue
        return argument.value
    return None


def resolve_configuration(
    arguments: Iterable[AnnotationArgument],
    defaults: SplatConfig | None = None,
) -> SplatConfig:
    """Read ``struct_name`` / ``property_name`` from decorator arguments.

    Only labeled plain string literals count. Anything else, including a
    labeled argument whose value is not a literal, keeps the default.
    """
    defaults = defaults or SplatConfig()
    arguments = list(arguments)
    struct_name = _literal_for(arguments, _STRUCT_LABEL)
    property_name = _literal_for(arguments, _PROPERTY_LABEL)
    return SplatConfig(
        struct_name=struct_name or defaults.struct_name,
        property_name=property_name or defaults.property_name,
    )


def locate_bundle(container: ClassDecl, struct_name: str) -> ClassDecl:
    for nested in container.nested_types():
        if nested.name == struct_name:
            return nested
    raise TargetBundleNotFound(struct_name)
