from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence
import logging

from splat.exceptions import NoProperties
from splat.synthesis.collect import check_unique_names, collect_properties, has_empty_init
from splat.synthesis.configuration import locate_bundle, resolve_configuration
from splat.synthesis.effects import forward_keyword, propagate_effect
from splat.synthesis.emit import emit_constructor
from splat.synthesis.model import (
    AnnotationArgument,
    ClassDecl,
    ExpansionResult,
    ExpansionSettings,
    SplatConfig,
)

logger = logging.getLogger(__name__)


@dataclass
class Expander:
    """Run the flattening pass over one decorated class.

    ``expand`` is pure: it reads the declaration model and returns the
    generated constructor, or raises a ``SplatError`` subclass.
    """

    settings: ExpansionSettings = field(default_factory=ExpansionSettings)
    defaults: SplatConfig = field(default_factory=SplatConfig)

    def expand(
        self,
        container: ClassDecl,
        arguments: Sequence[AnnotationArgument] = (),
    ) -> ExpansionResult:
        config = resolve_configuration(arguments, self.defaults)
        bundle = locate_bundle(container, config.struct_name)
        warnings: list[str] = []
        records = collect_properties(
            bundle,
            container,
            config.struct_name,
            strict_references=self.settings.strict_references,
            warnings=warnings,
        )
        if (
            not records
            and not self.settings.allow_empty_bundle
            and not has_empty_init(bundle)
            and not any(True for _ in bundle.fields())
        ):
            raise NoProperties()
        check_unique_names(records)
        resolution = propagate_effect(container, config.struct_name, config.property_name)
        constructor = emit_constructor(
            container=container,
            bundle=bundle,
            config=config,
            method_name=self.settings.method_name,
            records=records,
            effect=resolution.effect,
            forward_keyword=forward_keyword(
                container, config.struct_name, config.property_name
            ),
            raising_doc=resolution.source.docstring if resolution.source else None,
        )
        logger.debug(
            "expanded %s: %d parameter(s), effect %s",
            container.name,
            len(constructor.parameters),
            constructor.effect.describe(),
        )
        return ExpansionResult(
            constructor=constructor,
            properties=tuple(records),
            warnings=warnings,
        )


def expand_declaration(
    container: ClassDecl,
    arguments: Sequence[AnnotationArgument] = (),
    *,
    settings: ExpansionSettings | None = None,
    defaults: SplatConfig | None = None,
) -> ExpansionResult:
    expander = Expander(
        settings=settings or ExpansionSettings(),
        defaults=defaults or SplatConfig(),
    )
    return expander.expand(container, arguments)
