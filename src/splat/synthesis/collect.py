from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from splat.exceptions import DuplicateParameterName, UnresolvedBundleReference
from splat.synthesis.model import (
    ClassDecl,
    Field,
    PathSegment,
    PropertyRecord,
    strip_escape,
    strip_quotes,
)

logger = logging.getLogger(__name__)


def has_empty_init(bundle: ClassDecl) -> bool:
    return any(ctor.is_empty for ctor in bundle.constructors())


def _bundle_owner(annotation: str, struct_name: str, container: ClassDecl) -> Optional[str]:
    text = strip_quotes(annotation)
    suffix = f".{struct_name}"
    if not text.endswith(suffix):
        return None
    owner = strip_quotes(text[: -len(suffix)])
    prefix = f"{container.name}."
    if owner.startswith(prefix):
        owner = owner[len(prefix) :]
    return owner


@dataclass
class PropertyCollector:
    """Flatten a bundle's stored fields into path-annotated leaf records."""

    struct_name: str = "Arguments"
    strict_references: bool = False
    warnings: List[str] = field(default_factory=list)

    def collect(
        self,
        bundle: ClassDecl,
        container: ClassDecl,
        path: Tuple[PathSegment, ...] = (),
    ) -> List[PropertyRecord]:
        if has_empty_init(bundle):
            logger.debug("%s declares an empty __init__; nothing to flatten", bundle.name)
            return []
        records: List[PropertyRecord] = []
        for stored in bundle.fields():
            records.extend(self._collect_field(stored, container, path))
        return records

    def _collect_field(
        self,
        stored: Field,
        container: ClassDecl,
        path: Tuple[PathSegment, ...],
    ) -> List[PropertyRecord]:
        name = strip_escape(stored.name)
        leaf = PropertyRecord(
            name=name,
            annotation=stored.annotation,
            doc=stored.doc,
            path=path,
            source_name=stored.name,
        )
        owner = _bundle_owner(stored.annotation, self.struct_name, container)
        if owner is None:
            return [leaf]
        owner_decl = container.nested_type(owner)
        nested = owner_decl.nested_type(self.struct_name) if owner_decl else None
        if nested is None:
            if self.strict_references:
                raise UnresolvedBundleReference(stored.name, stored.annotation)
            self.warnings.append(
                f"{container.name}: field '{stored.name}' looks like a bundle reference "
                f"('{stored.annotation}') but no nested {owner}.{self.struct_name} was found; "
                "treating it as a plain parameter"
            )
            logger.warning("%s", self.warnings[-1])
            return [leaf]
        segment = PathSegment(name=stored.name, bundle_type=f"{owner}.{self.struct_name}")
        if any(step.bundle_type == segment.bundle_type for step in path):
            self.warnings.append(
                f"{container.name}: field '{stored.name}' re-enters {segment.bundle_type}; "
                "treating it as a plain parameter"
            )
            logger.warning("%s", self.warnings[-1])
            return [leaf]
        logger.debug("expanding %s into %s", stored.name, segment.bundle_type)
        return self.collect(nested, container, path + (segment,))


def collect_properties(
    bundle: ClassDecl,
    container: ClassDecl,
    struct_name: str = "Arguments",
    *,
    strict_references: bool = False,
    warnings: List[str] | None = None,
) -> List[PropertyRecord]:
    collector = PropertyCollector(
        struct_name=struct_name,
        strict_references=strict_references,
    )
    records = collector.collect(bundle, container)
    if warnings is not None:
        warnings.extend(collector.warnings)
    return records


def _describe_path(record: PropertyRecord) -> str:
    return ".".join((*record.path_names(), record.name))


def check_unique_names(records: Sequence[PropertyRecord]) -> None:
    seen: Dict[str, List[PropertyRecord]] = defaultdict(list)
    for record in records:
        seen[record.name].append(record)
    for name, group in seen.items():
        if len(group) > 1:
            raise DuplicateParameterName(name, [_describe_path(record) for record in group])
