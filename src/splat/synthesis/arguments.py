from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from typing import Dict, List, Sequence, Tuple, Union

from splat.synthesis.model import BundleCall, PropertyRecord

Argument = Tuple[str, Union[str, BundleCall]]

_INDENT = "    "


def _flat_arguments(records: Sequence[PropertyRecord]) -> List[Argument]:
    return [(record.parameter_name, record.parameter_name) for record in records]


def synthesize_arguments(records: Sequence[PropertyRecord]) -> Tuple[Argument, ...]:
    """Regroup flat records into keyword arguments that rebuild nested bundles.

    Records without a path come first, in record order. Records under a
    nested bundle are grouped by their first path segment and emitted in
    segment-name order, so the output does not depend on field order or
    dict iteration.
    """
    if all(not record.path for record in records):
        return tuple(_flat_arguments(records))
    direct: List[PropertyRecord] = []
    grouped: Dict[str, List[PropertyRecord]] = defaultdict(list)
    bundle_types: Dict[str, str] = {}
    for record in records:
        if not record.path:
            direct.append(record)
            continue
        head = record.path[0]
        grouped[head.name].append(replace(record, path=record.path[1:]))
        bundle_types.setdefault(head.name, head.bundle_type)
    arguments = _flat_arguments(direct)
    for key in sorted(grouped):
        nested = BundleCall(bundle_types[key], synthesize_arguments(grouped[key]))
        arguments.append((key, nested))
    return tuple(arguments)


def synthesize_call(records: Sequence[PropertyRecord], bundle_type: str) -> BundleCall:
    return BundleCall(bundle_type, synthesize_arguments(records))


def _render_lines(call: BundleCall, owner: str, depth: int) -> List[str]:
    callee = f"{owner}.{call.bundle_type}" if owner else call.bundle_type
    if not call.arguments:
        return [f"{callee}()"]
    inner = _INDENT * (depth + 1)
    lines = [f"{callee}("]
    for keyword, value in call.arguments:
        if isinstance(value, BundleCall):
            nested = _render_lines(value, owner, depth + 1)
            lines.append(f"{inner}{keyword}={nested[0]}")
            lines.extend(nested[1:-1])
            if len(nested) > 1:
                lines.append(f"{nested[-1]},")
            else:
                lines[-1] += ","
        else:
            lines.append(f"{inner}{keyword}={value},")
    lines.append(f"{_INDENT * depth})")
    return lines


def render_call(call: BundleCall, owner: str = "cls", depth: int = 0) -> str:
    """Render ``call`` as Python source; nested lines are indented from ``depth``."""
    return "\n".join(_render_lines(call, owner, depth))
