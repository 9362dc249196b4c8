from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from splat.synthesis.arguments import render_call, synthesize_call
from splat.synthesis.docs import build_docstring
from splat.synthesis.model import (
    ClassDecl,
    Effect,
    GeneratedConstructor,
    Parameter,
    PropertyRecord,
    SplatConfig,
)

_INDENT = "    "
_RECEIVER_CANDIDATES = ("cls", "klass")


def is_witness(container: ClassDecl, property_name: str) -> bool:
    """True when the container stores nothing besides the bundle field."""
    names = {stored.name for stored in container.fields()}
    names.update(container.instance_attributes)
    names.discard(property_name)
    return not names


def receiver_name(parameter_names: Iterable[str]) -> str:
    """First receiver name that no flattened parameter already uses."""
    taken = set(parameter_names)
    for candidate in _RECEIVER_CANDIDATES:
        if candidate not in taken:
            return candidate
    suffix = 1
    while f"cls{suffix}" in taken:
        suffix += 1
    return f"cls{suffix}"


def _bundle_init_doc(bundle: ClassDecl) -> Optional[str]:
    for ctor in bundle.constructors():
        if ctor.name == "__init__" and ctor.docstring:
            return ctor.docstring
    # Dataclass bundles document their fields on the class itself.
    return bundle.docstring


def emit_constructor(
    *,
    container: ClassDecl,
    bundle: ClassDecl,
    config: SplatConfig,
    method_name: str,
    records: Sequence[PropertyRecord],
    effect: Effect,
    forward_keyword: Optional[str],
    raising_doc: Optional[str] = None,
) -> GeneratedConstructor:
    discardable = is_witness(container, config.property_name)
    parameters = tuple(
        Parameter(name=record.parameter_name, annotation=record.annotation)
        for record in records
    )
    docstring = build_docstring(
        container=container.name,
        struct_name=config.struct_name,
        property_name=config.property_name,
        records=records,
        effect=effect,
        bundle_init_doc=_bundle_init_doc(bundle),
        raising_doc=raising_doc,
        discardable=discardable,
    )
    return GeneratedConstructor(
        container=container.name,
        method_name=method_name,
        bundle_type=bundle.name,
        forward_keyword=forward_keyword,
        call=synthesize_call(records, bundle.name),
        parameters=parameters,
        effect=effect,
        docstring=docstring,
        discardable=discardable,
        receiver=receiver_name(parameter.name for parameter in parameters),
    )


def _escape_docstring(text: str) -> str:
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"') and not text.endswith('\\"'):
        text = text[:-1] + '\\"'
    return text


def _docstring_lines(text: str, base_indent: str) -> List[str]:
    body = _escape_docstring(text).splitlines() or [""]
    if len(body) == 1:
        return [f'{_INDENT}"""{body[0]}"""']
    # Continuation lines live inside the literal, so they carry the absolute
    # indentation of the class the method is inserted into.
    inner = base_indent + _INDENT
    lines = [f'{_INDENT}"""{body[0]}']
    lines.extend(f"{inner}{line}" if line else "" for line in body[1:])
    lines.append(f'{inner}"""')
    return lines


def _signature_lines(constructor: GeneratedConstructor) -> List[str]:
    returns = f' -> "{constructor.container}":'
    if not constructor.parameters:
        return [f"def {constructor.method_name}({constructor.receiver}){returns}"]
    lines = [
        f"def {constructor.method_name}(",
        f"{_INDENT}{constructor.receiver},",
        f"{_INDENT}*,",
    ]
    for parameter in constructor.parameters:
        if parameter.annotation:
            lines.append(f"{_INDENT}{parameter.name}: {parameter.annotation},")
        else:
            lines.append(f"{_INDENT}{parameter.name},")
    lines.append(f"){returns}")
    return lines


def render_constructor(constructor: GeneratedConstructor, base_indent: str = "") -> str:
    """Render the generated classmethod at column zero.

    ``base_indent`` is the absolute indentation of the class body that will
    receive the method; the caller re-indents the code itself.
    """
    receiver = constructor.receiver
    call = render_call(constructor.call, owner=receiver, depth=2)
    lines = ["@classmethod"]
    lines.extend(_signature_lines(constructor))
    lines.extend(_docstring_lines(constructor.docstring, base_indent))
    lines.append(f"{_INDENT}return {receiver}(")
    if constructor.forward_keyword is None:
        lines.append(f"{_INDENT * 2}{call},")
    else:
        lines.append(f"{_INDENT * 2}{constructor.forward_keyword}={call},")
    lines.append(f"{_INDENT})")
    return "\n".join(lines) + "\n"
