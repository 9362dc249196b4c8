"""Docstring synthesis for generated constructors.

Docstrings are read in Google style. The bundle ``__init__`` docstring is
split into a summary (everything before the first section header) and an
``Args:`` map; continuation lines indented below an entry belong to it. A
malformed docstring never fails an expansion, it only yields less specific
text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import re

from splat.synthesis.model import Effect, PropertyRecord

PARAMETER_MARKERS = frozenset({"Args:", "Arguments:", "Parameters:", "Attributes:"})
RAISES_MARKERS = frozenset({"Raises:"})
DEFAULT_RAISES_TEXT = "If initialization fails."

_SECTION_RE = re.compile(r"^[A-Z][A-Za-z ]*:\s*$")
_PARAM_ENTRY_RE = re.compile(
    r"^(?P<indent>\s+)(?P<name>\*{0,2}[A-Za-z_][A-Za-z0-9_]*)\s*(?:\([^)]*\))?\s*:\s*(?P<text>.*)$"
)
_RAISES_ENTRY_RE = re.compile(
    r"^(?P<indent>\s+)(?P<name>[A-Za-z_][A-Za-z0-9_.]*)\s*:\s*(?P<text>.*)$"
)


@dataclass
class DocSections:
    summary: List[str] = field(default_factory=list)
    parameters: Dict[str, List[str]] = field(default_factory=dict)
    raises: List[Tuple[str, List[str]]] = field(default_factory=list)


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def parse_docstring(text: Optional[str]) -> DocSections:
    sections = DocSections()
    if not text:
        return sections
    state = "summary"
    entry_indent: Optional[int] = None
    current: Optional[List[str]] = None
    for line in text.splitlines():
        stripped = line.strip()
        if _SECTION_RE.match(line):
            if stripped in PARAMETER_MARKERS:
                state = "parameters"
            elif stripped in RAISES_MARKERS:
                state = "raises"
            else:
                state = "other"
            entry_indent = None
            current = None
            continue
        if state == "summary":
            sections.summary.append(line.rstrip())
            continue
        if state == "other" or not stripped:
            continue
        pattern = _PARAM_ENTRY_RE if state == "parameters" else _RAISES_ENTRY_RE
        match = pattern.match(line)
        indent = _indent_of(line)
        if match and (entry_indent is None or indent <= entry_indent):
            entry_indent = indent
            current = [match.group("text").strip()]
            name = match.group("name").lstrip("*")
            if state == "parameters":
                sections.parameters.setdefault(name, current)
            else:
                sections.raises.append((name, current))
        elif current is not None:
            current.append(stripped)
    while sections.summary and not sections.summary[-1]:
        sections.summary.pop()
    return sections


def parameter_doc(record: PropertyRecord, sections: DocSections) -> List[str]:
    """Lines documenting ``record``: docstring entry, then field doc, then type."""
    for key in (record.name, record.parameter_name):
        lines = sections.parameters.get(key)
        if lines and any(lines):
            return [line for line in lines if line]
    if record.doc:
        lines = [line.strip() for line in record.doc.splitlines() if line.strip()]
        if lines:
            return lines
    return [record.annotation or "object"]


def raises_doc(effect: Effect, docstring: Optional[str]) -> Tuple[str, List[str]]:
    label = effect.error_type or "Exception"
    entries = parse_docstring(docstring).raises
    short = label.rsplit(".", 1)[-1]
    for name, lines in entries:
        if name.rsplit(".", 1)[-1] == short and any(lines):
            return label, [line for line in lines if line]
    for _name, lines in entries:
        if any(lines):
            return label, [line for line in lines if line]
    return label, [DEFAULT_RAISES_TEXT]


def _entry(name: str, lines: Sequence[str]) -> List[str]:
    rendered = [f"    {name}: {lines[0]}"]
    rendered.extend(f"        {line}" for line in lines[1:])
    return rendered


def build_docstring(
    *,
    container: str,
    struct_name: str,
    property_name: str,
    records: Sequence[PropertyRecord],
    effect: Effect,
    bundle_init_doc: Optional[str] = None,
    raising_doc: Optional[str] = None,
    discardable: bool = False,
) -> str:
    sections = parse_docstring(bundle_init_doc)
    lines: List[str] = []
    if not records:
        lines.append(f"Build ``{container}`` from a default ``{struct_name}``.")
    elif sections.summary:
        lines.extend(sections.summary)
    else:
        lines.append(f"Build ``{container}`` from ``{struct_name}`` fields passed individually.")
        lines.append("")
        lines.append(
            f"Callers pass each field directly instead of building ``{struct_name}`` first."
        )
    if discardable:
        lines.append("")
        lines.append(
            f"The result holds no state beyond ``{property_name}``; it may be discarded "
            "when only validation is needed."
        )
    if records:
        lines.append("")
        lines.append("Args:")
        for record in records:
            lines.extend(_entry(record.parameter_name, parameter_doc(record, sections)))
    if effect.raising:
        label, text = raises_doc(effect, raising_doc)
        lines.append("")
        lines.append("Raises:")
        lines.extend(_entry(label, text))
    if not discardable:
        lines.append("")
        lines.append("Returns:")
        lines.append(f"    A new ``{container}``.")
    return "\n".join(lines)
