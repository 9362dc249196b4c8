from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

Position = Tuple[int, int]


@dataclass(frozen=True)
class TextEdit:
    path: str
    start: Position
    end: Position
    replacement: str


@dataclass(frozen=True)
class ConstructorReport:
    path: str
    container: str
    method_name: str
    parameters: List[str] = field(default_factory=list)
    effect: str = "none"
    discardable: bool = False
    status: str = "added"


@dataclass
class ExpansionPlan:
    edits: List[TextEdit] = field(default_factory=list)
    constructors: List[ConstructorReport] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def extend(self, other: ExpansionPlan) -> None:
        self.edits.extend(other.edits)
        self.constructors.extend(other.constructors)
        self.warnings.extend(other.warnings)
        self.errors.extend(other.errors)
