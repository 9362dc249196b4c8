from splat.refactor.engine import ExpansionEngine, expand_source
from splat.refactor.model import ConstructorReport, ExpansionPlan, TextEdit

__all__ = [
    "ConstructorReport",
    "ExpansionEngine",
    "ExpansionPlan",
    "TextEdit",
    "expand_source",
]
