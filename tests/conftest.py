from __future__ import annotations

import sys
import textwrap
import types
from pathlib import Path
from typing import Callable

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))


import libcst as cst
import pytest

from splat.ingest.python_ingest import class_from_cst
from splat.refactor.engine import expand_source
from splat.synthesis.model import ClassDecl


def _dedent(source: str) -> str:
    return textwrap.dedent(source).strip() + "\n"


@pytest.fixture
def parse_class() -> Callable[[str], ClassDecl]:
    """Model of the first top-level class in ``source``."""

    def _parse(source: str) -> ClassDecl:
        module = cst.parse_module(_dedent(source))
        for stmt in module.body:
            if isinstance(stmt, cst.ClassDef):
                return class_from_cst(stmt, module)
        raise AssertionError("source defines no class")

    return _parse


@pytest.fixture
def load_expanded(monkeypatch: pytest.MonkeyPatch) -> Callable[[str], dict[str, object]]:
    """Expand ``source`` and execute it as a module, returning its namespace.

    The module is registered in ``sys.modules`` so dataclasses can resolve
    string annotations, and compiled without this file's future imports.
    """

    def _load(source: str) -> dict[str, object]:
        code = expand_source(_dedent(source))
        module = types.ModuleType("splat_fixture")
        monkeypatch.setitem(sys.modules, module.__name__, module)
        exec(compile(code, "<expanded>", "exec", dont_inherit=True), module.__dict__)
        return module.__dict__

    return _load

