from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional
import logging

import libcst as cst
from libcst.metadata import PositionProvider

from splat.exceptions import GeneratedNameConflict, SplatError
from splat.ingest.python_ingest import DecoratedClass, collect_decorated_classes
from splat.refactor.model import ConstructorReport, ExpansionPlan, TextEdit
from splat.synthesis.emit import render_constructor
from splat.synthesis.expander import Expander
from splat.synthesis.model import ExpansionSettings, GeneratedConstructor, SplatConfig

logger = logging.getLogger(__name__)


class ExpansionEngine:
    """Append the flattened convenience constructor to every decorated class.

    The engine never rewrites existing members: a class that already holds an
    identical generated method is left alone, and any other member under the
    generated name is reported as a conflict.
    """

    def __init__(
        self,
        project_root: Path | None = None,
        settings: ExpansionSettings | None = None,
        defaults: SplatConfig | None = None,
    ) -> None:
        self.project_root = project_root
        self.settings = settings or ExpansionSettings()
        self.expander = Expander(settings=self.settings, defaults=defaults or SplatConfig())

    def plan_paths(self, paths: Iterable[Path]) -> ExpansionPlan:
        plan = ExpansionPlan()
        for path in paths:
            plan.extend(self.plan_file(path))
        return plan

    def plan_file(self, path: Path) -> ExpansionPlan:
        if self.project_root and not path.is_absolute():
            path = self.project_root / path
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            return ExpansionPlan(errors=[f"Failed to read {path}: {exc}"])
        return self.plan_source(source, path=str(path))

    def plan_source(self, source: str, path: str = "<string>") -> ExpansionPlan:
        try:
            wrapper = cst.MetadataWrapper(cst.parse_module(source))
        except cst.ParserSyntaxError as exc:
            return ExpansionPlan(errors=[f"LibCST parse failed for {path}: {exc}"])
        module = wrapper.module
        positions = wrapper.resolve(PositionProvider)
        plan = ExpansionPlan()
        additions: Dict[cst.ClassDef, cst.BaseStatement] = {}
        for target in collect_decorated_classes(
            module, self.settings.decorator_names, positions
        ):
            site = f"{path}:{target.line}: {target.qualname}"
            try:
                result = self.expander.expand(target.decl, target.arguments)
                rendered = render_constructor(
                    result.constructor, base_indent=_body_indent(module, target)
                )
                generated = cst.parse_statement(rendered, config=module.config_for_parsing)
                status = self._placement(target, generated)
            except SplatError as exc:
                logger.debug("expansion failed at %s: %s", site, exc.diagnostic)
                plan.errors.append(f"{site}: {exc.diagnostic}")
                continue
            except cst.ParserSyntaxError as exc:
                plan.errors.append(f"{site}: generated code does not parse: {exc}")
                continue
            plan.warnings.extend(f"{site}: {warning}" for warning in result.warnings)
            plan.constructors.append(_report(path, target, result.constructor, status))
            if status == "added":
                additions[target.node] = generated
        if not additions:
            return plan
        new_source = module.visit(_AppendMemberTransformer(additions)).code
        end_line = len(source.splitlines())
        plan.edits.append(
            TextEdit(path=path, start=(0, 0), end=(end_line, 0), replacement=new_source)
        )
        return plan

    def _placement(self, target: DecoratedClass, generated: cst.BaseStatement) -> str:
        method_name = self.settings.method_name
        existing = _existing_member(target.node, method_name)
        if existing is None:
            return "added"
        if isinstance(existing, cst.FunctionDef) and _same_code(existing, generated):
            return "unchanged"
        raise GeneratedNameConflict(target.decl.name, method_name)


def _body_indent(module: cst.Module, target: DecoratedClass) -> str:
    body = target.node.body
    indent = body.indent if isinstance(body, cst.IndentedBlock) else None
    return " " * target.column + (indent if indent is not None else module.default_indent)


def _existing_member(node: cst.ClassDef, name: str) -> Optional[cst.CSTNode]:
    if not isinstance(node.body, cst.IndentedBlock):
        return None
    for stmt in node.body.body:
        if isinstance(stmt, (cst.FunctionDef, cst.ClassDef)) and stmt.name.value == name:
            return stmt
        if isinstance(stmt, cst.SimpleStatementLine):
            for small in stmt.body:
                if isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
                    if small.target.value == name:
                        return stmt
                if isinstance(small, cst.Assign):
                    for assign_target in small.targets:
                        target = assign_target.target
                        if isinstance(target, cst.Name) and target.value == name:
                            return stmt
    return None


def _code(node: cst.CSTNode) -> str:
    return cst.Module(body=[]).code_for_node(node).strip()


def _same_code(existing: cst.FunctionDef, generated: cst.BaseStatement) -> bool:
    if not isinstance(generated, cst.FunctionDef):
        return False
    return _code(existing.with_changes(leading_lines=())) == _code(
        generated.with_changes(leading_lines=())
    )


def _report(
    path: str,
    target: DecoratedClass,
    constructor: GeneratedConstructor,
    status: str,
) -> ConstructorReport:
    return ConstructorReport(
        path=path,
        container=target.qualname,
        method_name=constructor.method_name,
        parameters=[parameter.name for parameter in constructor.parameters],
        effect=constructor.effect.describe(),
        discardable=constructor.discardable,
        status=status,
    )


class _AppendMemberTransformer(cst.CSTTransformer):
    def __init__(self, additions: Dict[cst.ClassDef, cst.BaseStatement]) -> None:
        self.additions = additions

    def leave_ClassDef(
        self, original_node: cst.ClassDef, updated_node: cst.ClassDef
    ) -> cst.CSTNode:
        generated = self.additions.get(original_node)
        if generated is None or not isinstance(updated_node.body, cst.IndentedBlock):
            return updated_node
        member = generated.with_changes(leading_lines=[cst.EmptyLine(indent=False)])
        body = updated_node.body.with_changes(body=[*updated_node.body.body, member])
        return updated_node.with_changes(body=body)


def expand_source(
    source: str,
    *,
    settings: ExpansionSettings | None = None,
    defaults: SplatConfig | None = None,
) -> str:
    """Return ``source`` with generated constructors appended.

    Raises ``ValueError`` listing every failed class when any expansion fails.
    """
    plan = ExpansionEngine(settings=settings, defaults=defaults).plan_source(source)
    if plan.errors:
        raise ValueError("\n".join(plan.errors))
    if not plan.edits:
        return source
    return plan.edits[0].replacement
