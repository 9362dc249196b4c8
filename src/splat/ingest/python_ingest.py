"""libcst front end: decorated classes to the read-only declaration model."""

from __future__ import annotations

import inspect
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

import libcst as cst
from libcst.metadata import CodeRange, PositionProvider

from splat.synthesis.model import (
    AnnotationArgument,
    ClassDecl,
    Constructor,
    Effect,
    Field,
    Member,
    Method,
    Parameter,
    strip_quotes,
)

DEFAULT_EXCLUDE_DIRS = frozenset(
    {".git", ".hg", ".tox", ".venv", "venv", "__pycache__", "build", "dist", "node_modules"}
)
_CONSTRUCTOR_NAMES = frozenset({"__init__", "__post_init__"})
_RECEIVER_NAMES = frozenset({"self", "cls"})
_NON_FIELD_ANNOTATIONS = frozenset({"KW_ONLY", "dataclasses.KW_ONLY"})


@dataclass(frozen=True)
class DecoratedClass:
    node: cst.ClassDef
    decl: ClassDecl
    arguments: tuple[AnnotationArgument, ...]
    qualname: str
    line: int = 0
    column: int = 0


def iter_python_paths(
    paths: Iterable[str | Path],
    *,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> list[Path]:
    """Expand input paths to python files, pruning ignored directories early."""
    excluded = set(exclude_dirs)
    out: list[Path] = []
    for p in paths:
        path = Path(p)
        if path.is_dir():
            for root, dirnames, filenames in os.walk(path, topdown=True):
                dirnames[:] = sorted(d for d in dirnames if d not in excluded)
                for filename in sorted(filenames):
                    if filename.endswith(".py"):
                        out.append(Path(root) / filename)
        elif path.suffix == ".py":
            out.append(path)
    return out


def dotted_name(expr: cst.BaseExpression | None) -> Optional[str]:
    if isinstance(expr, cst.Name):
        return expr.value
    if isinstance(expr, cst.Attribute):
        base = dotted_name(expr.value)
        if base is None:
            return None
        return f"{base}.{expr.attr.value}"
    return None


def _decorator_target(decorator: cst.Decorator) -> Optional[str]:
    expr = decorator.decorator
    if isinstance(expr, cst.Call):
        expr = expr.func
    return dotted_name(expr)


def find_decorator(
    node: cst.ClassDef, decorator_names: Iterable[str]
) -> Optional[cst.Decorator]:
    wanted = set(decorator_names)
    for decorator in node.decorators:
        target = _decorator_target(decorator)
        if target is None:
            continue
        if target in wanted or target.rsplit(".", 1)[-1] in wanted:
            return decorator
    return None


def _literal(expr: cst.BaseExpression) -> Optional[str]:
    if not isinstance(expr, cst.SimpleString):
        return None
    value = expr.evaluated_value
    return value if isinstance(value, str) else None


def annotation_arguments(decorator: cst.Decorator) -> tuple[AnnotationArgument, ...]:
    """Decorator call arguments as (label, literal) pairs.

    Only a single plain string literal yields a value; f-strings, implicit
    concatenation and any other expression are recorded with ``value=None``.
    """
    expr = decorator.decorator
    if not isinstance(expr, cst.Call):
        return ()
    return tuple(
        AnnotationArgument(
            label=arg.keyword.value if arg.keyword is not None else None,
            value=_literal(arg.value),
        )
        for arg in expr.args
    )


def _string_value(expr: cst.BaseExpression) -> Optional[str]:
    if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString)):
        value = expr.evaluated_value
        if isinstance(value, str):
            return inspect.cleandoc(value)
    return None


def _statements(node: cst.ClassDef | cst.FunctionDef) -> Sequence[cst.CSTNode]:
    body = node.body
    if isinstance(body, cst.IndentedBlock):
        return body.body
    return [body]


def _expression_docstring(stmt: cst.CSTNode) -> Optional[str]:
    if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
        return None
    expr = stmt.body[0]
    if not isinstance(expr, cst.Expr):
        return None
    return _string_value(expr.value)


def _comment_doc(stmt: cst.SimpleStatementLine) -> Optional[str]:
    lines: List[str] = []
    for empty in stmt.leading_lines:
        comment = empty.comment
        if comment is None or not comment.value.startswith("#:"):
            lines = []
            continue
        lines.append(comment.value[2:].strip())
    trailing = stmt.trailing_whitespace.comment
    if not lines and trailing is not None and trailing.value.startswith("#:"):
        lines.append(trailing.value[2:].strip())
    return "\n".join(lines) if lines else None


class _BodyScanner(cst.CSTVisitor):
    """Raise statements and ``self.<attr>`` writes of one function body."""

    def __init__(self) -> None:
        self.raised: list[Optional[str]] = []
        self.attributes: list[str] = []

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        return False

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        return False

    def visit_Lambda(self, node: cst.Lambda) -> bool:
        return False

    def visit_Raise(self, node: cst.Raise) -> None:
        exc = node.exc
        if isinstance(exc, cst.Call):
            exc = exc.func
        self.raised.append(_raised_type(dotted_name(exc) if exc is not None else None))

    def visit_AssignTarget(self, node: cst.AssignTarget) -> None:
        self._record_target(node.target)

    def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
        self._record_target(node.target)

    def visit_AugAssign(self, node: cst.AugAssign) -> None:
        self._record_target(node.target)

    def _record_target(self, target: cst.BaseExpression) -> None:
        if isinstance(target, (cst.Tuple, cst.List)):
            for element in target.elements:
                self._record_target(element.value)
            return
        if (
            isinstance(target, cst.Attribute)
            and isinstance(target.value, cst.Name)
            and target.value.value == "self"
        ):
            name = target.attr.value
            if name not in self.attributes:
                self.attributes.append(name)


def _raised_type(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    parts = name.split(".")
    while len(parts) > 1 and parts[0] in _RECEIVER_NAMES | {"__class__"}:
        parts = parts[1:]
    if not parts[-1][:1].isupper():
        return None
    return ".".join(parts)


def _effect_of(raised: Sequence[Optional[str]]) -> Effect:
    if not raised:
        return Effect.none()
    kinds = set(raised)
    if None in kinds or len(kinds) > 1:
        return Effect.raises()
    return Effect.raises(raised[0])


def _parameters(node: cst.FunctionDef, module: cst.Module) -> tuple[Parameter, ...]:
    params = node.params
    ordered = [
        *((param, True) for param in params.posonly_params),
        *((param, False) for param in params.params),
        *((param, False) for param in params.kwonly_params),
    ]
    if ordered and ordered[0][0].name.value in _RECEIVER_NAMES:
        ordered = ordered[1:]
    return tuple(
        Parameter(
            name=param.name.value,
            annotation=(
                module.code_for_node(param.annotation.annotation)
                if param.annotation is not None
                else ""
            ),
            positional_only=positional_only,
        )
        for param, positional_only in ordered
    )


def _field(
    assign: cst.AnnAssign,
    stmt: cst.SimpleStatementLine,
    following: Optional[cst.CSTNode],
    module: cst.Module,
    line: int,
) -> Optional[Field]:
    if not isinstance(assign.target, cst.Name):
        return None
    annotation = module.code_for_node(assign.annotation.annotation)
    bare = strip_quotes(annotation)
    if bare in _NON_FIELD_ANNOTATIONS:
        return None
    doc = _comment_doc(stmt)
    if doc is None and following is not None:
        doc = _expression_docstring(following)
    return Field(
        name=assign.target.value,
        annotation=annotation,
        doc=doc,
        has_default=assign.value is not None,
        is_classvar=bare.split("[", 1)[0] in {"ClassVar", "typing.ClassVar"},
        line=line,
    )


def _is_dataclass(node: cst.ClassDef) -> bool:
    for decorator in node.decorators:
        target = _decorator_target(decorator)
        if target is not None and target.rsplit(".", 1)[-1] == "dataclass":
            return True
    return False


def class_from_cst(
    node: cst.ClassDef,
    module: cst.Module,
    positions: Mapping[cst.CSTNode, CodeRange] | None = None,
) -> ClassDecl:
    """Build the immutable declaration model for ``node`` and its nested classes."""
    positions = positions or {}

    def _line(target: cst.CSTNode) -> int:
        span = positions.get(target)
        return span.start.line if span is not None else 0

    statements = list(_statements(node))
    members: List[Member] = []
    attributes: List[str] = []
    for index, stmt in enumerate(statements):
        following = statements[index + 1] if index + 1 < len(statements) else None
        if isinstance(stmt, cst.ClassDef):
            members.append(class_from_cst(stmt, module, positions))
        elif isinstance(stmt, cst.FunctionDef):
            name = stmt.name.value
            if name not in _CONSTRUCTOR_NAMES:
                members.append(Method(name))
                continue
            scanner = _BodyScanner()
            stmt.body.visit(scanner)
            attributes.extend(attr for attr in scanner.attributes if attr not in attributes)
            members.append(
                Constructor(
                    name=name,
                    parameters=_parameters(stmt, module),
                    effect=_effect_of(scanner.raised),
                    docstring=stmt.get_docstring(),
                )
            )
        elif isinstance(stmt, cst.SimpleStatementLine):
            for small in stmt.body:
                if isinstance(small, cst.AnnAssign):
                    stored = _field(small, stmt, following, module, _line(stmt))
                    if stored is not None:
                        members.append(stored)
    return ClassDecl(
        name=node.name.value,
        members=tuple(members),
        docstring=node.get_docstring(),
        is_dataclass=_is_dataclass(node),
        instance_attributes=tuple(attributes),
        line=_line(node),
    )


class _DecoratedClassCollector(cst.CSTVisitor):
    def __init__(
        self,
        module: cst.Module,
        decorator_names: Iterable[str],
        positions: Mapping[cst.CSTNode, CodeRange],
    ) -> None:
        self.module = module
        self.decorator_names = tuple(decorator_names)
        self.positions = positions
        self.found: list[DecoratedClass] = []
        self._stack: list[str] = []

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        self._stack.append(node.name.value)
        decorator = find_decorator(node, self.decorator_names)
        if decorator is not None:
            span = self.positions.get(node)
            self.found.append(
                DecoratedClass(
                    node=node,
                    decl=class_from_cst(node, self.module, self.positions),
                    arguments=annotation_arguments(decorator),
                    qualname=".".join(self._stack),
                    line=span.start.line if span is not None else 0,
                    column=span.start.column if span is not None else 0,
                )
            )
        return True

    def leave_ClassDef(self, original_node: cst.ClassDef) -> None:
        if self._stack:
            self._stack.pop()

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        self._stack.append(node.name.value)
        return True

    def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
        if self._stack:
            self._stack.pop()


def collect_decorated_classes(
    module: cst.Module,
    decorator_names: Iterable[str] = ("splat",),
    positions: Mapping[cst.CSTNode, CodeRange] | None = None,
) -> list[DecoratedClass]:
    collector = _DecoratedClassCollector(module, decorator_names, positions or {})
    module.visit(collector)
    return collector.found


def ingest_source(
    source: str,
    decorator_names: Iterable[str] = ("splat",),
) -> list[DecoratedClass]:
    wrapper = cst.MetadataWrapper(cst.parse_module(source))
    positions = wrapper.resolve(PositionProvider)
    return collect_decorated_classes(wrapper.module, decorator_names, positions)
