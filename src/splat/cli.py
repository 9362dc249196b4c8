from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import List, Optional
import json
import logging

import typer

from splat.config import apply_overrides, expansion_settings, splat_config, splat_defaults
from splat.ingest.python_ingest import iter_python_paths
from splat.refactor.engine import ExpansionEngine
from splat.refactor.model import ExpansionPlan
from splat.schema import ExpansionRequest, ExpansionResponseDTO

app = typer.Typer(add_completion=False)

_STDOUT_ALIAS = "-"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_request(input_path: Optional[Path]) -> dict[str, object]:
    if input_path is None:
        return {}
    try:
        loaded = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON payload: {exc}") from exc
    if not isinstance(loaded, dict):
        raise typer.BadParameter("Expansion payload must be a JSON object.")
    return ExpansionRequest.model_validate(loaded).model_dump()


def build_engine(
    *,
    root: Path,
    config_path: Optional[Path],
    payload: dict[str, object],
) -> ExpansionEngine:
    section = apply_overrides(splat_defaults(root=root, config_path=config_path), payload)
    return ExpansionEngine(
        project_root=root,
        settings=expansion_settings(section),
        defaults=splat_config(section),
    )


def run_expansion(
    *,
    paths: List[Path],
    input_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
    struct_name: Optional[str] = None,
    property_name: Optional[str] = None,
    method_name: Optional[str] = None,
    strict_references: Optional[bool] = None,
    root: Optional[Path] = None,
) -> ExpansionPlan:
    request = _load_request(input_path)
    request_paths = [Path(p) for p in request.pop("paths", None) or []]
    payload = apply_overrides(
        request,
        {
            "struct_name": struct_name,
            "property_name": property_name,
            "method_name": method_name,
            "strict_references": strict_references,
        },
    )
    root = root or Path.cwd()
    engine = build_engine(root=root, config_path=config_path, payload=payload)
    files = iter_python_paths([*paths, *request_paths])
    return engine.plan_paths(files)


def _emit_json(plan: ExpansionPlan, output_path: Optional[Path]) -> None:
    normalized = ExpansionResponseDTO.model_validate(asdict(plan)).model_dump()
    output = json.dumps(normalized, indent=2, sort_keys=True)
    if output_path is None or str(output_path) == _STDOUT_ALIAS:
        typer.echo(output)
    else:
        output_path.write_text(output + "\n", encoding="utf-8")


def _emit_problems(plan: ExpansionPlan) -> None:
    for warning in plan.warnings:
        typer.echo(f"warning: {warning}", err=True)
    for error in plan.errors:
        typer.echo(f"error: {error}", err=True)


@app.command("expand")
def expand(
    paths: List[Path] = typer.Argument(None, help="Python files or directories."),
    input_path: Optional[Path] = typer.Option(
        None, "--input", help="JSON payload describing the expansion request."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to splat.toml (default: ./splat.toml)."
    ),
    struct_name: Optional[str] = typer.Option(None, "--struct-name"),
    property_name: Optional[str] = typer.Option(None, "--property-name"),
    method_name: Optional[str] = typer.Option(None, "--method-name"),
    strict_references: bool = typer.Option(
        False,
        "--strict-references",
        help="Fail on bundle-like annotations that do not resolve.",
    ),
    write: bool = typer.Option(False, "--write", help="Rewrite files in place."),
    as_json: bool = typer.Option(False, "--json", help="Emit the plan as JSON."),
    output_path: Optional[Path] = typer.Option(
        None, "--output", help="Write the JSON plan to this path ('-' for stdout)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Append flattened constructors to every @splat class under PATHS."""
    _configure_logging(verbose)
    plan = run_expansion(
        paths=list(paths or []),
        input_path=input_path,
        config_path=config_path,
        struct_name=struct_name,
        property_name=property_name,
        method_name=method_name,
        strict_references=True if strict_references else None,
    )
    if as_json or output_path is not None:
        _emit_json(plan, output_path)
    elif write:
        for edit in plan.edits:
            Path(edit.path).write_text(edit.replacement, encoding="utf-8")
            typer.echo(f"expanded {edit.path}")
    else:
        for edit in plan.edits:
            typer.echo(edit.replacement, nl=False)
    _emit_problems(plan)
    if plan.errors:
        raise typer.Exit(code=1)


@app.command("check")
def check(
    paths: List[Path] = typer.Argument(None, help="Python files or directories."),
    input_path: Optional[Path] = typer.Option(
        None, "--input", help="JSON payload describing the expansion request."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to splat.toml (default: ./splat.toml)."
    ),
    struct_name: Optional[str] = typer.Option(None, "--struct-name"),
    property_name: Optional[str] = typer.Option(None, "--property-name"),
    method_name: Optional[str] = typer.Option(None, "--method-name"),
    strict_references: bool = typer.Option(
        False,
        "--strict-references",
        help="Fail on bundle-like annotations that do not resolve.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fail when any @splat class is missing its generated constructor."""
    _configure_logging(verbose)
    plan = run_expansion(
        paths=list(paths or []),
        input_path=input_path,
        config_path=config_path,
        struct_name=struct_name,
        property_name=property_name,
        method_name=method_name,
        strict_references=True if strict_references else None,
    )
    for edit in plan.edits:
        typer.echo(f"would expand {edit.path}")
    _emit_problems(plan)
    if plan.errors or plan.edits:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
