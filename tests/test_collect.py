from __future__ import annotations

import pytest

from splat.exceptions import DuplicateParameterName, UnresolvedBundleReference
from splat.synthesis.collect import (
    PropertyCollector,
    check_unique_names,
    collect_properties,
    has_empty_init,
)
from splat.synthesis.model import PathSegment

ARTICLE = """
class Article:
    class Arguments:
        title: str
        lid1: "Lid1.Arguments"
        lid2: "Article.Lid2.Arguments"

    class Lid1:
        class Arguments:
            flag: bool
            note: str = ""

    class Lid2:
        class Arguments:
            count: int

    arguments: Arguments
"""


def _bundle(container, name: str = "Arguments"):
    return container.nested_type(name)


def test_collect_flat_fields_in_declaration_order(parse_class) -> None:
    container = parse_class(
        """
        class Person:
            class Arguments:
                name: str
                age: int = 0
                is_alive: bool
        """
    )
    records = collect_properties(_bundle(container), container)
    assert [record.name for record in records] == ["name", "age", "is_alive"]
    assert [record.annotation for record in records] == ["str", "int", "bool"]
    assert all(record.path == () for record in records)


def test_collect_expands_nested_bundles_with_paths(parse_class) -> None:
    container = parse_class(ARTICLE)
    records = collect_properties(_bundle(container), container)
    assert [record.name for record in records] == ["title", "flag", "note", "count"]
    assert records[1].path == (PathSegment("lid1", "Lid1.Arguments"),)
    assert records[3].path == (PathSegment("lid2", "Lid2.Arguments"),)
    assert records[1].path_names() == ("lid1",)


def test_collect_skips_classvar_and_kw_only(parse_class) -> None:
    container = parse_class(
        """
        class Sample:
            class Arguments:
                registry: ClassVar[dict] = {}
                _: KW_ONLY
                value: int
        """
    )
    records = collect_properties(_bundle(container), container)
    assert [record.name for record in records] == ["value"]


def test_collect_strips_keyword_escape(parse_class) -> None:
    container = parse_class(
        """
        class Tag:
            class Arguments:
                class_: str
                id_: int
        """
    )
    records = collect_properties(_bundle(container), container)
    assert [record.name for record in records] == ["class", "id_"]
    assert [record.parameter_name for record in records] == ["class_", "id_"]


def test_collect_empty_init_yields_no_records(parse_class) -> None:
    container = parse_class(
        """
        class Token:
            class Arguments:
                secret: str = "x"

                def __init__(self):
                    self.secret = "y"
        """
    )
    bundle = _bundle(container)
    assert has_empty_init(bundle)
    assert collect_properties(bundle, container) == []


def test_collect_unresolved_reference_warns_and_keeps_leaf(parse_class) -> None:
    container = parse_class(
        """
        class Wrapper:
            class Arguments:
                inner: "Missing.Arguments"
        """
    )
    warnings: list[str] = []
    records = collect_properties(_bundle(container), container, warnings=warnings)
    assert [record.name for record in records] == ["inner"]
    assert records[0].path == ()
    assert len(warnings) == 1
    assert "Missing.Arguments" in warnings[0]


def test_collect_unresolved_reference_strict_raises(parse_class) -> None:
    container = parse_class(
        """
        class Wrapper:
            class Arguments:
                inner: "Missing.Arguments"
        """
    )
    with pytest.raises(UnresolvedBundleReference) as excinfo:
        collect_properties(_bundle(container), container, strict_references=True)
    assert excinfo.value.field_name == "inner"


def test_collect_cycle_falls_back_to_leaf(parse_class) -> None:
    container = parse_class(
        """
        class Tree:
            class Arguments:
                node: "Node.Arguments"

            class Node:
                class Arguments:
                    label: str
                    child: "Node.Arguments"
        """
    )
    collector = PropertyCollector()
    records = collector.collect(_bundle(container), container)
    assert [record.name for record in records] == ["label", "child"]
    assert records[1].path == (PathSegment("node", "Node.Arguments"),)
    assert any("re-enters Node.Arguments" in warning for warning in collector.warnings)


def test_collect_custom_struct_name(parse_class) -> None:
    container = parse_class(
        """
        class Machine:
            class Config:
                speed: int
                motor: "Motor.Config"

            class Motor:
                class Config:
                    rpm: int
        """
    )
    records = collect_properties(_bundle(container, "Config"), container, "Config")
    assert [record.name for record in records] == ["speed", "rpm"]
    assert records[1].path[0].bundle_type == "Motor.Config"


def test_check_unique_names_reports_all_paths(parse_class) -> None:
    container = parse_class(
        """
        class Page:
            class Arguments:
                title: str
                header: "Header.Arguments"

            class Header:
                class Arguments:
                    title: str
        """
    )
    records = collect_properties(_bundle(container), container)
    with pytest.raises(DuplicateParameterName) as excinfo:
        check_unique_names(records)
    assert excinfo.value.name == "title"
    assert excinfo.value.paths == ("title", "header.title")
