from __future__ import annotations

from pathlib import Path
import textwrap

import libcst as cst

from splat.ingest.python_ingest import (
    annotation_arguments,
    find_decorator,
    ingest_source,
    iter_python_paths,
)
from splat.synthesis.model import AnnotationArgument, Constructor, Effect, Field, Method


def _source(text: str) -> str:
    return textwrap.dedent(text).strip() + "\n"


def test_ingest_finds_decorated_classes_with_qualnames() -> None:
    found = ingest_source(
        _source(
            """
            from splat import splat

            @splat
            class Person:
                class Arguments:
                    name: str

            class Plain:
                pass

            class Outer:
                @splat.splat(struct_name="Config")
                class Inner:
                    class Config:
                        speed: int
            """
        )
    )
    assert [item.qualname for item in found] == ["Person", "Outer.Inner"]
    assert found[0].column == 0
    assert found[1].column == 4
    assert found[1].arguments == (AnnotationArgument("struct_name", "Config"),)


def test_ingest_honors_custom_decorator_names() -> None:
    found = ingest_source(
        _source(
            """
            @flatten
            class Person:
                class Arguments:
                    name: str
            """
        ),
        decorator_names=("flatten",),
    )
    assert [item.qualname for item in found] == ["Person"]


def test_annotation_arguments_only_keeps_plain_literals() -> None:
    module = cst.parse_module(
        _source(
            """
            @splat(struct_name=NAME, property_name=f"cfg", other="x")
            class Sample:
                pass
            """
        )
    )
    node = module.body[0]
    decorator = find_decorator(node, ["splat"])
    assert decorator is not None
    assert annotation_arguments(decorator) == (
        AnnotationArgument("struct_name", None),
        AnnotationArgument("property_name", None),
        AnnotationArgument("other", "x"),
    )


def test_annotation_arguments_bare_decorator() -> None:
    module = cst.parse_module("@splat\nclass Sample:\n    pass\n")
    decorator = find_decorator(module.body[0], ["splat"])
    assert annotation_arguments(decorator) == ()


def test_class_model_members(parse_class) -> None:
    decl = parse_class(
        """
        class Donor:
            \"\"\"A donor.\"\"\"

            class Arguments:
                #: Full legal name.
                name: str
                age: int = 0  #: Age in years.
                email: str = ""
                \"\"\"Contact address.\"\"\"
                registry: ClassVar[list] = []

            def __init__(self, arguments: Arguments):
                if arguments.age < 0:
                    raise Donor.ValidationError("age")
                self.arguments = arguments
                self.cache, self.seen = {}, set()

            def describe(self) -> str:
                return self.arguments.name
        """
    )
    assert decl.name == "Donor"
    assert decl.docstring == "A donor."
    bundle = decl.nested_type("Arguments")
    assert bundle is not None
    fields = list(bundle.fields())
    assert [item.name for item in fields] == ["name", "age", "email"]
    assert fields[0].doc == "Full legal name."
    assert fields[1] == Field(
        name="age", annotation="int", doc="Age in years.", has_default=True, line=0
    )
    assert fields[2].doc == "Contact address."
    ctor = next(decl.constructors())
    assert ctor == Constructor(
        name="__init__",
        parameters=ctor.parameters,
        effect=Effect.raises("Donor.ValidationError"),
    )
    assert [(p.name, p.annotation) for p in ctor.parameters] == [("arguments", "Arguments")]
    assert decl.instance_attributes == ("arguments", "cache", "seen")
    assert Method("describe") in decl.members
    assert decl.member_names() >= {"Arguments", "__init__", "describe"}


def test_class_model_nested_function_raises_are_ignored(parse_class) -> None:
    decl = parse_class(
        """
        class Lazy:
            class Arguments:
                value: int

            def __init__(self, arguments: Arguments):
                def check():
                    raise ValueError("later")
                self.check = check
                self.arguments = arguments
        """
    )
    assert next(decl.constructors()).effect == Effect.none()


def test_class_model_flags_dataclass(parse_class) -> None:
    decl = parse_class(
        """
        @dataclasses.dataclass(frozen=True)
        class Point:
            class Arguments:
                x: int
            arguments: Arguments
        """
    )
    assert decl.is_dataclass
    assert [item.name for item in decl.fields()] == ["arguments"]


def test_iter_python_paths_prunes_excluded_dirs(tmp_path: Path) -> None:
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "b.py").write_text("", encoding="utf-8")
    (tmp_path / "pkg" / "a.py").write_text("", encoding="utf-8")
    (tmp_path / "pkg" / "notes.txt").write_text("", encoding="utf-8")
    (tmp_path / ".venv").mkdir()
    (tmp_path / ".venv" / "c.py").write_text("", encoding="utf-8")
    single = tmp_path / "single.py"
    single.write_text("", encoding="utf-8")
    paths = iter_python_paths([tmp_path / "pkg", tmp_path, single])
    assert paths[:2] == [tmp_path / "pkg" / "a.py", tmp_path / "pkg" / "b.py"]
    assert tmp_path / ".venv" / "c.py" not in paths
    assert paths[-1] == single


def test_class_model_marks_positional_only_parameters(parse_class) -> None:
    decl = parse_class(
        """
        class Person:
            class Arguments:
                name: str

            def __init__(self, arguments, /, label="", *, strict=False):
                self.arguments = arguments
        """
    )
    ctor = next(decl.constructors())
    assert [(p.name, p.positional_only) for p in ctor.parameters] == [
        ("arguments", True),
        ("label", False),
        ("strict", False),
    ]
