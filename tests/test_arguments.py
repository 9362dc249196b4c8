from __future__ import annotations

import textwrap

from splat.synthesis.arguments import render_call, synthesize_arguments, synthesize_call
from splat.synthesis.model import BundleCall, PathSegment, PropertyRecord

LID1 = PathSegment("lid1", "Lid1.Arguments")
LID2 = PathSegment("lid2", "Lid2.Arguments")


def _record(name: str, *path: PathSegment) -> PropertyRecord:
    return PropertyRecord(name=name, annotation="int", path=tuple(path), source_name=name)


def test_flat_records_forward_in_order() -> None:
    arguments = synthesize_arguments([_record("name"), _record("age")])
    assert arguments == (("name", "name"), ("age", "age"))


def test_nested_records_are_regrouped_by_first_segment() -> None:
    call = synthesize_call(
        [_record("title"), _record("flag", LID1), _record("count", LID2)],
        "Arguments",
    )
    assert call == BundleCall(
        "Arguments",
        (
            ("title", "title"),
            ("lid1", BundleCall("Lid1.Arguments", (("flag", "flag"),))),
            ("lid2", BundleCall("Lid2.Arguments", (("count", "count"),))),
        ),
    )


def test_grouped_keys_sorted_regardless_of_record_order() -> None:
    forward = synthesize_arguments(
        [_record("flag", LID1), _record("count", LID2), _record("title")]
    )
    backward = synthesize_arguments(
        [_record("count", LID2), _record("title"), _record("flag", LID1)]
    )
    assert [keyword for keyword, _ in forward] == ["title", "lid1", "lid2"]
    assert [keyword for keyword, _ in backward] == ["title", "lid1", "lid2"]


def test_deeper_paths_recurse() -> None:
    inner = PathSegment("cap", "Cap.Arguments")
    arguments = synthesize_arguments([_record("size", LID1, inner)])
    assert arguments == (
        (
            "lid1",
            BundleCall(
                "Lid1.Arguments",
                (("cap", BundleCall("Cap.Arguments", (("size", "size"),))),),
            ),
        ),
    )


def test_keyword_escaped_names_are_forwarded_escaped() -> None:
    record = PropertyRecord(name="class", annotation="str", source_name="class_")
    assert synthesize_arguments([record]) == (("class_", "class_"),)


def test_render_call_nested_layout() -> None:
    call = synthesize_call(
        [
            _record("title"),
            _record("flag", LID1),
            _record("note", LID1),
            _record("count", LID2),
        ],
        "Arguments",
    )
    expected = textwrap.dedent(
        """
        cls.Arguments(
            title=title,
            lid1=cls.Lid1.Arguments(
                flag=flag,
                note=note,
            ),
            lid2=cls.Lid2.Arguments(
                count=count,
            ),
        )
        """
    ).strip()
    assert render_call(call) == expected


def test_render_call_empty_bundle() -> None:
    assert render_call(BundleCall("Arguments")) == "cls.Arguments()"


def test_render_call_empty_nested_bundle_inline() -> None:
    call = BundleCall("Arguments", (("lid1", BundleCall("Lid1.Arguments")),))
    assert render_call(call) == "cls.Arguments(\n    lid1=cls.Lid1.Arguments(),\n)"


def test_render_call_depth_indents_closing_paren() -> None:
    call = BundleCall("Arguments", (("name", "name"),))
    assert render_call(call, depth=2) == "cls.Arguments(\n            name=name,\n        )"
