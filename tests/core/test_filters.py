from __future__ import annotations

import logging

import pytest

from simpleforms.core.filters import (
    BUILTIN_FILTERS,
    FilterSpec,
    apply_filter,
    normalize_filter_declarations,
    resolve_filter,
    resolve_params,
)
from simpleforms.core.references import FieldReferencePattern


def test_normalize_defaults_params_to_own_field_reference() -> None:
    specs = normalize_filter_declarations({"city": ["strip", "title"], "name": "@normalize"})

    assert specs == [
        FilterSpec(callable="strip", field="city", params=("~{city}~",)),
        FilterSpec(callable="title", field="city", params=("~{city}~",)),
        FilterSpec(callable="@normalize", field="name", params=("~{name}~",)),
    ]


def test_normalize_keeps_explicit_params_and_wraps_scalars() -> None:
    specs = normalize_filter_declarations(
        {
            "slug": {"replace": ["~{slug}~", " ", "-"], "@encrypt": "~{name}~"},
            "tags": [{"split": ["~{tags}~", ";"]}, "trim_list"],
        }
    )

    assert [(spec.callable, spec.field, spec.params) for spec in specs] == [
        ("replace", "slug", ("~{slug}~", " ", "-")),
        ("@encrypt", "slug", ("~{name}~",)),
        ("split", "tags", ("~{tags}~", ";")),
        ("trim_list", "tags", ("~{tags}~",)),
    ]


def test_normalize_uses_configured_reference_pattern() -> None:
    pattern = FieldReferencePattern(prefix="[[", suffix="]]")

    (spec,) = normalize_filter_declarations({"name": "strip"}, pattern=pattern)

    assert spec.params == ("[[name]]",)


def test_normalize_rejects_unknown_declaration_types() -> None:
    with pytest.raises(TypeError, match="Unsupported filter declaration"):
        normalize_filter_declarations({"name": 42})


def test_resolve_filter_prefers_custom_registry() -> None:
    def custom_strip(value: object) -> str:
        return "custom"

    assert resolve_filter("strip", {"strip": custom_strip}) is custom_strip
    assert resolve_filter("@strip", {"strip": custom_strip}) is custom_strip
    assert resolve_filter("@strip", {}) is BUILTIN_FILTERS["strip"]
    assert resolve_filter("missing", {}) is None
    assert resolve_filter(str.upper, {}) is str.upper


def test_resolve_params_reads_current_values() -> None:
    data = {"name": "Ada", "address": {"city": "Oslo"}}

    assert resolve_params(["~{name}~", "~{address[city]}~", "~{nope}~", 3], data) == ["Ada", "Oslo", None, 3]


def test_apply_filter_writes_result_at_target_path() -> None:
    data: dict[str, object] = {"address": {}}
    spec = FilterSpec(callable="upper", field="address[city]", params=("oslo",))

    assert apply_filter(spec, data, custom_filters={})
    assert data == {"address": {"city": "OSLO"}}


def test_apply_filter_skips_unresolvable_filters(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="simpleforms.core.filters")
    data = {"name": "Ada"}
    spec = FilterSpec(callable="@does_not_exist", field="name", params=("~{name}~",))

    assert not apply_filter(spec, data, custom_filters={})
    assert data == {"name": "Ada"}
    assert "Skipping unresolvable filter @does_not_exist -> name" in caplog.text


def test_apply_filter_swallows_failures_without_partial_write() -> None:
    data = {"age": "forty", "nested": {"keep": "me"}}

    assert not apply_filter(FilterSpec("int", "age", ("~{age}~",)), data, custom_filters={})
    assert not apply_filter(FilterSpec("replace", "nested[keep]", ()), data, custom_filters={})
    assert data == {"age": "forty", "nested": {"keep": "me"}}


@pytest.mark.parametrize(
    ("name", "args", "expected"),
    [
        ("strip", ("  hi  ",), "hi"),
        ("title", ("ada lovelace",), "Ada Lovelace"),
        ("replace", ("a b c", " ", "-"), "a-b-c"),
        ("regex_replace", ("a   b", r"\s+", " "), "a b"),
        ("int", (" 42 ",), 42),
        ("float", ("2.5",), 2.5),
        ("bool", ("on",), True),
        ("bool", ("off",), False),
        ("default", ("", "n/a"), "n/a"),
        ("default", ("set", "n/a"), "set"),
        ("trim_list", ([" a ", "", "b"],), ["a", "b"]),
        ("join", (["a", "b"], "|"), "a|b"),
        ("split", ("a, b", ","), ["a", "b"]),
        ("slug", ("Hello Wörld!",), "hello-world"),
        ("truncate", ("abcdef", 3), "abc"),
        ("lower", (None,), ""),
    ],
)
def test_builtin_filters(name: str, args: tuple[object, ...], expected: object) -> None:
    assert BUILTIN_FILTERS[name](*args) == expected
