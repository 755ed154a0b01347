from __future__ import annotations

import pytest

from simpleforms.core.references import (
    FieldReferencePattern,
    is_reference,
    mask_field_reference,
    unmask_field_reference,
    unmask_filter_reference,
)


def test_unmask_filter_reference_returns_name() -> None:
    assert unmask_filter_reference("@slugify") == "slugify"
    assert unmask_filter_reference("@encrypt@twice") == "encrypt@twice"


@pytest.mark.parametrize("token", ["slugify", "@", "", 42, None, ["@strip"]])
def test_unmask_filter_reference_rejects_other_tokens(token: object) -> None:
    assert unmask_filter_reference(token) is None


def test_unmask_field_reference_returns_path() -> None:
    assert unmask_field_reference("~{name}~") == "name"
    assert unmask_field_reference("~{address[city]}~") == "address[city]"


@pytest.mark.parametrize("token", ["~{name}", "{name}~", "~{}~", "name", 7, ("~{name}~",)])
def test_unmask_field_reference_rejects_malformed_tokens(token: object) -> None:
    assert unmask_field_reference(token) is None


def test_custom_field_reference_pattern_round_trips() -> None:
    pattern = FieldReferencePattern(prefix="{{", suffix="}}")

    token = mask_field_reference("email", pattern)

    assert token == "{{email}}"
    assert unmask_field_reference(token, pattern) == "email"
    assert unmask_field_reference("~{email}~", pattern) is None


def test_field_reference_pattern_requires_wrapper() -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        FieldReferencePattern(prefix="", suffix="}")


def test_is_reference_detects_both_grammars() -> None:
    assert is_reference("@strip")
    assert is_reference("~{name}~")
    assert not is_reference("plain")
