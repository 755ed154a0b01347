from __future__ import annotations

from simpleforms.render.attributes import (
    format_attributes,
    normalize_attributes,
    render_attributes,
    value_matches,
)
from simpleforms.render.taxonomy import attributes_for, prototype_for

from tests.render.stub_context import StubContext


def test_text_field_derives_name_id_and_type() -> None:
    attrs = render_attributes("email", "text", {}, context=StubContext())

    assert attrs == {"name": "form_1[email]", "id": "form_1[email]", "type": "text"}
    rendered = format_attributes(attrs)
    assert 'name="form_1[email]"' in rendered
    assert 'id="form_1[email]"' in rendered
    assert 'type="text"' in rendered
    assert "value" not in rendered


def test_value_defaults_to_submitted_input() -> None:
    context = StubContext(data={"email": "ada@example.com"})

    attrs = render_attributes("email", "email", None, context=context)

    assert attrs["value"] == "ada@example.com"
    assert attrs["type"] == "email"


def test_error_class_is_set_or_appended() -> None:
    context = StubContext(errors={"email"})

    assert render_attributes("email", "text", {}, context=context)["class"] == "error"
    assert render_attributes("email", "text", {"class": "wide"}, context=context)["class"] == "wide error"


def test_error_class_respects_taxonomy() -> None:
    context = StubContext(errors={"email"})

    attrs = render_attributes("email", "option", {"value": "x"}, context=context)

    assert "class" not in attrs


def test_checkbox_checked_for_list_membership() -> None:
    context = StubContext(data={"colors": ["red", "blue"]})

    blue = render_attributes("colors[]", "checkbox", {"value": "blue"}, context=context)
    green = render_attributes("colors[]", "checkbox", {"value": "green"}, context=context)

    assert blue["checked"] == "checked"
    assert blue["name"] == "form_1[colors][]"
    assert 'checked="checked"' in format_attributes(blue)
    assert "checked" not in green


def test_checkbox_without_candidate_value_is_not_checked() -> None:
    attrs = render_attributes("agree", "checkbox", {}, context=StubContext())

    assert "checked" not in attrs
    assert "value" not in attrs


def test_explicit_checked_flag_is_not_overridden() -> None:
    context = StubContext(data={"agree": "1"})

    attrs = render_attributes("agree", "checkbox", {"value": "1", "checked": False}, context=context)

    assert attrs["checked"] is False
    assert "checked" not in format_attributes(attrs)


def test_option_selected_compares_by_value() -> None:
    context = StubContext(data={"size": "2"})

    assert render_attributes("size", "option", {"value": 2}, context=context)["selected"] == "selected"
    assert "selected" not in render_attributes("size", "option", {"value": 3}, context=context)


def test_precedence_explicit_over_defaults_over_taxonomy() -> None:
    context = StubContext(
        data={"email": "old@example.com"},
        defaults={"email": {"class": "wide", "placeholder": "you@example.com", "id": "email-default"}},
    )

    attrs = render_attributes("email", "text", {"placeholder": "override", "value": "new"}, context=context)

    assert attrs["placeholder"] == "override"
    assert attrs["class"] == "wide"
    assert attrs["id"] == "email-default"
    assert attrs["name"] == "form_1[email]"
    assert attrs["value"] == "new"


def test_label_and_error_types_use_for_and_data_attributes() -> None:
    context = StubContext()

    assert render_attributes("email", "label", {}, context=context) == {"for": "form_1[email]"}
    assert render_attributes("email", "error", {}, context=context) == {"data-error_for": "form_1[email]"}
    assert render_attributes("email", "label_for", {}, context=context) == {}


def test_unknown_type_carries_only_explicit_attributes() -> None:
    attrs = render_attributes("email", "fancy", {"data-x": "1"}, context=StubContext(data={"email": "x"}))

    assert attrs == {"data-x": "1"}
    assert attributes_for("fancy") == frozenset()
    assert prototype_for("fancy") == prototype_for("text")


def test_format_attributes_escapes_and_handles_flags() -> None:
    rendered = format_attributes({"multiple": None, "required": True, "disabled": False, "title": 'a "b" <c>'})

    assert rendered == ' multiple required title="a &quot;b&quot; &lt;c&gt;"'


def test_normalize_attributes_accepts_bare_names() -> None:
    assert normalize_attributes(["multiple", {"size": 3}]) == {"multiple": None, "size": 3}
    assert normalize_attributes("readonly") == {"readonly": None}
    assert normalize_attributes(None) == {}


def test_value_matches_handles_scalars_lists_and_absence() -> None:
    assert value_matches("1", 1)
    assert value_matches(2, ["1", "2"])
    assert not value_matches("a", None)
    assert not value_matches(True, "True")
