"""Static tables describing which attributes each input type carries and how tags look."""
from __future__ import annotations

from typing import Mapping

# Attribute capabilities per input type:
#   checked/selected: set when the candidate value matches the submitted value
#   class: receives the error class while the field is invalid
#   data-error_for/for/id/name: default to the packed field name
#   type: always the input type
#   value: defaults to the submitted value
#   label/multiple: passed through from settings
_INPUT = frozenset({"class", "id", "name", "type", "value"})

ATTRIBUTE_TAXONOMY: Mapping[str, frozenset[str]] = {
    "checkbox": _INPUT | {"checked"},
    "color": _INPUT,
    "date": _INPUT,
    "datetime": _INPUT,
    "datetime-local": _INPUT,
    "email": _INPUT,
    "error": frozenset({"data-error_for"}),
    "file": frozenset({"class", "id", "name", "type"}),
    "hidden": _INPUT,
    "label": frozenset({"class", "for"}),
    "label_for": frozenset({"class"}),
    "month": _INPUT,
    "number": _INPUT,
    "optgroup": frozenset({"label"}),
    "option": frozenset({"selected", "value"}),
    "password": _INPUT,
    "radio": _INPUT | {"checked"},
    "range": _INPUT,
    "search": _INPUT,
    "select": frozenset({"class", "id", "name", "multiple"}),
    "tel": _INPUT,
    "text": _INPUT,
    "textarea": frozenset({"class", "id", "name"}),
    "time": _INPUT,
    "url": _INPUT,
    "week": _INPUT,
}

# Name-like attributes are emitted in this order when derived from the field id.
NAME_ATTRIBUTES: tuple[str, ...] = ("name", "id", "for", "data-error_for")
SELECTION_ATTRIBUTES: tuple[str, ...] = ("checked", "selected")

DEFAULT_PROTOTYPE = "input"

TAG_PROTOTYPES: Mapping[str, tuple[str, str | None]] = {
    "datalist": ("<datalist{attrs}>", "</datalist>"),
    "error": ("<span{attrs}>", "</span>"),
    "input": ("<input{attrs}/>", None),
    "label": ("<label{attrs}>", "</label>"),
    "label_for": ("<label{attrs}>", "</label>"),
    "optgroup": ("<optgroup{attrs}>", "</optgroup>"),
    "option": ("<option{attrs}>", "</option>"),
    "select": ("<select{attrs}>", "</select>"),
    "textarea": ("<textarea{attrs}>", "</textarea>"),
}

OPTION_CONTAINERS = frozenset({"datalist", "optgroup", "select"})
ESCAPED_CONTENT = frozenset({"error", "label", "label_for", "option", "textarea"})
TRANSFORMED_CONTENT = frozenset({"label", "label_for", "option", "textarea"})


def attributes_for(input_type: str) -> frozenset[str]:
    """Return the attribute capabilities of ``input_type``; unknown types carry none."""

    return ATTRIBUTE_TAXONOMY.get(input_type, frozenset())


def prototype_for(input_type: str) -> tuple[str, str | None]:
    """Return ``(opening, closing)`` markup for ``input_type``.

    Unknown types fall back to the self-closing ``<input/>`` prototype, whose
    closing part is ``None``.
    """

    return TAG_PROTOTYPES.get(input_type, TAG_PROTOTYPES[DEFAULT_PROTOTYPE])


__all__ = [
    "ATTRIBUTE_TAXONOMY",
    "DEFAULT_PROTOTYPE",
    "ESCAPED_CONTENT",
    "NAME_ATTRIBUTES",
    "OPTION_CONTAINERS",
    "SELECTION_ATTRIBUTES",
    "TAG_PROTOTYPES",
    "TRANSFORMED_CONTENT",
    "attributes_for",
    "prototype_for",
]
