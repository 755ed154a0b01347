"""Attribute synthesis for rendered form tags."""
from __future__ import annotations

import html
from typing import Any, Mapping, Protocol

from ..core.paths import create_field_name
from ..utils.collections import is_sequence, merge_recursive
from .taxonomy import NAME_ATTRIBUTES, SELECTION_ATTRIBUTES, attributes_for

AttributeSet = dict[str, Any]


class RenderContext(Protocol):
    """Read-only view of form state consulted while rendering."""

    @property
    def form_id(self) -> str: ...

    @property
    def error_class(self) -> str: ...

    def field_input(self, field_id: str | None) -> Any: ...

    def has_error(self, field_id: str | None) -> bool: ...

    def default_attributes(self, field_id: str | None) -> Mapping[str, Any] | None: ...


def normalize_attributes(raw: Mapping[str, Any] | Any | None) -> AttributeSet:
    """Return ``raw`` as an ordered attribute mapping.

    Bare attribute names given in a list (``["multiple", {"size": 4}]``) map
    to ``None`` and render name-only.
    """

    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, str):
        return {raw: None}
    attrs: AttributeSet = {}
    for item in raw:
        if isinstance(item, Mapping):
            attrs.update(item)
        else:
            attrs[str(item)] = None
    return attrs


def render_attributes(
    field_id: str | None,
    input_type: str,
    explicit: Mapping[str, Any] | None,
    *,
    context: RenderContext,
) -> AttributeSet:
    """Combine taxonomy defaults, per-field defaults and ``explicit`` attributes.

    Explicit attributes always win over configured per-field defaults, which
    win over values derived from the taxonomy. Class-bearing types get the
    error class appended while the field is invalid.
    """

    attrs = normalize_attributes(explicit)
    defaults = context.default_attributes(field_id)
    if defaults:
        attrs = merge_recursive(normalize_attributes(defaults), attrs)

    capabilities = attributes_for(input_type)

    if "class" in capabilities and context.has_error(field_id):
        prior = attrs.get("class")
        attrs["class"] = f"{prior} {context.error_class}" if prior else context.error_class

    if field_id is not None:
        for name in NAME_ATTRIBUTES:
            if name in capabilities and attrs.get(name) is None:
                attrs[name] = create_field_name(context.form_id, field_id)

    if "type" in capabilities and attrs.get("type") is None:
        attrs["type"] = input_type

    current = context.field_input(field_id)
    if "value" in capabilities and attrs.get("value") is None:
        if current is not None and not isinstance(current, Mapping) and not is_sequence(current):
            attrs["value"] = current

    for name in SELECTION_ATTRIBUTES:
        if name not in capabilities or name in attrs:
            continue
        candidate = attrs.get("value")
        if candidate is not None and value_matches(candidate, current):
            attrs[name] = name

    return attrs


def value_matches(candidate: Any, current: Any) -> bool:
    """Report whether ``candidate`` equals ``current`` or is one of its items."""

    if current is None:
        return False
    if isinstance(current, Mapping):
        return any(_same(candidate, item) for item in current.values())
    if is_sequence(current):
        return any(_same(candidate, item) for item in current)
    return _same(candidate, current)


def _same(left: Any, right: Any) -> bool:
    if left == right:
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return False
    return str(left) == str(right)


def format_attributes(attrs: Mapping[str, Any]) -> str:
    """Render ``attrs`` as a leading-space attribute string.

    ``None`` and ``True`` render the bare name, ``False`` drops the
    attribute and every other value is HTML-escaped inside double quotes.
    """

    parts: list[str] = []
    for name, value in attrs.items():
        if value is False:
            continue
        if value is None or value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


__all__ = [
    "AttributeSet",
    "RenderContext",
    "format_attributes",
    "normalize_attributes",
    "render_attributes",
    "value_matches",
]
