"""Markup assembly for form tags, including nested option trees."""
from __future__ import annotations

import html
from typing import Any, Callable, Iterable, Mapping

from ..utils.collections import is_sequence
from .attributes import RenderContext, format_attributes, render_attributes
from .taxonomy import ESCAPED_CONTENT, OPTION_CONTAINERS, TRANSFORMED_CONTENT, prototype_for

# (form_id, field_id, tag type, content) -> replacement content
ContentTransform = Callable[[str, "str | None", str, str], str]


def render_tag(
    field_id: str | None,
    input_type: str,
    settings: Mapping[str, Any] | None = None,
    *,
    context: RenderContext,
    transform: ContentTransform | None = None,
) -> str:
    """Render one tag of ``input_type`` for ``field_id``.

    ``settings["html"]`` is the inner content and ``settings["options"]`` the
    option tree for ``select``, ``optgroup`` and ``datalist``; every other key
    is an attribute.
    """

    attrs = dict(settings or {})
    inner = attrs.pop("html", None)
    options = attrs.pop("options", None)

    rendered_attrs = render_attributes(field_id, input_type, attrs, context=context)
    opening, closing = prototype_for(input_type)
    opening = opening.format(attrs=format_attributes(rendered_attrs))
    if closing is None:
        return opening

    if input_type in OPTION_CONTAINERS and options:
        inner = (inner or "") + render_options(field_id, options, context=context, transform=transform)

    if inner is not None and not isinstance(inner, str):
        inner = str(inner)
    if inner is not None and transform is not None and input_type in TRANSFORMED_CONTENT:
        inner = transform(context.form_id, field_id, input_type, inner)

    if input_type == "textarea" and inner is None:
        current = context.field_input(field_id)
        if current is not None:
            inner = str(current)

    if inner is None:
        inner = ""
    elif input_type in ESCAPED_CONTENT:
        inner = html.escape(inner, quote=True)
    return opening + inner + closing


def render_options(
    field_id: str | None,
    options: Mapping[Any, Any] | Iterable[Any],
    *,
    context: RenderContext,
    transform: ContentTransform | None = None,
) -> str:
    """Render ``options`` as ``<option>`` tags, nesting mappings into ``<optgroup>`` tags.

    Integer keys (including plain list positions) use the option value as
    its caption.
    """

    items = options.items() if isinstance(options, Mapping) else enumerate(options)
    parts: list[str] = []
    for caption, value in items:
        if isinstance(value, Mapping) or is_sequence(value):
            settings: dict[str, Any] = {"label": caption, "options": value}
            parts.append(render_tag(field_id, "optgroup", settings, context=context, transform=transform))
            continue
        if isinstance(caption, int) and not isinstance(caption, bool):
            caption = value
        settings = {"html": caption, "value": value}
        parts.append(render_tag(field_id, "option", settings, context=context, transform=transform))
    return "".join(parts)


__all__ = ["ContentTransform", "render_options", "render_tag"]
