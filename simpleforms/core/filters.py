"""Filter declarations, built-in filters and single-step execution."""
from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, MutableMapping, Sequence

from .paths import get_path, replace_path
from .references import DEFAULT_FIELD_REFERENCE, FieldReferencePattern, unmask_filter_reference

logger = logging.getLogger(__name__)

FilterCallable = Callable[..., Any]
FilterRef = str | FilterCallable


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """One queued transformation targeting a single field."""

    callable: FilterRef
    field: str
    params: tuple[Any, ...]

    def describe(self) -> str:
        if isinstance(self.callable, str):
            name = self.callable
        else:
            name = getattr(self.callable, "__qualname__", repr(self.callable))
        return f"{name} -> {self.field}"


def normalize_filter_declarations(
    declarations: Mapping[str, Any],
    *,
    pattern: FieldReferencePattern = DEFAULT_FIELD_REFERENCE,
) -> list[FilterSpec]:
    """Expand per-field filter declarations into ordered :class:`FilterSpec` items.

    Each field maps to one filter name, a list of names, a mapping of
    name -> params, or a list mixing names and such mappings::

        {
            "name": "@normalize",
            "slug": {"replace": ["~{slug}~", " ", "-"], "@encrypt": "~{name}~"},
            "city": ["strip", "title"],
        }

    A filter declared without params receives the masked reference to its own
    field, so ``["strip", "title"]`` chains on the field's current value.
    """

    specs: list[FilterSpec] = []
    for field_id, actions in declarations.items():
        for filter_ref, params in _iter_actions(actions):
            specs.append(
                FilterSpec(
                    callable=filter_ref,
                    field=str(field_id),
                    params=_normalize_params(params, str(field_id), pattern),
                )
            )
    return specs


def _iter_actions(actions: Any) -> Iterable[tuple[FilterRef, Any]]:
    if isinstance(actions, str) or callable(actions):
        yield actions, None
    elif isinstance(actions, Mapping):
        yield from actions.items()
    elif isinstance(actions, Sequence):
        for item in actions:
            yield from _iter_actions(item)
    else:
        raise TypeError(f"Unsupported filter declaration {actions!r}")


def _normalize_params(params: Any, field_id: str, pattern: FieldReferencePattern) -> tuple[Any, ...]:
    if params is None:
        return (pattern.mask(field_id),)
    if isinstance(params, (list, tuple)):
        return tuple(params)
    return (params,)


def resolve_filter(
    filter_ref: FilterRef,
    custom_filters: Mapping[str, FilterCallable],
    builtin_filters: Mapping[str, FilterCallable] | None = None,
) -> FilterCallable | None:
    """Return the callable behind ``filter_ref`` or ``None`` when it cannot be resolved.

    Plain callables are used as-is. Names (with or without the ``@`` mask)
    are looked up in ``custom_filters`` first and the built-in filters second.
    """

    if callable(filter_ref):
        return filter_ref
    if not isinstance(filter_ref, str):
        return None
    builtins = BUILTIN_FILTERS if builtin_filters is None else builtin_filters
    name = unmask_filter_reference(filter_ref) or filter_ref
    if name in custom_filters:
        return custom_filters[name]
    return builtins.get(name)


def resolve_params(
    params: Sequence[Any],
    data: Mapping[str, Any],
    *,
    pattern: FieldReferencePattern = DEFAULT_FIELD_REFERENCE,
) -> list[Any]:
    """Replace field references in ``params`` with the values currently in ``data``."""

    resolved: list[Any] = []
    for param in params:
        field_path = pattern.unmask(param)
        resolved.append(get_path(data, field_path) if field_path is not None else param)
    return resolved


def apply_filter(
    spec: FilterSpec,
    data: MutableMapping[str, Any],
    *,
    custom_filters: Mapping[str, FilterCallable],
    pattern: FieldReferencePattern = DEFAULT_FIELD_REFERENCE,
) -> bool:
    """Run ``spec`` against ``data`` in place and report whether a value was written.

    Unresolvable filters and filters raising an exception leave ``data``
    untouched.
    """

    func = resolve_filter(spec.callable, custom_filters)
    if func is None:
        logger.debug("Skipping unresolvable filter %s", spec.describe())
        return False
    params = resolve_params(spec.params, data, pattern=pattern)
    try:
        result = func(*params)
    except Exception:
        logger.debug("Filter %s failed; keeping previous value", spec.describe(), exc_info=True)
        return False
    replace_path(data, spec.field, result)
    return True


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _strip(value: Any, chars: str | None = None) -> str:
    return _text(value).strip(chars)


def _lstrip(value: Any, chars: str | None = None) -> str:
    return _text(value).lstrip(chars)


def _rstrip(value: Any, chars: str | None = None) -> str:
    return _text(value).rstrip(chars)


def _lower(value: Any) -> str:
    return _text(value).lower()


def _upper(value: Any) -> str:
    return _text(value).upper()


def _title(value: Any) -> str:
    return _text(value).title()


def _capitalize(value: Any) -> str:
    return _text(value).capitalize()


def _replace(value: Any, old: str, new: str, count: int = -1) -> str:
    return _text(value).replace(old, new, int(count))


def _regex_replace(value: Any, pattern: str, replacement: str) -> str:
    return re.sub(pattern, replacement, _text(value))


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        value = value.strip()
    return int(value)


def _to_float(value: Any) -> float:
    if isinstance(value, str):
        value = value.strip()
    return float(value)


_TRUTHY = {"1", "true", "yes", "on", "y"}


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _default(value: Any, fallback: Any) -> Any:
    if value is None or value == "" or value == [] or value == {}:
        return fallback
    return value


def _trim_list(value: Any) -> list[str]:
    if value is None:
        return []
    items = [value] if isinstance(value, str) else list(value)
    trimmed = (_text(item).strip() for item in items)
    return [item for item in trimmed if item]


def _join(value: Any, separator: str = ",") -> str:
    if isinstance(value, str):
        return value
    return separator.join(_text(item) for item in value)


def _split(value: Any, separator: str = ",") -> list[str]:
    text = _text(value)
    if not text:
        return []
    return [part.strip() for part in text.split(separator)]


def _slug(value: Any, separator: str = "-") -> str:
    normalized = unicodedata.normalize("NFKD", _text(value)).encode("ascii", "ignore").decode("ascii")
    collapsed = re.sub(r"[^a-z0-9]+", separator, normalized.lower())
    return collapsed.strip(separator)


def _truncate(value: Any, length: int) -> str:
    return _text(value)[: int(length)]


BUILTIN_FILTERS: Mapping[str, FilterCallable] = {
    "strip": _strip,
    "lstrip": _lstrip,
    "rstrip": _rstrip,
    "lower": _lower,
    "upper": _upper,
    "title": _title,
    "capitalize": _capitalize,
    "replace": _replace,
    "regex_replace": _regex_replace,
    "int": _to_int,
    "float": _to_float,
    "bool": _to_bool,
    "default": _default,
    "trim_list": _trim_list,
    "join": _join,
    "split": _split,
    "slug": _slug,
    "truncate": _truncate,
}


__all__ = [
    "BUILTIN_FILTERS",
    "FilterCallable",
    "FilterSpec",
    "apply_filter",
    "normalize_filter_declarations",
    "resolve_filter",
    "resolve_params",
]
