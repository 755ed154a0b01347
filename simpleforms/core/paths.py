"""Field path parsing and nested data access."""
from __future__ import annotations

import re
from typing import Any, Iterator, Mapping, MutableMapping, MutableSequence

_BRACKET_GROUP = re.compile(r"\[([^\]]*)\]")
_SPLIT_NAME = re.compile(r"^(.+?)(\[.+)$")


def base_key(path: str) -> str:
    """Return ``path`` with every bracket group removed (``address[city]`` -> ``address``)."""

    return _BRACKET_GROUP.sub("", path)


def split_path(path: str) -> list[str]:
    """Split a bracketed or dotted field path into its segments.

    ``address[city]`` and ``address.city`` both yield ``["address", "city"]``.
    An empty bracket group (``colors[]``) yields an empty trailing segment,
    which :func:`set_path` treats as an append.
    """

    head = base_key(path)
    segments = [part for part in head.split(".") if part] if "." in head else [head]
    segments.extend(match.group(1) for match in _BRACKET_GROUP.finditer(path))
    return segments


def create_field_name(form_id: str, field_id: str) -> str:
    """Return the HTML name of ``field_id`` packed under ``form_id``.

    ``email`` becomes ``form_1[email]`` and ``address[city]`` becomes
    ``form_1[address][city]``.
    """

    match = _SPLIT_NAME.match(field_id)
    if match:
        return f"{form_id}[{match.group(1)}]{match.group(2)}"
    return f"{form_id}[{field_id}]"


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """Return the value stored at ``path`` in ``data`` or ``default``."""

    cursor = data
    for segment in _significant(split_path(path)):
        found, cursor = _step(cursor, segment)
        if not found:
            return default
    return cursor


def has_path(data: Any, path: str) -> bool:
    marker = object()
    return get_path(data, path, marker) is not marker


def set_path(data: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate mappings as needed.

    An empty bracket group appends, so repeated ``colors[]`` writes build a list.
    """

    _write(data, split_path(path), value)


def replace_path(data: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, replacing whatever is stored there.

    Trailing ``[]`` groups address the whole list, as on read, so writing to
    ``colors[]`` replaces ``colors``.
    """

    _write(data, list(_significant(split_path(path))), value)


def _write(data: MutableMapping[str, Any], segments: list[str], value: Any) -> None:
    cursor: Any = data
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if isinstance(cursor, MutableSequence):
            cursor = _descend_sequence(cursor, segment, value if last else None, last)
            continue
        if last:
            cursor[segment] = value
            return
        child = cursor.get(segment)
        if not isinstance(child, (MutableMapping, MutableSequence)):
            child = [] if segments[index + 1] == "" else {}
            cursor[segment] = child
        cursor = child


def _descend_sequence(cursor: MutableSequence[Any], segment: str, value: Any, last: bool) -> Any:
    if segment == "" or not segment.isdigit() or int(segment) >= len(cursor):
        cursor.append(value if last else {})
        return cursor[-1]
    position = int(segment)
    if last:
        cursor[position] = value
        return value
    if not isinstance(cursor[position], (MutableMapping, MutableSequence)):
        cursor[position] = {}
    return cursor[position]


def _significant(segments: list[str]) -> Iterator[str]:
    # Trailing "[]" groups address the whole list on read.
    end = len(segments)
    while end > 1 and segments[end - 1] == "":
        end -= 1
    return iter(segments[:end])


def _step(cursor: Any, segment: str) -> tuple[bool, Any]:
    if isinstance(cursor, Mapping):
        if segment in cursor:
            return True, cursor[segment]
        if segment.isdigit() and int(segment) in cursor:
            return True, cursor[int(segment)]
        return False, None
    if isinstance(cursor, (list, tuple)) and segment.isdigit():
        position = int(segment)
        if position < len(cursor):
            return True, cursor[position]
    return False, None


class FieldDataStore:
    """Mutable tree of submitted values addressed by field paths."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})

    def get(self, path: str, default: Any = None) -> Any:
        return get_path(self.data, path, default)

    def set(self, path: str, value: Any) -> None:
        set_path(self.data, path, value)

    def field_input(self, field_id: str | None) -> Any:
        """Return the top-level value addressed by ``field_id``'s base key."""

        if field_id is None:
            return None
        return self.data.get(base_key(field_id))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and has_path(self.data, path)

    def __bool__(self) -> bool:
        return bool(self.data)


__all__ = [
    "FieldDataStore",
    "base_key",
    "create_field_name",
    "get_path",
    "has_path",
    "replace_path",
    "set_path",
    "split_path",
]
