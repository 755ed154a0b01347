"""Collection helpers used across the project."""
from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, Iterator, Mapping, MutableSequence, Sequence, TypeVar, cast

T = TypeVar("T")


def unique_everseen(iterable: Iterable[T], *, key: Callable[[T], Hashable] | None = None) -> Iterator[T]:
    """Yield items from ``iterable`` while preserving their first occurrence order."""

    seen: set[Hashable] = set()
    for item in iterable:
        marker = key(item) if key is not None else cast(Hashable, item)
        if marker in seen:
            continue
        seen.add(marker)
        yield item


def extend_unique(target: MutableSequence[T], items: Iterable[T]) -> MutableSequence[T]:
    """Extend ``target`` with ``items`` that are not already value-equal to an element.

    Equality is used instead of hashing so unhashable values such as nested
    dictionaries can be deduplicated as well.
    """

    for item in items:
        if item in target:
            continue
        target.append(item)
    return target


def is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_structure(value: object) -> bool:
    return isinstance(value, Mapping) or is_sequence(value)


def copy_structure(value: Any) -> Any:
    """Copy the mapping and list structure of ``value``, sharing every leaf.

    Leaves such as uploaded file handles are kept as-is, so they never need
    to be copyable.
    """

    if isinstance(value, Mapping):
        return {key: copy_structure(item) for key, item in value.items()}
    if isinstance(value, list):
        return [copy_structure(item) for item in value]
    if isinstance(value, tuple):
        return tuple(copy_structure(item) for item in value)
    return value


def merge_recursive(base: Any, overlay: Any) -> Any:
    """Deep-merge ``overlay`` into a copy of ``base``.

    Mappings are merged key by key: nested structures recurse, positional
    entries (integer keys or list items) are appended only when no
    value-equal entry exists yet, and every other key is replaced by the
    overlay's value. Two lists merge as an ordered set union, so
    ``[1, 2]`` merged with ``[2, 3]`` yields ``[1, 2, 3]``.

    Neither argument is mutated; leaf values are shared, not copied.
    """

    if is_sequence(base) and is_sequence(overlay):
        return extend_unique(copy_structure(list(base)), copy_structure(list(overlay)))
    if not is_structure(base) or not is_structure(overlay):
        return copy_structure(overlay)

    merged: dict[Any, Any] = _as_dict(base)
    items = enumerate(overlay) if is_sequence(overlay) else overlay.items()
    for key, value in items:
        current = merged.get(key) if not is_sequence(overlay) else None
        if is_structure(value) and is_structure(current):
            merged[key] = merge_recursive(current, value)
        elif isinstance(key, int):
            if value not in merged.values():
                merged[_next_index(merged)] = copy_structure(value)
        else:
            merged[key] = copy_structure(value)
    return merged


def _as_dict(value: Mapping[Any, Any] | Sequence[Any]) -> dict[Any, Any]:
    if isinstance(value, Mapping):
        return copy_structure(dict(value))
    return {index: copy_structure(item) for index, item in enumerate(value)}


def _next_index(data: Mapping[Any, Any]) -> int:
    indices = [key for key in data if isinstance(key, int) and not isinstance(key, bool)]
    return max(indices) + 1 if indices else 0


__all__ = [
    "copy_structure",
    "extend_unique",
    "is_sequence",
    "is_structure",
    "merge_recursive",
    "unique_everseen",
]
