"""Detection of masked filter and field references.

Two disjoint token grammars are recognised inside filter declarations:

* ``@name`` names a custom or built-in filter;
* ``~{field}~`` (the wrapper is configurable) names the current value of
  another field in the filtered data.

Detection never dereferences anything; the pipeline performs the lookup.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..constants import DEFAULT_FIELD_REFERENCE_PREFIX, DEFAULT_FIELD_REFERENCE_SUFFIX

_FILTER_REFERENCE = re.compile(r"^@(.+)$", re.DOTALL)


@dataclass(frozen=True, slots=True)
class FieldReferencePattern:
    """Wrapper that marks a string as a reference to another field."""

    prefix: str = DEFAULT_FIELD_REFERENCE_PREFIX
    suffix: str = DEFAULT_FIELD_REFERENCE_SUFFIX
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.prefix or not self.suffix:
            raise ValueError("Field reference prefix and suffix must not be empty")
        regex = re.compile(f"^{re.escape(self.prefix)}(.+?){re.escape(self.suffix)}$", re.DOTALL)
        object.__setattr__(self, "_regex", regex)

    def mask(self, field_path: str) -> str:
        return f"{self.prefix}{field_path}{self.suffix}"

    def unmask(self, token: object) -> str | None:
        if not isinstance(token, str):
            return None
        match = self._regex.match(token)
        return match.group(1) if match else None


DEFAULT_FIELD_REFERENCE = FieldReferencePattern()


def unmask_filter_reference(token: object) -> str | None:
    """Return the filter name of an ``@name`` token, otherwise ``None``."""

    if not isinstance(token, str):
        return None
    match = _FILTER_REFERENCE.match(token)
    return match.group(1) if match else None


def unmask_field_reference(
    token: object, pattern: FieldReferencePattern = DEFAULT_FIELD_REFERENCE
) -> str | None:
    """Return the field path wrapped in ``token``, otherwise ``None``."""

    return pattern.unmask(token)


def mask_field_reference(
    field_path: str, pattern: FieldReferencePattern = DEFAULT_FIELD_REFERENCE
) -> str:
    return pattern.mask(field_path)


def is_reference(token: object, pattern: FieldReferencePattern = DEFAULT_FIELD_REFERENCE) -> bool:
    return unmask_filter_reference(token) is not None or pattern.unmask(token) is not None


__all__ = [
    "DEFAULT_FIELD_REFERENCE",
    "FieldReferencePattern",
    "is_reference",
    "mask_field_reference",
    "unmask_field_reference",
    "unmask_filter_reference",
]
