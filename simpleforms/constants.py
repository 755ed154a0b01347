"""Shared defaults and reserved keys for simpleforms."""
from __future__ import annotations

from typing import Final

CSRF_TOKEN_KEY: Final[str] = "::csrf_token"
IS_SUBMITTED_KEY: Final[str] = "::is_submitted"

# Reserved keys are always kept by an active whitelist.
RESERVED_KEYS: Final[tuple[str, ...]] = (CSRF_TOKEN_KEY, IS_SUBMITTED_KEY)

SUBMIT_METHODS: Final[tuple[str, ...]] = ("POST", "GET")
DEFAULT_SUBMIT_METHOD: Final[str] = "POST"
DEFAULT_ENCTYPE: Final[str] = "multipart/form-data"
DEFAULT_ERROR_CLASS: Final[str] = "error"
FORM_ID_PREFIX: Final[str] = "form_"

DEFAULT_FIELD_REFERENCE_PREFIX: Final[str] = "~{"
DEFAULT_FIELD_REFERENCE_SUFFIX: Final[str] = "}~"


__all__ = [
    "CSRF_TOKEN_KEY",
    "DEFAULT_ENCTYPE",
    "DEFAULT_ERROR_CLASS",
    "DEFAULT_FIELD_REFERENCE_PREFIX",
    "DEFAULT_FIELD_REFERENCE_SUFFIX",
    "DEFAULT_SUBMIT_METHOD",
    "FORM_ID_PREFIX",
    "IS_SUBMITTED_KEY",
    "RESERVED_KEYS",
    "SUBMIT_METHODS",
]
