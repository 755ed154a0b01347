"""Declarative HTML form rendering with whitelisting, filtering and validation."""
from __future__ import annotations

from .config import ConfigError, FormConfig, load_config
from .core.filters import BUILTIN_FILTERS, FilterSpec
from .core.references import FieldReferencePattern
from .form import Form
from .sources import MappingSource, StarletteSource, SubmissionSource
from .validation import RuleValidator, Validator

__version__ = "0.1.0"

__all__ = [
    "BUILTIN_FILTERS",
    "ConfigError",
    "FieldReferencePattern",
    "FilterSpec",
    "Form",
    "FormConfig",
    "MappingSource",
    "RuleValidator",
    "StarletteSource",
    "SubmissionSource",
    "Validator",
    "__version__",
    "load_config",
]
