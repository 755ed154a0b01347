"""Configuration loading for simpleforms."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Mapping, MutableMapping, Sequence

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    import tomli as tomllib  # type: ignore

from .constants import DEFAULT_ENCTYPE, DEFAULT_ERROR_CLASS, DEFAULT_SUBMIT_METHOD, SUBMIT_METHODS
from .core.references import DEFAULT_FIELD_REFERENCE, FieldReferencePattern
from .utils.callables import CallableReferenceError, load_callable_reference


class ConfigError(ValueError):
    """Raised when form settings are invalid."""


@dataclass(slots=True)
class FormConfig:
    """Construction-time settings of a form.

    ``token`` set to ``False`` disables the anti-forgery check. ``filters``
    and ``validators`` use the declaration formats accepted by
    :meth:`simpleforms.form.Form.add_filters` and
    :meth:`simpleforms.form.Form.add_validators`.
    """

    id: str | None = None
    enctype: str = DEFAULT_ENCTYPE
    submit_method: str = DEFAULT_SUBMIT_METHOD
    token: Any = False
    error_class: str = DEFAULT_ERROR_CLASS
    whitelist: list[str] = field(default_factory=list)
    filters: dict[str, Any] = field(default_factory=dict)
    validators: dict[str, Any] = field(default_factory=dict)
    custom_filters: dict[str, Callable[..., Any]] = field(default_factory=dict)
    default_attributes: dict[str, Any] = field(default_factory=dict)
    inner_html_callback: Callable[..., str] | None = None
    field_reference: FieldReferencePattern = DEFAULT_FIELD_REFERENCE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FormConfig":
        """Build a config from constructor-style settings.

        Accepts the keys ``enctype``, ``filters``, ``form_submit_method``
        (or ``submit_method``), ``id``, ``token``, ``validators``,
        ``whitelist``, ``inner_html_callback``, ``error_class``,
        ``custom_filters``, ``default_attributes`` and ``field_reference``.
        """

        return _parse_form(data, base=cls())


def normalize_submit_method(value: object) -> str:
    if not isinstance(value, str) or value not in SUBMIT_METHODS:
        raise ConfigError(f"Form submit method must be one of {', '.join(SUBMIT_METHODS)}; got {value!r}")
    return value


def _load_toml(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(path: str | Path | None = None) -> FormConfig:
    """Load form settings from the ``[form]`` table of a TOML file.

    Parameters
    ----------
    path:
        Path to a TOML file. When ``None`` (or the file does not exist) the
        default configuration is returned.

    Custom filters and the inner HTML callback may be given as
    ``"module:attribute"`` strings and are imported while loading.
    """

    cfg = FormConfig()
    if path is None:
        return cfg

    try:
        data = _load_toml(Path(path))
    except tomllib.TOMLDecodeError as error:
        raise ConfigError(f"Could not parse {path}: {error}") from error
    form_data = data.get("form")
    if form_data is None:
        return cfg
    if not isinstance(form_data, Mapping):
        raise ConfigError("[form] must be a table")
    return _parse_form(form_data, base=cfg, resolve_references=True)


def _parse_form(data: Mapping[str, Any], base: FormConfig, *, resolve_references: bool = False) -> FormConfig:
    overrides: MutableMapping[str, Any] = {}
    if data.get("id") is not None:
        overrides["id"] = str(data["id"])
    if data.get("enctype") is not None:
        overrides["enctype"] = str(data["enctype"])
    method = data.get("form_submit_method", data.get("submit_method"))
    if method is not None:
        overrides["submit_method"] = normalize_submit_method(method)
    if "token" in data and data["token"] is not None:
        overrides["token"] = data["token"]
    if data.get("error_class") is not None:
        overrides["error_class"] = str(data["error_class"])
    if data.get("whitelist") is not None:
        overrides["whitelist"] = _parse_whitelist(data["whitelist"])
    if data.get("filters") is not None:
        overrides["filters"] = dict(_require_mapping(data["filters"], "filters"))
    if data.get("validators") is not None:
        overrides["validators"] = dict(_require_mapping(data["validators"], "validators"))
    if data.get("custom_filters") is not None:
        raw_filters = _require_mapping(data["custom_filters"], "custom_filters")
        overrides["custom_filters"] = {
            str(name): _resolve_callable(ref, f"custom_filters.{name}", resolve_references)
            for name, ref in raw_filters.items()
        }
    if data.get("default_attributes") is not None:
        overrides["default_attributes"] = dict(_require_mapping(data["default_attributes"], "default_attributes"))
    callback = data.get("inner_html_callback")
    if callback is not None:
        if callable(callback):
            overrides["inner_html_callback"] = callback
        elif resolve_references:
            overrides["inner_html_callback"] = _resolve_callable(callback, "inner_html_callback", True)
    if data.get("field_reference") is not None:
        overrides["field_reference"] = _parse_field_reference(data["field_reference"])
    if not overrides:
        return base
    return replace(base, **overrides)


def _parse_whitelist(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value]
    raise ConfigError("whitelist must be a field name or a list of field names")


def _require_mapping(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{name} must be a table keyed by field name")
    return value


def _resolve_callable(reference: Any, context: str, resolve_references: bool) -> Callable[..., Any]:
    if callable(reference):
        return reference
    if not resolve_references or not isinstance(reference, str):
        raise ConfigError(f"{context} must be callable")
    try:
        return load_callable_reference(reference)
    except CallableReferenceError as error:
        raise ConfigError(f"{context}: {error}") from error


def _parse_field_reference(value: Any) -> FieldReferencePattern:
    if isinstance(value, FieldReferencePattern):
        return value
    if isinstance(value, Mapping):
        try:
            return FieldReferencePattern(prefix=str(value["prefix"]), suffix=str(value["suffix"]))
        except (KeyError, ValueError) as error:
            raise ConfigError(f"field_reference needs non-empty prefix and suffix: {error}") from error
    if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
        try:
            return FieldReferencePattern(prefix=str(value[0]), suffix=str(value[1]))
        except ValueError as error:
            raise ConfigError(str(error)) from error
    raise ConfigError("field_reference must be a {prefix, suffix} table or a pair")


__all__ = [
    "ConfigError",
    "FormConfig",
    "load_config",
    "normalize_submit_method",
]
