"""Public form object: submission handling plus field rendering."""
from __future__ import annotations

import secrets
import threading
from typing import Any, Iterable, Mapping, Sequence

from .config import ConfigError, FormConfig, normalize_submit_method
from .constants import CSRF_TOKEN_KEY, FORM_ID_PREFIX, IS_SUBMITTED_KEY
from .core.filters import FilterCallable, FilterSpec
from .core.paths import FieldDataStore
from .core.pipeline import FormPipeline
from .render.attributes import AttributeSet, format_attributes, render_attributes
from .render.tags import ContentTransform, render_tag
from .sources import SubmissionSource, merge_file_metadata
from .utils.collections import merge_recursive
from .validation import RuleValidator, Validator

_instance_count = 0
_instance_lock = threading.Lock()


def _next_form_id() -> str:
    """Return the next auto-generated form id (``form_1``, ``form_2``, ...)."""

    global _instance_count
    with _instance_lock:
        _instance_count += 1
        return f"{FORM_ID_PREFIX}{_instance_count}"


class Form:
    """An HTML form bound to one submission.

    Parameters
    ----------
    settings:
        A :class:`~simpleforms.config.FormConfig` or a mapping accepted by
        :meth:`FormConfig.from_mapping`.
    source:
        Where submitted values and uploads are read from. Without a source the
        form starts empty and only sees data given through
        :meth:`overwrite_input` or :meth:`add_default_values`.
    validator:
        Validation engine; defaults to a :class:`~simpleforms.validation.RuleValidator`.
    """

    def __init__(
        self,
        settings: FormConfig | Mapping[str, Any] | None = None,
        *,
        source: SubmissionSource | None = None,
        validator: Validator | None = None,
    ) -> None:
        config = settings if isinstance(settings, FormConfig) else FormConfig.from_mapping(settings or {})
        self._form_id = config.id or _next_form_id()
        self.enctype = config.enctype
        self._submit_method = normalize_submit_method(config.submit_method)
        self.csrf_token: Any = config.token
        self.error_class = config.error_class
        self._default_attr: dict[str, Any] = dict(config.default_attributes)
        self._inner_html_callback: ContentTransform | None = config.inner_html_callback
        self._source = source

        self.store = FieldDataStore()
        self.validator: Validator = validator if validator is not None else RuleValidator()
        self.pipeline = FormPipeline(
            self.store,
            validator=self.validator,
            custom_filters=config.custom_filters,
            reference_pattern=config.field_reference,
        )
        if config.filters:
            self.add_filters(config.filters)
        if config.validators:
            self.add_validators(config.validators)
        if config.whitelist:
            self.add_whitelisted_fields(config.whitelist)

        self.fetch_form_data()

    # identity and settings

    @property
    def form_id(self) -> str:
        return self._form_id

    def get_id(self) -> str:
        return self._form_id

    def set_id(self, form_id: str) -> None:
        self._form_id = form_id

    @property
    def submit_method(self) -> str:
        return self._submit_method

    @submit_method.setter
    def submit_method(self, method: str) -> None:
        self._submit_method = normalize_submit_method(method)

    def set_submit_method(self, method: str) -> None:
        """Switch between ``POST`` and ``GET``; anything else raises :class:`ConfigError`."""

        self.submit_method = method

    def set_csrf_token(self, token: Any) -> None:
        """Require ``token`` on submission; ``False`` turns the check off."""

        self.csrf_token = token

    def set_css_error_class(self, error_class: str) -> None:
        self.error_class = error_class

    def set_default_attr(self, settings: Mapping[str, Mapping[str, Any]]) -> None:
        """Merge per-field default attributes, e.g. ``{"email": {"class": "wide"}}``."""

        self._default_attr = merge_recursive(self._default_attr, settings)

    def default_attributes(self, field_id: str | None) -> Mapping[str, Any] | None:
        if field_id is None:
            return None
        return self._default_attr.get(field_id)

    # submitted data

    def fetch_form_data(self) -> dict[str, Any]:
        """Read submitted values (and uploads) for this form from the source.

        Empty submissions never replace data that is already present.
        """

        if self._source is None:
            return self.store.data
        values = self._source.values(self._form_id, self._submit_method)
        if not values:
            return self.store.data
        data = merge_file_metadata(values, self._source.files(self._form_id))
        if data:
            self.store.data = data
            self.pipeline.reset()
        return self.store.data

    def add_default_values(self, data: Mapping[str, Any]) -> None:
        """Fill in values for fields without input; ignored once the form is submitted."""

        if not self.is_submitted():
            self.store.data = merge_recursive(data, self.store.data)
            self.pipeline.reset()

    def overwrite_input(self, data: Mapping[str, Any]) -> None:
        self.store.data = merge_recursive(self.store.data, data)
        self.pipeline.reset()

    def clear_field_input(self, field_id: str) -> None:
        self.store.data.pop(field_id, None)
        self.pipeline.reset()

    def field_input(self, field_id: str | None) -> Any:
        return self.store.field_input(field_id)

    # pipeline

    @property
    def whitelisted_fields(self) -> list[str]:
        return self.pipeline.whitelisted_fields

    def add_whitelisted_fields(self, fields: str | Iterable[str]) -> list[str]:
        return self.pipeline.add_whitelisted_fields(fields)

    def add_filters(self, declarations: Mapping[str, Any]) -> list[FilterSpec]:
        return self.pipeline.add_filters(declarations)

    def add_custom_filter_functions(self, filters: Mapping[str, FilterCallable]) -> None:
        self.pipeline.add_custom_filters(filters)

    def add_validators(self, rules: Mapping[str, Any]) -> None:
        add_rules = getattr(self.validator, "add_rules", None)
        if add_rules is None:
            raise ConfigError(f"{type(self.validator).__name__} does not accept validation rules")
        add_rules(rules)

    def whitelist(self) -> dict[str, Any]:
        return self.pipeline.whitelist()

    def filter(self) -> dict[str, Any]:
        return self.pipeline.filter()

    def validate(self) -> Mapping[str, bool]:
        return self.pipeline.validate()

    def get_errors(self) -> Mapping[str, Sequence[str]]:
        return self.pipeline.get_errors()

    def is_submitted(self) -> bool:
        return self._check_token() and bool(self.store.data.get(IS_SUBMITTED_KEY))

    def is_valid(self) -> bool:
        if not self.is_submitted():
            return False
        return not self.get_errors()

    def has_error(self, field_id: str | None) -> bool:
        if field_id is None:
            return False
        return bool(self.get_errors().get(field_id))

    def get_error_class(self) -> str:
        return self.error_class if self.is_submitted() and not self.is_valid() else ""

    def _check_token(self) -> bool:
        if self.csrf_token is False:
            return True
        submitted = self.store.data.get(CSRF_TOKEN_KEY)
        if submitted is None:
            return False
        return secrets.compare_digest(str(submitted), str(self.csrf_token))

    # rendering

    def attributes(self, field_id: str | None, input_type: str, attrs: Mapping[str, Any] | None = None) -> AttributeSet:
        return render_attributes(field_id, input_type, attrs, context=self)

    def attr(self, field_id: str | None, input_type: str, attrs: Mapping[str, Any] | None = None) -> str:
        return format_attributes(self.attributes(field_id, input_type, attrs))

    def field(self, field_id: str | None, input_type: str, settings: Mapping[str, Any] | None = None) -> str:
        """Render any supported tag; explicit attributes override generated ones."""

        return render_tag(
            field_id,
            input_type,
            settings,
            context=self,
            transform=self._inner_html_callback,
        )

    def enable(self) -> str:
        """Hidden anti-forgery token and submission marker; render inside every form."""

        token = "" if self.csrf_token is False else self.csrf_token
        return self.field(CSRF_TOKEN_KEY, "hidden", {"value": token}) + self.field(
            IS_SUBMITTED_KEY, "hidden", {"value": "1"}
        )

    def error(self, field_id: str, attrs: Mapping[str, Any] | None = None) -> str:
        """Render the first error message of ``field_id``, or nothing while it is valid."""

        if not self.is_submitted():
            return ""
        messages = self.get_errors().get(field_id)
        if not messages:
            return ""
        settings = dict(attrs or {})
        settings["html"] = messages[0]
        return self.field(field_id, "error", settings)

    def open(self, attrs: Mapping[str, Any] | None = None) -> str:
        settings: dict[str, Any] = {
            "id": self._form_id,
            "method": self._submit_method.lower(),
            "enctype": self.enctype,
        }
        settings.update(attrs or {})
        return "<form" + format_attributes(settings) + ">"

    def close(self) -> str:
        return "</form>"

    def label(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "label", settings)

    def label_for(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "label_for", settings)

    def text(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "text", settings)

    def textarea(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "textarea", settings)

    def select(self, field_id: str, options: Any, settings: Mapping[str, Any] | None = None) -> str:
        merged = dict(settings or {})
        merged["options"] = options
        return self.field(field_id, "select", merged)

    def multiselect(self, field_id: str, options: Any, settings: Mapping[str, Any] | None = None) -> str:
        merged = dict(settings or {})
        merged["multiple"] = True
        return self.select(field_id, options, merged)

    def checkbox(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "checkbox", settings)

    def radio(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "radio", settings)

    def file(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "file", settings)

    def hidden(self, field_id: str, settings: Mapping[str, Any] | None = None) -> str:
        return self.field(field_id, "hidden", settings)

    def datalist(self, settings: Mapping[str, Any]) -> str:
        return self.field(None, "datalist", settings)


__all__ = ["Form"]
