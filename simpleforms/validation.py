"""Validator contract consumed by the form pipeline and a small rule-based implementation."""
from __future__ import annotations

import re
from typing import Any, Callable, Mapping, Protocol, Sequence, runtime_checkable

from .core.paths import get_path

Rule = Callable[[Any, Mapping[str, Any]], "str | None"]


@runtime_checkable
class Validator(Protocol):
    """Validation engine contract.

    ``set_data`` replaces the validation input, ``validate`` evaluates every
    rule and ``get_errors`` returns ``field -> [message, ...]`` for invalid
    fields only.
    """

    def set_data(self, data: Mapping[str, Any]) -> None: ...

    def validate(self) -> Mapping[str, bool]: ...

    def get_errors(self) -> Mapping[str, Sequence[str]]: ...


class RuleValidator:
    """Evaluate per-field rules against the current data.

    Rules are callables receiving ``(value, data)`` and returning an error
    message or ``None``, or names of the rules in :data:`NAMED_RULES`, with
    arguments after a colon (``"min_length:3"``).
    """

    def __init__(self, rules: Mapping[str, Sequence[Rule | str] | Rule | str] | None = None) -> None:
        self._rules: dict[str, list[Rule]] = {}
        self._data: dict[str, Any] = {}
        self._errors: dict[str, list[str]] | None = None
        if rules:
            self.add_rules(rules)

    def add_rules(self, rules: Mapping[str, Sequence[Rule | str] | Rule | str]) -> None:
        for field_id, field_rules in rules.items():
            if isinstance(field_rules, str) or callable(field_rules):
                field_rules = [field_rules]
            bucket = self._rules.setdefault(str(field_id), [])
            bucket.extend(_resolve_rule(rule) for rule in field_rules)
        self._errors = None

    def set_data(self, data: Mapping[str, Any]) -> None:
        self._data = dict(data)
        self._errors = None

    def validate(self) -> dict[str, bool]:
        errors: dict[str, list[str]] = {}
        results: dict[str, bool] = {}
        for field_id, rules in self._rules.items():
            value = get_path(self._data, field_id)
            messages = [message for message in (rule(value, self._data) for rule in rules) if message]
            if messages:
                errors[field_id] = messages
            results[field_id] = not messages
        self._errors = errors
        return results

    def get_errors(self) -> dict[str, list[str]]:
        errors = self._errors
        if errors is None:
            self.validate()
            errors = self._errors or {}
        return {field_id: list(messages) for field_id, messages in errors.items()}


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def required(message: str = "This field is required.") -> Rule:
    def rule(value: Any, data: Mapping[str, Any]) -> str | None:
        return message if _is_empty(value) else None

    return rule


def min_length(length: int | str, message: str | None = None) -> Rule:
    limit = int(length)
    text = message or f"Enter at least {limit} characters."

    def rule(value: Any, data: Mapping[str, Any]) -> str | None:
        if _is_empty(value):
            return None
        return text if len(str(value)) < limit else None

    return rule


def max_length(length: int | str, message: str | None = None) -> Rule:
    limit = int(length)
    text = message or f"Enter at most {limit} characters."

    def rule(value: Any, data: Mapping[str, Any]) -> str | None:
        if _is_empty(value):
            return None
        return text if len(str(value)) > limit else None

    return rule


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def email(message: str = "Enter a valid email address.") -> Rule:
    def rule(value: Any, data: Mapping[str, Any]) -> str | None:
        if _is_empty(value):
            return None
        return None if _EMAIL_PATTERN.match(str(value)) else message

    return rule


def matches(pattern: str, message: str = "Enter a valid value.") -> Rule:
    compiled = re.compile(pattern)

    def rule(value: Any, data: Mapping[str, Any]) -> str | None:
        if _is_empty(value):
            return None
        return None if compiled.fullmatch(str(value)) else message

    return rule


def equals_field(other: str, message: str | None = None) -> Rule:
    text = message or f"Must match {other}."

    def rule(value: Any, data: Mapping[str, Any]) -> str | None:
        return None if value == get_path(data, other) else text

    return rule


NAMED_RULES: Mapping[str, Callable[..., Rule]] = {
    "required": required,
    "min_length": min_length,
    "max_length": max_length,
    "email": email,
    "matches": matches,
    "equals_field": equals_field,
}


def _resolve_rule(rule: Rule | str) -> Rule:
    if callable(rule):
        return rule
    name, _, raw_args = str(rule).partition(":")
    factory = NAMED_RULES.get(name.strip())
    if factory is None:
        raise ValueError(f"Unknown validation rule '{name}'")
    args = [arg for arg in raw_args.split(",") if arg] if raw_args else []
    return factory(*args)


__all__ = [
    "NAMED_RULES",
    "Rule",
    "RuleValidator",
    "Validator",
    "email",
    "equals_field",
    "matches",
    "max_length",
    "min_length",
    "required",
]
