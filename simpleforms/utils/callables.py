"""Resolution of ``module:attribute`` references used in configuration files."""
from __future__ import annotations

from importlib import import_module
from typing import Any, Callable


class CallableReferenceError(ValueError):
    """Raised when a callable reference cannot be parsed or imported."""


def split_reference(reference: str) -> tuple[str, str]:
    """Split ``reference`` into ``(module, attribute)``.

    Both ``package.module:attr`` and ``package.module.attr`` spellings are
    accepted; surrounding whitespace is ignored.
    """

    trimmed = reference.strip()
    if not trimmed:
        raise CallableReferenceError("Callable reference must not be empty")
    if ":" in trimmed:
        module_part, attr_part = trimmed.split(":", 1)
    elif "." in trimmed:
        module_part, attr_part = trimmed.rsplit(".", 1)
    else:
        raise CallableReferenceError(
            f"Callable reference '{reference}' must separate module and attribute with ':' or '.'"
        )
    module_name = module_part.strip()
    attr_name = attr_part.strip()
    if not module_name or not attr_name:
        raise CallableReferenceError(
            f"Callable reference '{reference}' must include both module and attribute names"
        )
    return module_name, attr_name


def load_callable_reference(reference: str | Callable[..., Any]) -> Callable[..., Any]:
    """Import and return the callable named by ``reference``; callables pass through."""

    if callable(reference):
        return reference
    module_name, attr_name = split_reference(str(reference))
    try:
        module = import_module(module_name)
    except ModuleNotFoundError as error:
        raise CallableReferenceError(f"Module '{module_name}' could not be imported") from error
    try:
        target = getattr(module, attr_name)
    except AttributeError as error:
        raise CallableReferenceError(
            f"Callable '{attr_name}' not found in '{module_name}'"
        ) from error
    if not callable(target):
        raise CallableReferenceError(f"Resolved object '{reference}' is not callable")
    return target


__all__ = ["CallableReferenceError", "load_callable_reference", "split_reference"]
