"""Build forms from FastAPI/Starlette requests."""
from __future__ import annotations

from typing import Any, Mapping

from fastapi import Request

from ..config import FormConfig
from ..form import Form
from ..sources import StarletteSource
from ..validation import Validator

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


async def read_submission(request: Request) -> StarletteSource:
    """Parse the request body (when present) and query string into a submission source."""

    form_data = await request.form() if request.method in _BODY_METHODS else None
    return StarletteSource.from_multidicts(form=form_data, query=request.query_params)


async def form_from_request(
    request: Request,
    settings: FormConfig | Mapping[str, Any] | None = None,
    *,
    validator: Validator | None = None,
) -> Form:
    """Return a :class:`Form` populated from ``request``.

    Reading the body is the only asynchronous step; everything after it,
    including rendering, is synchronous.
    """

    source = await read_submission(request)
    return Form(settings, source=source, validator=validator)


__all__ = ["form_from_request", "read_submission"]
