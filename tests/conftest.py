from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Callable, Mapping

import pytest
from hypothesis import HealthCheck, settings

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from simpleforms import Form, MappingSource  # noqa: E402
from simpleforms.constants import CSRF_TOKEN_KEY, IS_SUBMITTED_KEY  # noqa: E402


def submission(values: Mapping[str, Any], *, token: str | None = None) -> dict[str, Any]:
    """Return ``values`` with the submission marker (and token) a rendered form would post."""

    data = dict(values)
    data[IS_SUBMITTED_KEY] = "1"
    if token is not None:
        data[CSRF_TOKEN_KEY] = token
    return data


@pytest.fixture
def submitted_form() -> Callable[..., Form]:
    """Build a form whose source holds a completed POST submission."""

    def factory(values: Mapping[str, Any], **settings_: Any) -> Form:
        form_id = settings_.setdefault("id", "form_1")
        token = settings_.get("token")
        payload = submission(values, token=token if isinstance(token, str) else None)
        return Form(settings_, source=MappingSource(post={form_id: payload}))

    return factory


def pytest_configure(config: pytest.Config) -> None:
    """Declare pytest markers and configure Hypothesis defaults."""

    for marker, description in [
        ("integration", "Tests that drive forms through a FastAPI application."),
    ]:
        config.addinivalue_line("markers", f"{marker}: {description}")

    suppress_checks = (HealthCheck.filter_too_much,)
    settings.register_profile("dev", settings(max_examples=25, deadline=500, suppress_health_check=suppress_checks))
    settings.register_profile("ci", settings(max_examples=75, deadline=750, print_blob=True))
    settings.load_profile("ci" if os.getenv("CI") else "dev")
