# test/conftest.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
import requests
from fastapi.testclient import TestClient

from apps.api import deps
from apps.api.main import app
from apps.api.services.job_runner import JobRunner
from apps.api.services.jobs_service import JobsService
from libs.adapters.dedup_inmemory import RecentMessageCache
from libs.security.signatures import SignatureVerifier
from libs.settings.config import JobsSettings

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

_ENV_KEYS = [
    "APP_ENV", "QSTASH_TOKEN", "QSTASH_URL", "QSTASH_TIMEOUT_SECONDS", "CALLBACK_BASE_URL",
    "JOB_RUNNER_PATH", "QSTASH_CURRENT_SIGNING_KEY", "QSTASH_NEXT_SIGNING_KEY",
    "DEDUP_TTL_SECONDS", "CRON_SECRET", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def make_settings(**overrides: Any) -> JobsSettings:
    values: Dict[str, Any] = {
        "APP_ENV": "production",
        "CALLBACK_BASE_URL": "https://hr.example.com",
        "QSTASH_CURRENT_SIGNING_KEY": "current-key",
        "QSTASH_NEXT_SIGNING_KEY": "next-key",
    }
    values.update(overrides)
    return JobsSettings(_env_file=None, **values)


class FakeResponse:
    def __init__(self, status_code: int = 200, json_body: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._json = json_body
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("no json")
        return self._json


class FakeSession:
    """Stands in for requests.Session; records every post()."""

    def __init__(self, response: Optional[FakeResponse] = None, exc: Optional[Exception] = None) -> None:
        self.response = response or FakeResponse(200, {"messageId": "msg_123"})
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.response


class SpyHandler:
    def __init__(self, result: Any = None, exc: Optional[Exception] = None) -> None:
        self.result = result if result is not None else {"success": True, "spy": True}
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, payload: Dict[str, Any]) -> Any:
        self.calls.append(payload)
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def build_client():
    """
    Wire the app with explicit components (settings/runner/queue/dedup) per test.
    """

    def _build(
        settings: Optional[JobsSettings] = None,
        *,
        runner: Optional[JobRunner] = None,
        queue=None,
        dedup: Optional[RecentMessageCache] = None,
    ) -> TestClient:
        settings = settings or make_settings()
        runner = runner or JobRunner()
        dedup = dedup if dedup is not None else RecentMessageCache(settings.DEDUP_TTL_SECONDS)
        verifier = SignatureVerifier(settings.signing_keys(), development=settings.is_development)
        service = JobsService(settings, queue, clock=lambda: FIXED_NOW)

        app.dependency_overrides[deps.get_settings] = lambda: settings
        app.dependency_overrides[deps.get_verifier] = lambda: verifier
        app.dependency_overrides[deps.get_runner] = lambda: runner
        app.dependency_overrides[deps.get_dedup_cache] = lambda: dedup
        app.dependency_overrides[deps.get_jobs_service] = lambda: service
        return TestClient(app)

    yield _build
    app.dependency_overrides.clear()
