from __future__ import annotations

import json
from typing import Any, Callable

import pytest
import requests

from nomoredm.config import AppSettings
from nomoredm.http import HttpClient


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, raw: str | None = None):
        self.status_code = status_code
        if raw is not None:
            self.text = raw
        elif body is None:
            self.text = ""
        else:
            self.text = json.dumps(body)
        self.content = self.text.encode("utf-8")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """Records requests and answers them with a scripted handler."""

    def __init__(self, handler: Callable[[str, str, Any], FakeResponse] | None = None):
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False
        self.handler = handler or (lambda method, url, body: FakeResponse(200, body))

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "headers": headers or {}, "json": json, "timeout": timeout}
        )
        return self.handler(method, url, json)

    def close(self) -> None:
        self.closed = True


def raise_connection_error(method, url, body):
    raise requests.ConnectionError("connection refused")


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {
        "token": "T1",
        "base_url": "https://api.test/v9",
        "action_path_template": "/guilds/{tenant_id}/incident-actions",
        "action_method": "PUT",
        "auth_scheme": "Bearer",
        "protection_hours": 24,
        "interval_seconds": 43200.0,
        "dispatch_delay_seconds": 0.0,
        "timeout_seconds": 15,
        "run_on_start": False,
        "seed_tenant_ids": (),
        "log_level": "INFO",
    }
    values.update(overrides)
    return AppSettings(**values)


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def http_client(settings, session) -> HttpClient:
    return HttpClient(settings, session=session)
