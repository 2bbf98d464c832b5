"""Shared fixtures: a stubbed CountriesDB API behind httpx.MockTransport."""

import json
from typing import Any

import httpx
import pytest

from countriesdb_validator import Validator
from countriesdb_validator.config import get_settings

API_KEY = "test-private-key"
BASE_URL = "https://countriesdb.test"


class StubAPI:
    """Answers every request with a canned response and records the calls."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {"valid": True}
        self.error: Exception | None = None

    def respond(self, body: Any, status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code

    def fail_with(self, error: Exception) -> None:
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (str, bytes)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def api() -> StubAPI:
    return StubAPI()


@pytest.fixture
def validator(api: StubAPI) -> Validator:
    client = httpx.Client(transport=httpx.MockTransport(api.handler))
    yield Validator(API_KEY, BASE_URL, http_client=client)
    client.close()


@pytest.fixture(autouse=True)
def _clear_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Isolate tests from the host environment and cached settings."""
    for name in ("COUNTRIESDB_PRIVATE_KEY", "COUNTRIESDB_API_URL", "COUNTRIESDB_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
