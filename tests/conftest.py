"""Test fixtures for the fluent HTTP client."""

from typing import Callable

import httpx
import pytest

from fluent_http.config import Settings
from fluent_http.utils.logging import clear_correlation_id
from tests.helpers import RecordingTransport


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(_env_file=None, metrics_enabled=False)


@pytest.fixture(autouse=True)
def reset_correlation_id():
    """Keep correlation IDs from leaking between tests."""
    clear_correlation_id()
    yield
    clear_correlation_id()


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Build a recording transport answering with a fixed response."""

    def factory(
        status_code: int = 200,
        json=None,
        text: str | None = None,
        content: bytes | None = None,
        headers: dict | None = None,
    ) -> RecordingTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status_code, json=json, headers=headers)
            if text is not None:
                return httpx.Response(status_code, text=text, headers=headers)
            return httpx.Response(status_code, content=content or b"", headers=headers)

        return RecordingTransport(handler)

    return factory


@pytest.fixture
def echo_transport() -> RecordingTransport:
    """Transport echoing the request body back with 201 Created."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            201,
            content=request.content,
            headers={"Content-Type": request.headers.get("Content-Type", "application/json")},
        )

    return RecordingTransport(handler)


@pytest.fixture
def sample_pets() -> list[dict]:
    """Sample pet list as a JSON API returns it."""
    return [
        {"id": 1, "name": "Rex", "status": "available"},
        {"id": 2, "name": "Tom", "status": "sold"},
    ]


@pytest.fixture
def sample_paged_pets() -> list[dict]:
    """25 paginable items, the first reporting 97 total results."""
    return [
        {"id": i, "name": f"pet-{i}", "totalCount": 97 if i == 0 else None}
        for i in range(25)
    ]
