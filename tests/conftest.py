"""Shared test fixtures for the imge_uploader test suite."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from imge_uploader.config import SETTINGS_KEY, ImgeConfig
from imge_uploader.host import LocalHost
from imge_uploader.models import BYTES_PER_MB, ImageRecord
from imge_uploader.transport import ImgeTransport

Responder = Callable[[httpx.Request], httpx.Response]


def _ok_body(url: str = "https://im.ge/x.png") -> dict:
    return {"status_code": 200, "status_txt": "OK", "image": {"url": url}}


def _json_responder(*bodies: dict, status: int = 200) -> Responder:
    """Reply with *bodies* in order, repeating the last one."""
    queue = list(bodies)

    def respond(request: httpx.Request) -> httpx.Response:
        body = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(status, json=body)

    return respond


class RecordingHandler:
    """httpx.MockTransport handler that records every request it sees."""

    def __init__(self, responder: Responder):
        self._responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def ok_body() -> Callable[..., dict]:
    """Factory for a successful im.ge response body (default URL https://im.ge/x.png)."""
    return _ok_body


@pytest.fixture
def json_responder() -> Callable[..., Responder]:
    """Factory for MockTransport responders replying with fixed JSON bodies."""
    return _json_responder


@pytest.fixture
def make_image() -> Callable[..., ImageRecord]:
    """Factory for ImageRecords of a given size in megabytes."""

    def _make(
        size_mb: float = 0.01,
        file_name: str = "x.png",
        extension: str | None = "png",
    ) -> ImageRecord:
        return ImageRecord(
            buffer=b"\x00" * int(size_mb * BYTES_PER_MB),
            file_name=file_name,
            extension=extension,
        )

    return _make


@pytest.fixture
def config() -> ImgeConfig:
    """Default test configuration with a dummy key."""
    return ImgeConfig(api_key="test-key-1234")


@pytest.fixture
def settings() -> dict:
    return {SETTINGS_KEY: {"apiKey": "test-key-1234", "imageMaxSize": "5"}}


@pytest.fixture
def host(settings: dict) -> LocalHost:
    """LocalHost with valid settings and a mock logger."""
    return LocalHost(settings=settings, log=MagicMock())


@pytest.fixture
def make_transport(config: ImgeConfig):
    """Build an ImgeTransport whose HTTP calls go to a RecordingHandler."""

    def _make(responder: Responder | None = None) -> tuple[ImgeTransport, RecordingHandler]:
        handler = RecordingHandler(responder or _json_responder(_ok_body()))
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ImgeTransport(config, client=client), handler

    return _make
