from collections.abc import Callable

import httpx
import pytest

from services.upstream import Forwarder

BACKEND_URL = "http://backend:8080"


class RecordingLogger:
    """In-memory RequestLogger for tests."""

    def __init__(self):
        self.forwards = []
        self.responses = []
        self.errors = []

    def log_forward(self, method, target_url, headers):
        self.forwards.append((method, target_url, headers))

    def log_response(self, method, target_url, status):
        self.responses.append((method, target_url, status))

    def log_error(self, method, target_url, message):
        self.errors.append((method, target_url, message))


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def backend():
    """Mock backend that records every request it receives."""

    class Backend:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.reply: Callable[[httpx.Request], httpx.Response] = lambda _req: httpx.Response(
                200, json={"ok": True}
            )

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.reply(request)

        @property
        def transport(self) -> httpx.MockTransport:
            return httpx.MockTransport(self.handler)

        @property
        def last(self) -> httpx.Request:
            return self.requests[-1]

    return Backend()


@pytest.fixture
async def forwarder(backend, logger):
    async with httpx.AsyncClient(transport=backend.transport) as client:
        yield Forwarder(client, BACKEND_URL, "/api", logger)
