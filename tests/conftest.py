from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import httpx
import pytest
import structlog
import structlog.testing

SHIP_URL = "http://ship.test:8080"
SHIP_CODE = "lidlut-tabwed-pillex-ridrup"
SESSION_COOKIE = "urbauth-~zod=0v4.txxxx; Path=/; Max-Age=604800"


@dataclass
class FakeShip:
    """Answers ``/~/login`` and records every request it sees."""

    url: str = SHIP_URL
    code: str = SHIP_CODE
    set_cookie: str | None = SESSION_COOKIE
    login_status: int = 204
    put_status: int = 204
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/~/login":
            if request.content != f"password={self.code}".encode():
                return httpx.Response(400, request=request)
            headers = []
            if self.set_cookie is not None:
                headers.append(("set-cookie", self.set_cookie))
            return httpx.Response(self.login_status, headers=headers, request=request)
        return httpx.Response(self.put_status, request=request)

    @property
    def puts(self) -> list[httpx.Request]:
        return [req for req in self.requests if req.method == "PUT"]


@pytest.fixture
def fake_ship() -> FakeShip:
    return FakeShip()


@pytest.fixture
def ship_client(fake_ship: FakeShip) -> Iterator[httpx.Client]:
    client = httpx.Client(transport=httpx.MockTransport(fake_ship.handler))
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def make_client() -> Iterator[Callable[..., httpx.Client]]:
    clients: list[httpx.Client] = []

    def _factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _factory
    for client in clients:
        client.close()


@pytest.fixture
def log_events(monkeypatch) -> Iterator[list[dict]]:
    from urbit_api import interface

    structlog.reset_defaults()
    # earlier setup_logging calls may have cached the module logger
    fresh = structlog.get_logger(interface.__name__)
    monkeypatch.setattr(interface, "logger", fresh)
    with structlog.testing.capture_logs() as events:
        yield events
