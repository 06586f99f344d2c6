from __future__ import annotations

from typing import Any

import httpx
import msgspec

from .auth import SessionCookie, parse_session_cookie
from .channel import Channel
from .errors import FailedToLogin, NetworkError
from .logging import get_logger

logger = get_logger(__name__)

LOGIN_PATH = "/~/login"
_LOGIN_OK = 204

_json_encoder = msgspec.json.Encoder()
_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class ShipInterface:
    """An authenticated session with a single Urbit ship.

    Instances only come out of :meth:`login`; holding one means the ship
    accepted the code. The session cookie is replayed verbatim on every
    request and the HTTP client is reused for the life of the session.
    """

    def __init__(
        self,
        *,
        url: str,
        cookie: SessionCookie,
        client: httpx.Client,
        owns_client: bool,
    ) -> None:
        self._url = url
        self._cookie = cookie
        self._client = client
        self._owns_client = owns_client

    @classmethod
    def login(
        cls,
        url: str,
        code: str,
        *,
        client: httpx.Client | None = None,
        timeout_s: float | None = None,
    ) -> ShipInterface:
        """Log into the ship at ``url`` (``http://ip:port``) with its ``+code``."""
        owns_client = client is None
        if client is None:
            client = (
                httpx.Client()
                if timeout_s is None
                else httpx.Client(timeout=timeout_s)
            )
        try:
            cookie = cls._authenticate(client, url, code)
        except BaseException:
            if owns_client:
                client.close()
            raise
        logger.debug("ship.login.ok", url=url, ship=cookie.identity)
        return cls(url=url, cookie=cookie, client=client, owns_client=owns_client)

    @staticmethod
    def _authenticate(client: httpx.Client, url: str, code: str) -> SessionCookie:
        login_url = f"{url}{LOGIN_PATH}"
        logger.debug("ship.login", url=login_url)
        try:
            resp = client.post(login_url, content="password=" + code)
        except _TRANSPORT_ERRORS as e:
            logger.debug(
                "ship.login.network_error",
                url=login_url,
                error_type=e.__class__.__name__,
            )
            raise NetworkError(e) from e

        if resp.status_code != _LOGIN_OK:
            logger.debug("ship.login.failed", url=login_url, status=resp.status_code)
            raise FailedToLogin(f"login returned status {resp.status_code}")

        raw = _first_raw_header(resp, b"set-cookie")
        if raw is None:
            logger.debug("ship.login.failed", url=login_url, reason="no set-cookie")
            raise FailedToLogin("login response carried no set-cookie header")
        try:
            return parse_session_cookie(raw)
        except FailedToLogin:
            logger.debug(
                "ship.login.failed", url=login_url, reason="malformed set-cookie"
            )
            raise

    @property
    def url(self) -> str:
        return self._url

    @property
    def session_auth(self) -> bytes:
        return self._cookie.raw

    @property
    def identity(self) -> str:
        return self._cookie.identity

    @property
    def ship_name(self) -> str:
        return self._cookie.ship_name

    @property
    def client(self) -> httpx.Client:
        return self._client

    def send_put_request(self, url: str, body: Any) -> httpx.Response:
        """PUT ``body`` as JSON to ``url`` with the session cookie attached.

        The response is returned as is; its status is for the caller to judge.
        """
        content = _json_encoder.encode(body)
        logger.debug("ship.put", url=url, ship=self.identity)
        try:
            return self._client.put(
                url,
                content=content,
                headers={
                    "Cookie": self._cookie.raw,
                    "Content-Type": "application/json",
                },
            )
        except _TRANSPORT_ERRORS as e:
            logger.debug(
                "ship.put.network_error",
                url=url,
                error_type=e.__class__.__name__,
            )
            raise NetworkError(e) from e

    def create_channel(self) -> Channel:
        return Channel.open(self)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ShipInterface:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ShipInterface(url={self._url!r}, identity={self.identity!r})"


def _first_raw_header(resp: httpx.Response, name: bytes) -> bytes | None:
    for key, value in resp.headers.raw:
        if key.lower() == name:
            return value
    return None
