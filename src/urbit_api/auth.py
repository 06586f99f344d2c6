"""Parsing of the session cookie handed out by ``/~/login``.

A ship answers a successful login with a header such as::

    set-cookie: urbauth-~zod=0v4.txxxx; Path=/; Max-Age=604800

The cookie name is ``urbauth-`` followed by the ship's identity (``~zod``).
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import FailedToLogin

COOKIE_PREFIX = "urbauth-"
# prefix plus the "~" sigil; shorter names are rejected
MIN_COOKIE_NAME_LENGTH = len(COOKIE_PREFIX) + 1


@dataclass(frozen=True, slots=True)
class SessionCookie:
    raw: bytes
    text: str
    identity: str

    @property
    def ship_name(self) -> str:
        """Identity without the ``~`` sigil, as channel actions expect it."""
        return self.identity[1:]


def _decode_header_value(raw: bytes) -> str:
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError:
        raise FailedToLogin("session cookie is not valid header text") from None
    if any(ch != "\t" and not (" " <= ch <= "~") for ch in text):
        raise FailedToLogin("session cookie is not valid header text")
    return text


def parse_session_cookie(raw: bytes) -> SessionCookie:
    text = _decode_header_value(raw)
    name, sep, _ = text.partition("=")
    if not sep:
        raise FailedToLogin("session cookie has no '=' delimiter")
    if len(name) < MIN_COOKIE_NAME_LENGTH:
        raise FailedToLogin("session cookie name is shorter than its prefix")
    return SessionCookie(
        raw=raw,
        text=text,
        identity=name[len(COOKIE_PREFIX) :],
    )
