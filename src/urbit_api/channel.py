from __future__ import annotations

import secrets
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx

from .errors import ChannelError
from .logging import get_logger

if TYPE_CHECKING:
    from .interface import ShipInterface

logger = get_logger(__name__)

CHANNEL_PATH = "/~/channel"

# the ship only creates a channel once it receives an action on it
_OPEN_APP = "hood"
_OPEN_MARK = "helm-hi"
_OPEN_TEXT = "Opening Airlock"


def new_channel_uid(
    *,
    clock: Callable[[], float] = time.time,
    token_hex: Callable[[int], str] = secrets.token_hex,
) -> str:
    return f"{int(clock())}-{token_hex(3)}"


class Channel:
    """Command traffic over an Eyre channel borrowed from a ``ShipInterface``.

    Only pokes and channel deletion are sent from here; subscribing to the
    event stream is left to the caller.
    """

    def __init__(self, ship: ShipInterface, uid: str) -> None:
        self.ship = ship
        self.uid = uid
        self.url = f"{ship.url}{CHANNEL_PATH}/{uid}"
        self.message_id_count = 1

    @classmethod
    def open(cls, ship: ShipInterface, uid: str | None = None) -> Channel:
        channel = cls(ship, uid or new_channel_uid())
        resp = channel.poke(_OPEN_APP, _OPEN_MARK, _OPEN_TEXT)
        if not resp.is_success:
            logger.debug(
                "channel.open_failed", url=channel.url, status=resp.status_code
            )
            raise ChannelError(
                f"ship refused to open channel {channel.uid} "
                f"(status {resp.status_code})"
            )
        logger.debug("channel.opened", url=channel.url, ship=ship.identity)
        return channel

    def _next_id(self) -> int:
        message_id = self.message_id_count
        self.message_id_count += 1
        return message_id

    def send_actions(self, actions: list[dict[str, Any]]) -> httpx.Response:
        return self.ship.send_put_request(self.url, actions)

    def poke(self, app: str, mark: str, json: Any) -> httpx.Response:
        action = {
            "id": self._next_id(),
            "action": "poke",
            "ship": self.ship.ship_name,
            "app": app,
            "mark": mark,
            "json": json,
        }
        return self.send_actions([action])

    def delete_channel(self) -> httpx.Response:
        action = {"id": self._next_id(), "action": "delete"}
        resp = self.send_actions([action])
        logger.debug("channel.deleted", url=self.url, status=resp.status_code)
        return resp
