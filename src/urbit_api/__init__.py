from __future__ import annotations

from .channel import Channel
from .errors import ChannelError, FailedToLogin, NetworkError, UrbitAPIError
from .interface import ShipInterface

__version__ = "0.1.0"

__all__ = [
    "Channel",
    "ChannelError",
    "FailedToLogin",
    "NetworkError",
    "ShipInterface",
    "UrbitAPIError",
    "__version__",
]
