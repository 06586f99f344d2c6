from __future__ import annotations


class UrbitAPIError(Exception):
    pass


class FailedToLogin(UrbitAPIError):
    """Login was rejected or the ship answered with an unusable session.

    Bad codes, unexpected status codes and malformed ``set-cookie`` values all
    land here; ``reason`` only carries a hint for diagnostics.
    """

    def __init__(self, reason: str = "failed to login") -> None:
        super().__init__(reason)
        self.reason = reason


class NetworkError(UrbitAPIError):
    def __init__(self, error: Exception) -> None:
        super().__init__(f"{error.__class__.__name__}: {error}")
        self.error = error


class ChannelError(UrbitAPIError):
    pass
