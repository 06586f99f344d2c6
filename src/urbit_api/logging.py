from __future__ import annotations

import errno
import logging
import re
import sys
from typing import Any

import structlog


LOGIN_BODY_RE = re.compile(r"password=[^\s&]+")
SESSION_COOKIE_RE = re.compile(r"(urbauth-~[a-z-]+)=[^;\s]+")


def redact_secret_processor(_, __, event_dict):
    """Processor to redact ship codes and session cookies from log messages."""
    message = str(event_dict.get("event", ""))

    redacted = LOGIN_BODY_RE.sub("password=[REDACTED]", message)
    redacted = SESSION_COOKIE_RE.sub(r"\1=[REDACTED]", redacted)

    if redacted != message:
        event_dict["event"] = redacted

    return event_dict


class SafeStreamHandler(logging.StreamHandler):
    def handleError(self, record: logging.LogRecord) -> None:
        exc = sys.exc_info()[1]
        if isinstance(exc, BrokenPipeError) or (
            isinstance(exc, OSError) and exc.errno == errno.EPIPE
        ):
            try:
                self.stream.close()
            except OSError:
                pass
            return
        super().handleError(record)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


def setup_logging(*, debug: bool = False) -> None:
    """Configure structlog with console output and secret redaction."""

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_secret_processor,
            structlog.dev.ConsoleRenderer(colors=True)
            if debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    stdlib_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        format="%(message)s",
        level=stdlib_level,
        handlers=[SafeStreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
