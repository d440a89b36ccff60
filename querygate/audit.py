from __future__ import annotations

import logging
import sys
import uuid
from typing import Any, MutableMapping


def new_correlation_id() -> str:
    """A fresh opaque token identifying one gateway call in the logs."""
    return str(uuid.uuid4())


class CorrelationAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that tags every line with a correlation id.

    Messages are prefixed with ``[<correlation id>]`` and the id is also
    attached to the record as ``correlation_id`` for structured handlers.

    Usage:
        log = CorrelationAdapter(logger, new_correlation_id())
        log.info("Processing request: %s", name)
    """

    def __init__(self, logger: logging.Logger, correlation_id: str) -> None:
        super().__init__(logger, {"correlation_id": correlation_id})
        self.correlation_id = correlation_id

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("correlation_id", self.correlation_id)
        kwargs["extra"] = extra
        return f"[{self.correlation_id}] {msg}", kwargs


def configure_logging(level: str = "INFO") -> None:
    """
    Route logs to stderr.

    stdout carries the stdio transport, so nothing may be logged there.
    """
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
