from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .registry import (
    GATEWAY_EXECUTION_LATENCY_SECONDS,
    GATEWAY_EXECUTIONS_TOTAL,
    POOL_CONNECTIONS_IN_USE,
)

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    SUCCESS = "success"
    DATABASE_ERROR = "database_error"
    REJECTED = "rejected"
    FAULT = "fault"


def observe_execution(
    operation: str,
    outcome: Outcome,
    latency_s: float,
    pool_in_use: Optional[Callable[[], int]] = None,
) -> None:
    """
    Record one gateway call.

    Metric failures are logged and suppressed so they never mask the call's
    own result or exception. `pool_in_use` is read inside that guard.
    """
    try:
        GATEWAY_EXECUTIONS_TOTAL.labels(operation=operation, outcome=outcome.value).inc()
        GATEWAY_EXECUTION_LATENCY_SECONDS.labels(operation=operation).observe(latency_s)
        if pool_in_use is not None:
            POOL_CONNECTIONS_IN_USE.set(pool_in_use())
    except Exception:
        logger.warning("Failed to record gateway metrics", exc_info=True)


__all__ = [
    "Outcome",
    "observe_execution",
    "GATEWAY_EXECUTIONS_TOTAL",
    "GATEWAY_EXECUTION_LATENCY_SECONDS",
    "POOL_CONNECTIONS_IN_USE",
]
