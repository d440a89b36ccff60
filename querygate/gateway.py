from __future__ import annotations

import logging
import time
from typing import Any, Optional

from .audit import CorrelationAdapter, new_correlation_id
from .classify import classify
from .db.errors import database_error_message, is_database_error
from .db.pool import StatementPool
from .envelope import to_envelope
from .errors import InvalidArgumentsError
from .metrics import Outcome, observe_execution
from .models import ExecutionRequest, ExecutionResult, Failure, FailureKind, Success
from .registry import Operation, lookup

logger = logging.getLogger(__name__)


class CommandGateway:
    """
    Routes one SQL statement per call to the pool, enforcing the statement
    class each operation allows.

    The gateway keeps no state between calls; the injected pool is the only
    shared resource. It does not retry: a failed statement is reported once.

    Outcomes of execute():
    - Success: rows for run_sql_query, ``{success, message, result}`` for
      mutating operations, where ``result`` is the pool's metadata as-is.
    - Failure, protocol: unknown operation, invalid arguments, or a statement
      outside the operation's class. The pool is never touched.
    - Failure, operational: the database rejected the statement.
    - Any other exception propagates unmodified.

    Usage:
        gateway = CommandGateway(ConnectionPool.from_config(config))
        result = await gateway.execute(ExecutionRequest("run_sql_query", {"query": "SELECT 1"}))
    """

    def __init__(
        self,
        pool: StatementPool,
        *,
        error_label: str = "MySQL",
        audit_logger: Optional[logging.Logger] = None,
    ) -> None:
        self.pool = pool
        self.error_label = error_label
        self._audit_logger = audit_logger or logger

    async def execute(self, request: ExecutionRequest) -> ExecutionResult:
        start_time = time.monotonic()
        log = CorrelationAdapter(self._audit_logger, new_correlation_id())
        log.info("Processing request: %s", request.operation_name)

        operation = lookup(request.operation_name)
        metric_label = operation.name if operation is not None else "unknown"
        outcome = Outcome.FAULT

        try:
            result = await self._execute(request, operation, log)
            if isinstance(result, Success):
                outcome = Outcome.SUCCESS
            elif result.is_operational:
                outcome = Outcome.DATABASE_ERROR
            else:
                outcome = Outcome.REJECTED
            return result
        finally:
            observe_execution(
                operation=metric_label,
                outcome=outcome,
                latency_s=time.monotonic() - start_time,
                pool_in_use=lambda: self.pool.in_use,
            )

    async def call(self, operation_name: str, arguments: Any) -> dict[str, Any]:
        """
        Execute and render the response envelope.

        Raises:
            ProtocolError: For unknown operations, invalid arguments or a
                statement class mismatch
        """
        result = await self.execute(ExecutionRequest(operation_name, arguments))
        return to_envelope(result)

    async def _execute(
        self,
        request: ExecutionRequest,
        operation: Optional[Operation],
        log: CorrelationAdapter,
    ) -> ExecutionResult:
        if operation is None:
            return self._reject(
                log,
                Failure(FailureKind.UNKNOWN_OPERATION, f"Unknown tool: {request.operation_name}"),
            )

        try:
            query = request.query()
        except InvalidArgumentsError as exc:
            return self._reject(log, Failure.from_exception(exc))

        if classify(query) != operation.allowed_class:
            return self._reject(
                log,
                Failure(
                    FailureKind.STATEMENT_CLASS_MISMATCH,
                    f"Only {operation.verb} queries are allowed with {operation.name} tool.",
                ),
            )

        log.info("Executing %s query: %s", operation.verb, query)
        try:
            if operation.is_read:
                payload: Any = await self.pool.fetch_all(query)
            else:
                metadata = await self.pool.execute(query)
                payload = {
                    "success": True,
                    "message": operation.success_message,
                    "result": metadata,
                }
        except Exception as exc:
            if not is_database_error(exc):
                log.exception("Unexpected failure in %s", operation.name)
                raise
            message = f"{self.error_label} error: {database_error_message(exc)}"
            log.error("Query error: %s", message)
            return Failure(FailureKind.DATABASE_ERROR, message)

        log.info("%s executed successfully", operation.name)
        return Success(payload)

    @staticmethod
    def _reject(log: CorrelationAdapter, failure: Failure) -> Failure:
        log.warning("Rejected (%s): %s", failure.kind.value, failure.message)
        return failure
