"""Structured logging for draft and submission lifecycle events."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredLifecycleLogger:
    """Structured logger for lifecycle transitions and storage outcomes."""

    def log_transition(
        self,
        entity: str,
        entity_id: str,
        user_id: str,
        event: str,
        outcome: str,
        **fields: Any,
    ) -> None:
        """Log a lifecycle event with structured data."""
        log_data: dict[str, Any] = {
            "entity": entity,
            "entity_id": entity_id,
            "user_id": user_id,
            "event": event,
            "outcome": outcome,
        }
        log_data.update(fields)

        log_msg = f"{entity} {event}: {entity_id} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_storage_failure(
        self, operation: str, key: str, error: BaseException, *, surfaced: bool
    ) -> None:
        """Log a storage tier failure and whether it reached the caller."""
        log_data: dict[str, Any] = {
            "operation": operation,
            "key": key,
            "error_reason": f"{type(error).__name__}: {error}",
            "surfaced": surfaced,
        }

        log_msg = f"Storage failure: {operation} {key}"

        if surfaced:
            logger.error(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
