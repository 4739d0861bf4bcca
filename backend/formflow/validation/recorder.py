"""Write-once history of document-quality checks."""

import json
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from backend.formflow.db.repositories import (
    VALIDATIONS_COLLECTION,
    DocumentStore,
    LocalCache,
    validation_history_key,
)
from backend.formflow.errors import PersistenceError
from backend.formflow.models.validation import CheckResult, ValidationRecord, derive_overall_status
from backend.formflow.utils.instants import utc_now
from backend.formflow.utils.logging import StructuredLifecycleLogger


def _new_record_id() -> str:
    return uuid.uuid4().hex


class ValidationRecorder:
    """Stores validation outcomes per user.

    Records are never updated; a re-check produces a new record. Unlike draft
    autosave, a failed write is always surfaced to the caller.
    """

    def __init__(
        self,
        store: DocumentStore,
        cache: LocalCache,
        *,
        history_limit: int = 10,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_record_id,
        structured_logger: StructuredLifecycleLogger | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._history_limit = history_limit
        self._clock = clock
        self._id_factory = id_factory
        self._logger = structured_logger or StructuredLifecycleLogger()

    async def record(
        self,
        user_id: str,
        document_type: str,
        file_name: str,
        file_size: int,
        results: Sequence[CheckResult | Mapping[str, Any]],
    ) -> str:
        """Persist the outcome of a document check run.

        Returns:
            Record id

        Raises:
            PersistenceError: If the record could not be stored.
        """
        checks = tuple(
            r if isinstance(r, CheckResult) else CheckResult.model_validate(r) for r in results
        )
        record = ValidationRecord(
            id=self._id_factory(),
            user_id=user_id,
            document_type=document_type,
            file_name=file_name,
            file_size=file_size,
            results=checks,
            overall_status=derive_overall_status(checks),
            timestamp=self._clock(),
        )

        try:
            await self._store.put(VALIDATIONS_COLLECTION, record.id, record.to_document())
        except Exception as e:
            self._logger.log_storage_failure("validation_put", record.id, e, surfaced=True)
            raise PersistenceError(f"could not store validation record {record.id}") from e

        key = validation_history_key(user_id)
        try:
            self._cache.delete(key)
        except Exception as e:
            self._logger.log_storage_failure("cache_invalidate", key, e, surfaced=False)

        self._logger.log_transition(
            "validation", record.id, user_id, "record", "success",
            overall_status=record.overall_status.value,
        )
        return record.id

    async def history(self, user_id: str) -> list[ValidationRecord]:
        """List a user's validation records, most recent first.

        Falls back to the last cached history when the remote store is
        unreachable.

        Raises:
            PersistenceError: If the store is unreachable and nothing is cached.
        """
        key = validation_history_key(user_id)

        try:
            documents = await self._store.query(
                VALIDATIONS_COLLECTION,
                field="user_id",
                value=user_id,
                order_by="timestamp",
                descending=True,
                limit=self._history_limit,
            )
        except Exception as e:
            cached = self._cached_history(key)
            if cached is None:
                self._logger.log_storage_failure("validation_query", key, e, surfaced=True)
                raise PersistenceError(f"validation history unavailable for {user_id}") from e
            self._logger.log_storage_failure("validation_query", key, e, surfaced=False)
            return [ValidationRecord.model_validate(d) for d in json.loads(cached)]

        records = [ValidationRecord.model_validate(d) for d in documents]

        try:
            self._cache.set(key, json.dumps([r.to_document() for r in records]))
        except Exception as cache_error:
            self._logger.log_storage_failure("cache_fill", key, cache_error, surfaced=False)

        return records

    def _cached_history(self, key: str) -> str | None:
        try:
            return self._cache.get(key)
        except Exception as cache_error:
            self._logger.log_storage_failure("cache_get", key, cache_error, surfaced=False)
            return None
