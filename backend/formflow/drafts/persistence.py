"""Two-tier draft persistence: local cache first, remote store mirrored.

The local cache is the source of truth for the current session. The remote
document store is a backup and cross-device sync target; writes to it run in
the background under the ``BestEffortMirror`` policy and never fail the
caller's operation.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import pydantic

from backend.formflow.db.repositories import (
    DRAFT_KEY_PREFIX,
    DRAFTS_COLLECTION,
    DocumentStore,
    LocalCache,
    draft_key,
)
from backend.formflow.errors import PersistenceError
from backend.formflow.models.drafts import Draft
from backend.formflow.utils.logging import StructuredLifecycleLogger
from backend.formflow.utils.metrics import PrometheusLifecycleMetrics

logger = logging.getLogger(__name__)


class BestEffortMirror:
    """Background remote-write policy that logs and counts failures.

    Writes for the same key run in the order they were scheduled, so the
    remote tier converges on the last local write. A failed write is recorded
    in ``failure_count`` / ``last_failure`` and never propagated.
    """

    def __init__(
        self,
        structured_logger: StructuredLifecycleLogger | None = None,
        metrics: PrometheusLifecycleMetrics | None = None,
    ) -> None:
        self._logger = structured_logger or StructuredLifecycleLogger()
        self._metrics = metrics or PrometheusLifecycleMetrics()
        self._pending: set[asyncio.Task[None]] = set()
        self._tails: dict[str, asyncio.Task[None]] = {}
        self.failure_count = 0
        self.last_failure: BaseException | None = None

    @property
    def pending(self) -> int:
        """Number of mirror writes not yet finished."""
        return len(self._pending)

    def schedule(
        self, operation: str, key: str, write: Callable[[], Awaitable[None]]
    ) -> None:
        """Schedule a remote write without waiting for it."""
        previous = self._tails.get(key)
        task = asyncio.get_running_loop().create_task(
            self._run(operation, key, write, previous)
        )
        self._pending.add(task)
        self._tails[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))

    def _forget(self, key: str, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if self._tails.get(key) is task:
            del self._tails[key]

    async def _run(
        self,
        operation: str,
        key: str,
        write: Callable[[], Awaitable[None]],
        previous: asyncio.Task[None] | None,
    ) -> None:
        if previous is not None:
            # _run never raises, so this only orders the writes
            await asyncio.wait([previous])
        try:
            await write()
        except Exception as e:
            self.failure_count += 1
            self.last_failure = e
            self._metrics.inc_mirror_failure(operation)
            self._logger.log_storage_failure(operation, key, e, surfaced=False)

    async def write_now(self, key: str, write: Callable[[], Awaitable[None]]) -> None:
        """Run a remote write now, after any queued writes for the same key.

        Unlike scheduled writes, failures propagate to the caller.
        """
        previous = self._tails.get(key)

        async def ordered() -> None:
            if previous is not None:
                await asyncio.wait([previous])
            await write()

        task = asyncio.get_running_loop().create_task(ordered())
        self._tails[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))
        await task

    async def drain(self) -> None:
        """Wait for every scheduled mirror write to finish."""
        while self._pending:
            await asyncio.wait(list(self._pending))


class DraftPersistence:
    """Persistence adapter for drafts over a local cache and a remote store."""

    def __init__(
        self,
        cache: LocalCache,
        remote: DocumentStore,
        *,
        mirror: BestEffortMirror | None = None,
        list_limit: int = 20,
        structured_logger: StructuredLifecycleLogger | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            cache: Local (session) tier
            remote: Remote (durable) tier
            mirror: Policy used for background remote writes
            list_limit: Cap on drafts returned by list_by_user
            structured_logger: Logger for storage failures
        """
        self._cache = cache
        self._remote = remote
        self._logger = structured_logger or StructuredLifecycleLogger()
        self.mirror = mirror or BestEffortMirror(self._logger)
        self._list_limit = list_limit

    async def put(self, draft_id: str, draft: Draft) -> None:
        """Write a draft locally, then mirror it to the remote store.

        Raises:
            PersistenceError: If both tiers reject the write, or the local
                tier can neither store nor evict its copy.
        """
        if draft.id != draft_id:
            raise ValueError(f"draft id mismatch: {draft_id!r} != {draft.id!r}")

        key = draft_key(draft_id)
        document = draft.to_document()

        try:
            self._cache.set(key, json.dumps(document))
        except Exception as cache_error:
            self._logger.log_storage_failure("cache_put", key, cache_error, surfaced=False)
            await self._write_through(key, draft_id, document)
            return

        self.mirror.schedule(
            "put", key, lambda: self._remote.put(DRAFTS_COLLECTION, draft_id, document)
        )

    async def _write_through(self, key: str, draft_id: str, document: dict[str, Any]) -> None:
        try:
            await self.mirror.write_now(
                key, lambda: self._remote.put(DRAFTS_COLLECTION, draft_id, document)
            )
        except Exception as remote_error:
            self._logger.log_storage_failure("put", key, remote_error, surfaced=True)
            raise PersistenceError(f"put failed on both tiers for {key}") from remote_error

        # Reads must not be served the older local copy
        try:
            self._cache.delete(key)
        except Exception as evict_error:
            self._logger.log_storage_failure("cache_evict", key, evict_error, surfaced=True)
            raise PersistenceError(f"stale local copy of {key} could not be evicted") from evict_error

    async def get(self, draft_id: str) -> Draft | None:
        """Get a draft, preferring the local cache.

        Raises:
            PersistenceError: If the draft is not cached and the remote store
                is unreachable.
        """
        key = draft_key(draft_id)

        try:
            cached = self._cache.get(key)
        except Exception as cache_error:
            self._logger.log_storage_failure("cache_get", key, cache_error, surfaced=False)
            cached = None

        if cached is not None:
            return Draft.model_validate_json(cached)

        try:
            document = await self._remote.get(DRAFTS_COLLECTION, draft_id)
        except Exception as remote_error:
            self._logger.log_storage_failure("remote_get", key, remote_error, surfaced=True)
            raise PersistenceError(f"draft {draft_id} unavailable in both tiers") from remote_error

        if document is None:
            return None

        draft = Draft.model_validate(document)

        # Read-through so the session keeps working from the local tier
        try:
            self._cache.set(key, json.dumps(draft.to_document()))
        except Exception as cache_error:
            self._logger.log_storage_failure("cache_fill", key, cache_error, surfaced=False)

        return draft

    async def list_by_user(self, user_id: str) -> list[Draft]:
        """List locally cached drafts for a user, most recently modified first.

        Raises:
            PersistenceError: If the local tier cannot be read.
        """
        try:
            entries = [(key, self._cache.get(key)) for key in self._cache.scan(DRAFT_KEY_PREFIX)]
        except Exception as cache_error:
            self._logger.log_storage_failure("cache_scan", DRAFT_KEY_PREFIX, cache_error, surfaced=True)
            raise PersistenceError(f"drafts of {user_id} could not be listed") from cache_error

        drafts: list[Draft] = []
        for key, raw in entries:
            if raw is None:
                continue
            try:
                draft = Draft.model_validate_json(raw)
            except pydantic.ValidationError:
                logger.warning("Skipping unreadable cached draft", extra={"structured": {"key": key}})
                continue
            if draft.user_id == user_id:
                drafts.append(draft)

        drafts.sort(key=lambda d: d.last_modified_at, reverse=True)
        return drafts[: self._list_limit]

    async def delete(self, draft_id: str) -> None:
        """Delete a draft locally and mirror the delete remotely.

        Raises:
            PersistenceError: If the local copy could not be removed.
        """
        key = draft_key(draft_id)
        try:
            self._cache.delete(key)
        except Exception as cache_error:
            self._logger.log_storage_failure("cache_delete", key, cache_error, surfaced=True)
            raise PersistenceError(f"draft {draft_id} could not be deleted") from cache_error

        self.mirror.schedule("delete", key, lambda: self._remote.delete(DRAFTS_COLLECTION, draft_id))
