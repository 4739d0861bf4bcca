"""In-memory implementations of the storage protocols."""

import copy
from collections.abc import Iterator
from typing import Any


class StoreUnavailableError(ConnectionError):
    """Raised by the in-memory document store while switched offline."""


class InMemoryLocalCache:
    """In-memory implementation of LocalCache."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        """Get value for key."""
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        """Store value under key."""
        self._items[key] = value

    def delete(self, key: str) -> None:
        """Remove key if present."""
        self._items.pop(key, None)

    def scan(self, prefix: str) -> Iterator[str]:
        """Iterate over keys starting with prefix."""
        # Snapshot so callers may write while iterating
        return iter([k for k in self._items if k.startswith(prefix)])

    def clear(self) -> None:
        """Drop every entry (simulates a lost session)."""
        self._items.clear()


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore.

    ``online`` can be flipped to simulate an unreachable remote store.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.online = True

    def _check_online(self) -> None:
        if not self.online:
            raise StoreUnavailableError("document store is offline")

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Get document by id."""
        self._check_online()
        document = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def put(self, collection: str, doc_id: str, document: dict[str, Any]) -> None:
        """Create or replace a document."""
        self._check_online()
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(document)

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document."""
        self._check_online()
        self._collections.get(collection, {}).pop(doc_id, None)

    async def query(
        self,
        collection: str,
        *,
        field: str,
        value: Any,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Query documents by top-level field."""
        self._check_online()
        results = [
            copy.deepcopy(doc)
            for doc in self._collections.get(collection, {}).values()
            if doc.get(field) == value
        ]

        if order_by is not None:
            results.sort(key=lambda d: d.get(order_by) or 0, reverse=descending)

        return results[:limit] if limit is not None else results
