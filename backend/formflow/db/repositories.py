"""Storage protocol interfaces for the two persistence tiers."""

from collections.abc import Iterator
from typing import Any, Protocol

DRAFT_KEY_PREFIX = "form_draft_"
VALIDATION_HISTORY_KEY_PREFIX = "validation_history_"

DRAFTS_COLLECTION = "drafts"
SUBMISSIONS_COLLECTION = "forms"
VALIDATIONS_COLLECTION = "validations"


def draft_key(draft_id: str) -> str:
    """Local cache key owning one draft."""
    return f"{DRAFT_KEY_PREFIX}{draft_id}"


def validation_history_key(user_id: str) -> str:
    """Local cache key owning one user's cached validation history."""
    return f"{VALIDATION_HISTORY_KEY_PREFIX}{user_id}"


class LocalCache(Protocol):
    """Session-scoped string key/value storage.

    Synchronous and expected to be always available; contents do not survive
    a process restart.
    """

    def get(self, key: str) -> str | None:
        """Get value for key.

        Args:
            key: Namespaced cache key

        Returns:
            Stored string or None if absent
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...

    def scan(self, prefix: str) -> Iterator[str]:
        """Iterate over keys starting with prefix."""
        ...


class DocumentStore(Protocol):
    """Durable remote document store keyed by collection name + document id.

    Every method may raise on transport or backend failure.
    """

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Get document by id.

        Args:
            collection: Collection name
            doc_id: Document id

        Returns:
            Document or None if not found
        """
        ...

    async def put(self, collection: str, doc_id: str, document: dict[str, Any]) -> None:
        """Create or replace a document."""
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document; missing documents are ignored."""
        ...

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
        """Query documents whose top-level ``field`` equals ``value``.

        Args:
            collection: Collection name
            field: Top-level field to match
            value: Value to match
            order_by: Optional top-level numeric field to sort by
            descending: Sort direction
            limit: Maximum number of results

        Returns:
            Matching documents
        """
        ...
