"""Tests for in-memory storage tiers."""

import pytest

from backend.formflow.db.inmemory import (
    InMemoryDocumentStore,
    InMemoryLocalCache,
    StoreUnavailableError,
)
from backend.formflow.db.repositories import draft_key, validation_history_key


def test_cache_keys_are_namespaced() -> None:
    """Test key families for drafts and validation history."""
    assert draft_key("abc") == "form_draft_abc"
    assert validation_history_key("u1") == "validation_history_u1"


def test_cache_set_get_delete_scan() -> None:
    """Test basic local cache operations."""
    cache = InMemoryLocalCache()
    cache.set("form_draft_1", "a")
    cache.set("form_draft_2", "b")
    cache.set("validation_history_u1", "c")

    assert cache.get("form_draft_1") == "a"
    assert sorted(cache.scan("form_draft_")) == ["form_draft_1", "form_draft_2"]

    cache.delete("form_draft_1")
    cache.delete("missing")

    assert cache.get("form_draft_1") is None
    assert list(cache.scan("form_draft_")) == ["form_draft_2"]


@pytest.mark.asyncio
async def test_document_store_crud() -> None:
    """Test put/get/delete and copy isolation."""
    store = InMemoryDocumentStore()
    document = {"user_id": "u1", "data": {"name": "Ram"}}

    await store.put("drafts", "d1", document)
    document["data"]["name"] = "changed"

    loaded = await store.get("drafts", "d1")
    assert loaded == {"user_id": "u1", "data": {"name": "Ram"}}

    await store.delete("drafts", "d1")
    assert await store.get("drafts", "d1") is None


@pytest.mark.asyncio
async def test_document_store_query_orders_and_limits() -> None:
    """Test query by field with ordering and limit."""
    store = InMemoryDocumentStore()
    for i, ts in enumerate([300, 100, 200]):
        await store.put("validations", f"v{i}", {"user_id": "u1", "timestamp": ts})
    await store.put("validations", "other", {"user_id": "u2", "timestamp": 999})

    results = await store.query(
        "validations", field="user_id", value="u1", order_by="timestamp", descending=True, limit=2
    )

    assert [r["timestamp"] for r in results] == [300, 200]


@pytest.mark.asyncio
async def test_offline_store_raises() -> None:
    """Test the offline switch simulates an unreachable remote."""
    store = InMemoryDocumentStore()
    store.online = False

    with pytest.raises(StoreUnavailableError):
        await store.get("drafts", "d1")
    with pytest.raises(StoreUnavailableError):
        await store.put("drafts", "d1", {})
