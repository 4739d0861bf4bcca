"""Tests for the Redis-backed local cache."""

from unittest.mock import MagicMock

from backend.formflow.db.redis_cache import RedisLocalCache


def test_redis_cache_prefixes_keys() -> None:
    """Test that every operation is namespaced."""
    client = MagicMock()
    client.get.return_value = "payload"
    cache = RedisLocalCache(client, namespace="ff")

    cache.set("form_draft_1", "payload")
    value = cache.get("form_draft_1")
    cache.delete("form_draft_1")

    client.set.assert_called_once_with("ff:form_draft_1", "payload")
    client.get.assert_called_once_with("ff:form_draft_1")
    client.delete.assert_called_once_with("ff:form_draft_1")
    assert value == "payload"


def test_redis_cache_decodes_bytes() -> None:
    """Test byte responses are decoded when the client does not decode."""
    client = MagicMock()
    client.get.return_value = b"payload"
    cache = RedisLocalCache(client)

    assert cache.get("k") == "payload"


def test_redis_cache_scan_strips_namespace() -> None:
    """Test scan matches the prefix and returns un-namespaced keys."""
    client = MagicMock()
    client.scan_iter.return_value = iter([b"formflow:form_draft_1", "formflow:form_draft_2"])
    cache = RedisLocalCache(client)

    keys = list(cache.scan("form_draft_"))

    client.scan_iter.assert_called_once_with(match="formflow:form_draft_*")
    assert keys == ["form_draft_1", "form_draft_2"]
