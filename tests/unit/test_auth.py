"""Unit tests for the auth dependency."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from backend.formflow.api.auth import DEFAULT_USER_ID, get_current_user_id, get_reviewer_id


@pytest.mark.asyncio
async def test_no_header_uses_default_user() -> None:
    """Test that a missing auth header falls back to the development user."""
    assert await get_current_user_id(authorization=None) == DEFAULT_USER_ID


@pytest.mark.asyncio
async def test_bearer_token_is_user_id() -> None:
    """Test the bearer token is taken as the opaque user id."""
    assert await get_current_user_id(authorization="Bearer citizen-42") == "citizen-42"


@pytest.mark.asyncio
async def test_invalid_bearer_format() -> None:
    """Test a non-bearer header raises 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user_id(authorization="Basic dXNlcjpwYXNz")

    assert exc_info.value.status_code == 401
    assert "Invalid authorization header format" in exc_info.value.detail


@pytest.mark.asyncio
async def test_empty_bearer_token() -> None:
    """Test a bearer header without a token raises 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user_id(authorization="Bearer    ")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_configured_reviewer_passes() -> None:
    """Test a caller in the reviewer set is returned as the actor."""
    services = SimpleNamespace(reviewer_ids=frozenset({"officer-7"}))

    assert await get_reviewer_id(user_id="officer-7", services=services) == "officer-7"


@pytest.mark.asyncio
async def test_non_reviewer_is_forbidden() -> None:
    """Test any other caller, including the dev default, raises 403."""
    services = SimpleNamespace(reviewer_ids=frozenset({"officer-7"}))

    for user_id in ("citizen-42", DEFAULT_USER_ID):
        with pytest.raises(HTTPException) as exc_info:
            await get_reviewer_id(user_id=user_id, services=services)
        assert exc_info.value.status_code == 403
