"""Tests for submission finalization and review transitions."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from backend.formflow.db.inmemory import InMemoryDocumentStore
from backend.formflow.db.repositories import SUBMISSIONS_COLLECTION
from backend.formflow.errors import (
    InvalidTransition,
    PersistenceError,
    SubmissionNotFound,
    ValidationError,
)
from backend.formflow.models.drafts import Draft, DraftStatus, SubmissionStatus
from backend.formflow.notifications.dispatcher import NotificationDispatcher
from backend.formflow.submissions.finalizer import SubmissionFinalizer

SUBMITTED_AT = datetime(2025, 1, 15, 9, 30, tzinfo=UTC)


def submitted_draft(user_id: str = "u1") -> Draft:
    return Draft(
        id="draft_1",
        user_id=user_id,
        form_id="pan-card-registration",
        form_version="2024.2",
        data={"pan_field_1": "Ram"},
        completed_field_ids={"pan_field_1"},
        status=DraftStatus.submitted,
        created_at=datetime(2025, 1, 15, 9, 0, tzinfo=UTC),
        last_modified_at=SUBMITTED_AT,
        submitted_at=SUBMITTED_AT,
    )


def notifying_finalizer(
    store: InMemoryDocumentStore, clock, requests: list[httpx.Request], status_code: int = 200
) -> tuple[SubmissionFinalizer, httpx.AsyncClient]:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    dispatcher = NotificationDispatcher("https://notify.example.test/send", client=client)
    return SubmissionFinalizer(store, dispatcher, clock=clock), client


@pytest.mark.asyncio
async def test_finalize_persists_submitted_snapshot(
    finalizer: SubmissionFinalizer, store: InMemoryDocumentStore
) -> None:
    """Test finalize stores a submitted record derived from the draft."""
    submission = await finalizer.finalize(submitted_draft())

    assert submission.id.startswith("sub_")
    assert submission.status == SubmissionStatus.submitted
    assert submission.form_type == "pan-card-registration"
    assert submission.draft_id == "draft_1"
    assert submission.reviewed_by is None
    assert await store.get(SUBMISSIONS_COLLECTION, submission.id) == submission.to_document()


@pytest.mark.asyncio
async def test_finalize_surfaces_store_failure(
    finalizer: SubmissionFinalizer, store: InMemoryDocumentStore
) -> None:
    """Test submission writes are never best effort."""
    store.online = False

    with pytest.raises(PersistenceError):
        await finalizer.finalize(submitted_draft())


@pytest.mark.asyncio
@pytest.mark.parametrize("outcome", [SubmissionStatus.approved, "rejected"])
async def test_review_outcomes_are_allowed(
    finalizer: SubmissionFinalizer, outcome: SubmissionStatus | str
) -> None:
    """Test submitted moves to approved or rejected."""
    submission = await finalizer.finalize(submitted_draft())

    updated = await finalizer.update_status(submission.id, outcome, actor="officer-7")

    assert updated.status == SubmissionStatus(outcome)
    assert updated.reviewed_by == "officer-7"
    assert updated.last_updated >= submission.last_updated
    assert await finalizer.get(submission.id) == updated


@pytest.mark.asyncio
@pytest.mark.parametrize("target", ["submitted", "draft", "approved"])
async def test_reviewed_submission_is_final(finalizer: SubmissionFinalizer, target: str) -> None:
    """Test no transition leaves approved."""
    submission = await finalizer.finalize(submitted_draft())
    approved = await finalizer.update_status(submission.id, "approved", actor="officer-7")

    with pytest.raises(InvalidTransition):
        await finalizer.update_status(submission.id, target, actor="officer-8")

    assert await finalizer.get(submission.id) == approved


@pytest.mark.asyncio
async def test_illegal_transitions_from_submitted(finalizer: SubmissionFinalizer) -> None:
    """Test submitted cannot go back to draft or to an unknown status."""
    submission = await finalizer.finalize(submitted_draft())

    with pytest.raises(InvalidTransition):
        await finalizer.update_status(submission.id, "draft", actor="officer-7")
    with pytest.raises(InvalidTransition):
        await finalizer.update_status(submission.id, "archived", actor="officer-7")


@pytest.mark.asyncio
async def test_unknown_submission(finalizer: SubmissionFinalizer) -> None:
    """Test lookups and transitions on a missing submission."""
    with pytest.raises(SubmissionNotFound):
        await finalizer.get("sub_missing")
    with pytest.raises(SubmissionNotFound):
        await finalizer.update_status("sub_missing", "approved", actor="officer-7")


@pytest.mark.asyncio
async def test_list_for_user(finalizer: SubmissionFinalizer) -> None:
    """Test a user's submissions are listed newest first."""
    first = await finalizer.finalize(submitted_draft())
    second = await finalizer.finalize(submitted_draft())
    await finalizer.finalize(submitted_draft(user_id="u2"))
    await finalizer.update_status(first.id, "rejected", actor="officer-7")

    submissions = await finalizer.list_for_user("u1")

    assert [s.id for s in submissions] == [first.id, second.id]


@pytest.mark.asyncio
async def test_discard_removes_submission(finalizer: SubmissionFinalizer) -> None:
    """Test a discarded submission is gone."""
    submission = await finalizer.finalize(submitted_draft())

    await finalizer.discard(submission.id)

    with pytest.raises(SubmissionNotFound):
        await finalizer.get(submission.id)


@pytest.mark.asyncio
async def test_finalize_sends_received_notification(
    store: InMemoryDocumentStore, clock
) -> None:
    """Test a notify address receives a "received" status update."""
    requests: list[httpx.Request] = []
    finalizer, client = notifying_finalizer(store, clock, requests)

    submission = await finalizer.finalize(submitted_draft(), notify_email="ram@example.com")

    assert len(requests) == 1
    body = json.loads(requests[0].content)
    assert body["to"] == "ram@example.com"
    assert body["type"] == "status"
    assert body["data"]["status"] == "received"
    assert body["data"]["applicationId"] == submission.id
    await client.aclose()


@pytest.mark.asyncio
async def test_bad_notify_email_persists_nothing(store: InMemoryDocumentStore, clock) -> None:
    """Test a malformed notify address fails before the submission is written."""
    requests: list[httpx.Request] = []
    finalizer, client = notifying_finalizer(store, clock, requests)

    with pytest.raises(ValidationError):
        await finalizer.finalize(submitted_draft(), notify_email="not-an-email")

    assert await store.query(SUBMISSIONS_COLLECTION, field="user_id", value="u1") == []
    assert requests == []
    await client.aclose()


@pytest.mark.asyncio
async def test_delivery_failure_does_not_undo_transition(
    store: InMemoryDocumentStore, clock
) -> None:
    """Test an unreachable endpoint leaves the committed status in place."""
    requests: list[httpx.Request] = []
    finalizer, client = notifying_finalizer(store, clock, requests, status_code=503)
    submission = await finalizer.finalize(submitted_draft())

    updated = await finalizer.update_status(
        submission.id, "approved", actor="officer-7", notify_email="ram@example.com"
    )

    assert len(requests) == 1
    assert updated.status == SubmissionStatus.approved
    assert (await finalizer.get(submission.id)).status == SubmissionStatus.approved
    await client.aclose()


@pytest.mark.asyncio
async def test_failed_commit_discards_and_sends_nothing(
    store: InMemoryDocumentStore, clock
) -> None:
    """Test a failing follow-up write removes the submission before any notification."""
    requests: list[httpx.Request] = []
    finalizer, client = notifying_finalizer(store, clock, requests)

    async def commit(_) -> None:
        raise PersistenceError("draft write failed")

    with pytest.raises(PersistenceError):
        await finalizer.finalize(submitted_draft(), notify_email="ram@example.com", commit=commit)

    assert await store.query(SUBMISSIONS_COLLECTION, field="user_id", value="u1") == []
    assert requests == []
    await client.aclose()
