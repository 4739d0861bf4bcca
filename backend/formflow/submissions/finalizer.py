"""Submission finalization and external review status changes."""

import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime

from backend.formflow.db.repositories import SUBMISSIONS_COLLECTION, DocumentStore
from backend.formflow.errors import (
    InvalidTransition,
    NotificationDeliveryError,
    PersistenceError,
    SubmissionNotFound,
)
from backend.formflow.models.drafts import Draft, Submission, SubmissionStatus
from backend.formflow.models.notifications import NotificationMessage, StatusData
from backend.formflow.notifications.dispatcher import NotificationDispatcher
from backend.formflow.utils.instants import utc_now
from backend.formflow.utils.logging import StructuredLifecycleLogger
from backend.formflow.utils.metrics import PrometheusLifecycleMetrics

ALLOWED_TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.submitted: frozenset({SubmissionStatus.approved, SubmissionStatus.rejected}),
}

# Wording the notification endpoint uses for each submission status
_NOTIFIED_STATUS = {
    SubmissionStatus.submitted: "received",
    SubmissionStatus.approved: "approved",
    SubmissionStatus.rejected: "rejected",
}


def _new_submission_id() -> str:
    return f"sub_{uuid.uuid4().hex}"


class SubmissionFinalizer:
    """Turns submitted drafts into durable Submission records.

    Every write here is business-critical: storage failures surface as
    ``PersistenceError``. Notifications are validated before the write and
    delivered after it; a delivery failure is logged and counted but does not
    undo a committed status change.
    """

    def __init__(
        self,
        store: DocumentStore,
        dispatcher: NotificationDispatcher | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_submission_id,
        structured_logger: StructuredLifecycleLogger | None = None,
        metrics: PrometheusLifecycleMetrics | None = None,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._clock = clock
        self._id_factory = id_factory
        self._logger = structured_logger or StructuredLifecycleLogger()
        self._metrics = metrics or PrometheusLifecycleMetrics()

    async def finalize(
        self,
        draft: Draft,
        notify_email: str | None = None,
        *,
        commit: Callable[[Submission], Awaitable[None]] | None = None,
    ) -> Submission:
        """Persist a Submission snapshot of a draft with status ``submitted``.

        ``commit`` runs after the submission is stored and before any
        notification goes out. If it raises, the submission is discarded and
        the error propagates, so nothing is announced for a submit that did
        not complete.

        Args:
            draft: Draft being submitted
            notify_email: Optional recipient of a "received" status update
            commit: Follow-up write that completes the submit

        Returns:
            The persisted submission

        Raises:
            ValidationError: If ``notify_email`` is malformed (nothing persisted).
            PersistenceError: If the submission could not be stored.
        """
        now = self._clock()
        submission = Submission(
            id=self._id_factory(),
            user_id=draft.user_id,
            form_type=draft.form_id,
            draft_id=draft.id,
            data=dict(draft.data),
            status=SubmissionStatus.submitted,
            timestamp=now,
            last_updated=now,
        )

        message = self._build_notification(submission, notify_email)
        await self._write(submission)

        if commit is not None:
            try:
                await commit(submission)
            except Exception:
                await self._discard_quietly(submission)
                raise

        self._metrics.inc_transition("finalize")
        self._logger.log_transition(
            "submission", submission.id, submission.user_id, "finalize", "success",
            draft_id=draft.id,
        )

        await self._deliver(submission, message)
        return submission

    async def update_status(
        self,
        submission_id: str,
        new_status: SubmissionStatus | str,
        actor: str,
        notify_email: str | None = None,
    ) -> Submission:
        """Apply an external review decision.

        Only ``submitted -> approved`` and ``submitted -> rejected`` are legal.

        Raises:
            SubmissionNotFound: If no submission has this id.
            InvalidTransition: For any other status change.
            ValidationError: If ``notify_email`` is malformed (nothing persisted).
            PersistenceError: If storage is unavailable.
        """
        try:
            new_status = SubmissionStatus(new_status)
        except ValueError as e:
            raise InvalidTransition(f"unknown submission status: {new_status!r}") from e

        current = await self.get(submission_id)

        if new_status not in ALLOWED_TRANSITIONS.get(current.status, frozenset()):
            raise InvalidTransition(
                f"submission {submission_id}: {current.status.value} -> {new_status.value} not allowed"
            )

        updated = current.model_copy(
            update={
                "status": new_status,
                "last_updated": max(self._clock(), current.last_updated),
                "reviewed_by": actor,
            }
        )

        message = self._build_notification(updated, notify_email)
        await self._write(updated)

        self._metrics.inc_transition(new_status.value)
        self._logger.log_transition(
            "submission", updated.id, updated.user_id, new_status.value, "success", actor=actor
        )

        await self._deliver(updated, message)
        return updated

    async def get(self, submission_id: str) -> Submission:
        """Get a submission by id.

        Raises:
            SubmissionNotFound: If no submission has this id.
            PersistenceError: If storage is unavailable.
        """
        try:
            document = await self._store.get(SUBMISSIONS_COLLECTION, submission_id)
        except Exception as e:
            raise PersistenceError(f"could not read submission {submission_id}") from e

        if document is None:
            raise SubmissionNotFound(f"submission {submission_id} not found")

        return Submission.model_validate(document)

    async def list_for_user(self, user_id: str, limit: int | None = None) -> list[Submission]:
        """List a user's submissions, most recently updated first."""
        try:
            documents = await self._store.query(
                SUBMISSIONS_COLLECTION,
                field="user_id",
                value=user_id,
                order_by="last_updated",
                descending=True,
                limit=limit,
            )
        except Exception as e:
            raise PersistenceError(f"could not list submissions for {user_id}") from e

        return [Submission.model_validate(d) for d in documents]

    async def discard(self, submission_id: str) -> None:
        """Remove a submission whose draft transition could not be committed."""
        try:
            await self._store.delete(SUBMISSIONS_COLLECTION, submission_id)
        except Exception as e:
            raise PersistenceError(f"could not discard submission {submission_id}") from e

    async def _discard_quietly(self, submission: Submission) -> None:
        try:
            await self.discard(submission.id)
        except PersistenceError as e:
            self._logger.log_storage_failure("submission_discard", submission.id, e, surfaced=False)

    async def _write(self, submission: Submission) -> None:
        try:
            await self._store.put(SUBMISSIONS_COLLECTION, submission.id, submission.to_document())
        except Exception as e:
            self._logger.log_storage_failure("submission_put", submission.id, e, surfaced=True)
            raise PersistenceError(f"could not store submission {submission.id}") from e

    def _build_notification(
        self, submission: Submission, notify_email: str | None
    ) -> NotificationMessage | None:
        if notify_email is None or self._dispatcher is None:
            return None

        return self._dispatcher.build_message(
            notify_email,
            "status",
            StatusData(
                service_name=submission.form_type,
                status=_NOTIFIED_STATUS[submission.status],
                application_id=submission.id,
                last_updated=submission.last_updated.isoformat(),
            ),
        )

    async def _deliver(self, submission: Submission, message: NotificationMessage | None) -> None:
        if message is None or self._dispatcher is None:
            return

        try:
            await self._dispatcher.send(message)
        except NotificationDeliveryError as e:
            self._logger.log_transition(
                "submission", submission.id, submission.user_id, "notify", "error",
                error_reason=str(e),
            )
