"""Draft lifecycle: create, autosave, submit.

States are ``draft`` and ``submitted``; ``submitted`` is terminal for a draft.
Review outcomes (approved / rejected) apply to the resulting Submission.
The model assumes a single writer per draft: concurrent autosaves for the
same draft resolve by last write wins, with no merge.
"""

import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from backend.formflow.catalog.forms import FormCatalog
from backend.formflow.drafts.completion import score
from backend.formflow.drafts.persistence import DraftPersistence
from backend.formflow.errors import DraftNotFound, FormNotFound, InvalidState, PersistenceError
from backend.formflow.models.drafts import Draft, DraftStatus, Submission
from backend.formflow.submissions.finalizer import SubmissionFinalizer
from backend.formflow.utils.instants import utc_now
from backend.formflow.utils.logging import StructuredLifecycleLogger
from backend.formflow.utils.metrics import PrometheusLifecycleMetrics

SUBMIT_FAILED_MESSAGE = "We could not save your submission. Please try again."


def _new_draft_id() -> str:
    return f"draft_{uuid.uuid4().hex}"


class DraftManager:
    """Owns the draft state machine."""

    def __init__(
        self,
        persistence: DraftPersistence,
        finalizer: SubmissionFinalizer,
        *,
        catalog: FormCatalog | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_draft_id,
        structured_logger: StructuredLifecycleLogger | None = None,
        metrics: PrometheusLifecycleMetrics | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            persistence: Two-tier draft storage
            finalizer: Receives drafts at submission
            catalog: Optional catalog used to check form ids on create
            clock: Source of "now"
            id_factory: Draft id generator
            structured_logger: Lifecycle logger
            metrics: Metrics sink
        """
        self._persistence = persistence
        self._finalizer = finalizer
        self._catalog = catalog
        self._clock = clock
        self._id_factory = id_factory
        self._logger = structured_logger or StructuredLifecycleLogger()
        self._metrics = metrics or PrometheusLifecycleMetrics()

    async def create(
        self,
        user_id: str,
        form_id: str,
        form_version: str = "",
        initial_data: Mapping[str, Any] | None = None,
    ) -> Draft:
        """Start a new draft for a user.

        Raises:
            FormNotFound: If a catalog is configured and does not know form_id.
            PersistenceError: If neither storage tier accepts the write.
        """
        if self._catalog is not None:
            definition = await self._catalog.get_by_id(form_id)
            if definition is None:
                raise FormNotFound(f"form {form_id} not found")
            form_version = form_version or definition.version

        now = self._clock()
        data = dict(initial_data or {})
        draft = Draft(
            id=self._id_factory(),
            user_id=user_id,
            form_id=form_id,
            form_version=form_version,
            data=data,
            completed_field_ids=set(),
            completion_percentage=0,
            status=DraftStatus.draft,
            created_at=now,
            last_modified_at=now,
        )

        await self._persistence.put(draft.id, draft)

        self._metrics.inc_transition("create")
        self._logger.log_transition("draft", draft.id, user_id, "create", "success", form_id=form_id)
        return draft

    async def autosave(
        self,
        draft_id: str,
        data: Mapping[str, Any],
        completed_field_ids: Iterable[str],
        current_section: str | None = None,
    ) -> Draft:
        """Replace a draft's data and recompute its completion.

        Raises:
            DraftNotFound: If no draft exists for draft_id.
            InvalidState: If the draft was already submitted.
        """
        draft = await self._load_editable(draft_id, "autosave")

        data = dict(data)
        completed = set(completed_field_ids)
        updated = draft.model_copy(
            update={
                "data": data,
                "completed_field_ids": completed,
                "completion_percentage": score(data, completed),
                "current_section": current_section,
                "last_modified_at": self._next_modified(draft),
            }
        )

        await self._persistence.put(draft_id, updated)

        self._metrics.inc_transition("autosave")
        self._logger.log_transition(
            "draft", draft_id, draft.user_id, "autosave", "success",
            completion_percentage=updated.completion_percentage,
        )
        return updated

    async def submit(self, draft_id: str, notify_email: str | None = None) -> Submission:
        """Submit a draft and hand its snapshot to the finalizer.

        The submission record is written first, then the draft. If the draft's
        own transition fails to persist, the submission is discarded so no
        partial transition survives. The "received" notification only goes
        out once both writes are in.

        Raises:
            DraftNotFound: If no draft exists for draft_id.
            InvalidState: If the draft was already submitted.
            PersistenceError: If storage is unavailable; the draft stays in
                ``draft``.
        """
        draft = await self._load_editable(draft_id, "submit")

        now = self._next_modified(draft)
        submitted = draft.model_copy(
            update={
                "status": DraftStatus.submitted,
                "submitted_at": now,
                "last_modified_at": now,
            }
        )

        async def commit(_: Submission) -> None:
            await self._persistence.put(draft_id, submitted)

        try:
            submission = await self._finalizer.finalize(
                submitted, notify_email=notify_email, commit=commit
            )
        except PersistenceError as e:
            raise PersistenceError(str(e), user_message=SUBMIT_FAILED_MESSAGE) from e

        self._metrics.inc_transition("submit")
        self._logger.log_transition(
            "draft", draft_id, draft.user_id, "submit", "success", submission_id=submission.id
        )
        return submission

    async def get(self, draft_id: str) -> Draft:
        """Get a draft by id.

        Raises:
            DraftNotFound: If no draft exists for draft_id.
        """
        draft = await self._persistence.get(draft_id)
        if draft is None:
            raise DraftNotFound(f"draft {draft_id} not found")
        return draft

    async def list_for_user(self, user_id: str) -> list[Draft]:
        """List a user's drafts, most recently modified first."""
        return await self._persistence.list_by_user(user_id)

    async def _load_editable(self, draft_id: str, event: str) -> Draft:
        draft = await self.get(draft_id)

        if draft.is_submitted:
            self._logger.log_transition("draft", draft_id, draft.user_id, event, "rejected_submitted")
            raise InvalidState(f"draft {draft_id} is already submitted")

        return draft

    def _next_modified(self, draft: Draft) -> datetime:
        # last_modified_at never moves backwards, even if the clock does
        return max(self._clock(), draft.last_modified_at)
