"""Draft and submission models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from backend.formflow.drafts.completion import score
from backend.formflow.utils.instants import coerce_instant, to_epoch_ms


class DraftStatus(str, Enum):
    """Draft lifecycle state."""

    draft = "draft"
    submitted = "submitted"


class SubmissionStatus(str, Enum):
    """Submission lifecycle state."""

    draft = "draft"
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"


class Draft(BaseModel):
    """A user's in-progress instance of a government form.

    Timestamps are stored as epoch milliseconds and accepted in any instant
    shape on load. ``completion_percentage`` is always recomputed from
    ``data`` and ``completed_field_ids`` on load, never trusted as stored.
    """

    id: str
    user_id: str
    form_id: str
    form_version: str
    data: dict[str, Any] = Field(default_factory=dict)
    completed_field_ids: set[str] = Field(default_factory=set)
    completion_percentage: int = Field(0, ge=0, le=100)
    current_section: str | None = None
    status: DraftStatus = DraftStatus.draft
    created_at: datetime
    last_modified_at: datetime
    submitted_at: datetime | None = None

    @field_validator("created_at", "last_modified_at", "submitted_at", mode="before")
    @classmethod
    def _normalise_instant(cls, value: Any) -> datetime | None:
        return coerce_instant(value)

    @model_validator(mode="after")
    def _check_invariants(self) -> "Draft":
        if (self.submitted_at is not None) != (self.status == DraftStatus.submitted):
            raise ValueError("submitted_at must be set if and only if status is submitted")
        self.completion_percentage = score(self.data, self.completed_field_ids)
        return self

    @field_serializer("created_at", "last_modified_at", "submitted_at")
    def _serialise_instant(self, value: datetime | None) -> int | None:
        return None if value is None else to_epoch_ms(value)

    @field_serializer("completed_field_ids")
    def _serialise_completed(self, value: set[str]) -> list[str]:
        return sorted(value)

    @property
    def is_submitted(self) -> bool:
        return self.status == DraftStatus.submitted

    def to_document(self) -> dict[str, Any]:
        """JSON-serialisable document for either storage tier."""
        return self.model_dump(mode="json")


class Submission(BaseModel):
    """Finalized record created once a draft is submitted."""

    id: str
    user_id: str
    form_type: str
    draft_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    status: SubmissionStatus
    timestamp: datetime
    last_updated: datetime
    reviewed_by: str | None = None

    @field_validator("timestamp", "last_updated", mode="before")
    @classmethod
    def _normalise_instant(cls, value: Any) -> datetime | None:
        return coerce_instant(value)

    @field_serializer("timestamp", "last_updated")
    def _serialise_instant(self, value: datetime) -> int:
        return to_epoch_ms(value)

    def to_document(self) -> dict[str, Any]:
        """JSON-serialisable document for the remote store."""
        return self.model_dump(mode="json")
