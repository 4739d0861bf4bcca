"""Notification envelope and payload models."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class NotificationKind(str, Enum):
    """Notification template kind understood by the messaging endpoint."""

    renewal = "renewal"
    status = "status"
    custom = "custom"


class RenewalData(BaseModel):
    """Payload for a document renewal reminder."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service_name: str
    due_date: str | None = None  # ISO date
    application_id: str | None = None
    office: str | None = None
    link: str | None = None
    notes: str | None = None


class StatusData(BaseModel):
    """Payload for an application status update."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service_name: str
    status: Literal["received", "under_review", "approved", "rejected", "ready_for_collection"]
    application_id: str | None = None
    last_updated: str | None = None  # ISO timestamp
    link: str | None = None
    office: str | None = None
    eta_days: int | None = None


class NotificationMessage(BaseModel):
    """Validated envelope posted to the notification endpoint."""

    to: str
    type: NotificationKind
    data: dict[str, Any] | None = None
    subject: str | None = None
    html: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Wire envelope: ``{to, type, data}`` or ``{to, type, subject, html}``."""
        return self.model_dump(mode="json", exclude_none=True)


class NotificationReceipt(BaseModel):
    """Result of a delivered notification."""

    to: str
    kind: NotificationKind
    status_code: int
    message_id: str | None = None
