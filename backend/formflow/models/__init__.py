"""Models package - re-exports for convenience."""

from backend.formflow.models.drafts import Draft, DraftStatus, Submission, SubmissionStatus
from backend.formflow.models.forms import FieldSpec, FieldType, FormDefinition
from backend.formflow.models.notifications import (
    NotificationKind,
    NotificationMessage,
    NotificationReceipt,
    RenewalData,
    StatusData,
)
from backend.formflow.models.validation import (
    CheckResult,
    ValidationRecord,
    ValidationStatus,
    derive_overall_status,
)

__all__ = [
    "CheckResult",
    "Draft",
    "DraftStatus",
    "FieldSpec",
    "FieldType",
    "FormDefinition",
    "NotificationKind",
    "NotificationMessage",
    "NotificationReceipt",
    "RenewalData",
    "StatusData",
    "Submission",
    "SubmissionStatus",
    "ValidationRecord",
    "ValidationStatus",
    "derive_overall_status",
]
