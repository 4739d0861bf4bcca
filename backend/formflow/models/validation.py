"""Document validation records."""

from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from backend.formflow.utils.instants import coerce_instant, to_epoch_ms


class ValidationStatus(str, Enum):
    """Overall outcome of a document check run."""

    pending = "pending"
    completed = "completed"
    failed = "failed"


class CheckResult(BaseModel):
    """Outcome of a single document-quality rule."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    check_name: str = Field(..., min_length=1)
    passed: bool
    message: str = ""


class ValidationRecord(BaseModel):
    """Append-only record of a document-quality check run."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    document_type: str
    file_name: str
    file_size: int = Field(..., ge=0)
    results: tuple[CheckResult, ...] = ()
    overall_status: ValidationStatus
    timestamp: datetime

    @field_validator("timestamp", mode="before")
    @classmethod
    def _normalise_instant(cls, value: Any) -> datetime | None:
        return coerce_instant(value)

    @field_serializer("timestamp")
    def _serialise_instant(self, value: datetime) -> int:
        return to_epoch_ms(value)

    def to_document(self) -> dict[str, Any]:
        """JSON-serialisable document for the remote store."""
        return self.model_dump(mode="json")


def derive_overall_status(results: Sequence[CheckResult]) -> ValidationStatus:
    """``failed`` if any check failed, otherwise ``completed``."""
    if any(not r.passed for r in results):
        return ValidationStatus.failed
    return ValidationStatus.completed
