"""Validation history endpoints - POST /validations, GET /validations."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from backend.formflow.api.auth import get_current_user_id
from backend.formflow.api.deps import Services, get_services
from backend.formflow.models.validation import CheckResult, ValidationRecord

router = APIRouter(prefix="/validations", tags=["validations"])


class RecordValidationRequest(BaseModel):
    """Request body for POST /validations."""

    document_type: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1)
    file_size: int = Field(..., ge=0)
    results: list[CheckResult] = Field(default_factory=list)


class RecordValidationResponse(BaseModel):
    """Response for POST /validations."""

    id: str


@router.post("", response_model=RecordValidationResponse, status_code=status.HTTP_201_CREATED)
async def record_validation(
    request: RecordValidationRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> RecordValidationResponse:
    """Store the outcome of a document check run."""
    record_id = await services.recorder.record(
        user_id, request.document_type, request.file_name, request.file_size, request.results
    )
    return RecordValidationResponse(id=record_id)


@router.get("", response_model=list[ValidationRecord], response_model_by_alias=False)
async def validation_history(
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> list[ValidationRecord]:
    """List the current user's validation records, most recent first."""
    return await services.recorder.history(user_id)
