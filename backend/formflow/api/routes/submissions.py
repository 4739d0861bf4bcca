"""Submission endpoints - list, get, external review status change."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.formflow.api.auth import get_current_user_id, get_reviewer_id
from backend.formflow.api.deps import Services, get_services
from backend.formflow.errors import SubmissionNotFound
from backend.formflow.models.drafts import Submission, SubmissionStatus

router = APIRouter(prefix="/submissions", tags=["submissions"])


class UpdateStatusRequest(BaseModel):
    """Request body for PATCH /submissions/{submission_id}/status."""

    status: SubmissionStatus
    notify_email: str | None = None


@router.get("", response_model=list[Submission])
async def list_submissions(
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> list[Submission]:
    """List the current user's submissions."""
    return await services.finalizer.list_for_user(user_id)


@router.get("/{submission_id}", response_model=Submission)
async def get_submission(
    submission_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> Submission:
    """Get one of the current user's submissions."""
    submission = await services.finalizer.get(submission_id)

    # Enforce ownership
    if submission.user_id != user_id:
        raise SubmissionNotFound(f"submission {submission_id} not found for user {user_id}")

    return submission


@router.patch("/{submission_id}/status", response_model=Submission)
async def update_submission_status(
    submission_id: str,
    request: UpdateStatusRequest,
    reviewer_id: Annotated[str, Depends(get_reviewer_id)],
    services: Annotated[Services, Depends(get_services)],
) -> Submission:
    """Record an external review decision (approve or reject).

    Only callers listed in ``REVIEWER_IDS`` may decide; everyone else gets 403.
    """
    return await services.finalizer.update_status(
        submission_id, request.status, reviewer_id, notify_email=request.notify_email
    )
