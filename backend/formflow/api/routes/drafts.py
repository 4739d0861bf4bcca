"""Draft endpoints - create, list, get, autosave, submit."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from backend.formflow.api.auth import get_current_user_id
from backend.formflow.api.deps import Services, get_services
from backend.formflow.errors import DraftNotFound
from backend.formflow.models.drafts import Draft, Submission

router = APIRouter(prefix="/drafts", tags=["drafts"])


class CreateDraftRequest(BaseModel):
    """Request body for POST /drafts."""

    form_id: str = Field(..., min_length=1)
    form_version: str = ""
    initial_data: dict[str, Any] = Field(default_factory=dict)


class AutosaveRequest(BaseModel):
    """Request body for PUT /drafts/{draft_id}."""

    data: dict[str, Any]
    completed_field_ids: list[str] = Field(default_factory=list)
    current_section: str | None = None


class SubmitRequest(BaseModel):
    """Request body for POST /drafts/{draft_id}/submit."""

    notify_email: str | None = None


async def _owned_draft(services: Services, draft_id: str, user_id: str) -> Draft:
    draft = await services.drafts.get(draft_id)

    # Enforce ownership
    if draft.user_id != user_id:
        raise DraftNotFound(f"draft {draft_id} not found for user {user_id}")

    return draft


@router.post("", response_model=Draft, status_code=status.HTTP_201_CREATED)
async def create_draft(
    request: CreateDraftRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> Draft:
    """Start a new draft of a catalog form."""
    return await services.drafts.create(
        user_id, request.form_id, request.form_version, request.initial_data
    )


@router.get("", response_model=list[Draft])
async def list_drafts(
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> list[Draft]:
    """List the current user's drafts, most recently modified first."""
    return await services.drafts.list_for_user(user_id)


@router.get("/{draft_id}", response_model=Draft)
async def get_draft(
    draft_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> Draft:
    """Get one of the current user's drafts."""
    return await _owned_draft(services, draft_id, user_id)


@router.put("/{draft_id}", response_model=Draft)
async def autosave_draft(
    draft_id: str,
    request: AutosaveRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> Draft:
    """Autosave field values and the completed-field set."""
    await _owned_draft(services, draft_id, user_id)
    return await services.drafts.autosave(
        draft_id, request.data, request.completed_field_ids, request.current_section
    )


@router.post("/{draft_id}/submit", response_model=Submission)
async def submit_draft(
    draft_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
    request: SubmitRequest | None = None,
) -> Submission:
    """Submit a draft; a second submit is rejected with 409."""
    await _owned_draft(services, draft_id, user_id)
    notify_email = request.notify_email if request is not None else None
    return await services.drafts.submit(draft_id, notify_email=notify_email)
