"""Form catalog endpoints - GET /forms, GET /forms/{form_id}."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from backend.formflow.api.deps import Services, get_services
from backend.formflow.errors import FormNotFound
from backend.formflow.models.forms import FormDefinition

router = APIRouter(prefix="/forms", tags=["forms"])


@router.get("", response_model=list[FormDefinition])
async def list_forms(
    services: Annotated[Services, Depends(get_services)],
    department: Annotated[str | None, Query()] = None,
    document_type: Annotated[str | None, Query()] = None,
) -> list[FormDefinition]:
    """List forms, optionally filtered by department or document type."""
    if department is not None:
        forms = await services.catalog.list_by_department(department)
    elif document_type is not None:
        forms = await services.catalog.list_by_document_type(document_type)
    else:
        forms = await services.catalog.list_active()

    if department is not None and document_type is not None:
        forms = [f for f in forms if f.document_type == document_type]

    return forms


@router.get("/{form_id}", response_model=FormDefinition)
async def get_form(
    form_id: str,
    services: Annotated[Services, Depends(get_services)],
) -> FormDefinition:
    """Get a single form definition."""
    form = await services.catalog.get_by_id(form_id)
    if form is None:
        raise FormNotFound(f"form {form_id} not found")
    return form
