"""Read-only government form catalog.

Definitions are ingested elsewhere; the catalog only serves lookups and never
mutates a definition.
"""

import asyncio
from collections.abc import Iterable

from backend.formflow.models.forms import FieldSpec, FieldType, FormDefinition

SEED_FORMS: tuple[FormDefinition, ...] = (
    FormDefinition(
        id="passport-application-2024",
        name="Passport Application Form",
        department="home-affairs",
        document_type="passport",
        version="2024.1",
        fields=(
            FieldSpec(
                id="field_1",
                label="Full Name (As per Citizenship Certificate)",
                type=FieldType.text,
                section="Personal Information",
                required=True,
            ),
            FieldSpec(
                id="field_2",
                label="Date of Birth (B.S.)",
                type=FieldType.date,
                section="Personal Information",
                required=True,
            ),
            FieldSpec(
                id="field_3",
                label="Citizenship Certificate Number",
                type=FieldType.text,
                section="Personal Information",
                required=True,
            ),
            FieldSpec(
                id="field_4",
                label="Permanent Address (Tole, Ward, Municipality, District)",
                type=FieldType.address,
                section="Address Details",
                required=True,
            ),
            FieldSpec(
                id="field_5",
                label="Contact Number (Mobile)",
                type=FieldType.phone,
                section="Contact Information",
                required=True,
            ),
            FieldSpec(
                id="field_6",
                label="Email Address",
                type=FieldType.email,
                section="Contact Information",
            ),
            FieldSpec(
                id="field_7",
                label="Passport Type",
                type=FieldType.select,
                section="Passport Details",
                required=True,
                options=("Regular", "Official", "Diplomatic"),
            ),
            FieldSpec(
                id="field_8",
                label="Purpose of Passport",
                type=FieldType.select,
                section="Passport Details",
                required=True,
                options=("Tourism", "Employment", "Education", "Business", "Other"),
            ),
        ),
    ),
    FormDefinition(
        id="pan-card-registration",
        name="PAN Card Registration Form",
        department="finance",
        document_type="pan-card",
        version="2024.2",
        fields=(
            FieldSpec(
                id="pan_field_1",
                label="Full Name",
                type=FieldType.text,
                section="Basic Information",
                required=True,
            ),
            FieldSpec(
                id="pan_field_2",
                label="Date of Birth",
                type=FieldType.date,
                section="Basic Information",
                required=True,
            ),
            FieldSpec(
                id="pan_field_3",
                label="Father's Name",
                type=FieldType.text,
                section="Family Details",
                required=True,
            ),
            FieldSpec(
                id="pan_field_4",
                label="Occupation",
                type=FieldType.select,
                section="Professional Details",
                required=True,
                options=("Business", "Service", "Agriculture", "Student", "Other"),
            ),
        ),
    ),
)


class FormCatalog:
    """In-memory form catalog with optional simulated lookup latency."""

    def __init__(
        self, forms: Iterable[FormDefinition] = SEED_FORMS, latency_ms: int = 0
    ) -> None:
        """Initialize catalog.

        Args:
            forms: Form definitions to serve
            latency_ms: Artificial delay applied to every lookup
        """
        self._forms: dict[str, FormDefinition] = {f.id: f for f in forms}
        self._latency_ms = latency_ms

    async def _delay(self) -> None:
        if self._latency_ms > 0:
            await asyncio.sleep(self._latency_ms / 1000)

    async def get_by_id(self, form_id: str) -> FormDefinition | None:
        """Get form definition by id."""
        await self._delay()
        return self._forms.get(form_id)

    async def list_active(self) -> list[FormDefinition]:
        """List all active form definitions."""
        await self._delay()
        return [f for f in self._forms.values() if f.is_active]

    async def list_by_department(self, department: str) -> list[FormDefinition]:
        """List form definitions owned by a department."""
        await self._delay()
        return [f for f in self._forms.values() if f.department == department]

    async def list_by_document_type(self, document_type: str) -> list[FormDefinition]:
        """List active form definitions producing a document type."""
        await self._delay()
        return [
            f for f in self._forms.values() if f.document_type == document_type and f.is_active
        ]
