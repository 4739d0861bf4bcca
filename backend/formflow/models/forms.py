"""Form catalog definitions."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, Enum):
    """Input type of a form field."""

    text = "text"
    email = "email"
    phone = "phone"
    number = "number"
    address = "address"
    select = "select"
    radio = "radio"
    checkbox = "checkbox"
    date = "date"


class FieldSpec(BaseModel):
    """Single field of a government form."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str
    type: FieldType
    options: tuple[str, ...] | None = None
    section: str | None = None
    required: bool = False


class FormDefinition(BaseModel):
    """Immutable government form definition."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    department: str
    document_type: str
    version: str
    is_active: bool = True
    fields: tuple[FieldSpec, ...] = ()

    def field_ids(self) -> list[str]:
        """Field ids in form order."""
        return [f.id for f in self.fields]
