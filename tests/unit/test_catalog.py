"""Tests for the form catalog."""

import pytest

from backend.formflow.catalog.forms import SEED_FORMS, FormCatalog
from backend.formflow.models.forms import FieldSpec, FieldType, FormDefinition


def retired_form() -> FormDefinition:
    return FormDefinition(
        id="passport-application-2019",
        name="Passport Application Form (2019)",
        department="home-affairs",
        document_type="passport",
        version="2019.3",
        is_active=False,
        fields=(FieldSpec(id="f1", label="Name", type=FieldType.text, section="Personal"),),
    )


@pytest.mark.asyncio
async def test_get_by_id(catalog: FormCatalog) -> None:
    """Test seeded forms are found by id and unknown ids are absent."""
    form = await catalog.get_by_id("passport-application-2024")

    assert form is not None
    assert form.department == "home-affairs"
    assert form.field_ids() == [f"field_{i}" for i in range(1, 9)]
    assert await catalog.get_by_id("no-such-form") is None


@pytest.mark.asyncio
async def test_list_active(catalog: FormCatalog) -> None:
    """Test both seeded forms are active."""
    forms = await catalog.list_active()

    assert {f.id for f in forms} == {"passport-application-2024", "pan-card-registration"}


@pytest.mark.asyncio
async def test_filters_by_department_and_document_type() -> None:
    """Test department lists include retired forms, document type lists do not."""
    catalog = FormCatalog(forms=(*SEED_FORMS, retired_form()))

    by_department = await catalog.list_by_department("home-affairs")
    by_type = await catalog.list_by_document_type("passport")

    assert {f.id for f in by_department} == {
        "passport-application-2024",
        "passport-application-2019",
    }
    assert [f.id for f in by_type] == ["passport-application-2024"]
    assert await catalog.list_by_department("transport") == []


@pytest.mark.asyncio
async def test_select_fields_carry_options(catalog: FormCatalog) -> None:
    """Test select fields expose their options."""
    form = await catalog.get_by_id("pan-card-registration")

    assert form is not None
    occupation = form.fields[-1]
    assert occupation.type == FieldType.select
    assert occupation.options is not None
    assert "Student" in occupation.options


@pytest.mark.asyncio
async def test_simulated_latency_still_answers() -> None:
    """Test a catalog with latency returns the same answers."""
    catalog = FormCatalog(latency_ms=1)

    assert (await catalog.get_by_id("pan-card-registration")) is not None
