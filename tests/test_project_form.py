from __future__ import annotations

import pytest

from surveyforge.errors import ValidationError
from surveyforge.models import Industry, Methodology, Project, TrackedSupplier
from surveyforge.project_form import (
    DEFAULT_COUNTRY,
    DEFAULT_LANGUAGE,
    empty_form,
    form_from_project,
    project_from_form,
    validate_project_form,
)

METHODOLOGIES = [Methodology(id=1, name="Prophecy"), Methodology(id=2, name="CX (Customer Experience)")]
INDUSTRIES = [Industry(id=10, name="Retail")]


def _valid_form(**overrides):
    form = empty_form()
    form.update(
        client_name="Acme",
        project_name="Brand Health",
        project_number="JOB-1",
        methodology_id=2,
        industry_id=10,
        research_objectives="Understand loyalty",
        sample_size="n=500",
        loi=20,
        sample_type="panel",
    )
    form.update(overrides)
    return form


def test_empty_form_defaults():
    form = empty_form()
    assert form["target_country"] == DEFAULT_COUNTRY == "AU"
    assert form["language_preference"] == DEFAULT_LANGUAGE == "en"
    assert form["loi"] is None
    assert form["tracked_suppliers"] == []


def test_empty_form_errors_in_display_order():
    form = empty_form()
    assert validate_project_form(form) == [
        "Client name is required",
        "Project name is required",
        "Project number is required",
        "Methodology selection is required",
        "Industry selection is required",
        "Research objectives are required",
        "Sample size is required",
        "Length of Interview is required",
        "Sample type is required",
    ]


def test_missing_country_is_reported():
    assert validate_project_form(_valid_form(target_country="")) == ["Target country is required"]


@pytest.mark.parametrize("loi", [121, 500, -3])
def test_loi_out_of_range(loi):
    assert validate_project_form(_valid_form(loi=loi)) == ["Length of Interview must be between 1 and 120 minutes"]


@pytest.mark.parametrize("loi", [1, 120, "45"])
def test_loi_in_range(loi):
    assert validate_project_form(_valid_form(loi=loi)) == []


def test_sample_type_must_be_known():
    assert validate_project_form(_valid_form(sample_type="street")) == ["Sample type must be panel or client"]


def test_project_from_form_resolves_names():
    suppliers = [TrackedSupplier(code="ACME", name="Acme")]
    project = project_from_form(
        _valid_form(tracked_suppliers=suppliers, loi="25"),
        methodologies=METHODOLOGIES,
        industries=INDUSTRIES,
    )
    assert project.id == ""
    assert project.methodology_name == "CX (Customer Experience)"
    assert project.industry_name == "Retail"
    assert project.loi == 25
    assert project.tracked_suppliers == suppliers
    assert project.language_preference == "en"


def test_project_from_form_keeps_base_identity():
    base = Project(id="p1", project_name="Old", status="Completed", user_session_id="owner",
                   methodology_name="Legacy", design_brief_file_name="brief.pdf")
    project = project_from_form(_valid_form(methodology_id=99), base=base)

    assert project.id == "p1"
    assert project.status == "Completed"
    assert project.user_session_id == "owner"
    assert project.design_brief_file_name == "brief.pdf"
    # unknown id: fall back to the base's name
    assert project.methodology_name == "Legacy"


def test_project_from_form_raises_with_all_errors():
    with pytest.raises(ValidationError) as exc:
        project_from_form(_valid_form(client_name="", loi=None))
    assert exc.value.errors == ["Client name is required", "Length of Interview is required"]


def test_form_from_project_round_trip():
    project = Project(
        id="p1",
        project_name="Brand Health",
        client_name="Acme",
        sample_size="TBD",
        loi=30,
        target_country="",
        tracked_suppliers=[TrackedSupplier(code="A", name="A")],
    )
    form = form_from_project(project)

    assert form["project_name"] == "Brand Health"
    assert form["sample_size"] == ""
    assert form["loi"] == 30
    assert form["target_country"] == "AU"
    assert form["tracked_suppliers"] == project.tracked_suppliers
    assert form["tracked_suppliers"][0] is not project.tracked_suppliers[0]
