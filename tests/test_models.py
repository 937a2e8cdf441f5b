from __future__ import annotations

import pytest

from surveyforge.models import (
    MethodologySection,
    Project,
    ProjectSection,
    Question,
    SectionTemplate,
    TrackedSupplier,
    backend_question_type,
    normalize_options,
    results_of,
    transform_question_type,
)


@pytest.mark.parametrize(
    "backend, ui",
    [
        ("scale", "likert-scale"),
        ("likert_scale", "likert-scale"),
        ("single_choice", "single-choice"),
        ("multiple_choice", "multiple-choice"),
        ("text", "open-text"),
        ("open_text", "open-text"),
        ("rating", "rating"),
        ("matrix", "matrix"),
    ],
)
def test_transform_question_type(backend, ui):
    assert transform_question_type(backend) == ui


def test_backend_question_type_inverts_ui_types():
    assert backend_question_type("likert-scale") == "likert_scale"
    assert backend_question_type("multiple-choice") == "multiple_choice"
    assert backend_question_type("rating") == "rating"


def test_results_of_accepts_wrapped_or_bare_lists():
    assert results_of({"results": [{"a": 1}, "junk"]}) == [{"a": 1}]
    assert results_of([{"b": 2}]) == [{"b": 2}]
    assert results_of(None) == []
    assert results_of({"results": None}) == []


def test_normalize_options_sorts_dict_options_by_position():
    raw = [{"text": "Later", "position": 2}, {"text": "First", "position": 1}, {"text": "", "position": 3}]
    assert normalize_options(raw) == ["First", "Later"]
    assert normalize_options(["a", " ", None, "b"]) == ["a", "b"]
    assert normalize_options("not a list") == []


def test_project_from_api_defaults():
    p = Project.from_api({"id": "1234567890ab"})

    assert p.project_number == "PRJ-567890ab"
    assert p.client_name == "Unknown Client"
    assert p.methodology_name == "Not specified"
    assert p.industry_name == "Not specified"
    assert p.status == "In Progress"
    assert p.sample_size == "TBD"


def test_project_to_api_sends_null_industry_when_blank():
    p = Project(id="p1", project_name="X", methodology_id=2, industry_id="")
    body = p.to_api()
    assert body["industry_id"] is None
    assert body["methodology_id"] == 2
    assert body["name"] == "X"


def test_project_from_api_reads_tracked_suppliers():
    p = Project.from_api({"id": "p1", "tracked_suppliers": [{"code": "AB", "name": "Ab", "is_prophecy_supplier": 1}]})
    assert p.tracked_suppliers == [TrackedSupplier(code="AB", name="Ab", is_prophecy_supplier=True)]


def test_section_template_core_defaults_to_basic_category():
    core = SectionTemplate.from_api({"id": 5, "name": "Screeners", "is_core": True, "question_count_hint": "3-5"})
    other = SectionTemplate.from_api({"id": 6, "name": "NPS", "section_category": "cx"})

    assert core.id == "5" and core.category == "basic" and core.question_hint == "3-5"
    assert other.category == "cx"


def test_methodology_section_accepts_bare_ids():
    link = MethodologySection.from_api(
        {"id": 1, "methodology": 3, "methodology_name": "CX", "section": "s1", "section_name": "NPS"}
    )
    assert (link.methodology, link.methodology_name, link.section, link.section_name) == ("3", "CX", "s1", "NPS")
    assert link.default_position is None


def test_question_round_trips_scale_fields_only_when_present():
    q = Question.from_api({"id": "q1", "text": "Rate us", "type": "scale", "scale_min": "1", "scale_max": 5,
                           "scale_labels": {"1": "Poor", "5": "Great"}, "position": 4})

    assert q.type == "likert-scale"
    assert q.question_number == "Q4"
    body = q.to_api()
    assert body["question_type"] == "likert_scale"
    assert (body["scale_min"], body["scale_max"]) == (1, 5)
    assert body["scale_labels"] == {"1": "Poor", "5": "Great"}

    plain = Question(id="q2", text="Why?").to_api()
    assert "scale_min" not in plain and "scale_labels" not in plain


def test_question_defaults_required_when_missing():
    assert Question.from_api({"id": "q"}).is_required is True
    assert Question.from_api({"id": "q", "is_required": False}).is_required is False


def test_project_section_from_review_position_falls_back_to_index():
    s = ProjectSection.from_review({"id": "s", "name": "A", "section_category": ""}, index=2)
    assert s.position == 3
    assert s.section_category == "basic"
    assert s.is_expanded is True


def test_project_section_from_attached_accepts_bare_template_id():
    s = ProjectSection.from_attached({"id": "ps", "section_template_id": "tpl-9"})
    assert s.template_id == "tpl-9"
    assert s.name == "Unnamed Section"
