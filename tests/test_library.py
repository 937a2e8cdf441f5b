from __future__ import annotations

import pytest

from surveyforge.library import (
    CATALOGUE_METHODOLOGIES,
    CATALOGUE_SECTIONS,
    FILTER_TYPES,
    default_selection,
    estimate_completion_minutes,
    estimate_total_questions,
    filter_sections,
    hint_midpoint,
    library_sections,
    methodology_key,
    reconcile_selection,
    selected_templates,
    selection_estimates,
    toggle,
)
from surveyforge.models import MethodologySection, SectionTemplate


def _tpl(sid, category="", *, core=False, hint="", name="", description=""):
    return SectionTemplate(id=sid, name=name or sid, description=description, is_core=core,
                           question_hint=hint, category=category)


def test_catalogue_shape():
    assert [m["id"] for m in CATALOGUE_METHODOLOGIES] == ["prophecy", "cx", "choice", "ad-testing", "segmentation", "ua"]
    basic = [s.id for s in CATALOGUE_SECTIONS if s.category == "basic"]
    assert basic == ["screeners", "profiling", "demographics"]
    assert all(s.is_core for s in CATALOGUE_SECTIONS if s.category == "basic")
    assert len({s.id for s in CATALOGUE_SECTIONS}) == len(CATALOGUE_SECTIONS)
    assert [k for k, _ in FILTER_TYPES][:2] == ["all", "basic"]


@pytest.mark.parametrize(
    "name, key",
    [
        ("Prophecy", "prophecy"),
        ("CX (Customer Experience)", "cx"),
        ("In-Market Ad Testing", "ad-testing"),
        ("U&A (Usage & Attitudes)", "ua"),
        ("Something new", "prophecy"),
        (None, "prophecy"),
    ],
)
def test_methodology_key(name, key):
    assert methodology_key(name) == key


def test_library_sections_falls_back_to_catalogue():
    rows, fallback = library_sections([])
    assert fallback is True
    assert rows == CATALOGUE_SECTIONS
    rows.append(_tpl("extra"))
    assert len(CATALOGUE_SECTIONS) != len(rows)

    backend = [_tpl("b1")]
    assert library_sections(backend) == (backend, False)


def test_default_selection_uses_catalogue_category_without_links():
    picked = default_selection(CATALOGUE_SECTIONS, methodology_name="CX (Customer Experience)")
    assert picked[:3] == ["screeners", "profiling", "demographics"]
    assert picked[3:] == [
        "customer-journey",
        "satisfaction-measurement",
        "nps-loyalty",
        "service-quality",
        "complaint-resolution",
    ]


def test_default_selection_prefers_methodology_links():
    sections = [_tpl("core", core=True), _tpl("a"), _tpl("b"), _tpl("c"), _tpl("cx-only", "cx")]
    links = [
        MethodologySection(id="1", methodology="7", methodology_name="CX", section="a", section_name="A",
                           is_required=False, default_position=1),
        MethodologySection(id="2", methodology="7", methodology_name="CX", section="b", section_name="B",
                           is_required=True, default_position=5),
        MethodologySection(id="3", methodology="7", methodology_name="CX", section="missing", section_name="?",
                           is_required=True, default_position=2),
        MethodologySection(id="4", methodology="8", methodology_name="Other", section="c", section_name="C"),
    ]

    picked = default_selection(sections, methodology_name="CX (Customer Experience)", methodology_id=7, links=links)

    assert picked == ["core", "b", "a"]


def test_default_selection_ignores_links_for_other_methodologies():
    sections = [_tpl("core", core=True), _tpl("nps", "cx")]
    links = [MethodologySection(id="1", methodology="8", methodology_name="X", section="nps", section_name="NPS")]
    assert default_selection(sections, methodology_name="CX (Customer Experience)", methodology_id=7,
                             links=links) == ["core", "nps"]


def test_toggle_adds_and_removes():
    assert toggle(["a"], "b") == ["a", "b"]
    assert toggle(["a", "b"], "a") == ["b"]


def test_filter_sections_by_search_and_type():
    rows = [
        _tpl("1", "cx", name="NPS & Loyalty", description="Net promoter"),
        _tpl("2", "basic", name="Screeners", description="Qualify respondents"),
        _tpl("3", "cx", name="Service Quality"),
    ]
    assert [s.id for s in filter_sections(rows, "promoter")] == ["1"]
    assert [s.id for s in filter_sections(rows, "", "cx")] == ["1", "3"]
    assert [s.id for s in filter_sections(rows, "QUALI", "basic")] == ["2"]
    assert [s.id for s in filter_sections(rows)] == ["1", "2", "3"]


def test_reconcile_selection_prefers_attached():
    assert reconcile_selection(["x", "y", "x", ""], ["a"]) == ["x", "y"]
    assert reconcile_selection([], ["a", "b"]) == ["a", "b"]


def test_selected_templates_keeps_selection_order():
    rows = [_tpl("a"), _tpl("b"), _tpl("c")]
    assert [s.id for s in selected_templates(rows, ["c", "zz", "a"])] == ["c", "a"]


@pytest.mark.parametrize(
    "hint, mid",
    [("3-5 questions", 4.0), ("6 questions", 6.0), ("", 5.0), (None, 5.0), ("8-15 questions", 11.5)],
)
def test_hint_midpoint(hint, mid):
    assert hint_midpoint(hint) == mid


def test_estimates():
    rows = [_tpl("a", hint="3-5 questions"), _tpl("b", hint="6-10 questions"), _tpl("c")]
    assert estimate_total_questions(rows) == 17
    assert estimate_completion_minutes(17) == (26, 34)
    assert estimate_completion_minutes(0) == (0, 0)
    assert estimate_completion_minutes(None) == (0, 0)


@pytest.mark.parametrize(
    "hints, total",
    [(["2-3 questions"], 3), (["2-3 questions", "2-3 questions"], 5), (["1-2 questions", "4"], 6)],
)
def test_question_total_rounds_half_up(hints, total):
    assert estimate_total_questions([_tpl(f"s{i}", hint=h) for i, h in enumerate(hints)]) == total


def test_selection_time_follows_section_count():
    chosen = [_tpl(sid, hint="3-5 questions") for sid in ("screeners", "profiling", "demographics")]
    # 12 questions, but three sections -> 5-6 minutes
    assert selection_estimates(chosen) == (12, 5, 6)
    assert selection_estimates([]) == (0, 0, 0)
