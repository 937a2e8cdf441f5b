from __future__ import annotations

import pytest

from surveyforge.export import (
    EXPORT_OPTIONS,
    begin_export,
    export_file_name,
    exporting_format,
    finish_export,
    get_option,
    survey_summary,
)
from surveyforge.integrations.surveyforge_client import EXPORT_FORMATS
from surveyforge.models import Project
from tests.conftest import make_question, make_section


def test_options_cover_every_client_format():
    assert [o.format for o in EXPORT_OPTIONS] == list(EXPORT_FORMATS)
    assert get_option("PDF").mime_type == "application/pdf"
    assert get_option("docx").extension == "docx"


def test_unknown_format():
    with pytest.raises(ValueError):
        get_option("xlsx")


def test_export_file_name():
    project = Project(id="p1", project_name="Brand: Health/2024", project_number="JOB-1")
    assert export_file_name(project, "docx") == "Brand_ Health_2024_JOB-1.docx"
    assert export_file_name(Project(id="p2", project_name=""), "csv") == "survey_export.csv"
    assert export_file_name(None, "pdf") == "survey_export.pdf"


def test_one_export_at_a_time():
    state = {}
    assert exporting_format(state) is None
    assert begin_export(state, "pdf") is True
    assert begin_export(state, "csv") is False
    assert exporting_format(state) == "pdf"

    finish_export(state)
    assert exporting_format(state) is None
    assert begin_export(state, "csv") is True


def test_survey_summary():
    sections = [
        make_section("a", *[make_question(f"q{i}") for i in range(3)]),
        make_section("b", make_question("q9")),
        make_section("intro", is_static=True),
    ]
    summary = survey_summary(sections)

    assert (summary.section_count, summary.question_count) == (3, 4)
    assert (summary.min_minutes, summary.max_minutes) == (6, 8)
    assert summary.minutes_label == "6-8 min"


def test_empty_survey_summary_label():
    assert survey_summary([]).minutes_label == "0 min"
