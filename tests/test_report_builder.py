from __future__ import annotations

from datetime import datetime
from io import BytesIO

import docx
import pytest

from surveyforge.models import Project, TrackedSupplier
from surveyforge.report_builder import build_questionnaire_docx
from tests.conftest import make_question, make_section


@pytest.fixture
def project():
    return Project(
        id="p1",
        project_name="Brand Health",
        client_name="Acme",
        project_number="JOB-1",
        methodology_name="Prophecy",
        loi=15,
        sample_type="panel",
        language_preference="en",
        tracked_suppliers=[TrackedSupplier(code="ACME", name="Acme Ltd", is_prophecy_supplier=True)],
    )


def _open(data: bytes):
    return docx.Document(BytesIO(data))


def _texts(doc):
    return [p.text for p in doc.paragraphs]


def test_builds_readable_docx(project):
    sections = [
        make_section("intro", name="Introduction", is_static=True, static_content={"content": "Welcome!"}, position=1),
        make_section(
            "s1",
            make_question("q1", "Which brands do you know?", number="Q1", options=["Acme", "Other"]),
            make_question("q2", "Rate Acme", number="Q2", options=[], type="likert-scale", scale_min=1, scale_max=5,
                          scale_labels={"1": "Poor", "5": "Great"}),
            name="Brand Awareness",
            position=2,
        ),
        make_section("s2", name="Demographics", position=3),
    ]

    data = build_questionnaire_docx(project, sections, generated_at=datetime(2024, 5, 1))
    doc = _open(data)
    texts = _texts(doc)

    assert texts[0] == "Brand Health"
    assert "Acme | JOB-1" in texts
    assert "Draft questionnaire, generated 01 May 2024" in texts
    assert "1. Introduction" in texts
    assert "Welcome!" in texts
    assert "2. Brand Awareness" in texts
    assert "Q1. Which brands do you know?" in texts
    assert "Acme" in texts and "Other" in texts
    assert "Scale 1 to 5 (Poor / Great)" in texts
    assert "3. Demographics" in texts
    assert "(No questions yet)" in texts


def test_summary_and_supplier_tables(project):
    doc = _open(build_questionnaire_docx(project, []))

    summary, suppliers = doc.tables
    rows = {r.cells[0].text: r.cells[1].text for r in summary.rows}
    assert rows["Client"] == "Acme"
    assert rows["Length of interview"] == "15 minutes"
    assert rows["Sample type"] == "Panel"
    assert rows["Language"] == "English"
    assert rows["Category"] == "N/A"

    assert [c.text for c in suppliers.rows[1].cells] == ["ACME", "Acme Ltd", "Yes"]


def test_no_supplier_table_without_suppliers(project):
    project.tracked_suppliers = []
    doc = _open(build_questionnaire_docx(project, []))
    assert len(doc.tables) == 1


def test_footer_and_page_size(project):
    doc = _open(build_questionnaire_docx(project, []))
    section = doc.sections[0]
    assert section.footer.paragraphs[0].text == "Brand Health | JOB-1"
    assert round(section.page_width.mm) == 210
