from __future__ import annotations

import pytest

from surveyforge.dashboard import (
    ALL_STATUSES,
    STATUS_FILTERS,
    WORKFLOW_LINKS,
    entry_step,
    filter_projects,
    project_details,
)
from surveyforge.models import Project
from surveyforge.workflow import PROGRESS_STEP_COUNT, STEP_IDS, step_index


@pytest.fixture
def projects():
    return [
        Project(id="p1", project_name="Brand Health", client_name="Acme", methodology_name="Prophecy", status="Draft"),
        Project(id="p2", project_name="Ad Test", client_name="Globex", project_number="JOB-7", status="Completed"),
        Project(id="p3", project_name="Usage Study", client_name="acme foods", status="In Progress"),
    ]


def test_status_filters_start_with_all():
    assert STATUS_FILTERS == ("All", "Draft", "In Progress", "Completed")


def test_search_and_status_combine(projects):
    assert [p.id for p in filter_projects(projects)] == ["p1", "p2", "p3"]
    assert [p.id for p in filter_projects(projects, "ACME")] == ["p1", "p3"]
    assert [p.id for p in filter_projects(projects, "acme", "Draft")] == ["p1"]
    assert [p.id for p in filter_projects(projects, "job-7", ALL_STATUSES)] == ["p2"]
    assert [p.id for p in filter_projects(projects, "", "Completed")] == ["p2"]
    assert filter_projects(projects, "nothing") == []


def test_workflow_links_cover_every_numbered_step():
    assert [link.step_id for link in WORKFLOW_LINKS] == STEP_IDS[:PROGRESS_STEP_COUNT]
    assert [link.title for link in WORKFLOW_LINKS] == [
        "Project Setup", "Section Library", "Question Review", "Section Order", "Export & Review",
    ]


@pytest.mark.parametrize("step_id, position", [("setup", 0), ("sections", 1), ("questions", 2), ("order", 3), ("export", 4)])
def test_entry_step_opens_wizard_on_that_step(step_id, position):
    assert step_index(entry_step(step_id)) == position


@pytest.mark.parametrize("step_id", ["finished", "review", ""])
def test_entry_step_rejects_unknown_targets(step_id):
    with pytest.raises(ValueError):
        entry_step(step_id)


def test_project_details():
    project = Project(id="p1", project_name="X", methodology_name="CX", industry_name="", sample_size="n=500",
                      loi=20, sample_type="panel", target_country="AU", language_preference="fr",
                      last_modified="2024-05-01T10:22:00Z")
    assert dict(project_details(project)) == {
        "Methodology": "CX",
        "Industry": "Not specified",
        "Sample Size": "n=500",
        "Est. LOI": "20 min",
        "Sample Type": "Panel",
        "Target Country": "AU",
        "Language": "French",
        "Last Modified": "2024-05-01",
    }


def test_project_details_fallbacks():
    rows = dict(project_details(Project(id="p1", project_name="X", sample_type="", language_preference="pt")))
    assert rows["Est. LOI"] == "N/A"
    assert rows["Sample Type"] == "N/A"
    assert rows["Language"] == "PT"
    assert rows["Last Modified"] == "N/A"
