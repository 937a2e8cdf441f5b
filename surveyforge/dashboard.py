# surveyforge/dashboard.py
"""Project list filtering and the per-project overview (details + workflow shortcuts)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from surveyforge.models import PROJECT_STATUSES, Project
from surveyforge.project_form import LANGUAGES, SAMPLE_TYPES
from surveyforge.workflow import get_step

ALL_STATUSES = "All"
STATUS_FILTERS: Tuple[str, ...] = (ALL_STATUSES,) + tuple(PROJECT_STATUSES)


def matches_search(project: Project, search: str) -> bool:
    q = (search or "").strip().lower()
    if not q:
        return True
    fields = (project.project_name, project.client_name, project.project_number, project.methodology_name)
    return any(q in (v or "").lower() for v in fields)


def filter_projects(projects: Sequence[Project], search: str = "", status: str = ALL_STATUSES) -> List[Project]:
    """Search on name, client, number or methodology; `status` "All" keeps every status."""
    wanted = None if status in ("", None, ALL_STATUSES) else status
    return [p for p in projects if matches_search(p, search) and (wanted is None or p.status == wanted)]


@dataclass(frozen=True)
class WorkflowLink:
    step_id: str
    blurb: str

    @property
    def title(self) -> str:
        return get_step(self.step_id).title


WORKFLOW_LINKS: Tuple[WorkflowLink, ...] = (
    WorkflowLink("setup", "Configure project details"),
    WorkflowLink("sections", "Select & customize survey sections"),
    WorkflowLink("questions", "AI suggestions & manual edits"),
    WorkflowLink("order", "Optimize survey flow"),
    WorkflowLink("export", "Preview and export"),
)


def entry_step(step_id: str) -> str:
    """Validate a shortcut target; the wizard opens on exactly this step."""
    if step_id not in {link.step_id for link in WORKFLOW_LINKS}:
        raise ValueError(f"No workflow shortcut for step {step_id!r}")
    return step_id


def project_details(project: Project) -> List[Tuple[str, str]]:
    language = project.language_preference or ""
    return [
        ("Methodology", project.methodology_name or "Not specified"),
        ("Industry", project.industry_name or "Not specified"),
        ("Sample Size", project.sample_size or "TBD"),
        ("Est. LOI", f"{project.loi} min" if project.loi else "N/A"),
        ("Sample Type", SAMPLE_TYPES.get(project.sample_type, project.sample_type or "N/A")),
        ("Target Country", project.target_country or "N/A"),
        ("Language", LANGUAGES.get(language, language.upper() or "N/A")),
        ("Last Modified", _day(project.last_modified)),
    ]


def _day(stamp: Optional[str]) -> str:
    # ISO timestamps from the backend; show just the date part
    return (stamp or "").split("T", 1)[0] or "N/A"
