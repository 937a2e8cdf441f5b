# surveyforge/export.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, MutableMapping, Optional, Sequence

from surveyforge.library import estimate_completion_minutes
from surveyforge.models import Project, ProjectSection, _s


@dataclass(frozen=True)
class ExportOption:
    format: str
    title: str
    description: str
    extension: str
    mime_type: str


EXPORT_OPTIONS: List[ExportOption] = [
    ExportOption(
        format="docx",
        title="Microsoft Word",
        description="Export as a formatted Word document (.docx) for easy editing and sharing",
        extension="docx",
        mime_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ),
    ExportOption(
        format="pdf",
        title="PDF Document",
        description="Export as a PDF for professional presentation and printing",
        extension="pdf",
        mime_type="application/pdf",
    ),
    ExportOption(
        format="csv",
        title="CSV Spreadsheet",
        description="Export as a CSV file for data analysis and import into other tools",
        extension="csv",
        mime_type="text/csv",
    ),
]

_BY_FORMAT: Dict[str, ExportOption] = {o.format: o for o in EXPORT_OPTIONS}

# characters browsers refuse in download names
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\r\n]+')


def get_option(fmt: str) -> ExportOption:
    try:
        return _BY_FORMAT[_s(fmt).lower()]
    except KeyError:
        raise ValueError(f"Unsupported export format: {fmt!r}") from None


def export_file_name(project: Optional[Project], fmt: str) -> str:
    opt = get_option(fmt)
    name = _s(project.project_name if project else "") or "survey"
    number = _s(project.project_number if project else "") or "export"
    stem = _UNSAFE_FILENAME_RE.sub("_", f"{name}_{number}")
    return f"{stem}.{opt.extension}"


def total_questions(sections: Sequence[ProjectSection]) -> int:
    return sum(len(s.questions) for s in sections)


# -----------------------------------------------------------------------------
# One export at a time
# -----------------------------------------------------------------------------
SS_EXPORTING = "sf_exporting_format"


def begin_export(state: MutableMapping, fmt: str) -> bool:
    """Claim the export slot. False while another export is running."""
    if state.get(SS_EXPORTING):
        return False
    state[SS_EXPORTING] = fmt
    return True


def finish_export(state: MutableMapping) -> None:
    state[SS_EXPORTING] = None


def exporting_format(state: MutableMapping) -> Optional[str]:
    return state.get(SS_EXPORTING) or None


# -----------------------------------------------------------------------------
# Finished summary
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SurveySummary:
    section_count: int
    question_count: int
    min_minutes: int
    max_minutes: int

    @property
    def minutes_label(self) -> str:
        if self.min_minutes == self.max_minutes:
            return f"{self.max_minutes} min"
        return f"{self.min_minutes}-{self.max_minutes} min"


def survey_summary(sections: Sequence[ProjectSection]) -> SurveySummary:
    count = total_questions(sections)
    lo, hi = estimate_completion_minutes(count)
    return SurveySummary(section_count=len(sections), question_count=count, min_minutes=lo, max_minutes=hi)
