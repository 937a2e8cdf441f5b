# surveyforge/report_builder.py
from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import Optional, Sequence

from docx import Document
from docx.shared import Mm

from surveyforge.models import Project, ProjectSection
from surveyforge.report_sections.project_summary import add_project_summary, add_title_block, add_tracked_suppliers
from surveyforge.report_sections.questionnaire import add_sections

logger = logging.getLogger(__name__)


# =============================================================================
# Page / Word utilities
# =============================================================================
def set_page_a4(section) -> None:
    section.page_width = Mm(210)
    section.page_height = Mm(297)

    section.top_margin = Mm(18)
    section.bottom_margin = Mm(18)
    section.left_margin = Mm(18)
    section.right_margin = Mm(18)

    section.header_distance = Mm(8)
    section.footer_distance = Mm(8)


def _add_footer(section, project: Project) -> None:
    p = section.footer.paragraphs[0]
    p.text = f"{project.project_name or 'Survey'} | {project.project_number or 'Draft'}"


def _doc_to_bytes(doc) -> bytes:
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


# =============================================================================
# MAIN PUBLIC API
# =============================================================================
def build_questionnaire_docx(
    project: Project,
    sections: Sequence[ProjectSection],
    *,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """
    Render a draft questionnaire locally:
    title block, project summary, tracked suppliers, then the numbered
    sections with their questions and answer options.
    """
    doc = Document()
    set_page_a4(doc.sections[0])
    _add_footer(doc.sections[0], project)

    add_title_block(doc, project, generated_at=generated_at)
    add_project_summary(doc, project)
    add_tracked_suppliers(doc, project)
    written = add_sections(doc, sections)

    data = _doc_to_bytes(doc)
    logger.info(
        "Built draft questionnaire for %s: %d sections, %d questions, %d bytes",
        project.id or project.project_name, len(sections), written, len(data),
    )
    return data
