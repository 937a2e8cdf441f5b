# surveyforge/report_sections/project_summary.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from docx.document import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH

from surveyforge.models import Project
from surveyforge.project_form import LANGUAGES, SAMPLE_TYPES
from surveyforge.report_sections._docx import (
    STYLE,
    add_section_title_h1,
    add_text,
    na,
    s,
    set_column_widths,
    set_table_borders,
    shade_cell,
    write_cell_text,
)


def add_title_block(doc: Document, project: Project, *, generated_at: Optional[datetime] = None) -> None:
    add_text(
        doc,
        project.project_name or "Untitled survey",
        size=STYLE.title_size,
        bold=True,
        color=STYLE.title_blue,
        after_pt=2,
        align=WD_ALIGN_PARAGRAPH.CENTER,
    )
    sub = " | ".join(x for x in (s(project.client_name), s(project.project_number)) if x)
    if sub:
        add_text(doc, sub, size=STYLE.body_size, color=STYLE.muted, after_pt=2, align=WD_ALIGN_PARAGRAPH.CENTER)

    stamp = (generated_at or datetime.now()).strftime("%d %B %Y")
    add_text(
        doc,
        f"Draft questionnaire, generated {stamp}",
        size=STYLE.small_size,
        italic=True,
        color=STYLE.muted,
        after_pt=12,
        align=WD_ALIGN_PARAGRAPH.CENTER,
    )


def _summary_rows(project: Project) -> List[Tuple[str, str]]:
    loi = f"{project.loi} minutes" if project.loi else ""
    return [
        ("Client", na(project.client_name)),
        ("Project number", na(project.project_number)),
        ("Methodology", na(project.methodology_name)),
        ("Industry", na(project.industry_name)),
        ("Category", na(project.category)),
        ("Target audience", na(project.target_audience)),
        ("Sample size", na(project.sample_size)),
        ("Length of interview", na(loi)),
        ("Target country", na(project.target_country)),
        ("Sample type", na(SAMPLE_TYPES.get(project.sample_type, project.sample_type))),
        ("Sample profile", na(project.sample_profile)),
        ("Language", na(LANGUAGES.get(project.language_preference, project.language_preference))),
    ]


def add_project_summary(doc: Document, project: Project) -> None:
    add_section_title_h1(doc, "Project Summary")

    rows = _summary_rows(project)
    table = doc.add_table(rows=len(rows), cols=2)
    table.alignment = WD_TABLE_ALIGNMENT.CENTER
    set_table_borders(table)

    for i, (label, value) in enumerate(rows):
        label_cell, value_cell = table.rows[i].cells
        shade_cell(label_cell, STYLE.header_fill_hex)
        write_cell_text(label_cell, label, bold=True)
        write_cell_text(value_cell, value)
    set_column_widths(table, [2.0, 4.5])

    if s(project.research_objectives):
        add_text(doc, "Research objectives", bold=True, after_pt=2)
        add_text(doc, project.research_objectives, after_pt=8)


def add_tracked_suppliers(doc: Document, project: Project) -> None:
    if not project.tracked_suppliers:
        return

    add_section_title_h1(doc, "Tracked Suppliers")
    table = doc.add_table(rows=1, cols=3)
    table.alignment = WD_TABLE_ALIGNMENT.CENTER
    set_table_borders(table)

    for cell, label in zip(table.rows[0].cells, ("Code", "Name", "Prophecy supplier")):
        shade_cell(cell, STYLE.header_fill_hex)
        write_cell_text(cell, label, bold=True)

    for sup in project.tracked_suppliers:
        cells = table.add_row().cells
        write_cell_text(cells[0], sup.code)
        write_cell_text(cells[1], sup.name)
        write_cell_text(cells[2], "Yes" if sup.is_prophecy_supplier else "No", align=WD_ALIGN_PARAGRAPH.CENTER)
    set_column_widths(table, [1.5, 3.5, 1.5])
