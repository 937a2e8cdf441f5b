# surveyforge/report_sections/questionnaire.py
from __future__ import annotations

from typing import Any, List, Sequence

from docx.document import Document
from docx.shared import Inches

from surveyforge.models import QUESTION_TYPE_LABELS, ProjectSection, Question
from surveyforge.report_sections._docx import STYLE, add_section_title_h1, add_text, s


def _static_text(content: Any) -> str:
    """Static content may be a plain string or {"content"|"text": ...}."""
    if isinstance(content, dict):
        return s(content.get("content") or content.get("text"))
    return s(content)


def _scale_line(q: Question) -> str:
    if q.scale_min is None or q.scale_max is None:
        return ""
    line = f"Scale {q.scale_min} to {q.scale_max}"
    lo = s(q.scale_labels.get(str(q.scale_min)) or q.scale_labels.get("min"))
    hi = s(q.scale_labels.get(str(q.scale_max)) or q.scale_labels.get("max"))
    if lo or hi:
        line += f" ({lo or q.scale_min} / {hi or q.scale_max})"
    return line


def add_question(doc: Document, q: Question, *, number: str) -> None:
    p = doc.add_paragraph()
    head = p.add_run(f"{number}. ")
    head.bold = True
    p.add_run(s(q.text))
    p.paragraph_format.keep_with_next = True

    meta: List[str] = [QUESTION_TYPE_LABELS.get(q.type, q.type or "Question")]
    meta.append("Required" if q.is_required else "Optional")
    if q.is_ai_generated:
        meta.append("AI generated")
    add_text(doc, " | ".join(meta), size=STYLE.small_size, italic=True, color=STYLE.muted, after_pt=2)

    scale = _scale_line(q)
    if scale:
        add_text(doc, scale, size=STYLE.small_size, after_pt=2)

    for opt in q.options:
        op = doc.add_paragraph(style="List Bullet")
        op.add_run(s(opt))
        op.paragraph_format.left_indent = Inches(0.5)
        op.paragraph_format.space_after = None

    add_text(doc, "", after_pt=4)


def add_sections(doc: Document, sections: Sequence[ProjectSection]) -> int:
    """Numbered sections with their questions. Returns the number of questions written."""
    written = 0
    ordered = sorted(sections, key=lambda sec: sec.position or 0)
    for idx, sec in enumerate(ordered, start=1):
        add_section_title_h1(doc, f"{idx}. {sec.name}")
        if s(sec.description):
            add_text(doc, sec.description, italic=True, color=STYLE.muted, after_pt=6)

        if sec.is_static:
            body = _static_text(sec.static_content)
            add_text(doc, body or "(No content yet)", after_pt=8)
            continue

        if not sec.questions:
            add_text(doc, "(No questions yet)", italic=True, color=STYLE.muted, after_pt=8)
            continue

        for q in sec.questions:
            written += 1
            add_question(doc, q, number=s(q.question_number) or f"Q{written}")
    return written
