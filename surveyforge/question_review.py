# surveyforge/question_review.py
from __future__ import annotations

import copy
import logging
import re
import uuid
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from surveyforge.errors import APIError
from surveyforge.models import ProjectSection, Question, _s

logger = logging.getLogger(__name__)

NEW_QUESTION_TEXT = "Enter your question here..."
NEW_QUESTION_OPTIONS = ("Option 1", "Option 2")

_OPTIONS_HEADER_RE = re.compile(r"^\s*options\s*:\s*$", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*(?:[•*\-]|\d+[.)])\s*")
_COPY_ID_RE = re.compile(r"-copy(?:-\d+)?$")

Sections = List[ProjectSection]


# =============================================================================
# Lookup
# =============================================================================
def find_section(sections: Sequence[ProjectSection], section_id: str) -> Optional[ProjectSection]:
    for s in sections:
        if s.id == section_id:
            return s
    return None


def find_question(sections: Sequence[ProjectSection], question_id: str) -> Optional[Tuple[ProjectSection, Question]]:
    for s in sections:
        for q in s.questions:
            if q.id == question_id:
                return s, q
    return None


def is_local_question(question: Question) -> bool:
    """Duplicates and added questions exist only here until the section is saved."""
    qid = question.id or ""
    return not qid or _COPY_ID_RE.search(qid) is not None or "-new-" in qid


def total_questions(sections: Sequence[ProjectSection]) -> int:
    return sum(len(s.questions) for s in sections)


def empty_section_ids(sections: Sequence[ProjectSection]) -> List[str]:
    """Non-static sections that still need questions generated."""
    return [s.id for s in sections if not s.is_static and not s.questions]


# =============================================================================
# Local edits (each returns a new list; inputs are left untouched)
# =============================================================================
def _clone(sections: Sequence[ProjectSection]) -> Sections:
    return copy.deepcopy(list(sections))


def update_question_text(sections: Sequence[ProjectSection], question_id: str, text: str) -> Sections:
    out = _clone(sections)
    hit = find_question(out, question_id)
    if hit:
        hit[1].text = text
    return out


def update_question(sections: Sequence[ProjectSection], question: Question) -> Sections:
    out = _clone(sections)
    for s in out:
        s.questions = [copy.deepcopy(question) if q.id == question.id else q for q in s.questions]
    return out


def _copy_id(question_id: str, taken: Set[str]) -> str:
    candidate = f"{question_id}-copy"
    n = 2
    while candidate in taken:
        candidate = f"{question_id}-copy-{n}"
        n += 1
    return candidate


def duplicate_question(sections: Sequence[ProjectSection], question_id: str) -> Sections:
    out = _clone(sections)
    taken = {q.id for s in out for q in s.questions}
    for s in out:
        for i, q in enumerate(s.questions):
            if q.id != question_id:
                continue
            dup = replace(
                q,
                id=_copy_id(q.id, taken),
                question_number=f"{q.question_number}a",
                text=f"{q.text} (Copy)",
                options=list(q.options),
                scale_labels=dict(q.scale_labels),
            )
            s.questions.insert(i + 1, dup)
            return out
    return out


def delete_question(sections: Sequence[ProjectSection], question_id: str) -> Sections:
    out = _clone(sections)
    for s in out:
        s.questions = [q for q in s.questions if q.id != question_id]
    return out


def new_question(section: ProjectSection) -> Question:
    n = len(section.questions) + 1
    return Question(
        id=f"{section.id}-new-{uuid.uuid4().hex[:8]}",
        text=NEW_QUESTION_TEXT,
        type="single-choice",
        options=list(NEW_QUESTION_OPTIONS),
        is_required=True,
        position=n,
        question_number=f"Q{n}",
        is_ai_generated=False,
    )


def add_question(sections: Sequence[ProjectSection], section_id: str) -> Tuple[Sections, Optional[Question]]:
    out = _clone(sections)
    s = find_section(out, section_id)
    if s is None:
        return out, None
    q = new_question(s)
    s.questions.append(q)
    return out, q


def toggle_section(sections: Sequence[ProjectSection], section_id: str) -> Sections:
    out = _clone(sections)
    s = find_section(out, section_id)
    if s is not None:
        s.is_expanded = not s.is_expanded
    return out


def set_static_content(sections: Sequence[ProjectSection], section_id: str, content: str) -> Sections:
    out = _clone(sections)
    s = find_section(out, section_id)
    if s is not None:
        s.static_content = content
    return out


def merge_generated(sections: Sequence[ProjectSection], generated: Dict[str, List[Question]]) -> Sections:
    """Attach freshly generated questions; sections the backend skipped keep what they had."""
    out = _clone(sections)
    for s in out:
        qs = generated.get(s.id)
        if qs:
            s.questions = list(qs)
    return out


def apply_reprompt(
    section: ProjectSection,
    originals: Sequence[Question],
    regenerated: Sequence[Question],
) -> ProjectSection:
    """
    Replace text/type/options of the originals with the regenerated questions,
    matched by position. Ids and question numbers are kept so server rows
    stay addressable. Extra regenerated questions are ignored.
    """
    out = copy.deepcopy(section)
    by_id: Dict[str, Question] = {}
    for orig, new in zip(originals, regenerated):
        by_id[orig.id] = new

    for i, q in enumerate(out.questions):
        new = by_id.get(q.id)
        if new is None:
            continue
        out.questions[i] = replace(
            q,
            text=new.text,
            type=new.type,
            options=list(new.options),
            is_ai_generated=True,
        )
    return out


def replace_section(sections: Sequence[ProjectSection], section: ProjectSection) -> Sections:
    return [copy.deepcopy(section) if s.id == section.id else copy.deepcopy(s) for s in sections]


# =============================================================================
# Manual edit
# =============================================================================
def format_manual_edit(question: Question) -> str:
    text = question.text
    if question.options:
        text += "\n\nOptions:\n" + "\n".join(f"• {o}" for o in question.options)
    return text


def parse_manual_edit(raw: str) -> Tuple[str, Optional[List[str]]]:
    """
    Split free text into (question text, options).

    Options come from an optional trailing "Options:" block of bullet lines.
    Without that block options is None and the caller keeps what it had.
    """
    lines = (raw or "").splitlines()
    header_at = None
    for i, line in enumerate(lines):
        if _OPTIONS_HEADER_RE.match(line):
            header_at = i

    if header_at is None:
        return _s(raw), None

    text = "\n".join(lines[:header_at]).strip()
    options: List[str] = []
    for line in lines[header_at + 1:]:
        opt = _BULLET_RE.sub("", line, count=1).strip()
        if opt:
            options.append(opt)
    return text, options


def apply_manual_edit(sections: Sequence[ProjectSection], question_id: str, raw: str) -> Sections:
    text, options = parse_manual_edit(raw)
    hit = find_question(sections, question_id)
    if hit is None:
        return _clone(sections)
    if options is None:
        return update_question_text(sections, question_id, text) if text else _clone(sections)
    return update_question(sections, replace(hit[1], text=text or hit[1].text, options=options))


# =============================================================================
# Optimistic server edits
# =============================================================================
def apply_optimistic(
    sections: Sequence[ProjectSection],
    change: Callable[[Sequence[ProjectSection]], Sections],
    push: Callable[[Sections], object],
) -> Tuple[Sections, Optional[APIError]]:
    """
    Apply `change` locally, then `push` it to the server.
    On APIError the untouched previous state comes back together with the error.
    """
    before = _clone(sections)
    after = change(sections)
    try:
        push(after)
    except APIError as e:
        logger.warning("Rolling back local edit: %s", e)
        return before, e
    return after, None
