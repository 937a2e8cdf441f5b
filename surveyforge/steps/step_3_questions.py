# surveyforge/steps/step_3_questions.py
from __future__ import annotations

import logging
from typing import List, Optional

import streamlit as st

from design.components.base_tool_ui import badges, card_close, card_open, stat_tiles, status_card
from surveyforge.errors import APIError
from surveyforge.models import QUESTION_TYPE_LABELS, ProjectSection, Question, RepromptOption
from surveyforge.question_review import (
    Sections,
    add_question,
    apply_manual_edit,
    apply_optimistic,
    apply_reprompt,
    delete_question,
    duplicate_question,
    empty_section_ids,
    find_question,
    format_manual_edit,
    is_local_question,
    merge_generated,
    replace_section,
    set_static_content,
    toggle_section,
    total_questions,
)
from surveyforge.state import cache_key, clear_project_cache, flash
from surveyforge.steps._shared import load_once, load_project, project_banner
from surveyforge.types import BuilderContext

logger = logging.getLogger(__name__)

QUESTIONS_PER_SECTION = 5
SS_EDITING = "sf.s3.editing"


# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------
def _key(ctx: BuilderContext) -> str:
    return cache_key("sf_review_", ctx.project_id)


def _sections(ctx: BuilderContext) -> Optional[Sections]:
    return load_once(_key(ctx), lambda: ctx.client.get_question_review(ctx.project_id), what="questions")


def _store(ctx: BuilderContext, sections: Sections) -> None:
    st.session_state[_key(ctx)] = sections
    # order/export read the same server state; make them reload after edits
    clear_project_cache(ctx.project_id, ("sf_order_", "sf_export_sections_", "sf_draft_docx_"))


def _reprompt_options(ctx: BuilderContext) -> List[RepromptOption]:
    return load_once("sf_reprompt_options", ctx.client.list_reprompt_options, what="refinement options") or []


# -----------------------------------------------------------------------------
# Actions
# -----------------------------------------------------------------------------
def _generate(ctx: BuilderContext, sections: Sections, section_ids: List[str]) -> None:
    try:
        with st.spinner("Generating questions with AI… this can take a few minutes."):
            if len(section_ids) == 1:
                generated = {section_ids[0]: ctx.client.generate_questions(ctx.project_id, section_ids[0],
                                                                           max_questions=QUESTIONS_PER_SECTION)}
            else:
                generated = ctx.client.generate_ai_questions(
                    ctx.project_id, section_ids, max_questions_per_section=QUESTIONS_PER_SECTION
                )
    except APIError as e:
        logger.error("Generation failed for %d section(s) of %s: %s", len(section_ids), ctx.project_id, e)
        status_card("Question generation failed", str(e), level="error")
        return

    failed = [sid for sid in section_ids if not generated.get(sid)]
    _store(ctx, merge_generated(sections, generated))
    if failed:
        flash("Some sections were not generated", f"{len(failed)} section(s) came back empty.", level="warning")
    else:
        flash("Questions generated", f"{sum(len(v) for v in generated.values())} questions added.", level="success")
    st.rerun()


def _save_manual_edit(ctx: BuilderContext, sections: Sections, question: Question, raw: str) -> None:
    def _push(after: Sections) -> None:
        hit = find_question(after, question.id)
        if hit and not is_local_question(hit[1]):
            ctx.client.update_question(ctx.project_id, hit[1])

    updated, err = apply_optimistic(sections, lambda s: apply_manual_edit(s, question.id, raw), _push)
    _store(ctx, updated)
    st.session_state[SS_EDITING] = None
    if err:
        flash("Could not save question", str(err), level="error")
    st.rerun()


def _delete(ctx: BuilderContext, sections: Sections, question: Question) -> None:
    def _push(_after: Sections) -> None:
        if not is_local_question(question):
            ctx.client.delete_question(ctx.project_id, question.id)

    updated, err = apply_optimistic(sections, lambda s: delete_question(s, question.id), _push)
    _store(ctx, updated)
    if err:
        flash("Could not delete question", str(err), level="error")
    st.rerun()


def _save_static(ctx: BuilderContext, sections: Sections, section: ProjectSection, content: str) -> None:
    updated, err = apply_optimistic(
        sections,
        lambda s: set_static_content(s, section.id, content),
        lambda _after: ctx.client.update_static_section_content(ctx.project_id, section.id, content),
    )
    _store(ctx, updated)
    if err:
        flash("Could not save content", str(err), level="error")
    else:
        flash("Content saved", f"{section.name} was updated.", level="success")
    st.rerun()


def _reprompt(
    ctx: BuilderContext,
    sections: Sections,
    section: ProjectSection,
    originals: List[Question],
    option: RepromptOption,
    feedback: str,
) -> None:
    try:
        with st.spinner(f"Refining {len(originals)} question(s)…"):
            regenerated = ctx.client.reprompt_questions(
                ctx.project_id, section.id, originals, option.id, custom_feedback=feedback
            )
    except APIError as e:
        logger.error("Reprompt failed in section %s: %s", section.id, e)
        status_card("Refinement failed", str(e), level="error")
        return

    _store(ctx, replace_section(sections, apply_reprompt(section, originals, regenerated)))
    flash("Questions refined", f"{min(len(originals), len(regenerated))} question(s) updated.", level="success")
    st.rerun()


# -----------------------------------------------------------------------------
# UI
# -----------------------------------------------------------------------------
def _question_block(ctx: BuilderContext, sections: Sections, q: Question) -> None:
    editing = st.session_state.get(SS_EDITING) == q.id
    c1, c2 = st.columns([10, 3])
    with c1:
        st.markdown(f"**{q.question_number}.** {q.text}")
        badges([
            QUESTION_TYPE_LABELS.get(q.type, q.type),
            "Required" if q.is_required else "Optional",
            "AI" if q.is_ai_generated else "",
            "Unsaved" if is_local_question(q) else "",
        ])
        if q.options and not editing:
            st.markdown("\n".join(f"- {o}" for o in q.options))
    with c2:
        b1, b2, b3 = st.columns(3)
        with b1:
            if st.button("✏️", key=f"sf.s3.edit.{q.id}", help="Edit"):
                st.session_state[SS_EDITING] = None if editing else q.id
                st.rerun()
        with b2:
            if st.button("⧉", key=f"sf.s3.dup.{q.id}", help="Duplicate"):
                _store(ctx, duplicate_question(sections, q.id))
                st.rerun()
        with b3:
            if st.button("🗑️", key=f"sf.s3.del.{q.id}", help="Delete"):
                _delete(ctx, sections, q)

    if editing:
        raw = st.text_area(
            "Edit the question freely. Put answer options under an 'Options:' line, one per bullet.",
            value=format_manual_edit(q),
            height=160,
            key=f"sf.s3.raw.{q.id}",
        )
        a, b = st.columns([1, 1])
        with a:
            if st.button("Apply changes", key=f"sf.s3.apply.{q.id}", type="primary"):
                _save_manual_edit(ctx, sections, q, raw)
        with b:
            if st.button("Cancel", key=f"sf.s3.cancel.{q.id}"):
                st.session_state[SS_EDITING] = None
                st.rerun()


def _reprompt_block(ctx: BuilderContext, sections: Sections, section: ProjectSection) -> None:
    options = _reprompt_options(ctx)
    if not options or not section.questions:
        return

    with st.expander("✨ Refine questions with AI"):
        by_id = {o.id: o for o in options}
        choice = st.selectbox(
            "How should the questions change?",
            options=list(by_id),
            format_func=lambda v: by_id[v].label or v,
            key=f"sf.s3.rp.opt.{section.id}",
        )
        if by_id[choice].description:
            st.caption(by_id[choice].description)

        labels = {q.id: f"{q.question_number}. {q.text[:80]}" for q in section.questions}
        picked = st.multiselect(
            "Questions to refine",
            options=list(labels),
            default=list(labels),
            format_func=lambda v: labels[v],
            key=f"sf.s3.rp.qs.{section.id}",
        )
        feedback = st.text_area(
            "Additional feedback (optional)",
            placeholder="e.g. 'Make it more conversational', 'Add industry-specific options'",
            key=f"sf.s3.rp.fb.{section.id}",
        )
        if st.button("Refine", key=f"sf.s3.rp.go.{section.id}", disabled=not picked):
            originals = [q for q in section.questions if q.id in picked]
            _reprompt(ctx, sections, section, originals, by_id[choice], feedback)


def _section_block(ctx: BuilderContext, sections: Sections, section: ProjectSection) -> None:
    arrow = "▾" if section.is_expanded else "▸"
    c1, c2 = st.columns([10, 2])
    with c1:
        if st.button(f"{arrow} {section.name}", key=f"sf.s3.toggle.{section.id}"):
            _store(ctx, toggle_section(sections, section.id))
            st.rerun()
    with c2:
        st.caption("Static" if section.is_static else f"{len(section.questions)} question(s)")

    if not section.is_expanded:
        return

    card_open("", subtitle=section.description)
    if section.is_static:
        content = st.text_area(
            "Section content",
            value=section.static_content if isinstance(section.static_content, str) else "",
            height=140,
            key=f"sf.s3.static.{section.id}",
        )
        if st.button("Save content", key=f"sf.s3.static.save.{section.id}"):
            _save_static(ctx, sections, section, content)
        card_close()
        return

    if not section.questions:
        st.caption("No questions yet for this section.")
        if st.button("🤖 Generate questions with AI", key=f"sf.s3.gen.{section.id}"):
            _generate(ctx, sections, [section.id])
    for q in section.questions:
        _question_block(ctx, sections, q)

    if st.button("➕ Add question", key=f"sf.s3.add.{section.id}"):
        updated, new_q = add_question(sections, section.id)
        _store(ctx, updated)
        if new_q is not None:
            st.session_state[SS_EDITING] = new_q.id
        st.rerun()

    _reprompt_block(ctx, sections, section)
    card_close()


def render_step(ctx: BuilderContext) -> bool:
    project = load_project(ctx)
    if project is None:
        return False
    project_banner(project)

    sections = _sections(ctx)
    if sections is None:
        return False
    if not sections:
        status_card("No sections yet", "Go back to the Section Library and pick sections first.", level="warning")
        return False

    empty = empty_section_ids(sections)
    stat_tiles([
        (str(len(sections)), "Sections"),
        (str(total_questions(sections)), "Questions"),
        (str(len(empty)), "Awaiting generation"),
    ])
    if empty and st.button(f"🤖 Generate questions for {len(empty)} empty section(s)", type="primary"):
        _generate(ctx, sections, empty)

    for section in sections:
        _section_block(ctx, sections, section)

    return total_questions(sections) > 0


def on_next(ctx: BuilderContext) -> bool:
    sections = st.session_state.get(_key(ctx)) or []
    try:
        ctx.client.save_project_questions(ctx.project_id, sections)
    except APIError as e:
        logger.error("Saving questions for %s failed: %s", ctx.project_id, e)
        status_card("Could not save questions", str(e), level="error")
        return False

    # server ids replace the local ones; reload on the next visit
    clear_project_cache(ctx.project_id, ("sf_review_", "sf_order_", "sf_export_sections_", "sf_draft_docx_"))
    flash("Questions saved", f"{total_questions(sections)} questions saved.", level="success")
    return True
