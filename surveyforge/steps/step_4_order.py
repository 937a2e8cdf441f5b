# surveyforge/steps/step_4_order.py
from __future__ import annotations

import logging
from typing import List, Optional

import streamlit as st

from design.components.base_tool_ui import card_close, card_open, status_card
from surveyforge.errors import APIError
from surveyforge.ordering import OrderedSection, from_sections, move_down, move_up, ordered_ids
from surveyforge.state import cache_key, clear_project_cache, flash
from surveyforge.steps._shared import load_once, load_project, project_banner
from surveyforge.types import BuilderContext

logger = logging.getLogger(__name__)


def _key(ctx: BuilderContext) -> str:
    return cache_key("sf_order_", ctx.project_id)


def _rows(ctx: BuilderContext) -> Optional[List[OrderedSection]]:
    return load_once(
        _key(ctx),
        lambda: from_sections(ctx.client.get_question_review(ctx.project_id)),
        what="sections",
    )


def _row(ctx: BuilderContext, rows: List[OrderedSection], r: OrderedSection, *, first: bool, last: bool) -> None:
    c1, c2, c3 = st.columns([1, 10, 2])
    with c1:
        st.markdown(f"### {r.order}")
    with c2:
        st.markdown(f"**{r.name}**")
        if r.description:
            st.caption(r.description)
        st.caption(f"{r.question_count} question(s)")
    with c3:
        up, down = st.columns(2)
        with up:
            if st.button("▲", key=f"sf.s4.up.{r.id}", disabled=first, help="Move up"):
                st.session_state[_key(ctx)] = move_up(rows, r.id)
                st.rerun()
        with down:
            if st.button("▼", key=f"sf.s4.down.{r.id}", disabled=last, help="Move down"):
                st.session_state[_key(ctx)] = move_down(rows, r.id)
                st.rerun()


def render_step(ctx: BuilderContext) -> bool:
    project = load_project(ctx)
    if project is None:
        return False
    project_banner(project)

    rows = _rows(ctx)
    if rows is None:
        return False
    if not rows:
        status_card(
            "No sections to order",
            "This project has no sections yet. Go back to the Section Library to add some.",
            level="warning",
        )
        return False

    card_open("Section Order", subtitle="Sections appear in the exported survey in this order.")
    for i, r in enumerate(rows):
        _row(ctx, rows, r, first=i == 0, last=i == len(rows) - 1)
    card_close()
    return True


def on_next(ctx: BuilderContext) -> bool:
    rows = st.session_state.get(_key(ctx)) or []
    if not rows:
        return False
    try:
        ctx.client.update_section_order(ctx.project_id, ordered_ids(rows))
    except APIError as e:
        logger.error("Saving section order for %s failed: %s", ctx.project_id, e)
        status_card("Could not save section order", str(e), level="error")
        return False

    clear_project_cache(ctx.project_id, ("sf_review_", "sf_export_sections_", "sf_draft_docx_", "sf_export_bytes_"))
    flash("Order saved", f"{len(rows)} sections ordered.", level="success")
    return True
