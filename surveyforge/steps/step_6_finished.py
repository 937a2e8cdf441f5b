# surveyforge/steps/step_6_finished.py
from __future__ import annotations

import streamlit as st

from design.components.base_tool_ui import card_close, card_open, stat_tiles
from surveyforge.export import survey_summary
from surveyforge.state import cache_key, pin_project
from surveyforge.steps._shared import load_once, load_project
from surveyforge.steps.step_1_setup import reset_form
from surveyforge.types import BuilderContext


def start_new_survey() -> None:
    pin_project(None, entry_step="setup")
    reset_form()


def render_step(ctx: BuilderContext) -> bool:
    project = load_project(ctx)
    if project is None:
        return False

    sections = load_once(
        cache_key("sf_export_sections_", ctx.project_id),
        lambda: ctx.client.get_question_review(ctx.project_id),
        what="survey content",
    ) or []
    summary = survey_summary(sections)

    st.balloons()
    card_open("🎉 Survey complete", subtitle=f"{project.project_name} for {project.client_name} is ready.")
    stat_tiles([
        (str(summary.section_count), "Sections"),
        (str(summary.question_count), "Questions"),
        (summary.minutes_label, "Estimated completion"),
    ])
    card_close()

    c1, c2 = st.columns(2, gap="large")
    with c1:
        if st.button("🏠 Back to Dashboard", key="sf.s6.home", use_container_width=True):
            st.switch_page("Home.py")
    with c2:
        if st.button("➕ Start a new survey", key="sf.s6.new", type="primary", use_container_width=True):
            start_new_survey()
            st.rerun()
    return True
