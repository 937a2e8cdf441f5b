# pages/Project_Overview.py
from __future__ import annotations

import logging

import streamlit as st

# ============================================================
# Page config (MUST BE FIRST Streamlit call)
# ============================================================
st.set_page_config(page_title="Project Overview | SurveyForge", layout="wide")

from design.components.base_tool_ui import apply_global_background, badges, card_close, card_open, status_card, topbar
from surveyforge.browser_storage import browser_session_ids, ensure_user_session_id, load_project_session
from surveyforge.dashboard import WORKFLOW_LINKS, entry_step, project_details
from surveyforge.integrations.surveyforge_client import SurveyForgeClient
from surveyforge.logging_utils import configure_logging
from surveyforge.state import current_project_id, init_builder_state, pin_project
from surveyforge.steps._shared import load_project
from surveyforge.types import BuilderContext

configure_logging()
logger = logging.getLogger("surveyforge.pages.project_overview")

apply_global_background()
init_builder_state()

BUILDER_PAGE = "pages/Survey_Builder.py"


def _jump(project_id: str, step_id: str) -> None:
    logger.info("Opening project %s at step %s", project_id, step_id)
    pin_project(project_id, entry_step=entry_step(step_id))
    st.switch_page(BUILDER_PAGE)


if ensure_user_session_id() is None:
    st.caption("Preparing your session…")
    st.stop()

project_id = current_project_id()
if not project_id:
    topbar(title="Project Overview", subtitle="No project selected.")
    status_card("No project selected", "Open a project from the dashboard first.", level="info")
    if st.button("Back to Dashboard"):
        st.switch_page("Home.py")
    st.stop()

load_project_session(project_id)
session_ids = browser_session_ids()
ctx = BuilderContext(client=SurveyForgeClient(session_ids), session_ids=session_ids, project_id=project_id)

project = load_project(ctx)
if project is None:
    st.stop()

topbar(
    title=project.project_name or "Untitled project",
    subtitle=f"Client: {project.client_name} | Project #: {project.project_number}",
    right_chip=project.status,
)
if st.button("← All projects"):
    st.switch_page("Home.py")

left, right = st.columns([1, 2], gap="large")

with left:
    card_open("Project details")
    for label, value in project_details(project):
        st.markdown(f"**{label}:** {value}")
    card_close()

    if project.research_objectives:
        card_open("Research Objectives")
        st.write(project.research_objectives)
        card_close()

    if project.sample_profile:
        card_open("Sample Profile")
        st.write(project.sample_profile)
        card_close()

with right:
    card_open("Survey Workflow", subtitle="Jump straight to any step of this project.")
    cols = st.columns(3)
    for i, link in enumerate(WORKFLOW_LINKS):
        with cols[i % 3]:
            if st.button(link.title, key=f"sf.overview.{link.step_id}", help=link.blurb, use_container_width=True):
                _jump(project.id, link.step_id)
            st.caption(link.blurb)
    card_close()

    if project.tracked_suppliers:
        card_open("Tracked suppliers")
        badges([f"{s.code} · {s.name}" for s in project.tracked_suppliers])
        card_close()
