# Home.py: project dashboard
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import streamlit as st

from design.components.base_tool_ui import (
    apply_global_background,
    badges,
    card_close,
    card_open,
    stat_tiles,
    status_card,
    topbar,
)
from design.theme.glass import theme_selector_widget
from surveyforge.browser_storage import browser_session_ids, ensure_user_session_id
from surveyforge.dashboard import STATUS_FILTERS, filter_projects
from surveyforge.errors import APIError
from surveyforge.integrations.surveyforge_client import SurveyForgeClient
from surveyforge.logging_utils import configure_logging
from surveyforge.models import PROJECT_STATUSES, Project
from surveyforge.state import clear_project_cache, init_builder_state, pin_project
from surveyforge.steps.step_1_setup import reset_form

# -------------------------
# Page config (MUST be first)
# -------------------------
st.set_page_config(page_title="SurveyForge | Dashboard", layout="wide")

configure_logging()
logger = logging.getLogger("surveyforge.pages.home")

apply_global_background()
init_builder_state()
theme_selector_widget()

BUILDER_PAGE = "pages/Survey_Builder.py"
OVERVIEW_PAGE = "pages/Project_Overview.py"
SS_PROJECTS = "sf_projects"
SS_SEARCH = "sf.home.search"
SS_STATUS = "sf.home.status"


# -------------------------
# Data
# -------------------------
def _load_projects(client: SurveyForgeClient) -> Tuple[List[Project], Optional[str]]:
    cached = st.session_state.get(SS_PROJECTS)
    if cached is not None:
        return cached, None
    try:
        with st.spinner("Loading projects..."):
            projects = client.list_projects()
    except APIError as e:
        logger.warning("Could not list projects: %s", e)
        return [], str(e)
    st.session_state[SS_PROJECTS] = projects
    return projects, None


def _refresh() -> None:
    st.session_state.pop(SS_PROJECTS, None)


# -------------------------
# Actions
# -------------------------
def _open_project(p: Project) -> None:
    # re-read everything for this project; the overview picks the wizard step
    clear_project_cache(p.id)
    reset_form()
    pin_project(p.id)
    st.switch_page(OVERVIEW_PAGE)


def _new_project() -> None:
    reset_form()
    pin_project(None, entry_step="setup")
    st.switch_page(BUILDER_PAGE)


# -------------------------
# UI
# -------------------------
topbar(
    title="SurveyForge",
    subtitle="AI-assisted survey authoring for market research projects.",
    right_chip="Dashboard",
)

if ensure_user_session_id() is None:
    st.caption("Preparing your session...")
    st.stop()

client = SurveyForgeClient(browser_session_ids())
projects, load_error = _load_projects(client)

top_l, top_s, top_m, top_r = st.columns([3, 1.2, 1, 1], vertical_alignment="bottom")
with top_l:
    search = st.text_input("Search projects", key=SS_SEARCH, placeholder="Name, client, number or methodology")
with top_s:
    status = st.selectbox("Status", STATUS_FILTERS, key=SS_STATUS)
with top_m:
    st.button("Refresh", on_click=_refresh, use_container_width=True)
with top_r:
    if st.button("➕ New project", type="primary", use_container_width=True):
        _new_project()

if load_error:
    status_card("Could not load projects", load_error, level="error")
    st.stop()

stat_tiles([(str(len(projects)), "Projects")] + [
    (str(sum(1 for p in projects if p.status == label)), label) for label in PROJECT_STATUSES
])

shown = filter_projects(projects, search, status)
if not projects:
    status_card("No projects yet", "Create your first survey project to get started.", level="info")
elif not shown:
    st.caption("No projects match your filters.")

for p in shown:
    card_open(p.project_name or "Untitled project", subtitle=f"{p.client_name} · {p.project_number}".strip(" ·"))
    c1, c2 = st.columns([5, 1], vertical_alignment="center")
    with c1:
        badges([p.status, p.methodology_name, f"{p.question_count} questions" if p.question_count else ""])
        if p.last_modified:
            st.caption(f"Last modified: {p.last_modified}")
    with c2:
        if st.button("Open", key=f"sf.home.open.{p.id}", use_container_width=True):
            _open_project(p)
    card_close()
