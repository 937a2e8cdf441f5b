from __future__ import annotations

import logging

import streamlit as st

# ============================================================
# Page config (MUST BE FIRST Streamlit call)
# ============================================================
st.set_page_config(page_title="Survey Builder | SurveyForge", layout="wide")

# ============================================================
# Internal project imports
# ============================================================
from design.components.base_tool_ui import apply_global_background, status_card, topbar
from surveyforge.browser_storage import browser_session_ids, ensure_user_session_id, load_project_session
from surveyforge.integrations.surveyforge_client import SurveyForgeClient
from surveyforge.logging_utils import configure_logging
from surveyforge.state import current_project_id, init_builder_state, pop_entry_step, pop_flash
from surveyforge.steps import (
    step_1_setup,
    step_2_sections,
    step_3_questions,
    step_4_order,
    step_5_export,
    step_6_finished,
)
from surveyforge.types import BuilderContext
from surveyforge.ui.wizard import Wizard, WizardConfig
from surveyforge.workflow import requires_project

configure_logging()
logger = logging.getLogger("surveyforge.pages.survey_builder")

apply_global_background()
init_builder_state()

# ============================================================
# Session scoping (browser localStorage, first render returns None)
# ============================================================
if ensure_user_session_id() is None:
    st.caption("Preparing your session…")
    st.stop()

project_id = current_project_id()
if project_id:
    load_project_session(project_id)

session_ids = browser_session_ids()
client = SurveyForgeClient(session_ids)

ctx = BuilderContext(
    client=client,
    session_ids=session_ids,
    project_id=project_id,
)

# ============================================================
# Wizard
# ============================================================
wiz = Wizard(WizardConfig(name="Survey Builder", key_prefix="sf_builder"))

entry = pop_entry_step()
if entry:
    wiz.set_step(entry)

# later steps without a project make no sense (e.g. reload after "New project")
if requires_project(wiz.step_id) and not ctx.project_id:
    logger.info("No project pinned on step %s; returning to setup", wiz.step_id)
    wiz.reset()

topbar(
    title="Survey Builder",
    subtitle="Set up a project, pick sections, review AI questions and export.",
    right_chip="SurveyForge",
)

msg = pop_flash()
if msg:
    status_card(msg.get("title", ""), msg.get("message", ""), level=msg.get("level", "info"))

# ============================================================
# Routing
# ============================================================
STEP_MODULES = {
    "setup": step_1_setup,
    "sections": step_2_sections,
    "questions": step_3_questions,
    "order": step_4_order,
    "export": step_5_export,
    "finished": step_6_finished,
}

wiz.header()
step = STEP_MODULES[wiz.step_id]

ok = step.render_step(ctx)

if wiz.step_id == "finished":
    st.stop()

if wiz.is_first_step():
    wiz.nav(can_next=ok, back_label="Back to Dashboard", on_back=lambda: st.switch_page("Home.py"),
            on_next=lambda: step.on_next(ctx))
else:
    wiz.nav(can_next=ok, on_next=lambda: step.on_next(ctx))
