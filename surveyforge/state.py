# surveyforge/state.py
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple

import streamlit as st

SS_PROJECT_ID = "sf_project_id"
SS_ENTRY_STEP = "sf_entry_step"
SS_FLASH = "sf_flash"

# per-project caches; keys are f"{prefix}{project_id}"
PROJECT_CACHE_PREFIXES: Tuple[str, ...] = (
    "sf_project_",
    "sf_attached_",
    "sf_selection_",
    "sf_review_",
    "sf_order_",
    "sf_export_sections_",
    "sf_draft_docx_",
    "sf_export_bytes_",
)


def init_builder_state() -> None:
    """
    Lightweight init for the survey builder.
    Keeps keys consistent across steps; step data itself is loaded lazily.
    """
    # core
    st.session_state.setdefault(SS_PROJECT_ID, None)
    st.session_state.setdefault(SS_ENTRY_STEP, None)
    st.session_state.setdefault(SS_FLASH, None)

    # reference data (shared by every project)
    st.session_state.setdefault("sf_methodologies", None)
    st.session_state.setdefault("sf_industries", None)
    st.session_state.setdefault("sf_section_templates", None)
    st.session_state.setdefault("sf_methodology_links", None)
    st.session_state.setdefault("sf_reprompt_options", None)

    # Step 5
    st.session_state.setdefault("sf_exporting_format", None)


def current_project_id() -> Optional[str]:
    pid = st.session_state.get(SS_PROJECT_ID)
    return str(pid) if pid else None


def pin_project(project_id: Optional[str], *, entry_step: Optional[str] = None) -> None:
    """Make `project_id` the builder's project; `entry_step` is where the wizard opens next."""
    st.session_state[SS_PROJECT_ID] = project_id or None
    st.session_state[SS_ENTRY_STEP] = entry_step


def pop_entry_step() -> Optional[str]:
    step = st.session_state.get(SS_ENTRY_STEP)
    st.session_state[SS_ENTRY_STEP] = None
    return step or None


def cache_key(prefix: str, project_id: Optional[str]) -> str:
    return f"{prefix}{project_id or 'new'}"


def clear_project_cache(project_id: Optional[str], prefixes: Iterable[str] = PROJECT_CACHE_PREFIXES) -> None:
    for prefix in prefixes:
        st.session_state.pop(cache_key(prefix, project_id), None)


# -----------------------------------------------------------------------------
# Flash messages survive the rerun that follows a wizard transition
# -----------------------------------------------------------------------------
def flash(title: str, message: str, level: str = "info") -> None:
    st.session_state[SS_FLASH] = {"title": title, "message": message, "level": level}


def pop_flash() -> Optional[Dict[str, Any]]:
    msg = st.session_state.get(SS_FLASH)
    st.session_state[SS_FLASH] = None
    return msg if isinstance(msg, dict) else None
