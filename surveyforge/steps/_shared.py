# surveyforge/steps/_shared.py
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

import streamlit as st

from design.components.base_tool_ui import status_card
from surveyforge.errors import APIError
from surveyforge.models import Industry, Methodology, Project
from surveyforge.state import cache_key
from surveyforge.types import BuilderContext

logger = logging.getLogger(__name__)

_MISSING = object()


def load_once(key: str, loader: Callable[[], Any], *, what: str) -> Any:
    """
    Fetch `loader()` the first time `key` is needed and keep it in session_state.
    On APIError an error card is shown and None returned (nothing is cached,
    so the next rerun tries again).
    """
    cached = st.session_state.get(key, _MISSING)
    if cached is not _MISSING and cached is not None:
        return cached

    try:
        with st.spinner(f"Loading {what}…"):
            value = loader()
    except APIError as e:
        logger.warning("Could not load %s: %s", what, e)
        status_card(f"Could not load {what}", str(e), level="error")
        return None

    st.session_state[key] = value
    return value


def load_project(ctx: BuilderContext) -> Optional[Project]:
    """The wizard's project, or None (after telling the user) when it is gone."""
    if not ctx.project_id:
        return None

    key = cache_key("sf_project_", ctx.project_id)
    project = st.session_state.get(key)
    if project is not None:
        return project

    try:
        with st.spinner("Loading project…"):
            project = ctx.client.get_project(ctx.project_id)
    except APIError as e:
        status_card("Could not load project details", str(e), level="error")
        return None

    if project is None:
        ctx.session_ids.forget_project_session(ctx.project_id)
        status_card("Project not found", "It may have been deleted. Go back to the dashboard.", level="error")
        if st.button("Back to Dashboard", key="sf_not_found_home"):
            st.switch_page("Home.py")
        return None

    st.session_state[key] = project
    return project


def methodologies(ctx: BuilderContext) -> List[Methodology]:
    return load_once("sf_methodologies", ctx.client.list_methodologies, what="methodologies") or []


def industries(ctx: BuilderContext) -> List[Industry]:
    return load_once("sf_industries", ctx.client.list_industries, what="industries") or []


def project_banner(project: Project) -> None:
    st.caption(
        f"**{project.project_name}** · {project.client_name} · {project.project_number} · "
        f"{project.methodology_name}"
    )
