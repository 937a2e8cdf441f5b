# surveyforge/steps/step_2_sections.py
from __future__ import annotations

import logging
from typing import Dict, List

import streamlit as st

from design.components.base_tool_ui import badges, card_close, card_open, stat_tiles, status_card
from surveyforge.errors import APIError
from surveyforge.integrations.surveyforge_client import section_payload
from surveyforge.library import (
    CATALOGUE_METHODOLOGIES,
    FILTER_TYPES,
    default_selection,
    filter_sections,
    library_sections,
    methodology_key,
    reconcile_selection,
    selected_templates,
    selection_estimates,
    toggle,
)
from surveyforge.models import SectionTemplate
from surveyforge.state import cache_key, clear_project_cache, flash
from surveyforge.steps._shared import load_once, load_project, project_banner
from surveyforge.types import BuilderContext

logger = logging.getLogger(__name__)

SS_SEARCH = "sf.s2.search"
SS_FILTER = "sf.s2.filter"
SS_FALLBACK = "sf.s2.using_catalogue"


# -----------------------------------------------------------------------------
# Data
# -----------------------------------------------------------------------------
def _templates(ctx: BuilderContext) -> List[SectionTemplate]:
    """Backend library, or the built-in catalogue when it is empty/unreachable."""
    if "sf_section_templates" not in st.session_state or st.session_state["sf_section_templates"] is None:
        try:
            backend = ctx.client.list_sections()
        except APIError as e:
            logger.warning("Section library unavailable, using built-in catalogue: %s", e)
            backend = []
        rows, fallback = library_sections(backend)
        st.session_state["sf_section_templates"] = rows
        st.session_state[SS_FALLBACK] = fallback
    return st.session_state["sf_section_templates"]


def _links(ctx: BuilderContext):
    if st.session_state.get(SS_FALLBACK):
        return []
    return load_once("sf_methodology_links", ctx.client.list_methodology_sections, what="methodology links") or []


def _selection(ctx: BuilderContext, project, templates: List[SectionTemplate]) -> List[str]:
    key = cache_key("sf_selection_", ctx.project_id)
    if key in st.session_state:
        return st.session_state[key]

    defaults = default_selection(
        templates,
        methodology_name=project.methodology_name,
        methodology_id=project.methodology_id,
        links=_links(ctx),
    )

    attached = load_once(
        cache_key("sf_attached_", ctx.project_id),
        lambda: ctx.client.get_project_sections(ctx.project_id),
        what="project sections",
    ) or []
    known = {t.id for t in templates}
    attached_ids = [s.template_id for s in attached if s.template_id in known]

    selection = reconcile_selection(attached_ids, defaults)
    st.session_state[key] = selection
    return selection


# -----------------------------------------------------------------------------
# UI
# -----------------------------------------------------------------------------
def _section_row(ctx: BuilderContext, tpl: SectionTemplate, selection: List[str]) -> None:
    checked = tpl.id in selection
    c1, c2 = st.columns([1, 12])
    with c1:
        new_checked = st.checkbox(
            "Select",
            value=checked,
            key=f"sf.s2.pick.{ctx.project_id}.{tpl.id}",
            label_visibility="collapsed",
        )
    with c2:
        st.markdown(f"**{tpl.name}**")
        if tpl.description:
            st.caption(tpl.description)
        badges([tpl.question_hint, tpl.category.title() if tpl.category else "", "Core" if tpl.is_core else ""])

    if new_checked != checked:
        st.session_state[cache_key("sf_selection_", ctx.project_id)] = toggle(selection, tpl.id)
        st.rerun()


def render_step(ctx: BuilderContext) -> bool:
    project = load_project(ctx)
    if project is None:
        return False
    project_banner(project)

    templates = _templates(ctx)
    if st.session_state.get(SS_FALLBACK):
        status_card(
            "Using the built-in section library",
            "The backend returned no section templates, so the standard catalogue is shown.",
            level="warning",
        )

    selection = _selection(ctx, project, templates)
    chosen = selected_templates(templates, selection)

    key = methodology_key(project.methodology_name)
    meth_desc = next((m["description"] for m in CATALOGUE_METHODOLOGIES if m["id"] == key), "")
    card_open(
        f"Methodology: {project.methodology_name}",
        subtitle=meth_desc or "Default sections have been pre-selected; add or remove as needed.",
    )
    n, lo, hi = selection_estimates(chosen)
    stat_tiles([
        (str(len(chosen)), "Sections selected"),
        (f"~{n}", "Estimated questions"),
        (f"{lo}-{hi} min", "Estimated completion"),
    ])
    card_close()

    c1, c2 = st.columns([3, 2])
    with c1:
        search = st.text_input("Search sections", key=SS_SEARCH, placeholder="Name or description")
    with c2:
        labels: Dict[str, str] = dict(FILTER_TYPES)
        type_ = st.selectbox("Filter", options=list(labels), format_func=lambda v: labels[v], key=SS_FILTER)

    shown = filter_sections(templates, search, type_)
    card_open("Section Library", subtitle=f"{len(shown)} of {len(templates)} sections")
    if not shown:
        st.caption("No sections match your search.")
    for tpl in shown:
        _section_row(ctx, tpl, selection)
    card_close()

    if not selection:
        status_card("No sections selected", "Select at least one section to continue.", level="warning")
    return bool(selection)


def on_next(ctx: BuilderContext) -> bool:
    """Persist the selection (positions follow selection order)."""
    selection = st.session_state.get(cache_key("sf_selection_", ctx.project_id)) or []
    if not selection:
        status_card("No sections selected", "Select at least one section to continue.", level="error")
        return False

    templates = st.session_state.get("sf_section_templates") or []
    names = {t.id: t.name for t in templates}
    try:
        ctx.client.save_project_sections(ctx.project_id, section_payload(selection, names))
    except APIError as e:
        status_card("Could not save sections", str(e), level="error")
        return False

    # later steps must re-read what the server now has
    clear_project_cache(ctx.project_id, ("sf_attached_", "sf_review_", "sf_order_", "sf_export_sections_"))
    flash("Sections saved", f"{len(selection)} sections attached to the project.", level="success")
    return True
