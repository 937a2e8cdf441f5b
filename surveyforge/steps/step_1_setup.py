# surveyforge/steps/step_1_setup.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import streamlit as st

from design.components.base_tool_ui import card_close, card_open, status_card
from surveyforge.errors import APIError, ValidationError
from surveyforge.models import Project, TrackedSupplier
from surveyforge.project_form import (
    COUNTRIES,
    DESIGN_BRIEF_TYPES,
    FORM_FIELDS,
    LANGUAGES,
    LOI_MAX,
    LOI_MIN,
    SAMPLE_TYPES,
    empty_form,
    form_from_project,
    project_from_form,
    validate_project_form,
)
from surveyforge.state import cache_key, clear_project_cache, flash, pin_project
from surveyforge.steps._shared import industries, load_project, methodologies
from surveyforge.suppliers import add_supplier, remove_supplier, update_supplier
from surveyforge.types import BuilderContext

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
SS_LOADED_FOR = "sf.s1.loaded_for"
SS_SUPPLIERS = "sf.s1.suppliers"
SS_BRIEF = "sf.s1.design_brief"


def _k(field: str) -> str:
    return f"sf.s1.{field}"


# -----------------------------------------------------------------------------
# Form state
# -----------------------------------------------------------------------------
def _seed_form(ctx: BuilderContext, project: Optional[Project]) -> None:
    """Fill widget keys once per project so reruns keep what the user typed."""
    owner = ctx.project_id or "new"
    if st.session_state.get(SS_LOADED_FOR) == owner:
        return

    form = form_from_project(project) if project else empty_form()
    for field in FORM_FIELDS:
        value = form.get(field)
        if value is None:
            st.session_state.pop(_k(field), None)
        else:
            st.session_state[_k(field)] = value
    _clear_supplier_widgets()
    st.session_state[SS_SUPPLIERS] = list(form.get("tracked_suppliers") or [])
    st.session_state[SS_LOADED_FOR] = owner


def _clear_supplier_widgets() -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith("sf.s1.sup.")]:
        del st.session_state[key]


def reset_form() -> None:
    """Forget the seeded form so the next render starts from the project (or blank)."""
    st.session_state.pop(SS_LOADED_FOR, None)


def current_form() -> Dict[str, Any]:
    form = {field: st.session_state.get(_k(field)) for field in FORM_FIELDS}
    form["tracked_suppliers"] = list(st.session_state.get(SS_SUPPLIERS) or [])
    return form


# -----------------------------------------------------------------------------
# UI blocks
# -----------------------------------------------------------------------------
def _select(label: str, field: str, options: List[Any], fmt, *, placeholder: str) -> None:
    current = st.session_state.get(_k(field))
    if current not in options:
        st.session_state[_k(field)] = None
    st.selectbox(label, options=options, format_func=fmt, key=_k(field), index=None, placeholder=placeholder)


def _client_block(ctx: BuilderContext) -> None:
    card_open("Client & Project", subtitle="Who the survey is for and how it is identified.")
    c1, c2 = st.columns(2, gap="large")
    with c1:
        st.text_input("Client name *", key=_k("client_name"))
        st.text_input("Project number *", key=_k("project_number"))
        st.text_input("Category", key=_k("category"))
    with c2:
        st.text_input("Project name *", key=_k("project_name"))
        meths = methodologies(ctx)
        by_id = {m.id: m.name for m in meths}
        _select("Methodology *", "methodology_id", list(by_id), lambda v: by_id.get(v, str(v)),
                placeholder="Select methodology")
        inds = industries(ctx)
        ind_by_id = {i.id: i.name for i in inds}
        _select("Industry *", "industry_id", list(ind_by_id), lambda v: ind_by_id.get(v, str(v)),
                placeholder="Select industry")
    st.text_area("Research objectives *", key=_k("research_objectives"), height=110)
    st.text_input("Target audience", key=_k("target_audience"))
    card_close()


def _sample_block() -> None:
    card_open("Sample & Fieldwork")
    c1, c2, c3 = st.columns(3, gap="large")
    with c1:
        st.text_input("Sample size *", key=_k("sample_size"), placeholder="e.g. n=1,000")
        st.number_input(
            f"Length of interview (minutes) * ({LOI_MIN}-{LOI_MAX})",
            min_value=LOI_MIN,
            max_value=LOI_MAX,
            step=1,
            value=None,
            key=_k("loi"),
        )
    with c2:
        _select("Target country *", "target_country", COUNTRIES, str, placeholder="Select country")
        _select("Sample type *", "sample_type", list(SAMPLE_TYPES), lambda v: SAMPLE_TYPES.get(v, v),
                placeholder="Select sample type")
    with c3:
        _select("Language", "language_preference", list(LANGUAGES), lambda v: LANGUAGES.get(v, v),
                placeholder="Select language")
    st.text_area("Sample profile", key=_k("sample_profile"), height=80)
    card_close()


def _suppliers_block() -> None:
    card_open("Tracked Suppliers", subtitle="Brands or suppliers tracked across the survey.")
    suppliers: List[TrackedSupplier] = list(st.session_state.get(SS_SUPPLIERS) or [])

    for i, sup in enumerate(suppliers):
        c1, c2, c3, c4 = st.columns([2, 4, 2, 1])
        with c1:
            code = st.text_input("Code", value=sup.code, key=f"sf.s1.sup.{i}.code", label_visibility="collapsed")
        with c2:
            name = st.text_input("Name", value=sup.name, key=f"sf.s1.sup.{i}.name", label_visibility="collapsed")
        with c3:
            prophecy = st.checkbox("Prophecy", value=sup.is_prophecy_supplier, key=f"sf.s1.sup.{i}.prophecy")
        with c4:
            if st.button("🗑️", key=f"sf.s1.sup.{i}.rm", help="Remove supplier"):
                st.session_state[SS_SUPPLIERS] = remove_supplier(suppliers, i)
                _clear_supplier_widgets()
                st.rerun()

        if code.upper() != sup.code:
            suppliers = update_supplier(suppliers, i, "code", code)
        if name != sup.name:
            suppliers = update_supplier(suppliers, i, "name", name)
        if prophecy != sup.is_prophecy_supplier:
            suppliers = update_supplier(suppliers, i, "is_prophecy_supplier", prophecy)
    st.session_state[SS_SUPPLIERS] = suppliers

    if not suppliers:
        st.caption("No tracked suppliers yet.")

    with st.form("sf.s1.add_supplier", clear_on_submit=True):
        c1, c2, c3 = st.columns([2, 4, 2])
        with c1:
            new_code = st.text_input("New supplier code")
        with c2:
            new_name = st.text_input("New supplier name")
        with c3:
            new_prophecy = st.checkbox("Prophecy supplier")
        submitted = st.form_submit_button("➕ Add supplier")

    if submitted:
        try:
            st.session_state[SS_SUPPLIERS] = add_supplier(
                suppliers, TrackedSupplier(code=new_code, name=new_name, is_prophecy_supplier=new_prophecy)
            )
            st.rerun()
        except ValidationError as e:
            st.error(str(e))
    card_close()


def _brief_block(ctx: BuilderContext) -> None:
    if ctx.project_id:
        return
    card_open("Design Brief", subtitle="Optional. The backend extracts sections from it after the project is created.")
    st.file_uploader("Upload design brief", type=DESIGN_BRIEF_TYPES, key=SS_BRIEF)
    card_close()


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def render_step(ctx: BuilderContext) -> bool:
    project = None
    if ctx.project_id:
        project = load_project(ctx)
        if project is None:
            return False

    _seed_form(ctx, project)

    _client_block(ctx)
    _sample_block()
    _suppliers_block()
    _brief_block(ctx)

    errors = validate_project_form(current_form())
    if errors:
        with st.expander(f"{len(errors)} field(s) still need attention", expanded=False):
            for msg in errors:
                st.markdown(f"- {msg}")
    return not errors


def on_next(ctx: BuilderContext) -> bool:
    """Create (or update) the project. Returning False keeps the user on this step."""
    form = current_form()
    base = st.session_state.get(cache_key("sf_project_", ctx.project_id)) if ctx.project_id else None
    try:
        project = project_from_form(
            form,
            methodologies=st.session_state.get("sf_methodologies") or [],
            industries=st.session_state.get("sf_industries") or [],
            base=base,
        )
    except ValidationError as e:
        status_card("Validation Error", str(e), level="error")
        return False

    try:
        if ctx.project_id:
            saved = ctx.client.update_project(project)
            st.session_state[cache_key("sf_project_", saved.id)] = saved
            st.session_state.pop("sf_projects", None)
            flash("Project updated", f"{saved.project_name} was saved.", level="success")
            return True

        brief = st.session_state.get(SS_BRIEF)
        design_brief = (brief.name, brief.getvalue()) if brief is not None else None
        created, brief_result = ctx.client.create_project(project, design_brief=design_brief)
    except APIError as e:
        logger.error("Saving project %s failed: %s", ctx.project_id or "(new)", e)
        status_card("Could not save project", str(e), level="error")
        return False

    clear_project_cache(created.id)
    st.session_state.pop("sf_projects", None)
    st.session_state[cache_key("sf_project_", created.id)] = created
    st.session_state[SS_LOADED_FOR] = created.id
    pin_project(created.id)

    if brief_result is not None and not brief_result.success:
        flash(
            "Project created, design brief not processed",
            brief_result.error or "Failed to upload design brief",
            level="warning",
        )
    elif brief_result is not None:
        found = brief_result.sections_found
        flash("Project created", f"Design brief processed ({found or 0} sections found).", level="success")
    else:
        flash("Project created", f"{created.project_name} is ready for section selection.", level="success")
    return True
