# surveyforge/steps/step_5_export.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import streamlit as st

from design.components.base_tool_ui import card_close, card_open, stat_tiles, status_card
from surveyforge.errors import APIError
from surveyforge.export import (
    EXPORT_OPTIONS,
    ExportOption,
    begin_export,
    export_file_name,
    exporting_format,
    finish_export,
    get_option,
    survey_summary,
)
from surveyforge.models import Project, ProjectSection
from surveyforge.report_builder import build_questionnaire_docx
from surveyforge.state import cache_key
from surveyforge.steps._shared import load_once, load_project, project_banner
from surveyforge.types import BuilderContext

logger = logging.getLogger(__name__)

_ICONS = {"docx": "📄", "pdf": "📕", "csv": "📊"}


def _sections(ctx: BuilderContext) -> Optional[List[ProjectSection]]:
    return load_once(
        cache_key("sf_export_sections_", ctx.project_id),
        lambda: ctx.client.get_question_review(ctx.project_id),
        what="survey content",
    )


def _exports(ctx: BuilderContext) -> Dict[str, bytes]:
    return st.session_state.setdefault(cache_key("sf_export_bytes_", ctx.project_id), {})


def _run_export(ctx: BuilderContext, opt: ExportOption) -> None:
    if not begin_export(st.session_state, opt.format):
        status_card("Export in progress", "Wait for the current export to finish.", level="warning")
        return
    try:
        with st.spinner(f"Exporting {opt.title}…"):
            data = ctx.client.export_project(ctx.project_id, opt.format)
    except APIError as e:
        logger.error("%s export of %s failed: %s", opt.format, ctx.project_id, e)
        status_card("Export failed", str(e), level="error")
        return
    finally:
        finish_export(st.session_state)

    if not data:
        status_card("Export failed", "The server returned an empty file.", level="error")
        return
    _exports(ctx)[opt.format] = data
    status_card("Export ready", f"{opt.title} file is ready to download.", level="success")


def _option_card(ctx: BuilderContext, project: Project, opt: ExportOption, *, busy: Optional[str]) -> None:
    card_open(f"{_ICONS.get(opt.format, '')} {opt.title}".strip(), subtitle=opt.description)
    clicked = st.button(
        "Exporting…" if busy == opt.format else f"Export {opt.format.upper()}",
        key=f"sf.s5.export.{opt.format}",
        disabled=busy is not None,
        use_container_width=True,
    )
    if clicked:
        _run_export(ctx, opt)

    data = _exports(ctx).get(opt.format)
    if data:
        st.download_button(
            f"⬇️ Download {opt.extension.upper()}",
            data=data,
            file_name=export_file_name(project, opt.format),
            mime=opt.mime_type,
            use_container_width=True,
            key=f"sf.s5.download.{opt.format}",
        )
    card_close()


def _draft_card(ctx: BuilderContext, project: Project, sections: List[ProjectSection]) -> None:
    key = cache_key("sf_draft_docx_", ctx.project_id)
    card_open("Offline draft", subtitle="Build a Word draft locally from the questions shown here.")
    if st.button("Build draft DOCX", key="sf.s5.draft", use_container_width=True):
        with st.spinner("Building draft…"):
            st.session_state[key] = build_questionnaire_docx(project, sections)

    data = st.session_state.get(key)
    if data:
        opt = get_option("docx")
        name = export_file_name(project, "docx")
        st.download_button(
            "⬇️ Download draft",
            data=data,
            file_name=name.replace(".docx", "_draft.docx"),
            mime=opt.mime_type,
            use_container_width=True,
            key="sf.s5.draft.download",
        )
    card_close()


def render_step(ctx: BuilderContext) -> bool:
    project = load_project(ctx)
    if project is None:
        return False
    project_banner(project)

    sections = _sections(ctx)
    if sections is None:
        return False

    summary = survey_summary(sections)
    stat_tiles([
        (str(summary.section_count), "Sections"),
        (str(summary.question_count), "Questions"),
        (summary.minutes_label, "Estimated completion"),
    ])
    if summary.question_count == 0:
        status_card("Survey is empty", "There are no questions to export yet.", level="warning")

    busy = exporting_format(st.session_state)
    cols = st.columns(len(EXPORT_OPTIONS), gap="medium")
    for col, opt in zip(cols, EXPORT_OPTIONS):
        with col:
            _option_card(ctx, project, opt, busy=busy)

    _draft_card(ctx, project, sections)
    return True


def on_next(ctx: BuilderContext) -> bool:
    return True
