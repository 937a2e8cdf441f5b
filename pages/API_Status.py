# pages/API_Status.py
from __future__ import annotations

import json
from typing import Any, Dict

import streamlit as st

from design.components.base_tool_ui import (
    apply_global_background,
    card_close,
    card_open,
    stat_tiles,
    status_card,
    topbar,
)
from surveyforge import config
from surveyforge.browser_storage import browser_session_ids
from surveyforge.integrations.surveyforge_client import SurveyForgeClient
from surveyforge.logging_utils import configure_logging

# ============================================================
# Page Settings (MUST BE FIRST Streamlit call)
# ============================================================
st.set_page_config(page_title="API Status | SurveyForge", layout="wide")

configure_logging()
apply_global_background()

SS_REPORT = "sf_api_status_report"
SAMPLE_CHARS = 500


def _sample(entry: Dict[str, Any]) -> str:
    raw = entry.get("response")
    text = raw if isinstance(raw, str) else json.dumps(raw, indent=2, default=str)
    return text if len(text) <= SAMPLE_CHARS else text[:SAMPLE_CHARS] + "..."


topbar(title="API Status", subtitle="Connectivity check against the SurveyForge backend.", right_chip="Diagnostics")

card_open("Configuration")
st.markdown(
    f"""
- **Base URL:** `{config.API_BASE_URL}`
- **API version:** `{config.API_VERSION}`
- **Request timeout:** {config.REQUEST_TIMEOUT_SEC}s (AI endpoints: {config.AI_REQUEST_TIMEOUT_SEC}s)
- **Session header:** `{config.SESSION_HEADER}`
"""
)
card_close()

if st.button("Run checks", type="primary") or SS_REPORT not in st.session_state:
    client = SurveyForgeClient(browser_session_ids())
    with st.spinner("Probing endpoints..."):
        st.session_state[SS_REPORT] = client.probe_endpoints()

report = st.session_state.get(SS_REPORT) or []
ok = sum(1 for e in report if e.get("status") == "success")
stat_tiles([(f"{ok}/{len(report)}", "Endpoints up")])

for entry in report:
    name = entry.get("endpoint", "")
    ms = entry.get("response_time_ms")
    timing = f"{ms} ms" if ms is not None else "n/a"
    if entry.get("status") == "success":
        status_card(f"{name}: OK", f"{entry.get('url', '')} · {timing}", level="success")
        with st.expander(f"{name} sample response"):
            st.code(_sample(entry), language="json")
    else:
        status_card(f"{name}: failed", f"{entry.get('url', '')} · {timing} · {entry.get('error', '')}", level="error")
