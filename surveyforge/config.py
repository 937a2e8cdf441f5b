# surveyforge/config.py
from __future__ import annotations

import os
from typing import Dict, Optional


DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_API_VERSION = "v1"


def _from_streamlit_secrets(name: str) -> Optional[str]:
    """
    Read a plain value from Streamlit secrets.
    Returns None outside a Streamlit runtime or when no secrets file exists.
    """
    try:
        import streamlit as st
    except ImportError:
        return None

    try:
        if name in st.secrets:
            return str(st.secrets[name])
    except FileNotFoundError:
        return None
    return None


def _setting(name: str, default: str) -> str:
    """
    Priority:
      1) Environment variable
      2) Streamlit secrets
      3) default
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        raw = _from_streamlit_secrets(name)
    raw = (raw or "").strip()
    return raw or default


# =============================================================================
# Backend
# =============================================================================
API_BASE_URL = _setting("SURVEYFORGE_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
API_VERSION = _setting("SURVEYFORGE_API_VERSION", DEFAULT_API_VERSION).strip("/")

REQUEST_TIMEOUT_SEC = 120
# generate_ai_questions / reprompt-questions
AI_REQUEST_TIMEOUT_SEC = 300

SESSION_HEADER = "X-User-Session-Id"

# localStorage keys (kept compatible with the browser client)
USER_SESSION_KEY = "user-session-id"
PROJECT_SESSION_KEY_PREFIX = "project-session-"

LOG_LEVEL = _setting("SURVEYFORGE_LOG_LEVEL", "INFO").upper()


def api_endpoint(path: str, *, base_url: Optional[str] = None, version: Optional[str] = None) -> str:
    clean = (path or "").lstrip("/")
    base = (base_url or API_BASE_URL).rstrip("/")
    ver = (version or API_VERSION).strip("/")
    return f"{base}/api/{ver}/{clean}"


def project_session_key(project_id: str) -> str:
    return f"{PROJECT_SESSION_KEY_PREFIX}{project_id}"


# Endpoints probed by the API status page (name -> path under the API root)
PROBE_PATHS: Dict[str, str] = {
    "Projects": "projects/",
    "Methodologies": "methodologies/",
    "Industries": "industries/",
    "Section Templates": "sections/",
}
ENDPOINTS: Dict[str, str] = {name: api_endpoint(path) for name, path in PROBE_PATHS.items()}
