# surveyforge/browser_storage.py
from __future__ import annotations

import json
from typing import Dict, Iterator, MutableMapping, Optional

import streamlit as st
from streamlit_js_eval import streamlit_js_eval

from surveyforge.config import USER_SESSION_KEY, project_session_key
from surveyforge.session import SessionIds

# st.session_state mirror of the localStorage keys we care about
_SS_MIRROR = "_sf_local_storage"

# Runs in the browser: read the id, or create + persist it there. Creating it on
# the Python side would race other tabs (the first js_eval render returns None).
_GET_OR_CREATE_USER_ID_JS = """
(function() {
  var k = %s;
  var v = localStorage.getItem(k);
  if (!v) {
    if (window.crypto && crypto.randomUUID) {
      v = crypto.randomUUID();
    } else {
      v = 'xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx'.replace(/[xy]/g, function(c) {
        var r = Math.random() * 16 | 0, d = c == 'x' ? r : (r & 0x3 | 0x8);
        return d.toString(16);
      });
    }
    localStorage.setItem(k, v);
  }
  return v;
})()
"""


# =============================================================================
# localStorage helpers
# =============================================================================
def _js_str(value: str) -> str:
    return json.dumps(value or "")


def _ls_get(key: str) -> Optional[str]:
    v = streamlit_js_eval(
        js_expressions=f"localStorage.getItem({_js_str(key)})",
        key=f"ls_get_{key}",
        want_output=True,
    )
    if v in (None, "null"):
        return None
    return str(v)


def _ls_set(key: str, value: str) -> None:
    streamlit_js_eval(
        js_expressions=f"localStorage.setItem({_js_str(key)}, {_js_str(value)})",
        key=f"ls_set_{key}_{value}",
        want_output=False,
    )


def _ls_remove(key: str) -> None:
    streamlit_js_eval(
        js_expressions=f"localStorage.removeItem({_js_str(key)})",
        key=f"ls_rm_{key}",
        want_output=False,
    )


class BrowserStorage(MutableMapping[str, str]):
    """Write-through mapping: st.session_state mirror + browser localStorage."""

    def __init__(self) -> None:
        st.session_state.setdefault(_SS_MIRROR, {})

    @property
    def _mirror(self) -> Dict[str, str]:
        return st.session_state[_SS_MIRROR]

    def __getitem__(self, key: str) -> str:
        return self._mirror[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._mirror[key] = value
        _ls_set(key, value)

    def __delitem__(self, key: str) -> None:
        del self._mirror[key]
        _ls_remove(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict(self._mirror))

    def __len__(self) -> int:
        return len(self._mirror)


# =============================================================================
# Public API
# =============================================================================
def ensure_user_session_id() -> Optional[str]:
    """
    Make sure the browser's user session id is mirrored into session_state.

    Returns None on the very first render (the JS component has not reported
    back yet); the component triggers a rerun once it has the value.
    """
    mirror: Dict[str, str] = st.session_state.setdefault(_SS_MIRROR, {})
    if mirror.get(USER_SESSION_KEY):
        return mirror[USER_SESSION_KEY]

    v = streamlit_js_eval(
        js_expressions=_GET_OR_CREATE_USER_ID_JS % _js_str(USER_SESSION_KEY),
        key="ls_user_session_id",
        want_output=True,
    )
    if v in (None, "null", ""):
        return None

    mirror[USER_SESSION_KEY] = str(v)
    return mirror[USER_SESSION_KEY]


def load_project_session(project_id: str) -> None:
    """Pull a stored project-scoped id (if any) into the mirror."""
    if not project_id:
        return
    key = project_session_key(project_id)
    mirror: Dict[str, str] = st.session_state.setdefault(_SS_MIRROR, {})
    if mirror.get(key):
        return
    v = _ls_get(key)
    if v:
        mirror[key] = v


def browser_session_ids() -> SessionIds:
    return SessionIds(BrowserStorage())
