from __future__ import annotations

from pathlib import Path

import streamlit as st

STYLESHEET = Path(__file__).resolve().parents[1] / "css" / "modern_glass.css"
THEMES = ("system", "light", "dark")
_PREF_KEY = "sf_theme"

_THEME_SCRIPT = """
<script>
(function () {
  var pref = "%s";
  var dark = window.matchMedia && window.matchMedia("(prefers-color-scheme: dark)").matches;
  document.documentElement.dataset.theme = pref === "system" ? (dark ? "dark" : "light") : pref;
  var sheets = document.querySelectorAll("style#sf-theme-base");
  sheets.forEach(function (el, i) { if (i < sheets.length - 1) el.remove(); });
})();
</script>
"""


@st.cache_data(show_spinner=False)
def _stylesheet(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def get_theme_preference() -> str:
    pref = st.session_state.get(_PREF_KEY)
    return pref if pref in THEMES else "system"


def set_theme_preference(theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme {theme!r}; expected one of {', '.join(THEMES)}")
    st.session_state[_PREF_KEY] = theme


def apply_glassmorphism(*, css_path: str | Path = STYLESHEET) -> None:
    """Inject design tokens and set html[data-theme]. Runs on every rerun."""
    st.markdown(f'<style id="sf-theme-base">{_stylesheet(str(css_path))}</style>', unsafe_allow_html=True)
    st.markdown(_THEME_SCRIPT % get_theme_preference(), unsafe_allow_html=True)


def theme_selector_widget() -> None:
    current = get_theme_preference()
    choice = st.sidebar.radio(
        "Theme",
        THEMES,
        index=THEMES.index(current),
        format_func=str.title,
        horizontal=True,
    )
    if choice != current:
        set_theme_preference(choice)
        st.rerun()
