from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import html
import re

import streamlit as st

_CSS_FLAG = "_sf_stepper_css"
_CHIP_CLASS = {"done": "done", "current": "active"}


@dataclass(frozen=True)
class WizardNavStyle:
    full_width: bool = True
    back_glyph: str = "←"
    next_glyph: str = "→"


def _text(value) -> str:
    return html.escape(str(value or ""))


def _widget_suffix(raw: str) -> str:
    cleaned = re.sub(r"[^A-Za-z0-9]+", "_", (raw or "").strip()).strip("_")
    return cleaned.lower() or "step"


_STEPPER_CSS = """
<style id="sf-stepper-css">
.sf-stepper{ display:flex; flex-wrap:wrap; gap:.45rem; justify-content:center; margin:1rem 0 .5rem; }
.sf-chip{
  display:inline-flex; align-items:center; gap:.4rem;
  padding:.3rem .75rem; border-radius:999px;
  font-size:.8rem; color:var(--text-secondary);
  background:rgba(127,127,127,.12); border:1px solid var(--border);
}
.sf-chip b{
  display:inline-flex; align-items:center; justify-content:center;
  width:1.35rem; height:1.35rem; border-radius:50%;
  font-size:.72rem; background:rgba(127,127,127,.25); color:var(--text-primary);
}
.sf-chip.done b{ background:var(--text-accent); color:#fff; }
.sf-chip.active{ color:var(--text-primary); font-weight:700; border-color:var(--text-accent); }
.sf-chip.active b{ background:var(--button-primary); color:#fff; }

.sf-navbar{ border-top:1px dashed var(--border-strong); margin-top:1.4rem; padding-top:.9rem; }
.sf-navbar .stButton > button{ border-radius:12px !important; font-weight:700 !important; }
.sf-navbar .stButton > button:disabled{ opacity:.5 !important; }

.sf-stephead{ display:flex; gap:.8rem; align-items:center; }
.sf-stephead__num{
  min-width:2.4rem; height:2.4rem; border-radius:12px;
  display:flex; align-items:center; justify-content:center;
  background:var(--button-primary); color:#fff; font-weight:800;
}
.sf-stephead h2{ margin:0; font-size:1.35rem; color:var(--text-primary); }
.sf-stephead p{ margin:.25rem 0 0; color:var(--text-secondary); }
</style>
"""


def _ensure_css() -> None:
    if not st.session_state.get(_CSS_FLAG):
        st.session_state[_CSS_FLAG] = True
        st.markdown(_STEPPER_CSS, unsafe_allow_html=True)


def stepper_html(labels: Sequence[str], states: Sequence[str]) -> str:
    """Chip row for the numbered steps; states are done | current | todo."""
    chips = []
    for number, (label, state) in enumerate(zip(labels, states), start=1):
        chips.append(f'<span class="sf-chip {_CHIP_CLASS.get(state, "")}"><b>{number}</b>{_text(label)}</span>')
    return f'<div class="sf-stepper">{"".join(chips)}</div>'


def wizard_nav_ui(
    *,
    tool_key: str,
    step_idx: int,
    step_states: Sequence[str] = (),
    can_next: bool = True,
    disable_back: bool = False,
    next_label: str = "Continue",
    back_label: str = "Back",
    step_labels: Sequence[str] = (),
    style: Optional[WizardNavStyle] = None,
) -> Tuple[bool, bool]:
    """Stepper chips plus the Back / Next pair. Returns (clicked_back, clicked_next)."""
    _ensure_css()
    style = style or WizardNavStyle()
    suffix = _widget_suffix(f"{tool_key}_{step_idx}")

    if len(step_states) > 1:
        st.markdown(stepper_html(step_labels, step_states), unsafe_allow_html=True)

    st.markdown('<div class="sf-navbar">', unsafe_allow_html=True)
    left, right = st.columns(2, gap="medium")
    back = left.button(
        f"{style.back_glyph} {back_label}",
        key=f"sf_nav_back_{suffix}",
        disabled=disable_back,
        use_container_width=style.full_width,
    )
    forward = right.button(
        f"{next_label} {style.next_glyph}",
        key=f"sf_nav_next_{suffix}",
        type="primary",
        disabled=not can_next,
        use_container_width=style.full_width,
    )
    st.markdown("</div>", unsafe_allow_html=True)
    return back, forward


def create_step_header(step_number: int, title: str, description: str = "") -> None:
    _ensure_css()
    blurb = f"<p>{_text(description)}</p>" if description else ""
    st.markdown(
        f'<div class="pure-glass-card"><div class="sf-stephead">'
        f'<div class="sf-stephead__num">{_text(step_number)}</div>'
        f"<div><h2>{_text(title)}</h2>{blurb}</div>"
        f"</div></div>",
        unsafe_allow_html=True,
    )
