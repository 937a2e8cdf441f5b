from __future__ import annotations

from html import escape
from typing import Optional, Sequence, Tuple

import streamlit as st
from design import apply_glassmorphism

_LEVEL_COLOURS = {
    "info": "33,150,243",
    "warning": "255,152,0",
    "error": "244,67,54",
    "success": "76,175,80",
}

_COMPONENT_CSS = """
<style id="sf-components">
.sf-top{ display:flex; justify-content:space-between; align-items:flex-start; gap:1rem; padding:.5rem .2rem .3rem; }
.sf-top h2{ margin:0; font-size:1.6rem; font-weight:800; color:var(--text-primary); }
.sf-top p{ margin:.3rem 0 0; font-size:.96rem; color:var(--text-secondary); }
.sf-pill{ padding:.35rem .85rem; border-radius:999px; font-size:.86rem; font-weight:700;
          border:1px solid var(--border); background:var(--glass-tertiary); color:var(--text-primary); }
.sf-rule{ height:1px; margin:.8rem 0 1rem; background:linear-gradient(90deg, transparent, var(--border-strong), transparent); }

.sf-status{ border-left:5px solid rgb(var(--sf-level)); }
.sf-card-h{ margin:0 0 .5rem; font-size:1.12rem; font-weight:800; color:var(--text-primary); }
.sf-card-sub{ margin:0 0 .75rem; font-size:.94rem; color:var(--text-secondary); }
.sf-card-p{ margin:0; line-height:1.55; color:var(--text-secondary); }
.sf-gap{ height:.6rem; }

.sf-tiles{ display:grid; grid-template-columns:repeat(auto-fit, minmax(140px, 1fr)); gap:.75rem; }
.sf-tile{ text-align:center; padding:.85rem .5rem; border-radius:var(--radius-md);
          border:1px solid var(--border); background:var(--glass-tertiary); }
.sf-tile strong{ display:block; font-size:1.65rem; color:var(--text-accent); }
.sf-tile span{ font-size:.84rem; color:var(--text-secondary); }

.sf-tag{ display:inline-block; margin-right:.3rem; padding:.1rem .5rem; border-radius:999px;
         font-size:.76rem; font-weight:700; border:1px solid var(--border); color:var(--text-secondary); }
</style>
"""


def _html(markup: str) -> None:
    st.markdown(markup, unsafe_allow_html=True)


def apply_global_background() -> None:
    """Theme tokens + component CSS. Call once per page, right after set_page_config."""
    apply_glassmorphism()
    _html(_COMPONENT_CSS)


def topbar(title: str, *, subtitle: str = "", right_chip: str = "") -> None:
    heading = f"<h2>{escape(title)}</h2>" if title else ""
    tagline = f"<p>{escape(subtitle)}</p>" if subtitle else ""
    chip = f'<span class="sf-pill">{escape(right_chip)}</span>' if right_chip else ""
    _html(f'<div class="sf-top"><div>{heading}{tagline}</div>{chip}</div><div class="sf-rule"></div>')


def status_card(title: str, message: str, level: str = "info") -> None:
    """level: info | warning | error | success (anything else renders as info)"""
    rgb = _LEVEL_COLOURS.get((level or "").strip().lower(), _LEVEL_COLOURS["info"])
    _html(
        f'<div class="pure-glass-card sf-status" style="--sf-level:{rgb}">'
        f'<h3 class="sf-card-h">{escape(title or "")}</h3>'
        f'<p class="sf-card-p">{escape(message or "")}</p></div>'
    )


def card_open(title: str = "", *, subtitle: str = "") -> None:
    """Start a glass card; pair with card_close() once its widgets are drawn."""
    _html('<div class="pure-glass-card">')
    if title:
        _html(f'<h3 class="sf-card-h">{escape(title)}</h3>')
    if subtitle:
        _html(f'<p class="sf-card-sub">{escape(subtitle)}</p>')


def card_close() -> None:
    _html('</div><div class="sf-gap"></div>')


def stat_tiles(items: Sequence[Tuple[str, str]]) -> None:
    """Row of (value, label) tiles."""
    cells = "".join(
        f'<div class="sf-tile"><strong>{escape(str(value))}</strong><span>{escape(label)}</span></div>'
        for value, label in items
    )
    _html(f'<div class="sf-tiles">{cells}</div>')


def badges(labels: Sequence[Optional[str]]) -> None:
    tags = [f'<span class="sf-tag">{escape(text)}</span>' for text in labels if text]
    if tags:
        _html("".join(tags))
