# pages/About.py
from __future__ import annotations

import streamlit as st

from design.components.base_tool_ui import apply_global_background, card_close, card_open, topbar
from surveyforge import __version__

st.set_page_config(page_title="About | SurveyForge", layout="wide")
apply_global_background()

topbar(
    title="SurveyForge Studio",
    subtitle="AI-assisted questionnaire authoring for market research",
    right_chip=f"v{__version__}",
)

ABOUT_CARDS = (
    (
        "What it does",
        "A project brief goes in, a questionnaire ready for fieldwork comes out. You describe the "
        "client, methodology and sample. The backend proposes sections and drafts questions with AI, "
        "and you review, edit and order them before exporting.",
    ),
    (
        "The workflow",
        "1. Create or open a project on **Home**\n"
        "2. **Project Setup**: client, methodology, industry, sample, tracked suppliers\n"
        "3. **Section Library**: choose sections (defaults follow the methodology)\n"
        "4. **Question Review**: generate with AI, then edit, duplicate, delete or reprompt\n"
        "5. **Section Order**: arrange the flow\n"
        "6. **Export**: Word, PDF or CSV, or an offline Word draft",
    ),
    (
        "Sessions",
        "There is no login. Each browser keeps an anonymous session id in `localStorage` and the "
        "backend lists only the projects created under it. A project opened from elsewhere keeps the "
        "id it was created with.",
    ),
    (
        "Troubleshooting",
        "- Nothing loads? Open **API Status** and check `SURVEYFORGE_API_BASE_URL`\n"
        "- AI generation may take a few minutes (requests wait up to 5 minutes)\n"
        "- Clearing browser storage starts a fresh session and hides earlier projects",
    ),
)

for title, body in ABOUT_CARDS:
    card_open(title)
    st.markdown(body)
    card_close()

st.caption("© SurveyForge Studio")
