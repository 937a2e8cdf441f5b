# surveyforge/library.py
from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from surveyforge.models import MethodologySection, SectionTemplate, _opt_int, _s


# -----------------------------------------------------------------------------
# Built-in catalogue (used when the backend library is empty or unreachable)
# -----------------------------------------------------------------------------
CATALOGUE_METHODOLOGIES: List[Dict[str, str]] = [
    {
        "id": "prophecy",
        "name": "Prophecy",
        "description": "Predictive market research methodology for understanding future brand and business outcomes.",
    },
    {
        "id": "cx",
        "name": "CX (Customer Experience)",
        "description": "Comprehensive customer experience measurement and satisfaction modeling.",
    },
    {
        "id": "choice",
        "name": "Choice",
        "description": "Choice modeling methodology for understanding decision-making processes.",
    },
    {
        "id": "ad-testing",
        "name": "In-Market Ad Testing",
        "description": "Test advertisement effectiveness in real market conditions.",
    },
    {
        "id": "segmentation",
        "name": "Segmentation",
        "description": "Market and customer segmentation analysis.",
    },
    {
        "id": "ua",
        "name": "U&A (Usage & Attitudes)",
        "description": "Usage and Attitudes studies.",
    },
]

# (id, name, description, hint, category)
_CATALOGUE_ROWS: List[Tuple[str, str, str, str, str]] = [
    # basic (always pre-selected)
    ("screeners", "Screeners",
     "Essential screening questions to qualify respondents for your survey.", "3-5 questions", "basic"),
    ("profiling", "Profiling",
     "Behavioral and attitudinal profiling questions to understand respondent characteristics.",
     "5-8 questions", "basic"),
    ("demographics", "Demographics",
     "Standard demographic questions including age, gender, location, and income.", "6-10 questions", "basic"),
    # prophecy
    ("brand-awareness", "Brand Awareness & Recognition",
     "Measure spontaneous and aided brand awareness across your category.", "4-6 questions", "prophecy"),
    ("product-awareness", "Product Awareness",
     "Questions about product familiarity and recognition in the market.", "3-5 questions", "prophecy"),
    ("purchase-intent", "Purchase Intent",
     "Measuring likelihood to purchase and key decision factors.", "4-7 questions", "prophecy"),
    ("brand-perception", "Brand Perception",
     "Understanding brand image, positioning, and competitive landscape.", "6-8 questions", "prophecy"),
    ("market-trends", "Market Trends & Future Outlook",
     "Predictive questions about market direction and future behaviors.", "5-7 questions", "prophecy"),
    # cx
    ("customer-journey", "Customer Journey Mapping",
     "Track touchpoints and experiences across the customer lifecycle.", "8-12 questions", "cx"),
    ("satisfaction-measurement", "Satisfaction Measurement",
     "Comprehensive satisfaction scoring across multiple dimensions.", "6-10 questions", "cx"),
    ("nps-loyalty", "NPS & Loyalty",
     "Net Promoter Score and customer loyalty measurement.", "3-5 questions", "cx"),
    ("service-quality", "Service Quality Assessment",
     "Evaluate service delivery across key quality dimensions.", "7-9 questions", "cx"),
    ("complaint-resolution", "Complaint & Resolution",
     "Understanding complaint handling and resolution effectiveness.", "4-6 questions", "cx"),
    # choice
    ("choice-scenarios", "Choice Scenarios",
     "Present choice sets to understand decision-making preferences.", "8-15 questions", "choice"),
    ("attribute-importance", "Attribute Importance",
     "Rank and rate importance of product/service attributes.", "5-8 questions", "choice"),
    ("price-sensitivity", "Price Sensitivity",
     "Understanding price elasticity and willingness to pay.", "4-6 questions", "choice"),
    ("competitive-analysis", "Competitive Analysis",
     "Compare offerings against competitive alternatives.", "6-8 questions", "choice"),
    # ad testing
    ("ad-recall", "Ad Recall & Recognition",
     "Measure advertisement recall and recognition metrics.", "4-6 questions", "ad-testing"),
    ("message-comprehension", "Message Comprehension",
     "Evaluate understanding and interpretation of key messages.", "5-7 questions", "ad-testing"),
    ("ad-effectiveness", "Ad Effectiveness",
     "Measure impact on brand metrics and purchase intent.", "6-8 questions", "ad-testing"),
    ("creative-evaluation", "Creative Evaluation",
     "Assess creative elements, appeal, and emotional response.", "7-9 questions", "ad-testing"),
    ("media-consumption", "Media Consumption",
     "Understanding media habits and channel preferences.", "5-7 questions", "ad-testing"),
    # segmentation
    ("behavioral-segmentation", "Behavioral Segmentation",
     "Segment based on usage patterns and behaviors.", "8-12 questions", "segmentation"),
    ("psychographic-profiling", "Psychographic Profiling",
     "Lifestyle, values, and personality-based segmentation.", "10-15 questions", "segmentation"),
    ("needs-based-segmentation", "Needs-Based Segmentation",
     "Segment customers based on underlying needs and motivations.", "6-10 questions", "segmentation"),
    # u&a
    ("usage-patterns", "Usage Patterns",
     "Detailed usage frequency, occasions, and contexts.", "6-8 questions", "ua"),
    ("attitudes-perceptions", "Attitudes & Perceptions",
     "Category and brand attitudes, perceptions, and beliefs.", "8-12 questions", "ua"),
    ("category-dynamics", "Category Dynamics",
     "Understanding category evolution and trends.", "5-7 questions", "ua"),
    ("brand-switching", "Brand Switching",
     "Analyze brand loyalty and switching behaviors.", "4-6 questions", "ua"),
]

CATALOGUE_SECTIONS: List[SectionTemplate] = [
    SectionTemplate(
        id=sid,
        name=name,
        description=desc,
        is_core=(cat == "basic"),
        question_hint=hint,
        category=cat,
    )
    for sid, name, desc, hint, cat in _CATALOGUE_ROWS
]

FILTER_TYPES: List[Tuple[str, str]] = [("all", "All sections"), ("basic", "Basic")] + [
    (m["id"], m["name"]) for m in CATALOGUE_METHODOLOGIES
]

_METHODOLOGY_KEYS: Dict[str, str] = {
    "Prophecy": "prophecy",
    "CX (Customer Experience)": "cx",
    "Choice Modelling": "choice",
    "Choice": "choice",
    "In-Market Ad Testing": "ad-testing",
    "Segmentation": "segmentation",
    "U&A": "ua",
    "U&A (Usage & Attitudes)": "ua",
}

DEFAULT_QUESTIONS_PER_SECTION = 5
_NUM_RE = re.compile(r"\d+")


# -----------------------------------------------------------------------------
# Lookup
# -----------------------------------------------------------------------------
def methodology_key(name: Any) -> str:
    """Display name -> catalogue key. Unknown names fall back to prophecy."""
    return _METHODOLOGY_KEYS.get(_s(name), "prophecy")


def library_sections(backend: Optional[Sequence[SectionTemplate]]) -> Tuple[List[SectionTemplate], bool]:
    """Backend templates when there are any, else the built-in catalogue. Second item: using fallback."""
    rows = list(backend or [])
    if rows:
        return rows, False
    return list(CATALOGUE_SECTIONS), True


# -----------------------------------------------------------------------------
# Selection
# -----------------------------------------------------------------------------
def default_selection(
    sections: Sequence[SectionTemplate],
    *,
    methodology_name: str = "",
    methodology_id: Any = None,
    links: Optional[Sequence[MethodologySection]] = None,
) -> List[str]:
    """
    Basic/core sections first, then the sections of the project's methodology.

    When the backend has methodology-section links for the methodology they
    decide (required first, then by default position); otherwise the
    catalogue category matching the methodology name is used.
    """
    known = {s.id for s in sections}
    out: List[str] = []

    def _add(sid: str) -> None:
        if sid and sid in known and sid not in out:
            out.append(sid)

    for s in sections:
        if s.is_core or s.category == "basic":
            _add(s.id)

    mid = _s(methodology_id)
    mine = [link for link in (links or []) if mid and link.methodology == mid]
    if mine:
        mine.sort(key=lambda link: (not link.is_required, link.default_position if link.default_position is not None else 10**6))
        for link in mine:
            _add(link.section)
        return out

    key = methodology_key(methodology_name)
    for s in sections:
        if s.category == key:
            _add(s.id)
    return out


def toggle(selection: Sequence[str], section_id: str) -> List[str]:
    out = list(selection)
    if section_id in out:
        out.remove(section_id)
    else:
        out.append(section_id)
    return out


def filter_sections(sections: Iterable[SectionTemplate], search: str = "", type_: str = "all") -> List[SectionTemplate]:
    needle = _s(search).lower()
    want = _s(type_) or "all"
    out: List[SectionTemplate] = []
    for s in sections:
        matches_search = not needle or needle in s.name.lower() or needle in s.description.lower()
        matches_type = want == "all" or s.category == want
        if matches_search and matches_type:
            out.append(s)
    return out


def reconcile_selection(attached_template_ids: Sequence[str], defaults: Sequence[str]) -> List[str]:
    """Sections already attached on the server win over the computed defaults."""
    attached = [t for t in attached_template_ids if t]
    return list(dict.fromkeys(attached)) if attached else list(defaults)


def selected_templates(sections: Sequence[SectionTemplate], selection: Sequence[str]) -> List[SectionTemplate]:
    by_id = {s.id: s for s in sections}
    return [by_id[sid] for sid in selection if sid in by_id]


# -----------------------------------------------------------------------------
# Estimates
# -----------------------------------------------------------------------------
def hint_midpoint(hint: Any) -> float:
    """'3-5 questions' -> 4, '6 questions' -> 6, anything else -> 5."""
    nums = [int(n) for n in _NUM_RE.findall(_s(hint))]
    if len(nums) >= 2:
        return (nums[0] + nums[1]) / 2
    if len(nums) == 1:
        return float(nums[0])
    return float(DEFAULT_QUESTIONS_PER_SECTION)


def estimate_total_questions(sections: Iterable[SectionTemplate]) -> int:
    # half rounds up: "2-3 questions" counts as 3
    return math.floor(sum(hint_midpoint(s.question_hint) for s in sections) + 0.5)


def estimate_completion_minutes(count: Any) -> Tuple[int, int]:
    n = _opt_int(count) or 0
    return math.ceil(n * 1.5), math.ceil(n * 2)


def selection_estimates(chosen: Sequence[SectionTemplate]) -> Tuple[int, int, int]:
    """(questions, min minutes, max minutes) for the library summary; time scales with section count."""
    lo, hi = estimate_completion_minutes(len(chosen))
    return estimate_total_questions(chosen), lo, hi
