# surveyforge/models.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

Id = Union[int, str]


# =============================================================================
# Helpers
# =============================================================================
def _s(v: Any) -> str:
    return "" if v is None else str(v).strip()


def _opt_int(v: Any) -> Optional[int]:
    if v is None or v == "":
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def results_of(payload: Any) -> List[Dict[str, Any]]:
    """List endpoints wrap rows in {"results": [...]}; tolerate a bare list too."""
    if isinstance(payload, dict):
        rows = payload.get("results") or []
    elif isinstance(payload, list):
        rows = payload
    else:
        rows = []
    return [r for r in rows if isinstance(r, dict)]


QUESTION_TYPE_MAP: Dict[str, str] = {
    "scale": "likert-scale",
    "single_choice": "single-choice",
    "multiple_choice": "multiple-choice",
    "open_text": "open-text",
    "likert_scale": "likert-scale",
    "text": "open-text",
    "rating": "rating",
    "ranking": "ranking",
}

QUESTION_TYPE_LABELS: Dict[str, str] = {
    "single-choice": "Single Choice",
    "multiple-choice": "Multiple Choice",
    "open-text": "Open Text",
    "likert-scale": "Likert Scale",
    "rating": "Rating",
    "ranking": "Ranking",
}


def transform_question_type(backend_type: Any) -> str:
    """Backend snake_case types -> UI types. Unknown types pass through."""
    t = _s(backend_type)
    return QUESTION_TYPE_MAP.get(t, t)


def backend_question_type(ui_type: Any) -> str:
    """Inverse of transform_question_type for values we send back."""
    t = _s(ui_type)
    if t == "likert-scale":
        return "likert_scale"
    return t.replace("-", "_")


def normalize_options(raw: Any) -> List[str]:
    """Options arrive as ["a", "b"] or [{"text": "a", "position": 1}, ...]."""
    if not isinstance(raw, list):
        return []
    out: List[str] = []
    items = raw
    if items and all(isinstance(o, dict) for o in items):
        items = sorted(items, key=lambda o: _opt_int(o.get("position")) or 0)
    for opt in items:
        if isinstance(opt, dict):
            txt = _s(opt.get("text"))
        else:
            txt = _s(opt)
        if txt:
            out.append(txt)
    return out


# =============================================================================
# Reference data
# =============================================================================
@dataclass(frozen=True)
class Methodology:
    id: Id
    name: str
    description: str = ""

    @classmethod
    def from_api(cls, row: Dict[str, Any]) -> "Methodology":
        return cls(id=row.get("id"), name=_s(row.get("name")), description=_s(row.get("description")))


@dataclass(frozen=True)
class Industry:
    id: Id
    name: str

    @classmethod
    def from_api(cls, row: Dict[str, Any]) -> "Industry":
        return cls(id=row.get("id"), name=_s(row.get("name")))


@dataclass
class TrackedSupplier:
    code: str = ""
    name: str = ""
    is_prophecy_supplier: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "TrackedSupplier":
        return cls(
            code=_s(row.get("code")),
            name=_s(row.get("name")),
            is_prophecy_supplier=bool(row.get("is_prophecy_supplier")),
        )


# =============================================================================
# Project
# =============================================================================
PROJECT_STATUSES = ("Draft", "In Progress", "Completed")


@dataclass
class Project:
    id: str
    project_name: str
    client_name: str = "Unknown Client"
    project_number: str = ""
    methodology_id: Optional[Id] = None
    methodology_name: str = "Not specified"
    industry_id: Optional[Id] = None
    industry_name: str = "Not specified"
    research_objectives: str = ""
    sample_size: str = "TBD"
    loi: Optional[int] = None
    target_country: str = ""
    sample_type: str = ""
    sample_profile: str = ""
    language_preference: str = ""
    category: str = ""
    target_audience: str = ""
    status: str = "In Progress"
    last_modified: str = ""
    question_count: int = 0
    estimated_duration: str = "TBD"
    tracked_suppliers: List[TrackedSupplier] = field(default_factory=list)
    design_brief_file_name: str = ""
    user_session_id: str = ""

    @staticmethod
    def number_for(project_id: str) -> str:
        return f"PRJ-{_s(project_id)[-8:]}"

    @classmethod
    def from_api(cls, row: Dict[str, Any], *, status: str = "In Progress") -> "Project":
        pid = _s(row.get("id"))
        suppliers = [
            TrackedSupplier.from_dict(s) for s in (row.get("tracked_suppliers") or []) if isinstance(s, dict)
        ]
        return cls(
            id=pid,
            project_name=_s(row.get("name")),
            client_name=_s(row.get("brand_name")) or "Unknown Client",
            project_number=cls.number_for(pid),
            methodology_id=row.get("methodology_id"),
            methodology_name=_s(row.get("methodology_name")) or "Not specified",
            industry_id=row.get("industry_id") or "",
            industry_name=_s(row.get("industry_name")) or "Not specified",
            research_objectives=_s(row.get("key_objectives")),
            category=_s(row.get("category")),
            target_audience=_s(row.get("target_audience")),
            status=status,
            last_modified=_s(row.get("updated_at")),
            tracked_suppliers=suppliers,
            user_session_id=_s(row.get("user_session_id")),
        )

    def to_api(self) -> Dict[str, Any]:
        """Body for POST/PUT projects/."""
        return {
            "name": self.project_name,
            "methodology_id": self.methodology_id,
            "industry_id": self.industry_id or None,
            "brand_name": self.client_name,
            "category": self.category or "",
            "target_audience": self.target_audience or "",
            "key_objectives": self.research_objectives or "",
        }


# =============================================================================
# Sections
# =============================================================================
@dataclass(frozen=True)
class SectionTemplate:
    id: str
    name: str
    description: str = ""
    is_core: bool = False
    section_type: str = ""
    static_content: Any = None
    question_hint: str = ""
    # catalogue grouping key ("basic", "prophecy", "cx", ...)
    category: str = ""

    @classmethod
    def from_api(cls, row: Dict[str, Any]) -> "SectionTemplate":
        is_core = bool(row.get("is_core"))
        return cls(
            id=_s(row.get("id")),
            name=_s(row.get("name")),
            description=_s(row.get("description")),
            is_core=is_core,
            section_type=_s(row.get("section_type")),
            static_content=row.get("static_content"),
            question_hint=_s(row.get("question_count_hint")),
            category=_s(row.get("section_category")) or ("basic" if is_core else ""),
        )


@dataclass(frozen=True)
class MethodologySection:
    id: str
    methodology: str
    methodology_name: str
    section: str
    section_name: str
    is_required: bool = False
    default_position: Optional[int] = None

    @classmethod
    def from_api(cls, row: Dict[str, Any]) -> Optional["MethodologySection"]:
        """Methodology/section refs may be nested objects or bare ids. Null refs -> None."""
        meth = row.get("methodology")
        sec = row.get("section")
        if not meth or not sec:
            return None

        if isinstance(meth, dict):
            meth_id, meth_name = _s(meth.get("id")), _s(meth.get("name"))
        else:
            meth_id, meth_name = _s(meth), _s(row.get("methodology_name"))

        if isinstance(sec, dict):
            sec_id, sec_name = _s(sec.get("id")), _s(sec.get("name"))
        else:
            sec_id, sec_name = _s(sec), _s(row.get("section_name"))

        return cls(
            id=_s(row.get("id")),
            methodology=meth_id,
            methodology_name=meth_name,
            section=sec_id,
            section_name=sec_name,
            is_required=bool(row.get("is_required")),
            default_position=_opt_int(row.get("default_position")),
        )


@dataclass
class Question:
    id: str
    text: str
    type: str = "single-choice"
    options: List[str] = field(default_factory=list)
    is_required: bool = True
    position: int = 0
    question_number: str = ""
    is_ai_generated: bool = False
    scale_min: Optional[int] = None
    scale_max: Optional[int] = None
    scale_labels: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, row: Dict[str, Any], *, index: int = 0) -> "Question":
        pos = _opt_int(row.get("position")) or index + 1
        return cls(
            id=_s(row.get("id")),
            text=_s(row.get("question_text") or row.get("text")),
            type=transform_question_type(row.get("question_type") or row.get("type")),
            options=normalize_options(row.get("options")),
            is_required=bool(row.get("is_required", True)),
            position=pos,
            question_number=_s(row.get("question_number")) or f"Q{pos}",
            is_ai_generated=bool(row.get("is_ai_generated", False)),
            scale_min=_opt_int(row.get("scale_min")),
            scale_max=_opt_int(row.get("scale_max")),
            scale_labels=dict(row.get("scale_labels") or {}),
        )

    def to_api(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "id": self.id,
            "question_text": self.text,
            "question_type": backend_question_type(self.type),
            "options": list(self.options),
            "is_required": self.is_required,
            "position": self.position,
        }
        if self.scale_min is not None:
            body["scale_min"] = self.scale_min
        if self.scale_max is not None:
            body["scale_max"] = self.scale_max
        if self.scale_labels:
            body["scale_labels"] = dict(self.scale_labels)
        return body


@dataclass
class ProjectSection:
    id: str
    name: str
    description: str = ""
    section_type: str = ""
    is_static: bool = False
    static_content: Any = None
    is_core: bool = False
    section_category: str = "basic"
    position: int = 0
    questions: List[Question] = field(default_factory=list)
    is_expanded: bool = True
    template_id: str = ""

    @classmethod
    def from_review(cls, row: Dict[str, Any], *, index: int = 0) -> "ProjectSection":
        """Row from projects/{id}/question_review/."""
        questions = [
            Question.from_api(q, index=i)
            for i, q in enumerate(row.get("questions") or [])
            if isinstance(q, dict)
        ]
        section_type = _s(row.get("section_type"))
        return cls(
            id=_s(row.get("id")),
            name=_s(row.get("name")) or "Unnamed Section",
            description=_s(row.get("description")),
            section_type=section_type,
            is_static=bool(row.get("is_static", section_type == "static")),
            static_content=row.get("static_content"),
            is_core=bool(row.get("is_core")),
            section_category=_s(row.get("section_category")) or "basic",
            position=_opt_int(row.get("position")) or index + 1,
            questions=questions,
        )

    @classmethod
    def from_attached(cls, row: Dict[str, Any], *, index: int = 0) -> "ProjectSection":
        """Row from projects/{id}/sections/ (template nested under section_template_id)."""
        tpl = row.get("section_template_id") or {}
        if not isinstance(tpl, dict):
            tpl = {"id": tpl}
        section_type = _s(tpl.get("section_type"))
        return cls(
            id=_s(row.get("id")),
            name=_s(row.get("custom_title")) or _s(tpl.get("name")) or "Unnamed Section",
            description=_s(tpl.get("description")),
            section_type=section_type,
            is_static=section_type == "static",
            static_content=tpl.get("static_content"),
            position=_opt_int(row.get("position")) or index + 1,
            template_id=_s(tpl.get("id")),
        )


# =============================================================================
# AI / uploads
# =============================================================================
@dataclass(frozen=True)
class RepromptOption:
    id: str
    label: str
    description: str = ""


@dataclass(frozen=True)
class DesignBriefResult:
    success: bool
    sections_found: Optional[int] = None
    design_brief_id: Optional[str] = None
    error: Optional[str] = None
