# surveyforge/project_form.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from surveyforge.errors import ValidationError
from surveyforge.models import Industry, Methodology, Project, TrackedSupplier, _opt_int, _s


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
COUNTRIES: List[str] = ["AU", "US", "UK", "CA", "NZ"]
LANGUAGES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
}
SAMPLE_TYPES: Dict[str, str] = {"panel": "Panel", "client": "Client"}

DEFAULT_COUNTRY = "AU"
DEFAULT_LANGUAGE = "en"
LOI_MIN, LOI_MAX = 1, 120

DESIGN_BRIEF_TYPES: List[str] = ["pdf", "doc", "docx", "txt", "md", "png", "jpg", "jpeg"]

FORM_FIELDS = (
    "client_name",
    "project_name",
    "project_number",
    "methodology_id",
    "industry_id",
    "research_objectives",
    "sample_size",
    "loi",
    "target_country",
    "sample_type",
    "sample_profile",
    "language_preference",
    "category",
    "target_audience",
)


def empty_form() -> Dict[str, Any]:
    form: Dict[str, Any] = {k: "" for k in FORM_FIELDS}
    form["loi"] = None
    form["methodology_id"] = None
    form["industry_id"] = None
    form["target_country"] = DEFAULT_COUNTRY
    form["language_preference"] = DEFAULT_LANGUAGE
    form["tracked_suppliers"] = []
    return form


def form_from_project(project: Project) -> Dict[str, Any]:
    form = empty_form()
    for k in FORM_FIELDS:
        v = getattr(project, k, None)
        if v not in (None, ""):
            form[k] = v
    if form["sample_size"] == "TBD":
        form["sample_size"] = ""
    form["tracked_suppliers"] = [TrackedSupplier(**s.to_dict()) for s in project.tracked_suppliers]
    return form


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
def validate_project_form(form: Dict[str, Any]) -> List[str]:
    """Messages in display order; empty when the form can be submitted."""
    errors: List[str] = []
    if not _s(form.get("client_name")):
        errors.append("Client name is required")
    if not _s(form.get("project_name")):
        errors.append("Project name is required")
    if not _s(form.get("project_number")):
        errors.append("Project number is required")
    if not _s(form.get("methodology_id")):
        errors.append("Methodology selection is required")
    if not _s(form.get("industry_id")):
        errors.append("Industry selection is required")
    if not _s(form.get("research_objectives")):
        errors.append("Research objectives are required")
    if not _s(form.get("sample_size")):
        errors.append("Sample size is required")

    loi = _opt_int(form.get("loi"))
    if not loi:
        errors.append("Length of Interview is required")
    elif not (LOI_MIN <= loi <= LOI_MAX):
        errors.append(f"Length of Interview must be between {LOI_MIN} and {LOI_MAX} minutes")

    if not _s(form.get("target_country")):
        errors.append("Target country is required")

    sample_type = _s(form.get("sample_type"))
    if not sample_type:
        errors.append("Sample type is required")
    elif sample_type not in SAMPLE_TYPES:
        errors.append("Sample type must be panel or client")
    return errors


# -----------------------------------------------------------------------------
# Form -> Project
# -----------------------------------------------------------------------------
def _name_for(options: Sequence[Any], wanted: Any) -> str:
    w = _s(wanted)
    for o in options:
        if _s(o.id) == w:
            return o.name
    return ""


def project_from_form(
    form: Dict[str, Any],
    *,
    methodologies: Sequence[Methodology] = (),
    industries: Sequence[Industry] = (),
    base: Optional[Project] = None,
) -> Project:
    """
    Build the Project to send. Raises ValidationError when the form is invalid.
    `base` carries id/status/session of an existing project when editing.
    """
    errors = validate_project_form(form)
    if errors:
        raise ValidationError(errors)

    project = Project(
        id=base.id if base else "",
        project_name=_s(form.get("project_name")),
        client_name=_s(form.get("client_name")),
        project_number=_s(form.get("project_number")),
        methodology_id=form.get("methodology_id"),
        methodology_name=_name_for(methodologies, form.get("methodology_id")) or (base.methodology_name if base else ""),
        industry_id=form.get("industry_id"),
        industry_name=_name_for(industries, form.get("industry_id")) or (base.industry_name if base else ""),
        research_objectives=_s(form.get("research_objectives")),
        sample_size=_s(form.get("sample_size")),
        loi=_opt_int(form.get("loi")),
        target_country=_s(form.get("target_country")) or DEFAULT_COUNTRY,
        sample_type=_s(form.get("sample_type")),
        sample_profile=_s(form.get("sample_profile")),
        language_preference=_s(form.get("language_preference")) or DEFAULT_LANGUAGE,
        category=_s(form.get("category")),
        target_audience=_s(form.get("target_audience")),
        tracked_suppliers=list(form.get("tracked_suppliers") or []),
    )
    if base is not None:
        project.status = base.status
        project.user_session_id = base.user_session_id
        project.design_brief_file_name = base.design_brief_file_name
    return project
