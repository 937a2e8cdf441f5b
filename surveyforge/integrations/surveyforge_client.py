from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import requests

from surveyforge import config
from surveyforge.errors import APIError
from surveyforge.models import (
    DesignBriefResult,
    Industry,
    Methodology,
    MethodologySection,
    Project,
    ProjectSection,
    Question,
    RepromptOption,
    SectionTemplate,
    results_of,
    transform_question_type,
)
from surveyforge.session import SessionIds

logger = logging.getLogger(__name__)

# Endpoints that wait on the LLM backend
_AI_PATH_MARKERS = ("generate_ai_questions", "reprompt-questions")

EXPORT_FORMATS = ("docx", "pdf", "csv")

_AI_TIMEOUT_MESSAGE = (
    "AI generation is taking longer than expected. This may be due to complex processing "
    "or high server load. Please try again."
)
_CONNECT_MESSAGE = "Unable to connect to server. Please check your connection and try again."


def _is_ai_path(path: str) -> bool:
    return any(m in path for m in _AI_PATH_MARKERS)


def _short(text: str, limit: int = 300) -> str:
    text = (text or "").strip()
    return text if len(text) <= limit else text[:limit] + "..."


class SurveyForgeClient:
    """
    Thin wrapper around the SurveyForge REST API.

    Use this for ALL backend calls: it adds the session scoping header, picks
    the timeout (AI endpoints get longer), and turns every transport or HTTP
    failure into an APIError carrying a status code.
    """

    def __init__(
        self,
        session_ids: SessionIds,
        *,
        base_url: str = config.API_BASE_URL,
        api_version: str = config.API_VERSION,
        http: Optional[requests.Session] = None,
        timeout: float = config.REQUEST_TIMEOUT_SEC,
        ai_timeout: float = config.AI_REQUEST_TIMEOUT_SEC,
    ):
        self.session_ids = session_ids
        self.base_url = (base_url or config.DEFAULT_API_BASE_URL).rstrip("/")
        self.api_version = (api_version or config.DEFAULT_API_VERSION).strip("/")
        self.http = http or requests.Session()
        self.timeout = timeout
        self.ai_timeout = ai_timeout

    # =========================================================================
    # Transport
    # =========================================================================
    def url(self, path: str) -> str:
        return config.api_endpoint(path, base_url=self.base_url, version=self.api_version)

    def _headers(self, project_id: Optional[str], *, scoped: bool, is_upload: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if scoped:
            headers[config.SESSION_HEADER] = self.session_ids.project_session_id(project_id)
        # requests sets the multipart boundary itself
        if not is_upload:
            headers["Content-Type"] = "application/json"
        return headers

    def _send(
        self,
        method: str,
        path: str,
        *,
        project_id: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
        scoped: bool = True,
    ) -> requests.Response:
        is_ai = _is_ai_path(path)
        timeout = self.ai_timeout if is_ai else self.timeout
        url = self.url(path)

        logger.info("API %s %s", method.upper(), path)
        started = time.monotonic()
        try:
            r = self.http.request(
                method.upper(),
                url,
                headers=self._headers(project_id, scoped=scoped, is_upload=files is not None),
                params=params,
                json=json,
                files=files,
                timeout=timeout,
            )
        except requests.Timeout as e:
            logger.warning("API %s %s timed out after %ss", method.upper(), path, timeout)
            raise APIError(_AI_TIMEOUT_MESSAGE if is_ai else "Request timeout or cancelled", 408) from e
        except requests.ConnectionError as e:
            logger.warning("API %s %s: connection failed (%s)", method.upper(), path, e)
            raise APIError(_CONNECT_MESSAGE, 503) from e
        except requests.RequestException as e:
            logger.warning("API %s %s failed: %s", method.upper(), path, e)
            raise APIError(str(e) or type(e).__name__, 500) from e

        elapsed_ms = (time.monotonic() - started) * 1000
        if not r.ok:
            body = _short(r.text)
            logger.warning("API %s %s -> HTTP %s (%.0f ms)", method.upper(), path, r.status_code, elapsed_ms)
            raise APIError(f"HTTP {r.status_code}: {body or r.reason or ''}".rstrip(), r.status_code)

        logger.debug("API %s %s -> %s (%.0f ms)", method.upper(), path, r.status_code, elapsed_ms)
        return r

    def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        r = self._send(method, path, **kwargs)
        if r.status_code == 204 or not r.content:
            return {}
        try:
            return r.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON from {path}: {_short(r.text, 120)}", 500) from e

    # =========================================================================
    # Projects
    # =========================================================================
    def list_projects(self) -> List[Project]:
        payload = self._json("GET", "projects/")
        projects = [Project.from_api(row) for row in results_of(payload)]
        logger.info("Fetched %d projects", len(projects))
        return projects

    def get_project(self, project_id: str) -> Optional[Project]:
        """
        Fetch one project. Returns None when the backend does not know it.

        Projects created under another session id are hidden by the session
        filter (404), so we retry once without the header and, on success,
        remember the project's own session id for later calls.
        """
        path = f"projects/{project_id}/"
        try:
            row = self._json("GET", path, project_id=project_id)
        except APIError as e:
            if not e.is_not_found:
                raise
            logger.info("Retrying project %s without session filtering", project_id)
            try:
                row = self._json("GET", path, scoped=False)
            except APIError as e2:
                if e2.is_not_found:
                    return None
                raise

        project = Project.from_api(row)
        if project.user_session_id:
            self.session_ids.remember_project_session(project.id, project.user_session_id)
        return project

    def create_project(
        self,
        form: Project,
        *,
        design_brief: Optional[Tuple[str, bytes]] = None,
    ) -> Tuple[Project, Optional[DesignBriefResult]]:
        """
        Create a project. `design_brief` is (file_name, data).

        The brief upload never fails the creation; its result is returned
        alongside the project so the caller can report it.
        """
        body = form.to_api()
        body["tracked_suppliers"] = [s.to_dict() for s in (form.tracked_suppliers or [])]

        row = self._json("POST", "projects/", json=body)
        created = Project.from_api(row, status="Draft")

        # the backend does not echo the client-side setup fields
        created.client_name = _first(row.get("brand_name"), form.client_name)
        created.methodology_name = form.methodology_name or ""
        created.industry_name = form.industry_name or ""
        created.sample_size = form.sample_size or "TBD"
        created.loi = form.loi
        created.target_country = form.target_country
        created.sample_type = form.sample_type
        created.sample_profile = form.sample_profile
        created.language_preference = form.language_preference
        created.tracked_suppliers = list(form.tracked_suppliers or [])

        if created.user_session_id:
            self.session_ids.remember_project_session(created.id, created.user_session_id)

        brief_result: Optional[DesignBriefResult] = None
        if design_brief:
            name, data = design_brief
            brief_result = self.upload_design_brief(created.id, name, data)
            if brief_result.success:
                created.design_brief_file_name = name

        logger.info("Created project %s", created.id)
        return created, brief_result

    def update_project(self, project: Project) -> Project:
        row = self._json("PUT", f"projects/{project.id}/", project_id=project.id, json=project.to_api())
        updated = Project.from_api(row, status=project.status or "In Progress")

        # keep what the backend does not return
        updated.client_name = _first(row.get("brand_name"), project.client_name)
        updated.project_number = project.project_number or updated.project_number
        updated.methodology_name = project.methodology_name
        updated.industry_name = project.industry_name
        updated.sample_size = project.sample_size or "TBD"
        updated.loi = project.loi
        updated.target_country = project.target_country
        updated.sample_type = project.sample_type
        updated.sample_profile = project.sample_profile
        updated.language_preference = project.language_preference
        updated.question_count = project.question_count
        updated.estimated_duration = project.estimated_duration or "TBD"
        updated.tracked_suppliers = list(project.tracked_suppliers or [])
        updated.design_brief_file_name = project.design_brief_file_name
        return updated

    def upload_design_brief(self, project_id: str, file_name: str, data: bytes) -> DesignBriefResult:
        try:
            payload = self._json(
                "POST",
                f"projects/{project_id}/parse_design_brief/",
                project_id=project_id,
                files={"file": (file_name, data)},
            )
        except APIError as e:
            logger.error("Design brief upload failed for %s: %s", project_id, e)
            return DesignBriefResult(success=False, error=str(e) or "Failed to upload design brief")

        return DesignBriefResult(
            success=bool(payload.get("success")),
            sections_found=payload.get("sections_found"),
            design_brief_id=payload.get("design_brief_id"),
            error=payload.get("error"),
        )

    # =========================================================================
    # Reference data
    # =========================================================================
    def list_methodologies(self) -> List[Methodology]:
        rows = results_of(self._json("GET", "methodologies/"))
        return [Methodology.from_api(r) for r in rows if r.get("is_active", True)]

    def list_industries(self) -> List[Industry]:
        return [Industry.from_api(r) for r in results_of(self._json("GET", "industries/"))]

    def list_sections(self) -> List[SectionTemplate]:
        return [SectionTemplate.from_api(r) for r in results_of(self._json("GET", "sections/"))]

    def list_methodology_sections(self) -> List[MethodologySection]:
        out: List[MethodologySection] = []
        for row in results_of(self._json("GET", "methodology-sections/")):
            ms = MethodologySection.from_api(row)
            if ms is not None:
                out.append(ms)
        return out

    # =========================================================================
    # Project sections
    # =========================================================================
    def get_project_sections(self, project_id: str) -> List[ProjectSection]:
        rows = results_of(self._json("GET", f"projects/{project_id}/sections/", project_id=project_id))
        return [ProjectSection.from_attached(r, index=i) for i, r in enumerate(rows)]

    def get_question_review(self, project_id: str) -> List[ProjectSection]:
        payload = self._json("GET", f"projects/{project_id}/question_review/", project_id=project_id)
        rows = payload.get("sections") if isinstance(payload, dict) else None
        return [ProjectSection.from_review(r, index=i) for i, r in enumerate(rows or []) if isinstance(r, dict)]

    def save_project_sections(self, project_id: str, sections: Sequence[Dict[str, Any]]) -> None:
        self._json(
            "POST",
            f"projects/{project_id}/sections/",
            project_id=project_id,
            json={"sections": list(sections), "replace_existing": True},
        )

    def update_section_order(self, project_id: str, section_ids: Sequence[str]) -> None:
        self._json(
            "POST",
            f"projects/{project_id}/section_order/",
            project_id=project_id,
            json={"section_ids": list(section_ids)},
        )

    def update_static_section_content(self, project_id: str, section_id: str, content: str) -> None:
        self._json(
            "PUT",
            f"projects/{project_id}/sections/{section_id}/static_content/",
            project_id=project_id,
            json={"content": content},
        )

    # =========================================================================
    # Questions
    # =========================================================================
    def generate_ai_questions(
        self,
        project_id: str,
        section_ids: Optional[Sequence[str]] = None,
        *,
        max_questions_per_section: Optional[int] = None,
    ) -> Dict[str, List[Question]]:
        """Returns {section_id: questions}. Sections the backend failed on map to []."""
        payload = self._json(
            "POST",
            f"projects/{project_id}/generate_ai_questions/",
            project_id=project_id,
            json={
                "sections": list(section_ids) if section_ids is not None else None,
                "max_questions_per_section": max_questions_per_section,
            },
        )

        by_section: Dict[str, List[Question]] = {}
        for result in payload.get("generation_results") or []:
            sid = str(result.get("section_id") or "")
            if not result.get("success"):
                logger.warning(
                    "Question generation failed for section %s: %s",
                    result.get("section_name") or sid,
                    result.get("error_message"),
                )
                by_section[sid] = []
                continue

            questions: List[Question] = []
            for i, raw in enumerate(result.get("questions") or []):
                q = Question.from_api(raw, index=i)
                q.id = q.id or _new_local_id()
                q.question_number = f"Q{q.position}"
                q.is_ai_generated = True
                questions.append(q)
            by_section[sid] = questions
        return by_section

    def generate_questions(self, project_id: str, section_id: str, *, max_questions: int = 5) -> List[Question]:
        by_section = self.generate_ai_questions(
            project_id, [section_id], max_questions_per_section=max_questions
        )
        questions = by_section.get(section_id) or []
        if not questions:
            raise APIError("No questions generated for this section")
        return questions

    def list_reprompt_options(self) -> List[RepromptOption]:
        rows = [r for r in results_of(self._json("GET", "question-reprompt-options/")) if r.get("is_active", True)]
        rows.sort(key=lambda r: r.get("sort_order") or 0)
        return [
            RepromptOption(
                id=str(r.get("option_key") or r.get("id") or ""),
                label=str(r.get("display_name") or ""),
                description=str(r.get("description") or ""),
            )
            for r in rows
        ]

    def reprompt_questions(
        self,
        project_id: str,
        section_id: str,
        original_questions: Sequence[Question],
        reprompt_option: str,
        *,
        custom_feedback: str = "",
    ) -> List[Question]:
        """
        Ask the backend to rewrite questions. The returned questions carry no id;
        callers map them back onto the originals by position.
        """
        body: Dict[str, Any] = {
            "project_id": project_id,
            "section_id": section_id,
            "reprompt_option": reprompt_option,
            "original_questions": [
                {"id": q.id, "text": q.text, "type": q.type, "options": list(q.options)}
                for q in original_questions
            ],
            "max_questions": len(original_questions),
        }
        if custom_feedback.strip():
            body["custom_feedback"] = custom_feedback.strip()

        payload = self._json("POST", "reprompt-questions/", project_id=project_id, json=body)
        if not payload.get("success"):
            raise APIError(payload.get("error_message") or "Reprompt failed")

        out: List[Question] = []
        for i, raw in enumerate(payload.get("questions") or []):
            q = Question.from_api(raw, index=i)
            q.position = i + 1
            out.append(q)
        return out

    def save_project_questions(self, project_id: str, sections: Sequence[ProjectSection]) -> None:
        body = {
            "sections": [
                {
                    "section_id": s.id,
                    "questions": [q.to_api() for q in s.questions],
                }
                for s in sections
                if not s.is_static
            ]
        }
        self._json("POST", f"projects/{project_id}/questions/", project_id=project_id, json=body)

    def update_question(self, project_id: str, question: Question) -> Question:
        body = question.to_api()
        body.pop("id", None)
        row = self._json(
            "PUT",
            f"projects/{project_id}/questions/{question.id}/",
            project_id=project_id,
            json=body,
        )
        updated = Question.from_api(row)
        updated.type = transform_question_type(row.get("question_type") or question.type)
        updated.question_number = question.question_number or updated.question_number
        updated.is_ai_generated = question.is_ai_generated
        return updated

    def delete_question(self, project_id: str, question_id: str) -> None:
        self._json("DELETE", f"projects/{project_id}/questions/{question_id}/", project_id=project_id)

    # =========================================================================
    # Export
    # =========================================================================
    def export_project(self, project_id: str, fmt: str = "docx") -> bytes:
        fmt = (fmt or "").lower()
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {fmt!r}")

        if fmt == "docx":
            path, params = f"projects/{project_id}/export-docx/", None
        elif fmt == "csv":
            path, params = f"projects/{project_id}/export-csv/", None
        else:
            path, params = f"projects/{project_id}/export/", {"format": fmt}

        r = self._send("GET", path, project_id=project_id, params=params)
        logger.info("Exported project %s as %s (%d bytes)", project_id, fmt, len(r.content or b""))
        return r.content

    # =========================================================================
    # Diagnostics
    # =========================================================================
    def probe_endpoints(self, endpoints: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        """
        Hit each endpoint unscoped and report status + response time.
        Never raises; failures are part of the report.
        """
        if endpoints is None:
            endpoints = {name: self.url(path) for name, path in config.PROBE_PATHS.items()}

        report: List[Dict[str, Any]] = []
        for name, url in endpoints.items():
            started = time.monotonic()
            entry: Dict[str, Any] = {"endpoint": name, "url": url}
            try:
                r = self.http.get(
                    url,
                    headers={"Accept": "application/json", "Content-Type": "application/json"},
                    timeout=self.timeout,
                )
                entry["response_time_ms"] = int((time.monotonic() - started) * 1000)
                if r.ok:
                    entry["status"] = "success"
                    try:
                        entry["response"] = r.json()
                    except ValueError:
                        entry["response"] = _short(r.text, 500)
                else:
                    entry["status"] = "error"
                    entry["error"] = f"{r.status_code} {r.reason or ''}".strip()
            except requests.RequestException as e:
                entry["response_time_ms"] = int((time.monotonic() - started) * 1000)
                entry["status"] = "error"
                entry["error"] = str(e) or type(e).__name__
            report.append(entry)
        return report


def _first(*values: Any) -> str:
    for v in values:
        if v:
            return str(v)
    return ""


def _new_local_id() -> str:
    # "-new-" marks it as not yet saved (see question_review.is_local_question)
    return f"ai-new-{uuid.uuid4().hex[:12]}"


def section_payload(section_ids: Iterable[str], names: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    """Body rows for save_project_sections: positions follow selection order."""
    names = names or {}
    return [
        {"section_template_id": sid, "custom_title": names.get(sid, ""), "position": i}
        for i, sid in enumerate(section_ids, start=1)
    ]
