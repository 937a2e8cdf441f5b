# surveyforge/types.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from surveyforge.integrations.surveyforge_client import SurveyForgeClient
from surveyforge.session import SessionIds


@dataclass(frozen=True)
class BuilderContext:
    client: SurveyForgeClient
    session_ids: SessionIds

    # None on the setup step of a brand-new project
    project_id: Optional[str] = None
