# surveyforge/session.py
from __future__ import annotations

import logging
import uuid
from typing import Callable, MutableMapping, Optional

from surveyforge.config import USER_SESSION_KEY, project_session_key

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return str(uuid.uuid4())


class SessionIds:
    """
    Anonymous ownership scoping.

    The backend filters projects by the X-User-Session-Id header. Every browser
    gets one "user" session id; a project created from another browser keeps the
    id it was created with, which we remember per project once the backend has
    told us about it.

    `storage` is any str -> str mapping (a dict in tests, browser localStorage
    mirrored into st.session_state in the app).
    """

    def __init__(
        self,
        storage: MutableMapping[str, str],
        *,
        id_factory: Callable[[], str] = new_session_id,
    ):
        self._storage = storage
        self._id_factory = id_factory

    def user_session_id(self) -> str:
        sid = (self._storage.get(USER_SESSION_KEY) or "").strip()
        if not sid:
            sid = self._id_factory()
            self._storage[USER_SESSION_KEY] = sid
            logger.info("Generated new user session id")
        return sid

    def project_session_id(self, project_id: Optional[str] = None) -> str:
        if not project_id:
            return self.user_session_id()
        sid = (self._storage.get(project_session_key(project_id)) or "").strip()
        return sid or self.user_session_id()

    def remember_project_session(self, project_id: str, session_id: str) -> None:
        project_id = (project_id or "").strip()
        session_id = (session_id or "").strip()
        if not project_id or not session_id:
            return
        key = project_session_key(project_id)
        if self._storage.get(key) != session_id:
            self._storage[key] = session_id
            logger.info("Stored session scope for project %s", project_id)

    def forget_project_session(self, project_id: str) -> None:
        key = project_session_key(project_id)
        if key in self._storage:
            del self._storage[key]
