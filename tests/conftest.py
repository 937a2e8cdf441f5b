from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

import pytest
import requests

from surveyforge.integrations.surveyforge_client import SurveyForgeClient
from surveyforge.models import ProjectSection, Question
from surveyforge.session import SessionIds

BASE_URL = "http://api.test"


def make_response(status: int = 200, body: Any = None, *, url: str = "", content: Optional[bytes] = None,
                  reason: str = "") -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r.url = url
    r.reason = reason or ("OK" if status < 400 else "Error")
    if content is not None:
        r._content = content
    elif body is None:
        r._content = b""
    else:
        r._content = json.dumps(body).encode("utf-8")
        r.headers["Content-Type"] = "application/json"
    return r


class FakeHTTP:
    """Stands in for requests.Session: records every call, replays queued responses."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self._queue: List[Union[requests.Response, Exception]] = []

    def queue(self, item: Union[requests.Response, Exception]) -> "FakeHTTP":
        self._queue.append(item)
        return self

    def reply(self, status: int = 200, body: Any = None, **kwargs: Any) -> "FakeHTTP":
        return self.queue(make_response(status, body, **kwargs))

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        item.url = url
        return item

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", url, **kwargs)

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def storage() -> Dict[str, str]:
    return {"user-session-id": "user-1"}


@pytest.fixture
def session_ids(storage) -> SessionIds:
    return SessionIds(storage)


@pytest.fixture
def http() -> FakeHTTP:
    return FakeHTTP()


@pytest.fixture
def client(session_ids, http) -> SurveyForgeClient:
    return SurveyForgeClient(session_ids, base_url=BASE_URL, api_version="v1", http=http, timeout=5, ai_timeout=50)


def make_question(qid: str, text: str = "How often?", *, number: str = "Q1", options=None, **kwargs: Any) -> Question:
    return Question(
        id=qid,
        text=text,
        options=list(options if options is not None else ["Daily", "Weekly"]),
        question_number=number,
        **kwargs,
    )


def make_section(sid: str, *questions: Question, name: str = "", **kwargs: Any) -> ProjectSection:
    return ProjectSection(id=sid, name=name or sid.title(), questions=list(questions), **kwargs)


@pytest.fixture
def sections() -> List[ProjectSection]:
    return [
        make_section(
            "s1",
            make_question("q1", "Which brands do you know?", number="Q1"),
            make_question("q2", "Which brand do you prefer?", number="Q2"),
            position=1,
        ),
        make_section("s2", position=2),
        make_section("intro", is_static=True, static_content="Welcome to the survey.", position=3),
    ]
