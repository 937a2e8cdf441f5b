from __future__ import annotations

from unittest import mock

from surveyforge.session import SessionIds, new_session_id


def test_new_session_id_is_uuid_shaped():
    sid = new_session_id()
    assert len(sid) == 36 and sid.count("-") == 4
    assert sid != new_session_id()


def test_user_session_id_is_generated_once_and_persisted():
    storage = {}
    factory = mock.Mock(return_value="generated-1")
    ids = SessionIds(storage, id_factory=factory)

    assert ids.user_session_id() == "generated-1"
    assert ids.user_session_id() == "generated-1"
    assert storage == {"user-session-id": "generated-1"}
    factory.assert_called_once_with()


def test_blank_stored_id_is_replaced():
    storage = {"user-session-id": "   "}
    ids = SessionIds(storage, id_factory=lambda: "fresh")
    assert ids.user_session_id() == "fresh"


def test_project_session_falls_back_to_user_session():
    ids = SessionIds({"user-session-id": "me"})
    assert ids.project_session_id() == "me"
    assert ids.project_session_id("p1") == "me"


def test_remember_and_forget_project_session():
    storage = {"user-session-id": "me"}
    ids = SessionIds(storage)

    ids.remember_project_session("p1", " owner ")
    assert storage["project-session-p1"] == "owner"
    assert ids.project_session_id("p1") == "owner"

    ids.forget_project_session("p1")
    assert "project-session-p1" not in storage
    assert ids.project_session_id("p1") == "me"


def test_remember_ignores_blank_values():
    storage = {"user-session-id": "me"}
    ids = SessionIds(storage)
    ids.remember_project_session("", "x")
    ids.remember_project_session("p1", "")
    assert storage == {"user-session-id": "me"}
