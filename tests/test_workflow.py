from __future__ import annotations

from unittest import mock

import pytest

from surveyforge.workflow import (
    PROGRESS_STEP_COUNT,
    STEP_IDS,
    default_back_label,
    default_next_label,
    get_step,
    next_step,
    previous_step,
    progress_states,
    requires_project,
    run_next_hook,
    step_index,
)


def test_step_order():
    assert STEP_IDS == ["setup", "sections", "questions", "order", "export", "finished"]
    assert PROGRESS_STEP_COUNT == 5


def test_neighbours():
    assert next_step("setup").id == "sections"
    assert next_step("finished") is None
    assert previous_step("setup") is None
    assert previous_step("order").id == "questions"


def test_unknown_step_raises_key_error():
    with pytest.raises(KeyError):
        step_index("nope")


def test_labels():
    assert default_next_label("setup") == "Continue to Section Library"
    assert default_next_label("export") == "Export Survey"
    assert default_back_label("sections") == "Back to Project Setup"
    assert default_back_label("setup") == "Back"


def test_only_setup_works_without_project():
    assert not requires_project("setup")
    assert all(requires_project(s) for s in STEP_IDS[1:])


def test_progress_states():
    assert progress_states("questions") == ["done", "done", "current", "todo", "todo"]
    assert progress_states("finished") == ["done"] * 5


def test_get_step_title():
    assert get_step("order").title == "Section Order"


def test_run_next_hook_results():
    assert run_next_hook(None) is True
    assert run_next_hook(lambda: True) is True
    assert run_next_hook(lambda: False) is False
    assert run_next_hook(lambda: None) is False


def test_run_next_hook_exception_blocks_and_reports():
    boom = RuntimeError("backend exploded")
    on_error = mock.Mock()

    def hook():
        raise boom

    assert run_next_hook(hook, on_error=on_error) is False
    on_error.assert_called_once_with(boom)


def test_run_next_hook_exception_without_handler():
    def hook():
        raise ValueError("x")

    assert run_next_hook(hook) is False
