from __future__ import annotations

from unittest import mock

from surveyforge.errors import APIError
from surveyforge.question_review import (
    NEW_QUESTION_TEXT,
    add_question,
    apply_manual_edit,
    apply_optimistic,
    apply_reprompt,
    delete_question,
    duplicate_question,
    empty_section_ids,
    find_question,
    format_manual_edit,
    is_local_question,
    merge_generated,
    parse_manual_edit,
    replace_section,
    set_static_content,
    toggle_section,
    total_questions,
    update_question,
    update_question_text,
)
from tests.conftest import make_question


def test_counts_and_empty_sections(sections):
    assert total_questions(sections) == 2
    # static sections never need generation
    assert empty_section_ids(sections) == ["s2"]


def test_edits_do_not_mutate_input(sections):
    out = update_question_text(sections, "q1", "Changed")
    assert find_question(out, "q1")[1].text == "Changed"
    assert find_question(sections, "q1")[1].text == "Which brands do you know?"


def test_update_question_replaces_by_id(sections):
    new = make_question("q2", "Rewritten", number="Q2", options=["Yes", "No"])
    out = update_question(sections, new)
    assert find_question(out, "q2")[1].options == ["Yes", "No"]
    assert find_question(out, "q2")[1] is not new


def test_duplicate_inserts_copy_after_original(sections):
    out = duplicate_question(sections, "q1")
    ids = [q.id for q in out[0].questions]
    assert ids == ["q1", "q1-copy", "q2"]

    dup = out[0].questions[1]
    assert dup.text == "Which brands do you know? (Copy)"
    assert dup.question_number == "Q1a"
    assert is_local_question(dup)

    dup.options.append("Never")
    assert "Never" not in out[0].questions[0].options


def test_repeated_duplicates_get_distinct_ids(sections):
    out = duplicate_question(duplicate_question(sections, "q1"), "q1")
    ids = [q.id for q in out[0].questions]
    assert ids == ["q1", "q1-copy-2", "q1-copy", "q2"]
    assert len(set(ids)) == len(ids)
    assert all(is_local_question(q) for q in out[0].questions[1:3])

    # deleting one copy leaves the other
    out = delete_question(out, "q1-copy")
    assert [q.id for q in out[0].questions] == ["q1", "q1-copy-2", "q2"]


def test_delete_question(sections):
    out = delete_question(sections, "q1")
    assert [q.id for q in out[0].questions] == ["q2"]
    assert len(sections[0].questions) == 2


def test_add_question_appends_local_placeholder(sections):
    out, q = add_question(sections, "s2")
    assert out[1].questions == [q]
    assert q.text == NEW_QUESTION_TEXT
    assert q.options == ["Option 1", "Option 2"]
    assert q.type == "single-choice"
    assert q.question_number == "Q1"
    assert q.id.startswith("s2-new-")
    assert is_local_question(q)


def test_add_question_to_unknown_section(sections):
    out, q = add_question(sections, "nope")
    assert q is None
    assert total_questions(out) == 2


def test_is_local_question():
    assert is_local_question(make_question(""))
    assert is_local_question(make_question("ai-new-abc"))
    assert not is_local_question(make_question("q-123"))
    assert not is_local_question(make_question("copy-editor"))


def test_toggle_and_static_content(sections):
    out = toggle_section(sections, "s1")
    assert out[0].is_expanded is False
    assert toggle_section(out, "s1")[0].is_expanded is True

    out = set_static_content(sections, "intro", "Thanks for joining.")
    assert out[2].static_content == "Thanks for joining."


def test_merge_generated_keeps_sections_without_results(sections):
    gen = {"s2": [make_question("g1", "Generated", is_ai_generated=True)], "s1": []}
    out = merge_generated(sections, gen)
    assert [q.id for q in out[1].questions] == ["g1"]
    assert [q.id for q in out[0].questions] == ["q1", "q2"]


def test_apply_reprompt_keeps_ids_and_numbers(sections):
    section = sections[0]
    originals = [section.questions[1]]
    regenerated = [make_question("", "Preferred brand?", options=["A", "B"]), make_question("", "ignored")]

    out = apply_reprompt(section, originals, regenerated)

    first, second = out.questions
    assert first.text == "Which brands do you know?"
    assert second.id == "q2" and second.question_number == "Q2"
    assert second.text == "Preferred brand?"
    assert second.options == ["A", "B"]
    assert second.is_ai_generated
    assert section.questions[1].text == "Which brand do you prefer?"


def test_replace_section(sections):
    new = toggle_section(sections, "s2")[1]
    out = replace_section(sections, new)
    assert out[1].is_expanded is False
    assert sections[1].is_expanded is True


def test_format_and_parse_manual_edit():
    q = make_question("q", "Pick one", options=["Red", "Blue"])
    raw = format_manual_edit(q)
    assert raw == "Pick one\n\nOptions:\n• Red\n• Blue"
    assert parse_manual_edit(raw) == ("Pick one", ["Red", "Blue"])


def test_parse_manual_edit_variants():
    assert parse_manual_edit("Just text  ") == ("Just text", None)
    assert parse_manual_edit("Q?\noptions:\n- a\n* b\n1. c\n2) d\n\n") == ("Q?", ["a", "b", "c", "d"])
    assert parse_manual_edit("Q?\nOptions:") == ("Q?", [])
    assert parse_manual_edit("") == ("", None)


def test_apply_manual_edit(sections):
    out = apply_manual_edit(sections, "q1", "New wording\nOptions:\n• X")
    q = find_question(out, "q1")[1]
    assert (q.text, q.options) == ("New wording", ["X"])

    # no options block: options stay
    out = apply_manual_edit(sections, "q1", "Only text")
    assert find_question(out, "q1")[1].options == ["Daily", "Weekly"]

    # blank text keeps the old wording
    out = apply_manual_edit(sections, "q1", "\nOptions:\n• Y")
    assert find_question(out, "q1")[1].text == "Which brands do you know?"

    assert apply_manual_edit(sections, "missing", "Anything") == sections


def test_apply_optimistic_commits_on_success(sections):
    push = mock.Mock()
    out, err = apply_optimistic(sections, lambda s: delete_question(s, "q1"), push)
    assert err is None
    assert total_questions(out) == 1
    push.assert_called_once_with(out)


def test_apply_optimistic_rolls_back_on_api_error(sections):
    push = mock.Mock(side_effect=APIError("nope", 500))
    out, err = apply_optimistic(sections, lambda s: delete_question(s, "q1"), push)
    assert isinstance(err, APIError)
    assert total_questions(out) == 2
    assert out is not sections
