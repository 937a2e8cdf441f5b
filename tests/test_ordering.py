from __future__ import annotations

from surveyforge.ordering import from_sections, move_down, move_up, ordered_ids, renumber
from tests.conftest import make_question, make_section


def _rows():
    return from_sections([
        make_section("b", make_question("q1"), position=2),
        make_section("a", position=1),
        make_section("c", position=0),
    ])


def test_from_sections_sorts_by_position_with_index_fallback():
    rows = _rows()
    # "c" has no position and falls back to index + 1 == 3
    assert [(r.id, r.order) for r in rows] == [("a", 1), ("b", 2), ("c", 3)]
    assert rows[1].question_count == 1


def test_move_up_and_down_renumber():
    rows = _rows()

    up = move_up(rows, "c")
    assert ordered_ids(up) == ["a", "c", "b"]
    assert [r.order for r in up] == [1, 2, 3]

    down = move_down(up, "a")
    assert ordered_ids(down) == ["c", "a", "b"]


def test_moves_at_the_edges_are_noops():
    rows = _rows()
    assert ordered_ids(move_up(rows, "a")) == ["a", "b", "c"]
    assert ordered_ids(move_down(rows, "c")) == ["a", "b", "c"]
    assert ordered_ids(move_up(rows, "missing")) == ["a", "b", "c"]


def test_renumber_is_one_based():
    rows = list(reversed(_rows()))
    assert [(r.id, r.order) for r in renumber(rows)] == [("c", 1), ("b", 2), ("a", 3)]
