# surveyforge/ordering.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from surveyforge.models import ProjectSection


@dataclass(frozen=True)
class OrderedSection:
    id: str
    name: str
    description: str
    question_count: int
    order: int


def from_sections(sections: Sequence[ProjectSection]) -> List[OrderedSection]:
    """Order = server position (or index + 1), ascending. Ties keep load order."""
    rows = [
        OrderedSection(
            id=s.id,
            name=s.name,
            description=s.description,
            question_count=len(s.questions),
            order=s.position or i + 1,
        )
        for i, s in enumerate(sections)
    ]
    return sorted(rows, key=lambda r: r.order)


def renumber(rows: Sequence[OrderedSection]) -> List[OrderedSection]:
    return [
        OrderedSection(id=r.id, name=r.name, description=r.description, question_count=r.question_count, order=i)
        for i, r in enumerate(rows, start=1)
    ]


def _index_of(rows: Sequence[OrderedSection], section_id: str) -> int:
    for i, r in enumerate(rows):
        if r.id == section_id:
            return i
    return -1


def move_up(rows: Sequence[OrderedSection], section_id: str) -> List[OrderedSection]:
    out = list(rows)
    i = _index_of(out, section_id)
    if i <= 0:
        return renumber(out)
    out[i - 1], out[i] = out[i], out[i - 1]
    return renumber(out)


def move_down(rows: Sequence[OrderedSection], section_id: str) -> List[OrderedSection]:
    out = list(rows)
    i = _index_of(out, section_id)
    if i < 0 or i >= len(out) - 1:
        return renumber(out)
    out[i + 1], out[i] = out[i], out[i + 1]
    return renumber(out)


def ordered_ids(rows: Sequence[OrderedSection]) -> List[str]:
    return [r.id for r in sorted(rows, key=lambda r: r.order)]
