from __future__ import annotations

from design.components.wizard_nav import stepper_html
from surveyforge.workflow import progress_states


def test_stepper_marks_done_and_current_chips():
    html = stepper_html(["Setup", "Sections", "Questions"], progress_states("sections")[:3])
    assert html.count('class="sf-chip done"') == 1
    assert html.count('class="sf-chip active"') == 1
    assert '<b>3</b>Questions' in html


def test_stepper_escapes_labels():
    assert "&lt;b&gt;" in stepper_html(["<b>"], ["current"])
