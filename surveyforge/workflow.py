# surveyforge/workflow.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowStep:
    id: str
    title: str
    description: str = ""


WORKFLOW_STEPS: Sequence[WorkflowStep] = (
    WorkflowStep("setup", "Project Setup", "Client, methodology, sample and tracked suppliers."),
    WorkflowStep("sections", "Section Library", "Pick the sections your survey is built from."),
    WorkflowStep("questions", "Question Review", "Generate, edit and refine questions per section."),
    WorkflowStep("order", "Section Order", "Arrange sections into a logical flow for respondents."),
    WorkflowStep("export", "Export & Review", "Download the questionnaire."),
    WorkflowStep("finished", "Finished", "Your survey is ready."),
)

STEP_IDS: List[str] = [s.id for s in WORKFLOW_STEPS]

# Steps shown in the progress indicator ("finished" is not a real step)
PROGRESS_STEP_COUNT = 5

_NEXT_LABELS: Dict[str, str] = {
    "setup": "Continue to Section Library",
    "sections": "Continue to Question Review",
    "questions": "Continue to Section Order",
    "order": "Continue to Export",
    "export": "Export Survey",
}

_BACK_LABELS: Dict[str, str] = {
    "sections": "Back to Project Setup",
    "questions": "Back to Section Library",
    "order": "Back to Question Review",
    "export": "Back to Section Order",
    "finished": "Back to Export",
}


def step_index(step_id: str) -> int:
    try:
        return STEP_IDS.index(step_id)
    except ValueError as e:
        raise KeyError(f"Unknown workflow step: {step_id!r}") from e


def get_step(step_id: str) -> WorkflowStep:
    return WORKFLOW_STEPS[step_index(step_id)]


def next_step(step_id: str) -> Optional[WorkflowStep]:
    idx = step_index(step_id)
    return WORKFLOW_STEPS[idx + 1] if idx < len(WORKFLOW_STEPS) - 1 else None


def previous_step(step_id: str) -> Optional[WorkflowStep]:
    idx = step_index(step_id)
    return WORKFLOW_STEPS[idx - 1] if idx > 0 else None


def default_next_label(step_id: str) -> str:
    return _NEXT_LABELS.get(step_id, "Continue")


def default_back_label(step_id: str) -> str:
    return _BACK_LABELS.get(step_id, "Back")


def requires_project(step_id: str) -> bool:
    """Every step after setup works on an existing project."""
    return step_index(step_id) > 0


def progress_states(step_id: str) -> List[str]:
    """'done' | 'current' | 'todo' for each progress dot."""
    current = step_index(step_id)
    out: List[str] = []
    for i in range(PROGRESS_STEP_COUNT):
        if i < current:
            out.append("done")
        elif i == current:
            out.append("current")
        else:
            out.append("todo")
    return out


def run_next_hook(hook, on_error: Optional[Callable[[Exception], None]] = None) -> bool:
    """
    Run a step's on_next hook. A falsy result blocks the transition, and so
    does an exception (logged, then handed to `on_error` for display).
    """
    if hook is None:
        return True
    try:
        return bool(hook())
    except Exception as e:
        logger.exception("Error during navigation")
        if on_error is not None:
            on_error(e)
        return False
