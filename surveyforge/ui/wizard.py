# surveyforge/ui/wizard.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import streamlit as st

from design.components.wizard_nav import WizardNavStyle, create_step_header, wizard_nav_ui
from surveyforge.workflow import (
    PROGRESS_STEP_COUNT,
    STEP_IDS,
    WorkflowStep,
    default_back_label,
    default_next_label,
    get_step,
    next_step,
    previous_step,
    progress_states,
    run_next_hook,
    step_index,
)


@dataclass(frozen=True)
class WizardConfig:
    name: str
    key_prefix: Optional[str] = None
    show_counter: bool = True


class Wizard:
    """Tracks the current workflow step (by id) in session state and draws its chrome."""

    def __init__(self, config: WizardConfig):
        self.config = config
        base = re.sub(r"[^a-z0-9]+", "_", (config.key_prefix or config.name).lower()).strip("_")
        self._key = base or "builder"
        self._state_key = f"{self._key}.current_step"
        st.session_state.setdefault(self._state_key, STEP_IDS[0])

    @property
    def step_id(self) -> str:
        current = st.session_state.get(self._state_key)
        return current if current in STEP_IDS else STEP_IDS[0]

    @property
    def step(self) -> WorkflowStep:
        return get_step(self.step_id)

    @property
    def position(self) -> int:
        return step_index(self.step_id)

    def _go(self, target: Optional[WorkflowStep]) -> None:
        if target is not None:
            st.session_state[self._state_key] = target.id

    def set_step(self, target) -> None:
        if isinstance(target, int):
            target = STEP_IDS[max(0, min(target, len(STEP_IDS) - 1))]
        self._go(get_step(target))

    def next(self) -> None:
        self._go(next_step(self.step_id))

    def back(self) -> None:
        self._go(previous_step(self.step_id))

    def reset(self) -> None:
        st.session_state[self._state_key] = STEP_IDS[0]

    def is_first_step(self) -> bool:
        return previous_step(self.step_id) is None

    def is_last_step(self) -> bool:
        return next_step(self.step_id) is None

    def header(self, divider: bool = True) -> None:
        if divider:
            st.divider()
        title_col, counter_col = st.columns([7, 3])
        with title_col:
            create_step_header(self.position + 1, self.step.title, self.step.description)
        if self.config.show_counter and self.position < PROGRESS_STEP_COUNT:
            counter_col.caption(f"Step {self.position + 1} of {PROGRESS_STEP_COUNT}")

    def nav(
        self,
        *,
        can_next: bool = True,
        next_label: Optional[str] = None,
        back_label: Optional[str] = None,
        disable_back: bool = False,
        style: Optional[WizardNavStyle] = None,
        on_back: Optional[Callable[[], None]] = None,
        on_next: Optional[Callable[[], bool]] = None,
        auto_rerun: bool = True,
    ) -> Tuple[bool, bool]:
        """Draw Back/Next and move between steps.

        A falsy or failing `on_next` keeps the current step. Any move triggers
        an immediate rerun so the new step renders in the same interaction.
        """
        forward_ok = can_next and not self.is_last_step()
        pressed_back, pressed_next = wizard_nav_ui(
            tool_key=self._key,
            step_idx=self.position,
            step_states=progress_states(self.step_id),
            can_next=forward_ok,
            disable_back=disable_back,
            next_label=next_label or default_next_label(self.step_id),
            back_label=back_label or default_back_label(self.step_id),
            step_labels=[get_step(sid).title for sid in STEP_IDS[:PROGRESS_STEP_COUNT]],
            style=style,
        )

        moved = False
        if pressed_back and not disable_back:
            (on_back or self.back)()
            moved = True
        elif pressed_next and forward_ok:
            with st.spinner("Saving…"):
                advance = run_next_hook(on_next, on_error=lambda e: st.error(f"Could not continue: {e}"))
            if advance:
                self.next()
                moved = True

        if moved and auto_rerun:
            st.rerun()
        return pressed_back, pressed_next
