"""Finite state machine for the quote form wizard.

The FSM validates transitions and emits state-change events.
Field validation happens before a trigger is fired, never inside the FSM.
"""

from __future__ import annotations

import logging

from motorquote.events.bus import emit
from motorquote.forms.states import TRANSITIONS
from motorquote.models.enums import FormState
from motorquote.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)


class InvalidTransitionError(ValueError):
    """Raised when a trigger is not valid from the current form state."""


class FormFSM:
    """Manages wizard state transitions for a single form."""

    def __init__(self, form_id: str, initial_state: FormState = FormState.STEP1) -> None:
        self.form_id = form_id
        self.current_state = initial_state

    def can_transition(self, trigger: str) -> bool:
        """Check if a trigger is valid from the current state."""
        return trigger in TRANSITIONS.get(self.current_state, {})

    def get_valid_triggers(self) -> list[str]:
        """Return all valid trigger names for the current state."""
        return list(TRANSITIONS.get(self.current_state, {}).keys())

    async def transition(self, trigger: str) -> FormState:
        """Execute a state transition.

        Returns:
            The new state after transition.

        Raises:
            InvalidTransitionError: If the trigger is not valid from the current state.
        """
        old_state = self.current_state
        state_transitions = TRANSITIONS.get(self.current_state, {})
        if trigger not in state_transitions:
            msg = (
                f"Invalid transition: {self.current_state.value} --{trigger}--> ??? "
                f"(valid: {list(state_transitions.keys())})"
            )
            raise InvalidTransitionError(msg)
        self.current_state = state_transitions[trigger]

        logger.info(
            "Form transition: %s --%s--> %s (form=%s)",
            old_state.value,
            trigger,
            self.current_state.value,
            self.form_id,
        )

        await emit(SystemEvent(
            event_type=EventType.FORM_STEP_CHANGED,
            form_id=self.form_id,
            data={
                "from_state": old_state.value,
                "to_state": self.current_state.value,
                "trigger": trigger,
            },
            source_module="forms.fsm",
        ))

        return self.current_state

    @property
    def is_terminal(self) -> bool:
        """Check if the current state is a terminal state."""
        return len(TRANSITIONS.get(self.current_state, {})) == 0
