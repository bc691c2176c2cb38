"""Tests for the form wizard FSM.

Covers: happy path, back navigation, invalid triggers, terminal state,
transition map consistency, step-changed events.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from motorquote.forms.fsm import FormFSM, InvalidTransitionError
from motorquote.forms.states import STATE_FOR_STEP, STEP_FOR_STATE, TRANSITIONS
from motorquote.models.enums import FormState, FormStep
from motorquote.schemas.events import EventType


@pytest.fixture()
def make_fsm():
    """Factory to create an FSM at a given state."""
    def _make(state: FormState = FormState.STEP1) -> FormFSM:
        return FormFSM(form_id="form-1", initial_state=state)
    return _make


class TestPaths:
    @pytest.mark.asyncio
    async def test_next_then_submit(self, make_fsm):
        fsm = make_fsm()

        await fsm.transition("next")
        assert fsm.current_state == FormState.STEP2

        await fsm.transition("submit")
        assert fsm.current_state == FormState.SUBMITTED
        assert fsm.is_terminal

    @pytest.mark.asyncio
    async def test_back_and_forth(self, make_fsm):
        fsm = make_fsm(FormState.STEP2)

        await fsm.transition("back")
        assert fsm.current_state == FormState.STEP1

        await fsm.transition("next")
        assert fsm.current_state == FormState.STEP2


class TestInvalidTriggers:
    @pytest.mark.asyncio
    async def test_submit_from_step1(self, make_fsm):
        fsm = make_fsm()
        with pytest.raises(InvalidTransitionError, match="Invalid transition"):
            await fsm.transition("submit")
        assert fsm.current_state == FormState.STEP1

    @pytest.mark.asyncio
    async def test_back_from_step1(self, make_fsm):
        with pytest.raises(InvalidTransitionError):
            await make_fsm().transition("back")

    @pytest.mark.asyncio
    async def test_nothing_after_submitted(self, make_fsm):
        fsm = make_fsm(FormState.SUBMITTED)
        for trigger in ("next", "back", "submit"):
            with pytest.raises(InvalidTransitionError):
                await fsm.transition(trigger)

    def test_valid_triggers(self, make_fsm):
        assert make_fsm().get_valid_triggers() == ["next"]
        assert sorted(make_fsm(FormState.STEP2).get_valid_triggers()) == ["back", "submit"]
        assert make_fsm(FormState.SUBMITTED).get_valid_triggers() == []

    def test_error_is_value_error(self):
        assert issubclass(InvalidTransitionError, ValueError)


class TestTransitionMap:
    def test_every_state_has_an_entry(self):
        assert set(TRANSITIONS) == set(FormState)

    def test_targets_are_states(self):
        for targets in TRANSITIONS.values():
            for target in targets.values():
                assert target in FormState

    def test_step_mapping_roundtrip(self):
        for step in FormStep:
            assert STEP_FOR_STATE[STATE_FOR_STEP[step]] == step


class TestEvents:
    @pytest.mark.asyncio
    async def test_emits_step_changed(self, make_fsm):
        fsm = make_fsm()
        with patch("motorquote.forms.fsm.emit", new_callable=AsyncMock) as mock_emit:
            await fsm.transition("next")

        event = mock_emit.call_args[0][0]
        assert event.event_type == EventType.FORM_STEP_CHANGED
        assert event.form_id == "form-1"
        assert event.data == {"from_state": "step1", "to_state": "step2", "trigger": "next"}

    @pytest.mark.asyncio
    async def test_no_event_on_invalid_trigger(self, make_fsm):
        with patch("motorquote.forms.fsm.emit", new_callable=AsyncMock) as mock_emit:
            with pytest.raises(InvalidTransitionError):
                await make_fsm().transition("submit")
        mock_emit.assert_not_awaited()
