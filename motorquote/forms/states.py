"""Form wizard state definitions and transition map.

Step changes are driven by explicit triggers; the lifecycle manager decides
when a trigger is allowed (validation), the FSM decides whether it exists.
"""

from __future__ import annotations

from motorquote.models.enums import FormState, FormStep

# Transition map: {current_state: {trigger_name: next_state}}
TRANSITIONS: dict[FormState, dict[str, FormState]] = {
    FormState.STEP1: {
        "next": FormState.STEP2,
    },
    FormState.STEP2: {
        "back": FormState.STEP1,
        "submit": FormState.SUBMITTED,
    },
    FormState.SUBMITTED: {},
}

# Persisted step index ↔ live state
STATE_FOR_STEP: dict[FormStep, FormState] = {
    FormStep.PERSONAL: FormState.STEP1,
    FormStep.VEHICLE: FormState.STEP2,
}
STEP_FOR_STATE: dict[FormState, FormStep] = {
    FormState.STEP1: FormStep.PERSONAL,
    FormState.STEP2: FormStep.VEHICLE,
    FormState.SUBMITTED: FormStep.VEHICLE,
}
