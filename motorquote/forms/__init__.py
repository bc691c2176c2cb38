"""Quote form wizard — field rules, step FSM, persisted partial state.

The lifecycle manager lives in motorquote.forms.lifecycle; it depends on the
live preview schedulers, which in turn import the field helpers from here.
"""

from motorquote.forms.fsm import FormFSM, InvalidTransitionError
from motorquote.forms.session_store import clear_form_session, persist_form_session, restore_form_session
from motorquote.forms.validation import validate_step1, validate_step2

__all__ = [
    "FormFSM",
    "InvalidTransitionError",
    "restore_form_session",
    "persist_form_session",
    "clear_form_session",
    "validate_step1",
    "validate_step2",
]
