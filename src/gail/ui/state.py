"""UI mode state machine.

Hides which UI modes exist and which events move between them. The
transition function is pure; the app keeps the current mode and asks
this module whether a key or result is legal before acting on it.

    TEXT_INPUT --SUBMIT-->     LOADING     --ANSWER--> TEXT_INPUT
    TEXT_INPUT --PICK_ROLE-->  ROLE_SELECT --CONFIRM--> TEXT_INPUT
    TEXT_INPUT --PICK_SKILL--> SKILL_SELECT --CONFIRM--> TEXT_INPUT
    ROLE_SELECT/SKILL_SELECT --REJECT--> (same mode, error shown)
                                           on escape or an empty confirm
    any mode --QUIT--> TERMINATED
"""

from enum import Enum


class UIMode(str, Enum):
    """Mutually exclusive UI modes; exactly one is active."""

    TEXT_INPUT = "text_input"
    ROLE_SELECT = "role_select"
    SKILL_SELECT = "skill_select"
    LOADING = "loading"
    TERMINATED = "terminated"


class UIEvent(str, Enum):
    SUBMIT = "submit"
    ANSWER = "answer"
    PICK_ROLE = "pick_role"
    PICK_SKILL = "pick_skill"
    CONFIRM = "confirm"
    REJECT = "reject"
    QUIT = "quit"


class IllegalTransition(Exception):
    """The event is not accepted in the current mode."""

    def __init__(self, mode: UIMode, event: UIEvent):
        super().__init__(f"Event '{event.value}' is not allowed in mode '{mode.value}'")
        self.mode = mode
        self.event = event


_TRANSITIONS: dict[tuple[UIMode, UIEvent], UIMode] = {
    (UIMode.TEXT_INPUT, UIEvent.SUBMIT): UIMode.LOADING,
    (UIMode.LOADING, UIEvent.ANSWER): UIMode.TEXT_INPUT,
    (UIMode.TEXT_INPUT, UIEvent.PICK_ROLE): UIMode.ROLE_SELECT,
    (UIMode.ROLE_SELECT, UIEvent.CONFIRM): UIMode.TEXT_INPUT,
    (UIMode.ROLE_SELECT, UIEvent.REJECT): UIMode.ROLE_SELECT,
    (UIMode.TEXT_INPUT, UIEvent.PICK_SKILL): UIMode.SKILL_SELECT,
    (UIMode.SKILL_SELECT, UIEvent.CONFIRM): UIMode.TEXT_INPUT,
    (UIMode.SKILL_SELECT, UIEvent.REJECT): UIMode.SKILL_SELECT,
}


def transition(mode: UIMode, event: UIEvent) -> UIMode:
    """Return the mode reached from mode on event.

    Raises:
        IllegalTransition: If the event is not accepted in mode
    """
    if mode is UIMode.TERMINATED:
        raise IllegalTransition(mode, event)
    if event is UIEvent.QUIT:
        return UIMode.TERMINATED
    try:
        return _TRANSITIONS[(mode, event)]
    except KeyError:
        raise IllegalTransition(mode, event) from None


def can_transition(mode: UIMode, event: UIEvent) -> bool:
    try:
        transition(mode, event)
    except IllegalTransition:
        return False
    return True
