"""Modal key interpreter: turns single keystrokes into Actions.

Multi-key commands (dd, gg) are buffered in an explicit Mode. A key that
does not complete the pending command drops the prefix and is handled
again as if it arrived in IDLE. There is no timeout on a pending prefix.
The interpreter never touches the task list; it only reports Actions.
"""
from enum import Enum
from typing import Dict, Optional, Tuple


class Mode(Enum):
    IDLE = "idle"
    PENDING_DELETE = "pending-delete"
    PENDING_GO_TOP = "pending-go-top"


class Action(Enum):
    SELECT_NEXT = "select-next"
    SELECT_PREVIOUS = "select-previous"
    SELECT_FIRST = "select-first"
    SELECT_LAST = "select-last"
    PROMOTE = "promote"
    DEMOTE = "demote"
    TOGGLE_DONE = "toggle-done"
    BEGIN_CREATE = "begin-create"
    DELETE_SELECTED = "delete-selected"
    QUIT = "quit"


IDLE_KEYS: Dict[str, Action] = {
    'j': Action.SELECT_NEXT,
    'k': Action.SELECT_PREVIOUS,
    'h': Action.DEMOTE,
    'l': Action.PROMOTE,
    'o': Action.BEGIN_CREATE,
    'D': Action.DELETE_SELECTED,
    'G': Action.SELECT_LAST,
    ' ': Action.TOGGLE_DONE,
    'q': Action.QUIT,
}

PREFIX_KEYS: Dict[str, Mode] = {
    'd': Mode.PENDING_DELETE,
    'g': Mode.PENDING_GO_TOP,
}

# (pending mode, completing key) -> action
COMPLETIONS: Dict[Tuple[Mode, str], Action] = {
    (Mode.PENDING_DELETE, 'd'): Action.DELETE_SELECTED,
    (Mode.PENDING_GO_TOP, 'g'): Action.SELECT_FIRST,
}

PENDING_HINTS: Dict[Mode, str] = {
    Mode.PENDING_DELETE: 'd',
    Mode.PENDING_GO_TOP: 'g',
}


def transition(mode: Mode, key: object) -> Tuple[Mode, Optional[Action]]:
    """Return the next mode and the action emitted (if any) for `key`."""
    if not isinstance(key, str):
        return Mode.IDLE, None
    if mode is not Mode.IDLE:
        action = COMPLETIONS.get((mode, key))
        if action is not None:
            return Mode.IDLE, action
        return transition(Mode.IDLE, key)
    if key in PREFIX_KEYS:
        return PREFIX_KEYS[key], None
    return Mode.IDLE, IDLE_KEYS.get(key)


class CommandInterpreter:
    def __init__(self) -> None:
        self.mode: Mode = Mode.IDLE

    @property
    def pending(self) -> Optional[str]:
        """Keys typed so far for an unfinished command, or None."""
        return PENDING_HINTS.get(self.mode)

    def feed(self, key: object) -> Optional[Action]:
        self.mode, action = transition(self.mode, key)
        return action

    def reset(self) -> None:
        self.mode = Mode.IDLE
