"""Key decoding for the terminal browser.

``decode_key`` is a pure mapping from the raw character sequence of one key
press to a browser action; reading the sequence from the terminal lives in
``reviewr.utils.platform``.
"""

from reviewr.tui.state import Action
from reviewr.utils.platform import read_key_sequence

KEY_BINDINGS: dict[str, Action] = {
    # Quit / escape
    "q": Action.QUIT,
    "\x03": Action.QUIT,
    "\x1b": Action.ESCAPE,
    # Help and summary
    "h": Action.TOGGLE_HELP,
    "?": Action.TOGGLE_HELP,
    "s": Action.SUMMARY,
    # Platform cycling
    "\t": Action.NEXT_PLATFORM,
    "\x1b[Z": Action.PREV_PLATFORM,
    "\x00\x0f": Action.PREV_PLATFORM,
    # Selection
    "\r": Action.CONFIRM,
    "\n": Action.CONFIRM,
    "\x7f": Action.BACK,
    "\x08": Action.BACK,
    # Movement (POSIX CSI and SS3 forms, Windows extended codes, vi keys)
    "\x1b[A": Action.UP,
    "\x1bOA": Action.UP,
    "\xe0H": Action.UP,
    "\x00H": Action.UP,
    "k": Action.UP,
    "\x1b[B": Action.DOWN,
    "\x1bOB": Action.DOWN,
    "\xe0P": Action.DOWN,
    "\x00P": Action.DOWN,
    "j": Action.DOWN,
}


def decode_key(sequence: str) -> Action:
    """Map one key press to an action; unknown keys map to ``Action.NONE``."""
    return KEY_BINDINGS.get(sequence, Action.NONE)


def read_action() -> Action:
    """Block for one key press and decode it."""
    return decode_key(read_key_sequence())
