"""Selection state machines.

Transitions are pure functions: they take the current `Navigating` state and
one classified key, and return the next state. `Confirmed` and `Cancelled`
are terminal; the caller stops reading keys once it sees one.
"""

from collections.abc import Sequence

from qgo.models import Cancelled, Confirmed, Key, KeyEvent, Navigating, Option, SelectionState

QUIT_CHARS = frozenset({"q", "Q"})


def wrap_cursor(cursor: int, delta: int, total: int) -> int:
    """Move cursor by delta, wrapping around both ends of the list."""
    return (cursor + delta + total) % total


def is_cancel(event: KeyEvent) -> bool:
    """Escape and the quit characters cancel from any state."""
    if event.key is Key.ESCAPE:
        return True
    return event.key is Key.CHARACTER and event.char in QUIT_CHARS


def _navigate(state: Navigating, event: KeyEvent, total: int) -> Navigating | None:
    if event.key is Key.UP:
        return Navigating(wrap_cursor(state.cursor, -1, total), state.selected)
    if event.key is Key.DOWN:
        return Navigating(wrap_cursor(state.cursor, 1, total), state.selected)
    return None


def step_single(state: Navigating, event: KeyEvent, options: Sequence[Option]) -> SelectionState:
    """Single-select transition."""
    moved = _navigate(state, event, len(options))
    if moved is not None:
        return moved
    if event.key is Key.ENTER:
        return Confirmed(options[state.cursor].value)
    if is_cancel(event):
        return Cancelled()
    return state


def step_multi(state: Navigating, event: KeyEvent, options: Sequence[Option]) -> SelectionState:
    """Multi-select transition.

    Space toggles the cursor row. Enter confirms the selected values in
    list order, whatever order they were toggled in; an empty selection is
    a valid confirmation.
    """
    moved = _navigate(state, event, len(options))
    if moved is not None:
        return moved
    if event.key is Key.SPACE:
        return Navigating(state.cursor, state.selected ^ {state.cursor})
    if event.key is Key.ENTER:
        return Confirmed([opt.value for i, opt in enumerate(options) if i in state.selected])
    if is_cancel(event):
        return Cancelled()
    return state
