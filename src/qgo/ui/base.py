"""Input source protocol for swappable key readers."""

from typing import Protocol

from qgo.models import KeyEvent


class InputSource(Protocol):
    """Exclusive raw key input.

    `open` must be called before `read_key`; `close` restores the terminal
    and may be called any number of times.
    """

    def open(self) -> None:
        """Acquire the terminal, raise InputUnavailable on failure."""
        ...

    def read_key(self) -> KeyEvent:
        """Block for one key, raise ReadFailure on I/O error."""
        ...

    def close(self) -> None:
        """Release the terminal. Idempotent."""
        ...
