"""Selector errors.

`SelectionCancelled` is an expected outcome; the others are hard failures.
"""


class SelectionError(Exception):
    """Base class for selector errors."""


class EmptyOptions(SelectionError, ValueError):
    """Raised when a selector is given no options."""

    def __init__(self, message: str = "no options provided"):
        super().__init__(message)


class InputUnavailable(SelectionError):
    """Raised when exclusive terminal input cannot be acquired."""


class ReadFailure(SelectionError):
    """Raised when reading a key fails mid-selection."""


class SelectionCancelled(SelectionError):
    """Raised when the user exits with Escape or the quit key."""

    def __init__(self, message: str = "selection cancelled"):
        super().__init__(message)
