"""qgo - arrow-key selectors for the terminal."""

from qgo.errors import (
    EmptyOptions,
    InputUnavailable,
    ReadFailure,
    SelectionCancelled,
    SelectionError,
)
from qgo.models import Option, parse_option
from qgo.ui import multi_select, multi_select_async, select, select_async

__version__ = "0.1.0"

__all__ = [
    "EmptyOptions",
    "InputUnavailable",
    "Option",
    "ReadFailure",
    "SelectionCancelled",
    "SelectionError",
    "multi_select",
    "multi_select_async",
    "parse_option",
    "select",
    "select_async",
]
