"""UI module."""

from .base import InputSource
from .dropdown import multi_select, multi_select_async, select, select_async, terminal_session
from .keys import ReadcharInput, classify_key
from .render import Renderer

__all__ = [
    "InputSource",
    "ReadcharInput",
    "Renderer",
    "classify_key",
    "multi_select",
    "multi_select_async",
    "select",
    "select_async",
    "terminal_session",
]
