"""Plain-text frame renderer.

Every frame starts with clear-screen and cursor-home, then repaints the
whole list. There is no diffing against the previous frame.
"""

from collections.abc import Sequence
from typing import TextIO

from rich.console import Console
from rich.control import Control

from qgo.models import Navigating, Option

DEFAULT_CURSOR_MARKER = "> "
MULTI_SELECT_HINT = (
    "Use arrow keys to navigate, space to select/deselect, enter to confirm, q to quit"
)
CHECKED = "[x]"
UNCHECKED = "[ ]"
CLEAR_HOME = Control.clear().segment.text + Control.home().segment.text


class Renderer:
    """Draws selector frames to a text sink."""

    def __init__(
        self,
        output: TextIO | None = None,
        cursor_marker: str = DEFAULT_CURSOR_MARKER,
        show_hints: bool = True,
    ):
        if not isinstance(cursor_marker, str) or not cursor_marker:
            raise ValueError("cursor_marker must be a non-empty string")
        self.cursor_marker = cursor_marker
        self.blank_marker = " " * len(cursor_marker)
        self.show_hints = show_hints
        # Plain text only: labels must come out exactly as given
        self._console = Console(
            file=output,
            markup=False,
            highlight=False,
            emoji=False,
            color_system=None,
        )

    def _begin_frame(self) -> None:
        # Written directly: Console.control drops codes on dumb or non-tty output
        self._console.file.write(CLEAR_HOME)

    def _line(self, text: str = "") -> None:
        self._console.print(text, soft_wrap=True)

    def _marker(self, active: bool) -> str:
        return self.cursor_marker if active else self.blank_marker

    def single_lines(self, state: Navigating, options: Sequence[Option]) -> list[str]:
        return [f"{self._marker(i == state.cursor)}{opt.label}" for i, opt in enumerate(options)]

    def multi_lines(self, state: Navigating, options: Sequence[Option]) -> list[str]:
        lines = []
        for i, opt in enumerate(options):
            box = CHECKED if i in state.selected else UNCHECKED
            active = i == state.cursor
            if active:
                box = box.upper()
            lines.append(f"{self._marker(active)}{box} {opt.label}")
        return lines

    def draw_single(self, prompt: str, state: Navigating, options: Sequence[Option]) -> None:
        self._begin_frame()
        self._line(prompt)
        self._line()
        for line in self.single_lines(state, options):
            self._line(line)

    def draw_multi(self, prompt: str, state: Navigating, options: Sequence[Option]) -> None:
        self._begin_frame()
        self._line(prompt)
        if self.show_hints:
            self._line()
            self._line(MULTI_SELECT_HINT)
        self._line()
        for line in self.multi_lines(state, options):
            self._line(line)
