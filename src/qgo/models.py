"""Data models for qgo selectors."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Option:
    """Immutable choice: `value` is returned to the caller, `label` is shown."""

    value: str
    label: str

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> list["Option"]:
        """Build options from (value, label) pairs, keeping their order."""
        return [cls(value, label) for value, label in pairs]


def parse_option(raw: str) -> Option:
    """Parse a ``VALUE=LABEL`` string. A bare ``VALUE`` is its own label."""
    value, sep, label = raw.partition("=")
    if not value:
        raise ValueError(f"Option '{raw}' has an empty value")
    return Option(value, label if sep else value)


class Key(Enum):
    """Classified key kinds."""

    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    ESCAPE = "escape"
    SPACE = "space"
    CHARACTER = "character"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """One classified key press. `char` is set only for CHARACTER."""

    key: Key
    char: str | None = None

    @classmethod
    def character(cls, char: str) -> "KeyEvent":
        return cls(Key.CHARACTER, char)


@dataclass(frozen=True)
class Navigating:
    """Active selection state.

    `selected` is only used by multi-select and is independent of the cursor.
    """

    cursor: int = 0
    selected: frozenset[int] = frozenset()


@dataclass(frozen=True)
class Confirmed:
    """Terminal state: a str for single-select, a list of str for multi-select."""

    value: str | list[str]


@dataclass(frozen=True)
class Cancelled:
    """Terminal state: the user left without confirming."""


SelectionState = Navigating | Confirmed | Cancelled
