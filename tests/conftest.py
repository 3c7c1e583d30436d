"""Pytest fixtures for qgo tests."""

import pytest

from qgo.errors import ReadFailure
from qgo.models import Key, KeyEvent


@pytest.fixture(autouse=True)
def clear_caches(tmp_path, monkeypatch):
    """Isolate config per test and clear the module-level cache."""
    from qgo.config import clear_config_cache

    monkeypatch.setenv("QGO_CONFIG_DIR", str(tmp_path / "qgo-config"))
    clear_config_cache()

    yield

    clear_config_cache()


KEYS = {
    "up": KeyEvent(Key.UP),
    "down": KeyEvent(Key.DOWN),
    "enter": KeyEvent(Key.ENTER),
    "esc": KeyEvent(Key.ESCAPE),
    "space": KeyEvent(Key.SPACE),
    "other": KeyEvent(Key.OTHER),
}


def to_event(key: str | KeyEvent) -> KeyEvent:
    """Named keys from KEYS, any other string is a typed character."""
    if isinstance(key, KeyEvent):
        return key
    return KEYS.get(key) or KeyEvent.character(key)


class ScriptedInput:
    """Input source replaying a fixed list of keys.

    Running out of keys raises ReadFailure, like end of input on a terminal.
    """

    def __init__(self, keys, fail_open: Exception | None = None):
        self.keys = [to_event(k) for k in keys]
        self.fail_open = fail_open
        self.open_calls = 0
        self.close_calls = 0
        self.reads = 0

    @property
    def is_open(self) -> bool:
        return self.open_calls > self.close_calls

    def open(self) -> None:
        if self.fail_open is not None:
            raise self.fail_open
        self.open_calls += 1

    def read_key(self) -> KeyEvent:
        if not self.is_open:
            raise AssertionError("read_key called on a closed source")
        if self.reads >= len(self.keys):
            raise ReadFailure("end of input")
        event = self.keys[self.reads]
        self.reads += 1
        return event

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def scripted_input():
    """Factory for ScriptedInput sources."""
    return ScriptedInput
