"""Terminal key input backed by readchar."""

import logging
import os
import sys
import threading

import readchar

from qgo.errors import InputUnavailable, ReadFailure
from qgo.models import Key, KeyEvent

if os.name != "nt":
    import termios
    import tty

logger = logging.getLogger("qgo.keys")

# Application-mode cursor keys, sent by some terminals instead of CSI ones
APP_UP = "\x1bOA"
APP_DOWN = "\x1bOB"

_KEY_MAP: dict[str, Key] = {
    readchar.key.UP: Key.UP,
    APP_UP: Key.UP,
    readchar.key.DOWN: Key.DOWN,
    APP_DOWN: Key.DOWN,
    readchar.key.CR: Key.ENTER,
    readchar.key.LF: Key.ENTER,
    readchar.key.ESC: Key.ESCAPE,
    readchar.key.SPACE: Key.SPACE,
}

# Prefixes of multi-byte sequences readchar reads to completion
SEQUENCE_PREFIXES = ("\x1b[", "\x1bO")

# Raw mode is process-wide, so one lock guards every source
_terminal_lock = threading.Lock()


def classify_key(raw: str) -> KeyEvent:
    """Map a raw readchar key string to a KeyEvent.

    On POSIX readchar returns a lone ESC together with the next byte
    (ESC ESC, ESC q, ESC CR). Anything ESC-prefixed that is not a known
    CSI or SS3 sequence is an Escape press.
    """
    key = _KEY_MAP.get(raw)
    if key is not None:
        return KeyEvent(key)
    if raw.startswith(readchar.key.ESC) and not raw.startswith(SEQUENCE_PREFIXES):
        return KeyEvent(Key.ESCAPE)
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent.character(raw)
    return KeyEvent(Key.OTHER)


class ReadcharInput:
    """Reads keys from the controlling terminal in cbreak mode.

    Use as a context manager or call open()/close() explicitly:

        with ReadcharInput() as source:
            event = source.read_key()
    """

    def __init__(self):
        self._saved_attrs: list | None = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def open(self) -> None:
        if self._active:
            raise InputUnavailable("terminal input is already open")
        if not _terminal_lock.acquire(blocking=False):
            raise InputUnavailable("terminal input is in use by another selector")
        try:
            self._enter_cbreak()
        except BaseException:
            _terminal_lock.release()
            raise
        self._active = True
        logger.debug("Acquired terminal input")

    def _enter_cbreak(self) -> None:
        stream = sys.stdin
        if stream is None or not stream.isatty():
            raise InputUnavailable("standard input is not a terminal")
        if os.name == "nt":
            return
        try:
            fd = stream.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (OSError, ValueError, termios.error) as e:
            self._saved_attrs = None
            raise InputUnavailable(f"cannot switch terminal to cbreak mode: {e}") from e

    def read_key(self) -> KeyEvent:
        if not self._active:
            raise ReadFailure("terminal input is not open")
        try:
            raw = readchar.readkey()
        except (OSError, ValueError) as e:
            raise ReadFailure(f"failed to read key: {e}") from e
        if not raw:
            raise ReadFailure("end of input")
        return classify_key(raw)

    def close(self) -> None:
        if not self._active:
            return
        try:
            if self._saved_attrs is not None:
                try:
                    termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
                except (OSError, ValueError, termios.error) as e:
                    logger.warning("Failed to restore terminal mode: %s", e)
        finally:
            self._saved_attrs = None
            self._active = False
            _terminal_lock.release()
            logger.debug("Released terminal input")

    def __enter__(self) -> "ReadcharInput":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
