"""Arrow-key dropdown selectors.

`select` and `multi_select` own one terminal session each: the input source
is opened before the first frame and closed on every way out, including
cancellation and read errors.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, TextIO

from qgo.errors import EmptyOptions, SelectionCancelled
from qgo.models import Cancelled, Confirmed, KeyEvent, Navigating, Option, SelectionState

from .keys import ReadcharInput
from .render import Renderer
from .selection import step_multi, step_single

if TYPE_CHECKING:
    from .base import InputSource

logger = logging.getLogger("qgo.dropdown")

StepFunc = Callable[[Navigating, KeyEvent, Sequence[Option]], SelectionState]
DrawFunc = Callable[[str, Navigating, Sequence[Option]], None]


@contextmanager
def terminal_session(source: InputSource) -> Iterator[InputSource]:
    """Open `source` for the duration of the block, always closing it."""
    source.open()
    try:
        yield source
    finally:
        source.close()


def _prepare(
    options: Sequence[Option],
    source: InputSource | None,
    renderer: Renderer | None,
    output: TextIO | None,
) -> tuple[list[Option], InputSource, Renderer]:
    opts = list(options)
    if not opts:
        raise EmptyOptions()
    if source is None:
        source = ReadcharInput()
    return opts, source, renderer or Renderer(output)


def _finish(state: Confirmed | Cancelled):
    if isinstance(state, Cancelled):
        logger.debug("Selection cancelled")
        raise SelectionCancelled()
    logger.debug("Selection confirmed: %r", state.value)
    return state.value


def _run(
    prompt: str,
    options: list[Option],
    source: InputSource,
    draw: DrawFunc,
    step: StepFunc,
):
    state: SelectionState = Navigating()
    with terminal_session(source):
        while isinstance(state, Navigating):
            draw(prompt, state, options)
            state = step(state, source.read_key(), options)
    return _finish(state)


async def _read_key_async(source: InputSource) -> KeyEvent:
    """Read one key in a worker thread.

    A blocked read cannot be interrupted, so on cancellation the terminal
    stays held until the pending key arrives.
    """
    read = asyncio.ensure_future(asyncio.to_thread(source.read_key))
    try:
        return await asyncio.shield(read)
    except asyncio.CancelledError:
        await asyncio.wait({read})
        if read.exception() is not None:
            logger.debug("Key read after cancellation failed: %s", read.exception())
        raise


async def _run_async(
    prompt: str,
    options: list[Option],
    source: InputSource,
    draw: DrawFunc,
    step: StepFunc,
):
    state: SelectionState = Navigating()
    with terminal_session(source):
        while isinstance(state, Navigating):
            draw(prompt, state, options)
            # One key per iteration; the next read starts only after the redraw
            event = await _read_key_async(source)
            state = step(state, event, options)
    return _finish(state)


def select(
    prompt: str,
    options: Sequence[Option],
    *,
    source: InputSource | None = None,
    renderer: Renderer | None = None,
    output: TextIO | None = None,
) -> str:
    """Pick one option with the arrow keys and return its value.

    Raises:
        EmptyOptions: options is empty (nothing is opened).
        InputUnavailable: the terminal could not be acquired.
        ReadFailure: reading a key failed.
        SelectionCancelled: the user pressed Escape or q.
    """
    opts, src, rend = _prepare(options, source, renderer, output)
    return _run(prompt, opts, src, rend.draw_single, step_single)


def multi_select(
    prompt: str,
    options: Sequence[Option],
    *,
    source: InputSource | None = None,
    renderer: Renderer | None = None,
    output: TextIO | None = None,
) -> list[str]:
    """Toggle options with space and return the chosen values in list order.

    Confirming with nothing toggled returns an empty list. Raises the same
    errors as `select`.
    """
    opts, src, rend = _prepare(options, source, renderer, output)
    return _run(prompt, opts, src, rend.draw_multi, step_multi)


async def select_async(
    prompt: str,
    options: Sequence[Option],
    *,
    source: InputSource | None = None,
    renderer: Renderer | None = None,
    output: TextIO | None = None,
) -> str:
    """Awaitable `select`; the blocking key read runs in a worker thread."""
    opts, src, rend = _prepare(options, source, renderer, output)
    return await _run_async(prompt, opts, src, rend.draw_single, step_single)


async def multi_select_async(
    prompt: str,
    options: Sequence[Option],
    *,
    source: InputSource | None = None,
    renderer: Renderer | None = None,
    output: TextIO | None = None,
) -> list[str]:
    """Awaitable `multi_select`."""
    opts, src, rend = _prepare(options, source, renderer, output)
    return await _run_async(prompt, opts, src, rend.draw_multi, step_multi)
