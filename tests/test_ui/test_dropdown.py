"""Tests for the select/multi_select invocation wrappers."""

import asyncio
import io
import threading

import pytest

from qgo.errors import EmptyOptions, InputUnavailable, ReadFailure, SelectionCancelled
from qgo.models import Key, KeyEvent, Option
from qgo.ui import dropdown
from qgo.ui.dropdown import multi_select, multi_select_async, select, select_async

OPTIONS = Option.from_pairs([("1", "One"), ("2", "Two"), ("3", "Three")])


@pytest.fixture
def sink():
    return io.StringIO()


class TestSelect:
    def test_down_down_enter(self, scripted_input, sink):
        source = scripted_input(["down", "down", "enter"])
        assert select("Pick:", OPTIONS, source=source, output=sink) == "3"

    def test_up_enter_wraps(self, scripted_input, sink):
        source = scripted_input(["up", "enter"])
        assert select("Pick:", OPTIONS, source=source, output=sink) == "3"

    def test_enter_picks_first_by_default(self, scripted_input, sink):
        source = scripted_input(["enter"])
        assert select("Pick:", OPTIONS, source=source, output=sink) == "1"

    def test_draws_one_frame_per_key(self, scripted_input, sink):
        source = scripted_input(["down", "x", "enter"])
        select("Pick:", OPTIONS, source=source, output=sink)
        assert sink.getvalue().count("Pick:") == 3

    def test_source_opened_and_closed_once(self, scripted_input, sink):
        source = scripted_input(["enter"])
        select("Pick:", OPTIONS, source=source, output=sink)
        assert source.open_calls == 1
        assert source.close_calls == 1

    @pytest.mark.parametrize("key", ["esc", "q", "Q"])
    def test_cancel_raises_and_releases(self, scripted_input, sink, key):
        source = scripted_input(["down", key, "enter"])
        with pytest.raises(SelectionCancelled):
            select("Pick:", OPTIONS, source=source, output=sink)
        assert source.close_calls == 1
        # Keys after the cancel are never read
        assert source.reads == 2

    def test_read_failure_releases(self, scripted_input, sink):
        source = scripted_input(["down"])
        with pytest.raises(ReadFailure):
            select("Pick:", OPTIONS, source=source, output=sink)
        assert source.close_calls == 1

    def test_open_failure_surfaces_without_reading(self, scripted_input, sink):
        source = scripted_input(["enter"], fail_open=InputUnavailable("not a tty"))
        with pytest.raises(InputUnavailable):
            select("Pick:", OPTIONS, source=source, output=sink)
        assert source.reads == 0
        assert sink.getvalue() == ""

    def test_empty_options_never_opens(self, scripted_input, sink):
        source = scripted_input(["enter"])
        with pytest.raises(EmptyOptions):
            select("Pick:", [], source=source, output=sink)
        assert source.open_calls == 0

    def test_empty_options_never_builds_default_source(self, monkeypatch):
        def boom():
            raise AssertionError("terminal acquired")

        monkeypatch.setattr(dropdown, "ReadcharInput", boom)
        with pytest.raises(EmptyOptions):
            select("Pick:", [])

    def test_accepts_tuple_options(self, scripted_input, sink):
        source = scripted_input(["down", "enter"])
        assert select("Pick:", tuple(OPTIONS), source=source, output=sink) == "2"


class TestMultiSelect:
    def test_space_down_down_space_enter(self, scripted_input, sink):
        source = scripted_input(["space", "down", "down", "space", "enter"])
        assert multi_select("Pick:", OPTIONS, source=source, output=sink) == ["1", "3"]

    def test_toggle_order_does_not_matter(self, scripted_input, sink):
        source = scripted_input(["up", "space", "down", "space", "enter"])
        assert multi_select("Pick:", OPTIONS, source=source, output=sink) == ["1", "3"]

    def test_confirm_with_nothing_selected(self, scripted_input, sink):
        source = scripted_input(["down", "enter"])
        assert multi_select("Pick:", OPTIONS, source=source, output=sink) == []

    def test_cancel_discards_selection(self, scripted_input, sink):
        source = scripted_input(["space", "esc"])
        with pytest.raises(SelectionCancelled):
            multi_select("Pick:", OPTIONS, source=source, output=sink)
        assert not source.is_open

    def test_empty_options(self, scripted_input):
        source = scripted_input([])
        with pytest.raises(EmptyOptions):
            multi_select("Pick:", [], source=source)
        assert source.open_calls == 0

    def test_fresh_state_per_call(self, scripted_input, sink):
        first = scripted_input(["space", "enter"])
        second = scripted_input(["enter"])
        assert multi_select("Pick:", OPTIONS, source=first, output=sink) == ["1"]
        assert multi_select("Pick:", OPTIONS, source=second, output=sink) == []


class TestAsync:
    def test_select_async(self, scripted_input, sink):
        source = scripted_input(["down", "down", "enter"])
        result = asyncio.run(select_async("Pick:", OPTIONS, source=source, output=sink))
        assert result == "3"
        assert not source.is_open

    def test_multi_select_async(self, scripted_input, sink):
        source = scripted_input(["space", "down", "down", "space", "enter"])
        result = asyncio.run(multi_select_async("Pick:", OPTIONS, source=source, output=sink))
        assert result == ["1", "3"]

    def test_async_cancel_releases(self, scripted_input, sink):
        source = scripted_input(["q"])
        with pytest.raises(SelectionCancelled):
            asyncio.run(select_async("Pick:", OPTIONS, source=source, output=sink))
        assert source.close_calls == 1

    def test_cancelled_task_keeps_terminal_until_read_returns(self, sink):
        class BlockingInput:
            def __init__(self):
                self.log = []
                self.started = threading.Event()
                self.release = threading.Event()

            def open(self):
                self.log.append("open")

            def read_key(self):
                self.log.append("read-start")
                self.started.set()
                self.release.wait(timeout=5)
                self.log.append("read-end")
                return KeyEvent(Key.DOWN)

            def close(self):
                self.log.append("close")

        source = BlockingInput()

        async def cancel_mid_read():
            task = asyncio.create_task(select_async("Pick:", OPTIONS, source=source, output=sink))
            await asyncio.to_thread(source.started.wait, 5)
            task.cancel()
            await asyncio.sleep(0.05)
            assert "close" not in source.log
            source.release.set()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(cancel_mid_read())
        assert source.log == ["open", "read-start", "read-end", "close"]
