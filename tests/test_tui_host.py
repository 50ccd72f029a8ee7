"""Unit tests for the terminal host loop."""
from __future__ import annotations

from io import StringIO
from types import SimpleNamespace

import pytest
from rich.console import Console

from drilldown.errors import FetchError
from drilldown.navigation import FunctionStrategy, Page, Row, build_topic_chain, initialize
from drilldown.tui.components import render_error, render_view
from drilldown.tui import host as host_module
from drilldown.tui.host import TerminalHost, key_bindings, key_reader
from drilldown.tui.keymap import DEFAULT_KEYMAP, build_keymap


def _console() -> tuple[Console, StringIO]:
    buf = StringIO()
    return Console(file=buf, width=80, height=24, color_system=None), buf


def _keys(*keys: str):
    it = iter(keys)

    def _read() -> str:
        try:
            return next(it)
        except StopIteration:
            raise AssertionError("host asked for more keys than scripted") from None

    return _read


@pytest.fixture
def controller():
    return initialize(80, 24, build_topic_chain(topic_count=3))


def test_host_runs_until_quit(controller):
    console, buf = _console()
    host = TerminalHost(console, controller, read_key=_keys("n", "n", "enter", "q"))

    host.run()

    assert controller.quit_requested is True
    assert controller.current_view().header == "topic 2"
    assert controller.stack.depth() == 2
    assert "Goodbye" in buf.getvalue()


def test_host_draws_rows_and_breadcrumbs(controller):
    console, buf = _console()
    host = TerminalHost(console, controller, read_key=_keys("q"))
    host.run()

    out = buf.getvalue()
    assert "topics" in out
    assert "topic 0" in out
    assert "topic 2" in out
    assert "›" in out


def test_ctrl_c_ends_the_session(controller):
    console, buf = _console()

    def _interrupt() -> str:
        raise KeyboardInterrupt

    host = TerminalHost(console, controller, read_key=_interrupt)
    host.run()

    assert controller.quit_requested is True
    assert "Goodbye" in buf.getvalue()


def test_unbound_keys_are_ignored(controller):
    console, _ = _console()
    host = TerminalHost(console, controller, read_key=_keys())
    assert host.dispatch("z") is None
    assert controller.cursor == 0
    assert controller.stack.depth() == 1


def test_fetch_error_shows_in_footer():
    def _broken(viewport_size: int, arg: str) -> Page:
        raise FetchError("down", strategy="topic", arg=arg)

    def _root(viewport_size: int, arg: str) -> Page:
        return Page.single("topics", [Row.plain("topic 0")], on_advance=FunctionStrategy(_broken))

    nav = initialize(80, 24, _root)
    console, buf = _console()
    host = TerminalHost(console, nav, read_key=_keys("enter", "q"))

    host.run()

    assert nav.stack.depth() == 1
    assert "✗ topic('topic 0'): down" in buf.getvalue()


def test_custom_keymap(controller):
    console, _ = _console()
    keymap = dict(DEFAULT_KEYMAP, x="select")
    host = TerminalHost(console, controller, keymap=keymap, read_key=_keys("x", "q"))
    host.run()
    assert controller.current_view().header == "topic 0"


def test_jump_backs_out_to_chosen_level(controller):
    console, _ = _console()
    offered: list[tuple[str, ...]] = []

    def _choose(trail):
        offered.append(trail)
        return 2

    host = TerminalHost(console, controller, read_key=_keys(), choose=_choose)
    host.dispatch("enter")
    host.dispatch("enter")
    host.dispatch("enter")
    assert controller.stack.depth() == 4

    host.dispatch("g")
    assert offered == [("topics", "topic 0", "partition 1", '{"offset": 0}')]
    assert controller.stack.depth() == 2
    assert controller.current_view().header == "topic 0"


def test_jump_cancelled_or_at_root(controller):
    console, _ = _console()
    calls = {"n": 0}

    def _choose(trail):
        calls["n"] += 1
        return None

    host = TerminalHost(console, controller, read_key=_keys(), choose=_choose)
    host.dispatch("g")
    assert calls["n"] == 0

    host.dispatch("enter")
    host.dispatch("g")
    assert calls["n"] == 1
    assert controller.stack.depth() == 2


def test_host_resizes_controller_to_console(controller):
    console, _ = _console()
    controller.resize(40, 10)
    host = TerminalHost(console, controller, read_key=_keys("q"))
    host.run()
    assert (controller.viewport_width, controller.viewport_height) == (80, 24)


def test_fixed_size_wins_over_console(controller):
    console, _ = _console()
    host = TerminalHost(console, controller, read_key=_keys("q"), fixed_size=(100, 12))
    host.run()
    assert (controller.viewport_width, controller.viewport_height) == (100, 12)


def test_render_view_marks_sub_pages():
    nav = initialize(80, 7, build_topic_chain(topic_count=7))
    console, buf = _console()
    render_view(console, nav.current_view(), DEFAULT_KEYMAP, nav.viewport_size)
    assert "[1/3]" in buf.getvalue()


def test_render_body_handles_empty_pages():
    nav = initialize(80, 24, lambda n, arg: Page.single("nothing", []))
    console, buf = _console()
    render_view(console, nav.current_view(), DEFAULT_KEYMAP, nav.viewport_size)
    assert "(no rows)" in buf.getvalue()


def test_render_error_escapes_markup():
    console, buf = _console()
    render_error(console, "Fetch failed", "bad key [offset]", "Try again")
    out = buf.getvalue()
    assert "bad key [offset]" in out
    assert "Try again" in out


def test_key_bindings_cover_every_default_key():
    """Each bound key ends the prompt with that key as its result."""
    kb = key_bindings(DEFAULT_KEYMAP)
    results: list[str] = []
    event = SimpleNamespace(app=SimpleNamespace(exit=lambda result: results.append(result)))

    for binding in kb.bindings:
        binding.handler(event)

    assert len(kb.bindings) == len(DEFAULT_KEYMAP)
    assert sorted(results) == sorted(DEFAULT_KEYMAP)


def test_key_reader_builds_for_overridden_keymap(monkeypatch):
    keymap = build_keymap({"ctrl+d": "quit", "Return": "select", "PgDn": "next_sub_page", "x": "back"})
    calls: list[dict] = []

    def fake_prompt(message, **kwargs):
        calls.append(kwargs)
        return "c-d"

    monkeypatch.setattr(host_module, "prompt", fake_prompt)
    read = key_reader(keymap)

    assert read() == "c-d"
    assert len(calls[0]["key_bindings"].bindings) == len(keymap)


def test_host_without_injected_reader_accepts_ctrl_override(controller):
    console, _ = _console()
    host = TerminalHost(console, controller, keymap=build_keymap({"ctrl+d": "quit"}))
    assert callable(host.read_key)
    assert host.dispatch("c-d") is None
    assert controller.quit_requested is True


def test_key_bindings_reject_unbindable_keys():
    with pytest.raises(ValueError, match="hyper-x"):
        key_bindings({"hyper-x": "quit"})
