"""Unit tests for key bindings."""
from __future__ import annotations

import pytest

from drilldown.tui.keymap import DEFAULT_KEYMAP, JUMP, build_keymap, check_key, key_hints, normalize_key, resolve


def test_default_bindings():
    assert DEFAULT_KEYMAP["n"] == "move_down"
    assert DEFAULT_KEYMAP["p"] == "move_up"
    assert DEFAULT_KEYMAP["enter"] == "select"
    assert DEFAULT_KEYMAP["q"] == "quit"
    assert DEFAULT_KEYMAP["c-c"] == "quit"
    assert DEFAULT_KEYMAP["g"] == JUMP


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Return", "enter"),
        ("ctrl+c", "c-c"),
        ("Ctrl-C", "c-c"),
        ("ctrl+d", "c-d"),
        ("Control-X", "c-x"),
        ("ESC", "escape"),
        ("PgDn", "pagedown"),
        ("↓", "down"),
        ("N", "N"),
        ("n", "n"),
        (" Up ", "up"),
    ],
)
def test_normalize_key(raw, expected):
    assert normalize_key(raw) == expected


def test_normalize_key_rejects_blank_names():
    with pytest.raises(ValueError):
        normalize_key("   ")


def test_build_keymap_merges_overrides():
    keymap = build_keymap({"x": "Select", "Page Down": "next_sub_page"})
    assert keymap["x"] == "select"
    assert keymap["pagedown"] == "next_sub_page"
    assert keymap["n"] == "move_down"
    assert "x" not in DEFAULT_KEYMAP


def test_build_keymap_rejects_unknown_actions():
    with pytest.raises(ValueError):
        build_keymap({"x": "teleport"})


def test_resolve():
    assert resolve(DEFAULT_KEYMAP, "Return") == "select"
    assert resolve(DEFAULT_KEYMAP, "z") is None
    assert resolve(DEFAULT_KEYMAP, "  ") is None


def test_key_hints_use_first_key_per_action():
    hints = dict((action, key) for key, action in key_hints(DEFAULT_KEYMAP))
    assert hints["move_down"] == "n"
    assert hints["quit"] == "q"
    assert len(hints) == len(set(DEFAULT_KEYMAP.values()))


def test_build_keymap_folds_any_ctrl_spelling():
    keymap = build_keymap({"ctrl+d": "quit", "Ctrl-B": "back"})
    assert keymap["c-d"] == "quit"
    assert keymap["c-b"] == "back"
    assert "ctrl+d" not in keymap


@pytest.mark.parametrize("key", list(DEFAULT_KEYMAP) + ["Return", "ctrl+d", "PgUp", "esc", "→"])
def test_check_key_accepts_bindable_names(key):
    assert check_key(key) == normalize_key(key)


@pytest.mark.parametrize("key", ["ctrl+shift+d", "hyper-x", "f99"])
def test_check_key_rejects_names_prompt_toolkit_cannot_bind(key):
    with pytest.raises(ValueError, match="unknown key"):
        check_key(key)


def test_build_keymap_rejects_unknown_keys():
    with pytest.raises(ValueError, match="hyper-x"):
        build_keymap({"hyper-x": "quit"})
