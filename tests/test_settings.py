"""Unit tests for Settings."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from drilldown.settings import Settings, load_settings


def test_defaults(clean_env):
    s = load_settings()
    assert s.DRILLDOWN_VIEWPORT_WIDTH is None
    assert s.DRILLDOWN_VIEWPORT_HEIGHT is None
    assert s.DRILLDOWN_MOCK_TOPICS is None
    assert s.DRILLDOWN_MOCK_MESSAGES == 3
    assert s.DRILLDOWN_LOG_DIR == Path("_logs")
    assert s.DRILLDOWN_LOG_LEVEL == "INFO"
    assert s.DRILLDOWN_LOG_CONSOLE is False
    assert s.DRILLDOWN_KEYMAP == {}


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("DRILLDOWN_VIEWPORT_HEIGHT", "30")
    monkeypatch.setenv("DRILLDOWN_MOCK_TOPICS", "5")
    monkeypatch.setenv("DRILLDOWN_KEYMAP", '{"x": "select", "z": "jump"}')

    s = Settings()
    assert s.DRILLDOWN_VIEWPORT_HEIGHT == 30
    assert s.DRILLDOWN_MOCK_TOPICS == 5
    assert s.DRILLDOWN_KEYMAP == {"x": "select", "z": "jump"}


def test_dotenv_file_is_read(clean_env):
    (clean_env / ".env").write_text("DRILLDOWN_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    assert Settings().DRILLDOWN_LOG_LEVEL == "DEBUG"


def test_unknown_keymap_action_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("DRILLDOWN_KEYMAP", '{"x": "teleport"}')
    with pytest.raises(ValidationError):
        Settings()


def test_viewport_must_be_positive(clean_env, monkeypatch):
    monkeypatch.setenv("DRILLDOWN_VIEWPORT_WIDTH", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_keymap_actions_are_normalized_like_build_keymap(clean_env, monkeypatch):
    monkeypatch.setenv("DRILLDOWN_KEYMAP", '{"x": " Move_Down "}')
    assert Settings().DRILLDOWN_KEYMAP == {"x": "move_down"}


def test_keymap_ctrl_keys_are_folded(clean_env, monkeypatch):
    monkeypatch.setenv("DRILLDOWN_KEYMAP", '{"ctrl+d": "quit"}')
    assert Settings().DRILLDOWN_KEYMAP == {"c-d": "quit"}


def test_unbindable_keymap_key_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("DRILLDOWN_KEYMAP", '{"hyper-x": "quit"}')
    with pytest.raises(ValidationError, match="hyper-x"):
        Settings()
