from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .tui.keymap import ACTIONS, check_key, normalize_action


class Settings(BaseSettings):
    """Configuration for the drill-down browser.

    Values are loaded from environment variables and `.env`.

    Notes:
    - Viewport size falls back to the detected terminal size when unset.
    - Logs go to a file by default; console logging would draw over the TUI.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Viewport overrides
    DRILLDOWN_VIEWPORT_WIDTH: int | None = Field(default=None, ge=1)
    DRILLDOWN_VIEWPORT_HEIGHT: int | None = Field(default=None, ge=1)

    # Mock data: number of topics on the root page (None = one per body row)
    DRILLDOWN_MOCK_TOPICS: int | None = Field(default=None, ge=0)
    DRILLDOWN_MOCK_MESSAGES: int = Field(default=3, ge=0)

    # Logging
    DRILLDOWN_LOG_DIR: Path = Field(default=Path("_logs"))
    DRILLDOWN_LOG_LEVEL: str = Field(default="INFO")
    # Timed rotation retention count (days).
    DRILLDOWN_LOG_BACKUP_COUNT: int = Field(default=14)
    DRILLDOWN_LOG_CONSOLE: bool = Field(default=False)

    # Key overrides, e.g. DRILLDOWN_KEYMAP='{"j": "move_down", "k": "move_up"}'
    DRILLDOWN_KEYMAP: dict[str, str] = Field(default_factory=dict)

    @field_validator("DRILLDOWN_KEYMAP")
    @classmethod
    def _known_bindings(cls, value: dict[str, str]) -> dict[str, str]:
        keymap: dict[str, str] = {}
        bad_keys: list[str] = []
        for key, action in value.items():
            try:
                key = check_key(key)
            except ValueError:
                bad_keys.append(repr(key))
            keymap[key] = normalize_action(action)
        if bad_keys:
            raise ValueError(f"unknown keys in keymap: {', '.join(bad_keys)}")
        unknown = sorted(v for v in keymap.values() if v not in ACTIONS)
        if unknown:
            raise ValueError(f"unknown actions in keymap: {', '.join(unknown)}")
        return keymap


def load_settings() -> Settings:
    return Settings()
