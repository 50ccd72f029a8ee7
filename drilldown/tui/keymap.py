"""Key bindings: which key press becomes which navigation event."""
from __future__ import annotations

from prompt_toolkit.key_binding import KeyBindings

from ..navigation.controller import NavigationEvent

# Host-only action: pick a breadcrumb and back out to it.
JUMP = "jump"

ACTIONS = frozenset({e.value for e in NavigationEvent} | {JUMP})

DEFAULT_KEYMAP: dict[str, str] = {
    "n": NavigationEvent.MOVE_DOWN.value,
    "down": NavigationEvent.MOVE_DOWN.value,
    "j": NavigationEvent.MOVE_DOWN.value,
    "p": NavigationEvent.MOVE_UP.value,
    "up": NavigationEvent.MOVE_UP.value,
    "k": NavigationEvent.MOVE_UP.value,
    "enter": NavigationEvent.SELECT.value,
    "s": NavigationEvent.SELECT.value,
    "right": NavigationEvent.SELECT.value,
    "b": NavigationEvent.BACK.value,
    "left": NavigationEvent.BACK.value,
    "h": NavigationEvent.HOME.value,
    "]": NavigationEvent.NEXT_SUB_PAGE.value,
    "[": NavigationEvent.PREV_SUB_PAGE.value,
    "g": JUMP,
    "q": NavigationEvent.QUIT.value,
    "c-c": NavigationEvent.QUIT.value,
}

# Spellings people type in config files, folded onto prompt_toolkit key names.
_KEY_ALIASES = {
    "return": "enter",
    "c-m": "enter",
    "esc": "escape",
    "page down": "pagedown",
    "pgdn": "pagedown",
    "page up": "pageup",
    "pgup": "pageup",
    "↑": "up",
    "↓": "down",
    "←": "left",
    "→": "right",
}

_CTRL_PREFIXES = ("ctrl+", "ctrl-", "control+", "control-")


def normalize_key(key: str) -> str:
    """Fold a key spelling onto its prompt_toolkit name.

    Single characters keep their case ("N" and "n" are different keys);
    named keys are case-insensitive, and "ctrl+x" / "ctrl-x" become "c-x".
    """
    raw = str(key)
    if len(raw) == 1:
        return _KEY_ALIASES.get(raw, raw)
    s = raw.strip().lower()
    if not s:
        raise ValueError("empty key name")
    for prefix in _CTRL_PREFIXES:
        if s.startswith(prefix) and len(s) > len(prefix):
            s = "c-" + s[len(prefix):]
            break
    return _KEY_ALIASES.get(s, s)


def check_key(key: str) -> str:
    """Normalize `key` and make sure prompt_toolkit can bind it.

    Raises:
        ValueError: naming the key if it is blank or not a key prompt_toolkit knows
    """
    name = normalize_key(key)
    try:
        KeyBindings().add(name)
    except ValueError:
        raise ValueError(f"unknown key {key!r}") from None
    return name


def normalize_action(action: str) -> str:
    return str(action).strip().lower()


def build_keymap(overrides: dict[str, str] | None = None) -> dict[str, str]:
    """Merge user overrides onto the default bindings.

    Raises:
        ValueError: if an override names an unknown key or action
    """
    keymap = dict(DEFAULT_KEYMAP)
    for key, action in (overrides or {}).items():
        action = normalize_action(action)
        if action not in ACTIONS:
            raise ValueError(f"unknown action {action!r} for key {key!r}")
        keymap[check_key(key)] = action
    return keymap


def resolve(keymap: dict[str, str], key: str) -> str | None:
    """Action bound to `key`, or None."""
    try:
        return keymap.get(normalize_key(key))
    except ValueError:
        return None


def key_hints(keymap: dict[str, str]) -> list[tuple[str, str]]:
    """One (key, action) pair per action, using the first key bound to it."""
    hints: dict[str, str] = {}
    for key, action in keymap.items():
        hints.setdefault(action, key)
    return [(key, action) for action, key in hints.items()]
