"""Terminal host: draws the current view and feeds key presses to the controller."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import questionary
from prompt_toolkit import prompt
from prompt_toolkit.key_binding import KeyBindings

from ..navigation.controller import NavigationEvent
from .components import BRAND_STYLE, render_view
from .keymap import DEFAULT_KEYMAP, JUMP, check_key, resolve

if TYPE_CHECKING:
    from rich.console import Console

    from ..errors import FetchError
    from ..navigation.controller import NavigationController

logger = logging.getLogger(__name__)


def key_bindings(keymap: dict[str, str]) -> KeyBindings:
    """Bind every key of the keymap so pressing it ends the prompt with that key.

    Raises:
        ValueError: if prompt_toolkit cannot bind one of the keys
    """
    kb = KeyBindings()

    def _bind(key: str) -> None:
        @kb.add(check_key(key))
        def _pressed(event):
            event.app.exit(result=key)

    for key in keymap:
        _bind(key)
    return kb


def key_reader(keymap: dict[str, str]) -> Callable[[], str]:
    """Build a function that blocks until one bound key is pressed.

    Every key in the keymap ends the prompt immediately and becomes its
    result; anything else is ignored.
    """
    kb = key_bindings(keymap)

    def _read() -> str:
        return prompt("› ", key_bindings=kb, default="")

    return _read


def choose_level(trail: tuple[str, ...]) -> int | None:
    """Ask which breadcrumb to back out to; returns its depth (1 = root)."""
    choices = [
        questionary.Choice(title=title, value=depth)
        for depth, title in enumerate(trail[:-1], start=1)
    ]
    choices.append(questionary.Choice(title="← Stay here", value=None))
    return questionary.select(
        "Jump back to",
        choices=choices,
        style=BRAND_STYLE,
    ).ask()


class TerminalHost:
    """Event loop between a rich console and a NavigationController.

    The host owns nothing but the keymap: it reads one key at a time,
    dispatches it, and redraws from `current_view()`.
    """

    def __init__(
        self,
        console: Console,
        controller: NavigationController,
        keymap: dict[str, str] | None = None,
        read_key: Callable[[], str] | None = None,
        choose: Callable[[tuple[str, ...]], int | None] | None = None,
        fixed_size: tuple[int, int] | None = None,
    ):
        """Initialize the host.

        Args:
            console: Rich Console to draw on
            controller: Controller that owns the page stack
            keymap: Key -> action bindings (defaults to DEFAULT_KEYMAP)
            read_key: Blocking key reader (defaults to a prompt_toolkit prompt)
            choose: Breadcrumb picker used by the jump action
            fixed_size: (width, height) that overrides the console size
        """
        self.console = console
        self.controller = controller
        self.keymap = dict(keymap or DEFAULT_KEYMAP)
        self.read_key = read_key or key_reader(self.keymap)
        self.choose = choose or choose_level
        self.fixed_size = fixed_size

    def run(self) -> None:
        """Draw and dispatch until the controller asks to quit."""
        while not self.controller.quit_requested:
            self.sync_size()
            self.render()
            try:
                key = self.read_key()
            except (KeyboardInterrupt, EOFError):
                self.controller.handle_input(NavigationEvent.QUIT)
                break
            self.dispatch(key)
        self.console.print("\n[dim]👋 Goodbye![/]")

    def render(self) -> None:
        self.console.clear()
        render_view(
            self.console,
            self.controller.current_view(),
            self.keymap,
            self.controller.viewport_size,
        )

    def dispatch(self, key: str) -> FetchError | None:
        """Translate one key press into controller actions.

        Returns:
            The FetchError surfaced by the controller, if any
        """
        action = resolve(self.keymap, key)
        if action is None:
            logger.debug("Unbound key %r", key)
            return None
        if action == JUMP:
            return self.jump()
        return self.controller.handle_input(action)

    def jump(self) -> FetchError | None:
        """Back out to a breadcrumb picked from a menu."""
        trail = self.controller.current_view().trail
        if len(trail) < 2:
            return None
        depth = self.choose(trail)
        if depth is None:
            return None
        for _ in range(len(trail) - max(1, int(depth))):
            self.controller.handle_input(NavigationEvent.BACK)
        return None

    def sync_size(self) -> None:
        """Tell the controller about terminal resizes."""
        width, height = self.fixed_size or tuple(self.console.size)
        c = self.controller
        if (width, height) != (c.viewport_width, c.viewport_height):
            logger.debug("Viewport resized to %dx%d", width, height)
            c.resize(width, height)
