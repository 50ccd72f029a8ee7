"""Error kinds raised by the navigation engine."""
from __future__ import annotations


class NavigationError(Exception):
    """Base class for navigation engine errors."""


class FetchError(NavigationError):
    """A fetch strategy failed to produce the next page.

    Non-fatal: the controller returns it to the host as a value and leaves the
    page stack and cursor untouched, so re-issuing the action is a retry.
    """

    def __init__(self, message: str, *, strategy: str | None = None, arg: str = ""):
        self.strategy = strategy
        self.arg = arg
        self.reason = message
        where = strategy or "fetch"
        if arg:
            super().__init__(f"{where}({arg!r}): {message}")
        else:
            super().__init__(f"{where}: {message}")


class EmptyStackError(NavigationError, IndexError):
    """The page stack has no pages. Indicates a controller bug."""


class OutOfRangeError(NavigationError, IndexError):
    """A cursor or sub-page index is outside its bounds."""
