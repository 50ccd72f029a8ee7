"""Navigation controller: turns user actions into page-stack changes."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from ..errors import FetchError
from .fetchers import FetchFn, FetchStrategy, as_strategy
from .models import Page, RowView
from .stack import PageStack

logger = logging.getLogger(__name__)

# Screen lines reserved around the body: a title line plus a rule above it,
# and a status line plus a rule below it.
HEADER_LINES = 2
FOOTER_LINES = 2


def body_size(viewport_height: int) -> int:
    """Number of rows the body region can show for a given terminal height."""
    return max(1, int(viewport_height) - HEADER_LINES - FOOTER_LINES)


class NavigationEvent(str, Enum):
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    SELECT = "select"
    BACK = "back"
    HOME = "home"
    NEXT_SUB_PAGE = "next_sub_page"
    PREV_SUB_PAGE = "prev_sub_page"
    QUIT = "quit"


@dataclass(frozen=True)
class View:
    """Snapshot of what the host should draw."""

    header: str
    rows: tuple[RowView, ...]
    cursor: int
    breadcrumbs: str = ""
    trail: tuple[str, ...] = ()
    depth: int = 1
    sub_page: int = 0
    sub_page_count: int = 1
    status: str = ""


def fetch_page(strategy: FetchStrategy, viewport_size: int, arg: str) -> Page:
    """Run one fetch, normalising every failure into FetchError."""
    try:
        page = strategy.advance(viewport_size, arg)
    except FetchError:
        raise
    except Exception as e:
        raise FetchError(str(e) or type(e).__name__, strategy=strategy.name, arg=arg) from e
    if not isinstance(page, Page):
        raise FetchError(
            f"returned {type(page).__name__}, expected Page",
            strategy=strategy.name,
            arg=arg,
        )
    return page


@dataclass
class PendingFetch:
    """A select whose fetch runs outside the event loop.

    `run()` only calls the strategy; the result goes back through
    `NavigationController.complete()`, which drops it if the user moved on.
    """

    strategy: FetchStrategy
    arg: str
    viewport_size: int
    generation: int

    def run(self) -> Page | FetchError:
        try:
            return fetch_page(self.strategy, self.viewport_size, self.arg)
        except FetchError as e:
            return e


class NavigationController:
    """Owns the page stack and the cursor.

    The host feeds one event at a time into `handle_input()` and draws
    `current_view()` afterwards. Fetch failures come back as values and leave
    the stack and cursor as they were.
    """

    def __init__(
        self,
        viewport_width: int,
        viewport_height: int,
        root_fetch: FetchStrategy | FetchFn,
    ):
        """Fetch the root page and build the stack.

        Raises:
            FetchError: if the root page cannot be fetched
        """
        self.viewport_width = int(viewport_width)
        self.viewport_height = int(viewport_height)
        self.root_strategy = as_strategy(root_fetch)
        self.cursor = 0
        self.status = ""
        self.last_error: FetchError | None = None
        self.quit_requested = False
        self._generation = 0

        root = fetch_page(self.root_strategy, self.viewport_size, "")
        self.stack = PageStack(root)
        logger.info(
            "Navigation ready (root=%s, viewport=%dx%d, rows=%d)",
            self.root_strategy.name,
            self.viewport_width,
            self.viewport_height,
            len(root.rows),
        )

        self._handlers: dict[NavigationEvent, Callable[[], None]] = {
            NavigationEvent.MOVE_DOWN: self.move_down,
            NavigationEvent.MOVE_UP: self.move_up,
            NavigationEvent.SELECT: self.select,
            NavigationEvent.BACK: self.back,
            NavigationEvent.HOME: self.home,
            NavigationEvent.NEXT_SUB_PAGE: self.next_sub_page,
            NavigationEvent.PREV_SUB_PAGE: self.prev_sub_page,
            NavigationEvent.QUIT: self.quit,
        }

    @classmethod
    def initialize(
        cls,
        viewport_width: int,
        viewport_height: int,
        root_fetch: FetchStrategy | FetchFn,
    ) -> NavigationController:
        return cls(viewport_width, viewport_height, root_fetch)

    @property
    def viewport_size(self) -> int:
        return body_size(self.viewport_height)

    def resize(self, viewport_width: int, viewport_height: int) -> None:
        """Record a new terminal size; later fetches see the new body size."""
        self.viewport_width = int(viewport_width)
        self.viewport_height = int(viewport_height)

    # ── dispatch ────────────────────────────────────────────────────────────

    def handle_input(self, event: NavigationEvent | str) -> FetchError | None:
        """Run one navigation action to completion.

        Args:
            event: NavigationEvent or its string value

        Returns:
            The FetchError if a fetch failed, otherwise None

        Raises:
            ValueError: for an unknown event
        """
        try:
            event = NavigationEvent(event)
        except ValueError:
            raise ValueError(f"unknown navigation event: {event!r}") from None

        logger.debug("event=%s depth=%d cursor=%d", event.value, self.stack.depth(), self.cursor)
        self.status = ""
        try:
            self._handlers[event]()
        except FetchError as e:
            self._record_failure(e)
            return e
        return None

    def current_view(self) -> View:
        page = self.stack.top()
        return View(
            header=page.title,
            rows=tuple(row.view() for row in page.rows),
            cursor=self.cursor,
            breadcrumbs=self.stack.breadcrumbs(),
            trail=tuple(p.title for p in self.stack),
            depth=self.stack.depth(),
            sub_page=page.current_sub_page,
            sub_page_count=page.sub_page_count,
            status=self.status,
        )

    # ── actions ─────────────────────────────────────────────────────────────

    def move_down(self) -> None:
        last = len(self.stack.current_rows()) - 1
        self.cursor = max(0, min(self.cursor + 1, last))

    def move_up(self) -> None:
        self.cursor = max(self.cursor - 1, 0)

    def select(self) -> None:
        """Drill into the row under the cursor.

        Raises:
            FetchError: if the next level cannot be fetched
        """
        target = self._selection()
        if target is None:
            return
        strategy, arg = target
        page = fetch_page(strategy, self.viewport_size, arg)
        self._push(page)

    def back(self) -> None:
        popped, ok = self.stack.pop()
        self._generation += 1
        if ok:
            logger.debug("Back from %r", popped.title)
            self.cursor = 0

    def home(self) -> None:
        released = self.stack.reset()
        self._generation += 1
        if released:
            logger.debug("Home: released %d pages", released)
            self.cursor = 0

    def quit(self) -> None:
        self._generation += 1
        self.quit_requested = True

    def next_sub_page(self) -> None:
        """Show the next row-list, fetching one if the page can grow."""
        page = self.stack.top()
        if page.current_sub_page + 1 < page.sub_page_count:
            page.move_to_sub_page(page.current_sub_page + 1)
            self.cursor = 0
            return
        if page.on_forward is None or not page.rows:
            return
        fetched = fetch_page(page.on_forward, self.viewport_size, page.rows[-1].key)
        extra = tuple(rows for rows in fetched.sub_pages if rows)
        if not extra:
            return
        self.stack.replace_top(
            replace(page, sub_pages=page.sub_pages + extra, current_sub_page=page.sub_page_count)
        )
        self.cursor = 0

    def prev_sub_page(self) -> None:
        """Show the previous row-list, fetching one if the page can grow."""
        page = self.stack.top()
        if page.current_sub_page > 0:
            page.move_to_sub_page(page.current_sub_page - 1)
            self.cursor = 0
            return
        if page.on_back is None or not page.rows:
            return
        fetched = fetch_page(page.on_back, self.viewport_size, page.rows[0].key)
        extra = tuple(rows for rows in fetched.sub_pages if rows)
        if not extra:
            return
        self.stack.replace_top(
            replace(page, sub_pages=extra + page.sub_pages, current_sub_page=len(extra) - 1)
        )
        self.cursor = 0

    # ── deferred select ─────────────────────────────────────────────────────

    def begin_select(self) -> PendingFetch | None:
        """Capture the current selection without fetching it.

        Returns:
            A PendingFetch to run elsewhere, or None if Select would be a no-op
        """
        target = self._selection()
        if target is None:
            return None
        strategy, arg = target
        return PendingFetch(
            strategy=strategy,
            arg=arg,
            viewport_size=self.viewport_size,
            generation=self._generation,
        )

    def complete(self, pending: PendingFetch, result: Page | FetchError) -> bool:
        """Deliver the result of a PendingFetch back into the loop.

        Returns:
            False if the result was abandoned because Back, Home, Quit or
            another select happened after `begin_select()`; True otherwise
        """
        if pending.generation != self._generation:
            logger.debug("Abandoned stale fetch %s(%r)", pending.strategy.name, pending.arg)
            return False
        self.status = ""
        if isinstance(result, FetchError):
            self._record_failure(result)
            return True
        self._push(result)
        return True

    # ── internals ───────────────────────────────────────────────────────────

    def _selection(self) -> tuple[FetchStrategy, str] | None:
        page = self.stack.top()
        rows = page.rows
        if not rows or page.on_advance is None:
            return None
        if not 0 <= self.cursor < len(rows):
            self.cursor = max(0, min(self.cursor, len(rows) - 1))
        return page.on_advance, rows[self.cursor].key

    def _push(self, page: Page) -> None:
        self.stack.push(page)
        self._generation += 1
        self.cursor = 0
        logger.debug("Pushed %r (depth=%d)", page.title, self.stack.depth())

    def _record_failure(self, error: FetchError) -> None:
        logger.warning("Fetch failed: %s", error)
        self.last_error = error
        self.status = str(error)


def initialize(
    viewport_width: int,
    viewport_height: int,
    root_fetch: FetchStrategy | FetchFn,
) -> NavigationController:
    """Build a controller whose stack holds the root page.

    Raises:
        FetchError: if the root page cannot be fetched
    """
    return NavigationController(viewport_width, viewport_height, root_fetch)
