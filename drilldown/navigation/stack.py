"""Page stack: the path of pages visited by drilling down."""
from __future__ import annotations

from typing import Iterator

from ..errors import EmptyStackError
from .models import Page, Row


class PageStack:
    """Stack of visited pages with breadcrumbs.

    Follows the usual router model:
    - Push on select: drilling down pushes the fetched page
    - Pop on Back: returns to the previous page
    - Reset on Home: drops everything above the root page
    The root page is never popped, so the stack is never empty once built.
    """

    def __init__(self, root: Page | None = None):
        """Initialize, optionally with the root page.

        Args:
            root: First page of the stack
        """
        self._pages: list[Page] = []
        if root is not None:
            self.push(root)

    def push(self, page: Page) -> None:
        """Drill down by pushing a page onto the stack.

        Args:
            page: Page to make the new top

        Raises:
            TypeError: if `page` is not a Page
            OutOfRangeError: if the page's sub-page index is out of bounds
        """
        if not isinstance(page, Page):
            raise TypeError(f"expected Page, got {type(page).__name__}")
        page.validate()
        self._pages.append(page)

    def pop(self) -> tuple[Page | None, bool]:
        """Go back to the previous page.

        Returns:
            (popped page, True), or (None, False) if only the root remains
        """
        if len(self._pages) > 1:
            return self._pages.pop(), True
        return None, False

    def reset(self) -> int:
        """Drop every page above the root.

        Returns:
            Number of pages released
        """
        released = max(0, len(self._pages) - 1)
        del self._pages[1:]
        return released

    def top(self) -> Page:
        """Get the visible page.

        Raises:
            EmptyStackError: if the stack has no pages
        """
        if not self._pages:
            raise EmptyStackError("page stack is empty")
        return self._pages[-1]

    def root(self) -> Page:
        if not self._pages:
            raise EmptyStackError("page stack is empty")
        return self._pages[0]

    def replace_top(self, page: Page) -> None:
        """Swap the top page for an extended copy of itself."""
        if not isinstance(page, Page):
            raise TypeError(f"expected Page, got {type(page).__name__}")
        page.validate()
        self.top()
        self._pages[-1] = page

    def current_rows(self) -> tuple[Row, ...]:
        """Get the active row-list of the top page."""
        return self.top().rows

    def breadcrumbs(self, separator: str = " > ") -> str:
        """Generate a breadcrumb string from page titles.

        Returns:
            Breadcrumb path like "topics > topic 2 > partition 1"
        """
        return separator.join(page.title for page in self._pages)

    def depth(self) -> int:
        """Get the drill-down depth (number of pages in the stack)."""
        return len(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)
