"""Rows and pages: the data a drill-down screen is built from."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Sequence

from ..errors import OutOfRangeError

if TYPE_CHECKING:
    from .fetchers import FetchStrategy


@dataclass(frozen=True)
class Row:
    """One selectable line of a page.

    `key` is handed to the next fetch when the row is selected; `display` is
    what gets rendered.
    """

    key: str
    display: str

    @classmethod
    def plain(cls, text: str) -> Row:
        """Row whose key and display text are the same string."""
        return cls(key=text, display=text)

    def view(self) -> RowView:
        return RowView(display=self.display)


@dataclass(frozen=True)
class RowView:
    """What the host is allowed to see of a row."""

    display: str


@dataclass(frozen=True, eq=False)
class Page:
    """One screen of content.

    A page holds one or more row-lists ("sub-pages") of which exactly one is
    active. Pages are frozen except for `current_sub_page`, which only
    `move_to_sub_page()` changes. Compare pages by identity.
    """

    title: str
    sub_pages: Sequence[Sequence[Row]] = field(default_factory=lambda: ((),))
    current_sub_page: int = 0
    on_advance: FetchStrategy | None = None
    on_forward: FetchStrategy | None = None
    on_back: FetchStrategy | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sub_pages", tuple(tuple(rows) for rows in self.sub_pages))
        if not self.sub_pages:
            raise OutOfRangeError(f"page {self.title!r} has no row-lists")
        self.validate()

    @classmethod
    def single(
        cls,
        title: str,
        rows: Iterable[Row],
        *,
        on_advance: FetchStrategy | None = None,
        on_forward: FetchStrategy | None = None,
        on_back: FetchStrategy | None = None,
    ) -> Page:
        """Build a page with a single row-list."""
        return cls(
            title=title,
            sub_pages=(tuple(rows),),
            on_advance=on_advance,
            on_forward=on_forward,
            on_back=on_back,
        )

    def validate(self) -> None:
        """Raise OutOfRangeError unless the sub-page index is in bounds."""
        if not 0 <= self.current_sub_page < len(self.sub_pages):
            raise OutOfRangeError(
                f"sub-page {self.current_sub_page} out of range for page "
                f"{self.title!r} ({len(self.sub_pages)} row-lists)"
            )

    def move_to_sub_page(self, index: int) -> None:
        if not 0 <= index < len(self.sub_pages):
            raise OutOfRangeError(
                f"sub-page {index} out of range for page {self.title!r} "
                f"({len(self.sub_pages)} row-lists)"
            )
        object.__setattr__(self, "current_sub_page", index)

    @property
    def rows(self) -> tuple[Row, ...]:
        return self.sub_pages[self.current_sub_page]

    @property
    def sub_page_count(self) -> int:
        return len(self.sub_pages)

    @property
    def is_leaf(self) -> bool:
        return self.on_advance is None
