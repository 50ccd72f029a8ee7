"""Fetch strategies: how each level of the hierarchy produces its page.

The shipped levels form a mock chain over a message broker:

    topics -> partitions -> messages -> message

Each strategy knows the strategy of the level below it, so the traversal
graph can be inspected (see `chain_levels`) without running the UI.
"""
from __future__ import annotations

import json
import logging
from typing import Callable, Sequence

from ..errors import FetchError
from .models import Page, Row

logger = logging.getLogger(__name__)

FetchFn = Callable[[int, str], Page]

MOCK_NAMES = ("fred", "craig", "laura")
MOCK_PARTITIONS = 3


class FetchStrategy:
    """One level of the hierarchy.

    Subclasses implement `advance()`, which turns the key of the selected row
    into the page for this level. It must not mutate shared state and signals
    failure by raising FetchError.
    """

    name = "fetch"

    def __init__(self, next_strategy: FetchStrategy | None = None):
        self.next_strategy = next_strategy

    def advance(self, viewport_size: int, arg: str) -> Page:
        raise NotImplementedError

    def next_level(self) -> FetchStrategy | None:
        return self.next_strategy

    def __call__(self, viewport_size: int, arg: str) -> Page:
        return self.advance(viewport_size, arg)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class FunctionStrategy(FetchStrategy):
    """Adapt a plain `(viewport_size, arg) -> Page` function."""

    def __init__(
        self,
        fn: FetchFn,
        name: str | None = None,
        next_strategy: FetchStrategy | None = None,
    ):
        super().__init__(next_strategy)
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "fetch")

    def advance(self, viewport_size: int, arg: str) -> Page:
        return self.fn(viewport_size, arg)


def as_strategy(fetch: FetchStrategy | FetchFn) -> FetchStrategy:
    """Return `fetch` as a strategy, wrapping plain callables."""
    if isinstance(fetch, FetchStrategy):
        return fetch
    if callable(fetch):
        return FunctionStrategy(fetch)
    raise TypeError(f"expected a fetch strategy or callable, got {type(fetch).__name__}")


def chain_levels(root: FetchStrategy) -> list[str]:
    """Names of the levels reachable from `root`, in drill-down order."""
    names: list[str] = []
    seen: set[int] = set()
    current: FetchStrategy | None = root
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        names.append(current.name)
        current = current.next_level()
    return names


# ═══════════════════════════════════════════════════════════════════════════════
# MOCK BROKER LEVELS
# ═══════════════════════════════════════════════════════════════════════════════

def _offset_key(offset: int) -> str:
    return json.dumps({"offset": offset})


def _payload(offset: int) -> str:
    return json.dumps({"name": MOCK_NAMES[offset % len(MOCK_NAMES)]})


def _parse_offset(arg: str, strategy: str) -> int:
    try:
        offset = json.loads(arg)["offset"]
    except (ValueError, TypeError, KeyError) as e:
        raise FetchError(f"not an offset key ({e})", strategy=strategy, arg=arg) from e
    if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
        raise FetchError("offset must be a non-negative integer", strategy=strategy, arg=arg)
    return offset


def _chunk(rows: Sequence[Row], size: int) -> list[tuple[Row, ...]]:
    size = max(1, size)
    return [tuple(rows[i:i + size]) for i in range(0, len(rows), size)] or [()]


class TopicsStrategy(FetchStrategy):
    """Root level: one row per topic."""

    name = "topics"

    def __init__(self, next_strategy: FetchStrategy | None = None, topic_count: int | None = None):
        super().__init__(next_strategy)
        self.topic_count = topic_count

    def advance(self, viewport_size: int, arg: str) -> Page:
        count = self.topic_count if self.topic_count is not None else viewport_size
        rows = [Row.plain(f"topic {i}") for i in range(max(0, count))]
        return Page(
            title="topics",
            sub_pages=_chunk(rows, viewport_size),
            on_advance=self.next_strategy,
        )


class PartitionsStrategy(FetchStrategy):
    """Partitions of the selected topic."""

    name = "partitions"

    def __init__(self, next_strategy: FetchStrategy | None = None, partitions: int = MOCK_PARTITIONS):
        super().__init__(next_strategy)
        self.partitions = partitions

    def advance(self, viewport_size: int, arg: str) -> Page:
        if not arg:
            raise FetchError("no topic selected", strategy=self.name, arg=arg)
        rows = [Row.plain(f"partition {i}") for i in range(1, self.partitions + 1)]
        return Page.single(arg, rows, on_advance=self.next_strategy)


class MessagesStrategy(FetchStrategy):
    """Messages of the selected partition, one viewport per row-list.

    The log holds `message_count` messages. When it is longer than the
    viewport the first screenful is returned and the rest is reachable by
    paging, which fetches the neighbouring screenful by offset.
    """

    name = "messages"

    def __init__(self, next_strategy: FetchStrategy | None = None, message_count: int = len(MOCK_NAMES)):
        super().__init__(next_strategy)
        self.message_count = message_count
        self.forward = _MessageWindow(self, direction=1)
        self.backward = _MessageWindow(self, direction=-1)

    def window(self, start: int, size: int) -> tuple[Row, ...]:
        stop = min(self.message_count, start + max(0, size))
        return tuple(Row(key=_offset_key(i), display=_payload(i)) for i in range(max(0, start), stop))

    def page(self, title: str, rows: tuple[Row, ...]) -> Page:
        return Page.single(
            title,
            rows,
            on_advance=self.next_strategy,
            on_forward=self.forward,
            on_back=self.backward,
        )

    def advance(self, viewport_size: int, arg: str) -> Page:
        if not arg:
            raise FetchError("no partition selected", strategy=self.name, arg=arg)
        return self.page(arg, self.window(0, max(1, viewport_size)))


class _MessageWindow(FetchStrategy):
    """Screenful of messages after (or before) a given offset key."""

    def __init__(self, messages: MessagesStrategy, direction: int):
        super().__init__(None)
        self.messages = messages
        self.direction = direction
        self.name = "messages.forward" if direction > 0 else "messages.back"

    def advance(self, viewport_size: int, arg: str) -> Page:
        offset = _parse_offset(arg, self.name)
        size = max(1, viewport_size)
        if self.direction > 0:
            rows = self.messages.window(offset + 1, size)
        else:
            rows = self.messages.window(max(0, offset - size), min(size, offset))
        logger.debug("%s from offset %d: %d rows", self.name, offset, len(rows))
        return Page.single(self.name, rows)


class MessageStrategy(FetchStrategy):
    """Leaf level: the payload stored at the selected offset."""

    name = "message"

    def __init__(self, message_count: int = len(MOCK_NAMES)):
        super().__init__(None)
        self.message_count = message_count

    def advance(self, viewport_size: int, arg: str) -> Page:
        offset = _parse_offset(arg, self.name)
        if offset >= self.message_count:
            raise FetchError(
                f"offset {offset} is past the end of the log ({self.message_count} messages)",
                strategy=self.name,
                arg=arg,
            )
        return Page.single(arg, [Row(key=_offset_key(offset), display=_payload(offset))])


def build_topic_chain(
    topic_count: int | None = None,
    partitions: int = MOCK_PARTITIONS,
    message_count: int = len(MOCK_NAMES),
) -> TopicsStrategy:
    """Wire the mock levels together and return the root strategy."""
    message = MessageStrategy(message_count=message_count)
    messages = MessagesStrategy(message, message_count=message_count)
    partition_level = PartitionsStrategy(messages, partitions=partitions)
    return TopicsStrategy(partition_level, topic_count=topic_count)
