"""Page-stack navigation engine.

Pages are fetched lazily one level at a time; the stack of visited pages is
the path from the root to the screen the user is looking at.
"""
from .controller import NavigationController, NavigationEvent, PendingFetch, View, initialize
from .fetchers import FetchStrategy, FunctionStrategy, build_topic_chain, chain_levels
from .models import Page, Row, RowView
from .stack import PageStack

__all__ = [
    "FetchStrategy",
    "FunctionStrategy",
    "NavigationController",
    "NavigationEvent",
    "Page",
    "PageStack",
    "PendingFetch",
    "Row",
    "RowView",
    "View",
    "build_topic_chain",
    "chain_levels",
    "initialize",
]
