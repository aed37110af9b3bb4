"""Pagination schemas for forward-only cursor APIs.

Two shapes are modelled here:

1. Relay Connection (wire format):
   - ``edges`` with ``node`` and ``cursor``
   - ``pageInfo`` with ``hasNextPage`` / ``endCursor``
   - camelCase aliases so GraphQL payloads validate directly

2. PageWindow (engine format):
   - one fetch step: items, ``end_cursor`` and ``has_next_page``
   - never longer than the page size it was requested with

``Connection.to_window()`` converts the former into the latter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


class PageInfo(BaseModel):
    """Pagination metadata following the GraphQL Relay specification.

    Attributes:
        has_previous_page: Whether there are items before the current page
        has_next_page: Whether there are items after the current page
        start_cursor: Cursor of the first item in this page
        end_cursor: Cursor of the last item in this page
    """

    has_previous_page: bool = Field(
        default=False,
        description="Whether previous items exist",
    )
    has_next_page: bool = Field(
        default=False,
        description="Whether more items exist",
    )
    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )

    model_config = _WIRE_CONFIG


class Edge(BaseModel, Generic[T]):
    """Edge wrapper for paginated items (Relay pattern).

    Attributes:
        node: The actual data item
        cursor: Cursor for this specific item
    """

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")

    model_config = _WIRE_CONFIG


class Connection(BaseModel, Generic[T]):
    """Relay connection as returned by the remote collection API.

    Usage:
        payload = response["data"]["integratedRepositories"]
        connection = Connection[IntegratedRepository].model_validate(payload)
        window = connection.to_window()

    Attributes:
        edges: List of Edge objects containing nodes and cursors
        page_info: Navigation metadata
    """

    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: PageInfo = Field(
        default_factory=PageInfo,
        description="Pagination metadata",
    )

    model_config = _WIRE_CONFIG

    @property
    def nodes(self) -> list[T]:
        """Get just the nodes without edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_window(self) -> PageWindow[T]:
        """Convert to the engine's single-step page representation."""
        return PageWindow[T](
            items=tuple(self.nodes),
            end_cursor=self.page_info.end_cursor,
            has_next_page=self.page_info.has_next_page,
        )


class PageWindow(BaseModel, Generic[T]):
    """One forward fetch step over a cursor API.

    ``has_next_page=False`` or a missing ``end_cursor`` is the terminal
    signal for a walk.

    Attributes:
        items: Items in server order
        end_cursor: Continuation token positioned after the last item
        has_next_page: Whether the server reports more items
    """

    items: tuple[T, ...] = Field(
        default=(),
        description="Items in server order",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Continuation token for the next fetch",
    )
    has_next_page: bool = Field(
        default=False,
        description="Whether more items exist after this window",
    )

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_terminal(self) -> bool:
        """Whether a walk must stop after this window."""
        return not self.has_next_page or not self.end_cursor

    def without(self, item_ids: set[str]) -> PageWindow[T]:
        """Return a copy with the given item ids filtered out.

        Items are expected to expose an ``id`` attribute.
        """
        kept = tuple(item for item in self.items if getattr(item, "id", None) not in item_ids)
        return self.model_copy(update={"items": kept})

    @classmethod
    def empty(cls) -> PageWindow[T]:
        """Terminal window with no items."""
        return cls(items=(), end_cursor=None, has_next_page=False)


@dataclass(frozen=True, slots=True)
class KnownExtent:
    """Lower bound on a collection's size learned from a forward walk.

    Attributes:
        items_seen: Items counted over every window of the walk
        exhausted: Whether the walk reached the terminal window, which makes
            ``items_seen`` exact
        page_size: Page size the walk used
    """

    items_seen: int
    exhausted: bool
    page_size: int

    @property
    def last_page(self) -> int:
        """Last page index implied by the known count (never below 1)."""
        return max(1, math.ceil(self.items_seen / self.page_size))


@dataclass(frozen=True, slots=True)
class ResolvedPage(Generic[T]):
    """A page window together with the 1-based index it really represents.

    ``index`` differs from the requested page when the walk ran out of pages
    before reaching it.
    """

    index: int
    window: PageWindow[T]
    requested: int
    fetches: int


__all__ = [
    "Connection",
    "Edge",
    "KnownExtent",
    "PageInfo",
    "PageWindow",
    "ResolvedPage",
]
