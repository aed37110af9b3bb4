"""Forward-accumulating pager for lists that are only ever browsed in order.

Unlike ``BackwardPaginator`` this keeps every fetched item and serves pages as
local slices. Going back is free; going forward fetches one more window only
when the local items run out. Removals shrink the local list and the page
index is clamped to what is left.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from repo_pager.core.pagination.clamp import PageClamp
from repo_pager.core.pagination.walker import CursorWalker, Partition

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AccumulatedPager(Generic[T]):
    """Page through a partition by accumulating windows in fetch order.

    Example:
        pager = AccumulatedPager(walker)
        await pager.load_first()
        if pager.has_next_page:
            await pager.next_page()
        rows = pager.current_items()
    """

    def __init__(
        self,
        walker: CursorWalker[T],
        partition: Partition = Partition.ACTIVE,
        *,
        id_of: Callable[[T], str] = lambda item: item.id,  # type: ignore[attr-defined]
    ) -> None:
        self._walker = walker
        self._clamp = PageClamp(walker.page_size)
        self._id_of = id_of
        self.partition = partition
        self._items: list[T] = []
        self._end_cursor: str | None = None
        self._server_has_more = False
        self._loaded = False
        self.page = 1

    @property
    def page_size(self) -> int:
        return self._walker.page_size

    @property
    def page_count(self) -> int:
        """Pages covered by the items accumulated so far."""
        return self._clamp.last_page_for(len(self._items))

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self._server_has_more or self.page < self.page_count

    @property
    def show_pagination(self) -> bool:
        return bool(self.current_items()) and (self.has_next_page or self.has_previous_page)

    def current_items(self) -> tuple[T, ...]:
        start = (self.page - 1) * self.page_size
        return tuple(self._items[start : start + self.page_size])

    async def load_first(self) -> tuple[T, ...]:
        """Reset and fetch the first window."""
        window = await self._walker.fetch(self.partition)
        self._items = list(window.items)
        self._end_cursor = window.end_cursor
        self._server_has_more = not window.is_terminal
        self._loaded = True
        self.page = 1
        return self.current_items()

    async def next_page(self) -> tuple[T, ...]:
        """Advance one page, fetching another window only if needed.

        The index only moves when the new page actually has items.
        """
        if not self._loaded:
            return await self.load_first()
        if self.page < self.page_count:
            self.page += 1
            return self.current_items()
        if not self._server_has_more:
            return self.current_items()

        window = await self._walker.fetch(self.partition, after=self._end_cursor)
        self._end_cursor = window.end_cursor
        self._server_has_more = not window.is_terminal
        known = {self._id_of(item) for item in self._items}
        self._items.extend(item for item in window.items if self._id_of(item) not in known)
        if self.page < self.page_count:
            self.page += 1
        return self.current_items()

    def previous_page(self) -> tuple[T, ...]:
        if self.page > 1:
            self.page -= 1
        return self.current_items()

    def remove(self, item_id: str) -> T | None:
        """Drop an item locally and clamp the page index to what remains."""
        for index, item in enumerate(self._items):
            if self._id_of(item) == item_id:
                del self._items[index]
                break
        else:
            return None

        clamped = self._clamp.clamp_to_count(self.page, len(self._items))
        if clamped != self.page:
            logger.debug("Clamped page %d to %d after removal", self.page, clamped)
            self.page = clamped
        return item


__all__ = ["AccumulatedPager"]
