"""Exhaustive preloading of a whole partition into a sorted in-memory list."""

from __future__ import annotations

import bisect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from repo_pager.core.pagination.walker import CursorWalker, Partition

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PreloadSnapshot(Generic[T]):
    """Immutable view of the accumulator.

    ``is_fully_loaded=False`` means "unknown", never "empty": lookups against
    a partial snapshot must not conclude that an item does not exist.
    """

    items: tuple[T, ...]
    is_fully_loaded: bool

    def __len__(self) -> int:
        return len(self.items)


class FullCollectionPreloader(Generic[T]):
    """Walk one partition to its end, keeping every item in sorted order.

    The walk is strictly sequential with a single request in flight, so
    windows can never arrive out of order. Each item is placed by sorted
    insertion as its window arrives, so the accumulator is ordered at every
    point of the load. A transport failure leaves the partial accumulator in
    place with ``is_fully_loaded`` still False; ``load()`` can then be called
    again and starts over from the first window.

    Example:
        preloader = FullCollectionPreloader(walker, sort_key=lambda r: r.display_name.casefold())
        await preloader.load()
        assert preloader.is_fully_loaded
    """

    def __init__(
        self,
        walker: CursorWalker[T],
        *,
        sort_key: Callable[[T], Any],
        partition: Partition = Partition.INACTIVE,
        id_of: Callable[[T], str] = lambda item: item.id,  # type: ignore[attr-defined]
    ) -> None:
        self._walker = walker
        self._sort_key = sort_key
        self._id_of = id_of
        self.partition = partition
        self._items: list[T] = []
        self._ids: set[str] = set()
        self._removed_during_load: set[str] = set()
        self._loading = False
        self.is_fully_loaded = False
        self.fetch_count = 0

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    @property
    def is_loading(self) -> bool:
        return self._loading

    def snapshot(self) -> PreloadSnapshot[T]:
        return PreloadSnapshot(items=tuple(self._items), is_fully_loaded=self.is_fully_loaded)

    async def load(self) -> PreloadSnapshot[T]:
        """Walk the partition from scratch until a terminal window.

        Returns:
            Snapshot of the complete, sorted accumulator.

        Raises:
            TransportError: If a fetch fails; the accumulator keeps what was
                received so far and stays not-fully-loaded.
        """
        self._items.clear()
        self._ids.clear()
        self._removed_during_load.clear()
        self.is_fully_loaded = False
        self.fetch_count = 0
        self._loading = True

        cursor: str | None = None
        try:
            while True:
                window = await self._walker.fetch(self.partition, after=cursor)
                self.fetch_count += 1
                for item in window.items:
                    if self._id_of(item) in self._removed_during_load:
                        continue
                    self._insert(item)

                if window.is_terminal:
                    self.is_fully_loaded = True
                    break
                cursor = window.end_cursor
        except Exception:
            logger.warning(
                "Preload of %s partition aborted after %d fetches",
                self.partition.value,
                self.fetch_count,
                extra={"items_loaded": len(self._items)},
            )
            raise
        finally:
            self._loading = False
            self._removed_during_load.clear()

        logger.info(
            "Preloaded %d %s items in %d fetches",
            len(self._items),
            self.partition.value,
            self.fetch_count,
        )
        return self.snapshot()

    def find(self, item_id: str) -> T | None:
        """Return the accumulated item with ``item_id``, if present."""
        if item_id not in self._ids:
            return None
        return next(item for item in self._items if self._id_of(item) == item_id)

    def add(self, item: T) -> bool:
        """Insert ``item`` in sorted position.

        Returns:
            False when an item with the same id is already present.
        """
        self._removed_during_load.discard(self._id_of(item))
        return self._insert(item)

    def remove(self, item_id: str) -> T | None:
        """Remove and return the item with ``item_id``.

        The order of the remaining items is preserved. While a load is in
        flight the id is also remembered so later windows of that load do not
        bring the item back.
        """
        if self._loading:
            self._removed_during_load.add(item_id)
        if item_id not in self._ids:
            return None
        for index, item in enumerate(self._items):
            if self._id_of(item) == item_id:
                del self._items[index]
                self._ids.discard(item_id)
                return item
        return None

    def _insert(self, item: T) -> bool:
        item_id = self._id_of(item)
        if item_id in self._ids:
            return False
        bisect.insort(self._items, item, key=self._sort_key)
        self._ids.add(item_id)
        return True


__all__ = ["FullCollectionPreloader", "PreloadSnapshot"]
