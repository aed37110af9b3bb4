"""Random page access over a forward-only cursor API.

The remote API offers neither a backward cursor nor page-number addressing,
and cursors can go stale once items move between partitions. Page ``N`` is
therefore always rebuilt by walking forward from the very first window. This
costs ``N`` fetches per navigation and needs no cursor cache.
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from repo_pager.core.exceptions import ValidationException
from repo_pager.core.pagination.schemas import KnownExtent, PageWindow, ResolvedPage
from repo_pager.core.pagination.walker import CursorWalker, Partition
from repo_pager.infra.logging import get_lazy_logger

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

T = TypeVar("T")


class BackwardPaginator(Generic[T]):
    """Reconstruct any page index by re-walking forward from the start.

    Requesting a page past the end yields the true last page (never an empty
    window); the returned ``ResolvedPage.index`` says which page that is.
    A transport failure anywhere in the walk propagates and the partial walk
    is discarded.

    Example:
        paginator = BackwardPaginator(walker, Partition.ACTIVE)
        page = await paginator.fetch_page(3)
        print(page.index, [repo.display_name for repo in page.window.items])
    """

    def __init__(self, walker: CursorWalker[T], partition: Partition = Partition.ACTIVE) -> None:
        self._walker = walker
        self.partition = partition
        self.last_extent: KnownExtent | None = None

    @property
    def page_size(self) -> int:
        return self._walker.page_size

    async def fetch_page(self, target_page: int) -> ResolvedPage[T]:
        """Walk forward to ``target_page`` and return that window.

        Args:
            target_page: 1-based page index.

        Returns:
            The resolved page; its index is lower than requested when the
            collection has fewer pages.

        Raises:
            ValidationException: If ``target_page`` is below 1.
            TransportError: If any fetch of the walk fails.
        """
        if target_page < 1:
            raise ValidationException(
                detail=f"Page index must be >= 1, got {target_page}",
                extra={"target_page": target_page},
            )

        remaining = target_page
        cursor: str | None = None
        previous: PageWindow[T] | None = None
        items_seen = 0
        fetches = 0

        while True:
            window = await self._walker.fetch(self.partition, after=cursor)
            fetches += 1

            if not window.items and previous is not None:
                # A followed cursor led to nothing: the previous window was the last page.
                self.last_extent = KnownExtent(
                    items_seen=items_seen,
                    exhausted=True,
                    page_size=self.page_size,
                )
                return self._resolved(fetches - 1, previous, target_page, fetches)

            items_seen += len(window.items)

            if remaining - 1 > 0 and not window.is_terminal:
                remaining -= 1
                cursor = window.end_cursor
                previous = window
                continue

            self.last_extent = KnownExtent(
                items_seen=items_seen,
                exhausted=window.is_terminal,
                page_size=self.page_size,
            )
            return self._resolved(fetches, window, target_page, fetches)

    def _resolved(
        self,
        index: int,
        window: PageWindow[T],
        requested: int,
        fetches: int,
    ) -> ResolvedPage[T]:
        if index != requested:
            logger.info(
                "Requested page %d beyond the end; resolved to page %d",
                requested,
                index,
                extra={"partition": self.partition.value},
            )
        lazy_logger.debug(
            lambda: f"Resolved {self.partition.value} page {index} with {len(window.items)} items"
            f" after {fetches} fetches"
        )
        return ResolvedPage(index=index, window=window, requested=requested, fetches=fetches)


__all__ = ["BackwardPaginator"]
