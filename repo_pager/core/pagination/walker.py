"""Single forward fetch step over a cursor-paginated collection."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from enum import Enum
from typing import Generic, Protocol, TypeVar, runtime_checkable

from repo_pager.core.exceptions import AppException, TransportError
from repo_pager.core.pagination.schemas import PageWindow

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Partition(str, Enum):
    """The two disjoint item sets tracked per owning provider."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    @property
    def is_active(self) -> bool:
        return self is Partition.ACTIVE

    @property
    def opposite(self) -> Partition:
        return Partition.INACTIVE if self is Partition.ACTIVE else Partition.ACTIVE


@runtime_checkable
class CollectionSource(Protocol[T_co]):
    """Protocol for the remote collection query API.

    Implementations talk to the server (or an in-memory stand-in) and return
    one window per call. They should raise ``TransportError`` for remote
    failures; anything else escaping them is wrapped by the walker.
    """

    async def list_repositories(
        self,
        owner_ids: Sequence[str],
        partition: Partition,
        first: int,
        after: str | None = None,
    ) -> PageWindow[T_co]:
        """Fetch up to ``first`` items of ``partition`` after ``after``."""
        ...


class CursorWalker(Generic[T]):
    """One forward step over the remote collection API.

    This is the only component that talks to the collection source. Every
    higher component is built from sequenced calls to ``fetch``.

    Example:
        walker = CursorWalker(client, owner_ids=["provider-1"], page_size=20)
        first = await walker.fetch(Partition.ACTIVE)
        if not first.is_terminal:
            second = await walker.fetch(Partition.ACTIVE, after=first.end_cursor)
    """

    def __init__(
        self,
        source: CollectionSource[T],
        *,
        owner_ids: Sequence[str],
        page_size: int,
        timeout: float | None = None,
    ) -> None:
        """Initialize the walker.

        Args:
            source: Remote collection API.
            owner_ids: Owning provider ids passed through on every fetch.
            page_size: Page size ``P``; windows never exceed it.
            timeout: Per-fetch timeout in seconds, or None for no limit.
        """
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._source = source
        self.owner_ids = tuple(owner_ids)
        self.page_size = page_size
        self.timeout = timeout
        self.fetch_count = 0

    async def fetch(self, partition: Partition, after: str | None = None) -> PageWindow[T]:
        """Fetch the window of ``partition`` that follows ``after``.

        Args:
            partition: Which partition to list.
            after: Continuation token from the previous window, None for the start.

        Returns:
            The fetched window, normalised so that a missing ``end_cursor``
            is terminal.

        Raises:
            TransportError: If the remote call fails, times out or returns
                more than ``page_size`` items.
        """
        self.fetch_count += 1
        start = time.perf_counter()
        try:
            async with asyncio.timeout(self.timeout):
                window = await self._source.list_repositories(
                    self.owner_ids,
                    partition,
                    self.page_size,
                    after,
                )
        except TimeoutError as e:
            logger.warning(
                "Cursor fetch timed out",
                extra={"partition": partition.value, "after": after, "timeout": self.timeout},
            )
            raise TransportError(
                detail=f"Timed out after {self.timeout}s listing {partition.value} repositories",
                extra={"partition": partition.value, "after": after},
            ) from e
        except AppException:
            raise
        except Exception as e:
            logger.exception(
                "Cursor fetch failed",
                extra={"partition": partition.value, "after": after},
            )
            raise TransportError(
                detail=f"Failed to list {partition.value} repositories: {e}",
                extra={"partition": partition.value, "after": after},
            ) from e

        if len(window.items) > self.page_size:
            raise TransportError(
                detail=(
                    f"Server returned {len(window.items)} items for page size {self.page_size}"
                ),
                type="protocol-violation",
                extra={"partition": partition.value, "after": after},
            )

        if window.has_next_page and not window.end_cursor:
            logger.debug(
                "Window reports more pages without a cursor; treating as terminal",
                extra={"partition": partition.value},
            )
            window = window.model_copy(update={"has_next_page": False})

        logger.debug(
            "Fetched %d %s items",
            len(window.items),
            partition.value,
            extra={
                "after": after,
                "has_next_page": window.has_next_page,
                "duration_ms": (time.perf_counter() - start) * 1000,
            },
        )
        return window


__all__ = ["CollectionSource", "CursorWalker", "Partition"]
