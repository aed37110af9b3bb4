"""Owned state of one provider's active-repository table.

``ActiveRepositoryView`` wires the pagination engine together for a single
provider: the displayed active page (rebuilt by ``BackwardPaginator``), the
fully preloaded inactive partition (``FullCollectionPreloader``) and the
optimistic moves between them (``OptimisticTransitionStager``).

Example:
    async with ActiveRepositoryView(client, provider_id="prov-1") as view:
        await view.next_page()
        await view.deactivate(view.current_page()[0].id)
        await view.settle()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Self

from repo_pager.core.exceptions import NotFoundException, TransportError, ValidationException
from repo_pager.core.pagination import (
    BackwardPaginator,
    CursorWalker,
    FullCollectionPreloader,
    PageClamp,
    PageWindow,
    Partition,
    PreloadSnapshot,
)
from repo_pager.core.settings import get_pagination_settings
from repo_pager.features.repositories.protocol import LoggingNotifier
from repo_pager.features.repositories.schemas import repository_sort_key
from repo_pager.features.repositories.staging import OptimisticTransitionStager, TransitionState
from repo_pager.infra.logging import remove_from_log_context, set_log_context

if TYPE_CHECKING:
    from types import TracebackType

    from repo_pager.core.pagination import KnownExtent
    from repo_pager.features.repositories.protocol import Notifier, RepositoryBackend
    from repo_pager.features.repositories.schemas import (
        IntegratedRepository,
        StagingEntry,
        TransitionOutcome,
    )
    from repo_pager.utils.debounce import Clock

logger = logging.getLogger(__name__)


class ActiveRepositoryView:
    """Active-repository table of one provider, with its inactive sidebar.

    The displayed page only changes through a completed page load; a failed
    load re-raises ``TransportError`` and leaves page and index untouched.
    Page loads are serialised, so a settle and a navigation never interleave.
    """

    def __init__(
        self,
        backend: RepositoryBackend,
        *,
        provider_id: str,
        page_size: int | None = None,
        settle_delay: float | None = None,
        fetch_timeout: float | None = None,
        clock: Clock | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        """Initialize the view; nothing is fetched until ``start()``.

        Args:
            backend: Collection and mutation API of the server.
            provider_id: Owning provider (integration) id.
            page_size: Items per page; defaults to ``PAGINATION_PAGE_SIZE``.
            settle_delay: Debounce window in seconds; defaults to
                ``PAGINATION_SETTLE_DELAY_MS``.
            fetch_timeout: Per-fetch timeout in seconds; defaults to
                ``PAGINATION_FETCH_TIMEOUT``.
            clock: Time source for the debounce timer.
            notifier: Receives mutation failure messages.
        """
        if not provider_id:
            raise ValidationException(detail="provider_id must not be empty")

        settings = get_pagination_settings()
        self.provider_id = provider_id
        self.page_size = page_size or settings.page_size
        walker = CursorWalker(
            backend,
            owner_ids=[provider_id],
            page_size=self.page_size,
            timeout=fetch_timeout if fetch_timeout is not None else settings.fetch_timeout,
        )
        self.walker = walker
        self._paginator = BackwardPaginator(walker, Partition.ACTIVE)
        self._preloader = FullCollectionPreloader(
            walker,
            sort_key=repository_sort_key,
            partition=Partition.INACTIVE,
        )
        self._clamp = PageClamp(self.page_size)
        self._stager = OptimisticTransitionStager(
            self,
            mutations=backend,
            inactive=self._preloader,
            notifier=notifier or LoggingNotifier(),
            page_size=self.page_size,
            settle_delay=settle_delay if settle_delay is not None else settings.settle_delay,
            clock=clock,
        )
        self._lock = asyncio.Lock()
        self._window: PageWindow[IntegratedRepository] = PageWindow.empty()
        self._page_index = 1
        self._preload_task: asyncio.Task[PreloadSnapshot[IntegratedRepository]] | None = None
        self._loads_in_flight = 0
        self._started = False

    async def __aenter__(self) -> Self:
        try:
            await self.start()
        except BaseException:
            await self.dispose()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    # Lifecycle

    async def start(self) -> None:
        """Load page 1 and start preloading the inactive partition."""
        set_log_context(provider_id=self.provider_id)
        self._started = True
        self._preload_task = asyncio.create_task(
            self._preloader.load(),
            name=f"preload-inactive-{self.provider_id}",
        )
        self._preload_task.add_done_callback(self._on_preload_done)
        await self.load_page(1)
        logger.info("Repository view started", extra={"page_size": self.page_size})

    async def dispose(self) -> None:
        """Cancel the pending settle and the preload, dropping all local state."""
        await self._stager.aclose()
        task = self._preload_task
        self._preload_task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._window = PageWindow.empty()
        self._page_index = 1
        if self._started:
            logger.info("Repository view disposed")
            remove_from_log_context("provider_id")
        self._started = False

    async def reload_inactive(self) -> PreloadSnapshot[IntegratedRepository]:
        """Walk the inactive partition again, e.g. after a failed preload."""
        await self._await_preload()
        return await self._preloader.load()

    # Read surface

    @property
    def page_index(self) -> int:
        return self._page_index

    def current_page(self) -> tuple[IntegratedRepository, ...]:
        return self._window.items

    @property
    def known_extent(self) -> KnownExtent | None:
        return self._paginator.last_extent

    @property
    def has_next_page(self) -> bool:
        return not self._window.is_terminal

    @property
    def has_previous_page(self) -> bool:
        return self._page_index > 1

    @property
    def show_pagination(self) -> bool:
        return self.has_previous_page or self.has_next_page

    @property
    def is_fetching(self) -> bool:
        return self._loads_in_flight > 0

    @property
    def transition_state(self) -> TransitionState:
        return self._stager.state

    def staged_entries(self) -> tuple[StagingEntry, ...]:
        return self._stager.entries

    def staged_items(self) -> tuple[IntegratedRepository, ...]:
        """Every repository moved since the last settle, newest first."""
        return self._stager.staged_items()

    def staged_activations(self) -> tuple[IntegratedRepository, ...]:
        """Repositories just moved into the active partition, newest first."""
        return self._stager.staged_items(Partition.ACTIVE)

    def inactive_items(self) -> PreloadSnapshot[IntegratedRepository]:
        """Sorted inactive partition; ``is_fully_loaded=False`` means still unknown."""
        return self._preloader.snapshot()

    def visible_rows(self) -> tuple[IntegratedRepository, ...]:
        """Rows of the table: staged activations first, then the active page."""
        staged = self.staged_activations()
        staged_ids = {repo.id for repo in staged}
        return staged + tuple(repo for repo in self._window.items if repo.id not in staged_ids)

    # Navigation

    async def navigate(self, target_page: int) -> int:
        """Show ``target_page``, discarding staged moves first.

        Returns:
            The page index actually shown (lower when the target is past the end).
        """
        if target_page < 1:
            raise ValidationException(
                detail=f"Page index must be >= 1, got {target_page}",
                extra={"target_page": target_page},
            )
        self._stager.discard()
        await self.load_page(target_page)
        return self._page_index

    async def next_page(self) -> int:
        if not self.has_next_page:
            return self._page_index
        return await self.navigate(self._page_index + 1)

    async def previous_page(self) -> int:
        if not self.has_previous_page:
            return self._page_index
        return await self.navigate(self._page_index - 1)

    async def load_page(self, target_page: int) -> None:
        """Fetch ``target_page`` and make it the displayed page.

        Raises:
            TransportError: If the walk fails; the displayed page is kept.
        """
        async with self._lock:
            self._loads_in_flight += 1
            try:
                resolved = await self._paginator.fetch_page(target_page)
            except TransportError:
                logger.warning(
                    "Failed to load active page %d; keeping page %d",
                    target_page,
                    self._page_index,
                )
                raise
            finally:
                self._loads_in_flight -= 1

            self._window = resolved.window
            self._page_index = self._clamp.clamp_to_extent(
                resolved.index,
                self._paginator.last_extent,
            )
            logger.debug(
                "Showing active page %d",
                self._page_index,
                extra={"requested": target_page, "fetches": resolved.fetches},
            )

    # Transitions

    async def activate(self, repository_id: str) -> TransitionOutcome:
        """Move an inactive repository into the active partition.

        Raises:
            NotFoundException: If the inactive partition is fully loaded and
                does not contain ``repository_id``.
        """
        return await self._stager.activate(repository_id)

    async def deactivate(self, repository_id: str) -> TransitionOutcome:
        """Move a repository of the displayed page into the inactive partition.

        Raises:
            NotFoundException: If ``repository_id`` is not on the displayed page.
        """
        repository = next((repo for repo in self._window.items if repo.id == repository_id), None)
        if repository is None:
            raise NotFoundException(
                detail=f"Repository {repository_id} is not on page {self._page_index}",
                extra={"repository_id": repository_id, "page": self._page_index},
            )
        return await self._stager.deactivate(repository)

    def hide_from_page(self, repository_id: str) -> bool:
        remaining = self._window.without({repository_id})
        if len(remaining) == len(self._window):
            return False
        self._window = remaining
        return len(remaining) == 0

    async def settle(self) -> bool:
        """Re-fetch now instead of waiting for the debounce window to close."""
        return await self._stager.settle()

    async def wait_idle(self) -> None:
        """Wait for a timer-triggered settle that is in flight."""
        await self._stager.wait()

    async def wait_preloaded(self) -> PreloadSnapshot[IntegratedRepository]:
        """Wait for the inactive preload started by ``start()``.

        Raises:
            TransportError: If the preload failed.
        """
        task = self._preload_task
        if task is not None:
            await asyncio.shield(task)
        return self._preloader.snapshot()

    async def _await_preload(self) -> None:
        task = self._preload_task
        if task is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)

    def _on_preload_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(
                "Inactive preload failed: %s",
                exc,
                extra={"items_loaded": len(self._preloader.items)},
            )


__all__ = ["ActiveRepositoryView"]
