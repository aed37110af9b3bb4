"""Optimistic moves between the active and inactive partitions.

After the server accepts an activate/deactivate mutation the moved repository
is shown in its destination straight away, as a staged row. The authoritative
page is re-fetched only once the user pauses: every transition (re)starts a
debounce timer and a burst of transitions settles with a single re-fetch.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from repo_pager.core.exceptions import MutationRejected, NotFoundException, TransportError
from repo_pager.core.pagination import PageClamp, Partition
from repo_pager.features.repositories.schemas import StagingEntry, TransitionOutcome
from repo_pager.infra.logging import get_lazy_logger
from repo_pager.utils.debounce import DebouncedCallback, LoopClock

if TYPE_CHECKING:
    from repo_pager.core.pagination import FullCollectionPreloader
    from repo_pager.features.repositories.protocol import Notifier, RepositoryMutations
    from repo_pager.features.repositories.schemas import IntegratedRepository
    from repo_pager.utils.debounce import Clock

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

FAILED_TO_ACTIVATE = "Failed to activate"
FAILED_TO_DEACTIVATE = "Failed to deactivate"


class TransitionState(str, Enum):
    SETTLED = "settled"
    STAGED = "staged"
    RESOLVING = "resolving"


class ActivePageHost(Protocol):
    """What the stager needs from the view that displays the active page."""

    @property
    def page_index(self) -> int: ...

    @property
    def has_next_page(self) -> bool:
        """Whether the server holds items after the displayed page."""
        ...

    def hide_from_page(self, repository_id: str) -> bool:
        """Drop a repository from the displayed window.

        Returns:
            True if it was the last item left on the page.
        """
        ...

    async def load_page(self, target_page: int) -> None:
        """Re-fetch ``target_page`` and make it the displayed page."""
        ...


class OptimisticTransitionStager:
    """Stage successful mutations and settle them with one debounced re-fetch.

    State moves ``settled -> staged -> resolving -> settled``. The staged list
    is newest first. The page to re-fetch is remembered per burst: the page
    being viewed, or one page earlier when a deactivation emptied the last
    page. It steps back one page per burst, never more. A transition staged
    while a settle is resolving keeps the state ``staged``.
    """

    def __init__(
        self,
        host: ActivePageHost,
        *,
        mutations: RepositoryMutations,
        inactive: FullCollectionPreloader[IntegratedRepository],
        notifier: Notifier,
        page_size: int,
        settle_delay: float,
        clock: Clock | None = None,
    ) -> None:
        self._host = host
        self._mutations = mutations
        self._inactive = inactive
        self._notifier = notifier
        self._clamp = PageClamp(page_size)
        self._clock = clock or LoopClock()
        self._debounce = DebouncedCallback(self._resolve, settle_delay, self._clock, name="settle")
        self._staged: list[StagingEntry] = []
        self._resolve_page: int | None = None
        self.state = TransitionState.SETTLED

    @property
    def entries(self) -> tuple[StagingEntry, ...]:
        return tuple(self._staged)

    def staged_items(self, target: Partition | None = None) -> tuple[IntegratedRepository, ...]:
        """Staged repositories, newest first, optionally only those moving into ``target``."""
        return tuple(
            entry.repository for entry in self._staged if target is None or entry.target is target
        )

    @property
    def pending_page(self) -> int | None:
        """Page the next settle will re-fetch, if one is scheduled."""
        return self._resolve_page

    @property
    def settle_pending(self) -> bool:
        return self._debounce.pending

    async def activate(self, repository_id: str) -> TransitionOutcome:
        """Move an inactive repository into the active partition.

        Raises:
            NotFoundException: If the inactive partition is fully loaded and
                does not hold ``repository_id``.
        """
        repository = self._inactive.find(repository_id)
        if repository is None and self._inactive.is_fully_loaded:
            raise NotFoundException(
                detail=f"Inactive repository {repository_id} not found",
                extra={"repository_id": repository_id},
            )

        failure = await self._mutate(repository_id, Partition.ACTIVE)
        if failure is not None:
            return failure

        self._remember_page(self._host.page_index)
        self._inactive.remove(repository_id)
        if repository is None:
            # Preload still running: nothing local to stage, the settle shows it.
            self._schedule()
            return TransitionOutcome(repository_id=repository_id, target=Partition.ACTIVE, ok=True)

        self._stage(repository.moved_to(Partition.ACTIVE), Partition.ACTIVE)
        return TransitionOutcome(
            repository_id=repository_id,
            target=Partition.ACTIVE,
            ok=True,
            staged=True,
        )

    async def deactivate(self, repository: IntegratedRepository) -> TransitionOutcome:
        """Move a repository of the displayed page into the inactive partition."""
        failure = await self._mutate(repository.id, Partition.INACTIVE)
        if failure is not None:
            return failure

        moved = repository.moved_to(Partition.INACTIVE)
        self._inactive.add(moved)
        emptied = self._host.hide_from_page(repository.id)
        current = self._host.page_index
        self._remember_page(current)
        if emptied and not self._host.has_next_page:
            # Later items shift into an emptied middle page; only a last page goes away.
            self._resolve_page = self._clamp.after_removal(current, removed_sole_item=True)
        self._stage(moved, Partition.INACTIVE)
        return TransitionOutcome(
            repository_id=repository.id,
            target=Partition.INACTIVE,
            ok=True,
            staged=True,
        )

    async def settle(self) -> bool:
        """Run the pending settle now instead of waiting for the timer.

        Returns:
            True if a settle was pending and ran.
        """
        return await self._debounce.fire_now()

    def discard(self) -> bool:
        """Cancel the pending settle and drop every staged entry.

        Navigation calls this before fetching its own target page.

        Returns:
            True if anything was staged or scheduled.
        """
        cancelled = self._debounce.cancel()
        had_entries = bool(self._staged)
        self._staged.clear()
        self._resolve_page = None
        if self.state is TransitionState.STAGED:
            self.state = TransitionState.SETTLED
        if cancelled or had_entries:
            logger.debug("Discarded staged transitions", extra={"cancelled_settle": cancelled})
        return cancelled or had_entries

    async def wait(self) -> None:
        await self._debounce.wait()

    async def aclose(self) -> None:
        self.discard()
        await self._debounce.aclose()

    async def _mutate(self, repository_id: str, target: Partition) -> TransitionOutcome | None:
        default = FAILED_TO_ACTIVATE if target.is_active else FAILED_TO_DEACTIVATE
        try:
            ok = await self._mutations.set_active(repository_id, target.is_active)
        except (MutationRejected, TransportError) as e:
            message = e.detail or default
            logger.warning(
                "Mutation to %s failed: %s",
                target.value,
                message,
                extra={"repository_id": repository_id, "error_type": e.type},
            )
        else:
            if ok:
                return None
            message = default
            logger.warning(
                "Mutation to %s returned false",
                target.value,
                extra={"repository_id": repository_id},
            )

        self._notifier.error(message)
        return TransitionOutcome(
            repository_id=repository_id,
            target=target,
            ok=False,
            message=message,
        )

    def _remember_page(self, current: int) -> None:
        if self._resolve_page is None:
            self._resolve_page = current

    def _stage(self, repository: IntegratedRepository, target: Partition) -> None:
        entry = StagingEntry(repository=repository, target=target, staged_at=self._clock.now())
        self._staged.insert(0, entry)
        self._schedule()

    def _schedule(self) -> None:
        self.state = TransitionState.STAGED
        self._debounce.schedule()
        lazy_logger.debug(
            lambda: f"Staged {[entry.repository.display_name for entry in self._staged]};"
            f" settle re-fetches page {self._resolve_page}"
        )

    async def _resolve(self) -> None:
        target = self._resolve_page or self._host.page_index
        self._staged.clear()
        self._resolve_page = None
        self.state = TransitionState.RESOLVING
        try:
            await self._host.load_page(target)
        finally:
            # A transition staged during the load keeps its own pending settle.
            if self.state is TransitionState.RESOLVING:
                self.state = TransitionState.SETTLED


__all__ = [
    "FAILED_TO_ACTIVATE",
    "FAILED_TO_DEACTIVATE",
    "ActivePageHost",
    "OptimisticTransitionStager",
    "TransitionState",
]
