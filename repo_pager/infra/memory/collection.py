"""In-memory repository collection with keyset cursors.

Implements the same collection, mutation and provider lookup API as
``TabbyRepositoryClient``, so views can run against it in tests, demos and
offline development. Cursors encode the sort key of the last item of a
window, so a walk stays valid while items move between partitions.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Self

from repo_pager.core.exceptions import MutationRejected, NotFoundException, TransportError
from repo_pager.core.pagination import CursorCodec, PageWindow, Partition
from repo_pager.features.providers.schemas import Integration, IntegrationKind
from repo_pager.features.repositories.schemas import IntegratedRepository, repository_sort_key

logger = logging.getLogger(__name__)

_CURSOR_FIELDS = ["display_name", "id"]


@dataclass(frozen=True, slots=True)
class ListCall:
    owner_ids: tuple[str, ...]
    partition: Partition
    first: int
    after: str | None


@dataclass(frozen=True, slots=True)
class MutationCall:
    repository_id: str
    active: bool


class InMemoryRepositoryCollection:
    """Repositories of several providers held in process memory.

    Call history is recorded in ``list_calls`` and ``mutation_calls``.
    Failures can be queued with ``fail_next_list`` and ``reject_next_mutation``;
    ``hold`` pauses every list call for one partition until ``release``.

    Example:
        collection = InMemoryRepositoryCollection()
        collection.add_repositories("prov-1", [repo_a, repo_b])
        window = await collection.list_repositories(["prov-1"], Partition.ACTIVE, first=20)
    """

    def __init__(
        self,
        repositories: Mapping[str, Iterable[IntegratedRepository]] | None = None,
        integrations: Iterable[Integration] = (),
        *,
        latency: float = 0.0,
    ) -> None:
        self._owners: dict[str, str] = {}
        self._repositories: dict[str, IntegratedRepository] = {}
        self._integrations: dict[str, Integration] = {i.id: i for i in integrations}
        self.latency = latency
        self.list_calls: list[ListCall] = []
        self.mutation_calls: list[MutationCall] = []
        self._list_failures: list[TransportError] = []
        self._mutation_failures: list[Exception] = []
        self._holds: dict[Partition, asyncio.Event] = {}
        for owner_id, repos in (repositories or {}).items():
            self.add_repositories(owner_id, repos)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    def add_repositories(self, owner_id: str, repositories: Iterable[IntegratedRepository]) -> None:
        for repo in repositories:
            self._owners[repo.id] = owner_id
            self._repositories[repo.id] = repo

    def add_integration(self, integration: Integration) -> None:
        self._integrations[integration.id] = integration

    def get(self, repository_id: str) -> IntegratedRepository:
        try:
            return self._repositories[repository_id]
        except KeyError:
            raise NotFoundException(
                detail=f"Repository {repository_id} not found",
                extra={"repository_id": repository_id},
            ) from None

    def repositories(self, owner_id: str, partition: Partition) -> list[IntegratedRepository]:
        """All repositories of one owner and partition, in collection order."""
        return self._select({owner_id}, partition)

    # Failure injection

    def fail_next_list(self, error: TransportError | None = None, *, count: int = 1) -> None:
        for _ in range(count):
            self._list_failures.append(
                error or TransportError(detail="Injected list failure", type="injected")
            )

    def reject_next_mutation(self, error: Exception | None = None) -> None:
        self._mutation_failures.append(error or MutationRejected(detail="Injected rejection"))

    def hold(self, partition: Partition) -> None:
        """Block list calls for ``partition`` until ``release``."""
        self._holds[partition] = asyncio.Event()

    def release(self, partition: Partition) -> None:
        event = self._holds.pop(partition, None)
        if event is not None:
            event.set()

    # Collection API

    async def list_repositories(
        self,
        owner_ids: Sequence[str],
        partition: Partition,
        first: int,
        after: str | None = None,
    ) -> PageWindow[IntegratedRepository]:
        self.list_calls.append(ListCall(tuple(owner_ids), partition, first, after))
        await asyncio.sleep(self.latency)
        event = self._holds.get(partition)
        if event is not None:
            await event.wait()
        if self._list_failures:
            raise self._list_failures.pop(0)

        candidates = self._select(set(owner_ids), partition)
        if after is not None:
            start_key = self._decode_after(after)
            candidates = [repo for repo in candidates if repository_sort_key(repo) > start_key]

        items = tuple(candidates[:first])
        end_cursor = CursorCodec.create_cursor(items[-1], _CURSOR_FIELDS) if items else None
        return PageWindow[IntegratedRepository](
            items=items,
            end_cursor=end_cursor,
            has_next_page=len(candidates) > first,
        )

    async def set_active(self, repository_id: str, active: bool) -> bool:
        self.mutation_calls.append(MutationCall(repository_id, active))
        await asyncio.sleep(self.latency)
        if self._mutation_failures:
            raise self._mutation_failures.pop(0)

        repo = self._repositories.get(repository_id)
        if repo is None:
            raise MutationRejected(
                detail=f"Repository {repository_id} does not exist",
                extra={"repository_id": repository_id, "active": active},
            )
        target = Partition.ACTIVE if active else Partition.INACTIVE
        self._repositories[repository_id] = repo.moved_to(target)
        logger.debug("Moved %s to %s", repository_id, target.value)
        return True

    async def list_integrations(
        self,
        ids: Sequence[str],
        kind: IntegrationKind,
    ) -> list[Integration]:
        await asyncio.sleep(self.latency)
        return [
            self._integrations[i]
            for i in ids
            if i in self._integrations and self._integrations[i].kind is kind
        ]

    def _select(self, owners: set[str], partition: Partition) -> list[IntegratedRepository]:
        return sorted(
            (
                repo
                for repo in self._repositories.values()
                if self._owners[repo.id] in owners and repo.active == partition.is_active
            ),
            key=repository_sort_key,
        )

    @staticmethod
    def _decode_after(after: str) -> tuple[str, str, str]:
        try:
            values = CursorCodec.decode(after).values
            name, repo_id = str(values["display_name"]), str(values["id"])
        except (ValueError, KeyError) as e:
            raise TransportError(
                detail=f"Invalid cursor {after!r}",
                type="invalid-cursor",
                extra={"after": after},
            ) from e
        return (name.casefold(), name, repo_id)


__all__ = ["InMemoryRepositoryCollection", "ListCall", "MutationCall"]
