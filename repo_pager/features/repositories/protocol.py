"""Collaborator protocols for the repository views.

The engine is written against these protocols only. ``TabbyRepositoryClient``
and ``InMemoryRepositoryCollection`` implement ``RepositoryBackend``;
``LoggingNotifier`` is the default ``Notifier``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repo_pager.core.pagination import PageWindow, Partition
    from repo_pager.features.repositories.schemas import IntegratedRepository

logger = logging.getLogger(__name__)


@runtime_checkable
class RepositoryMutations(Protocol):
    """Protocol for the activate/deactivate mutation API."""

    async def set_active(self, repository_id: str, active: bool) -> bool:
        """Move a repository into or out of the active partition.

        Returns:
            True when the server applied the change.

        Raises:
            MutationRejected: If the server declined the change.
            TransportError: If the call itself failed.
        """
        ...


@runtime_checkable
class RepositoryBackend(Protocol):
    """Collection query API plus mutation API of one server."""

    async def list_repositories(
        self,
        owner_ids: Sequence[str],
        partition: Partition,
        first: int,
        after: str | None = None,
    ) -> PageWindow[IntegratedRepository]: ...

    async def set_active(self, repository_id: str, active: bool) -> bool: ...


@runtime_checkable
class Notifier(Protocol):
    """User-visible notification surface (toasts, CLI output, ...)."""

    def error(self, message: str) -> None:
        """Show a failure to the user."""
        ...


class LoggingNotifier:
    """Notifier that only writes to the log."""

    def error(self, message: str) -> None:
        logger.error(message, extra={"notification": True})


__all__ = ["LoggingNotifier", "Notifier", "RepositoryBackend", "RepositoryMutations"]
