"""Tabby GraphQL API client for integrated repositories and providers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from repo_pager.core.exceptions import GraphQLOperationError, MutationRejected, TransportError
from repo_pager.core.pagination import Connection, PageWindow, Partition
from repo_pager.core.settings import get_tabby_settings
from repo_pager.core.settings.tabby import TabbySettings
from repo_pager.features.providers.schemas import Integration, IntegrationKind
from repo_pager.features.repositories.schemas import IntegratedRepository
from repo_pager.infra.external.graphql_client import GraphQLClient

logger = logging.getLogger(__name__)

LIST_INTEGRATED_REPOSITORIES = """
query ListIntegratedRepositories(
  $ids: [ID!]
  $kind: IntegrationKind
  $active: Boolean
  $first: Int
  $after: String
) {
  integratedRepositories(ids: $ids, kind: $kind, active: $active, first: $first, after: $after) {
    edges {
      node {
        id
        displayName
        gitUrl
        active
        jobInfo {
          lastJobRun { id job createdAt finishedAt exitCode }
          command
        }
      }
      cursor
    }
    pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
  }
}
"""

UPDATE_INTEGRATED_REPOSITORY_ACTIVE = """
mutation UpdateIntegratedRepositoryActive($id: ID!, $active: Boolean!) {
  updateIntegratedRepositoryActive(id: $id, active: $active)
}
"""

LIST_INTEGRATIONS = """
query ListIntegrations($ids: [ID!], $kind: IntegrationKind, $first: Int) {
  integrations(ids: $ids, kind: $kind, first: $first) {
    edges {
      node { id displayName status apiBase }
      cursor
    }
    pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
  }
}
"""


class TabbyRepositoryClient(GraphQLClient):
    """Repository collection, mutation and provider lookup API of a Tabby server.

    One client serves one integration kind; the kind is sent with every
    repository query.

    Usage:
        async with TabbyRepositoryClient.from_settings(IntegrationKind.GITHUB) as client:
            window = await client.list_repositories(["prov-1"], Partition.ACTIVE, first=20)
            await client.set_active(window.items[0].id, False)
    """

    def __init__(
        self,
        base_url: str,
        *,
        kind: IntegrationKind,
        path: str = "/graphql",
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url,
            path=path,
            token=token,
            timeout=timeout,
            transport=transport,
        )
        self.kind = kind

    @classmethod
    def from_settings(
        cls,
        kind: IntegrationKind,
        settings: TabbySettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TabbyRepositoryClient:
        """Build a client from ``TABBY_*`` settings."""
        settings = settings or get_tabby_settings()
        return cls(
            settings.endpoint,
            kind=kind,
            path=settings.graphql_path,
            token=settings.token.get_secret_value() if settings.token else None,
            timeout=settings.timeout,
            transport=transport,
        )

    async def list_repositories(
        self,
        owner_ids: Sequence[str],
        partition: Partition,
        first: int,
        after: str | None = None,
    ) -> PageWindow[IntegratedRepository]:
        """Fetch one window of ``partition`` for the given providers."""
        variables: dict[str, Any] = {
            "ids": list(owner_ids),
            "kind": self.kind.value,
            "active": partition.is_active,
            "first": first,
            "after": after,
        }
        data = await self.execute(
            LIST_INTEGRATED_REPOSITORIES,
            variables,
            operation="ListIntegratedRepositories",
        )
        connection = self._parse_connection(
            data,
            "integratedRepositories",
            Connection[IntegratedRepository],
        )
        return connection.to_window()

    async def set_active(self, repository_id: str, active: bool) -> bool:
        """Activate or deactivate one repository.

        Raises:
            MutationRejected: If the server answers with errors or ``false``.
            TransportError: If the request itself failed.
        """
        try:
            data = await self.execute(
                UPDATE_INTEGRATED_REPOSITORY_ACTIVE,
                {"id": repository_id, "active": active},
                operation="UpdateIntegratedRepositoryActive",
            )
        except GraphQLOperationError as e:
            raise MutationRejected(
                detail=e.detail,
                extra={"repository_id": repository_id, "active": active},
            ) from e

        if data.get("updateIntegratedRepositoryActive") is not True:
            raise MutationRejected(
                detail="Server did not apply the change",
                extra={"repository_id": repository_id, "active": active},
            )

        logger.info(
            "Repository %s",
            "activated" if active else "deactivated",
            extra={"repository_id": repository_id},
        )
        return True

    async def list_integrations(
        self,
        ids: Sequence[str],
        kind: IntegrationKind,
    ) -> list[Integration]:
        """Fetch the integrations with the given ids and kind."""
        data = await self.execute(
            LIST_INTEGRATIONS,
            {"ids": list(ids), "kind": kind.value, "first": max(1, len(ids))},
            operation="ListIntegrations",
        )
        payload = data.get("integrations") or {}
        for edge in payload.get("edges") or []:
            node = edge.get("node") if isinstance(edge, dict) else None
            if isinstance(node, dict):
                node.setdefault("kind", kind.value)
        connection = self._parse_connection(data, "integrations", Connection[Integration])
        return connection.nodes

    @staticmethod
    def _parse_connection[C: Connection](data: dict[str, Any], field: str, model: type[C]) -> C:
        payload = data.get(field)
        if payload is None:
            raise TransportError(
                detail=f"Response is missing {field}",
                type="malformed-response",
                extra={"field": field},
            )
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise TransportError(
                detail=f"Malformed {field} connection: {e.error_count()} validation errors",
                type="malformed-response",
                extra={"field": field},
            ) from e


__all__ = [
    "LIST_INTEGRATED_REPOSITORIES",
    "LIST_INTEGRATIONS",
    "UPDATE_INTEGRATED_REPOSITORY_ACTIVE",
    "TabbyRepositoryClient",
]
