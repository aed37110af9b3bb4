"""Lookup of the provider that owns a repository view."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from repo_pager.core.exceptions import NotFoundException
from repo_pager.core.services import BaseService
from repo_pager.features.providers.schemas import Integration, IntegrationKind


@runtime_checkable
class ProviderLookup(Protocol):
    """Protocol for the integrations query API."""

    async def list_integrations(
        self,
        ids: Sequence[str],
        kind: IntegrationKind,
    ) -> list[Integration]: ...


class ProviderService(BaseService):
    """Resolve a provider id and kind to its integration."""

    def __init__(self, client: ProviderLookup) -> None:
        super().__init__()
        self.client = client

    async def get_provider(self, provider_id: str, kind: IntegrationKind) -> Integration:
        """Fetch one provider.

        Raises:
            NotFoundException: If ``provider_id`` is empty or the server has
                no integration with that id and kind.
            TransportError: If the lookup itself failed.
        """
        if not provider_id:
            raise NotFoundException(detail="Provider not found", extra={"kind": kind.value})

        integrations = await self.client.list_integrations([provider_id], kind)
        provider = next((i for i in integrations if i.id == provider_id), None)
        if provider is None:
            self.logger.info(
                "Provider not found",
                extra={"provider_id": provider_id, "kind": kind.value},
            )
            raise NotFoundException(
                detail="Provider not found",
                extra={"provider_id": provider_id, "kind": kind.value},
            )

        self._lazy.debug(lambda: f"Resolved provider {provider.model_dump()}")
        return provider


__all__ = ["ProviderLookup", "ProviderService"]
