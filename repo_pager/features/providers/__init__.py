"""Git provider integrations that own repository collections."""

from repo_pager.features.providers.schemas import Integration, IntegrationKind, IntegrationStatus
from repo_pager.features.providers.service import ProviderLookup, ProviderService

__all__ = [
    "Integration",
    "IntegrationKind",
    "IntegrationStatus",
    "ProviderLookup",
    "ProviderService",
]
