"""Base service class for business logic."""

from __future__ import annotations

import logging

from repo_pager.infra.logging import get_lazy_logger


class BaseService:
    """Base class for service classes.

    Loggers:
        - self.logger: Standard logger for INFO/WARNING/ERROR
        - self._lazy: Lazy logger for DEBUG dumps, only built when enabled

    Example:
        class ProviderService(BaseService):
            def __init__(self, client: ProviderLookup):
                super().__init__()
                self.client = client

            async def get_provider(self, provider_id: str, kind: IntegrationKind) -> Integration:
                self.logger.info("Fetching provider", extra={"provider_id": provider_id})
                ...
    """

    def __init__(self) -> None:
        class_name = self.__class__.__name__
        self.logger = logging.getLogger(class_name)
        self._lazy = get_lazy_logger(class_name)
