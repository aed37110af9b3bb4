"""Construction of the server client used by CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from repo_pager.features.providers.schemas import IntegrationKind
from repo_pager.infra.external import TabbyRepositoryClient

if TYPE_CHECKING:
    from repo_pager.features.repositories.protocol import RepositoryBackend

KIND_CHOICE = click.Choice([kind.value.lower() for kind in IntegrationKind], case_sensitive=False)


def build_client(kind: IntegrationKind) -> RepositoryBackend:
    """Tabby client configured from ``TABBY_*`` settings.

    Commands use the result as an async context manager.
    """
    return TabbyRepositoryClient.from_settings(kind)
