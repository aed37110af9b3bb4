"""Provider (integration) commands."""

import sys

import click

from repo_pager.cli.utils import backend, coro, error, header, info
from repo_pager.core.exceptions import NotFoundException, TransportError
from repo_pager.features.providers import IntegrationKind, ProviderService


@click.group(name="provider")
def provider() -> None:
    """Git provider integration commands."""


@provider.command(name="show")
@click.argument("provider_id")
@click.option("--kind", type=backend.KIND_CHOICE, default="github", show_default=True)
@coro
async def show(provider_id: str, kind: str) -> None:
    """Show a provider and its status."""
    integration_kind = IntegrationKind.parse(kind)
    try:
        async with backend.build_client(integration_kind) as client:
            integration = await ProviderService(client).get_provider(provider_id, integration_kind)
    except NotFoundException:
        error(f"Provider {provider_id} not found")
        sys.exit(1)
    except TransportError as e:
        error(f"Failed to load provider: {e.detail}")
        sys.exit(1)

    header(integration.display_name)
    click.echo(f"  ID:       {integration.id}")
    click.echo(f"  Kind:     {integration.kind.value}")
    click.echo(f"  Status:   {integration.status.label}")
    if integration.api_base:
        click.echo(f"  API base: {integration.api_base}")
    if not integration.is_ready:
        info("Repositories are only synced once the provider is ready")
