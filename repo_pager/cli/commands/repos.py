"""Integrated repository commands."""

import sys

import click

from repo_pager.cli.utils import (
    EchoNotifier,
    backend,
    coro,
    error,
    header,
    info,
    repository_rows,
    success,
    warning,
)
from repo_pager.core.exceptions import NotFoundException, TransportError
from repo_pager.features.providers import IntegrationKind
from repo_pager.features.repositories import ActiveRepositoryView


def _kind_option(f):
    return click.option(
        "--kind",
        type=backend.KIND_CHOICE,
        default="github",
        show_default=True,
        help="Integration kind of the provider",
    )(f)


def _page_size_option(f):
    return click.option(
        "--page-size",
        type=click.IntRange(1, 1000),
        default=None,
        help="Items per page (default: PAGINATION_PAGE_SIZE)",
    )(f)


@click.group(name="repos")
def repos() -> None:
    """Active and inactive repositories of a provider."""


@repos.command(name="list")
@click.argument("provider_id")
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--inactive", is_flag=True, help="List the inactive partition instead")
@_kind_option
@_page_size_option
@coro
async def list_cmd(
    provider_id: str,
    page: int,
    inactive: bool,
    kind: str,
    page_size: int | None,
) -> None:
    """List one page of active repositories, or every inactive one."""
    try:
        async with (
            backend.build_client(IntegrationKind.parse(kind)) as client,
            ActiveRepositoryView(
                client,
                provider_id=provider_id,
                page_size=page_size,
                notifier=EchoNotifier(),
            ) as view,
        ):
            if inactive:
                snapshot = await view.wait_preloaded()
                header(f"Inactive repositories ({len(snapshot)})")
                repository_rows(snapshot.items)
                return

            shown = await view.navigate(page)
            if shown != page:
                warning(f"Page {page} does not exist; showing page {shown}")
            header(f"Active repositories, page {shown}")
            if not view.current_page():
                info("No active repositories")
            repository_rows(view.current_page())
            if view.has_next_page:
                info(f"More on page {shown + 1}")
    except TransportError as e:
        error(f"Failed to list repositories: {e.detail}")
        sys.exit(1)


@repos.command(name="activate")
@click.argument("provider_id")
@click.argument("repository_id")
@_kind_option
@coro
async def activate(provider_id: str, repository_id: str, kind: str) -> None:
    """Move an inactive repository into the active partition."""
    try:
        async with (
            backend.build_client(IntegrationKind.parse(kind)) as client,
            ActiveRepositoryView(client, provider_id=provider_id, notifier=EchoNotifier()) as view,
        ):
            await view.wait_preloaded()
            outcome = await view.activate(repository_id)
            if not outcome.ok:
                sys.exit(1)
            await view.settle()
            success(f"Activated {repository_id}")
    except NotFoundException:
        error(f"Inactive repository {repository_id} not found")
        sys.exit(1)
    except TransportError as e:
        error(f"Failed to activate: {e.detail}")
        sys.exit(1)


@repos.command(name="deactivate")
@click.argument("provider_id")
@click.argument("repository_id")
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@_kind_option
@_page_size_option
@coro
async def deactivate(
    provider_id: str,
    repository_id: str,
    page: int,
    kind: str,
    page_size: int | None,
) -> None:
    """Move a repository shown on an active page into the inactive partition."""
    try:
        async with (
            backend.build_client(IntegrationKind.parse(kind)) as client,
            ActiveRepositoryView(
                client,
                provider_id=provider_id,
                page_size=page_size,
                notifier=EchoNotifier(),
            ) as view,
        ):
            await view.navigate(page)
            outcome = await view.deactivate(repository_id)
            if not outcome.ok:
                sys.exit(1)
            await view.settle()
            success(f"Deactivated {repository_id}")
            header(f"Active repositories, page {view.page_index}")
            repository_rows(view.current_page())
    except NotFoundException:
        error(f"Repository {repository_id} is not on active page {page}")
        sys.exit(1)
    except TransportError as e:
        error(f"Failed to deactivate: {e.detail}")
        sys.exit(1)
