"""Output formatting utilities for CLI commands."""

from collections.abc import Iterable

import click

from repo_pager.features.repositories.schemas import IntegratedRepository


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    click.secho(f"⚠ {message}", fg="yellow")


def info(message: str) -> None:
    """Print an info message in blue."""
    click.secho(f"ℹ {message}", fg="blue")


def header(message: str) -> None:
    """Print a header message in cyan bold."""
    click.secho(f"\n{message}", fg="cyan", bold=True)


def repository_rows(repositories: Iterable[IntegratedRepository], *, staged: bool = False) -> None:
    """Print one line per repository: name, git URL and job status."""
    for repo in repositories:
        marker = "*" if staged else " "
        click.echo(
            f" {marker} {repo.display_name:<32} {repo.git_url:<48} {repo.job_info.status_label}"
        )


class EchoNotifier:
    """Notifier that prints failures through ``error``."""

    def error(self, message: str) -> None:
        error(message)
