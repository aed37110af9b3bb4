"""Main CLI entry point for repo-pager."""

import click

from repo_pager.cli.commands import provider, repos
from repo_pager.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="repo-pager")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """repo-pager - Browse and move the repositories of a Tabby git provider.

    \b
    Command Groups:
      provider   Provider lookup
      repos      Active/inactive repository pages and moves

    \b
    Quick Start:
      repo-pager provider show PROVIDER_ID --kind github
      repo-pager repos list PROVIDER_ID --page 2
      repo-pager repos deactivate PROVIDER_ID REPO_ID --page 2
    """
    ctx.ensure_object(dict)


cli.add_command(provider.provider)
cli.add_command(repos.repos)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
