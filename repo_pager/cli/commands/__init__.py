"""CLI command modules."""

from repo_pager.cli.commands import provider, repos

__all__ = ["provider", "repos"]
