"""CLI utilities for running async operations and formatting output."""

from repo_pager.cli.utils import backend
from repo_pager.cli.utils.async_runner import coro
from repo_pager.cli.utils.formatters import (
    EchoNotifier,
    error,
    header,
    info,
    repository_rows,
    success,
    warning,
)

__all__ = [
    "EchoNotifier",
    "backend",
    "coro",
    "error",
    "header",
    "info",
    "repository_rows",
    "success",
    "warning",
]
