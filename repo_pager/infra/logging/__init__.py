"""Logging infrastructure.

Provides structured logging with:
- JSONL or text output
- Automatic context injection (provider_id, partition, ...)
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for expensive debug messages

Basic usage:
    from repo_pager.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(provider_id="prov-1")
    logger.info("Loading page")  # Automatically includes provider_id
"""

from repo_pager.infra.logging.config import configure_logging, setup_logging, shutdown
from repo_pager.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from repo_pager.infra.logging.formatters import JSONFormatter
from repo_pager.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
