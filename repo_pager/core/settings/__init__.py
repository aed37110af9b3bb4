"""Modular Pydantic Settings v2 configuration.

Each concern has its own frozen settings model with its own environment
prefix, loaded through LRU-cached loaders:

    from repo_pager.core.settings import get_pagination_settings

    settings = get_pagination_settings()
    print(settings.page_size)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import (
    clear_all_caches,
    get_logging_settings,
    get_pagination_settings,
    get_tabby_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .tabby import TabbySettings

__all__ = [
    "LoggingSettings",
    "PaginationSettings",
    "TabbySettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_pagination_settings",
    "get_tabby_settings",
]
