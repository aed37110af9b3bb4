"""Pagination settings for the repository views.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_PAGE_SIZE=20, PAGINATION_SETTLE_DELAY_MS=3000
"""

from __future__ import annotations

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination and reconciliation configuration.

    Attributes:
        page_size: Number of repositories requested per cursor fetch.
        settle_delay_ms: Quiet period after the last activate/deactivate before
            the staged rows are dropped and the page is re-fetched.
        fetch_timeout: Upper bound in seconds for a single cursor fetch.

    Example:
        settings = PaginationSettings(page_size=2)
        walker = CursorWalker(source, owner_ids=["p1"], page_size=settings.page_size)
    """

    page_size: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Items per cursor fetch (the page size P)",
    )
    settle_delay_ms: int = Field(
        default=3000,
        ge=0,
        le=600_000,
        description="Debounce window for staged transitions, in milliseconds",
    )
    fetch_timeout: float | None = Field(
        default=30.0,
        gt=0,
        le=600.0,
        description="Timeout in seconds for one cursor fetch (None disables it)",
    )

    @computed_field
    @property
    def settle_delay(self) -> float:
        """Debounce window in seconds."""
        return self.settle_delay_ms / 1000.0

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
