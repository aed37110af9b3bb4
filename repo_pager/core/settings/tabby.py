"""Tabby server connection settings.

Environment variables use TABBY_ prefix.
Example: TABBY_ENDPOINT=https://tabby.internal, TABBY_TOKEN=auth_xxx
"""

from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TabbySettings(BaseSettings):
    """Connection settings for the Tabby GraphQL API."""

    endpoint: str = Field(
        default="http://localhost:8080",
        min_length=1,
        description="Base URL of the Tabby server",
    )
    graphql_path: str = Field(
        default="/graphql",
        pattern=r"^/.*$",
        description="Path of the GraphQL endpoint",
    )
    token: SecretStr | None = Field(
        default=None,
        description="Bearer token used for the Authorization header",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        le=600.0,
        description="HTTP timeout in seconds",
    )

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the endpoint so paths can be joined safely."""
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="TABBY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
