"""Pydantic schemas for git provider integrations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class IntegrationKind(str, Enum):
    """Git hosting service an integration talks to (GraphQL enum values)."""

    GITHUB = "GITHUB"
    GITLAB = "GITLAB"
    GITHUB_SELF_HOSTED = "GITHUB_SELF_HOSTED"
    GITLAB_SELF_HOSTED = "GITLAB_SELF_HOSTED"

    @classmethod
    def parse(cls, value: str) -> IntegrationKind:
        """Accept ``github``, ``gitlab-self-hosted``, ``GITHUB_SELF_HOSTED``, ..."""
        return cls(value.strip().upper().replace("-", "_"))


class IntegrationStatus(str, Enum):
    READY = "READY"
    FAILED = "FAILED"
    PENDING = "PENDING"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    IntegrationStatus.READY: "Ready",
    IntegrationStatus.FAILED: "Error",
    IntegrationStatus.PENDING: "Pending",
}


class Integration(BaseModel):
    """A configured git provider; owner of integrated repositories."""

    id: str = Field(min_length=1)
    display_name: str
    kind: IntegrationKind
    status: IntegrationStatus = IntegrationStatus.PENDING
    api_base: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @property
    def is_ready(self) -> bool:
        return self.status is IntegrationStatus.READY


__all__ = ["Integration", "IntegrationKind", "IntegrationStatus"]
