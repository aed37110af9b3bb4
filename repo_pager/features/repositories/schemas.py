"""Pydantic schemas for integrated repositories."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from repo_pager.core.pagination import Partition

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


class JobRun(BaseModel):
    """Last background job run of a repository (indexing, sync, ...)."""

    id: str
    job: str | None = None
    created_at: datetime | None = None
    finished_at: datetime | None = None
    exit_code: int | None = Field(
        default=None,
        description="Process exit code; None while the job is still running",
    )

    model_config = _WIRE_CONFIG

    @property
    def is_running(self) -> bool:
        return bool(self.id) and self.exit_code is None


class JobInfo(BaseModel):
    """Job-status summary attached to every repository."""

    last_job_run: JobRun | None = None
    command: str | None = None

    model_config = _WIRE_CONFIG

    @property
    def has_running_job(self) -> bool:
        return self.last_job_run is not None and self.last_job_run.is_running

    @property
    def status_label(self) -> str:
        """Short label for the job column: running, idle, succeeded or failed."""
        run = self.last_job_run
        if run is None:
            return "idle"
        if run.is_running:
            return "running"
        return "succeeded" if run.exit_code == 0 else "failed"


class IntegratedRepository(BaseModel):
    """A repository exposed by a git provider integration.

    Immutable; the job summary is refreshed by replacing it through
    ``with_job_info``.
    """

    id: str = Field(min_length=1)
    display_name: str
    git_url: str
    active: bool = True
    job_info: JobInfo = Field(default_factory=JobInfo)

    model_config = _WIRE_CONFIG

    @property
    def partition(self) -> Partition:
        return Partition.ACTIVE if self.active else Partition.INACTIVE

    def with_job_info(self, job_info: JobInfo) -> IntegratedRepository:
        return self.model_copy(update={"job_info": job_info})

    def moved_to(self, partition: Partition) -> IntegratedRepository:
        return self.model_copy(update={"active": partition.is_active})


def repository_sort_key(repo: IntegratedRepository) -> tuple[str, str, str]:
    """Alphabetical ordering by display name, case-insensitive, stable on ties."""
    return (repo.display_name.casefold(), repo.display_name, repo.id)


@dataclass(frozen=True, slots=True)
class StagingEntry:
    """A repository shown in its destination partition before the server page confirms it.

    Attributes:
        repository: The moved repository, already flagged for its destination
        target: Partition the repository is moving into
        staged_at: Clock time of the successful mutation
    """

    repository: IntegratedRepository
    target: Partition
    staged_at: float


@dataclass(frozen=True, slots=True)
class TransitionOutcome:
    """Result of an activate/deactivate request.

    Attributes:
        repository_id: Repository the request was about
        target: Requested destination partition
        ok: Whether the server accepted the mutation
        staged: Whether a staging entry was created for it
        message: Failure message shown to the user, if any
    """

    repository_id: str
    target: Partition
    ok: bool
    staged: bool = False
    message: str | None = None


__all__ = [
    "IntegratedRepository",
    "JobInfo",
    "JobRun",
    "StagingEntry",
    "TransitionOutcome",
    "repository_sort_key",
]
