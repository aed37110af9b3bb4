"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings caches and log context reset between tests
    - Repository Fixtures: factories and the in-memory collection
    - Time Fixtures: ManualClock for debounce-driven behaviour
"""

from __future__ import annotations

import os
from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from repo_pager.core.settings import clear_all_caches
from repo_pager.features.providers import Integration, IntegrationKind, IntegrationStatus
from repo_pager.features.repositories import IntegratedRepository, JobInfo, JobRun
from repo_pager.infra.logging import clear_log_context
from repo_pager.infra.memory import InMemoryRepositoryCollection
from repo_pager.utils import ManualClock

# Tests never talk to a real server and never read a developer's .env.
os.environ.setdefault("TABBY_ENDPOINT", "http://tabby.test")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

PROVIDER_ID = "prov-1"


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_state():
    """Clear cached settings and the log context around every test."""
    clear_all_caches()
    clear_log_context()
    yield
    clear_all_caches()
    clear_log_context()


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def make_repo() -> Callable[..., IntegratedRepository]:
    """Factory for repositories named after their display name.

    Example:
        def test_sort(make_repo):
            repo = make_repo("Alpha", active=False)
            assert repo.id == "repo-alpha"
    """

    def _make(name: str, *, active: bool = True, running: bool = False) -> IntegratedRepository:
        job_info = JobInfo(
            last_job_run=JobRun(id=f"job-{name.lower()}", exit_code=None if running else 0),
            command="index",
        )
        return IntegratedRepository(
            id=f"repo-{name.lower()}",
            display_name=name,
            git_url=f"https://github.com/tabbyml/{name.lower()}",
            active=active,
            job_info=job_info,
        )

    return _make


@pytest.fixture
def provider() -> Integration:
    return Integration(
        id=PROVIDER_ID,
        display_name="GitHub",
        kind=IntegrationKind.GITHUB,
        status=IntegrationStatus.READY,
    )


@pytest.fixture
def collection(make_repo, provider) -> InMemoryRepositoryCollection:
    """Five active repositories A..E and three inactive ones.

    With page size 2 the active partition spans three pages: [A, B], [C, D], [E].
    """
    active = [make_repo(name) for name in "ABCDE"]
    inactive = [make_repo(name, active=False) for name in ("Xray", "Yankee", "Zulu")]
    return InMemoryRepositoryCollection({PROVIDER_ID: active + inactive}, [provider])


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def notifier() -> MagicMock:
    """Notifier double; assert on ``notifier.error``."""
    return MagicMock()


def names(repositories) -> list[str]:
    """Display names of a sequence of repositories."""
    return [repo.display_name for repo in repositories]


@pytest.fixture
def display_names() -> Callable[..., list[str]]:
    return names
