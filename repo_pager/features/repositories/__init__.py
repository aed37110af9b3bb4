"""Integrated repositories of a git provider.

- ``ActiveRepositoryView``: the active table with its inactive partition
- ``OptimisticTransitionStager``: staged activate/deactivate moves
- ``IntegratedRepository``: the item model
"""

from repo_pager.features.repositories.protocol import (
    LoggingNotifier,
    Notifier,
    RepositoryBackend,
    RepositoryMutations,
)
from repo_pager.features.repositories.schemas import (
    IntegratedRepository,
    JobInfo,
    JobRun,
    StagingEntry,
    TransitionOutcome,
    repository_sort_key,
)
from repo_pager.features.repositories.staging import (
    FAILED_TO_ACTIVATE,
    FAILED_TO_DEACTIVATE,
    OptimisticTransitionStager,
    TransitionState,
)
from repo_pager.features.repositories.view import ActiveRepositoryView

__all__ = [
    "FAILED_TO_ACTIVATE",
    "FAILED_TO_DEACTIVATE",
    "ActiveRepositoryView",
    "IntegratedRepository",
    "JobInfo",
    "JobRun",
    "LoggingNotifier",
    "Notifier",
    "OptimisticTransitionStager",
    "RepositoryBackend",
    "RepositoryMutations",
    "StagingEntry",
    "TransitionOutcome",
    "TransitionState",
    "repository_sort_key",
]
