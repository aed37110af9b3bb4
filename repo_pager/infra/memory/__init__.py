"""In-process implementations of the remote APIs."""

from repo_pager.infra.memory.collection import InMemoryRepositoryCollection, ListCall, MutationCall

__all__ = ["InMemoryRepositoryCollection", "ListCall", "MutationCall"]
