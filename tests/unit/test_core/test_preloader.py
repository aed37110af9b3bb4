"""Unit tests for FullCollectionPreloader."""

from __future__ import annotations

import math

import pytest

from repo_pager.core.exceptions import TransportError
from repo_pager.core.pagination import (
    CursorWalker,
    FullCollectionPreloader,
    PageWindow,
    Partition,
)
from repo_pager.features.repositories import repository_sort_key
from repo_pager.infra.memory import InMemoryRepositoryCollection

PROVIDER = "prov-1"


class ScriptedSource:
    """Serves a fixed list of windows in order, chained by index cursors."""

    def __init__(self, pages, *, fail_at=None, on_fetch=None):
        self.pages = pages
        self.fail_at = fail_at
        self.on_fetch = on_fetch
        self.calls = 0

    async def list_repositories(self, owner_ids, partition, first, after=None):
        index = 0 if after is None else int(after)
        self.calls += 1
        if self.on_fetch is not None:
            self.on_fetch(index)
        if self.fail_at == index:
            raise TransportError(detail="connection reset")
        last = index == len(self.pages) - 1
        return PageWindow(
            items=tuple(self.pages[index]),
            end_cursor=None if last else str(index + 1),
            has_next_page=not last,
        )


def preloader_for(source, page_size=2):
    walker = CursorWalker(source, owner_ids=[PROVIDER], page_size=page_size)
    return FullCollectionPreloader(walker, sort_key=repository_sort_key)


@pytest.mark.unit
class TestFullCollectionPreloader:
    @pytest.mark.parametrize("count", [0, 1, 6, 7])
    async def test_fetch_count_is_ceil_of_items_over_page_size(self, make_repo, count):
        repos = [make_repo(f"Repo{i:02d}", active=False) for i in range(count)]
        preloader = preloader_for(InMemoryRepositoryCollection({PROVIDER: repos}))

        snapshot = await preloader.load()

        assert preloader.fetch_count == max(1, math.ceil(count / 2))
        assert len(snapshot) == count
        assert snapshot.is_fully_loaded

    async def test_sorts_across_windows_case_insensitively(self, make_repo, display_names):
        pages = [
            [make_repo("delta", active=False), make_repo("Bravo", active=False)],
            [make_repo("alpha", active=False), make_repo("Charlie", active=False)],
        ]

        snapshot = await preloader_for(ScriptedSource(pages)).load()

        assert display_names(snapshot.items) == ["alpha", "Bravo", "Charlie", "delta"]

    async def test_fully_loaded_only_after_last_fetch(self, make_repo):
        seen = []
        pages = [[make_repo("A", active=False)], [make_repo("B", active=False)], []]
        source = ScriptedSource(pages)
        preloader = preloader_for(source)
        source.on_fetch = lambda index: seen.append(preloader.is_fully_loaded)

        await preloader.load()

        assert seen == [False, False, False]
        assert preloader.is_fully_loaded
        assert not preloader.is_loading

    async def test_failure_keeps_partial_items_and_can_restart(self, make_repo, display_names):
        pages = [[make_repo("B", active=False)], [make_repo("A", active=False)]]
        source = ScriptedSource(pages, fail_at=1)
        preloader = preloader_for(source)

        with pytest.raises(TransportError):
            await preloader.load()

        assert display_names(preloader.items) == ["B"]
        assert not preloader.is_fully_loaded

        source.fail_at = None
        snapshot = await preloader.load()

        assert display_names(snapshot.items) == ["A", "B"]
        assert snapshot.is_fully_loaded

    async def test_item_removed_during_load_is_not_readded(self, make_repo, display_names):
        pages = [[make_repo("A", active=False)], [make_repo("B", active=False)]]
        source = ScriptedSource(pages)
        preloader = preloader_for(source)
        source.on_fetch = lambda index: index == 1 and preloader.remove("repo-b")

        snapshot = await preloader.load()

        assert display_names(snapshot.items) == ["A"]

    async def test_add_find_remove(self, make_repo, display_names):
        preloader = preloader_for(ScriptedSource([[make_repo("M", active=False)]]))
        await preloader.load()

        assert preloader.add(make_repo("C", active=False))
        assert not preloader.add(make_repo("C", active=False))
        assert display_names(preloader.items) == ["C", "M"]
        assert preloader.find("repo-c").display_name == "C"

        removed = preloader.remove("repo-m")

        assert removed.display_name == "M"
        assert preloader.find("repo-m") is None
        assert preloader.remove("repo-m") is None

    async def test_walks_the_inactive_partition(self, collection):
        preloader = preloader_for(collection)

        await preloader.load()

        assert {call.partition for call in collection.list_calls} == {Partition.INACTIVE}
