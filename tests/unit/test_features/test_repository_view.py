"""Behavioural tests for ActiveRepositoryView over the in-memory collection."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from repo_pager.core.exceptions import (
    MutationRejected,
    NotFoundException,
    TransportError,
    ValidationException,
)
from repo_pager.core.pagination import Partition
from repo_pager.features.repositories import (
    FAILED_TO_DEACTIVATE,
    ActiveRepositoryView,
    TransitionState,
)
from repo_pager.infra.logging import get_log_context
from repo_pager.infra.memory import InMemoryRepositoryCollection

PROVIDER = "prov-1"


@pytest.fixture
def make_view(collection, clock, notifier):
    def _make(source=None, **kwargs):
        options = {
            "provider_id": PROVIDER,
            "page_size": 2,
            "settle_delay": 3.0,
            "clock": clock,
            "notifier": notifier,
        }
        options.update(kwargs)
        return ActiveRepositoryView(source or collection, **options)

    return _make


@pytest.fixture
async def view(make_view):
    async with make_view() as view:
        await view.wait_preloaded()
        yield view


@pytest.mark.unit
class TestLifecycle:
    async def test_start_loads_first_page_and_preloads_inactive(self, view, display_names):
        assert view.page_index == 1
        assert display_names(view.current_page()) == ["A", "B"]
        assert view.show_pagination
        snapshot = view.inactive_items()
        assert snapshot.is_fully_loaded
        assert display_names(snapshot.items) == ["Xray", "Yankee", "Zulu"]

    async def test_log_context_carries_provider(self, make_view):
        view = make_view()
        await view.start()

        assert get_log_context()["provider_id"] == PROVIDER

        await view.dispose()

        assert "provider_id" not in get_log_context()

    async def test_dispose_cancels_pending_settle(self, view, clock):
        await view.deactivate("repo-a")
        assert clock.pending == 1

        await view.dispose()

        assert clock.pending == 0
        assert view.current_page() == ()

    async def test_failed_start_disposes(self, make_view, collection, clock):
        collection.hold(Partition.INACTIVE)
        collection.fail_next_list()

        with pytest.raises(TransportError):
            async with make_view():
                pass

        assert clock.pending == 0

    def test_requires_provider_id(self, collection):
        with pytest.raises(ValidationException):
            ActiveRepositoryView(collection, provider_id="")


@pytest.mark.unit
class TestNavigation:
    async def test_next_and_previous(self, view, display_names):
        assert await view.next_page() == 2
        assert display_names(view.current_page()) == ["C", "D"]
        assert await view.next_page() == 3
        assert not view.has_next_page
        assert await view.next_page() == 3

        assert await view.previous_page() == 2
        assert await view.previous_page() == 1
        assert await view.previous_page() == 1

    async def test_navigate_past_the_end_shows_last_page(self, view, display_names):
        assert await view.navigate(10) == 3
        assert display_names(view.current_page()) == ["E"]

    async def test_navigate_rejects_page_zero(self, view):
        with pytest.raises(ValidationException):
            await view.navigate(0)

    async def test_transport_failure_keeps_page(self, view, collection, display_names):
        await view.navigate(2)
        collection.fail_next_list()

        with pytest.raises(TransportError):
            await view.navigate(3)

        assert view.page_index == 2
        assert display_names(view.current_page()) == ["C", "D"]
        assert not view.is_fetching

    async def test_navigation_cancels_pending_settle(self, view, collection, clock):
        await view.deactivate("repo-a")
        assert len(view.staged_entries()) == 1

        await view.navigate(2)

        assert view.staged_entries() == ()
        assert view.transition_state is TransitionState.SETTLED
        calls = len(collection.list_calls)
        assert clock.advance(3.0) == 0
        await view.wait_idle()
        assert len(collection.list_calls) == calls


@pytest.mark.unit
class TestTransitions:
    async def test_five_item_scenario(self, view, clock, display_names):
        assert await view.navigate(3) == 3
        assert display_names(view.current_page()) == ["E"]

        outcome = await view.deactivate("repo-e")
        assert outcome.ok and outcome.staged
        assert view.current_page() == ()
        assert display_names(view.staged_items()) == ["E"]
        assert view.staged_activations() == ()

        assert await view.settle()
        assert view.page_index == 2
        assert display_names(view.current_page()) == ["C", "D"]
        assert "repo-e" in {r.id for r in view.inactive_items().items}

        outcome = await view.activate("repo-e")
        assert outcome.staged
        assert display_names(view.staged_activations()) == ["E"]
        assert display_names(view.visible_rows()) == ["E", "C", "D"]

        clock.advance(3.0)
        await view.wait_idle()
        assert view.staged_items() == ()

        assert await view.navigate(3) == 3
        assert display_names(view.current_page()) == ["E"]

    async def test_removing_non_sole_item_keeps_page(self, view, display_names):
        await view.navigate(2)

        await view.deactivate("repo-c")
        await view.settle()

        assert view.page_index == 2
        assert display_names(view.current_page()) == ["D", "E"]

    async def test_emptying_a_middle_page_keeps_index(self, make_view, make_repo, display_names):
        source = InMemoryRepositoryCollection({PROVIDER: [make_repo(name) for name in "ABCDEF"]})
        async with make_view(source) as view:
            await view.wait_preloaded()
            await view.navigate(2)

            await view.deactivate("repo-c")
            await view.deactivate("repo-d")
            assert view.current_page() == ()

            assert await view.settle()
            assert view.page_index == 2
            assert display_names(view.current_page()) == ["E", "F"]

    async def test_activation_during_resolve_stays_staged(self, view, collection, clock, display_names):
        await view.deactivate("repo-a")
        collection.hold(Partition.ACTIVE)
        clock.advance(3.0)
        for _ in range(5):
            await asyncio.sleep(0)
        assert view.transition_state is TransitionState.RESOLVING

        await view.activate("repo-zulu")
        assert view.transition_state is TransitionState.STAGED

        collection.release(Partition.ACTIVE)
        await view.wait_idle()

        assert view.transition_state is TransitionState.STAGED
        assert display_names(view.staged_items()) == ["Zulu"]
        assert clock.pending == 1

        clock.advance(3.0)
        await view.wait_idle()

        assert view.transition_state is TransitionState.SETTLED
        assert view.staged_items() == ()
        assert "repo-zulu" in {repo.id for repo in collection.repositories(PROVIDER, Partition.ACTIVE)}

    async def test_burst_settles_with_one_refetch(self, make_view, make_repo, clock, display_names):
        source = InMemoryRepositoryCollection({PROVIDER: [make_repo(f"R{i}") for i in range(10)]})
        async with make_view(source, page_size=5) as view:
            await view.wait_preloaded()
            for repo_id in ("repo-r0", "repo-r1", "repo-r2"):
                await view.deactivate(repo_id)
                clock.advance(1.0)

            assert display_names(e.repository for e in view.staged_entries()) == ["R2", "R1", "R0"]
            assert display_names(view.current_page()) == ["R3", "R4"]
            calls = len(source.list_calls)

            assert clock.advance(3.0) == 1
            await view.wait_idle()

            assert len(source.list_calls) == calls + 1
            assert view.staged_entries() == ()
            assert display_names(view.current_page()) == ["R3", "R4", "R5", "R6", "R7"]

    async def test_deactivate_unknown_id(self, view):
        with pytest.raises(NotFoundException):
            await view.deactivate("repo-e")

    async def test_activate_unknown_id_once_loaded(self, view, collection):
        with pytest.raises(NotFoundException):
            await view.activate("repo-nope")
        assert collection.mutation_calls == []

    async def test_activate_while_preload_is_loading(self, make_view, collection, display_names):
        collection.hold(Partition.INACTIVE)
        async with make_view() as view:
            assert not view.inactive_items().is_fully_loaded

            outcome = await view.activate("repo-zulu")

            assert outcome.ok and not outcome.staged
            collection.release(Partition.INACTIVE)
            snapshot = await view.wait_preloaded()
            assert display_names(snapshot.items) == ["Xray", "Yankee"]
            assert await view.settle()

    async def test_mutation_failure_notifies_once(self, view, collection, notifier, display_names):
        collection.reject_next_mutation(MutationRejected(detail="Repository is busy"))

        outcome = await view.deactivate("repo-a")

        assert not outcome.ok
        notifier.error.assert_called_once_with("Repository is busy")
        assert display_names(view.current_page()) == ["A", "B"]
        assert view.staged_entries() == ()

    async def test_false_mutation_result_uses_default_message(self, view, collection, notifier):
        collection.set_active = AsyncMock(return_value=False)

        outcome = await view.deactivate("repo-a")

        assert outcome.message == FAILED_TO_DEACTIVATE
        notifier.error.assert_called_once_with(FAILED_TO_DEACTIVATE)

    async def test_failed_timer_settle_returns_to_settled(self, view, collection, clock, display_names):
        await view.deactivate("repo-a")
        collection.fail_next_list()

        clock.advance(3.0)
        await view.wait_idle()

        assert view.transition_state is TransitionState.SETTLED
        assert view.staged_entries() == ()
        assert display_names(view.current_page()) == ["B"]
