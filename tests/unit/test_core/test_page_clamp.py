"""Unit tests for PageClamp."""

from __future__ import annotations

import pytest

from repo_pager.core.pagination import KnownExtent, PageClamp


@pytest.mark.unit
class TestPageClamp:
    @pytest.mark.parametrize(
        ("current", "sole", "expected"),
        [(3, True, 2), (3, False, 3), (1, True, 1), (2, True, 1)],
    )
    def test_after_removal(self, current, sole, expected):
        assert PageClamp(2).after_removal(current, removed_sole_item=sole) == expected

    def test_after_removal_steps_back_one_page_only(self):
        clamp = PageClamp(2)

        # Two emptying removals seen from the same page still land one page back.
        assert clamp.after_removal(4, True) == 3
        assert clamp.after_removal(4, True) == 3

    @pytest.mark.parametrize(
        ("current", "count", "expected"),
        [(3, 5, 3), (3, 4, 2), (3, 0, 1), (1, 100, 1)],
    )
    def test_clamp_to_count(self, current, count, expected):
        assert PageClamp(2).clamp_to_count(current, count) == expected

    def test_clamp_to_extent_only_trusts_exhausted_walks(self):
        clamp = PageClamp(2)
        partial = KnownExtent(items_seen=2, exhausted=False, page_size=2)
        exhausted = KnownExtent(items_seen=2, exhausted=True, page_size=2)

        assert clamp.clamp_to_extent(3, partial) == 3
        assert clamp.clamp_to_extent(3, exhausted) == 1
        assert clamp.clamp_to_extent(3, None) == 3

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            PageClamp(0)
