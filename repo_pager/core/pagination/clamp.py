"""Keep a 1-based page index inside the range of pages that actually exist."""

from __future__ import annotations

import math

from repo_pager.core.pagination.schemas import KnownExtent


class PageClamp:
    """Page index arithmetic applied after every page-count-affecting event.

    The exact item count is never known up front with a cursor API, so the
    clamp works from two signals: whether a removal emptied the current page,
    and the lower bound on the item count learned from forward fetches.

    A removal steps back at most one page, even when several removals land
    before the next fetch.
    """

    def __init__(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size

    def after_removal(self, current: int, removed_sole_item: bool) -> int:
        """Page to re-fetch after an item left the current page.

        Args:
            current: Page index being viewed.
            removed_sole_item: Whether the removed item was the only one
                left on that page.

        Returns:
            ``current - 1`` when the page was emptied and is not the first,
            otherwise ``current`` (later items shift into the shorter page).
        """
        if removed_sole_item and current > 1:
            return current - 1
        return max(1, current)

    def last_page_for(self, count: int) -> int:
        """Last page index holding ``count`` items (page 1 always exists)."""
        return max(1, math.ceil(count / self.page_size))

    def clamp_to_count(self, current: int, count: int) -> int:
        """Clamp ``current`` down to the last page implied by ``count``."""
        return max(1, min(current, self.last_page_for(count)))

    def clamp_to_extent(self, current: int, extent: KnownExtent | None) -> int:
        """Clamp ``current`` down to the last page implied by a forward walk.

        Only an exhausted walk proves the collection ends; a partial walk is a
        lower bound and never clamps below pages it has not reached.
        """
        if extent is None or not extent.exhausted:
            return max(1, current)
        return max(1, min(current, extent.last_page))


__all__ = ["PageClamp"]
