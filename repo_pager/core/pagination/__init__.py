"""Pagination over forward-only cursor APIs.

The remote collection API only moves forward (``first`` / ``after``), yet the
views built on it need arbitrary page access, a fully preloaded sibling
partition and a page index that survives items disappearing:

- ``CursorWalker``: one forward fetch step; the only caller of the API
- ``BackwardPaginator``: page N by re-walking from the start
- ``FullCollectionPreloader``: a whole partition, sorted, in memory
- ``AccumulatedPager``: in-order browsing with local page slices
- ``PageClamp``: page index arithmetic after removals

Basic usage:
    walker = CursorWalker(client, owner_ids=[provider_id], page_size=20)
    page = await BackwardPaginator(walker).fetch_page(3)
"""

from repo_pager.core.pagination.accumulated import AccumulatedPager
from repo_pager.core.pagination.backward import BackwardPaginator
from repo_pager.core.pagination.clamp import PageClamp
from repo_pager.core.pagination.cursor import CursorCodec, CursorData
from repo_pager.core.pagination.preload import FullCollectionPreloader, PreloadSnapshot
from repo_pager.core.pagination.schemas import (
    Connection,
    Edge,
    KnownExtent,
    PageInfo,
    PageWindow,
    ResolvedPage,
)
from repo_pager.core.pagination.walker import CollectionSource, CursorWalker, Partition

__all__ = [
    "AccumulatedPager",
    "BackwardPaginator",
    "CollectionSource",
    # Wire schemas
    "Connection",
    # Cursor utilities
    "CursorCodec",
    "CursorData",
    "CursorWalker",
    "Edge",
    "FullCollectionPreloader",
    "KnownExtent",
    "PageClamp",
    "PageInfo",
    "PageWindow",
    "Partition",
    "PreloadSnapshot",
    "ResolvedPage",
]
