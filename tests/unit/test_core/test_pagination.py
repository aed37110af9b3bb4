"""Unit tests for the Relay wire schemas, page windows and cursors."""
from __future__ import annotations

import base64
import json

import pytest

from repo_pager.core.pagination.cursor import CursorCodec, CursorData
from repo_pager.core.pagination.schemas import (
    Connection,
    KnownExtent,
    PageInfo,
    PageWindow,
)
from repo_pager.features.repositories import IntegratedRepository

# ──────────────────────────────────────────────────────────────
# Cursors
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestCursorCodec:
    """Tests for CursorCodec encode/decode."""

    def test_encode_uses_short_values_key(self):
        encoded = CursorCodec.encode(CursorData(values={"id": "repo-7", "display_name": "tabby"}))

        decoded = json.loads(base64.urlsafe_b64decode(encoded.encode()).decode())
        assert decoded == {"v": {"display_name": "tabby", "id": "repo-7"}}

    def test_decode_restores_values(self):
        encoded = CursorCodec.encode(CursorData(values={"id": "repo-7"}))

        assert CursorCodec.decode(encoded).values == {"id": "repo-7"}

    def test_create_cursor_reads_attributes(self, make_repo):
        cursor = CursorCodec.create_cursor(make_repo("Alpha"), ["display_name", "id"])

        assert CursorCodec.decode(cursor).values == {"display_name": "Alpha", "id": "repo-alpha"}

    @pytest.mark.parametrize("bad", ["not-base64!!", base64.urlsafe_b64encode(b"[1]").decode()])
    def test_decode_rejects_garbage(self, bad):
        with pytest.raises(ValueError, match="Invalid cursor"):
            CursorCodec.decode(bad)


# ──────────────────────────────────────────────────────────────
# Connection / PageWindow
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestConnection:
    def test_parses_camel_case_payload(self):
        payload = {
            "edges": [
                {
                    "node": {
                        "id": "repo-1",
                        "displayName": "tabby",
                        "gitUrl": "https://github.com/tabbyml/tabby",
                        "active": True,
                        "jobInfo": {
                            "lastJobRun": {"id": "job-1", "exitCode": None},
                            "command": "index",
                        },
                    },
                    "cursor": "c1",
                }
            ],
            "pageInfo": {"hasNextPage": True, "hasPreviousPage": False, "endCursor": "c1"},
        }

        connection = Connection[IntegratedRepository].model_validate(payload)
        window = connection.to_window()

        assert connection.nodes[0].display_name == "tabby"
        assert connection.nodes[0].job_info.has_running_job
        assert window.end_cursor == "c1"
        assert window.has_next_page
        assert not window.is_terminal

    def test_defaults_to_empty_terminal(self):
        window = Connection[IntegratedRepository].model_validate({}).to_window()

        assert len(window) == 0
        assert window.is_terminal

    def test_page_info_accepts_snake_case(self):
        info = PageInfo(has_next_page=True, end_cursor="abc")

        assert info.model_dump(by_alias=True)["hasNextPage"] is True


@pytest.mark.unit
class TestPageWindow:
    def test_missing_cursor_is_terminal(self, make_repo):
        window = PageWindow(items=(make_repo("A"),), end_cursor=None, has_next_page=True)

        assert window.is_terminal

    def test_without_filters_ids(self, make_repo):
        window = PageWindow(items=(make_repo("A"), make_repo("B")), end_cursor="c", has_next_page=True)

        remaining = window.without({"repo-a"})

        assert [repo.id for repo in remaining.items] == ["repo-b"]
        assert remaining.end_cursor == "c"
        assert len(window) == 2

    def test_empty(self):
        assert PageWindow.empty().is_terminal


@pytest.mark.unit
@pytest.mark.parametrize(
    ("items_seen", "page_size", "last_page"),
    [(0, 2, 1), (1, 2, 1), (4, 2, 2), (5, 2, 3), (20, 20, 1)],
)
def test_known_extent_last_page(items_seen, page_size, last_page):
    extent = KnownExtent(items_seen=items_seen, exhausted=True, page_size=page_size)

    assert extent.last_page == last_page
