"""Cursor encoding and decoding for keyset pagination.

Cursors are opaque strings that encode the position after the last item of a
window. They contain the sort key values of that item, so the next fetch can
seek directly past it even if earlier items were removed in the meantime.

The cursor format is:
1. JSON object with sort key values
2. Base64 URL-safe encoded for use in URLs and GraphQL variables

Example cursor payload:
    {"v": {"name": "tabby", "id": "repo-7"}}

Encoded: eyJ2Ijp7Im5hbWUiOiJ0YWJieSIsImlkIjoicmVwby03In19
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import BaseModel, Field


class CursorData(BaseModel):
    """Internal representation of cursor data.

    Attributes:
        values: Dictionary mapping sort key names to their values
    """

    values: dict[str, Any] = Field(
        description="Sort key values for seeking"
    )

    model_config = {"frozen": True}


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        cursor = CursorCodec.encode(CursorData(values={"name": "tabby", "id": "repo-7"}))
        data = CursorCodec.decode(cursor)
        print(data.values)  # {"name": "tabby", "id": "repo-7"}
    """

    @staticmethod
    def encode(data: CursorData) -> str:
        """Encode cursor data to an opaque string.

        Args:
            data: Cursor data with sort key values

        Returns:
            URL-safe base64 encoded string
        """
        json_str = json.dumps({"v": data.values}, separators=(",", ":"), sort_keys=True)
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @staticmethod
    def decode(cursor: str) -> CursorData:
        """Decode a cursor string to cursor data.

        Args:
            cursor: URL-safe base64 encoded cursor string

        Returns:
            CursorData with sort key values

        Raises:
            ValueError: If cursor is invalid or corrupted
        """
        try:
            json_str = base64.urlsafe_b64decode(cursor.encode()).decode()
            payload = json.loads(json_str)
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid cursor: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("v"), dict):
            raise ValueError("Invalid cursor: missing sort key values")
        return CursorData(values=payload["v"])

    @staticmethod
    def create_cursor(row: Any, sort_fields: list[str]) -> str:
        """Create a cursor from an item.

        Args:
            row: Object exposing the sort fields as attributes
            sort_fields: List of attribute names to include in cursor

        Returns:
            Encoded cursor string

        Example:
            cursor = CursorCodec.create_cursor(repo, sort_fields=["display_name", "id"])
        """
        values = {field: getattr(row, field, None) for field in sort_fields}
        return CursorCodec.encode(CursorData(values=values))


__all__ = ["CursorCodec", "CursorData"]
