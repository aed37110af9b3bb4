"""Minimal GraphQL-over-HTTP client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from repo_pager.core.exceptions import GraphQLOperationError, TransportError
from repo_pager.infra.external.base_client import BaseHTTPClient

logger = logging.getLogger(__name__)


class GraphQLClient(BaseHTTPClient):
    """POST GraphQL documents to a single endpoint and unwrap ``data``.

    Usage:
        async with GraphQLClient("http://localhost:8080", token="auth-token") as client:
            data = await client.execute(QUERY, {"first": 20}, operation="ListThings")
    """

    def __init__(
        self,
        base_url: str,
        *,
        path: str = "/graphql",
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )
        self.path = path

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        operation: str | None = None,
    ) -> dict[str, Any]:
        """Run one GraphQL operation.

        Returns:
            The ``data`` object of the response.

        Raises:
            GraphQLOperationError: If the response carries ``errors``.
            TransportError: If the request failed or ``data`` is missing.
        """
        body: dict[str, Any] = {"query": query, "variables": variables or {}}
        if operation:
            body["operationName"] = operation

        payload = await self.post(self.path, json=body)

        errors = payload.get("errors")
        if errors:
            messages = [
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            ]
            logger.warning(
                "GraphQL %s returned errors: %s",
                operation or "operation",
                "; ".join(messages),
            )
            raise GraphQLOperationError(messages, operation=operation)

        data = payload.get("data")
        if not isinstance(data, dict):
            raise TransportError(
                detail=f"GraphQL {operation or 'operation'} returned no data",
                type="malformed-response",
                extra={"operation": operation},
            )
        return data


__all__ = ["GraphQLClient"]
