"""Base HTTP client for external API integrations.

Provides a base class for external service clients with:
- Connection pooling
- Request/response logging
- Timeout configuration
- httpx failures converted to ``TransportError``

Requests are never retried here; the user re-invokes the action instead.
"""

from __future__ import annotations

import logging
from typing import Any, Self

import httpx

from repo_pager.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class BaseHTTPClient:
    """Base HTTP client for external API integrations.

    Example:
        ```python
        class StatusClient(BaseHTTPClient):
            async def get_status(self) -> dict:
                return await self.post("/status", json={})
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Base URL for the API.
            timeout: Request timeout in seconds.
            headers: Default headers to include in all requests.
            transport: Optional httpx transport (``httpx.MockTransport`` in tests).
        """
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = headers or {}

        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=self.default_headers,
            transport=transport,
            limits=httpx.Limits(
                max_keepalive_connections=20,
                max_connections=100,
            ),
        )

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self.client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Make POST request to external API.

        Args:
            path: API endpoint path.
            json: JSON body data.
            headers: Additional headers for this request.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            JSON response data.

        Raises:
            TransportError: On timeouts, connection failures, non-2xx
                responses and bodies that are not a JSON object.
        """
        logger.debug(
            "POST request to %s%s",
            self.base_url,
            path,
            extra={"path": path, "has_json": json is not None},
        )

        try:
            response = await self.client.post(path, json=json, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(
                detail=f"Request to {self.base_url}{path} timed out",
                type="timeout",
                extra={"path": path},
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                detail=f"Request to {self.base_url}{path} failed: {e}",
                extra={"path": path},
            ) from e

        logger.debug(
            "POST response from %s%s",
            self.base_url,
            path,
            extra={
                "path": path,
                "status_code": response.status_code,
                "duration_ms": response.elapsed.total_seconds() * 1000,
            },
        )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "POST %s returned %d",
                path,
                response.status_code,
                extra={"path": path, "status_code": response.status_code},
            )
            raise TransportError(
                detail=f"{self.base_url}{path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                extra={"path": path},
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(
                detail=f"{self.base_url}{path} returned a non-JSON body",
                type="malformed-response",
                status_code=response.status_code,
                extra={"path": path},
            ) from e

        if not isinstance(payload, dict):
            raise TransportError(
                detail=f"{self.base_url}{path} returned a JSON {type(payload).__name__}",
                type="malformed-response",
                status_code=response.status_code,
                extra={"path": path},
            )
        return payload


__all__ = ["BaseHTTPClient"]
