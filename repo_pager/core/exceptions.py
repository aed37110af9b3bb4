"""Custom exception classes for the repository pager."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class. The fields mirror
    RFC 7807 problem details so failures can be rendered or logged uniformly.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier.
        title: Short, human-readable summary of the problem type.
        status_code: Upstream HTTP status code, when one is known.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            detail="Provider returned an unexpected payload",
            type="unexpected-payload",
            extra={"provider_id": "abc123"},
        )
    """

    default_title = "Error"

    def __init__(
        self,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            status_code: Upstream HTTP status code, if any.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type
        self.title = title or self.default_title
        self.status_code = status_code
        self.extra = extra or {}
        super().__init__(detail)

    def to_dict(self) -> dict[str, Any]:
        """Render the exception as a problem-details style mapping."""
        payload: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
        }
        if self.status_code is not None:
            payload["status"] = self.status_code
        if self.extra:
            payload.update(self.extra)
        return payload


class TransportError(AppException):
    """Raised when a call to the remote collection API fails or times out.

    Callers never retry automatically; the user re-invokes the action.

    Example:
        raise TransportError(
            detail="Timed out listing repositories",
            extra={"partition": "active", "after": None},
        )
    """

    default_title = "Transport Error"

    def __init__(
        self,
        detail: str,
        type: str = "transport-error",
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type=type,
            title=self.default_title,
            status_code=status_code,
            extra=extra,
        )


class GraphQLOperationError(TransportError):
    """Raised when a GraphQL response carries an ``errors`` array.

    Attributes:
        messages: The ``message`` of every error reported by the server.
    """

    default_title = "GraphQL Error"

    def __init__(
        self,
        messages: list[str],
        operation: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.messages = messages or ["Unknown GraphQL error"]
        self.operation = operation
        context = {"operation": operation, **(extra or {})}
        super().__init__(
            detail="; ".join(self.messages),
            type="graphql-error",
            extra=context,
        )


class MutationRejected(AppException):
    """Raised when the server declines an activate/deactivate mutation.

    Example:
        raise MutationRejected(
            detail="Repository is locked by a running job",
            extra={"repository_id": "repo-1", "active": False},
        )
    """

    default_title = "Mutation Rejected"

    def __init__(
        self,
        detail: str,
        type: str = "mutation-rejected",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type=type,
            title=self.default_title,
            extra=extra,
        )


class NotFoundException(AppException):
    """Raised when a referenced provider or repository has no match.

    Example:
        raise NotFoundException(
            detail="Provider abc123 not found",
            type="provider-not-found",
            extra={"provider_id": "abc123"},
        )
    """

    default_title = "Not Found"

    def __init__(
        self,
        detail: str,
        type: str = "not-found",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type=type,
            title=self.default_title,
            status_code=404,
            extra=extra,
        )


class ValidationException(AppException):
    """Raised for invalid arguments such as a page index below 1."""

    default_title = "Validation Error"

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type=type,
            title=self.default_title,
            extra=extra,
        )


__all__ = [
    "AppException",
    "GraphQLOperationError",
    "MutationRejected",
    "NotFoundException",
    "TransportError",
    "ValidationException",
]
