"""Unit tests for the application exception hierarchy."""

from __future__ import annotations

import pytest

from repo_pager.core.exceptions import (
    AppException,
    GraphQLOperationError,
    MutationRejected,
    NotFoundException,
    TransportError,
    ValidationException,
)


@pytest.mark.unit
class TestAppException:
    def test_defaults(self):
        exc = AppException(detail="Something broke")

        assert str(exc) == "Something broke"
        assert exc.type == "about:blank"
        assert exc.title == "Error"
        assert exc.status_code is None
        assert exc.extra == {}

    def test_to_dict_merges_extra_and_status(self):
        exc = AppException(
            detail="Upstream failed",
            type="upstream",
            status_code=502,
            extra={"provider_id": "prov-1"},
        )

        assert exc.to_dict() == {
            "type": "upstream",
            "title": "Error",
            "detail": "Upstream failed",
            "status": 502,
            "provider_id": "prov-1",
        }


@pytest.mark.unit
class TestSubclasses:
    def test_transport_error(self):
        exc = TransportError(detail="Timed out", extra={"after": None})

        assert isinstance(exc, AppException)
        assert exc.type == "transport-error"
        assert exc.title == "Transport Error"

    def test_graphql_error_joins_messages(self):
        exc = GraphQLOperationError(["first", "second"], operation="ListThings")

        assert isinstance(exc, TransportError)
        assert exc.detail == "first; second"
        assert exc.messages == ["first", "second"]
        assert exc.extra["operation"] == "ListThings"

    def test_graphql_error_without_messages(self):
        exc = GraphQLOperationError([])

        assert exc.detail == "Unknown GraphQL error"

    def test_mutation_rejected_is_not_a_transport_error(self):
        exc = MutationRejected(detail="Locked")

        assert not isinstance(exc, TransportError)
        assert exc.type == "mutation-rejected"

    def test_not_found_and_validation(self):
        assert NotFoundException(detail="gone").status_code == 404
        assert isinstance(ValidationException(detail="bad page"), AppException)
