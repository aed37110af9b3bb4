"""Unit tests for ProviderService and the integration schemas."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from repo_pager.core.exceptions import NotFoundException
from repo_pager.features.providers import (
    Integration,
    IntegrationKind,
    IntegrationStatus,
    ProviderService,
)


@pytest.mark.unit
class TestIntegrationSchemas:
    @pytest.mark.parametrize(
        ("status", "label"),
        [
            (IntegrationStatus.READY, "Ready"),
            (IntegrationStatus.FAILED, "Error"),
            (IntegrationStatus.PENDING, "Pending"),
        ],
    )
    def test_status_labels(self, status, label):
        assert status.label == label

    @pytest.mark.parametrize(
        ("raw", "kind"),
        [
            ("github", IntegrationKind.GITHUB),
            ("gitlab-self-hosted", IntegrationKind.GITLAB_SELF_HOSTED),
            ("GITHUB_SELF_HOSTED", IntegrationKind.GITHUB_SELF_HOSTED),
        ],
    )
    def test_kind_parse(self, raw, kind):
        assert IntegrationKind.parse(raw) is kind

    def test_parses_wire_payload(self):
        integration = Integration.model_validate(
            {"id": "p1", "displayName": "GitLab", "kind": "GITLAB", "status": "FAILED"}
        )

        assert integration.display_name == "GitLab"
        assert not integration.is_ready


@pytest.mark.unit
class TestProviderService:
    async def test_returns_matching_provider(self, collection, provider):
        service = ProviderService(collection)

        found = await service.get_provider(provider.id, IntegrationKind.GITHUB)

        assert found == provider

    async def test_kind_mismatch_is_not_found(self, collection, provider):
        with pytest.raises(NotFoundException):
            await ProviderService(collection).get_provider(provider.id, IntegrationKind.GITLAB)

    async def test_empty_id_skips_the_server(self):
        client = AsyncMock()

        with pytest.raises(NotFoundException):
            await ProviderService(client).get_provider("", IntegrationKind.GITHUB)

        client.list_integrations.assert_not_called()

    async def test_ignores_unrelated_results(self, provider):
        client = AsyncMock()
        client.list_integrations.return_value = [provider.model_copy(update={"id": "other"})]

        with pytest.raises(NotFoundException):
            await ProviderService(client).get_provider(provider.id, IntegrationKind.GITHUB)
