"""Tests for the build resource handler."""

import pytest

from azdo_resources_mcp_server.errors import InvalidIdentityError, RemoteRequestError
from azdo_resources_mcp_server.models import BuildConfig, BuildState
from azdo_resources_mcp_server.models.api import Build
from azdo_resources_mcp_server.services.build_resource import BuildResource
from azdo_resources_mcp_server.services.client import AzureDevOpsAPIError

PROJECT_ID = "11111111-1111-1111-1111-111111111111"
BUILD_URL = f"https://dev.azure.com/contoso/{PROJECT_ID}/_apis/build/Builds/42"


@pytest.fixture
def config():
    return BuildConfig(project_id=PROJECT_ID, definition_id=5, source_branch="refs/heads/main")


class TestBuildResource:
    @pytest.mark.asyncio
    async def test_create_sets_identity_from_build_id(self, clients, config):
        """Test create queues a build and takes its id and URL from the service."""
        clients.build_client.queue_build.return_value = Build(id=42)
        clients.build_client.get_build.return_value = Build(id=42, url=BUILD_URL)

        state = await BuildResource(clients).create(config)

        assert state.id == "42"
        assert state.url == BUILD_URL
        clients.build_client.queue_build.assert_awaited_once_with(PROJECT_ID, 5, "refs/heads/main")
        clients.build_client.get_build.assert_awaited_once_with(PROJECT_ID, 42)

    @pytest.mark.asyncio
    async def test_create_failure(self, clients, config):
        """Test a failed queue call raises RemoteRequestError and reads nothing."""
        clients.build_client.queue_build.side_effect = AzureDevOpsAPIError(
            "definition is disabled", status_code=400
        )

        with pytest.raises(RemoteRequestError) as exc_info:
            await BuildResource(clients).create(config)

        assert exc_info.value.operation == "create"
        assert "definition is disabled" in str(exc_info.value)
        clients.build_client.get_build.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_read_refreshes_url(self, clients, config):
        """Test read overwrites the URL from the service."""
        clients.build_client.get_build.return_value = Build(id=42, url=BUILD_URL)

        state = await BuildResource(clients).read(config, BuildState(id="42", url="stale"))

        assert state == BuildState(id="42", url=BUILD_URL)

    @pytest.mark.asyncio
    async def test_read_not_found(self, clients, config):
        """Test a missing build surfaces as a not-found RemoteRequestError."""
        clients.build_client.get_build.side_effect = AzureDevOpsAPIError("missing", status_code=404)

        with pytest.raises(RemoteRequestError) as exc_info:
            await BuildResource(clients).read(config, BuildState(id="42"))

        assert exc_info.value.not_found
        assert exc_info.value.resource_id == "42"

    @pytest.mark.asyncio
    async def test_read_invalid_identity(self, clients, config):
        """Test a non-numeric identity is rejected before calling the service."""
        with pytest.raises(InvalidIdentityError):
            await BuildResource(clients).read(config, BuildState(id="not-a-number"))

        clients.build_client.get_build.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_only_reads(self, clients, config):
        """Test update re-reads the build and never queues a new one."""
        clients.build_client.get_build.return_value = Build(id=42, url=BUILD_URL)

        state = await BuildResource(clients).update(config, BuildState(id="42"))

        assert state.url == BUILD_URL
        clients.build_client.queue_build.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_is_local(self, clients, config):
        """Test delete makes no remote call."""
        await BuildResource(clients).delete(config, BuildState(id="42", url=BUILD_URL))

        clients.build_client.queue_build.assert_not_awaited()
        clients.build_client.get_build.assert_not_awaited()
