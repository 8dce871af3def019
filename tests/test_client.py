"""Tests for the Azure DevOps REST clients."""

import base64
import json

import httpx
import pytest

from azdo_resources_mcp_server.config import Settings
from azdo_resources_mcp_server.errors import RemoteRequestError
from azdo_resources_mcp_server.models import BuildConfig
from azdo_resources_mcp_server.models.api import Change, GitCommitRef, GitPullRequest, GitPush, GitRefUpdate
from azdo_resources_mcp_server.services.build_resource import BuildResource
from azdo_resources_mcp_server.services.client import AggregatedClient, AzureDevOpsAPIError
from azdo_resources_mcp_server.services.scaffold import SCAFFOLD_COMMIT_MESSAGE

ORG_URL = "https://dev.azure.com/contoso/"
PROJECT_ID = "11111111-1111-1111-1111-111111111111"
REPO_PATH = f"/contoso/{PROJECT_ID}/_apis/git/repositories/repo1"
COMMIT = "abcdef0123456789abcdef0123456789abcd1234"
ZERO = "0" * 40


@pytest.fixture
def clients(tmp_path):
    """Create clients from test settings."""
    settings = Settings(
        org_service_url=ORG_URL,
        personal_access_token="test-pat",
        api_version="7.1",
        working_dir=tmp_path,
    )
    return AggregatedClient.from_settings(settings)


class TestBuildClient:
    @pytest.mark.asyncio
    async def test_queue_build(self, clients, respx_mock):
        """Test queue_build posts the definition and source branch."""
        route = respx_mock.post(path=f"/contoso/{PROJECT_ID}/_apis/build/builds").mock(
            return_value=httpx.Response(200, json={"id": 42, "buildNumber": "20240101.1"})
        )

        build = await clients.build_client.queue_build(PROJECT_ID, 5, "refs/heads/main")

        assert build.id == 42
        assert build.build_number == "20240101.1"
        request = route.calls.last.request
        assert json.loads(request.content) == {"definition": {"id": 5}, "sourceBranch": "refs/heads/main"}
        assert request.url.params["api-version"] == "7.1"
        expected_auth = base64.b64encode(b":test-pat").decode()
        assert request.headers["Authorization"] == f"Basic {expected_auth}"

    @pytest.mark.asyncio
    async def test_get_build(self, clients, respx_mock):
        """Test get_build fetches a build by id."""
        url = f"https://dev.azure.com/contoso/{PROJECT_ID}/_apis/build/Builds/42"
        respx_mock.get(path=f"/contoso/{PROJECT_ID}/_apis/build/builds/42").mock(
            return_value=httpx.Response(200, json={"id": 42, "url": url})
        )

        build = await clients.build_client.get_build(PROJECT_ID, 42)

        assert build.url == url

    @pytest.mark.asyncio
    async def test_not_found_error(self, clients, respx_mock):
        """Test error responses carry status code and service message."""
        respx_mock.get(path=f"/contoso/{PROJECT_ID}/_apis/build/builds/7").mock(
            return_value=httpx.Response(
                404,
                json={"message": "The requested build 7 could not be found.", "typeKey": "BuildNotFoundException"},
            )
        )

        with pytest.raises(AzureDevOpsAPIError) as exc_info:
            await clients.build_client.get_build(PROJECT_ID, 7)

        assert exc_info.value.not_found
        assert exc_info.value.type_key == "BuildNotFoundException"
        assert "could not be found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self, clients, respx_mock):
        """Test transport failures are wrapped without a status code."""
        respx_mock.get(path=f"/contoso/{PROJECT_ID}/_apis/build/builds/7").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(AzureDevOpsAPIError) as exc_info:
            await clients.build_client.get_build(PROJECT_ID, 7)

        assert exc_info.value.status_code is None
        assert not exc_info.value.not_found


class TestUnusableResponses:
    @pytest.mark.asyncio
    async def test_sign_in_page(self, clients, respx_mock):
        """Test a 2xx HTML page (rejected PAT) raises an API error with the status and body."""
        respx_mock.post(path=f"/contoso/{PROJECT_ID}/_apis/build/builds").mock(
            return_value=httpx.Response(
                203,
                headers={"content-type": "text/html; charset=utf-8"},
                text="<html><head><title>Azure DevOps Services | Sign In</title></head></html>",
            )
        )

        with pytest.raises(AzureDevOpsAPIError) as exc_info:
            await clients.build_client.queue_build(PROJECT_ID, 5, "refs/heads/main")

        assert exc_info.value.status_code == 203
        assert "text/html" in str(exc_info.value)
        assert "Sign In" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_json(self, clients, respx_mock):
        respx_mock.get(path=f"/contoso/{PROJECT_ID}/_apis/build/builds/42").mock(
            return_value=httpx.Response(200, headers={"content-type": "application/json"}, text="{not json")
        )

        with pytest.raises(AzureDevOpsAPIError) as exc_info:
            await clients.build_client.get_build(PROJECT_ID, 42)

        assert exc_info.value.status_code == 200
        assert "malformed JSON" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_body_missing_required_field(self, clients, respx_mock):
        """Test a JSON body that does not describe a build raises an API error."""
        respx_mock.post(path=f"/contoso/{PROJECT_ID}/_apis/build/builds").mock(
            return_value=httpx.Response(200, json={"status": "notStarted"})
        )

        with pytest.raises(AzureDevOpsAPIError) as exc_info:
            await clients.build_client.queue_build(PROJECT_ID, 5, "refs/heads/main")

        assert "Unexpected Build" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_refs_collection_not_a_list(self, clients, respx_mock):
        respx_mock.get(path=f"{REPO_PATH}/refs").mock(
            return_value=httpx.Response(200, json={"count": 1, "value": "refs/heads/main"})
        )

        with pytest.raises(AzureDevOpsAPIError):
            await clients.git_client.get_refs(PROJECT_ID, "repo1")

    @pytest.mark.asyncio
    async def test_handler_wraps_sign_in_page(self, clients, respx_mock):
        """Test the build handler surfaces an HTML answer as a remote request error."""
        respx_mock.post(path=f"/contoso/{PROJECT_ID}/_apis/build/builds").mock(
            return_value=httpx.Response(203, headers={"content-type": "text/html"}, text="<html>Sign In</html>")
        )
        config = BuildConfig(project_id=PROJECT_ID, definition_id=5, source_branch="refs/heads/main")

        with pytest.raises(RemoteRequestError) as exc_info:
            await BuildResource(clients).create(config)

        assert exc_info.value.status_code == 203
        assert exc_info.value.operation == "create"


class TestGitClient:
    @pytest.mark.asyncio
    async def test_get_refs(self, clients, respx_mock):
        """Test get_refs returns refs in service order."""
        respx_mock.get(path=f"{REPO_PATH}/refs").mock(
            return_value=httpx.Response(
                200,
                json={
                    "count": 2,
                    "value": [
                        {"name": "refs/heads/main", "objectId": COMMIT, "url": "https://x/refs/main"},
                        {"name": "refs/heads/dev", "objectId": COMMIT, "url": "https://x/refs/dev"},
                    ],
                },
            )
        )

        refs = await clients.git_client.get_refs(PROJECT_ID, "repo1")

        assert [ref.name for ref in refs] == ["refs/heads/main", "refs/heads/dev"]
        assert refs[0].object_id == COMMIT

    @pytest.mark.asyncio
    async def test_update_refs(self, clients, respx_mock):
        """Test update_refs sends a batch and parses per-ref results."""
        route = respx_mock.post(path=f"{REPO_PATH}/refs").mock(
            return_value=httpx.Response(
                200,
                json={
                    "count": 1,
                    "value": [
                        {
                            "name": "refs/heads/feature",
                            "oldObjectId": ZERO,
                            "newObjectId": COMMIT,
                            "success": False,
                            "customMessage": "TF402455: Pushes to this branch are not permitted",
                            "updateStatus": "rejectedByPolicy",
                        }
                    ],
                },
            )
        )

        results = await clients.git_client.update_refs(
            PROJECT_ID,
            "repo1",
            [GitRefUpdate(name="refs/heads/feature", old_object_id=ZERO, new_object_id=COMMIT)],
        )

        assert json.loads(route.calls.last.request.content) == [
            {"name": "refs/heads/feature", "oldObjectId": ZERO, "newObjectId": COMMIT}
        ]
        assert not results[0].success
        assert results[0].update_status == "rejectedByPolicy"
        assert results[0].custom_message.startswith("TF402455")

    @pytest.mark.asyncio
    async def test_create_push_payload(self, clients, respx_mock):
        """Test create_push serializes ref updates and add changes."""
        route = respx_mock.post(path=f"{REPO_PATH}/pushes").mock(
            return_value=httpx.Response(201, json={"pushId": 9, "url": "https://x/pushes/9"})
        )
        push = GitPush(
            ref_updates=[GitRefUpdate(name="refs/heads/feature", old_object_id=COMMIT)],
            commits=[GitCommitRef(comment=SCAFFOLD_COMMIT_MESSAGE, changes=[Change.add("src/a.txt", "YQ==")])],
        )

        result = await clients.git_client.create_push(PROJECT_ID, "repo1", push)

        assert result.push_id == 9
        assert json.loads(route.calls.last.request.content) == {
            "refUpdates": [{"name": "refs/heads/feature", "oldObjectId": COMMIT}],
            "commits": [
                {
                    "comment": "Scaffolding content",
                    "changes": [
                        {
                            "changeType": "add",
                            "item": {"path": "src/a.txt"},
                            "newContent": {"content": "YQ==", "contentType": "base64encoded"},
                        }
                    ],
                }
            ],
        }

    @pytest.mark.asyncio
    async def test_create_pull_request(self, clients, respx_mock):
        """Test create_pull_request posts the pull request fields."""
        route = respx_mock.post(path=f"{REPO_PATH}/pullrequests").mock(
            return_value=httpx.Response(201, json={"pullRequestId": 17, "url": "https://x/pullRequests/17"})
        )

        pull_request = await clients.git_client.create_pull_request(
            PROJECT_ID,
            "repo1",
            GitPullRequest(
                title="Add feature",
                description="",
                source_ref_name="refs/heads/feature",
                target_ref_name="refs/heads/main",
            ),
        )

        assert pull_request.pull_request_id == 17
        assert json.loads(route.calls.last.request.content) == {
            "title": "Add feature",
            "description": "",
            "sourceRefName": "refs/heads/feature",
            "targetRefName": "refs/heads/main",
        }

    @pytest.mark.asyncio
    async def test_get_pull_request_by_id(self, clients, respx_mock):
        """Test get_pull_request_by_id uses the project scoped endpoint."""
        respx_mock.get(path=f"/contoso/{PROJECT_ID}/_apis/git/pullrequests/17").mock(
            return_value=httpx.Response(200, json={"pullRequestId": 17, "url": "https://x/pullRequests/17"})
        )

        pull_request = await clients.git_client.get_pull_request_by_id(PROJECT_ID, 17)

        assert pull_request.url == "https://x/pullRequests/17"
