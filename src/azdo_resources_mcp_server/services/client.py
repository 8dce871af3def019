"""Async clients for the Azure DevOps REST API."""

import base64
import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from ..config import Settings
from ..models.api import (
    Build,
    GitPullRequest,
    GitPush,
    GitRef,
    GitRefUpdate,
    GitRefUpdateResult,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Longest piece of an unexpected response body quoted in an error message
BODY_SNIPPET_LENGTH = 200


class AzureDevOpsAPIError(Exception):
    """Raised when a request to Azure DevOps fails or returns an error status."""

    def __init__(self, message: str, status_code: int | None = None, type_key: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.type_key = type_key

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def _segment(value: str | int) -> str:
    return quote(str(value), safe="")


def _snippet(text: str) -> str:
    text = " ".join(text.split())
    if len(text) > BODY_SNIPPET_LENGTH:
        return text[:BODY_SNIPPET_LENGTH] + "..."
    return text


def _error_from_response(response: httpx.Response) -> AzureDevOpsAPIError:
    message = response.text or response.reason_phrase
    type_key = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or message
        type_key = body.get("typeKey")
    return AzureDevOpsAPIError(
        f"{response.request.method} {response.request.url.path} returned {response.status_code}: {message}",
        status_code=response.status_code,
        type_key=type_key,
    )


def _json_body(response: httpx.Response) -> Any:
    """
    Decode a successful response.

    Azure DevOps answers an unauthenticated call with a 203 HTML sign-in page,
    so a 2xx status alone does not mean the body is usable.
    """
    request = f"{response.request.method} {response.request.url.path}"
    content_type = response.headers.get("content-type", "")
    if "json" not in content_type:
        raise AzureDevOpsAPIError(
            f"{request} returned {response.status_code} with non-JSON content "
            f"({content_type or 'no content type'}): {_snippet(response.text)}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as e:
        raise AzureDevOpsAPIError(
            f"{request} returned {response.status_code} with a malformed JSON body: {_snippet(response.text)}",
            status_code=response.status_code,
        ) from e


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise AzureDevOpsAPIError(f"Unexpected {model.__name__} in response: {e}") from e


def _parse_values(model: type[ModelT], data: Any) -> list[ModelT]:
    """Parse the "value" array of a collection response."""
    if not isinstance(data, dict) or not isinstance(data.get("value", []), list):
        raise AzureDevOpsAPIError(f"Unexpected {model.__name__} collection in response: {_snippet(str(data))}")
    return [_parse(model, item) for item in data.get("value", [])]


class AzureDevOpsClient:
    """Simple async client for one area of the Azure DevOps REST API."""

    def __init__(self, organization_url: str, token: str, api_version: str = "7.1"):
        self.base_url = organization_url.rstrip("/")
        self.api_version = api_version
        # PAT auth: any username, the token as password
        credentials = base64.b64encode(f":{token}".encode()).decode()
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Basic {credentials}",
        }
        self.timeout = httpx.Timeout(connect=5.0, read=60.0, write=10.0, pool=5.0)

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}/{path}"
        logger.debug("%s %s", method, url)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.request(
                    method,
                    url,
                    json=json,
                    params={"api-version": self.api_version},
                    headers=self.headers,
                )
            except httpx.HTTPError as e:
                raise AzureDevOpsAPIError(f"{method} {url} failed: {e}") from e
        if response.is_error:
            raise _error_from_response(response)
        return _json_body(response)


class BuildClient(AzureDevOpsClient):
    """Client for the build area."""

    async def queue_build(self, project: str, definition_id: int, source_branch: str) -> Build:
        body = {"definition": {"id": definition_id}, "sourceBranch": source_branch}
        data = await self._request("POST", f"{_segment(project)}/_apis/build/builds", json=body)
        return _parse(Build, data)

    async def get_build(self, project: str, build_id: int) -> Build:
        data = await self._request("GET", f"{_segment(project)}/_apis/build/builds/{_segment(build_id)}")
        return _parse(Build, data)


class GitClient(AzureDevOpsClient):
    """Client for the git area: refs, pushes and pull requests."""

    def _repository_path(self, project: str, repository_id: str) -> str:
        return f"{_segment(project)}/_apis/git/repositories/{_segment(repository_id)}"

    async def get_refs(self, project: str, repository_id: str) -> list[GitRef]:
        data = await self._request("GET", f"{self._repository_path(project, repository_id)}/refs")
        return _parse_values(GitRef, data)

    async def update_refs(
        self, project: str, repository_id: str, ref_updates: list[GitRefUpdate]
    ) -> list[GitRefUpdateResult]:
        data = await self._request(
            "POST",
            f"{self._repository_path(project, repository_id)}/refs",
            json=[update.to_payload() for update in ref_updates],
        )
        return _parse_values(GitRefUpdateResult, data)

    async def create_push(self, project: str, repository_id: str, push: GitPush) -> GitPush:
        data = await self._request(
            "POST",
            f"{self._repository_path(project, repository_id)}/pushes",
            json=push.to_payload(),
        )
        return _parse(GitPush, data)

    async def create_pull_request(
        self, project: str, repository_id: str, pull_request: GitPullRequest
    ) -> GitPullRequest:
        data = await self._request(
            "POST",
            f"{self._repository_path(project, repository_id)}/pullrequests",
            json=pull_request.to_payload(),
        )
        return _parse(GitPullRequest, data)

    async def get_pull_request_by_id(self, project: str, pull_request_id: int) -> GitPullRequest:
        data = await self._request(
            "GET", f"{_segment(project)}/_apis/git/pullrequests/{_segment(pull_request_id)}"
        )
        return _parse(GitPullRequest, data)


class AggregatedClient:
    """The pre-authenticated sub-clients shared by every resource handler."""

    def __init__(self, build_client: BuildClient, git_client: GitClient):
        self.build_client = build_client
        self.git_client = git_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "AggregatedClient":
        kwargs = {
            "organization_url": settings.org_service_url,
            "token": settings.personal_access_token,
            "api_version": settings.api_version,
        }
        return cls(build_client=BuildClient(**kwargs), git_client=GitClient(**kwargs))
