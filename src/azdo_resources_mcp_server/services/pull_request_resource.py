"""Pull request resource."""

import logging

from ..errors import RemoteRequestError
from ..models.api import GitPullRequest
from ..models.schemas import PullRequestConfig, PullRequestState
from .build_resource import parse_numeric_identity
from .client import AggregatedClient, AzureDevOpsAPIError

logger = logging.getLogger(__name__)


def flatten_pull_request(pull_request: GitPullRequest) -> PullRequestState:
    return PullRequestState(id=str(pull_request.pull_request_id), url=pull_request.url)


class PullRequestResource:
    """Handler for the pull request resource. Update re-reads, delete is local only."""

    resource_type = "pull_request"
    force_new_fields: tuple[str, ...] = ()

    def __init__(self, clients: AggregatedClient):
        self.clients = clients

    async def create(self, config: PullRequestConfig) -> PullRequestState:
        to_create = GitPullRequest(
            title=config.title,
            description=config.description,
            source_ref_name=config.source_ref_name,
            target_ref_name=config.target_ref_name,
        )
        try:
            pull_request = await self.clients.git_client.create_pull_request(
                config.project_id, config.repo_name, to_create
            )
        except AzureDevOpsAPIError as e:
            raise RemoteRequestError(
                f"Error creating pull request from {config.source_ref_name} into {config.target_ref_name}",
                operation="create",
                resource_type=self.resource_type,
                cause=e,
            ) from e

        logger.info("Created pull request %s in %s", pull_request.pull_request_id, config.repo_name)
        return await self.read(config, flatten_pull_request(pull_request))

    async def read(self, config: PullRequestConfig, state: PullRequestState) -> PullRequestState:
        pull_request_id = parse_numeric_identity(state.id, self.resource_type, "read")
        try:
            pull_request = await self.clients.git_client.get_pull_request_by_id(
                config.project_id, pull_request_id
            )
        except AzureDevOpsAPIError as e:
            raise RemoteRequestError(
                f"Error fetching pull request {pull_request_id} in Azure DevOps",
                operation="read",
                resource_type=self.resource_type,
                resource_id=state.id,
                cause=e,
            ) from e
        return flatten_pull_request(pull_request)

    async def update(self, config: PullRequestConfig, state: PullRequestState) -> PullRequestState:
        return await self.read(config, state)

    async def delete(self, config: PullRequestConfig, state: PullRequestState) -> None:
        logger.debug("Dropping pull request %s from local state", state.id)
