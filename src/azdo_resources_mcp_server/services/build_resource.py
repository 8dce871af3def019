"""Build resource: queues a build run and reflects its id and URL."""

import logging

from ..errors import InvalidIdentityError, RemoteRequestError
from ..models.api import Build
from ..models.schemas import BuildConfig, BuildState
from .client import AggregatedClient, AzureDevOpsAPIError

logger = logging.getLogger(__name__)


def parse_numeric_identity(resource_id: str | None, resource_type: str, operation: str) -> int:
    """Convert a stored identity back into the integer id the API expects."""
    try:
        return int(resource_id)
    except (TypeError, ValueError) as e:
        raise InvalidIdentityError(
            f"Stored identity {resource_id!r} is not a numeric {resource_type} id",
            operation=operation,
            resource_type=resource_type,
            resource_id=resource_id,
        ) from e


def flatten_build(build: Build) -> BuildState:
    return BuildState(id=str(build.id), url=build.url)


class BuildResource:
    """Handler for the build resource. Builds are immutable once queued."""

    resource_type = "build"
    force_new_fields: tuple[str, ...] = ()

    def __init__(self, clients: AggregatedClient):
        self.clients = clients

    async def create(self, config: BuildConfig) -> BuildState:
        try:
            build = await self.clients.build_client.queue_build(
                config.project_id, config.definition_id, config.source_branch
            )
        except AzureDevOpsAPIError as e:
            raise RemoteRequestError(
                "Error queuing build in Azure DevOps",
                operation="create",
                resource_type=self.resource_type,
                cause=e,
            ) from e

        logger.info("Queued build %s for definition %s", build.id, config.definition_id)
        return await self.read(config, BuildState(id=str(build.id)))

    async def read(self, config: BuildConfig, state: BuildState) -> BuildState:
        build_id = parse_numeric_identity(state.id, self.resource_type, "read")
        try:
            build = await self.clients.build_client.get_build(config.project_id, build_id)
        except AzureDevOpsAPIError as e:
            raise RemoteRequestError(
                f"Error fetching build {build_id} in Azure DevOps",
                operation="read",
                resource_type=self.resource_type,
                resource_id=state.id,
                cause=e,
            ) from e
        return flatten_build(build)

    async def update(self, config: BuildConfig, state: BuildState) -> BuildState:
        return await self.read(config, state)

    async def delete(self, config: BuildConfig, state: BuildState) -> None:
        # Historical build records have no delete operation
        logger.debug("Dropping build %s from local state", state.id)
