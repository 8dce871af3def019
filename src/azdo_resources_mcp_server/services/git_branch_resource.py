"""Git branch resource: creates and deletes refs, optionally scaffolding content."""

import logging

from ..errors import RefUpdateRejected, RemoteRequestError
from ..models.api import GitPush, GitRef, GitRefUpdate, GitRefUpdateResult
from ..models.schemas import ZERO_OBJECT_ID, GitBranchConfig, GitBranchState, RefState
from .client import AggregatedClient, AzureDevOpsAPIError
from .scaffold import build_scaffold_push, collect_scaffold_changes

logger = logging.getLogger(__name__)


def find_ref(refs: list[GitRef], name: str) -> GitRef | None:
    """First ref whose name matches, ignoring case."""
    if not name:
        return None
    wanted = name.casefold()
    for ref in refs:
        if ref.name.casefold() == wanted:
            return ref
    return None


def flatten_git_branch(ref: GitRef) -> GitBranchState:
    return GitBranchState(id=ref.url, name=ref.name, url=ref.url, object_id=ref.object_id)


class GitBranchResource:
    """
    Handler for the Git branch resource.

    A branch moves between two states: absent (object id is the zero SHA) and
    present. Both directions are a single ref update; deleting a branch moves
    it back to the zero SHA.
    """

    resource_type = "git_branch"
    force_new_fields: tuple[str, ...] = ("name",)

    def __init__(self, clients: AggregatedClient):
        self.clients = clients

    async def create(self, config: GitBranchConfig) -> GitBranchState:
        ref_update = GitRefUpdate(
            name=config.name,
            old_object_id=config.old_object_id,
            new_object_id=config.new_object_id,
        )
        result = await self._update_ref(config, ref_update, operation="create")
        logger.info("Created branch %s in %s at %s", result.name, config.repo_name, result.new_object_id)

        if config.has_content:
            await self.scaffold(config, result)

        state = await self.read(config)
        if state is None:
            raise RemoteRequestError(
                f"Branch {config.name} was not found in repo {config.repo_name} after creation",
                operation="create",
                resource_type=self.resource_type,
                resource_id=config.name,
            )
        return state

    async def scaffold(self, config: GitBranchConfig, ref_result: GitRefUpdateResult) -> GitPush | None:
        """
        Push the content directory onto the freshly created branch as one commit.

        Every file is read before anything is sent, so a read failure leaves the
        branch in place but empty.
        """
        changes = collect_scaffold_changes(config.content, config.root_path, branch_name=config.name)
        if not changes:
            logger.warning("Scaffold directory %s has no files, skipping push", config.content)
            return None

        push = build_scaffold_push(ref_result, changes)
        try:
            result = await self.clients.git_client.create_push(config.project_id, config.repo_name, push)
        except AzureDevOpsAPIError as e:
            raise RemoteRequestError(
                f"Error pushing scaffold content to branch {config.name}",
                operation="scaffold",
                resource_type=self.resource_type,
                resource_id=config.name,
                cause=e,
            ) from e

        logger.info("Pushed %d scaffold files to %s", len(changes), config.name)
        return result

    async def lookup(self, config: GitBranchConfig) -> GitRef | None:
        """
        Find the branch by name, ignoring case.

        Returns None when the branch (or its repository) does not exist.
        """
        try:
            refs = await self.clients.git_client.get_refs(config.project_id, config.repo_name)
        except AzureDevOpsAPIError as e:
            if e.not_found:
                return None
            raise RemoteRequestError(
                f"Error looking up branch with name {config.name} in repo {config.repo_name}",
                operation="read",
                resource_type=self.resource_type,
                resource_id=config.name,
                cause=e,
            ) from e
        return find_ref(refs, config.name)

    async def read(self, config: GitBranchConfig, state: GitBranchState | None = None) -> GitBranchState | None:
        ref = await self.lookup(config)
        if ref is None:
            logger.info("Branch %s not found in repo %s", config.name, config.repo_name)
            return None
        return flatten_git_branch(ref)

    async def update(self, config: GitBranchConfig, state: GitBranchState) -> GitBranchState | None:
        return await self.read(config, state)

    async def delete(self, config: GitBranchConfig, state: GitBranchState) -> None:
        ref = await self.lookup(config)
        if ref is None or RefState.of(ref.object_id) is RefState.ABSENT:
            logger.info("Branch %s already absent from repo %s", config.name, config.repo_name)
            return

        ref_update = GitRefUpdate(
            name=ref.name,
            old_object_id=ref.object_id,
            new_object_id=ZERO_OBJECT_ID,
        )
        await self._update_ref(config, ref_update, operation="delete")
        logger.info("Deleted branch %s from repo %s", ref.name, config.repo_name)

    async def _update_ref(
        self, config: GitBranchConfig, ref_update: GitRefUpdate, operation: str
    ) -> GitRefUpdateResult:
        logger.debug(
            "Updating ref %s: %s -> %s",
            ref_update.name,
            RefState.of(ref_update.old_object_id).value,
            RefState.of(ref_update.new_object_id).value,
        )
        try:
            results = await self.clients.git_client.update_refs(
                config.project_id, config.repo_name, [ref_update]
            )
        except AzureDevOpsAPIError as e:
            raise RemoteRequestError(
                f"Error updating ref {ref_update.name} in repo {config.repo_name}",
                operation=operation,
                resource_type=self.resource_type,
                resource_id=config.name,
                cause=e,
            ) from e

        if not results:
            raise RemoteRequestError(
                f"Update of ref {ref_update.name} returned no result",
                operation=operation,
                resource_type=self.resource_type,
                resource_id=config.name,
            )

        result = results[0]
        if not result.success:
            reason = result.custom_message or result.update_status or "no message from the service"
            raise RefUpdateRejected(
                f"Branch {operation} failed due to {reason}",
                custom_message=result.custom_message,
                update_status=result.update_status,
                operation=operation,
                resource_type=self.resource_type,
                resource_id=config.name,
            )
        return result
