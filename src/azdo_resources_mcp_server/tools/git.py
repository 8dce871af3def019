"""Git branch and pull request tools for the Azure DevOps resources MCP server."""

from fastmcp import FastMCP

from ..config import Settings
from ..services.workspace import ResourceWorkspace
from .common import apply_resource


def register_tools(mcp: FastMCP, settings: Settings) -> None:
    """Register git tools with the MCP server."""

    workspace = ResourceWorkspace.from_settings(settings)

    @mcp.tool()
    async def apply_git_branch(
        resource_name: str,
        name: str,
        repo_name: str,
        project_id: str,
        old_object_id: str,
        new_object_id: str,
        content: str = "",
        root_path: str = "",
    ) -> dict:
        """
        Creates a Git branch and optionally scaffolds it with the files of a local directory.

        Use old_object_id '0000000000000000000000000000000000000000' for a branch
        that does not exist yet. When content is set, every file under that
        directory is pushed to the new branch in one commit, under root_path.

        Args:
            resource_name: Local name of the resource (address is git_branch.<resource_name>)
            name: Full ref name, e.g. 'refs/heads/feature'
            repo_name: Repository name or id
            project_id: Project UUID
            old_object_id: Current object id of the ref (zero SHA if absent)
            new_object_id: Commit the branch should point to
            content: Optional local directory to scaffold, relative to the working directory
            root_path: Optional destination prefix inside the repository

        Returns:
            Dictionary with address, id (ref URL) and state (url, object_id)
        """
        return await apply_resource(
            workspace,
            "git_branch",
            resource_name,
            {
                "name": name,
                "repo_name": repo_name,
                "project_id": project_id,
                "old_object_id": old_object_id,
                "new_object_id": new_object_id,
                "content": settings.resolve_local_path(content),
                "root_path": root_path,
            },
        )

    @mcp.tool()
    async def apply_pull_request(
        resource_name: str,
        project_id: str,
        repo_name: str,
        title: str,
        source_ref_name: str,
        target_ref_name: str,
        description: str = "",
    ) -> dict:
        """
        Opens a pull request between two refs and records it in local state.

        Args:
            resource_name: Local name of the resource (address is pull_request.<resource_name>)
            project_id: Project UUID
            repo_name: Repository name or id
            title: Pull request title
            source_ref_name: Ref to merge from, e.g. 'refs/heads/feature'
            target_ref_name: Ref to merge into, e.g. 'refs/heads/main'
            description: Optional description

        Returns:
            Dictionary with address, id and state (url)
        """
        return await apply_resource(
            workspace,
            "pull_request",
            resource_name,
            {
                "project_id": project_id,
                "repo_name": repo_name,
                "title": title,
                "source_ref_name": source_ref_name,
                "target_ref_name": target_ref_name,
                "description": description,
            },
        )
