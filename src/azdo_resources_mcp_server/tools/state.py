"""State tools: refresh, destroy and list tracked resources."""

from fastmcp import FastMCP

from ..config import Settings
from ..services.workspace import ResourceWorkspace
from .common import destroy_resource, refresh_resource


def register_tools(mcp: FastMCP, settings: Settings) -> None:
    """Register state management tools with the MCP server."""

    workspace = ResourceWorkspace.from_settings(settings)

    @mcp.tool()
    async def refresh(resource_type: str, resource_name: str) -> dict:
        """
        Re-reads a tracked resource from Azure DevOps and updates local state.

        A Git branch that no longer exists is dropped from state without error.

        Args:
            resource_type: One of 'build', 'git_branch', 'pull_request'
            resource_name: Local name the resource was applied with

        Returns:
            Dictionary with address, id and state, or state None if the resource is gone
        """
        return await refresh_resource(workspace, resource_type, resource_name)

    @mcp.tool()
    async def destroy(resource_type: str, resource_name: str) -> dict:
        """
        Destroys a tracked resource.

        Builds and pull requests are only removed from local state. A Git branch
        is deleted remotely by moving it to the zero object id.

        Args:
            resource_type: One of 'build', 'git_branch', 'pull_request'
            resource_name: Local name the resource was applied with

        Returns:
            Dictionary with address, destroyed_id and message
        """
        return await destroy_resource(workspace, resource_type, resource_name)

    @mcp.tool()
    async def list_resources() -> dict:
        """
        Lists every tracked resource with its configuration and state.

        This is a safe, read-only operation that always succeeds.
        """
        return {
            "resources": workspace.list_resources(),
            "state_file": str(settings.get_state_file_path()),
        }
