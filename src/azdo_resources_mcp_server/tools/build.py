"""Build tools for the Azure DevOps resources MCP server."""

from fastmcp import FastMCP

from ..config import Settings
from ..services.workspace import ResourceWorkspace
from .common import apply_resource


def register_tools(mcp: FastMCP, settings: Settings) -> None:
    """Register build tools with the MCP server."""

    workspace = ResourceWorkspace.from_settings(settings)

    @mcp.tool()
    async def apply_build(
        resource_name: str,
        project_id: str,
        definition_id: int,
        source_branch: str,
    ) -> dict:
        """
        Queues a build for a pipeline definition and records it in local state.

        If the resource already has state, the build is re-read instead of queued
        again: builds cannot be changed once queued.

        Args:
            resource_name: Local name of the resource (address is build.<resource_name>)
            project_id: Project UUID
            definition_id: Build definition id (>= 1)
            source_branch: Branch to build, e.g. 'refs/heads/main'

        Returns:
            Dictionary with address, id and state (url)
        """
        return await apply_resource(
            workspace,
            "build",
            resource_name,
            {
                "project_id": project_id,
                "definition_id": definition_id,
                "source_branch": source_branch,
            },
        )
