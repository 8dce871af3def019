"""FastMCP server setup for the Azure DevOps resources MCP server."""

from fastmcp import FastMCP

from .config import Settings
from .tools import build, git, state


def create_server(settings: Settings | None = None) -> FastMCP:
    """
    Create and configure the MCP server.

    Args:
        settings: Optional settings to use. If not provided, settings are loaded from environment.

    Returns:
        Configured FastMCP server instance
    """
    if settings is None:
        settings = Settings()

    mcp = FastMCP(
        name="azdo-resources",
        instructions="""
Azure DevOps Resources MCP Server - declarative builds, branches and pull requests.

Each apply_* tool takes a full configuration block and a local resource_name.
The first apply creates the resource remotely; later applies with the same
resource_name re-read it (builds and pull requests cannot be changed once
created). Created resources are tracked in a local state file.

Workflow:
1. Use 'apply_git_branch' to create a branch (optionally scaffolded from a local directory)
2. Use 'apply_pull_request' to open a pull request from it
3. Use 'apply_build' to queue a build
4. Use 'refresh' to re-read a resource, 'destroy' to delete it, 'list_resources' to see state

Deleting a branch moves it to the zero object id. Destroying a build or pull
request only removes it from local state.
"""
    )

    # Register tools
    build.register_tools(mcp, settings)
    git.register_tools(mcp, settings)
    state.register_tools(mcp, settings)

    return mcp
