"""Azure DevOps resources MCP server: builds, Git branches and pull requests."""
