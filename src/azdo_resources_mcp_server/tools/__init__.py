"""MCP tools for the Azure DevOps resources server."""
