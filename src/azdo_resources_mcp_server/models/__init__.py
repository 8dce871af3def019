"""Models and schemas for the Azure DevOps resources MCP server."""

from .schemas import (
    ZERO_OBJECT_ID,
    RefState,
    BuildConfig,
    BuildState,
    GitBranchConfig,
    GitBranchState,
    PullRequestConfig,
    PullRequestState,
)

__all__ = [
    "ZERO_OBJECT_ID",
    "RefState",
    "BuildConfig",
    "BuildState",
    "GitBranchConfig",
    "GitBranchState",
    "PullRequestConfig",
    "PullRequestState",
]
