"""Services for the Azure DevOps resources MCP server."""

from .client import AggregatedClient, AzureDevOpsAPIError, BuildClient, GitClient
from .build_resource import BuildResource
from .git_branch_resource import GitBranchResource
from .pull_request_resource import PullRequestResource
from .state_store import StateStore
from .workspace import ResourceWorkspace, UnknownResourceError

__all__ = [
    "AggregatedClient",
    "AzureDevOpsAPIError",
    "BuildClient",
    "GitClient",
    "BuildResource",
    "GitBranchResource",
    "PullRequestResource",
    "StateStore",
    "ResourceWorkspace",
    "UnknownResourceError",
]
