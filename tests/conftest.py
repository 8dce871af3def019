"""Shared fixtures for resource handler tests."""

from unittest.mock import AsyncMock

import pytest

from azdo_resources_mcp_server.services.client import AggregatedClient, BuildClient, GitClient


@pytest.fixture
def clients():
    """Aggregated client whose sub-clients are async mocks."""
    return AggregatedClient(
        build_client=AsyncMock(spec=BuildClient),
        git_client=AsyncMock(spec=GitClient),
    )
