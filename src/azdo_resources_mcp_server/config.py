"""Configuration management for the Azure DevOps resources MCP server."""

import os
from pathlib import Path

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Server settings loaded from environment variables."""

    org_service_url: str = Field(default_factory=lambda: os.environ.get("AZDO_ORG_SERVICE_URL", ""))
    personal_access_token: str = Field(default_factory=lambda: os.environ.get("AZDO_PERSONAL_ACCESS_TOKEN", ""))
    api_version: str = Field(default_factory=lambda: os.environ.get("AZDO_API_VERSION", "7.1"))
    working_dir: Path = Field(default_factory=lambda: Path(os.environ.get("AZDO_WORKING_DIR", os.getcwd())))
    state_file: Path = Field(default_factory=lambda: Path(os.environ.get("AZDO_STATE_FILE", "azdo-resources.state.json")))
    log_level: str = Field(default_factory=lambda: os.environ.get("AZDO_LOG_LEVEL", "INFO"))

    def get_state_file_path(self) -> Path:
        """Get the absolute path to the state file."""
        if self.state_file.is_absolute():
            return self.state_file
        return self.working_dir / self.state_file

    def resolve_local_path(self, path: str) -> str:
        """Resolve a path from a configuration block against the working directory."""
        if not path or Path(path).is_absolute():
            return path
        return str(self.working_dir / path)

    def validate_required(self) -> None:
        """Validate that required settings are present."""
        if not self.org_service_url:
            raise ValueError("AZDO_ORG_SERVICE_URL environment variable is required")
        if not self.personal_access_token:
            raise ValueError("AZDO_PERSONAL_ACCESS_TOKEN environment variable is required")
