"""Configuration blocks and local state for each resource type."""

import re
import uuid
from enum import Enum

from pydantic import BaseModel, Field, field_validator

ZERO_OBJECT_ID = "0" * 40

_OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{40}$")


class RefState(Enum):
    """Whether an object id points at a live ref or at nothing."""

    ABSENT = "absent"
    PRESENT = "present"

    @classmethod
    def of(cls, object_id: str | None) -> "RefState":
        if not object_id or object_id == ZERO_OBJECT_ID:
            return cls.ABSENT
        return cls.PRESENT


def _validate_uuid(value: str) -> str:
    try:
        uuid.UUID(value)
    except ValueError as e:
        raise ValueError(f"expected a UUID, got {value!r}") from e
    return value


def _validate_not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty or whitespace")
    return value


def _validate_object_id(value: str) -> str:
    if not _OBJECT_ID_RE.match(value):
        raise ValueError(f"expected a 40 character hex object id, got {value!r}")
    return value.lower()


class BuildConfig(BaseModel):
    """Configuration for a queued build."""
    project_id: str
    definition_id: int = Field(ge=1)
    source_branch: str = Field(min_length=1)

    @field_validator("project_id")
    @classmethod
    def check_project_id(cls, value: str) -> str:
        return _validate_uuid(value)


class BuildState(BaseModel):
    id: str | None = None
    url: str | None = None


class GitBranchConfig(BaseModel):
    """
    Configuration for a Git branch.

    `content` is a local directory copied into the new branch in a single
    commit; `root_path` is the destination prefix inside the repository.
    """
    name: str
    repo_name: str
    project_id: str
    old_object_id: str
    new_object_id: str
    content: str = ""
    root_path: str = ""

    @field_validator("project_id")
    @classmethod
    def check_project_id(cls, value: str) -> str:
        return _validate_uuid(value)

    @field_validator("name", "repo_name")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _validate_not_blank(value)

    @field_validator("old_object_id", "new_object_id")
    @classmethod
    def check_object_id(cls, value: str) -> str:
        return _validate_object_id(value)

    @property
    def has_content(self) -> bool:
        return bool(self.content)


class GitBranchState(BaseModel):
    id: str | None = None
    name: str | None = None
    url: str | None = None
    object_id: str | None = None


class PullRequestConfig(BaseModel):
    """Configuration for a pull request between two refs."""
    project_id: str
    repo_name: str
    title: str
    source_ref_name: str
    target_ref_name: str
    description: str = ""

    @field_validator("project_id")
    @classmethod
    def check_project_id(cls, value: str) -> str:
        return _validate_uuid(value)

    @field_validator("repo_name", "title", "source_ref_name", "target_ref_name")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _validate_not_blank(value)


class PullRequestState(BaseModel):
    id: str | None = None
    url: str | None = None
