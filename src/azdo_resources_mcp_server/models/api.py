"""Pydantic models for Azure DevOps REST payloads."""

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Base for REST payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class DefinitionReference(ApiModel):
    id: int


class Build(ApiModel):
    """A queued or finished build run."""

    id: int
    url: str | None = None
    build_number: str | None = Field(default=None, alias="buildNumber")
    status: str | None = None
    source_branch: str | None = Field(default=None, alias="sourceBranch")
    definition: DefinitionReference | None = None


class GitRef(ApiModel):
    name: str
    object_id: str | None = Field(default=None, alias="objectId")
    url: str | None = None


class GitRefUpdate(ApiModel):
    """Request to move a ref from one object id to another."""

    name: str
    old_object_id: str | None = Field(default=None, alias="oldObjectId")
    new_object_id: str | None = Field(default=None, alias="newObjectId")


class GitRefUpdateResult(ApiModel):
    """Per-ref outcome of an update-refs batch."""

    name: str
    old_object_id: str | None = Field(default=None, alias="oldObjectId")
    new_object_id: str | None = Field(default=None, alias="newObjectId")
    success: bool = False
    custom_message: str | None = Field(default=None, alias="customMessage")
    update_status: str | None = Field(default=None, alias="updateStatus")
    repository_id: str | None = Field(default=None, alias="repositoryId")


class ItemContent(ApiModel):
    content: str
    content_type: str = Field(default="base64encoded", alias="contentType")


class ChangeItem(ApiModel):
    path: str


class Change(ApiModel):
    change_type: str = Field(default="add", alias="changeType")
    item: ChangeItem
    new_content: ItemContent | None = Field(default=None, alias="newContent")

    @classmethod
    def add(cls, path: str, base64_content: str) -> "Change":
        """An "add" change carrying base64 encoded file content."""
        return cls(
            change_type="add",
            item=ChangeItem(path=path),
            new_content=ItemContent(content=base64_content),
        )


class GitCommitRef(ApiModel):
    comment: str
    changes: list[Change] = Field(default_factory=list)
    commit_id: str | None = Field(default=None, alias="commitId")


class GitPush(ApiModel):
    """A push: ref updates plus the commits that realize them."""

    ref_updates: list[GitRefUpdate] = Field(default_factory=list, alias="refUpdates")
    commits: list[GitCommitRef] = Field(default_factory=list)
    push_id: int | None = Field(default=None, alias="pushId")
    url: str | None = None


class GitPullRequest(ApiModel):
    pull_request_id: int | None = Field(default=None, alias="pullRequestId")
    title: str | None = None
    description: str | None = None
    source_ref_name: str | None = Field(default=None, alias="sourceRefName")
    target_ref_name: str | None = Field(default=None, alias="targetRefName")
    status: str | None = None
    url: str | None = None
