"""Apply, refresh and destroy resources against the local state file."""

import logging

from pydantic import BaseModel

from ..config import Settings
from ..models.schemas import (
    BuildConfig,
    BuildState,
    GitBranchConfig,
    GitBranchState,
    PullRequestConfig,
    PullRequestState,
)
from .build_resource import BuildResource
from .client import AggregatedClient
from .git_branch_resource import GitBranchResource
from .pull_request_resource import PullRequestResource
from .state_store import StateStore

logger = logging.getLogger(__name__)

RESOURCE_TYPES: dict[str, tuple[type, type[BaseModel], type[BaseModel]]] = {
    "build": (BuildResource, BuildConfig, BuildState),
    "git_branch": (GitBranchResource, GitBranchConfig, GitBranchState),
    "pull_request": (PullRequestResource, PullRequestConfig, PullRequestState),
}


class UnknownResourceError(Exception):
    """Raised when a resource type or address is not known."""
    pass


def _same_value(old, new) -> bool:
    if isinstance(old, str) and isinstance(new, str):
        return old.casefold() == new.casefold()
    return old == new


class ResourceWorkspace:
    """
    Drives the resource handlers and keeps the state file in sync.

    Local state is written only after a handler call succeeds, so a failed
    operation leaves the previous record untouched.
    """

    def __init__(self, clients: AggregatedClient, state_store: StateStore):
        self.clients = clients
        self.state_store = state_store
        self._handlers = {
            resource_type: handler_cls(clients)
            for resource_type, (handler_cls, _, _) in RESOURCE_TYPES.items()
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResourceWorkspace":
        return cls(
            clients=AggregatedClient.from_settings(settings),
            state_store=StateStore(settings.get_state_file_path()),
        )

    @staticmethod
    def address(resource_type: str, name: str) -> str:
        return f"{resource_type}.{name}"

    def _resolve(self, resource_type: str):
        if resource_type not in RESOURCE_TYPES:
            raise UnknownResourceError(
                f"Unknown resource type '{resource_type}'. Available types: {list(RESOURCE_TYPES)}"
            )
        _, config_cls, state_cls = RESOURCE_TYPES[resource_type]
        return self._handlers[resource_type], config_cls, state_cls

    def _load_record(self, resource_type: str, name: str):
        handler, config_cls, state_cls = self._resolve(resource_type)
        record = self.state_store.get_state(self.address(resource_type, name))
        if record is None:
            raise UnknownResourceError(f"No state for {self.address(resource_type, name)}")
        config = config_cls.model_validate(record["config"])
        state = state_cls.model_validate(record["state"])
        return handler, config, state

    def _save(self, resource_type: str, name: str, config: BaseModel, state: BaseModel) -> dict:
        record = {
            "type": resource_type,
            "config": config.model_dump(mode="json"),
            "state": state.model_dump(mode="json"),
        }
        self.state_store.put_state(self.address(resource_type, name), record)
        return record

    async def apply(self, resource_type: str, name: str, config: dict) -> dict:
        """
        Create the resource if it has no state yet, otherwise update it.

        Changing a force-new field replaces the resource (delete, then create).
        A resource that was deleted remotely is created again.

        Returns:
            The stored record.
        """
        handler, config_cls, state_cls = self._resolve(resource_type)
        new_config = config_cls.model_validate(config)
        address = self.address(resource_type, name)
        record = self.state_store.get_state(address)

        if record is None:
            logger.info("Creating %s", address)
            state = await handler.create(new_config)
            return self._save(resource_type, name, new_config, state)

        old_config = config_cls.model_validate(record["config"])
        old_state = state_cls.model_validate(record["state"])
        changed = [
            field
            for field in handler.force_new_fields
            if not _same_value(getattr(old_config, field), getattr(new_config, field))
        ]
        if changed:
            logger.info("Replacing %s, changed: %s", address, ", ".join(changed))
            await handler.delete(old_config, old_state)
            self.state_store.remove_state(address)
            state = await handler.create(new_config)
            return self._save(resource_type, name, new_config, state)

        logger.info("Updating %s", address)
        state = await handler.update(new_config, old_state)
        if state is None:
            logger.info("%s no longer exists remotely, creating it again", address)
            self.state_store.remove_state(address)
            state = await handler.create(new_config)
        return self._save(resource_type, name, new_config, state)

    async def refresh(self, resource_type: str, name: str) -> dict | None:
        """Re-read remote state. Returns None (and drops the record) if the resource is gone."""
        handler, config, state = self._load_record(resource_type, name)
        new_state = await handler.read(config, state)
        if new_state is None:
            logger.info("%s no longer exists, removing from state", self.address(resource_type, name))
            self.state_store.remove_state(self.address(resource_type, name))
            return None
        return self._save(resource_type, name, config, new_state)

    async def destroy(self, resource_type: str, name: str) -> dict:
        """Delete the resource and drop its record."""
        handler, config, state = self._load_record(resource_type, name)
        await handler.delete(config, state)
        return self.state_store.remove_state(self.address(resource_type, name))

    def list_resources(self) -> dict[str, dict]:
        return self.state_store.load_states()
