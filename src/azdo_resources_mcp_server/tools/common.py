"""Shared plumbing for the resource tools."""

import logging

from pydantic import ValidationError

from ..errors import ResourceError
from ..services.workspace import ResourceWorkspace, UnknownResourceError

logger = logging.getLogger(__name__)


async def apply_resource(workspace: ResourceWorkspace, resource_type: str, name: str, config: dict) -> dict:
    """Apply a configuration block and render the outcome as a tool response."""
    address = workspace.address(resource_type, name)
    try:
        record = await workspace.apply(resource_type, name, config)
    except ValidationError as e:
        return {"error": "INVALID_CONFIGURATION", "address": address, "message": str(e)}
    except ResourceError as e:
        logger.error("Applying %s failed: %s", address, e)
        return {"address": address, **e.to_dict()}

    return {"address": address, "id": record["state"]["id"], "state": record["state"]}


async def refresh_resource(workspace: ResourceWorkspace, resource_type: str, name: str) -> dict:
    address = workspace.address(resource_type, name)
    try:
        record = await workspace.refresh(resource_type, name)
    except UnknownResourceError as e:
        return {"error": "UNKNOWN_RESOURCE", "address": address, "message": str(e)}
    except ResourceError as e:
        logger.error("Refreshing %s failed: %s", address, e)
        return {"address": address, **e.to_dict()}

    if record is None:
        return {"address": address, "state": None, "message": f"{address} no longer exists and was removed from state"}
    return {"address": address, "id": record["state"]["id"], "state": record["state"]}


async def destroy_resource(workspace: ResourceWorkspace, resource_type: str, name: str) -> dict:
    address = workspace.address(resource_type, name)
    try:
        record = await workspace.destroy(resource_type, name)
    except UnknownResourceError as e:
        return {"error": "UNKNOWN_RESOURCE", "address": address, "message": str(e)}
    except ResourceError as e:
        logger.error("Destroying %s failed: %s", address, e)
        return {"address": address, **e.to_dict()}

    return {
        "address": address,
        "destroyed_id": record["state"]["id"] if record else None,
        "message": f"{address} destroyed",
    }
