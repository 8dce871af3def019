"""Error types raised by the resource handlers."""

from enum import Enum


class ErrorKind(str, Enum):
    """What went wrong, so callers can branch without parsing messages."""

    REMOTE_REQUEST = "REMOTE_REQUEST_ERROR"
    REF_UPDATE_REJECTED = "REF_UPDATE_REJECTED"
    SCAFFOLD_READ = "SCAFFOLD_READ_ERROR"
    INVALID_IDENTITY = "INVALID_IDENTITY"


class ResourceError(Exception):
    """
    Base error for a failed resource operation.

    Carries the operation that failed, the resource it was acting on and the
    underlying cause (if any).
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        resource_type: str,
        resource_id: str | None = None,
        cause: Exception | None = None,
    ):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.operation = operation
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.cause = cause

    def to_dict(self) -> dict:
        return {
            "error": self.kind.value,
            "message": str(self),
            "operation": self.operation,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
        }


class RemoteRequestError(ResourceError):
    """Raised when an Azure DevOps API call fails."""

    kind = ErrorKind.REMOTE_REQUEST

    @property
    def status_code(self) -> int | None:
        return getattr(self.cause, "status_code", None)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["status_code"] = self.status_code
        return result


class RefUpdateRejected(ResourceError):
    """Raised when the service accepted a ref update batch but refused the ref."""

    kind = ErrorKind.REF_UPDATE_REJECTED

    def __init__(
        self,
        message: str,
        *,
        custom_message: str | None = None,
        update_status: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.custom_message = custom_message
        self.update_status = update_status

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["custom_message"] = self.custom_message
        result["update_status"] = self.update_status
        return result


class ScaffoldReadError(ResourceError):
    """Raised when scaffold content cannot be read from the local file system."""

    kind = ErrorKind.SCAFFOLD_READ

    def __init__(self, message: str, *, path: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["path"] = self.path
        return result


class InvalidIdentityError(ResourceError):
    """Raised when stored identity cannot be used to address the remote resource."""

    kind = ErrorKind.INVALID_IDENTITY
