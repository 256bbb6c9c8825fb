"""
Gym Sync - Exceptions

Error taxonomy for the reconciliation core. Every error can render itself as
a structured dict so callers can forward it to an error reporter without
re-deriving the context.
"""

from typing import Any, Optional


class GymSyncError(Exception):
    """Base exception for gym sync operations."""

    def to_dict(self) -> dict[str, Any]:
        """Structured form for logs and upstream reporting."""
        return {
            "error": type(self).__name__,
            "message": str(self),
        }


class ValidationError(GymSyncError):
    """A record failed local validation and was never sent."""

    def __init__(self, message: str, identifier: Any = None, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.identifier = identifier
        self.errors = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["identifier"] = self.identifier
        data["errors"] = self.errors
        return data


class TransportError(GymSyncError):
    """Non-2xx response or network failure from the resource client."""

    def __init__(
        self,
        message: str,
        endpoint: str,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code
        self.method = method
        self.payload = payload

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({
            "endpoint": self.endpoint,
            "status_code": self.status_code,
            "method": self.method,
        })
        return data


class SnapshotFailure(GymSyncError):
    """The remote snapshot could not be fetched; the whole pass is aborted."""

    def __init__(self, message: str, endpoint: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code

    @classmethod
    def from_transport(cls, error: TransportError) -> "SnapshotFailure":
        return cls(
            f"Could not fetch remote snapshot: {error}",
            endpoint=error.endpoint,
            status_code=error.status_code,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["endpoint"] = self.endpoint
        data["status_code"] = self.status_code
        return data


class CatalogError(GymSyncError):
    """A local catalog file could not be read or written."""
    pass
