"""
Gym Sync - Data Models

Result types returned by the reconciler and the query helpers.
Records themselves stay plain JSON dicts so they reach the wire unchanged.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

# A business unit as sent to / received from the remote API
Record = dict[str, Any]


class SyncAction(Enum):
    """What a reconciliation pass did with one record."""
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class SyncOutcome:
    """Result for a single record of a reconciliation pass."""
    action: SyncAction
    identifier: Any
    success: bool
    name: Optional[str] = None
    payload: Any = None
    error: Optional[str] = None
    error_detail: Optional[dict] = None

    @classmethod
    def created(cls, record: Record, payload: Any) -> "SyncOutcome":
        return cls(
            action=SyncAction.CREATED,
            identifier=record.get("id"),
            name=record.get("name"),
            success=True,
            payload=payload,
        )

    @classmethod
    def updated(cls, record: Record, payload: Any) -> "SyncOutcome":
        return cls(
            action=SyncAction.UPDATED,
            identifier=record.get("id"),
            name=record.get("name"),
            success=True,
            payload=payload,
        )

    @classmethod
    def failed(cls, record: Record, error: Exception) -> "SyncOutcome":
        detail = error.to_dict() if hasattr(error, "to_dict") else {"message": str(error)}
        detail["identifier"] = record.get("id")
        return cls(
            action=SyncAction.FAILED,
            identifier=record.get("id"),
            name=record.get("name"),
            success=False,
            error=str(error),
            error_detail=detail,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            "action": self.action.value,
            "identifier": self.identifier,
            "name": self.name,
            "success": self.success,
        }
        if self.success:
            data["payload"] = self.payload
        else:
            data["error"] = self.error
            data["error_detail"] = self.error_detail
        return data


@dataclass
class SyncReport:
    """Ordered outcomes of one reconciliation pass."""
    outcomes: list[SyncOutcome] = field(default_factory=list)
    duration_seconds: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def _count(self, action: SyncAction) -> int:
        return sum(1 for o in self.outcomes if o.action is action)

    @property
    def created(self) -> int:
        return self._count(SyncAction.CREATED)

    @property
    def updated(self) -> int:
        return self._count(SyncAction.UPDATED)

    @property
    def failed(self) -> int:
        return self._count(SyncAction.FAILED)

    @property
    def success(self) -> bool:
        """True when every record was created or updated."""
        return self.failed == 0

    @property
    def failures(self) -> list[SyncOutcome]:
        """Outcomes that need manual attention."""
        return [o for o in self.outcomes if not o.success]

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self):
        return iter(self.outcomes)

    def __getitem__(self, index: int) -> SyncOutcome:
        return self.outcomes[index]

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
            "duration_seconds": round(self.duration_seconds, 4),
            "timestamp": self.timestamp.isoformat(),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


@dataclass
class LookupResult:
    """Result of a lookup by id. Absence is a result, not an error."""
    identifier: Any
    found: bool = False
    record: Optional[Record] = None

    def to_dict(self) -> dict:
        return {
            "identifier": self.identifier,
            "found": self.found,
            "record": self.record,
        }


@dataclass
class ConnectionCheck:
    """Result of probing the remote collection."""
    success: bool
    count: int = 0
    endpoint: Optional[str] = None
    error: Optional[dict] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "count": self.count,
            "endpoint": self.endpoint,
            "error": self.error,
        }
