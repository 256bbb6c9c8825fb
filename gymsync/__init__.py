"""
Gym Sync

Reconciles the local catalog of Boulders gyms against the BRP
business units API: create what is missing, update what exists,
and report the outcome of every record.
"""

from .client import (
    # Main classes
    BusinessUnitsClient,

    # Configuration
    ClientConfig,

    # Convenience functions
    client_session,
)
from .reconciler import Reconciler, sync_all
from .validator import (
    RecordValidator,
    ValidationResult,
    validate_record,
    ensure_valid,
    validate_catalog,
)
from .queries import find_by_id, search_by_text, check_connection
from .catalog import (
    GYM_CATALOG,
    default_catalog,
    load_catalog,
    export_catalog,
    parse_address,
)
from .models import (
    # Data models
    SyncAction,
    SyncOutcome,
    SyncReport,
    LookupResult,
    ConnectionCheck,
)
from .errors import (
    # Exceptions
    GymSyncError,
    ValidationError,
    TransportError,
    SnapshotFailure,
    CatalogError,
)

__version__ = "0.1.0"
__all__ = [
    # Main classes
    "BusinessUnitsClient",
    "Reconciler",
    "RecordValidator",

    # Configuration
    "ClientConfig",

    # Data models
    "SyncAction",
    "SyncOutcome",
    "SyncReport",
    "LookupResult",
    "ConnectionCheck",
    "ValidationResult",

    # Catalog
    "GYM_CATALOG",
    "default_catalog",
    "load_catalog",
    "export_catalog",
    "parse_address",

    # Exceptions
    "GymSyncError",
    "ValidationError",
    "TransportError",
    "SnapshotFailure",
    "CatalogError",

    # Convenience functions
    "client_session",
    "sync_all",
    "validate_record",
    "ensure_valid",
    "validate_catalog",
    "find_by_id",
    "search_by_text",
    "check_connection",
]
