"""Services package."""

from finance_engine.services.export import (
    export_snapshot,
    import_snapshot,
    snapshot_counts,
    write_export,
)
from finance_engine.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    NotFoundError,
    SnapshotStorageInterface,
    StorageError,
)

__all__ = [
    # Export
    "export_snapshot",
    "import_snapshot",
    "snapshot_counts",
    "write_export",
    # Storage services
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
    "NotFoundError",
    "SnapshotStorageInterface",
    "StorageError",
]
