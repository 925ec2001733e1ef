"""
Storage Services Package

Provides abstract interfaces and concrete implementations for record storage.
Ships an in-memory backend and a local JSON file backend.
"""

from finance_engine.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    SnapshotStorageInterface,
    StorageError,
)
from finance_engine.services.storage.json_file import JsonFileSnapshotStorage
from finance_engine.services.storage.memory import (
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SnapshotStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
]
