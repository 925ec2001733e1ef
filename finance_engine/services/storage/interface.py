"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the analytics engine unaware of where records live
2. Use in-memory storage for testing
3. Swap the JSON file for a real database later

The interface is intentionally simple - we're not building a full ORM.
Just basic CRUD over the three record collections, plus a snapshot read.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from finance_engine.models.audit import AuditEvent
from finance_engine.models.records import RecordType, Snapshot


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for record storage.

    Any storage implementation must implement these methods.
    Records are returned in insertion order.
    """

    @abstractmethod
    async def list_records(self, record_type: RecordType) -> list[BaseModel]:
        """
        List every record of one type.

        Args:
            record_type: Which collection to read

        Returns:
            Records in insertion order
        """
        pass

    @abstractmethod
    async def get_record(
        self,
        record_type: RecordType,
        record_id: UUID,
    ) -> Optional[BaseModel]:
        """
        Retrieve a record by its ID.

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def save_record(self, record: BaseModel) -> bool:
        """
        Save a new record.

        Raises:
            DuplicateError: If a record with the same ID exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def update_record(self, record: BaseModel) -> bool:
        """
        Replace an existing record (matched by ID).

        Raises:
            NotFoundError: If the record doesn't exist
            StorageError: If update fails
        """
        pass

    @abstractmethod
    async def delete_record(self, record_type: RecordType, record_id: UUID) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if deleted, False if it did not exist
        """
        pass

    async def load_snapshot(self) -> Snapshot:
        """Read all three collections into one immutable snapshot."""
        return Snapshot(
            transactions=await self.list_records(RecordType.TRANSACTION),
            budgets=await self.list_records(RecordType.BUDGET),
            financial_goals=await self.list_records(RecordType.GOAL),
        )


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get all events for a correlation ID, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Record not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate record."""
    pass
