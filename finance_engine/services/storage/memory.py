"""
In-Memory Storage Implementation

Keeps records in ordered dicts for the lifetime of the process.
Used by tests and as a scratch backend when no data file is configured.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from finance_engine.models.audit import AuditEvent
from finance_engine.models.records import (
    RecordType,
    Snapshot,
    record_type_of,
)
from finance_engine.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    SnapshotStorageInterface,
)


class InMemorySnapshotStorage(SnapshotStorageInterface):
    """Record storage backed by per-type dicts (insertion ordered)."""

    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._records: dict[RecordType, dict[UUID, BaseModel]] = {
            record_type: {} for record_type in RecordType
        }
        if snapshot is not None:
            for record in (
                *snapshot.transactions,
                *snapshot.budgets,
                *snapshot.financial_goals,
            ):
                self._records[record_type_of(record)][record.id] = record

    async def list_records(self, record_type: RecordType) -> list[BaseModel]:
        return list(self._records[record_type].values())

    async def get_record(
        self,
        record_type: RecordType,
        record_id: UUID,
    ) -> Optional[BaseModel]:
        return self._records[record_type].get(record_id)

    async def save_record(self, record: BaseModel) -> bool:
        collection = self._records[record_type_of(record)]
        if record.id in collection:
            raise DuplicateError(f"Record already exists: {record.id}")
        collection[record.id] = record
        return True

    async def update_record(self, record: BaseModel) -> bool:
        collection = self._records[record_type_of(record)]
        if record.id not in collection:
            raise NotFoundError(f"Record not found: {record.id}")
        collection[record.id] = record
        return True

    async def delete_record(self, record_type: RecordType, record_id: UUID) -> bool:
        return self._records[record_type].pop(record_id, None) is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log held in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
