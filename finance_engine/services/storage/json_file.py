"""
JSON File Storage Implementation

DESIGN DECISION: Records live in a single local JSON document that uses
the export format, so an export file can be loaded back as a data file.

TRADEOFFS:
- The whole document is rewritten on every change (fine for personal use)
- No cross-process locking; one application instance owns the file
- Writes go to a temporary file first and replace the existing one, so a
  crash mid-write never leaves a truncated document behind
"""

import json
import os
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_engine.config import get_settings
from finance_engine.models.records import RecordType, Snapshot, record_type_of
from finance_engine.services.export import export_snapshot, import_snapshot
from finance_engine.services.storage.interface import (
    DuplicateError,
    NotFoundError,
    SnapshotStorageInterface,
    StorageError,
)


# Transient local file errors are retried; anything else propagates
io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


def _collection(snapshot: Snapshot, record_type: RecordType) -> list:
    if record_type == RecordType.TRANSACTION:
        return snapshot.transactions
    if record_type == RecordType.BUDGET:
        return snapshot.budgets
    return snapshot.financial_goals


def _with_collection(
    snapshot: Snapshot,
    record_type: RecordType,
    records: list,
) -> Snapshot:
    field = {
        RecordType.TRANSACTION: "transactions",
        RecordType.BUDGET: "budgets",
        RecordType.GOAL: "financial_goals",
    }[record_type]
    return snapshot.model_copy(update={field: records})


class JsonFileSnapshotStorage(SnapshotStorageInterface):
    """
    Record storage in one JSON document on disk.

    A missing file reads as an empty snapshot; it is created on first write.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path or get_settings().storage.data_file)

    @property
    def path(self) -> Path:
        return self._path

    @io_retry
    def _read_text(self) -> str:
        return self._path.read_text(encoding="utf-8")

    @io_retry
    def _write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _read(self) -> Snapshot:
        if not self._path.exists():
            return Snapshot()
        try:
            text = self._read_text()
            return import_snapshot(json.loads(text) if text.strip() else {})
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise StorageError(f"Data file {self._path} is malformed: {e}")

    def _write(self, snapshot: Snapshot) -> None:
        try:
            self._write_text(json.dumps(export_snapshot(snapshot), indent=2))
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    async def load_snapshot(self) -> Snapshot:
        return self._read()

    async def list_records(self, record_type: RecordType) -> list[BaseModel]:
        return list(_collection(self._read(), record_type))

    async def get_record(
        self,
        record_type: RecordType,
        record_id: UUID,
    ) -> Optional[BaseModel]:
        for record in _collection(self._read(), record_type):
            if record.id == record_id:
                return record
        return None

    async def save_record(self, record: BaseModel) -> bool:
        record_type = record_type_of(record)
        snapshot = self._read()
        records = list(_collection(snapshot, record_type))
        if any(existing.id == record.id for existing in records):
            raise DuplicateError(f"Record already exists: {record.id}")
        records.append(record)
        self._write(_with_collection(snapshot, record_type, records))
        return True

    async def update_record(self, record: BaseModel) -> bool:
        record_type = record_type_of(record)
        snapshot = self._read()
        records = list(_collection(snapshot, record_type))
        for idx, existing in enumerate(records):
            if existing.id == record.id:
                records[idx] = record
                self._write(_with_collection(snapshot, record_type, records))
                return True
        raise NotFoundError(f"Record not found: {record.id}")

    async def delete_record(self, record_type: RecordType, record_id: UUID) -> bool:
        snapshot = self._read()
        records = list(_collection(snapshot, record_type))
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._write(_with_collection(snapshot, record_type, remaining))
        return True
