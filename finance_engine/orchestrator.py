"""
Main Orchestrator for Finance Engine

This module ties together all the components and defines the
end-to-end flows for:
1. Record changes (raw input → validate → save → audit)
2. Reports (storage → snapshot → engine → audit)
3. Export (storage → snapshot → JSON document)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is stored without passing validation
- The engine only ever sees an immutable snapshot
- Engine and storage errors become typed results, never crashes
- Every step is audited
"""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from pydantic import BaseModel

from finance_engine.audit import AuditLogger, create_correlation_id
from finance_engine.config import get_settings
from finance_engine.engine import EngineError, build_report
from finance_engine.models.records import (
    RECORD_MODELS,
    BudgetEntry,
    FinancialGoal,
    RecordType,
    Transaction,
)
from finance_engine.models.results import AnalyticsResult, OperationResult
from finance_engine.services import (
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    SnapshotStorageInterface,
    StorageError,
    snapshot_counts,
    write_export,
)
from finance_engine.validation import RecordValidator


def _record_label(record: BaseModel) -> str:
    if isinstance(record, Transaction):
        return f"{record.company_name} {record.amount}"
    if isinstance(record, BudgetEntry):
        return f"{record.category} {record.expense_amount}"
    if isinstance(record, FinancialGoal):
        return record.name
    return str(record.id)


class RecordFlow:
    """
    Orchestrates create/update/delete on stored records.

    Every operation returns an OperationResult instead of raising, so
    callers can show the error to the user and re-prompt.
    """

    def __init__(
        self,
        storage: SnapshotStorageInterface,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or RecordValidator(storage)
        self._audit_logger = audit_logger

    async def create(
        self,
        record_type: RecordType,
        data: Union[dict, BaseModel],
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        """Validate and save a new record."""
        correlation_id = correlation_id or create_correlation_id()

        result = await self._validator.validate(record_type, data)
        if not result.is_valid:
            if self._audit_logger:
                await self._audit_logger.log_record_rejected(
                    record_type=record_type.value,
                    issues=result.issues_as_dicts(),
                    correlation_id=correlation_id,
                )
            return OperationResult(
                success=False,
                error=self._validator.get_user_friendly_summary(result),
            )

        record = result.record
        try:
            await self._storage.save_record(record)
        except StorageError as e:
            return await self._storage_failure("save", e, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_record_created(
                record_type=record_type.value,
                record_id=record.id,
                label=_record_label(record),
                correlation_id=correlation_id,
            )

        return OperationResult(success=True, record=record)

    async def update(
        self,
        record_type: RecordType,
        record_id: UUID,
        changes: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        """
        Apply field changes to an existing record.

        Field names may be given in snake_case or camelCase. The record
        is re-validated as a whole before it replaces the stored one.
        Unknown field names, and the id, are rejected without touching
        the stored record.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            existing = await self._storage.get_record(record_type, record_id)
        except StorageError as e:
            return await self._storage_failure("update", e, correlation_id)
        if existing is None:
            return OperationResult(
                success=False,
                error=f"{record_type.value.capitalize()} not found: {record_id}",
            )

        model = RECORD_MODELS[record_type]
        aliases = {
            name: field.alias or name
            for name, field in model.model_fields.items()
            if name != "id"
        }
        known = set(aliases) | set(aliases.values())
        unknown = sorted(key for key in changes if key not in known)
        if unknown:
            return OperationResult(
                success=False,
                error=f"Unknown {record_type.value} fields: {', '.join(unknown)}",
            )
        if not changes:
            return OperationResult(success=False, error="Nothing to update")

        data = existing.model_dump(by_alias=True)
        for key, value in changes.items():
            data[aliases.get(key, key)] = value
        data["id"] = existing.id

        result = await self._validator.validate(record_type, data)
        if not result.is_valid:
            if self._audit_logger:
                await self._audit_logger.log_record_rejected(
                    record_type=record_type.value,
                    issues=result.issues_as_dicts(),
                    correlation_id=correlation_id,
                )
            return OperationResult(
                success=False,
                error=self._validator.get_user_friendly_summary(result),
            )

        try:
            await self._storage.update_record(result.record)
        except StorageError as e:
            return await self._storage_failure("update", e, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_record_updated(
                record_type=record_type.value,
                record_id=record_id,
                changed_fields=sorted(changes),
                correlation_id=correlation_id,
            )

        return OperationResult(success=True, record=result.record)

    async def delete(
        self,
        record_type: RecordType,
        record_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        """Delete a record by ID."""
        correlation_id = correlation_id or create_correlation_id()

        try:
            deleted = await self._storage.delete_record(record_type, record_id)
        except StorageError as e:
            return await self._storage_failure("delete", e, correlation_id)

        if not deleted:
            return OperationResult(
                success=False,
                error=f"{record_type.value.capitalize()} not found: {record_id}",
            )

        if self._audit_logger:
            await self._audit_logger.log_record_deleted(
                record_type=record_type.value,
                record_id=record_id,
                correlation_id=correlation_id,
            )

        return OperationResult(success=True)

    async def list_transactions(self) -> list[Transaction]:
        return await self._storage.list_records(RecordType.TRANSACTION)

    async def list_budget_entries(self) -> list[BudgetEntry]:
        return await self._storage.list_records(RecordType.BUDGET)

    async def list_goals(self) -> list[FinancialGoal]:
        return await self._storage.list_records(RecordType.GOAL)

    async def export(
        self,
        path: Optional[Union[str, Path]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        """Write every record to a JSON export document."""
        destination = Path(path or get_settings().storage.export_file)

        try:
            snapshot = await self._storage.load_snapshot()
            write_export(snapshot, destination)
        except (StorageError, OSError) as e:
            return await self._storage_failure("export", e, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_snapshot_exported(
                destination=str(destination),
                counts=snapshot_counts(snapshot),
                correlation_id=correlation_id,
            )

        return OperationResult(success=True, record=str(destination))

    async def _storage_failure(
        self,
        operation: str,
        error: Exception,
        correlation_id: Optional[UUID],
    ) -> OperationResult:
        if self._audit_logger:
            await self._audit_logger.log_storage_error(
                operation=operation,
                error_message=str(error),
                correlation_id=correlation_id,
            )
        return OperationResult(success=False, error=f"Failed to {operation}: {error}")


class AnalyticsFlow:
    """
    Orchestrates report generation.

    Flow:
    1. Load a snapshot from storage
    2. Run the engine over it (pure, synchronous)
    3. Return the report, or a typed error result

    The engine never retries and never recovers locally; a failed
    report is reported back so the caller can fix the input.
    """

    def __init__(
        self,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._settings = get_settings()

    async def generate_report(
        self,
        now: Optional[Union[date, datetime]] = None,
        saved_amounts: Optional[Mapping[UUID, Decimal]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AnalyticsResult:
        """
        Build the analytics report for the current records.

        Args:
            now: Reference date (defaults to today)
            saved_amounts: Amount saved so far per goal ID
        """
        correlation_id = correlation_id or create_correlation_id()
        now = now or date.today()

        try:
            snapshot = await self._storage.load_snapshot()
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="load_snapshot",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return AnalyticsResult(
                success=False,
                error_type=type(e).__name__,
                error_message=str(e),
            )

        if self._audit_logger:
            await self._audit_logger.log_snapshot_loaded(
                counts=snapshot_counts(snapshot),
                correlation_id=correlation_id,
            )

        try:
            report = build_report(
                snapshot,
                now,
                saved_amounts=saved_amounts,
                at_risk_threshold=self._settings.engine.at_risk_threshold_percent,
                categories=self._settings.app.default_categories_list,
            )
        except EngineError as e:
            if self._audit_logger:
                await self._audit_logger.log_engine_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return AnalyticsResult(
                success=False,
                error_type=type(e).__name__,
                error_message=str(e),
            )

        if self._audit_logger:
            await self._audit_logger.log_report_generated(
                report_id=report.report_id,
                recommendation_count=len(report.recommendations),
                correlation_id=correlation_id,
            )

        return AnalyticsResult(success=True, report=report)


def create_app_components(
    use_file_storage: bool = True,
    data_file: Optional[Union[str, Path]] = None,
) -> tuple[RecordFlow, AnalyticsFlow, SnapshotStorageInterface]:
    """
    Factory function to create all application components.

    Args:
        use_file_storage: Keep records in the JSON data file.
                          Set to False for an in-memory store (tests, demos).
        data_file: Overrides the configured data file path.

    Returns:
        (record_flow, analytics_flow, storage)
    """
    if use_file_storage:
        storage = JsonFileSnapshotStorage(data_file)
    else:
        storage = InMemorySnapshotStorage()

    audit_logger = AuditLogger(InMemoryAuditStorage())

    record_flow = RecordFlow(storage=storage, audit_logger=audit_logger)
    analytics_flow = AnalyticsFlow(storage=storage, audit_logger=audit_logger)

    return record_flow, analytics_flow, storage
