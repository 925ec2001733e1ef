"""
Tests for record validation and the orchestrated flows.

Flows run against in-memory storage with an in-memory audit log.
"""

import asyncio
import pytest
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

from finance_engine.audit import AuditLogger
from finance_engine.engine import ValidationError
from finance_engine.models.audit import AuditEventType
from finance_engine.models.records import (
    BudgetEntry,
    RecordType,
    Snapshot,
)
from finance_engine.orchestrator import (
    AnalyticsFlow,
    RecordFlow,
    create_app_components,
)
from finance_engine.services import (
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    StorageError,
)
from finance_engine.validation import RecordValidator, ensure_valid


TRANSACTION_INPUT = {
    "companyName": "Supermarket",
    "transactionDate": "2026-10-03",
    "kind": "Expense",
    "amount": "82.40",
    "category": "Groceries",
}

GOAL_INPUT = {
    "name": "Holiday",
    "targetAmount": "2400",
    "category": "Travel",
    "recurring": True,
    "incomeAmount": "200",
    "frequency": "Monthly",
    "targetDate": "2027-10-01",
    "createdOn": "2026-10-01",
}


class BrokenStorage(InMemorySnapshotStorage):
    """Storage whose reads and writes always fail."""

    async def load_snapshot(self):
        raise StorageError("data file unavailable")

    async def list_records(self, record_type):
        raise StorageError("data file unavailable")

    async def save_record(self, record):
        raise StorageError("data file unavailable")


def make_flows(snapshot=None):
    storage = InMemorySnapshotStorage(snapshot)
    audit_storage = InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)
    record_flow = RecordFlow(storage, audit_logger=audit_logger)
    analytics_flow = AnalyticsFlow(storage, audit_logger=audit_logger)
    return record_flow, analytics_flow, storage, audit_storage


def recorded_event_types(audit_storage):
    events = asyncio.run(audit_storage.get_recent_events())
    return {e.event_type for e in events}


class TestRecordValidator:
    """Tests for two-stage record validation."""

    def test_valid_transaction(self):
        """Test well-formed input parses into a record."""
        result = asyncio.run(
            RecordValidator().validate(RecordType.TRANSACTION, TRANSACTION_INPUT)
        )
        assert result.is_valid is True
        assert result.record.amount == Decimal("82.40")
        assert result.issues == []

    def test_schema_errors(self):
        """Test missing and invalid fields are reported as errors."""
        data = dict(TRANSACTION_INPUT, amount="-5")
        del data["companyName"]

        result = asyncio.run(RecordValidator().validate(RecordType.TRANSACTION, data))

        assert result.schema_valid is False
        assert result.record is None
        fields = {i.field for i in result.issues}
        assert "companyName" in fields
        assert "amount" in fields

    def test_recurring_goal_without_frequency(self):
        """Test record invariants surface as schema errors."""
        data = dict(GOAL_INPUT)
        del data["frequency"]
        result = asyncio.run(RecordValidator().validate(RecordType.GOAL, data))
        assert result.is_valid is False
        assert any("frequency" in i.message for i in result.issues)

    def test_future_date_warning(self):
        """Test far-future transactions pass with a warning."""
        data = dict(
            TRANSACTION_INPUT,
            transactionDate=(date.today() + timedelta(days=30)).isoformat(),
        )
        result = asyncio.run(RecordValidator().validate(RecordType.TRANSACTION, data))
        assert result.is_valid is True
        assert any(i.issue_type == "future_date" for i in result.issues)

    def test_over_budget_warning(self):
        """Test an overspent budget entry is accepted with a warning."""
        result = asyncio.run(RecordValidator().validate(RecordType.BUDGET, {
            "income": "4000",
            "category": "Groceries",
            "expenseAmount": "500",
            "amountSpent": "600",
        }))
        assert result.is_valid is True
        assert [i.issue_type for i in result.issues] == ["over_budget"]

    def test_duplicate_budget_category(self):
        """Test a second entry for the same category is flagged."""
        existing = BudgetEntry(
            income=Decimal("4000"),
            category="Rent",
            expense_amount=Decimal("1200"),
        )
        storage = InMemorySnapshotStorage(Snapshot(budgets=[existing]))
        result = asyncio.run(RecordValidator(storage).validate(RecordType.BUDGET, {
            "income": "4000",
            "category": "rent",
            "expenseAmount": "1000",
        }))
        assert result.is_valid is True
        assert any(i.issue_type == "potential_duplicate" for i in result.issues)

    def test_duplicate_check_ignores_storage_errors(self):
        """Test duplicate detection is skipped when storage fails."""
        result = asyncio.run(RecordValidator(BrokenStorage()).validate(RecordType.BUDGET, {
            "income": "4000",
            "category": "Rent",
            "expenseAmount": "1000",
        }))
        assert result.is_valid is True

    def test_ensure_valid(self):
        """Test ensure_valid raises the engine ValidationError."""
        validator = RecordValidator()
        good = asyncio.run(validator.validate(RecordType.GOAL, GOAL_INPUT))
        assert ensure_valid(good).name == "Holiday"

        bad = asyncio.run(validator.validate(RecordType.GOAL, {"name": "Holiday"}))
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(bad)
        assert exc_info.value.issues

    def test_model_invariants_reported_as_engine_error(self):
        """Test record invariant failures surface as the engine ValidationError."""
        validator = RecordValidator()
        zero_target = asyncio.run(validator.validate(
            RecordType.GOAL, dict(GOAL_INPUT, targetAmount="0")
        ))
        no_frequency = asyncio.run(validator.validate(
            RecordType.GOAL, dict(GOAL_INPUT, frequency=None)
        ))

        with pytest.raises(ValidationError, match="targetAmount"):
            ensure_valid(zero_target)
        with pytest.raises(ValidationError, match="Recurring goals need a frequency"):
            ensure_valid(no_frequency)

    def test_user_friendly_summary(self):
        """Test the summary lists fields needing fixes."""
        validator = RecordValidator()
        result = asyncio.run(validator.validate(RecordType.GOAL, {"name": "Holiday"}))
        summary = validator.get_user_friendly_summary(result)
        assert summary.startswith("Some fields need fixing:")
        assert "targetAmount" in summary


class TestRecordFlow:
    """Tests for create, update and delete."""

    def test_create_records_audit_event(self):
        """Test a valid record is saved and audited."""
        record_flow, _, storage, audit_storage = make_flows()

        result = asyncio.run(record_flow.create(RecordType.TRANSACTION, TRANSACTION_INPUT))

        assert result.success is True
        assert asyncio.run(record_flow.list_transactions()) == [result.record]
        assert AuditEventType.RECORD_CREATED in recorded_event_types(audit_storage)

    def test_create_invalid_is_rejected(self):
        """Test invalid input is not saved."""
        record_flow, _, storage, audit_storage = make_flows()

        result = asyncio.run(record_flow.create(RecordType.GOAL, {"name": "Holiday"}))

        assert result.success is False
        assert "Some fields need fixing" in result.error
        assert asyncio.run(record_flow.list_goals()) == []
        assert AuditEventType.RECORD_REJECTED in recorded_event_types(audit_storage)

    def test_create_storage_failure(self):
        """Test a storage failure becomes an error result."""
        flow = RecordFlow(BrokenStorage())
        result = asyncio.run(flow.create(RecordType.TRANSACTION, TRANSACTION_INPUT))
        assert result.success is False
        assert result.error.startswith("Failed to save")

    def test_update_accepts_either_field_style(self):
        """Test changes may use snake_case or camelCase names."""
        record_flow, _, _, _ = make_flows()
        created = asyncio.run(record_flow.create(RecordType.BUDGET, {
            "income": "4000",
            "category": "Groceries",
            "expenseAmount": "500",
        }))
        entry_id = created.record.id

        first = asyncio.run(record_flow.update(
            RecordType.BUDGET, entry_id, {"amount_spent": "120.50"}
        ))
        second = asyncio.run(record_flow.update(
            RecordType.BUDGET, entry_id, {"expenseAmount": "550"}
        ))

        assert first.success is True
        assert second.success is True
        [stored] = asyncio.run(record_flow.list_budget_entries())
        assert stored.id == entry_id
        assert stored.amount_spent == Decimal("120.50")
        assert stored.expense_amount == Decimal("550")

    def test_update_invalid_change(self):
        """Test an update that breaks an invariant is rejected."""
        record_flow, _, _, _ = make_flows()
        created = asyncio.run(record_flow.create(RecordType.GOAL, GOAL_INPUT))

        result = asyncio.run(record_flow.update(
            RecordType.GOAL, created.record.id, {"frequency": None}
        ))

        assert result.success is False
        [stored] = asyncio.run(record_flow.list_goals())
        assert stored == created.record

    def test_update_missing(self):
        """Test updating an unknown record reports not found."""
        record_flow, _, _, _ = make_flows()
        record_id = uuid4()
        result = asyncio.run(record_flow.update(RecordType.GOAL, record_id, {"name": "X"}))
        assert result.success is False
        assert result.error == f"Goal not found: {record_id}"

    def test_update_unknown_field(self):
        """Test a misspelt field is rejected and nothing is written."""
        record_flow, _, _, audit_storage = make_flows()
        created = asyncio.run(record_flow.create(RecordType.BUDGET, {
            "income": "4000",
            "category": "Groceries",
            "expenseAmount": "500",
        }))

        result = asyncio.run(record_flow.update(
            RecordType.BUDGET, created.record.id, {"amountSpnt": 900}
        ))

        assert result.success is False
        assert result.error == "Unknown budget fields: amountSpnt"
        [stored] = asyncio.run(record_flow.list_budget_entries())
        assert stored == created.record
        assert AuditEventType.RECORD_UPDATED not in recorded_event_types(audit_storage)

    def test_update_without_changes(self):
        """Test an empty change set is reported, not saved."""
        record_flow, _, _, _ = make_flows()
        created = asyncio.run(record_flow.create(RecordType.GOAL, GOAL_INPUT))
        result = asyncio.run(record_flow.update(RecordType.GOAL, created.record.id, {}))
        assert result.success is False
        assert result.error == "Nothing to update"

    def test_delete(self):
        """Test deleting a record and deleting it again."""
        record_flow, _, _, audit_storage = make_flows()
        created = asyncio.run(record_flow.create(RecordType.GOAL, GOAL_INPUT))

        first = asyncio.run(record_flow.delete(RecordType.GOAL, created.record.id))
        second = asyncio.run(record_flow.delete(RecordType.GOAL, created.record.id))

        assert first.success is True
        assert second.success is False
        assert AuditEventType.RECORD_DELETED in recorded_event_types(audit_storage)

    def test_export(self, tmp_path):
        """Test the export writes the document and is audited."""
        record_flow, _, _, audit_storage = make_flows()
        asyncio.run(record_flow.create(RecordType.TRANSACTION, TRANSACTION_INPUT))

        result = asyncio.run(record_flow.export(tmp_path / "export.json"))

        assert result.success is True
        assert (tmp_path / "export.json").exists()
        assert AuditEventType.SNAPSHOT_EXPORTED in recorded_event_types(audit_storage)


class TestAnalyticsFlow:
    """Tests for report generation."""

    def test_generate_report(self):
        """Test a report is built from stored records."""
        record_flow, analytics_flow, _, audit_storage = make_flows()
        asyncio.run(record_flow.create(RecordType.TRANSACTION, TRANSACTION_INPUT))
        goal = asyncio.run(record_flow.create(RecordType.GOAL, GOAL_INPUT)).record

        result = asyncio.run(analytics_flow.generate_report(
            now=date(2026, 10, 19),
            saved_amounts={goal.id: Decimal("1200")},
        ))

        assert result.success is True
        report = result.report
        assert report.transaction_summary.total_expenses == Decimal("82.40")
        assert report.goals[0].percent == Decimal("50.00")
        assert report.recurring.total_monthly == Decimal("200.00")
        assert "Warning: spending exceeds income by 82.40 this period." in report.recommendations
        assert AuditEventType.REPORT_GENERATED in recorded_event_types(audit_storage)

    def test_engine_error_becomes_result(self):
        """Test an engine error is returned as a typed failure."""
        snapshot = Snapshot(budgets=[
            BudgetEntry(income=Decimal("4000"), category="Rent", expense_amount=Decimal("1200")),
            BudgetEntry(income=Decimal("3000"), category="Food", expense_amount=Decimal("300")),
        ])
        _, analytics_flow, _, audit_storage = make_flows(snapshot)

        result = asyncio.run(analytics_flow.generate_report(now=date(2026, 10, 19)))

        assert result.success is False
        assert result.report is None
        assert result.error_type == "ValidationError"
        assert "disagree" in result.error_message
        assert AuditEventType.ENGINE_ERROR in recorded_event_types(audit_storage)

    def test_storage_error_becomes_result(self):
        """Test a storage failure is returned as a typed failure."""
        result = asyncio.run(AnalyticsFlow(BrokenStorage()).generate_report())
        assert result.success is False
        assert result.error_type == "StorageError"

    def test_oversized_amount_becomes_result(self):
        """Test an amount too large to compute with fails the report cleanly."""
        record_flow, analytics_flow, _, audit_storage = make_flows()
        created = asyncio.run(record_flow.create(
            RecordType.GOAL, dict(GOAL_INPUT, incomeAmount="1e26", frequency="weekly")
        ))
        assert created.success is True

        result = asyncio.run(analytics_flow.generate_report(now=date(2026, 10, 19)))

        assert result.success is False
        assert result.report is None
        assert result.error_type == "ValidationError"
        assert "too large" in result.error_message
        assert AuditEventType.ENGINE_ERROR in recorded_event_types(audit_storage)

    def test_empty_records(self):
        """Test a report over no records succeeds."""
        _, analytics_flow, _, _ = make_flows()
        result = asyncio.run(analytics_flow.generate_report(now=date(2026, 10, 19)))
        assert result.success is True
        assert result.report.goals == []


class TestAppComponents:
    """Tests for the component factory."""

    def test_in_memory_components(self):
        record_flow, analytics_flow, storage = create_app_components(use_file_storage=False)
        assert isinstance(storage, InMemorySnapshotStorage)
        assert isinstance(record_flow, RecordFlow)
        assert isinstance(analytics_flow, AnalyticsFlow)

    def test_file_components(self, tmp_path):
        """Test file storage uses the given data file."""
        data_file = tmp_path / "data.json"
        record_flow, _, storage = create_app_components(data_file=data_file)
        assert isinstance(storage, JsonFileSnapshotStorage)

        asyncio.run(record_flow.create(RecordType.TRANSACTION, TRANSACTION_INPUT))
        assert data_file.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
