"""
Audit Logger

DESIGN DECISION: Every record change and report run is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. A history the user can review

The audit logger:
- Is async so it fits the storage and flow layers
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_engine.config import get_settings
from finance_engine.models.audit import AuditEvent, AuditEventBuilder
from finance_engine.services.storage import AuditStorageInterface


def configure_logging() -> None:
    """Configure stdlib logging and structlog from the app settings."""
    app_settings = get_settings().app

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, app_settings.log_level),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if app_settings.json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_record_created(
        self,
        record_type: str,
        record_id: UUID,
        label: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log record creation."""
        await self.log(AuditEventBuilder.record_created(
            record_type=record_type,
            record_id=record_id,
            label=label,
            correlation_id=correlation_id,
        ))

    async def log_record_updated(
        self,
        record_type: str,
        record_id: UUID,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log record update."""
        await self.log(AuditEventBuilder.record_updated(
            record_type=record_type,
            record_id=record_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        ))

    async def log_record_deleted(
        self,
        record_type: str,
        record_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log record deletion."""
        await self.log(AuditEventBuilder.record_deleted(
            record_type=record_type,
            record_id=record_id,
            correlation_id=correlation_id,
        ))

    async def log_record_rejected(
        self,
        record_type: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a record that failed validation."""
        await self.log(AuditEventBuilder.record_rejected(
            record_type=record_type,
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_snapshot_loaded(
        self,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.snapshot_loaded(
            counts=counts,
            correlation_id=correlation_id,
        ))

    async def log_report_generated(
        self,
        report_id: UUID,
        recommendation_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.report_generated(
            report_id=report_id,
            recommendation_count=recommendation_count,
            correlation_id=correlation_id,
        ))

    async def log_snapshot_exported(
        self,
        destination: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.snapshot_exported(
            destination=destination,
            counts=counts,
            correlation_id=correlation_id,
        ))

    async def log_engine_error(
        self,
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an engine failure."""
        await self.log(AuditEventBuilder.engine_error(
            error_type=error_type,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage failure."""
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., building a report).
    Pass it through all subsequent operations.
    """
    return uuid4()
