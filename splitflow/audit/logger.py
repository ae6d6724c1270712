"""
Audit Logger

Every change to the ledger, and every load or save, is logged:
1. As a structured log record (for debugging)
2. To an append-only audit store, when one is configured

A failing audit store never breaks the ledger operation that triggered
the event; the failure itself is logged instead.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from splitflow.config import AppSettings
from splitflow.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from splitflow.services.storage import AuditStorageInterface, StorageError


def _processors(json_output: bool) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _configure_structlog(json_output: bool) -> None:
    # Loggers are not cached, so a later call changes every existing logger
    structlog.reset_defaults()
    structlog.configure(
        processors=_processors(json_output=json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


# Configure structlog for local logging
_configure_structlog(json_output=True)


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Apply the configured log level and renderer."""
    settings = settings or AppSettings()
    logging.basicConfig(format="%(message)s", level=settings.log_level)
    logging.getLogger().setLevel(settings.log_level)
    _configure_structlog(json_output=settings.log_json)


_SEVERITY_LEVELS = {
    AuditSeverity.DEBUG: logging.DEBUG,
    AuditSeverity.INFO: logging.INFO,
    AuditSeverity.WARNING: logging.WARNING,
    AuditSeverity.ERROR: logging.ERROR,
    AuditSeverity.CRITICAL: logging.CRITICAL,
}


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log
    2. The audit store, if one was given
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        correlation_id: Optional[UUID] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
            correlation_id: Attached to every event built by this logger.
                    A fresh one is created if omitted.
        """
        self._storage = storage
        self._correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("splitflow.audit")

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        self._logger.log(_SEVERITY_LEVELS[event.severity], "audit_event", **event.to_log_dict())

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_ledger_loaded(
        self,
        source: str,
        accounts: int,
        tags: int,
        transactions: int,
    ) -> None:
        self.log(AuditEventBuilder.ledger_loaded(
            source=source,
            accounts=accounts,
            tags=tags,
            transactions=transactions,
            correlation_id=self._correlation_id,
        ))

    def log_ledger_fixed(self, added_tags: list[str], reordered: bool) -> None:
        self.log(AuditEventBuilder.ledger_fixed(
            added_tags=added_tags,
            reordered=reordered,
            correlation_id=self._correlation_id,
        ))

    def log_ledger_saved(self, target: str, transactions: int) -> None:
        self.log(AuditEventBuilder.ledger_saved(
            target=target,
            transactions=transactions,
            correlation_id=self._correlation_id,
        ))

    def log_save_failed(self, target: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(
            target=target,
            error_message=error_message,
            correlation_id=self._correlation_id,
        ))

    def log_transaction_added(
        self,
        index: int,
        kind: str,
        date: str,
        amount: str,
        tag: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            index=index,
            kind=kind,
            date=date,
            amount=amount,
            tag=tag,
            correlation_id=self._correlation_id,
        ))

    def log_transaction_removed(
        self,
        index: int,
        kind: str,
        date: str,
        amount: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_removed(
            index=index,
            kind=kind,
            date=date,
            amount=amount,
            correlation_id=self._correlation_id,
        ))

    def log_purchase_rejected(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.purchase_rejected(
            issues=issues,
            correlation_id=self._correlation_id,
        ))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=self._correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=self._correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One ID per session ties its loads, edits and saves together.
    """
    return uuid4()
