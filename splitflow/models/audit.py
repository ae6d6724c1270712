"""
Audit Models for splitflow

Every change to the ledger, and every load or save, produces an audit
event. Events are append-only: they are never modified or deleted.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger lifecycle
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_FIXED = "ledger_fixed"
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"

    # Ledger changes
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REMOVED = "transaction_removed"
    PURCHASE_REJECTED = "purchase_rejected"

    # System events
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    `correlation_id` ties together the events of one session.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'ledger', 'transaction')"
    )
    entity_ref: Optional[str] = Field(
        default=None,
        description="Reference to the entity, e.g. a ledger index or file name"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one session)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_ref": self.entity_ref,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_json_line(self) -> str:
        """One line of the audit log file."""
        return json.dumps(self.model_dump(mode="json"), sort_keys=True)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(index, purchase, correlation_id)
        event = AuditEventBuilder.ledger_saved("transactions.json", 42, correlation_id)
    """

    @staticmethod
    def ledger_loaded(
        source: str,
        accounts: int,
        tags: int,
        transactions: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            entity_ref=source,
            correlation_id=correlation_id,
            description=f"Ledger loaded with {transactions} transactions",
            details={
                "accounts": accounts,
                "tags": tags,
                "transactions": transactions,
            },
        )

    @staticmethod
    def ledger_fixed(
        added_tags: list[str],
        reordered: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_FIXED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Loaded ledger data needed repair",
            details={
                "added_parent_tags": added_tags,
                "transactions_reordered": reordered,
            },
        )

    @staticmethod
    def ledger_saved(
        target: str,
        transactions: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            entity_type="ledger",
            entity_ref=target,
            correlation_id=correlation_id,
            description=f"Ledger saved with {transactions} transactions",
            details={"transactions": transactions},
        )

    @staticmethod
    def save_failed(
        target: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            entity_ref=target,
            correlation_id=correlation_id,
            description="Saving the ledger failed",
            error_message=error_message,
        )

    @staticmethod
    def transaction_added(
        index: int,
        kind: str,
        date: str,
        amount: str,
        tag: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_ref=str(index),
            correlation_id=correlation_id,
            description=f"{kind} of {amount} added on {date}",
            details={
                "kind": kind,
                "date": date,
                "amount": amount,
                "tag": tag,
            },
        )

    @staticmethod
    def transaction_removed(
        index: int,
        kind: str,
        date: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REMOVED,
            entity_type="transaction",
            entity_ref=str(index),
            correlation_id=correlation_id,
            description=f"{kind} of {amount} removed from {date}",
            details={
                "kind": kind,
                "date": date,
                "amount": amount,
            },
        )

    @staticmethod
    def purchase_rejected(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PURCHASE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Purchase rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
