"""
Data Models Package

Money primitives, the ledger and its transactions, the flow model, and the
records exchanged with the rest of the application.
"""

from splitflow.models.errors import (
    AmountError,
    FormatOverflowError,
    LedgerInvariantError,
    TemporalOrderError,
    UnknownReferenceError,
    UnsupportedTransactionError,
)
from splitflow.models.money import CentsAmount, SignedCentsAmount
from splitflow.models.dates import (
    DATE_STRING_WIDTH,
    LedgerDate,
    format_date,
    parse_date,
    pred,
    succ,
    today,
)
from splitflow.models.registry import AccountData, Accounts, TagData, Tags
from splitflow.models.flow import (
    Flow,
    FlowState,
    FlowStates,
    FlowStatesSnapshot,
    SignedFlow,
)
from splitflow.models.transaction import (
    Consumers,
    Purchase,
    Transaction,
    TransactionKind,
    Transactions,
    external_delta,
    internal_delta,
    transaction_kind,
)
from splitflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from splitflow.models.reports import (
    AccountSummary,
    TransactionRow,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Errors
    "AmountError",
    "FormatOverflowError",
    "LedgerInvariantError",
    "TemporalOrderError",
    "UnknownReferenceError",
    "UnsupportedTransactionError",
    # Money and dates
    "CentsAmount",
    "SignedCentsAmount",
    "DATE_STRING_WIDTH",
    "LedgerDate",
    "format_date",
    "parse_date",
    "pred",
    "succ",
    "today",
    # Registries
    "AccountData",
    "Accounts",
    "TagData",
    "Tags",
    # Flow model
    "Flow",
    "FlowState",
    "FlowStates",
    "FlowStatesSnapshot",
    "SignedFlow",
    # Ledger
    "Consumers",
    "Purchase",
    "Transaction",
    "TransactionKind",
    "Transactions",
    "external_delta",
    "internal_delta",
    "transaction_kind",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Reports
    "AccountSummary",
    "TransactionRow",
    "ValidationIssue",
    "ValidationResult",
]
