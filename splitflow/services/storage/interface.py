"""
Abstract Storage Interface

The ledger core never touches files. Loading and saving go through these
interfaces so the on-disk format can change, or be replaced by an
in-memory store in tests, without touching the accounting code.

The interface is intentionally small: load the registries, load and save
the ledger, and append to the audit trail.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from uuid import UUID

from splitflow.models.audit import AuditEvent
from splitflow.models.registry import Accounts, Tags
from splitflow.models.transaction import Transactions


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable name of where the ledger lives."""
        pass

    @abstractmethod
    def load_accounts(self) -> Accounts:
        """
        Load the account registry.

        Raises:
            StorageError: If the registry cannot be read or parsed
        """
        pass

    @abstractmethod
    def load_tags(self) -> Tags:
        """
        Load the tag registry, as stored (parents are not fixed here).

        Raises:
            StorageError: If the registry cannot be read or parsed
        """
        pass

    @abstractmethod
    def load_transactions(self) -> Transactions:
        """
        Load the ledger, as stored (order is not fixed here).

        A ledger that does not exist yet loads as empty.

        Raises:
            StorageError: If the ledger cannot be read or parsed
        """
        pass

    @abstractmethod
    def save_accounts(self, accounts: Accounts) -> None:
        pass

    @abstractmethod
    def save_tags(self, tags: Tags) -> None:
        pass

    @abstractmethod
    def save_transactions(self, transactions: Transactions) -> None:
        """
        Persist the whole ledger, replacing what was stored.

        Raises:
            StorageError: If the ledger cannot be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageFileError(StorageError):
    """A storage file could not be opened, read or written."""

    def __init__(self, path: Path, cause: Optional[OSError] = None):
        self.path = path
        self.cause = cause
        message = f'Failed to open "{path}"'
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class StorageFormatError(StorageError):
    """A storage file was read but its contents are not valid."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f'Failed to parse "{path}": {reason}')
