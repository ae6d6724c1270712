"""Services package."""

from splitflow.services.storage import (
    AuditStorageInterface,
    JsonLedgerStorage,
    JsonLinesAuditStorage,
    LedgerStorageInterface,
    StorageError,
    StorageFileError,
    StorageFormatError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "JsonLedgerStorage",
    "JsonLinesAuditStorage",
    "LedgerStorageInterface",
    "StorageError",
    "StorageFileError",
    "StorageFormatError",
]
