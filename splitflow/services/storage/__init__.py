"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements JSON files as the backend, but designed to be swappable.
"""

from splitflow.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    StorageError,
    StorageFileError,
    StorageFormatError,
)
from splitflow.services.storage.json_files import (
    JsonLedgerStorage,
    JsonLinesAuditStorage,
    read_model,
    write_model,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "StorageError",
    "StorageFileError",
    "StorageFormatError",
    # JSON implementation
    "JsonLedgerStorage",
    "JsonLinesAuditStorage",
    "read_model",
    "write_model",
]
