"""
JSON File Storage Implementation

Each registry and the ledger live in their own JSON document, written and
parsed by the pydantic models themselves:

- accounts.json: {"alice": {}, "bob": {"color": "ff8800"}}
- tags.json: {"food": {"dur": 7, "parent": null}}
- transactions.json: [{"kind": "purchase", "date": "01-02-2024", ...}]

Dates are DD-MM-YYYY and amounts are integer cents, so files stay
readable and diff well. Writes go to a temporary file that replaces the
target, so a failed save never leaves a half-written ledger behind. The
replace step is retried a few times when the target is locked.

The audit trail is a JSON Lines file, one event per line, append-only.
"""

from pathlib import Path
from typing import Optional, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from splitflow.config import StorageSettings, get_settings
from splitflow.models.audit import AuditEvent
from splitflow.models.registry import Accounts, Tags
from splitflow.models.transaction import Transactions
from splitflow.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    StorageError,
    StorageFileError,
    StorageFormatError,
)


ModelT = TypeVar("ModelT", bound=BaseModel)

logger = structlog.get_logger(__name__)


def read_model(path: Path, model: type[ModelT]) -> ModelT:
    """Read and validate one JSON document."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise StorageFormatError(path, str(e)) from e
    except OSError as e:
        raise StorageFileError(path, e) from e

    try:
        return model.model_validate_json(text)
    except ValidationError as e:
        raise StorageFormatError(path, str(e)) from e


@retry(
    retry=retry_if_exception_type(PermissionError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)
def _replace(source: Path, target: Path) -> None:
    # Another process holding the target open makes this fail transiently
    source.replace(target)


def write_model(path: Path, value: BaseModel) -> None:
    """Serialize one JSON document and atomically replace `path`."""
    text = value.model_dump_json(indent=2)
    temp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(text + "\n", encoding="utf-8")
        _replace(temp_path, path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise StorageFileError(path, e) from e


class JsonLedgerStorage(LedgerStorageInterface):
    """Ledger storage in three JSON files."""

    def __init__(
        self,
        accounts_path: Path,
        tags_path: Path,
        transactions_path: Path,
    ):
        self._accounts_path = Path(accounts_path)
        self._tags_path = Path(tags_path)
        self._transactions_path = Path(transactions_path)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[StorageSettings] = None,
    ) -> "JsonLedgerStorage":
        settings = settings or get_settings().storage
        return cls(
            accounts_path=settings.accounts_path,
            tags_path=settings.tags_path,
            transactions_path=settings.transactions_path,
        )

    def describe(self) -> str:
        return str(self._transactions_path)

    def load_accounts(self) -> Accounts:
        accounts = read_model(self._accounts_path, Accounts)
        logger.debug("accounts_loaded", path=str(self._accounts_path), count=len(accounts))
        return accounts

    def load_tags(self) -> Tags:
        tags = read_model(self._tags_path, Tags)
        logger.debug("tags_loaded", path=str(self._tags_path), count=len(tags))
        return tags

    def load_transactions(self) -> Transactions:
        if not self._transactions_path.exists():
            logger.info("ledger_missing", path=str(self._transactions_path))
            return Transactions()

        transactions = read_model(self._transactions_path, Transactions)
        logger.debug(
            "transactions_loaded",
            path=str(self._transactions_path),
            count=len(transactions),
        )
        return transactions

    def save_accounts(self, accounts: Accounts) -> None:
        write_model(self._accounts_path, accounts)

    def save_tags(self, tags: Tags) -> None:
        write_model(self._tags_path, tags)

    def save_transactions(self, transactions: Transactions) -> None:
        write_model(self._transactions_path, transactions)
        logger.debug(
            "transactions_saved",
            path=str(self._transactions_path),
            count=len(transactions),
        )


class JsonLinesAuditStorage(AuditStorageInterface):
    """Append-only audit trail, one JSON event per line."""

    def __init__(self, path: Path):
        self._path = Path(path)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[StorageSettings] = None,
    ) -> "JsonLinesAuditStorage":
        settings = settings or get_settings().storage
        return cls(settings.audit_path)

    def append_event(self, event: AuditEvent) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(event.to_json_line() + "\n")
        except OSError as e:
            raise StorageFileError(self._path, e) from e
        return True

    def _read_events(self) -> list[AuditEvent]:
        if not self._path.exists():
            return []

        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise StorageFileError(self._path, e) from e

        events = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValidationError as e:
                raise StorageFormatError(self._path, f"line {number}: {e}") from e
        return events

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [
            event for event in self._read_events()
            if event.correlation_id == correlation_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        if limit < 1:
            raise StorageError(f"limit must be positive, got {limit}")
        events = self._read_events()
        return list(reversed(events))[:limit]
