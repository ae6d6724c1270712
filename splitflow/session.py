"""
Ledger Session

This module ties the components together: it loads the registries and
the ledger through a storage backend, runs new purchases through
validation, and saves the ledger back.

DESIGN DECISION: The session is the ONLY owner of the ledger.
- Accounts and tags are read-only after loading
- The ledger is mutated only through add_purchase() and remove()
- Everything else reads through the query executor
- Every load, change and save is audited

Loaded data is repaired exactly once, here: missing parent tags are
defined and the ledger is put back in date order. The core never repairs
anything after that.
"""

from typing import Optional

import structlog

from splitflow.audit import AuditLogger
from splitflow.config import AppSettings, get_settings
from splitflow.models.dates import format_date
from splitflow.models.flow import SignedFlow
from splitflow.models.registry import Accounts, Tags
from splitflow.models.reports import ValidationResult
from splitflow.models.transaction import Purchase, Transaction, Transactions
from splitflow.queries import LedgerQueryExecutor
from splitflow.services.storage import LedgerStorageInterface, StorageError
from splitflow.validation import PurchaseValidator


logger = structlog.get_logger(__name__)


class PurchaseRejectedError(Exception):
    """A purchase failed validation and was not entered."""

    def __init__(self, result: ValidationResult, message: str):
        self.result = result
        super().__init__(message)


class LedgerSession:
    """
    One working session over a stored ledger.

    Flow:
    1. Load → registries and ledger, repaired and audited
    2. Edit → add validated purchases, remove entries
    3. Query → rows and summaries through the query executor
    4. Save → persist the ledger
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        accounts: Accounts,
        tags: Tags,
        transactions: Transactions,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._storage = storage
        self._accounts = accounts
        self._tags = tags
        self._transactions = transactions
        self._audit_logger = audit_logger or AuditLogger()
        self._settings = settings or get_settings().app
        self._validator = PurchaseValidator(accounts, tags, self._settings)
        self._queries = LedgerQueryExecutor(transactions, tags, self._settings)

    @classmethod
    def load(
        cls,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ) -> "LedgerSession":
        """
        Load and repair a ledger.

        Raises:
            StorageError: If any of the documents cannot be read or parsed
        """
        audit_logger = audit_logger or AuditLogger()

        try:
            accounts = storage.load_accounts()
            tags = storage.load_tags()
            transactions = storage.load_transactions()
        except StorageError as e:
            audit_logger.log_storage_error(operation="load", error_message=str(e))
            raise

        added_tags = tags.fix()
        reordered = transactions.fix()
        if added_tags or reordered:
            audit_logger.log_ledger_fixed(added_tags=added_tags, reordered=reordered)

        audit_logger.log_ledger_loaded(
            source=storage.describe(),
            accounts=len(accounts),
            tags=len(tags),
            transactions=len(transactions),
        )

        return cls(
            storage=storage,
            accounts=accounts,
            tags=tags,
            transactions=transactions,
            audit_logger=audit_logger,
            settings=settings,
        )

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def accounts(self) -> Accounts:
        return self._accounts

    @property
    def tags(self) -> Tags:
        return self._tags

    @property
    def transactions(self) -> Transactions:
        return self._transactions

    @property
    def queries(self) -> LedgerQueryExecutor:
        return self._queries

    @property
    def validator(self) -> PurchaseValidator:
        return self._validator

    def internal_flow(self, index: int, account: str) -> SignedFlow:
        return self._queries.internal_flow(index, account)

    # =========================================================================
    # CHANGES
    # =========================================================================

    def add_purchase(self, purchase: Purchase) -> int:
        """
        Validate and enter a purchase.

        Warnings do not block the purchase; errors do.

        Returns:
            Ledger index of the new entry

        Raises:
            PurchaseRejectedError: If validation reports errors
        """
        result = self._validator.validate(purchase)

        if result.has_errors:
            self._audit_logger.log_purchase_rejected(
                issues=[issue.model_dump() for issue in result.issues],
            )
            raise PurchaseRejectedError(result, self._validator.get_summary(result))

        index = self._transactions.add(purchase)

        self._audit_logger.log_transaction_added(
            index=index,
            kind=purchase.kind_str(),
            date=format_date(purchase.date),
            amount=purchase.amount.as_string_exact(),
            tag=purchase.tag,
        )

        return index

    def remove(self, index: int) -> Transaction:
        """
        Remove and return the entry at `index`.

        Raises:
            IndexError: If there is no entry at `index`
        """
        transaction = self._transactions.remove(index)

        self._audit_logger.log_transaction_removed(
            index=index,
            kind=transaction.kind_str(),
            date=format_date(transaction.date),
            amount=transaction.amount.as_string_exact(),
        )

        return transaction

    def save(self) -> None:
        """
        Persist the ledger.

        Raises:
            StorageError: If the ledger cannot be written
        """
        target = self._storage.describe()

        try:
            self._storage.save_transactions(self._transactions)
        except StorageError as e:
            self._audit_logger.log_save_failed(target=target, error_message=str(e))
            raise

        self._audit_logger.log_ledger_saved(
            target=target,
            transactions=len(self._transactions),
        )
        logger.info("ledger_saved", target=target, transactions=len(self._transactions))
