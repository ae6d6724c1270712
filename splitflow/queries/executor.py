"""
Ledger Query Engine

DESIGN DECISION: Queries are DERIVED, never stored.
Every figure shown for a transaction (its deltas and the flow it causes)
and every account summary is recomputed from the ledger by replay. The
executor holds references to the session's ledger and tags, and never
mutates them.

Amounts come back both as values and as text already fitted to the
configured column widths, so the presentation layer never formats money
itself.
"""

import datetime
from typing import Optional

from splitflow.config import AppSettings, get_settings
from splitflow.models.dates import format_date, today
from splitflow.models.errors import UnsupportedTransactionError
from splitflow.models.flow import SignedFlow
from splitflow.models.registry import Tags
from splitflow.models.reports import AccountSummary, TransactionRow
from splitflow.models.transaction import (
    Transaction,
    TransactionKind,
    Transactions,
    external_delta,
    internal_delta,
    transaction_kind,
)


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class LedgerQueryExecutor:
    """
    Read-only views of the ledger for one account at a time.

    GUARANTEES:
    - Only reports what the ledger contains
    - Balances and flows are exact cents, never estimated from rounded text
    """

    def __init__(
        self,
        transactions: Transactions,
        tags: Tags,
        settings: Optional[AppSettings] = None,
    ):
        self._transactions = transactions
        self._tags = tags
        self._settings = settings or get_settings().app

    def _get(self, index: int) -> Transaction:
        if not 0 <= index < len(self._transactions):
            raise QueryExecutionError(
                f"No transaction at index {index} (ledger has {len(self._transactions)})"
            )
        return self._transactions[index]

    def internal_flow(self, index: int, account: str) -> SignedFlow:
        """Flow the transaction at `index` causes for `account`."""
        transaction = self._get(index)
        if transaction_kind(transaction) is TransactionKind.PURCHASE:
            return transaction.internal_flow(account, self._tags, self._transactions)
        raise UnsupportedTransactionError(transaction.kind)

    def row(self, index: int, account: str) -> TransactionRow:
        """One ledger entry as seen from `account`."""
        transaction = self._get(index)

        internal = internal_delta(transaction, account)
        external = external_delta(transaction, account)
        flow = self.internal_flow(index, account).amount

        return TransactionRow(
            index=index,
            account=account,
            date=transaction.date,
            date_text=format_date(transaction.date),
            kind=transaction.kind_str(),
            desc=transaction.desc,
            accounts=transaction.accounts(),
            amount=transaction.amount,
            internal_delta=internal,
            external_delta=external,
            internal_flow=flow,
            amount_text=transaction.amount.as_string_width(self._settings.amount_width),
            internal_delta_text=internal.as_string_width(self._settings.delta_width),
            external_delta_text=external.as_string_width(self._settings.delta_width),
            internal_flow_text=flow.as_string_width(self._settings.flow_width),
        )

    def rows(self, account: str) -> list[TransactionRow]:
        return [self.row(index, account) for index in range(len(self._transactions))]

    def summary(
        self,
        account: str,
        day: Optional[datetime.date] = None,
    ) -> AccountSummary:
        """
        Balances and flows for `account` as of `day`.

        `day` defaults to today and is moved forward to the first ledger
        date if it falls before it.
        """
        day = day or today()
        start = self._transactions.first_date()
        if start is not None and day < start:
            day = start

        internal, external = self._transactions.balance(account, until=day)
        snapshot = self._transactions.snapshot_after(day, account, self._tags)

        flow_by_tag = {
            tag: state.flow().amount
            for tag, state in snapshot.state.items()
        }

        transaction_count = sum(
            1 for transaction in self._transactions
            if transaction.date <= day and account in transaction.accounts()
        )

        return AccountSummary(
            account=account,
            as_of=day,
            transaction_count=transaction_count,
            internal_balance=internal,
            external_balance=external,
            flow_by_tag=flow_by_tag,
            total_flow=snapshot.state.total_flow().amount,
        )
