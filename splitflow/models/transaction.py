"""
Ledger Transactions

The ledger is an ordered list of transactions, always sorted by date.
It is the single source of truth: every balance and every flow figure is
derived from it by replay, nothing derived is stored.

Transaction kinds form a closed set. Today there is exactly one kind,
Purchase. Code that behaves differently per kind goes through
transaction_kind(), which raises UnsupportedTransactionError for anything
it does not know, so a new kind cannot be silently ignored.

Cost splitting:
- internal delta: the account's apportioned share of the cost, as a debit
- external delta: the internal delta plus the full amount for the buyer,
  who fronted the money
"""

import datetime
from bisect import bisect_right
from enum import Enum
from typing import Callable, Iterator, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    RootModel,
)

from splitflow.models.dates import LedgerDate, today
from splitflow.models.errors import UnknownReferenceError, UnsupportedTransactionError
from splitflow.models.flow import FlowStatesSnapshot, SignedFlow
from splitflow.models.money import CentsAmount, SignedCentsAmount
from splitflow.models.registry import Tags


class TransactionKind(str, Enum):
    """Kinds of ledger transactions."""
    PURCHASE = "purchase"


# =============================================================================
# CONSUMERS
# =============================================================================

class Consumers(RootModel[dict[str, PositiveInt]]):
    """
    Who consumed a purchase, and in what proportion.

    Maps account name to a positive share count. Accounts are always taken
    in ascending name order, so apportionment does not depend on the order
    the shares were entered or stored in.
    """
    root: dict[str, PositiveInt] = Field(default_factory=dict)

    def __contains__(self, account: object) -> bool:
        return account in self.root

    def __iter__(self) -> Iterator[str]:
        return iter(self.accounts())

    def __len__(self) -> int:
        return len(self.root)

    def accounts(self) -> list[str]:
        return sorted(self.root)

    def weights(self) -> list[int]:
        return [self.root[account] for account in self.accounts()]

    def share(self, account: str) -> int:
        try:
            return self.root[account]
        except KeyError:
            raise UnknownReferenceError("consumer", account) from None

    def apportion(self, amount: CentsAmount) -> dict[str, CentsAmount]:
        """Split `amount` among the consumers by their shares."""
        return dict(zip(self.accounts(), amount.subdiv(self.weights())))


# =============================================================================
# PURCHASE
# =============================================================================

class Purchase(BaseModel):
    """
    A shared purchase: one buyer paid `amount`, the consumers share the cost.

    `amount` is the total cost. The input layer guarantees that consumers
    is non-empty and that every name refers to a known account and tag.
    """
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    kind: Literal["purchase"] = "purchase"
    date: LedgerDate
    amount: CentsAmount
    desc: str = ""
    tag: str
    buyer: str
    consumers: Consumers = Field(
        default_factory=Consumers,
        validation_alias=AliasChoices("consumers", "users"),
    )

    def kind_str(self) -> str:
        return "Purchase"

    def accounts(self) -> list[str]:
        """Buyer first, then every other consumer."""
        return [self.buyer] + [
            account for account in self.consumers.accounts()
            if account != self.buyer
        ]

    def internal_delta(self, account: str) -> SignedCentsAmount:
        """The account's share of the cost, negated; zero for non-consumers."""
        if account not in self.consumers:
            return SignedCentsAmount.zero()
        return -self.consumers.apportion(self.amount)[account]

    def external_delta(self, account: str) -> SignedCentsAmount:
        delta = self.internal_delta(account)
        if account == self.buyer:
            delta = delta + self.amount
        return delta

    def internal_flow(
        self,
        account: str,
        tags: Tags,
        transactions: "Transactions",
    ) -> SignedFlow:
        """
        Estimate how much of the account's daily flow this purchase causes.

        The purchase must already be part of `transactions`.
        """
        without_state = transactions.snapshot_before(self.date, account, tags).state[self.tag]
        with_state = transactions.snapshot_after(self.date, account, tags).state[self.tag]
        return SignedFlow.approx(self.internal_delta(account), without_state, with_state)


# Closed set of transaction variants. Extend both the Union and
# transaction_kind() when adding a kind.
Transaction = Union[Purchase]


def transaction_kind(transaction: Transaction) -> TransactionKind:
    if isinstance(transaction, Purchase):
        return TransactionKind.PURCHASE
    raise UnsupportedTransactionError(
        f"Unsupported transaction type: {type(transaction).__name__}"
    )


def internal_delta(transaction: Transaction, account: str) -> SignedCentsAmount:
    if transaction_kind(transaction) is TransactionKind.PURCHASE:
        return transaction.internal_delta(account)
    raise UnsupportedTransactionError(transaction.kind)


def external_delta(transaction: Transaction, account: str) -> SignedCentsAmount:
    if transaction_kind(transaction) is TransactionKind.PURCHASE:
        return transaction.external_delta(account)
    raise UnsupportedTransactionError(transaction.kind)


# =============================================================================
# LEDGER
# =============================================================================

class Transactions(RootModel[list[Transaction]]):
    """
    The ledger: transactions in ascending date order.

    INVARIANT: dates never decrease along the list. Entries with equal
    dates keep their insertion order.
    """
    root: list[Transaction] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Transaction:
        return self.root[index]

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.root)

    def first_date(self) -> Optional[datetime.date]:
        if not self.root:
            return None
        return self.root[0].date

    def is_sorted(self) -> bool:
        return all(
            earlier.date <= later.date
            for earlier, later in zip(self.root, self.root[1:])
        )

    def add(self, transaction: Transaction) -> int:
        """Insert after every entry dated on or before it; return the index."""
        index = bisect_right(self.root, transaction.date, key=lambda entry: entry.date)
        self.root.insert(index, transaction)
        return index

    def remove(self, index: int) -> Transaction:
        if not 0 <= index < len(self.root):
            raise IndexError(f"No transaction at index {index} (ledger has {len(self.root)})")
        return self.root.pop(index)

    def fix(self) -> bool:
        """
        Restore date order after loading data from outside.

        The sort is stable. Returns True if the order changed.
        """
        if self.is_sorted():
            return False
        self.root.sort(key=lambda entry: entry.date)
        return True

    def balance(
        self,
        account: str,
        until: Optional[datetime.date] = None,
    ) -> tuple[SignedCentsAmount, SignedCentsAmount]:
        """Sum of (internal, external) deltas, optionally up to and including `until`."""
        internal = SignedCentsAmount.zero()
        external = SignedCentsAmount.zero()
        for transaction in self.root:
            if until is not None and transaction.date > until:
                break
            internal += internal_delta(transaction, account)
            external += external_delta(transaction, account)
        return internal, external

    # -------------------------------------------------------------------------
    # Replay
    # -------------------------------------------------------------------------

    def _replay(
        self,
        day: datetime.date,
        account: str,
        tags: Tags,
        include: Callable[[datetime.date], bool],
    ) -> FlowStatesSnapshot:
        start = min(self.first_date() or today(), day)
        snapshot = FlowStatesSnapshot(start, tags)

        for transaction in self.root:
            if not include(transaction.date):
                break
            if transaction_kind(transaction) is TransactionKind.PURCHASE:
                snapshot.add(transaction, account, tags)

        snapshot.forward(day)
        return snapshot

    def snapshot_before(
        self, day: datetime.date, account: str, tags: Tags
    ) -> FlowStatesSnapshot:
        """Flow states on `day` from every transaction dated strictly before it."""
        return self._replay(day, account, tags, lambda entry_date: entry_date < day)

    def snapshot_after(
        self, day: datetime.date, account: str, tags: Tags
    ) -> FlowStatesSnapshot:
        """Flow states on `day` including the transactions dated on it."""
        return self._replay(day, account, tags, lambda entry_date: entry_date <= day)
