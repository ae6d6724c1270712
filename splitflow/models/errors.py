"""
Invariant Errors for the Ledger Core

The accounting core never repairs bad input. When a caller breaks one of
its preconditions it fails immediately with one of the exceptions below,
so the broken invariant can be traced back to the layer that produced it.

Taxonomy:
- AmountError: arithmetic preconditions (negative cents, non-positive weights,
  non-positive duration or divisor)
- FormatOverflowError: an amount too large for the widest scale suffix
- TemporalOrderError: a flow snapshot asked to move backwards in time
- UnknownReferenceError: a tag or account that is not registered
- UnsupportedTransactionError: a transaction kind without a handler
"""


class LedgerInvariantError(Exception):
    """Base exception for violated ledger invariants."""
    pass


class AmountError(LedgerInvariantError, ValueError):
    """An arithmetic precondition on a money amount was violated."""
    pass


class FormatOverflowError(AmountError):
    """Amount is too large to be rendered with a known scale suffix."""
    pass


class TemporalOrderError(LedgerInvariantError):
    """A snapshot was asked to move to a date before its current date."""
    pass


class UnknownReferenceError(LedgerInvariantError, KeyError):
    """A tag or account reference is not known to the registry."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind}: {name!r}")

    def __str__(self) -> str:
        return self.args[0]


class UnsupportedTransactionError(LedgerInvariantError, TypeError):
    """No handler exists for this transaction kind."""
    pass
