"""
Consumption Flow Model

A purchase is not "spent" on the day it is paid. Each tag turns the money
put into it into a pool that is released at a constant rate per day until
the tag's duration has elapsed. The released amount per day is the flow.

DESIGN DECISION: one pool per tag, not per purchase. Adding a purchase to
a tag accumulates its amount into the pool and RESETS the remaining days
to that purchase's duration. A small late purchase therefore changes how
fast the older money in the same pool drains. Flooring in step() is never
corrected; the last day of a pool absorbs whatever is left.

Flow attribution to a single purchase replays the ledger twice (without
and with the purchase's date) and scales the tag's current flow by the
purchase's share of the amount that entered the pool on that date.
"""

from copy import copy
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Iterator

from splitflow.models.dates import succ
from splitflow.models.errors import (
    AmountError,
    LedgerInvariantError,
    TemporalOrderError,
    UnknownReferenceError,
)
from splitflow.models.money import CentsAmount, SignedCentsAmount
from splitflow.models.registry import Tags

if TYPE_CHECKING:
    from splitflow.models.transaction import Purchase


def _divide_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def _entered_between(without_state: "FlowState", with_state: "FlowState") -> int:
    entered = (with_state.amount - without_state.amount).cents
    if entered == 0:
        raise AmountError("No amount entered the pool between the two states")
    return entered


# =============================================================================
# FLOW VALUES
# =============================================================================

@dataclass(frozen=True, slots=True)
class Flow:
    """Amount released from a pool in one day."""
    amount: CentsAmount

    @classmethod
    def zero(cls) -> "Flow":
        return cls(CentsAmount.zero())

    @classmethod
    def approx(
        cls,
        amount: CentsAmount,
        without_state: "FlowState",
        with_state: "FlowState",
    ) -> "Flow":
        """Share of with_state's flow owed to `amount` (see SignedFlow.approx)."""
        if not amount:
            return cls.zero()
        entered = _entered_between(without_state, with_state)
        return cls(CentsAmount(amount.cents * with_state.flow().amount.cents // entered))


@dataclass(frozen=True, slots=True)
class SignedFlow:
    """Daily flow with a direction, as seen from one account."""
    amount: SignedCentsAmount

    @classmethod
    def zero(cls) -> "SignedFlow":
        return cls(SignedCentsAmount.zero())

    @classmethod
    def approx(
        cls,
        amount: SignedCentsAmount,
        without_state: "FlowState",
        with_state: "FlowState",
    ) -> "SignedFlow":
        """
        Estimate the flow contributed by `amount`.

        Assumes the contribution is proportional to amount's share of what
        entered the pool between the two states:

            amount * with.flow() / (with.amount - without.amount)

        Integer division truncates toward zero. Several purchases entering
        the same pool on the same day each see the combined state, so their
        estimates need not add up to the pool's flow exactly.
        """
        if not amount:
            return cls.zero()
        entered = _entered_between(without_state, with_state)
        numerator = amount.cents * with_state.flow().amount.cents
        return cls(SignedCentsAmount(_divide_toward_zero(numerator, entered)))


# =============================================================================
# PER-TAG STATE
# =============================================================================

@dataclass
class FlowState:
    """
    Unabsorbed money in one tag's pool.

    INVARIANT: amount == 0 exactly when days == 0 (the inactive state).
    """
    amount: CentsAmount = CentsAmount(0)
    days: int = 0

    def inactive(self) -> bool:
        if (self.amount.cents == 0) != (self.days == 0):
            raise LedgerInvariantError(
                f"Flow state out of balance: {self.amount} over {self.days} days"
            )
        return self.days == 0

    def flow(self) -> Flow:
        """Today's release, without advancing time."""
        if self.inactive():
            return Flow.zero()
        return Flow(self.amount // self.days)

    def step(self) -> Flow:
        """Release one day's share and advance by one day."""
        if self.inactive():
            return Flow.zero()

        absorbed = self.amount // self.days
        self.amount -= absorbed
        self.days -= 1

        return Flow(absorbed)

    def next(self) -> "FlowState":
        ret = copy(self)
        ret.step()
        return ret

    def add(self, amount: CentsAmount, dur: int) -> None:
        """
        Pour `amount` into the pool and restart the countdown at `dur` days.

        Raises:
            AmountError: if amount is non-zero and dur is not positive
        """
        if not amount:
            return
        if dur <= 0:
            raise AmountError(f"Flow duration must be positive, got {dur}")
        self.amount += amount
        self.days = dur


class FlowStates:
    """One FlowState per configured tag."""

    def __init__(self, states: dict[str, FlowState]):
        self._states = states

    @classmethod
    def new(cls, tags: Tags) -> "FlowStates":
        return cls({tag: FlowState() for tag in tags})

    def __getitem__(self, tag: str) -> FlowState:
        try:
            return self._states[tag]
        except KeyError:
            raise UnknownReferenceError("tag", tag) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def items(self):
        return self._states.items()

    def step(self) -> None:
        for state in self._states.values():
            state.step()

    def add(self, purchase: "Purchase", account: str, tags: Tags) -> None:
        """Fold the account's share of `purchase` into the purchase's tag."""
        dur = tags.dur(purchase.tag)
        amount = abs(purchase.internal_delta(account))
        self[purchase.tag].add(amount, dur)

    def total_flow(self) -> Flow:
        total = CentsAmount.zero()
        for state in self._states.values():
            total += state.flow().amount
        return Flow(total)


# =============================================================================
# DATED SNAPSHOT
# =============================================================================

class FlowStatesSnapshot:
    """
    Flow states as of a given day.

    A snapshot only moves forward: stepping advances its date by one day,
    and any request for an earlier date raises TemporalOrderError.
    """

    def __init__(self, day: date, tags: Tags):
        self._date = day
        self._state = FlowStates.new(tags)

    @property
    def date(self) -> date:
        return self._date

    @property
    def state(self) -> FlowStates:
        return self._state

    def step(self) -> None:
        self._state.step()
        self._date = succ(self._date)

    def forward(self, day: date) -> None:
        if day < self._date:
            raise TemporalOrderError(
                f"Cannot move snapshot from {self._date} back to {day}"
            )
        while self._date < day:
            self.step()

    def add(self, purchase: "Purchase", account: str, tags: Tags) -> None:
        self.forward(purchase.date)
        self._state.add(purchase, account, tags)
