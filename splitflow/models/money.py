"""
Money Primitives

Amounts are integer counts of cents. There is no floating point anywhere in
the ledger: splitting, amortizing and formatting all work on whole cents.

- CentsAmount: never negative. Any operation that would produce a negative
  value raises AmountError instead of clamping.
- SignedCentsAmount: balances and deltas, where direction matters.

Both types plug into pydantic, so ledger models can declare them as field
types; they validate from plain integers and serialize back to integers.

Formatting targets fixed-width terminal columns:
- as_string_exact: all digits, two decimals
- as_string_precision(n): n significant digits with a k/M/G suffix once the
  dropped digits reach past the decimal point by 3/6/9 places
- as_string_width(w): the most precise rendering that fits in w characters
"""

from dataclasses import dataclass
from typing import Any, Sequence, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from splitflow.models.errors import AmountError, FormatOverflowError


CENT_DIGITS = 2
SCALE_SUFFIXES = ("", "k", "M", "G")


# =============================================================================
# FORMATTING HELPERS
# =============================================================================

def _format_exact(cents: int, separators: bool = False) -> str:
    units, rest = divmod(cents, 10 ** CENT_DIGITS)
    integer = f"{units:,}" if separators else str(units)
    return f"{integer}.{rest:0{CENT_DIGITS}d}"


def _format_precision(cents: int, precision: int) -> str:
    """
    Render a non-negative cent count with `precision` significant digits.

    Dropped digits are truncated, never rounded, so a rendering is never
    wider than the value it stands for.
    """
    if precision < 1:
        raise AmountError(f"Precision must be at least 1, got {precision}")

    omitted = max(0, len(str(cents)) - precision)

    level = 0
    while omitted >= 3 * (level + 1) + CENT_DIGITS:
        level += 1
    if level >= len(SCALE_SUFFIXES):
        raise FormatOverflowError(
            f"{_format_exact(cents)} needs a scale suffix beyond "
            f"{SCALE_SUFFIXES[-1]!r} at precision {precision}"
        )

    kept = cents // 10 ** omitted
    decimals = 3 * level + CENT_DIGITS - omitted
    if decimals > 0:
        integer, fraction = divmod(kept, 10 ** decimals)
        text = f"{integer}.{fraction:0{decimals}d}"
    else:
        text = str(kept * 10 ** -decimals)

    return text + SCALE_SUFFIXES[level]


def _format_width(cents: int, width: int) -> str:
    exact = _format_exact(cents)
    if len(exact) <= width:
        return exact

    for precision in range(len(str(cents)), 0, -1):
        text = _format_precision(cents, precision)
        if len(text) <= width:
            return text

    return _format_precision(cents, 1)


def _subdivide(cents: int, weights: Sequence[int]) -> list[int]:
    weights = list(weights)
    if not weights:
        raise AmountError("Cannot subdivide an amount into zero parts")
    if any(weight <= 0 for weight in weights):
        raise AmountError(f"Weights must be positive: {weights}")

    total = sum(weights)
    parts = [cents * weight // total for weight in weights]

    # Leftover cents go to the lowest indices first
    remainder = cents - sum(parts)
    for index in range(remainder):
        parts[index] += 1

    return parts


def _amount_schema(cls: type) -> core_schema.CoreSchema:
    from_int = core_schema.no_info_after_validator_function(
        cls, core_schema.int_schema()
    )
    return core_schema.json_or_python_schema(
        json_schema=from_int,
        python_schema=core_schema.union_schema([
            core_schema.is_instance_schema(cls),
            from_int,
        ]),
        serialization=core_schema.plain_serializer_function_ser_schema(
            lambda amount: amount.cents,
            return_schema=core_schema.int_schema(),
        ),
    )


# =============================================================================
# UNSIGNED AMOUNT
# =============================================================================

@dataclass(frozen=True, slots=True, order=True)
class CentsAmount:
    """
    Non-negative amount of money in cents.

    INVARIANT: cents >= 0. Subtraction that would go below zero raises
    AmountError.
    """
    cents: int

    def __post_init__(self):
        if not isinstance(self.cents, int) or isinstance(self.cents, bool):
            raise TypeError(
                f"CentsAmount needs an int cent count, not {type(self.cents).__name__}"
            )
        if self.cents < 0:
            raise AmountError(f"CentsAmount cannot be negative: {self.cents}")

    @classmethod
    def zero(cls) -> "CentsAmount":
        return cls(0)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return _amount_schema(cls)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: "CentsAmount") -> "CentsAmount":
        if not isinstance(other, CentsAmount):
            return NotImplemented
        return CentsAmount(self.cents + other.cents)

    def __sub__(self, other: "CentsAmount") -> "CentsAmount":
        if not isinstance(other, CentsAmount):
            return NotImplemented
        if other.cents > self.cents:
            raise AmountError(
                f"Cannot subtract {other.as_string_exact()} from {self.as_string_exact()}"
            )
        return CentsAmount(self.cents - other.cents)

    def __mul__(self, factor: int) -> "CentsAmount":
        if not isinstance(factor, int) or isinstance(factor, bool):
            return NotImplemented
        return CentsAmount(self.cents * factor)

    def __rmul__(self, factor: int) -> "CentsAmount":
        return self.__mul__(factor)

    def __floordiv__(self, divisor: int) -> "CentsAmount":
        if not isinstance(divisor, int) or isinstance(divisor, bool):
            return NotImplemented
        if divisor <= 0:
            raise AmountError(f"Divisor must be positive, got {divisor}")
        return CentsAmount(self.cents // divisor)

    def __neg__(self) -> "SignedCentsAmount":
        return SignedCentsAmount(-self.cents)

    def __bool__(self) -> bool:
        return self.cents != 0

    def signed(self) -> "SignedCentsAmount":
        return SignedCentsAmount(self.cents)

    def subdiv(self, weights: Sequence[int]) -> list["CentsAmount"]:
        """
        Split this amount into len(weights) parts proportional to weights.

        Every part starts at floor(self * weight / sum(weights)); the cents
        lost to flooring are then handed out one at a time to the parts at
        the lowest indices. The parts always sum to exactly self.

        Raises:
            AmountError: if the weights sum to zero or any weight is negative
        """
        return [CentsAmount(part) for part in _subdivide(self.cents, weights)]

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def as_string_exact(self, separators: bool = False) -> str:
        """All digits and exactly two decimals, e.g. '1,234.50'."""
        return _format_exact(self.cents, separators)

    def as_string_precision(self, precision: int) -> str:
        """
        Render with `precision` significant digits and a scale suffix.

        Raises:
            FormatOverflowError: if the value needs a suffix beyond 'G'
        """
        return _format_precision(self.cents, precision)

    def as_string_width(self, width: int) -> str:
        """Most precise rendering that fits in `width` characters."""
        return _format_width(self.cents, width)

    def __str__(self) -> str:
        return self.as_string_exact()


# =============================================================================
# SIGNED AMOUNT
# =============================================================================

@dataclass(frozen=True, slots=True, order=True)
class SignedCentsAmount:
    """
    Signed amount of money in cents.

    Used for balances and per-account deltas. Formatting mirrors
    CentsAmount with a '+' or '-' prefix (nothing for zero).
    """
    cents: int

    def __post_init__(self):
        if not isinstance(self.cents, int) or isinstance(self.cents, bool):
            raise TypeError(
                f"SignedCentsAmount needs an int cent count, not {type(self.cents).__name__}"
            )

    @classmethod
    def zero(cls) -> "SignedCentsAmount":
        return cls(0)

    @classmethod
    def from_unsigned(cls, amount: CentsAmount) -> "SignedCentsAmount":
        return cls(amount.cents)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return _amount_schema(cls)

    def __add__(
        self, other: Union["SignedCentsAmount", CentsAmount]
    ) -> "SignedCentsAmount":
        if not isinstance(other, (SignedCentsAmount, CentsAmount)):
            return NotImplemented
        return SignedCentsAmount(self.cents + other.cents)

    def __radd__(self, other: CentsAmount) -> "SignedCentsAmount":
        return self.__add__(other)

    def __sub__(
        self, other: Union["SignedCentsAmount", CentsAmount]
    ) -> "SignedCentsAmount":
        if not isinstance(other, (SignedCentsAmount, CentsAmount)):
            return NotImplemented
        return SignedCentsAmount(self.cents - other.cents)

    def __neg__(self) -> "SignedCentsAmount":
        return SignedCentsAmount(-self.cents)

    def __abs__(self) -> CentsAmount:
        return CentsAmount(abs(self.cents))

    def __bool__(self) -> bool:
        return self.cents != 0

    def is_negative(self) -> bool:
        return self.cents < 0

    def subdiv(self, weights: Sequence[int]) -> list["SignedCentsAmount"]:
        """Apportion the magnitude like CentsAmount.subdiv, keeping the sign."""
        sign = -1 if self.cents < 0 else 1
        return [
            SignedCentsAmount(sign * part)
            for part in _subdivide(abs(self.cents), weights)
        ]

    def sign(self) -> str:
        if self.cents > 0:
            return "+"
        if self.cents < 0:
            return "-"
        return ""

    def as_string_exact(self, separators: bool = False) -> str:
        return self.sign() + _format_exact(abs(self.cents), separators)

    def as_string_precision(self, precision: int) -> str:
        return self.sign() + _format_precision(abs(self.cents), precision)

    def as_string_width(self, width: int) -> str:
        """Like CentsAmount.as_string_width, one character kept for the sign."""
        return self.sign() + _format_width(abs(self.cents), width - 1)

    def __str__(self) -> str:
        return self.as_string_exact()
