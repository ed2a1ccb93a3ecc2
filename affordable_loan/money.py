"""Fixed-point currency value.

Money is held as an integer count of cents. Rates are applied with
Decimal arithmetic and the product is rounded back to whole cents, so
binary floating point never touches a monetary amount.

Rounding rules:
  parse       → none, sub-cent input is rejected
  multiply    → nearest cent, ties away from zero (ROUND_HALF_UP)
  allocate    → exact split, remainder cents go to the earliest buckets
  floor_unit  → down to a whole currency unit
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from affordable_loan.errors import ArithmeticDegeneracyError, InvalidInputError

_CENTS_PER_UNIT = 100
_CENT = Decimal("0.01")
# Whole-unit digits accepted on input (amounts below 10**30)
_MAX_UNIT_DIGITS = 30


def _exact_precision(*values: Decimal) -> int:
    """Digits needed so that a product or quantize of ``values`` is exact."""
    digits = sum(len(v.as_tuple().digits) + max(v.as_tuple().exponent, 0) for v in values)
    return max(digits + 4, 28)


@dataclass(frozen=True, slots=True, order=True)
class Money:
    """Immutable amount in minor currency units (cents)."""

    cents: int

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            msg = f"Money requires an integer cent count, got {type(self.cents).__name__}"
            raise TypeError(msg)

    # ── Construction ─────────────────────────────────────────────────

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def from_decimal(cls, amount: Decimal | int | str, rounding: str = ROUND_HALF_UP) -> Money:
        """Build from a major-unit amount, e.g. ``Money.from_decimal("1750.50")``.

        Floats are rejected outright; convert them to str upstream. Amounts of
        10**30 units or more raise InvalidInputError.
        """
        if isinstance(amount, float):
            msg = "Money cannot be built from a float; pass a Decimal or a str"
            raise InvalidInputError(msg)
        try:
            value = Decimal(amount)
        except (InvalidOperation, ValueError) as exc:
            msg = f"Not a decimal amount: {amount!r}"
            raise InvalidInputError(msg) from exc
        if not value.is_finite():
            msg = f"Amount must be finite, got {amount!r}"
            raise InvalidInputError(msg)
        if value and value.adjusted() >= _MAX_UNIT_DIGITS:
            msg = f"Amount out of range, got {amount!r}"
            raise InvalidInputError(msg)
        with localcontext() as ctx:
            ctx.prec = _exact_precision(value)
            cents = value.quantize(_CENT, rounding=rounding).scaleb(2)
        return cls(int(cents))

    @classmethod
    def parse(cls, amount: Decimal | int | str) -> Money:
        """Strict construction for external input: sub-cent digits are an error."""
        money = cls.from_decimal(amount, rounding=ROUND_DOWN)
        if money.to_decimal() != Decimal(amount):
            msg = f"Amount has more than two decimal places: {amount!r}"
            raise InvalidInputError(msg)
        return money

    @classmethod
    def total(cls, amounts: Iterable[Money]) -> Money:
        """Exact sum of an iterable of Money (zero when empty)."""
        return cls(sum((amount.cents for amount in amounts), start=0))

    # ── Arithmetic ───────────────────────────────────────────────────

    def __add__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents + other.cents)

    def __sub__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents - other.cents)

    def __neg__(self) -> Money:
        return Money(-self.cents)

    def multiply(self, rate: Decimal, rounding: str = ROUND_HALF_UP) -> Money:
        """Scale by a decimal rate, rounding the product to a whole cent."""
        if not isinstance(rate, Decimal):
            msg = f"Rate must be a Decimal, got {type(rate).__name__}"
            raise TypeError(msg)
        if not rate.is_finite():
            msg = f"Rate must be finite, got {rate}"
            raise InvalidInputError(msg)
        amount = Decimal(self.cents)
        with localcontext() as ctx:
            ctx.prec = _exact_precision(amount, rate)
            product = amount * rate
            return Money(int(product.quantize(Decimal(1), rounding=rounding)))

    def allocate(self, parts: int) -> list[Money]:
        """Split into ``parts`` buckets whose sum is exactly this amount.

        The remainder is spread one cent at a time over the earliest
        buckets: 100.00 over 3 → [33.34, 33.33, 33.33].
        """
        if parts <= 0:
            msg = f"Cannot allocate over {parts} buckets"
            raise ArithmeticDegeneracyError(msg)
        if self.cents < 0:
            msg = f"Cannot allocate a negative amount ({self})"
            raise InvalidInputError(msg)
        base, remainder = divmod(self.cents, parts)
        return [Money(base + 1) if i < remainder else Money(base) for i in range(parts)]

    def floor_to_unit(self) -> Money:
        """Round down to a whole currency unit (never up)."""
        return Money(self.cents - self.cents % _CENTS_PER_UNIT)

    # ── Inspection ───────────────────────────────────────────────────

    @property
    def is_zero(self) -> bool:
        return self.cents == 0

    @property
    def is_negative(self) -> bool:
        return self.cents < 0

    def to_decimal(self) -> Decimal:
        """Major-unit Decimal with exactly two places, e.g. Decimal("700.00")."""
        sign = 1 if self.cents < 0 else 0
        digits = tuple(int(d) for d in str(abs(self.cents)))
        return Decimal((sign, digits, -2))

    def __str__(self) -> str:
        return str(self.to_decimal())
