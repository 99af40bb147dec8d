"""Decimal money amounts with cent precision.

Every Money value is quantized to whole cents (ROUND_HALF_UP) on
construction, so sums of amounts never drift and the integer ``cents``
accessor is always exact.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from functools import total_ordering
from typing import Union

CENT = Decimal("0.01")

Number = Union[int, float, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert an int, float or Decimal to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@total_ordering
class Money:
    """An amount of the store currency."""

    __slots__ = ("_amount",)

    def __init__(self, amount: Number = 0) -> None:
        self._amount = to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def from_cents(cls, cents: Number) -> Money:
        """Build an amount from a (possibly fractional) number of cents."""
        return cls(to_decimal(cents) / 100)

    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def cents(self) -> int:
        return int(self._amount * 100)

    def is_zero(self) -> bool:
        return self._amount == 0

    def floor(self) -> Money:
        """Round down to a whole currency unit."""
        return Money(self._amount.quantize(Decimal(1), rounding=ROUND_FLOOR))

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._amount + other._amount)

    def __radd__(self, other):
        # Lets sum() start from the integer 0.
        if other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._amount - other._amount)

    def __mul__(self, factor: Number) -> Money:
        if isinstance(factor, Money):
            return NotImplemented
        return Money(self._amount * to_decimal(factor))

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self._amount == other._amount

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self._amount < other._amount

    def __hash__(self) -> int:
        return hash(self._amount)

    def __repr__(self) -> str:
        return f"Money('{self._amount}')"

    def __str__(self) -> str:
        return f"${self._amount}"
