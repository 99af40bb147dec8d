"""Discount strategies.

A ``Discount`` is immutable configuration. Campaigns call ``begin()`` once per
run to get a ``DiscountApplication``, feed it the selected line items through
``apply()`` and then call ``finalize()``. Discounts that need to see every
candidate item before pricing any of them (the split fixed total) do their
work in ``finalize()``; the others price each item as it arrives.

No discount ever takes a line price below zero.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from .errors import errmsg
from .money import Money, Number, to_decimal
from .selectors import Selector
from .validation import require_non_negative, require_one_of, require_present


def change_price(line_item, new_price: Money, message: str) -> None:
    """Write a discounted price, clamped at zero."""
    line_item.change_line_price(max(new_price, Money.zero()), message)


class DiscountApplication:
    """Per-run state of a discount. Prices each item as it is applied."""

    def __init__(self, discount: Discount) -> None:
        self.discount = discount
        self.items: list = []

    def apply(self, line_item) -> None:
        self.items.append(line_item)
        self.discount.apply_to(line_item)

    def finalize(self) -> None:
        pass


class Discount(ABC):
    def __init__(self, message: str) -> None:
        self.message = message

    def begin(self) -> DiscountApplication:
        """Start a fresh application for one campaign run."""
        return DiscountApplication(self)

    def apply(self, line_item) -> None:
        """Discount a single line item in a run of its own."""
        application = self.begin()
        application.apply(line_item)
        application.finalize()

    @abstractmethod
    def apply_to(self, line_item) -> None:
        """Write this discount onto one line item."""


class PercentageDiscount(Discount):
    def __init__(self, percent: Number, message: str) -> None:
        super().__init__(message)
        percent = to_decimal(percent)
        require_non_negative(percent, errmsg.PERCENT_RANGE)
        require_non_negative(100 - percent, errmsg.PERCENT_RANGE)
        self.percent = percent
        self._factor = (100 - percent) / Decimal(100)

    def apply_to(self, line_item) -> None:
        change_price(line_item, line_item.line_price * self._factor, self.message)


class FixedItemDiscount(Discount):
    """Take a fixed amount off every unit, never more than the line price.

    The per-unit amount is ``max(amount - unit_price, amount)``; for any
    non-negative unit price that is ``amount`` itself.
    """

    def __init__(self, amount: Number, message: str) -> None:
        super().__init__(message)
        require_non_negative(to_decimal(amount), errmsg.AMOUNT_NON_NEGATIVE)
        self.amount = Money(amount)

    def apply_to(self, line_item) -> None:
        per_item_price = line_item.variant.price
        per_item_discount = max(self.amount - per_item_price, self.amount)
        discount_to_apply = min(per_item_discount * line_item.quantity, line_item.line_price)
        change_price(line_item, line_item.line_price - discount_to_apply, self.message)


class _ToZeroApplication(DiscountApplication):
    """Spends a fixed budget across items in the order they are applied."""

    def __init__(self, discount: FixedTotalDiscount) -> None:
        super().__init__(discount)
        self.discount_applied = Money.zero()

    def apply(self, line_item) -> None:
        self.items.append(line_item)
        remaining = self.discount.amount - self.discount_applied
        if remaining <= Money.zero():
            return
        discount_to_apply = min(remaining, line_item.line_price)
        change_price(line_item, line_item.line_price - discount_to_apply, self.discount.message)
        self.discount_applied += discount_to_apply


class _SplitApplication(DiscountApplication):
    """Buffers items and shares the amount across them in ``finalize``."""

    def __init__(self, discount: FixedTotalDiscount) -> None:
        super().__init__(discount)
        self.discount_applied = Money.zero()

    def apply(self, line_item) -> None:
        self.items.append(line_item)

    def finalize(self) -> None:
        # Free items take no share.
        items = [item for item in self.items if not item.line_price.is_zero()]
        if not items:
            return
        amount_cents = self.discount.amount.cents
        total_cents = sum(item.line_price.cents for item in items)

        # Shares are rounded down and capped at the line price, so the
        # remainder is never negative.
        shares = [
            min(amount_cents * item.line_price.cents // total_cents, item.line_price.cents)
            for item in items
        ]
        remainder = amount_cents - sum(shares)

        # Hand the remainder to the last items that can still absorb it.
        for index in reversed(range(len(items))):
            if remainder <= 0:
                break
            extra = min(remainder, items[index].line_price.cents - shares[index])
            shares[index] += extra
            remainder -= extra

        for item, share in zip(items, shares):
            discount_to_apply = Money.from_cents(share)
            change_price(item, item.line_price - discount_to_apply, self.discount.message)
            self.discount_applied += discount_to_apply


class FixedTotalDiscount(Discount):
    """Take a fixed amount off the selected items as a whole.

    behaviour:
        to_zero: discount items in order until the amount is used up
        split:   share the amount across all items in proportion to their
                 line prices
    """

    BEHAVIOURS = ("to_zero", "split")

    def __init__(self, amount: Number, message: str, behaviour: str = "to_zero") -> None:
        super().__init__(message)
        require_one_of(behaviour, self.BEHAVIOURS, errmsg.INVALID_DISCOUNT_TYPE)
        require_non_negative(to_decimal(amount), errmsg.AMOUNT_NON_NEGATIVE)
        self.amount = Money(amount)
        self.behaviour = behaviour

    def begin(self) -> DiscountApplication:
        if self.behaviour == "split":
            return _SplitApplication(self)
        return _ToZeroApplication(self)

    def apply_to(self, line_item) -> None:
        self.apply(line_item)


@dataclass(frozen=True)
class PriceOverride:
    """Final unit price for the items matched by ``selector``."""

    price: Number
    selector: Selector


class FixedFinalPriceDiscount(Discount):
    """Set each unit to a final price; overrides pick prices per selector.

    Overrides are checked in order and the last one that matches wins. The
    price is only written when it lowers the line price.
    """

    def __init__(
        self,
        final_price: Number,
        message: str,
        overrides: Optional[Iterable[PriceOverride]] = None,
    ) -> None:
        super().__init__(message)
        self.final_price = to_decimal(final_price)
        self.overrides = tuple(overrides or ())
        for override in self.overrides:
            require_present(override.selector, errmsg.QUALIFIER_REQUIRES_SELECTOR)

    def unit_price_for(self, line_item) -> Decimal:
        price = self.final_price
        for override in self.overrides:
            if override.selector.matches(line_item):
                price = to_decimal(override.price)
        return price

    def apply_to(self, line_item) -> None:
        final_price = Money(self.unit_price_for(line_item)) * line_item.quantity
        if final_price < line_item.line_price:
            change_price(line_item, final_price, self.message)
