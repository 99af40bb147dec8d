"""In-memory cart model read and mutated by the engine.

Hosts that already have cart objects can pass them to the engine directly as
long as they expose the same attributes and methods; this module is the
reference implementation of that contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from .errors import CartError, errmsg
from .money import Money


@dataclass(frozen=True)
class Product:
    id: int
    title: str = ""
    tags: frozenset = field(default_factory=frozenset)
    vendor: str = ""
    product_type: str = ""
    gift_card: bool = False


@dataclass(frozen=True)
class Variant:
    id: int
    price: Money
    product: Product


class LineItem:
    """A quantity of one variant in the cart with its current line price."""

    def __init__(
        self,
        variant: Variant,
        quantity: int,
        properties: Optional[dict[str, str]] = None,
        line_price: Optional[Money] = None,
    ) -> None:
        if quantity <= 0:
            raise CartError(errmsg.QUANTITY_POSITIVE)
        self.variant = variant
        self.quantity = quantity
        self.properties: dict[str, str] = dict(properties or {})
        self._line_price = line_price if line_price is not None else variant.price * quantity
        self.messages: list[str] = []

    @property
    def product(self) -> Product:
        return self.variant.product

    @property
    def line_price(self) -> Money:
        return self._line_price

    @property
    def original_line_price(self) -> Money:
        return self.variant.price * self.quantity

    @property
    def discounted(self) -> bool:
        return bool(self.messages)

    @property
    def message(self) -> Optional[str]:
        """The most recent discount message, if any."""
        return self.messages[-1] if self.messages else None

    def change_line_price(self, new_price: Money, message: str) -> None:
        if new_price < Money.zero():
            raise CartError(errmsg.PRICE_NEGATIVE)
        self._line_price = new_price
        self.messages.append(message)

    def split(self, take: int) -> LineItem:
        """Move ``take`` units into a new line item and return it.

        The line price is divided in proportion to quantity; this item keeps
        whatever the new item does not take, so no cent is lost or gained.
        """
        if take <= 0 or take >= self.quantity:
            raise CartError(f"{errmsg.SPLIT_OUT_OF_RANGE} (take={take}, quantity={self.quantity})")

        taken_cents = (Decimal(self._line_price.cents) * take / self.quantity).quantize(
            Decimal(1), rounding=ROUND_HALF_UP
        )
        taken_price = Money.from_cents(taken_cents)

        new_item = LineItem(self.variant, take, self.properties, line_price=taken_price)
        new_item.messages = list(self.messages)

        self.quantity -= take
        self._line_price = self._line_price - taken_price
        return new_item

    def copy(self) -> LineItem:
        clone = LineItem(self.variant, self.quantity, self.properties, line_price=self._line_price)
        clone.messages = list(self.messages)
        return clone

    def __repr__(self) -> str:
        return (
            f"LineItem(variant={self.variant.id}, quantity={self.quantity}, "
            f"line_price={self._line_price!r})"
        )


class DiscountCode:
    """The code a customer entered at checkout."""

    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    SHIPPING = "shipping"

    def __init__(self, code: str, kind: str = FIXED_AMOUNT, amount: Optional[Money] = None) -> None:
        self.code = code
        self.kind = kind
        self.amount = amount
        self.rejected = False
        self.rejection_message: Optional[str] = None

    def reject(self, message: str) -> None:
        """Reject the code. The first rejection message is kept."""
        if self.rejected:
            return
        self.rejected = True
        self.rejection_message = message

    def __repr__(self) -> str:
        return f"DiscountCode(code={self.code!r}, kind={self.kind!r}, rejected={self.rejected})"


@dataclass(frozen=True)
class CartSnapshot:
    """Value copy of a cart's line items."""

    line_items: tuple[LineItem, ...]


class Cart:
    def __init__(
        self,
        line_items: Iterable[LineItem] = (),
        discount_code: Optional[DiscountCode] = None,
        customer: Any = None,
    ) -> None:
        self.line_items: list[LineItem] = list(line_items)
        self.discount_code = discount_code
        self.customer = customer

    @property
    def subtotal(self) -> Money:
        return sum((item.line_price for item in self.line_items), Money.zero())

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.line_items)

    def append(self, line_item: LineItem) -> None:
        self.line_items.append(line_item)

    def prepend(self, line_item: LineItem) -> None:
        self.line_items.insert(0, line_item)

    def remove(self, line_item: LineItem) -> None:
        # Identity, not equality: split halves of one variant are distinct items.
        for index, item in enumerate(self.line_items):
            if item is line_item:
                del self.line_items[index]
                return
        raise CartError(errmsg.ITEM_NOT_IN_CART)

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(tuple(item.copy() for item in self.line_items))

    def restore(self, snapshot: CartSnapshot) -> None:
        self.line_items = [item.copy() for item in snapshot.line_items]
