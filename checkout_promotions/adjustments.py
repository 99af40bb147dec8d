"""Price-test adjustments driven by line item properties.

A storefront price-testing app writes the price a visitor was shown onto the
line item as hidden properties. This step runs before the promotional
campaigns so that campaigns discount from the tested prices:

    _igp                  unit price in cents the visitor was shown
    _igvd                 per-unit volume discount in cents
    _igvd_message         message to show for the volume discount
    _igLineItemDiscount   deprecated per-unit discount in cents

Only the first of ``_igp``, ``_igvd`` and ``_igLineItemDiscount`` present on
an item is used.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from .campaigns import Campaign
from .discounts import Discount, DiscountApplication, change_price
from .money import Money

PRICE_PROPERTY = "_igp"
VOLUME_DISCOUNT_PROPERTY = "_igvd"
VOLUME_DISCOUNT_MESSAGE_PROPERTY = "_igvd_message"
DEPRECATED_DISCOUNT_PROPERTY = "_igLineItemDiscount"

PRICE_TEST_MESSAGE = "Discount"
DEPRECATED_DISCOUNT_MESSAGE = "Intelligems"


def cents_property(line_item, key: str) -> Optional[Money]:
    """Read a cents amount from a line item property; None if absent, blank or malformed."""
    value = line_item.properties.get(key)
    if not value:
        return None
    try:
        return Money.from_cents(Decimal(value))
    except InvalidOperation:
        return None


class PropertyPriceDiscount(Discount):
    """Reprice an item from its price-test properties.

    Args:
        price_property: Property holding the tested unit price.
        allow_free: Allow a price test to take a line price to zero.
    """

    def __init__(self, price_property: str = PRICE_PROPERTY, allow_free: bool = False) -> None:
        super().__init__(PRICE_TEST_MESSAGE)
        self.price_property = price_property
        self.allow_free = allow_free

    def _tested_price(self, line_item, unit_price: Money) -> None:
        discount = line_item.line_price - unit_price * line_item.quantity
        if discount > Money.zero() and (self.allow_free or discount < line_item.line_price):
            change_price(line_item, line_item.line_price - discount, PRICE_TEST_MESSAGE)

    def _volume_discount(self, line_item, per_unit: Money) -> None:
        discount = per_unit * line_item.quantity
        if discount < line_item.line_price:
            message = line_item.properties.get(VOLUME_DISCOUNT_MESSAGE_PROPERTY) or PRICE_TEST_MESSAGE
            change_price(line_item, line_item.line_price - discount, message)

    def _deprecated_discount(self, line_item, per_unit: Money) -> None:
        discount = per_unit * line_item.quantity
        if self.allow_free or discount < line_item.line_price:
            change_price(line_item, line_item.line_price - discount, DEPRECATED_DISCOUNT_MESSAGE)

    def apply_to(self, line_item) -> None:
        unit_price = cents_property(line_item, self.price_property)
        if unit_price is not None:
            self._tested_price(line_item, unit_price)
            return
        per_unit = cents_property(line_item, VOLUME_DISCOUNT_PROPERTY)
        if per_unit is not None:
            self._volume_discount(line_item, per_unit)
            return
        per_unit = cents_property(line_item, DEPRECATED_DISCOUNT_PROPERTY)
        if per_unit is not None:
            self._deprecated_discount(line_item, per_unit)


class PriceTestCampaign(Campaign):
    """Apply price-test properties to every line item in the cart."""

    def __init__(self, discount: Optional[PropertyPriceDiscount] = None, name: Optional[str] = None) -> None:
        super().__init__(name=name or "price_tests")
        self.discount = discount or PropertyPriceDiscount()

    def _run(self, cart, log) -> Optional[DiscountApplication]:
        application = self.discount.begin()
        for item in list(cart.line_items):
            application.apply(item)
        return application
