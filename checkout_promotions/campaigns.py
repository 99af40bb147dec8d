"""Discount campaigns.

Every campaign follows the same template (``Campaign.run``):

1. qualify the cart against the campaign's qualifiers,
2. select the line items to discount (splitting items when only part of a
   quantity qualifies),
3. apply a fresh ``DiscountApplication`` to them and finalize it,
4. if a post-condition qualifier is configured and no longer matches the
   discounted cart, restore the snapshot taken before step 1.

Subclasses implement ``_run``, which performs steps 1-3 up to ``finalize``
and returns the application it used, or None when the campaign did not
apply.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

import structlog

from .cart import DiscountCode
from .discounts import (
    Discount,
    DiscountApplication,
    FixedItemDiscount,
    FixedTotalDiscount,
    PercentageDiscount,
)
from .errors import AmbiguousDiscountCodeError, errmsg
from .money import Money, Number
from .qualifiers import Qualifier
from .selectors import Selector, select
from .validation import (
    require_non_negative,
    require_not_empty,
    require_one_of,
    require_positive,
    require_present,
)

logger = structlog.get_logger()

CONDITIONS = ("all", "any")


class CampaignOutcome(str, Enum):
    SKIPPED = "skipped"
    APPLIED = "applied"
    REVERTED = "reverted"


class Campaign(ABC):
    """Base class for campaigns.

    Args:
        condition: "all" or "any"; how the qualifiers are combined.
        qualifiers: Cart qualifiers, ``None`` entries are ignored. No
            qualifiers means the campaign always qualifies.
        line_item_selector: Items the campaign may discount (None = all).
        post_qualifier: Checked after the discount is applied; when it fails
            the cart is restored to its state before the campaign ran.
        name: Label used in logs and evaluation results.
    """

    def __init__(
        self,
        condition: str = "all",
        qualifiers: Iterable[Optional[Qualifier]] = (),
        line_item_selector: Optional[Selector] = None,
        post_qualifier: Optional[Qualifier] = None,
        name: Optional[str] = None,
    ) -> None:
        require_one_of(condition, CONDITIONS, errmsg.INVALID_CONDITION)
        self.condition = condition
        self.qualifiers = tuple(q for q in qualifiers if q is not None)
        self.line_item_selector = line_item_selector
        self.post_qualifier = post_qualifier
        self.name = name or type(self).__name__

    def qualifies(self, cart) -> bool:
        if not self.qualifiers:
            return True
        combine = all if self.condition == "all" else any
        return combine(qualifier.matches(cart, self.line_item_selector) for qualifier in self.qualifiers)

    def run(self, cart) -> CampaignOutcome:
        log = logger.bind(campaign=self.name)
        snapshot = cart.snapshot() if self.post_qualifier is not None else None

        application = self._run(cart, log)
        if application is None:
            log.debug("campaign_skipped")
            return CampaignOutcome.SKIPPED
        application.finalize()

        if snapshot is not None and not self.post_qualifier.matches(cart, self.line_item_selector):
            cart.restore(snapshot)
            log.info("campaign_reverted", subtotal=str(cart.subtotal))
            return CampaignOutcome.REVERTED

        log.info("campaign_applied", items=len(application.items), subtotal=str(cart.subtotal))
        return CampaignOutcome.APPLIED

    @abstractmethod
    def _run(self, cart, log) -> Optional[DiscountApplication]:
        """Qualify, select and apply. Return the application, or None to skip."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def discount_up_to(cart, items: Sequence, quantity: Optional[int], application: DiscountApplication, log) -> None:
    """Apply ``application`` to ``items`` in order until ``quantity`` units are discounted.

    The item that crosses the limit is split: the part within the limit is
    discounted and the remainder is appended to the cart undiscounted.
    ``quantity=None`` means no limit.
    """
    remaining = quantity
    for item in items:
        if remaining == 0:
            break
        if remaining is not None and item.quantity > remaining:
            new_item = item.split(item.quantity - remaining)
            log.debug("line_item_split", variant=item.variant.id, kept=item.quantity, split_off=new_item.quantity)
            application.apply(item)
            cart.append(new_item)
            remaining = 0
        else:
            application.apply(item)
            if remaining is not None:
                remaining -= item.quantity


@dataclass(frozen=True)
class CodeDiscount:
    """One row of a discount code table.

    type: "p"/"percent", "f"/"fixed" (shared fixed total), "per_item", or
    "c"/"code" to take the type from the discount code itself.
    """

    code: str
    type: str
    amount: Number


DISCOUNT_TYPES = {
    "p": "percent",
    "percent": "percent",
    "f": "fixed",
    "fixed": "fixed",
    "per_item": "per_item",
    "c": "code",
    "code": "code",
}


class DiscountCodeList(Campaign):
    """Discount the selected items according to the code the customer entered."""

    def __init__(
        self,
        condition: str,
        customer_qualifier: Optional[Qualifier],
        cart_qualifier: Optional[Qualifier],
        line_item_selector: Optional[Selector],
        discount_list: Iterable[CodeDiscount],
        post_qualifier: Optional[Qualifier] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(condition, (customer_qualifier, cart_qualifier), line_item_selector, post_qualifier, name)
        self.discount_list = tuple(discount_list)
        for entry in self.discount_list:
            require_one_of(entry.type.lower(), DISCOUNT_TYPES, errmsg.INVALID_DISCOUNT_TYPE)

    @staticmethod
    def init_discount(discount_type: str, amount: Number, message: str) -> Discount:
        if discount_type == "fixed":
            return FixedTotalDiscount(amount, message, "split")
        if discount_type == "percent":
            return PercentageDiscount(amount, message)
        return FixedItemDiscount(amount, message)

    @staticmethod
    def discount_code_type(discount_code) -> Optional[str]:
        if discount_code.kind == DiscountCode.PERCENTAGE:
            return "percent"
        if discount_code.kind == DiscountCode.FIXED_AMOUNT:
            return "fixed"
        return None

    def _run(self, cart, log) -> Optional[DiscountApplication]:
        if cart.discount_code is None:
            return None
        if not self.qualifies(cart):
            return None
        if cart.discount_code.rejected:
            return None

        applied_code = cart.discount_code.code.lower()
        matches = [entry for entry in self.discount_list if entry.code.lower() == applied_code]
        if not matches:
            return None
        if len(matches) > 1:
            raise AmbiguousDiscountCodeError(applied_code)

        entry = matches[0]
        discount_type = DISCOUNT_TYPES[entry.type.lower()]
        if discount_type == "code":
            discount_type = self.discount_code_type(cart.discount_code)
        if discount_type is None:
            return None

        log.info("discount_code_matched", code=applied_code, discount_type=discount_type)
        application = self.init_discount(discount_type, entry.amount, applied_code).begin()
        for item in select(cart.line_items, self.line_item_selector):
            application.apply(item)
        return application


class ConditionalDiscount(Campaign):
    """Discount matching items, cheapest first, up to ``max_discounts`` units (0 = no cap)."""

    def __init__(
        self,
        condition: str,
        customer_qualifier: Optional[Qualifier],
        cart_qualifier: Optional[Qualifier],
        line_item_selector: Optional[Selector],
        discount: Discount,
        max_discounts: int = 0,
        post_qualifier: Optional[Qualifier] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(condition, (customer_qualifier, cart_qualifier), line_item_selector, post_qualifier, name)
        require_present(discount, errmsg.CAMPAIGN_REQUIRES_DISCOUNT)
        require_non_negative(max_discounts, errmsg.QUANTITY_POSITIVE)
        self.discount = discount
        self.max_discounts = max_discounts or None

    def _run(self, cart, log) -> Optional[DiscountApplication]:
        if not self.qualifies(cart):
            return None
        items = sorted(select(cart.line_items, self.line_item_selector), key=lambda item: item.variant.price)
        application = self.discount.begin()
        discount_up_to(cart, items, self.max_discounts, application, log)
        return application


class BuyXGetX(Campaign):
    """For every ``buy_x`` units bought, discount ``get_x`` eligible units.

    The buy and get selectors may overlap, in which case the same units count
    towards both the purchase and the discount.
    """

    def __init__(
        self,
        condition: str,
        customer_qualifier: Optional[Qualifier],
        cart_qualifier: Optional[Qualifier],
        buy_item_selector: Optional[Selector],
        buy_x: int,
        get_item_selector: Optional[Selector],
        get_x: int,
        discount: Discount,
        max_sets: int = 0,
        post_qualifier: Optional[Qualifier] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(condition, (customer_qualifier, cart_qualifier), buy_item_selector, post_qualifier, name)
        require_present(discount, errmsg.CAMPAIGN_REQUIRES_DISCOUNT)
        require_positive(buy_x, errmsg.QUANTITY_POSITIVE)
        require_positive(get_x, errmsg.QUANTITY_POSITIVE)
        require_non_negative(max_sets, errmsg.QUANTITY_POSITIVE)
        self.get_item_selector = get_item_selector
        self.buy_x = buy_x
        self.get_x = get_x
        self.discount = discount
        self.max_sets = max_sets or None

    def discountable_sets(self, cart) -> int:
        buy_items = select(cart.line_items, self.line_item_selector)
        purchased_quantity = sum(item.quantity for item in buy_items)
        sets = purchased_quantity // self.buy_x
        if self.max_sets is not None:
            sets = min(sets, self.max_sets)
        return sets

    def _run(self, cart, log) -> Optional[DiscountApplication]:
        if not self.qualifies(cart):
            return None
        if cart.total_quantity < self.buy_x:
            return None

        sets = self.discountable_sets(cart)
        if sets < 1:
            return None
        discountable_quantity = sets * self.get_x
        log.debug("sets_found", sets=sets, discountable_quantity=discountable_quantity)

        # Cheapest first; among equal prices, bigger lines first.
        get_items = sorted(
            select(cart.line_items, self.get_item_selector),
            key=lambda item: (item.variant.price, -item.line_price.cents),
        )
        application = self.discount.begin()
        discount_up_to(cart, get_items, discountable_quantity, application, log)
        return application


@dataclass(frozen=True)
class BundleComponent:
    """``quantity`` units matched by ``selector`` make up one part of a bundle."""

    quantity: int
    selector: Selector


class BundleDiscount(Campaign):
    """Discount complete bundles and move them to the top of the cart."""

    def __init__(
        self,
        condition: str,
        customer_qualifier: Optional[Qualifier],
        cart_qualifier: Optional[Qualifier],
        bundle_products: Iterable[BundleComponent],
        discount: Discount,
        post_qualifier: Optional[Qualifier] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(condition, (customer_qualifier, cart_qualifier), None, post_qualifier, name)
        self.bundle_products = tuple(bundle_products)
        require_not_empty(self.bundle_products, errmsg.BUNDLE_REQUIRES_COMPONENTS)
        for component in self.bundle_products:
            require_present(component.selector, errmsg.BUNDLE_REQUIRES_SELECTOR)
            require_positive(component.quantity, errmsg.QUANTITY_POSITIVE)
        require_present(discount, errmsg.CAMPAIGN_REQUIRES_DISCOUNT)
        self.discount = discount

    def find_bundles(self, cart, log) -> list:
        """Return the line items that make up the complete bundles in the cart.

        Items are split so that each component contributes exactly
        ``bundles * quantity`` units; split remainders are appended to the
        cart and are not bundle members.
        """
        parts = []
        for component in self.bundle_products:
            items = select(cart.line_items, component.selector)
            total_quantity = sum(item.quantity for item in items)
            parts.append((component, items, total_quantity // component.quantity))

        bundles = min(possible for _, _, possible in parts)
        if bundles == 0:
            return []
        log.info("bundle_found", bundles=bundles)

        members = []
        for component, items, _ in parts:
            remaining = bundles * component.quantity
            for item in items:
                if remaining == 0:
                    break
                if item.quantity > remaining:
                    cart.append(item.split(item.quantity - remaining))
                    remaining = 0
                else:
                    remaining -= item.quantity
                members.append(item)
        return members

    def _run(self, cart, log) -> Optional[DiscountApplication]:
        if not self.qualifies(cart):
            return None

        members = self.find_bundles(cart, log)
        if not members:
            return None

        application = self.discount.begin()
        for item in members:
            application.apply(item)

        for item in reversed(members):
            cart.remove(item)
            cart.prepend(item)
        return application


@dataclass(frozen=True)
class SpendTier:
    """Spend at least ``threshold`` to get ``amount`` off each item.

    discount_type: "percent" (amount is a percentage) or "dollar" (amount is
    taken off every unit).
    """

    threshold: Number
    discount_type: str
    amount: Number
    message: str


class TieredSpendDiscount(Campaign):
    """Apply the discount of the highest spend tier the cart subtotal reaches.

    Gift cards are never discounted.
    """

    DISCOUNT_TYPES = ("percent", "dollar")

    def __init__(
        self,
        tiers: Iterable[SpendTier],
        qualifier: Optional[Qualifier] = None,
        post_qualifier: Optional[Qualifier] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__("all", (qualifier,), None, post_qualifier, name)
        tiers = list(tiers)
        require_not_empty(tiers, errmsg.TIERS_REQUIRED)
        for tier in tiers:
            require_one_of(tier.discount_type, self.DISCOUNT_TYPES, errmsg.INVALID_DISCOUNT_TYPE)
        self.tiers = tuple(sorted(tiers, key=lambda tier: Money(tier.threshold), reverse=True))

    def applicable_tier(self, cart) -> Optional[SpendTier]:
        subtotal = cart.subtotal
        return next((tier for tier in self.tiers if subtotal >= Money(tier.threshold)), None)

    def _run(self, cart, log) -> Optional[DiscountApplication]:
        if not self.qualifies(cart):
            return None
        tier = self.applicable_tier(cart)
        if tier is None:
            return None

        log.debug("spend_tier_reached", threshold=str(tier.threshold))
        if tier.discount_type == "percent":
            discount = PercentageDiscount(tier.amount, tier.message)
        else:
            discount = FixedItemDiscount(tier.amount, tier.message)

        application = discount.begin()
        for item in cart.line_items:
            if item.variant.product.gift_card:
                continue
            application.apply(item)
        return application
