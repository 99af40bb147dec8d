"""Cart qualifiers.

A qualifier is a predicate over the whole cart. Campaigns pass their own line
item selector into ``matches`` so that qualifiers such as
``CartQuantityQualifier("item", ...)`` can count only the items the campaign
would discount.

Qualifiers are side-effect free, except ``ExcludeDiscountCodes`` which may
reject the cart's discount code while matching.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Optional

import structlog

from .errors import ConfigurationError, errmsg
from .money import Money, Number
from .selectors import Selector, select
from .validation import require_one_of, require_present

logger = structlog.get_logger()

DEFAULT_REJECTION_MESSAGE = "This coupon is valid for mobile application only."
PLATFORM_PROPERTY = "_platform"


class Comparison(str, Enum):
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    EQUAL_TO = "equal_to"

    @classmethod
    def parse(cls, value) -> Comparison:
        """Accept a Comparison or its string value."""
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"{errmsg.INVALID_COMPARISON}: {value!r}") from None


def compare_amounts(compare, comparison: Comparison, compare_to) -> bool:
    """Compare two quantities or two Money amounts."""
    comparison = Comparison.parse(comparison)
    if comparison is Comparison.GREATER_THAN:
        return compare > compare_to
    if comparison is Comparison.GREATER_THAN_OR_EQUAL:
        return compare >= compare_to
    if comparison is Comparison.LESS_THAN:
        return compare < compare_to
    if comparison is Comparison.LESS_THAN_OR_EQUAL:
        return compare <= compare_to
    return compare == compare_to


class Qualifier(ABC):
    """Predicate over the whole cart."""

    @abstractmethod
    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        """Return True if the cart qualifies.

        Args:
            cart: The cart being evaluated.
            selector: The running campaign's line item selector, if any.
        """


class CartQuantityQualifier(Qualifier):
    """Compare item quantities against a fixed number.

    total_method:
        cart:     total quantity of every item in the cart
        item:     total quantity of items matching the campaign selector
        line_any: any matching line's quantity satisfies the comparison
        line_all: every matching line's quantity satisfies the comparison
    """

    TOTAL_METHODS = ("cart", "item", "line_any", "line_all")

    def __init__(self, total_method: str, comparison: Comparison, quantity: int) -> None:
        require_one_of(total_method, self.TOTAL_METHODS, errmsg.INVALID_TOTAL_METHOD)
        self._total_method = total_method
        self._comparison = Comparison.parse(comparison)
        self._quantity = quantity

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        if self._total_method == "cart":
            total = sum(item.quantity for item in cart.line_items)
            return compare_amounts(total, self._comparison, self._quantity)

        items = select(cart.line_items, selector)
        if self._total_method == "item":
            total = sum(item.quantity for item in items)
            return compare_amounts(total, self._comparison, self._quantity)

        combine = any if self._total_method == "line_any" else all
        return combine(compare_amounts(item.quantity, self._comparison, self._quantity) for item in items)


class CartHasItemQualifier(Qualifier):
    """Compare the quantity or subtotal of items matching its own selector.

    Subtotal amounts are given in whole currency units.
    """

    MODES = ("quantity", "subtotal")

    def __init__(
        self,
        quantity_or_subtotal: str,
        comparison: Comparison,
        amount: Number,
        item_selector: Selector,
    ) -> None:
        require_one_of(quantity_or_subtotal, self.MODES, errmsg.INVALID_TOTAL_METHOD)
        require_present(item_selector, f"{errmsg.QUALIFIER_REQUIRES_SELECTOR} for {type(self).__name__}")
        self._mode = quantity_or_subtotal
        self._comparison = Comparison.parse(comparison)
        self._amount = Money(amount) if quantity_or_subtotal == "subtotal" else amount
        self._item_selector = item_selector

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        items = select(cart.line_items, self._item_selector)
        if self._mode == "quantity":
            total = sum(item.quantity for item in items)
        else:
            total = sum((item.line_price for item in items), Money.zero())
        return compare_amounts(total, self._comparison, self._amount)


class CartSubtotalQualifier(Qualifier):
    """Compare the cart's current subtotal against an amount in currency units.

    Used as a campaign's post-condition, it sees the discounted subtotal.
    """

    def __init__(self, comparison: Comparison, amount: Number) -> None:
        self._comparison = Comparison.parse(comparison)
        self._amount = Money(amount)

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        return compare_amounts(cart.subtotal, self._comparison, self._amount)


class ExcludeDiscountCodes(Qualifier):
    """Reject discount codes the script should not honour.

    match_type:
        reject_except: reject every code except the listed ones
        accept_except: reject the listed codes, unless the cart comes from
            the mobile app (a line item with ``_platform`` set to the mobile
            platform), in which case every code is accepted

    The qualifier always matches once it has (possibly) rejected the code,
    unless ``behaviour`` is not ``apply_script``, in which case it never
    matches a cart that carries a code.
    """

    MATCH_TYPES = ("reject_except", "accept_except")

    def __init__(
        self,
        behaviour: str,
        message: str,
        match_type: str = "reject_except",
        discount_codes: Iterable[str] = (),
        mobile_platform: str = "ios",
    ) -> None:
        require_one_of(match_type, self.MATCH_TYPES, errmsg.INVALID_MATCH_TYPE)
        self._reject = behaviour == "apply_script"
        self._message = message or DEFAULT_REJECTION_MESSAGE
        self._match_type = match_type
        self._discount_codes = frozenset(code.lower() for code in discount_codes)
        self._mobile_platform = mobile_platform

    def _is_mobile_cart(self, cart) -> bool:
        return any(item.properties.get(PLATFORM_PROPERTY) == self._mobile_platform for item in cart.line_items)

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        if cart.discount_code is None:
            return True
        if not self._reject:
            return False

        code = cart.discount_code.code.lower()
        if self._match_type == "reject_except":
            should_accept = code in self._discount_codes
        else:
            should_accept = self._is_mobile_cart(cart) or code not in self._discount_codes

        if not should_accept:
            logger.info("discount_code_rejected", code=code, reason=self._message)
            cart.discount_code.reject(self._message)
        return True


class DiscountCodeQualifier(Qualifier):
    """Match carts carrying an accepted code from a list.

    ``match`` compares whole codes case-insensitively. With
    ``match_type="start_with"`` the listed values are case-sensitive code
    prefixes.
    """

    MATCH_TYPES = ("match", "start_with")

    def __init__(self, codes: Iterable[str], match_type: str = "match") -> None:
        require_one_of(match_type, self.MATCH_TYPES, errmsg.INVALID_MATCH_TYPE)
        self._match_type = match_type
        if match_type == "start_with":
            self._codes = tuple(codes)
        else:
            self._codes = tuple(code.upper() for code in codes)

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        discount_code = cart.discount_code
        if discount_code is None or discount_code.rejected:
            return False
        if self._match_type == "start_with":
            return discount_code.code.startswith(self._codes)
        return discount_code.code.upper() in self._codes


class LineItemsQualifier(Qualifier):
    """Use a line item selector as a cart condition: any / all items must match."""

    MATCH_TYPES = ("any", "all")

    def __init__(self, selector: Selector, match_type: str = "any") -> None:
        require_present(selector, f"{errmsg.QUALIFIER_REQUIRES_SELECTOR} for {type(self).__name__}")
        require_one_of(match_type, self.MATCH_TYPES, errmsg.INVALID_MATCH_TYPE)
        self._selector = selector
        self._combine = any if match_type == "any" else all

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        return self._combine(self._selector.matches(item) for item in cart.line_items)


class AndQualifier(Qualifier):
    def __init__(self, *conditions: Optional[Qualifier]) -> None:
        self._conditions = tuple(c for c in conditions if c is not None)

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        return all(condition.matches(cart, selector) for condition in self._conditions)


class OrQualifier(Qualifier):
    """Matches when any child matches. With no children it always matches,
    like a campaign with no qualifiers."""

    def __init__(self, *conditions: Optional[Qualifier]) -> None:
        self._conditions = tuple(c for c in conditions if c is not None)

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        if not self._conditions:
            return True
        return any(condition.matches(cart, selector) for condition in self._conditions)


class NotQualifier(Qualifier):
    def __init__(self, condition: Qualifier) -> None:
        self._condition = condition

    def matches(self, cart, selector: Optional[Selector] = None) -> bool:
        return not self._condition.matches(cart, selector)
