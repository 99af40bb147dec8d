"""Line item selectors.

A selector is a pure predicate over a single line item. Leaf selectors look
at the product, the price or the line item properties; ``AndSelector``,
``OrSelector`` and ``NotSelector`` compose them into trees of any depth.

Example::

    bundle_tee = AndSelector(
        LineItemPropertiesSelector({"_byoPage": "true"}),
        ProductIdSelector("is_one", ["7827355500760"]),
    )
    bundle_tee.matches(line_item)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Optional

from .errors import errmsg
from .money import Money
from .validation import require_one_of

PARTIAL_MATCHERS = {
    "start_with": str.startswith,
    "end_with": str.endswith,
    "include": lambda text, fragment: fragment in text,
}


def partial_match(match_type: str, values: Iterable[str], possible_matches: Iterable[str]) -> bool:
    """Return True if any value starts with / ends with / includes any possible match."""
    matcher = PARTIAL_MATCHERS[match_type]
    values = list(values)
    return any(matcher(value, possibility) for possibility in possible_matches for value in values)


class Selector(ABC):
    """Predicate over a single line item."""

    @abstractmethod
    def matches(self, line_item) -> bool:
        """Return True if the line item is selected."""


class ProductIdSelector(Selector):
    """Select items whose product id is (or is not) in a set of ids."""

    MATCH_TYPES = ("is_one", "not_one")

    def __init__(self, match_type: str, product_ids: Iterable) -> None:
        require_one_of(match_type, self.MATCH_TYPES, errmsg.INVALID_MATCH_TYPE)
        self._invert = match_type == "not_one"
        self._product_ids = frozenset(int(product_id) for product_id in product_ids)

    def matches(self, line_item) -> bool:
        return self._invert ^ (line_item.variant.product.id in self._product_ids)


class ProductTagSelector(Selector):
    """Select items by product tag, exactly or by partial string match."""

    MATCH_TYPES = ("does", "does_not")
    MATCH_CONDITIONS = ("match", *PARTIAL_MATCHERS)

    def __init__(self, match_type: str, match_condition: str, tags: Iterable[str]) -> None:
        require_one_of(match_type, self.MATCH_TYPES, errmsg.INVALID_MATCH_TYPE)
        require_one_of(match_condition, self.MATCH_CONDITIONS, errmsg.INVALID_MATCH_TYPE)
        self._invert = match_type == "does_not"
        self._match_condition = match_condition
        self._tags = frozenset(tag.lower() for tag in tags)

    def matches(self, line_item) -> bool:
        product_tags = {tag.lower() for tag in line_item.variant.product.tags}
        if self._match_condition == "match":
            return self._invert ^ bool(self._tags & product_tags)
        return self._invert ^ partial_match(self._match_condition, product_tags, self._tags)


class ProductVendorSelector(Selector):
    """Select items whose product vendor is one of the given vendors."""

    def __init__(self, vendors: Iterable[str]) -> None:
        self._vendors = frozenset(vendors)

    def matches(self, line_item) -> bool:
        return line_item.variant.product.vendor in self._vendors


class ProductTypeSelector(Selector):
    """Select items whose product type is one of the given types."""

    def __init__(self, product_types: Iterable[str]) -> None:
        self._product_types = frozenset(product_types)

    def matches(self, line_item) -> bool:
        return line_item.variant.product.product_type in self._product_types


class ItemMinPriceSelector(Selector):
    """Select items whose line price is at least ``cents`` per unit."""

    def __init__(self, cents: int = 10000000) -> None:
        self._min_price = Money.from_cents(cents)

    def matches(self, line_item) -> bool:
        return line_item.line_price >= self._min_price * line_item.quantity


class LineItemPropertiesSelector(Selector):
    """Select items carrying every target property (values compared case-insensitively).

    An empty target map selects every item.
    """

    def __init__(self, target_properties: Mapping[str, str]) -> None:
        self._target_properties = dict(target_properties)

    def matches(self, line_item) -> bool:
        properties = line_item.properties
        return all(
            key in properties and properties[key].lower() == value.lower()
            for key, value in self._target_properties.items()
        )


class ProductDiscountedSelector(Selector):
    def __init__(self, discounted: bool) -> None:
        self._discounted = discounted

    def matches(self, line_item) -> bool:
        return self._discounted == line_item.discounted


class AndSelector(Selector):
    """Matches when every child matches. ``None`` children are ignored."""

    def __init__(self, *conditions: Optional[Selector]) -> None:
        self._conditions = tuple(c for c in conditions if c is not None)

    def matches(self, line_item) -> bool:
        return all(condition.matches(line_item) for condition in self._conditions)


class OrSelector(Selector):
    """Matches when any child matches. ``None`` children are ignored."""

    def __init__(self, *conditions: Optional[Selector]) -> None:
        self._conditions = tuple(c for c in conditions if c is not None)

    def matches(self, line_item) -> bool:
        return any(condition.matches(line_item) for condition in self._conditions)


class NotSelector(Selector):
    def __init__(self, condition: Selector) -> None:
        self._condition = condition

    def matches(self, line_item) -> bool:
        return not self._condition.matches(line_item)


def select(line_items: Iterable, selector: Optional[Selector]) -> list:
    """Return the line items matched by ``selector`` (all of them when it is None)."""
    if selector is None:
        return list(line_items)
    return [item for item in line_items if selector.matches(item)]
