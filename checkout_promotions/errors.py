"""Error types for the promotion engine."""

from typing import Optional


class errmsg:
    """Error message constants."""

    CAMPAIGN_REQUIRES_DISCOUNT = "Campaign requires a discount"
    QUALIFIER_REQUIRES_SELECTOR = "Must supply an item selector"
    BUNDLE_REQUIRES_SELECTOR = "Bundle component requires a selector"
    BUNDLE_REQUIRES_COMPONENTS = "Bundle requires at least one component"
    INVALID_COMPARISON = "Invalid comparison type"
    INVALID_CONDITION = "Campaign condition must be 'all' or 'any'"
    INVALID_MATCH_TYPE = "Invalid match type"
    INVALID_DISCOUNT_TYPE = "Invalid discount type"
    INVALID_TOTAL_METHOD = "Invalid total method"
    MULTIPLE_DISCOUNTS = "matches multiple discounts"
    QUANTITY_POSITIVE = "Quantity must be positive"
    AMOUNT_NON_NEGATIVE = "Amount cannot be negative"
    PERCENT_RANGE = "Percentage must be 0-100"
    PRICE_NEGATIVE = "Line price cannot be negative"
    SPLIT_OUT_OF_RANGE = "Split quantity must be between 1 and the item quantity minus one"
    ITEM_NOT_IN_CART = "Item not in cart"
    TIERS_REQUIRED = "At least one spend tier is required"
    INVALID_LOG_LEVEL = "Invalid log level"
    INVALID_LOG_FORMAT = "Invalid log format"


class PromotionError(Exception):
    """Base class for promotion engine errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigurationError(PromotionError):
    """A campaign, selector or qualifier was configured incorrectly.

    Configuration errors abort the whole evaluation.
    """


class AmbiguousDiscountCodeError(ConfigurationError):
    """More than one discount table entry matches the applied code."""

    def __init__(self, code: str):
        super().__init__(f"{code} {errmsg.MULTIPLE_DISCOUNTS}")
        self.code = code


class CartError(PromotionError):
    """An invalid operation was attempted on a cart or line item."""
