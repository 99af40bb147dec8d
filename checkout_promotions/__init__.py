"""Checkout promotion campaigns: qualify a cart, discount its line items."""

from .money import Money
from .cart import (
    Cart,
    CartSnapshot,
    DiscountCode,
    LineItem,
    Product,
    Variant,
)
from .errors import (
    errmsg,
    PromotionError,
    ConfigurationError,
    AmbiguousDiscountCodeError,
    CartError,
)
from .selectors import (
    Selector,
    ProductIdSelector,
    ProductTagSelector,
    ProductVendorSelector,
    ProductTypeSelector,
    ItemMinPriceSelector,
    LineItemPropertiesSelector,
    ProductDiscountedSelector,
    AndSelector,
    OrSelector,
    NotSelector,
    select,
)
from .qualifiers import (
    Comparison,
    compare_amounts,
    Qualifier,
    CartQuantityQualifier,
    CartHasItemQualifier,
    CartSubtotalQualifier,
    ExcludeDiscountCodes,
    DiscountCodeQualifier,
    LineItemsQualifier,
    AndQualifier,
    OrQualifier,
    NotQualifier,
)
from .discounts import (
    Discount,
    DiscountApplication,
    PercentageDiscount,
    FixedItemDiscount,
    FixedTotalDiscount,
    FixedFinalPriceDiscount,
    PriceOverride,
)
from .campaigns import (
    Campaign,
    CampaignOutcome,
    CodeDiscount,
    DiscountCodeList,
    ConditionalDiscount,
    BuyXGetX,
    BundleComponent,
    BundleDiscount,
    SpendTier,
    TieredSpendDiscount,
)
from .adjustments import PropertyPriceDiscount, PriceTestCampaign
from .engine import EngineConfig, EvaluationResult, PromotionEngine
from .config import Settings, configure_logging

__all__ = [
    # Money
    "Money",
    # Cart
    "Cart",
    "CartSnapshot",
    "DiscountCode",
    "LineItem",
    "Product",
    "Variant",
    # Errors
    "errmsg",
    "PromotionError",
    "ConfigurationError",
    "AmbiguousDiscountCodeError",
    "CartError",
    # Selectors
    "Selector",
    "ProductIdSelector",
    "ProductTagSelector",
    "ProductVendorSelector",
    "ProductTypeSelector",
    "ItemMinPriceSelector",
    "LineItemPropertiesSelector",
    "ProductDiscountedSelector",
    "AndSelector",
    "OrSelector",
    "NotSelector",
    "select",
    # Qualifiers
    "Comparison",
    "compare_amounts",
    "Qualifier",
    "CartQuantityQualifier",
    "CartHasItemQualifier",
    "CartSubtotalQualifier",
    "ExcludeDiscountCodes",
    "DiscountCodeQualifier",
    "LineItemsQualifier",
    "AndQualifier",
    "OrQualifier",
    "NotQualifier",
    # Discounts
    "Discount",
    "DiscountApplication",
    "PercentageDiscount",
    "FixedItemDiscount",
    "FixedTotalDiscount",
    "FixedFinalPriceDiscount",
    "PriceOverride",
    # Campaigns
    "Campaign",
    "CampaignOutcome",
    "CodeDiscount",
    "DiscountCodeList",
    "ConditionalDiscount",
    "BuyXGetX",
    "BundleComponent",
    "BundleDiscount",
    "SpendTier",
    "TieredSpendDiscount",
    # Price tests
    "PropertyPriceDiscount",
    "PriceTestCampaign",
    # Engine
    "EngineConfig",
    "EvaluationResult",
    "PromotionEngine",
    # Settings
    "Settings",
    "configure_logging",
]
