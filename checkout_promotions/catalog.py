"""Production campaign configuration.

N.B. The order of the campaigns matters. Every applicable discount stacks,
and each campaign sees the prices left by the ones before it. Make sure you
understand the existing discounts before adding new ones.
"""

from __future__ import annotations

from typing import Optional

from .adjustments import PriceTestCampaign
from .campaigns import (
    BundleComponent,
    BundleDiscount,
    BuyXGetX,
    Campaign,
    ConditionalDiscount,
    DiscountCodeList,
    SpendTier,
    TieredSpendDiscount,
)
from .config import Settings
from .discounts import FixedFinalPriceDiscount, PriceOverride
from .engine import EngineConfig
from .qualifiers import CartHasItemQualifier, Comparison, DiscountCodeQualifier, ExcludeDiscountCodes
from .selectors import (
    AndSelector,
    ItemMinPriceSelector,
    LineItemPropertiesSelector,
    ProductDiscountedSelector,
    ProductIdSelector,
    ProductTypeSelector,
    ProductVendorSelector,
)

# Jetsetter Pants
SELECTOR_JETSETTER_PANTS = ProductIdSelector("is_one", [
    "6817243365540",  # Space Black @ $99
    "6817243496612",  # Charcoal    @ $99
    "6817243725988",  # Deep Blue   @ $99
    "6817243889828",  # Stone       @ $117
    "7909754110168",  # Olive Green @ $99
])

# Legacy Jacket
SELECTOR_LEGACY_JACKET = ProductIdSelector("is_one", [
    "7932561096920",  # @ $117
])

# Jetsetter Boxer Briefs
SELECTOR_JETSETTER_BOXERS = ProductIdSelector("is_one", [
    "6748415164580",  # Mid   @ $30
    "6748416442532",  # Long  @ $30
    "6748422733988",  # Short @ $30
])

# Jetsetter Anytime Tees
SELECTOR_ANYTIME_TEES = ProductIdSelector("is_one", ["7827355500760"])  # @ $43

# Items added from the build-your-own bundle page carry `_byoPage=true`.
SELECTOR_WEEKENDER_BUNDLE_ITEM = LineItemPropertiesSelector({"_byoPage": "true"})

# Items no campaign has touched yet. May conflict with price tests.
SELECTOR_UNDISCOUNTED = ProductDiscountedSelector(False)

# Route shipping protection
SELECTOR_ROUTE_PROTECTION = AndSelector(
    ProductVendorSelector(["Route"]),
    ProductTypeSelector(["Insurance"]),
)

APP_ONLY_CODES = ["APP20", "APP15"]
FREE_SHIPPING_CODE_PREFIX = "GD-FS-"


def build_campaigns(settings: Optional[Settings] = None) -> list[Campaign]:
    settings = settings or Settings()
    return [
        # Price tests run first so campaigns discount from the tested prices.
        PriceTestCampaign(),
        # App-only codes are rejected on web; "Storefront API channels" must be
        # unchecked for the script.
        DiscountCodeList(
            "all",
            None,
            ExcludeDiscountCodes(
                "apply_script",
                "",
                "accept_except",
                APP_ONLY_CODES,
                mobile_platform=settings.mobile_platform,
            ),
            None,
            [],
            name="app_only_codes",
        ),
        # Weekender Bundle: Tee + Pants + Boxer for $149 (instead of $172).
        BundleDiscount(
            "all",
            None,
            CartHasItemQualifier("quantity", Comparison.GREATER_THAN_OR_EQUAL, 3, SELECTOR_WEEKENDER_BUNDLE_ITEM),
            [
                BundleComponent(1, AndSelector(SELECTOR_WEEKENDER_BUNDLE_ITEM, SELECTOR_ANYTIME_TEES)),
                BundleComponent(1, AndSelector(SELECTOR_WEEKENDER_BUNDLE_ITEM, SELECTOR_JETSETTER_BOXERS)),
                BundleComponent(1, AndSelector(SELECTOR_WEEKENDER_BUNDLE_ITEM, SELECTOR_JETSETTER_PANTS)),
            ],
            FixedFinalPriceDiscount("149.00", "Weekender Bundle", [
                PriceOverride("37.25", SELECTOR_ANYTIME_TEES),
                PriceOverride("26.00", SELECTOR_JETSETTER_BOXERS),
                PriceOverride("85.75", SELECTOR_JETSETTER_PANTS),
            ]),
            name="weekender_bundle",
        ),
        # Jetsetter Pants + Legacy Jacket for $148 (usually $198).
        BundleDiscount(
            "all",
            None,
            None,
            [
                BundleComponent(1, AndSelector(SELECTOR_JETSETTER_PANTS, SELECTOR_UNDISCOUNTED)),
                BundleComponent(1, AndSelector(SELECTOR_LEGACY_JACKET, SELECTOR_UNDISCOUNTED)),
            ],
            FixedFinalPriceDiscount("148.00", "BUNDLE", [
                PriceOverride("59.00", SELECTOR_JETSETTER_PANTS),
                PriceOverride("89.00", SELECTOR_LEGACY_JACKET),
            ]),
            name="pants_jacket_bundle",
        ),
        # Underwear volume deal: every 5 pairs at $30 go for $20 each.
        BuyXGetX(
            "all",
            None,
            None,
            AndSelector(SELECTOR_JETSETTER_BOXERS, ItemMinPriceSelector(cents=3000)), 5,
            AndSelector(SELECTOR_JETSETTER_BOXERS, ItemMinPriceSelector(cents=3000)), 5,
            FixedFinalPriceDiscount("20.00", "DEAL"),
            0,
            name="boxer_volume_deal",
        ),
        # Free shipping codes also cover Route protection.
        ConditionalDiscount(
            "all",
            None,
            DiscountCodeQualifier([FREE_SHIPPING_CODE_PREFIX], match_type="start_with"),
            SELECTOR_ROUTE_PROTECTION,
            FixedFinalPriceDiscount(0, "Gumdrop Discount"),
            0,
            name="free_shipping_protection",
        ),
    ]


def default_config(settings: Optional[Settings] = None) -> EngineConfig:
    return EngineConfig.of(build_campaigns(settings))


# Spend tiers unlocked by a discount code.
SPENDING_THRESHOLDS_STANDARD = [
    SpendTier(threshold=150, discount_type="dollar", amount=50, message="Spend $150 and get $30 off!"),
]

SPENDING_THRESHOLDS_AMBASSADOR = [
    SpendTier(threshold=200, discount_type="dollar", amount=50, message="Spend $200 and get $50 off!"),
]

TIERED_DISCOUNT_CODES = {
    "$30OFF": SPENDING_THRESHOLDS_STANDARD,
    "$50OFF": SPENDING_THRESHOLDS_AMBASSADOR,
}


def tiered_spend_config() -> EngineConfig:
    return EngineConfig.of(
        TieredSpendDiscount(tiers, DiscountCodeQualifier([code]), name=f"tiered_spend_{code.lower()}")
        for code, tiers in TIERED_DISCOUNT_CODES.items()
    )
