"""End-to-end tests of the production campaign configuration."""

from checkout_promotions.cart import DiscountCode
from checkout_promotions.catalog import (
    build_campaigns,
    default_config,
    tiered_spend_config,
)
from checkout_promotions.config import Settings
from checkout_promotions.engine import PromotionEngine
from checkout_promotions.money import Money

from .fixtures import make_cart, make_item, prices, quantities

TEE = 7827355500760
BOXER = 6748415164580
PANTS = 6817243365540
JACKET = 7932561096920
BUNDLE_PAGE = {"_byoPage": "true"}


def evaluate(cart, config=None):
    return PromotionEngine(config or default_config()).evaluate(cart)


class TestCampaignOrder:
    def test_price_tests_run_first(self) -> None:
        names = [campaign.name for campaign in build_campaigns()]
        assert names == [
            "price_tests",
            "app_only_codes",
            "weekender_bundle",
            "pants_jacket_bundle",
            "boxer_volume_deal",
            "free_shipping_protection",
        ]


class TestWeekenderBundle:
    def test_bundle_page_items_cost_149(self) -> None:
        cart = make_cart(
            make_item(PANTS, "99.00", properties=BUNDLE_PAGE),
            make_item(BOXER, "30.00", properties=BUNDLE_PAGE),
            make_item(TEE, "43.00", properties=BUNDLE_PAGE),
        )
        result = evaluate(cart)

        assert "weekender_bundle" in result.applied
        assert cart.subtotal == Money("149.00")
        # Bundle members move to the top in component order.
        assert prices(cart) == ["37.25", "26.00", "85.75"]

    def test_items_outside_bundle_page_are_not_bundled(self) -> None:
        cart = make_cart(
            make_item(PANTS, "99.00"),
            make_item(BOXER, "30.00"),
            make_item(TEE, "43.00"),
        )
        evaluate(cart)
        assert cart.subtotal == Money("172.00")


class TestPantsJacketBundle:
    def test_pants_and_jacket_cost_148(self) -> None:
        cart = make_cart(make_item(TEE, "43.00"), make_item(JACKET, "117.00"), make_item(PANTS, "99.00"))
        evaluate(cart)

        assert prices(cart) == ["59.00", "89.00", "43.00"]
        assert [item.message for item in cart.line_items[:2]] == ["BUNDLE", "BUNDLE"]

    def test_weekender_pants_are_not_bundled_again(self) -> None:
        cart = make_cart(
            make_item(PANTS, "99.00", properties=BUNDLE_PAGE),
            make_item(BOXER, "30.00", properties=BUNDLE_PAGE),
            make_item(TEE, "43.00", properties=BUNDLE_PAGE),
            make_item(JACKET, "117.00"),
        )
        result = evaluate(cart)

        assert "pants_jacket_bundle" in result.skipped
        assert cart.subtotal == Money("266.00")


class TestBoxerVolumeDeal:
    def test_twelve_pairs(self) -> None:
        cart = make_cart(make_item(BOXER, "30.00", 12))
        evaluate(cart)

        assert quantities(cart) == [10, 2]
        assert prices(cart) == ["200.00", "60.00"]

    def test_price_tested_boxers_are_not_eligible(self) -> None:
        cart = make_cart(make_item(BOXER, "30.00", 5, properties={"_igp": "2800"}))
        result = evaluate(cart)

        assert "boxer_volume_deal" in result.skipped
        assert prices(cart) == ["140.00"]


class TestAppOnlyCodes:
    def test_web_cart_rejects_app_code(self) -> None:
        cart = make_cart(make_item(TEE, "43.00"), code="APP20", code_kind=DiscountCode.PERCENTAGE)
        evaluate(cart)
        assert cart.discount_code.rejected

    def test_app_cart_keeps_app_code(self) -> None:
        cart = make_cart(make_item(TEE, "43.00", properties={"_platform": "ios"}), code="APP20")
        evaluate(cart)
        assert not cart.discount_code.rejected

    def test_mobile_platform_setting(self) -> None:
        cart = make_cart(make_item(TEE, "43.00", properties={"_platform": "android"}), code="APP20")
        evaluate(cart, default_config(Settings(mobile_platform="android")))
        assert not cart.discount_code.rejected


class TestFreeShippingProtection:
    def route_item(self):
        return make_item(555, "2.98", vendor="Route", product_type="Insurance")

    def test_free_shipping_code_makes_protection_free(self) -> None:
        protection = self.route_item()
        cart = make_cart(make_item(TEE, "43.00"), protection, code="GD-FS-8817", code_kind=DiscountCode.SHIPPING)
        evaluate(cart)

        assert protection.line_price == Money.zero()
        assert protection.message == "Gumdrop Discount"
        assert prices(cart)[0] == "43.00"

    def test_lowercase_prefix_leaves_protection_priced(self) -> None:
        protection = self.route_item()
        cart = make_cart(protection, code="gd-fs-8817", code_kind=DiscountCode.SHIPPING)
        evaluate(cart)
        assert protection.line_price == Money("2.98")

    def test_other_codes_leave_protection_priced(self) -> None:
        protection = self.route_item()
        cart = make_cart(protection, code="WELCOME10")
        evaluate(cart)
        assert protection.line_price == Money("2.98")


class TestTieredSpend:
    def test_standard_code(self) -> None:
        cart = make_cart(make_item(1, "100.00"), make_item(2, "60.00"), code="$30off")
        result = evaluate(cart, tiered_spend_config())

        assert result.applied == ["tiered_spend_$30off"]
        assert prices(cart) == ["50.00", "10.00"]

    def test_ambassador_threshold_not_reached(self) -> None:
        cart = make_cart(make_item(1, "100.00"), make_item(2, "60.00"), code="$50OFF")
        result = evaluate(cart, tiered_spend_config())

        assert result.applied == []
        assert cart.subtotal == Money("160.00")
