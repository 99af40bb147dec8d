"""Tests for the promotion engine driver."""

import pytest

from checkout_promotions.campaigns import CodeDiscount, ConditionalDiscount, DiscountCodeList
from checkout_promotions.discounts import FixedFinalPriceDiscount, PercentageDiscount
from checkout_promotions.engine import EngineConfig, EvaluationResult, PromotionEngine
from checkout_promotions.errors import AmbiguousDiscountCodeError
from checkout_promotions.qualifiers import CartSubtotalQualifier, Comparison
from checkout_promotions.selectors import ProductIdSelector

from .fixtures import make_cart, make_item, prices


def percent_off(percent: int, name: str, **kwargs) -> ConditionalDiscount:
    return ConditionalDiscount("all", None, None, None, PercentageDiscount(percent, name), name=name, **kwargs)


class TestEngineConfig:
    def test_campaigns_are_frozen_into_a_tuple(self) -> None:
        campaigns = [percent_off(10, "ten")]
        config = EngineConfig.of(campaigns)
        campaigns.append(percent_off(20, "twenty"))
        assert len(config.campaigns) == 1


class TestPromotionEngine:
    def test_campaigns_stack_in_order(self) -> None:
        engine = PromotionEngine(EngineConfig.of([percent_off(50, "half"), percent_off(10, "ten")]))
        cart = make_cart(make_item(1, "100.00"))

        result = engine.evaluate(cart)

        assert prices(cart) == ["45.00"]
        assert cart.line_items[0].messages == ["half", "ten"]
        assert result.applied == ["half", "ten"]

    def test_later_campaigns_see_earlier_splits(self) -> None:
        capped = percent_off(50, "half", max_discounts=1)
        final = ConditionalDiscount(
            "all", None, None, ProductIdSelector("is_one", [1]), FixedFinalPriceDiscount("40.00", "final"), name="final"
        )
        cart = make_cart(make_item(1, "100.00", 2))

        PromotionEngine(EngineConfig.of([capped, final])).evaluate(cart)

        assert prices(cart) == ["40.00", "40.00"]
        assert [item.messages for item in cart.line_items] == [["half", "final"], ["final"]]

    def test_result_records_every_outcome(self) -> None:
        reverted = percent_off(
            90, "ninety", post_qualifier=CartSubtotalQualifier(Comparison.GREATER_THAN_OR_EQUAL, 50)
        )
        skipped = DiscountCodeList("all", None, None, None, [CodeDiscount("SAVE", "p", 10)], name="codes")
        engine = PromotionEngine(EngineConfig.of([reverted, skipped, percent_off(10, "ten")]))
        cart = make_cart(make_item(1, "100.00"))

        result = engine.evaluate(cart)

        assert result == EvaluationResult(applied=["ten"], reverted=["ninety"], skipped=["codes"])
        assert prices(cart) == ["90.00"]

    def test_configuration_error_aborts_evaluation(self) -> None:
        ambiguous = DiscountCodeList(
            "all", None, None, None, [CodeDiscount("SAVE", "p", 10), CodeDiscount("save", "f", 5)], name="codes"
        )
        after = percent_off(10, "ten")
        engine = PromotionEngine(EngineConfig.of([ambiguous, after]))
        cart = make_cart(make_item(1, "100.00"), code="SAVE")

        with pytest.raises(AmbiguousDiscountCodeError):
            engine.evaluate(cart)
        assert prices(cart) == ["100.00"]

    def test_config_is_reusable_across_carts(self) -> None:
        engine = PromotionEngine(EngineConfig.of([percent_off(50, "half", max_discounts=1)]))
        first = make_cart(make_item(1, "10.00", 2))
        second = make_cart(make_item(1, "10.00", 2))

        engine.evaluate(first)
        engine.evaluate(second)

        assert prices(first) == prices(second) == ["5.00", "10.00"]
