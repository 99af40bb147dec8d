"""Buy X get X step definitions."""

from pytest_bdd import scenarios, given, parsers

from checkout_promotions.campaigns import BuyXGetX
from checkout_promotions.discounts import FixedFinalPriceDiscount
from checkout_promotions.selectors import ProductIdSelector


# Link to feature file
scenarios("volume_deals.feature")


@given(parsers.parse("a buy {buy_x:d} get {get_x:d} deal on product {product_id:d} at a final price of {price}"))
def given_volume_deal(context, buy_x, get_x, product_id, price):
    selector = ProductIdSelector("is_one", [product_id])
    context["campaign"] = BuyXGetX(
        "all", None, None,
        selector, buy_x,
        selector, get_x,
        FixedFinalPriceDiscount(price, "DEAL"),
    )
