"""Pytest-bdd configuration and shared steps for promotion feature tests."""

import pytest
from pytest_bdd import given, parsers, then, when

from checkout_promotions.cart import Cart, DiscountCode
from checkout_promotions.errors import ConfigurationError
from checkout_promotions.money import Money

from ..fixtures import make_item, prices, quantities


@pytest.fixture
def context():
    """Shared test context for scenario state."""
    return {"cart": Cart(), "campaign": None, "outcome": None, "error": None}


def parse_list(text: str) -> list:
    return [value.strip() for value in text.split(",") if value.strip()]


# --- Given steps ---


@given(parsers.parse("a cart with {quantity:d} units of product {product_id:d} at {price}"))
def given_cart_item(context, quantity, product_id, price):
    context["cart"].append(make_item(product_id, price, quantity))


@given(parsers.parse('the discount code "{code}"'))
def given_discount_code(context, code):
    context["cart"].discount_code = DiscountCode(code)


# --- When steps ---


@when("the campaign runs")
def when_campaign_runs(context):
    try:
        context["outcome"] = context["campaign"].run(context["cart"])
    except ConfigurationError as err:
        context["error"] = err


# --- Then steps ---


@then(parsers.parse('the line item quantities are "{expected}"'))
def then_quantities(context, expected):
    assert quantities(context["cart"]) == [int(value) for value in parse_list(expected)]


@then(parsers.parse('the line prices are "{expected}"'))
def then_prices(context, expected):
    assert prices(context["cart"]) == parse_list(expected)


@then(parsers.parse("the cart subtotal is {amount}"))
def then_subtotal(context, amount):
    assert context["cart"].subtotal == Money(amount)


@then(parsers.parse('the campaign is "{outcome}"'))
def then_outcome(context, outcome):
    assert context["error"] is None
    assert context["outcome"].value == outcome
