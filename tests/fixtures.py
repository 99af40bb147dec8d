"""Shared builders for carts, products and line items used across tests."""

from decimal import Decimal

from checkout_promotions.cart import Cart, DiscountCode, LineItem, Product, Variant
from checkout_promotions.money import Money


def make_product(product_id: int = 1, tags=(), vendor: str = "", product_type: str = "", gift_card: bool = False) -> Product:
    return Product(
        id=product_id,
        title=f"Product {product_id}",
        tags=frozenset(tags),
        vendor=vendor,
        product_type=product_type,
        gift_card=gift_card,
    )


def make_item(
    product_id: int = 1,
    price="10.00",
    quantity: int = 1,
    properties=None,
    tags=(),
    vendor: str = "",
    product_type: str = "",
    gift_card: bool = False,
) -> LineItem:
    """Build a line item; the variant id mirrors the product id."""
    product = make_product(product_id, tags, vendor, product_type, gift_card)
    variant = Variant(id=product_id, price=Money(Decimal(str(price))), product=product)
    return LineItem(variant, quantity, properties)


def make_cart(*items: LineItem, code=None, code_kind: str = DiscountCode.FIXED_AMOUNT) -> Cart:
    discount_code = DiscountCode(code, code_kind) if code is not None else None
    return Cart(items, discount_code=discount_code)


def prices(cart: Cart) -> list:
    """Line prices of a cart as strings, in cart order."""
    return [str(item.line_price.amount) for item in cart.line_items]


def quantities(cart: Cart) -> list:
    return [item.quantity for item in cart.line_items]
