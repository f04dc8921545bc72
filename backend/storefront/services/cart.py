"""
Cart Service

Validates cart lines before they are added and quotes shipping for a cart.
"""
from storefront.schemas.cart import CartProduct, CartLineQuote, CartQuote
from storefront.services.shipping import shipping_total


def is_product_valid_to_add(item: CartProduct) -> bool:
    """All identifying fields set, positive quantity/price/stock/weight, sane delivery window."""
    required = (
        item.product_id,
        item.variant_id,
        item.product_slug,
        item.variant_slug,
        item.name,
        item.variant_name,
        item.image,
        item.size_id,
        item.size,
        item.shipping_method,
        item.variant_image,
    )
    if not all(required):
        return False

    return (
        item.quantity > 0
        and item.price > 0
        and item.stock > 0
        and item.weight > 0
        and item.delivery_time_min >= 0
        and item.delivery_time_max >= item.delivery_time_min
    )


def quote_line(item: CartProduct) -> CartLineQuote:
    if not is_product_valid_to_add(item):
        return CartLineQuote(
            product_id=item.product_id,
            variant_id=item.variant_id,
            size_id=item.size_id,
            is_valid=False,
        )

    shipping = 0.0
    if not item.is_free_shipping:
        shipping = shipping_total(item.shipping_method, item.shipping_fee, item.extra_shipping_fee, item.quantity)

    return CartLineQuote(
        product_id=item.product_id,
        variant_id=item.variant_id,
        size_id=item.size_id,
        is_valid=True,
        line_total=round(item.price * item.quantity, 2),
        shipping_total=round(shipping, 2),
    )


def quote_cart(items: list[CartProduct]) -> CartQuote:
    """Per-line shipping totals plus cart totals; invalid lines count for nothing."""
    lines = [quote_line(item) for item in items]
    subtotal = round(sum(line.line_total for line in lines), 2)
    shipping = round(sum(line.shipping_total for line in lines), 2)
    return CartQuote(lines=lines, subtotal=subtotal, shipping=shipping, total=round(subtotal + shipping, 2))
