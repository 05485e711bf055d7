"""
Cart totals for the cart page and the checkout page.

Tax is a flat rate on the subtotal. Shipping either comes from an
explicit method chosen at checkout, or, on the cart page where no
method has been chosen yet, is the standard rate waived above the free
shipping threshold.
"""

from typing import Iterable, Optional, Tuple

from ..errors import InvalidQueryParameter
from ..models import CartSummary, Product


SHIPPING_RATES = {
    "standard": 5.99,
    "express": 12.99,
    "nextDay": 24.99,
}


def shipping_cost(
    subtotal: float,
    method: Optional[str] = None,
    free_shipping_threshold: float = 100.0,
) -> float:
    if method is None:
        return 0.0 if subtotal > free_shipping_threshold else SHIPPING_RATES["standard"]
    try:
        return SHIPPING_RATES[method]
    except KeyError:
        raise InvalidQueryParameter(
            f"Unknown shipping method '{method}' (expected one of {', '.join(SHIPPING_RATES)})"
        ) from None


def summarize_cart(
    lines: Iterable[Tuple[Product, int]],
    tax_rate: float = 0.10,
    shipping_method: Optional[str] = None,
    free_shipping_threshold: float = 100.0,
) -> CartSummary:
    """Compute subtotal, tax, shipping and total for ``(product, quantity)`` lines.

    An empty cart costs nothing, shipping included.
    """
    item_count = 0
    subtotal = 0.0
    for product, quantity in lines:
        item_count += quantity
        subtotal += product.price * quantity

    tax = subtotal * tax_rate
    shipping = shipping_cost(subtotal, shipping_method, free_shipping_threshold)
    if not item_count:
        shipping = 0.0

    return CartSummary(
        item_count=item_count,
        subtotal=round(subtotal, 2),
        tax=round(tax, 2),
        shipping=shipping,
        total=round(subtotal + tax + shipping, 2),
        shipping_method=shipping_method,
    )
