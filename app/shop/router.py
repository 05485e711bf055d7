"""
Route definitions for the cart, wishlist, orders and payment.

Every endpoint acts on behalf of the current user, which is the demo
user until real authentication exists.

Endpoints under /api:
- GET    /cart                   : cart lines with their product
- GET    /cart/summary           : subtotal, tax, shipping and total
- POST   /cart                   : add a product (merges with an existing line)
- PATCH  /cart/{item_id}         : change the quantity of a line
- DELETE /cart/{item_id}         : remove a line
- DELETE /cart                   : empty the cart
- GET    /wishlist               : wishlist entries with their product
- POST   /wishlist               : add a product (no duplicates)
- DELETE /wishlist/{item_id}     : remove an entry
- GET    /orders                 : the user's orders with their items
- GET    /orders/{order_id}      : one order with its items
- POST   /orders                 : check out the cart into a new order
- POST   /create-payment-intent  : simulated payment
"""

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..config import Settings, get_settings
from ..dependencies import get_current_user_id, get_storage
from ..errors import InvalidQueryParameter, NotFoundError
from ..models import (
    AddCartItemRequest,
    AddWishlistItemRequest,
    CartItem,
    CartItemWithProduct,
    CartSummary,
    CreateOrderRequest,
    Order,
    OrderWithItems,
    OrderItemWithProduct,
    PaymentIntent,
    PaymentIntentRequest,
    UpdateCartItemRequest,
    WishlistItem,
    WishlistItemWithProduct,
)
from ..storage import MemStorage
from .pricing import summarize_cart


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["shop"])


def _cart_line(store: MemStorage, item: CartItem) -> CartItemWithProduct:
    return CartItemWithProduct(**item.model_dump(), product=store.get_product(item.product_id))


def _wishlist_entry(store: MemStorage, item: WishlistItem) -> WishlistItemWithProduct:
    return WishlistItemWithProduct(**item.model_dump(), product=store.get_product(item.product_id))


def _order_with_items(store: MemStorage, order: Order) -> OrderWithItems:
    items = [
        OrderItemWithProduct(**i.model_dump(), product=store.get_product(i.product_id))
        for i in store.get_order_items(order.id)
    ]
    return OrderWithItems(**order.model_dump(), items=items)


# === Cart ===

@router.get("/cart", response_model=List[CartItemWithProduct])
def list_cart(
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
) -> List[CartItemWithProduct]:
    return [_cart_line(store, item) for item in store.get_cart_items(user_id)]


@router.get("/cart/summary", response_model=CartSummary)
def cart_summary(
    shipping_method: Optional[str] = Query(
        default=None, description="standard, express or nextDay; omit for the cart-page estimate"
    ),
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
    settings: Settings = Depends(get_settings),
) -> CartSummary:
    lines = []
    for item in store.get_cart_items(user_id):
        product = store.get_product(item.product_id)
        if product is not None:
            lines.append((product, item.quantity))
    return summarize_cart(
        lines,
        tax_rate=settings.tax_rate,
        shipping_method=shipping_method,
        free_shipping_threshold=settings.free_shipping_threshold,
    )


@router.post("/cart", response_model=CartItemWithProduct, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    req: AddCartItemRequest,
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
) -> CartItemWithProduct:
    if store.get_product(req.product_id) is None:
        raise NotFoundError("Product not found")
    item = store.create_cart_item(user_id, req)
    return _cart_line(store, item)


@router.patch("/cart/{item_id}", response_model=CartItemWithProduct)
def update_cart_item(
    item_id: int,
    req: UpdateCartItemRequest,
    store: MemStorage = Depends(get_storage),
) -> CartItemWithProduct:
    if not req.quantity or req.quantity < 1:
        raise InvalidQueryParameter("Quantity must be at least 1")
    item = store.update_cart_item(item_id, req.quantity)
    if item is None:
        raise NotFoundError("Cart item not found")
    return _cart_line(store, item)


@router.delete("/cart/{item_id}")
def remove_cart_item(item_id: int, store: MemStorage = Depends(get_storage)):
    if not store.delete_cart_item(item_id):
        raise NotFoundError("Cart item not found")
    return {"message": "Item removed from cart"}


@router.delete("/cart")
def clear_cart(
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    store.clear_cart(user_id)
    return {"message": "Cart cleared"}


# === Wishlist ===

@router.get("/wishlist", response_model=List[WishlistItemWithProduct])
def list_wishlist(
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
) -> List[WishlistItemWithProduct]:
    return [_wishlist_entry(store, item) for item in store.get_wishlist_items(user_id)]


@router.post("/wishlist", response_model=WishlistItemWithProduct, status_code=status.HTTP_201_CREATED)
def add_to_wishlist(
    req: AddWishlistItemRequest,
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
) -> WishlistItemWithProduct:
    if store.get_product(req.product_id) is None:
        raise NotFoundError("Product not found")
    item = store.create_wishlist_item(user_id, req)
    return _wishlist_entry(store, item)


@router.delete("/wishlist/{item_id}")
def remove_wishlist_item(item_id: int, store: MemStorage = Depends(get_storage)):
    if not store.delete_wishlist_item(item_id):
        raise NotFoundError("Wishlist item not found")
    return {"message": "Item removed from wishlist"}


# === Orders ===

@router.get("/orders", response_model=List[OrderWithItems])
def list_orders(
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
) -> List[OrderWithItems]:
    return [_order_with_items(store, order) for order in store.get_orders(user_id)]


@router.get("/orders/{order_id}", response_model=OrderWithItems)
def get_order(order_id: int, store: MemStorage = Depends(get_storage)) -> OrderWithItems:
    order = store.get_order(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return _order_with_items(store, order)


@router.post("/orders", response_model=OrderWithItems, status_code=status.HTTP_201_CREATED)
def create_order(
    req: CreateOrderRequest,
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
) -> OrderWithItems:
    order = store.checkout(user_id, req)
    return _order_with_items(store, order)


# === Payment ===

@router.post("/create-payment-intent", response_model=PaymentIntent)
def create_payment_intent(
    req: PaymentIntentRequest,
    settings: Settings = Depends(get_settings),
) -> PaymentIntent:
    """Simulate a payment provider; no money moves."""
    if not req.amount or req.amount <= 0:
        raise InvalidQueryParameter("Amount is required")

    time.sleep(settings.payment_delay_seconds)
    client_secret = f"pi_{int(time.time() * 1000)}_dummy_secret"
    logger.info("Created dummy payment intent for amount %.2f", req.amount)
    return PaymentIntent(client_secret=client_secret)
