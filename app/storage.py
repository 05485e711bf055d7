# app/storage.py
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from .catalog.query import query_products
from .catalog.schemas import ProductQuery, QueryResult
from .errors import ConflictError, NotFoundError
from .models import (
    AddCartItemRequest,
    AddWishlistItemRequest,
    CartItem,
    Category,
    CreateCategoryRequest,
    CreateOrderRequest,
    CreateProductImageRequest,
    CreateProductRequest,
    CreateUserRequest,
    Order,
    OrderItem,
    Product,
    ProductImage,
    UpdateUserRequest,
    User,
    WishlistItem,
)


logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemStorage:
    """In-memory record store for every storefront entity.

    One instance is built at application startup and shared by request
    handlers. Each entity lives in its own dict keyed by id; ids come
    from per-entity counters that start at 1 and only ever increase.
    """

    def __init__(self) -> None:
        self.users: Dict[int, User] = {}
        self.categories: Dict[int, Category] = {}
        self.products: Dict[int, Product] = {}
        self.product_images: Dict[int, ProductImage] = {}
        self.cart_items: Dict[int, CartItem] = {}
        self.orders: Dict[int, Order] = {}
        self.order_items: Dict[int, OrderItem] = {}
        self.wishlist_items: Dict[int, WishlistItem] = {}

        self._next_ids: Dict[str, int] = {
            "user": 1,
            "category": 1,
            "product": 1,
            "product_image": 1,
            "cart_item": 1,
            "order": 1,
            "order_item": 1,
            "wishlist_item": 1,
        }

    def _next_id(self, entity: str) -> int:
        value = self._next_ids[entity]
        self._next_ids[entity] = value + 1
        return value

    # === Users ===

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        name = username.lower()
        return next((u for u in self.users.values() if u.username.lower() == name), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        addr = email.lower()
        return next((u for u in self.users.values() if u.email.lower() == addr), None)

    def create_user(self, req: CreateUserRequest) -> User:
        if self.get_user_by_username(req.username):
            raise ConflictError("Username already exists")
        if self.get_user_by_email(req.email):
            raise ConflictError("Email already exists")
        user = User(id=self._next_id("user"), **req.model_dump())
        self.users[user.id] = user
        return user

    def update_user(self, user_id: int, req: UpdateUserRequest) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        changes = req.model_dump(exclude_unset=True)
        # Credentials can be changed but never cleared.
        for key in ("username", "password", "email"):
            if changes.get(key) is None:
                changes.pop(key, None)
        if changes.get("username"):
            other = self.get_user_by_username(changes["username"])
            if other is not None and other.id != user_id:
                raise ConflictError("Username already exists")
        if changes.get("email"):
            other = self.get_user_by_email(changes["email"])
            if other is not None and other.id != user_id:
                raise ConflictError("Email already exists")
        updated = user.model_copy(update=changes)
        self.users[user_id] = updated
        return updated

    # === Categories ===

    def get_categories(self) -> List[Category]:
        return list(self.categories.values())

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.categories.get(category_id)

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        return next((c for c in self.categories.values() if c.slug == slug), None)

    def create_category(self, req: CreateCategoryRequest) -> Category:
        if self.get_category_by_slug(req.slug):
            raise ConflictError(f"Category slug '{req.slug}' already exists")
        category = Category(id=self._next_id("category"), **req.model_dump())
        self.categories[category.id] = category
        return category

    # === Products ===

    def get_products(self, spec: ProductQuery) -> QueryResult:
        # The engine gets its own list so writers cannot change it mid-scan.
        return query_products(list(self.products.values()), spec)

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.products.get(product_id)

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        return next((p for p in self.products.values() if p.slug == slug), None)

    def create_product(self, req: CreateProductRequest, created_at: Optional[datetime] = None) -> Product:
        if self.get_product_by_slug(req.slug):
            raise ConflictError(f"Product slug '{req.slug}' already exists")
        product = Product(
            id=self._next_id("product"),
            created_at=created_at or _now(),
            **req.model_dump(),
        )
        self.products[product.id] = product
        return product

    def update_product(self, product_id: int, changes: dict) -> Optional[Product]:
        product = self.products.get(product_id)
        if product is None:
            return None
        slug = changes.get("slug")
        if slug and slug != product.slug and self.get_product_by_slug(slug):
            raise ConflictError(f"Product slug '{slug}' already exists")
        updated = Product(**{**product.model_dump(), **changes})
        self.products[product_id] = updated
        return updated

    # === Product images ===

    def get_product_images(self, product_id: int) -> List[ProductImage]:
        return [i for i in self.product_images.values() if i.product_id == product_id]

    def create_product_image(self, req: CreateProductImageRequest) -> ProductImage:
        image = ProductImage(id=self._next_id("product_image"), **req.model_dump())
        self.product_images[image.id] = image
        return image

    # === Cart ===

    def get_cart_items(self, user_id: int) -> List[CartItem]:
        return [i for i in self.cart_items.values() if i.user_id == user_id]

    def get_cart_item(self, user_id: int, product_id: int) -> Optional[CartItem]:
        return next(
            (
                i
                for i in self.cart_items.values()
                if i.user_id == user_id and i.product_id == product_id
            ),
            None,
        )

    def create_cart_item(self, user_id: int, req: AddCartItemRequest) -> CartItem:
        """Add a cart line, or bump the quantity of the existing line for that product."""
        existing = self.get_cart_item(user_id, req.product_id)
        if existing is not None:
            return self.update_cart_item(existing.id, existing.quantity + req.quantity)

        item = CartItem(
            id=self._next_id("cart_item"),
            user_id=user_id,
            product_id=req.product_id,
            quantity=req.quantity,
            added_at=_now(),
        )
        self.cart_items[item.id] = item
        return item

    def update_cart_item(self, item_id: int, quantity: int) -> Optional[CartItem]:
        item = self.cart_items.get(item_id)
        if item is None:
            return None
        updated = item.model_copy(update={"quantity": quantity})
        self.cart_items[item_id] = updated
        return updated

    def delete_cart_item(self, item_id: int) -> bool:
        return self.cart_items.pop(item_id, None) is not None

    def clear_cart(self, user_id: int) -> bool:
        for item in self.get_cart_items(user_id):
            del self.cart_items[item.id]
        return True

    # === Orders ===

    def get_orders(self, user_id: int) -> List[Order]:
        return [o for o in self.orders.values() if o.user_id == user_id]

    def get_order(self, order_id: int) -> Optional[Order]:
        return self.orders.get(order_id)

    def create_order(self, user_id: int, req: CreateOrderRequest) -> Order:
        order = Order(
            id=self._next_id("order"),
            user_id=user_id,
            created_at=_now(),
            **req.model_dump(),
        )
        self.orders[order.id] = order
        return order

    def get_order_items(self, order_id: int) -> List[OrderItem]:
        return [i for i in self.order_items.values() if i.order_id == order_id]

    def create_order_item(self, order_id: int, product_id: int, quantity: int, price: float) -> OrderItem:
        item = OrderItem(
            id=self._next_id("order_item"),
            order_id=order_id,
            product_id=product_id,
            quantity=quantity,
            price=price,
        )
        self.order_items[item.id] = item
        return item

    def checkout(self, user_id: int, req: CreateOrderRequest) -> Order:
        """Turn the user's cart into an order and empty the cart.

        Each cart line becomes an order item priced at the product's
        current price. Raises ``NotFoundError`` when a cart line points
        at a product that no longer exists; the cart is left untouched
        in that case.
        """
        lines = self.get_cart_items(user_id)
        priced = []
        for line in lines:
            product = self.get_product(line.product_id)
            if product is None:
                raise NotFoundError(f"Product not found: {line.product_id}")
            priced.append((line, product.price))

        order = self.create_order(user_id, req)
        for line, price in priced:
            self.create_order_item(order.id, line.product_id, line.quantity, price)
        self.clear_cart(user_id)
        logger.info(
            "Created order %s for user %s with %s item(s), total %.2f",
            order.id, user_id, len(priced), order.total,
        )
        return order

    # === Wishlist ===

    def get_wishlist_items(self, user_id: int) -> List[WishlistItem]:
        return [i for i in self.wishlist_items.values() if i.user_id == user_id]

    def get_wishlist_item(self, user_id: int, product_id: int) -> Optional[WishlistItem]:
        return next(
            (
                i
                for i in self.wishlist_items.values()
                if i.user_id == user_id and i.product_id == product_id
            ),
            None,
        )

    def create_wishlist_item(self, user_id: int, req: AddWishlistItemRequest) -> WishlistItem:
        existing = self.get_wishlist_item(user_id, req.product_id)
        if existing is not None:
            return existing
        item = WishlistItem(
            id=self._next_id("wishlist_item"),
            user_id=user_id,
            product_id=req.product_id,
            added_at=_now(),
        )
        self.wishlist_items[item.id] = item
        return item

    def delete_wishlist_item(self, item_id: int) -> bool:
        return self.wishlist_items.pop(item_id, None) is not None


def load_sample_data(store: MemStorage, path: Path) -> None:
    """Seed ``store`` from the JSON file at ``path``.

    The file holds ``users``, ``categories``, ``products`` (each with an
    optional ``images`` list), and per-user ``cart``, ``wishlist`` and
    ``orders`` entries that reference products and users by their
    1-based position, which is also the id they receive on an empty
    store.
    """
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    for entry in raw.get("users", []):
        store.create_user(CreateUserRequest(**entry))
    for entry in raw.get("categories", []):
        store.create_category(CreateCategoryRequest(**entry))
    for entry in raw.get("products", []):
        images = entry.pop("images", [])
        product = store.create_product(CreateProductRequest(**entry))
        for image in images:
            store.create_product_image(
                CreateProductImageRequest(product_id=product.id, **image)
            )

    for entry in raw.get("cart", []):
        store.create_cart_item(
            entry["userId"],
            AddCartItemRequest(productId=entry["productId"], quantity=entry.get("quantity", 1)),
        )
    for entry in raw.get("wishlist", []):
        store.create_wishlist_item(entry["userId"], AddWishlistItemRequest(productId=entry["productId"]))
    for entry in raw.get("orders", []):
        items = entry.pop("items", [])
        user_id = entry.pop("userId")
        order = store.create_order(user_id, CreateOrderRequest(**entry))
        for item in items:
            store.create_order_item(order.id, item["productId"], item["quantity"], item["price"])

    logger.info(
        "Loaded sample data from %s: %s categories, %s products",
        path, len(store.categories), len(store.products),
    )
