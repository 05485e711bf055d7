# app/models.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing_extensions import Literal


OrderStatus = Literal["pending", "processing", "completed", "cancelled"]


class StoreModel(BaseModel):
    # Attributes are snake_case, the JSON wire format is camelCase.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Users ===

class UserProfile(StoreModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None


class CreateUserRequest(UserProfile):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    email: str = Field(min_length=3)


class UpdateUserRequest(UserProfile):
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = Field(default=None, min_length=3)


class PublicUser(UserProfile):
    id: int
    username: str
    email: str


class User(PublicUser):
    password: str

    def public(self) -> PublicUser:
        return PublicUser(**self.model_dump(exclude={"password"}))


class LoginRequest(BaseModel):
    username: str
    password: str


# === Catalog ===

class CreateCategoryRequest(StoreModel):
    name: str
    slug: str
    image: Optional[str] = None


class Category(CreateCategoryRequest):
    id: int


class CreateProductRequest(StoreModel):
    name: str
    slug: str
    description: str
    price: float = Field(ge=0)
    compare_at_price: Optional[float] = None
    category_id: int
    brand: Optional[str] = None
    sku: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    rating: Optional[float] = None
    review_count: int = 0
    featured_image: Optional[str] = None
    is_new: bool = False
    is_featured: bool = False
    is_sale: bool = False


class Product(CreateProductRequest):
    id: int
    created_at: datetime


class CreateProductImageRequest(StoreModel):
    product_id: int
    url: str
    alt: Optional[str] = None


class ProductImage(CreateProductImageRequest):
    id: int


class ProductDetail(Product):
    images: List[ProductImage] = Field(default_factory=list)
    category: Optional[Category] = None


# === Cart & wishlist ===

class AddCartItemRequest(StoreModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(StoreModel):
    # Range is checked in the route so the error matches the other cart errors.
    quantity: Optional[int] = None


class CartItem(StoreModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    added_at: datetime


class CartItemWithProduct(CartItem):
    product: Optional[Product] = None


class AddWishlistItemRequest(StoreModel):
    product_id: int


class WishlistItem(StoreModel):
    id: int
    user_id: int
    product_id: int
    added_at: datetime


class WishlistItemWithProduct(WishlistItem):
    product: Optional[Product] = None


# === Orders ===

class ShippingAddress(StoreModel):
    shipping_address: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_state: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    shipping_country: Optional[str] = None


class CreateOrderRequest(ShippingAddress):
    total: float = Field(ge=0)
    status: OrderStatus = "pending"


class Order(CreateOrderRequest):
    id: int
    user_id: int
    created_at: datetime


class OrderItem(StoreModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: float


class OrderItemWithProduct(OrderItem):
    product: Optional[Product] = None


class OrderWithItems(Order):
    items: List[OrderItemWithProduct] = Field(default_factory=list)


# === Checkout ===

class CartSummary(StoreModel):
    item_count: int
    subtotal: float
    tax: float
    shipping: float
    total: float
    shipping_method: Optional[str] = None


class PaymentIntentRequest(BaseModel):
    amount: Optional[float] = None


class PaymentIntent(StoreModel):
    client_secret: str
    message: str = "This is a dummy payment implementation for testing"
