"""Tests for MemStorage: identity maps, counters, cart/wishlist rules and checkout."""

import pytest
from pydantic import ValidationError

from app.catalog.schemas import ProductQuery
from app.errors import ConflictError, NotFoundError
from app.models import (
    AddCartItemRequest,
    AddWishlistItemRequest,
    CreateCategoryRequest,
    CreateOrderRequest,
    CreateProductRequest,
    CreateUserRequest,
    UpdateUserRequest,
)


def _product_request(slug, price=10.0, **overrides):
    fields = dict(name=slug.title(), slug=slug, description="desc", price=price, category_id=1)
    fields.update(overrides)
    return CreateProductRequest(**fields)


def test_sample_data_is_loaded(store):
    assert len(store.get_categories()) == 7
    assert len(store.products) == 10
    assert store.get_user(1).username == "user1"
    assert len(store.get_product_images(1)) == 4
    assert [i.product_id for i in store.get_cart_items(1)] == [1, 2]
    assert [i.product_id for i in store.get_wishlist_items(1)] == [3, 4, 5]
    order = store.get_orders(1)[0]
    assert order.status == "completed"
    assert [i.price for i in store.get_order_items(order.id)] == [120.0, 199.99]


def test_ids_increase_per_entity(empty_store):
    c1 = empty_store.create_category(CreateCategoryRequest(name="A", slug="a"))
    c2 = empty_store.create_category(CreateCategoryRequest(name="B", slug="b"))
    p1 = empty_store.create_product(_product_request("first"))
    assert (c1.id, c2.id, p1.id) == (1, 2, 1)


def test_duplicate_slugs_are_rejected(empty_store):
    empty_store.create_product(_product_request("same"))
    with pytest.raises(ConflictError):
        empty_store.create_product(_product_request("same"))
    empty_store.create_category(CreateCategoryRequest(name="A", slug="a"))
    with pytest.raises(ConflictError):
        empty_store.create_category(CreateCategoryRequest(name="A again", slug="a"))


def test_product_lookup_by_slug(store):
    assert store.get_product_by_slug("camera-lens").id == 9
    assert store.get_product_by_slug("missing") is None


def test_update_product_merges_changes(store):
    updated = store.update_product(1, {"price": 99.0, "is_sale": False})
    assert updated.price == 99.0
    assert updated.is_sale is False
    assert updated.name == "Nike Air Max"
    assert store.update_product(999, {"price": 1.0}) is None


def test_update_product_cannot_steal_a_slug(store):
    with pytest.raises(ConflictError):
        store.update_product(1, {"slug": "smart-watch"})


def test_get_products_delegates_to_query_engine(store):
    result = store.get_products(ProductQuery(category_id=1, sort_by="price", page=1, page_size=3))
    assert result.total == 6
    assert [p.price for p in result.items] == [69.99, 79.99, 89.99]


def test_user_lookups_are_case_insensitive(store):
    assert store.get_user_by_username("USER1").id == 1
    assert store.get_user_by_email("User@Example.com").id == 1


def test_create_user_rejects_duplicates(store):
    with pytest.raises(ConflictError):
        store.create_user(CreateUserRequest(username="User1", password="x", email="new@example.com"))
    with pytest.raises(ConflictError):
        store.create_user(CreateUserRequest(username="new", password="x", email="USER@example.com"))


def test_update_user_applies_only_given_fields(store):
    user = store.update_user(1, UpdateUserRequest(city="Boston"))
    assert user.city == "Boston"
    assert user.first_name == "John"
    assert user.password == "password123"
    assert store.update_user(42, UpdateUserRequest(city="Boston")) is None


def test_update_user_rejects_blank_email(store):
    with pytest.raises(ValidationError):
        store.update_user(1, UpdateUserRequest(email=""))
    assert store.get_user(1).email == "user@example.com"


def test_update_user_rejects_taken_username(store):
    store.create_user(CreateUserRequest(username="jane", password="x", email="jane@example.com"))
    with pytest.raises(ConflictError):
        store.update_user(1, UpdateUserRequest(username="jane"))


def test_adding_same_product_to_cart_merges_quantity(store):
    item = store.create_cart_item(1, AddCartItemRequest(product_id=1, quantity=2))
    assert item.quantity == 3
    assert len(store.get_cart_items(1)) == 2


def test_cart_update_delete_and_clear(store):
    item = store.create_cart_item(1, AddCartItemRequest(product_id=7))
    assert store.update_cart_item(item.id, 5).quantity == 5
    assert store.update_cart_item(999, 5) is None
    assert store.delete_cart_item(item.id) is True
    assert store.delete_cart_item(item.id) is False
    store.clear_cart(1)
    assert store.get_cart_items(1) == []


def test_wishlist_add_is_idempotent(store):
    first = store.create_wishlist_item(1, AddWishlistItemRequest(product_id=3))
    assert first.id == store.get_wishlist_item(1, 3).id
    assert len(store.get_wishlist_items(1)) == 3
    assert store.delete_wishlist_item(first.id) is True
    assert store.get_wishlist_item(1, 3) is None


def test_checkout_moves_cart_into_order_at_current_prices(store):
    store.update_product(2, {"price": 150.0})
    order = store.checkout(1, CreateOrderRequest(total=270.0, shipping_city="Boston"))

    items = store.get_order_items(order.id)
    assert [(i.product_id, i.quantity, i.price) for i in items] == [(1, 1, 120.0), (2, 1, 150.0)]
    assert order.status == "pending"
    assert order.shipping_city == "Boston"
    assert store.get_cart_items(1) == []
    assert len(store.get_orders(1)) == 2


def test_checkout_with_missing_product_keeps_cart(store):
    store.create_cart_item(1, AddCartItemRequest(product_id=404))
    with pytest.raises(NotFoundError):
        store.checkout(1, CreateOrderRequest(total=1.0))
    assert len(store.get_cart_items(1)) == 3
    assert len(store.get_orders(1)) == 1
