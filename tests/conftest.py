"""Shared fixtures: a seeded record store and an API client bound to it."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.config import DEFAULT_SAMPLE_DATA
from app.dependencies import get_storage
from app.main import app
from app.models import Product
from app.storage import MemStorage, load_sample_data


@pytest.fixture
def store():
    s = MemStorage()
    load_sample_data(s, DEFAULT_SAMPLE_DATA)
    return s


@pytest.fixture
def empty_store():
    return MemStorage()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_storage] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_product(id, price, **overrides):
    """Build a Product with sensible defaults for engine tests."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    fields = dict(
        id=id,
        name=f"Product {id}",
        slug=f"product-{id}",
        description="A plain item.",
        price=price,
        category_id=1,
        stock=1,
        created_at=base + timedelta(days=id),
    )
    fields.update(overrides)
    return Product(**fields)
