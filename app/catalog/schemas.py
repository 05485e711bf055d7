"""
Schema definitions for the catalog module.

``ProductQuery`` describes one lookup handed to the catalog
query engine: optional filters, an optional sort key with direction
and a mandatory pagination window. ``QueryResult`` is what the engine
returns. ``PaginatedProducts`` is the HTTP envelope built from a
``QueryResult`` by the router, including the derived page count.
"""

from typing import List, NamedTuple, Optional

from pydantic import BaseModel, Field

from ..models import Product


class ProductQuery(BaseModel):
    """Filters, sort and pagination window for one catalog lookup.

    Every filter is optional; ``None`` means "unconstrained". ``sort_by``
    and ``sort_order`` are kept as plain strings so that unknown values
    coming from a query string can be normalised by the engine (unknown
    sort key means no sort, unknown order means ascending) instead of
    being rejected. ``page`` and ``page_size`` are range-checked by the
    engine, which raises ``InvalidQueryParameter`` when they are out of
    range.
    """

    category_id: Optional[int] = None
    is_featured: Optional[bool] = None
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: Optional[str] = None
    sort_order: str = "asc"
    page: int = 1
    page_size: int = 10


class QueryResult(NamedTuple):
    """Products on the requested page plus the filtered total."""

    items: List[Product]
    total: int


class Pagination(BaseModel):
    total: int
    total_pages: int
    current_page: int
    limit: int


class PaginatedProducts(BaseModel):
    """A wrapper for paginated results returned from the ``/products`` endpoint."""

    products: List[Product] = Field(default_factory=list)
    pagination: Pagination
