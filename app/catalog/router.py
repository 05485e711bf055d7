"""
Route definitions for the catalog API.

Endpoints under /api:
- GET /categories               : list all categories
- GET /categories/{category_id} : get one category
- GET /products                 : list products with filters, sort and pagination
- GET /products/featured        : a handful of featured products for the home page
- GET /products/slug/{slug}     : get one product (with images and category) by slug
- GET /products/{product_id}    : get one product (with images and category) by id
"""

from __future__ import annotations

import math
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..config import Settings, get_settings
from ..dependencies import get_storage
from ..errors import NotFoundError
from ..models import Category, Product, ProductDetail
from ..storage import MemStorage
from .schemas import Pagination, PaginatedProducts, ProductQuery


router = APIRouter(prefix="/api", tags=["catalog"])


def _detail(store: MemStorage, product: Product) -> ProductDetail:
    """Attach images and the resolved category to ``product``."""
    return ProductDetail(
        **product.model_dump(),
        images=store.get_product_images(product.id),
        category=store.get_category(product.category_id),
    )


@router.get("/categories", response_model=List[Category])
def list_categories(store: MemStorage = Depends(get_storage)) -> List[Category]:
    return store.get_categories()


@router.get("/categories/{category_id}", response_model=Category)
def get_category(category_id: int, store: MemStorage = Depends(get_storage)) -> Category:
    category = store.get_category(category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


@router.get("/products", response_model=PaginatedProducts)
def list_products(
    limit: Optional[int] = Query(default=None, description="Page size"),
    page: int = Query(default=1, description="Current page (1-indexed)"),
    category_id: Optional[int] = Query(default=None, description="Filter by category id"),
    featured: Optional[bool] = Query(default=None, description="Only featured (true) or non-featured (false)"),
    new: Optional[bool] = Query(default=None, description="Only new (true) or not new (false)"),
    sale: Optional[bool] = Query(default=None, description="Only on sale (true) or not on sale (false)"),
    search: Optional[str] = Query(default=None, description="Text search in name and description"),
    min_price: Optional[float] = Query(default=None, description="Minimum price (inclusive)"),
    max_price: Optional[float] = Query(default=None, description="Maximum price (inclusive)"),
    sort_by: Optional[str] = Query(default=None, description="price, name, rating or createdAt"),
    sort_order: str = Query(default="asc", description="asc or desc"),
    store: MemStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> PaginatedProducts:
    """
    Returns one page of products plus pagination metadata.

    Boolean flags that are not given impose no constraint. Invalid
    windows (page < 1, limit <= 0, min_price > max_price) are rejected
    by the query engine with a 400.
    """
    page_size = limit if limit is not None else settings.default_page_size
    page_size = min(page_size, settings.max_page_size)

    spec = ProductQuery(
        category_id=category_id,
        is_featured=featured,
        is_new=new,
        is_sale=sale,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    result = store.get_products(spec)

    return PaginatedProducts(
        products=result.items,
        pagination=Pagination(
            total=result.total,
            total_pages=math.ceil(result.total / page_size),
            current_page=page,
            limit=page_size,
        ),
    )


@router.get("/products/featured", response_model=List[Product])
def featured_products(
    store: MemStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> List[Product]:
    result = store.get_products(
        ProductQuery(is_featured=True, page=1, page_size=settings.featured_limit)
    )
    return result.items


@router.get("/products/slug/{slug}", response_model=ProductDetail)
def get_product_by_slug(slug: str, store: MemStorage = Depends(get_storage)) -> ProductDetail:
    product = store.get_product_by_slug(slug)
    if product is None:
        raise NotFoundError("Product not found")
    return _detail(store, product)


@router.get("/products/{product_id}", response_model=ProductDetail)
def get_product(product_id: int, store: MemStorage = Depends(get_storage)) -> ProductDetail:
    product = store.get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return _detail(store, product)
