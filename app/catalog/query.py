"""
Catalog query engine.

``query_products()`` turns a snapshot of the product collection and a
``ProductQuery`` into one page of results plus the filtered total. It
is a pure function: it never mutates the sequence it is given and keeps
no state between calls, so concurrent requests can call it freely as
long as each passes its own snapshot.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Callable, Dict, List, Optional, Sequence

from ..errors import InvalidQueryParameter
from ..models import Product
from .schemas import ProductQuery, QueryResult


logger = logging.getLogger(__name__)


def _norm(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison.

    Parameters
    ----------
    s : Optional[str]
        The string to normalize.

    Returns
    -------
    str
        The case-folded string. An empty string is returned when the
        input is ``None`` or empty.
    """
    return (s or "").casefold()


def _collation_key(s: Optional[str]) -> str:
    """Accent- and case-insensitive sort key, so "Éclair" sorts with "eclair"."""
    decomposed = unicodedata.normalize("NFKD", s or "")
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


# Sort keys per field. Missing ratings sort as 0.
SORT_KEYS: Dict[str, Callable[[Product], object]] = {
    "price": lambda p: p.price,
    "name": lambda p: _collation_key(p.name),
    "rating": lambda p: p.rating if p.rating is not None else 0.0,
    "createdAt": lambda p: p.created_at,
}


def validate_query(spec: ProductQuery) -> None:
    """Reject pagination windows and price bounds that cannot be satisfied.

    Raises
    ------
    InvalidQueryParameter
        When ``page < 1``, ``page_size <= 0`` or ``min_price > max_price``.
    """
    if spec.page < 1:
        raise InvalidQueryParameter(f"page must be >= 1 (got {spec.page})")
    if spec.page_size <= 0:
        raise InvalidQueryParameter(f"page size must be > 0 (got {spec.page_size})")
    if (
        spec.min_price is not None
        and spec.max_price is not None
        and spec.min_price > spec.max_price
    ):
        raise InvalidQueryParameter(
            f"min price {spec.min_price} is greater than max price {spec.max_price}"
        )


def matches(product: Product, spec: ProductQuery) -> bool:
    """Return ``True`` when ``product`` satisfies every filter in ``spec``.

    Filters left as ``None`` impose no constraint; a blank search term is
    treated the same way. The search term is matched case-insensitively
    as a substring of the product name or description.
    """
    if spec.category_id is not None and product.category_id != spec.category_id:
        return False
    if spec.is_featured is not None and product.is_featured != spec.is_featured:
        return False
    if spec.is_new is not None and product.is_new != spec.is_new:
        return False
    if spec.is_sale is not None and product.is_sale != spec.is_sale:
        return False
    if spec.min_price is not None and product.price < spec.min_price:
        return False
    if spec.max_price is not None and product.price > spec.max_price:
        return False
    term = _norm(spec.search).strip()
    if term and term not in _norm(product.name) and term not in _norm(product.description):
        return False
    return True


def sort_products(products: List[Product], sort_by: Optional[str], sort_order: str = "asc") -> List[Product]:
    """Return ``products`` sorted by ``sort_by``.

    Sorting is stable in both directions: products with equal keys keep
    their relative input order. Unknown sort keys leave the order
    untouched and unknown directions are treated as ascending.

    Parameters
    ----------
    products : List[Product]
        The filtered products.
    sort_by : Optional[str]
        One of 'price', 'name', 'rating' or 'createdAt'.
    sort_order : str
        'asc' or 'desc'.

    Returns
    -------
    List[Product]
        A new list; the input list is not modified.
    """
    key = SORT_KEYS.get(sort_by or "")
    if key is None:
        if sort_by:
            logger.debug("Ignoring unknown sort key %r", sort_by)
        return list(products)
    return sorted(products, key=key, reverse=(sort_order == "desc"))


def query_products(all_products: Sequence[Product], spec: ProductQuery) -> QueryResult:
    """Filter, count, sort and paginate a product snapshot.

    Parameters
    ----------
    all_products : Sequence[Product]
        The complete product collection at call time. It is read only.
    spec : ProductQuery
        Filters, sort and pagination window.

    Returns
    -------
    QueryResult
        ``items`` holds the products of the requested page (empty when
        the page lies past the last match) and ``total`` the number of
        products matching the filters before pagination.

    Raises
    ------
    InvalidQueryParameter
        When the pagination window or price bounds are invalid.
    """
    validate_query(spec)

    filtered = [p for p in all_products if matches(p, spec)]
    total = len(filtered)
    ordered = sort_products(filtered, spec.sort_by, spec.sort_order)

    start = (spec.page - 1) * spec.page_size
    end = start + spec.page_size
    return QueryResult(items=ordered[start:end], total=total)
