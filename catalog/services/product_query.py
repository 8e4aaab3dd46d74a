# catalog/services/product_query.py
"""
Catalog query pipeline.

A query is described by three plain values (ProductFilters, SortSpec,
PageSpec). Each filter field maps to one independent predicate; the
predicates are AND-composed, so their order never matters.
"""
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import asc, desc, exists, or_

from ..model import Product, ProductCouponApplication

SORTABLE_FIELDS = {
    # case- and accent-insensitive
    "name": Product.name_normalized,
    "price": Product.price,
    "created_at": Product.created_at,
    "stock": Product.stock,
}
SORT_ORDERS = {"asc": asc, "desc": desc}

DEFAULT_SORT_BY = "created_at"
DEFAULT_SORT_ORDER = "desc"
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


@dataclass(frozen=True)
class ProductFilters:
    search: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    only_out_of_stock: bool = False
    has_discount: Optional[bool] = None
    with_coupon_applied: bool = False
    include_deleted: bool = False


@dataclass(frozen=True)
class SortSpec:
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER


@dataclass(frozen=True)
class PageSpec:
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _has_active_application():
    return exists().where(
        ProductCouponApplication.product_id == Product.id,
        ProductCouponApplication.removed_at.is_(None),
    )


def _search_predicate(term):
    like = f"%{term}%"
    return or_(
        Product.name.ilike(like),
        Product.name_normalized.ilike(like),
        Product.description.ilike(like),
    )


def filter_predicates(filters: ProductFilters) -> list:
    predicates = []

    if not filters.include_deleted:
        predicates.append(Product.deleted_at.is_(None))

    if filters.search:
        predicates.append(_search_predicate(filters.search))

    if filters.min_price is not None:
        predicates.append(Product.price >= filters.min_price)
    if filters.max_price is not None:
        predicates.append(Product.price <= filters.max_price)

    if filters.only_out_of_stock:
        predicates.append(Product.stock == 0)

    if filters.with_coupon_applied:
        predicates.append(_has_active_application())

    if filters.has_discount is True:
        predicates.append(_has_active_application())
    elif filters.has_discount is False:
        predicates.append(~_has_active_application())

    return predicates


def sort_clause(sort: SortSpec):
    column = SORTABLE_FIELDS.get(sort.sort_by, SORTABLE_FIELDS[DEFAULT_SORT_BY])
    direction = SORT_ORDERS.get((sort.sort_order or "").lower(), SORT_ORDERS[DEFAULT_SORT_ORDER])
    # no secondary key: order among equal values is left to the database
    return direction(column)


def page_meta(page: PageSpec, total: int) -> dict:
    return {
        "page": page.page,
        "limit": page.limit,
        "totalItems": total,
        "totalPages": math.ceil(total / page.limit) if page.limit else 0,
    }


def build_product_query(filters: ProductFilters, sort: SortSpec):
    return Product.query.filter(*filter_predicates(filters)).order_by(sort_clause(sort))


def run_product_query(filters: ProductFilters, sort: SortSpec, page: PageSpec):
    """Returns (products, meta)."""
    query = build_product_query(filters, sort)
    # paginate() offsets by (page - 1) * per_page, i.e. page.skip
    pagination = query.paginate(
        page=page.page, per_page=page.limit, max_per_page=MAX_LIMIT, error_out=False
    )
    return pagination.items, page_meta(page, pagination.total or 0)
