# catalog/services/product_service.py
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict
from ..extensions import db
from ..model import Product
from ..utils.dates import utcnow
from ..utils.logger import get_logger
from .product_query import PageSpec, ProductFilters, SortSpec, run_product_query
from .validation import (
    collapse_whitespace,
    normalize_name,
    validate_product_exists,
    validate_unique_product_name,
)

log = get_logger("products")

UPDATABLE_FIELDS = ("description", "price", "stock")


def _commit_or_conflict(name):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Product name already exists", {"name": name})


def create_product(data: dict) -> Product:
    name = collapse_whitespace(data["name"])
    normalized = normalize_name(name)
    validate_unique_product_name(normalized)

    product = Product(
        name=name,
        name_normalized=normalized,
        description=data.get("description"),
        price=data["price"],
        stock=data.get("stock", 0),
    )
    db.session.add(product)
    _commit_or_conflict(normalized)

    log.info("product %s created (%s)", product.id, normalized)
    return product


def get_product(product_id) -> Product:
    return validate_product_exists(product_id)


def list_products(filters: ProductFilters, sort: SortSpec, page: PageSpec):
    return run_product_query(filters, sort, page)


def update_product(product_id, data: dict) -> Product:
    product = validate_product_exists(product_id)

    if data.get("name"):
        name = collapse_whitespace(data["name"])
        normalized = normalize_name(name)
        if normalized != product.name_normalized:
            validate_unique_product_name(normalized, exclude_id=product.id)
        product.name = name
        product.name_normalized = normalized

    for field in UPDATABLE_FIELDS:
        if field in data and data[field] is not None:
            setattr(product, field, data[field])

    _commit_or_conflict(product.name_normalized)
    return product


def delete_product(product_id, now=None) -> None:
    product = validate_product_exists(product_id)
    product.deleted_at = now or utcnow()
    db.session.commit()
    log.info("product %s soft-deleted", product_id)


def restore_product(product_id) -> Product:
    product = validate_product_exists(product_id, include_deleted=True)
    if product.deleted_at is not None:
        product.deleted_at = None
        db.session.commit()
        log.info("product %s restored", product_id)
    return product
