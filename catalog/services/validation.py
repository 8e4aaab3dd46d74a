# catalog/services/validation.py
import re
import unicodedata

from ..errors import Conflict, InvalidInput, NotFound
from ..extensions import db
from ..model import Coupon, Product, ProductCouponApplication
from ..utils.dates import add_years
from ..utils.money import D

RESERVED_COUPON_CODES = {"ADMIN", "AUTH", "NULL", "UNDEFINED", "TEST", "SYSTEM"}
MAX_WINDOW_YEARS = 5

PERCENT_RANGE = (D(1), D(80))
FIXED_RANGE = (D("0.01"), D(1_000_000))

_WS = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WS.sub(" ", (text or "").strip())


def normalize_name(name: str) -> str:
    """'  Açúcar   Cristal  ' -> 'acucar cristal'"""
    text = collapse_whitespace(name).lower()
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


# ---------- products ----------

def validate_unique_product_name(normalized_name: str, exclude_id=None) -> None:
    # soft-deleted rows still own their name
    existing = Product.query.filter(Product.name_normalized == normalized_name).first()
    if existing and existing.id != exclude_id:
        raise Conflict("Product name already exists", {"name": normalized_name})


def validate_product_exists(product_id, include_deleted=False, lock=False) -> Product:
    query = Product.query.filter(Product.id == product_id)
    if not include_deleted:
        query = query.filter(Product.deleted_at.is_(None))
    if lock:
        query = query.with_for_update()
    product = query.first()
    if not product:
        raise NotFound("Product not found")
    return product


def find_active_application(product_id):
    return ProductCouponApplication.query.filter(
        ProductCouponApplication.product_id == product_id,
        ProductCouponApplication.removed_at.is_(None),
    ).first()


def validate_no_active_discount(product: Product) -> None:
    if find_active_application(product.id) is not None:
        raise Conflict("Product already has an active discount")


def validate_active_discount_exists(product: Product) -> ProductCouponApplication:
    application = find_active_application(product.id)
    if application is None:
        raise NotFound("No active discount found for this product")
    return application


# ---------- coupons ----------

def validate_coupon_exists(coupon_id, include_deleted=False) -> Coupon:
    query = Coupon.query.filter(Coupon.id == coupon_id)
    if not include_deleted:
        query = query.filter(Coupon.deleted_at.is_(None))
    coupon = query.first()
    if not coupon:
        raise NotFound("Coupon not found")
    return coupon


def find_coupon_by_code(code: str, lock=False) -> Coupon:
    """Public coupons only: soft-deleted and system coupons are not addressable by code."""
    query = Coupon.query.filter(
        Coupon.code == (code or "").strip().upper(),
        Coupon.deleted_at.is_(None),
        Coupon.is_system.is_(False),
    )
    if lock:
        query = query.with_for_update()
    coupon = query.first()
    if not coupon:
        raise NotFound("Coupon not found")
    return coupon


def validate_coupon_code(code: str) -> None:
    if (code or "").upper() in RESERVED_COUPON_CODES:
        raise InvalidInput("This coupon code is reserved and cannot be used")


def validate_unique_coupon_code(code: str) -> None:
    if Coupon.query.filter(Coupon.code == code.upper()).first():
        raise Conflict("Coupon code already exists", {"code": code.upper()})


def validate_coupon_value(coupon_type: str, value) -> None:
    low, high = PERCENT_RANGE if coupon_type == "percent" else FIXED_RANGE
    if value is None or not low <= D(value) <= high:
        if coupon_type == "percent":
            raise InvalidInput("Percentage value must be between 1 and 80")
        raise InvalidInput("Fixed value must be between 0.01 and 1,000,000")


def validate_coupon_window(valid_from, valid_until) -> None:
    if valid_until <= valid_from:
        raise InvalidInput("valid_until must be after valid_from")
    if valid_until > add_years(valid_from, MAX_WINDOW_YEARS):
        raise InvalidInput("Coupon validity cannot exceed 5 years from valid_from date")


def count_active_applications(coupon: Coupon) -> int:
    return db.session.query(db.func.count(ProductCouponApplication.id)).filter(
        ProductCouponApplication.coupon_id == coupon.id,
        ProductCouponApplication.removed_at.is_(None),
    ).scalar()
