# catalog/services/discount_service.py
"""
Discount application coordinator.

Attaching or detaching a discount is one transaction: the product row is
locked, the checks run in a fixed order (the first violated rule decides the
error), the application row is written and, for coupon codes, the usage
counter is bumped with a compare-and-swap so two concurrent requests can never
both consume the last use. Any failure rolls the whole unit back.
"""
import secrets
from functools import wraps

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, InvalidState
from ..extensions import db
from ..model import Coupon, Product, ProductCouponApplication
from ..utils.dates import utcnow, one_year_from
from ..utils.logger import get_logger
from ..utils.money import D
from . import validation
from .coupon_rules import can_be_used
from .pricing import calculate_final_price, validate_discount_price, validate_percentage_discount

log = get_logger("discounts")

SYSTEM_CODE_PREFIX = "SYS"
ACTIVE_APPLICATION_INDEX = "uq_active_application_per_product"


def _is_active_application_clash(exc: IntegrityError) -> bool:
    # postgres names the index; sqlite only names the column
    msg = str(exc.orig)
    return ACTIVE_APPLICATION_INDEX in msg or "product_coupon_applications.product_id" in msg


def _rollback_on_error(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except IntegrityError as e:
            db.session.rollback()
            if _is_active_application_clash(e):
                # someone else attached a discount first
                raise Conflict("Product already has an active discount")
            log.warning("integrity error in %s: %s", fn.__name__, e.orig)
            raise Conflict("Discount could not be applied because of a conflicting change")
        except Exception:
            db.session.rollback()
            raise
    return wrapper


def _reload(product_id) -> Product:
    return validation.validate_product_exists(product_id)


def _increment_usage(coupon: Coupon) -> None:
    result = db.session.execute(
        db.update(Coupon)
        .where(Coupon.id == coupon.id)
        .where(or_(Coupon.max_uses == 0, Coupon.uses_count < Coupon.max_uses))
        .values(uses_count=Coupon.uses_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        # lost the race for the last use
        raise InvalidState("Coupon is not valid or has expired")


def _attach(product: Product, coupon: Coupon, now) -> ProductCouponApplication:
    application = ProductCouponApplication(product_id=product.id, coupon_id=coupon.id, applied_at=now)
    db.session.add(application)
    db.session.flush()
    return application


def _system_code() -> str:
    code = f"{SYSTEM_CODE_PREFIX}{secrets.token_hex(8).upper()}"
    while Coupon.query.filter(Coupon.code == code).first():
        code = f"{SYSTEM_CODE_PREFIX}{secrets.token_hex(8).upper()}"
    return code


@_rollback_on_error
def apply_coupon(product_id, code: str, now=None) -> Product:
    now = now or utcnow()

    product = validation.validate_product_exists(product_id, lock=True)
    validation.validate_no_active_discount(product)

    coupon = validation.find_coupon_by_code(code, lock=True)
    if not can_be_used(coupon, now):
        raise InvalidState("Coupon is not valid or has expired")

    if coupon.one_shot:
        previous = ProductCouponApplication.query.filter_by(
            product_id=product.id, coupon_id=coupon.id
        ).first()
        if previous:
            raise Conflict("This coupon has already been used for this product")

    validate_discount_price(calculate_final_price(product.price, coupon.type, coupon.value))

    coupon_code = coupon.code
    _attach(product, coupon, now)
    _increment_usage(coupon)
    db.session.commit()

    log.info("coupon %s applied to product %s", coupon_code, product_id)
    return _reload(product_id)


@_rollback_on_error
def apply_percent_discount(product_id, percentage, now=None) -> Product:
    validate_percentage_discount(percentage)
    now = now or utcnow()

    product = validation.validate_product_exists(product_id, lock=True)
    validation.validate_no_active_discount(product)

    validate_discount_price(calculate_final_price(product.price, "percent", percentage))

    # single-purpose coupon; it is never reachable by code so usage stays at 0
    coupon = Coupon(
        code=_system_code(),
        type="percent",
        value=D(percentage),
        one_shot=False,
        max_uses=1,
        uses_count=0,
        valid_from=now,
        valid_until=one_year_from(now),
        is_system=True,
    )
    db.session.add(coupon)
    db.session.flush()

    coupon_code = coupon.code
    _attach(product, coupon, now)
    db.session.commit()

    log.info("%s%% discount applied to product %s (coupon %s)", percentage, product_id, coupon_code)
    return _reload(product_id)


@_rollback_on_error
def remove_discount(product_id, now=None) -> None:
    now = now or utcnow()

    product = validation.validate_product_exists(product_id, lock=True)
    application = validation.validate_active_discount_exists(product)
    application.removed_at = now
    db.session.commit()

    log.info("discount removed from product %s (coupon %s)", product_id, application.coupon_id)

