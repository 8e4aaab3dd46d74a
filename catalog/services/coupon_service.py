# catalog/services/coupon_service.py
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, InvalidInput
from ..extensions import db
from ..model import Coupon
from ..utils.dates import utcnow, iso
from ..utils.logger import get_logger
from ..utils.money import to_float_money
from .coupon_rules import can_be_used, is_valid, remaining_uses
from .validation import (
    count_active_applications,
    find_coupon_by_code,
    validate_coupon_code,
    validate_coupon_exists,
    validate_coupon_value,
    validate_coupon_window,
    validate_unique_coupon_code,
)

log = get_logger("coupons")

UPDATABLE_FIELDS = ("type", "value", "one_shot", "max_uses", "valid_from", "valid_until")


def create_coupon(data: dict) -> Coupon:
    code = (data.get("code") or "").strip().upper()
    if not code:
        raise InvalidInput("code is required")
    ctype = data.get("type")

    validate_coupon_code(code)
    validate_coupon_value(ctype, data.get("value"))

    valid_from, valid_until = data.get("valid_from"), data.get("valid_until")
    if valid_from is None or valid_until is None:
        raise InvalidInput("valid_from and valid_until are required")
    validate_coupon_window(valid_from, valid_until)

    # soft-deleted coupons keep their code
    validate_unique_coupon_code(code)

    c = Coupon(
        code=code,
        type=ctype,
        value=data["value"],
        one_shot=bool(data.get("one_shot", False)),
        max_uses=data.get("max_uses") or 0,
        uses_count=0,
        valid_from=valid_from,
        valid_until=valid_until,
    )
    db.session.add(c)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Coupon code already exists", {"code": code})

    log.info("coupon %s created (%s %s)", c.code, c.type, c.value)
    return c


def list_coupons():
    return (
        Coupon.query
        .filter(Coupon.deleted_at.is_(None), Coupon.is_system.is_(False))
        .order_by(Coupon.created_at.desc(), Coupon.id.desc())
        .all()
    )


def get_coupon(coupon_id) -> Coupon:
    return validate_coupon_exists(coupon_id)


def get_coupon_by_code(code: str) -> Coupon:
    return find_coupon_by_code(code)


def update_coupon(coupon_id, data: dict) -> Coupon:
    """Partial update; the code never changes after creation."""
    coupon = validate_coupon_exists(coupon_id)
    if "code" in data:
        raise InvalidInput("Coupon code cannot be changed")

    if data.get("valid_from") or data.get("valid_until"):
        validate_coupon_window(
            data.get("valid_from") or coupon.valid_from,
            data.get("valid_until") or coupon.valid_until,
        )

    if data.get("type") is not None or data.get("value") is not None:
        validate_coupon_value(
            data.get("type") or coupon.type,
            data["value"] if data.get("value") is not None else coupon.value,
        )

    for field in UPDATABLE_FIELDS:
        if field in data and data[field] is not None:
            setattr(coupon, field, data[field])

    db.session.commit()
    return coupon


def delete_coupon(coupon_id, now=None) -> None:
    coupon = validate_coupon_exists(coupon_id)
    if count_active_applications(coupon):
        raise Conflict("Cannot delete coupon that is currently applied to products")
    coupon.deleted_at = now or utcnow()
    db.session.commit()
    log.info("coupon %s soft-deleted", coupon.code)


def restore_coupon(coupon_id) -> Coupon:
    coupon = validate_coupon_exists(coupon_id, include_deleted=True)
    if coupon.deleted_at is not None:
        coupon.deleted_at = None
        db.session.commit()
        log.info("coupon %s restored", coupon.code)
    return coupon


def coupon_stats(coupon_id, now=None) -> dict:
    now = now or utcnow()
    coupon = validate_coupon_exists(coupon_id)
    applications = coupon.applications
    active = [a for a in applications if a.removed_at is None]

    return {
        "coupon": {
            "id": coupon.id,
            "code": coupon.code,
            "type": coupon.type,
            "value": to_float_money(coupon.value),
            "isValid": is_valid(coupon, now),
            "canBeUsed": can_be_used(coupon, now),
        },
        "stats": {
            "uses_count": coupon.uses_count,
            "max_uses": coupon.max_uses,
            "remaining_uses": remaining_uses(coupon),
            "active_applications": len(active),
            "total_applications": len(applications),
            "products_with_active_discount": [
                {
                    "id": a.product.id,
                    "name": a.product.name,
                    "original_price": to_float_money(a.product.price),
                    "applied_at": iso(a.applied_at),
                }
                for a in active
            ],
        },
    }
