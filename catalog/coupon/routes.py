# catalog/coupon/routes.py
from flask import request

from ..schemas import CouponCreate, CouponUpdate
from ..services import coupon_service
from ..utils.api import ok
from . import bp

def _json_body() -> dict:
    return request.get_json(silent=True) or {}

@bp.post("")
def create_coupon():
    payload = CouponCreate.model_validate(_json_body())
    c = coupon_service.create_coupon(payload.model_dump())
    return ok("Coupon created", c.as_api(), status_code=201)

@bp.get("")
def list_coupons():
    return ok("Coupons fetched", [c.as_api() for c in coupon_service.list_coupons()])

@bp.get("/<int:cid>")
def get_coupon(cid):
    return ok("Coupon fetched", coupon_service.get_coupon(cid).as_api())

@bp.get("/code/<code>")
def get_coupon_by_code(code):
    return ok("Coupon fetched", coupon_service.get_coupon_by_code(code).as_api())

@bp.get("/<int:cid>/stats")
def coupon_stats(cid):
    return ok("Coupon stats", coupon_service.coupon_stats(cid))

@bp.patch("/<int:cid>")
def update_coupon(cid):
    payload = CouponUpdate.model_validate(_json_body())
    c = coupon_service.update_coupon(cid, payload.model_dump(exclude_unset=True))
    return ok("Coupon updated", c.as_api())

@bp.delete("/<int:cid>")
def delete_coupon(cid):
    coupon_service.delete_coupon(cid)
    return ok(f"Coupon {cid} deleted", {"id": cid})

@bp.post("/<int:cid>/restore")
def restore_coupon(cid):
    return ok("Coupon restored", coupon_service.restore_coupon(cid).as_api())
