# --- catalog/model/coupon.py ---

from ..extensions import db
from ..services.coupon_rules import is_valid, can_be_used, remaining_uses
from ..utils.dates import utcnow, iso
from ..utils.money import to_float_money

COUPON_TYPES = ("percent", "fixed")

class Coupon(db.Model):
    __tablename__ = "coupons"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False, index=True)

    # "percent" or "fixed"
    type = db.Column(db.String(10), nullable=False)
    value = db.Column(db.Numeric(10, 2), nullable=False)

    one_shot = db.Column(db.Boolean, nullable=False, default=False)
    max_uses = db.Column(db.Integer, nullable=False, default=0)     # 0 = unlimited
    uses_count = db.Column(db.Integer, nullable=False, default=0)
    valid_from = db.Column(db.DateTime, nullable=False)
    valid_until = db.Column(db.DateTime, nullable=False)

    # synthesized by the direct percent-discount path; never addressable by code
    is_system = db.Column(db.Boolean, nullable=False, default=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    applications = db.relationship(
        "ProductCouponApplication",
        back_populates="coupon",
        order_by="ProductCouponApplication.id.asc()",
        lazy="select",
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def as_api(self, now=None):
        now = now or utcnow()
        return {
            "id": self.id,
            "code": self.code,
            "type": self.type,
            "value": to_float_money(self.value),
            "one_shot": self.one_shot,
            "max_uses": self.max_uses,
            "uses_count": self.uses_count,
            "remaining_uses": remaining_uses(self),
            "valid_from": iso(self.valid_from),
            "valid_until": iso(self.valid_until),
            "is_valid": is_valid(self, now),
            "can_be_used": can_be_used(self, now),
            "is_system": self.is_system,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "deleted_at": iso(self.deleted_at),
        }
