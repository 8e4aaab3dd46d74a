# catalog/model/application.py
from ..extensions import db
from ..utils.dates import utcnow, iso

class ProductCouponApplication(db.Model):
    """Append-only link between a product and a coupon.

    Removal stamps ``removed_at``; rows are never deleted so the table doubles
    as the audit trail and the one-shot reuse record.
    """
    __tablename__ = "product_coupon_applications"
    __table_args__ = (
        # at most one active application per product
        db.Index(
            "uq_active_application_per_product",
            "product_id",
            unique=True,
            sqlite_where=db.text("removed_at IS NULL"),
            postgresql_where=db.text("removed_at IS NULL"),
        ),
        db.Index("ix_application_product_coupon", "product_id", "coupon_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    coupon_id = db.Column(db.Integer, db.ForeignKey("coupons.id"), nullable=False, index=True)
    applied_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    removed_at = db.Column(db.DateTime, nullable=True)

    product = db.relationship("Product", back_populates="applications")
    coupon = db.relationship("Coupon", back_populates="applications", lazy="joined")

    @property
    def is_active(self) -> bool:
        return self.removed_at is None

    def as_api(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "coupon_id": self.coupon_id,
            "applied_at": iso(self.applied_at),
            "removed_at": iso(self.removed_at),
        }
