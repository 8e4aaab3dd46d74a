# catalog/model/product.py
from ..extensions import db
from ..services.pricing import final_price, discount_info
from ..utils.dates import utcnow, iso
from ..utils.money import to_float_money, format_price

class Product(db.Model):
    __tablename__ = "products"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    # trimmed, whitespace-collapsed, lowercased, diacritics stripped
    name_normalized = db.Column(db.String(100), nullable=False, unique=True, index=True)
    description = db.Column(db.String(300), nullable=True)

    price = db.Column(db.Numeric(10, 2), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    applications = db.relationship(
        "ProductCouponApplication",
        back_populates="product",
        order_by="ProductCouponApplication.id.asc()",
        lazy="select",
    )
    active_application = db.relationship(
        "ProductCouponApplication",
        primaryjoin="and_(Product.id == ProductCouponApplication.product_id, "
                    "ProductCouponApplication.removed_at.is_(None))",
        uselist=False,
        viewonly=True,
        lazy="selectin",
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0

    def as_api(self, currency_symbol="$"):
        application = self.active_application
        final = final_price(self.price, application)
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": to_float_money(self.price),
            "price_format": format_price(self.price, symbol=currency_symbol),
            "final_price": to_float_money(final),
            "final_price_format": format_price(final, symbol=currency_symbol),
            "stock": self.stock,
            "is_out_of_stock": self.is_out_of_stock,
            "has_coupon_applied": application is not None,
            "discount": discount_info(application),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "deleted_at": iso(self.deleted_at),
        }
