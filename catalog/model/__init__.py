# ------ catalog/model/__init__.py ------

from .product import Product
from .coupon import Coupon, COUPON_TYPES
from .application import ProductCouponApplication

__all__ = [
    "Product",
    "Coupon",
    "COUPON_TYPES",
    "ProductCouponApplication",
]
