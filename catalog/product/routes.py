from flask import request, url_for, current_app

from ..schemas import ApplyCoupon, PercentDiscount, ProductCreate, ProductQuery, ProductUpdate
from ..services import discount_service, product_service
from ..utils.api import ok
from . import bp

# ---------- helpers ----------
def _ep(name: str) -> str:
    return f"{bp.name}.{name}"

def _json_body() -> dict:
    return request.get_json(silent=True) or {}

def _as_api(product):
    return product.as_api(currency_symbol=current_app.config.get("CURRENCY_SYMBOL", "$"))

# ---------- routes ----------
# GET /api/v1/products
@bp.get("")
def list_products():
    """
    Query params:
      search            -> substring match on name/description (case-insensitive)
      minPrice          -> price >= minPrice
      maxPrice          -> price <= maxPrice
      hasDiscount       -> true/false: active discount present/absent
      withCouponApplied -> true: active discount present
      onlyOutOfStock    -> true: stock == 0
      includeDeleted    -> true: include soft-deleted products
      sortBy            -> name, price, created_at, stock (default created_at)
      sortOrder         -> asc, desc (default desc)
      page              -> int, default 1
      limit             -> int, default 10 (1..50)
    """
    query = ProductQuery.model_validate(request.args.to_dict(flat=True))
    items, meta = product_service.list_products(query.filters(), query.sort(), query.paging())
    return ok("Products fetched", {"data": [_as_api(p) for p in items], "meta": meta})

# GET /api/v1/products/<id>
@bp.get("/<int:pid>")
def get_product(pid):
    return ok("Product fetched", _as_api(product_service.get_product(pid)))

# POST /api/v1/products
@bp.post("")
def create_product():
    payload = ProductCreate.model_validate(_json_body())
    product = product_service.create_product(payload.model_dump())
    resp = ok("Product created", _as_api(product), status_code=201)
    resp.headers["Location"] = url_for(_ep("get_product"), pid=product.id, _external=True)
    return resp

# PATCH /api/v1/products/<id>
@bp.patch("/<int:pid>")
def update_product(pid):
    payload = ProductUpdate.model_validate(_json_body())
    product = product_service.update_product(pid, payload.model_dump(exclude_unset=True))
    return ok("Product updated", _as_api(product))

# DELETE /api/v1/products/<id>
@bp.delete("/<int:pid>")
def delete_product(pid):
    product_service.delete_product(pid)
    return ok(f"Product {pid} deleted", {"id": pid})

# POST /api/v1/products/<id>/restore
@bp.post("/<int:pid>/restore")
def restore_product(pid):
    return ok("Product restored", _as_api(product_service.restore_product(pid)))

# POST /api/v1/products/<id>/discount/percent
@bp.post("/<int:pid>/discount/percent")
def apply_percent_discount(pid):
    payload = PercentDiscount.model_validate(_json_body())
    product = discount_service.apply_percent_discount(pid, payload.percentage)
    return ok("Discount applied", _as_api(product))

# POST /api/v1/products/<id>/discount/coupon
@bp.post("/<int:pid>/discount/coupon")
def apply_coupon(pid):
    payload = ApplyCoupon.model_validate(_json_body())
    product = discount_service.apply_coupon(pid, payload.code)
    return ok("Coupon applied", _as_api(product))

# DELETE /api/v1/products/<id>/discount
@bp.delete("/<int:pid>/discount")
def remove_discount(pid):
    discount_service.remove_discount(pid)
    return ok("Discount removed", {"id": pid})
