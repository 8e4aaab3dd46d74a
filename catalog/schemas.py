# catalog/schemas.py
"""Structural validation of request bodies and query strings."""
import re
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .services.product_query import (
    DEFAULT_LIMIT,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    MAX_LIMIT,
    PageSpec,
    ProductFilters,
    SortSpec,
)
from .utils.dates import parse_iso8601

PRODUCT_NAME_RE = re.compile(r"^[\w\s\-,.]+$")
COUPON_CODE_RE = re.compile(r"^[A-Z0-9]+$")

CouponType = Literal["percent", "fixed"]


def _parse_price(v):
    # "1.234,56" -> "1234.56"
    if isinstance(v, str) and "," in v:
        return v.replace(".", "").replace(",", ".")
    return v


def _parse_datetime(v):
    if v is None:
        return None
    dt = parse_iso8601(v)
    if dt is None:
        raise ValueError("must be an ISO-8601 date string")
    return dt


def _upper_code(v):
    return v.strip().upper() if isinstance(v, str) else v


# ---------- products ----------

class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=300)
    price: Decimal = Field(gt=0, le=1_000_000, decimal_places=2)
    stock: int = Field(default=0, ge=0, le=999_999)

    @field_validator("name")
    @classmethod
    def _name_charset(cls, v):
        if v is None:
            return v
        v = re.sub(r"\s+", " ", v)
        if not PRODUCT_NAME_RE.match(v):
            raise ValueError("name must contain only letters, numbers, spaces, hyphens, underscores, commas and dots")
        return v

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v):
        return _parse_price(v)


class ProductUpdate(ProductCreate):
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    price: Optional[Decimal] = Field(default=None, gt=0, le=1_000_000, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0, le=999_999)


class ProductQuery(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    search: Optional[str] = None
    min_price: Optional[Decimal] = Field(default=None, ge=0, alias="minPrice")
    max_price: Optional[Decimal] = Field(default=None, ge=0, alias="maxPrice")
    has_discount: Optional[bool] = Field(default=None, alias="hasDiscount")
    sort_by: Literal["name", "price", "created_at", "stock"] = Field(default=DEFAULT_SORT_BY, alias="sortBy")
    sort_order: Literal["asc", "desc"] = Field(default=DEFAULT_SORT_ORDER, alias="sortOrder")
    include_deleted: bool = Field(default=False, alias="includeDeleted")
    only_out_of_stock: bool = Field(default=False, alias="onlyOutOfStock")
    with_coupon_applied: bool = Field(default=False, alias="withCouponApplied")

    @field_validator("search")
    @classmethod
    def _blank_search(cls, v):
        return v or None

    def filters(self) -> ProductFilters:
        return ProductFilters(
            search=self.search,
            min_price=self.min_price,
            max_price=self.max_price,
            only_out_of_stock=self.only_out_of_stock,
            has_discount=self.has_discount,
            with_coupon_applied=self.with_coupon_applied,
            include_deleted=self.include_deleted,
        )

    def sort(self) -> SortSpec:
        return SortSpec(sort_by=self.sort_by, sort_order=self.sort_order)

    def paging(self) -> PageSpec:
        return PageSpec(page=self.page, limit=self.limit)


class PercentDiscount(BaseModel):
    model_config = ConfigDict(extra="forbid")

    percentage: Decimal = Field(ge=1, le=80, decimal_places=2)


class ApplyCoupon(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str = Field(min_length=1, max_length=20, validation_alias=AliasChoices("code", "couponCode"))

    @field_validator("code", mode="before")
    @classmethod
    def _upper(cls, v):
        return _upper_code(v)

    @field_validator("code")
    @classmethod
    def _alnum(cls, v):
        if not COUPON_CODE_RE.match(v):
            raise ValueError("coupon code must contain only uppercase letters and numbers")
        return v


# ---------- coupons ----------

def _check_value_for_type(ctype, value):
    if ctype is None or value is None:
        return
    if ctype == "percent" and not Decimal(1) <= value <= Decimal(80):
        raise ValueError("percentage value must be between 1 and 80")
    if ctype == "fixed" and value > Decimal(1_000_000):
        raise ValueError("fixed value cannot exceed 1,000,000")


class CouponUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Optional[CouponType] = None
    value: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), decimal_places=2)
    one_shot: Optional[bool] = None
    max_uses: Optional[int] = Field(default=None, ge=0, le=999_999)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None

    @field_validator("valid_from", "valid_until", mode="before")
    @classmethod
    def _dates(cls, v):
        return _parse_datetime(v)

    @model_validator(mode="after")
    def _value_bounds(self):
        _check_value_for_type(self.type, self.value)
        return self


class CouponCreate(CouponUpdate):
    code: str = Field(min_length=4, max_length=20)
    type: CouponType
    value: Decimal = Field(ge=Decimal("0.01"), decimal_places=2)
    one_shot: bool = False
    max_uses: int = Field(default=0, ge=0, le=999_999)
    valid_from: datetime
    valid_until: datetime

    @field_validator("code", mode="before")
    @classmethod
    def _upper(cls, v):
        return _upper_code(v)

    @field_validator("code")
    @classmethod
    def _alnum(cls, v):
        if not COUPON_CODE_RE.match(v):
            raise ValueError("code must contain only uppercase letters and numbers")
        return v
