from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from catalog.errors import InvalidInput, UnprocessableEntity
from catalog.services.pricing import (
    calculate_final_price,
    discount_info,
    final_price,
    validate_discount_price,
    validate_percentage_discount,
)


def test_percent_discount():
    assert calculate_final_price(100, "percent", 10) == 90


def test_fixed_discount():
    assert calculate_final_price(100, "fixed", 20) == 80


def test_fixed_discount_is_floored():
    assert calculate_final_price(5, "fixed", 10) == Decimal("0.01")
    assert calculate_final_price(10, "fixed", 10) == Decimal("0.01")


def test_decimal_arithmetic_has_no_float_drift():
    assert calculate_final_price(Decimal("19.99"), "percent", 15) == Decimal("16.9915")


def test_validate_discount_price():
    validate_discount_price(Decimal("0.01"))
    with pytest.raises(UnprocessableEntity):
        validate_discount_price(Decimal("0.009"))


@pytest.mark.parametrize("pct", [1, 45, 80, Decimal("79.99")])
def test_percentage_in_range(pct):
    validate_percentage_discount(pct)


@pytest.mark.parametrize("pct", [0, Decimal("0.99"), Decimal("80.01"), 100, -5, None])
def test_percentage_out_of_range(pct):
    with pytest.raises(InvalidInput):
        validate_percentage_discount(pct)


def test_final_price_without_application():
    assert final_price(Decimal("12.50"), None) == Decimal("12.50")
    assert discount_info(None) is None


def test_final_price_and_discount_info_with_application():
    applied = datetime(2025, 1, 2, 3, 4, 5)
    application = SimpleNamespace(
        coupon=SimpleNamespace(type="percent", value=Decimal("33")),
        applied_at=applied,
    )
    assert final_price(Decimal("10.00"), application) == Decimal("6.70")
    assert discount_info(application) == {
        "type": "percent",
        "value": 33.0,
        "applied_at": applied.isoformat(),
    }
