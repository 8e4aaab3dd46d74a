from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from catalog.errors import Conflict, InvalidInput, NotFound
from catalog.services import coupon_service, discount_service
from catalog.utils.dates import utcnow


def _payload(**overrides):
    data = {
        "code": "WELCOME10",
        "type": "percent",
        "value": Decimal("10"),
        "one_shot": False,
        "max_uses": 0,
        "valid_from": datetime(2025, 1, 1),
        "valid_until": datetime(2025, 12, 31),
    }
    data.update(overrides)
    return data


def test_create_coupon_with_one_year_window(app):
    c = coupon_service.create_coupon(_payload())
    assert c.id is not None
    assert c.code == "WELCOME10"
    assert c.uses_count == 0


def test_create_coupon_rejects_window_over_five_years(app):
    with pytest.raises(InvalidInput):
        coupon_service.create_coupon(_payload(valid_until=datetime(2031, 1, 1)))


def test_create_coupon_rejects_inverted_window(app):
    with pytest.raises(InvalidInput):
        coupon_service.create_coupon(_payload(valid_until=datetime(2024, 12, 1)))


def test_create_coupon_uppercases_code(app):
    assert coupon_service.create_coupon(_payload(code="spring25")).code == "SPRING25"


@pytest.mark.parametrize("code", ["ADMIN", "system", "Test"])
def test_create_coupon_rejects_reserved_code(app, code):
    with pytest.raises(InvalidInput):
        coupon_service.create_coupon(_payload(code=code))


def test_create_coupon_rejects_percent_over_80(app):
    with pytest.raises(InvalidInput):
        coupon_service.create_coupon(_payload(value=Decimal("90")))


def test_duplicate_code_conflicts_even_when_deleted(app):
    c = coupon_service.create_coupon(_payload())
    coupon_service.delete_coupon(c.id)
    with pytest.raises(Conflict):
        coupon_service.create_coupon(_payload())


def test_get_and_get_by_code(make_coupon):
    c = make_coupon(code="FIND1234")
    assert coupon_service.get_coupon(c.id).code == "FIND1234"
    assert coupon_service.get_coupon_by_code("find1234").id == c.id
    with pytest.raises(NotFound):
        coupon_service.get_coupon(999)
    with pytest.raises(NotFound):
        coupon_service.get_coupon_by_code("MISSING1")


def test_list_coupons_excludes_deleted(make_coupon):
    keep = make_coupon(code="KEEP1234")
    gone = make_coupon(code="GONE1234")
    coupon_service.delete_coupon(gone.id)
    assert [c.id for c in coupon_service.list_coupons()] == [keep.id]


def test_update_rechecks_effective_window(app):
    c = coupon_service.create_coupon(_payload())
    # only valid_until changes; merged with the stored valid_from
    with pytest.raises(InvalidInput):
        coupon_service.update_coupon(c.id, {"valid_until": datetime(2030, 1, 2)})
    with pytest.raises(InvalidInput):
        coupon_service.update_coupon(c.id, {"valid_from": datetime(2026, 1, 1)})

    updated = coupon_service.update_coupon(c.id, {"valid_until": datetime(2029, 12, 31)})
    assert updated.valid_until == datetime(2029, 12, 31)


def test_update_rechecks_value_against_stored_type(app):
    c = coupon_service.create_coupon(_payload())
    with pytest.raises(InvalidInput):
        coupon_service.update_coupon(c.id, {"value": Decimal("150")})
    updated = coupon_service.update_coupon(c.id, {"type": "fixed", "value": Decimal("150")})
    assert updated.type == "fixed"
    assert updated.value == Decimal("150")


def test_code_is_immutable(app):
    c = coupon_service.create_coupon(_payload())
    with pytest.raises(InvalidInput):
        coupon_service.update_coupon(c.id, {"code": "OTHER123"})


def test_delete_blocked_by_active_application(make_product, make_coupon):
    p = make_product()
    c = make_coupon()
    discount_service.apply_coupon(p.id, "SAVE10")

    with pytest.raises(Conflict):
        coupon_service.delete_coupon(c.id)

    discount_service.remove_discount(p.id)
    coupon_service.delete_coupon(c.id)
    with pytest.raises(NotFound):
        coupon_service.get_coupon(c.id)


def test_restore_coupon(make_coupon):
    c = make_coupon()
    coupon_service.delete_coupon(c.id)
    restored = coupon_service.restore_coupon(c.id)
    assert restored.deleted_at is None
    assert coupon_service.get_coupon(c.id).id == c.id


def test_restore_unknown_coupon(app):
    with pytest.raises(NotFound):
        coupon_service.restore_coupon(12345)


def test_coupon_stats(make_product, make_coupon):
    a, b = make_product(name="Cafe Torrado"), make_product()
    c = make_coupon(max_uses=5)
    discount_service.apply_coupon(a.id, "SAVE10")
    discount_service.apply_coupon(b.id, "SAVE10")
    discount_service.remove_discount(b.id)

    stats = coupon_service.coupon_stats(c.id)

    assert stats["coupon"]["code"] == "SAVE10"
    assert stats["coupon"]["isValid"] is True
    assert stats["coupon"]["canBeUsed"] is True
    assert stats["stats"]["uses_count"] == 2
    assert stats["stats"]["remaining_uses"] == 3
    assert stats["stats"]["active_applications"] == 1
    assert stats["stats"]["total_applications"] == 2
    [active] = stats["stats"]["products_with_active_discount"]
    assert active["id"] == a.id
    assert active["name"] == "Cafe Torrado"
    assert active["original_price"] == 100.0


def test_coupon_stats_after_expiry(make_coupon):
    c = make_coupon()
    later = utcnow() + timedelta(days=60)
    stats = coupon_service.coupon_stats(c.id, now=later)
    assert stats["coupon"]["isValid"] is False
    assert stats["coupon"]["canBeUsed"] is False
    assert stats["stats"]["remaining_uses"] is None
