from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from catalog.services.coupon_rules import can_be_used, is_valid, remaining_uses

NOW = datetime(2025, 6, 15, 12, 0, 0)


def coupon(**overrides):
    fields = dict(
        valid_from=NOW - timedelta(days=10),
        valid_until=NOW + timedelta(days=10),
        max_uses=0,
        uses_count=0,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_valid_inside_window():
    assert is_valid(coupon(), NOW)


def test_window_bounds_are_inclusive():
    c = coupon(valid_from=NOW, valid_until=NOW + timedelta(days=1))
    assert is_valid(c, NOW)
    assert is_valid(c, NOW + timedelta(days=1))


@pytest.mark.parametrize("now", [
    NOW - timedelta(days=11),
    NOW + timedelta(days=11),
])
def test_outside_window_is_never_usable(now):
    # usage counters do not matter outside the window
    for max_uses, uses_count in [(0, 0), (5, 0), (5, 4)]:
        c = coupon(max_uses=max_uses, uses_count=uses_count)
        assert not is_valid(c, now)
        assert not can_be_used(c, now)


def test_unlimited_coupon_is_usable_regardless_of_count():
    assert can_be_used(coupon(max_uses=0, uses_count=10_000), NOW)


def test_exhausted_coupon_is_not_usable():
    assert can_be_used(coupon(max_uses=3, uses_count=2), NOW)
    assert not can_be_used(coupon(max_uses=3, uses_count=3), NOW)


def test_remaining_uses():
    assert remaining_uses(coupon(max_uses=0)) is None
    assert remaining_uses(coupon(max_uses=5, uses_count=2)) == 3
