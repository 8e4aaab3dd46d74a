# catalog/services/coupon_rules.py
"""Coupon validity model.

Pure functions over a coupon's window and usage counters; callers pass
``now`` explicitly so results are deterministic.
"""
from datetime import datetime


def is_valid(coupon, now: datetime) -> bool:
    return coupon.valid_from <= now <= coupon.valid_until


def has_uses_left(coupon) -> bool:
    return not coupon.max_uses or coupon.uses_count < coupon.max_uses


def can_be_used(coupon, now: datetime) -> bool:
    return is_valid(coupon, now) and has_uses_left(coupon)


def remaining_uses(coupon):
    if not coupon.max_uses:
        return None
    return max(0, coupon.max_uses - coupon.uses_count)
