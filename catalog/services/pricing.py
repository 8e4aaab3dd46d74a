# catalog/services/pricing.py
from ..errors import InvalidInput, UnprocessableEntity
from ..utils.money import D, Money, round_money

MIN_PRICE = D("0.01")
MIN_PERCENT = D(1)
MAX_PERCENT = D(80)


def calculate_final_price(price, coupon_type: str, value) -> Money:
    """Post-discount price; a fixed discount never goes below MIN_PRICE."""
    price, value = D(price), D(value)
    if coupon_type == "percent":
        return price * (1 - value / 100)
    return max(MIN_PRICE, price - value)


def validate_discount_price(final_price) -> None:
    if D(final_price) < MIN_PRICE:
        raise UnprocessableEntity("Discount would make product price below minimum (0.01)")


def validate_percentage_discount(percentage) -> None:
    if percentage is None or not MIN_PERCENT <= D(percentage) <= MAX_PERCENT:
        raise InvalidInput("Percentage discount must be between 1% and 80%")


def final_price(price, application) -> Money:
    """Current selling price given the product's active application (or None)."""
    if application is None:
        return round_money(price)
    coupon = application.coupon
    return round_money(calculate_final_price(price, coupon.type, coupon.value))


def discount_info(application):
    if application is None:
        return None
    coupon = application.coupon
    return {
        "type": coupon.type,
        "value": float(round_money(coupon.value)),
        "applied_at": application.applied_at.isoformat() if application.applied_at else None,
    }
