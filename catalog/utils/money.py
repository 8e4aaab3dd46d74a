# catalog/utils/money.py

from decimal import Decimal, ROUND_HALF_UP

Money = Decimal

CENT = Decimal("0.01")

def D(x) -> Money:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))

def round_money(x: Money) -> Money:
    return D(x).quantize(CENT, rounding=ROUND_HALF_UP)

def to_float_money(x) -> float:
    return float(round_money(x))

def format_price(value, symbol="$", decimals=2, use_thousands=True) -> str:
    n = round_money(value)
    num = f"{n:,.{decimals}f}" if use_thousands else f"{n:.{decimals}f}"
    return f"{symbol}{num}"
