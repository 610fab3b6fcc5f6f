# storefront/utils/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Quantize to two decimal places, half-up. Floats go through str to avoid binary drift."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    # rounded per line, before summation
    return to_money(Decimal(str(unit_price)) * quantity)


def sum_lines(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    return sum((line_total(price, qty) for price, qty in lines), ZERO)
