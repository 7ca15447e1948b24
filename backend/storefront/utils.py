import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

ORDER_NUMBER_PREFIX = "ORD-"


def generate_order_number(is_taken: Optional[Callable[[str], bool]] = None) -> str:
    """
    Build a human readable order number like ``ORD-1718000000123``.

    The numeric part is the current time in milliseconds. When ``is_taken``
    reports a collision the number is bumped until a free one is found.
    """
    stamp = int(time.time() * 1000)
    number = f"{ORDER_NUMBER_PREFIX}{stamp}"
    while is_taken is not None and is_taken(number):
        stamp += 1
        number = f"{ORDER_NUMBER_PREFIX}{stamp}"
    return number


def line_total(price: Decimal, quantity: int) -> Decimal:
    return (Decimal(price) * quantity).quantize(Decimal("0.01"))


def to_cents(amount) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

