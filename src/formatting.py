"""Number formatting for printed receipts and shipment notices.

Python's ``format`` rounds exact halves to even (``f"{2.5:.0f}" == "2"``).
Printed amounts and weights round halves up instead, so ``2.5`` prints as
``3`` and ``0.25`` kg as ``0.3``.  The value is converted through its
shortest ``repr`` so ``0.25`` is treated as the decimal it was written as.
"""

from decimal import ROUND_HALF_UP, Decimal


def format_number(value: float, places: int = 0) -> str:
    """Format ``value`` with ``places`` decimals, rounding halves up."""
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP)
    return f"{rounded:.{places}f}"
