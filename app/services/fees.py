"""Rental and late-return fee arithmetic.

Every amount is a ``Decimal`` rounded half-up to cents at the point it is
computed. Floats are converted through ``str`` so ``15.99`` stays ``15.99``.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from app.core.errors import InvalidRentalPeriod

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
LATE_FEE_RATE = Decimal("0.15")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def rental_fee(daily_rate, rental_days: int) -> Decimal:
    if rental_days is None or rental_days < 1:
        raise InvalidRentalPeriod(rental_days)
    return quantize(to_decimal(daily_rate) * rental_days)


def late_fee(daily_rate, days_late: int) -> Decimal:
    """15% of the daily rate for each day past the expected return date."""
    if days_late <= 0:
        return ZERO
    return quantize(to_decimal(daily_rate) * LATE_FEE_RATE * days_late)


def days_late(expected_return_date: date, actual_return_date: date) -> int:
    return max(0, (actual_return_date - expected_return_date).days)
