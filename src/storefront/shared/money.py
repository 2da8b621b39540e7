"""Helpers for monetary amounts.

Amounts are floats rounded to cents everywhere they are stored.
"""

import math


def to_amount(value) -> float:
    """Round a number to cents."""
    return round(float(value), 2)


def coerce_amount(value) -> float:
    """Best-effort conversion of a client-supplied charge to a float.

    Missing, non-numeric and non-finite values become 0.0. Negative numbers are
    kept so that callers can reject them.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    return to_amount(amount)
