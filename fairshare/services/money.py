"""Money / rounding helpers.

Centralized so the settlement engine, the data layer and API responses use
identical rounding semantics: amounts are scaled to cents and rounded half
toward positive infinity, then scaled back. Python's built-in ``round`` is not
used because it rounds ties to even.
"""

from __future__ import annotations
import math


def round_money(value: float) -> float:
    """Round a monetary value to 2 decimal places.

    Non-finite input (NaN, +/-inf) returns 0.0 so a single corrupt value
    cannot poison a whole settlement. Values too large to scale to cents
    have no fractional cents left and are returned unchanged.

    >>> round_money(1.235)
    1.24
    >>> round_money(-1.235)
    -1.24
    >>> round_money(float("nan"))
    0.0
    >>> round_money(1e307)
    1e+307
    """
    if not math.isfinite(value):
        return 0.0
    cents = value * 100
    if not math.isfinite(cents):
        return value
    whole = math.floor(cents)
    if cents - whole >= 0.5:
        whole += 1
    return whole / 100
