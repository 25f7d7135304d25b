"""Binary64 arithmetic rounded towards positive infinity.

The FPU rounding mode is never changed. Each operation is evaluated in
round-to-nearest and corrected by at most one ulp, using an error-free
transformation when it is exact and rational arithmetic otherwise.
"""

import math
import sys
from fractions import Fraction

_MAX = sys.float_info.max
_SPLITTER = 134217729.0  # 2**27 + 1
_SPLIT_LIMIT = 2.0**995
_PRODUCT_MIN = 2.0**-960


def twosum(a: float, b: float) -> tuple[float, float]:
    """Return ``(s, e)`` such that ``s == fl(a + b)`` and ``a + b == s + e``."""
    s = a + b
    bb = s - a
    return s, (a - (s - bb)) + (b - bb)


def twoproduct(a: float, b: float) -> tuple[float, float]:
    """Return ``(p, e)`` such that ``p == fl(a * b)`` and ``a * b == p + e``.

    Exact if neither operand exceeds ``2**995`` and ``|p| >= 2**-960``.
    """
    p = a * b
    ahi, alo = _split(a)
    bhi, blo = _split(b)
    return p, alo * blo - (((p - ahi * bhi) - alo * bhi) - ahi * blo)


def _split(a):
    c = _SPLITTER * a
    hi = c - (c - a)
    return hi, a - hi


def _ceil(approx: float, exact: Fraction) -> float:
    # approx is the nearest float to exact, so one step suffices
    if Fraction(approx) < exact:
        return math.nextafter(approx, math.inf)

    return approx


def _overflow(value: float) -> float:
    return value if value > 0.0 else -_MAX


def cadd(lhs: float, rhs: float) -> float:
    s = lhs + rhs

    if not math.isfinite(s):
        if math.isnan(s) or math.isinf(lhs) or math.isinf(rhs):
            return s

        return _overflow(s)

    _, err = twosum(lhs, rhs)
    return math.nextafter(s, math.inf) if err > 0.0 else s


def cmul(lhs: float, rhs: float) -> float:
    if lhs == 0.0 or rhs == 0.0:
        return 0.0

    p = lhs * rhs

    if not math.isfinite(p):
        if math.isnan(p) or math.isinf(lhs) or math.isinf(rhs):
            return p

        return _overflow(p)

    if abs(lhs) < _SPLIT_LIMIT and abs(rhs) < _SPLIT_LIMIT and abs(p) >= _PRODUCT_MIN:
        _, err = twoproduct(lhs, rhs)
        return math.nextafter(p, math.inf) if err > 0.0 else p

    return _ceil(p, Fraction(lhs) * Fraction(rhs))


def cdiv(lhs: float, rhs: float) -> float:
    if rhs == 0.0:
        raise ZeroDivisionError

    q = lhs / rhs

    if not math.isfinite(q):
        if math.isnan(q) or math.isinf(lhs):
            return q

        return _overflow(q)

    if lhs == 0.0 or math.isinf(rhs):
        return q

    return _ceil(q, Fraction(lhs) / Fraction(rhs))


def csqr(value: float) -> float:
    r = math.sqrt(value)

    if r == 0.0 or math.isinf(r):
        return r

    return math.nextafter(r, math.inf) if Fraction(r) ** 2 < Fraction(value) else r


def fsqr(value: float) -> float:
    r = math.sqrt(value)

    if r == 0.0 or math.isinf(r):
        return r

    return math.nextafter(r, -math.inf) if Fraction(r) ** 2 > Fraction(value) else r
