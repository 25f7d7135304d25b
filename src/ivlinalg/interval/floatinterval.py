import fractions
import math
import re
import sys
from typing import assert_never

from ivlinalg import function as vrf
from ivlinalg.interval import _floatoperator
from ivlinalg.interval.interval import (
    Converter,
    Interval,
    InvalidInterval,
    Operator,
    RoundingMode,
)


class FloatConverter(Converter[float]):
    __slots__ = ()

    def fromfloat(self, value):
        if math.isnan(value):
            raise InvalidInterval("NaN endpoint")

        return float(value)

    def fromstr(self, value, rounding) -> float:
        value = value.strip()

        if re.fullmatch("[-+]?inf(?:inity)?", value, re.I) is not None:
            return -math.inf if value[0] == "-" else math.inf

        try:
            frac = fractions.Fraction(value)
        except ValueError:
            raise ValueError(f"could not convert string to float: '{value}'")

        return self._round(frac, rounding)

    def fromint(self, value, rounding) -> float:
        if abs(value) <= 0x1FFFFFFFFFFFFF:
            return float(value)

        return self._round(fractions.Fraction(value), rounding)

    def tostr(self, value):
        return repr(float(value))

    def repr(self, value):
        if not math.isfinite(value):
            return repr(float(value))

        return f"<{float(value).hex()}>"

    @staticmethod
    def _round(frac: fractions.Fraction, rounding: RoundingMode) -> float:
        try:
            approx = float(frac)
        except OverflowError:
            approx = math.inf if frac > 0 else -math.inf

        if math.isinf(approx):
            if (approx > 0) == (rounding == RoundingMode.ROUND_CEILING):
                return approx

            return math.copysign(sys.float_info.max, approx)

        match rounding:
            case RoundingMode.ROUND_CEILING:
                if fractions.Fraction(approx) < frac:
                    return math.nextafter(approx, math.inf)

                return approx

            case RoundingMode.ROUND_FLOOR:
                if fractions.Fraction(approx) > frac:
                    return math.nextafter(approx, -math.inf)

                return approx

            case _ as unreachable:
                assert_never(unreachable)


class FloatOperator(Operator[float]):
    __slots__ = ()
    ZERO = 0.0
    ONE = 1.0
    INFINITY = math.inf

    def cadd(self, lhs, rhs):
        return _floatoperator.cadd(lhs, rhs)

    def cmul(self, lhs, rhs):
        return _floatoperator.cmul(lhs, rhs)

    def cdiv(self, lhs, rhs):
        return _floatoperator.cdiv(lhs, rhs)

    def csqr(self, value):
        return _floatoperator.csqr(value)

    def fsqr(self, value):
        return _floatoperator.fsqr(value)


class FloatInterval(Interval[float]):
    """Double-precision inf-sup type interval.

    Parameters
    ----------
    inf : float | int | str | None, optional
        Infimum of the interval.
    sup : float | int | str | None, optional
        Supremum of the interval.

    Attributes
    ----------
    inf : float
        Infimum of the interval.
    sup : float
        Supremum of the interval.
    converter : Converter
    endtype : type[float]
    operator : Operator

    Examples
    --------
    >>> from fractions import Fraction
    >>> Fraction(1, 10) in FloatInterval(0.1)
    False
    >>> Fraction(1, 10) in FloatInterval("0.1")
    True
    >>> x = FloatInterval(1, 2)
    >>> print(x - x)
    [-1.0, 1.0]
    """

    __slots__ = ()
    converter = FloatConverter()
    operator = FloatOperator()
    endtype = float

    def mid(self) -> float:
        ZERO = self.operator.ZERO
        INFINITY = self.operator.INFINITY

        if self.inf == -INFINITY:
            return ZERO if self.sup == INFINITY else self.sup

        if self.sup == INFINITY:
            return self.inf

        if abs(self.inf) >= 1 and abs(self.sup) >= 1:
            return self.inf / 2 + self.sup / 2

        return (self.inf + self.sup) / 2

    @classmethod
    def _e(cls):
        E_INF = float.fromhex("0x1.5bf0a8b145769p+1")
        E_SUP = float.fromhex("0x1.5bf0a8b14576ap+1")
        return cls(E_INF, E_SUP)

    @classmethod
    def _ln2(cls):
        LN2_INF = float.fromhex("0x1.62e42fefa39efp-1")
        LN2_SUP = float.fromhex("0x1.62e42fefa39f0p-1")
        return cls(LN2_INF, LN2_SUP)

    @classmethod
    def __exp_point(cls, x):
        # exp(x) = e**n * exp(h) with |h| <= 1/2, Taylor series of degree 15
        SQRTE_INV_RD = float.fromhex("0x1.368b2fc6f9609p-1")
        SQRTE_RU = float.fromhex("0x1.a61298e1e069cp+0")
        n = round(x)
        h = cls(x) - n
        series = cls()
        term = cls(1.0)

        for i in range(1, 16):
            series += term
            term *= h / i

        series += cls(SQRTE_INV_RD, SQRTE_RU) * term
        return cls._e() ** n * series

    @classmethod
    def __log_point(cls, x):
        # log(x) = log(u) - p * log(2) with u in [2/3, 4/3], atanh series
        TWO_THIRDS_RU = float.fromhex("0x1.5555555555556p-1")
        ERROR = float.fromhex("0x1.973774dfc4858p+3")
        p = 0

        while x < TWO_THIRDS_RU:
            x *= 2.0
            p += 1

        while x > 2 * TWO_THIRDS_RU:
            x /= 2.0
            p -= 1

        u = cls(x)
        y = (u - 1.0) / (u + 1.0)
        result = -p * cls._ln2() + 2.0 * y
        term = y

        for k in range(2, 14):
            term *= y**2
            result += 2.0 * term / (2.0 * k - 1.0)

        term *= y
        result += cls(-ERROR, ERROR) * term
        return result

    def _ivlinalg_overload_(self, fun, *args, **kwargs):
        if fun is vrf.exp:
            return self.__exp()

        if fun is vrf.log:
            return self.__log()

        if fun is vrf.pow:
            base, exponent = args

            if isinstance(exponent, int):
                return self.ensure(base) ** exponent

            return vrf.exp(vrf.log(self.ensure(base)) * exponent)

        return super()._ivlinalg_overload_(fun, *args, **kwargs)

    def __exp(self):
        inf = self.__exp_point(self.inf).inf if math.isfinite(self.inf) else 0.0
        sup = self.__exp_point(self.sup).sup if math.isfinite(self.sup) else math.inf
        return self.__class__(max(inf, 0.0), sup)

    def __log(self):
        if self.inf < 0.0:
            raise ValueError("math domain error")

        inf = self.__log_point(self.inf).inf if self.inf != 0.0 else -math.inf
        sup = self.__log_point(self.sup).sup if math.isfinite(self.sup) else math.inf
        return self.__class__(inf, sup)
