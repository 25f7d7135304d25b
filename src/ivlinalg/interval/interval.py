import enum
import fractions
from abc import ABC, abstractmethod
from typing import Final, Protocol, Self, SupportsAbs

from ivlinalg import function as vrf


class InvalidInterval(ValueError):
    """Raised when the infimum of an interval exceeds its supremum."""


class DivisionByZeroInterval(ZeroDivisionError):
    """Raised when an interval is divided by an interval containing zero."""


class RoundingMode(enum.Enum):
    """Direction in which an inexact endpoint is rounded.

    Attributes
    ----------
    ROUND_CEILING
    ROUND_FLOOR
    """

    ROUND_CEILING = enum.auto()
    ROUND_FLOOR = enum.auto()

    def __repr__(self):
        return f"<{self.__class__.__name__}.{self.name}>"


ROUND_CEILING: Final = RoundingMode.ROUND_CEILING
ROUND_FLOOR: Final = RoundingMode.ROUND_FLOOR


class Endpoint(SupportsAbs, Protocol):
    """Totally ordered number that can be negated, like a float."""

    __slots__ = ()

    @abstractmethod
    def __lt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __le__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __neg__(self) -> Self: ...


class Converter[T: Endpoint](ABC):
    """Turns Python numbers and decimal strings into endpoints and back."""

    __slots__ = ()

    @abstractmethod
    def fromfloat(self, value: float) -> T:
        """Return `value` as an endpoint; the conversion must be exact.

        Raises
        ------
        InvalidInterval
            If `value` is NaN.
        """
        raise NotImplementedError

    @abstractmethod
    def fromstr(self, value: str, rounding: RoundingMode) -> T:
        """Return the endpoint nearest to the decimal `value` in direction `rounding`.

        Raises
        ------
        ValueError
            If `value` does not represent a number.
        """
        raise NotImplementedError

    def fromint(self, value: int, rounding: RoundingMode) -> T:
        """Return the endpoint nearest to `value` in direction `rounding`."""
        return self.fromstr(str(value), rounding)

    def tostr(self, value: T) -> str:
        """Return a string that reads back to exactly `value`."""
        raise NotImplementedError

    def repr(self, value: T) -> str:
        raise NotImplementedError


class Operator[T: Endpoint](ABC):
    """Endpoint arithmetic rounded in a prescribed direction.

    Methods prefixed with ``c`` round towards positive infinity and those prefixed
    with ``f`` towards negative infinity. Subclasses implement the ``c`` variants,
    the ``f`` variants follow by symmetry.

    Notes
    -----
    Subclasses must define the class constants `ZERO`, `ONE`, and `INFINITY`.
    """

    __slots__ = ()
    ZERO: T
    ONE: T
    INFINITY: T

    @abstractmethod
    def cadd(self, lhs: T, rhs: T) -> T:
        raise NotImplementedError

    @abstractmethod
    def cmul(self, lhs: T, rhs: T) -> T:
        raise NotImplementedError

    @abstractmethod
    def cdiv(self, lhs: T, rhs: T) -> T:
        raise NotImplementedError

    @abstractmethod
    def csqr(self, value: T) -> T:
        raise NotImplementedError

    @abstractmethod
    def fsqr(self, value: T) -> T:
        raise NotImplementedError

    def fadd(self, lhs: T, rhs: T) -> T:
        return -self.cadd(-lhs, -rhs)

    def csub(self, lhs: T, rhs: T) -> T:
        return self.cadd(lhs, -rhs)

    def fsub(self, lhs: T, rhs: T) -> T:
        return -self.cadd(-lhs, rhs)

    def fmul(self, lhs: T, rhs: T) -> T:
        return -self.cmul(-lhs, rhs)

    def fdiv(self, lhs: T, rhs: T) -> T:
        return -self.cdiv(-lhs, rhs)

    def cpow(self, value: T, n: int) -> T:
        """Raise a nonnegative `value` to the power `n` rounding upwards."""
        return self._pow(value, n, self.cmul)

    def fpow(self, value: T, n: int) -> T:
        """Raise a nonnegative `value` to the power `n` rounding downwards."""
        return self._pow(value, n, self.fmul)

    def _pow(self, value, n, mul):
        # all partial products are nonnegative, so rounding errors do not flip
        result = self.ONE

        while n > 0:
            if n % 2 == 1:
                result = mul(result, value)

            n //= 2

            if n > 0:
                value = mul(value, value)

        return result


class Interval[T: Endpoint](ABC):
    """Abstract base class for closed intervals ``[inf, sup]``.

    Arithmetic is outward rounded: the result of every operation contains the
    exact result for any choice of operands within the input intervals. Python
    numbers on either side of an operator are treated as degenerate intervals.

    Parameters
    ----------
    inf : endtype | float | int | str | None, optional
        Infimum of the interval. A decimal string is rounded downwards.
    sup : endtype | float | int | str | None, optional
        Supremum of the interval. A decimal string is rounded upwards. If omitted,
        the interval is the degenerate interval (or, for a string, the tightest
        interval) containing `inf`.

    Attributes
    ----------
    inf : endtype
        Infimum of the interval.
    sup : endtype
        Supremum of the interval.
    converter : Converter
    endtype : type[endtype]
    operator : Operator

    Raises
    ------
    InvalidInterval
        If `inf` is greater than `sup` or either endpoint is NaN.

    Notes
    -----
    Subclasses must define the class constants `converter`, `operator`, and
    `endtype`.
    """

    __slots__ = ("inf", "sup")
    inf: T
    sup: T
    converter: Converter[T]
    endtype: type[T]
    operator: Operator[T]

    def __init__(
        self,
        inf: T | float | int | str | None = None,
        sup: T | float | int | str | None = None,
    ):
        if inf is None:
            if sup is None:
                self.inf = self.sup = self.operator.ZERO
                return

            inf = sup

        self.inf = self._endpoint(inf, ROUND_FLOOR)

        if sup is None:
            if isinstance(inf, str):
                self.sup = self._endpoint(inf, ROUND_CEILING)
            else:
                self.sup = self.inf

            return

        self.sup = self._endpoint(sup, ROUND_CEILING)

        if not self.inf <= self.sup:
            raise InvalidInterval(f"infimum {self.inf!r} exceeds supremum {self.sup!r}")

    @classmethod
    def _endpoint(cls, value, rounding: RoundingMode) -> T:
        match value:
            case cls.endtype():
                if value != value:
                    raise InvalidInterval("NaN endpoint")

                return value

            case str():
                return cls.converter.fromstr(value, rounding)

            case bool():
                raise TypeError

            case int():
                return cls.converter.fromint(value, rounding)

            case float():
                return cls.converter.fromfloat(value)

        raise TypeError

    @classmethod
    def _coerce(cls, value) -> Self | None:
        match value:
            case cls():
                return value

            case bool():
                return None

            case cls.endtype() | int() | float():
                return cls(value)

        return None

    @classmethod
    def ensure(cls, value: Self | T | float | int | str) -> Self:
        """Convert `value` to an interval and return its copy."""
        return value.copy() if isinstance(value, cls) else cls(value)  # type: ignore

    @classmethod
    def entire(cls) -> Self:
        """Return ``[-inf, inf]``, the enclosure used when nothing is known."""
        INFINITY = cls.operator.INFINITY
        return cls(-INFINITY, INFINITY)

    def copy(self) -> Self:
        return self.__class__(self.inf, self.sup)

    def diam(self) -> T:
        """Return an upper bound of ``sup - inf``."""
        return self.operator.csub(self.sup, self.inf)

    def interiorcontains(self, other: Self | T | float | int) -> bool:
        """Return ``True`` if `other` lies strictly inside the interval.

        Unbounded endpoints are never in the interior, so ``[-inf, inf]`` does not
        interior-contain itself.
        """
        rhs = self._coerce(other)

        if rhs is None:
            raise TypeError

        return self.inf < rhs.inf and rhs.sup < self.sup

    def isbounded(self) -> bool:
        """Return ``True`` if both endpoints are finite."""
        return self.mag() < self.operator.INFINITY

    def issubset(self, other: Self) -> bool:
        """Return ``True`` if every element of the interval lies in `other`."""
        if type(self) is not type(other):
            return False

        return other.inf <= self.inf and self.sup <= other.sup

    def issuperset(self, other: Self) -> bool:
        """Return ``True`` if every element of `other` lies in the interval."""
        if type(self) is not type(other):
            return False

        return other.issubset(self)

    def mag(self) -> T:
        """Return the magnitude, the largest absolute value of an element."""
        return max(abs(self.inf), abs(self.sup))

    def mig(self) -> T:
        """Return the mignitude, the smallest absolute value of an element.

        The mignitude is zero exactly when the interval contains zero. Gaussian
        elimination selects its pivots by this quantity.
        """
        ZERO = self.operator.ZERO

        if self.inf <= ZERO <= self.sup:
            return ZERO

        return min(abs(self.inf), abs(self.sup))

    @abstractmethod
    def mid(self) -> T:
        """Return an approximation of the midpoint.

        ``x.mid() in x`` is guaranteed to be ``True`` for any `x`.
        """
        raise NotImplementedError

    def rad(self) -> T:
        """Return an upper bound of the distance from :meth:`mid` to either endpoint."""
        return (self - self.mid()).mag()

    def mince(self, n: int) -> list[Self]:
        """Split the interval into `n` adjacent pieces of equal width.

        Neighbouring pieces share an endpoint, and the pieces together cover the
        interval exactly.

        Raises
        ------
        ValueError
            If `n` is less than 1 or the interval is unbounded.
        """
        if n < 1 or not self.isbounded():
            raise ValueError

        width = self.sup - self.inf
        overflow = not width < self.operator.INFINITY
        points = [self.inf]

        for k in range(1, n):
            t = k / n

            if overflow:
                point = self.inf * (1 - t) + self.sup * t
            else:
                point = self.inf + width * t

            points.append(min(max(point, points[-1]), self.sup))

        points.append(self.sup)
        return [self.__class__(a, b) for a, b in zip(points, points[1:])]

    def _ivlinalg_overload_(self, fun, *args, **kwargs):
        if fun is vrf.sqrt:
            return self.__sqrt()

        return NotImplemented

    def __sqrt(self):
        if self.inf < self.operator.ZERO:
            raise ValueError("math domain error")

        op = self.operator
        return self.__class__(op.fsqr(self.inf), op.csqr(self.sup))

    def __repr__(self) -> str:
        try:
            inf = self.converter.repr(self.inf)
            sup = self.converter.repr(self.sup)
        except NotImplementedError:
            return super().__repr__()

        return f"{type(self).__name__}(inf={inf}, sup={sup})"

    def __str__(self) -> str:
        try:
            inf = self.converter.tostr(self.inf)
            sup = self.converter.tostr(self.sup)
        except NotImplementedError:
            return self.__repr__()

        return f"[{inf}, {sup}]"

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        return other.inf == self.inf and other.sup == self.sup

    def __contains__(self, item) -> bool:
        match item:
            case bool():
                raise TypeError

            case self.endtype():
                INFINITY = self.operator.INFINITY
                return abs(item) < INFINITY and self.inf <= item <= self.sup

            case int():
                return self.__class__(item).issubset(self)

            case float():
                return self.__contains__(self.converter.fromfloat(item))

            case fractions.Fraction():
                return self.inf <= item <= self.sup

        raise TypeError

    def __add__(self, rhs: Self | T | float | int) -> Self:
        if (other := self._coerce(rhs)) is None:
            return NotImplemented

        op = self.operator
        inf = op.fadd(self.inf, other.inf)
        return self.__class__(inf, op.cadd(self.sup, other.sup))

    def __sub__(self, rhs: Self | T | float | int) -> Self:
        if (other := self._coerce(rhs)) is None:
            return NotImplemented

        op = self.operator
        inf = op.fsub(self.inf, other.sup)
        return self.__class__(inf, op.csub(self.sup, other.inf))

    def __mul__(self, rhs: Self | T | float | int) -> Self:
        if (other := self._coerce(rhs)) is None:
            return NotImplemented

        op = self.operator
        pairs = [(a, b) for a in (self.inf, self.sup) for b in (other.inf, other.sup)]
        inf = min(op.fmul(a, b) for a, b in pairs)
        sup = max(op.cmul(a, b) for a, b in pairs)
        return self.__class__(inf, sup)

    def __truediv__(self, rhs: Self | T | float | int) -> Self:
        if (other := self._coerce(rhs)) is None:
            return NotImplemented

        ZERO = self.operator.ZERO

        if other.inf <= ZERO <= other.sup:
            raise DivisionByZeroInterval(f"divisor {other} contains zero")

        op = self.operator
        pairs = [(a, b) for a in (self.inf, self.sup) for b in (other.inf, other.sup)]
        # inf/inf is undefined, the other quotients already bound the result
        infs = [q for a, b in pairs if (q := op.fdiv(a, b)) == q]
        sups = [q for a, b in pairs if (q := op.cdiv(a, b)) == q]
        return self.__class__(min(infs), max(sups))

    def __pow__(self, rhs: int) -> Self:
        if not isinstance(rhs, int) or isinstance(rhs, bool):
            return NotImplemented

        ONE = self.operator.ONE

        if rhs < 0:
            return self.__class__(ONE) / self.__pow__(-rhs)

        if rhs % 2 == 0:
            base = abs(self)
            return self.__class__(
                self.operator.fpow(base.inf, rhs), self.operator.cpow(base.sup, rhs)
            )

        inf = self._oddpow(self.inf, rhs, False)
        return self.__class__(inf, self._oddpow(self.sup, rhs, True))

    def _oddpow(self, value: T, n: int, upward: bool) -> T:
        op = self.operator

        if value < op.ZERO:
            return -(op.fpow(-value, n) if upward else op.cpow(-value, n))

        return op.cpow(value, n) if upward else op.fpow(value, n)

    def __and__(self, rhs: Self | T | float | int) -> Self:
        if (other := self._coerce(rhs)) is None:
            return NotImplemented

        inf = max(self.inf, other.inf)
        sup = min(self.sup, other.sup)

        if inf > sup:
            raise ValueError("empty intersection")

        return self.__class__(inf, sup)

    def __or__(self, rhs: Self | T | float | int) -> Self:
        if (other := self._coerce(rhs)) is None:
            return NotImplemented

        return self.__class__(min(self.inf, other.inf), max(self.sup, other.sup))

    def __radd__(self, lhs: T | float | int) -> Self:
        return self.__add__(lhs)

    def __rsub__(self, lhs: T | float | int) -> Self:
        return self.__neg__().__add__(lhs)

    def __rmul__(self, lhs: T | float | int) -> Self:
        return self.__mul__(lhs)

    def __rtruediv__(self, lhs: T | float | int) -> Self:
        if (other := self._coerce(lhs)) is None:
            return NotImplemented

        return other.__truediv__(self)

    def __neg__(self) -> Self:
        return self.__class__(-self.sup, -self.inf)

    def __pos__(self) -> Self:
        return self.copy()

    def __abs__(self) -> Self:
        return self.__class__(self.mig(), self.mag())

    def __copy__(self) -> Self:
        return self.copy()
