import math
import sys
from fractions import Fraction

import mpmath
import pytest

from ivlinalg import FloatInterval as FI
from ivlinalg import function as vrf
from ivlinalg.interval import DivisionByZeroInterval, InvalidInterval
from ivlinalg.interval.floatinterval import FloatConverter
from ivlinalg.interval.interval import RoundingMode


def test_converter():
    ROUND_CEILING = RoundingMode.ROUND_CEILING
    ROUND_FLOOR = RoundingMode.ROUND_FLOOR
    converter = FloatConverter()

    assert converter.fromint(9007199254740993, ROUND_FLOOR) == 9007199254740992.0
    assert converter.fromint(9007199254740993, ROUND_CEILING) == 9007199254740994.0

    assert converter.fromstr("0.1", ROUND_CEILING) == 0.1
    assert converter.fromstr("0.1", ROUND_FLOOR) == math.nextafter(0.1, 0.0)
    assert converter.fromstr("-inf", ROUND_FLOOR) == -math.inf
    assert converter.fromstr("1e400", ROUND_FLOOR) == 1.7976931348623157e308
    assert converter.fromstr("1e400", ROUND_CEILING) == math.inf


def test_construction():
    x = FI("0.1")
    assert Fraction(1, 10) in x
    assert Fraction(1, 10) not in FI(0.1)
    assert x.inf < x.sup

    with pytest.raises(InvalidInterval):
        FI(2, 1)

    with pytest.raises(InvalidInterval):
        FI(math.nan)

    assert str(FI(1, 2)) == "[1.0, 2.0]"


def test_rounding():
    x = FI(1) + FI(2.0**-60)
    assert x.inf == 1.0
    assert x.sup == math.nextafter(1.0, math.inf)

    x = FI(1) / FI(3)
    assert Fraction(x.inf) < Fraction(1, 3) < Fraction(x.sup)
    assert x.sup == math.nextafter(x.inf, math.inf)

    x = FI(0.1) * FI(0.1)
    assert Fraction(x.inf) <= Fraction(0.1) ** 2 <= Fraction(x.sup)

    x = FI(1e308) * FI(10)
    assert x.inf == 1.7976931348623157e308
    assert x.sup == math.inf


def test_arithmetic():
    x = FI(1, 2)
    y = FI(-3, 4)
    assert x - x == FI(-1, 1)
    assert x * y == FI(-6, 8)
    assert y**2 == FI(0, 16)
    assert FI(-2, 1) ** 3 == FI(-8, 1)
    assert FI(2, 4) ** -1 == FI(0.25, 0.5)
    assert 1 / FI(2, 4) == FI(0.25, 0.5)
    assert abs(FI(-3, 1)) == FI(0, 3)
    assert FI(1, math.inf) / FI(1, math.inf) == FI(0, math.inf)
    assert x & FI(1.5, 3) == FI(1.5, 2)
    assert x | FI(3, 4) == FI(1, 4)

    with pytest.raises(DivisionByZeroInterval):
        x / y

    with pytest.raises(ValueError):
        x & FI(3, 4)


def test_mince():
    x = FI(-1, 2)

    for n in (1, 3, 7):
        pieces = x.mince(n)
        assert len(pieces) == n
        assert pieces[0].inf == x.inf and pieces[-1].sup == x.sup

        for lhs, rhs in zip(pieces, pieces[1:]):
            assert lhs.sup == rhs.inf

    big = sys.float_info.max
    pieces = FI(-big, big).mince(4)
    assert pieces[0].inf == -big and pieces[-1].sup == big

    for piece in pieces:
        assert piece.sup - piece.inf == pytest.approx(big / 2)

    with pytest.raises(ValueError):
        x.mince(0)

    with pytest.raises(ValueError):
        FI.entire().mince(2)


@pytest.mark.parametrize("value", [-3.5, -0.25, 0.0, 1.0, 2.5, 40.0])
def test_exp(value):
    y = vrf.exp(FI(value))

    with mpmath.workdps(50):
        assert mpmath.mpf(y.inf) <= mpmath.exp(value) <= mpmath.mpf(y.sup)


@pytest.mark.parametrize("value", [0.1, 0.7, 1.0, 2.0, 1e10])
def test_log(value):
    y = vrf.log(FI(value))

    with mpmath.workdps(50):
        assert mpmath.mpf(y.inf) <= mpmath.log(value) <= mpmath.mpf(y.sup)

    with pytest.raises(ValueError):
        vrf.log(FI(-1, 1))


def test_sqrt():
    y = vrf.sqrt(FI(2))
    assert Fraction(y.inf) ** 2 <= 2 <= Fraction(y.sup) ** 2
    assert vrf.sqrt(FI(4, 9)) == FI(2, 3)

    y = vrf.pow(FI(2), 0.5)

    with mpmath.workdps(50):
        assert mpmath.mpf(y.inf) <= mpmath.sqrt(2) <= mpmath.mpf(y.sup)
