import numpy as np
import pytest

from ivlinalg import FloatInterval as FI
from ivlinalg.interval import InvalidInterval
from ivlinalg.linalg import DimensionMismatch, SingularMidpoint, approx_inv, norm
from ivlinalg.linalg import FloatIntervalMatrix as FIM


def test_construction():
    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    assert a.shape == (2, 2)
    assert a[0, 1] == FI(-2, 1)

    b = FIM([FI(-2, 2), 1.5])
    assert b[1] == FI(1.5)

    assert FIM(a) == a

    with pytest.raises(InvalidInterval):
        FIM(inf=[1, 2], sup=[0, 3])

    with pytest.raises(DimensionMismatch):
        FIM(inf=[1, 2], sup=[1, 2, 3])


def test_transpose():
    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    assert a.interval is FI
    assert a.T[0, 1] == FI(-1, 2)
    assert a.T.T == a
    assert FIM.zeros(2).interval is FI


def test_midrad():
    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    assert np.array_equal(a.mid(), [[3.0, -0.5], [0.5, 3.0]])
    assert np.array_equal(a.rad(), [[1.0, 1.5], [1.5, 1.0]])
    assert FIM.from_midrad(a.mid(), a.rad()) == a


def test_matmul():
    a = FIM(inf=[[1, 0], [0, 1]], sup=[[2, 0], [0, 1]])
    x = FIM([FI(-1, 1), FI(2)])
    y = a @ x
    assert y[0] == FI(-2, 2) and y[1] == FI(2)

    c = np.array([[1.0, 1.0], [0.0, 1.0]])
    z = c @ x
    assert z[0] == FI(1, 3) and z[1] == FI(2)

    with pytest.raises(DimensionMismatch):
        a @ FIM([1, 2, 3])

    with pytest.raises(DimensionMismatch):
        a + FIM([1, 2])


def test_eye():
    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    assert FIM.eye(2) @ a == a


def test_approx_inv():
    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    r = approx_inv(a)
    assert np.allclose(r @ a.mid(), np.eye(2))

    with pytest.raises(SingularMidpoint):
        FIM(inf=[[1, 1], [1, 1]], sup=[[1, 1], [1, 1]]).approx_inv()

    with pytest.raises(DimensionMismatch):
        FIM(inf=[[1, 1]], sup=[[1, 1]]).approx_inv()


def test_norm():
    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    assert norm(a, "inf") == FI(2, 6)
    assert norm(a, "one") == FI(2, 6)
    assert norm(FIM([FI(-3, 1), FI(2)]), "inf") == FI(2, 3)


def test_setops():
    x = FIM([FI(0, 2), FI(-1, 1)])
    y = FIM([FI(1, 3), FI(0, 4)])
    assert (x & y) == FIM([FI(1, 2), FI(0, 1)])
    assert (x | y) == FIM([FI(0, 3), FI(-1, 4)])
    assert x.issubset(x | y)
    assert (x | y).interiorcontains(FIM([FI(1), FI(0)]))
    assert [1.0, 0.0] in x
