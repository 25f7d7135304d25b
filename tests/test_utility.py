import numpy as np
import pytest

from ivlinalg import FloatInterval as FI
from ivlinalg import interval_hull, midpoint, mince, montecarlo, radius
from ivlinalg.linalg import DimensionMismatch
from ivlinalg.linalg import FloatIntervalMatrix as FIM
from ivlinalg.linalg.oettliprager import exact_solution_set


def test_mince_interval():
    pieces = mince(FI(0, 1), 4)
    assert [str(x) for x in pieces] == [
        "[0.0, 0.25]",
        "[0.25, 0.5]",
        "[0.5, 0.75]",
        "[0.75, 1.0]",
    ]
    assert interval_hull(mince(FI(-0.3, 0.7), 10)) == FI(-0.3, 0.7)

    with pytest.raises(ValueError):
        mince(FI(0, 1), 0)


def test_mince_box():
    x = FIM([FI(0, 2), FI(-1, 1), FI(5)])
    boxes = mince(x, [2, 3, 1])
    assert len(boxes) == 6
    assert boxes[0] == FIM([FI(0, 1), FI(-1, x[1].mince(3)[0].sup), FI(5)])
    assert interval_hull(boxes) == x

    assert len(mince(x, 2)) == 8

    with pytest.raises(DimensionMismatch):
        mince(x, [2, 2])


def test_interval_hull():
    assert interval_hull([FI(0, 1), FI(3), FI(-1, 0)]) == FI(-1, 3)

    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    b = FIM([FI(-2, 2), FI(-2, 2)])
    hull = interval_hull(exact_solution_set(a, b))
    assert hull.shape == (2,)
    assert hull.isbounded()

    with pytest.raises(ValueError):
        interval_hull([])


def test_midpoint_radius():
    assert midpoint(FI(1, 3)) == 2.0
    assert radius(FI(1, 3)) == 1.0

    x = FIM([FI(1, 3), FI(-2, 0)])
    assert np.array_equal(midpoint(x), [2.0, -1.0])
    assert np.array_equal(radius(x), [1.0, 1.0])
    assert np.array_equal(midpoint([FI(0, 4), FI(1)]), [2.0, 1.0])


def test_montecarlo():
    a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    b = FIM([FI(-2, 2), FI(-2, 2)])
    samples = montecarlo(a, b, 100, np.random.default_rng(0))
    assert samples.shape == (100, 2)

    again = montecarlo(a, b, 100, np.random.default_rng(0))
    assert np.array_equal(samples, again)

    with pytest.raises(ValueError):
        montecarlo(FIM.entire((2, 2)), b, 10)

    with pytest.raises(DimensionMismatch):
        montecarlo(a, FIM([1]), 10)
