import numpy as np
import pytest

from ivlinalg import FloatInterval as FI
from ivlinalg import montecarlo
from ivlinalg.linalg import FloatIntervalMatrix as FIM
from ivlinalg.linalg import (
    DimensionMismatch,
    GaussianElimination,
    InverseMidpoint,
    NoPrecondition,
    solve,
)
from ivlinalg.linalg.oettliprager import (
    OettliPragerWarning,
    Polytope,
    exact_solution_set,
    oettli_prager_hull,
)

RUNNING_A = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
RUNNING_B = FIM([FI(-2, 2), FI(-2, 2)])


def test_polytope():
    p = Polytope(np.array([[1.0], [-1.0]]), np.array([2.0, 1.0]), (1,))
    assert not p.isempty()
    assert p.contains([0.5]) and not p.contains([3.0])
    lower, upper = p.bounds()
    assert lower[0] == pytest.approx(-1.0) and upper[0] == pytest.approx(2.0)
    assert p.hull()[0].inf < lower[0] and upper[0] < p.hull()[0].sup

    q = Polytope(np.array([[1.0], [-1.0]]), np.array([-1.0, -1.0]), (1,))
    assert q.isempty()

    with pytest.raises(ValueError):
        q.bounds()


def test_triangular_hull():
    a = FIM(inf=[[2, 1], [0, 1]], sup=[[3, 2], [0, 2]])
    b = FIM([FI(1, 2), FI(1, 2)])
    x = solve(a, b, GaussianElimination(), NoPrecondition())
    assert x[0] == FI(-1.5, 0.75)
    assert x[1] == FI(0.5, 2)

    hull = oettli_prager_hull(a, b)
    assert np.allclose(hull.inf, x.inf, atol=1e-7)
    assert np.allclose(hull.sup, x.sup, atol=1e-7)


def test_running_example():
    polytopes = exact_solution_set(RUNNING_A, RUNNING_B)
    assert 1 <= len(polytopes) <= 4
    assert [p.orthant for p in polytopes] == sorted(p.orthant for p in polytopes)

    samples = montecarlo(RUNNING_A, RUNNING_B, 500, np.random.default_rng(0))

    for s in samples:
        assert any(p.contains(s) for p in polytopes)

    hull = oettli_prager_hull(RUNNING_A, RUNNING_B)
    x = solve(RUNNING_A, RUNNING_B, GaussianElimination(), NoPrecondition())
    assert np.all(x.inf <= hull.inf + 1e-7) and np.all(hull.sup <= x.sup + 1e-7)


def test_precondition():
    hull = oettli_prager_hull(RUNNING_A, RUNNING_B)
    hull_c = oettli_prager_hull(RUNNING_A, RUNNING_B, InverseMidpoint())
    assert np.all(hull_c.inf <= hull.inf + 1e-7)
    assert np.all(hull.sup <= hull_c.sup + 1e-7)


def test_dimension_limits():
    a = FIM.eye(5)
    b = FIM([1, 1, 1, 1, 1])

    with pytest.warns(OettliPragerWarning):
        polytopes = exact_solution_set(a, b)

    assert [p.orthant for p in polytopes] == [(1, 1, 1, 1, 1)]

    with pytest.raises(DimensionMismatch):
        exact_solution_set(FIM.eye(3), FIM([1, 1, 1]), max_dim=2)

    with pytest.raises(DimensionMismatch):
        exact_solution_set(RUNNING_A, FIM([1, 1, 1]))
