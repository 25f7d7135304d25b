import logging

import numpy as np
import pytest

from ivlinalg import FloatInterval as FI
from ivlinalg import montecarlo
from ivlinalg.linalg import FloatIntervalMatrix as FIM
from ivlinalg.linalg import (
    DimensionMismatch,
    GaussianElimination,
    GaussSeidel,
    HansenBliekRohn,
    InverseMidpoint,
    Jacobi,
    Krawczyk,
    NoConvergence,
    NoPrecondition,
    NotRegular,
    NotRegularWarning,
    SingularMidpoint,
    enclose,
    linsolve,
    run,
    solve,
)

RUNNING_A = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
RUNNING_B = FIM([FI(-2, 2), FI(-2, 2)])
DOMINANT_A = FIM(inf=[[4, -1], [-1, 6]], sup=[[5, 1], [1, 7]])
DOMINANT_B = FIM([FI(-1, 1), FI(2, 3)])
SINGULAR_A = FIM(inf=[[1, 1], [1, 1]], sup=[[2, 2], [2, 2]])

ALGORITHMS = [
    GaussianElimination(),
    Jacobi(),
    GaussSeidel(),
    HansenBliekRohn(),
    Krawczyk(),
]


def lower_ones(n):
    a = np.tril(np.ones((n, n)))
    b = FIM([FI(-2, 2)] + [FI(0)] * (n - 1))
    return FIM(a, a.copy()), b


def assert_encloses(x, samples):
    inf = np.asarray(x.inf, np.float64)
    sup = np.asarray(x.sup, np.float64)
    tol = 1e-9 * (1.0 + np.maximum(np.abs(inf), np.abs(sup)))
    assert np.all(samples >= inf - tol)
    assert np.all(samples <= sup + tol)


def test_running_example():
    x = solve(RUNNING_A, RUNNING_B, GaussianElimination(), NoPrecondition())
    assert x[0] == FI(-5, 5)
    assert x[1] == FI(-4, 4)

    rng = np.random.default_rng(0)
    assert_encloses(x, montecarlo(RUNNING_A, RUNNING_B, 100_000, rng))

    with pytest.raises(NotRegular):
        run(HansenBliekRohn(), RUNNING_A, RUNNING_B)

    y = solve(RUNNING_A, RUNNING_B, HansenBliekRohn(), InverseMidpoint())
    assert_encloses(y, montecarlo(RUNNING_A, RUNNING_B, 10_000, rng))


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("precondition", [NoPrecondition(), InverseMidpoint()])
def test_containment(algorithm, precondition):
    r = linsolve(DOMINANT_A, DOMINANT_B, algorithm, precondition)
    assert r.status == "SUCCESS"
    assert r.algorithm == algorithm
    assert r.precondition == precondition
    assert len(r.attempts) == 1

    samples = montecarlo(DOMINANT_A, DOMINANT_B, 2000, np.random.default_rng(1))
    assert_encloses(r.content, samples)


def test_preconditioning_necessity():
    n = 5
    a, b = lower_ones(n)
    exact = FIM([FI(-2, 2), FI(-2, 2)] + [FI(0)] * (n - 2))

    x = solve(a, b, GaussianElimination(), NoPrecondition())
    assert x[n - 1] == FI(-(2 ** (n - 1)), 2 ** (n - 1))
    assert exact.issubset(x) and x != exact

    x = solve(a, b, HansenBliekRohn(), NoPrecondition())
    assert x[n - 1].mag() > 1.0

    x = solve(a, b, GaussianElimination(), InverseMidpoint())
    assert x == exact

    x = solve(a, b, HansenBliekRohn(), InverseMidpoint())
    assert exact.issubset(x)
    assert np.allclose(x.inf, exact.inf, atol=1e-6)
    assert np.allclose(x.sup, exact.sup, atol=1e-6)

    r = linsolve(a, b)
    assert r.status == "SUCCESS"
    assert r.precondition == InverseMidpoint()
    assert r.content == exact


def test_noprecondition():
    x = solve(DOMINANT_A, DOMINANT_B, GaussianElimination(), NoPrecondition())
    eye = FIM.eye(2)
    y = run(GaussianElimination(), eye @ DOMINANT_A, eye @ DOMINANT_B)
    assert np.array_equal(x.inf, y.inf)
    assert np.array_equal(x.sup, y.sup)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_determinism(algorithm):
    x = solve(RUNNING_A, RUNNING_B, algorithm)
    y = solve(RUNNING_A, RUNNING_B, algorithm)
    assert np.array_equal(x.inf, y.inf)
    assert np.array_equal(x.sup, y.sup)


def test_dimension_mismatch():
    with pytest.raises(DimensionMismatch):
        solve(FIM(inf=[[1, 2]], sup=[[1, 2]]), FIM([1]))

    with pytest.raises(DimensionMismatch):
        solve(DOMINANT_A, FIM([1, 2, 3]))

    with pytest.raises(DimensionMismatch):
        run(Jacobi(), DOMINANT_A, FIM([1]))


def test_not_regular():
    b = FIM([FI(1), FI(1)])

    with pytest.warns(NotRegularWarning):
        x = solve(SINGULAR_A, b, GaussianElimination(), NoPrecondition())

    assert not x.isbounded()

    r = linsolve(SINGULAR_A, b, GaussianElimination(), NoPrecondition())
    assert r.status == "NOTREGULAR"
    assert r.attempts == (
        (GaussianElimination(), NoPrecondition()),
        (GaussianElimination(), InverseMidpoint()),
        (HansenBliekRohn(), InverseMidpoint()),
    )

    with pytest.raises(SingularMidpoint):
        solve(SINGULAR_A, b, GaussianElimination(), InverseMidpoint())

    with pytest.raises(NotRegular) as excinfo:
        enclose(SINGULAR_A, b)

    assert not excinfo.value.enclosure.isbounded()


def test_auto_precondition_fallback():
    a = np.array([[1.0, 1.0], [1.0, 1.0 + 2.0**-52]])
    a = FIM(a, a.copy())
    b = FIM([1, 2])

    with pytest.raises(SingularMidpoint):
        linsolve(a, b, GaussianElimination(), InverseMidpoint())

    r = linsolve(a, b)
    assert r.status == "SUCCESS"
    assert r.attempts[0] == (GaussianElimination(), InverseMidpoint())
    assert r.precondition == NoPrecondition()
    assert 1.0 - 2.0**52 in r.content[0]
    assert 2.0**52 in r.content[1]
    assert solve(a, b) == r.content


def test_fallback(caplog):
    caplog.set_level(logging.INFO, logger="ivlinalg.linalg.solve")
    algorithm = Jacobi(max_iter=1)

    with pytest.raises(NoConvergence) as excinfo:
        run(algorithm, DOMINANT_A, DOMINANT_B)

    assert excinfo.value.enclosure is not None

    r = linsolve(DOMINANT_A, DOMINANT_B, algorithm, NoPrecondition())
    assert r.status == "SUCCESS"
    assert r.attempts[0] == (algorithm, NoPrecondition())
    assert len(r.attempts) >= 2
    assert "falling back" in caplog.text

    samples = montecarlo(DOMINANT_A, DOMINANT_B, 2000, np.random.default_rng(2))
    assert_encloses(r.content, samples)


def test_krawczyk():
    x = run(Krawczyk(), DOMINANT_A, DOMINANT_B)
    y = run(GaussianElimination(), DOMINANT_A, DOMINANT_B)
    samples = montecarlo(DOMINANT_A, DOMINANT_B, 2000, np.random.default_rng(3))
    assert_encloses(x, samples)
    assert (x & y).isbounded()

    with pytest.raises(NoConvergence):
        run(Krawczyk(max_iter=1), RUNNING_A, RUNNING_B)
