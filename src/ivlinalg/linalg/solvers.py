import dataclasses
from typing import assert_never

import numpy as np
import numpy.typing as npt

from ivlinalg.interval.floatinterval import FloatInterval
from ivlinalg.linalg.classify import (
    _mmatrix_lower,
    _mmatrix_upper,
    comparison_matrix,
    krawczyk_inclusion,
    krawczyk_operator,
)
from ivlinalg.linalg.floatintervalmatrix import FloatIntervalMatrix
from ivlinalg.linalg.intervalmatrix import (
    DimensionMismatch,
    IntervalMatrix,
    NoConvergence,
    NotRegular,
    SingularMidpoint,
    norm,
)


@dataclasses.dataclass(frozen=True, slots=True)
class GaussianElimination:
    """Interval Gaussian elimination with partial pivoting.

    At each step the row whose candidate pivot has the largest mignitude is chosen;
    ties are broken in favor of the lowest row index. A pivot containing zero is
    reported as :class:`NotRegular`.
    """


@dataclasses.dataclass(frozen=True, slots=True)
class Jacobi:
    """Interval Jacobi iteration.

    Parameters
    ----------
    max_iter : int, default=100
        Maximum number of iterations.
    rtol : float, default=1e-10
        Relative tolerance for the change of endpoints.
    atol : float, default=1e-14
        Absolute tolerance for the change of endpoints.
    """

    max_iter: int = 100
    rtol: float = 1e-10
    atol: float = 1e-14


@dataclasses.dataclass(frozen=True, slots=True)
class GaussSeidel:
    """Interval Gauss-Seidel iteration.

    Unlike :class:`Jacobi`, each component is updated using the components already
    updated in the same sweep.

    Parameters
    ----------
    max_iter : int, default=100
        Maximum number of iterations.
    rtol : float, default=1e-10
        Relative tolerance for the change of endpoints.
    atol : float, default=1e-14
        Absolute tolerance for the change of endpoints.
    """

    max_iter: int = 100
    rtol: float = 1e-10
    atol: float = 1e-14


@dataclasses.dataclass(frozen=True, slots=True)
class HansenBliekRohn:
    r"""Hansen-Bliek-Rohn enclosure.

    The coefficient matrix must be an H-matrix. The enclosure is the interval hull of
    the solution set if the matrix is an M-matrix or the system has been
    preconditioned with the inverse of the midpoint.

    Notes
    -----
    Let :math:`M=\langle A\rangle`, :math:`u=M^{-1}|b|` and :math:`d_i=(M^{-1})_{ii}`.
    Then the solution set is enclosed by

    .. math::

        x_i\in\frac{b_i+[-\beta_i,\beta_i]}{A_{ii}+[-\alpha_i,\alpha_i]},\quad
        \alpha_i=M_{ii}-1/d_i,\quad\beta_i=u_i/d_i-|b_i|.

    Verified bounds on :math:`u` and :math:`d` are obtained from M-matrix theory.
    """


@dataclasses.dataclass(frozen=True, slots=True)
class Krawczyk:
    """Krawczyk method.

    An inclusion is searched by epsilon inflation, which also verifies that the
    matrix is regular, and then refined until it stabilizes.

    Parameters
    ----------
    max_iter : int, default=20
        Maximum number of iterations of the inclusion search and of the refinement.
    rtol : float, default=1e-10
        Relative tolerance for the change of endpoints.
    atol : float, default=1e-14
        Absolute tolerance for the change of endpoints.
    """

    max_iter: int = 20
    rtol: float = 1e-10
    atol: float = 1e-14


type Algorithm = (
    GaussianElimination | Jacobi | GaussSeidel | HansenBliekRohn | Krawczyk
)


def run(
    algorithm: Algorithm, a: IntervalMatrix, b: IntervalMatrix
) -> FloatIntervalMatrix:
    """Enclose the solution set of ``a @ x = b`` by `algorithm`.

    No preconditioning is applied.

    Parameters
    ----------
    algorithm : Algorithm
    a : IntervalMatrix
        Square coefficient matrix.
    b : IntervalMatrix
        Right-hand side.

    Returns
    -------
    FloatIntervalMatrix

    Raises
    ------
    DimensionMismatch
        If `a` is not square or `b` does not match `a`.
    NotRegular
        If the regularity of `a` could not be verified.
    NoConvergence
        If an iterative method did not converge.
    """
    a, b = _check_system(a, b)

    match algorithm:
        case GaussianElimination():
            return _gaussian_elimination(a, b)

        case Jacobi():
            return _jacobi(a, b, algorithm)

        case GaussSeidel():
            return _gauss_seidel(a, b, algorithm)

        case HansenBliekRohn():
            return _hansen_bliek_rohn(a, b)

        case Krawczyk():
            return _krawczyk(a, b, algorithm)

        case _ as unreachable:
            assert_never(unreachable)


def enclose(a: IntervalMatrix, b: IntervalMatrix) -> FloatIntervalMatrix:
    """Return an initial enclosure of the solution set of ``a @ x = b``.

    If `a` is an H-matrix, ``[-u, u]`` with ``u >= inv(<a>) @ |b|`` is returned.
    Otherwise a residual bound around the approximate solution is tried.

    Raises
    ------
    DimensionMismatch
        If `a` is not square or `b` does not match `a`.
    NotRegular
        If neither bound applies. The exception carries the entire box.
    """
    a, b = _check_system(a, b)
    n = len(b)
    mag = np.asarray(b.mag(), np.float64)

    if (u := _mmatrix_upper(comparison_matrix(a), mag)) is not None:
        if not np.any(mag):
            return FloatIntervalMatrix.zeros(n)

        return FloatIntervalMatrix(-u, u)

    if (result := _residual_bound(a, b)) is not None:
        return result

    raise NotRegular(enclosure=FloatIntervalMatrix.entire(n))


def _check_system(a, b) -> tuple[FloatIntervalMatrix, FloatIntervalMatrix]:
    a = FloatIntervalMatrix(a)
    b = FloatIntervalMatrix(b)

    if not (a.ndim == 2 and a.shape[0] == a.shape[1]):
        raise DimensionMismatch("non-square matrix")

    if b.ndim != 1 or len(b) != a.shape[0]:
        raise DimensionMismatch(f"shapes {a.shape} and {b.shape} not aligned")

    return a, b


def _residual_bound(a: FloatIntervalMatrix, b: FloatIntervalMatrix):
    n = len(b)

    try:
        r = a.approx_inv()
    except SingularMidpoint:
        return None

    tmp = norm(FloatIntervalMatrix.eye(n) - r @ a, "inf")

    if not tmp.sup < 1.0:
        return None

    approx = r @ np.asarray(b.mid(), np.float64)
    center = FloatIntervalMatrix(approx, approx.copy())
    rad = norm(r @ (b - a @ center), "inf") / (1.0 - tmp)

    if not rad.isbounded():
        return None

    return center + FloatIntervalMatrix.ones(n) * (rad * FloatInterval(-1, 1))


def _swap(x: FloatIntervalMatrix, i: int, j: int) -> None:
    x.inf[[i, j]] = x.inf[[j, i]]
    x.sup[[i, j]] = x.sup[[j, i]]


def _gaussian_elimination(a, b):
    a = a.copy()
    b = b.copy()
    n = len(b)

    for k in range(n):
        p = k + int(np.argmax([a[i, k].mig() for i in range(k, n)]))

        if a[p, k].mig() == 0.0:
            raise NotRegular("pivot contains zero", FloatIntervalMatrix.entire(n))

        if p != k:
            _swap(a, k, p)
            _swap(b, k, p)

        for i in range(k + 1, n):
            factor = a[i, k] / a[k, k]

            for j in range(k + 1, n):
                a[i, j] = a[i, j] - factor * a[k, j]

            b[i] = b[i] - factor * b[k]

    x = b.empty_like()

    for i in reversed(range(n)):
        tmp = b[i]

        for j in range(i + 1, n):
            tmp = tmp - a[i, j] * x[j]

        x[i] = tmp / a[i, i]

    return x


def _check_diagonal(a: FloatIntervalMatrix) -> None:
    n = a.shape[0]

    if any(a[i, i].mig() == 0.0 for i in range(n)):
        raise NotRegular("diagonal entry contains zero", FloatIntervalMatrix.entire(n))


def _isstable(old, new, rtol: float, atol: float) -> bool:
    for prev, curr in ((old.inf, new.inf), (old.sup, new.sup)):
        prev = np.asarray(prev, np.float64)
        curr = np.asarray(curr, np.float64)

        if not np.all(np.abs(curr - prev) <= atol + rtol * np.abs(prev)):
            return False

    return True


def _jacobi(a, b, algorithm: Jacobi):
    _check_diagonal(a)
    n = len(b)
    x = enclose(a, b)

    for _ in range(algorithm.max_iter):
        y = x.empty_like()

        for i in range(n):
            tmp = b[i]

            for j in range(n):
                if j != i:
                    tmp = tmp - a[i, j] * x[j]

            y[i] = (tmp / a[i, i]) & x[i]

        prev, x = x, y

        if _isstable(prev, x, algorithm.rtol, algorithm.atol):
            return x

    raise NoConvergence(enclosure=x)


def _gauss_seidel(a, b, algorithm: GaussSeidel):
    _check_diagonal(a)
    n = len(b)
    x = enclose(a, b)

    for _ in range(algorithm.max_iter):
        prev = x.copy()

        for i in range(n):
            tmp = b[i]

            for j in range(n):
                if j != i:
                    tmp = tmp - a[i, j] * x[j]

            x[i] = (tmp / a[i, i]) & x[i]

        if _isstable(prev, x, algorithm.rtol, algorithm.atol):
            return x

    raise NoConvergence(enclosure=x)


def _diagonal_bounds(m: npt.NDArray) -> tuple[npt.NDArray, npt.NDArray] | None:
    # bounds of the diagonal of inv(m) for a verified M-matrix m
    n = len(m)
    lower = np.empty(n)
    upper = np.empty(n)

    for i in range(n):
        e = np.zeros(n)
        e[i] = 1.0

        if (y := _mmatrix_upper(m, e)) is None:
            return None

        lower[i] = (FloatInterval(1.0) / FloatInterval(m[i, i])).inf

        if (w := _mmatrix_lower(m, e)) is not None:
            lower[i] = max(lower[i], w[i])

        upper[i] = y[i]

    return lower, upper


def _hansen_bliek_rohn(a, b):
    n = len(b)
    m = comparison_matrix(a)
    mag = np.asarray(b.mag(), np.float64)

    if (u := _mmatrix_upper(m, mag)) is None:
        raise NotRegular("not an H-matrix", FloatIntervalMatrix.entire(n))

    if (bounds := _diagonal_bounds(m)) is None:
        raise NotRegular("not an H-matrix", FloatIntervalMatrix.entire(n))

    x = b.empty_like()

    for i in range(n):
        diag = float(m[i, i])
        d = FloatInterval(float(bounds[0][i]), float(bounds[1][i]))
        alpha = max((diag - 1.0 / d).sup, 0.0)
        beta = max((float(u[i]) / d - float(mag[i])).sup, 0.0)

        if not alpha < diag:
            raise NotRegular("not an H-matrix", FloatIntervalMatrix.entire(n))

        numer = b[i] + FloatInterval(-beta, beta)
        denom = a[i, i] + FloatInterval(-alpha, alpha)
        x[i] = numer / denom

    return x


def _krawczyk(a, b, algorithm: Krawczyk):
    try:
        verified, x = krawczyk_inclusion(a, b, algorithm.max_iter)
    except SingularMidpoint:
        raise NotRegular(
            "midpoint is numerically singular", FloatIntervalMatrix.entire(len(b))
        )

    if not verified:
        raise NoConvergence("inclusion could not be verified", x)

    z, g = krawczyk_operator(a, b)

    for _ in range(algorithm.max_iter):
        prev = x
        x = (z + g @ x) & x

        if _isstable(prev, x, algorithm.rtol, algorithm.atol):
            break

    return x
