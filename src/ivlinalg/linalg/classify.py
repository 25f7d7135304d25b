import numpy as np
import numpy.typing as npt

from ivlinalg.interval.floatinterval import FloatInterval
from ivlinalg.linalg.floatintervalmatrix import FloatIntervalMatrix
from ivlinalg.linalg.intervalmatrix import (
    DimensionMismatch,
    IntervalMatrix,
    SingularMidpoint,
)

_SLACK = 2.0**-26


def _check_square(a: IntervalMatrix) -> int:
    if not (a.ndim == 2 and a.shape[0] == a.shape[1]):
        raise DimensionMismatch("non-square matrix")

    return a.shape[0]


def _pointmatrix(a: npt.NDArray) -> FloatIntervalMatrix:
    a = np.asarray(a, np.float64)
    return FloatIntervalMatrix(a, a.copy(), _skipcheck=True)


def comparison_matrix(a: IntervalMatrix) -> npt.NDArray:
    r"""Return the comparison matrix of a square interval matrix.

    The comparison matrix :math:`\langle A\rangle` has the mignitudes of the diagonal
    entries on its diagonal and the negated magnitudes of the other entries
    elsewhere. It is computed exactly.

    Raises
    ------
    DimensionMismatch
        If `a` is not square.
    """
    n = _check_square(a)
    result = -np.asarray(a.mag(), np.float64)

    for i in range(n):
        result[i, i] = a[i, i].mig()

    return result


def _mmatrix_upper(m: npt.NDArray, r: npt.NDArray) -> npt.NDArray | None:
    """Return a verified ``y > 0`` with ``m @ y > r``, or ``None``.

    For a Z-matrix `m` the existence of such `y` proves that `m` is a nonsingular
    M-matrix, and then ``inv(m) @ r <= y`` whenever ``r >= 0``.
    """
    r = np.asarray(r, np.float64)
    scale = float(np.max(r)) if r.size else 0.0
    rhs = r * (1.0 + _SLACK) + (scale * _SLACK if scale > 0.0 else 1.0)

    try:
        y = np.linalg.solve(m, rhs)
    except np.linalg.LinAlgError:
        return None

    if not (np.all(np.isfinite(y)) and np.all(y > 0.0)):
        return None

    product = _pointmatrix(m) @ _pointmatrix(y)

    if not np.all(product.inf > r):
        return None

    return y


def _mmatrix_lower(m: npt.NDArray, r: npt.NDArray) -> npt.NDArray | None:
    """Return a verified `w` with ``m @ w <= r``, or ``None``.

    `m` must be a nonsingular M-matrix, so that ``w <= inv(m) @ r``.
    """
    r = np.asarray(r, np.float64)

    try:
        w = np.linalg.solve(m, r * (1.0 - _SLACK))
    except np.linalg.LinAlgError:
        return None

    if not np.all(np.isfinite(w)):
        return None

    product = _pointmatrix(m) @ _pointmatrix(w)

    if not np.all(product.sup <= r):
        return None

    return w


def _contraction_certificate(g: npt.NDArray) -> bool:
    """Return ``True`` if the spectral radius of ``g >= 0`` is verified to be below 1.

    A vector ``v > 0`` with ``g @ v < v`` bounds the spectral radius by the
    Collatz-Wielandt formula.
    """
    n = len(g)

    try:
        v = np.linalg.solve(np.eye(n) - g, np.ones(n))
    except np.linalg.LinAlgError:
        return False

    if not (np.all(np.isfinite(v)) and np.all(v > 0.0)):
        return False

    product = _pointmatrix(g) @ _pointmatrix(v)
    return bool(np.all(product.sup < v))


def is_Z_matrix(a: IntervalMatrix) -> bool:
    """Return ``True`` if every off-diagonal entry of `a` is nonpositive."""
    n = _check_square(a)
    return all(a.sup[i, j] <= 0 for i in range(n) for j in range(n) if i != j)


def is_H_matrix(a: IntervalMatrix) -> bool:
    """Return ``True`` if the comparison matrix of `a` is verified to be an M-matrix.

    Every real matrix in an H-matrix is then nonsingular, so `a` is regular.
    """
    n = _check_square(a)
    return _mmatrix_upper(comparison_matrix(a), np.zeros(n)) is not None


def is_M_matrix(a: IntervalMatrix) -> bool:
    """Return ``True`` if `a` is verified to be an M-matrix.

    An interval matrix is an M-matrix if it is a Z-matrix whose lower bound is a
    nonsingular M-matrix.
    """
    n = _check_square(a)

    if not is_Z_matrix(a):
        return False

    if any(a.inf[i, i] <= 0 for i in range(n)):
        return False

    return is_H_matrix(a)


def is_strictly_diagonally_dominant(a: IntervalMatrix) -> bool:
    """Return ``True`` if every row has ``mig(a_ii) > sum(mag(a_ij) for j != i)``."""
    n = _check_square(a)
    mag = a.mag()

    for i in range(n):
        others = (FloatInterval(mag[i, j]) for j in range(n) if j != i)
        offdiag = sum(others, FloatInterval())

        if not a[i, i].mig() > offdiag.sup:
            return False

    return True


def is_strongly_regular(a: IntervalMatrix) -> bool:
    """Return ``True`` if ``approx_inv(a) @ a`` is verified to be regular.

    The test proves that the spectral radius of ``|I - C A|`` is less than 1 for the
    approximate inverse `C` of the midpoint.
    """
    n = _check_square(a)

    try:
        c = a.approx_inv()
    except SingularMidpoint:
        return False

    g = abs(FloatIntervalMatrix.eye(n) - c @ FloatIntervalMatrix(a))
    return _contraction_certificate(np.asarray(g.sup, np.float64))


def is_regular(a: IntervalMatrix, max_iter: int = 20) -> bool:
    """Return ``True`` if `a` is verified to be regular by the Krawczyk operator.

    ``False`` means that regularity could not be verified, not that `a` is singular.
    """
    n = _check_square(a)

    try:
        verified, _ = krawczyk_inclusion(a, FloatIntervalMatrix.ones(n), max_iter)
    except SingularMidpoint:
        return False

    return verified


def inflate(x: FloatIntervalMatrix, factor: float = 0.1) -> FloatIntervalMatrix:
    """Return `x` widened by `factor` times its diameter and the smallest normal."""
    tiny = float(np.finfo(np.float64).tiny)
    delta = np.asarray(x.diam(), np.float64) * factor + tiny
    return x + FloatIntervalMatrix(-delta, delta)


def krawczyk_inclusion(
    a: IntervalMatrix, b: IntervalMatrix, max_iter: int
) -> tuple[bool, FloatIntervalMatrix]:
    r"""Search an interval vector mapped into its own interior by the Krawczyk operator.

    The operator is :math:`K(x)=Cb+(I-CA)x` with `C` the approximate inverse of the
    midpoint of `a`. If :math:`K(y)\subset\operatorname{int}(y)` for some `y`, then
    `a` is regular and every solution of the system lies in :math:`K(y)`.

    Returns
    -------
    r0 : bool
        ``True`` if an inclusion was verified.
    r1 : FloatIntervalMatrix
        :math:`K(y)` if `r0` is ``True``; otherwise the last iterate.

    Raises
    ------
    SingularMidpoint
        If the midpoint of `a` is numerically singular.
    """
    z, g = krawczyk_operator(a, b)
    x = z.copy()

    for _ in range(max_iter):
        y = inflate(x)
        x = z + g @ y

        if y.interiorcontains(x):
            return True, x

    return False, x


def krawczyk_operator(
    a: IntervalMatrix, b: IntervalMatrix
) -> tuple[FloatIntervalMatrix, FloatIntervalMatrix]:
    """Return ``C @ b`` and ``I - C @ a`` for the approximate inverse `C` of ``mid(a)``.

    Raises
    ------
    DimensionMismatch
        If `a` is not square.
    SingularMidpoint
        If the midpoint of `a` is numerically singular.
    """
    n = _check_square(a)
    a = FloatIntervalMatrix(a)
    c = a.approx_inv()
    return c @ FloatIntervalMatrix(b), FloatIntervalMatrix.eye(n) - c @ a
