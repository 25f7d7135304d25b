import dataclasses
import itertools
import logging
import warnings

import numpy as np
import numpy.typing as npt
from scipy.optimize import linprog

from ivlinalg.linalg.floatintervalmatrix import FloatIntervalMatrix
from ivlinalg.linalg.intervalmatrix import DimensionMismatch, IntervalMatrix
from ivlinalg.linalg.precondition import (
    NoPrecondition,
    Precondition,
    apply_precondition,
)

logger = logging.getLogger(__name__)

WARN_DIM = 4
MAX_DIM = 10


class OettliPragerWarning(RuntimeWarning):
    """Issued when the exact solution set is computed for a large system."""


@dataclasses.dataclass(frozen=True, slots=True, eq=False)
class Polytope:
    """Convex polyhedron ``{x : G @ x <= h}``.

    Attributes
    ----------
    G : ndarray
        Coefficients of the inequalities.
    h : ndarray
        Right-hand sides of the inequalities.
    orthant : tuple[int, ...]
        Signs of the orthant the polyhedron lies in.
    """

    G: npt.NDArray
    h: npt.NDArray
    orthant: tuple[int, ...]

    @property
    def ndim(self) -> int:
        return self.G.shape[1]

    def contains(self, x: npt.ArrayLike, tol: float = 1e-9) -> bool:
        """Return ``True`` if `x` satisfies every inequality up to `tol`."""
        x = np.asarray(x, np.float64)
        return bool(np.all(self.G @ x <= self.h + tol * (1.0 + np.abs(self.h))))

    def isempty(self) -> bool:
        """Return ``True`` if no point satisfies the inequalities."""
        res = self._linprog(np.zeros(self.ndim))
        return res.status == 2

    def bounds(self) -> tuple[npt.NDArray, npt.NDArray]:
        """Return approximate lower and upper bounds of each coordinate.

        Unbounded coordinates yield infinite bounds.

        Raises
        ------
        ValueError
            If the polyhedron is empty.
        """
        n = self.ndim
        lower = np.empty(n)
        upper = np.empty(n)

        for i in range(n):
            for sign, out in ((1.0, lower), (-1.0, upper)):
                c = np.zeros(n)
                c[i] = sign
                res = self._linprog(c)

                match res.status:
                    case 0:
                        out[i] = res.x[i]

                    case 2:
                        raise ValueError("empty polytope")

                    case 3:
                        out[i] = -sign * np.inf

                    case _:
                        raise RuntimeError(res.message)

        return lower, upper

    def hull(self) -> FloatIntervalMatrix:
        """Return an approximate interval hull of the polyhedron.

        Bounds come from a floating-point LP solver whose feasibility tolerance is
        about ``1e-7``. The one-ulp widening does not cover that error, so the result
        is not a verified enclosure. Use it as a reference oracle in tests and
        comparisons, not as a solver output.
        """
        lower, upper = self.bounds()
        lower = np.nextafter(lower, -np.inf)
        upper = np.nextafter(upper, np.inf)
        return FloatIntervalMatrix(lower, upper)

    def _linprog(self, c):
        bounds = [(None, None)] * self.ndim
        return linprog(c, A_ub=self.G, b_ub=self.h, bounds=bounds, method="highs")


def _orthant_polytope(a: FloatIntervalMatrix, b: FloatIntervalMatrix, orthant):
    # (a @ x)_i ranges over [low_i @ x, up_i @ x] when x lies in the orthant
    sign = np.array(orthant, np.float64)
    inf = np.asarray(a.inf, np.float64)
    sup = np.asarray(a.sup, np.float64)
    low = np.where(sign > 0, inf, sup)
    up = np.where(sign > 0, sup, inf)
    g = np.vstack((low, -up, -np.diag(sign)))
    h = np.concatenate(
        (
            np.asarray(b.sup, np.float64),
            -np.asarray(b.inf, np.float64),
            np.zeros(len(sign)),
        )
    )
    return Polytope(g, h, tuple(orthant))


def exact_solution_set(
    a: IntervalMatrix,
    b: IntervalMatrix,
    precondition: Precondition = NoPrecondition(),
    max_dim: int = MAX_DIM,
) -> list[Polytope]:
    r"""Return the solution set of an interval linear system as a union of polyhedra.

    By the Oettli-Präger theorem, :math:`x` solves ``A @ x = b`` for some `A` in `a`
    and `b` in `b` if and only if
    :math:`|A_c x-b_c|\le A_\Delta|x|+b_\Delta`. In each orthant :math:`|x|` is
    linear in :math:`x`, so the part of the solution set lying there is a convex
    polyhedron. The cost is exponential in the dimension.

    Parameters
    ----------
    a : IntervalMatrix | Sequence
        Square coefficient matrix.
    b : IntervalMatrix | Sequence
        Right-hand side.
    precondition : Precondition, default=NoPrecondition()
        The solution set of the preconditioned system is returned if given.
    max_dim : int, default=MAX_DIM
        Largest dimension accepted.

    Returns
    -------
    list[Polytope]
        Nonempty parts of the solution set, ordered by orthant.

    Raises
    ------
    DimensionMismatch
        If `a` is not square, `b` does not match `a`, or the dimension exceeds
        `max_dim`.

    Warns
    -----
    OettliPragerWarning
        If the dimension exceeds :data:`WARN_DIM`.
    """
    a, b = apply_precondition(precondition, a, b)
    n = len(b)

    if n > max_dim:
        raise DimensionMismatch(f"dimension {n} exceeds {max_dim}")

    if n > WARN_DIM:
        msg = f"enumerating {2**n} orthants of a {n}-dimensional system"
        warnings.warn(msg, OettliPragerWarning, stacklevel=2)

    result = []

    for orthant in itertools.product((-1, 1), repeat=n):
        polytope = _orthant_polytope(a, b, orthant)

        if not polytope.isempty():
            result.append(polytope)

    logger.debug("solution set meets %d of %d orthants", len(result), 2**n)
    return result


def oettli_prager_hull(
    a: IntervalMatrix,
    b: IntervalMatrix,
    precondition: Precondition = NoPrecondition(),
    max_dim: int = MAX_DIM,
) -> FloatIntervalMatrix:
    """Return an approximate interval hull of the solution set.

    The hull is assembled from :meth:`Polytope.hull` and carries the same LP
    tolerance, so it is a reference for tests, not a verified enclosure. See
    :func:`exact_solution_set` for the parameters.

    Raises
    ------
    ValueError
        If the solution set is empty.
    """
    polytopes = exact_solution_set(a, b, precondition, max_dim)

    if not polytopes:
        raise ValueError("empty solution set")

    result = polytopes[0].hull()

    for polytope in polytopes[1:]:
        result |= polytope.hull()

    return result
