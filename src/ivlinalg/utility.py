import itertools
from collections.abc import Iterable, Sequence

import numpy as np
import numpy.typing as npt

from ivlinalg.interval.interval import Interval
from ivlinalg.linalg.floatintervalmatrix import FloatIntervalMatrix
from ivlinalg.linalg.intervalmatrix import DimensionMismatch, IntervalMatrix
from ivlinalg.linalg.oettliprager import Polytope


def mince[T: Interval | IntervalMatrix](x: T, n: int | Sequence[int]) -> list[T]:
    """Partition an interval or a box into pieces of equal width.

    Parameters
    ----------
    x : Interval | IntervalMatrix
        Interval or interval vector to be partitioned.
    n : int | Sequence[int]
        Number of pieces per coordinate. A sequence gives the number for each
        coordinate of an interval vector.

    Returns
    -------
    list[Interval] | list[IntervalMatrix]
        Pieces of an interval in increasing order, or the Cartesian product of the
        pieces of every coordinate in lexicographic order.

    Raises
    ------
    ValueError
        If some number of pieces is less than 1 or `x` is unbounded.
    DimensionMismatch
        If `x` is not a vector or `n` does not match its length.

    Examples
    --------
    >>> from ivlinalg import FloatInterval as FI
    >>> [str(y) for y in mince(FI(0, 1), 4)]
    ['[0.0, 0.25]', '[0.25, 0.5]', '[0.5, 0.75]', '[0.75, 1.0]']
    """
    if isinstance(x, Interval):
        if not isinstance(n, int):
            raise TypeError

        return x.mince(n)

    if not isinstance(x, IntervalMatrix):
        raise TypeError

    if x.ndim != 1:
        raise DimensionMismatch("not a vector")

    counts = [n] * len(x) if isinstance(n, int) else list(n)

    if len(counts) != len(x):
        raise DimensionMismatch(f"{len(counts)} counts for {len(x)} coordinates")

    pieces = [x[i].mince(k) for i, k in enumerate(counts)]
    result = []

    for box in itertools.product(*pieces):
        y = x.empty_like()

        for i, intvl in enumerate(box):
            y[i] = intvl

        result.append(y)

    return result


def interval_hull(items: Iterable) -> Interval | IntervalMatrix:
    """Return the smallest interval or box containing every item.

    Parameters
    ----------
    items : Iterable[Interval | IntervalMatrix | Polytope]
        Intervals, interval vectors, or polyhedra from
        :func:`ivlinalg.linalg.exact_solution_set`.

    Returns
    -------
    Interval | IntervalMatrix

    Raises
    ------
    ValueError
        If `items` is empty.
    """
    result = None

    for item in items:
        if isinstance(item, Polytope):
            item = item.hull()

        if result is None:
            result = item.copy()
        else:
            result = result | item

    if result is None:
        raise ValueError("empty sequence")

    return result


def midpoint(x: Interval | IntervalMatrix | Sequence[Interval]):
    """Return the midpoint of an interval, or of each entry of a matrix."""
    match x:
        case Interval() | IntervalMatrix():
            return x.mid()

        case _:
            return np.array([y.mid() for y in x], np.float64)


def radius(x: Interval | IntervalMatrix | Sequence[Interval]):
    """Return an upper bound of the radius, or of the radius of each entry."""
    match x:
        case Interval() | IntervalMatrix():
            return x.rad()

        case _:
            return np.array([y.rad() for y in x], np.float64)


def montecarlo(
    a: IntervalMatrix,
    b: IntervalMatrix,
    n: int,
    rng: np.random.Generator | None = None,
) -> npt.NDArray:
    """Solve real systems sampled uniformly from an interval linear system.

    Every sample lies in the solution set, so a box enclosing the solution set must
    contain all of them.

    Parameters
    ----------
    a : IntervalMatrix | Sequence
        Square coefficient matrix.
    b : IntervalMatrix | Sequence
        Right-hand side.
    n : int
        Number of samples.
    rng : numpy.random.Generator, optional
        Source of randomness. A new default generator is used if omitted.

    Returns
    -------
    ndarray, shape (n, len(b))

    Raises
    ------
    ValueError
        If `a` or `b` is unbounded.
    DimensionMismatch
        If `a` is not square or `b` does not match `a`.
    """
    a = FloatIntervalMatrix(a)
    b = FloatIntervalMatrix(b)

    if not (a.ndim == 2 and a.shape[0] == a.shape[1]):
        raise DimensionMismatch("non-square matrix")

    if b.ndim != 1 or len(b) != a.shape[0]:
        raise DimensionMismatch(f"shapes {a.shape} and {b.shape} not aligned")

    if not (a.isbounded() and b.isbounded()):
        raise ValueError("unbounded system")

    if rng is None:
        rng = np.random.default_rng()

    ainf = np.asarray(a.inf, np.float64)
    asup = np.asarray(a.sup, np.float64)
    binf = np.asarray(b.inf, np.float64)
    bsup = np.asarray(b.sup, np.float64)
    matrices = np.clip(ainf + (asup - ainf) * rng.random((n, *a.shape)), ainf, asup)
    vectors = np.clip(binf + (bsup - binf) * rng.random((n, len(b))), binf, bsup)
    return np.linalg.solve(matrices, vectors[..., np.newaxis])[..., 0]
