import dataclasses
from typing import assert_never

import numpy as np
import numpy.typing as npt

from ivlinalg.linalg.classify import (
    is_M_matrix,
    is_strictly_diagonally_dominant,
)
from ivlinalg.linalg.floatintervalmatrix import FloatIntervalMatrix
from ivlinalg.linalg.intervalmatrix import DimensionMismatch, IntervalMatrix
from ivlinalg.linalg.solvers import Algorithm, Krawczyk


@dataclasses.dataclass(frozen=True, slots=True)
class NoPrecondition:
    """Solve the system as given.

    The preconditioner is the identity matrix.
    """


@dataclasses.dataclass(frozen=True, slots=True)
class InverseMidpoint:
    """Multiply the system by an approximate inverse of the midpoint matrix.

    The solution set of the preconditioned system contains that of the original
    system, but is generally larger.
    """


type Precondition = NoPrecondition | InverseMidpoint


def precondition_matrix(strategy: Precondition, a: IntervalMatrix) -> npt.NDArray:
    """Return the real matrix by which the system is multiplied.

    Parameters
    ----------
    strategy : NoPrecondition | InverseMidpoint
    a : IntervalMatrix
        Square coefficient matrix.

    Returns
    -------
    ndarray

    Raises
    ------
    DimensionMismatch
        If `a` is not square.
    SingularMidpoint
        If `strategy` is :class:`InverseMidpoint` and the midpoint of `a` is
        numerically singular.
    """
    if not (a.ndim == 2 and a.shape[0] == a.shape[1]):
        raise DimensionMismatch("non-square matrix")

    match strategy:
        case NoPrecondition():
            return np.eye(a.shape[0])

        case InverseMidpoint():
            return FloatIntervalMatrix(a).approx_inv()

        case _ as unreachable:
            assert_never(unreachable)


def apply_precondition(
    strategy: Precondition, a: IntervalMatrix, b: IntervalMatrix
) -> tuple[FloatIntervalMatrix, FloatIntervalMatrix]:
    """Return the preconditioned system ``(C @ a, C @ b)``.

    With :class:`NoPrecondition`, copies of `a` and `b` are returned; they are equal
    to ``eye(n) @ a`` and ``eye(n) @ b``.

    Raises
    ------
    DimensionMismatch
        If `a` is not square or `b` does not match `a`.
    SingularMidpoint
        If the preconditioner cannot be computed.
    """
    a = FloatIntervalMatrix(a)
    b = FloatIntervalMatrix(b)

    if b.ndim != 1 or a.ndim != 2 or len(b) != a.shape[0]:
        raise DimensionMismatch(f"shapes {a.shape} and {b.shape} not aligned")

    match strategy:
        case NoPrecondition():
            if a.shape[0] != a.shape[1]:
                raise DimensionMismatch("non-square matrix")

            return a.copy(), b.copy()

        case InverseMidpoint():
            c = precondition_matrix(strategy, a)
            return c @ a, c @ b

        case _ as unreachable:
            assert_never(unreachable)


def default_precondition(a: IntervalMatrix, algorithm: Algorithm) -> Precondition:
    """Choose a preconditioner when none is given.

    :class:`NoPrecondition` is chosen if `algorithm` is :class:`Krawczyk`, which
    preconditions internally, or if `a` is strictly diagonally dominant or a verified
    M-matrix, for which elimination and iteration behave well without it. Otherwise
    :class:`InverseMidpoint` is chosen.
    """
    if isinstance(algorithm, Krawczyk):
        return NoPrecondition()

    if is_strictly_diagonally_dominant(a) or is_M_matrix(a):
        return NoPrecondition()

    return InverseMidpoint()
