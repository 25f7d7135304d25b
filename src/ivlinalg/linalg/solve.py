import dataclasses
import logging
import warnings
from typing import Literal

from ivlinalg.linalg.floatintervalmatrix import FloatIntervalMatrix
from ivlinalg.linalg.intervalmatrix import (
    DimensionMismatch,
    IntervalMatrix,
    NoConvergence,
    NotRegular,
    NotRegularWarning,
    SingularMidpoint,
)
from ivlinalg.linalg.precondition import (
    InverseMidpoint,
    NoPrecondition,
    Precondition,
    apply_precondition,
    default_precondition,
)
from ivlinalg.linalg.solvers import (
    Algorithm,
    GaussianElimination,
    HansenBliekRohn,
    run,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class LinSolveResult[T: Literal["NOCONVERGENCE", "NOTREGULAR", "SUCCESS"]]:
    """Output of :func:`linsolve`.

    Attributes
    ----------
    status : Literal["NOCONVERGENCE", "NOTREGULAR", "SUCCESS"]
    content : FloatIntervalMatrix
        Enclosure of the solution set if `status` is ``"SUCCESS"``. Otherwise a
        best-effort box, which is possibly unbounded (``"NOTREGULAR"``) or not
        certified (``"NOCONVERGENCE"``).
    message : str
        Report from the solver. Typically a reason for a failure.
    algorithm : Algorithm
        Algorithm of the last attempt.
    precondition : Precondition
        Preconditioner of the last attempt.
    attempts : tuple[tuple[Algorithm, Precondition], ...]
        Every combination tried, in order.
    """

    status: T
    content: FloatIntervalMatrix
    message: str
    algorithm: Algorithm
    precondition: Precondition
    attempts: tuple[tuple[Algorithm, Precondition], ...]


def _candidates(
    a: FloatIntervalMatrix, algorithm: Algorithm, precondition: Precondition | None
) -> list[tuple[Algorithm, Precondition]]:
    if precondition is None:
        precondition = default_precondition(a, algorithm)

    match precondition:
        case NoPrecondition():
            other = InverseMidpoint()

        case _:
            other = NoPrecondition()

    result: list[tuple[Algorithm, Precondition]] = []

    for candidate in (
        (algorithm, precondition),
        (algorithm, other),
        (HansenBliekRohn(), InverseMidpoint()),
        (GaussianElimination(), InverseMidpoint()),
    ):
        if candidate not in result:
            result.append(candidate)

    return result


def linsolve(
    a: IntervalMatrix,
    b: IntervalMatrix,
    algorithm: Algorithm | None = None,
    precondition: Precondition | None = None,
) -> LinSolveResult:
    """Enclose the solution set of an interval linear system, reporting failures.

    If the requested combination fails because regularity could not be verified or an
    iteration did not converge, the same algorithm with the other preconditioner,
    :class:`HansenBliekRohn` with :class:`InverseMidpoint`, and
    :class:`GaussianElimination` with :class:`InverseMidpoint` are tried in this
    order.

    Parameters
    ----------
    a : IntervalMatrix | Sequence
        Square coefficient matrix.
    b : IntervalMatrix | Sequence
        Right-hand side.
    algorithm : Algorithm, optional
        Defaults to :class:`GaussianElimination`.
    precondition : Precondition, optional
        Chosen by :func:`default_precondition` if omitted.

    Returns
    -------
    LinSolveResult

    Raises
    ------
    DimensionMismatch
        If `a` is not square or `b` does not match `a`.
    SingularMidpoint
        If the preconditioner passed as `precondition` cannot be computed. A
        preconditioner chosen automatically falls back instead.
    DivisionByZeroInterval
        If an interval division by zero occurs.
    """
    a = FloatIntervalMatrix(a)
    b = FloatIntervalMatrix(b)

    if not (a.ndim == 2 and a.shape[0] == a.shape[1]):
        raise DimensionMismatch("non-square matrix")

    if b.ndim != 1 or len(b) != a.shape[0]:
        raise DimensionMismatch(f"shapes {a.shape} and {b.shape} not aligned")

    if algorithm is None:
        algorithm = GaussianElimination()

    attempts: list[tuple[Algorithm, Precondition]] = []
    failure: NotRegular | NoConvergence | None = None
    unconverged: NoConvergence | None = None

    for alg, pre in _candidates(a, algorithm, precondition):
        if attempts:
            logger.info("falling back to %r with %r: %s", alg, pre, failure)
        else:
            logger.debug("solving with %r and %r", alg, pre)

        attempts.append((alg, pre))

        try:
            ca, cb = apply_precondition(pre, a, b)
            content = run(alg, ca, cb)
        except SingularMidpoint as exc:
            if len(attempts) == 1 and precondition is not None:
                raise

            failure = NotRegular(str(exc), FloatIntervalMatrix.entire(len(b)))
            continue
        except NoConvergence as exc:
            failure = unconverged = exc
            continue
        except NotRegular as exc:
            failure = exc
            continue

        message = f"solved by {alg!r} with {pre!r}"
        return LinSolveResult("SUCCESS", content, message, alg, pre, tuple(attempts))

    alg, pre = attempts[-1]

    if unconverged is not None:
        content = unconverged.enclosure

        if content is None:
            content = FloatIntervalMatrix.entire(len(b))

        message = unconverged.message
        return LinSolveResult(
            "NOCONVERGENCE", content, message, alg, pre, tuple(attempts)
        )

    content = failure.enclosure if failure is not None else None

    if content is None:
        content = FloatIntervalMatrix.entire(len(b))

    message = failure.message if failure is not None else "no algorithm succeeded"
    return LinSolveResult("NOTREGULAR", content, message, alg, pre, tuple(attempts))


def solve(
    a: IntervalMatrix,
    b: IntervalMatrix,
    algorithm: Algorithm | None = None,
    precondition: Precondition | None = None,
) -> FloatIntervalMatrix:
    """Enclose the solution set of an interval linear system.

    Parameters
    ----------
    a : IntervalMatrix | Sequence
        Square coefficient matrix.
    b : IntervalMatrix | Sequence
        Right-hand side.
    algorithm : Algorithm, optional
        Defaults to :class:`GaussianElimination`.
    precondition : Precondition, optional
        Chosen by :func:`default_precondition` if omitted.

    Returns
    -------
    FloatIntervalMatrix
        Enclosure of the solution set of ``C @ a @ x = C @ b`` for the preconditioner
        `C`, which contains the solution set of ``a @ x = b``.

    Raises
    ------
    DimensionMismatch
        If `a` is not square or `b` does not match `a`.
    SingularMidpoint
        If the preconditioner passed as `precondition` cannot be computed.
    NoConvergence
        If no combination succeeded and some iteration did not converge.

    Warns
    -----
    NotRegularWarning
        If the regularity of `a` could not be verified. The returned box is then
        possibly unbounded.

    See Also
    --------
    linsolve

    Examples
    --------
    >>> from ivlinalg.interval import FloatInterval as FI
    >>> from ivlinalg.linalg import NoPrecondition, GaussianElimination
    >>> a = [[FI(2, 4), FI(-2, 1)], [FI(-1, 2), FI(2, 4)]]
    >>> b = [FI(-2, 2), FI(-2, 2)]
    >>> x = solve(a, b, GaussianElimination(), NoPrecondition())
    >>> print(x[0], x[1])
    [-5.0, 5.0] [-4.0, 4.0]
    """
    result = linsolve(a, b, algorithm, precondition)

    match result.status:
        case "SUCCESS":
            return result.content

        case "NOCONVERGENCE":
            raise NoConvergence(result.message, result.content)

        case "NOTREGULAR":
            warnings.warn(result.message, NotRegularWarning, stacklevel=2)
            return result.content

    raise RuntimeError
