import numpy as np

from ivlinalg.interval.floatinterval import FloatInterval
from ivlinalg.linalg.intervalmatrix import (
    DimensionMismatch,
    IntervalMatrix,
    SingularMidpoint,
)


class FloatIntervalMatrix(IntervalMatrix[FloatInterval]):
    """Double-precision inf-sup type interval matrix.

    Examples
    --------
    >>> from ivlinalg.linalg import FloatIntervalMatrix as FIM
    >>> a = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
    >>> a.shape
    (2, 2)
    >>> a.mid()
    array([[ 3. , -0.5],
           [ 0.5,  3. ]])
    """

    __slots__ = ()
    _default_interval = FloatInterval

    @classmethod
    def _emptyarray(cls, shape):
        return np.empty(shape, np.float64)

    def approx_inv(self):
        if not (self.ndim == 2 and self.shape[0] == self.shape[1]):
            raise DimensionMismatch("non-square matrix")

        mid = self.mid()

        try:
            result = np.linalg.inv(mid)
        except np.linalg.LinAlgError:
            raise SingularMidpoint("numerically singular matrix")

        if not np.all(np.isfinite(result)):
            raise SingularMidpoint("numerically singular matrix")

        cond = np.linalg.norm(mid, np.inf) * np.linalg.norm(result, np.inf)

        if cond * np.finfo(np.float64).eps >= 1.0:
            raise SingularMidpoint("ill-conditioned midpoint matrix")

        return result
