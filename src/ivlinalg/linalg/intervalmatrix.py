import itertools
from collections.abc import Iterator, Sequence
from types import EllipsisType
from typing import Any, ClassVar, Literal, Self, overload

import numpy as np
import numpy.typing as npt

from ivlinalg.interval.interval import Interval


class LinAlgError(ValueError):
    """Error raised by :mod:`ivlinalg.linalg` functions."""


class DimensionMismatch(LinAlgError):
    """Raised when a matrix is not square or shapes of operands are incompatible."""


class SingularMidpoint(LinAlgError):
    """Raised when the midpoint matrix is numerically singular."""


class NotRegular(LinAlgError):
    """Raised when the regularity of an interval matrix could not be verified.

    Singularity of an interval matrix is only semi-decidable, so this does not mean
    that the matrix is singular.

    Parameters
    ----------
    message : str, default="regularity could not be verified"
    enclosure : IntervalMatrix | None, optional

    Attributes
    ----------
    message : str
    enclosure : IntervalMatrix | None
        Best-effort enclosure of the solution set, possibly unbounded.
    """

    message: str
    enclosure: "IntervalMatrix | None"

    def __init__(
        self,
        message: str = "regularity could not be verified",
        enclosure: "IntervalMatrix | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.enclosure = enclosure


PossiblySingular = NotRegular


class NoConvergence(LinAlgError):
    """Raised when an iterative method exceeds its iteration budget.

    Parameters
    ----------
    message : str, default="iteration did not converge"
    enclosure : IntervalMatrix | None, optional

    Attributes
    ----------
    message : str
    enclosure : IntervalMatrix | None
        Last computed box. It is not certified to enclose the solution set.
    """

    message: str
    enclosure: "IntervalMatrix | None"

    def __init__(
        self,
        message: str = "iteration did not converge",
        enclosure: "IntervalMatrix | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.enclosure = enclosure


class NotRegularWarning(RuntimeWarning):
    """Issued when a solution is returned without a regularity certificate."""


class flatiter[T: Interval](Iterator[T]):
    __slots__ = ("_iter", "_matrix")
    _iter: Iterator
    _matrix: "IntervalMatrix[T]"

    def __init__(self, a: "IntervalMatrix[T]", /):
        self._iter = iter(np.ndindex(a.shape))
        self._matrix = a

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> T:
        return self._matrix[next(self._iter)]


class IntervalMatrix[T1: Interval]:
    """Inf-sup type interval matrix or vector.

    Parameters
    ----------
    inf : IntervalMatrix | ndarray | Sequence
        Either entries of the matrix (intervals or numbers), or the infimum when `sup`
        is given.
    sup : ndarray | Sequence, optional
        Supremum of the matrix.
    intvl : type[Interval], optional
        Type of entries. Subclasses may provide a default.

    Attributes
    ----------
    inf : ndarray
        Infimum of the interval matrix.
    sup : ndarray
        Supremum of the interval matrix.

    Raises
    ------
    DimensionMismatch
        If `inf` and `sup` have different shapes, or the matrix is neither 1D nor 2D.
    InvalidInterval
        If some entry of `inf` exceeds the corresponding entry of `sup`.
    """

    __slots__ = ("inf", "sup", "_intvl")
    __array_ufunc__ = None
    _default_interval: ClassVar[type[Interval] | None] = None
    inf: npt.NDArray
    sup: npt.NDArray
    _intvl: type[T1]

    def __init__(self, inf, sup=None, *, intvl: type[T1] | None = None, **kwargs):
        if intvl is None:
            intvl = self._default_interval  # type: ignore

        if intvl is None or not issubclass(intvl, Interval):
            raise TypeError

        self._intvl = intvl

        if kwargs.get("_skipcheck"):
            self.inf = inf
            self.sup = sup
            return

        if sup is not None:
            inf = np.array(inf, np.object_)
            sup = np.array(sup, np.object_)

            if not (inf.shape == sup.shape and 1 <= inf.ndim <= 2):
                raise DimensionMismatch

            self.inf = self._emptyarray(inf.shape)
            self.sup = self._emptyarray(inf.shape)

            for key in np.ndindex(inf.shape):
                x = intvl(inf[key], sup[key])
                self.inf[key] = x.inf
                self.sup[key] = x.sup

            return

        if isinstance(inf, IntervalMatrix):
            if inf._intvl is not intvl:
                raise TypeError

            self.inf = self._emptyarray(inf.shape)
            self.sup = self._emptyarray(inf.shape)
            self.inf[...] = inf.inf
            self.sup[...] = inf.sup
            return

        tmp = np.empty(np.shape(inf), np.object_)

        for key in np.ndindex(tmp.shape):
            tmp[key] = _item(inf, key)

        if not 1 <= tmp.ndim <= 2:
            raise DimensionMismatch

        self.inf = self._emptyarray(tmp.shape)
        self.sup = self._emptyarray(tmp.shape)

        for key in np.ndindex(tmp.shape):
            x = intvl.ensure(tmp[key])
            self.inf[key] = x.inf
            self.sup[key] = x.sup

    @property
    def flat(self) -> flatiter[T1]:
        return flatiter(self)

    @property
    def interval(self) -> type[T1]:
        return self._intvl

    @property
    def ndim(self) -> int:
        """Shorthand for ``len(self.shape)``. Always 1 or 2."""
        return len(self.shape)

    @property
    def shape(self) -> tuple[int] | tuple[int, int]:
        """Tuple of matrix dimensions."""
        return self.inf.shape  # type: ignore

    @property
    def size(self) -> int:
        return self.inf.size

    @property
    def T(self) -> Self:
        """Shorthand for :meth:`transpose`."""
        return self.transpose()

    @classmethod
    def empty(
        cls,
        shape: int | tuple[int] | tuple[int, int],
        *,
        intvl: type[T1] | None = None,
    ) -> Self:
        """Return a new interval matrix of given shape, without initializing entries."""
        inf = cls._emptyarray(shape)
        sup = inf.copy()
        return cls(inf, sup, intvl=intvl, _skipcheck=True)  # type: ignore

    @classmethod
    def entire(
        cls,
        shape: int | tuple[int] | tuple[int, int],
        *,
        intvl: type[T1] | None = None,
    ) -> Self:
        """Return a new interval matrix of given shape, filled with ``[-inf, inf]``."""
        result = cls.empty(shape, intvl=intvl)
        INFINITY = result._intvl.operator.INFINITY
        result.inf[...] = -INFINITY
        result.sup[...] = INFINITY
        return result

    @classmethod
    def eye(cls, n: int, *, intvl: type[T1] | None = None) -> Self:
        """Return the identity matrix of order `n`."""
        result = cls.zeros((n, n), intvl=intvl)
        ONE = result._intvl.operator.ONE

        for i in range(n):
            result.inf[i, i] = ONE
            result.sup[i, i] = ONE

        return result

    @classmethod
    def ones(
        cls,
        shape: int | tuple[int] | tuple[int, int],
        *,
        intvl: type[T1] | None = None,
    ) -> Self:
        """Return a new interval matrix of given shape, filled with ones."""
        result = cls.empty(shape, intvl=intvl)
        ONE = result._intvl.operator.ONE
        result.inf[...] = ONE
        result.sup[...] = ONE
        return result

    @classmethod
    def zeros(
        cls,
        shape: int | tuple[int] | tuple[int, int],
        *,
        intvl: type[T1] | None = None,
    ) -> Self:
        """Return a new interval matrix of given shape, filled with zeros."""
        result = cls.empty(shape, intvl=intvl)
        ZERO = result._intvl.operator.ZERO
        result.inf[...] = ZERO
        result.sup[...] = ZERO
        return result

    @classmethod
    def from_midrad(
        cls,
        mid: npt.ArrayLike,
        rad: npt.ArrayLike,
        *,
        intvl: type[T1] | None = None,
    ) -> Self:
        """Return the smallest interval matrix containing ``mid ± rad``.

        Raises
        ------
        DimensionMismatch
            If `mid` and `rad` have different shapes.
        ValueError
            If some entry of `rad` is negative.
        """
        mid = np.array(mid, np.object_)
        rad = np.array(rad, np.object_)

        if mid.shape != rad.shape:
            raise DimensionMismatch

        result = cls.empty(mid.shape, intvl=intvl)
        intvl = result._intvl

        for key in np.ndindex(mid.shape):
            if rad[key] < 0:
                raise ValueError

            result[key] = intvl.ensure(mid[key]) + intvl(-rad[key], rad[key])

        return result

    @classmethod
    def _emptyarray(cls, shape: int | tuple[int] | tuple[int, int]) -> npt.NDArray:
        return np.empty(shape, np.object_)

    def copy(self) -> Self:
        """Return a copy of the interval matrix."""
        cls, inf, sup = type(self), self.inf.copy(), self.sup.copy()
        return cls(inf, sup, intvl=self._intvl, _skipcheck=True)  # type: ignore

    def empty_like(self) -> Self:
        """Return a new interval matrix with the same shape as `self`."""
        return self.empty(self.shape, intvl=self._intvl)

    def diam(self) -> npt.NDArray:
        """Return component-wise upper bounds of the diameter."""
        return self._map(lambda x: x.diam())

    def interiorcontains(self, other: Self | npt.NDArray) -> bool:
        """Return ``True`` if the interior of the interval matrix contains `other`."""
        if not isinstance(other, (np.ndarray, type(self))):
            raise TypeError

        if self.shape != other.shape:
            raise DimensionMismatch

        if isinstance(other, np.ndarray):
            keys = np.ndindex(self.shape)
            return all(self[k].interiorcontains(other[k]) for k in keys)

        return all(x.interiorcontains(y) for x, y in zip(self.flat, other.flat))

    def isbounded(self) -> bool:
        """Return ``True`` if every entry is bounded."""
        return all(x.isbounded() for x in self.flat)

    def issubset(self, other: Self) -> bool:
        """Test whether every element in the interval matrix is in `other`."""
        if not (isinstance(other, IntervalMatrix) and self._intvl is other._intvl):
            return False

        if self.shape != other.shape:
            return False

        return all(x.issubset(y) for x, y in zip(self.flat, other.flat))

    def mag(self) -> npt.NDArray:
        """Return component-wise magnitudes."""
        return self._map(lambda x: x.mag())

    def mid(self) -> npt.NDArray:
        """Return an approximation of the midpoint.

        As with scalar intervals, ``x.mid() in x`` is guaranteed to be ``True``.
        """
        return self._map(lambda x: x.mid())

    def mig(self) -> npt.NDArray:
        """Return component-wise mignitudes."""
        return self._map(lambda x: x.mig())

    def rad(self) -> npt.NDArray:
        """Return component-wise upper bounds of the radius around :meth:`mid`.

        ``mid() ± rad()`` contains the interval matrix.
        """
        return self._map(lambda x: x.rad())

    def transpose(self) -> Self:
        """Return a view of the transposed matrix."""
        cls, inf, sup = type(self), self.inf.T, self.sup.T
        return cls(inf, sup, intvl=self._intvl, _skipcheck=True)  # type: ignore

    def approx_inv(self) -> npt.NDArray:
        """Approximately compute the inverse of the midpoint.

        Raises
        ------
        DimensionMismatch
            If the matrix is not square.
        SingularMidpoint
            If the midpoint is numerically singular.
        """
        if not (self.ndim == 2 and self.shape[0] == self.shape[1]):
            raise DimensionMismatch("non-square matrix")

        ZERO = self._intvl.operator.ZERO
        ONE = self._intvl.operator.ONE
        a = self.mid()
        b = np.full_like(a, ZERO)
        n = self.shape[0]

        for i in range(n):
            b[i, i] = ONE

        for k in range(n):
            if (p := int(np.argmax(abs(a[k:n, k]))) + k) != k:
                a[(k, p),] = a[(p, k),]
                b[(k, p),] = b[(p, k),]

            if a[k, k] == ZERO:
                raise SingularMidpoint("numerically singular matrix")

            for i in range(k + 1, n):
                tmp = a[i, k] / a[k, k]
                a[i, k:] -= tmp * a[k, k:]
                b[i] -= tmp * b[k]

        for i in reversed(range(n)):
            b[i] -= a[i, i + 1 :] @ b[i + 1 :]
            b[i] /= a[i, i]

        return b

    def _map(self, fun) -> npt.NDArray:
        result = self._emptyarray(self.shape)

        for key in np.ndindex(self.shape):
            result[key] = fun(self[key])

        return result

    def __repr__(self) -> str:
        rows = np.empty(self.shape, np.object_)

        for key in np.ndindex(self.shape):
            rows[key] = str(self[key])

        return f"{type(self).__name__}({rows.tolist()})"

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        if other._intvl is not self._intvl or other.shape != self.shape:
            return False

        return bool(np.all(other.inf == self.inf) and np.all(other.sup == self.sup))

    def __len__(self) -> int:
        return len(self.inf)

    @overload
    def __getitem__(self, key: int) -> Any: ...

    @overload
    def __getitem__(self, key: tuple[int, int]) -> T1: ...

    @overload
    def __getitem__(
        self,
        key: slice
        | EllipsisType
        | tuple[int, slice]
        | tuple[slice, int]
        | tuple[slice, slice],
    ) -> Self: ...

    def __getitem__(self, key):
        cls, inf, sup = type(self), self.inf[key], self.sup[key]

        if isinstance(inf, np.ndarray):
            return cls(inf, sup, intvl=self._intvl, _skipcheck=True)  # type: ignore

        return self._intvl(inf, sup)

    def __setitem__(self, key, value):
        match value:
            case IntervalMatrix():
                self.inf[key] = value.inf
                self.sup[key] = value.sup

            case np.ndarray():
                value = self.__class__(value, intvl=self._intvl)
                self.inf[key] = value.inf
                self.sup[key] = value.sup

            case self._intvl():
                self.inf[key] = value.inf
                self.sup[key] = value.sup

            case float() | int() | str():
                value = self._intvl(value)
                self.inf[key] = value.inf
                self.sup[key] = value.sup

            case _:
                raise TypeError

    def __iter__(self) -> Iterator:
        return (self[i] for i in range(len(self)))

    def __contains__(self, item: npt.ArrayLike) -> bool:
        item_ = np.array(item, dtype=np.object_)

        if item_.shape != self.shape:
            return False

        return all(item_[key] in self[key] for key in np.ndindex(self.shape))

    def __add__(self, rhs) -> Self:
        return self.copy().__iadd__(rhs)

    def __sub__(self, rhs) -> Self:
        return self.copy().__isub__(rhs)

    def __mul__(self, rhs) -> Self:
        return self.copy().__imul__(rhs)

    def __truediv__(self, rhs) -> Self:
        return self.copy().__itruediv__(rhs)

    def __matmul__(self, rhs: Self | npt.NDArray) -> Self | T1:
        if not isinstance(rhs, (np.ndarray, IntervalMatrix)):
            return NotImplemented

        return _matmul(self, rhs, self)

    def __rmatmul__(self, lhs: Self | npt.NDArray) -> Self | T1:
        if not isinstance(lhs, (np.ndarray, IntervalMatrix)):
            return NotImplemented

        return _matmul(lhs, self, self)

    def __radd__(self, lhs) -> Self:
        return self.copy().__iadd__(lhs)

    def __rsub__(self, lhs) -> Self:
        return self.__neg__().__iadd__(lhs)

    def __rmul__(self, lhs) -> Self:
        return self.copy().__imul__(lhs)

    def __iadd__(self, rhs) -> Self:
        return self._inplace(rhs, lambda x, y: x + y)

    def __isub__(self, rhs) -> Self:
        return self._inplace(rhs, lambda x, y: x - y)

    def __imul__(self, rhs) -> Self:
        return self._inplace(rhs, lambda x, y: x * y)

    def __itruediv__(self, rhs) -> Self:
        return self._inplace(rhs, lambda x, y: x / y)

    def __and__(self, rhs: Self) -> Self:
        """Return the component-wise intersection.

        Raises
        ------
        ValueError
            If some components are disjoint.
        """
        return self.copy()._inplace(rhs, lambda x, y: x & y)

    def __or__(self, rhs: Self) -> Self:
        """Return the interval hull."""
        return self.copy()._inplace(rhs, lambda x, y: x | y)

    def __neg__(self) -> Self:
        cls, inf, sup = type(self), -self.sup, -self.inf
        return cls(inf, sup, intvl=self._intvl, _skipcheck=True)  # type: ignore

    def __pos__(self) -> Self:
        return self.copy()

    def __abs__(self) -> Self:
        result = self.empty_like()

        for key in np.ndindex(self.shape):
            result[key] = abs(self[key])

        return result

    def __copy__(self) -> Self:
        return self.copy()

    def _inplace(self, rhs, op) -> Self:
        match rhs:
            case self._intvl() | float() | int():
                for key in np.ndindex(self.shape):
                    self[key] = op(self[key], rhs)

                return self

            case np.ndarray() | IntervalMatrix():
                if self.shape != rhs.shape:
                    raise DimensionMismatch

            case _:
                return NotImplemented

        for key in np.ndindex(self.shape):
            self[key] = op(self[key], _item(rhs, key))

        return self


def _item(a, key):
    if isinstance(a, (np.ndarray, IntervalMatrix)):
        value = a[key]
    else:
        value = a

        for i in key:
            value = value[i]

    return value.item() if isinstance(value, np.generic) else value


def _matmul(lhs, rhs, like: IntervalMatrix):
    lshape, rshape = lhs.shape, rhs.shape
    intvl = like.interval
    ZERO = intvl(intvl.operator.ZERO)

    def dot(row, col):
        result = ZERO

        for k in range(len(row)):
            result = result + _scalar(row[k], intvl) * _scalar(col[k], intvl)

        return result

    if lshape[-1] != rshape[0]:
        raise DimensionMismatch(f"shapes {lshape} and {rshape} not aligned")

    if len(lshape) == 1:
        if len(rshape) == 1:
            return dot(lhs, rhs)

        result = like.empty((rshape[1],), intvl=intvl)

        for j in range(rshape[1]):
            result[j] = dot(lhs, rhs[:, j])

        return result

    if len(rshape) == 1:
        result = like.empty((lshape[0],), intvl=intvl)

        for i in range(lshape[0]):
            result[i] = dot(lhs[i, :], rhs)

        return result

    result = like.empty((lshape[0], rshape[1]), intvl=intvl)

    for i in range(lshape[0]):
        for j in range(rshape[1]):
            result[i, j] = dot(lhs[i, :], rhs[:, j])

    return result


def _scalar(value, intvl):
    if isinstance(value, Interval):
        return value

    if isinstance(value, np.generic):
        value = value.item()

    return intvl(value)


def approx_inv(a: IntervalMatrix) -> npt.NDArray:
    """Approximately compute the inverse of the midpoint of an interval matrix.

    Parameters
    ----------
    a : IntervalMatrix
        Matrix to be inverted.

    Returns
    -------
    ndarray

    Raises
    ------
    DimensionMismatch
        If `a` is not square.
    SingularMidpoint
        If inversion fails.
    """
    return a.approx_inv()


def norm[T: Interval](a: IntervalMatrix[T], ord: Literal["inf", "one"]) -> T:
    """Enclose a matrix or vector norm.

    Parameters
    ----------
    ord : Literal["inf", "one"]
        Order of the norm (see NumPy documentation).

    Returns
    -------
    Interval
    """
    intvl = a.interval

    if a.ndim == 1:
        match ord:
            case "inf":
                return _maximum(abs(x) for x in a)

            case "one":
                return sum((abs(x) for x in a), intvl())

            case _:
                raise ValueError

    match ord:
        case "inf":
            rows = range(a.shape[0])
            return _maximum(sum((abs(x) for x in a[i, :]), intvl()) for i in rows)

        case "one":
            cols = range(a.shape[1])
            return _maximum(sum((abs(x) for x in a[:, j]), intvl()) for j in cols)

        case _:
            raise ValueError


def _maximum(values):
    result = None

    for x in values:
        if result is None:
            result = x.copy()
        else:
            result.inf = max(result.inf, x.inf)
            result.sup = max(result.sup, x.sup)

    if result is None:
        raise ValueError

    return result
