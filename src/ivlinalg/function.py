"""
#################################################
Mathematical functions (:mod:`ivlinalg.function`)
#################################################

.. currentmodule:: ivlinalg.function

This module provides elementary functions. Intervals get verified enclosures;
floats, integers and :mod:`mpmath` numbers are evaluated as usual.

.. autosummary::
    :toctree: generated/

    exp
    log
    pow
    sqrt

"""

import math
from typing import Any

import mpmath
import mpmath.ctx_mp_python


def _dispatch(fun, *args):
    linearized = args

    if len(args) == 2 and type(args[0]) is not type(args[1]):
        if issubclass(type(args[1]), type(args[0])):
            linearized = (args[1], args[0])

    for x in linearized:
        if hook := getattr(type(x), "_ivlinalg_overload_", None):
            if (res := hook(x, fun, *args)) is not NotImplemented:
                return res

    return NotImplemented


def exp(x: Any, /) -> Any:
    """Exponential.

    Examples
    --------
    >>> from ivlinalg import FloatInterval as FI
    >>> y = exp(FI(2))
    >>> y.inf < 7.38905609893065 < y.sup
    True
    """
    if (res := _dispatch(exp, x)) is not NotImplemented:
        return res

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.exp(x)

        case float() | int():
            return math.exp(x)

    raise TypeError


def log(x: Any, /) -> Any:
    """Natural logarithm.

    Raises
    ------
    ValueError
        If `x` is, or contains, a negative number.
    """
    if (res := _dispatch(log, x)) is not NotImplemented:
        return res

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.log(x)

        case float() | int():
            return math.log(x)

    raise TypeError


def pow(x: Any, y: Any, /) -> Any:
    """`x` raised to the power `y`.

    An integer exponent of an interval is evaluated by repeated squaring, so that
    negative bases are allowed; otherwise ``exp(log(x) * y)`` is enclosed.
    """
    if (res := _dispatch(pow, x, y)) is not NotImplemented:
        return res

    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    match x, y:
        case (mpnumeric(), _) | (_, mpnumeric()):
            return mpmath.power(x, y)

        case (float() | int(), float() | int()):
            return math.pow(x, y)

    raise TypeError


def sqrt(x: Any, /) -> Any:
    """Square root.

    Examples
    --------
    >>> from ivlinalg import FloatInterval as FI
    >>> print(sqrt(FI(4)))
    [2.0, 2.0]
    """
    if (res := _dispatch(sqrt, x)) is not NotImplemented:
        return res

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.sqrt(x)

        case float() | int():
            return math.sqrt(x)

    raise TypeError
