"""
##############################################
Interval arithmetic (:mod:`ivlinalg.interval`)
##############################################

.. currentmodule:: ivlinalg.interval

This module provides interval arithmetic with outward rounding. Rounding is
carried out by error-free transformations, so the floating-point environment is
never modified and intervals can be used from several threads at once.

Intervals
=========

.. autosummary::
    :toctree: generated/

    Interval
    FloatInterval

Exceptions
==========

.. autosummary::
    :toctree: generated/

    DivisionByZeroInterval
    InvalidInterval

Miscellaneous
=============

.. autosummary::
    :toctree: generated/

    Converter
    Operator
    RoundingMode

"""

from .floatinterval import FloatInterval
from .interval import (
    Converter,
    DivisionByZeroInterval,
    Interval,
    InvalidInterval,
    Operator,
    RoundingMode,
)

__all__ = [
    "FloatInterval",
    "Converter",
    "DivisionByZeroInterval",
    "Interval",
    "InvalidInterval",
    "Operator",
    "RoundingMode",
]
