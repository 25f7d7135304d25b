"""
###################################################
Interval linear algebra (:mod:`ivlinalg.linalg`)
###################################################

.. currentmodule:: ivlinalg.linalg

This module provides interval matrices and verified solvers of interval linear
systems ``A @ x = b``, whose solution set is the set of solutions of every real
system with ``A`` and ``b`` taken from the intervals.

Matrices
========

.. autosummary::
    :toctree: generated/

    IntervalMatrix
    FloatIntervalMatrix

Solving linear systems
======================

.. autosummary::
    :toctree: generated/

    solve
    linsolve
    LinSolveResult

Algorithms
----------

.. autosummary::
    :toctree: generated/

    GaussianElimination
    GaussSeidel
    HansenBliekRohn
    Jacobi
    Krawczyk
    enclose
    run

Preconditioning
---------------

.. autosummary::
    :toctree: generated/

    InverseMidpoint
    NoPrecondition
    apply_precondition
    default_precondition
    precondition_matrix

Exact solution set
==================

.. autosummary::
    :toctree: generated/

    Polytope
    exact_solution_set
    oettli_prager_hull

Matrix properties
=================

.. autosummary::
    :toctree: generated/

    comparison_matrix
    is_H_matrix
    is_M_matrix
    is_regular
    is_strictly_diagonally_dominant
    is_strongly_regular
    is_Z_matrix

Operations
==========

.. autosummary::
    :toctree: generated/

    approx_inv
    norm

Exceptions and warnings
=======================

.. autosummary::
    :toctree: generated/

    DimensionMismatch
    LinAlgError
    NoConvergence
    NotRegular
    NotRegularWarning
    OettliPragerWarning
    SingularMidpoint

"""

from .classify import (
    comparison_matrix,
    is_H_matrix,
    is_M_matrix,
    is_regular,
    is_strictly_diagonally_dominant,
    is_strongly_regular,
    is_Z_matrix,
)
from .floatintervalmatrix import FloatIntervalMatrix
from .intervalmatrix import (
    DimensionMismatch,
    IntervalMatrix,
    LinAlgError,
    NoConvergence,
    NotRegular,
    NotRegularWarning,
    PossiblySingular,
    SingularMidpoint,
    approx_inv,
    norm,
)
from .oettliprager import (
    MAX_DIM,
    WARN_DIM,
    OettliPragerWarning,
    Polytope,
    exact_solution_set,
    oettli_prager_hull,
)
from .precondition import (
    InverseMidpoint,
    NoPrecondition,
    Precondition,
    apply_precondition,
    default_precondition,
    precondition_matrix,
)
from .solve import LinSolveResult, linsolve, solve
from .solvers import (
    Algorithm,
    GaussianElimination,
    GaussSeidel,
    HansenBliekRohn,
    Jacobi,
    Krawczyk,
    enclose,
    run,
)

__all__ = [
    "comparison_matrix",
    "is_H_matrix",
    "is_M_matrix",
    "is_regular",
    "is_strictly_diagonally_dominant",
    "is_strongly_regular",
    "is_Z_matrix",
    "FloatIntervalMatrix",
    "DimensionMismatch",
    "IntervalMatrix",
    "LinAlgError",
    "NoConvergence",
    "NotRegular",
    "NotRegularWarning",
    "PossiblySingular",
    "SingularMidpoint",
    "approx_inv",
    "norm",
    "MAX_DIM",
    "WARN_DIM",
    "OettliPragerWarning",
    "Polytope",
    "exact_solution_set",
    "oettli_prager_hull",
    "InverseMidpoint",
    "NoPrecondition",
    "Precondition",
    "apply_precondition",
    "default_precondition",
    "precondition_matrix",
    "LinSolveResult",
    "linsolve",
    "solve",
    "Algorithm",
    "GaussianElimination",
    "GaussSeidel",
    "HansenBliekRohn",
    "Jacobi",
    "Krawczyk",
    "enclose",
    "run",
]
