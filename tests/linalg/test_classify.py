import numpy as np
import pytest

from ivlinalg.linalg import DimensionMismatch
from ivlinalg.linalg import FloatIntervalMatrix as FIM
from ivlinalg.linalg.classify import (
    comparison_matrix,
    is_H_matrix,
    is_M_matrix,
    is_regular,
    is_strictly_diagonally_dominant,
    is_strongly_regular,
    is_Z_matrix,
)

RUNNING = FIM(inf=[[2, -2], [-1, 2]], sup=[[4, 1], [2, 4]])
DOMINANT = FIM(inf=[[4, -1], [-1, 6]], sup=[[5, 1], [1, 7]])
MMATRIX = FIM(inf=[[3, -1], [-1, 3]], sup=[[4, -0.5], [-0.5, 4]])
SINGULAR = FIM(inf=[[1, 1], [1, 1]], sup=[[2, 2], [2, 2]])


def test_comparison_matrix():
    assert np.array_equal(comparison_matrix(RUNNING), [[2.0, -2.0], [-2.0, 2.0]])
    assert np.array_equal(comparison_matrix(MMATRIX), [[3.0, -1.0], [-1.0, 3.0]])

    with pytest.raises(DimensionMismatch):
        comparison_matrix(FIM([1, 2]))


def test_dominance():
    assert is_strictly_diagonally_dominant(DOMINANT)
    assert not is_strictly_diagonally_dominant(RUNNING)
    upper = FIM(inf=[[1, 1], [0, 1]], sup=[[1, 1], [0, 1]])
    assert not is_strictly_diagonally_dominant(upper)


def test_matrix_classes():
    assert is_H_matrix(DOMINANT)
    assert not is_H_matrix(RUNNING)
    assert not is_Z_matrix(DOMINANT)
    assert is_Z_matrix(MMATRIX)
    assert is_M_matrix(MMATRIX)
    assert not is_M_matrix(DOMINANT)
    assert not is_M_matrix(-MMATRIX)


def test_regularity():
    assert is_regular(DOMINANT)
    assert is_strongly_regular(DOMINANT)
    assert is_strongly_regular(RUNNING)
    assert not is_regular(SINGULAR)
    assert not is_strongly_regular(SINGULAR)
