"""Tests of the input contract checks."""

import numpy as np
import pytest

from gext.errors import (
    InputContractError,
    InputShapeMismatch,
    InsufficientHistory,
    InvalidPackedLength,
    SnapshotOrderError,
)
from gext.validation import check_inputs, check_time_indices


def _tensors(nbas=4, nocc=2, nmat=3, nqm=2):
    return (
        np.zeros((nbas, nocc, nmat)),
        np.zeros((nbas * (nbas + 1) // 2, nmat)),
        np.zeros((4, nqm, nmat)),
    )


def test_returns_dimensions():
    assert check_inputs(*_tensors(5, 2, 4, 3)) == (5, 2, 4, 3)


def test_rank_of_each_tensor():
    cmat, smat, hpos = _tensors()
    with pytest.raises(InputShapeMismatch, match="cmat"):
        check_inputs(cmat[:, :, 0], smat, hpos)
    with pytest.raises(InputShapeMismatch, match="smat"):
        check_inputs(cmat, smat[:, 0], hpos)
    with pytest.raises(InputShapeMismatch, match="hpos"):
        check_inputs(cmat, smat, hpos[:, :, 0])


def test_nmat_mismatch_lists_all_counts():
    cmat, smat, hpos = _tensors(nmat=4)
    with pytest.raises(InputShapeMismatch) as info:
        check_inputs(cmat, smat, hpos[:, :, :3])
    assert info.value.details == {"cmat": 4, "smat": 4, "hpos": 3}


def test_overlap_dimension_must_match_nbas():
    cmat, _, hpos = _tensors(nbas=4)
    with pytest.raises(InputShapeMismatch, match="smat"):
        check_inputs(cmat, np.zeros((6, 3)), hpos)
    with pytest.raises(InvalidPackedLength):
        check_inputs(cmat, np.zeros((5, 3)), hpos)


def test_geometry_rows():
    cmat, smat, _ = _tensors()
    with pytest.raises(InputShapeMismatch, match="4 rows"):
        check_inputs(cmat, smat, np.zeros((3, 2, 3)))


def test_more_occupied_than_basis():
    with pytest.raises(InputShapeMismatch):
        check_inputs(np.zeros((2, 3, 3)), np.zeros((3, 3)), np.zeros((4, 1, 3)))


@pytest.mark.parametrize("nmat", [1, 2])
def test_insufficient_history(nmat):
    with pytest.raises(InsufficientHistory):
        check_inputs(*_tensors(nmat=nmat))


def test_non_finite_values():
    cmat, smat, hpos = _tensors()
    hpos[1, 0, 0] = np.inf
    with pytest.raises(InputContractError, match="hpos"):
        check_inputs(cmat, smat, hpos)


def test_time_indices():
    np.testing.assert_array_equal(check_time_indices([0, 2, 5], 3), [0.0, 2.0, 5.0])
    with pytest.raises(SnapshotOrderError):
        check_time_indices([0, 1], 3)
    with pytest.raises(SnapshotOrderError) as info:
        check_time_indices([0, 2, 2], 3)
    assert info.value.details["snapshot"] == 2
    with pytest.raises(SnapshotOrderError):
        check_time_indices([0, np.nan, 2], 3)
