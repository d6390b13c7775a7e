"""Tests of density and basis diagnostics."""

import numpy as np
import pytest

from conftest import random_orthonormal
from gext import diagnostics


def test_exact_density_passes(rng):
    C = random_orthonormal(rng, 6, 2)
    P = 2.0 * C @ C.T
    assert diagnostics.idempotency_residual(P) < 1e-12
    assert diagnostics.trace_error(P, 2) < 1e-12
    assert diagnostics.validate_density(P, 2)


def test_linear_mix_is_not_idempotent(rng):
    A = random_orthonormal(rng, 6, 2)
    B = random_orthonormal(rng, 6, 2)
    P = A @ A.T + B @ B.T  # average of two densities
    assert diagnostics.idempotency_residual(P) > 1e-3
    assert not diagnostics.validate_density(P, 2)


def test_wrong_electron_count(rng):
    C = random_orthonormal(rng, 5, 2)
    assert diagnostics.trace_error(2.0 * C @ C.T, 3) == pytest.approx(2.0, abs=1e-12)


def test_subspace_distance_is_gauge_invariant(rng):
    C = random_orthonormal(rng, 7, 3)
    R, _ = np.linalg.qr(rng.standard_normal((3, 3)))
    assert diagnostics.subspace_distance(C, C @ R) < 1e-12
    assert diagnostics.subspace_distance(C, random_orthonormal(rng, 7, 3)) > 1e-3


def test_orthonormality_residual():
    assert diagnostics.orthonormality_residual(np.eye(4)[:, :2]) == 0.0
    assert diagnostics.orthonormality_residual(2.0 * np.eye(4)[:, :2]) == 3.0
