"""
pytest configuration and shared fixtures for the gext test-suite.

Provides tolerance tables, random orthonormal bases and a small synthetic
trajectory (overlaps, MO coefficients, geometries) that satisfies the input
contract of :func:`gext.extrapolate`.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from gext import config, tril

TOLERANCES = {
    "strict": 1e-12,
    "default": 1e-10,
    "relaxed": 1e-8,
    "numerical": 1e-6,
}

# (nbas, nocc)
BASIS_CONFIGS = [(2, 1), (5, 2), (8, 3), (12, 5)]


@pytest.fixture(autouse=True)
def _restore_config():
    """Undo any config.set_param made inside a test."""
    yield
    config.reset_params()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def random_orthonormal(rng, n, p):
    Q, _ = np.linalg.qr(rng.standard_normal((n, p)))
    return Q


def random_spd(rng, n, shift=1.0):
    A = rng.standard_normal((n, n))
    return A @ A.T / n + shift * np.eye(n)


def nearby_basis(rng, ref, scale=0.05):
    """Orthonormal basis close to *ref* (well inside the chart)."""
    Q, _ = np.linalg.qr(ref + scale * rng.standard_normal(ref.shape))
    return Q


@pytest.fixture
def trajectory(rng):
    """Synthetic nbas=6, nocc=2, nmat=5, nqm=3 trajectory.

    MO coefficients are S-orthonormal (cᵗ S c = I) and drift smoothly; the
    atoms move by a small fixed displacement per step.
    """
    nbas, nocc, nmat, nqm = 6, 2, 5, 3
    base = random_orthonormal(rng, nbas, nocc)
    drift = 0.02 * rng.standard_normal((nbas, nocc))

    cmat = np.empty((nbas, nocc, nmat))
    smat = np.empty((nbas * (nbas + 1) // 2, nmat))
    for i in range(nmat):
        S = random_spd(rng, nbas, shift=2.0)
        w, V = np.linalg.eigh(S)
        s_inv_half = (V / np.sqrt(w)) @ V.T
        Q, _ = np.linalg.qr(base + i * drift)
        cmat[:, :, i] = s_inv_half @ Q
        smat[:, i] = tril.pack(S)

    start = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 1.4], [1.3, 0.0, 2.0]]).T
    step = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.05], [0.02, 0.01, 0.0]]).T
    hpos = np.empty((4, nqm, nmat))
    for i in range(nmat):
        hpos[0, :, i] = [8.0, 1.0, 1.0]
        hpos[1:, :, i] = start + i * step

    return {"cmat": cmat, "smat": smat, "hpos": hpos, "nbas": nbas, "nocc": nocc, "nmat": nmat}
