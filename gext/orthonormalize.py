"""Löwdin-type orthonormalisation of occupied MO coefficients.

MO coefficients ``C`` from an SCF run are orthonormal with respect to the AO
overlap, ``Cᵗ S C = I``.  Multiplying by the symmetric square root ``S^(1/2)``
maps them into an orthonormal frame, ``(S^(1/2) C)ᵗ (S^(1/2) C) = I``, where
their column space is a point on the Grassmann manifold Gr(nbas, nocc).
"""

from __future__ import annotations

import numpy as np

from . import config as _cfg
from .errors import GExtError, InputShapeMismatch, NonPositiveDefiniteOverlap
from .tril import unpack

__all__ = ["overlap_power", "overlap_sqrt", "orthonormalize", "orthonormalize_all"]


def overlap_power(
    S: np.ndarray,
    power: float = 0.5,
    *,
    eig_tol: float | None = None,
) -> np.ndarray:
    """Return ``S^power`` of a symmetric positive-definite matrix via eigendecomposition.

    Parameters
    ----------
    S
        Symmetric positive-definite overlap matrix.
    power
        Exponent; ``0.5`` gives the symmetric square root, ``-0.5`` the
        Löwdin orthogonaliser.
    eig_tol
        Relative eigenvalue floor; eigenvalues ``λ ≤ eig_tol · max|λ|`` are
        treated as non-positive.  Defaults to config ``overlap_eig_tol``.
    """

    if eig_tol is None:
        eig_tol = _cfg.get_param("overlap_eig_tol")

    S = np.asarray(S, dtype=np.float64)
    if S.ndim != 2 or S.shape[0] != S.shape[1] or S.size == 0:
        raise InputShapeMismatch(f"Overlap must be a square matrix (got shape {S.shape})")
    if not np.allclose(S, S.T, rtol=0.0, atol=1e-12 * max(1.0, np.abs(S).max())):
        raise NonPositiveDefiniteOverlap("Overlap matrix is not symmetric")

    w, V = np.linalg.eigh(S)
    scale = float(np.max(np.abs(w)))
    if scale == 0.0 or w[0] <= eig_tol * scale:
        raise NonPositiveDefiniteOverlap(
            f"Overlap matrix is not positive-definite (min eigenvalue {w[0]:.3e})",
            {"min_eigenvalue": float(w[0])},
        )

    return (V * w**power) @ V.T


def overlap_sqrt(S: np.ndarray, *, eig_tol: float | None = None) -> np.ndarray:
    """Return the symmetric square root ``S^(1/2)``."""

    return overlap_power(S, 0.5, eig_tol=eig_tol)


def orthonormalize(packed_overlap: np.ndarray, mo_coeffs: np.ndarray) -> np.ndarray:
    """Return ``S^(1/2) · mo_coeffs`` for one snapshot.

    Parameters
    ----------
    packed_overlap
        Packed lower triangle of the AO overlap ``S`` (length nbas(nbas+1)/2).
    mo_coeffs
        Occupied MO coefficients, shape ``(nbas, nocc)``.
    """

    S = unpack(packed_overlap)
    C = np.asarray(mo_coeffs, dtype=np.float64)
    if C.ndim != 2 or C.shape[0] != S.shape[0]:
        raise InputShapeMismatch(
            f"MO coefficients of shape {C.shape} do not match overlap of dimension {S.shape[0]}",
            {"mo_shape": C.shape, "nbas": S.shape[0]},
        )
    return overlap_sqrt(S) @ C


def orthonormalize_all(smat: np.ndarray, cmat: np.ndarray) -> np.ndarray:
    """Orthonormalise every snapshot of ``cmat`` (nbas × nocc × nmat).

    ``smat`` holds one packed overlap per column.  Failures are re-raised with
    the offending snapshot index attached.
    """

    nbas, nocc, nmat = cmat.shape
    C = np.empty((nbas, nocc, nmat))
    for i in range(nmat):
        try:
            C[:, :, i] = orthonormalize(smat[:, i], cmat[:, :, i])
        except GExtError as exc:
            raise type(exc)(
                f"snapshot {i}: {exc.message}", {**exc.details, "snapshot": i}
            ) from exc
    return C
