"""Logarithm and exponential maps on the Grassmann manifold Gr(nbas, nocc).

A point is represented by an ``nbas × nocc`` matrix with orthonormal columns;
two such matrices that differ by right-multiplication with an orthogonal
``nocc × nocc`` matrix are the same point.  Tangent vectors at a reference
``γ_ref`` are ``nbas × nocc`` matrices ``Γ`` with ``γ_refᵗ Γ = 0``.

Both maps go through the principal-angle decomposition (SVD) of the two
subspaces, following Edelman, Arias & Smith, SIAM J. Matrix Anal. Appl. 20,
303 (1998):

    log:  W = (γᵗ γ_ref)⁻¹ (γᵗ − γᵗ γ_ref γ_refᵗ) = U Σ Vᵗ,   Γ = V atan(Σ) Uᵗ
    exp:  Γ = U Σ Vᵗ,   γ = γ_ref V cos(Σ) + U sin(Σ)
"""

from __future__ import annotations

import numpy as np

from . import config as _cfg
from .errors import InputShapeMismatch, SingularSubspaceOverlap

__all__ = ["log", "exp", "batch_log", "principal_angles"]


def _check_pair(ref: np.ndarray, other: np.ndarray, what: str) -> None:
    if ref.ndim != 2 or other.shape != ref.shape:
        raise InputShapeMismatch(
            f"{what} of shape {other.shape} does not match reference of shape {ref.shape}",
            {"ref_shape": ref.shape, f"{what}_shape": other.shape},
        )


def log(ref: np.ndarray, point: np.ndarray, *, cond_max: float | None = None) -> np.ndarray:
    """Return the tangent vector at *ref* pointing to *point*.

    Parameters
    ----------
    ref, point
        Orthonormal ``nbas × nocc`` bases.
    cond_max
        Largest tolerated condition number of ``Z = pointᵗ ref``; defaults to
        config ``subspace_cond_max``.

    Raises
    ------
    SingularSubspaceOverlap
        If ``Z`` is numerically singular, i.e. *point* contains a direction
        orthogonal to *ref* (cut locus of the chart).
    """

    if cond_max is None:
        cond_max = _cfg.get_param("subspace_cond_max")

    ref = np.asarray(ref, dtype=np.float64)
    point = np.asarray(point, dtype=np.float64)
    _check_pair(ref, point, "point")

    Z = point.T @ ref
    cond = np.linalg.cond(Z)
    if not np.isfinite(cond) or cond > cond_max:
        raise SingularSubspaceOverlap(
            f"Subspace overlap is singular (cond = {cond:.3e})",
            {"cond": float(cond)},
        )
    try:
        W = np.linalg.solve(Z, point.T - Z @ ref.T)
    except np.linalg.LinAlgError as exc:
        raise SingularSubspaceOverlap(f"Subspace overlap is singular ({exc})") from exc

    U, s, Vt = np.linalg.svd(W, full_matrices=False)
    return (Vt.T * np.arctan(s)) @ U.T


def exp(ref: np.ndarray, tangent: np.ndarray) -> np.ndarray:
    """Return the orthonormal basis reached from *ref* along *tangent*.

    The result is re-orthonormalised with a thin QR factorisation so that
    rounding errors do not leave ``Yᵗ Y`` away from the identity.
    """

    ref = np.asarray(ref, dtype=np.float64)
    tangent = np.asarray(tangent, dtype=np.float64)
    _check_pair(ref, tangent, "tangent")

    U, s, Vt = np.linalg.svd(tangent, full_matrices=False)
    Y = (ref @ Vt.T) * np.cos(s) + U * np.sin(s)
    Q, _ = np.linalg.qr(Y)
    return Q


def batch_log(ref: np.ndarray, points: np.ndarray, **kwargs) -> np.ndarray:
    """Apply :func:`log` to every snapshot of *points* (nbas × nocc × nmat).

    All dimensions are taken from *points* itself; the output has the same
    shape and ordering.
    """

    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 3:
        raise InputShapeMismatch(
            f"Expected a nbas × nocc × nmat tensor (got shape {points.shape})",
            {"shape": points.shape},
        )
    nbas, nocc, nmat = points.shape

    tangents = np.empty((nbas, nocc, nmat))
    for i in range(nmat):
        tangents[:, :, i] = log(ref, points[:, :, i], **kwargs)
    return tangents


def principal_angles(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Return the principal angles (ascending, radians) between span(a) and span(b)."""

    s = np.linalg.svd(np.asarray(a).T @ np.asarray(b), compute_uv=False)
    return np.arccos(np.clip(s, 0.0, 1.0))
