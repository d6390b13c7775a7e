"""Diagnostics for extrapolated densities and orbital bases.

Functions implemented:
    orthonormality_residual(C)     – max|Cᵗ C − I|.
    idempotency_residual(P)        – max|(P/2)² − P/2| (closed-shell factor 2).
    trace_error(P, nocc)           – |Tr P − 2 nocc|.
    subspace_distance(a, b)        – max|a aᵗ − b bᵗ|, gauge-invariant.
    validate_density(P, nocc, tol) – True if idempotency and trace pass.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    "orthonormality_residual",
    "idempotency_residual",
    "trace_error",
    "subspace_distance",
    "validate_density",
]


def orthonormality_residual(C: np.ndarray) -> float:
    """Return max|Cᵗ C − I| (element-wise abs)."""

    return float(np.max(np.abs(C.T @ C - np.eye(C.shape[1]))))


def idempotency_residual(P: np.ndarray) -> float:
    """Return max|(P/2)(P/2) − P/2| for a closed-shell density *P*."""

    half = 0.5 * P
    return float(np.max(np.abs(half @ half - half)))


def trace_error(P: np.ndarray, nocc: int) -> float:
    """Return |Tr P − 2 nocc| (electrons)."""

    return abs(float(np.trace(P)) - 2.0 * nocc)


def subspace_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Return max|a aᵗ − b bᵗ|.

    Two orthonormal bases that span the same subspace differ by an orthogonal
    rotation and share the projector, so the distance is zero for them.
    """

    return float(np.max(np.abs(a @ a.T - b @ b.T)))


def validate_density(P: np.ndarray, nocc: int, *, tol: float = 1e-8) -> bool:
    """Return *True* if *P* is symmetric, idempotent (×2) and holds 2·nocc electrons."""

    sym_ok = float(np.max(np.abs(P - P.T))) < tol
    return sym_ok and idempotency_residual(P) < tol and trace_error(P, nocc) < tol
