"""Tikhonov-regularised least-squares fit of extrapolation coefficients.

Given historical descriptors ``d_1 … d_m`` (rows of ``P``) and the descriptor
of the new geometry ``d_test`` we look for ``α`` with ``α P ≈ d_test``.  The
system is augmented with an ``ε I`` block,

    A = [P | ε I_m],   t = [d_test | 0 … 0],   α = t A⁺ ,

which is the minimiser of ``‖α P − d_test‖² + ε² ‖α‖²``.  Consecutive
geometries along a trajectory are nearly identical so ``P`` is close to rank
deficient; ``ε`` keeps the coefficients bounded.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from . import config as _cfg
from .errors import DescriptorLengthMismatch, ExtrapolationSingular, InsufficientHistory

__all__ = ["design_matrix", "fit_coefficients", "least_squares_coefficients"]


def design_matrix(historical: Sequence[np.ndarray] | np.ndarray) -> np.ndarray:
    """Stack historical descriptors as rows of an ``m × L`` matrix."""

    rows = [np.asarray(d, dtype=np.float64).ravel() for d in historical]
    if not rows:
        raise InsufficientHistory(
            "No historical descriptors: at least one is required to fit coefficients",
            {"n_history": 0},
        )
    lengths = {r.size for r in rows}
    if len(lengths) != 1:
        raise DescriptorLengthMismatch(
            f"Historical descriptors have different lengths {sorted(lengths)} "
            "(inconsistent atom count across snapshots)",
            {"lengths": sorted(lengths)},
        )
    return np.vstack(rows)


def _pinv_apply(t: np.ndarray, A: np.ndarray, rcond: float) -> np.ndarray:
    """Return ``t A⁺`` through an explicit thin SVD of *A*."""

    try:
        U, s, Vt = np.linalg.svd(A, full_matrices=False)
    except np.linalg.LinAlgError as exc:
        raise ExtrapolationSingular(f"SVD of the design matrix did not converge ({exc})") from exc

    if s.size == 0 or not np.isfinite(s).all() or s[0] == 0.0:
        raise ExtrapolationSingular(
            "Design matrix is zero or non-finite; descriptors carry no information",
            {"singular_values": s.tolist()},
        )

    keep = s > rcond * s[0]
    return ((t @ Vt[keep].T) / s[keep]) @ U[:, keep].T


def fit_coefficients(
    historical: Sequence[np.ndarray] | np.ndarray,
    test: np.ndarray,
    *,
    eps: float | None = None,
    rcond: float | None = None,
) -> np.ndarray:
    """Return the ``m`` extrapolation coefficients for descriptor *test*.

    Parameters
    ----------
    historical
        ``m`` historical descriptors (sequence of 1-D arrays or ``m × L`` array).
    test
        Descriptor of the geometry to extrapolate for (length ``L``).
    eps
        Regularisation weight ``ε ≥ 0``; config ``regularization`` if None.
    rcond
        Relative singular-value cutoff; config ``pinv_rcond`` if None.
    """

    if eps is None:
        eps = _cfg.get_param("regularization")
    if rcond is None:
        rcond = _cfg.get_param("pinv_rcond")
    if eps < 0:
        raise ValueError(f"Regularisation must be non-negative (got {eps})")

    P = design_matrix(historical)
    m, L = P.shape

    d_test = np.asarray(test, dtype=np.float64).ravel()
    if d_test.size != L:
        raise DescriptorLengthMismatch(
            f"Target descriptor has length {d_test.size}, historical ones {L}",
            {"test_length": d_test.size, "history_length": L},
        )

    A = np.hstack([P, eps * np.eye(m)])
    t = np.concatenate([d_test, np.zeros(m)])
    if not (np.isfinite(A).all() and np.isfinite(t).all()):
        raise ExtrapolationSingular("Descriptors contain non-finite values")

    return _pinv_apply(t, A, rcond)


def least_squares_coefficients(
    historical: Sequence[np.ndarray] | np.ndarray,
    test: np.ndarray,
) -> np.ndarray:
    """Unregularised minimum-norm fit (``ε = 0``)."""

    return fit_coefficients(historical, test, eps=0.0)
