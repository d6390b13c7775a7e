"""Packed lower-triangular storage of symmetric matrices.

The packing order is row-major over the lower triangle, i.e. for a 3×3 matrix

    v = [M00, M10, M11, M20, M21, M22]

which is the layout used for overlap matrices on input and for the
extrapolated density on output.
"""

from __future__ import annotations

import math

import numpy as np

from .errors import InputShapeMismatch, InvalidPackedLength

__all__ = ["triangular_size", "pack", "unpack"]


def triangular_size(length: int) -> int:
    """Return *n* such that ``n(n+1)/2 == length``.

    Raises
    ------
    InvalidPackedLength
        If *length* is not a (positive) triangular number.
    """

    length = int(length)
    if length < 1:
        raise InvalidPackedLength(
            f"Packed vector must not be empty (got length {length})",
            {"length": length},
        )
    n = (math.isqrt(8 * length + 1) - 1) // 2
    if n * (n + 1) // 2 != length:
        raise InvalidPackedLength(
            f"Length {length} is not a triangular number n(n+1)/2",
            {"length": length},
        )
    return n


def pack(M: np.ndarray) -> np.ndarray:
    """Return the lower triangle of square *M* as a 1-D vector of length n(n+1)/2."""

    M = np.asarray(M, dtype=np.float64)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise InputShapeMismatch(
            f"Only square matrices can be packed (got shape {M.shape})",
            {"shape": M.shape},
        )
    rows, cols = np.tril_indices(M.shape[0])
    return M[rows, cols].copy()


def unpack(v: np.ndarray) -> np.ndarray:
    """Return the symmetric matrix whose packed lower triangle is *v*."""

    v = np.asarray(v, dtype=np.float64)
    if v.ndim != 1:
        raise InvalidPackedLength(
            f"Packed vector must be 1-D (got shape {v.shape})",
            {"shape": v.shape},
        )
    n = triangular_size(v.size)
    rows, cols = np.tril_indices(n)
    M = np.zeros((n, n))
    M[rows, cols] = v
    M[cols, rows] = v
    return M
