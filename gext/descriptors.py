"""Coulomb-matrix descriptors of molecular geometries.

Rupp *et al.*, PRL 108, 058301 (2012):

    G_ii = 0.5 z_i^2.4,     G_ij = z_i z_j / |r_i − r_j|   (i ≠ j)

The packed lower triangle of ``G`` is used as a fingerprint of the geometry;
close geometries give close descriptors, which is what the extrapolation
coefficients are fitted on.  Atom ordering must be identical across snapshots.
"""

from __future__ import annotations

import numpy as np

from .errors import DegenerateAtomPositions, GExtError, InputShapeMismatch
from .tril import pack

__all__ = ["coulomb_matrix", "build", "build_all"]


def coulomb_matrix(geometry: np.ndarray) -> np.ndarray:
    """Return the symmetric ``nqm × nqm`` Coulomb matrix of *geometry*.

    Parameters
    ----------
    geometry
        ``4 × nqm`` array: row 0 holds the nuclear charges, rows 1–3 the
        Cartesian positions.
    """

    geometry = np.asarray(geometry, dtype=np.float64)
    if geometry.ndim != 2 or geometry.shape[0] != 4:
        raise InputShapeMismatch(
            f"Geometry must have shape (4, nqm) (got {geometry.shape})",
            {"shape": geometry.shape},
        )

    charges = geometry[0]
    positions = geometry[1:4]

    dist = np.linalg.norm(positions[:, :, None] - positions[:, None, :], axis=0)
    np.fill_diagonal(dist, 1.0)

    if np.any(dist == 0.0):
        i, j = np.argwhere(np.tril(dist == 0.0))[0]
        raise DegenerateAtomPositions(
            f"Atoms {j} and {i} occupy the same position",
            {"atoms": (int(j), int(i))},
        )

    G = np.outer(charges, charges) / dist
    np.fill_diagonal(G, 0.5 * charges**2.4)
    return G


def build(geometry: np.ndarray) -> np.ndarray:
    """Return the packed Coulomb descriptor (length nqm(nqm+1)/2)."""

    return pack(coulomb_matrix(geometry))


def build_all(hpos: np.ndarray) -> np.ndarray:
    """Return descriptors of every snapshot in *hpos* (4 × nqm × nmat) as rows."""

    hpos = np.asarray(hpos, dtype=np.float64)
    if hpos.ndim != 3:
        raise InputShapeMismatch(
            f"Expected a 4 × nqm × nmat tensor (got shape {hpos.shape})",
            {"shape": hpos.shape},
        )
    rows = []
    for i in range(hpos.shape[2]):
        try:
            rows.append(build(hpos[:, :, i]))
        except GExtError as exc:
            raise type(exc)(
                f"snapshot {i}: {exc.message}", {**exc.details, "snapshot": i}
            ) from exc
    return np.stack(rows)
