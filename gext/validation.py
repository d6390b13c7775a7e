"""Input contract checks run before any linear algebra.

The three input tensors share a trailing snapshot axis of length ``nmat``:

* ``cmat`` – ``nbas × nocc × nmat`` MO coefficients,
* ``smat`` – ``nbas(nbas+1)/2 × nmat`` packed overlaps,
* ``hpos`` – ``4 × nqm × nmat`` charges and positions.

Snapshot 0 is the reference density, snapshots ``1 … nmat-1`` are historical
densities; geometry ``i`` pairs with density ``i+1`` and the last geometry is
the one being extrapolated for.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .errors import (
    InputContractError,
    InputShapeMismatch,
    InsufficientHistory,
    SnapshotOrderError,
)
from .tril import triangular_size

__all__ = ["MIN_SNAPSHOTS", "check_inputs", "check_time_indices"]

# reference + at least two historical densities
MIN_SNAPSHOTS = 3


def _require_ndim(name: str, arr: np.ndarray, ndim: int, layout: str) -> None:
    if arr.ndim != ndim:
        raise InputShapeMismatch(
            f"{name} must be a {layout} array (got shape {arr.shape})",
            {"tensor": name, "shape": arr.shape},
        )


def check_inputs(
    cmat: np.ndarray,
    smat: np.ndarray,
    hpos: np.ndarray,
) -> Tuple[int, int, int, int]:
    """Validate the three input tensors and return ``(nbas, nocc, nmat, nqm)``."""

    _require_ndim("cmat", cmat, 3, "nbas × nocc × nmat")
    _require_ndim("smat", smat, 2, "nbas(nbas+1)/2 × nmat")
    _require_ndim("hpos", hpos, 3, "4 × nqm × nmat")

    nbas, nocc, nmat = cmat.shape
    if not (smat.shape[1] == nmat == hpos.shape[2]):
        raise InputShapeMismatch(
            "Snapshot count differs between tensors: "
            f"cmat has {nmat}, smat has {smat.shape[1]}, hpos has {hpos.shape[2]}",
            {"cmat": nmat, "smat": smat.shape[1], "hpos": hpos.shape[2]},
        )

    n_overlap = triangular_size(smat.shape[0])
    if n_overlap != nbas:
        raise InputShapeMismatch(
            f"smat packs {n_overlap}×{n_overlap} overlaps but cmat has nbas = {nbas}",
            {"tensor": "smat", "nbas_smat": n_overlap, "nbas_cmat": nbas},
        )

    if hpos.shape[0] != 4:
        raise InputShapeMismatch(
            f"hpos must have 4 rows (charge, x, y, z), got {hpos.shape[0]}",
            {"tensor": "hpos", "rows": hpos.shape[0]},
        )
    nqm = hpos.shape[1]
    if nqm < 1:
        raise InputShapeMismatch("hpos contains no atoms", {"tensor": "hpos"})

    if not (1 <= nocc <= nbas):
        raise InputShapeMismatch(
            f"Need 1 ≤ nocc ≤ nbas (got nocc = {nocc}, nbas = {nbas})",
            {"tensor": "cmat", "nocc": nocc, "nbas": nbas},
        )

    if nmat < MIN_SNAPSHOTS:
        raise InsufficientHistory(
            f"Need at least {MIN_SNAPSHOTS} snapshots (reference + 2 historical), got {nmat}",
            {"nmat": nmat},
        )

    for name, arr in (("cmat", cmat), ("smat", smat), ("hpos", hpos)):
        if not np.isfinite(arr).all():
            raise InputContractError(f"{name} contains non-finite values", {"tensor": name})

    return nbas, nocc, nmat, nqm


def check_time_indices(times: Sequence[float] | np.ndarray, nmat: int) -> np.ndarray:
    """Return *times* as an array after checking it tags ``nmat`` ordered snapshots."""

    t = np.asarray(times, dtype=np.float64).ravel()
    if t.size != nmat:
        raise SnapshotOrderError(
            f"Expected {nmat} time indices, got {t.size}",
            {"n_times": t.size, "nmat": nmat},
        )
    if not np.isfinite(t).all():
        raise SnapshotOrderError("Time indices must be finite")
    steps = np.diff(t)
    if np.any(steps <= 0):
        bad = int(np.argmax(steps <= 0)) + 1
        raise SnapshotOrderError(
            f"Time indices must be strictly increasing (snapshot {bad}: {t[bad - 1]} → {t[bad]})",
            {"snapshot": bad},
        )
    return t
