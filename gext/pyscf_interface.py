"""PySCF bridge: snapshot tensors from converged RHF runs, AO-basis guesses.

Typical use along a geometry trajectory::

    mfs = [scf.RHF(mol_k).run() for mol_k in previous_geometries]
    dm0 = extrapolated_dm(mfs, mol_next)
    scf.RHF(mol_next).kernel(dm0=dm0)

``mfs[0]`` serves as the manifold reference.  Following the positional
convention of the pipeline, geometry ``i`` pairs with density ``i+1``, so the
geometry tensor is built from ``mfs[1:]`` followed by *mol_new*.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, Tuple

import numpy as np
from pyscf import gto
from pyscf.scf import chkfile as scf_chkfile

from .geometry import geometry_from_mol
from .io import ArrayDataSource
from .orthonormalize import overlap_power
from .reconstruct import extrapolate
from .tril import pack, unpack

__all__ = [
    "occupied_orbitals",
    "snapshot_from_scf",
    "history_from_scf",
    "history_from_chkfiles",
    "ao_density",
    "extrapolated_dm",
]


def occupied_orbitals(mo_coeff: np.ndarray, mo_occ: np.ndarray) -> np.ndarray:
    """Return the occupied columns of a restricted ``mo_coeff``."""

    mo_coeff = np.asarray(mo_coeff)
    mo_occ = np.asarray(mo_occ)
    if mo_coeff.ndim != 2 or mo_occ.ndim != 1:
        raise ValueError("Only restricted (closed-shell) orbitals are supported")
    return np.asarray(mo_coeff[:, mo_occ > 0], dtype=np.float64)


def _snapshot(mol: gto.Mole, mo_coeff, mo_occ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    c_occ = occupied_orbitals(mo_coeff, mo_occ)
    s_packed = pack(mol.intor_symmetric("int1e_ovlp"))
    return c_occ, s_packed, geometry_from_mol(mol)


def snapshot_from_scf(mf) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(c_occ, packed_overlap, geometry)`` of a converged RHF object."""

    if not getattr(mf, "converged", False):
        raise RuntimeError("SCF object is not converged – cannot use it as history.")
    return _snapshot(mf.mol, mf.mo_coeff, mf.mo_occ)


def _assemble(
    snapshots: Sequence[Tuple[np.ndarray, np.ndarray, np.ndarray]],
    mol_new: gto.Mole,
) -> ArrayDataSource:
    cmat = np.stack([c for c, _, _ in snapshots], axis=2)
    smat = np.stack([s for _, s, _ in snapshots], axis=1)
    geoms = [g for _, _, g in snapshots[1:]] + [geometry_from_mol(mol_new)]
    hpos = np.stack(geoms, axis=2)
    return ArrayDataSource(cmat, smat, hpos)


def history_from_scf(mfs: Sequence, mol_new: gto.Mole) -> ArrayDataSource:
    """Build a data source from converged RHF objects and the next geometry."""

    return _assemble([snapshot_from_scf(mf) for mf in mfs], mol_new)


def history_from_chkfiles(paths: Iterable[str | Path], mol_new: gto.Mole) -> ArrayDataSource:
    """Build a data source from PySCF chkfiles (``scf/mo_coeff``, ``scf/mo_occ``)."""

    snapshots = []
    for path in paths:
        mol, rec = scf_chkfile.load_scf(str(path))
        snapshots.append(_snapshot(mol, rec["mo_coeff"], rec["mo_occ"]))
    return _assemble(snapshots, mol_new)


def ao_density(packed_density: np.ndarray, overlap: np.ndarray) -> np.ndarray:
    """Map an orthonormal-frame density back to the AO basis.

    ``P_ao = S^(-1/2) P S^(-1/2)`` so that ``Tr[P_ao S] = Tr[P] = 2 nocc``.
    """

    P = unpack(packed_density)
    X = overlap_power(overlap, -0.5)
    return X @ P @ X


def extrapolated_dm(
    mfs: Sequence,
    mol_new: gto.Mole,
    *,
    eps: float | None = None,
    verbose: bool | None = None,
) -> np.ndarray:
    """Return an AO-basis initial guess for *mol_new* from the RHF history *mfs*."""

    source = history_from_scf(mfs, mol_new)
    result = extrapolate(
        source.orbital_coefficients(),
        source.packed_overlaps(),
        source.geometries(),
        eps=eps,
        verbose=verbose,
    )
    return ao_density(result.guess, mol_new.intor_symmetric("int1e_ovlp"))
