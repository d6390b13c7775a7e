"""Geometry utilities.

Helpers to construct simple PySCF molecules for trajectories and to convert a
``gto.Mole`` into the ``4 × nqm`` charge/position block consumed by
:mod:`gext.descriptors`.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from pyscf import gto

__all__ = ["build_chain", "geometry_from_mol", "displace_mol"]


def build_chain(
    symbol: str = "H",
    n_atoms: int = 2,
    spacing: float = 0.74,
    basis: str | dict = "sto-3g",
    unit: str = "Angstrom",
) -> Tuple[gto.Mole, np.ndarray]:
    """Construct a linear chain of *n_atoms* identical atoms along the *z*-axis.

    Parameters
    ----------
    symbol
        Element symbol understood by PySCF.
    n_atoms
        Number of atoms; the total electron count must be even (closed shell).
    spacing
        Nearest-neighbour distance in *unit*.
    basis
        Basis-set descriptor understood by PySCF.
    unit
        ``"Angstrom"`` (default) or ``"Bohr"``.

    Returns
    -------
    mol
        A **built** ``pyscf.gto.Mole``.
    coords
        ``(n_atoms, 3)`` nuclear positions in **Bohr**.
    """

    if (gto.charge(symbol) * n_atoms) % 2 != 0:
        raise ValueError("Closed-shell extrapolation needs an even number of electrons.")

    coords = np.zeros((n_atoms, 3))
    coords[:, 2] = np.arange(n_atoms) * spacing

    mol = gto.Mole()
    mol.atom = [[symbol, *coord] for coord in coords]
    mol.unit = unit
    mol.basis = basis
    mol.charge = 0
    mol.spin = 0
    mol.build(verbose=0)

    return mol, np.asarray(mol.atom_coords(unit="Bohr"))


def geometry_from_mol(mol: gto.Mole) -> np.ndarray:
    """Return the ``4 × nqm`` block: nuclear charges then x, y, z in Bohr."""

    charges = np.asarray(mol.atom_charges(), dtype=np.float64)
    coords = np.asarray(mol.atom_coords(unit="Bohr"), dtype=np.float64)
    return np.vstack([charges, coords.T])


def displace_mol(mol: gto.Mole, displacement: np.ndarray) -> gto.Mole:
    """Return a copy of *mol* with atoms moved by *displacement* (``nqm × 3``, Bohr)."""

    coords = mol.atom_coords(unit="Bohr") + np.asarray(displacement, dtype=np.float64)
    return mol.set_geom_(coords, unit="Bohr", inplace=False)
