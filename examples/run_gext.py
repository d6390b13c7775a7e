"""Grassmann extrapolation of an SCF initial guess.

Two modes are available:

* **file mode** – read ``cmat.npy``, ``smat.npy``, ``hpos.npy`` (and optional
  ``times.npy``) from ``--data`` and write the packed guess column to
  ``--out``;
* **demo mode** (``--demo``) – run restricted Hartree–Fock along a stretched
  H2 trajectory with PySCF, extrapolate the density for the next geometry and
  compare the number of SCF cycles against the default MINAO guess.

Usage::

    python examples/run_gext.py --data run_dir --out run_dir/guess
    python examples/run_gext.py --demo --n-history 4 --step 0.02
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

import numpy as np
from pyscf import scf

import gext as gx
from gext import diagnostics, geometry, io, pyscf_interface, visualize

# -----------------------------------------------------------------------------
# Command-line interface
# -----------------------------------------------------------------------------

def _parse_cli() -> argparse.Namespace:
    p = argparse.ArgumentParser(formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p.add_argument("--data", type=Path, default=Path("."), help="Directory holding cmat/smat/hpos .npy tensors.")
    p.add_argument("--out", type=Path, default=Path("guess"), help="Output file for the packed guess.")
    p.add_argument("--eps", type=float, default=None, help="Regularisation ε (default: config value 1e-5).")
    p.add_argument("--precision", type=int, default=None, help="Digits after the decimal point in the output.")
    p.add_argument("--demo", action="store_true", help="Run the PySCF H2 trajectory demo instead of file mode.")
    p.add_argument("--n-history", type=int, default=4, help="Number of converged geometries in the demo history.")
    p.add_argument("--r0", type=float, default=0.74, help="Initial H–H distance (Å) of the demo trajectory.")
    p.add_argument("--step", type=float, default=0.02, help="Bond stretch per demo step (Å).")
    p.add_argument("--basis", type=str, default="cc-pvdz", help="Basis set of the demo.")
    p.add_argument("--plot", type=Path, default=None, help="Directory to save diagnostic plots into.")
    p.add_argument("-v", "--verbose", action="store_true", help="Print pipeline progress.")
    return p.parse_args()


# -----------------------------------------------------------------------------
# Modes
# -----------------------------------------------------------------------------

def run_files(args: argparse.Namespace) -> None:
    source = io.FileDataSource(args.data)
    result = gx.extrapolate(
        source.orbital_coefficients(),
        source.packed_overlaps(),
        source.geometries(),
        eps=args.eps,
        times=source.time_indices(),
        verbose=args.verbose,
    )
    path = io.write_guess(args.out, result.guess, precision=args.precision)
    print(f"[run_gext] Guess ({result.guess.size} values) written to {path}")

    if args.plot is not None:
        _save_plots(args.plot, result)


def run_demo(args: argparse.Namespace) -> None:
    distances = args.r0 + args.step * np.arange(args.n_history + 2)

    mfs = []
    for r in distances[:-1]:
        mol, _ = geometry.build_chain("H", 2, spacing=r, basis=args.basis)
        mf = scf.RHF(mol)
        mf.verbose = 0
        mf.kernel()
        mfs.append(mf)
        print(f"[history] r = {r:.3f} Å  E = {mf.e_tot:.10f}")

    mol_new, _ = geometry.build_chain("H", 2, spacing=distances[-1], basis=args.basis)
    dm0 = pyscf_interface.extrapolated_dm(mfs, mol_new, eps=args.eps, verbose=args.verbose)

    S = mol_new.intor_symmetric("int1e_ovlp")
    print(f"[run_gext] Tr[P S] = {np.trace(dm0 @ S):.12f}  (expected {mol_new.nelectron})")

    mf_ref = scf.RHF(mol_new)
    mf_ref.verbose = 0
    mf_ref.kernel()

    mf_ext = scf.RHF(mol_new)
    mf_ext.verbose = 0
    mf_ext.kernel(dm0=dm0)

    print(f"[run_gext] MINAO guess   : E = {mf_ref.e_tot:.10f}  cycles = {getattr(mf_ref, 'cycles', '?')}")
    print(f"[run_gext] Grassmann ext.: E = {mf_ext.e_tot:.10f}  cycles = {getattr(mf_ext, 'cycles', '?')}")

    if args.plot is not None:
        source = pyscf_interface.history_from_scf(mfs, mol_new)
        result = gx.extrapolate(
            source.orbital_coefficients(), source.packed_overlaps(), source.geometries(), eps=args.eps
        )
        _save_plots(args.plot, result)


def _save_plots(out_dir: Path, result) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    visualize.plot_coefficients(result.coefficients, save=out_dir / "coefficients.png")
    visualize.plot_descriptor_similarity(result.descriptors, save=out_dir / "descriptors.png")
    print(f"[run_gext] Idempotent: {diagnostics.validate_density(result.density, result.nocc)}")
    print(f"[run_gext] Plots saved to {out_dir}")


def main() -> None:
    args = _parse_cli()
    if args.demo:
        run_demo(args)
    else:
        run_files(args)


if __name__ == "__main__":
    try:
        main()
    except gx.errors.GExtError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
