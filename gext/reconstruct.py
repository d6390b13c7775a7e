"""Density reconstruction and the full extrapolation pipeline.

Workflow of :func:`extrapolate`:

1.  Validate the input tensors (:func:`validation.check_inputs`).
2.  Orthonormalise every snapshot, ``C_i = S_i^(1/2) c_i``.
3.  Map all snapshots to the tangent space at ``C_0`` – :func:`grassmann.batch_log`.
4.  Fit coefficients ``α`` of the new Coulomb descriptor against the
    historical ones – :func:`extrapolation.fit_coefficients`.
5.  Combine the historical tangents with ``α``, retract with
    :func:`grassmann.exp` and build ``P = 2 C Cᵗ``.

The returned density lives in the orthonormalised (``S^(1/2)``) frame, which
is also the frame of the packed output vector.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from . import config as _cfg
from .descriptors import build_all
from .diagnostics import idempotency_residual, trace_error
from .errors import InputShapeMismatch
from .extrapolation import fit_coefficients
from .grassmann import batch_log, exp
from .io import DataSource
from .orthonormalize import orthonormalize_all
from .tril import pack
from .validation import check_inputs, check_time_indices

__all__ = [
    "ExtrapolationResult",
    "combine_tangents",
    "reconstruct_density",
    "extrapolate",
    "gext",
]


@dataclass
class ExtrapolationResult:
    """Everything produced along the way to the packed guess."""

    guess: np.ndarray  # packed lower triangle of density
    density: np.ndarray  # nbas × nbas, 2 C Cᵗ
    basis: np.ndarray  # nbas × nocc retracted orbitals
    tangent: np.ndarray  # nbas × nocc extrapolated tangent
    coefficients: np.ndarray  # nmat - 1
    descriptors: np.ndarray  # nmat × nqm(nqm+1)/2
    tangents: np.ndarray  # nbas × nocc × nmat

    @property
    def nocc(self) -> int:
        return self.basis.shape[1]


def combine_tangents(tangents: np.ndarray, coefficients: np.ndarray) -> np.ndarray:
    """Return ``Σ_i α_i Γ_{i+1}``; snapshot 0 (the reference) gets no weight."""

    coefficients = np.asarray(coefficients, dtype=np.float64).ravel()
    n_hist = tangents.shape[2] - 1
    if coefficients.size != n_hist:
        raise InputShapeMismatch(
            f"{coefficients.size} coefficients for {n_hist} historical tangents",
            {"n_coefficients": coefficients.size, "n_history": n_hist},
        )
    return np.tensordot(tangents[:, :, 1:], coefficients, axes=([2], [0]))


def reconstruct_density(
    basis: np.ndarray,
    coefficients: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Extrapolate the orthonormal snapshots in *basis* with *coefficients*.

    Parameters
    ----------
    basis
        Orthonormal bases ``nbas × nocc × nmat``; snapshot 0 is the reference.
    coefficients
        ``nmat − 1`` weights of the historical snapshots ``1 … nmat−1``.

    Returns
    -------
    guess, density, guess_basis, guess_tangent, tangents
    """

    ref = basis[:, :, 0]
    tangents = batch_log(ref, basis)
    guess_tangent = combine_tangents(tangents, coefficients)
    guess_basis = exp(ref, guess_tangent)
    density = 2.0 * guess_basis @ guess_basis.T
    # exact symmetry for the packed output
    density = 0.5 * (density + density.T)
    return pack(density), density, guess_basis, guess_tangent, tangents


def extrapolate(
    cmat: np.ndarray,
    smat: np.ndarray,
    hpos: np.ndarray,
    *,
    eps: float | None = None,
    times: np.ndarray | None = None,
    verbose: bool | None = None,
) -> ExtrapolationResult:
    """Run the full extrapolation on raw tensors.

    Parameters
    ----------
    cmat
        Occupied MO coefficients ``nbas × nocc × nmat``.
    smat
        Packed AO overlaps ``nbas(nbas+1)/2 × nmat``.
    hpos
        Charges and positions ``4 × nqm × nmat``; the last geometry is the
        one to extrapolate for.
    eps
        Regularisation ``ε`` (config ``regularization`` if None).
    times
        Optional snapshot tags, checked for strict ordering.
    verbose
        Print progress lines (config ``verbose`` if None).
    """

    if verbose is None:
        verbose = _cfg.get_param("verbose")

    cmat = np.asarray(cmat, dtype=np.float64)
    smat = np.asarray(smat, dtype=np.float64)
    hpos = np.asarray(hpos, dtype=np.float64)

    nbas, nocc, nmat, nqm = check_inputs(cmat, smat, hpos)
    if times is not None:
        check_time_indices(times, nmat)
    if verbose:
        print(f"[gext] nbas = {nbas}  nocc = {nocc}  nmat = {nmat}  nqm = {nqm}")

    C = orthonormalize_all(smat, cmat)

    descriptors = build_all(hpos)
    alpha = fit_coefficients(descriptors[:-1], descriptors[-1], eps=eps)
    if verbose:
        print("[gext] α = " + np.array2string(alpha, precision=6, separator=", "))

    guess, density, basis, tangent, tangents = reconstruct_density(C, alpha)

    if verbose:
        print(
            f"[gext] idempotency residual = {idempotency_residual(density):.2e}  "
            f"|Tr P − 2 nocc| = {trace_error(density, nocc):.2e}"
        )

    return ExtrapolationResult(
        guess=guess,
        density=density,
        basis=basis,
        tangent=tangent,
        coefficients=alpha,
        descriptors=descriptors,
        tangents=tangents,
    )


def gext(
    source: DataSource,
    *,
    eps: float | None = None,
    verbose: bool | None = None,
) -> np.ndarray:
    """Return the packed extrapolated density for the tensors of *source*."""

    result = extrapolate(
        source.orbital_coefficients(),
        source.packed_overlaps(),
        source.geometries(),
        eps=eps,
        times=source.time_indices(),
        verbose=verbose,
    )
    return result.guess
