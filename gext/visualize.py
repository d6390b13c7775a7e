"""Visualization utilities for extrapolation runs.

Matplotlib-based helper functions so users can quickly inspect

* the fitted extrapolation coefficients α;
* pairwise distances between Coulomb descriptors of the snapshots;
* principal angles between each snapshot and the reference subspace.

All routines return the created *matplotlib* figure to allow further tweaking
or saving by callers.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from .grassmann import principal_angles

__all__ = ["plot_coefficients", "plot_descriptor_similarity", "plot_principal_angles"]


def _finish(fig, save: str | Path | None):
    if save:
        fig.savefig(Path(save), dpi=150)
        plt.close(fig)
    else:
        plt.show(block=False)
    return fig


def plot_coefficients(coefficients: np.ndarray, *, save: str | Path | None = None):
    """Bar chart of α_i against historical snapshot index (1 … nmat−1)."""

    alpha = np.asarray(coefficients, dtype=float).ravel()
    idx = np.arange(1, alpha.size + 1)

    fig, ax = plt.subplots(figsize=(5, 3))
    ax.bar(idx, alpha, color="tab:blue")
    ax.axhline(0.0, color="k", lw=0.8)
    ax.set_xlabel("Historical snapshot")
    ax.set_ylabel("α")
    ax.set_xticks(idx)
    ax.grid(True, alpha=0.3)
    return _finish(fig, save)


def plot_descriptor_similarity(descriptors: np.ndarray, *, save: str | Path | None = None):
    """Heat-map of Euclidean distances between descriptor rows.

    Parameters
    ----------
    descriptors
        ``nmat × L`` array as returned by :func:`descriptors.build_all`.
    save
        Optional path; if provided, figure is saved (PNG) instead of shown.
    """

    D = np.asarray(descriptors, dtype=float)
    dist = np.linalg.norm(D[:, None, :] - D[None, :, :], axis=2)

    fig, ax = plt.subplots(figsize=(4, 4), constrained_layout=True)
    im = ax.imshow(dist, cmap="viridis", origin="lower")
    ax.set_title("|d_i − d_j|")
    ax.set_xlabel("Snapshot")
    ax.set_ylabel("Snapshot")
    plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    return _finish(fig, save)


def plot_principal_angles(basis: np.ndarray, *, save: str | Path | None = None):
    """Largest principal angle between snapshot ``i`` and snapshot 0.

    *basis* is the orthonormalised ``nbas × nocc × nmat`` tensor.
    """

    ref = basis[:, :, 0]
    theta = [float(principal_angles(ref, basis[:, :, i]).max()) for i in range(basis.shape[2])]

    fig, ax = plt.subplots(figsize=(5, 3))
    ax.plot(np.arange(len(theta)), theta, marker="o")
    ax.set_xlabel("Snapshot")
    ax.set_ylabel("max θ (rad)")
    ax.grid(True, alpha=0.3)
    return _finish(fig, save)
