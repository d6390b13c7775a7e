"""Smoke tests of the plotting helpers (Agg backend)."""

import numpy as np

from gext import visualize
from gext.orthonormalize import orthonormalize_all
from gext.reconstruct import extrapolate


def test_plots_are_saved(tmp_path, trajectory):
    result = extrapolate(trajectory["cmat"], trajectory["smat"], trajectory["hpos"])
    basis = orthonormalize_all(trajectory["smat"], trajectory["cmat"])

    fig = visualize.plot_coefficients(result.coefficients, save=tmp_path / "alpha.png")
    assert len(fig.axes[0].patches) == result.coefficients.size
    visualize.plot_descriptor_similarity(result.descriptors, save=tmp_path / "desc.png")
    fig = visualize.plot_principal_angles(basis, save=tmp_path / "angles.png")

    theta = fig.axes[0].lines[0].get_ydata()
    assert theta[0] == 0.0 or abs(theta[0]) < 1e-6
    assert np.all(np.asarray(theta) >= 0.0)
    for name in ("alpha.png", "desc.png", "angles.png"):
        assert (tmp_path / name).stat().st_size > 0
