"""Unit tests for the regularised least-squares coefficient fit."""

import numpy as np
import pytest

from gext import config
from gext.errors import DescriptorLengthMismatch, ExtrapolationSingular, InsufficientHistory
from gext.extrapolation import design_matrix, fit_coefficients, least_squares_coefficients


@pytest.fixture
def history(rng):
    P = rng.standard_normal((3, 6))
    test = rng.standard_normal(6)
    return P, test


def test_matches_explicit_pseudo_inverse(history):
    P, test = history
    eps = 1e-2
    A = np.hstack([P, eps * np.eye(3)])
    t = np.concatenate([test, np.zeros(3)])
    np.testing.assert_allclose(fit_coefficients(P, test, eps=eps), t @ np.linalg.pinv(A), atol=1e-12)


def test_matches_ridge_normal_equations(history):
    P, test = history
    eps = 0.3
    expected = np.linalg.solve(P @ P.T + eps**2 * np.eye(3), P @ test)
    np.testing.assert_allclose(fit_coefficients(P, test, eps=eps), expected, atol=1e-10)


def test_small_eps_recovers_least_squares(history):
    P, test = history
    expected = np.linalg.lstsq(P.T, test, rcond=None)[0]
    np.testing.assert_allclose(fit_coefficients(P, test, eps=1e-9), expected, atol=1e-7)
    np.testing.assert_allclose(least_squares_coefficients(P, test), expected, atol=1e-10)


def test_large_eps_drives_coefficients_to_zero(history):
    P, test = history
    norms = [np.linalg.norm(fit_coefficients(P, test, eps=e)) for e in (1e0, 1e2, 1e4, 1e6)]
    assert all(a > b for a, b in zip(norms, norms[1:]))
    assert norms[-1] < 1e-9


def test_exact_history_point_is_selected(history):
    P, _ = history
    alpha = least_squares_coefficients(P, P[1])
    np.testing.assert_allclose(alpha, [0.0, 1.0, 0.0], atol=1e-10)


def test_collinear_history_stays_bounded(rng):
    d = rng.standard_normal(6)
    P = np.vstack([d, d + 1e-13 * rng.standard_normal(6)])
    alpha = fit_coefficients(P, d, eps=1e-5)
    assert np.all(np.isfinite(alpha))
    assert np.abs(alpha).max() < 10.0
    np.testing.assert_allclose(alpha @ P, d, atol=1e-6)


def test_default_eps_comes_from_config(history):
    P, test = history
    config.set_param("regularization", 0.5)
    np.testing.assert_allclose(fit_coefficients(P, test), fit_coefficients(P, test, eps=0.5))


def test_list_of_rows_is_accepted(history):
    P, test = history
    np.testing.assert_allclose(fit_coefficients(list(P), test), fit_coefficients(P, test))


def test_empty_history():
    with pytest.raises(InsufficientHistory):
        fit_coefficients([], np.ones(3))


def test_ragged_history():
    with pytest.raises(DescriptorLengthMismatch):
        design_matrix([np.ones(3), np.ones(6)])


def test_target_length_mismatch(history):
    P, _ = history
    with pytest.raises(DescriptorLengthMismatch):
        fit_coefficients(P, np.ones(3))


def test_all_zero_descriptors_without_regularisation():
    with pytest.raises(ExtrapolationSingular):
        fit_coefficients(np.zeros((2, 3)), np.zeros(3), eps=0.0)


def test_non_finite_descriptors():
    P = np.ones((2, 3))
    P[0, 1] = np.nan
    with pytest.raises(ExtrapolationSingular):
        fit_coefficients(P, np.ones(3))


def test_negative_eps():
    with pytest.raises(ValueError):
        fit_coefficients(np.eye(2), np.ones(2), eps=-1.0)
