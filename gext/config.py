"""Project-wide default parameters.

A minimal *runtime* configuration mechanism using a plain dictionary.  It
centralises the numerical knobs of the extrapolation so users can override
them programmatically without editing each function call.  Every function that
reads a parameter also accepts an explicit keyword; ``None`` falls back to the
value stored here.

Example
-------
>>> import gext
>>> gext.config.set_param("regularization", 1e-4)
>>> guess = gext.reconstruct.gext(source)  # uses ε = 1e-4
"""

from __future__ import annotations

from typing import Any, Dict

__all__ = ["get_param", "set_param", "reset_params"]

_factory: Dict[str, Any] = {
    # Tikhonov weight ε of the descriptor fit
    "regularization": 1e-5,
    # Relative singular-value cutoff of the pseudo-inverse
    "pinv_rcond": 1e-15,
    # Relative eigenvalue floor for the overlap matrix
    "overlap_eig_tol": 1e-12,
    # cond(Z) above which the Grassmann logarithm gives up
    "subspace_cond_max": 1e12,
    # Digits after the decimal point of the written guess (%24.16e)
    "output_precision": 16,
    # Progress printing of the pipeline driver
    "verbose": False,
}

_defaults: Dict[str, Any] = dict(_factory)


def get_param(name: str):
    """Return current value of *name* (raises *KeyError* if unknown)."""
    return _defaults[name]


def set_param(name: str, value: Any) -> None:
    """Override parameter *name* at runtime (must exist)."""
    if name not in _defaults:
        raise KeyError(f"Unknown parameter '{name}'")
    _defaults[name] = value


def reset_params() -> None:
    """Restore every parameter to its factory value."""
    _defaults.clear()
    _defaults.update(_factory)
