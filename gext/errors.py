"""Exception hierarchy for the extrapolation pipeline.

Two families are distinguished:

* :class:`InputContractError` – malformed or inconsistent input tensors.  These
  are detected before any linear algebra is performed.
* :class:`NumericalError` – a genuine mathematical breakdown (non-positive
  overlap, subspaces at the cut locus, coinciding atoms, failed SVD).

Both are fatal; nothing in :mod:`gext` retries on them.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

__all__ = [
    "GExtError",
    "InputContractError",
    "InputShapeMismatch",
    "InvalidPackedLength",
    "InsufficientHistory",
    "DescriptorLengthMismatch",
    "SnapshotOrderError",
    "NumericalError",
    "NonPositiveDefiniteOverlap",
    "SingularSubspaceOverlap",
    "DegenerateAtomPositions",
    "ExtrapolationSingular",
]


class GExtError(Exception):
    """Base class of all errors raised by :mod:`gext`."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# -----------------------------------------------------------------------------
# Input contract violations
# -----------------------------------------------------------------------------


class InputContractError(GExtError, ValueError):
    """Input tensors violate the shape/ordering contract."""


class InputShapeMismatch(InputContractError):
    """Dimensions of the input tensors disagree (e.g. different ``nmat``)."""


class InvalidPackedLength(InputContractError):
    """A packed lower-triangular vector length is not a triangular number."""


class InsufficientHistory(InputContractError):
    """Too few snapshots to fit extrapolation coefficients."""


class DescriptorLengthMismatch(InputContractError):
    """Historical and target descriptors have different lengths."""


class SnapshotOrderError(InputContractError):
    """Explicit snapshot time tags are missing, duplicated or out of order."""


# -----------------------------------------------------------------------------
# Numerical ill-conditioning
# -----------------------------------------------------------------------------


class NumericalError(GExtError, np.linalg.LinAlgError):
    """Linear-algebra breakdown caused by the data, not by a transient state."""


class NonPositiveDefiniteOverlap(NumericalError):
    """Overlap matrix is not symmetric positive-definite."""


class SingularSubspaceOverlap(NumericalError):
    """Subspace overlap ``Z`` is singular: the point lies on the cut locus."""


class DegenerateAtomPositions(NumericalError):
    """Two distinct atoms share the same position."""


class ExtrapolationSingular(NumericalError):
    """Regularised least-squares system could not be solved."""
