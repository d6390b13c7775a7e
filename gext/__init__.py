"""Grassmann extrapolation of SCF initial guesses.

This package builds an initial density matrix for a new molecular geometry by
extrapolating previously converged densities on the Grassmann manifold of
occupied-orbital subspaces, with coefficients fitted on Coulomb-matrix
descriptors of the geometries.

Key sub-modules:
    tril             – Packed lower-triangular storage of symmetric matrices
    orthonormalize   – S^(1/2) orthonormalisation of occupied orbitals
    grassmann        – Logarithm / exponential maps on Gr(nbas, nocc)
    descriptors      – Coulomb-matrix geometry fingerprints
    extrapolation    – Regularised least-squares coefficient fit
    reconstruct      – Density reconstruction and the full pipeline
    io               – Data sources and guess serialisation
    pyscf_interface  – Histories from PySCF runs, AO-basis guesses
"""

__all__ = [
    "__version__",
    "gext",
    "extrapolate",
]

__version__ = "0.1.0"

# noqa import positions kept intentionally

from . import config          # noqa: E402,F401
from . import errors          # noqa: E402,F401
from . import tril            # noqa: E402,F401
from . import orthonormalize  # noqa: E402,F401
from . import grassmann       # noqa: E402,F401
from . import descriptors     # noqa: E402,F401
from . import extrapolation   # noqa: E402,F401
from . import validation      # noqa: E402,F401
from . import diagnostics     # noqa: E402,F401
from . import io              # noqa: E402,F401
from . import reconstruct     # noqa: E402,F401
from .reconstruct import extrapolate, gext  # noqa: E402,F401

__all__.append("config")
__all__.append("errors")
__all__.append("tril")
__all__.append("orthonormalize")
__all__.append("grassmann")
__all__.append("descriptors")
__all__.append("extrapolation")
__all__.append("validation")
__all__.append("diagnostics")
__all__.append("io")
__all__.append("reconstruct")
