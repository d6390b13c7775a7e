"""Data sources for the input tensors and serialisation of the guess.

The pipeline never touches storage itself: it asks a :class:`DataSource` for
the three tensors and hands the packed guess to :func:`write_guess`.

Tensor contracts
----------------
orbital_coefficients()  – ``nbas × nocc × nmat``
packed_overlaps()       – ``nbas(nbas+1)/2 × nmat``
geometries()            – ``4 × nqm × nmat`` (row 0 charge, rows 1–3 position)
time_indices()          – ``nmat`` strictly increasing tags, or ``None``
"""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Sequence

import numpy as np

from . import config as _cfg

__all__ = [
    "DataSource",
    "ArrayDataSource",
    "FileDataSource",
    "MIN_PRECISION",
    "format_guess",
    "write_guess",
    "read_guess",
]

# 16 significant digits in scientific notation
MIN_PRECISION = 15


class DataSource(abc.ABC):
    """Provider of the three snapshot tensors."""

    @abc.abstractmethod
    def orbital_coefficients(self) -> np.ndarray:
        """Return occupied MO coefficients, ``nbas × nocc × nmat``."""

    @abc.abstractmethod
    def packed_overlaps(self) -> np.ndarray:
        """Return packed AO overlaps, ``nbas(nbas+1)/2 × nmat``."""

    @abc.abstractmethod
    def geometries(self) -> np.ndarray:
        """Return charges and positions, ``4 × nqm × nmat``."""

    def time_indices(self) -> np.ndarray | None:
        """Return explicit snapshot tags (``None`` = trust array order)."""
        return None


class ArrayDataSource(DataSource):
    """In-memory tensors, e.g. synthetic data in tests or PySCF results."""

    def __init__(
        self,
        cmat: np.ndarray,
        smat: np.ndarray,
        hpos: np.ndarray,
        times: Sequence[float] | np.ndarray | None = None,
    ):
        self._cmat = np.asarray(cmat, dtype=np.float64)
        self._smat = np.asarray(smat, dtype=np.float64)
        self._hpos = np.asarray(hpos, dtype=np.float64)
        self._times = None if times is None else np.asarray(times, dtype=np.float64)

    def orbital_coefficients(self) -> np.ndarray:
        return self._cmat

    def packed_overlaps(self) -> np.ndarray:
        return self._smat

    def geometries(self) -> np.ndarray:
        return self._hpos

    def time_indices(self) -> np.ndarray | None:
        return self._times

    def save(self, directory: str | Path) -> Path:
        """Write the tensors as ``.npy`` files readable by :class:`FileDataSource`."""

        out = Path(directory).expanduser().absolute()
        out.mkdir(parents=True, exist_ok=True)
        np.save(out / "cmat.npy", self._cmat)
        np.save(out / "smat.npy", self._smat)
        np.save(out / "hpos.npy", self._hpos)
        if self._times is not None:
            np.save(out / "times.npy", self._times)
        return out


class FileDataSource(DataSource):
    """Tensors stored as ``cmat.npy``, ``smat.npy``, ``hpos.npy`` in *directory*.

    An optional ``times.npy`` provides the snapshot tags.  Files are read
    lazily on each call so the source can be created before the data exists.
    """

    def __init__(
        self,
        directory: str | Path,
        *,
        cmat: str = "cmat.npy",
        smat: str = "smat.npy",
        hpos: str = "hpos.npy",
        times: str = "times.npy",
    ):
        self.directory = Path(directory).expanduser()
        self._names = {"cmat": cmat, "smat": smat, "hpos": hpos, "times": times}

    def _load(self, key: str) -> np.ndarray:
        path = self.directory / self._names[key]
        if not path.exists():
            raise FileNotFoundError(f"{key} tensor not found at {path}")
        return np.asarray(np.load(path), dtype=np.float64)

    def orbital_coefficients(self) -> np.ndarray:
        return self._load("cmat")

    def packed_overlaps(self) -> np.ndarray:
        return self._load("smat")

    def geometries(self) -> np.ndarray:
        return self._load("hpos")

    def time_indices(self) -> np.ndarray | None:
        if not (self.directory / self._names["times"]).exists():
            return None
        return self._load("times")


# -----------------------------------------------------------------------------
# Guess serialisation
# -----------------------------------------------------------------------------


def format_guess(vector: np.ndarray, *, precision: int | None = None) -> str:
    """Return *vector* as one ``%{w}.{precision}e`` number per line.

    *precision* counts digits after the decimal point (config
    ``output_precision`` if None, 16 → ``%24.16e``).  Values below
    :data:`MIN_PRECISION` cannot be reread exactly and are rejected.
    """

    if precision is None:
        precision = _cfg.get_param("output_precision")
    if precision < MIN_PRECISION:
        raise ValueError(
            f"precision must be ≥ {MIN_PRECISION} digits for an exact restart (got {precision})"
        )

    width = precision + 8
    values = np.asarray(vector, dtype=np.float64).ravel()
    return "".join(f"{x:{width}.{precision}e}\n" for x in values)


def write_guess(
    path: str | Path,
    vector: np.ndarray,
    *,
    precision: int | None = None,
) -> Path:
    """Write the packed guess column to *path* and return the ``Path`` written."""

    out = Path(path).expanduser().absolute()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(format_guess(vector, precision=precision))
    return out


def read_guess(path: str | Path) -> np.ndarray:
    """Read a guess column written by :func:`write_guess`."""

    return np.atleast_1d(np.loadtxt(Path(path).expanduser(), dtype=np.float64))
