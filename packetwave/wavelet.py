"""
Wavelet filter sets

A Wavelet bundles the four filters used by the packet trees:

    dec_lo, dec_hi : lowpass / highpass decomposition filters
    rec_lo, rec_hi : lowpass / highpass reconstruction filters

Well-known orthogonal families are loaded from PyWavelets. The supported
parameter ranges are restricted to filters long enough (L >= 3) for
reconstruction:

    Daubechies  db2  .. db10
    Symlet      sym2 .. sym5
    Coiflet     coif1 .. coif5
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np
import pywt


class WaveletType(Enum):
    """Well-known wavelet families, valued by their PyWavelets short name."""
    DAUBECHIES = "db"
    SYMLET = "sym"
    COIFLET = "coif"


_P_RANGE = {
    WaveletType.DAUBECHIES: (2, 10),
    WaveletType.SYMLET: (2, 5),
    WaveletType.COIFLET: (1, 5),
}


def _as_filter(values, name: str) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    if arr.ndim != 1 or arr.size == 0:
        raise ValueError(f"{name} must be a non-empty 1-D sequence, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Wavelet:
    """
    Immutable set of four equal-length filters.

    The filters are copied on construction and made read-only; trees only
    ever reference them.

    Example
    -------
    >>> w = Wavelet.from_name("db4")
    >>> w.length
    8
    """
    dec_lo: np.ndarray
    dec_hi: np.ndarray
    rec_lo: np.ndarray
    rec_hi: np.ndarray
    name: Optional[str] = None

    def __post_init__(self):
        for field in ("dec_lo", "dec_hi", "rec_lo", "rec_hi"):
            object.__setattr__(self, field, _as_filter(getattr(self, field), field))

        lengths = {len(f) for f in self.filter_bank}
        if len(lengths) != 1:
            raise ValueError(f"All four filters must have the same length, got {self.lengths}")

    @property
    def length(self) -> int:
        """Number of coefficients in each filter."""
        return len(self.dec_lo)

    @property
    def lengths(self) -> Tuple[int, int, int, int]:
        return tuple(len(f) for f in self.filter_bank)

    @property
    def filter_bank(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return self.dec_lo, self.dec_hi, self.rec_lo, self.rec_hi

    @classmethod
    def from_name(cls, name: str) -> "Wavelet":
        """Load a wavelet by its PyWavelets name, e.g. "db4" or "sym3"."""
        try:
            w = pywt.Wavelet(name)
        except ValueError as e:
            raise ValueError(f"Unknown wavelet: {name}") from e
        if not w.orthogonal:
            raise ValueError(f"Wavelet {name} is not orthogonal")
        dec_lo, dec_hi, rec_lo, rec_hi = w.filter_bank
        return cls(dec_lo, dec_hi, rec_lo, rec_hi, name=name)

    def __repr__(self):
        label = self.name or "custom"
        return f"Wavelet({label}, length={self.length})"


def _as_wavelet_type(wavelet_type: Union[WaveletType, str]) -> WaveletType:
    if isinstance(wavelet_type, WaveletType):
        return wavelet_type
    try:
        return WaveletType(wavelet_type)
    except ValueError:
        raise ValueError(f"Unknown wavelet type: {wavelet_type}")


def get_wavelet_minimum_p(wavelet_type: Union[WaveletType, str]) -> int:
    """Smallest supported parameter for a wavelet family."""
    return _P_RANGE[_as_wavelet_type(wavelet_type)][0]


def get_wavelet_maximum_p(wavelet_type: Union[WaveletType, str]) -> int:
    """Largest supported parameter for a wavelet family."""
    return _P_RANGE[_as_wavelet_type(wavelet_type)][1]


def get_wavelet(wavelet_type: Union[WaveletType, str], p: int) -> Wavelet:
    """
    Load the filters of a well-known wavelet.

    Parameters
    ----------
    wavelet_type : WaveletType or str
        Wavelet family ("db", "sym" or "coif")
    p : int
        Family parameter, within
        [get_wavelet_minimum_p(type), get_wavelet_maximum_p(type)]

    Returns
    -------
    wavelet : Wavelet
    """
    wavelet_type = _as_wavelet_type(wavelet_type)
    p_min, p_max = _P_RANGE[wavelet_type]
    if not p_min <= p <= p_max:
        raise ValueError(
            f"{wavelet_type.name.title()} parameter must be in [{p_min}, {p_max}], got {p}"
        )
    return Wavelet.from_name(f"{wavelet_type.value}{p}")
