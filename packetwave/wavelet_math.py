"""
Wavelet Math: padding, convolution and dyadic resampling

The narrow set of numeric primitives needed to decompose and reconstruct
the nodes of a wavelet packet tree. No tree knowledge lives here.

Theory:
    One analysis step of a two-channel filter bank is

        a = ↓₂( pad(x) * h )      (approximation)
        d = ↓₂( pad(x) * g )      (details)

    and one synthesis step is

        x ≈ crop( pad(↑₂ a) * h̃ )  +  crop( pad(↑₂ d) * g̃ )

    The padding width (L − 1), the parity kept by ↓₂ / filled by ↑₂ and the
    crop offset (L, or L − 2 for odd parity) must agree exactly for the
    round trip to be lossless.
"""

from enum import Enum
from typing import Tuple, Union

import numpy as np

# Try torch import for the optional convolution backend
try:
    import torch
    import torch.nn.functional as F
    HAS_TORCH = True
except ImportError:
    HAS_TORCH = False


class DyadicMode(Enum):
    """Which parity survives downsampling (or receives zeros when upsampling)."""
    EVEN = "even"
    ODD = "odd"


class PaddingMode(Enum):
    """How signal edges are extended before filtering."""
    ZEROES = "zeroes"
    SYMMETRIC = "symmetric"


def _as_mode(value, enum_type):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError:
        choices = [m.value for m in enum_type]
        raise ValueError(f"Unknown {enum_type.__name__}: {value!r} (expected one of {choices})")


def as_dyadic_mode(value: Union[DyadicMode, str]) -> DyadicMode:
    """Coerce a DyadicMode or its string value."""
    return _as_mode(value, DyadicMode)


def as_padding_mode(value: Union[PaddingMode, str]) -> PaddingMode:
    """Coerce a PaddingMode or its string value."""
    return _as_mode(value, PaddingMode)


def _as_signal(data, name: str = "data") -> np.ndarray:
    arr = np.asarray(data, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D, got shape {arr.shape}")
    return arr


def pad(
    data: np.ndarray,
    pad_left: int,
    pad_right: int,
    mode: Union[PaddingMode, str] = PaddingMode.ZEROES,
) -> np.ndarray:
    """
    Extend a signal on the left and right.

    Parameters
    ----------
    data : ndarray, shape (n,)
        Signal to extend
    pad_left, pad_right : int
        Number of elements inserted before / after data. Can be zero.
    mode : PaddingMode
        ZEROES inserts zeros. SYMMETRIC mirrors data around its first and
        last element; positions beyond the mirror image repeat the far
        boundary element.

    Returns
    -------
    extended : ndarray, shape (n + pad_left + pad_right,)

    Examples
    --------
    >>> pad([1, 2, 3], 3, 3, PaddingMode.SYMMETRIC)
    array([3., 3., 2., 1., 2., 3., 2., 1., 1.])
    """
    data = _as_signal(data)
    mode = as_padding_mode(mode)
    if pad_left < 0 or pad_right < 0:
        raise ValueError(f"Padding must be non-negative, got ({pad_left}, {pad_right})")

    n = len(data)
    extended = np.zeros(n + pad_left + pad_right, dtype=np.float64)
    extended[pad_left:pad_left + n] = data

    if mode is PaddingMode.SYMMETRIC and n > 0:
        # Left: position i mirrors data[pad_left - i], clamped to data[-1]
        left_idx = np.minimum(pad_left - np.arange(pad_left), n - 1)
        extended[:pad_left] = data[left_idx]
        # Right: offset r past the end mirrors data[n - 1 - r], clamped to data[0]
        right_idx = np.maximum(n - 1 - np.arange(1, pad_right + 1), 0)
        extended[pad_left + n:] = data[right_idx]

    return extended


def convolve(data: np.ndarray, coeffs: np.ndarray, backend: str = "numpy") -> np.ndarray:
    """
    Valid-mode convolution.

    result[i] = Σ_j data[i + j] · coeffs[L - 1 - j]

    Parameters
    ----------
    data : ndarray, shape (n,)
        Input signal, n >= L
    coeffs : ndarray, shape (L,)
        Filter coefficients, L >= 1
    backend : str, optional
        "numpy" or "torch"

    Returns
    -------
    result : ndarray, shape (n - L + 1,)
    """
    data = _as_signal(data)
    coeffs = _as_signal(coeffs, "coeffs")
    if len(coeffs) == 0:
        raise ValueError("Filter coefficients must not be empty")
    if len(data) < len(coeffs):
        raise ValueError(
            f"Signal length {len(data)} is shorter than filter length {len(coeffs)}"
        )

    if backend == "numpy":
        return np.convolve(data, coeffs, mode="valid")
    elif backend == "torch":
        return _convolve_torch(data, coeffs)
    else:
        raise ValueError(f"Unknown backend: {backend}")


def _convolve_torch(data: np.ndarray, coeffs: np.ndarray) -> np.ndarray:
    """PyTorch implementation of convolve."""
    if not HAS_TORCH:
        raise ImportError("PyTorch not available")

    x = torch.from_numpy(np.ascontiguousarray(data)).view(1, 1, -1)
    # conv1d is a cross-correlation, so flip the kernel
    w = torch.from_numpy(coeffs[::-1].copy()).view(1, 1, -1)
    return F.conv1d(x, w).view(-1).numpy()


def dyadic_downsample(data: np.ndarray, mode: Union[DyadicMode, str]) -> np.ndarray:
    """
    Keep every other sample.

    EVEN keeps indices 0, 2, 4, ... (ceil(n/2) samples), ODD keeps
    indices 1, 3, 5, ... (floor(n/2) samples).
    """
    data = _as_signal(data)
    start = 0 if as_dyadic_mode(mode) is DyadicMode.EVEN else 1
    return data[start::2].copy()


def dyadic_upsample(data: np.ndarray, mode: Union[DyadicMode, str]) -> np.ndarray:
    """
    Insert zeros between samples.

    EVEN produces 2n + 1 samples with data at the odd indices,
    ODD produces 2n - 1 samples with data at the even indices.

    Examples
    --------
    >>> dyadic_upsample([1, 2], DyadicMode.EVEN)
    array([0., 1., 0., 2., 0.])
    >>> dyadic_upsample([1, 2], DyadicMode.ODD)
    array([1., 0., 2.])
    """
    data = _as_signal(data)
    if len(data) == 0:
        raise ValueError("Cannot upsample an empty signal")

    if as_dyadic_mode(mode) is DyadicMode.EVEN:
        upsampled = np.zeros(2 * len(data) + 1, dtype=np.float64)
        upsampled[1::2] = data
    else:
        upsampled = np.zeros(2 * len(data) - 1, dtype=np.float64)
        upsampled[0::2] = data
    return upsampled


def decompose(
    data: np.ndarray,
    lowpass: np.ndarray,
    highpass: np.ndarray,
    mode: Union[DyadicMode, str] = DyadicMode.ODD,
    padding: Union[PaddingMode, str] = PaddingMode.ZEROES,
    backend: str = "numpy",
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split a signal into approximation and details coefficients.

    Parameters
    ----------
    data : ndarray, shape (n,)
        Signal to decompose
    lowpass, highpass : ndarray, shape (L,)
        Decomposition filters
    mode : DyadicMode
        Parity kept when downsampling
    padding : PaddingMode
        Edge extension applied (L - 1 on both sides) before filtering
    backend : str, optional
        Convolution backend, "numpy" or "torch"

    Returns
    -------
    approx, details : ndarray
        Downsampled lowpass and highpass outputs
    """
    lowpass = _as_signal(lowpass, "lowpass")
    highpass = _as_signal(highpass, "highpass")
    if len(lowpass) == 0 or len(lowpass) != len(highpass):
        raise ValueError(
            f"Decomposition filters must be non-empty and of equal length, "
            f"got {len(lowpass)} and {len(highpass)}"
        )

    L = len(lowpass)
    padded = pad(data, L - 1, L - 1, padding)

    approx = dyadic_downsample(convolve(padded, lowpass, backend), mode)
    details = dyadic_downsample(convolve(padded, highpass, backend), mode)
    return approx, details


def reconstruct(
    coeffs: np.ndarray,
    reconstruction_filter: np.ndarray,
    out_size: int,
    mode: Union[DyadicMode, str] = DyadicMode.ODD,
    padding: Union[PaddingMode, str] = PaddingMode.ZEROES,
    backend: str = "numpy",
) -> np.ndarray:
    """
    Rebuild a signal from approximation or details coefficients.

    Parameters
    ----------
    coeffs : ndarray
        Coefficients produced by decompose
    reconstruction_filter : ndarray, shape (L,)
        Lowpass filter for approximation coefficients, highpass filter
        for details coefficients. L >= 3.
    out_size : int
        Length of the reconstructed signal
    mode : DyadicMode
        Must match the mode used by decompose
    padding : PaddingMode
        Edge extension applied to the upsampled coefficients
    backend : str, optional
        Convolution backend, "numpy" or "torch"

    Returns
    -------
    data : ndarray, shape (out_size,)
    """
    reconstruction_filter = _as_signal(reconstruction_filter, "reconstruction_filter")
    L = len(reconstruction_filter)
    if L < 3:
        raise ValueError(f"Reconstruction requires a filter of length >= 3, got {L}")
    mode = as_dyadic_mode(mode)

    upsampled = dyadic_upsample(coeffs, mode)
    padded = pad(upsampled, L - 1, L - 1, padding)
    wide = convolve(padded, reconstruction_filter, backend)

    start = L - (0 if mode is DyadicMode.EVEN else 2)
    if start + out_size > len(wide):
        raise ValueError(
            f"Cannot reconstruct {out_size} samples from {len(coeffs)} coefficients"
        )
    return wide[start:start + out_size].copy()
