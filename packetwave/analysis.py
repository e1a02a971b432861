"""
Convenience functions over the packet trees.
"""

from typing import Union

import numpy as np

from .packet_tree import WaveletPacketTree, WaveletPacketTreeBase
from .stationary import StationaryWaveletPacketTree
from .wavelet import Wavelet
from .wavelet_math import DyadicMode, PaddingMode


def reconstruct_levels(tree: WaveletPacketTreeBase) -> np.ndarray:
    """
    Decompose the tree's root signal and reconstruct every wavelet level.

    Parameters
    ----------
    tree : WaveletPacketTreeBase
        Tree with its root signal set

    Returns
    -------
    levels : ndarray, shape (level_count, n)
        Row i is the isolated contribution of wavelet level i. The rows
        sum to the root signal.
    """
    tree.decompose()

    n = len(tree.get_root_signal())
    levels = np.zeros((tree.get_wavelet_level_count(), n), dtype=np.float64)
    for level in range(len(levels)):
        tree.reconstruct(level)
        levels[level] = tree.get_root_signal()
    return levels


def wavelet_packet_levels(
    signal: np.ndarray,
    wavelet: Union[Wavelet, str] = "db4",
    height: int = 4,
    stationary: bool = False,
    padding_mode: Union[PaddingMode, str] = PaddingMode.ZEROES,
    dyadic_mode: Union[DyadicMode, str] = DyadicMode.ODD,
    backend: str = "numpy",
) -> np.ndarray:
    """
    Split a signal into its wavelet packet levels.

    Parameters
    ----------
    signal : ndarray, shape (n,)
        Input signal
    wavelet : Wavelet or str
        Filters, or a PyWavelets name such as "db4"
    height : int
        Tree height; the signal is split into 2^(height-1) levels
    stationary : bool
        Use the shift-invariant StationaryWaveletPacketTree
    padding_mode : PaddingMode or str
        Edge extension
    dyadic_mode : DyadicMode or str
        Parity for the conventional tree (ignored when stationary)
    backend : str
        Convolution backend, "numpy" or "torch"

    Returns
    -------
    levels : ndarray, shape (2^(height-1), n)
    """
    if isinstance(wavelet, str):
        wavelet = Wavelet.from_name(wavelet)

    if stationary:
        tree = StationaryWaveletPacketTree(height, wavelet, padding_mode, backend=backend)
    else:
        tree = WaveletPacketTree(height, wavelet, dyadic_mode, padding_mode, backend=backend)

    tree.set_root_signal(signal)
    return reconstruct_levels(tree)


def test_reconstruction(tree: WaveletPacketTreeBase, signal: np.ndarray, atol: float = 1e-3) -> dict:
    """
    Check that the levels of a tree sum back to the signal.

    Returns dict with reconstruction errors and the energy of each level.
    """
    signal = np.asarray(signal, dtype=np.float64)
    tree.set_root_signal(signal)
    levels = reconstruct_levels(tree)
    total = levels.sum(axis=0)

    max_abs_error = float(np.max(np.abs(total - signal)))
    norm = np.linalg.norm(signal)
    relative_error = float(np.linalg.norm(total - signal) / norm) if norm > 0 else max_abs_error

    return {
        'max_abs_error': max_abs_error,
        'relative_error': relative_error,
        'level_count': len(levels),
        'energy_by_level': [float(np.sum(level ** 2)) for level in levels],
        'ok': max_abs_error <= atol,
    }


# Not a test case
test_reconstruction.__test__ = False
