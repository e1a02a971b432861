"""
packetwave - Wavelet Packet Trees

A Python library implementing wavelet packet decomposition of 1-D signals
and reconstruction of isolated wavelet levels, with a conventional (binary)
tree and a stationary (shift-invariant, quad) tree.

Basic usage:
    >>> from packetwave import WaveletPacketTree, Wavelet
    >>> tree = WaveletPacketTree(height=4, wavelet=Wavelet.from_name("db4"))
    >>> tree.set_root_signal(signal)
    >>> tree.decompose()
    >>> tree.reconstruct(level=2)
    >>> band = tree.get_root_signal()

Shift-invariant:
    >>> from packetwave import StationaryWaveletPacketTree, get_wavelet
    >>> tree = StationaryWaveletPacketTree(4, get_wavelet("sym", 4))

Low-level usage:
    >>> from packetwave import decompose, reconstruct, DyadicMode
    >>> w = Wavelet.from_name("db4")
    >>> approx, details = decompose(signal, w.dec_lo, w.dec_hi, DyadicMode.ODD)
    >>> x = reconstruct(approx, w.rec_lo, len(signal), DyadicMode.ODD)
"""

__version__ = "0.1.0"

from .wavelet_math import (
    DyadicMode,
    PaddingMode,
    pad,
    convolve,
    dyadic_downsample,
    dyadic_upsample,
    decompose,
    reconstruct,
)

from .wavelet import (
    Wavelet,
    WaveletType,
    get_wavelet,
    get_wavelet_minimum_p,
    get_wavelet_maximum_p,
)

from .tree import IndexedTree

from .packet_tree import (
    WaveletPacketTreeBase,
    WaveletPacketTree,
)

from .stationary import StationaryWaveletPacketTree

from .analysis import (
    reconstruct_levels,
    wavelet_packet_levels,
)

__all__ = [
    # Trees
    "WaveletPacketTreeBase",
    "WaveletPacketTree",
    "StationaryWaveletPacketTree",
    "IndexedTree",
    # Wavelets
    "Wavelet",
    "WaveletType",
    "get_wavelet",
    "get_wavelet_minimum_p",
    "get_wavelet_maximum_p",
    # Wavelet math
    "DyadicMode",
    "PaddingMode",
    "pad",
    "convolve",
    "dyadic_downsample",
    "dyadic_upsample",
    "decompose",
    "reconstruct",
    # Convenience
    "reconstruct_levels",
    "wavelet_packet_levels",
]
