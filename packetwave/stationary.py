"""
Stationary Wavelet Packet Tree

A shift-invariant variant of the wavelet packet tree. Every node is
decomposed twice, keeping both downsampling parities, so each node has four
children:

    NW (0) : even approximation      NE (1) : odd approximation
    SW (2) : even details            SE (3) : odd details

A wavelet level is then represented by many redundant leaves. Reconstructing
a level averages the leaf-isolated reconstructions of all of them, which
removes the shift dependence of the conventional transform.

Leaf selection for a level:
    At every scale s (4^s <= leaf count) the bit s of the level chooses
    between the approximation and details halves of a quad, which fixes a
    starting leaf. The remaining bits enumerate the even/odd choices: bit b
    of the index i moves 4^(b+1) leaves to the right. Each selected leaf
    is reconstructed together with its immediate neighbour (the odd twin).
"""

import logging
from typing import Tuple, Union

import numpy as np

from .packet_tree import WaveletPacketTreeBase
from .wavelet import Wavelet
from .wavelet_math import DyadicMode, PaddingMode

logger = logging.getLogger(__name__)


class StationaryWaveletPacketTree(WaveletPacketTreeBase):
    """
    Stationary (shift-invariant) wavelet packet tree.

    Parameters
    ----------
    height : int
        Tree height. A tree with only a root node has height 1. The number
        of nodes grows as 4^height.
    wavelet : Wavelet
        Filters used for decomposition and reconstruction
    padding_mode : PaddingMode or str
        Edge extension (default: ZEROES)
    backend : str
        Convolution backend, "numpy" or "torch"
    """

    arity = 4

    NORTH_WEST = 0
    NORTH_EAST = 1
    SOUTH_WEST = 2
    SOUTH_EAST = 3

    def __init__(
        self,
        height: int,
        wavelet: Wavelet,
        padding_mode: Union[PaddingMode, str] = PaddingMode.ZEROES,
        backend: str = "numpy",
    ):
        super().__init__(height, wavelet, padding_mode, backend)

    def _decompose_node(self, node: int):
        if self._tree.is_leaf(node):
            return

        nw, ne, sw, se = self._tree.get_children(node)

        self._decompose_children(node, DyadicMode.EVEN, nw, sw)
        self._decompose_children(node, DyadicMode.ODD, ne, se)

        self._decompose_node(nw)
        self._decompose_node(ne)
        self._decompose_node(sw)
        self._decompose_node(se)

    def _child_synthesis(self, child_index: int) -> Tuple[DyadicMode, np.ndarray]:
        if child_index == self.NORTH_WEST:
            return DyadicMode.EVEN, self._wavelet.rec_lo
        elif child_index == self.SOUTH_WEST:
            return DyadicMode.EVEN, self._wavelet.rec_hi
        elif child_index == self.NORTH_EAST:
            return DyadicMode.ODD, self._wavelet.rec_lo
        return DyadicMode.ODD, self._wavelet.rec_hi

    def _reconstruct_accumulate(self, leaf: int, accumulator: np.ndarray):
        """Reconstruct leaf in isolation and add the root signal to accumulator."""
        self._reconstruct_leaf(leaf)

        root = self._tree.get_node_data(0)
        assert root.shape == accumulator.shape
        accumulator += root

    def _starting_leaf(self, level: int) -> int:
        starting_leaf = 0
        current_leaf_count = 4
        current_level_count = 2
        while current_leaf_count <= self._tree.leaf_count:
            if level % current_level_count >= current_level_count // 2:
                starting_leaf += current_leaf_count // 2
            current_leaf_count *= 4
            current_level_count *= 2
        return starting_leaf

    @staticmethod
    def _leaf_offset(index: int) -> int:
        # Spread the bits of index over powers of 4, starting at 4
        offset = 0
        multiplier = 4
        while index:
            if index & 1:
                offset += multiplier
            index >>= 1
            multiplier *= 4
        return offset

    def reconstruct(self, level: int):
        self._check_level(level)

        # Only the root: nothing to reconstruct
        if self.height == 1:
            return

        level_count = self.get_wavelet_level_count()
        first_leaf = self._tree.first_leaf
        starting_leaf = self._starting_leaf(level)
        logger.debug(
            "Reconstructing level %d of %d from starting leaf %d",
            level, level_count, starting_leaf,
        )

        accumulator = np.zeros(len(self._tree.get_node_data(0)), dtype=np.float64)
        for i in range(level_count // 2):
            leaf = first_leaf + starting_leaf + self._leaf_offset(i)
            self._reconstruct_accumulate(leaf, accumulator)
            self._reconstruct_accumulate(leaf + 1, accumulator)

        self._tree.set_node_data(0, accumulator / level_count)
