"""
Wavelet Packet Trees

A wavelet packet tree decomposes its root signal recursively: every node
is split by a two-channel filter bank and the outputs are stored in the
node's children. Reconstruction isolates a single wavelet level (a leaf
sub-band), marks it and rebuilds the signal upwards so that the root holds
that level's contribution to the original signal.

    tree = WaveletPacketTree(height=4, wavelet=Wavelet.from_name("db4"))
    tree.set_root_signal(x)
    tree.decompose()
    tree.reconstruct(level)        # root now holds level's contribution
    y = tree.get_root_signal()

Summing reconstruct(level) over every level gives back the original signal
up to floating point error.

ARCHITECTURE:
    WaveletPacketTreeBase holds the behaviour common to every variant and
    delegates node addressing and marks to an IndexedTree of the variant's
    arity. Variants define how a node is decomposed, which dyadic mode and
    filter rebuild a node from each child, and how a level maps to leaves.
"""

import logging
from abc import ABC, abstractmethod
from typing import Tuple, Union

import numpy as np

from .tree import IndexedTree
from .wavelet import Wavelet
from .wavelet_math import (
    DyadicMode,
    PaddingMode,
    as_dyadic_mode,
    as_padding_mode,
    decompose,
    reconstruct,
)

logger = logging.getLogger(__name__)


class WaveletPacketTreeBase(ABC):
    """
    Common interface of the wavelet packet tree variants.

    Parameters
    ----------
    height : int
        Tree height. A tree with only a root node has height 1.
    wavelet : Wavelet
        Filters used for decomposition and reconstruction
    padding_mode : PaddingMode or str
        Edge extension applied before every filtering step
    backend : str
        Convolution backend, "numpy" or "torch"
    """

    arity = 2

    def __init__(
        self,
        height: int,
        wavelet: Wavelet,
        padding_mode: Union[PaddingMode, str] = PaddingMode.ZEROES,
        backend: str = "numpy",
    ):
        if not isinstance(wavelet, Wavelet):
            raise TypeError(f"Expected a Wavelet, got {type(wavelet).__name__}")
        if backend not in ("numpy", "torch"):
            raise ValueError(f"Unknown backend: {backend}")

        self._tree = IndexedTree(height, self.arity)
        self._wavelet = wavelet
        self._padding_mode = as_padding_mode(padding_mode)
        self.backend = backend

        self._has_root_signal = False
        self._decomposed = False

        logger.debug("Created %r", self)

    @property
    def height(self) -> int:
        return self._tree.height

    @property
    def wavelet(self) -> Wavelet:
        return self._wavelet

    @property
    def padding_mode(self) -> PaddingMode:
        return self._padding_mode

    def set_root_signal(self, signal: np.ndarray):
        """
        Replace the root node signal.

        The values are copied. Descendant nodes are stale until the next
        decompose().
        """
        signal = np.array(signal, dtype=np.float64)
        if signal.ndim != 1 or signal.size == 0:
            raise ValueError(f"Root signal must be a non-empty 1-D array, got shape {signal.shape}")

        self._tree.set_node_data(0, signal)
        self._has_root_signal = True
        self._decomposed = False

    def get_root_signal(self) -> np.ndarray:
        """Read-only view of the root node signal."""
        view = self._tree.get_node_data(0).view()
        view.setflags(write=False)
        return view

    def get_wavelet_level_count(self) -> int:
        """Number of wavelet levels this tree can isolate and reconstruct."""
        return 2 ** (self.height - 1)

    def decompose(self):
        """
        Decompose every node of the tree, starting at the root.

        This is not a sparse decomposition: all nodes hold signal data
        afterwards.
        """
        if not self._has_root_signal:
            raise RuntimeError("set_root_signal() must be called before decompose()")

        logger.debug(
            "Decomposing signal of length %d over %d nodes",
            len(self._tree.get_node_data(0)), self._tree.node_count,
        )
        self._decompose_node(0)
        self._decomposed = True

    @abstractmethod
    def reconstruct(self, level: int):
        """
        Reconstruct an isolated wavelet level into the root signal.

        Parameters
        ----------
        level : int
            Wavelet level, 0 <= level < get_wavelet_level_count()
        """

    @abstractmethod
    def _decompose_node(self, node: int):
        """Decompose node into its children, then recurse."""

    @abstractmethod
    def _child_synthesis(self, child_index: int) -> Tuple[DyadicMode, np.ndarray]:
        """Dyadic mode and reconstruction filter for the child_index-th child."""

    def _check_level(self, level: int):
        if not self._decomposed:
            raise RuntimeError("decompose() must be called before reconstruct()")
        level_count = self.get_wavelet_level_count()
        if int(level) != level or not 0 <= level < level_count:
            raise ValueError(f"Wavelet level must be in [0, {level_count}), got {level}")

    def _decompose_children(self, node: int, mode: DyadicMode, approx_child: int, details_child: int):
        approx, details = decompose(
            self._tree.get_node_data(node),
            self._wavelet.dec_lo,
            self._wavelet.dec_hi,
            mode,
            self._padding_mode,
            self.backend,
        )
        self._tree.set_node_data(approx_child, approx)
        self._tree.set_node_data(details_child, details)

    def _reconstruct_node(self, node: int):
        """
        Rebuild node from its single marked child, if any.

        The node becomes marked when it is rebuilt. At most one child may be
        marked at a time.
        """
        if self._tree.is_leaf(node):
            return

        children = self._tree.get_children(node)
        marked = [c for c, child in enumerate(children) if self._tree.is_marked(child)]
        assert len(marked) <= 1, f"Node {node} has more than one marked child: {marked}"
        if not marked:
            return

        child_index = marked[0]
        mode, rec_filter = self._child_synthesis(child_index)
        out_size = len(self._tree.get_node_data(node))

        self._tree.set_mark(node)
        self._tree.set_node_data(
            node,
            reconstruct(
                self._tree.get_node_data(children[child_index]),
                rec_filter,
                out_size,
                mode,
                self._padding_mode,
                self.backend,
            ),
        )

    def _reconstruct_leaf(self, leaf: int):
        """Isolate leaf and rebuild every node on its path to the root."""
        assert self._tree.is_leaf(leaf), f"Node {leaf} is not a leaf"

        self._tree.unmark()
        self._tree.set_mark(leaf)
        path = list(self._tree.path_to_root(leaf))
        for node in path[1:]:
            self._reconstruct_node(node)

    def __repr__(self):
        return (
            f"{type(self).__name__}(height={self.height}, wavelet={self._wavelet!r}, "
            f"padding_mode={self._padding_mode.value})"
        )


class WaveletPacketTree(WaveletPacketTreeBase):
    """
    Conventional wavelet packet tree.

    A binary tree: the approximation coefficients of a node are stored in
    its left (0th) child and the details coefficients in its right (1st)
    child. The number of wavelet levels equals the number of leaves.

    Parameters
    ----------
    height : int
        Tree height. A tree with only a root node has height 1.
    wavelet : Wavelet
        Filters used for decomposition and reconstruction
    dyadic_mode : DyadicMode or str
        Parity used for every down/upsampling step (default: ODD)
    padding_mode : PaddingMode or str
        Edge extension (default: ZEROES)
    backend : str
        Convolution backend, "numpy" or "torch"

    Example
    -------
    >>> tree = WaveletPacketTree(3, Wavelet.from_name("db2"))
    >>> tree.set_root_signal(np.arange(1.0, 65.0))
    >>> tree.decompose()
    >>> total = np.zeros(64)
    >>> for level in range(tree.get_wavelet_level_count()):
    ...     tree.reconstruct(level)
    ...     total += tree.get_root_signal()
    >>> bool(np.allclose(total, np.arange(1.0, 65.0), atol=1e-3))
    True
    """

    arity = 2

    APPROX = 0
    DETAILS = 1

    def __init__(
        self,
        height: int,
        wavelet: Wavelet,
        dyadic_mode: Union[DyadicMode, str] = DyadicMode.ODD,
        padding_mode: Union[PaddingMode, str] = PaddingMode.ZEROES,
        backend: str = "numpy",
    ):
        self._dyadic_mode = as_dyadic_mode(dyadic_mode)
        super().__init__(height, wavelet, padding_mode, backend)

    @property
    def dyadic_mode(self) -> DyadicMode:
        return self._dyadic_mode

    def reconstruct(self, level: int):
        self._check_level(level)
        logger.debug("Reconstructing level %d of %d", level, self.get_wavelet_level_count())

        # One leaf per wavelet level
        self._reconstruct_leaf(self._tree.first_leaf + level)

    def _decompose_node(self, node: int):
        if self._tree.is_leaf(node):
            return

        left = self._tree.get_child(node, self.APPROX)
        right = self._tree.get_child(node, self.DETAILS)

        self._decompose_children(node, self._dyadic_mode, left, right)

        self._decompose_node(left)
        self._decompose_node(right)

    def _child_synthesis(self, child_index: int) -> Tuple[DyadicMode, np.ndarray]:
        if child_index == self.APPROX:
            return self._dyadic_mode, self._wavelet.rec_lo
        return self._dyadic_mode, self._wavelet.rec_hi

    def __repr__(self):
        return (
            f"WaveletPacketTree(height={self.height}, wavelet={self._wavelet!r}, "
            f"dyadic_mode={self._dyadic_mode.value}, padding_mode={self._padding_mode.value})"
        )
