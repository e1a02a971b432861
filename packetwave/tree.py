"""
Indexed k-ary tree

A complete k-ary tree stored in a flat list. Index 0 is the root, the
next k entries are its children, and so on level by level:

    children(i) = k·i + 1 ... k·i + k
    parent(i)   = (i - 1) // k

Leaves are the last k^(height-1) entries. Every node carries one signal
array and one boolean mark; the marks are scratch state for the packet
tree reconstructions.
"""

from typing import Iterator, List

import numpy as np


class IndexedTree:
    """
    Fixed-size k-ary tree addressed by node index.

    Parameters
    ----------
    height : int
        Number of levels. A tree of height 1 is a single root node.
    arity : int
        Number of children per node (2 = binary tree, 4 = quad tree)
    """

    def __init__(self, height: int, arity: int):
        if int(height) != height or height < 1:
            raise ValueError(f"Tree height must be an integer >= 1, got {height}")
        if int(arity) != arity or arity < 2:
            raise ValueError(f"Tree arity must be an integer >= 2, got {arity}")

        self.height = int(height)
        self.arity = int(arity)
        self.leaf_count = self.arity ** (self.height - 1)
        self.node_count = (self.arity * self.leaf_count - 1) // (self.arity - 1)

        self._nodes: List[np.ndarray] = [
            np.zeros(0, dtype=np.float64) for _ in range(self.node_count)
        ]
        self._marks = np.zeros(self.node_count, dtype=bool)

    @property
    def first_leaf(self) -> int:
        return self.node_count - self.leaf_count

    @property
    def last_leaf(self) -> int:
        return self.node_count - 1

    def _check_node(self, node: int):
        if not 0 <= node < self.node_count:
            raise IndexError(f"Node index {node} out of range [0, {self.node_count})")

    def is_leaf(self, node: int) -> bool:
        self._check_node(node)
        return node >= self.first_leaf

    def get_child(self, parent: int, child_index: int) -> int:
        """Index of the child_index-th child (0-based) of parent."""
        if not 0 <= child_index < self.arity:
            raise IndexError(f"Child index {child_index} out of range [0, {self.arity})")
        self._check_node(parent)
        child = self.arity * parent + 1 + child_index
        self._check_node(child)
        return child

    def get_children(self, parent: int) -> List[int]:
        return [self.get_child(parent, c) for c in range(self.arity)]

    def get_parent(self, child: int) -> int:
        self._check_node(child)
        if child == 0:
            raise IndexError("The root node has no parent")
        return (child - 1) // self.arity

    def path_to_root(self, node: int) -> Iterator[int]:
        """Yield node, its parent, ... up to and including the root."""
        self._check_node(node)
        while node != 0:
            yield node
            node = (node - 1) // self.arity
        yield 0

    def get_node_data(self, node: int) -> np.ndarray:
        self._check_node(node)
        return self._nodes[node]

    def set_node_data(self, node: int, signal: np.ndarray):
        self._check_node(node)
        self._nodes[node] = signal

    def is_marked(self, node: int) -> bool:
        self._check_node(node)
        return bool(self._marks[node])

    def set_mark(self, node: int):
        self._check_node(node)
        self._marks[node] = True

    def unmark(self):
        """Clear the mark of every node."""
        self._marks[:] = False

    def marked_nodes(self) -> List[int]:
        return [int(i) for i in np.flatnonzero(self._marks)]

    def __len__(self):
        return self.node_count

    def __repr__(self):
        return f"IndexedTree(height={self.height}, arity={self.arity}, nodes={self.node_count})"
