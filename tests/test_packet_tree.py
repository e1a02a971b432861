#!/usr/bin/env python3
"""
Tests for the conventional (binary) wavelet packet tree

Verifies:
1. Summing every reconstructed level gives back the signal (heights 1-10)
2. A reconstruction marks exactly one leaf-to-root path
3. Height 1 is a no-op tree
4. Lifecycle and argument errors

Run: python tests/test_packet_tree.py
"""

import numpy as np
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from packetwave.packet_tree import WaveletPacketTree
from packetwave.wavelet import Wavelet, get_wavelet
from packetwave.wavelet_math import DyadicMode, PaddingMode

SIGNAL = np.arange(1.0, 501.0)


def sum_of_levels(tree, signal):
    tree.set_root_signal(signal)
    tree.decompose()

    total = np.zeros(len(signal))
    for level in range(tree.get_wavelet_level_count()):
        tree.reconstruct(level)
        total += tree.get_root_signal()
    return total


@pytest.mark.parametrize("name", ["db2", "db4", "db10", "sym3", "sym5", "coif1", "coif2"])
def test_round_trip_all_heights(name):
    wavelet = Wavelet.from_name(name)
    for height in range(1, 11):
        tree = WaveletPacketTree(height, wavelet)
        np.testing.assert_allclose(
            sum_of_levels(tree, SIGNAL), SIGNAL, atol=1e-3,
            err_msg=f"{name} height={height}",
        )


@pytest.mark.parametrize("height", [2, 3, 6])
def test_round_trip_even_mode(height):
    tree = WaveletPacketTree(height, get_wavelet("db", 3), dyadic_mode=DyadicMode.EVEN)
    np.testing.assert_allclose(sum_of_levels(tree, SIGNAL), SIGNAL, atol=1e-3)


def test_round_trip_random_signal():
    rng = np.random.default_rng(3)
    x = rng.standard_normal(257) * 50.0
    tree = WaveletPacketTree(5, Wavelet.from_name("sym4"))
    np.testing.assert_allclose(sum_of_levels(tree, x), x, atol=1e-3)


def test_round_trip_short_signal():
    """Signals shorter than the filter still round trip."""
    x = np.array([3.0, -1.0, 2.0])
    tree = WaveletPacketTree(4, Wavelet.from_name("db6"))
    np.testing.assert_allclose(sum_of_levels(tree, x), x, atol=1e-3)


def test_lowpass_level_of_constant():
    """A constant signal lives in level 0 away from the edges."""
    x = np.full(256, 5.0)
    tree = WaveletPacketTree(3, Wavelet.from_name("db4"))
    tree.set_root_signal(x)
    tree.decompose()

    tree.reconstruct(0)
    np.testing.assert_allclose(tree.get_root_signal()[32:-32], 5.0, atol=1e-6)


def test_decompose_fills_every_node():
    tree = WaveletPacketTree(4, Wavelet.from_name("db2"))
    tree.set_root_signal(SIGNAL)
    tree.decompose()

    inner = tree._tree
    assert all(len(inner.get_node_data(i)) > 0 for i in range(inner.node_count))
    # ODD mode: floor((n + L - 1) / 2)
    assert len(inner.get_node_data(1)) == len(inner.get_node_data(2)) == 251


@pytest.mark.parametrize("height, level", [(1, 0), (2, 1), (4, 5), (6, 31)])
def test_reconstruction_marks_single_path(height, level):
    tree = WaveletPacketTree(height, Wavelet.from_name("db2"))
    tree.set_root_signal(SIGNAL)
    tree.decompose()
    tree.reconstruct(level)

    inner = tree._tree
    expected = sorted(inner.path_to_root(inner.first_leaf + level))
    assert inner.marked_nodes() == expected


def test_marks_reset_between_reconstructions():
    tree = WaveletPacketTree(4, Wavelet.from_name("db2"))
    tree.set_root_signal(SIGNAL)
    tree.decompose()
    tree.reconstruct(7)
    tree.reconstruct(0)

    assert tree._tree.marked_nodes() == [0, 1, 3, 7]


def test_reconstruct_is_repeatable():
    tree = WaveletPacketTree(4, Wavelet.from_name("db3"))
    tree.set_root_signal(SIGNAL)
    tree.decompose()

    tree.reconstruct(3)
    first = tree.get_root_signal().copy()
    tree.reconstruct(5)
    tree.reconstruct(3)
    np.testing.assert_array_equal(tree.get_root_signal(), first)


def test_conflicting_marks():
    tree = WaveletPacketTree(2, Wavelet.from_name("db2"))
    tree.set_root_signal(SIGNAL)
    tree.decompose()

    tree._tree.set_mark(1)
    tree._tree.set_mark(2)
    with pytest.raises(AssertionError):
        tree._reconstruct_node(0)


def test_height_one():
    tree = WaveletPacketTree(1, Wavelet.from_name("db2"))
    assert tree.get_wavelet_level_count() == 1

    tree.set_root_signal(SIGNAL)
    tree.decompose()
    tree.reconstruct(0)
    np.testing.assert_array_equal(tree.get_root_signal(), SIGNAL)


def test_level_count():
    for height in range(1, 8):
        tree = WaveletPacketTree(height, Wavelet.from_name("db2"))
        assert tree.get_wavelet_level_count() == 2 ** (height - 1)


def test_root_signal_is_copied_and_read_only():
    x = SIGNAL.copy()
    tree = WaveletPacketTree(2, Wavelet.from_name("db2"))
    tree.set_root_signal(x)
    x[0] = -1.0

    root = tree.get_root_signal()
    assert root[0] == 1.0
    with pytest.raises(ValueError):
        root[0] = 2.0


def test_lifecycle_errors():
    tree = WaveletPacketTree(3, Wavelet.from_name("db2"))
    with pytest.raises(RuntimeError):
        tree.decompose()

    tree.set_root_signal(SIGNAL)
    with pytest.raises(RuntimeError):
        tree.reconstruct(0)

    tree.decompose()
    tree.set_root_signal(SIGNAL)
    with pytest.raises(RuntimeError):
        tree.reconstruct(0)


@pytest.mark.parametrize("level", [-1, 4, 100])
def test_level_out_of_range(level):
    tree = WaveletPacketTree(3, Wavelet.from_name("db2"))
    tree.set_root_signal(SIGNAL)
    tree.decompose()
    with pytest.raises(ValueError):
        tree.reconstruct(level)


def test_invalid_arguments():
    w = Wavelet.from_name("db2")
    with pytest.raises(ValueError):
        WaveletPacketTree(0, w)
    with pytest.raises(TypeError):
        WaveletPacketTree(3, "db2")
    with pytest.raises(ValueError):
        WaveletPacketTree(3, w, dyadic_mode="triadic")
    with pytest.raises(ValueError):
        WaveletPacketTree(3, w, backend="cuda")

    tree = WaveletPacketTree(3, w)
    with pytest.raises(ValueError):
        tree.set_root_signal([])
    with pytest.raises(ValueError):
        tree.set_root_signal(np.ones((4, 4)))


def test_short_filter_cannot_reconstruct():
    haar = Wavelet.from_name("db1")
    tree = WaveletPacketTree(2, haar)
    tree.set_root_signal(SIGNAL)
    tree.decompose()
    with pytest.raises(ValueError):
        tree.reconstruct(0)


def test_properties():
    w = Wavelet.from_name("db2")
    tree = WaveletPacketTree(3, w, "even", "symmetric")
    assert tree.height == 3
    assert tree.wavelet is w
    assert tree.dyadic_mode is DyadicMode.EVEN
    assert tree.padding_mode is PaddingMode.SYMMETRIC
    assert "WaveletPacketTree" in repr(tree)


def test_torch_backend_matches_numpy():
    pytest.importorskip("torch")
    w = Wavelet.from_name("db4")

    results = []
    for backend in ("numpy", "torch"):
        tree = WaveletPacketTree(4, w, backend=backend)
        tree.set_root_signal(SIGNAL)
        tree.decompose()
        tree.reconstruct(2)
        results.append(tree.get_root_signal().copy())

    np.testing.assert_allclose(results[0], results[1], atol=1e-9)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
