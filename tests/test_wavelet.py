#!/usr/bin/env python3
"""
Tests for wavelet filter sets and the well-known wavelet provider

Run: python tests/test_wavelet.py
"""

import numpy as np
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from packetwave.wavelet import (
    Wavelet,
    WaveletType,
    get_wavelet,
    get_wavelet_maximum_p,
    get_wavelet_minimum_p,
)


def test_daubechies_coefficients():
    """db2 lowpass decomposition filter has the tabulated values."""
    w = get_wavelet(WaveletType.DAUBECHIES, 2)
    np.testing.assert_allclose(
        w.dec_lo, [-0.129409523, 0.224143868, 0.836516304, 0.482962913], atol=1e-8
    )
    np.testing.assert_allclose(
        w.dec_hi, [-0.482962913, 0.836516304, -0.224143868, -0.129409523], atol=1e-8
    )
    assert w.length == 4


def test_reconstruction_filters_are_reversed():
    w = Wavelet.from_name("sym4")
    np.testing.assert_allclose(w.rec_lo, w.dec_lo[::-1])
    np.testing.assert_allclose(w.rec_hi, w.dec_hi[::-1])


@pytest.mark.parametrize("wavelet_type, p_min, p_max", [
    (WaveletType.DAUBECHIES, 2, 10),
    (WaveletType.SYMLET, 2, 5),
    (WaveletType.COIFLET, 1, 5),
])
def test_parameter_ranges(wavelet_type, p_min, p_max):
    assert get_wavelet_minimum_p(wavelet_type) == p_min
    assert get_wavelet_maximum_p(wavelet_type) == p_max

    assert get_wavelet(wavelet_type, p_min).length >= 3
    assert get_wavelet(wavelet_type.value, p_max).name == f"{wavelet_type.value}{p_max}"

    with pytest.raises(ValueError):
        get_wavelet(wavelet_type, p_min - 1)
    with pytest.raises(ValueError):
        get_wavelet(wavelet_type, p_max + 1)


def test_filter_lengths():
    assert get_wavelet("db", 10).length == 20
    assert get_wavelet("coif", 1).length == 6
    assert get_wavelet("sym", 5).length == 10


def test_unknown_type():
    with pytest.raises(ValueError):
        get_wavelet("haar", 1)


def test_unknown_name():
    with pytest.raises(ValueError):
        Wavelet.from_name("not-a-wavelet")


def test_biorthogonal_rejected():
    with pytest.raises(ValueError):
        Wavelet.from_name("bior2.2")


def test_custom_filters():
    w = Wavelet([1, 2, 3], [3, 2, 1], [0.5, 0.5, 0.5], [1, 0, -1])
    assert w.length == 3
    assert w.name is None
    assert w.dec_lo.dtype == np.float64


def test_filters_are_read_only():
    source = [1.0, 2.0, 3.0]
    w = Wavelet(source, source, source, source)
    with pytest.raises(ValueError):
        w.dec_lo[0] = 10.0
    source[0] = 10.0
    assert w.dec_lo[0] == 1.0


def test_mismatched_lengths():
    with pytest.raises(ValueError):
        Wavelet([1, 2, 3], [1, 2, 3], [1, 2], [1, 2, 3])


def test_empty_filter():
    with pytest.raises(ValueError):
        Wavelet([], [], [], [])


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
