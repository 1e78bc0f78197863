"""
Real-time FIR filter tests.

Streaming sample-by-sample output must equal the first N samples of the
linear convolution, and the history buffer must behave as documented.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from scipy.signal import lfilter

from blockconv import FIRKernel, InvalidArgumentError, RealTimeFilter, linear_convolve


def _stream(rt: RealTimeFilter, x) -> np.ndarray:
    return np.array([rt.process(sample) for sample in x])


class TestRealTimeProcess:
    """One output per input through process()."""

    def test_reference_scenario(self):
        rt = RealTimeFilter([1, 2, 1])
        assert_array_equal(_stream(rt, [1, 2, 3, 2]), [1, 4, 8, 10])

    def test_equals_linear_convolution_prefix(self):
        rng = np.random.default_rng(0)
        x = rng.standard_normal(200)
        h = rng.standard_normal(17)

        y = _stream(RealTimeFilter(h), x)

        assert len(y) == len(x)
        assert_allclose(y, linear_convolve(x, h)[: len(x)], rtol=1e-12, atol=1e-12)

    def test_matches_scipy_lfilter(self):
        rng = np.random.default_rng(1)
        x = rng.standard_normal(64)
        h = rng.standard_normal(9)

        assert_allclose(_stream(RealTimeFilter(h), x), lfilter(h, [1.0], x), atol=1e-12)

    def test_signal_shorter_than_filter(self):
        rt = RealTimeFilter([1, 1, 1, 1, 1, 1])
        assert_array_equal(_stream(rt, [1, 2]), [1, 3])

    def test_single_tap(self):
        rt = RealTimeFilter([3])
        assert_array_equal(_stream(rt, [1, -2, 5]), [3, -6, 15])

    def test_history_after_process(self):
        rt = RealTimeFilter([1, 2, 1, 0])
        for sample in [1, 2, 3]:
            rt.process(sample)

        # Newest sample sits at [0] and [1]; oldest contribution dropped
        assert_array_equal(rt.history, [3, 3, 2, 1])

    def test_history_initially_zero(self):
        rt = RealTimeFilter(np.ones(8))
        assert rt.history.shape == (8,)
        assert np.all(rt.history == 0)

    def test_history_property_is_a_copy(self):
        rt = RealTimeFilter([1, 1])
        rt.history[:] = 99
        assert np.all(rt.history == 0)

    def test_reset(self):
        rt = RealTimeFilter([1, 2, 1])
        _stream(rt, [5, 6, 7])
        rt.reset()

        assert_array_equal(_stream(rt, [1, 2, 3, 2]), [1, 4, 8, 10])

    def test_instances_are_independent(self):
        a = RealTimeFilter([1, 2, 1])
        b = RealTimeFilter([1, 2, 1])

        out_a = []
        out_b = []
        for sa, sb in zip([1, 2, 3, 2], [10, 0, 0, 0]):
            out_a.append(a.process(sa))
            out_b.append(b.process(sb))

        assert_array_equal(out_a, [1, 4, 8, 10])
        assert_array_equal(out_b, [10, 20, 10, 0])

    def test_accepts_fir_kernel(self):
        rt = RealTimeFilter(FIRKernel([1, 2, 1]))
        assert_array_equal(_stream(rt, [1, 2, 3, 2]), [1, 4, 8, 10])

    def test_dtype_override(self):
        rt = RealTimeFilter([1, 2, 1], dtype=np.float32)
        y = rt.process(0.5)

        assert rt.dtype == np.float32
        assert y == pytest.approx(0.5)

    def test_float_samples_with_integer_taps(self):
        rt = RealTimeFilter([1, 2, 1])
        y = _stream(rt, [0.5, 1.5, 2.5])

        assert_allclose(y, [0.5, 2.5, 6.0])
        assert rt.dtype == np.float64
        assert_allclose(rt.history, [2.5, 2.5, 1.5])

    def test_widening_keeps_earlier_history(self):
        rt = RealTimeFilter([1, 1, 1])
        rt.process(4)
        rt.process(6)

        assert rt.process(0.5) == pytest.approx(10.5)
        assert rt.taps.dtype == np.float64

    def test_complex_sample_with_float_taps(self):
        rt = RealTimeFilter([1.0, 1.0])

        assert rt.process(1 + 2j) == 1 + 2j
        assert rt.process(3.0) == 4 + 2j
        assert rt.dtype == np.complex128

    def test_fixed_dtype_rejects_float_sample(self):
        rt = RealTimeFilter([1, 2, 1], dtype=np.int64)
        rt.process(3)
        before = rt.history

        with pytest.raises(InvalidArgumentError, match="cannot be represented"):
            rt.process(0.5)

        assert_array_equal(rt.history, before)
        assert rt.dtype == np.int64

    def test_fixed_dtype_rejects_complex_sample(self):
        rt = RealTimeFilter([1.0, 1.0], dtype=np.float64)
        with pytest.raises(InvalidArgumentError, match="complex128"):
            rt.process(1 + 2j)
        assert np.all(rt.history == 0)

    def test_taps_read_only(self):
        rt = RealTimeFilter([1.0, 2.0])
        with pytest.raises(ValueError):
            rt.taps[0] = 5.0

    def test_taps_read_only_after_widening(self):
        rt = RealTimeFilter([1, 2])
        rt.process(0.5)
        with pytest.raises(ValueError):
            rt.taps[0] = 5.0

    @pytest.mark.parametrize("bad_sample", [np.nan, np.inf, -np.inf])
    def test_non_finite_sample_leaves_history(self, bad_sample):
        rt = RealTimeFilter([0.5, 0.5, 0.5])
        rt.process(1.0)
        rt.process(2.0)
        before = rt.history

        with pytest.raises(InvalidArgumentError, match="finite"):
            rt.process(bad_sample)

        assert_array_equal(rt.history, before)
        assert rt.process(3.0) == pytest.approx(0.5 * (3.0 + 2.0 + 1.0))

    @pytest.mark.parametrize("bad_sample", ["x", [1.0, 2.0], None])
    def test_invalid_sample_type_raises(self, bad_sample):
        rt = RealTimeFilter([1.0, 1.0])
        with pytest.raises(InvalidArgumentError):
            rt.process(bad_sample)
        assert np.all(rt.history == 0)

    def test_empty_filter_raises(self):
        with pytest.raises(InvalidArgumentError):
            RealTimeFilter([])

    def test_non_numeric_dtype_raises(self):
        with pytest.raises(InvalidArgumentError):
            RealTimeFilter([1, 2], dtype=bool)


class TestRealTimeProcessBlock:
    """Block processing must be indistinguishable from per-sample processing."""

    @pytest.fixture
    def taps(self):
        rng = np.random.default_rng(11)
        return rng.standard_normal(12)

    @pytest.fixture
    def stream(self):
        rng = np.random.default_rng(12)
        return rng.standard_normal(500)

    @pytest.mark.parametrize("block_size", [1, 5, 11, 12, 13, 64, 500])
    def test_block_equals_per_sample(self, taps, stream, block_size):
        rt_samples = RealTimeFilter(taps)
        rt_blocks = RealTimeFilter(taps)

        y_samples = _stream(rt_samples, stream)
        y_blocks = np.concatenate(
            [rt_blocks.process_block(stream[i:i + block_size]) for i in range(0, len(stream), block_size)]
        )

        assert_allclose(y_blocks, y_samples, rtol=1e-10, atol=1e-12)
        assert_allclose(rt_blocks.history, rt_samples.history)

    def test_mixed_block_and_sample_calls(self, taps, stream):
        rt = RealTimeFilter(taps)

        y = np.concatenate([
            rt.process_block(stream[:100]),
            [rt.process(s) for s in stream[100:110]],
            rt.process_block(stream[110:]),
        ])

        assert_allclose(y, linear_convolve(stream, taps)[: len(stream)], rtol=1e-10, atol=1e-12)

    def test_integer_block_exact(self):
        rt = RealTimeFilter([1, 2, 1])

        assert_array_equal(rt.process_block([1, 2]), [1, 4])
        assert_array_equal(rt.process_block([3, 2]), [8, 10])
        assert_array_equal(rt.history, [2, 2, 3])

    def test_float_block_with_integer_taps(self):
        rt = RealTimeFilter([1, 2, 1])
        y = rt.process_block([0.5, 1.5, 2.5])

        assert_allclose(y, [0.5, 2.5, 6.0])
        assert y.dtype == np.float64
        assert_allclose(rt.history, [2.5, 2.5, 1.5])

    def test_complex_block_with_float_taps(self):
        rt = RealTimeFilter([1.0, 1.0])
        y = rt.process_block(np.array([1 + 2j, 3.0]))

        assert_allclose(y, [1 + 2j, 4 + 2j])
        assert rt.dtype == np.complex128

    def test_fixed_dtype_rejects_float_block(self):
        rt = RealTimeFilter([1, 2, 1], dtype=np.int64)
        rt.process_block([1, 2])
        before = rt.history

        with pytest.raises(InvalidArgumentError, match="cannot be represented"):
            rt.process_block([0.5, 1.5])

        assert_array_equal(rt.history, before)

    def test_single_tap_block(self):
        rt = RealTimeFilter([0.5])
        assert_allclose(rt.process_block([2.0, 4.0]), [1.0, 2.0])
        assert_array_equal(rt.history, [4.0])

    def test_float32_block_dtype(self):
        rt = RealTimeFilter(np.array([0.5, 0.25], dtype=np.float32))
        y = rt.process_block(np.ones(8, dtype=np.float32))
        assert y.dtype == np.float32

    def test_empty_block_is_noop(self):
        rt = RealTimeFilter([1, 2, 1])
        rt.process(4)
        before = rt.history

        y = rt.process_block([])

        assert y.shape == (0,)
        assert_array_equal(rt.history, before)

    def test_non_finite_block_leaves_history(self):
        rt = RealTimeFilter([1.0, 1.0])
        rt.process_block([1.0, 2.0])
        before = rt.history

        with pytest.raises(InvalidArgumentError, match="finite"):
            rt.process_block([3.0, np.nan])

        assert_array_equal(rt.history, before)
