"""
Unit tests for waveform sampling.

Tests verify:
1. Table shape (401 samples over [0, 8] s)
2. Sample times rounded and ascending
3. Deterministic regeneration
4. Caching across unchanged parameters
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oscillator.parameters import SimulationParameters, DEFAULT_PARAMETERS
from sim.sampler import (WaveformSampler, WaveformSample, iter_samples,
                         sample_count)


class TestIterSamples:
    """Tests for the lazy sample generator."""

    def test_sample_count(self):
        assert sample_count(8.0, 0.02) == 401
        assert sample_count(1.0, 0.3) == 4

    def test_is_lazy_and_restartable(self):
        gen = iter_samples(DEFAULT_PARAMETERS)
        first = next(gen)

        assert first == WaveformSample(0.0, pytest.approx(120.0))
        assert list(iter_samples(DEFAULT_PARAMETERS)) == list(iter_samples(DEFAULT_PARAMETERS))

    def test_last_point_not_past_window(self):
        """Test the final sample is the last step at or before total_time."""
        samples = list(iter_samples(DEFAULT_PARAMETERS, total_time=1.0, dt=0.3))

        assert [s.t for s in samples] == [0.0, 0.3, 0.6, 0.9]

    def test_positions_use_current_parameters(self):
        params = SimulationParameters(80.0, 1.5, -0.4)
        for s in iter_samples(params):
            assert s.x == pytest.approx(80.0 * np.cos(2 * np.pi * 1.5 * s.t - 0.4), abs=1e-6)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            list(iter_samples(DEFAULT_PARAMETERS, dt=0.0))
        with pytest.raises(ValueError):
            list(iter_samples(DEFAULT_PARAMETERS, total_time=-1.0))
        with pytest.raises(ValueError):
            list(iter_samples(DEFAULT_PARAMETERS, decimals=-1))


class TestWaveformSampler:
    """Tests for the cached waveform table."""

    def test_table_shape(self):
        """Test 401 samples from 0.00 to 8.00 inclusive."""
        table = WaveformSampler().table(DEFAULT_PARAMETERS)
        times = table.times

        assert len(table) == 401
        assert times[0] == 0.0
        assert times[-1] == 8.0
        assert np.all(np.diff(times) > 0)
        np.testing.assert_allclose(times, np.arange(401) * 0.02, atol=1e-12)

    def test_times_rounded(self):
        table = WaveformSampler().table(DEFAULT_PARAMETERS)
        for s in table:
            assert s.t == round(s.t, 2)

    def test_known_values(self):
        table = WaveformSampler().table(DEFAULT_PARAMETERS)

        assert table[0].x == pytest.approx(120.0, abs=1e-9)
        assert table[50].t == 1.0
        assert table[50].x == pytest.approx(-120.0, abs=1e-9)

    def test_regeneration_idempotent(self):
        """Test equal parameters give sample-for-sample equal tables."""
        sampler = WaveformSampler()
        first = sampler.generate(DEFAULT_PARAMETERS)
        second = sampler.generate(SimulationParameters(120.0, 0.5, 0.0))

        assert first is not second
        assert first == second
        assert list(first) == list(second)

    def test_cached_while_unchanged(self):
        sampler = WaveformSampler()
        table = sampler.table(DEFAULT_PARAMETERS)

        for _ in range(100):
            assert sampler.table(DEFAULT_PARAMETERS) is table
        assert sampler.regenerations == 1

    def test_regenerates_on_new_parameters(self):
        sampler = WaveformSampler()
        sampler.table(DEFAULT_PARAMETERS)
        table = sampler.table(SimulationParameters(120.0, 1.0, 0.0))

        assert sampler.regenerations == 2
        assert table.parameters.frequency == 1.0

    def test_invalidate(self):
        sampler = WaveformSampler()
        table = sampler.table(DEFAULT_PARAMETERS)
        sampler.invalidate()

        rebuilt = sampler.table(DEFAULT_PARAMETERS)
        assert rebuilt is not table
        assert rebuilt == table
        assert sampler.regenerations == 2

    def test_nearest(self):
        table = WaveformSampler().table(DEFAULT_PARAMETERS)

        assert table.nearest(1.009).t == 1.0
        assert table.nearest(-3.0).t == 0.0
        assert table.nearest(99.0).t == 8.0

    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            WaveformSampler(dt=0.0)
        with pytest.raises(ValueError):
            WaveformSampler(decimals=-2)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
