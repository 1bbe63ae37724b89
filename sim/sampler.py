"""
Waveform table generation.

Samples x(tau) = A cos(2*pi*f*tau + phi) over a fixed window
[0, total_time] with step dt (8 s / 0.02 s -> 401 samples). The table
shows the waveform of the current parameters, not a history of observed
positions, and is rebuilt only when the parameters change.
"""

import numpy as np
from collections.abc import Sequence
from typing import Iterator, NamedTuple, Optional, Tuple

from oscillator.parameters import SimulationParameters
from oscillator.harmonic import position


WINDOW_SECONDS = 8.0
SAMPLE_DT = 0.02
TIME_DECIMALS = 2


class WaveformSample(NamedTuple):
    """One (time, position) point of the waveform."""
    t: float
    x: float


def sample_count(total_time: float, dt: float) -> int:
    """Number of samples in [0, total_time], including the last one at or before total_time."""
    # Tolerance keeps 8.0 / 0.02 from landing on 399.999...
    return int(np.floor(total_time / dt + 1e-9)) + 1


def iter_samples(params: SimulationParameters,
                 total_time: float = WINDOW_SECONDS,
                 dt: float = SAMPLE_DT,
                 decimals: int = TIME_DECIMALS) -> Iterator[WaveformSample]:
    """
    Lazily generate waveform samples in ascending time.

    tau runs over 0, dt, 2dt, ... up to total_time. Each sample stores
    tau rounded to `decimals` places; x is evaluated at the exact tau.

    Args:
        params: Oscillator parameters
        total_time: Window length (seconds)
        dt: Sample step (seconds)
        decimals: Rounding of the stored sample time

    Yields:
        WaveformSample(t, x)
    """
    if total_time <= 0:
        raise ValueError(f"total_time must be positive, got {total_time}")
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    for i in range(sample_count(total_time, dt)):
        tau = i * dt
        yield WaveformSample(round(tau, decimals), position(params, tau))


class WaveformTable(Sequence):
    """
    Immutable, re-iterable sequence of waveform samples.

    Attributes:
        parameters: Parameters the table was generated from
        samples: Tuple of WaveformSample in ascending time
    """

    def __init__(self, parameters: SimulationParameters,
                 samples: Tuple[WaveformSample, ...]):
        self.parameters = parameters
        self.samples = samples

    def __getitem__(self, index):
        return self.samples[index]

    def __len__(self) -> int:
        return len(self.samples)

    def __eq__(self, other) -> bool:
        if not isinstance(other, WaveformTable):
            return NotImplemented
        return self.samples == other.samples

    def __hash__(self) -> int:
        return hash(self.samples)

    @property
    def times(self) -> np.ndarray:
        """Sample times as an array."""
        return np.array([s.t for s in self.samples])

    @property
    def positions(self) -> np.ndarray:
        """Sample positions as an array."""
        return np.array([s.x for s in self.samples])

    def nearest(self, t: float) -> WaveformSample:
        """
        Sample closest in time to t (used for hover tooltips).

        Args:
            t: Query time (seconds)

        Returns:
            Nearest WaveformSample
        """
        idx = int(np.argmin(np.abs(self.times - t)))
        return self.samples[idx]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n_samples={len(self.samples)})"


class WaveformSampler:
    """
    Owner of the cached waveform table.

    table() regenerates only when the cache has been invalidated or was
    built from different parameters; clock ticks never reach here.

    Attributes:
        total_time: Window length (seconds)
        dt: Sample step (seconds)
        decimals: Rounding of sample times
        regenerations: Number of times the table has been rebuilt
    """

    def __init__(self, total_time: float = WINDOW_SECONDS,
                 dt: float = SAMPLE_DT,
                 decimals: int = TIME_DECIMALS):
        """
        Initialize sampler.

        Args:
            total_time: Window length (default 8 s)
            dt: Sample step (default 0.02 s)
            decimals: Sample time rounding (default 2)
        """
        if total_time <= 0 or dt <= 0:
            raise ValueError("total_time and dt must be positive")
        if decimals < 0:
            raise ValueError("decimals must be non-negative")

        self.total_time = total_time
        self.dt = dt
        self.decimals = decimals
        self.regenerations = 0
        self._table: Optional[WaveformTable] = None

    @property
    def n_samples(self) -> int:
        return sample_count(self.total_time, self.dt)

    def generate(self, params: SimulationParameters) -> WaveformTable:
        """Build a fresh table without touching the cache."""
        samples = tuple(iter_samples(params, self.total_time, self.dt, self.decimals))
        return WaveformTable(params, samples)

    def table(self, params: SimulationParameters) -> WaveformTable:
        """
        Get the waveform table for params, regenerating if stale.

        Args:
            params: Current oscillator parameters

        Returns:
            WaveformTable (same object while params are unchanged)
        """
        if self._table is None or self._table.parameters != params:
            self._table = self.generate(params)
            self.regenerations += 1
        return self._table

    def invalidate(self, *_) -> None:
        """Drop the cached table. Accepts and ignores store callback arguments."""
        self._table = None
