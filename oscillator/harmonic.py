"""
Closed-form simple harmonic motion.

    x(t) = A cos(2*pi*f*t + phi)

Position is evaluated directly from (A, f, phi, t). Nothing is
integrated, so there is no accumulated drift.
"""

import numpy as np
from typing import Union

from .parameters import SimulationParameters

ArrayLike = Union[float, np.ndarray]


def angular_frequency(params: SimulationParameters) -> float:
    """Angular frequency omega = 2*pi*f (rad/s)."""
    return 2.0 * np.pi * params.frequency


def period(params: SimulationParameters) -> float:
    """Oscillation period T = 1/f (seconds)."""
    return 1.0 / params.frequency


def position(params: SimulationParameters, t: ArrayLike) -> ArrayLike:
    """
    Evaluate oscillator position.

    Args:
        params: Oscillator parameters
        t: Time in seconds (scalar or array)

    Returns:
        x: Displacement, same shape as t (float for scalar t)
    """
    x = params.amplitude * np.cos(angular_frequency(params) * np.asarray(t, dtype=float)
                                  + params.phase)
    if np.ndim(x) == 0:
        return float(x)
    return x
