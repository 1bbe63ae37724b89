"""
Simple harmonic oscillator model.

Closed-form motion x(t) = A cos(2*pi*f*t + phi) and the bounded,
user-tunable parameters that drive it.
"""

from .parameters import (
    ParameterRange,
    SimulationParameters,
    ParameterStore,
    AMPLITUDE_RANGE,
    FREQUENCY_RANGE,
    PHASE_RANGE,
    PARAMETER_RANGES,
    DEFAULT_PARAMETERS,
    with_amplitude,
    with_frequency,
    with_phase,
    update_parameter
)
from .harmonic import position, angular_frequency, period

__all__ = [
    'ParameterRange',
    'SimulationParameters',
    'ParameterStore',
    'AMPLITUDE_RANGE',
    'FREQUENCY_RANGE',
    'PHASE_RANGE',
    'PARAMETER_RANGES',
    'DEFAULT_PARAMETERS',
    'with_amplitude',
    'with_frequency',
    'with_phase',
    'update_parameter',
    'position',
    'angular_frequency',
    'period'
]
