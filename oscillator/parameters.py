"""
Bounded oscillator parameters and the store that holds the live values.

Parameter ranges (slider bounds):
    amplitude A in [20, 200] px,     step 1
    frequency f in [0.1, 2.0] Hz,    step 0.01
    phase   phi in [-pi, pi] rad,    step 0.01

Updates are clamped into range before they reach stored state.
"""

import numpy as np
from dataclasses import dataclass, replace
from typing import Callable, Dict, List


@dataclass(frozen=True)
class ParameterRange:
    """
    Valid range of one simulation parameter.

    Attributes:
        name: Parameter name ('amplitude', 'frequency' or 'phase')
        minimum: Lower bound (inclusive)
        maximum: Upper bound (inclusive)
        step: Resolution of the input control
        default: Value at system start
        unit: Display unit
    """
    name: str
    minimum: float
    maximum: float
    step: float
    default: float
    unit: str = ''

    def clamp(self, value: float) -> float:
        """
        Clip a value into [minimum, maximum].

        Args:
            value: Raw input value

        Returns:
            Value within bounds
        """
        return float(np.clip(float(value), self.minimum, self.maximum))

    def contains(self, value: float) -> bool:
        """Check if value lies within bounds."""
        return self.minimum <= value <= self.maximum


AMPLITUDE_RANGE = ParameterRange('amplitude', 20.0, 200.0, 1.0, 120.0, 'px')
FREQUENCY_RANGE = ParameterRange('frequency', 0.1, 2.0, 0.01, 0.5, 'Hz')
PHASE_RANGE = ParameterRange('phase', -np.pi, np.pi, 0.01, 0.0, 'rad')

PARAMETER_RANGES: Dict[str, ParameterRange] = {
    r.name: r for r in (AMPLITUDE_RANGE, FREQUENCY_RANGE, PHASE_RANGE)
}


@dataclass(frozen=True)
class SimulationParameters:
    """
    Immutable snapshot of the oscillator parameters.

    Attributes:
        amplitude: Peak displacement (px)
        frequency: Oscillation frequency (Hz)
        phase: Initial phase offset (rad)
    """
    amplitude: float = AMPLITUDE_RANGE.default
    frequency: float = FREQUENCY_RANGE.default
    phase: float = PHASE_RANGE.default

    def is_valid(self) -> bool:
        """Check every parameter lies within its range."""
        return all(PARAMETER_RANGES[name].contains(value)
                   for name, value in self.as_dict().items())

    def as_dict(self) -> Dict[str, float]:
        return {
            'amplitude': self.amplitude,
            'frequency': self.frequency,
            'phase': self.phase
        }


DEFAULT_PARAMETERS = SimulationParameters()


def update_parameter(params: SimulationParameters, name: str,
                     value: float) -> SimulationParameters:
    """
    Return a copy of params with one parameter replaced.

    The new value is clamped into its range. A NaN value leaves the
    parameters unchanged.

    Args:
        params: Current parameters
        name: 'amplitude', 'frequency' or 'phase'
        value: Requested value

    Returns:
        New SimulationParameters (or params itself if nothing changed)
    """
    if name not in PARAMETER_RANGES:
        raise ValueError(f"Unknown parameter: {name}")

    value = float(value)
    if np.isnan(value):
        return params

    clamped = PARAMETER_RANGES[name].clamp(value)
    if getattr(params, name) == clamped:
        return params
    return replace(params, **{name: clamped})


def with_amplitude(params: SimulationParameters, value: float) -> SimulationParameters:
    return update_parameter(params, 'amplitude', value)


def with_frequency(params: SimulationParameters, value: float) -> SimulationParameters:
    return update_parameter(params, 'frequency', value)


def with_phase(params: SimulationParameters, value: float) -> SimulationParameters:
    return update_parameter(params, 'phase', value)


class ParameterStore:
    """
    Holder of the live simulation parameters.

    Input controls call the setters; subscribers (e.g. the waveform
    sampler) are notified once for every update that changes stored
    state. Elapsed simulation time is not owned here and is never
    touched by a parameter update.
    """

    def __init__(self, initial: SimulationParameters = DEFAULT_PARAMETERS):
        """
        Initialize store.

        Args:
            initial: Starting parameters (clamped into range)
        """
        params = DEFAULT_PARAMETERS
        for name, value in initial.as_dict().items():
            params = update_parameter(params, name, value)
        self._params = params
        self._subscribers: List[Callable[[SimulationParameters], None]] = []

    @property
    def parameters(self) -> SimulationParameters:
        """Current parameter snapshot."""
        return self._params

    @property
    def amplitude(self) -> float:
        return self._params.amplitude

    @property
    def frequency(self) -> float:
        return self._params.frequency

    @property
    def phase(self) -> float:
        return self._params.phase

    def subscribe(self, callback: Callable[[SimulationParameters], None]) -> None:
        """
        Register a change listener.

        Args:
            callback: Function (new_parameters) -> None
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[SimulationParameters], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def set(self, name: str, value: float) -> SimulationParameters:
        """
        Apply a (parameter name, value) input event.

        Args:
            name: Parameter name
            value: Requested value (clamped silently)

        Returns:
            Stored parameters after the update
        """
        self._commit(update_parameter(self._params, name, value))
        return self._params

    def set_amplitude(self, value: float) -> SimulationParameters:
        return self.set('amplitude', value)

    def set_frequency(self, value: float) -> SimulationParameters:
        return self.set('frequency', value)

    def set_phase(self, value: float) -> SimulationParameters:
        return self.set('phase', value)

    def reset(self) -> SimulationParameters:
        """Restore default parameters."""
        self._commit(DEFAULT_PARAMETERS)
        return self._params

    def _commit(self, params: SimulationParameters) -> None:
        if params == self._params:
            return
        self._params = params
        for callback in list(self._subscribers):
            callback(params)

    def __repr__(self) -> str:
        p = self._params
        return (f"{self.__class__.__name__}(amplitude={p.amplitude}, "
                f"frequency={p.frequency}, phase={p.phase})")
