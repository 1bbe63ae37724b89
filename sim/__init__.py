"""
Simulation engine and plotting utilities.

Provides the wall-clock animation loop, waveform sampling,
visualization, and animation export.
"""

from .clock import SimulationClock, Scheduler, TkScheduler, ManualScheduler
from .sampler import WaveformSampler, WaveformTable, WaveformSample, iter_samples
from .simulator import HarmonicSimulator, SimulationState, SimulationRecording
from .plotting import (plot_waveform, plot_equation, plot_recording,
                       draw_spring_scene, update_spring_scene,
                       update_equation, equation_pieces, SceneBlitter,
                       format_equation, format_tooltip, save_figure)
from .animation import AnimationExporter, export_recording

__all__ = [
    'SimulationClock',
    'Scheduler',
    'TkScheduler',
    'ManualScheduler',
    'WaveformSampler',
    'WaveformTable',
    'WaveformSample',
    'iter_samples',
    'HarmonicSimulator',
    'SimulationState',
    'SimulationRecording',
    'plot_waveform',
    'plot_equation',
    'plot_recording',
    'draw_spring_scene',
    'update_spring_scene',
    'update_equation',
    'equation_pieces',
    'SceneBlitter',
    'format_equation',
    'format_tooltip',
    'save_figure',
    'AnimationExporter',
    'export_recording'
]
