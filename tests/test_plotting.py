"""
Unit tests for plotting, equation text and animation export.
"""

import numpy as np
import pytest
import sys
import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oscillator.parameters import SimulationParameters, DEFAULT_PARAMETERS
from sim.clock import ManualScheduler
from sim.sampler import WaveformSampler
from sim.simulator import HarmonicSimulator
from sim.plotting import (format_tooltip, format_equation, format_symbolic_equation,
                          equation_pieces, plot_waveform, plot_equation,
                          update_equation, draw_spring_scene, update_spring_scene,
                          plot_recording, save_figure, SceneBlitter,
                          COLORS, BLOCK_SIZE, X_LIMITS, T_LIMITS)
from sim.animation import AnimationExporter, export_recording


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestFormatting:
    """Tests for tooltip and equation text."""

    def test_tooltip_one_decimal(self):
        assert format_tooltip(-120.0) == "-120.0 px"
        assert format_tooltip(3.14159) == "3.1 px"

    def test_equation_numbers(self):
        text = format_equation(DEFAULT_PARAMETERS)

        assert "120" in text
        assert "0.50" in text
        assert r"\ +\ 0.00" in text

    def test_equation_negative_phase(self):
        text = format_equation(SimulationParameters(45.0, 1.25, -1.5))

        assert "45" in text
        assert "1.25" in text
        assert r"\ -\ 1.50" in text

    def test_symbolic_equation(self):
        assert r"\varphi" in format_symbolic_equation()

    def test_equation_pieces_named(self):
        names = [name for _, name in equation_pieces(DEFAULT_PARAMETERS)]

        assert [n for n in names if n] == ['amplitude', 'frequency', 'phase']

    def test_equation_pieces_symbolic(self):
        pieces = dict((name, text) for text, name in equation_pieces() if name)

        assert pieces['amplitude'] == '$A$'
        assert pieces['frequency'] == '$f$'
        assert r"\varphi" in pieces['phase']

    def test_equation_pieces_negative_phase(self):
        pieces = equation_pieces(SimulationParameters(45.0, 1.25, -1.5))
        text = "".join(t for t, _ in pieces)

        assert "45" in text
        assert "1.25" in text
        assert r"\ -\ " in text
        assert dict((n, t) for t, n in pieces if n)['phase'] == '$1.50$'


class TestPlots:
    """Tests for chart and body renderers."""

    def test_waveform_axes(self):
        table = WaveformSampler().table(DEFAULT_PARAMETERS)
        ax = plot_waveform(table)

        assert ax.get_xlim() == T_LIMITS
        assert ax.get_ylim() == X_LIMITS
        assert len(ax.lines[0].get_xdata()) == 401

    def test_equation_artists(self):
        artists = plot_equation(DEFAULT_PARAMETERS)

        texts = [area.get_text() for area in artists['numeric']]
        assert texts == [text for text, _ in equation_pieces(DEFAULT_PARAMETERS)]

    def test_equation_parameter_colours(self):
        artists = plot_equation(DEFAULT_PARAMETERS)

        for row in ('symbolic', 'numeric'):
            for area, (_, name) in zip(artists[row], equation_pieces()):
                colour = area.get_children()[0].get_color()
                assert colour == COLORS.get(name, 'black')

    def test_update_equation(self):
        artists = plot_equation(DEFAULT_PARAMETERS)
        params = SimulationParameters(45.0, 1.25, -1.5)

        update_equation(artists, params)

        texts = [area.get_text() for area in artists['numeric']]
        assert texts == [text for text, _ in equation_pieces(params)]
        # The symbolic row is left alone
        assert artists['symbolic'][1].get_text() == '$A$'

    def test_spring_scene_moves_block(self):
        fig, ax = plt.subplots()
        scene = draw_spring_scene(ax, 0.0)

        changed = update_spring_scene(scene, 75.0)

        assert len(changed) == 2
        x, _ = scene['block'].get_xy()
        assert x + BLOCK_SIZE / 2 == pytest.approx(75.0)
        np.testing.assert_allclose(scene['spring'].get_xdata()[-1], 75.0)

    def test_recording_plot_and_save(self, tmp_path):
        sim = HarmonicSimulator(ManualScheduler())
        recording = sim.record(duration=1.0, fps=20)

        fig = plot_recording(recording, title="Recording")
        save_figure(fig, 'recording', output_dir=str(tmp_path), formats=['png'])

        assert (tmp_path / 'recording.png').exists()

    def test_save_figure_default_formats(self, tmp_path):
        fig, ax = plt.subplots()
        ax.plot([0, 1], [0, 1])

        save_figure(fig, 'line', output_dir=str(tmp_path))
        save_figure(fig, 'line_png', output_dir=str(tmp_path), formats=['png'])

        assert (tmp_path / 'line.png').exists()
        assert (tmp_path / 'line.pdf').exists()
        assert not (tmp_path / 'line_png.pdf').exists()


class TestSceneBlitter:
    """Tests for per-frame redraw of the spring scene."""

    def make_figure(self):
        fig, (ax_scene, ax_wave) = plt.subplots(2, 1)
        scene = draw_spring_scene(ax_scene, 0.0)
        plot_waveform(WaveformSampler().table(DEFAULT_PARAMETERS), ax=ax_wave)
        blitter = SceneBlitter(fig.canvas, ax_scene, [scene['spring'], scene['block']])
        return fig, scene, ax_wave, blitter

    def test_artists_animated(self):
        fig, scene, _, _ = self.make_figure()

        assert scene['spring'].get_animated()
        assert scene['block'].get_animated()
        assert not scene['wall'].get_animated()

    def test_no_background_before_draw(self):
        fig, scene, _, blitter = self.make_figure()

        assert blitter.update() is False
        assert blitter.frames == 0

    def test_frames_skip_waveform(self, monkeypatch):
        fig, scene, ax_wave, blitter = self.make_figure()
        fig.canvas.draw()

        line = ax_wave.lines[0]
        calls = []
        original = line.draw
        monkeypatch.setattr(line, 'draw', lambda renderer: calls.append(1) or original(renderer))

        for i in range(60):
            update_spring_scene(scene, 100.0 * np.cos(i / 10.0))
            assert blitter.update()

        assert blitter.frames == 60
        assert calls == []

    def test_full_draw_refreshes_background(self):
        fig, scene, _, blitter = self.make_figure()
        fig.canvas.draw()
        first = blitter._background

        fig.canvas.draw()

        assert blitter._background is not None
        assert blitter._background is not first

    def test_disconnect(self):
        fig, scene, _, blitter = self.make_figure()
        fig.canvas.draw()

        blitter.disconnect()
        fig.canvas.draw()

        assert blitter.update() is False


class TestAnimation:
    """Tests for animation export."""

    def test_animate_returns_animation(self):
        sim = HarmonicSimulator(ManualScheduler())
        recording = sim.record(duration=0.5, fps=20)

        anim = AnimationExporter().animate(recording, fps=10)

        assert isinstance(anim, FuncAnimation)

    def test_unknown_format(self):
        sim = HarmonicSimulator(ManualScheduler())
        recording = sim.record(duration=0.5, fps=20)

        with pytest.raises(ValueError):
            export_recording(recording, 'out', format='avi')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
