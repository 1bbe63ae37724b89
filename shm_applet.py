#!/usr/bin/env python3
"""
Simple Harmonic Motion Applet - interactive oscillator viewer.

1. Adjust amplitude, frequency and initial phase with the sliders
2. Watch the block oscillate on its spring in real time
3. Inspect the waveform x(t) over the first 8 seconds (hover for values)

Usage:
    python shm_applet.py
"""

import tkinter as tk
from tkinter import ttk, scrolledtext
import matplotlib.pyplot as plt
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from oscillator.parameters import PARAMETER_RANGES
from sim.clock import TkScheduler, FRAME_INTERVAL_MS
from sim.simulator import HarmonicSimulator, SimulationState
from sim.sampler import WaveformTable
from sim.plotting import (COLORS, draw_spring_scene, update_spring_scene,
                          plot_waveform, plot_equation, update_equation,
                          format_tooltip, SceneBlitter)


SLIDER_LABELS = {
    'amplitude': ("Amplitude A (px)", "{:.0f}"),
    'frequency': ("Frequency f (Hz)", "{:.2f}"),
    'phase': ("Initial phase φ (rad)", "{:.2f}"),
}


class SHMApplet:
    """GUI for the simple harmonic motion simulator."""

    def __init__(self, root):
        self.root = root
        self.root.title("Simple Harmonic Motion")
        self.root.geometry("1100x900")

        self.simulator = HarmonicSimulator(TkScheduler(root, FRAME_INTERVAL_MS))

        self.value_labels = {}
        self.slider_vars = {}

        self._create_layout()
        self._create_parameter_panel()
        self._create_output_panel()
        self._create_visualization_panel()

        self.simulator.on_frame(self._draw_frame)
        self.simulator.on_waveform(self._draw_waveform)

        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self._start()

    def _create_layout(self):
        """Create the main layout."""
        self.main_paned = ttk.PanedWindow(self.root, orient=tk.HORIZONTAL)
        self.main_paned.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        self.left_frame = ttk.Frame(self.main_paned, width=320)
        self.main_paned.add(self.left_frame, weight=1)

        self.right_frame = ttk.Frame(self.main_paned)
        self.main_paned.add(self.right_frame, weight=3)

    def _create_parameter_panel(self):
        """Create one slider per oscillator parameter."""
        self.param_frame = ttk.LabelFrame(self.left_frame, text="Parameters", padding=10)
        self.param_frame.pack(fill=tk.X, padx=5, pady=5)

        params = self.simulator.parameters
        for row, (name, rng) in enumerate(PARAMETER_RANGES.items()):
            label_text, fmt = SLIDER_LABELS[name]
            value = getattr(params, name)

            label = tk.Label(self.param_frame, fg=COLORS[name],
                             text=f"{label_text}: {fmt.format(value)}")
            label.grid(row=2 * row, column=0, sticky=tk.W)
            self.value_labels[name] = label

            var = tk.DoubleVar(value=value)
            scale = tk.Scale(self.param_frame, variable=var, orient=tk.HORIZONTAL,
                             from_=rng.minimum, to=rng.maximum, resolution=rng.step,
                             showvalue=False, length=280, troughcolor=COLORS[name],
                             command=lambda v, n=name: self._on_slider(n, v))
            scale.grid(row=2 * row + 1, column=0, sticky="ew", pady=(0, 8))
            self.slider_vars[name] = var

        button_frame = ttk.Frame(self.left_frame)
        button_frame.pack(fill=tk.X, padx=5, pady=5)
        ttk.Button(button_frame, text="Restart", command=self._start).pack(side=tk.LEFT, padx=2)
        ttk.Button(button_frame, text="Pause", command=self._stop).pack(side=tk.LEFT, padx=2)
        ttk.Button(button_frame, text="Reset", command=self._reset).pack(side=tk.LEFT, padx=2)

    def _create_output_panel(self):
        """Create the output/log panel."""
        output_frame = ttk.LabelFrame(self.left_frame, text="Output Log", padding=5)
        output_frame.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        self.output_text = scrolledtext.ScrolledText(output_frame, height=12, width=36,
                                                     state='normal', wrap=tk.WORD)
        self.output_text.pack(fill=tk.BOTH, expand=True)

    def _create_visualization_panel(self):
        """Create the equation, spring and waveform axes."""
        self.fig, (self.ax_eq, self.ax_scene, self.ax_wave) = plt.subplots(
            3, 1, figsize=(8, 8), gridspec_kw={'height_ratios': [1, 2, 3]})

        self.equation = plot_equation(self.simulator.parameters, ax=self.ax_eq)
        self.scene = draw_spring_scene(self.ax_scene, self.simulator.position)

        table = self.simulator.waveform
        plot_waveform(table, ax=self.ax_wave)
        self.wave_line = self.ax_wave.lines[0]

        self.tooltip = self.ax_wave.annotate(
            '', xy=(0, 0), xytext=(10, 10), textcoords='offset points',
            bbox=dict(boxstyle='round', fc='white', alpha=0.9))
        self.tooltip.set_visible(False)

        self.fig.tight_layout()

        # Embed in tkinter
        self.canvas = FigureCanvasTkAgg(self.fig, master=self.right_frame)
        self.scene_blitter = SceneBlitter(self.canvas, self.ax_scene,
                                          [self.scene['spring'], self.scene['block']])
        self.canvas.draw()
        self.canvas.get_tk_widget().pack(fill=tk.BOTH, expand=True)

        self.canvas.mpl_connect('motion_notify_event', self._on_plot_motion)

    def _on_slider(self, name: str, value: str):
        params = self.simulator.set_parameter(name, float(value))
        label_text, fmt = SLIDER_LABELS[name]
        self.value_labels[name].config(text=f"{label_text}: {fmt.format(getattr(params, name))}")

    def _draw_frame(self, state: SimulationState):
        """Body renderer: move the block to the current displacement."""
        update_spring_scene(self.scene, state.position)
        # Only the scene axes are redrawn per frame; the chart waits for parameter edits
        if not self.scene_blitter.update():
            self.canvas.draw_idle()

    def _draw_waveform(self, table: WaveformTable):
        """Chart renderer: redraw after a parameter change."""
        self.wave_line.set_data(table.times, table.positions)
        update_equation(self.equation, table.parameters)
        self.tooltip.set_visible(False)
        self.canvas.draw_idle()
        p = table.parameters
        self._log(f"A={p.amplitude:.0f}  f={p.frequency:.2f}  φ={p.phase:.2f}")

    def _on_plot_motion(self, event):
        if event.inaxes != self.ax_wave or event.xdata is None:
            if self.tooltip.get_visible():
                self.tooltip.set_visible(False)
                self.canvas.draw_idle()
            return

        sample = self.simulator.waveform.nearest(event.xdata)
        self.tooltip.xy = (sample.t, sample.x)
        self.tooltip.set_text(f"t = {sample.t:.2f} s\nx = {format_tooltip(sample.x)}")
        self.tooltip.set_visible(True)
        self.canvas.draw_idle()

    def _start(self):
        self.simulator.start()
        self._log("Animation started")

    def _stop(self):
        self.simulator.stop()
        self._log(f"Animation paused at t = {self.simulator.elapsed_time:.2f}s")

    def _reset(self):
        params = self.simulator.store.reset()
        for name, var in self.slider_vars.items():
            var.set(getattr(params, name))
            label_text, fmt = SLIDER_LABELS[name]
            self.value_labels[name].config(text=f"{label_text}: {fmt.format(getattr(params, name))}")

    def _log(self, message: str):
        """Log a message."""
        self.output_text.insert(tk.END, message + "\n")
        self.output_text.see(tk.END)

    def _on_close(self):
        # Cancel the pending tick before the widgets go away
        self.simulator.stop()
        self.scene_blitter.disconnect()
        plt.close(self.fig)
        self.root.destroy()


def main():
    """Main entry point."""
    root = tk.Tk()
    app = SHMApplet(root)
    root.mainloop()


if __name__ == "__main__":
    main()
