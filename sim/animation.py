"""
Animation export for oscillator recordings.

Supports exporting recordings as:
- MP4 video files (requires ffmpeg)
- GIF animations (requires pillow)
- HTML5 animations (for Jupyter notebooks)
"""

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter, FFMpegWriter
from typing import Tuple

from .plotting import (draw_spring_scene, update_spring_scene, plot_waveform,
                       plot_equation, format_tooltip, COLORS)


class AnimationExporter:
    """
    Export oscillator animations to various formats.
    """

    def __init__(self, figsize: Tuple[int, int] = (10, 8), dpi: int = 100):
        """
        Initialize animation exporter.

        Args:
            figsize: Figure size in inches (width, height)
            dpi: Resolution for output files
        """
        self.figsize = figsize
        self.dpi = dpi

    def animate(self, recording, fps: int = 30) -> FuncAnimation:
        """
        Create animation of the block and a marker running along the waveform.

        Args:
            recording: SimulationRecording with time and positions
            fps: Frames per second of the output

        Returns:
            FuncAnimation object
        """
        fig, (ax_eq, ax_scene, ax_wave) = plt.subplots(
            3, 1, figsize=self.figsize,
            gridspec_kw={'height_ratios': [1, 2, 3]})

        plot_equation(recording.parameters, ax=ax_eq)
        scene = draw_spring_scene(ax_scene, recording.positions[0])
        plot_waveform(recording.waveform, ax=ax_wave)

        marker, = ax_wave.plot([], [], 'o', color=COLORS['frequency'], zorder=4)
        time_text = ax_wave.text(0.02, 0.95, '', transform=ax_wave.transAxes,
                                 fontsize=11, verticalalignment='top')

        # Recordings are usually denser than the export frame rate
        n_frames = len(recording.time)
        recorded_fps = recording.metadata.get('fps', fps)
        skip = max(1, int(round(recorded_fps / fps)))
        window = recording.waveform[-1].t

        def init():
            marker.set_data([], [])
            time_text.set_text('')
            return update_spring_scene(scene, recording.positions[0]) + [marker, time_text]

        def animate(i):
            frame = min(i * skip, n_frames - 1)
            t = recording.time[frame]
            x = recording.positions[frame]

            # Waveform window is fixed; wrap the marker around it
            t_window = t % window
            marker.set_data([t_window], [x])
            time_text.set_text(f't = {t:.2f}s   x = {format_tooltip(x)}')

            return update_spring_scene(scene, x) + [marker, time_text]

        n_animation_frames = (n_frames - 1) // skip + 1
        anim = FuncAnimation(fig, animate, init_func=init,
                             frames=n_animation_frames,
                             interval=1000 / fps, blit=True)

        plt.tight_layout()
        return anim

    def save_mp4(self, anim: FuncAnimation, filename: str, fps: int = 30):
        """
        Save animation as MP4 video.

        Requires ffmpeg to be installed and in PATH.

        Args:
            anim: FuncAnimation object
            filename: Output filename (should end in .mp4)
            fps: Frames per second
        """
        if not filename.endswith('.mp4'):
            filename += '.mp4'

        try:
            writer = FFMpegWriter(fps=fps, metadata={'title': 'Simple Harmonic Motion'},
                                  bitrate=1800)
            anim.save(filename, writer=writer, dpi=self.dpi)
            print(f"Animation saved to {filename}")
        except Exception as e:
            print(f"Error saving MP4 (ffmpeg may not be installed): {e}")
            print("Trying to save as GIF instead...")
            self.save_gif(anim, filename.replace('.mp4', '.gif'), fps=fps)

    def save_gif(self, anim: FuncAnimation, filename: str, fps: int = 30):
        """
        Save animation as GIF.

        Args:
            anim: FuncAnimation object
            filename: Output filename (should end in .gif)
            fps: Frames per second
        """
        if not filename.endswith('.gif'):
            filename += '.gif'

        try:
            writer = PillowWriter(fps=fps)
            anim.save(filename, writer=writer, dpi=self.dpi)
            print(f"Animation saved to {filename}")
        except Exception as e:
            print(f"Error saving GIF: {e}")

    def save_html(self, anim: FuncAnimation, filename: str):
        """
        Save animation as HTML5 (for viewing in browser).

        Args:
            anim: FuncAnimation object
            filename: Output filename (should end in .html)
        """
        if not filename.endswith('.html'):
            filename += '.html'

        try:
            html = anim.to_jshtml()
            with open(filename, 'w', encoding='utf-8') as f:
                f.write(html)
            print(f"Animation saved to {filename}")
        except Exception as e:
            print(f"Error saving HTML: {e}")


def export_recording(recording, output_path: str,
                     format: str = 'gif', fps: int = 30) -> str:
    """
    Convenience function to export a recording as animation.

    Args:
        recording: SimulationRecording
        output_path: Output file path (extension added automatically)
        format: 'gif', 'mp4', or 'html'
        fps: Frames per second

    Returns:
        output_path
    """
    if format.lower() not in ('gif', 'mp4', 'html'):
        raise ValueError(f"Unknown format: {format}")

    exporter = AnimationExporter()
    anim = exporter.animate(recording, fps=fps)

    if format.lower() == 'mp4':
        exporter.save_mp4(anim, output_path, fps=fps)
    elif format.lower() == 'gif':
        exporter.save_gif(anim, output_path, fps=fps)
    else:
        exporter.save_html(anim, output_path)

    plt.close()
    return output_path
