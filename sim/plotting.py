"""
Plotting utilities for the harmonic oscillator.

Provides the waveform chart, the spring-and-block scene, equation
text (matplotlib mathtext) and tooltip formatting shared by the
interactive applet and the offline report.
"""

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
from matplotlib.offsetbox import AnchoredOffsetbox, HPacker, TextArea, VPacker
from typing import Optional, List, Dict, Any, Tuple
import os

from oscillator.parameters import SimulationParameters
from .sampler import WaveformTable, WINDOW_SECONDS


COLORS = {
    'amplitude': '#ef4444',
    'frequency': '#22c55e',
    'phase': '#8b5cf6',
}

T_LIMITS = (0.0, WINDOW_SECONDS)
X_LIMITS = (-200.0, 200.0)

BLOCK_SIZE = 48.0
WALL_WIDTH = 24.0
SCENE_HALF_WIDTH = 320.0


def format_tooltip(x: float) -> str:
    """Tooltip text for a sample position, e.g. '-120.0 px'."""
    return f"{x:.1f} px"


def format_symbolic_equation() -> str:
    """Mathtext for the symbolic law of motion."""
    return format_equation(None)


def format_equation(params: Optional[SimulationParameters]) -> str:
    """
    Mathtext for the law of motion with current numbers substituted.

    Amplitude is shown with no decimals, frequency and phase with two.
    Same pieces as equation_pieces(), as a single expression.

    Args:
        params: Current parameters, or None for the symbolic form

    Returns:
        Mathtext string
    """
    return "$" + "".join(text.strip("$") for text, _ in equation_pieces(params)) + "$"


def equation_pieces(params: Optional[SimulationParameters] = None) -> List[Tuple[str, Optional[str]]]:
    """
    Split the law of motion into (mathtext, parameter name) pieces.

    Pieces tied to a parameter carry its name so they can be coloured
    with COLORS[name]; connecting pieces carry None. With params None the
    symbols A, f and phi are used instead of numbers.

    Args:
        params: Current parameters, or None for the symbolic form

    Returns:
        List of (mathtext, name or None)
    """
    if params is None:
        amplitude, frequency, phase, sign = 'A', 'f', r'\varphi', '+'
    else:
        amplitude = f"{params.amplitude:.0f}"
        frequency = f"{params.frequency:.2f}"
        phase = f"{abs(params.phase):.2f}"
        sign = '+' if params.phase >= 0 else '-'

    return [
        (r"$x(t) =\ $", None),
        (f"${amplitude}$", 'amplitude'),
        (r"$\,\cos(2\pi\,$", None),
        (f"${frequency}$", 'frequency'),
        (rf"$\,t\ {sign}\ $", None),
        (f"${phase}$", 'phase'),
        (r"$)$", None),
    ]


def plot_equation(params: SimulationParameters,
                  ax: Optional[plt.Axes] = None) -> Dict[str, Any]:
    """
    Typeset the symbolic and numeric equations on an axes.

    Each equation is a row of text pieces; A, f and phi pieces take the
    colour of their parameter.

    Args:
        params: Current parameters
        ax: Matplotlib axes (creates new if None)

    Returns:
        Dictionary with 'ax', the 'symbolic' and 'numeric' TextArea lists
        and the anchored 'box'
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 1.5))

    ax.set_axis_off()

    def make_row(pieces):
        return [TextArea(text, textprops=dict(fontsize=14,
                                              color=COLORS.get(name, 'black')))
                for text, name in pieces]

    symbolic = make_row(equation_pieces())
    numeric = make_row(equation_pieces(params))

    rows = VPacker(children=[HPacker(children=symbolic, align='baseline', pad=0, sep=0),
                             HPacker(children=numeric, align='baseline', pad=0, sep=0)],
                   align='center', pad=0, sep=8)
    box = AnchoredOffsetbox(loc='center', child=rows, frameon=False,
                            bbox_to_anchor=(0.5, 0.5), bbox_transform=ax.transAxes)
    ax.add_artist(box)

    return {'ax': ax, 'symbolic': symbolic, 'numeric': numeric, 'box': box}


def update_equation(artists: Dict[str, Any], params: SimulationParameters) -> None:
    """Refresh the numeric equation after a parameter change."""
    for area, (text, _) in zip(artists['numeric'], equation_pieces(params)):
        area.set_text(text)


def plot_waveform(table: WaveformTable, ax: Optional[plt.Axes] = None,
                  title: Optional[str] = None,
                  color: str = COLORS['amplitude']) -> plt.Axes:
    """
    Plot the waveform table x against t with fixed axis bounds.

    Args:
        table: WaveformTable from the sampler
        ax: Matplotlib axes (creates new if None)
        title: Plot title
        color: Line color

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))

    ax.plot(table.times, table.positions, '-', color=color, linewidth=1.5)

    ax.set_xlim(*T_LIMITS)
    ax.set_ylim(*X_LIMITS)
    ax.set_xlabel('t (s)')
    ax.set_ylabel('x (px)')
    ax.grid(True, linestyle='--', alpha=0.5)

    if title:
        ax.set_title(title)

    return ax


def draw_spring_scene(ax: plt.Axes, position: float = 0.0) -> Dict[str, Any]:
    """
    Draw wall, spring line and block for the body renderer.

    The block centre sits at horizontal offset `position` (px) from the
    scene centre.

    Args:
        ax: Matplotlib axes
        position: Initial displacement

    Returns:
        Dictionary of artists for update_spring_scene()
    """
    ax.set_xlim(-SCENE_HALF_WIDTH, SCENE_HALF_WIDTH)
    ax.set_ylim(-96, 96)
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_facecolor('#f8fafc')

    wall = Rectangle((-SCENE_HALF_WIDTH, -96), WALL_WIDTH, 192,
                     facecolor='#9ca3af', edgecolor='none', zorder=1)
    ax.add_patch(wall)

    spring, = ax.plot([], [], '-', color='#374151', linewidth=3, zorder=2)

    block = Rectangle((0, 0), BLOCK_SIZE, BLOCK_SIZE,
                      facecolor=COLORS['amplitude'], edgecolor='#7f1d1d',
                      zorder=3)
    ax.add_patch(block)

    artists = {'ax': ax, 'wall': wall, 'spring': spring, 'block': block}
    update_spring_scene(artists, position)
    return artists


def update_spring_scene(artists: Dict[str, Any], position: float) -> List[Any]:
    """
    Move the block and stretch the spring to a new displacement.

    Args:
        artists: Dictionary from draw_spring_scene()
        position: Displacement (px)

    Returns:
        List of changed artists (for blitting)
    """
    anchor = -SCENE_HALF_WIDTH + WALL_WIDTH / 2
    artists['spring'].set_data([anchor, position], [0.0, 0.0])
    artists['block'].set_xy((position - BLOCK_SIZE / 2, -BLOCK_SIZE / 2))
    return [artists['spring'], artists['block']]


class SceneBlitter:
    """
    Per-frame redraw of the moving scene artists only.

    The artists are marked animated, so full figure draws leave them
    out; after each full draw the axes background is cached. A frame
    then restores that background, draws the artists on top and blits
    the axes region, without touching the rest of the figure.
    """

    def __init__(self, canvas, ax: plt.Axes, artists: List[Any]):
        """
        Initialize blitter.

        Args:
            canvas: Figure canvas (Agg based)
            ax: Axes holding the moving artists
            artists: Artists redrawn every frame
        """
        self.canvas = canvas
        self.ax = ax
        self.artists = list(artists)
        self.frames = 0
        self._background = None

        for artist in self.artists:
            artist.set_animated(True)

        # Full draws (startup, parameter edits, resize) refresh the background
        self._cid = canvas.mpl_connect('draw_event', self._on_draw)

    def _on_draw(self, event) -> None:
        self._background = self.canvas.copy_from_bbox(self.ax.bbox)
        self._draw_artists()

    def _draw_artists(self) -> None:
        for artist in self.artists:
            self.ax.draw_artist(artist)

    def update(self) -> bool:
        """
        Redraw the moving artists.

        Returns:
            False if no full draw has happened yet (nothing to restore)
        """
        if self._background is None:
            return False

        self.canvas.restore_region(self._background)
        self._draw_artists()
        self.canvas.blit(self.ax.bbox)
        self.frames += 1
        return True

    def disconnect(self) -> None:
        self.canvas.mpl_disconnect(self._cid)
        self._background = None


def plot_recording(recording, title: Optional[str] = None) -> plt.Figure:
    """
    Plot recorded tick positions over the waveform table.

    Args:
        recording: SimulationRecording
        title: Figure title

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 4))

    plot_waveform(recording.waveform, ax=ax)
    ax.plot(recording.time, recording.positions, '.', color='#1f2937',
            markersize=2, alpha=0.6, label='Recorded ticks')
    ax.legend(loc='upper right')

    if title:
        ax.set_title(title)

    plt.tight_layout()
    return fig


def save_figure(fig: plt.Figure, filename: str,
                output_dir: str = 'report/figures',
                formats: Optional[List[str]] = None) -> None:
    """
    Save figure to multiple formats.

    Args:
        fig: Matplotlib figure
        filename: Base filename (without extension)
        output_dir: Output directory
        formats: List of file formats (default png and pdf)
    """
    if formats is None:
        formats = ['png', 'pdf']

    os.makedirs(output_dir, exist_ok=True)

    for fmt in formats:
        path = os.path.join(output_dir, f'{filename}.{fmt}')
        fig.savefig(path, dpi=150, bbox_inches='tight')
