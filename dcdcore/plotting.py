"""
Built-in plotting utilities for decoded trajectories.

Example:
    >>> from dcdcore import plotting, read_dcd
    >>> trajectory = read_dcd("run.dcd")
    >>> plotting.coordinates(trajectory, atoms=[0, 10])
    >>> plotting.save("atoms.png")
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .model import DCDTrajectory

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


def coordinates(
    trajectory: DCDTrajectory,
    atoms: Sequence[int] | None = None,
    show: bool = True,
    figsize: tuple[float, float] = (10, 8),
) -> None:
    """
    Plot x, y and z of selected atoms against frame time.

    Args:
        trajectory: Decoded trajectory.
        atoms: Atom indices to plot. Defaults to the first atom.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    if atoms is None:
        atoms = [0]
    times = trajectory.times
    frames = trajectory.frames

    fig, axes = plt.subplots(3, 1, figsize=figsize, sharex=True)
    for ax, label in zip(axes, ("x", "y", "z")):
        channel = getattr(frames, label)
        for atom in atoms:
            ax.plot(times, channel[:, atom], lw=0.8, label=f"atom {atom}")
        ax.set_ylabel(label)
        ax.grid(True, alpha=0.3)
    axes[0].set_title(f"{trajectory.dialect} trajectory, {trajectory.n_frames} frames")
    axes[0].legend()
    axes[-1].set_xlabel("Time")

    plt.tight_layout()
    if show:
        plt.show()


def unit_cell(
    trajectory: DCDTrajectory,
    show: bool = True,
    figsize: tuple[float, float] = (10, 6),
) -> None:
    """
    Plot unit-cell lengths and angles per frame.

    Args:
        trajectory: Decoded trajectory with unit-cell records.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    cells = trajectory.frames.unit_cells
    if not cells:
        raise ValueError("Trajectory has no unit-cell records")

    times = trajectory.times[: len(cells)]
    lengths = np.array([cell.lengths for cell in cells])
    angles = np.array([cell.angles for cell in cells])

    fig, axes = plt.subplots(1, 2, figsize=figsize)

    ax = axes[0]
    for i, label in enumerate(("a", "b", "c")):
        ax.plot(times, lengths[:, i], lw=1, label=label)
    ax.set_xlabel("Time")
    ax.set_ylabel("Length")
    ax.set_title("Cell lengths")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    for i, label in enumerate(("alpha", "beta", "gamma")):
        ax.plot(times, angles[:, i], lw=1, label=label)
    ax.set_xlabel("Time")
    ax.set_ylabel("Angle")
    ax.set_title("Cell angles")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to file.

    Args:
        filename: Output filename (png, pdf, svg, etc.).
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")


def close() -> None:
    """Close all figures."""
    _check_matplotlib()
    plt.close("all")
