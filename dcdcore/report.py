"""Plain-text rendering of decoded trajectories."""

from __future__ import annotations

import sys
from typing import TextIO

from .model import DCDTrajectory


def format_summary(trajectory: DCDTrajectory) -> str:
    """
    Describe a trajectory's metadata in a few lines.

    Example:
        >>> print(format_summary(read_dcd("run.dcd")))
        CHARMM 32-bit Trajectory File Little Endian
        ...
    """
    header = trajectory.header
    codec = trajectory.codec
    lines = [
        f"{header.dialect} {8 * codec.word_width}-bit Trajectory File "
        f"{codec.byte_order.capitalize()} Endian",
    ]
    lines.extend(trajectory.title.lines)
    lines += [
        f"Nset: {header.nset}",
        f"Istart: {header.istart}",
        f"Nsavc: {header.nsavc}",
        f"Nstep: {header.nstep}",
        f"Step size: {header.step_size:g} picoseconds",
        f"Number of atoms per frame: {trajectory.n_atoms}",
    ]
    if header.num_fixed:
        lines.append(f"Fixed atoms: {header.num_fixed}")
    if header.has_extra_block:
        lines.append("Unit cell: present")
    if header.has_w_channel:
        lines.append("Fourth coordinate channel: present")
    if trajectory.warnings:
        lines.append(f"Warnings: {len(trajectory.warnings)}")
    return "\n".join(lines)


class TrajectoryPrinter:
    """
    Writes a trajectory summary and, optionally, every coordinate.

    Output columns are atom index, x, y, z.
    """

    def __init__(
        self,
        file: TextIO | None = None,
        separator: str = "\t",
        precision: int = 6,
    ) -> None:
        """
        Initialize printer.

        Args:
            file: Output file (defaults to stdout).
            separator: Field separator.
            precision: Decimal places for coordinates.
        """
        self._file = file if file is not None else sys.stdout
        self._separator = separator
        self._precision = precision

    def print(self, trajectory: DCDTrajectory, frames: bool = True) -> None:
        """
        Write the summary, then each frame's coordinates if ``frames``.

        Args:
            trajectory: Decoded trajectory.
            frames: Also write per-atom coordinates.
        """
        self._file.write(format_summary(trajectory) + "\n")
        if frames:
            for i in range(trajectory.n_frames):
                self.print_frame(trajectory, i)
        self._file.flush()

    def print_frame(self, trajectory: DCDTrajectory, index: int) -> None:
        """Write the coordinates of one frame."""
        fmt = f"{{:.{self._precision}f}}"
        positions = trajectory.frames.frame(index)
        self._file.write(f"Frame {index} coordinates\n")
        for j, (x, y, z) in enumerate(positions):
            values = [f"({j})", fmt.format(x), fmt.format(y), fmt.format(z)]
            self._file.write(self._separator.join(values) + "\n")
