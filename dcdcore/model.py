"""Decoded DCD trajectory model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from .decoding.codec import Codec
    from .diagnostics import DecodeWarning


@dataclass(frozen=True)
class DCDHeader:
    """
    Simulation metadata from the ICNTRL header block.

    Attributes:
        nset: Number of frames.
        istart: Timestep of the first frame.
        nsavc: Timesteps between frames.
        nstep: Total number of timesteps (0 in X-PLOR files).
        num_fixed: Number of fixed atoms (0 = none).
        step_size: Integration timestep, in the writer's time unit.
        is_charmm: CHARMM dialect (otherwise X-PLOR).
        has_extra_block: A unit-cell record precedes every frame.
        has_w_channel: Frames carry a fourth coordinate channel.
        charmm_version: CHARMM version tag (0 for X-PLOR).
    """

    nset: int
    istart: int
    nsavc: int
    nstep: int
    num_fixed: int
    step_size: float
    is_charmm: bool
    has_extra_block: bool
    has_w_channel: bool
    charmm_version: int = 0

    @property
    def dialect(self) -> str:
        """Return ``"CHARMM"`` or ``"X-PLOR"``."""
        return "CHARMM" if self.is_charmm else "X-PLOR"


@dataclass(frozen=True)
class Title:
    """
    Title block text.

    Attributes:
        text: All title lines concatenated, as stored.
        declared_lines: Line count found in the file.
        num_lines: Line count used after repair of implausible values.
    """

    text: str
    declared_lines: int
    num_lines: int

    @property
    def lines(self) -> list[str]:
        """Title lines with trailing blanks and NULs stripped."""
        width = len(self.text) // self.num_lines if self.num_lines else 0
        return [
            self.text[i * width : (i + 1) * width].rstrip(" \x00")
            for i in range(self.num_lines)
        ]

    @property
    def repaired(self) -> bool:
        """Whether the declared line count was replaced."""
        return self.declared_lines != self.num_lines

    def __str__(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class AtomMetadata:
    """
    Atom count and fixed-atom layout.

    Attributes:
        num_atoms: Atoms per frame.
        free_indexes: 0-based indices of atoms stored in every frame, or
            None when no atoms are fixed.
        body_start: Byte offset where frame data begins.
    """

    num_atoms: int
    free_indexes: NDArray[np.integer] | None
    body_start: int

    def __post_init__(self) -> None:
        """Make the index array read-only."""
        if self.free_indexes is not None:
            self.free_indexes.flags.writeable = False

    def __setstate__(self, state: dict) -> None:
        """Restore read-only arrays after unpickling."""
        self.__dict__.update(state)
        self.__post_init__()

    @property
    def num_free(self) -> int:
        """Number of atoms stored in every frame."""
        if self.free_indexes is None:
            return self.num_atoms
        return len(self.free_indexes)

    @property
    def num_fixed(self) -> int:
        """Number of fixed atoms."""
        return self.num_atoms - self.num_free


@dataclass(frozen=True)
class UnitCell:
    """
    One unit-cell record.

    Values are kept in file order ``A, gamma, B, beta, alpha, C``. Depending
    on the writer the angles are degrees or their cosines.

    Attributes:
        values: The six float64 values, shape (6,).
        raw: The untouched 48-byte payload.
    """

    values: NDArray[np.floating]
    raw: bytes = field(repr=False)

    def __post_init__(self) -> None:
        """Validate shape and make values read-only."""
        values = np.asarray(self.values, dtype=np.float64)
        if values.shape != (6,):
            raise ValueError(f"Unit cell needs 6 values, got shape {values.shape}")
        values.flags.writeable = False
        object.__setattr__(self, "values", values)

    def __setstate__(self, state: dict) -> None:
        """Restore read-only arrays after unpickling."""
        self.__dict__.update(state)
        self.__post_init__()

    @property
    def a(self) -> float:
        return float(self.values[0])

    @property
    def b(self) -> float:
        return float(self.values[2])

    @property
    def c(self) -> float:
        return float(self.values[5])

    @property
    def alpha(self) -> float:
        return float(self.values[4])

    @property
    def beta(self) -> float:
        return float(self.values[3])

    @property
    def gamma(self) -> float:
        return float(self.values[1])

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return [a, b, c]."""
        return np.array([self.a, self.b, self.c])

    @property
    def angles(self) -> NDArray[np.floating]:
        """Return [alpha, beta, gamma]."""
        return np.array([self.alpha, self.beta, self.gamma])


@dataclass(frozen=True)
class FrameSet:
    """
    Per-frame coordinates, one array per channel.

    Every channel array has shape (n_frames, n_atoms). Fixed-atom frames are
    stored fully expanded.

    Attributes:
        x: X coordinates.
        y: Y coordinates.
        z: Z coordinates.
        w: Fourth channel, or None when the file has none.
        unit_cells: Unit-cell record of each frame, empty if absent or skipped.
    """

    x: NDArray[np.floating]
    y: NDArray[np.floating]
    z: NDArray[np.floating]
    w: NDArray[np.floating] | None = None
    unit_cells: tuple[UnitCell, ...] = ()

    def __post_init__(self) -> None:
        """Validate channel shapes and make arrays read-only."""
        shape = self.x.shape
        for name in ("y", "z", "w"):
            channel = getattr(self, name)
            if channel is not None and channel.shape != shape:
                raise ValueError(
                    f"{name} shape {channel.shape} does not match x shape {shape}"
                )
        for channel in (self.x, self.y, self.z, self.w):
            if channel is not None:
                channel.flags.writeable = False

    def __setstate__(self, state: dict) -> None:
        """Restore read-only arrays after unpickling."""
        self.__dict__.update(state)
        self.__post_init__()

    @property
    def n_frames(self) -> int:
        """Return number of frames."""
        return self.x.shape[0]

    @property
    def n_atoms(self) -> int:
        """Return number of atoms per frame."""
        return self.x.shape[1]

    @property
    def positions(self) -> NDArray[np.floating]:
        """Return coordinates as one (n_frames, n_atoms, 3) array."""
        return np.stack([self.x, self.y, self.z], axis=-1)

    def frame(self, index: int) -> NDArray[np.floating]:
        """Return the (n_atoms, 3) coordinates of one frame."""
        return np.stack([self.x[index], self.y[index], self.z[index]], axis=-1)


@dataclass(frozen=True)
class DCDTrajectory:
    """
    Immutable snapshot of a decoded DCD file.

    Attributes:
        codec: Detected word width and byte order.
        header: Simulation metadata.
        title: Title block.
        atoms: Atom count and fixed-atom layout.
        frames: Coordinates.
        warnings: Recoverable anomalies met while decoding.
    """

    codec: Codec
    header: DCDHeader
    title: Title
    atoms: AtomMetadata
    frames: FrameSet
    warnings: tuple[DecodeWarning, ...] = ()

    @property
    def n_frames(self) -> int:
        """Return number of frames."""
        return self.frames.n_frames

    @property
    def n_atoms(self) -> int:
        """Return number of atoms per frame."""
        return self.atoms.num_atoms

    @property
    def dialect(self) -> str:
        """Return ``"CHARMM"`` or ``"X-PLOR"``."""
        return self.header.dialect

    @property
    def is_64bit(self) -> bool:
        """Whether record markers are 64-bit."""
        return self.codec.word_width == 8

    @property
    def times(self) -> NDArray[np.floating]:
        """Time of each frame, ``(istart + i * nsavc) * step_size``."""
        steps = self.header.istart + np.arange(self.n_frames) * self.header.nsavc
        return steps * self.header.step_size
