"""
dcdcore - A decoder for DCD molecular dynamics trajectories.

Design Principles:
- Word width, byte order and dialect detected from the file itself
- Every record marker checked; fatal and recoverable problems kept apart
- Fixed-atom frames expanded to full frames
- Immutable decoded snapshots

Quick Start:
    >>> from dcdcore import read_dcd
    >>> trajectory = read_dcd("run.dcd")
    >>> print(trajectory.n_frames, trajectory.n_atoms)
"""

__version__ = "0.1.0"

from . import plotting
from .config import DecoderConfig
from .decoding import Codec, decode
from .diagnostics import DecodeWarning, WarningCollector
from .errors import DCDFormatError, DecodeStage
from .io import DCDReader, read_dcd
from .model import (
    AtomMetadata,
    DCDHeader,
    DCDTrajectory,
    FrameSet,
    Title,
    UnitCell,
)

__all__ = [
    "read_dcd",
    "decode",
    "plotting",
    "DCDReader",
    "DecoderConfig",
    # Decoded model
    "DCDTrajectory",
    "DCDHeader",
    "Title",
    "AtomMetadata",
    "FrameSet",
    "UnitCell",
    "Codec",
    # Diagnostics
    "DCDFormatError",
    "DecodeStage",
    "DecodeWarning",
    "WarningCollector",
]
