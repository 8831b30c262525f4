"""Trajectory file readers."""

from .base import TrajectoryReader
from .formats.dcd import DCDReader, read_dcd

__all__ = [
    "TrajectoryReader",
    "DCDReader",
    "read_dcd",
]
