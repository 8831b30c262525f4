"""Trajectory format implementations."""

from .dcd import DCDReader, read_dcd

__all__ = [
    "DCDReader",
    "read_dcd",
]
