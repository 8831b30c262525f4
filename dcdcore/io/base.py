"""Base class for binary trajectory readers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO


class TrajectoryReader(ABC):
    """
    File-backed trajectory with random frame access.

    Subclasses decode frames from ``self._file``, a binary handle that is
    only valid between :meth:`open` and :meth:`close`. Frames are plain
    dictionaries so that callers need no format-specific types.

    Example:
        with DCDReader("run.dcd") as reader:
            last = reader[-1]
            for frame in reader[::10]:
                analyze(frame["positions"])
    """

    def __init__(self, filename: str | Path) -> None:
        """
        Args:
            filename: Trajectory file path.
        """
        self.filename = Path(filename)
        self._file: BinaryIO | None = None
        self._n_frames: int | None = None

    @abstractmethod
    def read_frame(self, index: int) -> dict:
        """
        Decode one frame.

        Args:
            index: 0-based frame index.

        Raises:
            IndexError: If ``index`` is outside ``[0, len(self))``.
        """
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    def read_header(self) -> dict:
        """Return file-level metadata. Empty unless the format has any."""
        return {}

    def __iter__(self) -> Iterator[dict]:
        for i in range(len(self)):
            yield self.read_frame(i)

    def __getitem__(self, index: int | slice) -> dict | list[dict]:
        """Frame by index; negative indices count from the end."""
        if isinstance(index, slice):
            return [self.read_frame(i) for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        return self.read_frame(index)

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self) -> None:
        """Open the file in binary mode."""
        self._file = self.filename.open("rb")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> TrajectoryReader:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def n_frames(self) -> int:
        """Number of frames, cached after the first call."""
        if self._n_frames is None:
            self._n_frames = len(self)
        return self._n_frames
