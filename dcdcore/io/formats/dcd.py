"""DCD (CHARMM/NAMD/X-PLOR) binary trajectory reader."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import BinaryIO

from ...config import DecoderConfig
from ...decoding import decode
from ...diagnostics import DiagnosticSink
from ...model import DCDTrajectory
from ..base import TrajectoryReader


def read_dcd(
    source: str | Path | BinaryIO,
    config: DecoderConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> DCDTrajectory:
    """
    Decode a DCD file in one call.

    Args:
        source: File path or seekable binary stream.
        config: Decoder options.
        sink: Receives recoverable anomalies. Defaults to logging them.

    Returns:
        Decoded trajectory.

    Example:
        >>> trajectory = read_dcd("run.dcd")
        >>> trajectory.frames.positions.shape
        (100, 2048, 3)
    """
    if isinstance(source, (str, Path)):
        with Path(source).open("rb") as f:
            return decode(f, config, sink)
    return decode(source, config, sink)


class DCDReader(TrajectoryReader):
    """
    DCD format trajectory reader.

    Handles X-PLOR and CHARMM files with 32- or 64-bit record markers in
    either byte order, including fixed-atom files. The whole file is decoded
    into an immutable :class:`DCDTrajectory` when opened; frames are then
    served from that snapshot.

    Example:
        with DCDReader("run.dcd") as reader:
            print(reader.read_header()["nset"])
            last = reader[len(reader) - 1]["positions"]
    """

    def __init__(
        self,
        filename: str | Path,
        config: DecoderConfig | None = None,
        sink: DiagnosticSink | None = None,
        lazy: bool = False,
    ) -> None:
        """
        Initialize DCD reader.

        Args:
            filename: Input file path.
            config: Decoder options.
            sink: Receives recoverable anomalies. Defaults to logging them.
            lazy: Defer decoding until the first frame or header access.
        """
        super().__init__(filename)
        self.config = config
        self.sink = sink
        self.lazy = lazy
        self._trajectory: DCDTrajectory | None = None

    def open(self) -> None:
        """Open file and decode it unless lazy."""
        super().open()
        if not self.lazy:
            try:
                self._decode()
            except BaseException:
                self.close()
                raise

    def _decode(self) -> None:
        """Decode the open file."""
        if self._file is None:
            raise RuntimeError("File not open. Use context manager or call open().")
        self._trajectory = decode(self._file, self.config, self.sink)
        self._n_frames = self._trajectory.n_frames

    @property
    def trajectory(self) -> DCDTrajectory:
        """Decoded trajectory snapshot."""
        if self._trajectory is None:
            self._decode()
        return self._trajectory

    def read_header(self) -> dict:
        """
        Read header metadata.

        Returns:
            Header fields plus title, atom count, dialect and marker format.
        """
        trajectory = self.trajectory
        header = asdict(trajectory.header)
        header.update(
            dialect=trajectory.dialect,
            title=str(trajectory.title),
            n_atoms=trajectory.n_atoms,
            word_width=trajectory.codec.word_width,
            byte_order=trajectory.codec.byte_order,
            body_start=trajectory.atoms.body_start,
        )
        return header

    def read_frame(self, index: int) -> dict:
        """
        Read a specific frame.

        Args:
            index: Frame index (0-based).

        Returns:
            Dictionary with 'positions' (n_atoms, 3), 'n_atoms', 'index',
            'time', and 'w' / 'unit_cell' when the file has them.
        """
        trajectory = self.trajectory
        if index < 0 or index >= trajectory.n_frames:
            raise IndexError(f"Frame index {index} out of range")

        frames = trajectory.frames
        result = {
            "positions": frames.frame(index),
            "n_atoms": trajectory.n_atoms,
            "index": index,
            "time": float(trajectory.times[index]),
        }
        if frames.w is not None:
            result["w"] = frames.w[index]
        if frames.unit_cells:
            result["unit_cell"] = frames.unit_cells[index]
        return result

    def __len__(self) -> int:
        """Return number of frames."""
        return self.trajectory.n_frames
