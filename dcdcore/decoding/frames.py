"""
Frame body decoder.

Each frame is an optional unit-cell record followed by one coordinate block
per channel (x, y, z and optionally w). When atoms are fixed, only frame 0
stores every atom; later x/y/z blocks hold just the free atoms, and the full
frame is rebuilt as a copy of frame 0 with the free positions overwritten.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

import numpy as np
from numpy.typing import NDArray

from ..config import DecoderConfig
from ..diagnostics import DecodeWarning, DiagnosticSink, emit, log_warning
from ..errors import CoordinateBlockSizeError, DecodeStage
from ..model import AtomMetadata, DCDHeader, FrameSet, UnitCell
from .codec import COORD_SIZE, UNIT_CELL_SIZE, Codec, read_record

logger = logging.getLogger(__name__)

XYZ = ("x", "y", "z")


def decode_frames(
    stream: BinaryIO,
    codec: Codec,
    header: DCDHeader,
    atoms: AtomMetadata,
    config: DecoderConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> FrameSet:
    """
    Decode all ``header.nset`` frames.

    Args:
        stream: Binary stream positioned at ``atoms.body_start``.
        codec: Detected word width and byte order.
        header: Parsed header.
        atoms: Parsed atom metadata.
        config: Decoder options.
        sink: Receives recoverable anomalies. Defaults to logging them.

    Returns:
        Fully expanded coordinates of every frame.

    Raises:
        CoordinateBlockSizeError: In strict mode, if a block declares the
            wrong size.
        UnexpectedEndOfStreamError: If the stream ends before the last frame.
    """
    if config is None:
        config = DecoderConfig()
    if sink is None:
        sink = log_warning

    n_atoms = atoms.num_atoms
    fixed = header.num_fixed > 0
    channels: dict[str, list[NDArray[np.float32]]] = {
        name: [] for name in ("x", "y", "z", "w")
    }
    unit_cells: list[UnitCell] = []

    for index in range(header.nset):
        if header.has_extra_block:
            cell = _read_unit_cell(stream, codec, index, config, sink)
            if cell is not None:
                unit_cells.append(cell)

        if index == 0 or not fixed:
            for name in XYZ:
                channels[name].append(
                    _read_coordinates(stream, codec, n_atoms, name, index, config, sink)
                )
        else:
            for name in XYZ:
                free = _read_coordinates(
                    stream, codec, atoms.num_free, name, index, config, sink
                )
                channels[name].append(
                    _overlay(channels[name][0], atoms.free_indexes, free)
                )

        # w has no fixed/free split
        if header.has_w_channel:
            channels["w"].append(
                _read_coordinates(stream, codec, n_atoms, "w", index, config, sink)
            )

    logger.debug("Decoded %d frames of %d atoms", header.nset, n_atoms)
    return FrameSet(
        x=_stack(channels["x"], n_atoms),
        y=_stack(channels["y"], n_atoms),
        z=_stack(channels["z"], n_atoms),
        w=_stack(channels["w"], n_atoms) if header.has_w_channel else None,
        unit_cells=tuple(unit_cells),
    )


def _read_coordinates(
    stream: BinaryIO,
    codec: Codec,
    count: int,
    channel: str,
    index: int,
    config: DecoderConfig,
    sink: DiagnosticSink,
) -> NDArray[np.float32]:
    """Read one block of ``count`` float32 values."""
    expected = count * COORD_SIZE
    record = read_record(stream, codec, DecodeStage.FRAMES, size=expected, frame=index)
    if record.leading != expected:
        # The payload is still read at its structural size.
        emit(
            sink,
            DecodeWarning(
                DecodeStage.FRAMES,
                f"{channel} block declares {record.leading} bytes, "
                f"expected {expected}",
                frame=index,
                offset=record.offset,
            ),
            strict=config.strict,
            error=CoordinateBlockSizeError,
        )
    elif not record.matched:
        emit(
            sink,
            DecodeWarning(
                DecodeStage.FRAMES,
                f"{channel} block closes with marker {record.trailing}, "
                f"opened with {record.leading}",
                frame=index,
                offset=record.offset,
            ),
            strict=config.strict,
        )
    return np.frombuffer(record.payload, dtype=codec.dtype("f4")).astype(np.float32)


def _read_unit_cell(
    stream: BinaryIO,
    codec: Codec,
    index: int,
    config: DecoderConfig,
    sink: DiagnosticSink,
) -> UnitCell | None:
    """Read one unit-cell record; None if unit cells are skipped."""
    record = read_record(
        stream, codec, DecodeStage.FRAMES, size=UNIT_CELL_SIZE, frame=index
    )
    if record.leading != UNIT_CELL_SIZE or not record.matched:
        emit(
            sink,
            DecodeWarning(
                DecodeStage.FRAMES,
                f"Unit cell record markers are {record.leading}/{record.trailing}, "
                f"expected {UNIT_CELL_SIZE}",
                frame=index,
                offset=record.offset,
            ),
            strict=config.strict,
        )
    if not config.read_unit_cells:
        return None
    values = np.frombuffer(record.payload, dtype=codec.dtype("f8")).astype(np.float64)
    return UnitCell(values=values, raw=record.payload)


def _overlay(
    base: NDArray[np.float32],
    free_indexes: NDArray[np.integer],
    free: NDArray[np.float32],
) -> NDArray[np.float32]:
    """Copy ``base`` and write ``free`` at ``free_indexes``."""
    frame = base.copy()
    frame[free_indexes] = free
    return frame


def _stack(frames: list[NDArray[np.float32]], n_atoms: int) -> NDArray[np.float32]:
    """Stack frames into an (n_frames, n_atoms) array."""
    if not frames:
        return np.empty((0, n_atoms), dtype=np.float32)
    return np.stack(frames)
