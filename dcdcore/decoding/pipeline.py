"""Decoding pipeline entry point."""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..config import DecoderConfig
from ..diagnostics import DiagnosticSink, WarningCollector, log_warning
from ..model import DCDTrajectory
from .atoms import parse_atom_metadata
from .detect import detect_codec
from .frames import decode_frames
from .header import parse_header
from .title import parse_title

logger = logging.getLogger(__name__)


def decode(
    stream: BinaryIO,
    config: DecoderConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> DCDTrajectory:
    """
    Decode a DCD stream into an immutable trajectory.

    Stages run strictly in order (detect, header, title, atoms, frames),
    each starting where the previous one stopped.

    Args:
        stream: Seekable binary stream. It is rewound to offset 0.
        config: Decoder options. Defaults to the tolerant configuration.
        sink: Receives recoverable anomalies as they are found. Defaults to
            logging them. The returned trajectory carries them either way.

    Returns:
        Decoded trajectory.

    Raises:
        DCDFormatError: On any fatal format error. No partial result is
            returned.

    Example:
        with open("run.dcd", "rb") as f:
            trajectory = decode(f)
        print(trajectory.frames.positions.shape)
    """
    if config is None:
        config = DecoderConfig()
    collector = WarningCollector(log_warning if sink is None else sink)

    codec = detect_codec(stream)
    header = parse_header(stream, codec)
    title = parse_title(stream, codec, config, collector)
    atoms = parse_atom_metadata(stream, codec, header)
    frames = decode_frames(stream, codec, header, atoms, config, collector)

    trajectory = DCDTrajectory(
        codec=codec,
        header=header,
        title=title,
        atoms=atoms,
        frames=frames,
        warnings=collector.warnings,
    )
    logger.info(
        "Decoded %s %s trajectory: %d frames of %d atoms (%d warnings)",
        header.dialect,
        codec,
        trajectory.n_frames,
        trajectory.n_atoms,
        len(collector),
    )
    return trajectory
