"""
Record-marker codec shared by every decoding stage.

DCD files are Fortran unformatted files: every block of data is bracketed by
a length marker before and after it. The marker width (4 or 8 bytes) and the
byte order are detected once per file and captured in an immutable
:class:`Codec`, which is then passed into every read.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

import numpy as np

from ..errors import (
    DecodeStage,
    RecordMarkerMismatchError,
    UnexpectedEndOfStreamError,
)

# Binary layout constants
HEADER_MARKER = 84
CORD_TAG = b"CORD"
ICNTRL_SIZE = 80
TITLE_LINE_SIZE = 80
ATOM_COUNT_MARKER = 4
TITLE_INTEGRITY_WORD = ATOM_COUNT_MARKER
UNIT_CELL_SIZE = 48
COORD_SIZE = 4

# Upper bound on a single read() call; lengths come from the file.
_READ_CHUNK = 1 << 20

_BYTE_ORDER_PREFIX = {"big": ">", "little": "<"}
_WORD_FORMAT = {4: "i", 8: "q"}


@dataclass(frozen=True)
class Codec:
    """
    Word width and byte order of one DCD file.

    Attributes:
        word_width: Size of record markers and integer metadata (4 or 8).
        byte_order: ``"big"`` or ``"little"``.
    """

    word_width: int
    byte_order: str

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.word_width not in _WORD_FORMAT:
            raise ValueError(f"word_width must be 4 or 8, got {self.word_width}")
        if self.byte_order not in _BYTE_ORDER_PREFIX:
            raise ValueError(
                f"byte_order must be 'big' or 'little', got {self.byte_order!r}"
            )

    def __str__(self) -> str:
        return f"{8 * self.word_width}-bit {self.byte_order}-endian"

    @property
    def prefix(self) -> str:
        """struct/numpy byte order prefix."""
        return _BYTE_ORDER_PREFIX[self.byte_order]

    @property
    def word_format(self) -> str:
        """struct format of one signed word."""
        return self.prefix + _WORD_FORMAT[self.word_width]

    def unpack(self, fmt: str, data: bytes) -> tuple:
        """Unpack ``data`` with a byte-order-less struct format."""
        return struct.unpack(self.prefix + fmt, data)

    def unpack_word(self, data: bytes) -> int:
        """Unpack one signed word."""
        return struct.unpack(self.word_format, data)[0]

    def dtype(self, kind: str) -> np.dtype:
        """NumPy dtype for ``kind`` (e.g. ``"f4"``) in this byte order."""
        return np.dtype(self.prefix + kind)

    @property
    def word_dtype(self) -> np.dtype:
        """NumPy dtype of one signed word."""
        return self.dtype(f"i{self.word_width}")


@dataclass(frozen=True)
class Record:
    """
    One bracketed block as read from the stream.

    Attributes:
        leading: Marker before the payload.
        payload: Payload bytes.
        trailing: Marker after the payload.
        offset: Stream offset of the leading marker.
    """

    leading: int
    payload: bytes
    trailing: int
    offset: int

    @property
    def matched(self) -> bool:
        """Whether the bracketing markers agree."""
        return self.leading == self.trailing


def read_exact(
    stream: BinaryIO,
    size: int,
    stage: DecodeStage,
    frame: int | None = None,
) -> bytes:
    """
    Read exactly ``size`` bytes.

    Reads in bounded chunks so that a corrupt length fails on stream
    exhaustion instead of allocating the full declared size up front.

    Raises:
        UnexpectedEndOfStreamError: If the stream ends first.
    """
    offset = stream.tell()
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, _READ_CHUNK))
        if not chunk:
            raise UnexpectedEndOfStreamError(
                f"Expected {size} bytes, stream ended after {size - remaining}",
                stage,
                offset=offset,
                frame=frame,
            )
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_word(
    stream: BinaryIO,
    codec: Codec,
    stage: DecodeStage,
    frame: int | None = None,
) -> int:
    """Read one signed word-sized integer."""
    return codec.unpack_word(read_exact(stream, codec.word_width, stage, frame))


def read_record(
    stream: BinaryIO,
    codec: Codec,
    stage: DecodeStage,
    size: int | None = None,
    frame: int | None = None,
) -> Record:
    """
    Read a marker-bracketed block.

    Args:
        stream: Binary stream positioned at the leading marker.
        codec: Word width and byte order.
        stage: Stage reported in errors.
        size: Structurally implied payload size. If None, the leading
            marker's value is used.
        frame: Frame index reported in errors.

    Returns:
        The record. Whether a marker mismatch is fatal is up to the caller.

    Raises:
        RecordMarkerMismatchError: If ``size`` is None and the leading
            marker is negative.
        UnexpectedEndOfStreamError: If the stream ends inside the record.
    """
    offset = stream.tell()
    leading = read_word(stream, codec, stage, frame)
    if size is None:
        if leading < 0:
            raise RecordMarkerMismatchError(
                f"Negative record length {leading}", stage, offset=offset, frame=frame
            )
        size = leading
    payload = read_exact(stream, size, stage, frame)
    trailing = read_word(stream, codec, stage, frame)
    return Record(leading=leading, payload=payload, trailing=trailing, offset=offset)
