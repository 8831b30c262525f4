"""Word width and byte order detection."""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..errors import (
    DecodeStage,
    NotADCDFileError,
    UnexpectedEndOfStreamError,
    UnrecognizedMarkerError,
)
from .codec import CORD_TAG, HEADER_MARKER, Codec

logger = logging.getLogger(__name__)

# Probe order: 32-bit before 64-bit, big before little.
_HYPOTHESES = ((4, "big"), (4, "little"), (8, "big"), (8, "little"))


def detect_codec(stream: BinaryIO) -> Codec:
    """
    Detect record-marker width and byte order.

    The first record marker of a DCD file always holds 84, the size of the
    header block. Each (width, byte order) hypothesis is tried in turn; the
    winner must read 84 and be followed by the ``CORD`` tag. The tag check
    tells a 64-bit little-endian marker apart from a 32-bit one, since both
    start with the same four bytes.

    Args:
        stream: Seekable binary stream. It is rewound to offset 0.

    Returns:
        Codec for the rest of the file.

    Raises:
        UnrecognizedMarkerError: If no hypothesis reads 84.
        NotADCDFileError: If 84 is read but ``CORD`` does not follow.
        UnexpectedEndOfStreamError: If fewer than 4 bytes are available.
    """
    stream.seek(0)
    probe = stream.read(8 + len(CORD_TAG))
    if len(probe) < 4:
        raise UnexpectedEndOfStreamError(
            f"Need at least 4 bytes for the leading marker, got {len(probe)}",
            DecodeStage.DETECT,
            offset=0,
        )

    found_marker = False
    for word_width, byte_order in _HYPOTHESES:
        if len(probe) < word_width:
            continue
        marker = int.from_bytes(probe[:word_width], byte_order, signed=False)
        if marker != HEADER_MARKER:
            continue
        found_marker = True
        if probe[word_width : word_width + len(CORD_TAG)] == CORD_TAG:
            codec = Codec(word_width=word_width, byte_order=byte_order)
            logger.debug("Detected %s record markers", codec)
            return codec

    if found_marker:
        raise NotADCDFileError(
            f"Leading marker is {HEADER_MARKER} but no {CORD_TAG!r} tag follows it",
            DecodeStage.DETECT,
            offset=0,
        )
    raise UnrecognizedMarkerError(
        f"Leading marker {probe[:8].hex()} is not {HEADER_MARKER} under any "
        "word width or byte order",
        DecodeStage.DETECT,
        offset=0,
    )
