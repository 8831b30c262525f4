"""ICNTRL header block parser."""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..errors import DecodeStage, RecordMarkerMismatchError
from ..model import DCDHeader
from .codec import CORD_TAG, HEADER_MARKER, ICNTRL_SIZE, Codec, read_exact, read_word

logger = logging.getLogger(__name__)

# ICNTRL is twenty 32-bit fields, whatever the record-marker width.
_N_FIELDS = ICNTRL_SIZE // 4

# Field indices
_NSET = 0
_ISTART = 1
_NSAVC = 2
_NSTEP = 3
_NUM_FIXED = 8
_STEP_SIZE = 9
_EXTRA_BLOCK = 10
_W_CHANNEL = 11
_CHARMM_VERSION = 19


def parse_header(stream: BinaryIO, codec: Codec) -> DCDHeader:
    """
    Parse the 80-byte header block that follows the ``CORD`` tag.

    CHARMM files store the step size as a 32-bit float in field 9 and use
    fields 10 and 11 as the extra-block and w-channel flags. X-PLOR files
    store a 64-bit float across fields 9 and 10 and have neither flag.

    Args:
        stream: Binary stream; it is positioned past the tag first.
        codec: Detected word width and byte order.

    Returns:
        Parsed header.

    Raises:
        RecordMarkerMismatchError: If the trailing marker is not 84.
        UnexpectedEndOfStreamError: If the stream ends inside the header.
    """
    stream.seek(codec.word_width + len(CORD_TAG))
    block = read_exact(stream, ICNTRL_SIZE, DecodeStage.HEADER)

    offset = stream.tell()
    trailer = read_word(stream, codec, DecodeStage.HEADER)
    if trailer != HEADER_MARKER:
        raise RecordMarkerMismatchError(
            f"Header closes with marker {trailer}, expected {HEADER_MARKER}",
            DecodeStage.HEADER,
            offset=offset,
        )

    fields = codec.unpack(f"{_N_FIELDS}I", block)
    charmm_version = fields[_CHARMM_VERSION]
    is_charmm = charmm_version != 0

    start = 4 * _STEP_SIZE
    if is_charmm:
        (step_size,) = codec.unpack("f", block[start : start + 4])
    else:
        (step_size,) = codec.unpack("d", block[start : start + 8])

    header = DCDHeader(
        nset=fields[_NSET],
        istart=fields[_ISTART],
        nsavc=fields[_NSAVC],
        nstep=fields[_NSTEP],
        num_fixed=fields[_NUM_FIXED],
        step_size=step_size,
        is_charmm=is_charmm,
        has_extra_block=is_charmm and fields[_EXTRA_BLOCK] != 0,
        has_w_channel=is_charmm and fields[_W_CHANNEL] != 0,
        charmm_version=charmm_version,
    )
    logger.debug(
        "%s header: nset=%d num_fixed=%d extra_block=%s w=%s",
        header.dialect,
        header.nset,
        header.num_fixed,
        header.has_extra_block,
        header.has_w_channel,
    )
    return header
