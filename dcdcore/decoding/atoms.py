"""Atom count and free-atom index parser."""

from __future__ import annotations

from typing import BinaryIO

import numpy as np

from ..errors import (
    DecodeStage,
    FixedAtomCountMismatchError,
    InvalidFreeAtomIndexError,
    RecordMarkerMismatchError,
)
from ..model import AtomMetadata, DCDHeader
from .codec import ATOM_COUNT_MARKER, Codec, read_record, read_word


def parse_atom_metadata(
    stream: BinaryIO, codec: Codec, header: DCDHeader
) -> AtomMetadata:
    """
    Parse the atom count and, for files with fixed atoms, the free-atom list.

    The leading marker of the atom count record is the title integrity word,
    already consumed by the title parser. Free-atom indices are stored
    1-based and returned 0-based.

    Raises:
        RecordMarkerMismatchError: If the atom count record is not closed
            by the expected marker.
        FixedAtomCountMismatchError: If the free-atom block's counts
            disagree, or there are fewer atoms than fixed atoms.
        InvalidFreeAtomIndexError: If a free-atom index is out of range.
    """
    offset = stream.tell()
    num_atoms = read_word(stream, codec, DecodeStage.ATOMS)

    trailer_offset = stream.tell()
    trailer = read_word(stream, codec, DecodeStage.ATOMS)
    if trailer != ATOM_COUNT_MARKER:
        raise RecordMarkerMismatchError(
            f"Atom count record closes with {trailer}, expected {ATOM_COUNT_MARKER}",
            DecodeStage.ATOMS,
            offset=trailer_offset,
        )

    if num_atoms < header.num_fixed or num_atoms < 0:
        raise FixedAtomCountMismatchError(
            f"{num_atoms} atoms cannot include {header.num_fixed} fixed atoms",
            DecodeStage.ATOMS,
            offset=offset,
        )

    free_indexes = None
    if header.num_fixed > 0:
        num_free = num_atoms - header.num_fixed
        record = read_record(
            stream, codec, DecodeStage.ATOMS, size=num_free * codec.word_width
        )
        if not record.matched:
            raise FixedAtomCountMismatchError(
                f"Free-atom block opens with {record.leading} "
                f"but closes with {record.trailing}",
                DecodeStage.ATOMS,
                offset=record.offset,
            )

        free_indexes = (
            np.frombuffer(record.payload, dtype=codec.word_dtype).astype(np.int64) - 1
        )
        bad = (free_indexes < 0) | (free_indexes >= num_atoms)
        if np.any(bad):
            first = int(free_indexes[np.argmax(bad)]) + 1
            raise InvalidFreeAtomIndexError(
                f"Free-atom index {first} outside [1, {num_atoms}]",
                DecodeStage.ATOMS,
                offset=record.offset,
            )

    return AtomMetadata(
        num_atoms=num_atoms,
        free_indexes=free_indexes,
        body_start=stream.tell(),
    )
