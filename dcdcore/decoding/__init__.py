"""DCD decoding pipeline stages."""

from .atoms import parse_atom_metadata
from .codec import Codec, Record, read_exact, read_record, read_word
from .detect import detect_codec
from .frames import decode_frames
from .header import parse_header
from .pipeline import decode
from .title import parse_title

__all__ = [
    # Entry point
    "decode",
    # Stages
    "detect_codec",
    "parse_header",
    "parse_title",
    "parse_atom_metadata",
    "decode_frames",
    # Record markers
    "Codec",
    "Record",
    "read_exact",
    "read_word",
    "read_record",
]
