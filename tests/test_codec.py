"""Tests for record markers and word width / byte order detection."""

import io
import struct

import pytest

from dcdcore.decoding import Codec, detect_codec, read_exact, read_record, read_word
from dcdcore.errors import (
    DecodeStage,
    NotADCDFileError,
    RecordMarkerMismatchError,
    UnexpectedEndOfStreamError,
    UnrecognizedMarkerError,
)

ALL_CODECS = [(4, "big"), (4, "little"), (8, "big"), (8, "little")]


class TestCodec:
    """Test the codec value."""

    def test_formats(self):
        """Test struct prefixes and word formats."""
        assert Codec(4, "big").word_format == ">i"
        assert Codec(8, "little").word_format == "<q"
        assert Codec(8, "big").word_dtype.itemsize == 8

    def test_str(self):
        """Test readable description."""
        assert str(Codec(8, "little")) == "64-bit little-endian"

    def test_invalid_word_width(self):
        """Test that only 4 and 8 byte words are accepted."""
        with pytest.raises(ValueError):
            Codec(2, "big")

    def test_invalid_byte_order(self):
        """Test that unknown byte orders are rejected."""
        with pytest.raises(ValueError):
            Codec(4, "middle")


class TestRecordMarkers:
    """Test the shared record reading helpers."""

    def test_read_exact_end_of_stream(self):
        """Test that short reads raise instead of returning partial data."""
        stream = io.BytesIO(b"abc")
        with pytest.raises(UnexpectedEndOfStreamError) as excinfo:
            read_exact(stream, 8, DecodeStage.FRAMES, frame=3)
        assert excinfo.value.stage is DecodeStage.FRAMES
        assert excinfo.value.frame == 3

    def test_read_word_signed(self):
        """Test that words are read as signed integers."""
        stream = io.BytesIO(struct.pack("<i", -1))
        assert read_word(stream, Codec(4, "little"), DecodeStage.TITLE) == -1

    def test_read_record_matched(self):
        """Test reading a well-formed record sized by its leading marker."""
        codec = Codec(8, "big")
        data = struct.pack(">q", 3) + b"xyz" + struct.pack(">q", 3)
        record = read_record(io.BytesIO(data), codec, DecodeStage.FRAMES)
        assert record.payload == b"xyz"
        assert record.matched
        assert record.offset == 0

    def test_read_record_mismatched(self):
        """Test that a marker mismatch is reported, not raised."""
        codec = Codec(4, "little")
        data = struct.pack("<i", 4) + b"abcd" + struct.pack("<i", 5)
        record = read_record(io.BytesIO(data), codec, DecodeStage.FRAMES)
        assert not record.matched
        assert (record.leading, record.trailing) == (4, 5)

    def test_read_record_structural_size(self):
        """Test that an explicit size overrides the leading marker."""
        codec = Codec(4, "little")
        data = struct.pack("<i", 99) + b"ab" + struct.pack("<i", 99)
        record = read_record(io.BytesIO(data), codec, DecodeStage.ATOMS, size=2)
        assert record.payload == b"ab"
        assert record.leading == 99

    def test_read_record_negative_length(self):
        """Test that a negative declared length is rejected."""
        codec = Codec(4, "little")
        stream = io.BytesIO(struct.pack("<i", -8) + b"\x00" * 12)
        with pytest.raises(RecordMarkerMismatchError):
            read_record(stream, codec, DecodeStage.FRAMES)


class TestDetection:
    """Test word width and byte order detection."""

    @pytest.mark.parametrize("word_width,byte_order", ALL_CODECS)
    def test_detects_every_encoding(self, word_width, byte_order):
        """Test that a leading 84 is recognised in every encoding."""
        marker = (84).to_bytes(word_width, byte_order)
        stream = io.BytesIO(marker + b"CORD" + b"\x00" * 80)
        codec = detect_codec(stream)
        assert codec.word_width == word_width
        assert codec.byte_order == byte_order

    def test_rewinds_stream(self):
        """Test that detection starts from offset 0."""
        stream = io.BytesIO((84).to_bytes(4, "big") + b"CORD")
        stream.seek(6)
        assert detect_codec(stream) == Codec(4, "big")

    def test_unrecognized_marker(self):
        """Test that no encoding of 84 fails rather than defaulting."""
        stream = io.BytesIO(struct.pack("<i", 85) + b"CORD" + b"\x00" * 8)
        with pytest.raises(UnrecognizedMarkerError) as excinfo:
            detect_codec(stream)
        assert excinfo.value.stage is DecodeStage.DETECT

    def test_missing_cord_tag(self):
        """Test that 84 without the CORD tag is not a DCD file."""
        stream = io.BytesIO(struct.pack("<i", 84) + b"VELD" + b"\x00" * 8)
        with pytest.raises(NotADCDFileError):
            detect_codec(stream)

    def test_empty_stream(self):
        """Test that an empty stream fails with end of stream."""
        with pytest.raises(UnexpectedEndOfStreamError):
            detect_codec(io.BytesIO(b""))

    def test_format_errors_are_value_errors(self):
        """Test that format errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            detect_codec(io.BytesIO(b"\x01\x02\x03\x04\x05\x06\x07\x08"))
