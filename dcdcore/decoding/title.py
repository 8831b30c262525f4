"""Title block parser."""

from __future__ import annotations

from typing import BinaryIO

from ..config import DecoderConfig
from ..diagnostics import DecodeWarning, DiagnosticSink, emit, log_warning
from ..errors import DecodeStage, InvalidTitleLengthError, TitleIntegrityMismatchError
from ..model import Title
from .codec import TITLE_INTEGRITY_WORD, TITLE_LINE_SIZE, Codec, read_exact, read_word


def parse_title(
    stream: BinaryIO,
    codec: Codec,
    config: DecoderConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> Title:
    """
    Parse the title block.

    The declared line count is untrusted. Negative counts are fatal. Counts
    above ``config.max_title_lines`` are replaced (by the writer-quirk value
    if known, else 0) and reported as a warning.

    Args:
        stream: Binary stream positioned after the header trailer.
        codec: Detected word width and byte order.
        config: Decoder options.
        sink: Receives recoverable anomalies. Defaults to logging them.

    Returns:
        Parsed title.

    Raises:
        InvalidTitleLengthError: If the line count is negative.
        TitleIntegrityMismatchError: If the trailing size marker or the
            integrity word is wrong.
    """
    if config is None:
        config = DecoderConfig()
    if sink is None:
        sink = log_warning

    size = read_word(stream, codec, DecodeStage.TITLE)
    count_offset = stream.tell()
    declared = read_word(stream, codec, DecodeStage.TITLE)

    if declared < 0:
        raise InvalidTitleLengthError(
            f"Negative title line count {declared}",
            DecodeStage.TITLE,
            offset=count_offset,
        )

    num_lines = declared
    if declared > config.max_title_lines:
        num_lines = config.recover_title_lines(declared)
        emit(
            sink,
            DecodeWarning(
                DecodeStage.TITLE,
                f"Implausible title line count {declared}, using {num_lines}; "
                "subsequent reads may be misaligned",
                offset=count_offset,
            ),
            strict=config.strict,
            error=InvalidTitleLengthError,
        )

    text = read_exact(stream, num_lines * TITLE_LINE_SIZE, DecodeStage.TITLE)

    check_offset = stream.tell()
    size_check = read_word(stream, codec, DecodeStage.TITLE)
    if size_check != size:
        raise TitleIntegrityMismatchError(
            f"Title opens with size {size} but closes with {size_check}",
            DecodeStage.TITLE,
            offset=check_offset,
        )

    check_offset = stream.tell()
    integrity = read_word(stream, codec, DecodeStage.TITLE)
    if integrity != TITLE_INTEGRITY_WORD:
        raise TitleIntegrityMismatchError(
            f"Title integrity word is {integrity}, expected {TITLE_INTEGRITY_WORD}",
            DecodeStage.TITLE,
            offset=check_offset,
        )

    return Title(
        text=text.decode("latin-1"),
        declared_lines=declared,
        num_lines=num_lines,
    )
