"""Exceptions raised while decoding DCD files."""

from __future__ import annotations

from enum import Enum


class DecodeStage(str, Enum):
    """Pipeline stage at which an error or warning was raised."""

    DETECT = "detect"
    HEADER = "header"
    TITLE = "title"
    ATOMS = "atoms"
    FRAMES = "frames"


class DCDFormatError(ValueError):
    """
    Base class for fatal DCD format errors.

    A fatal error aborts decoding; no partial trajectory is returned.

    Attributes:
        stage: Pipeline stage that detected the problem.
        offset: Stream offset at which it was detected, if known.
        frame: Frame index for errors raised by the frame decoder.
    """

    def __init__(
        self,
        message: str,
        stage: DecodeStage,
        offset: int | None = None,
        frame: int | None = None,
    ) -> None:
        self.stage = stage
        self.offset = offset
        self.frame = frame
        super().__init__(message)

    def __reduce__(self):
        # Keeps errors raised in worker processes picklable.
        return (type(self), (self.args[0], self.stage, self.offset, self.frame))

    def __str__(self) -> str:
        location = f"{self.stage.value}"
        if self.frame is not None:
            location += f", frame {self.frame}"
        if self.offset is not None:
            location += f", offset {self.offset}"
        return f"{self.args[0]} [{location}]"


class UnrecognizedMarkerError(DCDFormatError):
    """Leading record marker is not 84 under any word width or byte order."""


class NotADCDFileError(DCDFormatError):
    """The ``CORD`` tag does not follow the leading record marker."""


class RecordMarkerMismatchError(DCDFormatError):
    """A structural record's bracketing markers disagree."""


class InvalidTitleLengthError(DCDFormatError):
    """Title line count is negative (or implausible, in strict mode)."""


class TitleIntegrityMismatchError(DCDFormatError):
    """Title trailing size marker or integrity word is wrong."""


class FixedAtomCountMismatchError(DCDFormatError):
    """Free-atom block counts disagree or contradict the atom count."""


class InvalidFreeAtomIndexError(DCDFormatError):
    """A free-atom index lies outside the atom range."""


class CoordinateBlockSizeError(DCDFormatError):
    """A coordinate block declares the wrong size; raised in strict mode."""


class UnexpectedEndOfStreamError(DCDFormatError):
    """The stream ended in the middle of a record."""
