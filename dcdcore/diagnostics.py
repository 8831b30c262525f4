"""
Non-fatal decoding diagnostics.

Recoverable anomalies (an implausible title line count, a coordinate block
whose trailing marker disagrees with its leading one) do not stop decoding.
They are reported as :class:`DecodeWarning` objects to a *sink*, which is any
callable accepting one warning. Callers may ignore, log, or escalate them.

Example:
    collected = WarningCollector()
    trajectory = decode(stream, sink=collected)
    for warning in collected.warnings:
        print(warning)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .errors import DCDFormatError, DecodeStage, RecordMarkerMismatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeWarning:
    """
    A recoverable anomaly found while decoding.

    Attributes:
        stage: Pipeline stage that found the anomaly.
        message: Human-readable description.
        frame: Frame index, for anomalies inside the frame body.
        offset: Stream offset where the anomaly was found.
    """

    stage: DecodeStage
    message: str
    frame: int | None = None
    offset: int | None = None

    def __str__(self) -> str:
        if self.frame is not None:
            return f"{self.stage.value} (frame {self.frame}): {self.message}"
        return f"{self.stage.value}: {self.message}"


DiagnosticSink = Callable[[DecodeWarning], None]


def log_warning(warning: DecodeWarning) -> None:
    """Default sink: forward the warning to this module's logger."""
    logger.warning("%s", warning)


class WarningCollector:
    """
    Sink that records every warning and forwards it downstream.

    Args:
        downstream: Sink to forward warnings to. ``None`` silences them.
    """

    def __init__(self, downstream: DiagnosticSink | None = None) -> None:
        self._downstream = downstream
        self._warnings: list[DecodeWarning] = []

    def __call__(self, warning: DecodeWarning) -> None:
        self._warnings.append(warning)
        if self._downstream is not None:
            self._downstream(warning)

    @property
    def warnings(self) -> tuple[DecodeWarning, ...]:
        """Warnings received so far, in order."""
        return tuple(self._warnings)

    def __len__(self) -> int:
        return len(self._warnings)


def emit(
    sink: DiagnosticSink,
    warning: DecodeWarning,
    strict: bool = False,
    error: type[DCDFormatError] = RecordMarkerMismatchError,
) -> None:
    """
    Report a recoverable anomaly.

    Args:
        sink: Receives the warning in tolerant mode.
        warning: The anomaly.
        strict: Raise ``error`` instead of warning.
        error: Fatal error type matching the anomaly.

    Raises:
        DCDFormatError: In strict mode.
    """
    if strict:
        raise error(
            warning.message, warning.stage, offset=warning.offset, frame=warning.frame
        )
    sink(warning)
