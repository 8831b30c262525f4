"""Decoder configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Line count some writers (Vega ZZ) emit where 2 was meant.
VEGA_ZZ_TITLE_LINES = 1095062083

DEFAULT_MAX_TITLE_LINES = 1000


def _default_quirks() -> dict[int, int]:
    return {VEGA_ZZ_TITLE_LINES: 2}


@dataclass(frozen=True)
class DecoderConfig:
    """
    Options controlling how tolerant the decoder is.

    Attributes:
        max_title_lines: Declared title line counts above this are treated
            as corrupt and repaired.
        title_line_quirks: Known garbage line counts mapped to the count the
            writer meant. Corrupt counts not listed here become 0.
        strict: Raise instead of warning on recoverable anomalies.
        read_unit_cells: Decode unit-cell records. When False they are
            validated and skipped.
    """

    max_title_lines: int = DEFAULT_MAX_TITLE_LINES
    title_line_quirks: Mapping[int, int] = field(
        default_factory=_default_quirks, hash=False
    )
    strict: bool = False
    read_unit_cells: bool = True

    def __post_init__(self) -> None:
        """Validate options."""
        if self.max_title_lines < 0:
            raise ValueError(
                f"max_title_lines must be non-negative, got {self.max_title_lines}"
            )
        for declared, recovered in self.title_line_quirks.items():
            if recovered < 0:
                raise ValueError(
                    f"Recovered line count for quirk {declared} must be "
                    f"non-negative, got {recovered}"
                )
        object.__setattr__(
            self, "title_line_quirks", MappingProxyType(dict(self.title_line_quirks))
        )

    def __getstate__(self) -> dict:
        """Replace the read-only quirk view with a plain dict for pickling."""
        state = self.__dict__.copy()
        state["title_line_quirks"] = dict(self.title_line_quirks)
        return state

    def __setstate__(self, state: dict) -> None:
        """Restore the read-only quirk view after unpickling."""
        self.__dict__.update(state)
        object.__setattr__(
            self, "title_line_quirks", MappingProxyType(dict(self.title_line_quirks))
        )

    @classmethod
    def default(cls) -> DecoderConfig:
        """Create the default, tolerant configuration."""
        return cls()

    @classmethod
    def strict_mode(cls) -> DecoderConfig:
        """Create a configuration that rejects every anomaly."""
        return cls(strict=True)

    def recover_title_lines(self, declared: int) -> int:
        """Return the line count to use in place of an implausible one."""
        return self.title_line_quirks.get(declared, 0)
