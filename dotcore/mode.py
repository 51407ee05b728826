"""The mode in which target files are written."""

from __future__ import annotations

import enum


class InvalidModeError(ValueError):
    """Raised for an unknown mode name."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"invalid mode: {value}")


class Mode(str, enum.Enum):
    """Whether targets are written as files or as symlinks."""

    FILE = "file"
    SYMLINK = "symlink"

    def __str__(self) -> str:
        return self.value


def parse_mode(s: str) -> Mode:
    """Return the Mode named s, raising InvalidModeError if there is none."""
    try:
        return Mode(s)
    except ValueError:
        raise InvalidModeError(s) from None