"""Recorded state of a target entry."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field

from dotcore.hexbytes import HexBytes

_WINDOWS = os.name == "nt"


class EntryStateType(str, enum.Enum):
    """The kind of an entry state."""

    DIR = "dir"
    FILE = "file"
    SYMLINK = "symlink"
    REMOVE = "remove"
    SCRIPT = "script"

    def __str__(self) -> str:
        return self.value


@dataclass
class EntryState:
    """The state of an entry; None stands for an absent entry."""

    type: EntryStateType
    mode: int = 0
    contents_sha256: HexBytes = field(default_factory=HexBytes)
    contents: bytes | None = field(default=None, repr=False)
    overwrite: bool = False

    def equal(self, other: EntryState) -> bool:
        """Return whether type, permissions and contents hash match."""
        if self.type != other.type:
            return False
        if not _WINDOWS and (self.mode & 0o777) != (other.mode & 0o777):
            return False
        return bytes(self.contents_sha256 or b"") == bytes(other.contents_sha256 or b"")

    def equivalent(self, other: EntryState | None) -> bool:
        """Return whether self is equivalent to other, where None is absent."""
        if other is None:
            return self.type == EntryStateType.REMOVE
        return self.equal(other)


def equivalent(state1: EntryState | None, state2: EntryState | None) -> bool:
    """Return whether two possibly absent entry states are equivalent."""
    if state1 is None:
        return state2 is None or state2.type == EntryStateType.REMOVE
    return state1.equivalent(state2)