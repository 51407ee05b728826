"""Sets of entry types, parsed from and printed as comma-separated lists."""

from __future__ import annotations

import enum
import stat
from collections.abc import Iterable
from dataclasses import dataclass

from dotcore.actualstate import (
    ActualStateAbsent,
    ActualStateDir,
    ActualStateEntry,
    ActualStateFile,
    ActualStateSymlink,
)


class EntryTypeBits(enum.IntFlag):
    """A bitmask of entry types."""

    NONE = 0
    DIRS = 1 << 0
    FILES = 1 << 1
    REMOVE = 1 << 2
    SCRIPTS = 1 << 3
    SYMLINKS = 1 << 4
    ENCRYPTED = 1 << 5
    ALL = DIRS | FILES | REMOVE | SCRIPTS | SYMLINKS | ENCRYPTED


_ENTRY_TYPE_BITS = {
    "all": EntryTypeBits.ALL,
    "dirs": EntryTypeBits.DIRS,
    "files": EntryTypeBits.FILES,
    "remove": EntryTypeBits.REMOVE,
    "scripts": EntryTypeBits.SCRIPTS,
    "symlinks": EntryTypeBits.SYMLINKS,
    "encrypted": EntryTypeBits.ENCRYPTED,
}

_STRING_ORDER = (
    ("dirs", EntryTypeBits.DIRS),
    ("files", EntryTypeBits.FILES),
    ("remove", EntryTypeBits.REMOVE),
    ("scripts", EntryTypeBits.SCRIPTS),
    ("symlinks", EntryTypeBits.SYMLINKS),
)


@dataclass
class EntryTypeSet:
    """A set of entry types, stored as a bitmask."""

    bits: EntryTypeBits = EntryTypeBits.NONE

    def _has(self, bit: EntryTypeBits) -> bool:
        return int(self.bits) & int(bit) != 0

    def include_actual_state_entry(self, entry: ActualStateEntry) -> bool:
        """Return whether the type of an actual state entry is a member."""
        if isinstance(entry, ActualStateAbsent):
            return self._has(EntryTypeBits.REMOVE)
        if isinstance(entry, ActualStateDir):
            return self._has(EntryTypeBits.DIRS)
        if isinstance(entry, ActualStateFile):
            return self._has(EntryTypeBits.FILES)
        if isinstance(entry, ActualStateSymlink):
            return self._has(EntryTypeBits.SYMLINKS)
        return False

    def include_encrypted(self) -> bool:
        """Return whether encrypted files are included."""
        return self._has(EntryTypeBits.ENCRYPTED)

    def include_mode(self, mode: int) -> bool:
        """Return whether the file type in an st_mode value is a member."""
        kind = stat.S_IFMT(mode)
        if kind == stat.S_IFDIR:
            return self._has(EntryTypeBits.DIRS)
        if kind in (0, stat.S_IFREG):
            return self._has(EntryTypeBits.FILES)
        if kind == stat.S_IFLNK:
            return self._has(EntryTypeBits.SYMLINKS)
        return False

    def set(self, s: str) -> None:
        """Set the members from a comma-separated list, or "none"."""
        if s == "none":
            self.bits = EntryTypeBits.NONE
            return
        self.set_slice(s.split(","))

    def set_slice(self, ss: Iterable[str]) -> None:
        """Set the members from a list of names, each optionally prefixed by "no"."""
        bits = 0
        for i, element in enumerate(ss):
            if element == "":
                continue
            exclude = element.startswith("no")
            if exclude:
                element = element[2:]
            try:
                bit = int(_ENTRY_TYPE_BITS[element])
            except KeyError:
                raise ValueError(f"{element}: unknown entry type") from None
            if i == 0 and exclude:
                bits = int(EntryTypeBits.ALL)
            if exclude:
                bits &= ~bit
            else:
                bits |= bit
        self.bits = EntryTypeBits(bits)

    def sub(self, other: EntryTypeSet | None) -> EntryTypeSet:
        """Return a copy of this set with the members of other removed."""
        if other is None:
            return self
        bits = int(self.bits) & ~int(other.bits) & int(EntryTypeBits.ALL)
        return EntryTypeSet(EntryTypeBits(bits))

    def __str__(self) -> str:
        if self.bits == EntryTypeBits.ALL:
            return "all"
        if self.bits == EntryTypeBits.NONE:
            return "none"
        return ",".join(name for name, bit in _STRING_ORDER if self._has(bit))


def parse_entry_type_set(s: str) -> EntryTypeSet:
    """Return the entry type set described by s."""
    result = EntryTypeSet()
    result.set(s)
    return result