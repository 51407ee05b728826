"""The actual state of entries in the filesystem."""

from __future__ import annotations

import abc
import stat
from dataclasses import dataclass, field
from typing import Any

from dotcore.core import UnsupportedFileTypeError
from dotcore.entrystate import EntryState, EntryStateType
from dotcore.hexbytes import HexBytes
from dotcore.lazy import LazyContents, LazyLinkname
from dotcore.paths import AbsPath, normalize_linkname


class ActualStateEntry(abc.ABC):
    """An entry as it currently exists, or does not exist, on disk."""

    path: AbsPath

    @abc.abstractmethod
    def entry_state(self) -> EntryState:
        """Return the entry state describing this entry."""

    @abc.abstractmethod
    def remove(self, system: Any) -> None:
        """Remove this entry using system."""


@dataclass
class ActualStateAbsent(ActualStateEntry):
    """The absence of an entry."""

    path: AbsPath

    def entry_state(self) -> EntryState:
        return EntryState(type=EntryStateType.REMOVE)

    def remove(self, system: Any) -> None:
        return None


@dataclass
class ActualStateDir(ActualStateEntry):
    """A directory."""

    path: AbsPath
    perm: int

    def entry_state(self) -> EntryState:
        return EntryState(type=EntryStateType.DIR, mode=stat.S_IFDIR | self.perm)

    def remove(self, system: Any) -> None:
        system.remove_all(self.path)


@dataclass
class ActualStateFile(ActualStateEntry):
    """A regular file whose contents are read lazily."""

    path: AbsPath
    perm: int
    lazy_contents: LazyContents = field(default_factory=LazyContents, repr=False)

    def contents(self) -> bytes | None:
        """Return the file's contents."""
        return self.lazy_contents.contents()

    def contents_sha256(self) -> bytes:
        """Return the SHA256 digest of the file's contents."""
        return self.lazy_contents.contents_sha256()

    def entry_state(self) -> EntryState:
        contents = self.contents()
        return EntryState(
            type=EntryStateType.FILE,
            mode=self.perm,
            contents_sha256=HexBytes(self.contents_sha256()),
            contents=contents,
        )

    def remove(self, system: Any) -> None:
        system.remove_all(self.path)


@dataclass
class ActualStateSymlink(ActualStateEntry):
    """A symlink whose target is read lazily."""

    path: AbsPath
    lazy_linkname: LazyLinkname = field(default_factory=LazyLinkname, repr=False)

    def linkname(self) -> str:
        """Return the symlink's target."""
        return self.lazy_linkname.linkname()

    def linkname_sha256(self) -> bytes:
        """Return the SHA256 digest of the symlink's target."""
        return self.lazy_linkname.linkname_sha256()

    def entry_state(self) -> EntryState:
        linkname = self.linkname()
        return EntryState(
            type=EntryStateType.SYMLINK,
            contents_sha256=HexBytes(self.linkname_sha256()),
            contents=linkname.encode("utf-8", "surrogateescape"),
        )

    def remove(self, system: Any) -> None:
        system.remove_all(self.path)


def _mode_of(info: Any) -> int:
    if isinstance(info, int):
        return info
    mode = getattr(info, "st_mode", None)
    if mode is None:
        mode = info.mode
    return int(mode)


def new_actual_state_entry(system: Any, abs_path: str, info: Any = None) -> ActualStateEntry:
    """Return the actual state of abs_path, using info or system.lstat."""
    abs_path = AbsPath(abs_path)
    if info is None:
        try:
            info = system.lstat(abs_path)
        except FileNotFoundError:
            return ActualStateAbsent(abs_path)
    mode = _mode_of(info)
    kind = stat.S_IFMT(mode)
    perm = mode & 0o777
    if kind in (0, stat.S_IFREG):
        return ActualStateFile(
            abs_path,
            perm,
            LazyContents(func=lambda: system.read_file(abs_path)),
        )
    if kind == stat.S_IFDIR:
        return ActualStateDir(abs_path, perm)
    if kind == stat.S_IFLNK:
        return ActualStateSymlink(
            abs_path,
            LazyLinkname(func=lambda: normalize_linkname(system.readlink(abs_path))),
        )
    raise UnsupportedFileTypeError(abs_path, mode)