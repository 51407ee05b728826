import stat
from types import SimpleNamespace

import pytest

from dotcore.actualstate import (
    ActualStateAbsent,
    ActualStateDir,
    ActualStateFile,
    ActualStateSymlink,
    new_actual_state_entry,
)
from dotcore.core import UnsupportedFileTypeError, sha256_sum
from dotcore.entrystate import EntryStateType


class FakeSystem:
    def __init__(self, entries=None, read_error=None):
        self.entries = entries or {}
        self.read_error = read_error
        self.reads = []
        self.removed = []

    def lstat(self, path):
        try:
            mode, _ = self.entries[path]
        except KeyError:
            raise FileNotFoundError(path) from None
        return SimpleNamespace(st_mode=mode)

    def read_file(self, path):
        self.reads.append(path)
        if self.read_error is not None:
            raise self.read_error
        return self.entries[path][1]

    def readlink(self, path):
        self.reads.append(path)
        return self.entries[path][1]

    def remove_all(self, path):
        self.removed.append(path)


def test_absent():
    system = FakeSystem()
    entry = new_actual_state_entry(system, "/home/user/missing")
    assert isinstance(entry, ActualStateAbsent)
    assert entry.path == "/home/user/missing"
    assert entry.entry_state().type == EntryStateType.REMOVE
    entry.remove(system)
    assert system.removed == []


def test_file_is_read_lazily_once():
    system = FakeSystem({"/home/user/file": (stat.S_IFREG | 0o644, b"contents\n")})
    entry = new_actual_state_entry(system, "/home/user/file")
    assert isinstance(entry, ActualStateFile)
    assert entry.perm == 0o644
    assert system.reads == []
    state = entry.entry_state()
    assert state.type == EntryStateType.FILE
    assert state.mode == 0o644
    assert state.contents == b"contents\n"
    assert bytes(state.contents_sha256) == sha256_sum(b"contents\n")
    entry.entry_state()
    assert system.reads == ["/home/user/file"]


def test_file_read_error_propagates():
    system = FakeSystem(
        {"/home/user/file": (stat.S_IFREG | 0o600, b"")},
        read_error=PermissionError("denied"),
    )
    entry = new_actual_state_entry(system, "/home/user/file")
    with pytest.raises(PermissionError):
        entry.entry_state()


def test_dir():
    system = FakeSystem({"/home/user/dir": (stat.S_IFDIR | 0o755, None)})
    entry = new_actual_state_entry(system, "/home/user/dir")
    assert isinstance(entry, ActualStateDir)
    state = entry.entry_state()
    assert state.type == EntryStateType.DIR
    assert state.mode == stat.S_IFDIR | 0o755
    entry.remove(system)
    assert system.removed == ["/home/user/dir"]


def test_symlink():
    system = FakeSystem({"/home/user/link": (stat.S_IFLNK | 0o777, "target")})
    entry = new_actual_state_entry(system, "/home/user/link")
    assert isinstance(entry, ActualStateSymlink)
    state = entry.entry_state()
    assert state.type == EntryStateType.SYMLINK
    assert state.contents == b"target"
    assert bytes(state.contents_sha256) == sha256_sum(b"target")
    entry.remove(system)
    assert system.removed == ["/home/user/link"]


def test_info_given_skips_lstat():
    system = FakeSystem()
    entry = new_actual_state_entry(
        system, "/home/user/file", SimpleNamespace(st_mode=stat.S_IFREG | 0o600)
    )
    assert isinstance(entry, ActualStateFile)
    assert entry.perm == 0o600


def test_unsupported_file_type():
    system = FakeSystem({"/home/user/fifo": (stat.S_IFIFO | 0o644, None)})
    with pytest.raises(UnsupportedFileTypeError, match="named pipe"):
        new_actual_state_entry(system, "/home/user/fifo")


def test_lstat_error_propagates():
    class DeniedSystem(FakeSystem):
        def lstat(self, path):
            raise PermissionError(path)

    with pytest.raises(PermissionError):
        new_actual_state_entry(DeniedSystem(), "/root/secret")