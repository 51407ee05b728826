"""A system that records what would be written instead of writing it."""

from __future__ import annotations

import enum
import errno
import os
from dataclasses import dataclass, field

from dotcore.interpreter import Interpreter
from dotcore.paths import AbsPath


class DataType(str, enum.Enum):
    """The kind of a recorded entry."""

    DIR = "dir"
    FILE = "file"
    SCRIPT = "script"
    SYMLINK = "symlink"

    def __str__(self) -> str:
        return self.value


@dataclass
class DirData:
    """A recorded directory."""

    type: DataType = field(default=DataType.DIR, init=False)
    name: AbsPath
    perm: int


@dataclass
class FileData:
    """A recorded file."""

    type: DataType = field(default=DataType.FILE, init=False)
    name: AbsPath
    contents: str
    perm: int


@dataclass
class ScriptData:
    """A recorded script."""

    type: DataType = field(default=DataType.SCRIPT, init=False)
    name: AbsPath
    contents: str
    interpreter: Interpreter | None = None


@dataclass
class SymlinkData:
    """A recorded symlink."""

    type: DataType = field(default=DataType.SYMLINK, init=False)
    name: AbsPath
    linkname: str


def _text(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    return bytes(data).decode("utf-8", "surrogateescape")


class DumpSystem:
    """A system that accumulates the entries written to it."""

    def __init__(self) -> None:
        self._data: dict[AbsPath, DirData | FileData | ScriptData | SymlinkData] = {}

    def data(self) -> dict[AbsPath, DirData | FileData | ScriptData | SymlinkData]:
        """Return the recorded entries by path."""
        return self._data

    def _claim(self, name: str) -> AbsPath:
        key = AbsPath(name)
        if key in self._data:
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(name))
        return key

    def mkdir(self, dirname: str, perm: int) -> None:
        """Record a directory."""
        key = self._claim(dirname)
        self._data[key] = DirData(name=key, perm=perm)

    def run_script(
        self,
        scriptname: str,
        dir: str,
        data: bytes,
        interpreter: Interpreter | None = None,
    ) -> None:
        """Record a script instead of running it."""
        key = self._claim(scriptname)
        script = ScriptData(name=key, contents=_text(data))
        if interpreter is not None and not interpreter.none():
            script.interpreter = interpreter
        self._data[key] = script

    def write_file(self, filename: str, data: bytes, perm: int) -> None:
        """Record a file."""
        key = self._claim(filename)
        self._data[key] = FileData(name=key, contents=_text(data), perm=perm)

    def write_symlink(self, oldname: str, newname: str) -> None:
        """Record a symlink at newname pointing to oldname."""
        key = self._claim(newname)
        self._data[key] = SymlinkData(name=key, linkname=oldname)