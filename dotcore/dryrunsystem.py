"""A system that reads from another system but never writes to it."""

from __future__ import annotations

from typing import Any


class DryRunSystem:
    """Wraps a system, passing reads through and swallowing writes."""

    def __init__(self, system: Any) -> None:
        self._system = system
        self._modified = False

    @property
    def modified(self) -> bool:
        """Whether a method that would have modified the system was called."""
        return self._modified

    def _set_modified(self) -> None:
        self._modified = True

    def chmod(self, name: str, mode: int) -> None:
        self._set_modified()

    def glob(self, pattern: str) -> list[str]:
        return self._system.glob(pattern)

    def idempotent_cmd_combined_output(self, cmd: Any) -> bytes:
        return self._system.idempotent_cmd_combined_output(cmd)

    def idempotent_cmd_output(self, cmd: Any) -> bytes:
        return self._system.idempotent_cmd_output(cmd)

    def lstat(self, name: str) -> Any:
        return self._system.lstat(name)

    def mkdir(self, name: str, perm: int) -> None:
        self._set_modified()

    def raw_path(self, path: str) -> Any:
        return self._system.raw_path(path)

    def read_dir(self, name: str) -> Any:
        return self._system.read_dir(name)

    def read_file(self, name: str) -> bytes:
        return self._system.read_file(name)

    def readlink(self, name: str) -> str:
        return self._system.readlink(name)

    def remove_all(self, name: str) -> None:
        self._set_modified()

    def rename(self, oldpath: str, newpath: str) -> None:
        self._set_modified()

    def run_cmd(self, cmd: Any) -> None:
        self._set_modified()

    def run_idempotent_cmd(self, cmd: Any) -> Any:
        return self._system.run_idempotent_cmd(cmd)

    def run_script(self, scriptname: str, dir: str, data: bytes, interpreter: Any = None) -> None:
        self._set_modified()

    def stat(self, name: str) -> Any:
        return self._system.stat(name)

    def write_file(self, name: str, data: bytes, perm: int) -> None:
        self._set_modified()

    def write_symlink(self, oldname: str, newname: str) -> None:
        self._set_modified()