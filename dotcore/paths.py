"""Absolute and relative slash-separated paths."""

from __future__ import annotations

import os
import re

_WINDOWS = os.name == "nt"

_UNC_VOLUME_RE = re.compile(r"[\\/]{2}[^\\/.][^\\/]*[\\/][^\\/.][^\\/]*")


def _clean(path: str) -> str:
    """Return the shortest lexically equivalent slash path."""
    path = str(path)
    if not path:
        return "."
    rooted = path.startswith("/")
    stack: list[str] = []
    for element in path.split("/"):
        if element in ("", "."):
            continue
        if element == "..":
            if stack and stack[-1] != "..":
                stack.pop()
            elif not rooted:
                stack.append("..")
            continue
        stack.append(element)
    cleaned = "/".join(stack)
    if rooted:
        return "/" + cleaned
    return cleaned or "."


def _split(path: str) -> tuple[str, str]:
    path = str(path)
    index = path.rfind("/")
    return path[: index + 1], path[index + 1 :]


def _base(path: str) -> str:
    path = str(path)
    if not path:
        return "."
    path = path.rstrip("/")
    if not path:
        return "/"
    return path[path.rfind("/") + 1 :]


def _dir(path: str) -> str:
    directory, _ = _split(path)
    return _clean(directory)


def _join(*elems: str) -> str:
    non_empty = [str(elem) for elem in elems if elem]
    if not non_empty:
        return ""
    return _clean("/".join(non_empty))


def _ext(path: str) -> str:
    base = str(path)[str(path).rfind("/") + 1 :]
    index = base.rfind(".")
    return base[index:] if index != -1 else ""


def _to_slash(path: str) -> str:
    path = str(path)
    if os.sep != "/":
        return path.replace(os.sep, "/")
    return path


class NotInAbsDirError(ValueError):
    """Raised when an absolute path is not inside a directory."""

    def __init__(self, path: str, dir: str) -> None:
        self.path = path
        self.dir = dir
        super().__init__(f"{path}: not in {dir}")


class NotInRelDirError(ValueError):
    """Raised when a relative path is not inside a directory."""

    def __init__(self, path: str, dir: str) -> None:
        self.path = path
        self.dir = dir
        super().__init__(f"{path}: not in {dir}")


class AbsPath(str):
    """An absolute, slash-separated path."""

    __slots__ = ()

    def base(self) -> str:
        """Return the last element of the path."""
        return _base(str(self))

    def dir(self) -> AbsPath:
        """Return all but the last element of the path."""
        return AbsPath(_dir(str(self)))

    def join(self, *args: str) -> AbsPath:
        """Return the path with args appended and the result cleaned."""
        return AbsPath(_join(str(self), *args))

    def split(self) -> tuple[AbsPath, RelPath]:
        """Split the path immediately after its last slash."""
        directory, file = _split(str(self))
        return AbsPath(directory), RelPath(file)

    def trim_dir_prefix(self, dir_prefix: str) -> RelPath:
        """Return the path relative to dir_prefix."""
        dir_abs_path = str(dir_prefix)
        if dir_abs_path != "/":
            dir_abs_path += "/"
        text = str(self)
        if not text.startswith(dir_abs_path):
            raise NotInAbsDirError(self, AbsPath(dir_prefix))
        return RelPath(text[len(dir_abs_path) :])

    def must_trim_dir_prefix(self, dir_prefix: str) -> RelPath:
        """Like trim_dir_prefix, for callers where failure is a programming error."""
        return self.trim_dir_prefix(dir_prefix)


class RelPath(str):
    """A relative, slash-separated path."""

    __slots__ = ()

    def base(self) -> str:
        """Return the last element of the path."""
        return _base(str(self))

    def dir(self) -> RelPath:
        """Return all but the last element of the path."""
        return RelPath(_dir(str(self)))

    def ext(self) -> str:
        """Return the file name extension, including the dot."""
        return _ext(str(self))

    def has_dir_prefix(self, dir_prefix: str) -> bool:
        """Return whether the path lies inside dir_prefix."""
        return str(self).startswith(str(dir_prefix) + "/")

    def join(self, *args: str) -> RelPath:
        """Return the path with args appended and the result cleaned."""
        return RelPath(_join(str(self), *args))

    def split(self) -> tuple[RelPath, RelPath]:
        """Split the path immediately after its last slash."""
        directory, file = _split(str(self))
        return RelPath(directory), RelPath(file)

    def trim_dir_prefix(self, dir_prefix: str) -> RelPath:
        """Return the path relative to dir_prefix."""
        if not self.has_dir_prefix(dir_prefix):
            raise NotInRelDirError(self, RelPath(dir_prefix))
        return RelPath(str(self)[len(str(dir_prefix)) + 1 :])


def volume_name_len(path: str) -> int:
    """Return the length of a leading Windows volume name, or 0."""
    path = str(path)
    if len(path) < 2:
        return 0
    first = path[0]
    if path[1] == ":" and first.isascii() and first.isalpha():
        return 2
    match = _UNC_VOLUME_RE.match(path)
    if match:
        return match.end()
    return 0


def volume_name_to_upper(path: str) -> str:
    """Return path with its volume name in upper case."""
    path = str(path)
    length = volume_name_len(path)
    if length:
        return path[:length].upper() + path[length:]
    return path


def _windows_is_abs(path: str) -> bool:
    length = volume_name_len(path)
    if length == 0:
        return False
    rest = str(path)[length:]
    return bool(rest) and rest[0] in "\\/"


def expand_tilde(path: str, home_dir_abs_path: str) -> str:
    """Expand a leading tilde in path to the home directory."""
    path = str(path)
    home = AbsPath(home_dir_abs_path)
    if path == "~":
        return str(home)
    separators = "/\\" if _WINDOWS else "/"
    if len(path) >= 2 and path[0] == "~" and path[1] in separators:
        return str(home.join(RelPath(path[2:])))
    return path


def new_abs_path_from_ext_path(ext_path: str, home_dir_abs_path: str) -> AbsPath:
    """Convert a user-supplied path to an absolute slash path, expanding tildes."""
    if _WINDOWS:
        slash_tilde_path = _to_slash(expand_tilde(ext_path, home_dir_abs_path))
        if _windows_is_abs(slash_tilde_path):
            return AbsPath(volume_name_to_upper(slash_tilde_path))
        absolute = os.path.abspath(slash_tilde_path)
        return AbsPath(_to_slash(volume_name_to_upper(absolute)))
    tilde_slash_path = expand_tilde(_to_slash(ext_path), home_dir_abs_path)
    if os.path.isabs(tilde_slash_path):
        return AbsPath(tilde_slash_path)
    return AbsPath(os.path.abspath(tilde_slash_path))


def normalize_path(path: str) -> AbsPath:
    """Return path as a normalized absolute path."""
    absolute = os.path.abspath(str(path))
    if _WINDOWS:
        return AbsPath(_to_slash(volume_name_to_upper(absolute)))
    return AbsPath(absolute)


def home_dir_abs_path() -> AbsPath:
    """Return the user's home directory as a normalized absolute path."""
    variable = "USERPROFILE" if _WINDOWS else "HOME"
    home = os.environ.get(variable)
    if not home:
        raise OSError(f"${variable} is not defined")
    return normalize_path(home)


def windows_normalize_linkname(linkname: str) -> str:
    """Normalize a Windows symlink target to forward slashes and upper-case volume."""
    linkname = str(linkname)
    if _windows_is_abs(linkname):
        linkname = volume_name_to_upper(linkname)
    return linkname.replace("\\", "/")


def normalize_linkname(linkname: str) -> str:
    """Normalize a symlink target for the current platform."""
    if _WINDOWS:
        return windows_normalize_linkname(linkname)
    return str(linkname)