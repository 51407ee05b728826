"""A read-only system built from the contents of a tar or zip archive."""

from __future__ import annotations

import bz2
import enum
import errno
import io
import os
import posixpath
import stat
import tarfile
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass

from dotcore.paths import AbsPath, RelPath

_ZIP_CREATOR_UNIX = 3
_ZIP_CREATOR_MACOS = 19
_MSDOS_DIR = 0x10
_MSDOS_READ_ONLY = 0x01


class ArchiveFormat(str, enum.Enum):
    """An archive format."""

    UNKNOWN = ""
    TAR = "tar"
    TAR_BZ2 = "tar.bz2"
    TAR_GZ = "tar.gz"
    TBZ2 = "tbz2"
    TGZ = "tgz"
    ZIP = "zip"

    def __str__(self) -> str:
        return self.value


class InvalidArchiveFormatError(ValueError):
    """Raised for an archive format that cannot be read."""

    def __init__(self, format: str = "") -> None:
        self.format = str(format)
        if self.format:
            message = f"{self.format}: invalid archive format"
        else:
            message = "invalid archive format"
        super().__init__(message)


@dataclass(frozen=True)
class ArchiveFileInfo:
    """Information about one archive entry; mode holds type and permission bits."""

    name: str
    mode: int
    size: int = 0

    @property
    def st_mode(self) -> int:
        return self.mode

    def is_dir(self) -> bool:
        """Return whether the entry is a directory."""
        return stat.S_ISDIR(self.mode)


_TAR_OPEN_MODES = {
    ArchiveFormat.TAR: "r:",
    ArchiveFormat.TAR_BZ2: "r:bz2",
    ArchiveFormat.TBZ2: "r:bz2",
    ArchiveFormat.TAR_GZ: "r:gz",
    ArchiveFormat.TGZ: "r:gz",
}


def _coerce_format(format: str) -> ArchiveFormat:
    if isinstance(format, ArchiveFormat):
        return format
    try:
        return ArchiveFormat(format)
    except ValueError:
        raise InvalidArchiveFormatError(format) from None


def _is_tar(data: bytes) -> bool:
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as archive:
            return archive.next() is not None
    except (tarfile.TarError, EOFError, OSError):
        return False


def guess_archive_format(path: str, data: bytes) -> ArchiveFormat:
    """Guess the archive format from the file name, then from the data."""
    lower = str(path).lower()
    if lower.endswith(".tar"):
        return ArchiveFormat.TAR
    if lower.endswith((".tar.bz2", ".tbz2")):
        return ArchiveFormat.TAR_BZ2
    if lower.endswith((".tar.gz", ".tgz")):
        return ArchiveFormat.TAR_GZ
    if lower.endswith(".zip"):
        return ArchiveFormat.ZIP

    data = bytes(data)
    if data[:3] == b"\x1f\x8b\x08":
        return ArchiveFormat.TAR_GZ
    if data[:4] == b"PK\x03\x04":
        return ArchiveFormat.ZIP
    if _is_tar(data):
        return ArchiveFormat.TAR
    try:
        decompressed = bz2.BZ2Decompressor().decompress(data)
    except (OSError, ValueError, EOFError):
        decompressed = b""
    if decompressed and _is_tar(decompressed):
        return ArchiveFormat.TAR_BZ2
    return ArchiveFormat.UNKNOWN


def _walk_tar(data: bytes, open_mode: str) -> Iterator[tuple[str, ArchiveFileInfo, bytes | None, str]]:
    with tarfile.open(fileobj=io.BytesIO(data), mode=open_mode) as archive:
        for member in archive:
            name = member.name.removesuffix("/")
            perm = member.mode & 0o7777
            base = posixpath.basename(name)
            if member.isdir():
                yield name, ArchiveFileInfo(base, stat.S_IFDIR | perm, member.size), None, ""
            elif member.isreg():
                extracted = archive.extractfile(member)
                contents = extracted.read() if extracted is not None else b""
                yield name, ArchiveFileInfo(base, stat.S_IFREG | perm, member.size), contents, ""
            elif member.issym():
                info = ArchiveFileInfo(base, stat.S_IFLNK | perm, member.size)
                yield name, info, None, member.linkname
            else:
                typeflag = member.type.decode("latin-1")
                raise ValueError(f"{member.name}: unsupported typeflag '{typeflag}'")


def _zip_mode(zinfo: zipfile.ZipInfo) -> int:
    if zinfo.create_system in (_ZIP_CREATOR_UNIX, _ZIP_CREATOR_MACOS):
        unix_mode = zinfo.external_attr >> 16
        mode = (stat.S_IFMT(unix_mode) or stat.S_IFREG) | (unix_mode & 0o7777)
    else:
        attr = zinfo.external_attr & 0xFF
        if attr & _MSDOS_DIR:
            mode = stat.S_IFDIR | 0o777
        else:
            mode = stat.S_IFREG | 0o666
        if attr & _MSDOS_READ_ONLY:
            mode &= ~0o222
    if zinfo.filename.endswith("/"):
        mode = stat.S_IFDIR | stat.S_IMODE(mode)
    return mode


def _walk_zip(data: bytes) -> Iterator[tuple[str, ArchiveFileInfo, bytes | None, str]]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for zinfo in archive.infolist():
            name = posixpath.normpath(zinfo.filename)
            if name.startswith("//"):
                name = "/" + name.lstrip("/")
            if name.startswith("../"):
                raise ValueError(f"{zinfo.filename}: invalid filename")
            mode = _zip_mode(zinfo)
            info = ArchiveFileInfo(posixpath.basename(name), mode, zinfo.file_size)
            contents = archive.read(zinfo) if stat.S_ISREG(mode) else None
            yield name, info, contents, ""


def walk_archive(data: bytes, format: str) -> Iterator[tuple[str, ArchiveFileInfo, bytes | None, str]]:
    """Yield (name, info, contents, linkname) for every entry in an archive.

    contents is None for anything but regular files and linkname is empty
    for anything but symlinks.
    """
    archive_format = _coerce_format(format)
    data = bytes(data)
    if archive_format is ArchiveFormat.ZIP:
        yield from _walk_zip(data)
        return
    try:
        open_mode = _TAR_OPEN_MODES[archive_format]
    except KeyError:
        raise InvalidArchiveFormatError(archive_format) from None
    yield from _walk_tar(data, open_mode)


def _not_exist(name: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(name))


def _invalid(name: str) -> OSError:
    return OSError(errno.EINVAL, os.strerror(errno.EINVAL), str(name))


class ArchiveReaderSystem:
    """A system whose entries are read from an archive held in memory."""

    def __init__(
        self,
        path: str,
        data: bytes,
        format: str = ArchiveFormat.UNKNOWN,
        *,
        root_abs_path: str = "",
        strip_components: int = 0,
    ) -> None:
        self._file_infos: dict[AbsPath, ArchiveFileInfo] = {}
        self._contents: dict[AbsPath, bytes] = {}
        self._linknames: dict[AbsPath, str] = {}

        archive_format = format if format else guess_archive_format(path, data)
        root = AbsPath(root_abs_path)

        for name, info, contents, linkname in walk_archive(data, archive_format):
            if strip_components > 0:
                components = name.split("/")
                if len(components) <= strip_components:
                    continue
                name = "/".join(components[strip_components:])
            if not name:
                continue
            abs_path = root.join(RelPath(name))
            self._file_infos[abs_path] = info
            kind = stat.S_IFMT(info.mode)
            if kind == stat.S_IFDIR:
                continue
            if kind in (0, stat.S_IFREG):
                self._contents[abs_path] = contents if contents is not None else b""
            elif kind == stat.S_IFLNK:
                self._linknames[abs_path] = linkname
            else:
                raise ValueError(f"{name}: unsupported mode {kind:o}")

    def file_infos(self) -> dict[AbsPath, ArchiveFileInfo]:
        """Return the information for every entry, by absolute path."""
        return dict(self._file_infos)

    def lstat(self, name: str) -> ArchiveFileInfo:
        """Return the information for name, raising FileNotFoundError if absent."""
        try:
            return self._file_infos[AbsPath(name)]
        except KeyError:
            raise _not_exist(name) from None

    def read_file(self, name: str) -> bytes:
        """Return the contents of the regular file name."""
        key = AbsPath(name)
        if key in self._contents:
            return self._contents[key]
        if key in self._file_infos:
            raise _invalid(name)
        raise _not_exist(name)

    def readlink(self, name: str) -> str:
        """Return the target of the symlink name."""
        key = AbsPath(name)
        if key in self._linknames:
            return self._linknames[key]
        if key in self._file_infos:
            raise _invalid(name)
        raise _not_exist(name)