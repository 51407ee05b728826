"""Shared constants, errors and helpers."""

from __future__ import annotations

import hashlib
import os
import re
import stat

DEFAULT_TEMPLATE_OPTIONS = ("missingkey=error",)

IGNORE_PREFIX = "."
AFTER_PREFIX = "after_"
BEFORE_PREFIX = "before_"
CREATE_PREFIX = "create_"
DOT_PREFIX = "dot_"
EMPTY_PREFIX = "empty_"
ENCRYPTED_PREFIX = "encrypted_"
EXACT_PREFIX = "exact_"
EXECUTABLE_PREFIX = "executable_"
LITERAL_PREFIX = "literal_"
MODIFY_PREFIX = "modify_"
ONCE_PREFIX = "once_"
PRIVATE_PREFIX = "private_"
READ_ONLY_PREFIX = "readonly_"
REMOVE_PREFIX = "remove_"
RUN_PREFIX = "run_"
SYMLINK_PREFIX = "symlink_"
LITERAL_SUFFIX = ".literal"
TEMPLATE_SUFFIX = ".tmpl"

PREFIX = ".dotcore"

DATA_NAME = PREFIX + "data"
EXTERNAL_NAME = PREFIX + "external"
IGNORE_NAME = PREFIX + "ignore"
REMOVE_NAME = PREFIX + "remove"
TEMPLATES_DIR_NAME = PREFIX + "templates"
VERSION_NAME = PREFIX + "version"

DIR_PREFIX_RE = re.compile(r"\A(dot|exact|literal|readonly|private)_")
FILE_PREFIX_RE = re.compile(
    r"\A(after|before|create|dot|empty|encrypted|executable|literal|modify"
    r"|once|private|readonly|remove|run|symlink)_"
)
FILE_SUFFIX_RE = re.compile(r"\.(literal|tmpl)\Z")

KNOWN_PREFIXED_FILES = frozenset(
    {
        PREFIX + ".json" + TEMPLATE_SUFFIX,
        PREFIX + ".toml" + TEMPLATE_SUFFIX,
        PREFIX + ".yaml" + TEMPLATE_SUFFIX,
        DATA_NAME,
        EXTERNAL_NAME + ".json",
        EXTERNAL_NAME + ".toml",
        EXTERNAL_NAME + ".yaml",
        IGNORE_NAME,
        REMOVE_NAME,
        VERSION_NAME,
    }
)

_MODE_TYPE_NAMES = {
    0: "file",
    stat.S_IFREG: "file",
    stat.S_IFDIR: "dir",
    stat.S_IFLNK: "symlink",
    stat.S_IFIFO: "named pipe",
    stat.S_IFSOCK: "socket",
    stat.S_IFBLK: "device",
    stat.S_IFCHR: "char device",
}

_WINDOWS = os.name == "nt"


def _read_umask() -> int:
    current = os.umask(0)
    os.umask(current)
    return current


UMASK = _read_umask()


class UnsupportedFileTypeError(Exception):
    """Raised for filesystem entries of a type that cannot be managed."""

    def __init__(self, abs_path: str, mode: int) -> None:
        self.abs_path = abs_path
        self.mode = mode
        super().__init__(f"{abs_path}: unsupported file type {mode_type_name(mode)}")


def sha256_sum(data: bytes) -> bytes:
    """Return the SHA256 digest of data."""
    return hashlib.sha256(data or b"").digest()


def _is_regular(mode: int) -> bool:
    return stat.S_IFMT(mode) in (0, stat.S_IFREG)


def suspicious_source_dir_entry(base: str, mode: int) -> bool:
    """Return whether a source directory entry looks suspicious."""
    if _is_regular(mode):
        return base.startswith(PREFIX) and base not in KNOWN_PREFIXED_FILES
    if stat.S_ISDIR(mode):
        return base.startswith(PREFIX) and base != TEMPLATES_DIR_NAME
    if stat.S_ISLNK(mode):
        return base.startswith(PREFIX)
    return True


def is_empty(data: bytes) -> bool:
    """Return whether data is empty after trimming surrounding whitespace."""
    return not data.strip()


def mode_type_name(mode: int) -> str:
    """Return a human-readable name for the file type in mode."""
    mode_type = stat.S_IFMT(mode)
    try:
        return _MODE_TYPE_NAMES[mode_type]
    except KeyError:
        return f"0o{mode_type:o}: unknown type"


def must_trim_prefix(s: str, prefix: str) -> str:
    """Remove prefix from s, raising ValueError if s does not start with it."""
    if not s.startswith(prefix):
        raise ValueError(f"{s}: not prefixed by {prefix}")
    return s[len(prefix) :]


def must_trim_suffix(s: str, suffix: str) -> str:
    """Remove suffix from s, raising ValueError if s does not end with it."""
    if not s.endswith(suffix):
        raise ValueError(f"{s}: not suffixed by {suffix}")
    return s[: len(s) - len(suffix)]


def is_executable(mode: int) -> bool:
    """Return whether any execute bit is set in mode."""
    if _WINDOWS:
        return False
    return stat.S_IMODE(mode) & 0o111 != 0


def is_private(mode: int) -> bool:
    """Return whether mode grants no group or other permissions."""
    if _WINDOWS:
        return False
    return stat.S_IMODE(mode) & 0o77 == 0


def is_read_only(mode: int) -> bool:
    """Return whether mode has no write bits."""
    if _WINDOWS:
        return False
    return stat.S_IMODE(mode) & 0o222 == 0