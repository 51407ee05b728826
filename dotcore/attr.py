"""Attributes encoded in source state file and directory names."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from dotcore.core import (
    AFTER_PREFIX,
    BEFORE_PREFIX,
    CREATE_PREFIX,
    DIR_PREFIX_RE,
    DOT_PREFIX,
    EMPTY_PREFIX,
    ENCRYPTED_PREFIX,
    EXACT_PREFIX,
    EXECUTABLE_PREFIX,
    FILE_PREFIX_RE,
    FILE_SUFFIX_RE,
    LITERAL_PREFIX,
    LITERAL_SUFFIX,
    MODIFY_PREFIX,
    ONCE_PREFIX,
    PRIVATE_PREFIX,
    READ_ONLY_PREFIX,
    REMOVE_PREFIX,
    RUN_PREFIX,
    SYMLINK_PREFIX,
    TEMPLATE_SUFFIX,
)


class SourceFileTargetType(enum.IntEnum):
    """The kind of target that a source file represents."""

    CREATE = 0
    FILE = 1
    MODIFY = 2
    REMOVE = 3
    SCRIPT = 4
    SYMLINK = 5

    def __str__(self) -> str:
        return self.name.lower()


def _take_prefix(name: str, prefix: str) -> tuple[str, bool]:
    if name.startswith(prefix):
        return name[len(prefix) :], True
    return name, False


def _take_suffix(name: str, suffix: str) -> tuple[str, bool]:
    if suffix and name.endswith(suffix):
        return name[: len(name) - len(suffix)], True
    return name, False


def _parse_target_name(name: str) -> str:
    if name.startswith(DOT_PREFIX):
        return "." + name[len(DOT_PREFIX) :]
    if name.startswith(LITERAL_PREFIX):
        return name[len(LITERAL_PREFIX) :]
    return name


def _encode_target_name(target_name: str, prefix_re) -> str:
    if target_name.startswith("."):
        return DOT_PREFIX + target_name[1:]
    if prefix_re.match(target_name):
        return LITERAL_PREFIX + target_name
    return target_name


@dataclass(frozen=True)
class DirAttr:
    """Attributes parsed from a source directory name."""

    target_name: str
    exact: bool = False
    private: bool = False
    read_only: bool = False

    def source_name(self) -> str:
        """Return the source name that encodes these attributes."""
        parts = []
        if self.exact:
            parts.append(EXACT_PREFIX)
        if self.private:
            parts.append(PRIVATE_PREFIX)
        if self.read_only:
            parts.append(READ_ONLY_PREFIX)
        parts.append(_encode_target_name(self.target_name, DIR_PREFIX_RE))
        return "".join(parts)

    def perm(self) -> int:
        """Return the permission bits for the directory."""
        perm = 0o777
        if self.private:
            perm &= ~0o77
        if self.read_only:
            perm &= ~0o222
        return perm


@dataclass(frozen=True)
class FileAttr:
    """Attributes parsed from a source file name."""

    target_name: str
    type: SourceFileTargetType = SourceFileTargetType.FILE
    empty: bool = False
    encrypted: bool = False
    executable: bool = False
    once: bool = False
    order: int = 0
    private: bool = False
    read_only: bool = False
    template: bool = False

    def source_name(self, encrypted_suffix: str) -> str:
        """Return the source name that encodes these attributes."""
        parts: list[str] = []
        kind = self.type
        if kind is SourceFileTargetType.CREATE:
            parts.append(CREATE_PREFIX)
            if self.encrypted:
                parts.append(ENCRYPTED_PREFIX)
            if self.private:
                parts.append(PRIVATE_PREFIX)
            if self.read_only:
                parts.append(READ_ONLY_PREFIX)
            if self.executable:
                parts.append(EXECUTABLE_PREFIX)
        elif kind is SourceFileTargetType.FILE:
            if self.encrypted:
                parts.append(ENCRYPTED_PREFIX)
            if self.private:
                parts.append(PRIVATE_PREFIX)
            if self.read_only:
                parts.append(READ_ONLY_PREFIX)
            if self.empty:
                parts.append(EMPTY_PREFIX)
            if self.executable:
                parts.append(EXECUTABLE_PREFIX)
        elif kind is SourceFileTargetType.MODIFY:
            parts.append(MODIFY_PREFIX)
            if self.private:
                parts.append(PRIVATE_PREFIX)
            if self.read_only:
                parts.append(READ_ONLY_PREFIX)
            if self.executable:
                parts.append(EXECUTABLE_PREFIX)
        elif kind is SourceFileTargetType.REMOVE:
            parts.append(REMOVE_PREFIX)
        elif kind is SourceFileTargetType.SCRIPT:
            parts.append(RUN_PREFIX)
            if self.once:
                parts.append(ONCE_PREFIX)
            if self.order == -1:
                parts.append(BEFORE_PREFIX)
            elif self.order == 1:
                parts.append(AFTER_PREFIX)
        elif kind is SourceFileTargetType.SYMLINK:
            parts.append(SYMLINK_PREFIX)
        parts.append(_encode_target_name(self.target_name, FILE_PREFIX_RE))
        if FILE_SUFFIX_RE.search(self.target_name):
            parts.append(LITERAL_SUFFIX)
        if self.template:
            parts.append(TEMPLATE_SUFFIX)
        if self.encrypted:
            parts.append(encrypted_suffix)
        return "".join(parts)

    def perm(self) -> int:
        """Return the permission bits for the file."""
        perm = 0o666
        if self.executable:
            perm |= 0o111
        if self.private:
            perm &= ~0o77
        if self.read_only:
            perm &= ~0o222
        return perm


def parse_dir_attr(source_name: str) -> DirAttr:
    """Parse a single source directory name."""
    name, exact = _take_prefix(source_name, EXACT_PREFIX)
    name, private = _take_prefix(name, PRIVATE_PREFIX)
    name, read_only = _take_prefix(name, READ_ONLY_PREFIX)
    return DirAttr(
        target_name=_parse_target_name(name),
        exact=exact,
        private=private,
        read_only=read_only,
    )


def parse_file_attr(source_name: str, encrypted_suffix: str) -> FileAttr:
    """Parse a single source file name."""
    kind = SourceFileTargetType.FILE
    name = source_name
    empty = encrypted = executable = once = private = read_only = template = False
    order = 0

    if name.startswith(CREATE_PREFIX):
        kind = SourceFileTargetType.CREATE
        name = name[len(CREATE_PREFIX) :]
        name, encrypted = _take_prefix(name, ENCRYPTED_PREFIX)
        name, private = _take_prefix(name, PRIVATE_PREFIX)
        name, read_only = _take_prefix(name, READ_ONLY_PREFIX)
        name, executable = _take_prefix(name, EXECUTABLE_PREFIX)
    elif name.startswith(REMOVE_PREFIX):
        kind = SourceFileTargetType.REMOVE
        name = name[len(REMOVE_PREFIX) :]
    elif name.startswith(RUN_PREFIX):
        kind = SourceFileTargetType.SCRIPT
        name = name[len(RUN_PREFIX) :]
        name, once = _take_prefix(name, ONCE_PREFIX)
        if name.startswith(BEFORE_PREFIX):
            name = name[len(BEFORE_PREFIX) :]
            order = -1
        elif name.startswith(AFTER_PREFIX):
            name = name[len(AFTER_PREFIX) :]
            order = 1
    elif name.startswith(SYMLINK_PREFIX):
        kind = SourceFileTargetType.SYMLINK
        name = name[len(SYMLINK_PREFIX) :]
    elif name.startswith(MODIFY_PREFIX):
        kind = SourceFileTargetType.MODIFY
        name = name[len(MODIFY_PREFIX) :]
        name, private = _take_prefix(name, PRIVATE_PREFIX)
        name, read_only = _take_prefix(name, READ_ONLY_PREFIX)
        name, executable = _take_prefix(name, EXECUTABLE_PREFIX)
    else:
        name, encrypted = _take_prefix(name, ENCRYPTED_PREFIX)
        name, private = _take_prefix(name, PRIVATE_PREFIX)
        name, read_only = _take_prefix(name, READ_ONLY_PREFIX)
        name, empty = _take_prefix(name, EMPTY_PREFIX)
        name, executable = _take_prefix(name, EXECUTABLE_PREFIX)

    name = _parse_target_name(name)
    if encrypted:
        name, _ = _take_suffix(name, encrypted_suffix)
    if name.endswith(LITERAL_SUFFIX):
        name, _ = _take_suffix(name, LITERAL_SUFFIX)
    elif name.endswith(TEMPLATE_SUFFIX):
        name, template = _take_suffix(name, TEMPLATE_SUFFIX)
        name, _ = _take_suffix(name, LITERAL_SUFFIX)

    return FileAttr(
        target_name=name,
        type=kind,
        empty=empty,
        encrypted=encrypted,
        executable=executable,
        once=once,
        order=order,
        private=private,
        read_only=read_only,
        template=template,
    )