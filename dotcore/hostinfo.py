"""Facts about the host: hostname, kernel and operating system release."""

from __future__ import annotations

import errno
import os
import re
import socket
from pathlib import Path

_WINDOWS = os.name == "nt"

_WHITESPACE_RE = re.compile(r"\s+")

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCTAL_DIGITS = frozenset("01234567")


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="surrogateescape")


def etc_hosts_fqdn_hostname(root: str | os.PathLike = "/") -> str:
    """Return the name given to 127.0.1.1 in root's etc/hosts, or ""."""
    for line in _read_text(Path(root, "etc", "hosts")).splitlines():
        text = line.strip()
        text, _, _ = text.partition("#")
        fields = _WHITESPACE_RE.split(text)
        if len(fields) >= 2 and fields[0] == "127.0.1.1":
            return fields[1]
    return ""


def etc_hostname_fqdn_hostname(root: str | os.PathLike = "/") -> str:
    """Return the first non-comment name in root's etc/hostname, or ""."""
    for line in _read_text(Path(root, "etc", "hostname")).splitlines():
        text, _, _ = line.partition("#")
        hostname = text.strip()
        if hostname:
            return hostname
    return ""


def fqdn_hostname(root: str | os.PathLike = "/") -> str:
    """Return the fully-qualified hostname, or "" if it cannot be found."""
    if _WINDOWS:
        try:
            return socket.getfqdn()
        except OSError:
            return ""
    for lookup in (etc_hosts_fqdn_hostname, etc_hostname_fqdn_hostname):
        try:
            hostname = lookup(root)
        except OSError:
            continue
        if hostname:
            return hostname
    return ""


def kernel(root: str | os.PathLike = "/") -> dict[str, str] | None:
    """Return kernel information from proc/sys/kernel, or None if unavailable."""
    proc_sys_kernel = Path(root, "proc", "sys", "kernel")
    try:
        if not proc_sys_kernel.is_dir():
            proc_sys_kernel.stat()
            return None
    except (FileNotFoundError, PermissionError):
        return None
    result: dict[str, str] = {}
    for filename in ("osrelease", "ostype", "version"):
        try:
            data = _read_text(proc_sys_kernel / filename)
        except (FileNotFoundError, PermissionError):
            continue
        result[filename] = data.strip()
    return result


def _go_unquote(s: str) -> str:
    if len(s) < 2 or s[0] != s[-1]:
        raise ValueError(s)
    quote, body = s[0], s[1:-1]
    if quote == "`":
        if "`" in body:
            raise ValueError(s)
        return body.replace("\r", "")
    if quote not in "\"'" or "\n" in body:
        raise ValueError(s)
    out = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char == quote:
            raise ValueError(s)
        if char != "\\":
            out += char.encode("utf-8", errors="surrogateescape")
            i += 1
            continue
        if i + 1 >= len(body):
            raise ValueError(s)
        escape = body[i + 1]
        i += 2
        if escape in _SIMPLE_ESCAPES:
            out += _SIMPLE_ESCAPES[escape].encode()
        elif escape == quote:
            out += quote.encode()
        elif escape in ("x", "u", "U"):
            width = {"x": 2, "u": 4, "U": 8}[escape]
            digits = body[i : i + width]
            if len(digits) != width or not set(digits) <= _HEX_DIGITS:
                raise ValueError(s)
            i += width
            value = int(digits, 16)
            if escape == "x":
                out.append(value)
            else:
                if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                    raise ValueError(s)
                out += chr(value).encode("utf-8")
        elif escape in _OCTAL_DIGITS:
            digits = body[i - 1 : i + 2]
            if len(digits) != 3 or not set(digits) <= _OCTAL_DIGITS:
                raise ValueError(s)
            value = int(digits, 8)
            if value > 0xFF:
                raise ValueError(s)
            out.append(value)
            i += 2
        else:
            raise ValueError(s)
    result = out.decode("utf-8", errors="surrogateescape")
    if quote == "'" and len(result) != 1:
        raise ValueError(s)
    return result


def maybe_unquote(s: str) -> str:
    """Return s with surrounding quotes and escapes removed, if it is quoted."""
    try:
        return _go_unquote(s)
    except ValueError:
        return s


def parse_os_release(text: str | bytes) -> dict[str, str]:
    """Parse os-release key=value data, raising ValueError on a bad line."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="surrogateescape")
    result: dict[str, str] = {}
    for line in text.splitlines():
        token = line.lstrip()
        if not token or token.startswith("#"):
            continue
        key, sep, value = token.partition("=")
        if not sep:
            raise ValueError(f"{token}: parse error")
        result[key] = maybe_unquote(value)
    return result


def os_release(root: str | os.PathLike = "/") -> dict[str, str]:
    """Return the operating system identification data under root."""
    for relative in (("usr", "lib", "os-release"), ("etc", "os-release")):
        try:
            data = _read_text(Path(root, *relative))
        except FileNotFoundError:
            continue
        return parse_os_release(data)
    raise FileNotFoundError(errno.ENOENT, "os-release not found", str(root))