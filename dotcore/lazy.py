"""Lazily evaluated file contents and symlink targets."""

from __future__ import annotations

from collections.abc import Callable

from dotcore.core import sha256_sum


class LazyContents:
    """File contents that are read on first use and then cached."""

    def __init__(
        self,
        contents: bytes | None = None,
        *,
        func: Callable[[], bytes] | None = None,
    ) -> None:
        self._contents = contents
        self._func = func
        self._error: Exception | None = None
        self._sha256: bytes | None = None

    def contents(self) -> bytes | None:
        """Return the contents, reading them if needed; errors are cached."""
        if self._func is not None:
            func, self._func = self._func, None
            try:
                self._contents = func()
            except Exception as exc:
                self._error = exc
            else:
                self._sha256 = sha256_sum(self._contents)
        if self._error is not None:
            raise self._error
        return self._contents

    def contents_sha256(self) -> bytes:
        """Return the SHA256 digest of the contents."""
        if self._sha256 is None:
            self._sha256 = sha256_sum(self.contents())
        return self._sha256


class LazyLinkname:
    """A symlink target that is read on first use and then cached."""

    def __init__(
        self,
        linkname: str = "",
        *,
        func: Callable[[], str] | None = None,
    ) -> None:
        self._linkname = linkname
        self._func = func
        self._error: Exception | None = None
        self._sha256: bytes | None = None

    def linkname(self) -> str:
        """Return the link target, reading it if needed; errors are cached."""
        if self._func is not None:
            func, self._func = self._func, None
            try:
                self._linkname = func()
            except Exception as exc:
                self._error = exc
        if self._error is not None:
            raise self._error
        return self._linkname

    def linkname_sha256(self) -> bytes:
        """Return the SHA256 digest of the link target."""
        if self._sha256 is None:
            self._sha256 = sha256_sum(self.linkname().encode("utf-8", "surrogateescape"))
        return self._sha256