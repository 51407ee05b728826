"""Persistent key-value state organised in buckets."""

from __future__ import annotations

import abc
import enum
import os
import sqlite3
from collections.abc import Iterator
from pathlib import Path
from typing import Any

Key = bytes | str


def _b(value: Key) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8", "surrogateescape")
    return bytes(value)


def _s(value: bytes) -> str:
    return value.decode("utf-8", "surrogateescape")


class PersistentState(abc.ABC):
    """A store of values by bucket and key."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release any resources held."""

    @abc.abstractmethod
    def copy_to(self, other: PersistentState) -> None:
        """Copy every value into other."""

    @abc.abstractmethod
    def data(self) -> Any:
        """Return all the data."""

    @abc.abstractmethod
    def delete(self, bucket: Key, key: Key) -> None:
        """Delete the value at bucket and key, if there is one."""

    @abc.abstractmethod
    def items(self, bucket: Key) -> Iterator[tuple[bytes, bytes]]:
        """Yield every key and value pair in bucket."""

    @abc.abstractmethod
    def get(self, bucket: Key, key: Key) -> bytes | None:
        """Return the value at bucket and key, or None."""

    @abc.abstractmethod
    def set(self, bucket: Key, key: Key, value: bytes) -> None:
        """Store value at bucket and key, creating the bucket if needed."""

    def __enter__(self) -> PersistentState:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class MockPersistentState(PersistentState):
    """An in-memory persistent state."""

    def __init__(self) -> None:
        self._buckets: dict[bytes, dict[bytes, bytes]] = {}

    def close(self) -> None:
        return None

    def copy_to(self, other: PersistentState) -> None:
        for bucket, bucket_map in list(self._buckets.items()):
            for key, value in list(bucket_map.items()):
                other.set(bucket, key, value)

    def data(self) -> dict[str, dict[str, bytes]]:
        return {
            _s(bucket): {_s(key): value for key, value in bucket_map.items()}
            for bucket, bucket_map in self._buckets.items()
        }

    def delete(self, bucket: Key, key: Key) -> None:
        bucket_map = self._buckets.get(_b(bucket))
        if bucket_map is not None:
            bucket_map.pop(_b(key), None)

    def items(self, bucket: Key) -> Iterator[tuple[bytes, bytes]]:
        yield from list(self._buckets.get(_b(bucket), {}).items())

    def get(self, bucket: Key, key: Key) -> bytes | None:
        return self._buckets.get(_b(bucket), {}).get(_b(key))

    def set(self, bucket: Key, key: Key, value: bytes) -> None:
        self._buckets.setdefault(_b(bucket), {})[_b(key)] = bytes(value)


class NullPersistentState(PersistentState):
    """A state that is always empty and ignores all writes."""

    def close(self) -> None:
        return None

    def copy_to(self, other: PersistentState) -> None:
        return None

    def data(self) -> None:
        return None

    def delete(self, bucket: Key, key: Key) -> None:
        return None

    def items(self, bucket: Key) -> Iterator[tuple[bytes, bytes]]:
        return iter(())

    def get(self, bucket: Key, key: Key) -> None:
        return None

    def set(self, bucket: Key, key: Key, value: bytes) -> None:
        return None


class PersistentStateMode(enum.Enum):
    """How a database persistent state is opened."""

    READ_ONLY = "read-only"
    READ_WRITE = "read-write"


_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS buckets (name BLOB PRIMARY KEY)",
    "CREATE TABLE IF NOT EXISTS entries ("
    " bucket BLOB NOT NULL, key BLOB NOT NULL, value BLOB NOT NULL,"
    " PRIMARY KEY (bucket, key))",
)


class DatabasePersistentState(PersistentState):
    """A persistent state stored in an SQLite database file.

    The file is only created when a value is first set; reads and deletes
    on a state whose file does not exist behave as on an empty state.
    """

    def __init__(
        self,
        path: str | os.PathLike,
        mode: PersistentStateMode = PersistentStateMode.READ_WRITE,
    ) -> None:
        self.path = Path(path)
        self.mode = mode
        try:
            self.path.stat()
        except FileNotFoundError:
            self._empty = True
        else:
            self._empty = False
        self._conn: sqlite3.Connection | None = None

    def _open(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        self.path.parent.mkdir(mode=0o777, parents=True, exist_ok=True)
        if self.mode is PersistentStateMode.READ_ONLY:
            uri = self.path.resolve().as_uri() + "?mode=ro"
            conn = sqlite3.connect(uri, uri=True, timeout=1.0)
        else:
            conn = sqlite3.connect(self.path, timeout=1.0)
            try:
                os.chmod(self.path, 0o600)
                with conn:
                    for statement in _SCHEMA:
                        conn.execute(statement)
            except BaseException:
                conn.close()
                raise
        self._empty = False
        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _rows(self, bucket: bytes | None = None) -> list[tuple[bytes, bytes, bytes]]:
        conn = self._open()
        if bucket is None:
            cursor = conn.execute(
                "SELECT bucket, key, value FROM entries ORDER BY bucket, key"
            )
        else:
            cursor = conn.execute(
                "SELECT bucket, key, value FROM entries WHERE bucket = ? ORDER BY key",
                (bucket,),
            )
        return [(bytes(b), bytes(k), bytes(v)) for b, k, v in cursor.fetchall()]

    def copy_to(self, other: PersistentState) -> None:
        if self._empty:
            return
        for bucket, key, value in self._rows():
            other.set(bucket, key, value)

    def data(self) -> dict[str, dict[str, str]] | None:
        if self._empty:
            return None
        conn = self._open()
        result: dict[str, dict[str, str]] = {
            _s(bytes(name)): {}
            for (name,) in conn.execute("SELECT name FROM buckets ORDER BY name")
        }
        for bucket, key, value in self._rows():
            result.setdefault(_s(bucket), {})[_s(key)] = _s(value)
        return result

    def delete(self, bucket: Key, key: Key) -> None:
        if self._empty:
            return
        conn = self._open()
        with conn:
            conn.execute(
                "DELETE FROM entries WHERE bucket = ? AND key = ?", (_b(bucket), _b(key))
            )

    def items(self, bucket: Key) -> Iterator[tuple[bytes, bytes]]:
        if self._empty:
            return
        for _, key, value in self._rows(_b(bucket)):
            yield key, value

    def get(self, bucket: Key, key: Key) -> bytes | None:
        if self._empty:
            return None
        conn = self._open()
        row = conn.execute(
            "SELECT value FROM entries WHERE bucket = ? AND key = ?",
            (_b(bucket), _b(key)),
        ).fetchone()
        return None if row is None else bytes(row[0])

    def set(self, bucket: Key, key: Key, value: bytes) -> None:
        conn = self._open()
        bucket_bytes = _b(bucket)
        with conn:
            conn.execute("INSERT OR IGNORE INTO buckets (name) VALUES (?)", (bucket_bytes,))
            conn.execute(
                "INSERT OR REPLACE INTO entries (bucket, key, value) VALUES (?, ?, ?)",
                (bucket_bytes, _b(key), bytes(value)),
            )