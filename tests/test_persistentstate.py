import sqlite3

import pytest

from dotcore.persistentstate import (
    DatabasePersistentState,
    MockPersistentState,
    NullPersistentState,
    PersistentStateMode,
)

BUCKET = b"bucket"
KEY = b"key"
VALUE = b"value"


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "home" / "user" / ".config" / "dotcore" / "state.db"


def test_mock_persistent_state():
    s1 = MockPersistentState()
    s1.delete(BUCKET, VALUE)
    assert s1.get(BUCKET, KEY) is None

    s1.set(BUCKET, KEY, VALUE)
    assert s1.get(BUCKET, KEY) == VALUE
    assert list(s1.items(BUCKET)) == [(KEY, VALUE)]

    s2 = MockPersistentState()
    s1.copy_to(s2)
    assert s2.get(BUCKET, KEY) == VALUE

    s1.close()
    assert s1.get(BUCKET, KEY) == VALUE

    s1.delete(BUCKET, KEY)
    assert s1.get(BUCKET, KEY) is None


def test_mock_data():
    s = MockPersistentState()
    s.set("bucket", "key", VALUE)
    assert s.data() == {"bucket": {"key": VALUE}}


def test_null_persistent_state():
    s = NullPersistentState()
    s.set(BUCKET, KEY, VALUE)
    assert s.get(BUCKET, KEY) is None
    assert s.data() is None
    assert list(s.items(BUCKET)) == []
    target = MockPersistentState()
    s.copy_to(target)
    assert target.data() == {}


def test_database_persistent_state(state_path):
    b1 = DatabasePersistentState(state_path, PersistentStateMode.READ_WRITE)

    assert b1.get(BUCKET, KEY) is None
    assert not state_path.exists()

    b1.delete(BUCKET, KEY)
    assert not state_path.exists()

    b1.set(BUCKET, KEY, VALUE)
    assert state_path.is_file()
    assert b1.get(BUCKET, KEY) == VALUE
    assert list(b1.items(BUCKET)) == [(KEY, VALUE)]
    assert b1.data() == {"bucket": {"key": "value"}}
    b1.close()

    b2 = DatabasePersistentState(state_path, PersistentStateMode.READ_WRITE)
    b2.delete(BUCKET, KEY)
    assert b2.get(BUCKET, KEY) is None
    assert b2.data() == {"bucket": {}}
    b2.close()


def test_database_copy_to_mock(state_path):
    b = DatabasePersistentState(state_path)
    b.set(BUCKET, KEY, b"value1")

    m = MockPersistentState()
    b.copy_to(m)
    assert m.get(BUCKET, KEY) == b"value1"

    m.set(BUCKET, KEY, b"value2")
    assert m.get(BUCKET, KEY) == b"value2"
    assert b.get(BUCKET, KEY) == b"value1"

    m.delete(BUCKET, KEY)
    assert m.get(BUCKET, KEY) is None
    assert b.get(BUCKET, KEY) == b"value1"
    b.close()


def test_database_read_only(state_path):
    with DatabasePersistentState(state_path) as b1:
        b1.set(BUCKET, KEY, VALUE)

    b2 = DatabasePersistentState(state_path, PersistentStateMode.READ_ONLY)
    b3 = DatabasePersistentState(state_path, PersistentStateMode.READ_ONLY)
    try:
        assert b2.get(BUCKET, KEY) == VALUE
        assert b3.get(BUCKET, KEY) == VALUE
        with pytest.raises(sqlite3.Error):
            b2.set(BUCKET, KEY, VALUE)
        with pytest.raises(sqlite3.Error):
            b3.set(BUCKET, KEY, VALUE)
    finally:
        b2.close()
        b3.close()


def test_database_empty_state(state_path):
    b = DatabasePersistentState(state_path)
    assert b.data() is None
    assert list(b.items(BUCKET)) == []
    target = MockPersistentState()
    b.copy_to(target)
    assert target.data() == {}
    assert not state_path.exists()


def test_database_items_sorted(state_path):
    with DatabasePersistentState(state_path) as b:
        b.set(BUCKET, b"b", b"2")
        b.set(BUCKET, b"a", b"1")
        b.set(b"other", b"c", b"3")
        assert list(b.items(BUCKET)) == [(b"a", b"1"), (b"b", b"2")]
        assert list(b.items(b"missing")) == []
        assert b.get(b"missing", b"a") is None