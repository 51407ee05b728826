import pytest

from dotcore.entrystate import EntryStateType
from dotcore.formats import (
    FORMATS,
    JSONFormat,
    TOMLFormat,
    YAMLFormat,
    get_format,
)
from dotcore.hexbytes import HexBytes, parse_hex_bytes
from dotcore.paths import AbsPath


def test_formats_registered():
    assert set(FORMATS) >= {"json", "toml", "yaml"}
    for name, fmt in FORMATS.items():
        assert fmt.name == name


@pytest.mark.parametrize("fmt", [JSONFormat(), YAMLFormat()], ids=["json", "yaml"])
@pytest.mark.parametrize(
    "value, expected",
    [
        (HexBytes(), b'""\n'),
        (HexBytes(b"\x00"), b'"00"\n'),
        (HexBytes(b"\x00\x01\x02\x03"), b'"00010203"\n'),
    ],
)
def test_hex_bytes(fmt, value, expected):
    actual = fmt.marshal(value)
    assert actual == expected
    assert parse_hex_bytes(fmt.unmarshal(actual)) == value


def test_json_sorted_and_indented():
    assert JSONFormat().marshal({"b": 1, "a": 2}) == b'{\n  "a": 2,\n  "b": 1\n}\n'


def test_json_enum_and_path_keys():
    data = {AbsPath("/home/user"): EntryStateType.DIR}
    assert JSONFormat().unmarshal(JSONFormat().marshal(data)) == {"/home/user": "dir"}


@pytest.mark.parametrize("fmt", [JSONFormat(), TOMLFormat(), YAMLFormat()], ids=["json", "toml", "yaml"])
def test_round_trip(fmt):
    value = {"data": {"email": "you@example.com", "count": 3, "flags": [True, False]}}
    assert fmt.unmarshal(fmt.marshal(value)) == value


def test_toml_requires_table():
    with pytest.raises(TypeError):
        TOMLFormat().marshal(["not", "a", "table"])


def test_get_format():
    assert get_format("yaml") is FORMATS["yaml"]
    with pytest.raises(ValueError, match="unknown format"):
        get_format("ini")


def test_json_unmarshal_invalid():
    with pytest.raises(ValueError):
        JSONFormat().unmarshal(b"{")