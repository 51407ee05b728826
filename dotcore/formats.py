"""Serialization formats: JSON, TOML and YAML."""

from __future__ import annotations

import abc
import base64
import dataclasses
import enum
import json
import tomllib
from collections.abc import Callable, Mapping
from typing import Any

import tomli_w
import yaml

from dotcore.hexbytes import HexBytes


class _QuotedText(str):
    """Text that YAML output writes double-quoted."""


class _YAMLDumper(yaml.SafeDumper):
    pass


def _represent_quoted(dumper: yaml.SafeDumper, data: _QuotedText) -> yaml.Node:
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style='"')


_YAMLDumper.add_representer(_QuotedText, _represent_quoted)


def _plain(value: Any, hex_text: Callable[[str], str]) -> Any:
    """Convert value into plain built-in types ready for serialization."""
    if isinstance(value, HexBytes):
        return hex_text(value.hex())
    if isinstance(value, enum.Enum):
        return _plain(value.value, hex_text)
    if isinstance(value, str):
        return str(value)
    if value is None or isinstance(value, (bool, int, float, bytes)):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _plain(getattr(value, f.name), hex_text)
            for f in dataclasses.fields(value)
            if f.repr
        }
    if isinstance(value, Mapping):
        return {_plain(key, str): _plain(item, hex_text) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(item, hex_text) for item in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _text(data: bytes | str) -> str:
    return data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data


class Format(abc.ABC):
    """A serialization format."""

    name: str = ""

    @abc.abstractmethod
    def marshal(self, value: Any) -> bytes:
        """Serialize value."""

    @abc.abstractmethod
    def unmarshal(self, data: bytes | str) -> Any:
        """Deserialize data."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class JSONFormat(Format):
    """Indented JSON with sorted keys and a trailing newline."""

    name = "json"

    def marshal(self, value: Any) -> bytes:
        text = json.dumps(
            _plain(value, str),
            indent=2,
            sort_keys=True,
            ensure_ascii=False,
            default=_json_default,
        )
        return (text + "\n").encode("utf-8")

    def unmarshal(self, data: bytes | str) -> Any:
        return json.loads(data)


class TOMLFormat(Format):
    """TOML; the top-level value must be a table."""

    name = "toml"

    def marshal(self, value: Any) -> bytes:
        return tomli_w.dumps(_plain(value, str)).encode("utf-8")

    def unmarshal(self, data: bytes | str) -> Any:
        return tomllib.loads(_text(data))


class YAMLFormat(Format):
    """Block-style YAML with sorted keys."""

    name = "yaml"

    def marshal(self, value: Any) -> bytes:
        text = yaml.dump(
            _plain(value, _QuotedText),
            Dumper=_YAMLDumper,
            sort_keys=True,
            allow_unicode=True,
            default_flow_style=False,
        )
        return text.encode("utf-8")

    def unmarshal(self, data: bytes | str) -> Any:
        return yaml.safe_load(data)


FORMAT_JSON = JSONFormat()
FORMAT_TOML = TOMLFormat()
FORMAT_YAML = YAMLFormat()

FORMATS: dict[str, Format] = {
    "json": FORMAT_JSON,
    "toml": FORMAT_TOML,
    "yaml": FORMAT_YAML,
}


def get_format(name: str) -> Format:
    """Return the format called name, raising ValueError if there is none."""
    try:
        return FORMATS[name]
    except KeyError:
        raise ValueError(f"{name}: unknown format") from None