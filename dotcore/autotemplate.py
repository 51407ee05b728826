"""Turning file contents into templates by substituting known values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TemplateVariable:
    """A dotted template variable name and its string value."""

    name: str
    value: str


def is_word(c: str | int) -> bool:
    """Return whether c is an ASCII letter or digit."""
    if isinstance(c, int):
        c = chr(c)
    return "0" <= c <= "9" or "A" <= c <= "Z" or "a" <= c <= "z"


def in_word(s: str | bytes, i: int) -> bool:
    """Return whether splitting s at position i would split a word."""
    return 0 < i < len(s) and is_word(s[i - 1]) and is_word(s[i])


def _extract(data: Mapping[str, Any], parent: tuple[str, ...]):
    for name, value in data.items():
        if isinstance(value, str):
            yield TemplateVariable(name=".".join((*parent, name)), value=value)
        elif isinstance(value, Mapping):
            yield from _extract(value, (*parent, name))


def extract_variables(data: Mapping[str, Any]) -> list[TemplateVariable]:
    """Return every string value in data, nested mappings included."""
    return list(_extract(data, ()))


def auto_template(contents: bytes, data: Mapping[str, Any]) -> tuple[bytes, bool]:
    """Replace values from data in contents with template references.

    Returns the new contents and whether any replacement was made.
    """
    variables = sorted(
        extract_variables(data),
        key=lambda variable: (-len(variable.value.encode()), variable.name),
    )
    # Latin-1 maps each byte to one character, so indexes match byte offsets.
    text = bytes(contents).decode("latin-1")
    replaced = False
    for variable in variables:
        if not variable.value:
            continue
        value = variable.value.encode().decode("latin-1")
        replacement = ("{{ ." + variable.name + " }}").encode().decode("latin-1")
        index = text.find(value)
        while index != -1 and index != len(text):
            if not in_word(text, index) and not in_word(text, index + len(value)):
                text = text[:index] + replacement + text[index + len(value) :]
                index += len(replacement)
                replaced = True
            else:
                index += 1
            index = text.find(value, index)
    return text.encode("latin-1"), replaced