"""Byte strings that serialize as hexadecimal text."""

from __future__ import annotations

import binascii


class HexBytes(bytes):
    """Bytes whose text form is lower-case hexadecimal."""

    def marshal_text(self) -> bytes:
        """Return the hex encoding of the bytes, empty for no bytes."""
        if not self:
            return b""
        return binascii.hexlify(self)

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"HexBytes({bytes(self)!r})"


def parse_hex_bytes(text: str | bytes) -> HexBytes:
    """Decode hex text into HexBytes, raising ValueError on invalid input."""
    if isinstance(text, str):
        text = text.encode("ascii", errors="strict")
    if not text:
        return HexBytes()
    return HexBytes(binascii.unhexlify(text))