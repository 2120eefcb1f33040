"""Hexadecimal and GSM BCD (swapped-nibble) conversions."""

from __future__ import annotations

import string

_HEX_DIGITS = frozenset(string.hexdigits)


def bin2hex(data: bytes) -> str:
    """Return the lower-case hexadecimal form of ``data``."""
    return bytes(data).hex()


def hex2bin(text: str) -> bytes:
    """Decode a hexadecimal string of either case.

    Raises ValueError on an odd length or on any non-hex character.
    """
    if len(text) % 2:
        raise ValueError(f"hex string has odd length {len(text)}")
    bad = next((ch for ch in text if ch not in _HEX_DIGITS), None)
    if bad is not None:
        raise ValueError(f"invalid hex character {bad!r}")
    return bytes.fromhex(text)


def _swap_pairs(text: str) -> str:
    return "".join(text[i + 1] + text[i] for i in range(0, len(text), 2))


def gsmbcd2bin(text: str, padding_to: int = 0) -> bytes:
    """Encode a digit string as GSM BCD.

    An odd-length input is padded with an ``f`` nibble, the nibbles of
    each byte are swapped, and the result is padded with ``0xff`` bytes
    up to ``padding_to`` bytes.
    """
    if len(text) % 2:
        text += "f"
    encoded = hex2bin(_swap_pairs(text))
    if padding_to > len(encoded):
        encoded += b"\xff" * (padding_to - len(encoded))
    return encoded


def bin2gsmbcd(data: bytes) -> str:
    """Decode GSM BCD bytes into a digit string, dropping trailing ``f`` nibbles.

    The first character is always kept.
    """
    decoded = _swap_pairs(bin2hex(data))
    while len(decoded) > 1 and decoded.endswith("f"):
        decoded = decoded[:-1]
    return decoded