"""Assorted helpers: fatal errors, rounding, byte swapping and hex coding."""

from __future__ import annotations

from typing import Union

__all__ = [
    "FatalError",
    "fatal",
    "fatal_if",
    "cdiv",
    "round_up_to_boundary",
    "swap16",
    "swap32",
    "swap64",
    "hex_to_bytes",
    "bytes_to_hex",
]


class FatalError(RuntimeError):
    """An unrecoverable error; the program cannot continue."""


def _format(message: str, args: tuple) -> str:
    return message % args if args else message


def fatal(message: str, *args: object) -> None:
    """Raise a FatalError with a printf-style formatted message."""
    raise FatalError(_format(message, args))


def fatal_if(condition: bool, message: str, *args: object) -> None:
    """Raise a FatalError if ``condition`` holds."""
    if condition:
        fatal(message, *args)


def cdiv(a: int, b: int) -> int:
    """How many ``b``-sized chunks are needed to hold ``a``."""
    if b <= 0:
        raise ValueError("divisor must be positive")
    return (a + b - 1) // b


def round_up_to_boundary(value: int, boundary: int) -> int:
    """Round ``value`` up to the next multiple of ``boundary``."""
    if boundary <= 0:
        raise ValueError("boundary must be positive")
    return value + (boundary - value % boundary) % boundary


def _swap(value: int, width: int) -> int:
    mask = (1 << (width * 8)) - 1
    return int.from_bytes((value & mask).to_bytes(width, "little"), "big")


def swap16(value: int) -> int:
    """Reverse the byte order of a 16-bit value."""
    return _swap(value, 2)


def swap32(value: int) -> int:
    """Reverse the byte order of a 32-bit value."""
    return _swap(value, 4)


def swap64(value: int) -> int:
    """Reverse the byte order of a 64-bit value."""
    return _swap(value, 8)


_HEX_DIGITS = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}


def hex_to_bytes(text: Union[str, bytes]) -> bytes:
    """Decode hex text into bytes.

    Characters that are not hex digits count as zero, and a trailing odd
    character is ignored.
    """
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("latin-1")
    usable = len(text) // 2 * 2
    pairs = zip(text[0:usable:2], text[1:usable:2])
    return bytes(
        _HEX_DIGITS.get(hi, 0) * 16 + _HEX_DIGITS.get(lo, 0) for hi, lo in pairs
    )


def bytes_to_hex(data: bytes, uppercase: bool = False) -> str:
    """Encode bytes as a hex string."""
    encoded = bytes(data).hex()
    return encoded.upper() if uppercase else encoded