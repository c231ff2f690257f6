"""The BLAKE3 compression function and the helpers built directly on it."""

from __future__ import annotations

import struct
from enum import IntFlag
from typing import Sequence, Union

__all__ = [
    "Blake3Flags",
    "IV",
    "MSG_SCHEDULE",
    "BLOCK_LEN",
    "OUT_LEN",
    "KEY_LEN",
    "CHUNK_LEN",
    "load_key_words",
    "round_down_to_power_of_2",
    "compress",
    "compress_in_place",
    "compress_xof",
    "hash_many",
]

BLOCK_LEN = 64
OUT_LEN = 32
KEY_LEN = 32
CHUNK_LEN = 1024

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


class Blake3Flags(IntFlag):
    """Domain flags mixed into each compression."""

    NONE = 0
    CHUNK_START = 1 << 0
    CHUNK_END = 1 << 1
    PARENT = 1 << 2
    ROOT = 1 << 3
    KEYED_HASH = 1 << 4
    DERIVE_KEY_CONTEXT = 1 << 5
    DERIVE_KEY_MATERIAL = 1 << 6


IV: tuple[int, ...] = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

MSG_SCHEDULE: tuple[tuple[int, ...], ...] = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8),
    (3, 4, 10, 12, 13, 2, 7, 14, 6, 5, 9, 0, 11, 15, 8, 1),
    (10, 7, 12, 9, 14, 3, 13, 15, 4, 0, 11, 2, 5, 8, 1, 6),
    (12, 13, 9, 11, 15, 10, 14, 8, 7, 2, 5, 3, 0, 1, 6, 4),
    (9, 14, 11, 5, 8, 12, 15, 1, 13, 3, 0, 10, 2, 6, 4, 7),
    (11, 15, 5, 0, 1, 9, 8, 6, 14, 10, 2, 12, 3, 4, 7, 13),
)

_Bytes = Union[bytes, bytearray, memoryview]


def load_key_words(key: _Bytes) -> list[int]:
    """Split a 32-byte key into eight little-endian 32-bit words."""
    key = bytes(key)
    if len(key) != KEY_LEN:
        raise ValueError(f"key must be {KEY_LEN} bytes, got {len(key)}")
    return list(struct.unpack("<8I", key))


def round_down_to_power_of_2(x: int) -> int:
    """Largest power of two not above ``x``; 1 when ``x`` is 0."""
    if x < 0:
        raise ValueError("x must not be negative")
    return 1 << ((x | 1).bit_length() - 1)


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK32


def _g(v: list[int], a: int, b: int, c: int, d: int, mx: int, my: int) -> None:
    v[a] = (v[a] + v[b] + mx) & _MASK32
    v[d] = _rotr(v[d] ^ v[a], 16)
    v[c] = (v[c] + v[d]) & _MASK32
    v[b] = _rotr(v[b] ^ v[c], 12)
    v[a] = (v[a] + v[b] + my) & _MASK32
    v[d] = _rotr(v[d] ^ v[a], 8)
    v[c] = (v[c] + v[d]) & _MASK32
    v[b] = _rotr(v[b] ^ v[c], 7)


def _round(v: list[int], m: Sequence[int], schedule: Sequence[int]) -> None:
    s = [m[i] for i in schedule]
    # Columns
    _g(v, 0, 4, 8, 12, s[0], s[1])
    _g(v, 1, 5, 9, 13, s[2], s[3])
    _g(v, 2, 6, 10, 14, s[4], s[5])
    _g(v, 3, 7, 11, 15, s[6], s[7])
    # Diagonals
    _g(v, 0, 5, 10, 15, s[8], s[9])
    _g(v, 1, 6, 11, 12, s[10], s[11])
    _g(v, 2, 7, 8, 13, s[12], s[13])
    _g(v, 3, 4, 9, 14, s[14], s[15])


def _check_cv(cv: Sequence[int]) -> list[int]:
    words = list(cv)
    if len(words) != 8:
        raise ValueError("chaining value must hold 8 words")
    if any(not 0 <= w <= _MASK32 for w in words):
        raise ValueError("chaining value words must be 32-bit unsigned")
    return words


def _check_block(block: _Bytes, block_len: int) -> bytes:
    data = bytes(block)
    if len(data) > BLOCK_LEN:
        raise ValueError(f"block must be at most {BLOCK_LEN} bytes")
    if not 0 <= block_len <= BLOCK_LEN:
        raise ValueError(f"block_len must be between 0 and {BLOCK_LEN}")
    return data.ljust(BLOCK_LEN, b"\x00")


def compress(
    cv: Sequence[int], block: _Bytes, block_len: int, counter: int, flags: int
) -> list[int]:
    """Compress one block and return the 16 output words.

    The first eight words are the new chaining value; all sixteen make up
    one block of extended output. A block shorter than 64 bytes is padded
    with zeros.
    """
    words = _check_cv(cv)
    data = _check_block(block, block_len)
    if not 0 <= counter <= _MASK64:
        raise ValueError("counter must be a 64-bit unsigned value")
    if not 0 <= int(flags) <= 0xFF:
        raise ValueError("flags must fit in one byte")

    m = struct.unpack("<16I", data)
    v = words + list(IV[:4]) + [
        counter & _MASK32,
        (counter >> 32) & _MASK32,
        block_len,
        int(flags),
    ]
    for schedule in MSG_SCHEDULE:
        _round(v, m, schedule)

    return [v[i] ^ v[i + 8] for i in range(8)] + [v[i + 8] ^ words[i] for i in range(8)]


def compress_in_place(
    cv: Sequence[int], block: _Bytes, block_len: int, counter: int, flags: int
) -> list[int]:
    """Compress one block and return the new 8-word chaining value."""
    return compress(cv, block, block_len, counter, flags)[:8]


def compress_xof(
    cv: Sequence[int], block: _Bytes, block_len: int, counter: int, flags: int
) -> bytes:
    """Compress one block and return 64 bytes of extended output."""
    return struct.pack("<16I", *compress(cv, block, block_len, counter, flags))


def hash_many(
    inputs: Sequence[_Bytes],
    blocks: int,
    key: Sequence[int],
    counter: int,
    increment_counter: bool,
    flags: int,
    flags_start: int,
    flags_end: int,
) -> bytes:
    """Hash ``blocks`` full blocks of each input into a 32-byte chaining value.

    The first block of each input gets ``flags_start`` and the last
    ``flags_end``. With ``increment_counter`` each input uses the next
    counter value. Returns the chaining values concatenated.
    """
    if blocks < 0:
        raise ValueError("blocks must not be negative")
    key_words = _check_cv(key)
    needed = blocks * BLOCK_LEN
    out = bytearray()

    for index, item in enumerate(inputs):
        data = bytes(item)
        if len(data) < needed:
            raise ValueError(f"input {index} holds fewer than {needed} bytes")
        input_counter = (counter + index if increment_counter else counter) & _MASK64
        cv = key_words
        block_flags = int(flags) | int(flags_start)
        for block in range(blocks):
            if block + 1 == blocks:
                block_flags |= int(flags_end)
            chunk = data[block * BLOCK_LEN : (block + 1) * BLOCK_LEN]
            cv = compress_in_place(cv, chunk, BLOCK_LEN, input_counter, block_flags)
            block_flags = int(flags)
        out += struct.pack("<8I", *cv)

    return bytes(out)