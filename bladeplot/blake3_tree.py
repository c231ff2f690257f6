"""BLAKE3 chunk state, output nodes and subtree compression."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Sequence, Union

from bladeplot.blake3_compress import (
    BLOCK_LEN,
    CHUNK_LEN,
    OUT_LEN,
    Blake3Flags,
    compress_in_place,
    compress_xof,
    hash_many,
    round_down_to_power_of_2,
)

__all__ = [
    "ChunkState",
    "Output",
    "parent_output",
    "left_len",
    "compress_subtree_wide",
    "compress_subtree_to_parent_node",
]

_Bytes = Union[bytes, bytearray, memoryview]

# Number of chunks hashed side by side; the pure implementation works one at a time.
_SIMD_DEGREE = 1


@dataclass(frozen=True)
class Output:
    """The inputs of a compression that has not been performed yet.

    It can become either a chaining value or, as the root, any amount of
    extended output.
    """

    input_cv: tuple[int, ...]
    block: bytes
    block_len: int
    counter: int
    flags: int

    def chaining_value(self) -> bytes:
        """The 32-byte chaining value of this node (not finalized as root)."""
        words = compress_in_place(
            self.input_cv, self.block, self.block_len, self.counter, self.flags
        )
        return struct.pack("<8I", *words)

    def root_bytes(self, seek: int = 0, length: int = OUT_LEN) -> bytes:
        """``length`` bytes of root output, starting ``seek`` bytes in."""
        if seek < 0:
            raise ValueError("seek must not be negative")
        if length < 0:
            raise ValueError("length must not be negative")
        block_counter, offset = divmod(seek, BLOCK_LEN)
        out = bytearray()
        while len(out) < length + offset:
            out += compress_xof(
                self.input_cv,
                self.block,
                self.block_len,
                block_counter,
                self.flags | Blake3Flags.ROOT,
            )
            block_counter += 1
        return bytes(out[offset : offset + length])


class ChunkState:
    """Incremental state of one chunk of up to 1024 bytes."""

    def __init__(
        self, key: Sequence[int], flags: int = 0, chunk_counter: int = 0
    ) -> None:
        self.cv: list[int] = list(key)
        if len(self.cv) != 8:
            raise ValueError("key must hold 8 words")
        self.chunk_counter = chunk_counter
        self.flags = int(flags)
        self.blocks_compressed = 0
        self._buf = bytearray()

    def __len__(self) -> int:
        return BLOCK_LEN * self.blocks_compressed + len(self._buf)

    def _start_flag(self) -> int:
        return int(Blake3Flags.CHUNK_START) if self.blocks_compressed == 0 else 0

    def _compress_block(self, block: _Bytes) -> None:
        self.cv = compress_in_place(
            self.cv,
            block,
            BLOCK_LEN,
            self.chunk_counter,
            self.flags | self._start_flag(),
        )
        self.blocks_compressed += 1

    def update(self, data: _Bytes) -> None:
        """Add input to the chunk, keeping the last block back until more arrives."""
        view = memoryview(bytes(data))

        if self._buf:
            take = min(BLOCK_LEN - len(self._buf), len(view))
            self._buf += view[:take]
            view = view[take:]
            if view:
                self._compress_block(self._buf)
                self._buf.clear()

        while len(view) > BLOCK_LEN:
            self._compress_block(view[:BLOCK_LEN])
            view = view[BLOCK_LEN:]

        take = min(BLOCK_LEN - len(self._buf), len(view))
        self._buf += view[:take]

    def output(self) -> Output:
        """The output node of the chunk as it stands."""
        flags = self.flags | self._start_flag() | int(Blake3Flags.CHUNK_END)
        return Output(
            tuple(self.cv),
            bytes(self._buf).ljust(BLOCK_LEN, b"\x00"),
            len(self._buf),
            self.chunk_counter,
            flags,
        )


def parent_output(block: _Bytes, key: Sequence[int], flags: int) -> Output:
    """The output node of a parent whose block is two child chaining values."""
    data = bytes(block)
    if len(data) != BLOCK_LEN:
        raise ValueError(f"parent block must be {BLOCK_LEN} bytes")
    return Output(tuple(key), data, BLOCK_LEN, 0, int(flags) | int(Blake3Flags.PARENT))


def left_len(content_len: int) -> int:
    """Bytes that go in the left subtree of an input longer than one chunk.

    This is the largest power-of-two number of chunks that leaves at least
    one byte for the right subtree.
    """
    if content_len <= CHUNK_LEN:
        raise ValueError("content must be longer than one chunk")
    full_chunks = (content_len - 1) // CHUNK_LEN
    return round_down_to_power_of_2(full_chunks) * CHUNK_LEN


def _split(cvs: bytes) -> list[bytes]:
    return [cvs[i : i + OUT_LEN] for i in range(0, len(cvs), OUT_LEN)]


def _compress_chunks_parallel(
    data: bytes, key: Sequence[int], chunk_counter: int, flags: int
) -> list[bytes]:
    full = len(data) // CHUNK_LEN
    chunks = [data[i * CHUNK_LEN : (i + 1) * CHUNK_LEN] for i in range(full)]
    cvs = _split(
        hash_many(
            chunks,
            CHUNK_LEN // BLOCK_LEN,
            key,
            chunk_counter,
            True,
            flags,
            Blake3Flags.CHUNK_START,
            Blake3Flags.CHUNK_END,
        )
    )
    if len(data) > full * CHUNK_LEN:
        state = ChunkState(key, flags, chunk_counter + full)
        state.update(data[full * CHUNK_LEN :])
        cvs.append(state.output().chaining_value())
    return cvs


def _compress_parents_parallel(
    cvs: Sequence[bytes], key: Sequence[int], flags: int
) -> list[bytes]:
    pairs = [cvs[i] + cvs[i + 1] for i in range(0, len(cvs) - 1, 2)]
    parents = _split(
        hash_many(pairs, 1, key, 0, False, int(flags) | Blake3Flags.PARENT, 0, 0)
    )
    if len(cvs) % 2:
        parents.append(cvs[-1])
    return parents


def compress_subtree_wide(
    data: _Bytes, key: Sequence[int], chunk_counter: int, flags: int
) -> list[bytes]:
    """Chaining values for a non-root subtree; at least two above one chunk."""
    data = bytes(data)
    if not data:
        raise ValueError("data must not be empty")

    if len(data) <= _SIMD_DEGREE * CHUNK_LEN:
        return _compress_chunks_parallel(data, key, chunk_counter, flags)

    left = left_len(len(data))
    right_counter = chunk_counter + left // CHUNK_LEN

    left_cvs = compress_subtree_wide(data[:left], key, chunk_counter, flags)
    right_cvs = compress_subtree_wide(data[left:], key, right_counter, flags)

    # Keep two outputs rather than merging them, so the root is never compressed here.
    if len(left_cvs) == 1:
        return left_cvs + right_cvs

    return _compress_parents_parallel(left_cvs + right_cvs, key, flags)


def compress_subtree_to_parent_node(
    data: _Bytes, key: Sequence[int], chunk_counter: int, flags: int
) -> bytes:
    """The 64-byte block of the topmost parent of a subtree, uncompressed."""
    data = bytes(data)
    if len(data) <= CHUNK_LEN:
        raise ValueError("data must be longer than one chunk")
    cvs = compress_subtree_wide(data, key, chunk_counter, flags)
    while len(cvs) > 2:
        cvs = _compress_parents_parallel(cvs, key, flags)
    return cvs[0] + cvs[1]