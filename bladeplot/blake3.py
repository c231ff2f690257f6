"""Incremental BLAKE3 hashing with keyed, key-derivation and extended output modes."""

from __future__ import annotations

from typing import Sequence, Union

from bladeplot.blake3_compress import (
    CHUNK_LEN,
    IV,
    OUT_LEN,
    Blake3Flags,
    load_key_words,
    round_down_to_power_of_2,
)
from bladeplot.blake3_tree import (
    ChunkState,
    Output,
    compress_subtree_to_parent_node,
    parent_output,
)

__all__ = ["Blake3Hasher", "blake3"]

_Bytes = Union[bytes, bytearray, memoryview]


class Blake3Hasher:
    """A BLAKE3 hasher; feed it with ``update`` and read it with ``finalize``."""

    def __init__(self) -> None:
        self._init_base(IV, 0)

    def _init_base(self, key_words: Sequence[int], flags: int) -> None:
        self._key: tuple[int, ...] = tuple(key_words)
        self._chunk = ChunkState(self._key, int(flags), 0)
        self._cv_stack: list[bytes] = []

    @classmethod
    def keyed(cls, key: _Bytes) -> "Blake3Hasher":
        """A hasher for keyed hashing with a 32-byte key."""
        hasher = cls()
        hasher._init_base(load_key_words(key), Blake3Flags.KEYED_HASH)
        return hasher

    @classmethod
    def derive_key(cls, context: Union[str, _Bytes]) -> "Blake3Hasher":
        """A hasher deriving key material under the given context string."""
        if isinstance(context, str):
            context = context.encode("utf-8")
        context_hasher = cls()
        context_hasher._init_base(IV, Blake3Flags.DERIVE_KEY_CONTEXT)
        context_hasher.update(context)
        context_key = context_hasher.finalize(OUT_LEN)
        hasher = cls()
        hasher._init_base(load_key_words(context_key), Blake3Flags.DERIVE_KEY_MATERIAL)
        return hasher

    @property
    def _flags(self) -> int:
        return self._chunk.flags

    def _merge_cv_stack(self, total_chunks: int) -> None:
        # Each chaining value that stays on the stack is one set bit of the chunk count.
        post_merge_len = bin(total_chunks).count("1")
        while len(self._cv_stack) > post_merge_len:
            block = self._cv_stack[-2] + self._cv_stack[-1]
            merged = parent_output(block, self._key, self._flags).chaining_value()
            self._cv_stack[-2:] = [merged]

    def _push_cv(self, cv: bytes, chunk_counter: int) -> None:
        self._merge_cv_stack(chunk_counter)
        self._cv_stack.append(bytes(cv))

    def update(self, data: _Bytes) -> None:
        """Add more input."""
        view = memoryview(bytes(data))
        if not view:
            return

        # Finish a partly filled chunk first.
        if len(self._chunk) > 0:
            take = min(CHUNK_LEN - len(self._chunk), len(view))
            self._chunk.update(view[:take])
            view = view[take:]
            if not view:
                return
            cv = self._chunk.output().chaining_value()
            counter = self._chunk.chunk_counter
            self._push_cv(cv, counter)
            self._chunk = ChunkState(self._key, self._flags, counter + 1)

        while len(view) > CHUNK_LEN:
            counter = self._chunk.chunk_counter
            subtree_len = round_down_to_power_of_2(len(view))
            count_so_far = counter * CHUNK_LEN
            while (subtree_len - 1) & count_so_far:
                subtree_len //= 2
            subtree_chunks = subtree_len // CHUNK_LEN

            if subtree_len <= CHUNK_LEN:
                state = ChunkState(self._key, self._flags, counter)
                state.update(view[:subtree_len])
                self._push_cv(state.output().chaining_value(), counter)
            else:
                pair = compress_subtree_to_parent_node(
                    view[:subtree_len], self._key, counter, self._flags
                )
                self._push_cv(pair[:OUT_LEN], counter)
                self._push_cv(pair[OUT_LEN:], counter + subtree_chunks // 2)

            self._chunk.chunk_counter += subtree_chunks
            view = view[subtree_len:]

        if view:
            self._chunk.update(view)
            self._merge_cv_stack(self._chunk.chunk_counter)

    def finalize(self, length: int = OUT_LEN) -> bytes:
        """``length`` bytes of output; the hasher stays usable afterwards."""
        return self.finalize_seek(0, length)

    def finalize_seek(self, seek: int, length: int = OUT_LEN) -> bytes:
        """``length`` bytes of extended output starting ``seek`` bytes in."""
        if seek < 0:
            raise ValueError("seek must not be negative")
        if length < 0:
            raise ValueError("length must not be negative")
        if length == 0:
            return b""

        if not self._cv_stack:
            return self._chunk.output().root_bytes(seek, length)

        output: Output
        if len(self._chunk) > 0:
            remaining = len(self._cv_stack)
            output = self._chunk.output()
        else:
            remaining = len(self._cv_stack) - 2
            output = parent_output(
                self._cv_stack[-2] + self._cv_stack[-1], self._key, self._flags
            )

        while remaining > 0:
            remaining -= 1
            block = self._cv_stack[remaining] + output.chaining_value()
            output = parent_output(block, self._key, self._flags)

        return output.root_bytes(seek, length)


def blake3(data: _Bytes, length: int = OUT_LEN) -> bytes:
    """The plain BLAKE3 hash of ``data``."""
    hasher = Blake3Hasher()
    hasher.update(data)
    return hasher.finalize(length)