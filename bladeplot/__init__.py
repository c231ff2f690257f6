"""Proof-of-space plotting primitives: BLAKE3 hashing, radix sorting and line points."""

__version__ = "1.2.0"