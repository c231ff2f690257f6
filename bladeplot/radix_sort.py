"""Byte-wise LSD radix sort for unsigned integers, optionally carrying a key."""

from __future__ import annotations

from itertools import chain, pairwise
from typing import Iterable, Optional, Sequence

__all__ = [
    "radix_sort",
    "radix_sort_with_key",
    "sort_y",
    "sort_y_with_key",
    "is_sorted",
    "validate_sort_key",
]

_RADIX = 256
_DEFAULT_ITERATIONS = 8  # 64-bit entries
_Y_ITERATIONS = 5  # y values fit in 40 bits


def _check_iterations(iterations: Optional[int]) -> int:
    if iterations is None:
        return _DEFAULT_ITERATIONS
    if iterations < 0:
        raise ValueError("iterations must not be negative")
    return iterations


def _check_values(values: Iterable[int]) -> list[int]:
    items = list(values)
    if any(v < 0 for v in items):
        raise ValueError("radix sort only handles unsigned values")
    return items


def radix_sort(values: Iterable[int], iterations: Optional[int] = None) -> list[int]:
    """Stable sort on the lowest ``iterations`` bytes of each value."""
    items = _check_values(values)
    for shift in range(0, _check_iterations(iterations) * 8, 8):
        buckets: list[list[int]] = [[] for _ in range(_RADIX)]
        for v in items:
            buckets[(v >> shift) & 0xFF].append(v)
        items = list(chain.from_iterable(buckets))
    return items


def radix_sort_with_key(
    values: Iterable[int],
    keys: Iterable[int],
    iterations: Optional[int] = None,
) -> tuple[list[int], list[int]]:
    """Sort ``values`` and permute ``keys`` along with them.

    Returns the sorted values and the keys in the matching order.
    """
    items = _check_values(values)
    key_list = list(keys)
    if len(key_list) != len(items):
        raise ValueError("values and keys must have the same length")

    pairs = list(zip(items, key_list))
    for shift in range(0, _check_iterations(iterations) * 8, 8):
        buckets: list[list[tuple[int, int]]] = [[] for _ in range(_RADIX)]
        for pair in pairs:
            buckets[(pair[0] >> shift) & 0xFF].append(pair)
        pairs = list(chain.from_iterable(buckets))

    return [v for v, _ in pairs], [k for _, k in pairs]


def sort_y(values: Iterable[int]) -> list[int]:
    """Sort y values, looking only at their low 40 bits."""
    return radix_sort(values, _Y_ITERATIONS)


def sort_y_with_key(
    values: Iterable[int], keys: Iterable[int]
) -> tuple[list[int], list[int]]:
    """Sort y values (low 40 bits) and permute ``keys`` with them."""
    return radix_sort_with_key(values, keys, _Y_ITERATIONS)


def is_sorted(values: Sequence[int]) -> bool:
    """True if ``values`` is in non-decreasing order."""
    return all(a <= b for a, b in pairwise(values))


def validate_sort_key(sort_key: Sequence[int]) -> bool:
    """True if ``sort_key`` is a permutation of ``0 .. len(sort_key) - 1``."""
    n = len(sort_key)
    seen = set()
    for k in sort_key:
        if not 0 <= k < n or k in seen:
            return False
        seen.add(k)
    return True