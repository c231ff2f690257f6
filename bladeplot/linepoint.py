"""Line point encoding: mapping a pair of table positions to one integer."""

from __future__ import annotations

__all__ = ["get_x_enc", "square_to_line_point"]

_MASK64 = 0xFFFFFFFFFFFFFFFF


def get_x_enc(x: int) -> int:
    """``x * (x - 1) / 2``, halving before multiplying, in 64-bit arithmetic."""
    if x < 0:
        raise ValueError("x must not be negative")
    a, b = x & _MASK64, (x - 1) & _MASK64
    if a & 1 == 0:
        a >>= 1
    else:
        b >>= 1
    return (a * b) & _MASK64


def square_to_line_point(x: int, y: int) -> int:
    """Encode two positions into one line point, larger coordinate first.

    Points of the square fold into a triangle, so the smaller coordinate
    needs fewer bits to store.
    """
    if x < 0 or y < 0:
        raise ValueError("coordinates must not be negative")
    if y > x:
        return (get_x_enc(y) + x) & _MASK64
    return (get_x_enc(x) + y) & _MASK64