import pytest
from hypothesis import given
from hypothesis import strategies as st

from bladeplot.linepoint import get_x_enc, square_to_line_point

_coord = st.integers(min_value=0, max_value=(1 << 32) - 1)


def test_x_enc_of_zero_and_one():
    assert get_x_enc(0) == 0
    assert get_x_enc(1) == 0


@given(_coord)
def test_x_enc_steps_by_x(x):
    assert get_x_enc(x + 1) - get_x_enc(x) == x


@given(_coord, _coord)
def test_line_point_is_symmetric(x, y):
    assert square_to_line_point(x, y) == square_to_line_point(y, x)


@given(_coord, _coord)
def test_line_point_bounds(x, y):
    hi, lo = max(x, y), min(x, y)
    lp = square_to_line_point(x, y)
    assert get_x_enc(hi) <= lp <= get_x_enc(hi) + lo


def test_triangle_fills_range_exactly():
    n = 40
    points = [square_to_line_point(x, y) for x in range(n) for y in range(x)]
    assert sorted(points) == list(range(get_x_enc(n)))


def test_negative_rejected():
    with pytest.raises(ValueError):
        get_x_enc(-1)
    with pytest.raises(ValueError):
        square_to_line_point(-1, 0)
    with pytest.raises(ValueError):
        square_to_line_point(0, -2)