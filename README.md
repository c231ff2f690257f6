# bladeplot

Building blocks for proof-of-space plotting, in pure Python with no dependencies.

## What it provides

- `bladeplot.blake3`: the BLAKE3 hash. `Blake3Hasher` takes input through `update` and
  gives output through `finalize(length)` and `finalize_seek(seek, length)`; the
  class methods `Blake3Hasher.keyed(key)` and `Blake3Hasher.derive_key(context)` set up
  keyed hashing and key derivation. `blake3(data, length=32)` hashes in one call.
- `bladeplot.blake3_compress`: the compression function (`compress`,
  `compress_in_place`, `compress_xof`), `hash_many`, `load_key_words`,
  `round_down_to_power_of_2`, the `Blake3Flags` flags and the `IV` and `MSG_SCHEDULE`
  constants.
- `bladeplot.blake3_tree`: the chunk and tree layers the hasher is built on:
  `ChunkState`, `Output`, `parent_output`, `left_len`, `compress_subtree_wide` and
  `compress_subtree_to_parent_node`.
- `bladeplot.radix_sort`: stable LSD radix sorts over byte digits of unsigned integers.
  `radix_sort(values, iterations=None)` looks at the lowest `iterations` bytes (eight by
  default); `sort_y(values)` looks at the lowest five bytes. `radix_sort_with_key` and
  `sort_y_with_key` permute a list of keys along with the values. `is_sorted` checks
  non-decreasing order and `validate_sort_key` checks that a sort key is a permutation
  of `0 .. n - 1`.
- `bladeplot.linepoint`: `get_x_enc(x)` (`x * (x - 1) / 2` in 64-bit arithmetic) and
  `square_to_line_point(x, y)`, which folds a pair of table positions into one line
  point.
- `bladeplot.util`: `cdiv`, `round_up_to_boundary`, `swap16`, `swap32`, `swap64`,
  `hex_to_bytes`, `bytes_to_hex`, and `fatal` / `fatal_if`, which raise `FatalError`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Hashing:

```python
from bladeplot.blake3 import Blake3Hasher, blake3

digest = blake3(b"hello")              # 32 bytes
hasher = Blake3Hasher()
hasher.update(b"hel")
hasher.update(b"lo")
assert hasher.finalize(32) == digest
more = hasher.finalize_seek(32, 64)    # extended output from byte 32 onwards

keyed = Blake3Hasher.keyed(bytes(32))  # a 32-byte key
keyed.update(b"message")
mac = keyed.finalize()

derived = Blake3Hasher.derive_key("example context")
derived.update(b"input key material")
subkey = derived.finalize()
```

Sorting y values along with a sort key:

```python
from bladeplot.radix_sort import is_sorted, sort_y_with_key, validate_sort_key

values, keys = sort_y_with_key([5, 3, 9, 1], [0, 1, 2, 3])
assert values == [1, 3, 5, 9]
assert keys == [3, 1, 0, 2]
assert is_sorted(values) and validate_sort_key(keys)
```

Line points:

```python
from bladeplot.linepoint import square_to_line_point

assert square_to_line_point(7, 3) == 24
assert square_to_line_point(3, 7) == 24
```

## What it does not do

The package holds primitives only. It does not write plot files, it has no parallel
bucket sorter for y values, it has no table of plot constants or park size
calculations, and it offers no command to run: the functions above are used from
Python code.