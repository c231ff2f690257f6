import pytest
from hypothesis import given, settings, strategies as st

from bladeplot.blake3 import Blake3Hasher, blake3
from bladeplot.blake3_compress import IV, Blake3Flags, load_key_words
from bladeplot.blake3_tree import ChunkState, parent_output


def _pattern(n):
    return bytes(i % 251 for i in range(n))


def _incremental(data, piece, hasher=None):
    hasher = hasher or Blake3Hasher()
    for start in range(0, len(data), piece):
        hasher.update(data[start : start + piece])
    return hasher.finalize()


def test_empty_input_known_digest():
    assert blake3(b"").hex() == (
        "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"
    )


def test_abc_known_digest():
    assert blake3(b"abc").hex() == (
        "6437b3ac38465133ffb63b75273a8db548c558465d79db03fd359c6cd5bd9d85"
    )


def test_function_matches_hasher():
    hasher = Blake3Hasher()
    hasher.update(b"abc")
    assert hasher.finalize() == blake3(b"abc")


def test_two_chunks_match_manual_tree():
    data = _pattern(2048)
    left = ChunkState(IV, 0, 0)
    left.update(data[:1024])
    right = ChunkState(IV, 0, 1)
    right.update(data[1024:])
    block = left.output().chaining_value() + right.output().chaining_value()
    expected = parent_output(block, IV, 0).root_bytes(0, 32)
    assert blake3(data) == expected


@pytest.mark.parametrize("size", [1023, 1024, 1025, 2049, 3072, 4097, 5000])
@pytest.mark.parametrize("piece", [1, 37, 64, 1024, 2048])
def test_incremental_matches_one_shot(size, piece):
    if piece == 1 and size > 2049:
        size = 2049
    data = _pattern(size)
    assert _incremental(data, piece) == blake3(data)


def test_large_update_after_partial_chunk():
    data = _pattern(6000)
    hasher = Blake3Hasher()
    hasher.update(data[:100])
    hasher.update(data[100:])
    assert hasher.finalize() == blake3(data)


@settings(max_examples=15, deadline=None)
@given(st.binary(max_size=2600), st.integers(min_value=0, max_value=2600))
def test_split_point_does_not_matter(data, split):
    hasher = Blake3Hasher()
    hasher.update(data[:split])
    hasher.update(data[split:])
    assert hasher.finalize() == blake3(data)


def test_extended_output_prefix():
    data = _pattern(3000)
    assert blake3(data, 200)[:32] == blake3(data)


@pytest.mark.parametrize("size", [5, 2048, 3000])
@pytest.mark.parametrize("seek", [0, 10, 64, 70, 130])
def test_finalize_seek_matches_long_output(size, seek):
    hasher = Blake3Hasher()
    hasher.update(_pattern(size))
    assert hasher.finalize_seek(seek, 50) == hasher.finalize(seek + 50)[seek:]


def test_finalize_does_not_consume_state():
    hasher = Blake3Hasher()
    hasher.update(b"abc")
    first = hasher.finalize()
    assert hasher.finalize() == first
    hasher.update(b"def")
    assert hasher.finalize() == blake3(b"abcdef")


def test_zero_length_output():
    assert blake3(b"abc", 0) == b""


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        Blake3Hasher().finalize(-1)


def test_negative_seek_rejected():
    with pytest.raises(ValueError):
        Blake3Hasher().finalize_seek(-1, 32)


def test_keyed_matches_chunk_state():
    key_material = blake3(b"placeholder")
    hasher = Blake3Hasher.keyed(key_material)
    hasher.update(b"abc")
    state = ChunkState(load_key_words(key_material), Blake3Flags.KEYED_HASH)
    state.update(b"abc")
    assert hasher.finalize() == state.output().root_bytes(0, 32)


def test_keyed_incremental_matches_one_shot():
    key_material = blake3(b"placeholder")
    data = _pattern(4500)
    one_shot = Blake3Hasher.keyed(key_material)
    one_shot.update(data)
    assert _incremental(data, 333, Blake3Hasher.keyed(key_material)) == one_shot.finalize()


def test_keyed_rejects_short_key():
    with pytest.raises(ValueError):
        Blake3Hasher.keyed(b"short")


def test_derive_key_matches_chunk_states():
    context = "bladeplot example context"
    material = b"material"
    ctx_state = ChunkState(IV, Blake3Flags.DERIVE_KEY_CONTEXT)
    ctx_state.update(context.encode())
    context_key = ctx_state.output().root_bytes(0, 32)
    mat_state = ChunkState(load_key_words(context_key), Blake3Flags.DERIVE_KEY_MATERIAL)
    mat_state.update(material)

    hasher = Blake3Hasher.derive_key(context)
    hasher.update(material)
    assert hasher.finalize() == mat_state.output().root_bytes(0, 32)


def test_derive_key_accepts_bytes_context():
    a = Blake3Hasher.derive_key("ctx")
    b = Blake3Hasher.derive_key(b"ctx")
    a.update(b"x")
    b.update(b"x")
    assert a.finalize() == b.finalize()


def test_update_rejects_text():
    with pytest.raises(TypeError):
        Blake3Hasher().update("text")