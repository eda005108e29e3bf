import pytest

from gt7shaker.salsa20 import BLOCK_SIZE, Salsa20

KEY = bytes(range(32))
IV = bytes(range(100, 108))


def _cipher(key=KEY, iv=IV):
    cipher = Salsa20(key)
    cipher.set_iv(iv)
    return cipher


def test_ecrypt_vector_key_high_bit():
    key = b"\x80" + bytes(31)
    cipher = _cipher(key, bytes(8))
    stream = cipher.generate_key_stream()
    assert stream[:16] == bytes.fromhex("e3be8fdd8beca2e3ea8ef9475b29a6e7")


def test_unkeyed_state_gives_zero_first_block():
    assert Salsa20().generate_key_stream() == bytes(BLOCK_SIZE)


def test_key_stream_block_size():
    assert len(_cipher().generate_key_stream()) == BLOCK_SIZE


def test_successive_blocks_differ():
    cipher = _cipher()
    first = cipher.generate_key_stream()
    second = cipher.generate_key_stream()
    reference = _cipher().process_bytes(bytes(2 * BLOCK_SIZE))
    assert first == reference[:BLOCK_SIZE]
    assert second == reference[BLOCK_SIZE:]
    assert first != second


def test_round_trip_bytes():
    message = b"telemetry payload " * 23
    encrypted = _cipher().process_bytes(message)
    assert encrypted != message
    assert _cipher().process_bytes(encrypted) == message


def test_round_trip_blocks():
    message = bytes(range(256)) * 2
    encrypted = _cipher().process_blocks(message)
    assert len(encrypted) == len(message)
    assert _cipher().process_blocks(encrypted) == message


def test_encrypting_zeros_yields_key_stream():
    streams = _cipher()
    expected = streams.generate_key_stream() + streams.generate_key_stream()
    assert _cipher().process_bytes(bytes(2 * BLOCK_SIZE)) == expected


def test_blocks_and_bytes_agree_on_block_multiples():
    data = bytes(range(192))
    assert _cipher().process_blocks(data) == _cipher().process_bytes(data)


def test_partial_block_consumes_whole_block():
    cipher = _cipher()
    cipher.process_bytes(bytes(10))
    second = cipher.process_bytes(bytes(10))

    reference = _cipher()
    reference.generate_key_stream()
    assert second == reference.generate_key_stream()[:10]


def test_set_iv_resets_counter():
    cipher = _cipher()
    first = cipher.generate_key_stream()
    cipher.generate_key_stream()
    cipher.set_iv(IV)
    assert cipher.generate_key_stream() == first


def test_different_iv_changes_stream():
    assert _cipher(iv=bytes(8)).generate_key_stream() != _cipher().generate_key_stream()


def test_set_key_replaces_key():
    cipher = Salsa20(bytes(32))
    cipher.set_key(KEY)
    cipher.set_iv(IV)
    assert cipher.generate_key_stream() == _cipher().generate_key_stream()


def test_none_key_and_iv_leave_state_unchanged():
    cipher = _cipher()
    cipher.set_key(None)
    cipher.set_iv(None)
    assert cipher.generate_key_stream() == _cipher().generate_key_stream()


def test_empty_input_returns_empty():
    cipher = _cipher()
    assert cipher.process_bytes(b"") == b""
    assert cipher.generate_key_stream() == _cipher().generate_key_stream()


@pytest.mark.parametrize("length", [0, 16, 31, 33])
def test_bad_key_length(length):
    with pytest.raises(ValueError):
        Salsa20(bytes(length))


@pytest.mark.parametrize("length", [0, 4, 7, 9])
def test_bad_iv_length(length):
    with pytest.raises(ValueError):
        Salsa20(KEY).set_iv(bytes(length))


@pytest.mark.parametrize("length", [1, 63, 65, 100])
def test_process_blocks_rejects_partial_blocks(length):
    with pytest.raises(ValueError):
        _cipher().process_blocks(bytes(length))