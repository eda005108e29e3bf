"""Salsa20/20 stream cipher with 256-bit keys and 64-bit IVs."""

from __future__ import annotations

import struct

BLOCK_SIZE = 64
KEY_SIZE = 32
IV_SIZE = 8
VECTOR_SIZE = 16

_MASK = 0xFFFFFFFF
_SIGMA = b"expand 32-byte k"
_WORDS = struct.Struct("<16I")

_COLUMN_ROUNDS = ((0, 4, 8, 12), (5, 9, 13, 1), (10, 14, 2, 6), (15, 3, 7, 11))
_ROW_ROUNDS = ((0, 1, 2, 3), (5, 6, 7, 4), (10, 11, 8, 9), (15, 12, 13, 14))


def _rotl(value: int, bits: int) -> int:
    value &= _MASK
    return ((value << bits) | (value >> (32 - bits))) & _MASK


def _quarter_round(x: list[int], a: int, b: int, c: int, d: int) -> None:
    x[b] ^= _rotl(x[a] + x[d], 7)
    x[c] ^= _rotl(x[b] + x[a], 9)
    x[d] ^= _rotl(x[c] + x[b], 13)
    x[a] ^= _rotl(x[d] + x[c], 18)


def _xor(data: bytes, stream: bytes) -> bytes:
    length = len(data)
    mixed = int.from_bytes(data, "little") ^ int.from_bytes(stream[:length], "little")
    return mixed.to_bytes(length, "little")


class Salsa20:
    """Salsa20 cipher state; encrypting and decrypting are the same operation."""

    BLOCK_SIZE = BLOCK_SIZE
    KEY_SIZE = KEY_SIZE
    IV_SIZE = IV_SIZE

    def __init__(self, key: bytes | None = None) -> None:
        self._state = [0] * VECTOR_SIZE
        self.set_key(key)

    def set_key(self, key: bytes | None) -> None:
        """Load a 32-byte key; ``None`` leaves the state untouched."""
        if key is None:
            return
        key = bytes(key)
        if len(key) != KEY_SIZE:
            raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
        c = struct.unpack("<4I", _SIGMA)
        k = struct.unpack("<8I", key)
        self._state = [
            c[0], k[0], k[1], k[2],
            k[3], c[1], 0, 0,
            0, 0, c[2], k[4],
            k[5], k[6], k[7], c[3],
        ]

    def set_iv(self, iv: bytes | None) -> None:
        """Load an 8-byte IV and reset the block counter; ``None`` is ignored."""
        if iv is None:
            return
        iv = bytes(iv)
        if len(iv) != IV_SIZE:
            raise ValueError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
        self._state[6], self._state[7] = struct.unpack("<2I", iv)
        self._state[8] = self._state[9] = 0

    def generate_key_stream(self) -> bytes:
        """Return the next 64-byte key stream block and advance the counter."""
        x = list(self._state)
        for _ in range(10):
            for indices in _COLUMN_ROUNDS:
                _quarter_round(x, *indices)
            for indices in _ROW_ROUNDS:
                _quarter_round(x, *indices)
        block = _WORDS.pack(*((a + b) & _MASK for a, b in zip(x, self._state)))

        self._state[8] = (self._state[8] + 1) & _MASK
        if self._state[8] == 0:
            self._state[9] = (self._state[9] + 1) & _MASK
        return block

    def process_blocks(self, data: bytes) -> bytes:
        """Encrypt or decrypt whole 64-byte blocks."""
        data = bytes(data)
        if len(data) % BLOCK_SIZE:
            raise ValueError(f"data length must be a multiple of {BLOCK_SIZE}")
        return self.process_bytes(data)

    def process_bytes(self, data: bytes) -> bytes:
        """Encrypt or decrypt any number of bytes.

        A trailing partial block still consumes a whole key stream block, so
        this is normally the last call on a stream.
        """
        data = bytes(data)
        return b"".join(
            _xor(data[start:start + BLOCK_SIZE], self.generate_key_stream())
            for start in range(0, len(data), BLOCK_SIZE)
        )