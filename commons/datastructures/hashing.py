from __future__ import annotations

_MASK = 0xFFFFFFFF


def one_at_a_time(key: bytes) -> int:
    """Bob Jenkins' one-at-a-time hash of *key* as an unsigned 32-bit int.

    Every step wraps modulo 2**32, so the result matches the classic C
    implementation operating on ``unsigned int``.
    """
    h = 0
    for byte in key:
        h = (h + byte) & _MASK
        h = (h + (h << 10)) & _MASK
        h ^= h >> 6
    h = (h + (h << 3)) & _MASK
    h ^= h >> 11
    h = (h + (h << 15)) & _MASK
    return h
