# sivd/core/fingerprint.py
# Bit-exact fingerprint of a result vector.
#
# math.isclose(), pytest.approx() and every other tolerance-based comparison
# are PROHIBITED in this module. The Python equality operator is never
# applied to float values: it considers +0.0 equal to -0.0 and NaN unequal
# to itself.
#
# Hash construction (pinned, language independent):
#   FNV-1a 64-bit, offset basis 0xcbf29ce484222325, prime 0x100000001b3,
#   folded over the 8-byte big-endian IEEE-754 encoding of each element
#   in vector order. Rendered as 16 lowercase hex characters.
#
# Reference digests:
#   ()            -> cbf29ce484222325
#   (+0.0,)       -> a8c7f832281a39c5
#   (-0.0,)       -> 262b7cb79fbf4a45
#   (1.0,)        -> fcb659e6f17300ea

import struct
from typing import Iterable

FNV_OFFSET_BASIS: int = 0xCBF29CE484222325
FNV_PRIME:        int = 0x100000001B3
_MASK_64:         int = 0xFFFFFFFFFFFFFFFF

FINGERPRINT_WIDTH: int = 16


def float_bits(value: float) -> bytes:
    """
    Return the 8-byte big-endian IEEE-754 representation of value.
    Distinguishes +0.0 from -0.0 and preserves NaN payload bits.
    """
    return struct.pack(">d", value)


def bits_hex(value: float) -> str:
    """16-character hex view of the raw bit pattern, e.g. '8000000000000000' for -0.0."""
    return float_bits(value).hex()


def float_from_bits(bits: int) -> float:
    """Inverse of the 64-bit unsigned view: build a float from its raw pattern."""
    return struct.unpack(">d", (bits & _MASK_64).to_bytes(8, "big"))[0]


def flip_least_significant_bit(value: float) -> float:
    """Return value with the lowest mantissa bit inverted."""
    bits = int.from_bytes(float_bits(value), "big")
    return float_from_bits(bits ^ 1)


def fnv1a_64(data: bytes, state: int = FNV_OFFSET_BASIS) -> int:
    """Fold data into a running FNV-1a 64-bit state and return the new state."""
    h = state
    for byte in data:
        h ^= byte
        h = (h * FNV_PRIME) & _MASK_64
    return h


def calculate_fingerprint(results: Iterable[float]) -> str:
    """
    Reduce a result vector to its fingerprint.

    Total over any sequence of floats, including NaN, infinities and
    subnormals. Identical bit-pattern sequences always produce the
    identical fingerprint; a single differing bit in one element always
    changes it for vectors of equal length, because every FNV-1a step is
    a bijection of the running state.
    """
    values = tuple(results)
    encoded = struct.pack(">" + str(len(values)) + "d", *values)
    return format(fnv1a_64(encoded), "0" + str(FINGERPRINT_WIDTH) + "x")
