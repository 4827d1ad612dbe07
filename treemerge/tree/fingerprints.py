"""32-bit hash primitives with signed, wrap-around integer semantics.

All fingerprints are signed 32-bit integers. The combinators reproduce the
classic ``31 * h + x`` polynomial hash so values are stable across
processes (unlike the builtin ``hash()`` of strings).
"""

from __future__ import annotations

from collections.abc import Iterable

_UINT32_MASK = 0xFFFF_FFFF
_SIGN_BIT = 0x8000_0000


def to_int32(value: int) -> int:
    """Truncate *value* to a signed 32-bit integer."""
    value &= _UINT32_MASK
    return value - 0x1_0000_0000 if value & _SIGN_BIT else value


def array_hash(values: Iterable[int]) -> int:
    """Order-sensitive hash of a sequence of ints; ``1`` for an empty one."""
    result = 1
    for value in values:
        result = (31 * result + value) & _UINT32_MASK
    return to_int32(result)


def string_hash(value: str) -> int:
    """Polynomial hash over the UTF-16 code units of *value*."""
    encoded = value.encode("utf-16-be")
    result = 0
    for i in range(0, len(encoded), 2):
        result = (31 * result + int.from_bytes(encoded[i : i + 2], "big")) & _UINT32_MASK
    return to_int32(result)
