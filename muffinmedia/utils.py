"""Small numeric, string and timing helpers shared across the package."""

from __future__ import annotations

import time
from dataclasses import dataclass

_U64_BYTES = 8


@dataclass
class Point:
    """A 2D point with float coordinates."""

    x: float = 0.0
    y: float = 0.0


class CodeMeasure:
    """Measures elapsed wall time from the last call to :meth:`start`."""

    def __init__(self) -> None:
        self._started = time.perf_counter_ns()

    def start(self) -> None:
        """Restart the measurement."""
        self._started = time.perf_counter_ns()

    def end(self) -> float:
        """Return nanoseconds elapsed since the measurement started."""
        return float(time.perf_counter_ns() - self._started)

    def ms_end(self) -> float:
        """Return milliseconds elapsed since the measurement started."""
        return self.end() / 1e6


def get_num_size(num: int) -> int:
    """Return how many bytes are needed to hold a non-negative integer."""
    if num < 0:
        raise ValueError("number must be non-negative")
    return (num.bit_length() + 7) // 8


def lerp(a: float, b: float, t: float) -> float:
    """Linearly interpolate between ``a`` and ``b`` by ``t``."""
    return a + t * (b - a)


def split_string(text: str, delim: str) -> list[str]:
    """Split ``text`` on a single delimiter character, keeping empty fields."""
    if len(delim) != 1:
        raise ValueError("delimiter must be a single character")
    return text.split(delim)


def num_reverse(value: int, byte_size: int) -> int:
    """Reverse the order of the lowest ``byte_size`` bytes of ``value``."""
    if byte_size < 0:
        raise ValueError("byte size must be non-negative")
    if byte_size == 0:
        return 0
    low = value & ((1 << (byte_size * 8)) - 1)
    return int.from_bytes(low.to_bytes(byte_size, "little"), "big")


def modify_byte(value: int, index: int, byte: int) -> int:
    """Return ``value`` with byte number ``index`` (0 = lowest) replaced by ``byte``."""
    if not 0 <= index < _U64_BYTES:
        raise ValueError("byte index must be in 0..7")
    if not 0 <= byte <= 0xFF:
        raise ValueError("byte must be in 0..255")
    shift = index * 8
    mask = ((1 << 64) - 1) ^ (0xFF << shift)
    return (value & mask) | (byte << shift)


def compute_max_mod(value: int) -> int:
    """Return the number of trailing zero bits of ``value``."""
    if value == 0:
        raise ValueError("value must be non-zero")
    return (value & -value).bit_length() - 1


def _fast_log(value: int, bits: int) -> int:
    if value < 0:
        raise ValueError("value must be non-negative")
    count = 0
    value >>= bits
    while value:
        count += 1
        value >>= bits
    return count


def fast_log2(value: int) -> int:
    """Return floor(log2(value)), or 0 for values below 2."""
    return _fast_log(value, 1)


def fast_log16(value: int) -> int:
    """Return floor(log16(value)), or 0 for values below 16."""
    return _fast_log(value, 4)