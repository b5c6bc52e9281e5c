"""A seekable in-memory byte stream with endian-aware integer I/O."""

from __future__ import annotations

from enum import Enum
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_MIN_INT_BYTES = 1
_MAX_INT_BYTES = 8


class Endian(Enum):
    """Byte order used for multi-byte integers."""

    LITTLE = "little"
    BIG = "big"


def _clamp_width(n_bytes: int) -> int:
    return max(_MIN_INT_BYTES, min(_MAX_INT_BYTES, n_bytes))


class ByteStream:
    """A growable byte buffer with a single read/write cursor.

    Writes overwrite at the cursor and extend the buffer as needed. Reads past
    the end of the data yield zero bytes, so fixed-size reads always return the
    requested amount. Integers are big endian unless :attr:`mode` is changed.
    """

    def __init__(self, data: BytesLike = b"") -> None:
        self._buf = bytearray(data)
        self._pos = 0
        self.mode = Endian.BIG

    def __len__(self) -> int:
        return len(self._buf)

    def __getitem__(self, index: Union[int, slice]) -> Union[int, bytes]:
        if isinstance(index, slice):
            return bytes(self._buf[index])
        return self._buf[index]

    def __repr__(self) -> str:
        return f"ByteStream(len={len(self._buf)}, pos={self._pos}, mode={self.mode.name})"

    # writing

    def write_bytes(self, data: BytesLike) -> None:
        """Write ``data`` at the cursor and advance past it."""
        chunk = bytes(data)
        if not chunk:
            return
        end = self._pos + len(chunk)
        if self._pos > len(self._buf):
            self._buf.extend(bytes(self._pos - len(self._buf)))
        self._buf[self._pos:end] = chunk
        self._pos = end

    def write_byte(self, value: int) -> None:
        """Write a single byte in the range 0..255."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        self.write_bytes(bytes((value,)))

    def _encode(self, value: int, n_bytes: int) -> bytes:
        width = _clamp_width(n_bytes)
        return (value & ((1 << (width * 8)) - 1)).to_bytes(width, self.mode.value)

    def write_int(self, value: int, n_bytes: int = 4) -> None:
        """Write the low ``n_bytes`` (clamped to 1..8) of a signed integer."""
        self.write_bytes(self._encode(value, n_bytes))

    def write_uint(self, value: int, n_bytes: int = 4) -> None:
        """Write the low ``n_bytes`` (clamped to 1..8) of an unsigned integer."""
        self.write_bytes(self._encode(value, n_bytes))

    def write_int16(self, value: int) -> None:
        self.write_int(value, 2)

    def write_uint16(self, value: int) -> None:
        self.write_uint(value, 2)

    def write_int24(self, value: int) -> None:
        self.write_int(value, 3)

    def write_uint24(self, value: int) -> None:
        self.write_uint(value, 3)

    def write_int32(self, value: int) -> None:
        self.write_int(value, 4)

    def write_uint32(self, value: int) -> None:
        self.write_uint(value, 4)

    def write_int64(self, value: int) -> None:
        self.write_int(value, 8)

    def write_uint64(self, value: int) -> None:
        self.write_uint(value, 8)

    def multi_write(self, value: int, value_size: int, count: int) -> None:
        """Write ``value`` as a ``value_size``-byte integer ``count`` times."""
        if count < 0:
            raise ValueError("count must be non-negative")
        self.write_bytes(self._encode(value, value_size) * count)

    # reading

    def read_bytes(self, size: int) -> bytes:
        """Read ``size`` bytes, padding with zeros past the end of the data."""
        if size < 0:
            raise ValueError("size must be non-negative")
        chunk = bytes(self._buf[self._pos:self._pos + size])
        self._pos = min(self._pos + size, max(len(self._buf), self._pos))
        return chunk + bytes(size - len(chunk))

    def read_byte(self) -> int:
        """Read one byte; 0 once the data is exhausted."""
        return self.read_bytes(1)[0]

    def _decode(self, n_bytes: int, signed: bool) -> int:
        raw = self.read_bytes(_clamp_width(n_bytes))
        return int.from_bytes(raw, self.mode.value, signed=signed)

    def read_int(self, n_bytes: int) -> int:
        """Read a signed integer of ``n_bytes`` (clamped to 1..8)."""
        return self._decode(n_bytes, signed=True)

    def read_uint(self, n_bytes: int) -> int:
        """Read an unsigned integer of ``n_bytes`` (clamped to 1..8)."""
        return self._decode(n_bytes, signed=False)

    def read_int16(self) -> int:
        return self.read_int(2)

    def read_uint16(self) -> int:
        return self.read_uint(2)

    def read_int24(self) -> int:
        return self.read_int(3)

    def read_uint24(self) -> int:
        return self.read_uint(3)

    def read_int32(self) -> int:
        return self.read_int(4)

    def read_uint32(self) -> int:
        return self.read_uint(4)

    def read_int64(self) -> int:
        return self.read_int(8)

    def read_uint64(self) -> int:
        return self.read_uint(8)

    def read_str(self, length: int) -> str:
        """Read ``length`` bytes as a string that ends at the first NUL byte."""
        raw = self.read_bytes(length)
        return raw.split(b"\x00", 1)[0].decode("latin-1")

    # positioning and buffer management

    def getvalue(self) -> bytes:
        """Return a copy of the whole buffer."""
        return bytes(self._buf)

    def seek(self, pos: int) -> int:
        """Move the cursor to ``pos`` and return the previous position."""
        if pos < 0:
            raise ValueError("position must be non-negative")
        old, self._pos = self._pos, pos
        return old

    def tell(self) -> int:
        """Return the cursor position."""
        return self._pos

    def skip(self, n_bytes: int) -> int:
        """Advance the cursor, stopping at the end of the data; return the old position."""
        if n_bytes < 0:
            raise ValueError("cannot skip a negative number of bytes")
        old = self._pos
        self._pos = max(old, min(old + n_bytes, len(self._buf)))
        return old

    def home(self) -> None:
        """Move the cursor back to the start."""
        self._pos = 0

    def clear(self) -> None:
        """Drop all data and reset the cursor."""
        self._buf.clear()
        self._pos = 0

    def resize(self, size: int) -> None:
        """Truncate or zero-extend the buffer to ``size`` bytes."""
        if size < 0:
            raise ValueError("size must be non-negative")
        if size < len(self._buf):
            del self._buf[size:]
        else:
            self._buf.extend(bytes(size - len(self._buf)))
        self._pos = min(self._pos, size)