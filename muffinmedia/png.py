"""Decoding of non-interlaced PNG images into raw, defiltered pixel rows."""

from __future__ import annotations

import os
import zlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Union

from .bytestream import ByteStream, Endian
from .crc import crc32
from .fileio import read_from_bin

SIGNATURE = b"\x89PNG\r\n\x1a\n"

_IHDR_SIZE = 13
_CHUNK_OVERHEAD = 12


class ColorSpace(IntEnum):
    """PNG colour types."""

    GRAYSCALE = 0
    RGB = 2
    INDEXED = 3
    GRAYSCALE_ALPHA = 4
    RGBA = 6


class ChunkType(IntEnum):
    """Chunk types the decoder recognises; anything else is ``NULL``."""

    NULL = 0x0
    IHDR = 0x49484452
    IDAT = 0x49444154
    IEND = 0x49454E44
    SRGB = 0x73524742
    GAMA = 0x67414D41
    PLTE = 0x504C5445

    @classmethod
    def from_int(cls, value: int) -> "ChunkType":
        """Return the member for ``value``, or ``NULL`` for unknown types."""
        try:
            return cls(value)
        except ValueError:
            return cls.NULL


class PngError(ValueError):
    """Raised when PNG data is malformed or uses an unsupported feature."""


_CHANNELS = {
    ColorSpace.GRAYSCALE: 1,
    ColorSpace.GRAYSCALE_ALPHA: 2,
    ColorSpace.RGB: 3,
    ColorSpace.RGBA: 4,
    ColorSpace.INDEXED: 1,
}


def channels_for(color: ColorSpace) -> int:
    """Return the number of samples per pixel for a colour type."""
    return _CHANNELS.get(color, 0)


@dataclass
class PngChunk:
    """One chunk: its type, payload and stored CRC."""

    raw_type: int
    data: bytes
    checksum: int

    @property
    def type(self) -> ChunkType:
        return ChunkType.from_int(self.raw_type)

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def crc_ok(self) -> bool:
        """Whether the stored CRC matches the chunk type and payload."""
        return crc32(self.raw_type.to_bytes(4, "big") + self.data) == self.checksum


@dataclass
class PngHeader:
    """The contents of the ``IHDR`` chunk."""

    width: int
    height: int
    bit_depth: int
    color_space: ColorSpace
    compression_method: int = 0
    filter_type: int = 0
    interlaced: bool = False

    @property
    def n_channels(self) -> int:
        return channels_for(self.color_space)

    @property
    def bpp(self) -> int:
        """Bits per pixel."""
        return self.bit_depth * self.n_channels

    @property
    def bytes_per_pixel(self) -> int:
        return max(1, self.bpp >> 3)


@dataclass
class PngImage:
    """A decoded image: defiltered pixel rows, top to bottom."""

    data: bytes
    width: int
    height: int
    channels: int
    color_mode: ColorSpace
    bit_depth: int

    @property
    def size(self) -> int:
        return len(self.data)


def read_chunk(stream: ByteStream) -> PngChunk:
    """Read one chunk (length, type, payload, CRC) from a big-endian stream."""
    stream.mode = Endian.BIG
    remaining = len(stream) - stream.tell()
    if remaining < _CHUNK_OVERHEAD:
        raise PngError("truncated chunk header")
    length = stream.read_uint32()
    if length + _CHUNK_OVERHEAD > remaining:
        raise PngError(f"chunk of length {length} runs past the end of the data")
    raw_type = stream.read_uint32()
    data = stream.read_bytes(length)
    checksum = stream.read_uint32()
    return PngChunk(raw_type, data, checksum)


def parse_header(chunk: PngChunk) -> PngHeader:
    """Parse an ``IHDR`` chunk."""
    if chunk.type is not ChunkType.IHDR:
        raise PngError("chunk is not a header chunk")
    if len(chunk.data) < _IHDR_SIZE:
        raise PngError("header chunk is too short")
    stream = ByteStream(chunk.data)
    width = stream.read_uint32()
    height = stream.read_uint32()
    bit_depth = stream.read_byte()
    color_value = stream.read_byte()
    compression = stream.read_byte()
    filter_type = stream.read_byte()
    interlaced = bool(stream.read_byte() & 1)
    try:
        color = ColorSpace(color_value)
    except ValueError:
        raise PngError(f"unknown colour type: {color_value}") from None
    if compression != 0 or filter_type != 0:
        raise PngError("unsupported compression or filter method")
    return PngHeader(width, height, bit_depth, color, compression, filter_type, interlaced)


def _paeth(a: int, b: int, c: int) -> int:
    p = a + b - c
    pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
    if pa <= pb and pa <= pc:
        return a
    if pb <= pc:
        return b
    return c


def defilter(data: bytes, header: PngHeader) -> bytes:
    """Undo per-scanline filtering; missing input bytes read as zero."""
    if header.color_space is ColorSpace.INDEXED:
        raise PngError("indexed colour is not supported")
    bpp = header.bytes_per_pixel
    stride = header.width * bpp
    out = bytearray()
    prev = bytes(stride)
    pos = 0
    for y in range(header.height):
        method = data[pos] if pos < len(data) else 0
        pos += 1
        line = data[pos:pos + stride]
        line += bytes(stride - len(line))
        pos += stride
        row = bytearray(stride)
        for i, value in enumerate(line):
            left = row[i - bpp] if i >= bpp else 0
            up = prev[i]
            up_left = prev[i - bpp] if i >= bpp else 0
            if method == 0:
                pred = 0
            elif method == 1:
                pred = left
            elif method == 2:
                pred = up
            elif method == 3:
                pred = (left + up) >> 1
            elif method == 4:
                pred = _paeth(left, up, up_left)
            else:
                raise PngError(f"unknown filter type {method} on scanline {y}")
            row[i] = (value + pred) & 0xFF
        out += row
        prev = row
    return bytes(out)


def _chunks(stream: ByteStream) -> Iterator[PngChunk]:
    while stream.tell() < len(stream):
        yield read_chunk(stream)


def decode_bytes(data: bytes) -> PngImage:
    """Decode a PNG image held in memory."""
    stream = ByteStream(data)
    if stream.read_bytes(len(SIGNATURE)) != SIGNATURE:
        raise PngError("invalid PNG signature")

    head = read_chunk(stream)
    if head.type is not ChunkType.IHDR:
        raise PngError("first chunk is not a header chunk")
    header = parse_header(head)

    idat: list[bytes] = []
    for chunk in _chunks(stream):
        if chunk.type is ChunkType.IDAT:
            idat.append(chunk.data)
        elif idat or chunk.type is ChunkType.IEND:
            break
    if not idat:
        raise PngError("image has no data chunks")

    try:
        raw = zlib.decompress(b"".join(idat))
    except zlib.error as exc:
        raise PngError(f"cannot inflate image data: {exc}") from exc

    return PngImage(
        data=defilter(raw, header),
        width=header.width,
        height=header.height,
        channels=header.n_channels,
        color_mode=header.color_space,
        bit_depth=header.bit_depth,
    )


def decode_file(path: Union[str, "os.PathLike[str]"]) -> PngImage:
    """Decode the PNG file at ``path``."""
    return decode_bytes(read_from_bin(path))