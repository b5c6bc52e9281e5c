"""Reading TrueType font files: table directory, ``head`` table and simple glyphs."""

from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterator, Optional, Union

from .bytestream import ByteStream
from .fileio import read_from_bin
from .utils import Point

TTF_MAGIC = 0x5F0F3CF5

_F2DOT14_ONE = 1 << 14
_FIXED_ONE = 1 << 16


class PointFlag(IntEnum):
    """Bit positions in a simple glyph's per-point flag byte."""

    ON_CURVE = 0
    X_SHORT = 1
    Y_SHORT = 2
    REPEAT = 3
    X_MODE = 4
    Y_MODE = 5


class TableTag(Enum):
    """Tables that the reader treats specially."""

    GLYF = "glyf"
    HEAD = "head"
    LOCA = "loca"
    CMAP = "cmap"
    HMTX = "hmtx"
    NA = ""

    @classmethod
    def from_tag(cls, tag: str) -> "TableTag":
        """Return the member for ``tag``, or ``NA`` for any other table."""
        try:
            return cls(tag)
        except ValueError:
            return cls.NA


class CMapMode(IntEnum):
    """Platform of a character map subtable."""

    UNICODE = 0
    MAC = 1
    RESERVED = 2
    MICROSOFT = 3
    NULL = 4


def flag_value(flags: int, flag: PointFlag) -> bool:
    """Return whether bit ``flag`` is set in ``flags``."""
    return bool(flags & (1 << flag))


def modify_flag(flags: int, flag: PointFlag, value: int) -> int:
    """Return the flag byte ``flags`` with bit ``flag`` set to ``value & 1``."""
    return (flags & (0xFF ^ (1 << flag))) | ((value & 1) << flag)


@dataclass
class OffsetTable:
    """One entry of the font's table directory."""

    tag: str
    check_sum: int
    offset: int
    length: int
    table_tag: TableTag = TableTag.NA


@dataclass
class HeadTable:
    """The font header (``head``) table."""

    version: float
    font_revision: float
    check_sum_adjust: int
    magic: int
    flags: int
    units_per_em: int
    created: int
    modified: int
    x_min: int
    y_min: int
    x_max: int
    y_max: int
    mac_style: int
    lowest_rec_ppem: int
    font_direction_hint: int
    idx_to_loc_format: int
    glyph_data_format: int


@dataclass
class Glyph:
    """A simple glyph: bounding box, contour ends and absolute points."""

    n_contours: int = 0
    x_min: int = 0
    y_min: int = 0
    x_max: int = 0
    y_max: int = 0
    points: list[Point] = field(default_factory=list)
    flags: list[int] = field(default_factory=list)
    contour_ends: list[int] = field(default_factory=list)

    @property
    def n_points(self) -> int:
        return len(self.points)


@dataclass
class TtfFile:
    """The parsed table directory of a font together with its header."""

    scalar_type: int = 0
    search_range: int = 0
    entry_selector: int = 0
    range_shift: int = 0
    head_table: Optional[OffsetTable] = None
    loca_table: Optional[OffsetTable] = None
    glyph_table: Optional[OffsetTable] = None
    cmap_table: Optional[OffsetTable] = None
    char_map_mode: CMapMode = CMapMode.NULL
    char_map_mode_id: int = 0
    tables: list[OffsetTable] = field(default_factory=list)
    header: Optional[HeadTable] = None


class TtfStream(ByteStream):
    """A big-endian byte stream with the TrueType scalar types."""

    def read_fword(self) -> int:
        return self.read_int16()

    def read_ufword(self) -> int:
        return self.read_uint16()

    def read_f2dot14(self) -> float:
        return self.read_int16() / _F2DOT14_ONE

    def read_fixed(self) -> float:
        return self.read_int32() / _FIXED_ONE

    def read_date(self) -> int:
        return self.read_int64()

    def read_string(self, size: int) -> str:
        """Read ``size`` bytes as text that ends at the first NUL byte."""
        return self.read_str(size)


@contextmanager
def _at(stream: ByteStream, pos: int) -> Iterator[ByteStream]:
    """Seek to ``pos`` for the duration of the block, then restore the cursor."""
    old = stream.seek(pos)
    try:
        yield stream
    finally:
        stream.seek(old)


def read_offset_table(stream: TtfStream) -> OffsetTable:
    """Read one table directory entry."""
    tag = stream.read_string(4)
    return OffsetTable(
        tag=tag,
        check_sum=stream.read_uint32(),
        offset=stream.read_uint32(),
        length=stream.read_uint32(),
        table_tag=TableTag.from_tag(tag),
    )


def read_head_table(stream: TtfStream) -> HeadTable:
    """Read a ``head`` table at the cursor."""
    return HeadTable(
        version=stream.read_fixed(),
        font_revision=stream.read_fixed(),
        check_sum_adjust=stream.read_uint32(),
        magic=stream.read_uint32(),
        flags=stream.read_uint16(),
        units_per_em=stream.read_uint16(),
        created=stream.read_date(),
        modified=stream.read_date(),
        x_min=stream.read_fword(),
        y_min=stream.read_fword(),
        x_max=stream.read_fword(),
        y_max=stream.read_fword(),
        mac_style=stream.read_uint16(),
        lowest_rec_ppem=stream.read_uint16(),
        font_direction_hint=stream.read_int16(),
        idx_to_loc_format=stream.read_int16(),
        glyph_data_format=stream.read_int16(),
    )


def read_offset_tables(stream: TtfStream) -> TtfFile:
    """Read the table directory, remembering the important tables and the header."""
    font = TtfFile(scalar_type=stream.read_uint32())
    n_tables = stream.read_uint16()
    font.search_range = stream.read_uint16()
    font.entry_selector = stream.read_uint16()
    font.range_shift = stream.read_uint16()

    for _ in range(n_tables):
        table = read_offset_table(stream)
        kind = table.table_tag
        if kind is TableTag.HEAD:
            font.head_table = table
            with _at(stream, table.offset):
                font.header = read_head_table(stream)
        elif kind is TableTag.GLYF:
            font.glyph_table = table
        elif kind is TableTag.LOCA:
            font.loca_table = table
        elif kind is TableTag.CMAP:
            font.cmap_table = table
        font.tables.append(table)
    return font


def glyph_offset(stream: TtfStream, font: TtfFile, char_index: int) -> int:
    """Return the raw ``loca`` entry for glyph ``char_index``.

    The cursor of ``stream`` is left where it was.
    """
    if font.loca_table is None:
        raise ValueError("font has no loca table")
    if font.header is None:
        raise ValueError("font has no head table")
    if char_index < 0:
        raise ValueError("glyph index must be non-negative")
    width = {0: 2, 1: 4}.get(font.header.idx_to_loc_format)
    if width is None:
        raise ValueError(
            f"unknown index-to-location format: {font.header.idx_to_loc_format}"
        )
    with _at(stream, font.loca_table.offset + char_index * width):
        return stream.read_uint(width)


def _read_flags(stream: TtfStream, n_points: int) -> list[int]:
    flags: list[int] = []
    while len(flags) < n_points:
        flag = stream.read_byte()
        flags.append(flag)
        if flag_value(flag, PointFlag.REPEAT):
            repeat = stream.read_byte()
            flags.extend([flag] * min(repeat, n_points - len(flags)))
    return flags


def _read_coords(
    stream: TtfStream, flags: list[int], short_bit: PointFlag, mode_bit: PointFlag
) -> list[int]:
    coords: list[int] = []
    current = 0
    for flag in flags:
        mode = flag_value(flag, mode_bit)
        if flag_value(flag, short_bit):
            delta = stream.read_byte() if mode else -stream.read_byte()
        elif mode:
            delta = 0
        else:
            delta = stream.read_int16()
        current += delta
        coords.append(current)
    return coords


def read_glyph(stream: TtfStream, font: TtfFile, offset: int) -> Glyph:
    """Read the simple glyph at ``offset`` into the ``glyf`` table.

    Glyphs without contours come back with no points. The cursor of
    ``stream`` is left where it was.
    """
    if font.glyph_table is None:
        raise ValueError("font has no glyf table")
    with _at(stream, font.glyph_table.offset + offset):
        glyph = Glyph(
            n_contours=stream.read_int16(),
            x_min=stream.read_fword(),
            y_min=stream.read_fword(),
            x_max=stream.read_fword(),
            y_max=stream.read_fword(),
        )
        if glyph.n_contours <= 0:
            return glyph

        contour_ends = [stream.read_uint16() for _ in range(glyph.n_contours)]
        n_points = max(contour_ends) + 1

        stream.skip(stream.read_uint16())

        flags = _read_flags(stream, n_points)
        xs = _read_coords(stream, flags, PointFlag.X_SHORT, PointFlag.X_MODE)
        ys = _read_coords(stream, flags, PointFlag.Y_SHORT, PointFlag.Y_MODE)

        glyph.contour_ends = contour_ends
        glyph.flags = flags
        glyph.points = [Point(float(x), float(y)) for x, y in zip(xs, ys)]
        return glyph


def parse_bin(data: bytes) -> TtfFile:
    """Parse the table directory of a font held in memory."""
    if not data:
        raise ValueError("font data is empty")
    return read_offset_tables(TtfStream(data))


def parse_file(path: Union[str, "os.PathLike[str]"]) -> TtfFile:
    """Parse the table directory of the font file at ``path``."""
    return parse_bin(read_from_bin(path))


def read_glyph_from_file(path: Union[str, "os.PathLike[str]"], glyph_id: int) -> Glyph:
    """Read glyph number ``glyph_id`` from the font file at ``path``."""
    data = read_from_bin(path)
    if not data:
        raise ValueError("font file is empty")
    stream = TtfStream(data)
    font = read_offset_tables(stream)
    return read_glyph(stream, font, glyph_offset(stream, font, glyph_id))