import struct
import zlib

import pytest

from muffinmedia.bytestream import ByteStream
from muffinmedia.png import (
    SIGNATURE,
    ChunkType,
    ColorSpace,
    PngChunk,
    PngError,
    PngHeader,
    channels_for,
    decode_bytes,
    decode_file,
    defilter,
    parse_header,
    read_chunk,
)


def make_chunk(tag: bytes, body: bytes) -> bytes:
    return struct.pack(">I", len(body)) + tag + body + struct.pack(">I", zlib.crc32(tag + body))


def ihdr(width, height, depth=8, color=0, comp=0, filt=0, inter=0) -> bytes:
    return make_chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, depth, color, comp, filt, inter))


def make_png(width, height, color, filtered, depth=8, pieces=1) -> bytes:
    compressed = zlib.compress(filtered)
    step = max(1, -(-len(compressed) // pieces))
    idats = b"".join(
        make_chunk(b"IDAT", compressed[i:i + step]) for i in range(0, len(compressed), step)
    )
    return SIGNATURE + ihdr(width, height, depth, color) + idats + make_chunk(b"IEND", b"")


def gray_header(width, height):
    return PngHeader(width, height, 8, ColorSpace.GRAYSCALE)


def test_channels_for_each_colour_type():
    assert channels_for(ColorSpace.GRAYSCALE) == 1
    assert channels_for(ColorSpace.GRAYSCALE_ALPHA) == 2
    assert channels_for(ColorSpace.RGB) == 3
    assert channels_for(ColorSpace.RGBA) == 4
    assert channels_for(ColorSpace.INDEXED) == 1


def test_chunk_type_values_and_unknown():
    assert ChunkType.from_int(0x49484452) is ChunkType.IHDR
    assert ChunkType.from_int(int.from_bytes(b"tEXt", "big")) is ChunkType.NULL


def test_read_chunk_fields_and_crc():
    stream = ByteStream(make_chunk(b"IDAT", b"abc"))
    chunk = read_chunk(stream)
    assert chunk.type is ChunkType.IDAT
    assert chunk.data == b"abc"
    assert chunk.length == 3
    assert chunk.crc_ok
    assert stream.tell() == len(stream)


def test_read_chunk_detects_bad_crc():
    raw = bytearray(make_chunk(b"IDAT", b"abc"))
    raw[-1] ^= 0xFF
    assert not read_chunk(ByteStream(bytes(raw))).crc_ok


def test_read_chunk_truncated():
    with pytest.raises(PngError):
        read_chunk(ByteStream(make_chunk(b"IDAT", b"abcdef")[:-6]))


def test_parse_header_values():
    header = parse_header(read_chunk(ByteStream(ihdr(7, 5, 8, 6))))
    assert (header.width, header.height) == (7, 5)
    assert header.color_space is ColorSpace.RGBA
    assert header.bytes_per_pixel == 4
    assert header.bpp == 32
    assert not header.interlaced


def test_parse_header_sixteen_bit_rgb():
    header = parse_header(read_chunk(ByteStream(ihdr(1, 1, 16, 2))))
    assert header.bpp == 16 * 3
    assert header.bytes_per_pixel == 6


def test_parse_header_rejects_compression_method():
    with pytest.raises(PngError):
        parse_header(read_chunk(ByteStream(ihdr(1, 1, comp=1))))


def test_parse_header_rejects_unknown_colour():
    with pytest.raises(PngError):
        parse_header(read_chunk(ByteStream(ihdr(1, 1, color=5))))


def test_parse_header_rejects_other_chunk():
    with pytest.raises(PngError):
        parse_header(PngChunk(ChunkType.IEND, b"", 0))


def test_defilter_none_keeps_bytes():
    rows = [bytes([1, 2, 3]), bytes([9, 8, 7])]
    data = b"".join(b"\x00" + r for r in rows)
    assert defilter(data, gray_header(3, 2)) == b"".join(rows)


def test_defilter_sub_with_zero_deltas_repeats_first_byte():
    assert defilter(bytes([1, 7, 0, 0]), gray_header(3, 1)) == bytes([7, 7, 7])


def test_defilter_up_with_zero_deltas_copies_row_above():
    data = bytes([0, 1, 2, 3, 2, 0, 0, 0])
    out = defilter(data, gray_header(3, 2))
    assert out[3:] == out[:3] == bytes([1, 2, 3])


def test_defilter_paeth_with_zero_deltas_copies_row_above():
    data = bytes([0, 50, 10, 200, 4, 0, 0, 0])
    out = defilter(data, gray_header(3, 2))
    assert out[3:] == bytes([50, 10, 200])


def test_defilter_avg():
    data = bytes([0, 4, 8, 3, 0, 0])
    assert defilter(data, gray_header(2, 2))[2:] == bytes([2, 5])


def test_defilter_unknown_filter():
    with pytest.raises(PngError):
        defilter(bytes([9, 1, 2]), gray_header(2, 1))


def test_defilter_rejects_indexed():
    with pytest.raises(PngError):
        defilter(bytes([0, 1]), PngHeader(1, 1, 8, ColorSpace.INDEXED))


def test_decode_rgb_image():
    pixels = [bytes([255, 0, 0, 0, 255, 0]), bytes([0, 0, 255, 10, 20, 30])]
    png = make_png(2, 2, 2, b"".join(b"\x00" + r for r in pixels))
    image = decode_bytes(png)
    assert image.data == b"".join(pixels)
    assert (image.width, image.height, image.channels) == (2, 2, 3)
    assert image.color_mode is ColorSpace.RGB
    assert image.bit_depth == 8
    assert image.size == 2 * 2 * 3


def test_decode_split_idat_matches_single():
    rows = b"".join(b"\x00" + bytes(range(i, i + 16)) for i in range(8))
    single = decode_bytes(make_png(16, 8, 0, rows))
    split = decode_bytes(make_png(16, 8, 0, rows, pieces=3))
    assert split.data == single.data


def test_decode_skips_ancillary_chunks():
    rows = b"\x00\x05\x06"
    body = zlib.compress(rows)
    png = (
        SIGNATURE
        + ihdr(2, 1)
        + make_chunk(b"gAMA", b"\x00\x00\xb1\x8f")
        + make_chunk(b"tEXt", b"k\x00v")
        + make_chunk(b"IDAT", body)
        + make_chunk(b"IEND", b"")
    )
    assert decode_bytes(png).data == b"\x05\x06"


def test_decode_bad_signature():
    with pytest.raises(PngError):
        decode_bytes(b"NOTAPNG!" + ihdr(1, 1))


def test_decode_first_chunk_must_be_header():
    with pytest.raises(PngError):
        decode_bytes(SIGNATURE + make_chunk(b"IEND", b""))


def test_decode_without_data_chunks():
    with pytest.raises(PngError):
        decode_bytes(SIGNATURE + ihdr(1, 1) + make_chunk(b"IEND", b""))


def test_decode_corrupt_compressed_data():
    png = SIGNATURE + ihdr(1, 1) + make_chunk(b"IDAT", b"garbage") + make_chunk(b"IEND", b"")
    with pytest.raises(PngError):
        decode_bytes(png)


def test_decode_file(tmp_path):
    rows = b"\x00\x01\x02\x03"
    path = tmp_path / "img.png"
    path.write_bytes(make_png(3, 1, 0, rows))
    assert decode_file(path).data == b"\x01\x02\x03"