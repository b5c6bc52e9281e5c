# muffinmedia

A small pure-Python toolkit for reading and inspecting media files. It has no
third-party dependencies and is used as a library. There is no command-line
tool.

## Modules

### `muffinmedia.bytestream`

`ByteStream` is a growable in-memory byte buffer with a single cursor.

- Writes overwrite the buffer at the cursor and extend it as needed.
- Reads that go past the end of the data return zero bytes.
- Integer methods handle widths of 1 to 8 bytes. Out-of-range widths are
  clamped into that range. The methods are `write_int`, `write_uint`,
  `read_int` and `read_uint`, plus fixed-width versions for 16, 24, 32 and 64
  bits.
- The byte order is set by the `mode` attribute, which takes an `Endian`
  value. It is big endian by default.
- Other methods: `write_bytes`, `multi_write`, `read_str` (the string ends at
  the first NUL byte), `seek`, `tell`, `skip`, `home`, `clear`, `resize` and
  `getvalue`.

### `muffinmedia.crc`

`crc32(data)` returns the standard reflected CRC-32. Empty input gives 0.

### `muffinmedia.fileio`

- `write_to_bin(path, data)` writes a whole binary file and returns the number
  of bytes written.
- `read_from_bin(path)` returns a whole file's contents.
- Both functions reject an empty path. `write_to_bin` also rejects empty data.

### `muffinmedia.jparse`

A lenient JSON-like reader and writer.

- `parse(text, clean=True)` returns a `JStruct`, which holds a list of
  `JToken`s and a `JMode` (`OBJ` or `ARR`). When `clean` is true, comments and
  whitespace are removed first with `remove_junk`. Comments may be `//` or
  `/* */`.
- Indexing a `JStruct` with a label or an array position returns a `JValue`.
  Its type (`JType`) is inferred from the raw text.
- `JStruct.find_token(label)` looks up a member by label.
- `JStruct.format()` gives an indented rendering.
- `generate_string(json)` writes a structure back out as compact text.
- `unescape(text)` resolves backslash escapes. `\u` escapes are not supported;
  they raise a warning and are dropped.
- Malformed input raises `JParseError`.

### `muffinmedia.ttf`

TrueType reading.

- `parse_bin(data)` and `parse_file(path)` read the table directory and the
  `head` table into a `TtfFile`.
- `glyph_offset(stream, font, index)` reads an entry from `loca`.
- `read_glyph(stream, font, offset)` decodes a simple glyph into a `Glyph`. A
  `Glyph` holds absolute `Point`s, flags and contour ends.
- `read_glyph_from_file(path, glyph_id)` combines these steps for a font file.
- `TtfStream` adds the TrueType scalar readers to `ByteStream`: FWord, F2Dot14,
  Fixed and LONGDATETIME.

### `muffinmedia.ttfrender`

Bézier helpers and a glyph rasteriser.

- `p_lerp`, `bezier3`, `bezier4` and `bezier` (any degree, with at least three
  points).
- `get_roots` solves a quadratic.
- `intersects_curve` counts crossings with a ray.
- `clean_glyph_points` inserts the implied on/off-curve midpoints and closes
  each contour.
- `render_glyph(glyph, scale=1.0)` draws the outline and an even-odd fill in
  white. It returns an RGBA `GlyphBitmap`, which has `pixel(x, y)` and
  `set_pixel`.

### `muffinmedia.png`

PNG decoding.

- `decode_bytes(data)` and `decode_file(path)` check the signature and parse
  `IHDR`. They concatenate the `IDAT` chunks, inflate the result with `zlib`
  and undo the scanline filters. The result is a `PngImage` holding raw pixel
  rows from top to bottom.
- Lower-level steps are also available:
  - `read_chunk(stream)` returns a `PngChunk`, whose `crc_ok` property checks
    the stored CRC.
  - `parse_header(chunk)` returns a `PngHeader`.
  - `defilter(data, header)` undoes scanline filtering.
  - `channels_for(color)` gives the number of channels for a colour type.
- Errors raise `PngError`.

### `muffinmedia.media`

`BitReader` reads bits most-significant first. It is used by the following
functions:

- `read_frame_header(reader)` parses a 32-bit MPEG audio frame header into an
  `Mp3FrameHeader`. A bad sync word gives a warning. A reserved layer or an
  invalid bit-rate or sample-rate index raises `Mp3Error`. The frame length is
  left at 0 for layer I.
- `describe_frame_header(header)` returns a readable summary.
- `decode_side_info(reader, header)` reads the first side-information fields
  of multi-channel frames.
- `read_nal_block(reader)` reads an H.264 NAL unit header into a `NalBlock`.
  For types 14, 20 and 21 it skips the extension header.

### `muffinmedia.utils`

`Point`, `lerp`, `split_string`, `get_num_size`, `num_reverse`,
`modify_byte`, `compute_max_mod`, `fast_log2`, `fast_log16`, and
`CodeMeasure`, a simple nanosecond timer.

## Example

```python
from muffinmedia.bytestream import ByteStream
from muffinmedia.crc import crc32

stream = ByteStream()
stream.write_uint32(0xDEADBEEF)
stream.home()
assert stream.read_uint32() == 0xDEADBEEF
print(hex(crc32(b"123456789")))  # 0xcbf43926
```

## What it does not do

- **PNG**
  - It does not encode PNG files.
  - It does not support indexed-colour images.
  - It does not de-interlace Adam7 images.
  - It does not verify chunk CRCs while decoding.
- **MP3 and H.264**
  - MP3 support stops at frame headers and the start of the side information.
    No audio is decoded.
  - H.264 support stops at NAL unit headers. No video is decoded.
- **TrueType**
  - Only simple glyphs are read. Composite glyphs and `cmap` character lookup
    are not handled.
- **Interface**
  - There is no command-line interface.

## Tests

```
pip install -e .[test]
pytest
```