"""Pure-Python readers and helpers for media formats: byte streams, CRC-32, lenient JSON, TrueType glyphs, PNG, MP3 frame headers and NAL headers."""

__version__ = "0.1.0"

__all__ = [
    "bytestream",
    "crc",
    "fileio",
    "jparse",
    "media",
    "png",
    "ttf",
    "ttfrender",
    "utils",
]