"""CRC-32 checksum (reflected polynomial 0xEDB88320)."""

from __future__ import annotations


def _build_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ 0xEDB88320 if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


_TABLE = _build_table()


def crc32(data: bytes) -> int:
    """Return the CRC-32 checksum of ``data``; empty input gives 0."""
    checksum = 0xFFFFFFFF
    for b in data:
        checksum = _TABLE[(checksum ^ b) & 0xFF] ^ (checksum >> 8)
    return checksum ^ 0xFFFFFFFF