"""Bit-level reading of MPEG audio frame headers and H.264 NAL unit headers."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

FRAME_SYNC = 0xFFF

# [mpeg version - 1][3 - layer][bitrate index], in kbit/s
_BITRATES = (
    (
        (0, 32, 64, 96, 128, 160, 192, 224, 256, 288, 320, 352, 384, 416, 448, 0),
        (0, 32, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 384, 0),
        (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 0, 0),
    ),
    (
        (0, 32, 48, 56, 64, 80, 91, 112, 128, 144, 160, 176, 192, 224, 256, 0),
        (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160, 0),
        (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160, 0),
    ),
)

_SAMPLE_RATES = (
    (44100, 48000, 32000),
    (22050, 24000, 16000),
    (11025, 12000, 8000),
)

_NAL_EXTENDED_TYPES = (14, 20, 21)
_NAL_3D_TYPE = 21


class BitReader:
    """Reads bits most-significant first from a byte buffer."""

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._data = bytes(data)
        self._bit = 0

    def _require(self, n_bits: int) -> None:
        if self._bit + n_bits > len(self._data) * 8:
            raise EOFError("not enough data left in the bit stream")

    def read_bit(self) -> int:
        """Read one bit."""
        self._require(1)
        byte = self._data[self._bit >> 3]
        value = (byte >> (7 - (self._bit & 7))) & 1
        self._bit += 1
        return value

    def read_bits(self, n: int) -> int:
        """Read ``n`` bits as an unsigned integer, first bit most significant."""
        if n < 0:
            raise ValueError("bit count must be non-negative")
        self._require(n)
        value = 0
        for _ in range(n):
            value = (value << 1) | self.read_bit()
        return value

    def skip_bytes(self, n: int) -> None:
        """Advance by ``n`` whole bytes' worth of bits."""
        if n < 0:
            raise ValueError("cannot skip a negative number of bytes")
        self._require(n * 8)
        self._bit += n * 8


class Mp3Layer(IntEnum):
    RESERVED = 0
    LAYER3 = 1
    LAYER2 = 2
    LAYER1 = 3


class Mp3AudioMode(IntEnum):
    SINGLE_CHANNEL = 0
    DUAL_CHANNEL = 1
    JOINT_STEREO = 2
    STEREO = 3


class Mp3Error(ValueError):
    """Raised when an MPEG audio frame header is invalid."""


@dataclass
class Mp3FrameHeader:
    """The fields of one MPEG audio frame header."""

    frame_sync: int
    version: int
    layer: Mp3Layer
    crc_protect: bool
    bit_rate: int
    freq: int
    padding: bool
    audio_mode: Mp3AudioMode
    mode_extension: int
    copyright: bool
    copy: bool
    emphasis: int
    frame_length: int


@dataclass
class Mp3SideInfo:
    """The leading fields of a frame's side information."""

    main_data_begin: int = 0
    private_bits: int = 0
    scfsi: int = 0


@dataclass
class NalBlock:
    """The header of an H.264 NAL unit."""

    forbidden_zero_bit: int = 0
    nal_ref_idc: int = 0
    nal_unit_type: int = 0
    svc_ext: bool = False
    avc_3d_ext: bool = False


def read_frame_header(reader: BitReader) -> Mp3FrameHeader:
    """Read a 32-bit MPEG audio frame header."""
    sync = reader.read_bits(12)
    if sync != FRAME_SYNC:
        warnings.warn(f"invalid frame sync: {sync:#x}", stacklevel=2)

    version = reader.read_bit() + 1
    layer = Mp3Layer(reader.read_bits(2))
    if layer is Mp3Layer.RESERVED:
        raise Mp3Error("reserved MPEG audio layer")

    crc_protect = bool(reader.read_bit())

    br_idx = reader.read_bits(4)
    if br_idx in (0, 0xF):
        raise Mp3Error(f"invalid bit rate index: {br_idx}")
    bit_rate = _BITRATES[version - 1][3 - layer][br_idx]

    freq_idx = reader.read_bits(2)
    if freq_idx >= len(_SAMPLE_RATES[version - 1]):
        raise Mp3Error(f"invalid sample rate index: {freq_idx}")
    freq = _SAMPLE_RATES[version - 1][freq_idx]

    padding = bool(reader.read_bit())
    reader.read_bit()  # private bit
    audio_mode = Mp3AudioMode(reader.read_bits(2))
    mode_extension = reader.read_bits(2)
    copyright_bit = bool(reader.read_bit())
    copy_bit = bool(reader.read_bit())
    emphasis = reader.read_bits(2)

    if layer is Mp3Layer.LAYER1:
        frame_length = 0
    else:
        frame_length = 144 * 1000 * bit_rate // freq + int(padding)

    return Mp3FrameHeader(
        frame_sync=sync,
        version=version,
        layer=layer,
        crc_protect=crc_protect,
        bit_rate=bit_rate,
        freq=freq,
        padding=padding,
        audio_mode=audio_mode,
        mode_extension=mode_extension,
        copyright=copyright_bit,
        copy=copy_bit,
        emphasis=emphasis,
        frame_length=frame_length,
    )


def describe_frame_header(header: Mp3FrameHeader) -> str:
    """Return a multi-line, human-readable summary of a frame header."""
    lines = [
        "---Frame Header---",
        f"Bit Rate: {header.bit_rate}kbps",
        f"Audio Mode: {header.audio_mode.name}",
        f"Frequency: {header.freq}Hz",
        f"MPEG Version: {header.version}",
        f"MPEG Layer: {header.layer.name}",
        f"Emphasis: {header.emphasis}",
        f"Copy: {int(header.copy)}",
        f"Copyright: {int(header.copyright)}",
        f"CRC: {int(header.crc_protect)}",
        f"Sync: {header.frame_sync}",
        "-----------------",
    ]
    return "\n".join(lines)


def decode_side_info(reader: BitReader, header: Mp3FrameHeader) -> Mp3SideInfo:
    """Read the side information fields for a frame; single-channel frames read nothing."""
    if header.audio_mode is Mp3AudioMode.SINGLE_CHANNEL:
        return Mp3SideInfo()
    return Mp3SideInfo(
        main_data_begin=reader.read_bits(9),
        private_bits=reader.read_bits(3),
        scfsi=reader.read_bits(8),
    )


def read_nal_block(reader: BitReader) -> NalBlock:
    """Read a NAL unit header, skipping the extension header of types 14, 20 and 21."""
    block = NalBlock(
        forbidden_zero_bit=reader.read_bit(),
        nal_ref_idc=reader.read_bits(2),
        nal_unit_type=reader.read_bits(5),
    )
    if block.nal_unit_type in _NAL_EXTENDED_TYPES:
        if block.nal_unit_type != _NAL_3D_TYPE:
            block.svc_ext = bool(reader.read_bit())
        else:
            block.avc_3d_ext = bool(reader.read_bit())

        if block.svc_ext:
            reader.skip_bytes(3)
        elif block.avc_3d_ext:
            reader.skip_bytes(2)
        else:
            reader.skip_bytes(3)
    return block