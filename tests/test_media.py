import pytest

from muffinmedia.media import (
    BitReader,
    Mp3AudioMode,
    Mp3Error,
    Mp3Layer,
    Mp3SideInfo,
    decode_side_info,
    describe_frame_header,
    read_frame_header,
    read_nal_block,
)


def _bits(text):
    text = text.replace(" ", "")
    text += "0" * (-len(text) % 8)
    return int(text, 2).to_bytes(len(text) // 8, "big")


def _header_bits(layer="01", bitrate="1001", freq="00", padding="0", mode="11", sync="1" * 12):
    return sync + "0" + layer + "1" + bitrate + freq + padding + "0" + mode + "00" + "0" + "1" + "00"


def test_bit_reader_reads_msb_first():
    reader = BitReader(b"\xA5\x0F")
    assert reader.read_bits(4) == 0xA
    assert reader.read_bit() == 0
    assert reader.read_bits(3) == 0b101
    assert reader.read_bits(8) == 0x0F


def test_bit_reader_eof():
    reader = BitReader(b"\x01")
    reader.read_bits(8)
    with pytest.raises(EOFError):
        reader.read_bit()


def test_bit_reader_skip_bytes():
    reader = BitReader(b"\x00\x00\x7F")
    reader.skip_bytes(2)
    assert reader.read_bits(8) == 0x7F
    with pytest.raises(EOFError):
        reader.skip_bytes(1)


def test_read_frame_header_fields():
    header = read_frame_header(BitReader(_bits(_header_bits())))
    assert header.frame_sync == 0xFFF
    assert header.version == 1
    assert header.layer is Mp3Layer.LAYER3
    assert header.crc_protect is True
    assert header.bit_rate == 128
    assert header.freq == 44100
    assert header.audio_mode is Mp3AudioMode.STEREO
    assert header.copy is True
    assert header.copyright is False
    assert header.emphasis == 0


def test_padding_adds_one_byte():
    plain = read_frame_header(BitReader(_bits(_header_bits(padding="0"))))
    padded = read_frame_header(BitReader(_bits(_header_bits(padding="1"))))
    assert padded.padding is True
    assert padded.frame_length == plain.frame_length + 1


def test_layer1_frame_length_is_zero():
    header = read_frame_header(BitReader(_bits(_header_bits(layer="11"))))
    assert header.layer is Mp3Layer.LAYER1
    assert header.frame_length == 0


def test_reserved_layer_rejected():
    with pytest.raises(Mp3Error):
        read_frame_header(BitReader(_bits(_header_bits(layer="00"))))


@pytest.mark.parametrize("bitrate", ["0000", "1111"])
def test_invalid_bitrate_rejected(bitrate):
    with pytest.raises(Mp3Error):
        read_frame_header(BitReader(_bits(_header_bits(bitrate=bitrate))))


def test_invalid_sample_rate_rejected():
    with pytest.raises(Mp3Error):
        read_frame_header(BitReader(_bits(_header_bits(freq="11"))))


def test_bad_sync_warns():
    with pytest.warns(UserWarning):
        header = read_frame_header(BitReader(_bits(_header_bits(sync="1" * 11 + "0"))))
    assert header.frame_sync == 0xFFE


def test_describe_frame_header():
    header = read_frame_header(BitReader(_bits(_header_bits())))
    text = describe_frame_header(header)
    assert "Bit Rate: 128kbps" in text
    assert "Frequency: 44100Hz" in text


def test_side_info_stereo():
    header = read_frame_header(BitReader(_bits(_header_bits())))
    reader = BitReader(_bits("101010101" + "110" + "00001111"))
    info = decode_side_info(reader, header)
    assert info == Mp3SideInfo(0b101010101, 0b110, 0b00001111)


def test_side_info_mono_reads_nothing():
    header = read_frame_header(BitReader(_bits(_header_bits(mode="00"))))
    reader = BitReader(b"\xC3")
    assert decode_side_info(reader, header) == Mp3SideInfo()
    assert reader.read_bits(8) == 0xC3


def test_nal_basic_header():
    block = read_nal_block(BitReader(_bits("0" + "11" + "00101")))
    assert block.forbidden_zero_bit == 0
    assert block.nal_ref_idc == 3
    assert block.nal_unit_type == 5
    assert not block.svc_ext and not block.avc_3d_ext


def test_nal_svc_extension():
    reader = BitReader(_bits("0" + "00" + "01110" + "1" + "0" * 24 + "1111111"))
    block = read_nal_block(reader)
    assert block.svc_ext is True
    assert block.avc_3d_ext is False
    assert reader.read_bits(7) == 0b1111111


def test_nal_3d_extension():
    reader = BitReader(_bits("0" + "00" + "10101" + "1" + "0" * 16 + "1111111"))
    block = read_nal_block(reader)
    assert block.avc_3d_ext is True
    assert block.svc_ext is False
    assert reader.read_bits(7) == 0b1111111


def test_nal_extension_truncated():
    with pytest.raises(EOFError):
        read_nal_block(BitReader(_bits("0" + "00" + "01110" + "1")))