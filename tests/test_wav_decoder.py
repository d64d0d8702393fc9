"""Tests for the streaming WAV decoder."""

import io
import struct
import pytest
from auplay.core.exceptions import DecodeError
from auplay.formats.wav import wav_format
from conftest import build_wav


def open_wav(wav_data: bytes, block_frames: int = 256):
    return wav_format.open_stream(io.BytesIO(wav_data), "test.wav", block_frames)


def test_parse_valid_wav():
    """Test parsing a valid WAV file."""
    wav_data = build_wav(sample_rate=44100, channels=2, bits_per_sample=16, num_frames=1000)

    stream = open_wav(wav_data)

    assert stream.format.sample_rate == 44100
    assert stream.format.channels == 2
    assert stream.format.bits_per_sample == 16
    assert stream.format.frame_size == 4
    assert stream.format.dtype == "int16"
    assert stream.total_frames == 1000
    assert stream.duration == pytest.approx(1000 / 44100)


def test_blocks_hold_whole_frames_and_all_data():
    pcm = bytes(range(256)) * 30  # 7680 bytes = 1920 stereo 16-bit frames
    stream = open_wav(build_wav(data=pcm), block_frames=500)

    blocks = list(stream)

    assert b"".join(blocks) == pcm
    assert [len(b) for b in blocks] == [2000, 2000, 2000, 1680]
    assert stream.frames_read == 1920


def test_parse_mono_wav():
    """Test parsing a mono WAV file."""
    stream = open_wav(build_wav(sample_rate=48000, channels=1))

    assert stream.format.channels == 1
    assert stream.format.sample_rate == 48000


def test_any_sample_rate_is_accepted():
    stream = open_wav(build_wav(sample_rate=22050))

    assert stream.format.sample_rate == 22050


def test_8_bit_is_unsigned():
    stream = open_wav(build_wav(bits_per_sample=8, channels=1))

    assert stream.format.dtype == "uint8"
    assert stream.format.silence == b"\x80"


def test_24_bit():
    stream = open_wav(build_wav(bits_per_sample=24, num_frames=10))

    assert stream.format.dtype == "int24"
    assert stream.format.frame_size == 6
    assert len(b"".join(stream)) == 60


def test_float_wav():
    stream = open_wav(build_wav(format_tag=3, bits_per_sample=32))

    assert stream.format.is_float
    assert stream.format.dtype == "float32"


def test_extensible_wav():
    wav_data = bytearray(build_wav())
    # Rewrite the fmt chunk as WAVE_FORMAT_EXTENSIBLE with a PCM sub-format
    fmt = struct.pack("<HHIIHH", 0xFFFE, 2, 44100, 176400, 4, 16)
    fmt += struct.pack("<HHI", 22, 16, 3) + struct.pack("<H", 1) + b"\x00" * 14
    patched = bytes(wav_data[:12]) + b"fmt " + struct.pack("<I", len(fmt)) + fmt + bytes(wav_data[36:])

    stream = open_wav(patched)

    assert stream.format.dtype == "int16"
    assert stream.total_frames == 1000


def test_unknown_chunks_are_skipped():
    # Odd-sized chunk followed by its pad byte
    extra = b"LIST" + struct.pack("<I", 3) + b"abc" + b"\x00"
    stream = open_wav(build_wav(num_frames=5, extra_chunks=extra))

    assert stream.total_frames == 5


def test_parse_invalid_format():
    """Test parsing a WAV with unsupported format."""
    with pytest.raises(DecodeError, match="Unsupported audio format"):
        open_wav(build_wav(format_tag=0x55))


def test_parse_unsupported_bits_per_sample():
    """Test parsing a WAV with unsupported bit depth."""
    with pytest.raises(DecodeError):
        open_wav(build_wav(bits_per_sample=12))


def test_float_64_is_rejected():
    with pytest.raises(DecodeError):
        open_wav(build_wav(format_tag=3, bits_per_sample=64))


def test_truncated_data_chunk():
    """A valid header whose data chunk promises more bytes than the file holds."""
    wav_data = build_wav(num_frames=100, declared_data_size=4000)

    with pytest.raises(DecodeError, match="Truncated data chunk"):
        open_wav(wav_data)


def test_unknown_data_size_reads_to_end_of_file():
    wav_data = build_wav(num_frames=10, declared_data_size=0xFFFFFFFF)

    stream = open_wav(wav_data)

    assert stream.total_frames == 10


def test_missing_data_chunk():
    wav_data = build_wav()
    # Cut the file right after the fmt chunk
    with pytest.raises(DecodeError, match="Missing data chunk"):
        open_wav(wav_data[:36])


def test_missing_fmt_chunk():
    wav_data = b"RIFF" + struct.pack("<I", 12) + b"WAVE" + b"data" + struct.pack("<I", 0)

    with pytest.raises(DecodeError, match="Missing fmt chunk"):
        open_wav(wav_data)


def test_not_a_wave_file():
    with pytest.raises(DecodeError):
        open_wav(b"RIFF\x00\x00\x00\x00AVI LIST")


def test_stream_cannot_be_replayed():
    stream = open_wav(build_wav(num_frames=10))
    list(stream)

    with pytest.raises(RuntimeError, match="already consumed"):
        iter(stream)


def test_empty_data_chunk():
    stream = open_wav(build_wav(data=b""))

    assert stream.total_frames == 0
    assert list(stream) == []
