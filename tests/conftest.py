"""Shared helpers for building test audio files."""

import io
import struct
import uuid
import pytest
from auplay.backends.null_backend import NullBackend
from auplay.core.models import PlayerConfig


def build_wav(
    sample_rate: int = 44100,
    channels: int = 2,
    bits_per_sample: int = 16,
    num_frames: int = 1000,
    format_tag: int = 1,
    data: bytes = None,
    declared_data_size: int = None,
    extra_chunks: bytes = b"",
) -> bytes:
    """Create a WAV file in memory."""
    block_align = (channels * bits_per_sample) // 8
    byte_rate = sample_rate * block_align
    if data is None:
        data = bytes(i % 251 for i in range(num_frames * block_align))
    data_size = len(data) if declared_data_size is None else declared_data_size

    wav = io.BytesIO()

    # RIFF header
    wav.write(b"RIFF")
    wav.write(struct.pack("<I", 36 + len(extra_chunks) + len(data)))
    wav.write(b"WAVE")

    # fmt chunk
    wav.write(b"fmt ")
    wav.write(struct.pack("<I", 16))
    wav.write(
        struct.pack(
            "<HHIIHH",
            format_tag,
            channels,
            sample_rate,
            byte_rate,
            block_align,
            bits_per_sample,
        )
    )

    wav.write(extra_chunks)

    # data chunk
    wav.write(b"data")
    wav.write(struct.pack("<I", data_size))
    wav.write(data)

    return wav.getvalue()


@pytest.fixture
def wav_file(tmp_path):
    """Factory writing a WAV file under tmp_path and returning its path."""

    def _write(name: str = "valid.wav", **kwargs) -> str:
        path = tmp_path / name
        path.write_bytes(build_wav(**kwargs))
        return str(path)

    return _write


@pytest.fixture
def config():
    """Player configuration with the machine-wide instance lock disabled."""
    return PlayerConfig(block_frames=256, single_instance=False)


@pytest.fixture
def backend():
    return NullBackend()


@pytest.fixture
def lock_name():
    return f"auplay-test-{uuid.uuid4().hex}"
