"""Streaming RIFF WAV decoder."""

import os
import struct
from typing import BinaryIO, Iterator
from auplay.core.exceptions import DecodeError, FileReadError
from auplay.core.interfaces import IAudioFormat
from auplay.core.models import AudioFormat
from auplay.core.stream import DecodedStream
from auplay.utils.log import get_logger

logger = get_logger(__name__)

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_IEEE_FLOAT = 0x0003
WAVE_FORMAT_EXTENSIBLE = 0xFFFE

# Writers that stream to a pipe leave the data size unknown
UNKNOWN_DATA_SIZE = 0xFFFFFFFF

_PCM_BITS = (8, 16, 24, 32)


class WavFormat(IAudioFormat):
    """WAV format decoder implementing IAudioFormat."""

    @property
    def name(self) -> str:
        return "wav"

    @property
    def extensions(self) -> tuple[str, ...]:
        """Supported file extensions."""
        return (".wav", ".wave")

    def sniff(self, header: bytes) -> bool:
        """Check for a RIFF WAVE header."""
        return header[:4] == b"RIFF" and header[8:12] == b"WAVE"

    def open_stream(
        self, handle: BinaryIO, source: str, block_frames: int
    ) -> DecodedStream:
        """
        Validate the WAV header and return a lazy stream over the data chunk.

        Supports:
        - PCM (8, 16, 24, 32-bit), IEEE float (32-bit)
        - WAVE_FORMAT_EXTENSIBLE wrapping either of those
        - Any channel count and sample rate

        Raises:
            DecodeError: If the header is malformed, the codec is not
                supported or the data chunk is truncated.
            FileReadError: If reading the handle fails.
        """
        try:
            return _open_wav(handle, source, block_frames)
        except OSError as e:
            raise FileReadError(source, e) from e
        except struct.error as e:
            raise DecodeError(f"malformed WAV header in '{source}': {e}") from e


def _read_exact(f: BinaryIO, size: int, what: str) -> bytes:
    data = f.read(size)
    if len(data) < size:
        raise DecodeError(f"Truncated {what}")
    return data


def _open_wav(f: BinaryIO, source: str, block_frames: int) -> DecodedStream:
    """Parse the WAV header from a file handle."""
    header = f.read(12)
    if len(header) < 12 or header[:4] != b"RIFF":
        raise DecodeError("Not a RIFF file")
    if header[8:12] != b"WAVE":
        raise DecodeError("Not a WAVE file")

    fmt_data = None
    data_size = None

    # Walk chunks up to the data chunk
    while True:
        chunk_header = f.read(8)
        if len(chunk_header) < 8:
            break

        chunk_id = chunk_header[:4]
        chunk_size = struct.unpack("<I", chunk_header[4:8])[0]

        if chunk_id == b"fmt ":
            fmt_data = _read_exact(f, chunk_size, "fmt chunk")
            if chunk_size & 1:
                f.seek(1, os.SEEK_CUR)
        elif chunk_id == b"data":
            data_size = chunk_size
            break
        else:
            # Chunks are word aligned
            f.seek(chunk_size + (chunk_size & 1), os.SEEK_CUR)

    if fmt_data is None:
        raise DecodeError("Missing fmt chunk")

    if data_size is None:
        raise DecodeError("Missing data chunk")

    format = _parse_fmt(fmt_data)

    data_start = f.tell()
    file_end = f.seek(0, os.SEEK_END)
    f.seek(data_start)
    available = file_end - data_start

    if data_size == UNKNOWN_DATA_SIZE:
        data_size = available
    elif data_size > available:
        raise DecodeError(
            f"Truncated data chunk: header declares {data_size} bytes, "
            f"file holds {available}"
        )

    total_frames = data_size // format.frame_size

    logger.info(
        f"Opened WAV {source}: {format}, {total_frames / format.sample_rate:.2f}s"
    )

    return DecodedStream(
        format=format,
        blocks=_read_blocks(
            f, source, total_frames * format.frame_size, block_frames * format.frame_size
        ),
        total_frames=total_frames,
        source=source,
    )


def _parse_fmt(fmt_data: bytes) -> AudioFormat:
    """
    Parse the fmt chunk.

    Layout: audio_format(2), num_channels(2), sample_rate(4),
    byte_rate(4), block_align(2), bits_per_sample(2)
    [, cb_size(2), valid_bits(2), channel_mask(4), sub_format(16)]
    """
    if len(fmt_data) < 16:
        raise DecodeError("Invalid fmt chunk size")

    (
        audio_format,
        num_channels,
        sample_rate,
        _byte_rate,
        block_align,
        bits_per_sample,
    ) = struct.unpack("<HHIIHH", fmt_data[:16])

    if audio_format == WAVE_FORMAT_EXTENSIBLE:
        if len(fmt_data) < 40:
            raise DecodeError("Invalid extensible fmt chunk size")
        # The sub-format GUID starts with the plain format tag
        audio_format = struct.unpack("<H", fmt_data[24:26])[0]

    if audio_format == WAVE_FORMAT_PCM:
        if bits_per_sample not in _PCM_BITS:
            raise DecodeError(
                f"Unsupported bits per sample: {bits_per_sample} "
                f"(PCM supports {', '.join(map(str, _PCM_BITS))})"
            )
        is_float = False
    elif audio_format == WAVE_FORMAT_IEEE_FLOAT:
        if bits_per_sample != 32:
            raise DecodeError(
                f"Unsupported float bits per sample: {bits_per_sample} (only 32-bit)"
            )
        is_float = True
    else:
        raise DecodeError(
            f"Unsupported audio format: 0x{audio_format:04X} (only PCM and IEEE float)"
        )

    if num_channels < 1:
        raise DecodeError(f"Invalid channel count: {num_channels}")

    if sample_rate < 1:
        raise DecodeError(f"Invalid sample rate: {sample_rate} Hz")

    format = AudioFormat(
        sample_rate=sample_rate,
        channels=num_channels,
        bits_per_sample=bits_per_sample,
        is_float=is_float,
    )

    if block_align != format.frame_size:
        raise DecodeError(
            f"Unsupported block alignment: {block_align} "
            f"(expected {format.frame_size} for {format})"
        )

    return format


def _read_blocks(
    f: BinaryIO, source: str, remaining: int, block_size: int
) -> Iterator[bytes]:
    """Yield the data chunk in blocks of whole frames."""
    while remaining > 0:
        try:
            block = f.read(min(block_size, remaining))
        except OSError as e:
            raise FileReadError(source, e) from e
        if not block:
            raise DecodeError(f"Unexpected end of data in '{source}'")
        remaining -= len(block)
        yield block


# Format instance for automatic registration
wav_format = WavFormat()
