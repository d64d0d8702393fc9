"""Compressed formats decoded through pydub and ffmpeg."""

from typing import BinaryIO, Callable, Iterator
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError
from auplay.core.exceptions import DecodeError, FileReadError
from auplay.core.interfaces import IAudioFormat
from auplay.core.models import AudioFormat
from auplay.core.stream import DecodedStream
from auplay.utils.log import get_logger

logger = get_logger(__name__)


class PydubFormat(IAudioFormat):
    """Container format decoded by ffmpeg via pydub."""

    def __init__(
        self,
        name: str,
        extensions: tuple[str, ...],
        sniff: Callable[[bytes], bool],
        container: str,
    ):
        """
        Args:
            name: Short format name.
            extensions: Extensions usually carrying the format.
            sniff: Predicate over the leading file bytes.
            container: ffmpeg demuxer name passed to pydub.
        """
        self._name = name
        self._extensions = extensions
        self._sniff = sniff
        self._container = container

    @property
    def name(self) -> str:
        return self._name

    @property
    def extensions(self) -> tuple[str, ...]:
        """Supported file extensions."""
        return self._extensions

    def sniff(self, header: bytes) -> bool:
        return self._sniff(header)

    def open_stream(
        self, handle: BinaryIO, source: str, block_frames: int
    ) -> DecodedStream:
        """
        Decode the file with ffmpeg and return a stream over the PCM.

        The decoded audio is normalised to 16-bit samples; sample rate and
        channel layout are preserved from the source.

        Raises:
            DecodeError: If ffmpeg cannot decode the content or is missing.
            FileReadError: If reading the handle fails.
        """
        try:
            audio = AudioSegment.from_file(handle, format=self._container)
        except CouldntDecodeError as e:
            raise DecodeError(f"Failed to decode {self._name} file: {_first_line(e)}") from e
        except FileNotFoundError as e:
            # The handle is already open, so this comes from spawning ffmpeg
            raise DecodeError(
                f"ffmpeg is required to decode {self._name} files; "
                "make sure 'ffmpeg' and 'ffprobe' are on your PATH"
            ) from e
        except OSError as e:
            raise FileReadError(source, e) from e
        except (IndexError, KeyError, ValueError) as e:
            # ffprobe reported no audio stream or produced unreadable JSON
            raise DecodeError(f"Failed to decode {self._name} file: {e}") from e

        if audio.sample_width != 2:  # 2 bytes = 16-bit
            audio = audio.set_sample_width(2)

        format = AudioFormat(
            sample_rate=audio.frame_rate,
            channels=audio.channels,
            bits_per_sample=audio.sample_width * 8,
        )
        total_frames = int(audio.frame_count())

        logger.info(
            f"Decoded {self._name.upper()} {source}: {format}, "
            f"{len(audio) / 1000.0:.2f}s"
        )

        return DecodedStream(
            format=format,
            blocks=_slice_blocks(audio.raw_data, block_frames * format.frame_size),
            total_frames=total_frames,
            source=source,
        )


def _slice_blocks(data: bytes, block_size: int) -> Iterator[bytes]:
    for offset in range(0, len(data), block_size):
        yield data[offset:offset + block_size]


def _first_line(error: Exception) -> str:
    # pydub appends the whole ffmpeg log to its message
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__


def _is_mpeg_audio(header: bytes) -> bool:
    if header[:3] == b"ID3":
        return True
    if len(header) < 2 or header[0] != 0xFF or header[1] & 0xE0 != 0xE0:
        return False
    version = (header[1] >> 3) & 0x03
    layer = (header[1] >> 1) & 0x03
    # Version 01 is reserved; layer 00 is ADTS AAC, not MPEG audio
    return version != 0x01 and layer != 0x00


# Format instances for automatic registration
mp3_format = PydubFormat("mp3", (".mp3", ".mp2"), _is_mpeg_audio, "mp3")
flac_format = PydubFormat("flac", (".flac",), lambda h: h[:4] == b"fLaC", "flac")
ogg_format = PydubFormat("ogg", (".ogg", ".oga", ".opus"), lambda h: h[:4] == b"OggS", "ogg")
mp4_format = PydubFormat("mp4", (".m4a", ".mp4"), lambda h: h[4:8] == b"ftyp", "mp4")
