"""Protocol interfaces for format and backend abstraction."""

from typing import BinaryIO, Protocol, runtime_checkable
from auplay.core.models import PlayerConfig, SinkState
from auplay.core.stream import DecodedStream


class ISink(Protocol):
    """Interface for a playback queue feeding one output device."""

    def append(self, stream: DecodedStream) -> None:
        """Enqueue a decoded stream for playback."""
        ...

    def sleep_until_end(self) -> None:
        """Block until every enqueued stream has been played."""
        ...

    @property
    def state(self) -> SinkState:
        """Get current queue state."""
        ...

    def close(self) -> None:
        """Stop playback and release the device stream."""
        ...


class IOutputDevice(Protocol):
    """Interface for an opened audio output device session."""

    @property
    def name(self) -> str:
        """Human readable device name."""
        ...

    def create_sink(self) -> ISink:
        """Create a playback queue on this device."""
        ...

    def close(self) -> None:
        """Close every sink and end the session."""
        ...

    def __enter__(self) -> "IOutputDevice":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...


class IAudioBackend(Protocol):
    """Interface for audio output backend implementation."""

    def open_output(self, config: PlayerConfig) -> IOutputDevice:
        """
        Acquire the system default output device.

        Raises:
            DeviceError: If no usable output device is available.
        """
        ...


@runtime_checkable
class IAudioFormat(Protocol):
    """Interface for audio format decoders."""

    @property
    def name(self) -> str:
        """Short format name (e.g., 'wav')."""
        ...

    @property
    def extensions(self) -> tuple[str, ...]:
        """
        File extensions usually carrying this format (e.g., ('.wav', '.wave')).

        Returns:
            Tuple of extensions (lowercase, with dot).
        """
        ...

    def sniff(self, header: bytes) -> bool:
        """
        Check whether the leading bytes of a file belong to this format.

        Args:
            header: First bytes of the file (may be shorter than requested).

        Returns:
            True if this format recognises the content, False otherwise.
        """
        ...

    def open_stream(
        self, handle: BinaryIO, source: str, block_frames: int
    ) -> DecodedStream:
        """
        Construct a decoded stream reading from an open handle.

        Args:
            handle: Binary handle positioned at the start of the file.
            source: Path of the file, used in messages.
            block_frames: Frames per produced block.

        Returns:
            DecodedStream producing PCM blocks on demand.

        Raises:
            DecodeError: If the content cannot be decoded.
            FileReadError: If reading the handle fails.
        """
        ...
