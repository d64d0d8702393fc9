"""Decoded audio stream."""

from typing import Iterable, Iterator, Optional
from auplay.core.models import AudioFormat


class DecodedStream:
    """
    Lazy, finite sequence of interleaved PCM blocks.

    Each block holds a whole number of frames in ``format``. The stream is
    produced on demand by a decoder and can only be iterated once.
    """

    def __init__(
        self,
        format: AudioFormat,
        blocks: Iterable[bytes],
        total_frames: Optional[int] = None,
        source: str = "",
    ):
        """
        Initialize DecodedStream.

        Args:
            format: PCM format of every block.
            blocks: Block producer (usually a generator over the file).
            total_frames: Number of frames, if known up front.
            source: Description of where the audio comes from.
        """
        self._format = format
        self._blocks = blocks
        self._total_frames = total_frames
        self._source = source
        self._frames_read = 0
        self._consumed = False

    @property
    def format(self) -> AudioFormat:
        """Get PCM format."""
        return self._format

    @property
    def source(self) -> str:
        """Get description of where the audio comes from."""
        return self._source

    @property
    def total_frames(self) -> Optional[int]:
        """Get nominal frame count (None if unknown)."""
        return self._total_frames

    @property
    def duration(self) -> Optional[float]:
        """Get nominal duration in seconds (None if unknown)."""
        if self._total_frames is None:
            return None
        return self._total_frames / self._format.sample_rate

    @property
    def frames_read(self) -> int:
        """Number of frames handed out so far."""
        return self._frames_read

    def __iter__(self) -> Iterator[bytes]:
        if self._consumed:
            raise RuntimeError(f"Decoded stream already consumed: {self._source}")
        self._consumed = True
        return self._generate()

    def _generate(self) -> Iterator[bytes]:
        frame_size = self._format.frame_size
        for block in self._blocks:
            if not block:
                continue
            self._frames_read += len(block) // frame_size
            yield block

    def __repr__(self) -> str:
        return f"DecodedStream({self._source!r}, {self._format}, frames={self._total_frames})"
