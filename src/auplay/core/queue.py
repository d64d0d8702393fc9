"""Playback queue shared by output sinks."""

import threading
from collections import deque
from typing import Deque, Iterator, Optional, Tuple
from auplay.core.models import AudioFormat
from auplay.core.stream import DecodedStream
from auplay.utils.log import get_logger

logger = get_logger(__name__)


class PlaybackQueue:
    """
    FIFO of decoded streams served as raw device buffers.

    Responsibilities:
    - Hold appended streams in order
    - Cut their blocks into buffers of exactly the size the device asks for
    - Provide thread-safe access from the device callback thread
    """

    def __init__(self):
        """Initialize the queue."""
        self._streams: Deque[Tuple[DecodedStream, Iterator[bytes]]] = deque()
        self._pending = bytearray()
        self._format: Optional[AudioFormat] = None
        self._lock = threading.Lock()

    @property
    def format(self) -> Optional[AudioFormat]:
        """Format of the queued audio (None before the first append)."""
        return self._format

    def append(self, stream: DecodedStream) -> None:
        """
        Enqueue a stream.

        Args:
            stream: Stream to play after everything already queued.

        Raises:
            ValueError: If its format differs from the queued audio.
        """
        with self._lock:
            if self._format is None:
                self._format = stream.format
            elif stream.format != self._format:
                raise ValueError(
                    f"Stream format {stream.format} does not match queue format {self._format}"
                )
            self._streams.append((stream, iter(stream)))
        logger.debug(f"Queued {stream!r}")

    def read(self, size: int) -> bytes:
        """
        Take up to ``size`` bytes of audio.

        Returns fewer bytes only when every queued stream is exhausted.
        Errors raised by a stream's decoder propagate to the caller.
        """
        with self._lock:
            while len(self._pending) < size and self._streams:
                stream, blocks = self._streams[0]
                try:
                    block = next(blocks)
                except StopIteration:
                    self._streams.popleft()
                    logger.debug(f"Finished {stream!r} after {stream.frames_read} frames")
                    continue
                self._pending.extend(block)

            chunk = bytes(self._pending[:size])
            del self._pending[:size]
            return chunk

    def empty(self) -> bool:
        """True when no audio is left to hand out."""
        with self._lock:
            return not self._streams and not self._pending

    def __len__(self) -> int:
        """Number of streams not yet exhausted."""
        with self._lock:
            return len(self._streams)
