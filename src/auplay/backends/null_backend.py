"""Null backend for testing (no actual audio output)."""

import time
from typing import List
from auplay.core.exceptions import DeviceError
from auplay.core.interfaces import IAudioBackend, IOutputDevice, ISink
from auplay.core.models import PlayerConfig, SinkState
from auplay.core.queue import PlaybackQueue
from auplay.core.stream import DecodedStream
from auplay.utils.log import get_logger

logger = get_logger(__name__)


class NullSink(ISink):
    """Sink that drains its queue on the calling thread."""

    def __init__(self, config: PlayerConfig, realtime: bool = False):
        self._config = config
        self._realtime = realtime
        self._queue = PlaybackQueue()
        self._state = SinkState.IDLE
        self.frames_played = 0
        self.buffers_played = 0
        self.closed = False

    @property
    def state(self) -> SinkState:
        return self._state

    def append(self, stream: DecodedStream) -> None:
        """Queue a stream."""
        if self.closed:
            raise DeviceError("Sink is closed")
        self._queue.append(stream)
        self._state = SinkState.ENQUEUED
        logger.debug(f"NullSink: appended {stream!r}")

    def sleep_until_end(self) -> None:
        """Consume every queued frame, sleeping for its duration if realtime."""
        if self._queue.empty():
            return

        self._state = SinkState.DRAINING
        format = self._queue.format
        buffer_size = self._config.block_frames * format.frame_size
        while True:
            chunk = self._queue.read(buffer_size)
            if chunk:
                self.frames_played += len(chunk) // format.frame_size
                self.buffers_played += 1
                if self._realtime:
                    time.sleep(len(chunk) / format.byte_rate)
            if len(chunk) < buffer_size:
                break

        self._state = SinkState.EMPTY
        logger.debug(f"NullSink: drained, {self.frames_played} frames played")

    def close(self) -> None:
        """Close sink."""
        self.closed = True


class NullOutput(IOutputDevice):
    """Null output device session."""

    def __init__(self, config: PlayerConfig, realtime: bool = False):
        self._config = config
        self._realtime = realtime
        self.sinks: List[NullSink] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "null"

    def create_sink(self) -> ISink:
        sink = NullSink(self._config, realtime=self._realtime)
        self.sinks.append(sink)
        return sink

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
        self.closed = True
        logger.info("NullOutput closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class NullBackend(IAudioBackend):
    """
    Null backend implementation for testing.

    Args:
        available: When False, behaves like a machine without audio output.
        realtime: When True, sinks block for the duration of the audio.
    """

    def __init__(self, available: bool = True, realtime: bool = False):
        self._available = available
        self._realtime = realtime
        self.outputs: List[NullOutput] = []

    def open_output(self, config: PlayerConfig) -> IOutputDevice:
        """Open the null output device."""
        if not self._available:
            raise DeviceError("No default output device available")
        output = NullOutput(config, realtime=self._realtime)
        self.outputs.append(output)
        logger.info("NullBackend opened output")
        return output
