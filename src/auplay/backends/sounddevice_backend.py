"""PortAudio backend implementation (sounddevice)."""

import threading
from typing import Any, Dict, List, Optional
from auplay.core.exceptions import DeviceError
from auplay.core.interfaces import IAudioBackend, IOutputDevice, ISink
from auplay.core.models import AudioFormat, PlayerConfig, SinkState
from auplay.core.queue import PlaybackQueue
from auplay.core.stream import DecodedStream
from auplay.utils.log import get_logger

logger = get_logger(__name__)


class SoundDeviceSink(ISink):
    """
    Playback queue on a PortAudio raw output stream.

    The stream is opened on the first append, in the format of that
    stream. PortAudio's callback thread pulls buffers from the queue;
    when the queue runs dry the last buffer is padded with silence and the
    callback asks PortAudio to stop once everything generated so far has
    been played. ``sleep_until_end`` waits for that "finished" notification.
    """

    def __init__(self, sd, device: int, config: PlayerConfig):
        self._sd = sd
        self._device = device
        self._config = config
        self._queue = PlaybackQueue()
        self._stream = None
        self._silence = b"\x00"
        self._finished = threading.Event()
        self._finished.set()
        self._error: Optional[BaseException] = None
        self._state = SinkState.IDLE

    @property
    def state(self) -> SinkState:
        return self._state

    def append(self, stream: DecodedStream) -> None:
        """
        Queue a stream and make sure the device is playing.

        Raises:
            DeviceError: If the device rejects the stream format or
                cannot be started.
        """
        if self._stream is None:
            self._stream = self._open_stream(stream.format)
            self._silence = stream.format.silence

        try:
            self._queue.append(stream)
        except ValueError as e:
            raise DeviceError(str(e)) from e

        self._state = SinkState.ENQUEUED
        if not self._stream.active:
            self._start()

    def sleep_until_end(self) -> None:
        """
        Block until the queue is drained and the device stopped.

        Raises:
            Exception: Whatever a stream's decoder raised during playback.
        """
        while True:
            self._finished.wait()

            if self._error is not None:
                error, self._error = self._error, None
                raise error

            if self._queue.empty():
                break

            # Appended while the device was winding down
            self._start()

        self._state = SinkState.EMPTY if self._stream is not None else SinkState.IDLE

    def close(self) -> None:
        """Abort playback and release the device stream."""
        if self._stream is not None:
            self._stream.close(ignore_errors=True)
            self._stream = None
            logger.debug("Output stream closed")
        self._finished.set()

    def _open_stream(self, format: AudioFormat):
        try:
            stream = self._sd.RawOutputStream(
                samplerate=format.sample_rate,
                channels=format.channels,
                dtype=format.dtype,
                device=self._device,
                blocksize=self._config.block_frames,
                latency=self._config.latency,
                callback=self._callback,
                finished_callback=self._on_finished,
            )
        except (self._sd.PortAudioError, ValueError) as e:
            raise DeviceError(f"Cannot open output stream ({format}): {e}") from e

        logger.info(
            f"Output stream: in {format}, device rate {stream.samplerate:.0f}Hz, "
            f"latency {stream.latency:.3f}s"
        )
        return stream

    def _start(self) -> None:
        self._finished.clear()
        try:
            if not self._stream.stopped:
                self._stream.stop()
            self._stream.start()
        except self._sd.PortAudioError as e:
            self._finished.set()
            raise DeviceError(f"Cannot start output stream: {e}") from e

    def _callback(self, outdata, frames: int, time_info, status) -> None:
        """Fill one device buffer (runs on PortAudio's thread)."""
        if status:
            logger.warning(f"Output stream status: {status}")

        self._state = SinkState.DRAINING
        size = len(outdata)
        try:
            chunk = self._queue.read(size)
        except Exception as e:
            # Re-raised from sleep_until_end on the calling thread
            self._error = e
            raise self._sd.CallbackAbort from e

        outdata[:len(chunk)] = chunk
        if len(chunk) < size:
            outdata[len(chunk):] = self._silence * (size - len(chunk))
            raise self._sd.CallbackStop

    def _on_finished(self) -> None:
        logger.debug("Output stream finished")
        self._finished.set()


class SoundDeviceOutput(IOutputDevice):
    """Session on the system default output device."""

    def __init__(self, sd, info: Dict[str, Any], config: PlayerConfig):
        self._sd = sd
        self._info = info
        self._config = config
        self._sinks: List[SoundDeviceSink] = []

    @property
    def name(self) -> str:
        return str(self._info.get("name", "unknown"))

    def create_sink(self) -> ISink:
        sink = SoundDeviceSink(self._sd, self._info["index"], self._config)
        self._sinks.append(sink)
        return sink

    def close(self) -> None:
        for sink in self._sinks:
            sink.close()
        self._sinks.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SoundDeviceBackend(IAudioBackend):
    """Backend playing through PortAudio's default output device."""

    def open_output(self, config: PlayerConfig) -> IOutputDevice:
        """
        Acquire the default output device.

        Raises:
            DeviceError: If PortAudio cannot be loaded or there is no
                default output device.
        """
        # Lazy import to avoid loading the PortAudio library on import
        try:
            import sounddevice as sd
        except OSError as e:
            raise DeviceError(f"PortAudio library not available: {e}") from e

        try:
            info = sd.query_devices(kind="output")
        except (sd.PortAudioError, ValueError) as e:
            raise DeviceError(f"No default output device available: {e}") from e

        if not info or info.get("max_output_channels", 0) < 1:
            raise DeviceError("No default output device available")

        logger.info(
            f"Using output device {info['name']!r} "
            f"({info.get('default_samplerate', 0):.0f}Hz)"
        )
        return SoundDeviceOutput(sd, info, config)
