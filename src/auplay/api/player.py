"""Player - main public API."""

from contextlib import nullcontext
from typing import BinaryIO, Optional
from auplay.core.exceptions import FileOpenError
from auplay.core.interfaces import IAudioBackend
from auplay.core.models import PlayerConfig
from auplay.core.stream import DecodedStream
from auplay.formats import open_stream
from auplay.utils.instance import InstanceLock
from auplay.utils.log import get_logger

logger = get_logger(__name__)


class Player:
    """
    Plays one audio file to completion.

    The pipeline runs on the calling thread: open the file, decode it,
    acquire the default output device, enqueue the decoded stream and block
    until the device queue has drained. Each stage raises a PlayerError
    subclass on failure; nothing is retried.
    """

    def __init__(
        self, config: Optional[PlayerConfig] = None, backend: Optional[IAudioBackend] = None
    ):
        """
        Initialize Player.

        Args:
            config: Player configuration.
            backend: Optional backend implementation (default: SoundDeviceBackend).
        """
        self._config = config or PlayerConfig()
        self._backend = backend
        if self._backend is None:
            from auplay.backends.sounddevice_backend import SoundDeviceBackend
            self._backend = SoundDeviceBackend()

    @property
    def config(self) -> PlayerConfig:
        return self._config

    def play(self, path: str) -> DecodedStream:
        """
        Play an audio file and block until playback finishes.

        Args:
            path: Path to the audio file.

        Returns:
            The consumed DecodedStream.

        Raises:
            AlreadyRunningError: If another instance is playing.
            FileOpenError: If the file cannot be opened.
            DecodeError: If the content is not decodable audio.
            DeviceError: If no output device is available.
            FileReadError: If reading the file fails during playback.
        """
        guard = (
            InstanceLock(self._config.lock_name)
            if self._config.single_instance
            else nullcontext()
        )
        with guard:
            with self.open_file(path) as handle:
                stream = self.decode(handle, path)
                with self._backend.open_output(self._config) as device:
                    logger.info(f"Playing {path} on {device.name}")
                    sink = device.create_sink()
                    sink.append(stream)
                    sink.sleep_until_end()

        logger.info(f"Finished {path}: {stream.frames_read} frames")
        return stream

    @staticmethod
    def open_file(path: str) -> BinaryIO:
        """
        Open a file for binary reading.

        Raises:
            FileOpenError: If the file cannot be opened.
        """
        try:
            return open(path, "rb")
        except OSError as e:
            raise FileOpenError(path, e) from e

    def decode(self, handle: BinaryIO, path: str) -> DecodedStream:
        """
        Build the decoded stream for an open file.

        Raises:
            DecodeError: If the content is not decodable audio.
        """
        stream = open_stream(handle, hint=path, config=self._config)
        logger.info(f"Input: {stream.format}")
        return stream


def play_file(path: str, config: Optional[PlayerConfig] = None) -> DecodedStream:
    """Play a file on the default output device."""
    return Player(config).play(path)
