"""
auplay - play one audio file to completion.

This package provides a small command line player and the API behind it:
content-based format detection, a streaming WAV decoder, compressed
formats through pydub/ffmpeg, and a blocking playback queue on the
default PortAudio output device.
"""

from auplay.api.player import Player, play_file
from auplay.core.models import AudioFormat, PlayerConfig, SinkState
from auplay.core.stream import DecodedStream
from auplay.core.exceptions import (
    PlayerError,
    InvalidArgumentsError,
    IoError,
    FileOpenError,
    FileReadError,
    DecodeError,
    DeviceError,
    AlreadyRunningError,
    InstanceLockError,
)

__version__ = "0.1.0"

__all__ = [
    "Player",
    "play_file",
    "AudioFormat",
    "PlayerConfig",
    "SinkState",
    "DecodedStream",
    "PlayerError",
    "InvalidArgumentsError",
    "IoError",
    "FileOpenError",
    "FileReadError",
    "DecodeError",
    "DeviceError",
    "AlreadyRunningError",
    "InstanceLockError",
]
