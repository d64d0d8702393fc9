"""Data models and configuration classes."""

from dataclasses import dataclass
from enum import Enum


class SinkState(Enum):
    """Playback queue state enumeration."""

    IDLE = "idle"
    ENQUEUED = "enqueued"
    DRAINING = "draining"
    EMPTY = "empty"


@dataclass
class PlayerConfig:
    """Configuration for Player."""

    block_frames: int = 2048
    """Frames per decoded block and per device buffer. Default: 2048."""

    latency: str = "high"
    """Device latency hint passed to the output stream. Default: "high"."""

    single_instance: bool = True
    """Refuse to play while another instance is playing. Default: True."""

    lock_name: str = "auplay"
    """Name of the instance lock file in the temp directory."""


@dataclass(frozen=True)
class AudioFormat:
    """Interleaved PCM format of a decoded stream."""

    sample_rate: int
    """Sample rate in Hz."""

    channels: int
    """Number of interleaved channels."""

    bits_per_sample: int
    """Bits per sample (8, 16, 24 or 32)."""

    is_float: bool = False
    """True for IEEE float samples."""

    @property
    def bytes_per_sample(self) -> int:
        """Bytes per sample."""
        return self.bits_per_sample // 8

    @property
    def frame_size(self) -> int:
        """Frame size in bytes."""
        return self.channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        """Bytes per second."""
        return self.sample_rate * self.frame_size

    @property
    def dtype(self) -> str:
        """Sample type name understood by the output device library."""
        if self.is_float:
            return f"float{self.bits_per_sample}"
        if self.bits_per_sample == 8:
            return "uint8"
        return f"int{self.bits_per_sample}"

    @property
    def silence(self) -> bytes:
        """One byte of silence for this sample type."""
        # 8-bit PCM is unsigned and centred on 0x80
        return b"\x80" if self.bits_per_sample == 8 and not self.is_float else b"\x00"

    def __str__(self) -> str:
        return f"{self.sample_rate}Hz, {self.channels}ch, {self.dtype}"
