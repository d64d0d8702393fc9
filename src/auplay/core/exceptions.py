"""Exception classes for auplay."""


class PlayerError(Exception):
    """Base exception for player errors."""

    exit_code = 1
    kind = "error"


class InvalidArgumentsError(PlayerError):
    """Raised when the command line does not name exactly one file."""

    exit_code = 2
    kind = "usage error"


class IoError(PlayerError):
    """Raised when the audio file cannot be opened or read."""

    exit_code = 3
    kind = "I/O error"

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"{self._verb} '{path}': {reason}")

    _verb = "cannot access"


class FileOpenError(IoError):
    """Raised when the audio file cannot be opened."""

    _verb = "cannot open"


class FileReadError(IoError):
    """Raised when reading the audio file fails mid-stream."""

    _verb = "cannot read"


class DecodeError(PlayerError):
    """Raised when file content cannot be decoded as audio."""

    exit_code = 4
    kind = "decode error"


class DeviceError(PlayerError):
    """Raised when the audio output device is unavailable."""

    exit_code = 5
    kind = "device error"


class AlreadyRunningError(PlayerError):
    """Raised when another player instance holds the instance lock."""

    exit_code = 6
    kind = "already running"


class InstanceLockError(PlayerError):
    """Raised when the instance lock file cannot be created or opened."""

    kind = "instance lock error"
