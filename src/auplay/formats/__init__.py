"""Audio format decoders with automatic registration."""

import importlib
import pkgutil
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional
from auplay.core.exceptions import DecodeError, FileReadError
from auplay.core.interfaces import IAudioFormat
from auplay.core.models import PlayerConfig
from auplay.core.stream import DecodedStream
from auplay.utils.log import get_logger

logger = get_logger(__name__)

# Enough for every magic number we sniff
HEADER_SIZE = 16

# Registry of all available formats, in registration order
_formats: List[IAudioFormat] = []
# Extension hint -> format
_by_extension: Dict[str, IAudioFormat] = {}


def register_format(format: IAudioFormat) -> None:
    """
    Register an audio format.

    Args:
        format: Format instance implementing IAudioFormat.
    """
    if format not in _formats:
        _formats.append(format)
    for ext in format.extensions:
        ext_lower = ext.lower()
        if ext_lower in _by_extension and _by_extension[ext_lower] is not format:
            logger.warning(
                f"Format with extension {ext_lower} already registered, "
                f"overwriting with {format.name}"
            )
        _by_extension[ext_lower] = format
    logger.debug(f"Registered format {format.name} for extensions: {format.extensions}")


def _auto_discover_formats() -> None:
    """Import every module of this package and register its ``*_format`` instances."""
    package_path = Path(__file__).parent
    for module_info in pkgutil.iter_modules([str(package_path)]):
        module = importlib.import_module(f"{__name__}.{module_info.name}")
        for attr_name in dir(module):
            if attr_name.endswith("_format") and not attr_name.startswith("_"):
                attr = getattr(module, attr_name)
                if isinstance(attr, IAudioFormat):
                    register_format(attr)


def registered_formats() -> List[IAudioFormat]:
    """Get all registered formats."""
    if not _formats:
        _auto_discover_formats()
    return list(_formats)


def detect_format(header: bytes, hint: Optional[str] = None) -> Optional[IAudioFormat]:
    """
    Find the format whose signature matches the leading file bytes.

    Args:
        header: First bytes of the file.
        hint: File name; its extension decides which format is tried first.

    Returns:
        IAudioFormat instance if a format recognises the content, None otherwise.
    """
    formats = registered_formats()

    # The extension is only a hint, content decides
    if hint:
        hinted = _by_extension.get(Path(hint).suffix.lower())
        if hinted is not None and hinted.sniff(header):
            return hinted

    for format in formats:
        if format.sniff(header):
            return format

    return None


def open_stream(
    handle: BinaryIO, hint: Optional[str] = None, config: Optional[PlayerConfig] = None
) -> DecodedStream:
    """
    Detect the format of an open file and return its decoded stream.

    Args:
        handle: Seekable binary handle positioned at the start of the file.
        hint: Path of the file (extension hint and messages).
        config: Player configuration (block size).

    Returns:
        Lazy DecodedStream.

    Raises:
        DecodeError: If no format recognises the content or decoding fails.
        FileReadError: If reading the handle fails.
    """
    config = config or PlayerConfig()
    source = hint or getattr(handle, "name", "<stream>")

    try:
        header = handle.read(HEADER_SIZE)
        handle.seek(0)
    except OSError as e:
        raise FileReadError(str(source), e) from e

    if not header:
        raise DecodeError("File is empty")

    format = detect_format(header, hint)
    if format is None:
        supported = ", ".join(f.name for f in registered_formats())
        raise DecodeError(f"Unrecognized audio format (supported: {supported})")

    logger.info(f"Detected {format.name} content in {source}")
    return format.open_stream(handle, str(source), config.block_frames)


__all__ = [
    "IAudioFormat",
    "detect_format",
    "open_stream",
    "register_format",
    "registered_formats",
]
