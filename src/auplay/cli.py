"""Command line entry point: ``auplay <audio_file_path>``."""

import argparse
import sys
from typing import List, Optional
from auplay.api.player import Player
from auplay.core.exceptions import InvalidArgumentsError, PlayerError

PROG = "auplay"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting."""

    def error(self, message: str):
        raise InvalidArgumentsError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        usage="%(prog)s <audio_file_path>",
        description="Play one audio file to completion on the default output device.",
        add_help=False,
    )
    parser.add_argument("path", metavar="audio_file_path")
    return parser


def parse_args(argv: List[str]) -> str:
    """
    Return the single audio file path from the argument list.

    Args:
        argv: Arguments without the program name.

    Raises:
        InvalidArgumentsError: Unless exactly one path is given.
    """
    if len(argv) != 1:
        raise InvalidArgumentsError(
            f"expected exactly one audio file path, got {len(argv)} arguments"
        )
    # The single argument is always the path, even when it starts with "-"
    return build_parser().parse_args(["--", *argv]).path


def _report(error: PlayerError) -> None:
    print(f"{PROG}: {error.kind}: {error}", file=sys.stderr)


def run(argv: Optional[List[str]] = None, player: Optional[Player] = None) -> int:
    """
    Run the player and return the process exit code.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:]).
        player: Player to use (default: one on the system output device).
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        path = parse_args(argv)
    except InvalidArgumentsError as e:
        print(build_parser().format_usage().rstrip(), file=sys.stderr)
        _report(e)
        return e.exit_code

    try:
        (player or Player()).play(path)
    except PlayerError as e:
        _report(e)
        return e.exit_code

    return 0


def main() -> None:
    sys.exit(run())
