"""Example: Play a file through the library API."""

import sys

from auplay import Player, PlayerError

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python play_file.py <path_to_audio_file>")
        sys.exit(1)

    path = sys.argv[1]
    player = Player()

    try:
        print(f"Playing {path}...")
        stream = player.play(path)
        print(f"Played {stream.frames_read} frames ({stream.format})")
    except PlayerError as e:
        print(f"Error: {e}")
        sys.exit(e.exit_code)
