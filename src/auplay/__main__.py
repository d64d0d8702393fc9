"""Run the player with ``python -m auplay <audio_file_path>``."""

from auplay.cli import main

if __name__ == "__main__":
    main()