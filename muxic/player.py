"""The music player: loads a directory into the library and runs the interface."""

from __future__ import annotations

import logging
import os
import sys

from muxic.audio import get_audio_files
from muxic.library import get_library
from muxic.model import SAMPLE_RATE, Model
from muxic.speaker import Speaker

log = logging.getLogger("muxic")


class MusicPlayer:
    """A player whose library holds the audio files of one directory."""

    def __init__(self, directory: str, speaker: Speaker | None = None) -> None:
        try:
            audio_files = get_audio_files(directory)
        except (OSError, ValueError) as exc:
            raise RuntimeError(f"failed to get audio files: {exc}") from exc

        library = get_library()
        for file in audio_files:
            library.add_file(file)

        try:
            self.model = Model(speaker)
        except (OSError, ValueError, RuntimeError) as exc:
            raise RuntimeError(f"failed to create model: {exc}") from exc

        self.model.library_table.set_rows(library.to_table_rows())
        if len(library) > 0:
            self.model.active_file_index = 0
            self.model.library_table.set_cursor(0)

    def run(self) -> None:
        """Run the interface until the user quits."""
        self.model.run()


def main(argv=None) -> int:
    """Start the player on the directory given as the first argument, or ``.``."""
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(message)s")
    log.info("Starting muxic player")

    directory = argv[0] if argv else "."
    if not os.path.exists(directory):
        log.error("Directory does not exist: %s", directory)
        return 1

    try:
        speaker = Speaker(SAMPLE_RATE, SAMPLE_RATE // 10, device=True)
    except Exception as exc:  # audio backend failures come in many types
        log.error("Error initializing player: %s", exc)
        return 1

    try:
        player = MusicPlayer(directory, speaker)
    except RuntimeError as exc:
        speaker.close()
        log.error("Error initializing player: %s", exc)
        return 1

    try:
        player.run()
    except Exception as exc:
        log.error("Error running player: %s", exc)
        return 1
    finally:
        speaker.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())