"""The play queue."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from muxic.audio import AudioFile


@dataclass
class Queue:
    """Tracks waiting to be played, with a wrapping current position."""

    tracks: list[AudioFile] = field(default_factory=list)
    current_index: int = 0

    def add(self, track: AudioFile) -> None:
        self.tracks.append(track)

    def remove(self, index: int) -> None:
        if not 0 <= index < len(self.tracks):
            raise IndexError("queue index out of range")
        del self.tracks[index]

    def next(self) -> None:
        self.current_index += 1
        if self.current_index >= len(self.tracks):
            self.current_index = 0

    def previous(self) -> None:
        self.current_index -= 1
        if self.current_index < 0:
            self.current_index = len(self.tracks) - 1

    def shuffle(self) -> None:
        random.shuffle(self.tracks)

    def current(self) -> AudioFile:
        if not 0 <= self.current_index < len(self.tracks):
            raise IndexError("queue index out of range")
        return self.tracks[self.current_index]

    def clear(self) -> None:
        self.tracks = []

    def __len__(self) -> int:
        return len(self.tracks)

    def to_table_rows(self) -> list[list[str]]:
        return [track.to_playlist_row(i) for i, track in enumerate(self.tracks)]