"""The music library: the shared collection of known audio files."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from muxic.audio import AudioFile


@dataclass
class Library:
    """An ordered collection of audio files, unique by path."""

    name: str = "Music Library"
    files: list[AudioFile] = field(default_factory=list)

    def add_file(self, file: AudioFile) -> bool:
        """Add ``file`` unless one with the same path exists; return whether it was added."""
        if any(existing.path == file.path for existing in self.files):
            return False
        self.files.append(file)
        return True

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.files):
            raise IndexError("index out of range")

    def get_file(self, index: int) -> AudioFile:
        self._check_index(index)
        return self.files[index]

    def remove_file(self, index: int) -> None:
        self._check_index(index)
        del self.files[index]

    def to_table_rows(self) -> list[list[str]]:
        return [file.to_library_row() for file in self.files]

    def paths(self) -> list[str]:
        return [file.path for file in self.files]

    def __len__(self) -> int:
        return len(self.files)

    def clear(self) -> None:
        self.files = []


_instance: Library | None = None
_instance_lock = threading.Lock()


def get_library() -> Library:
    """Return the process-wide library, creating it on first use."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = Library()
        return _instance