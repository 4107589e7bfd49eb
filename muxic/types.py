"""Shared player types: states, modes, settings, summaries and errors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any

from muxic.audio import AudioFile


class PlaybackState(IntEnum):
    """Current state of audio playback."""

    STOPPED = 0
    PLAYING = 1
    PAUSED = 2


class RepeatMode(IntEnum):
    """How playback repeats."""

    OFF = 0
    ONE = 1
    ALL = 2


class ComponentView(IntEnum):
    """The views a player can show."""

    LIBRARY = 0
    PLAYLISTS = 1
    PLAYLIST_TRACKS = 2
    QUEUE = 3
    SETTINGS = 4


@dataclass(frozen=True)
class Shortcuts:
    """Single-key shortcuts for the main player actions."""

    play_pause: str = " "
    stop: str = "s"
    next_track: str = "n"
    previous_track: str = "p"
    volume_up: str = "+"
    volume_down: str = "-"
    toggle_mute: str = "m"
    toggle_repeat: str = "r"
    toggle_shuffle: str = "S"
    toggle_view: str = "tab"
    quit: str = "q"


def default_shortcuts() -> Shortcuts:
    """The default shortcut set."""
    return Shortcuts()


@dataclass
class Theme:
    """Visual styling of the application."""

    primary_color: str = ""
    secondary_color: str = ""
    accent_color: str = ""
    text_color: str = ""
    background: str = ""
    border_style: str = ""


@dataclass
class Config:
    """Application configuration; times are in seconds."""

    volume: float = 0.0
    repeat_mode: RepeatMode = RepeatMode.OFF
    shuffle: bool = False
    default_view: ComponentView = ComponentView.LIBRARY
    auto_play: bool = False
    theme: Theme = field(default_factory=Theme)
    library_path: str = ""
    playlists_path: str = ""
    config_path: str = ""
    last_played_file: str = ""
    last_position: float = 0.0


@dataclass
class PlaybackInfo:
    """A snapshot of the current playback; times are in seconds."""

    current_track: AudioFile | None = None
    current_time: float = 0.0
    duration: float = 0.0
    state: PlaybackState = PlaybackState.STOPPED
    volume: float = 0.0
    is_muted: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    is_shuffled: bool = False
    queue_position: int = 0
    queue_length: int = 0


@dataclass
class Event:
    """Something that happened in the player."""

    type: str
    message: str = ""
    time: datetime = field(default_factory=datetime.now)
    data: Any = None


@dataclass
class PlaylistInfo:
    """Summary of a playlist; duration is in seconds."""

    id: int
    name: str
    track_count: int = 0
    duration: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class LibraryStats:
    """Statistics about the music library; total time is in seconds."""

    total_tracks: int = 0
    total_artists: int = 0
    total_albums: int = 0
    total_genres: int = 0
    total_size: int = 0
    total_time: float = 0.0
    last_updated: datetime | None = None


class PlayerError(Exception):
    """Base class of player errors."""

    default_message = "player error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class NoActivePlaylistError(PlayerError):
    default_message = "no active playlist"


class PlaylistEmptyError(PlayerError):
    default_message = "playlist is empty"


class TrackNotFoundError(PlayerError):
    default_message = "track not found"


class InvalidStateError(PlayerError):
    default_message = "invalid player state"


class AudioFileNotFoundError(PlayerError):
    default_message = "file not found"


class InvalidFormatError(PlayerError):
    default_message = "invalid audio format"


class PlayerController(ABC):
    """The controls a player offers; failures are raised as exceptions."""

    @abstractmethod
    def play(self) -> None: ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def next(self) -> None: ...

    @abstractmethod
    def previous(self) -> None: ...

    @abstractmethod
    def seek(self, pos: float) -> None: ...

    @abstractmethod
    def set_volume(self, vol: float) -> None: ...

    @abstractmethod
    def toggle_mute(self) -> None: ...

    @abstractmethod
    def toggle_repeat(self) -> None: ...

    @abstractmethod
    def toggle_shuffle(self) -> None: ...

    @abstractmethod
    def playback_info(self) -> PlaybackInfo: ...