"""Playlists and the manager that keeps them."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from muxic.audio import AudioFile
from muxic.types import NoActivePlaylistError, PlaylistEmptyError

_SORT_FIELDS = ("title", "artist", "album")


@dataclass
class Playlist:
    """A named collection of audio tracks."""

    id: int
    name: str
    tracks: list[AudioFile] = field(default_factory=list)


@dataclass
class PlaylistManager:
    """Holds several playlists and which one is active."""

    playlists: list[Playlist] = field(default_factory=list)
    active_playlist: Playlist | None = None
    active_track_idx: int = 0
    _last_id: int = field(default=0, repr=False)

    def create_playlist(self, name: str) -> Playlist:
        if not name:
            raise ValueError("playlist name cannot be empty")
        self._last_id += 1
        playlist = Playlist(self._last_id, name)
        self.playlists.append(playlist)
        return playlist

    def delete_playlist(self, playlist_id: int) -> None:
        playlist = self.get_playlist(playlist_id)
        if self.active_playlist is not None and self.active_playlist.id == playlist_id:
            self.active_playlist = None
            self.active_track_idx = 0
        self.playlists.remove(playlist)

    def get_playlist(self, playlist_id: int) -> Playlist:
        for playlist in self.playlists:
            if playlist.id == playlist_id:
                return playlist
        raise LookupError(f"playlist with ID {playlist_id} not found")

    def set_active_playlist(self, playlist_id: int) -> None:
        self.active_playlist = self.get_playlist(playlist_id)
        self.active_track_idx = 0

    def add_tracks(self, playlist_id: int, *args: AudioFile) -> None:
        self.get_playlist(playlist_id).tracks.extend(args)

    def remove_track(self, playlist_id: int, track_index: int) -> None:
        playlist = self.get_playlist(playlist_id)
        if not 0 <= track_index < len(playlist.tracks):
            raise IndexError("track index out of range")
        del playlist.tracks[track_index]

    def _active_tracks(self) -> list[AudioFile]:
        if self.active_playlist is None:
            raise NoActivePlaylistError()
        if not self.active_playlist.tracks:
            raise PlaylistEmptyError()
        return self.active_playlist.tracks

    def next_track(self) -> AudioFile:
        tracks = self._active_tracks()
        self.active_track_idx = (self.active_track_idx + 1) % len(tracks)
        return tracks[self.active_track_idx]

    def previous_track(self) -> AudioFile:
        tracks = self._active_tracks()
        self.active_track_idx -= 1
        if self.active_track_idx < 0:
            self.active_track_idx = len(tracks) - 1
        return tracks[self.active_track_idx]

    def current_track(self) -> AudioFile:
        tracks = self._active_tracks()
        if not 0 <= self.active_track_idx < len(tracks):
            raise IndexError("track index out of range")
        return tracks[self.active_track_idx]

    def shuffle_playlist(self, playlist_id: int) -> None:
        """Shuffle the tracks, keeping the active index on the same track."""
        playlist = self.get_playlist(playlist_id)
        current = None
        if (
            self.active_playlist is not None
            and self.active_playlist.id == playlist_id
            and 0 <= self.active_track_idx < len(playlist.tracks)
        ):
            current = playlist.tracks[self.active_track_idx]

        shuffled = list(playlist.tracks)
        random.shuffle(shuffled)
        playlist.tracks[:] = shuffled

        if current is not None:
            self.active_track_idx = next(
                i for i, track in enumerate(playlist.tracks) if track is current
            )

    def sort_playlist(self, playlist_id: int, by: str, ascending: bool) -> None:
        """Sort by ``title``, ``artist`` or ``album``; any other field sorts by title."""
        playlist = self.get_playlist(playlist_id)
        attr = by if by in _SORT_FIELDS else "title"
        playlist.tracks.sort(key=lambda track: getattr(track, attr), reverse=not ascending)

    def __len__(self) -> int:
        if self.active_playlist is None:
            return 0
        return len(self.active_playlist.tracks)

    def to_table_rows(self, playlist_id: int) -> list[list[str]]:
        playlist = self.get_playlist(playlist_id)
        return [track.to_playlist_row(i) for i, track in enumerate(playlist.tracks)]