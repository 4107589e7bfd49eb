"""Player actions bound to keys: each one acts on the model at once.

An action returns a message for the model to react to (or ``None``) and
raises when it cannot be carried out.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from muxic.audio import open_audio_file
from muxic.audio_player import Ctrl, Volume
from muxic.library import get_library
from muxic.playlist import PlaylistManager
from muxic.types import InvalidStateError, TrackNotFoundError

SKIP_SECONDS = 10
VOLUME_STEP = 0.1
VOLUME_BASE = 2.0
DEFAULT_PLAYLIST_NAME = "My Playlist"


@dataclass(frozen=True)
class PlaylistUpdated:
    """Sent after a playlist changed so that its view is refreshed."""


class _TrackStreamer:
    """Streams a track, counting the samples played and flagging the end."""

    def __init__(self, player, source) -> None:
        self._player = player
        self._source = source
        self._finished = False

    def stream(self, count: int) -> np.ndarray:
        chunk = self._source.stream(count)
        player = self._player
        player.samples_played += len(chunk)
        if player.sample_rate:
            player.played_time = player.samples_played / player.sample_rate
        if len(chunk) < count and not self._finished:
            self._finished = True
            player.playing = False
        return chunk


def _ensure_manager(model) -> PlaylistManager:
    if model.playlist_manager is None:
        model.playlist_manager = PlaylistManager()
    return model.playlist_manager


def _ensure_active_playlist(manager: PlaylistManager):
    if manager.active_playlist is None:
        manager.active_playlist = manager.create_playlist(DEFAULT_PLAYLIST_NAME)
    return manager.active_playlist


def _require_selection(model) -> int:
    if model.active_file_index < 0:
        raise TrackNotFoundError("no track selected")
    return model.active_file_index


def add_to_queue(model) -> None:
    """Append the selected library track to the queue."""
    if not model.current_file_path():
        raise TrackNotFoundError("no track selected")
    track = get_library().get_file(model.active_file_index)
    model.queue.add(track)
    model.update_queue_table()


def remove_from_queue(model) -> None:
    """Remove the queue's current track."""
    model.queue.remove(model.queue.current_index)
    model.update_queue_table()


def play_next_in_queue(model) -> None:
    model.queue.next()


def play_previous_in_queue(model) -> None:
    model.queue.previous()


def view_queue(model) -> None:
    """Switch the view to the queue."""
    from muxic.model import ViewMode

    model.view_mode = ViewMode.QUEUE


def create_playlist(model, name: str) -> PlaylistUpdated:
    """Create a playlist called ``name`` and make it the active one."""
    manager = _ensure_manager(model)
    playlist = manager.create_playlist(name)
    manager.set_active_playlist(playlist.id)
    return PlaylistUpdated()


def add_to_playlist(model) -> PlaylistUpdated:
    """Add the selected library track to the active playlist, creating one if needed."""
    index = _require_selection(model)
    manager = _ensure_manager(model)
    track = get_library().get_file(index)
    playlist = _ensure_active_playlist(manager)
    manager.add_tracks(playlist.id, track)
    model.update_playlist_table()
    return PlaylistUpdated()


def remove_from_playlist(model) -> PlaylistUpdated:
    """Remove the selected track from the active playlist and keep the cursor in range."""
    index = _require_selection(model)
    manager = _ensure_manager(model)
    playlist = _ensure_active_playlist(manager)

    manager.remove_track(playlist.id, index)
    model.update_playlist_table()

    if index >= len(playlist.tracks):
        model.active_file_index = len(playlist.tracks) - 1
    update_cursor_position(model)
    return PlaylistUpdated()


def play(model) -> None:
    """Start playing the selected track from its beginning."""
    path = model.current_file_path()
    if not path:
        raise TrackNotFoundError("no track selected")
    _play_track(model, path)


def _play_track(model, path: str) -> None:
    player = model.audio_player
    player.stop()

    stream = open_audio_file(path)
    total = len(stream)
    player.current_streamer = stream
    player.sample_rate = stream.sample_rate
    player.total_samples = total
    player.samples_played = 0
    player.played_time = 0.0
    player.total_time = total / stream.sample_rate

    level = player.volume.volume if player.volume is not None else 0.0
    player.volume = Volume(
        streamer=_TrackStreamer(player, stream),
        base=VOLUME_BASE,
        volume=level,
        silent=False,
    )
    player.ctrl = Ctrl(streamer=player.volume)

    model.speaker.play(player.ctrl)
    player.playing = True


def pause(model) -> None:
    """Pause the current playback."""
    player = model.audio_player
    if player.ctrl is None:
        raise InvalidStateError("no active playback to pause")
    player.ctrl.paused = True
    player.playing = False


def stop(model) -> None:
    """Stop playback, release the track and reset the progress."""
    model.speaker.clear()
    player = model.audio_player
    player.playing = False
    if player.current_streamer is not None:
        player.current_streamer.close()
        player.current_streamer = None
    player.played_time = 0.0
    player.samples_played = 0
    model.progress.set_percent(0)


def _seek_by(model, seconds: int) -> None:
    player = model.audio_player
    stream = player.current_streamer
    if stream is None:
        return
    with model.speaker.lock():
        new_pos = stream.position() + seconds * int(player.sample_rate)
        new_pos = min(max(new_pos, 0), len(stream))
        stream.seek(new_pos)
        player.played_time = new_pos / player.sample_rate
        player.samples_played = new_pos


def skip_forward(model) -> None:
    """Skip ten seconds ahead, stopping at the end of the track."""
    _seek_by(model, SKIP_SECONDS)


def skip_backward(model) -> None:
    """Skip ten seconds back, stopping at the start of the track."""
    _seek_by(model, -SKIP_SECONDS)


def next_track(model) -> None:
    """Bound to a key but moves nothing: track order is driven by the queue."""
    return None


def previous_track(model) -> None:
    """Bound to a key but moves nothing: track order is driven by the queue."""
    return None


def _change_volume(model, step: float) -> None:
    player = model.audio_player
    if player.volume is None:
        raise InvalidStateError("volume is not set")
    player.set_volume(player.volume.volume + step)


def volume_up(model) -> None:
    _change_volume(model, VOLUME_STEP)


def volume_down(model) -> None:
    _change_volume(model, -VOLUME_STEP)


def volume_mute(model) -> None:
    """Toggle silence, if a track has been set up."""
    volume = model.audio_player.volume
    if volume is not None:
        volume.silent = not volume.silent


def update_cursor_position(model) -> None:
    """Clamp the selection at zero and move the active playlist table's cursor to it."""
    if model is None:
        raise ValueError("model is None")
    if model.playlist_manager is None:
        raise InvalidStateError("playlist manager is not set")
    if not 0 <= model.active_playlist_index < len(model.playlist_tables):
        raise IndexError("invalid playlist index")

    cursor = max(model.active_file_index, 0)
    model.active_file_index = cursor
    model.playlist_tables[model.active_playlist_index].set_cursor(cursor)