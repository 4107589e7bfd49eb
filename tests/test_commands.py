import numpy as np
import pytest

from muxic import commands
from muxic.audio import AudioFile, AudioStream
from muxic.audio_player import AudioPlayer, Ctrl, Volume
from muxic.library import get_library
from muxic.playlist import PlaylistManager
from muxic.queue import Queue
from muxic.speaker import Speaker
from muxic.types import InvalidStateError, TrackNotFoundError
from muxic.ui import (
    ProgressBar,
    new_playlist_table,
    new_queue_table,
    playlist_table_columns,
    queue_table_columns,
)

RATE = 100


def make_track(title):
    return AudioFile(title, "Artist", "Album", "01:00", f"/music/{title}.mp3", f"{title}.mp3")


class FakeModel:
    def __init__(self):
        self.audio_player = AudioPlayer()
        self.speaker = Speaker(sample_rate=RATE)
        self.progress = ProgressBar()
        self.queue = Queue()
        self.queue_table = new_queue_table(queue_table_columns(80), [])
        self.playlist_manager = PlaylistManager()
        self.playlist_tables = [new_playlist_table(playlist_table_columns(80), [])]
        self.active_playlist_index = 0
        self.active_file_index = -1
        self.view_mode = None

    def current_file_path(self):
        library = get_library()
        if 0 <= self.active_file_index < len(library):
            return library.files[self.active_file_index].path
        return ""

    def update_queue_table(self):
        self.queue_table.set_rows(self.queue.to_table_rows())

    def update_playlist_table(self):
        manager = self.playlist_manager
        if manager is None or manager.active_playlist is None:
            return
        rows = manager.to_table_rows(manager.active_playlist.id)
        self.playlist_tables[self.active_playlist_index].set_rows(rows)


@pytest.fixture
def library():
    lib = get_library()
    lib.clear()
    yield lib
    lib.clear()


@pytest.fixture
def model():
    m = FakeModel()
    yield m
    m.speaker.close()


def load_stream(model, seconds, position=0):
    stream = AudioStream(np.zeros((seconds * RATE, 2)), RATE)
    stream.seek(position)
    model.audio_player.current_streamer = stream
    model.audio_player.sample_rate = RATE
    return stream


def test_add_to_queue_without_selection_raises(library, model):
    with pytest.raises(TrackNotFoundError):
        commands.add_to_queue(model)
    assert len(model.queue) == 0


def test_add_to_queue_adds_selected_track(library, model):
    track = make_track("one")
    library.add_file(track)
    model.active_file_index = 0
    commands.add_to_queue(model)
    assert model.queue.tracks == [track]
    assert model.queue_table.rows == [track.to_playlist_row(0)]


def test_remove_from_queue_removes_current(library, model):
    a, b = make_track("a"), make_track("b")
    model.queue.add(a)
    model.queue.add(b)
    model.queue.current_index = 1
    commands.remove_from_queue(model)
    assert model.queue.tracks == [a]
    assert model.queue_table.rows == [a.to_playlist_row(0)]


def test_remove_from_empty_queue_raises(model):
    with pytest.raises(IndexError):
        commands.remove_from_queue(model)


def test_queue_navigation_wraps(model):
    for title in ("a", "b", "c"):
        model.queue.add(make_track(title))
    commands.play_previous_in_queue(model)
    assert model.queue.current_index == len(model.queue) - 1
    commands.play_next_in_queue(model)
    assert model.queue.current_index == 0


def test_view_queue_switches_view(model):
    from muxic.model import ViewMode

    commands.view_queue(model)
    assert model.view_mode is ViewMode.QUEUE


def test_create_playlist_makes_it_active(model):
    model.playlist_manager = None
    result = commands.create_playlist(model, "Road Trip")
    assert result == commands.PlaylistUpdated()
    assert model.playlist_manager.active_playlist.name == "Road Trip"


def test_create_playlist_empty_name_raises(model):
    with pytest.raises(ValueError):
        commands.create_playlist(model, "")


def test_add_to_playlist_without_selection_raises(library, model):
    with pytest.raises(TrackNotFoundError):
        commands.add_to_playlist(model)


def test_add_to_playlist_creates_default_playlist(library, model):
    track = make_track("one")
    library.add_file(track)
    model.active_file_index = 0
    result = commands.add_to_playlist(model)
    active = model.playlist_manager.active_playlist
    assert isinstance(result, commands.PlaylistUpdated)
    assert active.name == "My Playlist"
    assert active.tracks == [track]
    assert model.playlist_tables[0].rows == [track.to_playlist_row(0)]


def test_remove_from_playlist_moves_cursor_into_range(library, model):
    a, b = make_track("a"), make_track("b")
    library.add_file(a)
    library.add_file(b)
    model.active_file_index = 0
    commands.add_to_playlist(model)
    model.active_file_index = 1
    commands.add_to_playlist(model)

    result = commands.remove_from_playlist(model)
    assert isinstance(result, commands.PlaylistUpdated)
    assert model.playlist_manager.active_playlist.tracks == [a]
    assert model.active_file_index == len(model.playlist_manager.active_playlist.tracks) - 1
    assert model.playlist_tables[0].cursor == model.active_file_index


def test_remove_from_playlist_bad_index_raises(library, model):
    model.active_file_index = 3
    with pytest.raises(IndexError):
        commands.remove_from_playlist(model)


def test_play_without_selection_raises(library, model):
    with pytest.raises(TrackNotFoundError):
        commands.play(model)


def test_play_missing_file_raises(library, tmp_path, model):
    missing = tmp_path / "gone.mp3"
    library.add_file(AudioFile("gone", "A", "B", "00:00", str(missing), "gone.mp3"))
    model.active_file_index = 0
    with pytest.raises(OSError):
        commands.play(model)
    assert model.audio_player.playing is False


def test_pause_without_playback_raises(model):
    with pytest.raises(InvalidStateError):
        commands.pause(model)


def test_pause_pauses_ctrl(model):
    model.audio_player.ctrl = Ctrl()
    model.audio_player.playing = True
    commands.pause(model)
    assert model.audio_player.ctrl.paused is True
    assert model.audio_player.playing is False


def test_stop_resets_state_and_silences_speaker(model):
    stream = load_stream(model, 5)
    model.speaker.play(AudioStream(np.ones((1000, 2)), RATE))
    model.audio_player.playing = True
    model.audio_player.samples_played = 40
    model.progress.set_percent(0.5)

    commands.stop(model)
    assert stream.closed
    assert model.audio_player.current_streamer is None
    assert model.audio_player.samples_played == 0
    assert model.progress.percent == 0.0
    assert not model.speaker.fill(10).any()


def test_skip_forward_moves_ten_seconds(model):
    stream = load_stream(model, 30)
    commands.skip_forward(model)
    assert stream.position() == commands.SKIP_SECONDS * RATE
    assert model.audio_player.samples_played == stream.position()
    assert model.audio_player.played_time == pytest.approx(commands.SKIP_SECONDS)


def test_skip_forward_stops_at_end(model):
    stream = load_stream(model, 5, position=RATE)
    commands.skip_forward(model)
    assert stream.position() == len(stream)


def test_skip_backward_stops_at_start(model):
    stream = load_stream(model, 30, position=RATE * 3)
    commands.skip_backward(model)
    assert stream.position() == 0
    assert model.audio_player.played_time == 0


def test_skip_without_track_leaves_state(model):
    commands.skip_forward(model)
    assert model.audio_player.samples_played == 0
    assert model.audio_player.current_streamer is None


def test_next_and_previous_track_leave_queue(model):
    model.queue.add(make_track("a"))
    model.queue.add(make_track("b"))
    assert commands.next_track(model) is None
    assert commands.previous_track(model) is None
    assert model.queue.current_index == 0


def test_volume_up_and_down(model):
    model.audio_player.volume = Volume()
    commands.volume_up(model)
    assert model.audio_player.volume.volume == pytest.approx(0.1)
    commands.volume_down(model)
    commands.volume_down(model)
    assert model.audio_player.volume.volume == pytest.approx(-0.1)


def test_volume_without_control_raises(model):
    with pytest.raises(InvalidStateError):
        commands.volume_up(model)
    with pytest.raises(InvalidStateError):
        commands.volume_down(model)


def test_volume_mute_toggles(model):
    model.audio_player.volume = Volume()
    commands.volume_mute(model)
    assert model.audio_player.volume.silent is True
    commands.volume_mute(model)
    assert model.audio_player.volume.silent is False


def test_update_cursor_position_clamps_negative(model):
    model.active_file_index = -1
    commands.update_cursor_position(model)
    assert model.active_file_index == 0
    assert model.playlist_tables[0].cursor == 0


def test_update_cursor_position_errors(model):
    with pytest.raises(ValueError):
        commands.update_cursor_position(None)
    model.active_playlist_index = 5
    with pytest.raises(IndexError):
        commands.update_cursor_position(model)
    model.playlist_manager = None
    with pytest.raises(InvalidStateError):
        commands.update_cursor_position(model)