import numpy as np
import pytest

from muxic.audio import AudioFile, AudioStream
from muxic.audio_player import Volume
from muxic.library import get_library
from muxic.model import KeyPress, Model, Tick, ViewMode, WindowSize
from muxic.types import InvalidStateError, TrackNotFoundError
from muxic.ui import library_table_columns, queue_table_columns


def make_track(n):
    return AudioFile(f"Song {n}", f"Artist {n}", "Album", "03:00", f"/music/{n}.mp3", f"{n}.mp3")


@pytest.fixture
def library():
    lib = get_library()
    lib.clear()
    yield lib
    lib.clear()


@pytest.fixture
def model(library):
    return Model()


@pytest.fixture
def tracks(library):
    items = [make_track(n) for n in (1, 2, 3)]
    for item in items:
        library.add_file(item)
    return items


@pytest.fixture
def full_model(tracks):
    return Model()


def test_view_mode_cycles():
    for mode in ViewMode:
        assert mode.next().prev() == mode
    assert ViewMode.QUEUE.next() == ViewMode.LIBRARY
    assert ViewMode.LIBRARY.prev() == ViewMode.QUEUE


def test_view_mode_labels():
    assert str(ViewMode.QUEUE.next()) == "Library"
    assert str(ViewMode.LIBRARY.next().next()) == "Playlist"
    assert f"{ViewMode.LIBRARY.prev()}" == "Queue"


def test_view_mode_is_playlist_view():
    assert ViewMode.PLAYLISTS.is_playlist_view()
    assert ViewMode.PLAYLIST_TRACKS.is_playlist_view()
    assert not ViewMode.LIBRARY.is_playlist_view()
    assert not ViewMode.QUEUE.is_playlist_view()


def test_new_model_has_no_selection(model):
    assert model.active_file_index == -1
    assert model.view_mode == ViewMode.LIBRARY
    assert model.current_file_path() == ""


def test_tab_cycles_views(model):
    seen = []
    for _ in range(3):
        model.update(KeyPress("tab"))
        seen.append(model.view_mode)
    assert seen == [ViewMode.PLAYLISTS, ViewMode.QUEUE, ViewMode.LIBRARY]


def test_view_queue_key(model):
    model.update(KeyPress("v"))
    assert model.view_mode == ViewMode.QUEUE


def test_down_key_moves_selection(full_model):
    full_model.update(KeyPress("down"))
    assert full_model.active_file_index == 1
    assert full_model.current_file_path() == "/music/2.mp3"


def test_search_filters_library(full_model, tracks):
    full_model.update(KeyPress("/"))
    assert full_model.search.is_searching
    full_model.update(KeyPress("2"))
    assert full_model.library_table.rows == [tracks[1].to_library_row()]
    full_model.update(KeyPress("backspace"))
    assert len(full_model.library_table.rows) == len(tracks)
    full_model.update(KeyPress("enter"))
    assert not full_model.search.is_searching
    assert not full_model.search_input.focused


def test_search_only_in_library_view(model):
    model.update(KeyPress("tab"))
    model.update(KeyPress("/"))
    assert not model.search.is_searching


def test_quit_key(model):
    model.update(KeyPress("q"))
    assert model.quitting


def test_resize_applies_minimums(model):
    model.update(WindowSize(20, 4))
    assert model.width == 20
    assert model.library_table.height == 3
    assert model.library_table.columns == library_table_columns(40)
    assert model.queue_table.columns == queue_table_columns(40)
    assert model.progress.width == 20
    assert model.search_input.width == 20


def test_handle_tick_sets_progress(model):
    player = model.audio_player
    player.playing = True
    player.total_samples = 100
    player.samples_played = 50
    model.handle_tick()
    assert model.progress.percent == pytest.approx(0.5)


def test_handle_tick_caps_at_full(model):
    player = model.audio_player
    player.playing = True
    player.total_samples = 100
    player.samples_played = 150
    model.handle_tick()
    assert model.progress.percent == 1.0
    assert not player.playing


def test_play_without_selection_sets_error(model):
    model.update(KeyPress("p"))
    assert isinstance(model.error, TrackNotFoundError)
    model.update(Tick())
    assert "Error: no track selected" in model.error_view()
    model.update(KeyPress("x"))
    assert model.error is None
    assert model.error_view() == ""


def test_volume_up_without_track_is_error(model):
    model.update(KeyPress("+"))
    assert isinstance(model.error, InvalidStateError)
    assert "Error:" in model.error_view()
    assert model.audio_player.volume is None


def test_volume_up_raises_level(model):
    model.audio_player.volume = Volume(volume=0.0)
    model.update(KeyPress("+"))
    model.update(KeyPress("+"))
    assert model.audio_player.volume.volume == pytest.approx(0.2)


def test_add_to_queue_key(full_model, tracks):
    full_model.update(KeyPress("down"))
    full_model.update(KeyPress("a"))
    assert full_model.queue.tracks == [tracks[1]]
    assert full_model.queue_table.rows == [tracks[1].to_playlist_row(0)]


def test_add_to_playlist_key(full_model, tracks):
    full_model.update(KeyPress("ctrl+a"))
    manager = full_model.playlist_manager
    assert manager.active_playlist.name == "My Playlist"
    assert manager.active_playlist.tracks == [tracks[0]]
    assert full_model.playlist_tables[0].rows == [tracks[0].to_playlist_row(0)]


def test_create_playlist_key(model):
    model.update(KeyPress("ctrl+n"))
    assert model.playlist_manager.active_playlist.name == "New Playlist"


def test_clear_queue_key(full_model):
    full_model.update(KeyPress("a"))
    full_model.update(KeyPress("shift+d"))
    assert len(full_model.queue) == 0


def test_finished_track_advances_queue(model, tracks):
    model.queue.add(tracks[0])
    model.queue.add(tracks[1])
    player = model.audio_player
    player.playing = True
    player.total_samples = 100
    player.samples_played = 100
    model.update(KeyPress("tab"))
    assert model.queue.current_index == 1
    assert model.view_mode == ViewMode.LIBRARY


def test_skip_keys_move_stream(model):
    rate = 1000
    stream = AudioStream(np.zeros((rate * 30, 2)), rate)
    player = model.audio_player
    player.current_streamer = stream
    player.sample_rate = rate
    model.update(KeyPress("n"))
    assert stream.position() == 10 * rate
    assert player.samples_played == 10 * rate
    model.update(KeyPress("b"))
    model.update(KeyPress("b"))
    assert stream.position() == 0


def test_current_file_path_in_queue_view(model, tracks):
    model.queue.add(tracks[2])
    model.view_mode = ViewMode.QUEUE
    model.active_file_index = 0
    assert model.current_file_path() == tracks[2].path
    model.active_file_index = 1
    assert model.current_file_path() == ""


def test_update_playlist_table_without_active_playlist(model):
    model.playlist_manager.active_playlist = None
    model.update_playlist_table()
    assert model.playlist_tables[0].rows == []


def test_view_shows_status_and_time(full_model):
    screen = full_model.view()
    assert " Library | Tab: Switch View | Q: Quit" in screen
    assert "00:00 / 00:00" in screen
    assert "Song 1" in screen
    assert "Search..." in screen


def test_view_of_queue_has_title(model):
    model.update(KeyPress("v"))
    screen = model.view()
    assert "Queue" in screen
    assert "Search..." not in screen