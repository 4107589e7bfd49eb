import pytest

from muxic.types import (
    AudioFileNotFoundError,
    ComponentView,
    Config,
    Event,
    InvalidFormatError,
    InvalidStateError,
    LibraryStats,
    NoActivePlaylistError,
    PlaybackInfo,
    PlaybackState,
    PlayerController,
    PlayerError,
    PlaylistEmptyError,
    RepeatMode,
    Theme,
    TrackNotFoundError,
    default_shortcuts,
)


def test_default_shortcuts_values():
    keys = default_shortcuts()
    assert keys.play_pause == " "
    assert keys.toggle_view == "tab"
    assert keys.quit == "q"
    assert keys.toggle_shuffle == "S"
    assert keys.toggle_repeat == "r"


def test_enums_are_ordered():
    config = Config()
    info = PlaybackInfo()
    assert info.state < PlaybackState.PLAYING < PlaybackState.PAUSED
    assert config.repeat_mode < RepeatMode.ONE < RepeatMode.ALL
    assert list(ComponentView)[0] is config.default_view
    assert list(ComponentView)[-1] is ComponentView.SETTINGS


@pytest.mark.parametrize(
    "error_type, message",
    [
        (NoActivePlaylistError, "no active playlist"),
        (PlaylistEmptyError, "playlist is empty"),
        (TrackNotFoundError, "track not found"),
        (InvalidStateError, "invalid player state"),
        (AudioFileNotFoundError, "file not found"),
        (InvalidFormatError, "invalid audio format"),
    ],
)
def test_error_messages(error_type, message):
    error = error_type()
    assert str(error) == message
    assert isinstance(error, PlayerError)


def test_error_custom_message():
    assert str(PlaylistEmptyError("custom")) == "custom"


def test_config_defaults():
    config = Config()
    assert config.repeat_mode is RepeatMode.OFF
    assert config.default_view is ComponentView.LIBRARY
    assert config.theme == Theme()
    assert config.shuffle is False


def test_playback_info_and_stats_defaults():
    info = PlaybackInfo()
    assert info.state is PlaybackState.STOPPED
    assert info.current_track is None
    assert LibraryStats().total_tracks == 0


def test_event_holds_data():
    event = Event("play", "started", data={"index": 2})
    assert event.type == "play"
    assert event.data == {"index": 2}
    assert event.time is not None and event.message == "started"


def test_controller_is_abstract():
    with pytest.raises(TypeError):
        PlayerController()


def test_controller_subclass_works():
    class Dummy(PlayerController):
        def __init__(self):
            self.muted = False

        def play(self): pass
        def pause(self): pass
        def stop(self): pass
        def next(self): pass
        def previous(self): pass
        def seek(self, pos): pass
        def set_volume(self, vol): pass
        def toggle_mute(self): self.muted = not self.muted
        def toggle_repeat(self): pass
        def toggle_shuffle(self): pass
        def playback_info(self): return PlaybackInfo(is_muted=self.muted)

    player = Dummy()
    player.toggle_mute()
    assert player.playback_info() == PlaybackInfo(is_muted=True)
    assert player.playback_info() != PlaybackInfo(is_muted=False)