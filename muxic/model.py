"""The application model: state, key handling and rendering of the player screen."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum

from muxic import commands
from muxic.audio import format_duration
from muxic.audio_player import AudioPlayer
from muxic.keymaps import DEFAULT_KEY_MAP
from muxic.library import get_library
from muxic.playlist import PlaylistManager
from muxic.queue import Queue
from muxic.search import Search
from muxic.speaker import Speaker
from muxic.types import PlayerError
from muxic.ui import (
    library_table_columns,
    new_library_table,
    new_playlist_table,
    new_progress_bar,
    new_queue_table,
    new_search_input,
    playlist_table_columns,
    queue_table_columns,
)

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 24
SAMPLE_RATE = 44100
TICK_INTERVAL = 0.1
FINISHED_PROGRESS = 0.99
NEW_PLAYLIST_NAME = "New Playlist"

_RESET = "\x1b[0m"
_ERROR_COLOR = "\x1b[38;2;255;0;0m"
_BOLD = "\x1b[1m"
_TITLE_STYLE = "\x1b[1;38;5;62m"
_TIME_STYLE = "\x1b[1;38;5;240m"
_STATUS_STYLE = "\x1b[1;38;5;15;48;5;62m"

_COMMAND_ERRORS = (PlayerError, LookupError, ValueError, OSError)


class ViewMode(IntEnum):
    """The views of the application."""

    LIBRARY = 0
    PLAYLISTS = 1
    PLAYLIST_TRACKS = 2
    QUEUE = 3

    @property
    def label(self) -> str:
        return _VIEW_LABELS[self]

    def __str__(self) -> str:
        return self.label

    def __format__(self, spec: str) -> str:
        return format(self.label, spec)

    def next(self) -> ViewMode:
        return ViewMode((int(self) + 1) % 4)

    def prev(self) -> ViewMode:
        return ViewMode((int(self) + 3) % 4)

    def is_playlist_view(self) -> bool:
        return self in (ViewMode.PLAYLIST_TRACKS, ViewMode.PLAYLISTS)


_VIEW_LABELS = {
    ViewMode.LIBRARY: "Library",
    ViewMode.PLAYLISTS: "Playlists",
    ViewMode.PLAYLIST_TRACKS: "Playlist",
    ViewMode.QUEUE: "Queue",
}


@dataclass(frozen=True)
class KeyPress:
    """A key was pressed; ``key`` is its name, such as ``"q"`` or ``"ctrl+a"``."""

    key: str


@dataclass(frozen=True)
class WindowSize:
    """The terminal has a new size."""

    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    """Periodic message that drives the progress bar."""

    time: float = field(default_factory=time.monotonic)


class Model:
    """All state of the running player and the logic that reacts to messages."""

    def __init__(self, speaker: Speaker | None = None) -> None:
        library = get_library()
        self.speaker = speaker if speaker is not None else Speaker(SAMPLE_RATE, SAMPLE_RATE // 10)

        self.library_columns = library_table_columns(DEFAULT_WIDTH)
        self.library_table = new_library_table(self.library_columns, library.to_table_rows())
        self.search_input = new_search_input()
        self.playlist_tables = [new_playlist_table(playlist_table_columns(DEFAULT_WIDTH), [])]
        self.queue_table = new_queue_table(queue_table_columns(DEFAULT_WIDTH), [])
        self.active_playlist_index = 0
        self.progress = new_progress_bar()

        self.playlist_manager: PlaylistManager | None = PlaylistManager()
        self.active_file_index = -1
        self.search = Search()
        self.audio_player = AudioPlayer()
        self.queue = Queue()

        self.view_mode = ViewMode.LIBRARY
        self.width = DEFAULT_WIDTH
        self.height = DEFAULT_HEIGHT
        self.progress_width = DEFAULT_WIDTH
        self.error: BaseException | None = None
        self.quitting = False

    # --- message handling ---------------------------------------------------

    def update(self, msg) -> None:
        """React to one message."""
        if not isinstance(msg, Tick):
            self.error = None

        if self.search.is_searching and self.view_mode == ViewMode.LIBRARY:
            self._handle_search_input(msg)
            return

        player = self.audio_player
        if player is not None and player.playing and player.progress() >= FINISHED_PROGRESS:
            self._run(commands.play_next_in_queue)
            return

        if isinstance(msg, KeyPress):
            self.handle_key(msg.key)
        elif isinstance(msg, WindowSize):
            self.resize(msg.width, msg.height)
        elif isinstance(msg, Tick):
            self.handle_tick()

    def handle_tick(self) -> None:
        """Move the progress bar to the share of the track played."""
        player = self.audio_player
        if not player.playing or player.total_samples <= 0:
            return
        percent = player.samples_played / player.total_samples
        if percent > 1.0:
            percent = 1.0
            player.playing = False
        self.progress.set_percent(percent)

    def _active_table(self):
        if self.view_mode == ViewMode.LIBRARY:
            return self.library_table
        if self.view_mode.is_playlist_view():
            return self.playlist_tables[self.active_playlist_index]
        return self.queue_table

    def _run(self, action, *args):
        try:
            return action(self, *args)
        except _COMMAND_ERRORS as exc:
            self.error = exc
            return None

    def handle_key(self, key: str) -> None:
        """Let the visible table move its cursor, then run the bound action, if any."""
        table = self._active_table()
        table.handle_key(key)
        self.active_file_index = table.cursor

        keys = DEFAULT_KEY_MAP
        actions = (
            (keys.play, commands.play),
            (keys.pause, commands.pause),
            (keys.stop, commands.stop),
            (keys.skip_backward, commands.skip_backward),
            (keys.skip_forward, commands.skip_forward),
            (keys.volume_up, commands.volume_up),
            (keys.volume_down, commands.volume_down),
            (keys.volume_mute, commands.volume_mute),
            (keys.next_track, commands.next_track),
            (keys.previous_track, commands.previous_track),
        )

        if keys.toggle_view.matches(key):
            self._toggle_view()
            return
        for binding, action in actions:
            if binding.matches(key):
                self._run(action)
                return
        if keys.search.matches(key):
            self._toggle_search()
        elif keys.create_playlist.matches(key):
            self._run(commands.create_playlist, NEW_PLAYLIST_NAME)
        elif keys.add_to_playlist.matches(key):
            self._run(commands.add_to_playlist)
        elif keys.remove_from_playlist.matches(key):
            self._run(commands.remove_from_playlist)
        elif keys.add_to_queue.matches(key):
            self._run(commands.add_to_queue)
        elif keys.view_queue.matches(key):
            self._run(commands.view_queue)
        elif keys.play_next.matches(key):
            self._run(commands.play_next_in_queue)
        elif keys.clear_queue.matches(key):
            self.queue.clear()
        elif keys.quit.matches(key):
            self.quitting = True

    def _toggle_search(self) -> None:
        if self.view_mode != ViewMode.LIBRARY:
            return
        self.search.is_searching = not self.search.is_searching
        if self.search.is_searching:
            self.search_input.focus()
        else:
            self.search_input.blur()

    def _toggle_view(self) -> None:
        self.view_mode = {
            ViewMode.LIBRARY: ViewMode.PLAYLISTS,
            ViewMode.PLAYLISTS: ViewMode.QUEUE,
            ViewMode.QUEUE: ViewMode.LIBRARY,
        }.get(self.view_mode, ViewMode.LIBRARY)

    def _handle_search_input(self, msg) -> None:
        if not isinstance(msg, KeyPress):
            return
        if msg.key in ("enter", "esc"):
            self.search.is_searching = False
            self.search_input.blur()
            return

        self.search_input.handle_key(msg.key)
        query = self.search_input.value.lower()
        library = get_library()
        if not query:
            self.library_table.set_rows(library.to_table_rows())
        else:
            self.library_table.set_rows(
                file.to_library_row()
                for file in library.files
                if query in file.title.lower() or query in file.artist.lower()
            )

    # --- layout ---------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Fit tables, progress bar and search field to a terminal of this size."""
        self.width = width
        self.height = height
        content_height = max(height - 6, 3)
        content_width = max(width - 4, 40)

        self.library_table.set_columns(library_table_columns(content_width))
        self.library_table.set_height(content_height)
        playlist_table = self.playlist_tables[self.active_playlist_index]
        playlist_table.set_columns(playlist_table_columns(content_width))
        playlist_table.set_height(content_height)
        self.queue_table.set_columns(queue_table_columns(content_width))
        self.queue_table.set_height(content_height)

        self.progress_width = width
        self.progress.width = width
        self.search_input.width = width

    def update_playlist_table(self) -> None:
        """Show the active playlist's tracks in the playlist table."""
        manager = self.playlist_manager
        if manager is None or manager.active_playlist is None:
            return
        rows = manager.to_table_rows(manager.active_playlist.id)
        if 0 <= self.active_playlist_index < len(self.playlist_tables):
            self.playlist_tables[self.active_playlist_index].set_rows(rows)

    def update_queue_table(self) -> None:
        """Show the queue's tracks in the queue table."""
        if self.queue is None:
            return
        self.queue_table.set_rows(self.queue.to_table_rows())

    def current_file_path(self) -> str:
        """Path of the selected track in the current view, or ``""`` if none."""
        index = self.active_file_index
        if self.view_mode == ViewMode.LIBRARY:
            library = get_library()
            if not 0 <= index < len(library):
                return ""
            return library.get_file(index).path
        if self.view_mode.is_playlist_view():
            manager = self.playlist_manager
            if manager is None or not 0 <= index < len(manager):
                return ""
            return manager.active_playlist.tracks[index].path
        if self.view_mode == ViewMode.QUEUE:
            if not 0 <= index < len(self.queue):
                return ""
            return self.queue.tracks[index].path
        return ""

    # --- rendering --------------------------------------------------------------

    def error_view(self) -> str:
        """The current error in a red box, or ``""`` when there is none."""
        if self.error is None:
            return ""
        text = f" Error: {self.error} "
        edge = "─" * len(text)
        return "\n".join([
            f"{_ERROR_COLOR}╭{edge}╮{_RESET}",
            f"{_ERROR_COLOR}│{_RESET}{_BOLD}{_ERROR_COLOR}{text}{_RESET}{_ERROR_COLOR}│{_RESET}",
            f"{_ERROR_COLOR}╰{edge}╯{_RESET}",
            "",
        ])

    def _render_search(self) -> str:
        if self.search is not None and self.view_mode == ViewMode.LIBRARY:
            return self.search_input.render()
        return ""

    def _render_titled(self, title: str, table) -> str:
        return f"{_TITLE_STYLE}{title}{_RESET}\n\n{table.render()}"

    def _render_content(self) -> str:
        if self.view_mode == ViewMode.LIBRARY:
            return self.library_table.render()
        if self.view_mode == ViewMode.PLAYLISTS:
            return self._render_titled("Playlists", self.playlist_tables[self.active_playlist_index])
        if self.view_mode == ViewMode.QUEUE:
            return self._render_titled("Queue", self.queue_table)
        return ""

    def _render_progress_bar(self) -> str:
        return "\n" + self.progress.render()

    def _render_time_display(self) -> str:
        text = (f"{format_duration(self.audio_player.played_time)} / "
                f"{format_duration(self.audio_player.total_time)}")
        return f"{_TIME_STYLE}{text.ljust(self.width)}{_RESET}"

    def _render_status_bar(self) -> str:
        text = f" {self.view_mode.label} | Tab: Switch View | Q: Quit"
        return f"\n{_STATUS_STYLE}{text.ljust(self.width)}{_RESET}"

    def view(self) -> str:
        """The whole screen as text."""
        parts = [
            self.error_view(),
            self._render_search(),
            self._render_content(),
            self._render_progress_bar(),
            self._render_time_display(),
            self._render_status_bar(),
        ]
        return "\n".join(part for part in parts if part)

    # --- terminal loop -------------------------------------------------------------

    def run(self) -> None:
        """Drive the model from the terminal until the quit key is pressed."""
        from blessed import Terminal

        term = Terminal()
        size = None
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            while not self.quitting:
                current = (term.width, term.height)
                if current != size:
                    size = current
                    self.update(WindowSize(*current))
                print(term.home + term.clear + self.view(), end="", flush=True)
                try:
                    keystroke = term.inkey(timeout=TICK_INTERVAL)
                except KeyboardInterrupt:
                    self.quitting = True
                    break
                if keystroke:
                    self.update(KeyPress(_key_name(keystroke)))
                else:
                    self.update(Tick())
        self.speaker.clear()


_SEQUENCE_NAMES = {
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_ENTER": "enter",
    "KEY_ESCAPE": "esc",
    "KEY_TAB": "tab",
    "KEY_BACKSPACE": "backspace",
    "KEY_DELETE": "delete",
    "KEY_HOME": "home",
    "KEY_END": "end",
    "KEY_PGUP": "pgup",
    "KEY_PGDOWN": "pgdown",
}

_CHAR_NAMES = {
    "\t": "tab",
    "\r": "enter",
    "\n": "enter",
    "\x1b": "esc",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def _key_name(keystroke) -> str:
    if getattr(keystroke, "is_sequence", False):
        name = _SEQUENCE_NAMES.get(keystroke.name)
        if name is not None:
            return name
    text = str(keystroke)
    if text in _CHAR_NAMES:
        return _CHAR_NAMES[text]
    if len(text) == 1 and ord(text) < 32:
        return "ctrl+" + chr(ord(text) + 96)
    return text