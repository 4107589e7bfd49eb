"""Key bindings for the application."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    """A set of key names bound to one action, with its help text."""

    keys: tuple[str, ...]
    help_key: str
    help_desc: str

    def matches(self, key: str) -> bool:
        return key in self.keys


@dataclass(frozen=True)
class KeyMap:
    """All key bindings of the application."""

    up: KeyBinding
    down: KeyBinding
    left: KeyBinding
    right: KeyBinding
    back: KeyBinding

    play: KeyBinding
    pause: KeyBinding
    stop: KeyBinding
    skip_backward: KeyBinding
    skip_forward: KeyBinding
    next_track: KeyBinding
    previous_track: KeyBinding

    volume_up: KeyBinding
    volume_down: KeyBinding
    volume_mute: KeyBinding

    quit: KeyBinding

    search: KeyBinding
    toggle_view: KeyBinding

    create_playlist: KeyBinding
    add_to_playlist: KeyBinding
    remove_from_playlist: KeyBinding

    add_to_queue: KeyBinding
    remove_from_queue: KeyBinding
    view_queue: KeyBinding
    play_next: KeyBinding
    clear_queue: KeyBinding

    def full_help(self) -> list[list[KeyBinding]]:
        """Bindings grouped for the help view."""
        return [
            [self.up, self.down, self.left, self.right],
            [self.play, self.pause, self.stop],
            [self.previous_track, self.next_track, self.play_next],
            [self.volume_down, self.volume_up, self.volume_mute],
            [self.search, self.toggle_view, self.view_queue],
            [self.add_to_queue, self.clear_queue],
            [self.quit],
        ]


def default_key_map() -> KeyMap:
    """The default key bindings."""
    return KeyMap(
        up=KeyBinding(("up", "k"), "↑/k", "move up"),
        down=KeyBinding(("down", "j"), "↓/j", "move down"),
        left=KeyBinding(("left", "h"), "←/h", "back"),
        right=KeyBinding(("right", "l"), "→/l", "select"),
        back=KeyBinding(("esc",), "esc", "back"),
        play=KeyBinding((" ", "p", "enter"), "space/p/enter", "play/pause/select"),
        pause=KeyBinding((" ", "p"), "space/p", "play/pause"),
        stop=KeyBinding(("s",), "s", "stop"),
        skip_backward=KeyBinding(("b",), "b", "skip backward"),
        skip_forward=KeyBinding(("n",), "n", "skip forward"),
        next_track=KeyBinding(("]",), "]", "next track"),
        previous_track=KeyBinding(("[",), "[", "previous track"),
        volume_up=KeyBinding(("+",), "+", "volume up"),
        volume_down=KeyBinding(("-",), "-", "volume down"),
        volume_mute=KeyBinding(("m",), "m", "toggle mute"),
        quit=KeyBinding(("ctrl+c", "q"), "q/ctrl+c", "quit"),
        search=KeyBinding(("/",), "/", "search"),
        toggle_view=KeyBinding(("tab",), "tab", "toggle view"),
        create_playlist=KeyBinding(("ctrl+n",), "ctrl+n", "new playlist"),
        add_to_playlist=KeyBinding(("ctrl+a",), "ctrl+a", "add to playlist"),
        remove_from_playlist=KeyBinding(("d",), "d", "remove from playlist"),
        add_to_queue=KeyBinding(("a",), "a", "add to queue"),
        remove_from_queue=KeyBinding(("d",), "d", "remove from queue"),
        view_queue=KeyBinding(("v",), "v", "view queue"),
        play_next=KeyBinding(("n",), "n", "play next in queue"),
        clear_queue=KeyBinding(("shift+d",), "shift+d", "clear queue"),
    )


DEFAULT_KEY_MAP = default_key_map()