"""Terminal widgets: tables, the progress bar and the search input."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain, repeat

_RESET = "\x1b[0m"
_HEADER_STYLE = "\x1b[1m"
_BORDER_STYLE = "\x1b[38;5;240m"
_SELECTED_STYLE = "\x1b[1;38;5;229;48;5;57m"
_ELLIPSIS = "…"

_DURATION_WIDTH = 10
_INDEX_WIDTH = 5
_SEPARATORS = 2
_DEFAULT_TABLE_HEIGHT = 20

_PROGRESS_WIDTH = 40
_PROGRESS_FULL = "█"
_PROGRESS_EMPTY = "░"
_GRADIENT_START = (0x5A, 0x56, 0xE0)
_GRADIENT_END = (0xEE, 0x6F, 0xF8)
_EMPTY_COLOR = (0x60, 0x60, 0x60)


@dataclass(frozen=True)
class Column:
    """A table column: its heading and its width in characters."""

    title: str
    width: int


def _percent_of(value: int, percent: int) -> int:
    """``value * percent / 100`` truncated toward zero."""
    magnitude = abs(value) * percent // 100
    return magnitude if value >= 0 else -magnitude


def _fit(text: str, width: int) -> str:
    width = max(width, 0)
    if len(text) > width:
        text = text[: width - 1] + _ELLIPSIS if width > 0 else ""
    return text.ljust(width)


def _cell(text: str, width: int) -> str:
    return f" {_fit(text, width)} "


class Table:
    """A scrollable table with a cursor on one row."""

    def __init__(self, columns, rows=(), *, height: int = _DEFAULT_TABLE_HEIGHT,
                 focused: bool = True) -> None:
        self.columns: list[Column] = list(columns)
        self.rows: list[list[str]] = [list(row) for row in rows]
        self.height = max(int(height), 1)
        self.focused = focused
        self.cursor = 0
        self._offset = 0

    def _clamp(self, value: int) -> int:
        return min(max(value, 0), max(len(self.rows) - 1, 0))

    def _refresh_viewport(self) -> None:
        self.cursor = self._clamp(self.cursor)
        if self.cursor < self._offset:
            self._offset = self.cursor
        elif self.cursor >= self._offset + self.height:
            self._offset = self.cursor - self.height + 1
        self._offset = min(self._offset, max(len(self.rows) - self.height, 0))

    def set_rows(self, rows) -> None:
        self.rows = [list(row) for row in rows]
        self._refresh_viewport()

    def set_columns(self, columns) -> None:
        self.columns = list(columns)

    def set_height(self, height: int) -> None:
        self.height = max(int(height), 1)
        self._refresh_viewport()

    def set_cursor(self, cursor: int) -> None:
        self.cursor = self._clamp(cursor)
        self._refresh_viewport()

    def move_cursor(self, delta: int) -> None:
        self.set_cursor(self.cursor + delta)

    def handle_key(self, key: str) -> bool:
        """Move the cursor for a navigation key; return whether the key was one."""
        if not self.focused:
            return False
        half = max(self.height // 2, 1)
        moves = {
            "up": -1, "k": -1,
            "down": 1, "j": 1,
            "pgup": -self.height, "b": -self.height,
            "pgdown": self.height, "f": self.height, " ": self.height,
            "ctrl+u": -half, "u": -half,
            "ctrl+d": half, "d": half,
        }
        if key in moves:
            self.move_cursor(moves[key])
        elif key in ("home", "g"):
            self.set_cursor(0)
        elif key in ("end", "G"):
            self.set_cursor(len(self.rows) - 1)
        else:
            return False
        return True

    def _row_text(self, row) -> str:
        cells = chain(row, repeat(""))
        return "".join(_cell(str(text), column.width) for column, text in zip(self.columns, cells))

    def render(self) -> str:
        total = sum(max(column.width, 0) + 2 for column in self.columns)
        header = "".join(_cell(column.title, column.width) for column in self.columns)
        lines = [
            _HEADER_STYLE + header + _RESET,
            _BORDER_STYLE + "─" * total + _RESET,
        ]
        visible = self.rows[self._offset:self._offset + self.height]
        for index, row in enumerate(visible, start=self._offset):
            text = self._row_text(row)
            if index == self.cursor:
                text = _SELECTED_STYLE + text + _RESET
            lines.append(text)
        return "\n".join(lines)


class ProgressBar:
    """A horizontal bar filled in proportion to a percentage."""

    def __init__(self, width: int = _PROGRESS_WIDTH) -> None:
        self.width = width
        self.percent = 0.0

    def set_percent(self, percent: float) -> None:
        self.percent = min(max(float(percent), 0.0), 1.0)

    def render(self) -> str:
        width = max(self.width, 0)
        filled = min(int(width * self.percent + 0.5), width)
        parts = []
        for i in range(filled):
            t = i / (filled - 1) if filled > 1 else 0.0
            color = tuple(round(a + (b - a) * t) for a, b in zip(_GRADIENT_START, _GRADIENT_END))
            parts.append(_foreground(color) + _PROGRESS_FULL)
        parts.append(_foreground(_EMPTY_COLOR) + _PROGRESS_EMPTY * (width - filled))
        return "".join(parts) + _RESET


def _foreground(rgb) -> str:
    r, g, b = rgb
    return f"\x1b[38;2;{r};{g};{b}m"


class SearchInput:
    """A one-line text field that edits only while focused."""

    def __init__(self, placeholder: str = "", prompt: str = "> ", width: int = 0) -> None:
        self.value = ""
        self.placeholder = placeholder
        self.prompt = prompt
        self.width = width
        self.focused = False
        self.position = 0

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def handle_key(self, key: str) -> bool:
        """Apply an editing key; return whether it was handled."""
        if not self.focused:
            return False
        value, pos = self.value, self.position
        if key == "backspace":
            if pos > 0:
                value, pos = value[:pos - 1] + value[pos:], pos - 1
        elif key == "delete":
            value = value[:pos] + value[pos + 1:]
        elif key in ("left", "ctrl+b"):
            pos = max(pos - 1, 0)
        elif key in ("right", "ctrl+f"):
            pos = min(pos + 1, len(value))
        elif key in ("home", "ctrl+a"):
            pos = 0
        elif key in ("end", "ctrl+e"):
            pos = len(value)
        elif key == "ctrl+u":
            value, pos = value[pos:], 0
        elif key == "ctrl+k":
            value = value[:pos]
        elif key == "space" or (len(key) == 1 and key.isprintable()):
            char = " " if key == "space" else key
            value, pos = value[:pos] + char + value[pos:], pos + 1
        else:
            return False
        self.value, self.position = value, pos
        return True

    def render(self) -> str:
        text = self.value or self.placeholder
        if self.width > 0 and len(text) > self.width:
            text = text[-self.width:] if self.value else text[:self.width]
        return self.prompt + text


def library_table_columns(width: int) -> list[Column]:
    """Library columns: title and artist share 40% each, album 20%."""
    remaining = width - _DURATION_WIDTH - _SEPARATORS
    return [
        Column("Title", _percent_of(remaining, 40)),
        Column("Artist", _percent_of(remaining, 40)),
        Column("Album", _percent_of(remaining, 20)),
        Column("Duration", _DURATION_WIDTH),
    ]


def playlist_table_columns(width: int) -> list[Column]:
    """Numbered track columns for playlists."""
    remaining = width - _DURATION_WIDTH - _INDEX_WIDTH - _SEPARATORS
    return [
        Column("#", _INDEX_WIDTH),
        Column("Title", _percent_of(remaining, 40)),
        Column("Artist", _percent_of(remaining, 40)),
        Column("Album", _percent_of(remaining, 20)),
        Column("Duration", _DURATION_WIDTH),
    ]


def queue_table_columns(width: int) -> list[Column]:
    """Numbered track columns for the queue."""
    return playlist_table_columns(width)


def new_library_table(columns, rows) -> Table:
    return Table(columns, rows, focused=True)


def new_playlist_table(columns, rows) -> Table:
    return Table(columns, rows, focused=True)


def new_queue_table(columns, rows) -> Table:
    return Table(columns, rows, focused=True)


def new_progress_bar() -> ProgressBar:
    return ProgressBar()


def new_search_input() -> SearchInput:
    return SearchInput(placeholder="Search...", prompt="> ")