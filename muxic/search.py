"""Search state and a word index over table rows."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass


@dataclass
class Search:
    """Whether the search input is active."""

    is_searching: bool = False


@dataclass
class SearchResult:
    """A matching row and its position among the indexed rows."""

    row: list[str]
    index: int


def _build_index(rows: list[list[str]]) -> dict[str, list[int]]:
    index: dict[str, list[int]] = {}
    for row_index, row in enumerate(rows):
        words = {word for cell in row for word in cell.lower().split()}
        for word in words:
            index.setdefault(word, []).append(row_index)
    return index


class SearchIndex:
    """Rows indexed by the lower-case words they contain."""

    def __init__(self, rows, index: dict[str, list[int]] | None = None) -> None:
        self.rows = [list(row) for row in rows]
        self.index = _build_index(self.rows) if index is None else index

    def search(self, query: str) -> tuple[list[list[str]], list[int]]:
        """Return rows holding every word of ``query`` and their indices, in row order.

        An empty or blank query returns all rows.
        """
        words = query.lower().split()
        if not words:
            return list(self.rows), list(range(len(self.rows)))

        counts = Counter(idx for word in words for idx in self.index.get(word, ()))
        matches = sorted(idx for idx, count in counts.items() if count == len(words))
        return [self.rows[idx] for idx in matches], matches