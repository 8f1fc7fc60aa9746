from __future__ import annotations

from bisect import bisect_right
from typing import List

from lsprotocol import types as lsp


class LineIndex:
    """Converts between character offsets and line/column positions of a text."""

    def __init__(self, text: str):
        self.text = text
        self._line_starts: List[int] = [0]
        for idx, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(idx + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position_at(self, offset: int) -> lsp.Position:
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self._line_starts, offset) - 1
        return lsp.Position(line=line, character=offset - self._line_starts[line])

    def offset_at(self, position: lsp.Position) -> int:
        if position.line >= len(self._line_starts):
            return len(self.text)
        line_start = self._line_starts[position.line]
        if position.line + 1 < len(self._line_starts):
            line_end = self._line_starts[position.line + 1] - 1
        else:
            line_end = len(self.text)
        return min(line_start + position.character, line_end)

    def range_of(self, start: int, end: int) -> lsp.Range:
        return lsp.Range(start=self.position_at(start), end=self.position_at(end))

    def first_char_range(self) -> lsp.Range:
        """Range of the first character, or an empty range for empty text."""
        return self.range_of(0, min(1, len(self.text)))


def document_start_range() -> lsp.Range:
    return lsp.Range(
        start=lsp.Position(line=0, character=0),
        end=lsp.Position(line=0, character=0),
    )
