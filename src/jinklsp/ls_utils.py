"""
Text helpers for converting between offsets, positions and words.
"""

import bisect
import re

from jinklsp.ls_types import Position

_LINE_SPLIT_PATTERN = re.compile(r"\r?\n")
_WORD_PATTERN = re.compile(r"[a-zA-Z0-9_]+")


class TextUtils:
    @staticmethod
    def split_lines(text: str) -> list[str]:
        """Split text into lines, accepting both LF and CRLF line endings."""
        return _LINE_SPLIT_PATTERN.split(text)

    @staticmethod
    def get_line(text: str, line: int) -> str:
        lines = TextUtils.split_lines(text)
        if 0 <= line < len(lines):
            return lines[line]
        return ""

    @staticmethod
    def word_span_at(line: str, character: int) -> tuple[int, str] | None:
        """
        Find the word touching the given character, including a cursor placed right after it.

        :return: (start column, word) or None if no word touches the character
        """
        for match in _WORD_PATTERN.finditer(line):
            if match.start() <= character <= match.end():
                return match.start(), match.group(0)
        return None

    @staticmethod
    def word_at(line: str, character: int) -> str | None:
        span = TextUtils.word_span_at(line, character)
        return span[1] if span else None


class OffsetIndex:
    """Maps absolute offsets of a text to (line, character) positions."""

    def __init__(self, text: str) -> None:
        self._line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(i + 1)

    def position_at(self, offset: int) -> Position:
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line, offset - self._line_starts[line])
