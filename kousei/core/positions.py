"""
Position Index Module

Maps between absolute character offsets and 0-based line/column positions
for a single document.
"""

from bisect import bisect_right
from typing import List

from .errors import InvalidPosition, OutOfRange
from .models import Position


class PositionIndex:
    """
    Line-start table for one document.

    Built once in linear time; lookups from offset to position are a binary
    search over the recorded line starts. The index never holds on to the
    document text beyond what line_text needs.
    """

    def __init__(self, document: str):
        self._document = document
        self.length = len(document)
        self.line_starts: List[int] = [0]
        for offset, char in enumerate(document):
            if char == '\n':
                self.line_starts.append(offset + 1)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def line_length(self, line: int) -> int:
        """Length of a line, excluding its terminating newline."""
        if line < 0 or line >= self.line_count:
            raise InvalidPosition(line, 0, f"document has {self.line_count} lines")
        start = self.line_starts[line]
        if line + 1 < self.line_count:
            return self.line_starts[line + 1] - 1 - start
        return self.length - start

    def line_text(self, line: int) -> str:
        start = self.line_starts[line] if 0 <= line < self.line_count else 0
        return self._document[start:start + self.line_length(line)]

    def offset_to_position(self, offset: int) -> Position:
        """
        Convert an absolute offset into a line/column position.

        Args:
            offset: Offset in [0, length]

        Returns:
            Position object

        Raises:
            OutOfRange: if the offset is negative or past the end
        """
        if offset < 0 or offset > self.length:
            raise OutOfRange(offset, self.length)
        line = bisect_right(self.line_starts, offset) - 1
        return Position(line=line, column=offset - self.line_starts[line])

    def position_to_offset(self, position: Position) -> int:
        """
        Convert a line/column position into an absolute offset.

        A column equal to the line length addresses the end of that line.

        Raises:
            InvalidPosition: if the line does not exist or the column is past the line end
        """
        line, column = position.line, position.column
        if line < 0 or line >= self.line_count:
            raise InvalidPosition(line, column, f"document has {self.line_count} lines")
        if column < 0 or column > self.line_length(line):
            raise InvalidPosition(line, column, f"line {line} has {self.line_length(line)} characters")
        return self.line_starts[line] + column

    def clamp(self, line: int, column: int) -> Position:
        """Nearest valid position to a possibly out-of-range coordinate."""
        line = min(max(line, 0), self.line_count - 1)
        column = min(max(column, 0), self.line_length(line))
        return Position(line=line, column=column)
