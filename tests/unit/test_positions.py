"""
Unit tests for the position index.

These tests cover:
- Offset to line/column conversion
- Line/column to offset conversion
- Out-of-range and invalid coordinates
- Clamping helpers
"""

import pytest

from kousei.core.errors import InvalidPosition, OutOfRange
from kousei.core.models import Position
from kousei.core.positions import PositionIndex


class TestPositionIndex:
    """Test the PositionIndex class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.index = PositionIndex("ab\ncd\n")

    def test_line_starts(self):
        """Test that every line start is recorded."""
        assert self.index.line_starts == [0, 3, 6]
        assert self.index.line_count == 3
        assert self.index.length == 6

    def test_offset_to_position(self):
        """Test offset lookups across lines."""
        assert self.index.offset_to_position(0) == Position(0, 0)
        assert self.index.offset_to_position(2) == Position(0, 2)
        assert self.index.offset_to_position(3) == Position(1, 0)
        assert self.index.offset_to_position(5) == Position(1, 2)
        assert self.index.offset_to_position(6) == Position(2, 0)

    def test_offset_to_position_out_of_range(self):
        """Test that offsets outside [0, length] raise OutOfRange."""
        with pytest.raises(OutOfRange):
            self.index.offset_to_position(-1)
        with pytest.raises(OutOfRange):
            self.index.offset_to_position(7)

    def test_position_to_offset(self):
        """Test position lookups, including end-of-line columns."""
        assert self.index.position_to_offset(Position(0, 0)) == 0
        assert self.index.position_to_offset(Position(0, 2)) == 2
        assert self.index.position_to_offset(Position(1, 2)) == 5
        assert self.index.position_to_offset(Position(2, 0)) == 6

    @pytest.mark.parametrize("line,column", [
        (3, 0),
        (-1, 0),
        (0, 3),
        (0, -1),
        (2, 1),
    ])
    def test_position_to_offset_invalid(self, line, column):
        """Test that positions outside the document raise InvalidPosition."""
        with pytest.raises(InvalidPosition):
            self.index.position_to_offset(Position(line, column))

    def test_empty_document(self):
        """Test the index of an empty document."""
        index = PositionIndex("")

        assert index.line_count == 1
        assert index.offset_to_position(0) == Position(0, 0)
        assert index.position_to_offset(Position(0, 0)) == 0
        with pytest.raises(OutOfRange):
            index.offset_to_position(1)

    def test_document_without_trailing_newline(self):
        """Test that the last line runs to the end of the document."""
        index = PositionIndex("one\ntwo")

        assert index.line_length(1) == 3
        assert index.line_text(1) == "two"
        assert index.offset_to_position(7) == Position(1, 3)

    def test_carriage_return_counts_as_column(self):
        """Test that \\r is an ordinary character."""
        index = PositionIndex("a\r\nb")

        assert index.line_length(0) == 2
        assert index.offset_to_position(3) == Position(1, 0)

    def test_round_trip(self):
        """Test offset -> position -> offset for every offset."""
        text = "first line\n\nthird\n last"
        index = PositionIndex(text)

        for offset in range(len(text) + 1):
            assert index.position_to_offset(index.offset_to_position(offset)) == offset

    def test_clamp(self):
        """Test clamping to the nearest valid position."""
        assert self.index.clamp(10, 10) == Position(2, 0)
        assert self.index.clamp(0, 99) == Position(0, 2)
        assert self.index.clamp(-4, -4) == Position(0, 0)
