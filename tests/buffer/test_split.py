"""Tests for split()."""

import pytest

from strbuf import Buffer, Status
from strbuf.exceptions import ValidationError
from tests.fixtures import assert_invariants, buffer_of


def _values(pieces):
    return [piece.value for piece in pieces]


class TestSplit:
    """Splitting on a separator."""

    def test_limit_two(self):
        """max_pieces=2 keeps the rest, separators included, in the last piece."""
        pieces = buffer_of(b"a,b,c,d").split(",", 2)
        assert _values(pieces) == [b"a", b"b,c,d"]

    def test_limit_above_count(self):
        """A generous limit splits on every separator."""
        pieces = buffer_of(b"a,b,c,d").split(",", 10)
        assert _values(pieces) == [b"a", b"b", b"c", b"d"]

    def test_no_limit(self):
        """max_pieces=None splits on every separator."""
        assert _values(buffer_of(b"a,b,c,d").split(",")) == [b"a", b"b", b"c", b"d"]

    def test_exact_limit(self):
        """max_pieces equal to the piece count splits everything."""
        assert _values(buffer_of(b"a,b,c").split(",", 3)) == [b"a", b"b", b"c"]

    def test_limit_one(self):
        """max_pieces=1 returns the whole content."""
        assert _values(buffer_of(b"a,b,c").split(",", 1)) == [b"a,b,c"]

    def test_empty_buffer(self):
        """An empty buffer yields zero pieces."""
        buf = Buffer()
        assert buf.split(",", 10) == []
        assert buf.last_status == Status.OK

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, limit):
        """max_pieces <= 0 yields zero pieces."""
        assert buffer_of(b"a,b").split(",", limit) == []

    def test_no_separator(self):
        """Without a match the whole content is the only piece."""
        assert _values(buffer_of(b"abc").split(",", 5)) == [b"abc"]

    def test_trailing_separator(self):
        """A trailing separator produces an empty last piece."""
        assert _values(buffer_of(b"a,b,").split(",", 10)) == [b"a", b"b", b""]

    def test_leading_separator(self):
        """A leading separator produces an empty first piece."""
        assert _values(buffer_of(b",a").split(",", 10)) == [b"", b"a"]

    def test_adjacent_separators(self):
        """Adjacent separators produce empty pieces between them."""
        assert _values(buffer_of(b"a,,b").split(",", 10)) == [b"a", b"", b"b"]

    def test_only_separator(self):
        """A buffer made of a separator splits into two empty pieces."""
        assert _values(buffer_of(b",").split(",", 10)) == [b"", b""]

    def test_multibyte_separator(self):
        """Separators longer than one byte are matched whole."""
        pieces = buffer_of(b"a::b:c::d").split(b"::", 10)
        assert _values(pieces) == [b"a", b"b:c", b"d"]

    def test_separator_spanning_capacity_end(self):
        """Content beyond length is not considered."""
        buf = buffer_of(b"a,b,c")
        buf.set_length(3)
        assert _values(buf.split(",", 10)) == [b"a", b"b"]

    def test_pieces_are_exact_fit(self):
        """Every piece has capacity length + 1."""
        for piece in buffer_of(b"one,three,").split(",", 10):
            assert piece.capacity == piece.length + 1
            assert_invariants(piece)

    def test_pieces_are_independent(self):
        """Mutating a piece never changes the source."""
        src = buffer_of(b"x,y")
        first, second = src.split(",", 2)
        first.append_bytes(b"!!")
        second.to_uppercase()
        assert src.value == b"x,y"
        assert first.value == b"x!!"
        assert second.value == b"Y"

    def test_pieces_use_source_allocator(self, tracking_allocator):
        """Pieces are allocated by the source's allocator."""
        src = Buffer.from_bytes(b"a b c", allocator=tracking_allocator)
        pieces = src.split(" ", 10)
        assert all(piece.allocator is tracking_allocator for piece in pieces)
        assert tracking_allocator.allocations == 4
        for piece in pieces:
            piece.finalize()
        src.finalize()
        assert tracking_allocator.balance == 0

    def test_empty_separator_rejected(self):
        """An empty separator raises ValidationError."""
        with pytest.raises(ValidationError):
            buffer_of(b"abc").split(b"", 3)

    def test_allocation_failure_releases_pieces(self, limited_allocator):
        """A failed piece allocation returns [] and releases earlier pieces."""
        budget = limited_allocator(10)
        src = Buffer.from_bytes(b"a,b,c", allocator=budget)
        assert budget.used == 6

        assert src.split(",", 10) == []
        assert src.last_status == Status.ALLOCATION_FAILURE
        assert budget.used == 6
        assert src.value == b"a,b,c"

    def test_success_resets_status(self):
        """A successful split records OK."""
        buf = buffer_of(b"a,b")
        buf.repeat(-1)
        buf.split(",", 2)
        assert buf.last_status == Status.OK
